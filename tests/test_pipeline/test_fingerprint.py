"""Tests for fingerprint construction."""

from itertools import count

from partygen.pipeline.fingerprint import FingerprintBuilder
from partygen.pipeline.request import ContentRequest


def _request(kind="trivia", parameters=None, settings=None):
    if parameters is None and kind == "trivia":
        parameters = {"topic": "space", "count": 5}
    return ContentRequest.build(kind, parameters, settings)


class TestStableFingerprint:
    """Tests for deterministic keys."""

    def test_identical_requests_collide(self):
        builder = FingerprintBuilder()
        assert builder.stable(_request()) == builder.stable(_request())

    def test_builders_agree(self):
        """Keys do not depend on builder instance state."""
        assert FingerprintBuilder().stable(_request()) == FingerprintBuilder().stable(_request())

    def test_format(self):
        key = FingerprintBuilder().stable(_request())
        namespace, version, kind, digest = key.split(":")
        assert (namespace, version, kind) == ("partygen", "v1", "trivia")
        assert len(digest) == 32

    def test_parameter_order_is_irrelevant(self):
        builder = FingerprintBuilder()
        a = _request(parameters={"topic": "space", "count": 5})
        b = _request(parameters={"count": 5, "topic": "space"})
        assert builder.stable(a) == builder.stable(b)

    def test_whitespace_in_topic_is_normalised(self):
        builder = FingerprintBuilder()
        a = _request(parameters={"topic": "space", "count": 5})
        b = _request(parameters={"topic": "  space ", "count": 5})
        assert builder.stable(a) == builder.stable(b)

    def test_defaults_match_explicit_values(self):
        builder = FingerprintBuilder()
        a = _request(parameters={"topic": "space"})
        b = _request(parameters={"topic": "space", "count": 5}, settings={"language": "en"})
        assert builder.stable(a) == builder.stable(b)

    def test_every_output_shaping_field_changes_key(self):
        builder = FingerprintBuilder()
        base = builder.stable(_request())
        variants = [
            _request(parameters={"topic": "history", "count": 5}),
            _request(parameters={"topic": "space", "count": 6}),
            _request(settings={"language": "zh"}),
            _request(settings={"theme": "horror"}),
            _request(settings={"intensity": "spicy"}),
        ]
        keys = {builder.stable(r) for r in variants}
        assert base not in keys
        assert len(keys) == len(variants)

    def test_kind_changes_key(self):
        builder = FingerprintBuilder()
        assert builder.stable(_request("debate")) != builder.stable(_request("pictionary"))


class TestPerRoundKeys:
    """Tests for the per-round uniqueness token."""

    def test_cached_kind_key_is_stable(self):
        builder = FingerprintBuilder()
        request = _request()
        assert builder.key(request) == builder.stable(request)

    def test_per_round_kind_keys_never_repeat(self):
        builder = FingerprintBuilder(token_source=lambda: 42)
        request = _request("charades")

        first, second = builder.key(request), builder.key(request)

        assert first != second
        assert first.startswith(builder.stable(request) + ":")

    def test_token_source_is_used(self):
        tokens = count(1000)
        builder = FingerprintBuilder(token_source=lambda: next(tokens))

        key = builder.key(_request("debate"))

        assert key.endswith(":1000-0")
