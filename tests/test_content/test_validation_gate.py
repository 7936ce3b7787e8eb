"""Tests for the per-kind validation gate."""

import pytest

from partygen.content.kinds import ContentKind
from partygen.content.schemas import (
    PlayerCountParameters,
    TriviaParameters,
    WhoAmIParameters,
)
from partygen.content.validation import (
    IssueSeverity,
    ValidationGate,
    ValidationIssue,
    ValidationResult,
)
from tests.factories import (
    forbidden_payload,
    impostor_payload,
    murder_mystery_payload,
    secret_code_payload,
    trivia_payload,
)


@pytest.fixture
def gate() -> ValidationGate:
    return ValidationGate()


class TestValidationResult:
    """Tests for ValidationResult helpers."""

    def test_errors_filters_warnings(self):
        result = ValidationResult(
            valid=True,
            issues=[
                ValidationIssue("content", "minor", severity=IssueSeverity.WARNING),
                ValidationIssue("schema", "broken"),
            ],
        )
        assert [i.message for i in result.errors] == ["broken"]

    def test_format_issues(self):
        result = ValidationResult(
            valid=False,
            issues=[ValidationIssue("cardinality", "Too few", location="roles")],
        )
        assert result.format_issues() == "[ERROR] [cardinality] Too few at: roles"

    def test_format_no_issues(self):
        assert ValidationResult(valid=True).format_issues() == "No issues found."


class TestStructuralChecks:
    """Tests for schema-level rejection."""

    @pytest.mark.parametrize("raw", [None, "text", 42, ["a", "b"]])
    def test_non_object_rejected(self, gate, raw):
        result = gate.inspect(ContentKind.DEBATE, raw)
        assert not result.valid
        assert result.issues[0].category == "schema"
        assert result.payload is None

    def test_missing_field_reports_location(self, gate):
        result = gate.inspect(ContentKind.DEBATE, {"topic": "Cats", "side_a": "Yes"})
        assert not result.valid
        assert result.issues[0].location == "side_b"

    def test_wrong_enum_value(self, gate):
        raw = {"phrase": "Jaws", "category": "Movies", "hint": "Shark", "difficulty": "Trivial"}
        assert not gate.validate(ContentKind.CHARADES, raw)

    def test_unknown_kind(self, gate):
        with pytest.raises(ValueError):
            gate.inspect("karaoke", {})


class TestTrivia:
    """Tests for trivia rules."""

    def test_valid_set_is_trimmed_to_count(self, gate):
        result = gate.inspect(ContentKind.TRIVIA, trivia_payload(8), TriviaParameters(topic="x", count=5))
        assert result.valid
        assert len(result.payload.questions) == 5
        assert [i.severity for i in result.issues] == [IssueSeverity.WARNING]
        assert result.issues[0].message == "Dropped 3 extra questions"
        assert result.errors == []

    def test_exact_count_has_no_issues(self, gate):
        result = gate.inspect(ContentKind.TRIVIA, trivia_payload(5), TriviaParameters(topic="x", count=5))
        assert result.issues == []

    def test_too_few_questions(self, gate):
        result = gate.inspect(ContentKind.TRIVIA, trivia_payload(3), TriviaParameters(topic="x", count=5))
        assert not result.valid
        assert result.issues[0].category == "cardinality"

    def test_three_options_rejected(self, gate):
        raw = trivia_payload(1)
        raw["questions"][0]["options"] = ["a", "b", "c"]
        assert not gate.validate(ContentKind.TRIVIA, raw)

    def test_answer_index_out_of_range(self, gate):
        raw = trivia_payload(1)
        raw["questions"][0]["answer_index"] = 4
        result = gate.inspect(ContentKind.TRIVIA, raw)
        assert not result.valid
        assert result.issues[0].location == "questions.0"

    def test_duplicate_options(self, gate):
        raw = trivia_payload(1)
        raw["questions"][0]["options"] = ["Mars", "mars", "Venus", "Earth"]
        assert not gate.validate(ContentKind.TRIVIA, raw)

    def test_blank_question(self, gate):
        raw = trivia_payload(1)
        raw["questions"][0]["question"] = "   "
        assert not gate.validate(ContentKind.TRIVIA, raw)


class TestForbiddenWords:
    """Tests for forbidden words rules."""

    def test_valid_card(self, gate):
        assert gate.validate(ContentKind.FORBIDDEN_WORDS, forbidden_payload())

    def test_missing_forbidden_array(self, gate):
        raw = forbidden_payload()
        del raw["forbidden"]
        assert not gate.validate(ContentKind.FORBIDDEN_WORDS, raw)

    def test_wrong_count(self, gate):
        raw = forbidden_payload()
        raw["forbidden"] = raw["forbidden"][:3]
        assert not gate.validate(ContentKind.FORBIDDEN_WORDS, raw)

    def test_forbidden_word_contains_target(self, gate):
        raw = forbidden_payload()
        raw["forbidden"][0] = "Pepperoni Pizza"
        result = gate.inspect(ContentKind.FORBIDDEN_WORDS, raw)
        assert not result.valid
        assert result.issues[0].category == "gameplay"

    def test_target_match_ignores_case(self, gate):
        raw = forbidden_payload()
        raw["forbidden"][0] = "PIZZA"
        assert not gate.validate(ContentKind.FORBIDDEN_WORDS, raw)


class TestPartyRoles:
    """Tests for impostor and murder mystery rules."""

    @pytest.mark.parametrize("players", [3, 6, 10])
    def test_impostor_role_count_matches_players(self, gate, players):
        params = PlayerCountParameters(player_count=players)
        assert gate.validate(ContentKind.IMPOSTOR, impostor_payload(players), params)

    def test_impostor_role_count_mismatch(self, gate):
        params = PlayerCountParameters(player_count=5)
        assert not gate.validate(ContentKind.IMPOSTOR, impostor_payload(4), params)

    def test_impostor_duplicate_roles(self, gate):
        raw = {"location": "Bank", "roles": ["Teller", "teller", "Guard"]}
        assert not gate.validate(ContentKind.IMPOSTOR, raw, PlayerCountParameters(player_count=4))

    def test_murder_mystery_valid(self, gate):
        params = PlayerCountParameters(player_count=4)
        assert gate.validate(ContentKind.MURDER_MYSTERY, murder_mystery_payload(4), params)

    def test_murder_mystery_two_killers(self, gate):
        raw = murder_mystery_payload(4)
        raw["characters"][2]["role"] = "Killer"
        result = gate.inspect(ContentKind.MURDER_MYSTERY, raw, PlayerCountParameters(player_count=4))
        assert not result.valid
        assert any("Killer" in i.message for i in result.issues)

    def test_murder_mystery_no_detective(self, gate):
        raw = murder_mystery_payload(4)
        raw["characters"][1]["role"] = "Suspect"
        assert not gate.validate(ContentKind.MURDER_MYSTERY, raw, PlayerCountParameters(player_count=4))

    def test_murder_mystery_character_count(self, gate):
        params = PlayerCountParameters(player_count=5)
        assert not gate.validate(ContentKind.MURDER_MYSTERY, murder_mystery_payload(4), params)

    def test_murder_mystery_duplicate_names(self, gate):
        raw = murder_mystery_payload(4)
        raw["characters"][3]["name"] = raw["characters"][2]["name"]
        assert not gate.validate(ContentKind.MURDER_MYSTERY, raw, PlayerCountParameters(player_count=4))


class TestRoundPrompts:
    """Tests for single-prompt kinds."""

    def test_charade_hint_gives_away_phrase(self, gate):
        raw = {"phrase": "Jaws", "category": "Movies", "hint": "Jaws the shark", "difficulty": "Easy"}
        assert not gate.validate(ContentKind.CHARADES, raw)

    def test_debate_identical_sides(self, gate):
        raw = {"topic": "Tea or coffee", "side_a": "Tea", "side_b": "tea"}
        assert not gate.validate(ContentKind.DEBATE, raw)

    def test_category_rush_letter_must_be_single(self, gate):
        raw = {"letter": "AB", "categories": ["a", "b", "c", "d", "e", "f"]}
        assert not gate.validate(ContentKind.CATEGORY_RUSH, raw)

    def test_category_rush_valid(self, gate):
        raw = {"letter": "q", "categories": ["Fruits", "Cities", "Bands", "Names", "Animals", "Jobs"]}
        assert gate.validate(ContentKind.CATEGORY_RUSH, raw)

    def test_category_rush_needs_six_categories(self, gate):
        raw = {"letter": "Q", "categories": ["Fruits", "Cities"]}
        assert not gate.validate(ContentKind.CATEGORY_RUSH, raw)

    def test_two_truths_lie_index_range(self, gate):
        raw = {"statement1": "a", "statement2": "b", "statement3": "c", "lie_index": 3}
        assert not gate.validate(ContentKind.TWO_TRUTHS, raw)

    def test_would_you_rather_same_options(self, gate):
        assert not gate.validate(ContentKind.WOULD_YOU_RATHER, {"option_a": "Fly", "option_b": "Fly"})

    def test_never_have_i_ever_blank(self, gate):
        assert not gate.validate(ContentKind.NEVER_HAVE_I_EVER, {"statement": " "})

    def test_pictionary_valid(self, gate):
        raw = {"word": "Rainbow", "category": "Nature", "difficulty": "Easy"}
        assert gate.validate(ContentKind.PICTIONARY, raw)


class TestDecks:
    """Tests for who am I and secret code boards."""

    def test_who_am_i_trimmed_to_count(self, gate):
        raw = {"words": [{"word": f"Star {i}", "hint": "Famous"} for i in range(12)]}
        result = gate.inspect(ContentKind.WHO_AM_I, raw, WhoAmIParameters(count=10))
        assert result.valid
        assert len(result.payload.words) == 10

    def test_who_am_i_duplicates(self, gate):
        raw = {"words": [{"word": "Elvis", "hint": "King"}, {"word": "elvis", "hint": "Rock"}]}
        assert not gate.validate(ContentKind.WHO_AM_I, raw, WhoAmIParameters(count=2))

    def test_secret_code_valid_board_is_trimmed(self, gate):
        result = gate.inspect(ContentKind.SECRET_CODE, secret_code_payload(30))
        assert result.valid
        assert len(result.payload.words) == 25
        assert result.issues[0].severity == IssueSeverity.WARNING
        assert result.format_issues() == "[WARN] [cardinality] Dropped 5 extra words at: words"

    def test_secret_code_too_few_words(self, gate):
        assert not gate.validate(ContentKind.SECRET_CODE, secret_code_payload(24))

    def test_secret_code_multi_word_entry(self, gate):
        raw = secret_code_payload(25)
        raw["words"][0] = "Ice Cream"
        assert not gate.validate(ContentKind.SECRET_CODE, raw)

    def test_secret_code_duplicates(self, gate):
        raw = secret_code_payload(25)
        raw["words"][1] = raw["words"][0]
        assert not gate.validate(ContentKind.SECRET_CODE, raw)
