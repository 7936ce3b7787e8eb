"""Content request construction."""

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError

from partygen.content.kinds import ContentKind, KindSpec, get_kind_spec
from partygen.content.schemas import PartySettings, RequestParameters
from partygen.pipeline.exceptions import InvalidRequestError


@dataclass(frozen=True)
class ContentRequest:
    """Immutable description of the content one round needs."""

    kind: ContentKind
    parameters: RequestParameters
    settings: PartySettings

    @classmethod
    def build(
        cls,
        kind: ContentKind | str,
        parameters: RequestParameters | Mapping[str, Any] | None = None,
        settings: PartySettings | Mapping[str, Any] | None = None,
    ) -> "ContentRequest":
        """Validate raw inputs into a request.

        Args:
            kind: Content kind or its string value.
            parameters: Kind parameters as a model or mapping.
            settings: Party settings as a model or mapping.

        Raises:
            InvalidRequestError: If the kind is unknown or any parameter
                or setting is invalid.
        """
        try:
            spec = get_kind_spec(kind)
        except ValueError as e:
            raise InvalidRequestError(f"Unknown content kind: {kind!r}") from e

        try:
            if isinstance(parameters, spec.parameters_model):
                params = parameters
            elif isinstance(parameters, RequestParameters):
                params = spec.parameters_model.model_validate(parameters.model_dump())
            else:
                params = spec.parameters_model.model_validate(dict(parameters or {}))
        except ValidationError as e:
            raise InvalidRequestError(
                f"Invalid parameters for {spec.kind.value}: {e}"
            ) from e

        try:
            if isinstance(settings, PartySettings):
                party = settings
            else:
                party = PartySettings.model_validate(dict(settings or {}))
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid party settings: {e}") from e

        return cls(kind=spec.kind, parameters=params, settings=party)

    @property
    def spec(self) -> KindSpec:
        return get_kind_spec(self.kind)

    @property
    def varies_per_round(self) -> bool:
        return self.spec.varies_per_round
