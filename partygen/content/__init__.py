"""Party content: kinds, schemas, prompts, validation and curated fallbacks."""

from partygen.content.fallback import FallbackProvider
from partygen.content.kinds import KIND_SPECS, ContentKind, KindSpec, get_kind_spec
from partygen.content.prompts import PromptSpec, build_prompt
from partygen.content.schemas import PartySettings, RequestParameters
from partygen.content.validation import (
    IssueSeverity,
    ValidationGate,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "ContentKind",
    "FallbackProvider",
    "IssueSeverity",
    "KIND_SPECS",
    "KindSpec",
    "PartySettings",
    "PromptSpec",
    "RequestParameters",
    "ValidationGate",
    "ValidationIssue",
    "ValidationResult",
    "build_prompt",
    "get_kind_spec",
]
