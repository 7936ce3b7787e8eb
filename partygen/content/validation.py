"""Validation gate for generated content.

A raw payload from the generation backend is parsed against the kind's
output model, then checked against kind-specific rules that structural
typing cannot express: cardinality, cross-field constraints and content
that would break gameplay. A payload is accepted or rejected as a whole.

Accepted payloads are normalised (lists trimmed to the requested size) so
the item that is cached is exactly the item that is returned.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from partygen.content.kinds import ContentKind, get_kind_spec
from partygen.content.schemas import (
    CategoryRushRound,
    CharadePrompt,
    DebatePrompt,
    ForbiddenWordsCard,
    ImpostorScenario,
    MurderMysteryScenario,
    NeverHaveIEverPrompt,
    PictionaryPrompt,
    PlayerCountParameters,
    RequestParameters,
    SecretCodeBoard,
    TriviaParameters,
    TriviaSet,
    TwoTruthsPrompt,
    WhoAmIDeck,
    WhoAmIParameters,
    WouldYouRatherPrompt,
)

logger = logging.getLogger(__name__)

TRIVIA_OPTION_COUNT = 4
FORBIDDEN_WORD_COUNT = 4
CATEGORY_RUSH_CATEGORY_COUNT = 6
SECRET_CODE_BOARD_SIZE = 25
MIN_PLAYERS = 3


class IssueSeverity(str, Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Payload is rejected
    WARNING = "warning"  # Payload is usable


@dataclass
class ValidationIssue:
    """A single problem found in a payload."""

    category: str  # e.g., "schema", "cardinality", "gameplay"
    message: str
    severity: IssueSeverity = IssueSeverity.ERROR
    location: str | None = None


@dataclass
class ValidationResult:
    """Outcome of validating one payload.

    ``payload`` holds the parsed and normalised model when the payload
    was accepted, otherwise None.
    """

    valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)
    payload: BaseModel | None = None

    @property
    def errors(self) -> list[ValidationIssue]:
        """Get only error-severity issues."""
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    def format_issues(self) -> str:
        """Format issues for display or logging."""
        if not self.issues:
            return "No issues found."

        lines = []
        for issue in self.issues:
            prefix = "[ERROR]" if issue.severity == IssueSeverity.ERROR else "[WARN]"
            line = f"{prefix} [{issue.category}] {issue.message}"
            if issue.location:
                line += f" at: {issue.location}"
            lines.append(line)
        return "\n".join(lines)


def _blank(value: str) -> bool:
    return not value or not value.strip()


def _norm(value: str) -> str:
    return value.strip().casefold()


def _trimmed(extra: int, what: str, location: str) -> ValidationIssue:
    return ValidationIssue(
        "cardinality",
        f"Dropped {extra} extra {what}",
        severity=IssueSeverity.WARNING,
        location=location,
    )


class ValidationGate:
    """Per-kind acceptance predicate for raw payloads."""

    def inspect(
        self,
        kind: ContentKind,
        raw: Any,
        parameters: RequestParameters | None = None,
    ) -> ValidationResult:
        """Validate a raw payload and report every issue found.

        Args:
            kind: Content kind the payload claims to be.
            raw: Decoded payload from the backend (usually a dict).
            parameters: Request parameters, used for cardinality checks.
                When omitted only parameter-independent rules apply.

        Returns:
            ValidationResult carrying the normalised model when valid.
        """
        spec = get_kind_spec(kind)

        if not isinstance(raw, dict):
            return ValidationResult(
                valid=False,
                issues=[
                    ValidationIssue(
                        "schema", f"Expected a JSON object, got {type(raw).__name__}"
                    )
                ],
            )

        try:
            model = spec.output_model.model_validate(raw)
        except ValidationError as e:
            issues = [
                ValidationIssue(
                    "schema",
                    err["msg"],
                    location=".".join(str(p) for p in err["loc"]) or None,
                )
                for err in e.errors()
            ]
            return ValidationResult(valid=False, issues=issues)

        issues, normalised = self._check(spec.kind, model, parameters)
        valid = not any(i.severity == IssueSeverity.ERROR for i in issues)
        return ValidationResult(
            valid=valid,
            issues=issues,
            payload=normalised if valid else None,
        )

    def validate(
        self,
        kind: ContentKind,
        raw: Any,
        parameters: RequestParameters | None = None,
    ) -> bool:
        """Return True if the payload is acceptable for the kind."""
        return self.inspect(kind, raw, parameters).valid

    def _check(
        self,
        kind: ContentKind,
        model: BaseModel,
        parameters: RequestParameters | None,
    ) -> tuple[list[ValidationIssue], BaseModel]:
        """Dispatch to the kind-specific rules."""
        match kind:
            case ContentKind.TRIVIA:
                return self._check_trivia(model, parameters)
            case ContentKind.CHARADES:
                return self._check_charades(model), model
            case ContentKind.FORBIDDEN_WORDS:
                return self._check_forbidden_words(model), model
            case ContentKind.DEBATE:
                return self._check_debate(model), model
            case ContentKind.IMPOSTOR:
                return self._check_impostor(model, parameters), model
            case ContentKind.MURDER_MYSTERY:
                return self._check_murder_mystery(model, parameters), model
            case ContentKind.PICTIONARY:
                return self._check_pictionary(model), model
            case ContentKind.CATEGORY_RUSH:
                return self._check_category_rush(model), model
            case ContentKind.WHO_AM_I:
                return self._check_who_am_i(model, parameters)
            case ContentKind.SECRET_CODE:
                return self._check_secret_code(model)
            case ContentKind.WOULD_YOU_RATHER:
                return self._check_would_you_rather(model), model
            case ContentKind.TWO_TRUTHS:
                return self._check_two_truths(model), model
            case ContentKind.NEVER_HAVE_I_EVER:
                return self._check_never_have_i_ever(model), model
            case _:
                raise ValueError(f"Unknown content kind: {kind}")

    # =========================================================================
    # Kind-specific rules
    # =========================================================================

    def _check_trivia(
        self, model: TriviaSet, parameters: RequestParameters | None
    ) -> tuple[list[ValidationIssue], BaseModel]:
        issues: list[ValidationIssue] = []
        wanted = parameters.count if isinstance(parameters, TriviaParameters) else 1

        if len(model.questions) < wanted:
            issues.append(
                ValidationIssue(
                    "cardinality",
                    f"Expected at least {wanted} questions, got {len(model.questions)}",
                )
            )
            return issues, model

        questions = model.questions[:wanted]
        if len(model.questions) > wanted:
            issues.append(_trimmed(len(model.questions) - wanted, "questions", "questions"))
        for i, q in enumerate(questions):
            loc = f"questions.{i}"
            if _blank(q.question) or _blank(q.explanation) or _blank(q.difficulty):
                issues.append(ValidationIssue("content", "Empty text field", location=loc))
            if len(q.options) != TRIVIA_OPTION_COUNT:
                issues.append(
                    ValidationIssue(
                        "cardinality",
                        f"Expected {TRIVIA_OPTION_COUNT} options, got {len(q.options)}",
                        location=loc,
                    )
                )
            elif any(_blank(o) for o in q.options):
                issues.append(ValidationIssue("content", "Empty option", location=loc))
            elif len({_norm(o) for o in q.options}) != len(q.options):
                issues.append(ValidationIssue("content", "Duplicate options", location=loc))
            if not 0 <= q.answer_index < TRIVIA_OPTION_COUNT:
                issues.append(
                    ValidationIssue(
                        "consistency",
                        f"answer_index {q.answer_index} out of range",
                        location=loc,
                    )
                )

        return issues, model.model_copy(update={"questions": questions})

    def _check_charades(self, model: CharadePrompt) -> list[ValidationIssue]:
        issues = []
        if _blank(model.phrase) or _blank(model.category) or _blank(model.hint):
            issues.append(ValidationIssue("content", "Empty text field"))
        elif _norm(model.phrase) in _norm(model.hint):
            issues.append(ValidationIssue("gameplay", "Hint gives away the phrase", location="hint"))
        return issues

    def _check_forbidden_words(self, model: ForbiddenWordsCard) -> list[ValidationIssue]:
        issues = []
        if _blank(model.target):
            issues.append(ValidationIssue("content", "Empty target", location="target"))
            return issues

        if len(model.forbidden) != FORBIDDEN_WORD_COUNT:
            issues.append(
                ValidationIssue(
                    "cardinality",
                    f"Expected {FORBIDDEN_WORD_COUNT} forbidden words, got {len(model.forbidden)}",
                    location="forbidden",
                )
            )
        if any(_blank(w) for w in model.forbidden):
            issues.append(ValidationIssue("content", "Empty forbidden word", location="forbidden"))
            return issues
        if len({_norm(w) for w in model.forbidden}) != len(model.forbidden):
            issues.append(ValidationIssue("content", "Duplicate forbidden words", location="forbidden"))

        target = _norm(model.target)
        for word in model.forbidden:
            w = _norm(word)
            if target in w or w in target:
                issues.append(
                    ValidationIssue(
                        "gameplay",
                        f"Forbidden word '{word}' overlaps the target '{model.target}'",
                        location="forbidden",
                    )
                )
        return issues

    def _check_debate(self, model: DebatePrompt) -> list[ValidationIssue]:
        if _blank(model.topic) or _blank(model.side_a) or _blank(model.side_b):
            return [ValidationIssue("content", "Empty text field")]
        if _norm(model.side_a) == _norm(model.side_b):
            return [ValidationIssue("consistency", "Both sides are the same")]
        return []

    def _check_impostor(
        self, model: ImpostorScenario, parameters: RequestParameters | None
    ) -> list[ValidationIssue]:
        issues = []
        if _blank(model.location):
            issues.append(ValidationIssue("content", "Empty location", location="location"))

        if isinstance(parameters, PlayerCountParameters):
            wanted = parameters.player_count - 1
            if len(model.roles) != wanted:
                issues.append(
                    ValidationIssue(
                        "cardinality",
                        f"Expected {wanted} roles, got {len(model.roles)}",
                        location="roles",
                    )
                )
        elif len(model.roles) < MIN_PLAYERS - 1:
            issues.append(ValidationIssue("cardinality", "Too few roles", location="roles"))

        if any(_blank(r) for r in model.roles):
            issues.append(ValidationIssue("content", "Empty role", location="roles"))
        elif len({_norm(r) for r in model.roles}) != len(model.roles):
            issues.append(ValidationIssue("content", "Duplicate roles", location="roles"))
        return issues

    def _check_murder_mystery(
        self, model: MurderMysteryScenario, parameters: RequestParameters | None
    ) -> list[ValidationIssue]:
        issues = []
        if _blank(model.title) or _blank(model.intro):
            issues.append(ValidationIssue("content", "Empty title or intro"))

        characters = model.characters
        if isinstance(parameters, PlayerCountParameters):
            if len(characters) != parameters.player_count:
                issues.append(
                    ValidationIssue(
                        "cardinality",
                        f"Expected {parameters.player_count} characters, got {len(characters)}",
                        location="characters",
                    )
                )
        elif len(characters) < MIN_PLAYERS:
            issues.append(ValidationIssue("cardinality", "Too few characters", location="characters"))

        for role in ("Killer", "Detective"):
            found = sum(1 for c in characters if c.role == role)
            if found != 1:
                issues.append(
                    ValidationIssue(
                        "consistency",
                        f"Expected exactly one {role}, got {found}",
                        location="characters",
                    )
                )

        if len({_norm(c.name) for c in characters}) != len(characters):
            issues.append(ValidationIssue("content", "Duplicate character names", location="characters"))
        for i, c in enumerate(characters):
            if _blank(c.name) or _blank(c.public_bio) or _blank(c.secret_info):
                issues.append(
                    ValidationIssue("content", "Empty character field", location=f"characters.{i}")
                )
        return issues

    def _check_pictionary(self, model: PictionaryPrompt) -> list[ValidationIssue]:
        if _blank(model.word) or _blank(model.category):
            return [ValidationIssue("content", "Empty text field")]
        return []

    def _check_category_rush(self, model: CategoryRushRound) -> list[ValidationIssue]:
        issues = []
        letter = model.letter.strip()
        if len(letter) != 1 or not ("A" <= letter.upper() <= "Z"):
            issues.append(
                ValidationIssue("content", f"Letter must be A-Z, got '{model.letter}'", location="letter")
            )
        if len(model.categories) != CATEGORY_RUSH_CATEGORY_COUNT:
            issues.append(
                ValidationIssue(
                    "cardinality",
                    f"Expected {CATEGORY_RUSH_CATEGORY_COUNT} categories, got {len(model.categories)}",
                    location="categories",
                )
            )
        if any(_blank(c) for c in model.categories):
            issues.append(ValidationIssue("content", "Empty category", location="categories"))
        elif len({_norm(c) for c in model.categories}) != len(model.categories):
            issues.append(ValidationIssue("content", "Duplicate categories", location="categories"))
        return issues

    def _check_who_am_i(
        self, model: WhoAmIDeck, parameters: RequestParameters | None
    ) -> tuple[list[ValidationIssue], BaseModel]:
        issues: list[ValidationIssue] = []
        wanted = parameters.count if isinstance(parameters, WhoAmIParameters) else 1

        if len(model.words) < wanted:
            issues.append(
                ValidationIssue(
                    "cardinality",
                    f"Expected at least {wanted} words, got {len(model.words)}",
                    location="words",
                )
            )
            return issues, model

        words = model.words[:wanted]
        if len(model.words) > wanted:
            issues.append(_trimmed(len(model.words) - wanted, "words", "words"))
        if any(_blank(w.word) or _blank(w.hint) for w in words):
            issues.append(ValidationIssue("content", "Empty word or hint", location="words"))
        if len({_norm(w.word) for w in words}) != len(words):
            issues.append(ValidationIssue("content", "Duplicate words", location="words"))
        return issues, model.model_copy(update={"words": words})

    def _check_secret_code(
        self, model: SecretCodeBoard
    ) -> tuple[list[ValidationIssue], BaseModel]:
        issues: list[ValidationIssue] = []
        if len(model.words) < SECRET_CODE_BOARD_SIZE:
            issues.append(
                ValidationIssue(
                    "cardinality",
                    f"Expected at least {SECRET_CODE_BOARD_SIZE} words, got {len(model.words)}",
                    location="words",
                )
            )
            return issues, model

        words = model.words[:SECRET_CODE_BOARD_SIZE]
        if len(model.words) > SECRET_CODE_BOARD_SIZE:
            issues.append(
                _trimmed(len(model.words) - SECRET_CODE_BOARD_SIZE, "words", "words")
            )
        if any(_blank(w) or len(w.split()) != 1 for w in words):
            issues.append(ValidationIssue("content", "Board words must be single words", location="words"))
        if len({_norm(w) for w in words}) != len(words):
            issues.append(ValidationIssue("content", "Duplicate board words", location="words"))
        return issues, model.model_copy(update={"words": words})

    def _check_would_you_rather(self, model: WouldYouRatherPrompt) -> list[ValidationIssue]:
        if _blank(model.option_a) or _blank(model.option_b):
            return [ValidationIssue("content", "Empty option")]
        if _norm(model.option_a) == _norm(model.option_b):
            return [ValidationIssue("consistency", "Both options are the same")]
        return []

    def _check_two_truths(self, model: TwoTruthsPrompt) -> list[ValidationIssue]:
        issues = []
        if any(_blank(s) for s in (model.statement1, model.statement2, model.statement3)):
            issues.append(ValidationIssue("content", "Empty statement"))
        if not 0 <= model.lie_index <= 2:
            issues.append(
                ValidationIssue(
                    "consistency", f"lie_index {model.lie_index} out of range", location="lie_index"
                )
            )
        return issues

    def _check_never_have_i_ever(self, model: NeverHaveIEverPrompt) -> list[ValidationIssue]:
        if _blank(model.statement):
            return [ValidationIssue("content", "Empty statement", location="statement")]
        return []
