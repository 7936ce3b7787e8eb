"""Content kind registry.

Every kind of round content is a member of the closed ``ContentKind`` enum.
Each member is bound to a ``KindSpec`` describing its parameters, its output
schema and whether it may be served from cache.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel

from partygen.content.schemas import (
    CategoryParameters,
    CategoryRushRound,
    CharadePrompt,
    DebatePrompt,
    ForbiddenWordsCard,
    ImpostorScenario,
    MurderMysteryScenario,
    NeverHaveIEverPrompt,
    NoParameters,
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


class ContentKind(str, Enum):
    """Categories of generated round content."""

    TRIVIA = "trivia"
    CHARADES = "charades"
    FORBIDDEN_WORDS = "forbidden_words"
    DEBATE = "debate"
    IMPOSTOR = "impostor"
    MURDER_MYSTERY = "murder_mystery"
    PICTIONARY = "pictionary"
    CATEGORY_RUSH = "category_rush"
    WHO_AM_I = "who_am_i"
    SECRET_CODE = "secret_code"
    WOULD_YOU_RATHER = "would_you_rather"
    TWO_TRUTHS = "two_truths"
    NEVER_HAVE_I_EVER = "never_have_i_ever"


@dataclass(frozen=True)
class KindSpec:
    """Static description of a content kind.

    Attributes:
        kind: The kind this spec describes.
        title: Human-readable name.
        output_model: Pydantic model for the payload; also the schema
            handed to the generation backend.
        parameters_model: Pydantic model for request parameters.
        varies_per_round: When True, every request must produce new
            content, so results are never read from or written to cache.
    """

    kind: ContentKind
    title: str
    output_model: type[BaseModel]
    parameters_model: type[RequestParameters]
    varies_per_round: bool = False

    @property
    def cacheable(self) -> bool:
        return not self.varies_per_round


KIND_SPECS: dict[ContentKind, KindSpec] = {
    spec.kind: spec
    for spec in (
        KindSpec(ContentKind.TRIVIA, "Trivia", TriviaSet, TriviaParameters),
        KindSpec(
            ContentKind.CHARADES, "Charades", CharadePrompt, CategoryParameters,
            varies_per_round=True,
        ),
        KindSpec(
            ContentKind.FORBIDDEN_WORDS, "Forbidden Words", ForbiddenWordsCard, NoParameters,
            varies_per_round=True,
        ),
        KindSpec(
            ContentKind.DEBATE, "Debate", DebatePrompt, NoParameters,
            varies_per_round=True,
        ),
        KindSpec(ContentKind.IMPOSTOR, "Impostor", ImpostorScenario, PlayerCountParameters),
        KindSpec(
            ContentKind.MURDER_MYSTERY, "Murder Mystery", MurderMysteryScenario,
            PlayerCountParameters,
        ),
        KindSpec(
            ContentKind.PICTIONARY, "Pictionary", PictionaryPrompt, NoParameters,
            varies_per_round=True,
        ),
        KindSpec(
            ContentKind.CATEGORY_RUSH, "Category Rush", CategoryRushRound, NoParameters,
            varies_per_round=True,
        ),
        KindSpec(ContentKind.WHO_AM_I, "Who Am I", WhoAmIDeck, WhoAmIParameters),
        KindSpec(ContentKind.SECRET_CODE, "Secret Code", SecretCodeBoard, NoParameters),
        KindSpec(
            ContentKind.WOULD_YOU_RATHER, "Would You Rather", WouldYouRatherPrompt,
            NoParameters, varies_per_round=True,
        ),
        KindSpec(
            ContentKind.TWO_TRUTHS, "Two Truths and a Lie", TwoTruthsPrompt, NoParameters,
            varies_per_round=True,
        ),
        KindSpec(
            ContentKind.NEVER_HAVE_I_EVER, "Never Have I Ever", NeverHaveIEverPrompt,
            NoParameters, varies_per_round=True,
        ),
    )
}


def get_kind_spec(kind: ContentKind | str) -> KindSpec:
    """Look up the spec for a kind.

    Args:
        kind: A ContentKind or its string value.

    Returns:
        The registered KindSpec.

    Raises:
        ValueError: If the kind is unknown.
    """
    return KIND_SPECS[ContentKind(kind)]
