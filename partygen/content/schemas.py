"""Pydantic schemas for party content.

Three groups live here:
- Party settings shared by every request (language, theme, intensity)
- Per-kind request parameters
- Per-kind output payloads, which double as the structured output schema
  handed to the generative backend
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


Language = Literal["en", "zh"]
Theme = Literal["default", "horror", "anime", "sports", "kpop", "sg_my"]
Intensity = Literal["family", "pg13", "spicy"]


class PartySettings(BaseModel):
    """Session-wide settings that shape every generated item."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    language: Language = "en"
    theme: Theme = "default"
    intensity: Intensity = "family"


# =============================================================================
# Request parameters
# =============================================================================


class RequestParameters(BaseModel):
    """Base for kind-specific request parameters."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)


class NoParameters(RequestParameters):
    """Kinds whose content depends only on party settings."""


class TriviaParameters(RequestParameters):
    topic: str = Field(min_length=1, max_length=200)
    count: int = Field(default=5, ge=1, le=10)


class CategoryParameters(RequestParameters):
    category: str = Field(default="random", min_length=1, max_length=100)


class WhoAmIParameters(RequestParameters):
    category: str = Field(default="random", min_length=1, max_length=100)
    count: int = Field(default=20, ge=1, le=20)


class PlayerCountParameters(RequestParameters):
    player_count: int = Field(ge=3, le=10)


# =============================================================================
# Output payloads
# =============================================================================


class TriviaQuestion(BaseModel):
    question: str
    options: list[str] = Field(description="Exactly 4 answer options")
    answer_index: int = Field(description="Index (0-3) of the correct option")
    explanation: str
    difficulty: str


class TriviaSet(BaseModel):
    """A round of trivia questions on one topic."""

    questions: list[TriviaQuestion]


class CharadePrompt(BaseModel):
    phrase: str
    category: str
    hint: str
    difficulty: Literal["Easy", "Medium", "Hard", "Extreme"]


class ForbiddenWordsCard(BaseModel):
    """A Taboo-style card: describe the target without the forbidden words."""

    target: str
    forbidden: list[str] = Field(description="Exactly 4 words strongly associated with the target")
    difficulty: Literal["Easy", "Medium", "Hard"]


class DebatePrompt(BaseModel):
    topic: str
    side_a: str
    side_b: str


class ImpostorScenario(BaseModel):
    """Spyfall-style location with one role per non-impostor player."""

    location: str
    roles: list[str]


class MurderMysteryCharacter(BaseModel):
    name: str
    role: Literal["Killer", "Detective", "Suspect"]
    public_bio: str
    secret_info: str


class MurderMysteryScenario(BaseModel):
    title: str
    intro: str
    characters: list[MurderMysteryCharacter]


class PictionaryPrompt(BaseModel):
    word: str
    category: str
    difficulty: Literal["Easy", "Medium", "Hard"]


class CategoryRushRound(BaseModel):
    """Scattergories-style round: one letter, six categories."""

    letter: str = Field(description="A single letter A-Z")
    categories: list[str] = Field(description="Exactly 6 distinct categories")


class WhoAmIWord(BaseModel):
    word: str
    hint: str


class WhoAmIDeck(BaseModel):
    words: list[WhoAmIWord]


class SecretCodeBoard(BaseModel):
    """Codenames-style board words, single nouns only."""

    words: list[str] = Field(description="25 distinct single-word nouns")


class WouldYouRatherPrompt(BaseModel):
    option_a: str
    option_b: str


class TwoTruthsPrompt(BaseModel):
    statement1: str
    statement2: str
    statement3: str
    lie_index: int = Field(description="Index (0-2) of the false statement")


class NeverHaveIEverPrompt(BaseModel):
    statement: str
