"""Prompt construction for content generation.

Each kind has a short instruction template. Party settings are appended as
language, theme and intensity guidance so that two requests differing only
in settings produce different prompts.
"""

from dataclasses import dataclass

from partygen.content.kinds import ContentKind
from partygen.content.schemas import (
    CategoryParameters,
    PartySettings,
    PlayerCountParameters,
    RequestParameters,
    TriviaParameters,
    WhoAmIParameters,
)


SYSTEM_PROMPT = (
    "You write content for a party game app played in person by a group of friends. "
    "Keep every item short enough to read aloud, unambiguous, and fun. "
    "Always return data that matches the requested schema exactly."
)

LANGUAGE_INSTRUCTIONS = {
    "en": "Respond in English.",
    "zh": "Respond in Simplified Chinese (zh-CN).",
}

THEME_INSTRUCTIONS = {
    "default": "",
    "horror": "Give everything a spooky horror-movie flavour.",
    "anime": "Draw on popular anime and manga references.",
    "sports": "Lean on sports, athletes and famous matches.",
    "kpop": "Lean on K-Pop groups, idols and Korean pop culture.",
    "sg_my": "Use Singapore and Malaysia local culture, food and slang.",
}

INTENSITY_INSTRUCTIONS = {
    "family": "Keep it safe for all ages.",
    "pg13": "It can be a bit edgy, but nothing explicit.",
    "spicy": "Adults only: cheeky and risque content is welcome.",
}


@dataclass(frozen=True)
class PromptSpec:
    """Everything the generation backend needs besides the output schema."""

    kind: ContentKind
    instruction: str
    system_prompt: str = SYSTEM_PROMPT


def _kind_instruction(kind: ContentKind, parameters: RequestParameters) -> str:
    match kind:
        case ContentKind.TRIVIA:
            assert isinstance(parameters, TriviaParameters)
            return (
                f'Generate {parameters.count} engaging trivia questions about "{parameters.topic}". '
                "Make them fun. 4 options per question, with the index of the correct one."
            )
        case ContentKind.CHARADES:
            assert isinstance(parameters, CategoryParameters)
            return (
                f"Generate a fun charades prompt. Category: {parameters.category}. "
                "Range from Easy to Hard. The hint must not give the phrase away."
            )
        case ContentKind.FORBIDDEN_WORDS:
            return (
                "Generate a 'Taboo' style game card. One target word and 4 forbidden words "
                "that are highly associated with it. No forbidden word may contain the target."
            )
        case ContentKind.DEBATE:
            return (
                "Generate a hilarious, low-stakes debate topic "
                "(e.g., 'Is a hotdog a sandwich?') with two opposing sides."
            )
        case ContentKind.IMPOSTOR:
            assert isinstance(parameters, PlayerCountParameters)
            return (
                f"Generate a location and {parameters.player_count - 1} distinct roles "
                "for Spyfall."
            )
        case ContentKind.MURDER_MYSTERY:
            assert isinstance(parameters, PlayerCountParameters)
            return (
                f"Create a murder mystery scenario for {parameters.player_count} players. "
                f"Exactly {parameters.player_count} characters with unique names: "
                "1 Killer, 1 Detective, the rest Suspects."
            )
        case ContentKind.PICTIONARY:
            return (
                "Generate a word or phrase suitable for Pictionary (drawing game). "
                "Concrete nouns, actions, or common idioms."
            )
        case ContentKind.CATEGORY_RUSH:
            return (
                "Generate a random alphabet letter (A-Z) and 6 distinct, fun categories "
                "for a Scattergories-style game."
            )
        case ContentKind.WHO_AM_I:
            assert isinstance(parameters, WhoAmIParameters)
            return (
                f"Generate {parameters.count} popular words/people for a 'Heads Up' game. "
                f"Category: {parameters.category}. Each needs a short hint."
            )
        case ContentKind.SECRET_CODE:
            return (
                "Generate 25 distinct, common, diverse nouns for a Codenames-style "
                "association game. Single words only."
            )
        case ContentKind.WOULD_YOU_RATHER:
            return "Generate a 'Would you rather' dilemma with two equally tempting options."
        case ContentKind.TWO_TRUTHS:
            return (
                "Generate three surprising statements for 'Two Truths and a Lie': "
                "two true facts and one convincing lie, with the index of the lie."
            )
        case ContentKind.NEVER_HAVE_I_EVER:
            return "Generate one 'Never have I ever...' statement."
        case _:
            raise ValueError(f"Unknown content kind: {kind}")


def build_prompt(
    kind: ContentKind,
    parameters: RequestParameters,
    settings: PartySettings,
) -> PromptSpec:
    """Build the prompt for a content request.

    Args:
        kind: Kind of content to generate.
        parameters: Validated kind parameters.
        settings: Party settings.

    Returns:
        PromptSpec ready for the generation port.
    """
    parts = [
        _kind_instruction(kind, parameters),
        LANGUAGE_INSTRUCTIONS[settings.language],
        THEME_INSTRUCTIONS[settings.theme],
        INTENSITY_INSTRUCTIONS[settings.intensity],
    ]
    return PromptSpec(kind=kind, instruction=" ".join(p for p in parts if p))
