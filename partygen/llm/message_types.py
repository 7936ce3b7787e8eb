"""LLM message type definitions.

Immutable dataclasses for the messages sent to the content backend.
"""

from dataclasses import dataclass
from enum import Enum


class MessageRole(str, Enum):
    """Role of a message in the conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A message in a conversation.

    Attributes:
        role: Who sent the message (system, user, assistant).
        content: Text content.
    """

    role: MessageRole
    content: str = ""

    @classmethod
    def system(cls, content: str) -> "Message":
        """Create a system message."""
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        """Create a user message."""
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        """Create an assistant message."""
        return cls(role=MessageRole.ASSISTANT, content=content)
