from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence
from supportbot.models.chat import Turn

FALLBACK_REPLY = "Sorry, I don't have information about that."
FALLBACK_TOKENS = 12

TECHNICAL_DIFFICULTIES_REPLY = "Sorry, I'm experiencing technical difficulties. Please try again later."


@dataclass(frozen=True)
class Resolution:
    """Reply text plus the token usage reported for producing it."""
    reply: str
    tokens_used: int


class ReplyStrategy(ABC):
    """Produces a reply for a user message given prior turns (oldest first)."""
    name = "base"

    @abstractmethod
    def resolve(self, user_message: str, history: Sequence[Turn]) -> Resolution:
        ...
