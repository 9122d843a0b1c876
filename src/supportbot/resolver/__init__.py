from typing import Optional, Sequence
from supportbot.config import Settings
from supportbot.docs import DocumentSet
from supportbot.models.chat import Turn
from supportbot.resolver.base import (
    FALLBACK_REPLY,
    FALLBACK_TOKENS,
    TECHNICAL_DIFFICULTIES_REPLY,
    ReplyStrategy,
    Resolution,
)
from supportbot.resolver.rules import RULES, KeywordRule, RuleMatchingStrategy
from supportbot.resolver.generation import ExternalGenerationStrategy, Generator
from supportbot.logging import logger


class ReplyResolver:
    """Stateless facade over the strategy chosen at construction time."""

    def __init__(self, strategy: ReplyStrategy):
        self.strategy = strategy

    @property
    def mode(self) -> str:
        return self.strategy.name

    def resolve(self, user_message: str, history: Sequence[Turn] = ()) -> Resolution:
        return self.strategy.resolve(user_message, history)


def build_resolver(
    settings: Settings,
    documents: DocumentSet,
    generate: Optional[Generator] = None,
) -> ReplyResolver:
    """
    Pick the strategy from configuration.

    `generate` overrides the OpenAI-backed generator (used by tests); it is
    ignored when settings select demo mode.
    """
    if not settings.generation_enabled:
        logger.info(f"Reply mode: demo (keyword rules over {len(documents)} documents)")
        return ReplyResolver(RuleMatchingStrategy(documents))

    if generate is None:
        from supportbot.llm.openai_client import build_client, ChatCompletionGenerator
        generate = ChatCompletionGenerator(
            build_client(settings),
            model=settings.OPENAI_MODEL,
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE,
        )

    logger.info(f"Reply mode: generation ({settings.OPENAI_MODEL}, {len(documents)} documents)")
    return ReplyResolver(
        ExternalGenerationStrategy(documents, generate, history_window=settings.HISTORY_WINDOW)
    )


__all__ = [
    "ReplyResolver",
    "build_resolver",
    "Resolution",
    "ReplyStrategy",
    "RuleMatchingStrategy",
    "ExternalGenerationStrategy",
    "KeywordRule",
    "RULES",
    "FALLBACK_REPLY",
    "FALLBACK_TOKENS",
    "TECHNICAL_DIFFICULTIES_REPLY",
]
