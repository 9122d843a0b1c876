"""
External-generation strategy: documentation-grounded prompt sent to a chat model.
"""
from typing import Callable, Dict, List, Sequence, Tuple
from openai import OpenAIError
from supportbot.docs import DocumentSet
from supportbot.errors import GenerationError
from supportbot.models.chat import Turn, TurnRole
from supportbot.resolver.base import (
    FALLBACK_REPLY,
    TECHNICAL_DIFFICULTIES_REPLY,
    ReplyStrategy,
    Resolution,
)
from supportbot.logging import logger

Generator = Callable[[List[Dict[str, str]]], Tuple[str, int]]

SYSTEM_PROMPT_TEMPLATE = """\
You are a helpful support assistant. You must answer questions ONLY using the following documentation. If the answer is not found in the documentation, respond with exactly: "{fallback}"

Documentation:
{documentation}

Rules:
1. Only use information from the provided documentation
2. If information is not in the docs, say "{fallback}"
3. Be helpful and concise
4. Do not make up or guess any information"""


def build_system_prompt(documents: DocumentSet) -> str:
    documentation = "\n\n".join(f"{doc.title}: {doc.content}" for doc in documents)
    return SYSTEM_PROMPT_TEMPLATE.format(fallback=FALLBACK_REPLY, documentation=documentation)


def _role_value(role) -> str:
    return role.value if isinstance(role, TurnRole) else str(role)


def build_messages(
    system_prompt: str,
    history: Sequence[Turn],
    user_message: str,
    window: int = 10,
) -> List[Dict[str, str]]:
    """System prompt, then the last `window` turns oldest-first, then the new message."""
    messages = [{"role": "system", "content": system_prompt}]
    recent = list(history)[-window:] if window > 0 else []
    for turn in recent:
        messages.append({"role": _role_value(turn.role), "content": turn.content})
    messages.append({"role": "user", "content": user_message})
    return messages


class ExternalGenerationStrategy(ReplyStrategy):
    name = "generation"

    def __init__(self, documents: DocumentSet, generate: Generator, history_window: int = 10):
        self.documents = documents
        self.generate = generate
        self.history_window = history_window
        # Documents are immutable, so the prompt is built once
        self.system_prompt = build_system_prompt(documents)

    def resolve(self, user_message: str, history: Sequence[Turn]) -> Resolution:
        messages = build_messages(self.system_prompt, history, user_message, self.history_window)
        try:
            reply, tokens = self.generate(messages)
        except (OpenAIError, GenerationError) as e:
            logger.error(f"Error generating LLM response: {e}")
            return Resolution(reply=TECHNICAL_DIFFICULTIES_REPLY, tokens_used=0)
        except Exception as e:
            logger.exception(f"Unexpected failure from generation backend: {e}")
            return Resolution(reply=TECHNICAL_DIFFICULTIES_REPLY, tokens_used=0)
        return Resolution(reply=reply, tokens_used=tokens)
