from typing import Dict, List, Tuple
from openai import OpenAI
from supportbot.config import Settings
from supportbot.errors import GenerationError
from supportbot.logging import logger


def build_client(settings: Settings) -> OpenAI:
    """
    Create an OpenAI client from settings.

    The SDK handles retries with exponential backoff on connection errors,
    429s and 5xx responses; we only bound how many and how long.
    """
    api_key = settings.OPENAI_API_KEY.get_secret_value() if settings.OPENAI_API_KEY else None
    return OpenAI(
        api_key=api_key,
        base_url=settings.OPENAI_BASE_URL,
        timeout=settings.LLM_TIMEOUT_SECONDS,
        max_retries=settings.LLM_MAX_RETRIES,
    )


class ChatCompletionGenerator:
    """Callable `generate(messages) -> (reply, total_tokens)` backed by chat.completions."""

    def __init__(self, client: OpenAI, model: str, max_tokens: int = 500, temperature: float = 0.7):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    def __call__(self, messages: List[Dict[str, str]]) -> Tuple[str, int]:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        try:
            reply = response.choices[0].message.content
            tokens = response.usage.total_tokens
        except (AttributeError, IndexError, TypeError) as e:
            raise GenerationError(f"Malformed completion response: {e}") from e

        if reply is None or tokens is None:
            raise GenerationError("Completion response is missing content or usage")

        logger.info(f"OpenAI {self.model} replied: {len(reply)} chars, {tokens} tokens")
        return reply, int(tokens)
