import pytest
from unittest.mock import MagicMock
from openai import APIConnectionError
from supportbot.errors import GenerationError
from supportbot.llm.openai_client import ChatCompletionGenerator
from supportbot.models.chat import Turn, TurnRole
from supportbot.resolver import TECHNICAL_DIFFICULTIES_REPLY, ExternalGenerationStrategy
from supportbot.resolver.generation import build_messages, build_system_prompt


def make_turns(n):
    roles = [TurnRole.USER, TurnRole.ASSISTANT]
    return [Turn(id=i + 1, session_id="s1", role=roles[i % 2], content=f"t{i}") for i in range(n)]


def make_completion(content="Hello!", total_tokens=77):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.usage.total_tokens = total_tokens
    return response


# ---------------------------------------------------------------------------
# Prompt assembly
# ---------------------------------------------------------------------------
def test_system_prompt_embeds_documents(documents):
    prompt = build_system_prompt(documents)
    assert prompt.startswith("You are a helpful support assistant.")
    assert "Refund Policy: Refunds within 30 days.\n\nSubscription Plans: Basic $9, Pro $29." in prompt
    assert prompt.count("Sorry, I don't have information about that.") == 2
    assert prompt.endswith("4. Do not make up or guess any information")


def test_build_messages_order_and_roles():
    messages = build_messages("SYS", make_turns(2), "new question")
    assert messages == [
        {"role": "system", "content": "SYS"},
        {"role": "user", "content": "t0"},
        {"role": "assistant", "content": "t1"},
        {"role": "user", "content": "new question"},
    ]


def test_build_messages_keeps_last_ten_turns():
    messages = build_messages("SYS", make_turns(14), "q")
    assert len(messages) == 12
    assert messages[1]["content"] == "t4"
    assert messages[-2]["content"] == "t13"


# ---------------------------------------------------------------------------
# Strategy
# ---------------------------------------------------------------------------
def test_strategy_returns_generated_reply(documents):
    generate = MagicMock(return_value=("From the docs.", 91))
    strategy = ExternalGenerationStrategy(documents, generate)

    result = strategy.resolve("refund?", make_turns(3))

    assert result.reply == "From the docs."
    assert result.tokens_used == 91
    sent = generate.call_args[0][0]
    assert sent[0]["role"] == "system"
    assert sent[-1] == {"role": "user", "content": "refund?"}
    assert len(sent) == 5


@pytest.mark.parametrize("error", [
    GenerationError("no choices"),
    APIConnectionError(request=MagicMock()),
    RuntimeError("boom"),
])
def test_strategy_failure_yields_technical_difficulties(documents, error):
    strategy = ExternalGenerationStrategy(documents, MagicMock(side_effect=error))
    result = strategy.resolve("hello", [])
    assert result.reply == TECHNICAL_DIFFICULTIES_REPLY
    assert result.tokens_used == 0


# ---------------------------------------------------------------------------
# OpenAI adapter
# ---------------------------------------------------------------------------
def test_generator_calls_chat_completions():
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion("Answer", 55)
    generator = ChatCompletionGenerator(client, model="gpt-3.5-turbo", max_tokens=500, temperature=0.7)

    reply, tokens = generator([{"role": "user", "content": "hi"}])

    assert (reply, tokens) == ("Answer", 55)
    client.chat.completions.create.assert_called_once_with(
        model="gpt-3.5-turbo",
        messages=[{"role": "user", "content": "hi"}],
        max_tokens=500,
        temperature=0.7,
    )


def test_generator_rejects_empty_choices():
    client = MagicMock()
    response = make_completion()
    response.choices = []
    client.chat.completions.create.return_value = response

    with pytest.raises(GenerationError):
        ChatCompletionGenerator(client, model="m")([])


def test_generator_rejects_missing_content():
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion(content=None)

    with pytest.raises(GenerationError):
        ChatCompletionGenerator(client, model="m")([])


def test_generator_rejects_missing_usage():
    client = MagicMock()
    response = make_completion()
    response.usage = None
    client.chat.completions.create.return_value = response

    with pytest.raises(GenerationError):
        ChatCompletionGenerator(client, model="m")([])
