import json

import httpx
import pytest

from hireflow.errors import GenerationError
from hireflow.models.llm_client import (
    LLMClient,
    LLMResponse,
    Message,
    OllamaError,
    parse_json_loose,
    strip_code_fences,
)


def _client_with(handler) -> LLMClient:
    http_client = httpx.AsyncClient(base_url="http://ollama.test", transport=httpx.MockTransport(handler))
    return LLMClient(base_url="http://ollama.test", model="test-model", timeout=5, http_client=http_client)


@pytest.mark.asyncio
async def test_chat_with_json_repairs_single_quotes_and_trailing_commas() -> None:
    """Test repairing single quotes and trailing commas."""
    client = LLMClient()

    async def fake_chat(messages: list[Message], temperature: float = 0.7, max_tokens=None, **kwargs):
        return LLMResponse(
            content="{'a': 1, 'b': 'x',}",
            finish_reason="stop",
            model="test",
        )

    client.chat = fake_chat  # type: ignore[assignment]

    data = await client.chat_with_json(messages=[Message(role="user", content="hi")])
    assert data == {"a": 1, "b": "x"}


@pytest.mark.asyncio
async def test_chat_with_json_repairs_unquoted_keys_and_fenced_json() -> None:
    """Test repairing unquoted keys inside code fences."""
    client = LLMClient()

    async def fake_chat(messages: list[Message], temperature: float = 0.7, max_tokens=None, **kwargs):
        return LLMResponse(
            content="""```json
            {a: 1, b: true, c: null,}
            ```""",
            finish_reason="stop",
            model="test",
        )

    client.chat = fake_chat  # type: ignore[assignment]

    data = await client.chat_with_json(messages=[Message(role="user", content="hi")])
    assert data == {"a": 1, "b": True, "c": None}


@pytest.mark.asyncio
async def test_chat_with_json_wraps_top_level_array() -> None:
    """Test wrapping a top-level array."""
    client = LLMClient()

    async def fake_chat(messages: list[Message], temperature: float = 0.7, max_tokens=None, **kwargs):
        return LLMResponse(content='Here you go: [{"question": "Why React?"}]', model="test")

    client.chat = fake_chat  # type: ignore[assignment]

    data = await client.chat_with_json(messages=[Message(role="user", content="hi")])
    assert data == {"items": [{"question": "Why React?"}]}


@pytest.mark.asyncio
async def test_chat_with_json_returns_empty_dict_on_generation_error() -> None:
    """Test the empty dict on generation errors."""
    client = LLMClient()

    async def fake_chat(messages: list[Message], temperature: float = 0.7, max_tokens=None, **kwargs):
        raise GenerationError("boom")

    client.chat = fake_chat  # type: ignore[assignment]

    assert await client.chat_with_json(messages=[Message(role="user", content="hi")]) == {}


def test_strip_code_fences() -> None:
    """Test stripping code fences."""
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences("```JSON\n[]\n```") == "[]"
    assert strip_code_fences("plain") == "plain"


def test_parse_json_loose_gives_up_on_prose() -> None:
    """Test that prose does not parse."""
    assert parse_json_loose("I could not do that.") is None
    assert parse_json_loose("") is None


@pytest.mark.asyncio
async def test_complete_returns_model_output_unmodified() -> None:
    """Test the generate request and that the reply keeps its whitespace."""
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "model": "test-model",
                "response": "  What did you build with React?  ",
                "done_reason": "stop",
                "prompt_eval_count": 12,
                "eval_count": 7,
            },
        )

    client = _client_with(handler)
    response = await client.complete("prompt text", temperature=0.2, max_tokens=50)
    await client.close()

    assert seen["path"] == "/api/generate"
    assert seen["body"]["prompt"] == "prompt text"
    assert seen["body"]["stream"] is False
    assert seen["body"]["options"] == {"temperature": 0.2, "num_predict": 50}
    assert response.content == "  What did you build with React?  "
    assert response.usage == {"prompt_tokens": 12, "completion_tokens": 7}


@pytest.mark.asyncio
async def test_chat_posts_messages() -> None:
    """Test posting chat messages."""
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert request.url.path == "/api/chat"
        assert body["messages"] == [{"role": "user", "content": "hi"}]
        return httpx.Response(200, json={"message": {"role": "assistant", "content": "hello"}})

    client = _client_with(handler)
    response = await client.chat([Message(role="user", content="hi")])
    await client.close()

    assert response.content == "hello"
    assert response.model == "test-model"


@pytest.mark.asyncio
async def test_http_error_status_raises_ollama_error() -> None:
    """Test that an error status raises OllamaError."""
    client = _client_with(lambda request: httpx.Response(503, text="loading model"))

    with pytest.raises(OllamaError) as exc_info:
        await client.complete("hi")
    await client.close()

    assert exc_info.value.upstream_status == 503
    assert isinstance(exc_info.value, GenerationError)


@pytest.mark.asyncio
async def test_timeout_raises_generation_error() -> None:
    """Test that a timeout raises GenerationError."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    client = _client_with(handler)
    with pytest.raises(GenerationError):
        await client.complete("hi")
    await client.close()
