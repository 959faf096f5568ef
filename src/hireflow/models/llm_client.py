"""
LLM client abstraction.

Provides a unified interface for text generation against an Ollama server.
All generation goes through the Ollama HTTP API (``/api/generate`` and
``/api/chat``) using a shared ``httpx.AsyncClient``.
"""

import ast
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import BaseModel, Field

from hireflow.config import get_settings
from hireflow.errors import GenerationError

logger = logging.getLogger(__name__)

# Default model for Ollama
DEFAULT_OLLAMA_MODEL = "gpt-oss:20b"

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


class Message(BaseModel):
    """A message in a conversation."""

    role: str = Field(..., description="Role of the speaker (system, user, assistant)")
    content: str = Field(..., description="Message content")


class LLMResponse(BaseModel):
    """Response from an LLM."""

    content: str = Field(..., description="Generated text content")
    finish_reason: str = Field(default="stop", description="Reason for completion")
    usage: dict[str, int] = Field(
        default_factory=dict,
        description="Token usage information",
    )
    model: str = Field(default="", description="Model used for generation")


class OllamaError(GenerationError):
    """Raised when the Ollama server cannot produce a completion."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = status_code


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers (```json / ```) from model output."""
    return _FENCE_RE.sub("", text).strip()


def _fix_json_string(json_str: str) -> str:
    """Repair the JSON mistakes LLMs make most often."""
    result = strip_code_fences(json_str)

    result = (
        result.replace("“", '"')
        .replace("”", '"')
        .replace("‘", "'")
        .replace("’", "'")
    )

    # Trailing commas before a closing brace/bracket.
    result = re.sub(r",(\s*[}\]])", r"\1", result)

    result = re.sub(r"\bNone\b", "null", result)
    result = re.sub(r"\bTrue\b", "true", result)
    result = re.sub(r"\bFalse\b", "false", result)

    # Bare object keys: {foo: "bar"}
    result = re.sub(
        r"([\{,]\s*)([A-Za-z_][A-Za-z0-9_\-]*)(\s*:)",
        r'\1"\2"\3',
        result,
    )

    if "'" in result and '"' not in result:
        result = result.replace("'", '"')

    return result


def _to_json_types(obj: Any) -> Any:
    """Coerce a Python literal into JSON-safe types."""
    if obj is ...:
        return None
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, dict):
        return {str(k): _to_json_types(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [_to_json_types(v) for v in obj]
    return str(obj)


def _find_json_block(content: str) -> str:
    """Return the first balanced {...} or [...] block, or the content itself."""
    starts = [i for i in (content.find("{"), content.find("[")) if i != -1]
    if not starts:
        return content

    start_idx = min(starts)
    open_bracket = content[start_idx]
    close_bracket = "}" if open_bracket == "{" else "]"
    depth = 0
    for i, char in enumerate(content[start_idx:], start=start_idx):
        if char == open_bracket:
            depth += 1
        elif char == close_bracket:
            depth -= 1
            if depth == 0:
                return content[start_idx : i + 1]
    return content[start_idx:]


def parse_json_loose(raw: str) -> dict[str, Any] | list[Any] | None:
    """
    Parse JSON from LLM output with best-effort repair.

    Args:
        raw: Model output that should contain a JSON object or array.

    Returns:
        The parsed dict/list, or None when nothing usable was found.
    """
    if not raw or not raw.strip():
        return None

    block = _find_json_block(strip_code_fences(raw))
    for candidate in (block, _fix_json_string(block)):
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    # Python literal fallback (single quotes, trailing commas).
    try:
        obj = ast.literal_eval(block)
    except (ValueError, SyntaxError, TypeError):
        return None
    if not isinstance(obj, (dict, list, tuple, set)):
        return None
    return json.loads(json.dumps(_to_json_types(obj)))


class LLMClientBase(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def chat(
        self,
        messages: list[Message],
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """
        Generate a chat completion.

        Raises:
            GenerationError: If the model call fails.
        """
        ...

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """
        Generate a text completion for a single prompt.

        Raises:
            GenerationError: If the model call fails.
        """
        ...

    async def chat_with_json(
        self,
        messages: list[Message],
        schema: dict[str, Any] | None = None,
        temperature: float = 0.2,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """
        Generate a chat completion and parse it as JSON.

        Best-effort: any generation or parse failure yields an empty dict.
        A top-level JSON array is returned as ``{"items": [...]}``.

        Args:
            messages: Conversation history.
            schema: Optional JSON schema for expected output.
            temperature: Sampling temperature (lower for more deterministic).
            **kwargs: Additional parameters.

        Returns:
            Parsed JSON response, or empty dict on error.
        """
        instruction = "You must respond with valid JSON only. No additional text or explanation."
        if schema:
            instruction += f" Your response must match this JSON schema: {json.dumps(schema)}"
        augmented = [Message(role="system", content=instruction), *messages]

        try:
            response = await self.chat(augmented, temperature, **kwargs)
        except GenerationError as e:
            logger.warning(f"JSON chat failed, returning empty dict: {e}")
            return {}

        parsed = parse_json_loose(response.content)
        if isinstance(parsed, dict):
            return parsed
        if isinstance(parsed, list):
            return {"items": parsed}

        logger.warning("Failed to parse JSON from LLM response")
        logger.debug(f"Response content: {response.content[:500]}")
        return {}

    async def close(self) -> None:
        """Release any held resources."""
        return None


class LLMClient(LLMClientBase):
    """
    Ollama-based LLM client.

    Talks to a local or remote Ollama server over HTTP. The underlying
    ``httpx.AsyncClient`` is created lazily and released by ``close()``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        timeout: int | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the Ollama LLM client.

        Args:
            base_url: Ollama server URL (uses config if not provided).
            model: Model name (uses config, then gpt-oss:20b).
            timeout: Request timeout in seconds (uses config if not provided).
            http_client: Pre-built client, mainly for tests.
        """
        settings = get_settings()
        self._base_url = base_url or settings.llm_base_url
        self._model = model or settings.llm_model_name or DEFAULT_OLLAMA_MODEL
        self._timeout = timeout or settings.llm_timeout
        self._client = http_client

        logger.info(f"Initialized Ollama LLM client with model: {self._model}")

    @property
    def model(self) -> str:
        """Get the model name."""
        return self._model

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _options(self, temperature: float, max_tokens: int | None, **kwargs: Any) -> dict[str, Any]:
        options: dict[str, Any] = {"temperature": temperature}
        if max_tokens is not None:
            options["num_predict"] = max_tokens
        for key in ("top_p", "num_ctx"):
            if kwargs.get(key) is not None:
                options[key] = kwargs[key]
        return options

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        POST to the Ollama API and return the decoded JSON body.

        Raises:
            OllamaError: On timeout, transport failure, or non-2xx status.
        """
        client = await self._get_client()
        try:
            response = await client.post(path, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            logger.warning(f"Ollama timed out after {self._timeout}s")
            raise OllamaError(f"Ollama timed out after {self._timeout} seconds") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Ollama returned HTTP {e.response.status_code}: {e.response.text[:200]}")
            raise OllamaError(
                f"Ollama returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Ollama request failed: {e}")
            raise OllamaError(f"Ollama request failed: {e}") from e
        except ValueError as e:
            raise OllamaError("Ollama returned a non-JSON body") from e

    def _to_response(self, body: dict[str, Any], content: str) -> LLMResponse:
        usage = {}
        if "prompt_eval_count" in body:
            usage["prompt_tokens"] = int(body["prompt_eval_count"])
        if "eval_count" in body:
            usage["completion_tokens"] = int(body["eval_count"])
        return LLMResponse(
            content=content,
            finish_reason=body.get("done_reason") or "stop",
            usage=usage,
            model=body.get("model") or self._model,
        )

    async def chat(
        self,
        messages: list[Message],
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a chat completion using ``/api/chat``."""
        body = await self._post(
            "/api/chat",
            {
                "model": self._model,
                "messages": [m.model_dump() for m in messages],
                "stream": False,
                "options": self._options(temperature, max_tokens, **kwargs),
            },
        )
        content = (body.get("message") or {}).get("content", "")
        logger.debug(f"Ollama chat response length: {len(content)} chars")
        return self._to_response(body, content)

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a text completion using ``/api/generate``."""
        body = await self._post(
            "/api/generate",
            {
                "model": self._model,
                "prompt": prompt,
                "stream": False,
                "options": self._options(temperature, max_tokens, **kwargs),
            },
        )
        content = body.get("response", "")
        logger.debug(f"Ollama completion length: {len(content)} chars")
        return self._to_response(body, content)
