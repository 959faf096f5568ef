"""
Models module for LLM client abstraction.

Provides a unified interface for interacting with an Ollama server.
"""

from hireflow.models.llm_client import (
    DEFAULT_OLLAMA_MODEL,
    LLMClient,
    LLMClientBase,
    LLMResponse,
    Message,
    OllamaError,
    parse_json_loose,
    strip_code_fences,
)

__all__ = [
    "LLMClient",
    "LLMClientBase",
    "LLMResponse",
    "Message",
    "OllamaError",
    "DEFAULT_OLLAMA_MODEL",
    "parse_json_loose",
    "strip_code_fences",
]
