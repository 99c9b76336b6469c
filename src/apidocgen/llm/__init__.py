"""LLM integration layer for AI-powered documentation generation."""

from apidocgen.llm.base import (
    AuthenticationError,
    BaseLLMProvider,
    LLMConfig,
    LLMError,
    LLMProviderName,
    LLMResponse,
    ProviderError,
    ProviderTimeoutError,
    UnsupportedProviderError,
    create_provider,
)
from apidocgen.llm.ollama import OllamaProvider
from apidocgen.llm.openai import OpenAIProvider

__all__ = [
    "BaseLLMProvider",
    "LLMConfig",
    "LLMProviderName",
    "LLMResponse",
    "LLMError",
    "UnsupportedProviderError",
    "AuthenticationError",
    "ProviderError",
    "ProviderTimeoutError",
    "create_provider",
    "OpenAIProvider",
    "OllamaProvider",
]
