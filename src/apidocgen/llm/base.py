"""Provider contract shared by every completion backend.

This module defines the abstract interface that all LLM providers must
implement, the provider error taxonomy, and the factory that maps a
provider identifier to an implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field


logger = structlog.get_logger(__name__)


class LLMProviderName(str, Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    OLLAMA = "ollama"


class LLMConfig(BaseModel):
    """Settings a provider needs to reach its backend.

    The provider identifier is kept as a plain string so that an unknown
    value is reported by :func:`create_provider` rather than at config
    construction time.

    Attributes:
        provider: Backend identifier such as "openai" or "ollama"
        model: Model to request, or None for the backend default
        api_key: Credential already resolved from config or environment
        base_url: Endpoint override, the server host for local inference
        temperature: Sampling temperature between 0 and 1
        max_tokens: Upper bound on generated tokens
        timeout: Per-request timeout in seconds, SDK default when unset
        additional_params: Extra keyword arguments passed to the SDK call
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    provider: str
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = Field(default=0.1, ge=0.0, le=1.0)
    max_tokens: int = Field(default=4000, gt=0)
    timeout: Optional[float] = Field(default=None, gt=0)
    additional_params: dict[str, Any] = Field(default_factory=dict)


class LLMResponse(BaseModel):
    """One completion returned by a backend.

    Attributes:
        content: Reply text, unmodified
        model: Model name reported by the backend
        tokens_used: Token usage when the backend reports it
        finish_reason: Why generation stopped, if known
        metadata: Backend-specific extras such as request ids
    """

    content: str
    model: str
    tokens_used: Optional[int] = None
    finish_reason: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class BaseLLMProvider(ABC):
    """Common behaviour of completion backends.

    A provider turns a prompt into raw text. It knows nothing about the
    documentation schema and never retries: a failed attempt is raised
    immediately.

    Attributes:
        config: LLM configuration
        logger: Structured logger instance
    """

    name: LLMProviderName
    default_model: str = ""

    def __init__(self, config: LLMConfig) -> None:
        """Bind the configuration and a provider-scoped logger.

        Args:
            config: LLM configuration
        """
        self.config = config
        self.model = config.model or self.default_model
        self.logger = logger.bind(provider=self.name.value, model=self.model)

    @abstractmethod
    async def complete(self, prompt: str, **kwargs: Any) -> LLMResponse:
        """Generate a completion for a prompt.

        Args:
            prompt: Input prompt
            **kwargs: Additional provider-specific parameters

        Returns:
            LLM response

        Raises:
            LLMError: If completion fails
        """
        pass

    async def send(self, prompt: str) -> str:
        """Send a prompt and return the raw reply text.

        Args:
            prompt: Input prompt

        Returns:
            Reply text exactly as produced by the model

        Raises:
            LLMError: If the request fails
        """
        response = await self.complete(prompt)
        return response.content

    async def test_connection(self) -> bool:
        """Test the connection to the provider.

        Returns:
            True if the provider answered

        Raises:
            LLMError: If the connection fails
        """
        response = await self.complete("Hello, please respond with 'OK'.")
        return bool(response.content)


class LLMError(Exception):
    """Raised when a backend cannot produce a completion."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        """Record the failing backend and the wrapped exception.

        Args:
            message: Error message
            provider: Backend identifier
            original_error: SDK or transport exception being wrapped
        """
        super().__init__(message)
        self.provider = provider
        self.original_error = original_error


class UnsupportedProviderError(LLMError):
    """The provider identifier names no known backend."""


class AuthenticationError(LLMError):
    """The credential is missing or was rejected."""


class ProviderError(LLMError):
    """Transport failure or error status from the backend."""


class ProviderTimeoutError(ProviderError):
    """The backend did not answer within the timeout."""


def create_provider(config: LLMConfig) -> BaseLLMProvider:
    """Instantiate the backend named by ``config.provider``.

    Args:
        config: LLM configuration

    Returns:
        Configured LLM provider instance

    Raises:
        UnsupportedProviderError: If provider is not supported
    """
    try:
        provider = LLMProviderName(str(config.provider).strip().lower())
    except ValueError:
        logger.error("unsupported_provider", provider=config.provider)
        raise UnsupportedProviderError(
            f"Unsupported AI provider: {config.provider}",
            provider=str(config.provider),
        ) from None

    if provider == LLMProviderName.OPENAI:
        from apidocgen.llm.openai import OpenAIProvider

        return OpenAIProvider(config)

    from apidocgen.llm.ollama import OllamaProvider

    return OllamaProvider(config)
