"""Local LLM provider for documentation generation using Ollama.

This module implements the local-inference backend: a single-prompt,
non-streaming generation request against a locally reachable Ollama server.
Local models can be slow on large files, so the wait is bounded generously.
"""

from __future__ import annotations

import asyncio
from typing import Any, NoReturn

import httpx
import ollama

from apidocgen.llm.base import (
    BaseLLMProvider,
    LLMConfig,
    LLMProviderName,
    LLMResponse,
    ProviderError,
    ProviderTimeoutError,
)

DEFAULT_HOST = "http://localhost:11434"
DEFAULT_TIMEOUT = 120.0


class OllamaProvider(BaseLLMProvider):
    """LLM provider for local models via Ollama.

    Supports any model available in Ollama (Llama 2, Mistral, CodeLlama, etc.).

    Attributes:
        config: LLM configuration
        host: Ollama server URL
        timeout: Upper bound in seconds for a whole generation request
        client: Ollama async client
    """

    name = LLMProviderName.OLLAMA
    default_model = "llama2"

    def __init__(self, config: LLMConfig) -> None:
        """Initialize local LLM provider.

        Args:
            config: LLM configuration with local settings
        """
        super().__init__(config)

        self.host = config.base_url or DEFAULT_HOST
        self.timeout = config.timeout or DEFAULT_TIMEOUT
        self.client = ollama.AsyncClient(host=self.host)

        self.logger.info(
            "local_provider_initialized",
            base_url=self.host,
            timeout=self.timeout,
        )

    async def complete(self, prompt: str, **kwargs: Any) -> LLMResponse:
        """Generate a completion using Ollama.

        Args:
            prompt: Input prompt
            **kwargs: Additional parameters for the API call

        Returns:
            LLM response

        Raises:
            ProviderTimeoutError: If the request exceeds the time bound
            ProviderError: If the server is unreachable or rejects the request
        """
        params = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.config.temperature,
                "top_p": 0.9,
                "num_predict": self.config.max_tokens,
                **self.config.additional_params,
            },
            **kwargs,
        }

        self.logger.debug("api_request", model=params["model"], prompt_chars=len(prompt))

        try:
            response = await asyncio.wait_for(
                self.client.generate(**params), timeout=self.timeout
            )
        except Exception as e:
            self._handle_error(e)

        content = response.get("response", "") or ""

        prompt_tokens = response.get("prompt_eval_count") or 0
        completion_tokens = response.get("eval_count") or 0
        total_tokens = prompt_tokens + completion_tokens

        llm_response = LLMResponse(
            content=content,
            model=response.get("model") or self.model,
            tokens_used=total_tokens if total_tokens > 0 else None,
            finish_reason="stop" if response.get("done") else None,
            metadata={
                "total_duration": response.get("total_duration"),
                "load_duration": response.get("load_duration"),
                "eval_duration": response.get("eval_duration"),
            },
        )

        self.logger.info(
            "completion_success",
            tokens=llm_response.tokens_used,
            duration_ms=(response.get("total_duration") or 0) // 1_000_000,
        )

        return llm_response

    def _handle_error(self, error: Exception) -> NoReturn:
        """Convert a client exception into the provider error taxonomy.

        Args:
            error: Original exception

        Raises:
            LLMError: Always
        """
        if isinstance(error, (asyncio.TimeoutError, httpx.TimeoutException)):
            self.logger.error("request_timeout", timeout=self.timeout)
            raise ProviderTimeoutError(
                f"Ollama did not answer within {self.timeout:g} seconds",
                provider=self.name.value,
                original_error=error,
            ) from error

        if isinstance(error, ollama.ResponseError):
            if error.status_code == 404:
                self.logger.error("model_not_found", model=self.model)
                message = (
                    f"Model '{self.model}' not found. "
                    f"Pull it with: ollama pull {self.model}"
                )
            else:
                self.logger.error("api_error", status=error.status_code, error=error.error)
                message = f"Ollama API error: {error.error}"
            raise ProviderError(
                message,
                provider=self.name.value,
                original_error=error,
            ) from error

        if isinstance(error, (ConnectionError, httpx.TransportError)):
            self.logger.error("connection_failed", host=self.host)
            raise ProviderError(
                f"Cannot connect to Ollama at {self.host}. "
                "Is it running? Start with: ollama serve",
                provider=self.name.value,
                original_error=error,
            ) from error

        self.logger.error("unexpected_error", error=str(error))
        raise ProviderError(
            f"Ollama API error: {error}",
            provider=self.name.value,
            original_error=error,
        ) from error

    async def test_connection(self) -> bool:
        """Test the connection to Ollama by listing its models.

        Returns:
            True if connection is successful

        Raises:
            ProviderError: If connection fails
        """
        try:
            await asyncio.wait_for(self.client.list(), timeout=self.timeout)
        except Exception as e:
            self._handle_error(e)
        return True
