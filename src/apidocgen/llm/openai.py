"""OpenAI provider for documentation generation.

This module implements the hosted-completion backend: a chat-style request
(system instruction plus user prompt) sent to the OpenAI API with bearer
token authentication.
"""

from __future__ import annotations

from typing import Any, NoReturn

import openai
from openai import AsyncOpenAI

from apidocgen.core.prompt import SYSTEM_PROMPT
from apidocgen.llm.base import (
    AuthenticationError,
    BaseLLMProvider,
    LLMConfig,
    LLMProviderName,
    LLMResponse,
    ProviderError,
    ProviderTimeoutError,
)


class OpenAIProvider(BaseLLMProvider):
    """LLM provider for OpenAI chat models.

    The client is only built when a credential is configured. Without one,
    :meth:`complete` raises :class:`AuthenticationError` before any request
    is attempted. No explicit timeout is set unless configured, so the SDK
    default applies.

    Attributes:
        config: LLM configuration
        client: OpenAI async client, or None without a credential
    """

    name = LLMProviderName.OPENAI
    default_model = "gpt-4"

    def __init__(self, config: LLMConfig) -> None:
        """Initialize OpenAI provider.

        Args:
            config: LLM configuration with OpenAI settings
        """
        super().__init__(config)

        self.client: AsyncOpenAI | None = None
        api_key = (config.api_key or "").strip()

        if api_key:
            client_kwargs: dict[str, Any] = {
                "api_key": api_key,
                "max_retries": 0,
            }
            if config.base_url:
                client_kwargs["base_url"] = config.base_url
            if config.timeout:
                client_kwargs["timeout"] = config.timeout

            self.client = AsyncOpenAI(**client_kwargs)

        self.logger.info("openai_provider_initialized", has_credentials=bool(api_key))

    async def complete(self, prompt: str, **kwargs: Any) -> LLMResponse:
        """Generate a completion using the OpenAI chat API.

        Args:
            prompt: Input prompt
            **kwargs: Additional parameters for the API call

        Returns:
            LLM response with the first choice's text

        Raises:
            AuthenticationError: If no API key is configured or it is rejected
            ProviderTimeoutError: If the request timed out
            ProviderError: For any other API or transport failure
        """
        if self.client is None:
            self.logger.error("missing_credentials")
            raise AuthenticationError(
                "API key is required for the openai provider",
                provider=self.name.value,
            )

        params = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
            **self.config.additional_params,
            **kwargs,
        }

        self.logger.debug("api_request", model=params["model"], prompt_chars=len(prompt))

        try:
            response = await self.client.chat.completions.create(**params)
        except Exception as e:
            self._handle_error(e)

        if not response.choices:
            self.logger.error("empty_choices")
            raise ProviderError(
                "OpenAI returned no completion choices",
                provider=self.name.value,
            )

        choice = response.choices[0]
        llm_response = LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            tokens_used=response.usage.total_tokens if response.usage else None,
            finish_reason=choice.finish_reason,
            metadata={
                "id": response.id,
                "created": response.created,
            },
        )

        self.logger.info(
            "completion_success",
            tokens=llm_response.tokens_used,
            finish_reason=llm_response.finish_reason,
        )

        return llm_response

    def _handle_error(self, error: Exception) -> NoReturn:
        """Convert an SDK exception into the provider error taxonomy.

        Args:
            error: Original exception

        Raises:
            LLMError: Always
        """
        if isinstance(error, openai.APITimeoutError):
            self.logger.error("request_timeout")
            raise ProviderTimeoutError(
                f"OpenAI request timed out: {error}",
                provider=self.name.value,
                original_error=error,
            ) from error

        if isinstance(error, openai.AuthenticationError):
            self.logger.error("authentication_failed")
            raise AuthenticationError(
                "OpenAI authentication failed. Check your API key.",
                provider=self.name.value,
                original_error=error,
            ) from error

        if isinstance(error, openai.APIError):
            self.logger.error("api_error", error=str(error))
            raise ProviderError(
                f"OpenAI API error: {error}",
                provider=self.name.value,
                original_error=error,
            ) from error

        self.logger.error("unexpected_error", error=str(error))
        raise ProviderError(
            f"Unexpected error: {error}",
            provider=self.name.value,
            original_error=error,
        ) from error
