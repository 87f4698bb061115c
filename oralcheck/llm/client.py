"""
oralcheck.llm.client - LLM backend abstraction using litellm.

Provides a unified completion interface for OpenAI, Claude, Ollama and
LM Studio. Requests are made exactly once; failures surface as LLMError.
"""

from __future__ import annotations

import logging
from typing import Any

from oralcheck.exceptions import LLMError, LLMResponseError

logger = logging.getLogger(__name__)


class LLMClient:
    """LLM client wrapper with response validation."""

    def __init__(
        self,
        backend: str = "openai",
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.backend = backend
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

    def _get_model_string(self) -> str:
        """Get the model string for litellm based on backend."""
        if self.backend == "ollama":
            return f"ollama/{self.model}"
        elif self.backend == "lmstudio":
            return f"openai/{self.model}"
        elif self.backend == "claude":
            return f"anthropic/{self.model}"
        return self.model

    def _get_api_base(self) -> str | None:
        if self.backend == "ollama":
            return "http://localhost:11434"
        elif self.backend == "lmstudio":
            return "http://localhost:1234/v1"
        return None

    def complete(
        self,
        prompt: str,
        max_tokens: int = 200,
        temperature: float = 0.7,
    ) -> str:
        """Send prompt to the LLM and return the completion text.

        Args:
            prompt: The prompt string
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature

        Returns:
            LLM response text

        Raises:
            LLMResponseError: If the response has no usable content
            LLMError: If the provider request fails
        """
        import litellm

        litellm.telemetry = False

        kwargs: dict[str, Any] = {
            "model": self._get_model_string(),
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.timeout:
            kwargs["timeout"] = self.timeout
        api_base = self._get_api_base()
        if api_base:
            kwargs["api_base"] = api_base

        try:
            response = litellm.completion(**kwargs)
        except Exception as e:
            logger.error("LLM request to %s failed: %s", kwargs["model"], e)
            raise LLMError(str(e)) from e

        choices = getattr(response, "choices", None)
        if not choices:
            raise LLMResponseError("Empty response from LLM")

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None) if message is not None else None
        if content is None:
            content = getattr(choices[0], "text", None)
        if content is None:
            raise LLMResponseError("No content in LLM response")

        return content


def create_client_from_config(config: Any) -> LLMClient:
    """Create LLM client from OralCheckConfig."""
    return LLMClient(
        backend=config.llm_backend,
        model=config.question_model,
        api_key=config.api_key,
        timeout=config.llm_timeout,
    )
