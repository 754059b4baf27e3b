"""
OpenAI-compatible chat-completions client.

Every prompt in ListSmith goes through OpenAITextGenerator.generate().
One logical call is one circuit-breaker attempt; inside it, transient
failures (timeouts, transport errors, 429, 5xx) are retried with backoff.

Usage:
    generator = OpenAITextGenerator(api_key="sk-...", model="gpt-4o-mini")
    text = await generator.generate("Describe ...", system_prompt="You are ...")
"""

import logging

import httpx

from listsmith.core.exceptions import TextGenerationError, TransientTextGenerationError
from listsmith.core.interfaces import ITextGenerator
from listsmith.core.resilience import CircuitBreaker, RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class OpenAITextGenerator(ITextGenerator):
    """Text generator backed by the ``/chat/completions`` endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        breaker: CircuitBreaker | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        self._api_key = api_key
        self.model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self.breaker = breaker or CircuitBreaker(name="openai")
        self._retry_policy = retry_policy or RetryPolicy(
            retryable_exceptions=(TransientTextGenerationError,),
        )

    def _get_headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def generate(
        self,
        prompt: str,
        system_prompt: str = "",
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        async with self.breaker:
            return await self._retry_policy.run(self._complete, payload)

    async def _complete(self, payload: dict) -> str:
        """POST one completion request and return the first choice's text."""
        url = f"{self._base_url}/chat/completions"

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, headers=self._get_headers(), json=payload)
        except httpx.TimeoutException as e:
            raise TransientTextGenerationError(
                f"OpenAI request timed out after {self._timeout:.0f}s",
                details={"model": self.model},
            ) from e
        except httpx.TransportError as e:
            raise TransientTextGenerationError(
                f"OpenAI transport error: {e}",
                details={"model": self.model},
            ) from e

        if response.status_code == 429 or response.status_code >= 500:
            raise TransientTextGenerationError(
                f"OpenAI API error: {response.status_code}",
                details={"status": response.status_code, "model": self.model},
            )

        if response.status_code != 200:
            raise TextGenerationError(
                f"OpenAI API error: {response.status_code}",
                details={
                    "status": response.status_code,
                    "model": self.model,
                    "response": response.text[:500],
                },
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise TextGenerationError(
                "OpenAI returned an unexpected response shape",
                details={"model": self.model},
            ) from e

        if not content or not content.strip():
            raise TextGenerationError(
                "OpenAI returned an empty completion",
                details={"model": self.model},
            )

        logger.debug(f"OpenAI completion: {len(content)} chars from {self.model}")
        return content
