"""
Tests for the OpenAI chat-completions client.

HTTP is served by httpx.MockTransport; backoff sleeps are patched out.

Verifies:
- Request shape (URL, auth header, messages, sampling parameters)
- Transient failures (429, 5xx, timeouts) are retried
- Permanent failures (4xx, bad shape, empty text) are not
- The circuit breaker opens after repeated failures
"""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from listsmith.core.exceptions import (
    CircuitBreakerOpenError,
    TextGenerationError,
    TransientTextGenerationError,
)
from listsmith.core.resilience import CircuitBreaker, CircuitState, RetryPolicy
from listsmith.services.text_generation import OpenAITextGenerator

_RealAsyncClient = httpx.AsyncClient


def _completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _serve(*responses):
    """
    Patch httpx.AsyncClient so requests are answered from ``responses``.

    Each entry is an httpx.Response or an exception to raise. Received
    requests are appended to the returned list.
    """
    queue = list(responses)
    received: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        received.append(request)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def client_factory(*args, **kwargs):
        return _RealAsyncClient(*args, transport=httpx.MockTransport(handler), **kwargs)

    patcher = patch(
        "listsmith.services.text_generation.httpx.AsyncClient",
        side_effect=client_factory,
    )
    return patcher, received


@pytest.fixture
def no_sleep():
    with patch("listsmith.core.resilience.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


@pytest.fixture
def generator():
    return OpenAITextGenerator(
        api_key="sk-test",
        model="gpt-4o-mini",
        base_url="https://llm.example.com/v1/",
    )


class TestGenerate:
    """Tests for successful completions."""

    @pytest.mark.asyncio
    async def test_request_shape(self, generator):
        patcher, received = _serve(httpx.Response(200, json=_completion("Hello")))

        with patcher:
            text = await generator.generate(
                "Describe it", system_prompt="Be brief", max_tokens=50, temperature=0.1
            )

        assert text == "Hello"
        request = received[0]
        assert str(request.url) == "https://llm.example.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"

        body = json.loads(request.content)
        assert body == {
            "model": "gpt-4o-mini",
            "messages": [
                {"role": "system", "content": "Be brief"},
                {"role": "user", "content": "Describe it"},
            ],
            "max_tokens": 50,
            "temperature": 0.1,
        }

    @pytest.mark.asyncio
    async def test_system_prompt_omitted_when_empty(self, generator):
        patcher, received = _serve(httpx.Response(200, json=_completion("Hi")))

        with patcher:
            await generator.generate("Describe it")

        body = json.loads(received[0].content)
        assert body["messages"] == [{"role": "user", "content": "Describe it"}]
        assert body["max_tokens"] == 1000
        assert body["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_success_keeps_breaker_closed(self, generator):
        patcher, _ = _serve(httpx.Response(200, json=_completion("Hi")))

        with patcher:
            await generator.generate("x")

        assert generator.breaker.state == CircuitState.CLOSED
        assert generator.breaker.failure_count == 0


class TestRetries:
    """Tests for transient vs permanent failure handling."""

    @pytest.mark.asyncio
    async def test_5xx_retried_then_succeeds(self, generator, no_sleep):
        patcher, received = _serve(
            httpx.Response(503, text="overloaded"),
            httpx.Response(200, json=_completion("Recovered")),
        )

        with patcher:
            assert await generator.generate("x") == "Recovered"

        assert len(received) == 2
        assert no_sleep.await_count == 1

    @pytest.mark.asyncio
    async def test_429_exhausts_retries(self, generator, no_sleep):
        patcher, received = _serve(*[httpx.Response(429) for _ in range(3)])

        with patcher, pytest.raises(TransientTextGenerationError, match="429"):
            await generator.generate("x")

        assert len(received) == 3
        assert generator.breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_timeout_is_transient(self, generator, no_sleep):
        patcher, received = _serve(
            httpx.ReadTimeout("timed out"),
            httpx.Response(200, json=_completion("ok")),
        )

        with patcher:
            assert await generator.generate("x") == "ok"

        assert len(received) == 2

    @pytest.mark.asyncio
    async def test_connect_error_is_transient(self, generator, no_sleep):
        patcher, _ = _serve(*[httpx.ConnectError("refused") for _ in range(3)])

        with patcher, pytest.raises(TransientTextGenerationError, match="transport error"):
            await generator.generate("x")

    @pytest.mark.asyncio
    async def test_4xx_not_retried(self, generator, no_sleep):
        patcher, received = _serve(httpx.Response(400, text="bad request"))

        with patcher, pytest.raises(TextGenerationError) as exc_info:
            await generator.generate("x")

        assert not isinstance(exc_info.value, TransientTextGenerationError)
        assert exc_info.value.details["status"] == 400
        assert exc_info.value.details["response"] == "bad request"
        assert len(received) == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, json={"choices": []}),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json=_completion("   ")),
        ],
    )
    async def test_unusable_reply(self, generator, response):
        patcher, received = _serve(response)

        with patcher, pytest.raises(TextGenerationError):
            await generator.generate("x")

        assert len(received) == 1


class TestCircuitBreaking:
    """Tests for the breaker around each logical call."""

    @pytest.mark.asyncio
    async def test_breaker_opens_and_blocks(self):
        generator = OpenAITextGenerator(
            api_key="sk-test",
            breaker=CircuitBreaker(name="openai", failure_threshold=2, cooldown_seconds=60),
            retry_policy=RetryPolicy(max_retries=0),
        )
        patcher, received = _serve(httpx.Response(401), httpx.Response(401))

        with patcher:
            for _ in range(2):
                with pytest.raises(TextGenerationError):
                    await generator.generate("x")

            with pytest.raises(CircuitBreakerOpenError):
                await generator.generate("x")

        assert len(received) == 2
        assert generator.breaker.state == CircuitState.OPEN
