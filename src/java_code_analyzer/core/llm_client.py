"""LLM client for the DeepSeek chat-completion API."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from ..config import defaults
from .exceptions import (
    CredentialError,
    RateLimitError,
    TransientUpstreamError,
    UpstreamError,
    UpstreamTimeoutError,
)

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass
class ChatCompletion:
    """Raw model output plus the metadata the HTTP layer passes through."""

    content: str
    usage: dict[str, Any] | None
    model: str
    response_id: str | None
    attempts: int


class LLMClient:
    """Client for an OpenAI-compatible chat-completion endpoint.

    Each call to :meth:`chat_completion` is an independent attempt sequence:

    1. HTTP 401/403 fails immediately with ``CredentialError``
    2. HTTP 429 waits ``base * 2**attempt * multiplier`` and retries
    3. HTTP 5xx, connection errors and timeouts wait ``base * 2**(attempt - 1)``
       and retry
    4. Anything else fails immediately with ``UpstreamError``

    The per-attempt timeout grows with the attempt number up to a cap.
    """

    def __init__(
        self,
        api_key: str,
        model: str = defaults.DEFAULT_MODEL,
        api_url: str = defaults.DEFAULT_API_URL,
        max_tokens: int = defaults.DEFAULT_MAX_TOKENS,
        temperature: float = defaults.DEFAULT_TEMPERATURE,
        max_retries: int = defaults.DEFAULT_MAX_RETRIES,
        base_timeout: float = defaults.BASE_TIMEOUT_SECONDS,
        timeout_increment: float = defaults.TIMEOUT_INCREMENT_SECONDS,
        max_timeout: float = defaults.MAX_TIMEOUT_SECONDS,
        backoff_base: float = defaults.BACKOFF_BASE_SECONDS,
        rate_limit_multiplier: float = defaults.RATE_LIMIT_MULTIPLIER,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """Initialize LLM client.

        Args:
            api_key: Bearer token for the upstream API
            model: Default model id
            api_url: Chat-completion endpoint
            max_tokens: Default completion token budget
            temperature: Default sampling temperature
            max_retries: Default number of attempts per call
            base_timeout: Timeout base in seconds
            timeout_increment: Seconds added per attempt
            max_timeout: Timeout ceiling in seconds
            backoff_base: Base delay for both backoff formulas
            rate_limit_multiplier: Extra factor applied to 429 waits
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
            sleep: Awaitable sleep function, defaults to ``asyncio.sleep``

        Raises:
            CredentialError: If no API key is given
        """
        if not api_key:
            raise CredentialError(
                "DeepSeek API key is not configured. "
                "Please set the DEEPSEEK_API_KEY environment variable.",
                status_code=503,
            )
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.api_key = api_key
        self.model = model
        self.api_url = api_url
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.max_retries = max_retries
        self.base_timeout = base_timeout
        self.timeout_increment = timeout_increment
        self.max_timeout = max_timeout
        self.backoff_base = backoff_base
        self.rate_limit_multiplier = rate_limit_multiplier
        self._transport = transport
        self._sleep = sleep or asyncio.sleep

        logger.debug(
            f"Initialized LLM client with model: {self.model}, "
            f"max_retries: {self.max_retries}"
        )

    def timeout_for_attempt(self, attempt: int) -> float:
        return min(self.base_timeout + attempt * self.timeout_increment, self.max_timeout)

    def rate_limit_delay(self, attempt: int) -> float:
        return self.backoff_base * (2**attempt) * self.rate_limit_multiplier

    def backoff_delay(self, attempt: int) -> float:
        return self.backoff_base * (2 ** (attempt - 1))

    async def chat_completion(
        self,
        messages: list[dict[str, str]],
        max_tokens: int | None = None,
        temperature: float | None = None,
        model: str | None = None,
        max_retries: int | None = None,
    ) -> ChatCompletion:
        """Send messages and return the first choice's content.

        Args:
            messages: List of message dictionaries with role and content
            max_tokens: Override the default token budget
            temperature: Override the default temperature
            model: Override the default model
            max_retries: Override the default attempt budget

        Returns:
            ChatCompletion with content, usage and attempt count

        Raises:
            CredentialError: On HTTP 401/403, without retry
            RateLimitError: When every attempt was rate limited
            TransientUpstreamError: When retries ran out on 5xx/network errors
            UpstreamError: On any other failure, without retry
            ValueError: If the max_retries override is below 1
        """
        budget = self.max_retries if max_retries is None else max_retries
        if budget < 1:
            raise ValueError("max_retries must be at least 1")
        payload = {
            "model": model or self.model,
            "messages": messages,
            "max_tokens": max_tokens if max_tokens is not None else self.max_tokens,
            "temperature": (
                temperature if temperature is not None else self.temperature
            ),
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        last_error: UpstreamError | None = None

        async with httpx.AsyncClient(transport=self._transport) as client:
            for attempt in range(1, budget + 1):
                try:
                    data = await self._post(client, payload, headers, attempt)
                    return self._to_completion(data, payload["model"], attempt)
                except RateLimitError as e:
                    last_error = e
                    delay = self.rate_limit_delay(attempt)
                except TransientUpstreamError as e:
                    last_error = e
                    delay = self.backoff_delay(attempt)

                if attempt >= budget:
                    break

                logger.warning(
                    f"Attempt {attempt}/{budget} failed ({last_error}); "
                    f"retrying in {delay:.1f}s"
                )
                await self._sleep(delay)

        logger.error(f"DeepSeek API failed after {budget} attempts: {last_error}")
        raise last_error or UpstreamError(
            f"DeepSeek API failed after {budget} attempts"
        )

    async def _post(
        self,
        client: httpx.AsyncClient,
        payload: dict[str, Any],
        headers: dict[str, str],
        attempt: int,
    ) -> dict[str, Any]:
        """Issue one POST and classify the outcome."""
        timeout = self.timeout_for_attempt(attempt)
        logger.debug(f"DeepSeek API attempt {attempt} (timeout {timeout:.0f}s)")

        try:
            response = await client.post(
                self.api_url, headers=headers, json=payload, timeout=timeout
            )
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                f"DeepSeek API timed out after {timeout:.0f} seconds",
                context={"attempt": attempt},
            ) from e
        except httpx.TransportError as e:
            raise TransientUpstreamError(
                f"Unable to reach DeepSeek API: {e}",
                context={"attempt": attempt},
            ) from e

        status_code = response.status_code
        context = {"attempt": attempt, "upstream_status": status_code}

        if status_code in (401, 403):
            raise CredentialError(
                "DeepSeek API rejected the API key. "
                "Please check the DEEPSEEK_API_KEY environment variable.",
                context=context,
            )
        if status_code == 429:
            raise RateLimitError(
                "DeepSeek API rate limit exceeded. Please wait and try again.",
                context=context,
            )
        if status_code >= 500:
            raise TransientUpstreamError(
                f"DeepSeek API server error (HTTP {status_code})",
                context=context,
            )
        if not response.is_success:
            raise UpstreamError(
                f"DeepSeek API error (HTTP {status_code}): {response.text[:200]}",
                context=context,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(
                "DeepSeek API returned a non-JSON body", context=context
            ) from e

        if not isinstance(data, dict):
            raise UpstreamError(
                "DeepSeek API returned an unexpected body", context=context
            )
        return data

    def _to_completion(
        self, data: dict[str, Any], model: str, attempt: int
    ) -> ChatCompletion:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError(
                "DeepSeek API response has no message content",
                context={"attempt": attempt},
            ) from e

        if not isinstance(content, str):
            raise UpstreamError(
                "DeepSeek API message content is not text",
                context={"attempt": attempt},
            )

        usage = data.get("usage")
        if attempt > 1:
            logger.info(f"DeepSeek API succeeded on attempt {attempt}")

        return ChatCompletion(
            content=content,
            usage=usage if isinstance(usage, dict) else None,
            model=str(data.get("model") or model),
            response_id=data.get("id"),
            attempts=attempt,
        )
