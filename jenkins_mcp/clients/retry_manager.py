"""
Retry Manager Module

Implements exponential backoff retry logic for HTTP requests.

The retry loop never raises for a failed attempt: it returns an
AttemptResult holding either the final response or the final error,
and leaves classification to the caller.
"""

import asyncio
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, FrozenSet, Optional

import httpx
from loguru import logger

from jenkins_mcp.core.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_INITIAL_BACKOFF,
    DEFAULT_MAX_BACKOFF,
    DEFAULT_BACKOFF_MULTIPLIER,
    RETRYABLE_STATUS_CODES,
)


@dataclass
class RetryConfig:
    """
    Configuration for retry logic.

    Attributes:
        max_retries: Maximum number of retry attempts
        initial_backoff: Base backoff delay in seconds (also the jitter range)
        max_backoff: Maximum backoff delay in seconds
        backoff_multiplier: Multiplier for exponential backoff
        retryable_status_codes: HTTP status codes that should trigger retry
    """
    max_retries: int = DEFAULT_MAX_RETRIES
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF
    max_backoff: float = DEFAULT_MAX_BACKOFF
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER
    retryable_status_codes: FrozenSet[int] = field(default_factory=lambda: RETRYABLE_STATUS_CODES)


@dataclass
class AttemptResult:
    """
    Final outcome of a retried request.

    Exactly one of ``response`` and ``error`` is set.

    Attributes:
        response: Last response received (any status)
        error: Transport error or timeout from the last attempt
        attempts: Number of attempts made
    """
    response: Optional[httpx.Response] = None
    error: Optional[BaseException] = None
    attempts: int = 0


def is_timeout(error: BaseException) -> bool:
    """Whether an attempt failure is a timeout (never retried)."""
    return isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError))


class RetryManager:
    """
    Manages retry logic with exponential backoff.

    Features:
    - Exponential backoff with additive jitter, capped at max_backoff
    - Retries on 429/5xx responses and connection errors
    - Timeouts are returned immediately, never retried
    - Injectable sleep and random source for deterministic tests

    Example:
        >>> retry_manager = RetryManager(RetryConfig(max_retries=2))
        >>> result = await retry_manager.execute(send_request, description="GET /api/json")
        >>> result.response.status_code
        200
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        random_source: Callable[[], float] = random.random
    ):
        """
        Initialize retry manager.

        Args:
            config: Retry configuration (uses defaults if not provided)
            sleep: Coroutine function used to wait between attempts
            random_source: Returns a float in [0, 1) for jitter
        """
        self.config = config or RetryConfig()
        self._sleep = sleep
        self._random = random_source

    def calculate_backoff(self, attempt: int) -> float:
        """
        Calculate backoff delay for a retry attempt.

        delay = min(initial * multiplier^attempt + initial * random(), max)

        Args:
            attempt: Retry attempt number (0-indexed)

        Returns:
            Backoff delay in seconds

        Example:
            >>> delay = retry_manager.calculate_backoff(2)
            >>> # Between 4 and 5 seconds with the default 1s base
        """
        exponential = self.config.initial_backoff * (self.config.backoff_multiplier ** attempt)
        jitter = self.config.initial_backoff * self._random()

        return min(exponential + jitter, self.config.max_backoff)

    def should_retry(
        self,
        attempt: int,
        status_code: Optional[int] = None,
        error: Optional[BaseException] = None
    ) -> bool:
        """
        Determine if an attempt should be retried.

        Args:
            attempt: Current attempt number (0-indexed)
            status_code: HTTP status code of the response, if any
            error: Exception raised by the attempt, if any

        Returns:
            True if should retry, False otherwise
        """
        if attempt >= self.config.max_retries:
            return False

        if error is not None:
            if is_timeout(error):
                return False
            return isinstance(error, (httpx.TransportError, ConnectionError))

        return status_code in self.config.retryable_status_codes

    async def execute(
        self,
        send: Callable[[], Awaitable[httpx.Response]],
        description: str = "request"
    ) -> AttemptResult:
        """
        Run ``send`` until it succeeds, fails permanently, or retries run out.

        Cancellation of the calling task propagates out of ``send`` or the
        backoff sleep and abandons the remaining attempts.

        Args:
            send: Coroutine function performing exactly one attempt
            description: Label for log lines (e.g. "GET https://...")

        Returns:
            AttemptResult with the last response or the last error
        """
        attempt = 0

        while True:
            try:
                response = await send()
            except Exception as e:
                if not self.should_retry(attempt, error=e):
                    if is_timeout(e):
                        logger.warning(f"Timeout for {description} on attempt {attempt + 1}, not retrying")
                    elif attempt > 0:
                        logger.error(
                            f"All {self.config.max_retries} retry attempts failed for {description}: "
                            f"{type(e).__name__}: {e}"
                        )
                    return AttemptResult(error=e, attempts=attempt + 1)

                delay = self.calculate_backoff(attempt)
                logger.warning(
                    f"Network error for {description}, retrying in {delay:.2f}s "
                    f"(attempt {attempt + 1}/{self.config.max_retries}): {type(e).__name__}: {e}"
                )
            else:
                if not self.should_retry(attempt, status_code=response.status_code):
                    return AttemptResult(response=response, attempts=attempt + 1)

                delay = self.calculate_backoff(attempt)
                logger.warning(
                    f"Retryable HTTP {response.status_code} for {description}, retrying in {delay:.2f}s "
                    f"(attempt {attempt + 1}/{self.config.max_retries})"
                )

            await self._sleep(delay)
            attempt += 1
