"""
Retry and pacing policy for route detail requests.

Kept apart from the HTTP code so attempts and delays can be tested
without a network (inject a fake ``sleep``).
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

logger = structlog.get_logger(__name__)


# Request-level failures: network errors, timeouts, non-2xx
RETRYABLE_ERRORS = (httpx.HTTPError,)


@dataclass
class RetryPolicy:
    """
    Fixed-delay retry plus inter-request pacing.

    Attributes:
        attempts: Total attempts per request (first try included)
        retry_delay: Seconds to wait between failed attempts
        pacing_delay: Seconds to wait between successive requests
        sleep: Async sleep function
    """
    attempts: int = 3
    retry_delay: float = 2.0
    pacing_delay: float = 1.5
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep, repr=False)

    def __post_init__(self):
        if self.attempts < 1:
            raise ValueError(f"attempts must be at least 1, got {self.attempts}")

    def _log_retry(self, retry_state: RetryCallState) -> None:
        """Log a failed attempt before waiting for the next one."""
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "request_retry",
            attempt=retry_state.attempt_number,
            attempts=self.attempts,
            delay=self.retry_delay,
            error=str(error),
        )

    async def call(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """
        Await func until it succeeds or attempts run out.

        Raises:
            The last error once every attempt has failed
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_fixed(self.retry_delay),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            sleep=self.sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )
        return await retrying(func, *args, **kwargs)

    async def pause(self) -> None:
        """Wait out the pacing delay between two requests."""
        await self.sleep(self.pacing_delay)
