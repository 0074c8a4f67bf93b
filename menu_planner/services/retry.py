"""Retry with exponential backoff for calls to the AI provider."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from menu_planner.config import Settings
from menu_planner.services.errors import PlannerError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


def is_retryable(error: BaseException) -> bool:
    """Only overload/timeout responses and transport failures are retried."""
    return isinstance(error, PlannerError) and error.retryable


def _describe(error: BaseException) -> str:
    if isinstance(error, PlannerError):
        return error.kind.value
    return type(error).__name__


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try and how long to wait in between."""

    max_attempts: int = 3
    base_delay: float = 1.0  # seconds
    multiplier: float = 2.0
    retryable: Callable[[BaseException], bool] = is_retryable

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
            multiplier=settings.retry_multiplier,
        )

    def retrying(self, sleep: Sleep = asyncio.sleep, label: str = "request") -> AsyncRetrying:
        """A tenacity controller applying this policy."""

        def log_retry(state: RetryCallState) -> None:
            logger.warning(
                "%s attempt %d/%d failed (%s), retrying in %.1fs",
                label,
                state.attempt_number,
                self.max_attempts,
                _describe(state.outcome.exception()),
                state.next_action.sleep,
            )

        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, exp_base=self.multiplier),
            retry=retry_if_exception(self.retryable),
            sleep=sleep,
            before_sleep=log_retry,
            reraise=True,
        )


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    *,
    sleep: Sleep = asyncio.sleep,
    label: str = "request",
) -> T:
    """
    Run ``operation`` until it succeeds or the policy gives up.

    Non-retryable errors propagate on first occurrence. When every attempt
    fails, the error from the last attempt is raised as is.
    """
    policy = policy or RetryPolicy()
    try:
        return await policy.retrying(sleep, label)(operation)
    except PlannerError as e:
        if policy.retryable(e):
            logger.error(
                "%s failed after %d attempts: %s", label, policy.max_attempts, e.user_message
            )
        raise
