"""Bounded linear-backoff retry for mutating GitHub calls.

with_retry() runs an operation up to `max_attempts` times. After failed
attempt n it suspends for `base_delay * n` seconds (0.5s, 1.0s, ... with
the defaults) and tries again. When the final attempt fails the
TransportError is surfaced as ApiError.

The loop is explicit: RetryState records the attempt counter and every
delay taken, and the sleep coroutine is injectable so tests can assert
the schedule without waiting. There is no jitter and no circuit breaker.

Only TransportError is retried. asyncio.CancelledError is never caught,
and a cancellation requested while the loop is between attempts is
honoured before the next attempt starts.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, TypeVar

from clambake.github.errors import ApiError
from clambake.github.transport import TransportError


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 0.5

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass
class RetryState:
    """Per-call retry bookkeeping.

    Attributes:
        attempt: The attempt currently running (1-indexed).
        max_attempts: Total attempts allowed.
        delays: Delays slept so far, in seconds, in order.
    """

    attempt: int = 1
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delays: List[float] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts

    def delay_for(self, base_delay: float) -> float:
        """Delay to wait after the current attempt fails."""
        return base_delay * self.attempt


RetryCallback = Callable[[RetryState, TransportError, float], None]


def _raise_if_cancelling() -> None:
    task = asyncio.current_task()
    if task is not None and task.cancelling():
        raise asyncio.CancelledError()


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    sleep: SleepFunc = asyncio.sleep,
    on_retry: Optional[RetryCallback] = None,
    description: str = "GitHub API call",
) -> T:
    """Run `operation`, retrying transport failures with linear backoff.

    Args:
        operation: Zero-argument coroutine function performing one attempt.
        max_attempts: Total attempts, including the first.
        base_delay: Seconds; the delay after attempt n is base_delay * n.
        sleep: Coroutine used to wait between attempts.
        on_retry: Optional callback invoked before each wait with the
                  state, the failure and the delay about to be taken.
        description: Operation name used in log records.

    Returns:
        The operation's result from the first successful attempt.

    Raises:
        ApiError: If every attempt failed with TransportError.
        ValueError: If max_attempts is less than 1.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    state = RetryState(max_attempts=max_attempts)

    while True:
        _raise_if_cancelling()
        try:
            return await operation()
        except TransportError as e:
            if state.exhausted:
                logger.error(
                    "%s failed after %d attempts",
                    description,
                    state.attempt,
                    extra={
                        "attempts": state.attempt,
                        "status_code": e.status_code,
                        "last_error": str(e),
                    },
                )
                raise ApiError(e) from e

            delay = state.delay_for(base_delay)
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %.2fs",
                description,
                state.attempt,
                state.max_attempts,
                delay,
                extra={
                    "attempt": state.attempt,
                    "max_attempts": state.max_attempts,
                    "delay": delay,
                    "status_code": e.status_code,
                },
            )
            if on_retry is not None:
                on_retry(state, e, delay)

            state.delays.append(delay)
            await sleep(delay)
            state.attempt += 1
