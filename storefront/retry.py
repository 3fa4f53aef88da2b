import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class AttemptTimeoutError(Exception):
    """Exception raised when a single attempt exceeds the policy timeout."""
    pass


class RetryExhaustedError(Exception):
    """Exception raised when every attempt allowed by a policy has failed."""

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Gave up after {attempts} attempt(s): {last_error}")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry policy with a per-attempt timeout and a fixed backoff.

    Attributes:
        max_attempts: Total number of attempts, including the first one
        timeout: Seconds each attempt may run before it is abandoned
        backoff: Seconds to wait between two failed attempts
    """
    max_attempts: int = 3
    timeout: float = 15.0
    backoff: float = 2.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.timeout < 0 or self.backoff < 0:
            raise ValueError("timeout and backoff must be non-negative")


async def retry_with_timeout(
    operation: Callable[[], Awaitable[Any]],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    on_failure: Optional[Callable[[int, BaseException], None]] = None,
) -> Any:
    """
    Run an async operation until it succeeds or the policy is exhausted.

    Each attempt is raced against ``policy.timeout``; a timeout cancels that
    attempt only. Failed attempts are followed by ``sleep(policy.backoff)``
    unless they were the last one.

    Args:
        operation: Zero-argument callable returning an awaitable
        policy: Retry policy to apply
        sleep: Coroutine used for the backoff wait
        on_failure: Optional callback invoked with (attempt, error)

    Returns:
        Result of the first successful attempt

    Raises:
        RetryExhaustedError: If every attempt failed or timed out
    """
    last_error: Optional[BaseException] = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await asyncio.wait_for(operation(), timeout=policy.timeout)
        except asyncio.TimeoutError:
            last_error = AttemptTimeoutError(
                f"Attempt {attempt} timed out after {policy.timeout}s"
            )
        except Exception as e:
            last_error = e

        if on_failure is not None:
            on_failure(attempt, last_error)

        if attempt < policy.max_attempts:
            logger.debug(f"Retrying in {policy.backoff} seconds...")
            await sleep(policy.backoff)

    raise RetryExhaustedError(policy.max_attempts, last_error)
