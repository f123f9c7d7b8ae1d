"""
Retry policy implementation.

A RetryPolicy wraps any async operation: it runs the operation, asks its
predicate whether a failure is retryable, waits the backoff delay and tries
again until the configured number of retries is used up.
"""

import asyncio
import dataclasses
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from depinstall.cancellation import sleep_cancellable, throw_if_cancelled
from depinstall.depinstall_config import RetrySettings
from depinstall.depinstall_exceptions import ConfigurationException, DependencyException
from depinstall.depinstall_logger import DepInstallLogger

T = TypeVar("T")

RetryPredicate = Callable[[BaseException], bool]
BackoffFunction = Callable[[int], float]

DEFAULT_RETRIES = 5
DEFAULT_BACKOFF_SECONDS = 2.0


def default_retry_predicate(exc: BaseException) -> bool:
    """Every failure is retryable except a missing required package or bad configuration."""
    if isinstance(exc, DependencyException) and exc.is_permanent:
        return False
    return not isinstance(exc, ConfigurationException)


class RetryPolicy:
    """
    Executes an async operation with retries.

    Example usage:
    ```python
    policy = RetryPolicy.handle(lambda exc: True).wait_and_retry(3, lambda attempt: 0)
    result = await policy.execute(operation)
    ```
    """

    def __init__(
        self,
        retries: int = DEFAULT_RETRIES,
        backoff: Optional[BackoffFunction] = None,
        predicate: Optional[RetryPredicate] = None,
        logger: Optional[DepInstallLogger] = None,
    ):
        """
        Args:
            retries: Number of retries after the first attempt
            backoff: Maps the retry number (1-based) to a delay in seconds
            predicate: Decides whether a failure is retryable
            logger: Logger for retry messages
        """
        if retries < 0:
            raise ValueError("retries must not be negative")

        self.retries = retries
        self.backoff = backoff or (lambda attempt: attempt * DEFAULT_BACKOFF_SECONDS)
        self.predicate = predicate or default_retry_predicate
        self.logger = logger or DepInstallLogger()

    @classmethod
    def no_op(cls) -> "RetryPolicy":
        """A policy that runs the operation exactly once."""
        return cls(retries=0, backoff=lambda attempt: 0.0)

    @classmethod
    def handle(cls, predicate: RetryPredicate) -> "_RetryPolicyBuilder":
        """Start building a policy that retries the failures `predicate` accepts."""
        return _RetryPolicyBuilder(predicate)

    @classmethod
    def from_settings(
        cls, settings: RetrySettings, logger: Optional[DepInstallLogger] = None
    ) -> "RetryPolicy":
        """Build a policy retrying `settings.retries` times, waiting n * backoff_seconds before retry n."""
        backoff_seconds = settings.backoff_seconds
        return cls(
            retries=settings.retries,
            backoff=lambda attempt: attempt * backoff_seconds,
            logger=logger,
        )

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        cancellation: Optional[asyncio.Event] = None,
    ) -> T:
        """
        Run the operation until it succeeds, fails with a non-retryable error
        or runs out of retries.

        Args:
            operation: Zero-argument callable returning a fresh awaitable per attempt
            cancellation: Signal that stops the policy between and during attempts

        Returns:
            The operation's result

        Raises:
            The last failure once retries are exhausted, any non-retryable failure
            immediately, and asyncio.CancelledError when cancelled.
        """
        result = await self.execute_and_capture(operation, cancellation)
        if result.final_exception is not None:
            raise result.final_exception
        return result.result

    async def execute_and_capture(
        self,
        operation: Callable[[], Awaitable[T]],
        cancellation: Optional[asyncio.Event] = None,
    ) -> "PolicyResult[T]":
        """
        Like `execute`, but a final failure is returned in the PolicyResult
        instead of being raised. Cancellation is still raised.
        """
        attempt = 0
        while True:
            throw_if_cancelled(cancellation)
            attempt += 1
            try:
                return PolicyResult(attempts=attempt, result=await operation())
            except Exception as exc:
                if not self.predicate(exc):
                    return PolicyResult(
                        attempts=attempt, final_exception=exc, exception_handled=False
                    )

                if attempt > self.retries:
                    self.logger.log(
                        f"Giving up after {attempt} attempts: {str(exc)}",
                        logging.ERROR,
                    )
                    return PolicyResult(
                        attempts=attempt, final_exception=exc, exception_handled=True
                    )

                delay = self.backoff(attempt)
                self.logger.log(
                    f"Attempt {attempt} failed, retrying in {delay}s: {str(exc)}",
                    logging.WARNING,
                )

            await sleep_cancellable(delay, cancellation)


@dataclasses.dataclass
class PolicyResult(Generic[T]):
    """
    Outcome of RetryPolicy.execute_and_capture.

    `exception_handled` tells whether the final failure was one the policy
    retries (retries ran out) or one it rejected outright.
    """

    attempts: int
    result: Optional[T] = None
    final_exception: Optional[Exception] = None
    exception_handled: bool = False

    @property
    def succeeded(self) -> bool:
        return self.final_exception is None


class _RetryPolicyBuilder:
    def __init__(self, predicate: RetryPredicate):
        self.predicate = predicate

    def wait_and_retry(
        self, retries: int, backoff: BackoffFunction, logger: Optional[DepInstallLogger] = None
    ) -> RetryPolicy:
        return RetryPolicy(
            retries=retries, backoff=backoff, predicate=self.predicate, logger=logger
        )
