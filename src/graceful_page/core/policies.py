"""Retry policy shared by navigation and generic page operations."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from .types import ErrorCallback, RecoveryAction

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackoffRequested(Exception):
    """Raised by an attempt to ask for a server-dictated pause before the next try."""

    def __init__(self, delay_ms: float):
        super().__init__(f"Backoff requested for {delay_ms:.0f}ms")
        self.delay_ms = delay_ms


async def sleep_ms(delay_ms: float) -> None:
    """Sleep for a number of milliseconds (negative values don't wait)."""
    await asyncio.sleep(max(delay_ms, 0) / 1000)


class RetryPolicy:
    """Unbounded retry loop driven by an error classifier.

    The loop only ends when the operation succeeds or the classifier calls
    an error NON_RETRYABLE, in which case the original exception is
    re-raised unchanged.

    Usage::

        policy = RetryPolicy(
            classify=classify_operation_error,
            retry_interval_ms=5000,
            on_error=print,
            restart=handle.restart,
        )
        result = await policy.run(lambda: handle.goto(url))
    """

    def __init__(
        self,
        classify: Callable[[BaseException], RecoveryAction],
        retry_interval_ms: int,
        on_error: ErrorCallback,
        restart: Callable[[], Awaitable[Any]],
    ):
        """Initialize retry policy.

        Args:
            classify: Maps a caught exception to a recovery action
            retry_interval_ms: Pause after a recovered error
            on_error: Called with every recovered error
            restart: Replaces the underlying page
        """
        self.classify = classify
        self.retry_interval_ms = retry_interval_ms
        self.on_error = on_error
        self.restart = restart

    async def run(self, operation: Callable[[], T | Awaitable[T]]) -> T:
        """Run ``operation`` until it succeeds or fails for good.

        Args:
            operation: Zero-argument callable, sync or async. It is invoked
                from scratch on every attempt.

        Returns:
            The operation's result

        Raises:
            Exception: The first error classified NON_RETRYABLE
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                result = operation()
                if inspect.isawaitable(result):
                    result = await result
                return result  # type: ignore[return-value]

            except BackoffRequested as backoff:
                logger.info(f"Attempt {attempt} asked to back off for {backoff.delay_ms:.0f}ms")
                await sleep_ms(backoff.delay_ms)
                continue

            except Exception as e:
                action = self.classify(e)
                if action is RecoveryAction.NON_RETRYABLE:
                    raise

                self.on_error(e)

                if action is RecoveryAction.RESTART:
                    logger.warning(f"Attempt {attempt} failed, restarting page: {e}")
                    await self.restart()
                else:
                    logger.debug(f"Attempt {attempt} failed, retrying in place: {e}")

                await sleep_ms(self.retry_interval_ms)
