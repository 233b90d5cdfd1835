from __future__ import annotations

from collections.abc import Awaitable, Callable

import anyio
from attrs import define, field
from loguru import logger

from post_switch.schema import CommandResult

from .schema import RetryPolicy

type Sleep = Callable[[float], Awaitable[None]]


def _command_succeeded(result: CommandResult) -> bool:
    return result.success


@define
class Retrier:
    """Retries failing operations with exponential backoff."""

    policy: RetryPolicy = field(factory=RetryPolicy)
    sleep: Sleep = anyio.sleep

    async def retry(
        self,
        operation: Callable[[], Awaitable[CommandResult]],
        *,
        description: str,
        succeeded: Callable[[CommandResult], bool] = _command_succeeded,
    ) -> CommandResult:
        """
        Invoke ``operation`` until it succeeds or the policy is exhausted.

        Returns the first successful result, or the last failing one when
        every attempt failed.
        """
        delays = self.policy.delays()
        attempt = 1
        while True:
            result = await operation()
            if succeeded(result):
                return result

            delay = next(delays, None)
            if delay is None:
                logger.warning(
                    "{} failed after {} attempt(s) (exit {})",
                    description,
                    attempt,
                    result.exit_code,
                )
                return result

            logger.warning(
                "{} attempt {} failed (exit {}). Retrying in {}ms",
                description,
                attempt,
                result.exit_code,
                round(delay * 1000),
            )
            await self.sleep(delay)
            attempt += 1

    async def until(
        self, check: Callable[[], Awaitable[bool]], *, description: str
    ) -> bool:
        """Boolean variant of :meth:`retry`; ``False`` means exhausted."""
        delays = self.policy.delays()
        attempt = 1
        while not await check():
            delay = next(delays, None)
            if delay is None:
                logger.warning(
                    "{} failed after {} attempt(s)", description, attempt
                )
                return False

            logger.warning(
                "{} attempt {} failed. Retrying in {}ms",
                description,
                attempt,
                round(delay * 1000),
            )
            await self.sleep(delay)
            attempt += 1
        return True
