from __future__ import annotations

from collections.abc import Awaitable, Callable

import anyio
from attrs import define
from loguru import logger

from post_switch.schema import CommandResult
from post_switch.utils.process import run_process

DEFAULT_POLL_INTERVAL = 0.1


@define
class ProcessWatcher:
    """Polls the process table for a process by exact name."""

    runner: Callable[..., Awaitable[CommandResult]] = run_process
    interval: float = DEFAULT_POLL_INTERVAL
    clock: Callable[[], float] = anyio.current_time
    sleep: Callable[[float], Awaitable[None]] = anyio.sleep

    async def is_running(self, process_name: str) -> bool:
        # pgrep exits non-zero when nothing matches; a failing or missing
        # pgrep is read the same way.
        result = await self.runner("pgrep", "-x", process_name)
        return result.success

    async def wait_for_disappearance(self, process_name: str, timeout: float) -> bool:
        """
        Wait until no process named ``process_name`` exists.

        Returns:
            True as soon as the process is absent, False if it is still
            present once ``timeout`` seconds have elapsed.
        """
        start = self.clock()
        while await self.is_running(process_name):
            if self.clock() - start >= timeout:
                logger.debug("{} still running after {}s", process_name, timeout)
                return False
            await self.sleep(self.interval)
        return True
