from __future__ import annotations

from attrs import define, field
from loguru import logger

from post_switch.process import ProcessWatcher
from post_switch.privilege import CommandExecutor
from post_switch.retry import Retrier
from post_switch.schema import CommandResult

from .model import AppTarget, LifecycleOutcome, LifecycleState

# pkill: 0 = signalled, 1 = nothing matched
_PKILL_OK = frozenset({0, 1})


def _signal_delivered(result: CommandResult) -> bool:
    return result.exit_code in _PKILL_OK


@define
class AppLifecycleController:
    """Quit, wait for exit, force-kill if needed, then relaunch an app."""

    target: AppTarget
    executor: CommandExecutor
    watcher: ProcessWatcher = field(factory=ProcessWatcher)
    retrier: Retrier = field(factory=Retrier)

    exit_timeout: float = 10.0
    """Seconds to wait for a graceful exit before forcing termination."""

    kill_timeout: float = 5.0
    """Seconds to wait for the process to vanish after a forced kill."""

    _outcome: LifecycleOutcome = field(init=False, factory=LifecycleOutcome)

    async def restart(self) -> LifecycleOutcome:
        self._outcome = LifecycleOutcome()
        self._enter(LifecycleState.RUNNING)
        name = self.target.name

        logger.info("Attempting to quit {}...", name)
        self._enter(LifecycleState.QUIT_REQUESTED)
        quit_result = await self.retrier.retry(
            self._send_quit,
            description=f"Quit {name}",
            succeeded=_signal_delivered,
        )
        if not _signal_delivered(quit_result):
            logger.warning("Failed to send quit to {} after retries", name)

        logger.info("Waiting for {} to exit completely...", name)
        self._enter(LifecycleState.WAITING_FOR_EXIT)
        exited = await self.watcher.wait_for_disappearance(
            self.target.process_name, self.exit_timeout
        )
        if not exited:
            await self._force_kill()

        await self._relaunch()
        return self._outcome

    async def _send_quit(self) -> CommandResult:
        return await self.executor.run_direct("pkill", "-x", self.target.process_name)

    async def _force_kill(self) -> None:
        name = self.target.name
        logger.warning("{} did not exit in time; forcing termination...", name)
        self._enter(LifecycleState.FORCE_KILL_REQUESTED)
        self._outcome.forced = True

        await self.executor.run_direct("pkill", "-9", "-x", self.target.process_name)
        gone = await self.watcher.wait_for_disappearance(
            self.target.process_name, self.kill_timeout
        )
        if not gone:
            logger.warning("{} is still running after forced termination", name)

    async def _relaunch(self) -> None:
        name = self.target.name
        logger.info("Restarting {}...", name)
        self._enter(LifecycleState.RELAUNCHING)

        launch = await self.executor.run(*self.target.launch_args())
        self._outcome.launch = launch
        self._outcome.success = launch.success
        self._enter(LifecycleState.DONE)

        if launch.success:
            logger.info("{} has been restarted.", name)
        else:
            logger.warning("Failed to restart {}: {}", name, launch.output)

    def _enter(self, state: LifecycleState) -> None:
        logger.debug("{}: {}", self.target.name, state.value)
        self._outcome.states.append(state)
