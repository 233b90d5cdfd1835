from __future__ import annotations

import os
from collections.abc import Callable, Mapping

from attrs import define, field
from loguru import logger

from post_switch.schema import CommandResult
from post_switch.utils.process import CommandRunner, run_process

from .context import PrivilegeContext

USER_SESSION_COMMAND = ("launchctl", "asuser")


def running_as_root() -> bool:
    return os.geteuid() == 0


@define
class CommandExecutor:
    """
    Runs commands under a resolved privilege context.

    When this process is elevated and the acting user's uid is known,
    :meth:`run` re-dispatches through the user-session facility so the command
    lands in that user's session rather than root's. Otherwise it executes
    directly. Both paths use the context environment.
    """

    context: PrivilegeContext
    runner: CommandRunner = run_process
    is_elevated: Callable[[], bool] = running_as_root
    session_command: tuple[str, ...] = field(default=USER_SESSION_COMMAND)

    def dispatches_to_user(self) -> bool:
        return self.is_elevated() and self.context.numeric_user_id is not None

    async def run(self, command: str, *args: str) -> CommandResult:
        if not self.dispatches_to_user():
            return await self.run_direct(command, *args)

        launcher, *launcher_args = self.session_command
        uid = str(self.context.numeric_user_id)
        logger.debug("Dispatching {} to the session of uid {}", command, uid)
        return await self.runner(
            launcher,
            *launcher_args,
            uid,
            command,
            *args,
            env=self.context.environment,
        )

    async def run_direct(
        self,
        command: str,
        *args: str,
        env_overrides: Mapping[str, str] | None = None,
    ) -> CommandResult:
        env = dict(self.context.environment)
        if env_overrides:
            env.update(env_overrides)
        return await self.runner(command, *args, env=env)
