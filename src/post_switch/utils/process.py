from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

import anyio
from loguru import logger

from post_switch.schema import CommandResult

COMMAND_NOT_FOUND = 127
TIMED_OUT = -1


class CommandRunner(Protocol):
    async def __call__(
        self,
        command: str,
        *args: str,
        env: Mapping[str, str] | None = None,
        input: str | None = None,
        timeout: float | None = None,
    ) -> CommandResult: ...


async def run_process(
    command: str,
    *args: str,
    env: Mapping[str, str] | None = None,
    input: str | None = None,
    timeout: float | None = None,
    encoding: str = "utf-8",
) -> CommandResult:
    """Runs a process and returns its result including stdout and stderr.

    Non-zero exits are returned, never raised. A missing executable becomes
    exit code 127 and an elapsed ``timeout`` becomes exit code -1.
    """
    argv = [command, *args]
    logger.debug("Running: {}", " ".join(argv))

    try:
        with anyio.move_on_after(timeout) as scope:
            result = await anyio.run_process(
                argv,
                input=input.encode(encoding) if input else None,
                env=dict(env) if env is not None else None,
                check=False,
            )
    except FileNotFoundError:
        return CommandResult(
            exit_code=COMMAND_NOT_FOUND,
            stderr=f"command not found: {command}",
        )

    if scope.cancelled_caught:
        return CommandResult(
            exit_code=TIMED_OUT,
            stderr=f"{command} timed out after {timeout}s",
        )

    return CommandResult(
        exit_code=result.returncode,
        stdout=result.stdout.decode(encoding, errors="replace"),
        stderr=result.stderr.decode(encoding, errors="replace"),
    )
