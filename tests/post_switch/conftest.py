from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

import pytest
from attrs import define, field
from loguru import logger

from post_switch.privilege import CommandExecutor, PrivilegeContext
from post_switch.schema import CommandResult

OK = CommandResult(exit_code=0)


@define
class FakeRunner:
    """Scripted stand-in for ``run_process``; matches calls by argv prefix."""

    calls: list[tuple[str, ...]] = field(factory=list)
    envs: list[Mapping[str, str] | None] = field(factory=list)
    _scripts: list[tuple[tuple[str, ...], list[CommandResult]]] = field(factory=list)

    def script(
        self, *prefix: str, results: CommandResult | Iterable[CommandResult]
    ) -> None:
        """Queue results for calls starting with ``prefix``; the last one repeats."""
        queue = [results] if isinstance(results, CommandResult) else list(results)
        self._scripts.append((prefix, queue))

    def called(self, *prefix: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[: len(prefix)] == prefix]

    async def __call__(
        self,
        command: str,
        *args: str,
        env: Mapping[str, str] | None = None,
        input: str | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        argv = (command, *args)
        self.calls.append(argv)
        self.envs.append(env)
        for prefix, queue in self._scripts:
            if argv[: len(prefix)] == prefix:
                return queue.pop(0) if len(queue) > 1 else queue[0]
        return OK


@define
class FakeClock:
    """Virtual time: ``sleep`` advances ``now`` instantly."""

    now: float = 0.0
    sleeps: list[float] = field(factory=list)

    def time(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def context():
    return PrivilegeContext(
        acting_user="alice",
        home_directory=Path("/Users/alice"),
        numeric_user_id=501,
        environment={"HOME": "/Users/alice", "USER": "alice", "PATH": "/usr/bin"},
    )


@pytest.fixture
def executor(context, runner):
    return CommandExecutor(context, runner=runner, is_elevated=lambda: False)


@pytest.fixture
def log_messages():
    """Collect ``(level, message)`` pairs logged by post_switch."""
    records: list[tuple[str, str]] = []
    logger.enable("post_switch")
    handler_id = logger.add(
        lambda msg: records.append((msg.record["level"].name, msg.record["message"])),
        level="DEBUG",
    )
    try:
        yield records
    finally:
        logger.remove(handler_id)
        logger.disable("post_switch")
