from __future__ import annotations

import pytest

from post_switch.process import ProcessWatcher
from post_switch.schema import CommandResult

PRESENT = CommandResult(exit_code=0, stdout="123\n")
ABSENT = CommandResult(exit_code=1)


@pytest.fixture
def watcher(runner, clock):
    return ProcessWatcher(runner=runner, interval=0.1, clock=clock.time, sleep=clock.sleep)


@pytest.mark.anyio
class TestProcessWatcher:
    async def test_is_running_uses_exact_pgrep(self, watcher, runner):
        runner.script("pgrep", results=PRESENT)
        assert await watcher.is_running("Raycast")
        assert runner.calls == [("pgrep", "-x", "Raycast")]

    async def test_absent_immediately(self, watcher, runner, clock):
        runner.script("pgrep", results=ABSENT)
        assert await watcher.wait_for_disappearance("Raycast", 10) is True
        assert clock.now == 0

    async def test_returns_true_shortly_after_exit(self, watcher, runner, clock):
        runner.script("pgrep", results=[PRESENT] * 5 + [ABSENT])
        assert await watcher.wait_for_disappearance("Raycast", 10) is True
        assert clock.now == pytest.approx(0.5)
        assert len(runner.calls) == 6

    async def test_times_out_when_process_never_exits(self, watcher, runner, clock):
        runner.script("pgrep", results=PRESENT)
        assert await watcher.wait_for_disappearance("Raycast", 2) is False
        assert 2 <= clock.now < 2 + 0.1 + 1e-9

    async def test_query_failure_counts_as_absent(self, watcher, runner):
        runner.script("pgrep", results=CommandResult(exit_code=127, stderr="not found"))
        assert await watcher.wait_for_disappearance("Raycast", 10) is True
