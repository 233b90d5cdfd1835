from __future__ import annotations

from enum import Enum

from attrs import define, field, frozen

from post_switch.schema import CommandResult


class LifecycleState(Enum):
    RUNNING = "running"
    QUIT_REQUESTED = "quit_requested"
    WAITING_FOR_EXIT = "waiting_for_exit"
    FORCE_KILL_REQUESTED = "force_kill_requested"
    RELAUNCHING = "relaunching"
    DONE = "done"


@frozen
class AppTarget:
    """Application to restart."""

    name: str
    process_name: str = field()
    bundle_id: str | None = None
    """Launch by bundle identifier instead of by name when set."""

    @process_name.default
    def _default_process_name(self) -> str:
        return self.name

    def launch_args(self) -> tuple[str, ...]:
        if self.bundle_id:
            return ("open", "-b", self.bundle_id)
        return ("open", "-a", self.name)


@define
class LifecycleOutcome:
    """What happened during one restart."""

    success: bool = False
    forced: bool = False
    launch: CommandResult | None = None
    states: list[LifecycleState] = field(factory=list)

    @property
    def state(self) -> LifecycleState:
        return self.states[-1] if self.states else LifecycleState.RUNNING
