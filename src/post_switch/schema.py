from __future__ import annotations

from attrs import frozen


@frozen
class CommandResult:
    """Result of one external command invocation."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        return (self.stderr or self.stdout).strip()
