from __future__ import annotations

from attrs import define
from loguru import logger

from post_switch.privilege import CommandExecutor

from .exceptions import SecretStoreError

OP_ACCOUNT_VAR = "OP_ACCOUNT"
# `op whoami` exit code when no session is active
_NOT_SIGNED_IN = 1


@define
class OnePasswordCLI:
    """Thin wrapper over the 1Password `op` CLI, run as the acting user."""

    executor: CommandExecutor
    account: str | None = None

    def _op(self, *args: str) -> tuple[str, ...]:
        user = self.executor.context.acting_user
        if user:
            return ("sudo", "-u", user, "-E", "op", *args)
        return ("op", *args)

    def _overrides(self) -> dict[str, str] | None:
        return {OP_ACCOUNT_VAR: self.account} if self.account else None

    async def ensure_signed_in(self) -> None:
        whoami = await self.executor.run_direct(
            *self._op("whoami", "--format", "json"), env_overrides=self._overrides()
        )
        if whoami.exit_code != _NOT_SIGNED_IN:
            return

        signin = await self.executor.run_direct(
            *self._op("signin"), env_overrides=self._overrides()
        )
        if not signin.success:
            raise SecretStoreError(f"1Password login failed: {signin.output}")
        logger.info("1Password login successful")

    async def read(self, reference: str) -> str:
        result = await self.executor.run_direct(
            *self._op("read", reference), env_overrides=self._overrides()
        )
        if not result.success:
            raise SecretStoreError(
                f"Could not read {reference!r} from 1Password "
                f"(exit {result.exit_code}). Ensure the 1Password CLI is unlocked."
            )
        return result.stdout
