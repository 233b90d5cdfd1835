from __future__ import annotations

import re

from attrs import define, field
from loguru import logger

from post_switch.privilege import CommandExecutor

from .exceptions import CredentialError, KeyFormatError
from .secret_store import OnePasswordCLI

DEFAULT_REFERENCE = "op://Personal/GitHub/public key"
DEFAULT_SIGNING_KEY_FIELD = "user.signingKey"

_SSH_KEY_PREFIX = re.compile(r"^(ssh|sk-ssh)-")
_WHITESPACE = re.compile(r"\s+")


def normalize_public_key(value: str) -> str:
    """Collapse line breaks and whitespace runs into single spaces."""
    return _WHITESPACE.sub(" ", value).strip()


def validate_public_key(value: str) -> str:
    if not value:
        raise KeyFormatError("Empty key read from 1Password")
    if not _SSH_KEY_PREFIX.match(value):
        raise KeyFormatError("Value from 1Password does not look like an SSH public key")
    return value


@define
class CredentialSync:
    """Copies the git signing public key from 1Password into git config."""

    executor: CommandExecutor
    reference: str = DEFAULT_REFERENCE
    account: str | None = None
    signing_key_field: str = DEFAULT_SIGNING_KEY_FIELD
    _store: OnePasswordCLI = field(init=False)

    def __attrs_post_init__(self) -> None:
        self._store = OnePasswordCLI(self.executor, account=self.account)

    async def sync(self) -> bool:
        """
        Best-effort sync. Returns True only when git config was updated.

        Expected failures (store unavailable, bad key, failed write) are
        logged as warnings; anything else propagates.
        """
        user = self.executor.context.acting_user or "(unknown)"
        try:
            await self._store.ensure_signed_in()
            logger.info("Reading Git signing public key from 1Password for user {}", user)
            key = validate_public_key(
                normalize_public_key(await self._store.read(self.reference))
            )
            await self._write(key)
        except CredentialError as e:
            logger.warning("{}", e)
            return False

        logger.info("Updated git {} from 1Password", self.signing_key_field)
        return True

    async def _write(self, key: str) -> None:
        result = await self.executor.run_direct(
            "git", "config", "--global", "--replace-all", self.signing_key_field, key
        )
        if not result.success:
            raise CredentialError(
                f"Failed to set git {self.signing_key_field}: {result.output}"
            )
