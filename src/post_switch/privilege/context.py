from __future__ import annotations

import os
import platform
import pwd
from collections.abc import Callable, Mapping
from pathlib import Path
from types import MappingProxyType

from attrs import field, frozen

PACKAGE_MANAGER_PATHS = ("/opt/homebrew/bin", "/usr/local/bin")
BIOMETRIC_UNLOCK_VAR = "OP_BIOMETRIC_UNLOCK_ENABLED"

type UidLookup = Callable[[str], int | None]


def _freeze(env: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(env))


@frozen
class PrivilegeContext:
    """Identity and environment that commands should logically run under."""

    acting_user: str
    home_directory: Path
    numeric_user_id: int | None
    environment: Mapping[str, str] = field(converter=_freeze)

    @property
    def has_user(self) -> bool:
        return bool(self.acting_user)


def passwd_uid(user: str) -> int | None:
    """Numeric uid of ``user`` from the password database, if any."""
    try:
        return pwd.getpwnam(user).pw_uid
    except KeyError:
        return None


def default_home_root() -> Path:
    return Path("/Users") if platform.system() == "Darwin" else Path("/home")


def resolve_privilege_context(
    environ: Mapping[str, str] | None = None,
    *,
    lookup_uid: UidLookup | None = passwd_uid,
    home_root: Path | None = None,
) -> PrivilegeContext:
    """
    Resolve the real (non-elevated) user behind this run.

    Args:
        environ: Environment snapshot to resolve from. Defaults to a copy of
            ``os.environ``; the process environment is never modified.
        lookup_uid: Username to uid lookup. ``None`` disables the lookup.
        home_root: Directory holding per-user homes. Defaults to ``/Users``
            on macOS and ``/home`` elsewhere.
    """
    env = dict(os.environ if environ is None else environ)

    user = env.get("SUDO_USER") or env.get("USER") or ""
    if user:
        home = (home_root or default_home_root()) / user
    else:
        home = Path(env.get("HOME", ""))

    uid = lookup_uid(user) if user and lookup_uid is not None else None

    path = ":".join([*PACKAGE_MANAGER_PATHS, env.get("PATH", "")])
    env.update(
        HOME=str(home),
        USER=user,
        LOGNAME=user,
        PATH=path,
        **{BIOMETRIC_UNLOCK_VAR: "true"},
    )

    return PrivilegeContext(
        acting_user=user,
        home_directory=home,
        numeric_user_id=uid,
        environment=env,
    )
