from __future__ import annotations

from .context import PrivilegeContext, resolve_privilege_context
from .executor import CommandExecutor

__all__ = [
    "CommandExecutor",
    "PrivilegeContext",
    "resolve_privilege_context",
]
