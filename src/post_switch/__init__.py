from __future__ import annotations

from loguru import logger

from .config import Settings
from .lifecycle import AppLifecycleController, AppTarget
from .privilege import CommandExecutor, PrivilegeContext, resolve_privilege_context
from .retry import Retrier, RetryPolicy
from .runner import PostSwitchRunner
from .schema import CommandResult

logger.disable("post_switch")

__all__ = [
    "AppLifecycleController",
    "AppTarget",
    "CommandExecutor",
    "CommandResult",
    "PostSwitchRunner",
    "PrivilegeContext",
    "Retrier",
    "RetryPolicy",
    "Settings",
    "resolve_privilege_context",
]
