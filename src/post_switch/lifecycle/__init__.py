from __future__ import annotations

from .controller import AppLifecycleController
from .model import AppTarget, LifecycleOutcome, LifecycleState

__all__ = [
    "AppLifecycleController",
    "AppTarget",
    "LifecycleOutcome",
    "LifecycleState",
]
