from __future__ import annotations

from .watcher import ProcessWatcher

__all__ = ["ProcessWatcher"]
