from __future__ import annotations


class PostSwitchError(Exception):
    """Base exception for post-switch."""


class ConfigurationError(PostSwitchError):
    """Raised when settings cannot be loaded or validated."""
