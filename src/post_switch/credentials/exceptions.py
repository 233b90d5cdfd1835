from __future__ import annotations

from post_switch.exceptions import PostSwitchError


class CredentialError(PostSwitchError):
    """Base exception for the credentials module."""


class SecretStoreError(CredentialError):
    """Raised when the secret store cannot be reached or read."""


class KeyFormatError(CredentialError):
    """Raised when a fetched value is not a usable signing key."""
