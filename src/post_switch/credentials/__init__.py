from __future__ import annotations

from .exceptions import CredentialError, KeyFormatError, SecretStoreError
from .secret_store import OnePasswordCLI
from .sync import CredentialSync, normalize_public_key

__all__ = [
    "CredentialError",
    "CredentialSync",
    "KeyFormatError",
    "OnePasswordCLI",
    "SecretStoreError",
    "normalize_public_key",
]
