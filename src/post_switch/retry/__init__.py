from __future__ import annotations

from .retrier import Retrier
from .schema import RetryPolicy

__all__ = [
    "Retrier",
    "RetryPolicy",
]
