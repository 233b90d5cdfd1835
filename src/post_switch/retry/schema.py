from __future__ import annotations

from collections.abc import Iterator

from attrs import field, frozen, validators


@frozen
class RetryPolicy:
    """Exponential backoff policy.

    The delay before retry ``k`` (0-based) is
    ``min(initial_delay * backoff_multiplier ** k, max_delay)``.
    """

    max_attempts: int = field(default=5, validator=validators.ge(1))
    initial_delay: float = field(default=0.25, validator=validators.ge(0))
    backoff_multiplier: float = field(default=2.0, validator=validators.ge(1))
    max_delay: float = field(default=2.0, validator=validators.ge(0))

    def delays(self) -> Iterator[float]:
        """Yield the sleep before each retry, ``max_attempts - 1`` values."""
        delay = min(self.initial_delay, self.max_delay)
        for _ in range(self.max_attempts - 1):
            yield delay
            delay = min(delay * self.backoff_multiplier, self.max_delay)
