from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Final, Literal, Self

from pydantic import BaseModel, Field, ValidationError

from post_switch.credentials.sync import DEFAULT_REFERENCE, DEFAULT_SIGNING_KEY_FIELD
from post_switch.exceptions import ConfigurationError
from post_switch.lifecycle import AppTarget
from post_switch.retry import RetryPolicy

ENV_PREFIX: Final = "POST_SWITCH_"

type LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]


class Settings(BaseModel):
    """Run settings. Every field can be set via ``POST_SWITCH_<FIELD>``."""

    app_name: str = "Raycast"
    process_name: str | None = None
    bundle_id: str | None = None

    secret_reference: str = DEFAULT_REFERENCE
    op_account: str | None = "my.1password.com"
    signing_key_field: str = DEFAULT_SIGNING_KEY_FIELD

    quit_attempts: int = Field(default=5, ge=1)
    quit_initial_delay: float = Field(default=0.25, ge=0)
    quit_backoff: float = Field(default=2.0, ge=1)
    quit_max_delay: float = Field(default=2.0, ge=0)

    exit_timeout: float = Field(default=10.0, gt=0)
    kill_timeout: float = Field(default=5.0, gt=0)
    poll_interval: float = Field(default=0.1, gt=0)

    sync_credentials: bool = True
    restart_app: bool = True
    log_level: LogLevel = "INFO"

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any
    ) -> Self:
        """Load settings from the environment; ``None`` overrides are ignored."""
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {
            name: env[key]
            for name in cls.model_fields
            if (key := f"{ENV_PREFIX}{name.upper()}") in env
        }
        data.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings:\n{e}") from e

    @property
    def quit_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.quit_attempts,
            initial_delay=self.quit_initial_delay,
            backoff_multiplier=self.quit_backoff,
            max_delay=self.quit_max_delay,
        )

    @property
    def target(self) -> AppTarget:
        return AppTarget(
            name=self.app_name,
            process_name=self.process_name or self.app_name,
            bundle_id=self.bundle_id,
        )
