from __future__ import annotations

import sys
from typing import Annotated

from cyclopts import App, Parameter
from loguru import logger

from post_switch.config import Settings
from post_switch.exceptions import ConfigurationError
from post_switch.logging import setup_logging
from post_switch.privilege import resolve_privilege_context
from post_switch.runner import PostSwitchRunner

app = App(
    name="post-switch",
    help="Refresh the git signing key and restart the launcher app after a system switch.",
)


@app.default
async def run(
    *,
    app_name: Annotated[str | None, Parameter(name="--app")] = None,
    bundle_id: str | None = None,
    secret_reference: str | None = None,
    skip_credentials: bool = False,
    skip_restart: bool = False,
    log_level: str | None = None,
) -> int:
    """
    Run the post-switch hook once.

    Parameters
    ----------
    app_name
        Application to restart.
    bundle_id
        Launch the application by bundle identifier instead of by name.
    secret_reference
        1Password reference of the SSH public key.
    skip_credentials
        Do not touch the git signing key.
    skip_restart
        Do not restart the application.
    log_level
        Minimum log level.
    """
    try:
        settings = Settings.from_env(
            app_name=app_name,
            bundle_id=bundle_id,
            secret_reference=secret_reference,
            sync_credentials=False if skip_credentials else None,
            restart_app=False if skip_restart else None,
            log_level=log_level,
        )
    except ConfigurationError as e:
        setup_logging()
        logger.error("{}", e)
        return 2

    setup_logging(settings.log_level)
    context = resolve_privilege_context()
    return await PostSwitchRunner(settings, context).run()


def main() -> None:
    sys.exit(app())
