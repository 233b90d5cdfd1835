from __future__ import annotations

from collections.abc import Awaitable, Callable

from attrs import define, field
from loguru import logger

from post_switch.config import Settings
from post_switch.credentials import CredentialSync
from post_switch.lifecycle import AppLifecycleController
from post_switch.privilege import CommandExecutor, PrivilegeContext
from post_switch.process import ProcessWatcher
from post_switch.retry import Retrier


@define
class PostSwitchRunner:
    """
    One post-switch run: credential sync, then app restart.

    Each step is best-effort and isolated from the other. Exceptions that
    escape a step are logged once as uncaught and turn the exit code to 1.
    """

    settings: Settings
    context: PrivilegeContext
    executor: CommandExecutor = field()

    @executor.default
    def _default_executor(self) -> CommandExecutor:
        return CommandExecutor(self.context)

    async def run(self) -> int:
        exit_code = 0
        steps: list[tuple[str, Callable[[], Awaitable[object]]]] = []
        if self.settings.sync_credentials:
            steps.append(("credential sync", self.sync_credentials))
        if self.settings.restart_app:
            steps.append(("app restart", self.restart_app))

        for name, step in steps:
            try:
                await step()
            except Exception:
                logger.bind(uncaught=True).opt(exception=True).error(
                    "{} failed", name
                )
                exit_code = 1
        return exit_code

    async def sync_credentials(self) -> bool:
        sync = CredentialSync(
            self.executor,
            reference=self.settings.secret_reference,
            account=self.settings.op_account,
            signing_key_field=self.settings.signing_key_field,
        )
        return await sync.sync()

    async def restart_app(self) -> bool:
        controller = AppLifecycleController(
            target=self.settings.target,
            executor=self.executor,
            watcher=ProcessWatcher(
                runner=self.executor.run_direct,
                interval=self.settings.poll_interval,
            ),
            retrier=Retrier(self.settings.quit_policy),
            exit_timeout=self.settings.exit_timeout,
            kill_timeout=self.settings.kill_timeout,
        )
        outcome = await controller.restart()
        return outcome.success
