from __future__ import annotations

import pytest

from post_switch.credentials import CredentialSync, KeyFormatError, normalize_public_key
from post_switch.credentials.sync import validate_public_key
from post_switch.schema import CommandResult

KEY = "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIExample alice@example.com"
OP_READ = ("sudo", "-u", "alice", "-E", "op", "read")
OP_WHOAMI = ("sudo", "-u", "alice", "-E", "op", "whoami")
OP_SIGNIN = ("sudo", "-u", "alice", "-E", "op", "signin")


@pytest.fixture
def sync(executor):
    return CredentialSync(executor, reference="op://Personal/GitHub/public key")


def test_normalize_collapses_whitespace():
    assert normalize_public_key("  ssh-ed25519\r\nAAAA \t comment\n") == "ssh-ed25519 AAAA comment"


@pytest.mark.parametrize("value", ["", "not-a-key", "-----BEGIN PGP"])
def test_validate_rejects(value):
    with pytest.raises(KeyFormatError):
        validate_public_key(value)


@pytest.mark.parametrize("value", [KEY, "sk-ssh-ed25519@openssh.com AAAA"])
def test_validate_accepts(value):
    assert validate_public_key(value) == value


@pytest.mark.anyio
class TestCredentialSync:
    async def test_writes_signing_key(self, sync, runner):
        runner.script(*OP_READ, results=CommandResult(exit_code=0, stdout=KEY + "\n"))

        assert await sync.sync() is True
        assert runner.called("git") == [
            ("git", "config", "--global", "--replace-all", "user.signingKey", KEY)
        ]
        assert runner.called(*OP_READ) == [(*OP_READ, "op://Personal/GitHub/public key")]

    async def test_git_config_uses_user_home(self, sync, runner, context):
        runner.script(*OP_READ, results=CommandResult(exit_code=0, stdout=KEY))
        await sync.sync()
        git_env = runner.envs[runner.calls.index(runner.called("git")[0])]
        assert git_env["HOME"] == "/Users/alice"

    async def test_empty_value_skips_write(self, sync, runner, log_messages):
        runner.script(*OP_READ, results=CommandResult(exit_code=0, stdout="\n"))

        assert await sync.sync() is False
        assert runner.called("git") == []
        assert ("WARNING", "Empty key read from 1Password") in log_messages

    async def test_invalid_key_skips_write(self, sync, runner, log_messages):
        runner.script(*OP_READ, results=CommandResult(exit_code=0, stdout="hunter2"))

        assert await sync.sync() is False
        assert runner.called("git") == []
        assert (
            "WARNING",
            "Value from 1Password does not look like an SSH public key",
        ) in log_messages

    async def test_read_failure_is_absorbed(self, sync, runner):
        runner.script(*OP_READ, results=CommandResult(exit_code=1, stderr="locked"))

        assert await sync.sync() is False
        assert runner.called("git") == []

    async def test_signs_in_when_needed(self, sync, runner):
        runner.script(*OP_WHOAMI, results=CommandResult(exit_code=1))
        runner.script(*OP_READ, results=CommandResult(exit_code=0, stdout=KEY))

        assert await sync.sync() is True
        assert runner.called(*OP_SIGNIN)

    async def test_failed_sign_in_skips_read(self, sync, runner):
        runner.script(*OP_WHOAMI, results=CommandResult(exit_code=1))
        runner.script(*OP_SIGNIN, results=CommandResult(exit_code=1, stderr="nope"))

        assert await sync.sync() is False
        assert runner.called(*OP_READ) == []

    async def test_account_is_exported(self, executor, runner):
        sync = CredentialSync(executor, account="my.1password.com")
        await sync.sync()
        whoami_env = runner.envs[0]
        assert runner.calls[0][: len(OP_WHOAMI)] == OP_WHOAMI
        assert whoami_env["OP_ACCOUNT"] == "my.1password.com"

    async def test_git_failure_is_absorbed(self, sync, runner, log_messages):
        runner.script(*OP_READ, results=CommandResult(exit_code=0, stdout=KEY))
        runner.script("git", results=CommandResult(exit_code=255, stderr="locked"))

        assert await sync.sync() is False
        assert ("WARNING", "Failed to set git user.signingKey: locked") in log_messages

    async def test_unknown_user_runs_op_directly(self, executor, runner, context):
        import attrs

        from post_switch.privilege import CommandExecutor

        ctx = attrs.evolve(context, acting_user="")
        sync = CredentialSync(CommandExecutor(ctx, runner=runner, is_elevated=lambda: False))
        await sync.sync()
        assert runner.calls[0][:2] == ("op", "whoami")
