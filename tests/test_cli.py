"""
Tests for the mount-supervisor command line.

get_mount_supervisor is patched to return a supervisor wired to the fakes,
and setup_logging is stubbed so the root logger stays untouched.
"""

import argparse
import os

import pytest

from mount_supervisor import main as cli_main
from mount_supervisor.logging_config import setup_logging
from mount_supervisor.core.exceptions import AuthFailedError, PermissionDeniedError
from mount_supervisor.services.network_mount import UnsupportedPlatformError

BASE_ARGS = ["--remote", "10.0.0.5/share", "--mount-point", "/mnt/share", "--credential", "ref-1"]


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch):
    for name in list(os.environ):
        if name.startswith("MOUNT_SUPERVISOR_"):
            monkeypatch.delenv(name)
    monkeypatch.setattr(cli_main, "setup_logging", lambda settings: None)


@pytest.fixture
def wired(monkeypatch, supervisor):
    captured = {}

    def fake_get_mount_supervisor(settings):
        captured["settings"] = settings
        return supervisor

    monkeypatch.setattr(cli_main, "get_mount_supervisor", fake_get_mount_supervisor)
    return captured


class TestArgumentParsing:

    def test_parse_mount_option(self):
        assert cli_main.parse_mount_option("vers=3.0") == ("vers", "3.0")
        assert cli_main.parse_mount_option("ro") == ("ro", "")

    def test_parse_mount_option_rejects_empty_name(self):
        with pytest.raises(argparse.ArgumentTypeError):
            cli_main.parse_mount_option("=3.0")

    def test_default_command_is_check(self):
        args = cli_main.build_parser().parse_args(BASE_ARGS)

        assert args.command == "check"

    def test_usage_error_exit_code(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli_main.main(["explode"])

        assert exc_info.value.code == cli_main.EXIT_CONFIG_ERROR


class TestMain:

    def test_missing_configuration(self, capsys):
        assert cli_main.main(["check"]) == cli_main.EXIT_CONFIG_ERROR
        assert "ConfigurationError" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, capsys):
        code = cli_main.main(["--config", str(tmp_path / "missing.env")] + BASE_ARGS)

        assert code == cli_main.EXIT_CONFIG_ERROR
        assert "Config file not found" in capsys.readouterr().err

    def test_unopenable_log_file_is_configuration_error(
        self, wired, fake_mounter, tmp_path, monkeypatch, capsys
    ):
        monkeypatch.setattr(cli_main, "setup_logging", setup_logging)
        (tmp_path / "blocker").write_text("")
        log_file = tmp_path / "blocker" / "ms.log"

        code = cli_main.main(BASE_ARGS + ["--log-file", str(log_file), "status"])

        assert code == cli_main.EXIT_CONFIG_ERROR
        assert capsys.readouterr().err.startswith("ConfigurationError: Cannot open log file")
        assert fake_mounter.call_count == 0

    def test_check_mounts_then_noop(self, wired, fake_mounter):
        assert cli_main.main(BASE_ARGS + ["check"]) == 0
        assert len(fake_mounter.mount_calls) == 1

        assert cli_main.main(BASE_ARGS) == 0
        assert len(fake_mounter.mount_calls) == 1
        assert fake_mounter.unmount_calls == []

    def test_ensure_command(self, wired, fake_mounter):
        assert cli_main.main(BASE_ARGS + ["ensure"]) == 0
        assert len(fake_mounter.mount_calls) == 1

    def test_status_does_not_mount(self, wired, fake_mounter, capsys):
        assert cli_main.main(BASE_ARGS + ["status"]) == cli_main.EXIT_NOT_MOUNTED
        assert cli_main.EXIT_NOT_MOUNTED not in (1, 2, 3, 4, 5)
        assert capsys.readouterr().out.strip() == "Unmounted"
        assert fake_mounter.call_count == 0

    def test_status_when_mounted(self, wired, fake_mounter, mount_spec, capsys):
        fake_mounter.add_entry(mount_spec)

        assert cli_main.main(BASE_ARGS + ["status"]) == 0
        assert capsys.readouterr().out.strip() == "Mounted"

    def test_options_reach_the_mount_spec(self, wired, fake_mounter):
        cli_main.main(BASE_ARGS + ["-o", "vers=3.0", "--option", "ro"])

        spec, _ = fake_mounter.mount_calls[0]
        assert spec.options == {"vers": "3.0", "ro": ""}

    def test_cli_flags_override_settings(self, wired, monkeypatch):
        monkeypatch.setenv("MOUNT_SUPERVISOR_MOUNT_POINT", "/mnt/from-env")

        cli_main.main(BASE_ARGS)

        assert wired["settings"].mount_point == "/mnt/share"

    def test_unreachable_exit_code(self, wired, fake_reachability, capsys):
        fake_reachability.reachable = False

        assert cli_main.main(BASE_ARGS) == 1
        assert capsys.readouterr().err.startswith("Unreachable: ")

    def test_invalid_credential_reference_exit_code(self, wired, capsys):
        args = ["--remote", "10.0.0.5/share", "--mount-point", "/mnt/share", "--credential", "nope"]

        assert cli_main.main(args) == 2
        assert capsys.readouterr().err.startswith("AuthFailed: ")

    def test_auth_failed_exit_code(self, wired, fake_mounter):
        fake_mounter.mount_error = AuthFailedError("mount error(13): Permission denied")

        assert cli_main.main(BASE_ARGS) == 2

    def test_permission_denied_exit_code(self, wired, fake_mounter, capsys):
        fake_mounter.mount_error = PermissionDeniedError("must be superuser to use mount")

        assert cli_main.main(BASE_ARGS) == 3
        assert "must be superuser" in capsys.readouterr().err

    def test_unknown_exit_code_for_unsupported_platform(self, monkeypatch, capsys):
        def unsupported(settings):
            raise UnsupportedPlatformError("Platform plan9 not supported for network mounting")

        monkeypatch.setattr(cli_main, "get_mount_supervisor", unsupported)

        assert cli_main.main(BASE_ARGS) == 4
        assert capsys.readouterr().err.startswith("Unknown: ")

    def test_invocation_timeout_is_unreachable(self, wired, fake_mounter, fake_probe, mount_spec, monkeypatch):
        fake_mounter.add_entry(mount_spec)
        fake_probe.delay = 1.0
        monkeypatch.setenv("MOUNT_SUPERVISOR_INVOCATION_TIMEOUT_SECONDS", "0.05")

        assert cli_main.main(BASE_ARGS) == 1
        assert fake_mounter.call_count == 0
