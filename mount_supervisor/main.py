"""
mount-supervisor command line entry point.

Meant to be started by an external timer (systemd timer, cron). Each run does
one check-and-repair pass and reports the outcome through its exit code:

    0  mounted (already or newly)
    1  Unreachable
    2  AuthFailed
    3  PermissionDenied
    4  Unknown
    5  configuration or usage error
    6  status only: not mounted (Unmounted or Degraded)
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import ValidationError

from .config import Settings
from .core.exceptions import ConfigurationError, MountError, UnreachableError
from .dependencies import get_mount_supervisor
from .logging_config import setup_logging
from .models import MountSpec, MountState, MountErrorKind
from .services.network_mount import MountSupervisor, UnsupportedPlatformError

EXIT_OK = 0
EXIT_NOT_MOUNTED = 6
EXIT_CONFIG_ERROR = 5

COMMANDS = ("check", "ensure", "status")

# CLI flag -> Settings field
_SETTING_FLAGS = {
    "remote": "remote",
    "mount_point": "mount_point",
    "credential": "credential_ref",
    "fs_type": "fs_type",
    "log_level": "log_level",
    "log_file": "log_file_path",
}


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit with EXIT_CONFIG_ERROR, not 2 (AuthFailed)."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_CONFIG_ERROR, f"{self.prog}: error: {message}\n")


def parse_mount_option(value: str) -> Tuple[str, str]:
    """Parse NAME or NAME=VALUE from a -o flag."""
    name, _, option_value = value.partition("=")
    name = name.strip()
    if not name:
        raise argparse.ArgumentTypeError(f"invalid mount option: {value!r}")
    return name, option_value


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="mount-supervisor",
        description="Mount a network share and keep it mounted",
    )
    parser.add_argument(
        "--config",
        help="Settings env file (default: <hostname>-settings.env or settings.env)",
    )
    parser.add_argument("--remote", help="Remote share, e.g. 10.0.0.5/share")
    parser.add_argument("--mount-point", help="Local mount point, e.g. /mnt/share")
    parser.add_argument("--credential", help="Credential reference for the credential store")
    parser.add_argument("--fs-type", choices=["cifs", "smb3"], help="Filesystem type")
    parser.add_argument(
        "-o",
        "--option",
        dest="options",
        action="append",
        type=parse_mount_option,
        metavar="NAME[=VALUE]",
        help="Mount option, may be repeated",
    )
    parser.add_argument("--log-level", help="Log level, e.g. DEBUG or INFO")
    parser.add_argument("--log-file", help="Also log to this file with nightly rotation")
    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        default="check",
        help="check: check and repair (default); ensure: mount if needed; "
        "status: report state only",
    )
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Settings from env file and environment, overridden by CLI flags."""
    overrides = {
        field: getattr(args, flag)
        for flag, field in _SETTING_FLAGS.items()
        if getattr(args, flag) is not None
    }
    if args.config:
        if not Path(args.config).is_file():
            raise ConfigurationError(f"Config file not found: {args.config}")
        overrides["_env_file"] = args.config

    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e

    if args.options:
        merged = dict(settings.mount_options)
        merged.update(dict(args.options))
        settings = settings.model_copy(update={"mount_options": merged})
    return settings


async def run_command(command: str, supervisor: MountSupervisor, spec: MountSpec) -> int:
    logger = logging.getLogger("mount_supervisor.cli")

    if command == "status":
        state = await supervisor.check_health(spec)
        print(state.value)
        return EXIT_OK if state == MountState.MOUNTED else EXIT_NOT_MOUNTED

    if command == "ensure":
        await supervisor.ensure_mounted(spec)
        logger.info(f"{spec.mount_point} is mounted")
        return EXIT_OK

    outcome = await supervisor.check_and_repair(spec)
    if outcome.repaired:
        logger.info(
            f"{spec.mount_point} repaired: {outcome.previous_state.value} -> "
            f"{outcome.current_state.value}"
        )
    return EXIT_OK


async def _run_with_timeout(
    command: str, supervisor: MountSupervisor, spec: MountSpec, timeout: float
) -> int:
    try:
        return await asyncio.wait_for(run_command(command, supervisor, spec), timeout=timeout)
    except asyncio.TimeoutError:
        raise UnreachableError(
            f"Invocation did not finish within {timeout}s", mount_point=spec.mount_point
        )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
        spec = settings.to_mount_spec()
    except ConfigurationError as e:
        print(f"ConfigurationError: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        setup_logging(settings)
    except OSError as e:
        print(
            f"ConfigurationError: Cannot open log file {settings.log_file_path}: {e}",
            file=sys.stderr,
        )
        return EXIT_CONFIG_ERROR

    logger = logging.getLogger("mount_supervisor.cli")
    logger.debug(f"Configuration: {settings.config_file_info}")

    try:
        supervisor = get_mount_supervisor(settings)
    except UnsupportedPlatformError as e:
        logger.error(str(e))
        print(f"{MountErrorKind.UNKNOWN.value}: {e}", file=sys.stderr)
        return MountErrorKind.UNKNOWN.exit_code

    try:
        return asyncio.run(
            _run_with_timeout(
                args.command, supervisor, spec, settings.invocation_timeout_seconds
            )
        )
    except MountError as e:
        logger.error(f"{args.command} failed for {spec.mount_point}: {e.kind.value}: {e}")
        print(f"{e.kind.value}: {e}", file=sys.stderr)
        return e.exit_code


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
