"""Linux CIFS Network Mounter - SRP compliant."""

import asyncio
import logging
import os
from typing import Dict, List, Optional, Sequence, Tuple

from .base_mounter import BaseMounter
from .mount_error_classifier import MountErrorClassifier
from .mount_table import read_mount_table
from ...core.exceptions import UnknownMountError, UnreachableError
from ...models import Credentials, MountEntry, MountSpec


class LinuxCifsMounter(BaseMounter):
    """Linux mount implementation using mount(8)/mount.cifs and umount(8)."""

    # umount diagnostics that mean there is nothing to unmount
    NOT_MOUNTED_INDICATORS = (
        "not mounted",
        "no mount point specified",
        "not found",
        "no such file or directory",
    )

    def __init__(
        self,
        mount_table_path: str = "/proc/self/mounts",
        command_timeout: float = 30.0,
        lazy_unmount_fallback: bool = True,
        classifier: Optional[MountErrorClassifier] = None,
    ):
        self._mount_table_path = mount_table_path
        self._command_timeout = command_timeout
        self._lazy_unmount_fallback = lazy_unmount_fallback
        self._classifier = classifier or MountErrorClassifier()
        self._logger = logging.getLogger("mount_supervisor.linux_mounter")

    async def list_mounts(self) -> List[MountEntry]:
        try:
            return await read_mount_table(self._mount_table_path)
        except OSError as e:
            raise UnknownMountError(f"Cannot read mount table {self._mount_table_path}: {e}") from e

    async def mount(self, spec: MountSpec, credentials: Credentials) -> None:
        """Mount the share. The password travels in the helper's environment only."""
        extra: Dict[str, str] = {"username": credentials.username}
        if credentials.domain:
            extra["domain"] = credentials.domain

        cmd = [
            "mount",
            "-t",
            spec.fs_type,
            spec.device,
            spec.mount_point,
            "-o",
            spec.render_options(extra),
        ]
        env = dict(os.environ)
        env["PASSWD"] = credentials.password.get_secret_value()

        self._logger.info(f"Mounting {spec.device} on {spec.mount_point} (type {spec.fs_type})")
        returncode, stderr = await self._run_command(cmd, spec.mount_point, env=env)

        if returncode != 0:
            error = self._classifier.build_error(returncode, stderr, spec.mount_point)
            self._logger.error(f"Mount failed for {spec.device}: {error}")
            raise error

        self._logger.info(f"Successfully mounted {spec.device} on {spec.mount_point}")

    async def unmount(self, mount_point: str) -> None:
        self._logger.info(f"Unmounting {mount_point}")
        try:
            returncode, stderr = await self._run_command(["umount", mount_point], mount_point)
        except UnreachableError:
            if not self._lazy_unmount_fallback:
                raise
            self._logger.warning(f"umount timed out for {mount_point}, detaching lazily")
            returncode, stderr = await self._run_command(["umount", "-l", mount_point], mount_point)

        if returncode == 0:
            self._logger.info(f"Unmounted {mount_point}")
            return
        if self._is_not_mounted(stderr):
            self._logger.debug(f"Nothing mounted at {mount_point}: {stderr.strip()}")
            return

        if self._lazy_unmount_fallback and "busy" in stderr.lower():
            self._logger.warning(f"{mount_point} is busy, detaching lazily")
            returncode, stderr = await self._run_command(["umount", "-l", mount_point], mount_point)
            if returncode == 0 or self._is_not_mounted(stderr):
                return

        error = self._classifier.build_error(returncode, stderr, mount_point)
        self._logger.error(f"Unmount failed for {mount_point}: {error}")
        raise error

    def get_platform_name(self) -> str:
        """Get platform name for logging."""
        return "Linux"

    def _is_not_mounted(self, stderr: str) -> bool:
        error_str = stderr.lower()
        return any(indicator in error_str for indicator in self.NOT_MOUNTED_INDICATORS)

    async def _run_command(
        self, cmd: Sequence[str], mount_point: str, env: Optional[Dict[str, str]] = None
    ) -> Tuple[int, str]:
        """Run a mount helper with a timeout. Returns (returncode, stderr)."""
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except FileNotFoundError as e:
            raise UnknownMountError(f"Command not found: {cmd[0]}", mount_point=mount_point) from e
        except OSError as e:
            raise self._classifier.build_os_error(e, mount_point) from e

        # On cancellation the helper is left running; mount(2) itself is atomic
        try:
            _, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._command_timeout
            )
        except asyncio.TimeoutError:
            self._logger.error(f"{cmd[0]} timed out after {self._command_timeout}s for {mount_point}")
            process.kill()
            try:
                await asyncio.wait_for(process.wait(), timeout=1.0)
            except asyncio.TimeoutError:
                self._logger.debug(f"{cmd[0]} for {mount_point} did not exit after kill")
            raise UnreachableError(
                f"{cmd[0]} did not finish within {self._command_timeout}s",
                mount_point=mount_point,
            )

        return process.returncode, stderr.decode(errors="replace") if stderr else ""
