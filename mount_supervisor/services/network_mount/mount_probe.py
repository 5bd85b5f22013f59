"""Mount Probe - bounded read check of a mount point."""

import asyncio
import logging


class MountProbe:
    """
    Verifies that a mount point answers a directory listing in time.

    The listing runs in a subprocess: a hung network mount blocks the
    lister in the kernel, and the probe can still give up on it.
    """

    def __init__(self, list_command: str = "ls"):
        self._list_command = list_command
        self._logger = logging.getLogger("mount_supervisor.mount_probe")

    async def probe(self, local_path: str, timeout: float) -> bool:
        """Return True if local_path can be listed within timeout seconds."""
        try:
            process = await asyncio.create_subprocess_exec(
                self._list_command,
                "-A",
                local_path,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            self._logger.warning(f"Could not start probe for {local_path}: {e}")
            return False

        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            self._logger.warning(f"Probe timed out after {timeout}s for: {local_path}")
            process.kill()
            # A lister stuck in uninterruptible I/O may never be reaped
            try:
                await asyncio.wait_for(process.wait(), timeout=1.0)
            except asyncio.TimeoutError:
                self._logger.debug(f"Probe process for {local_path} did not exit after kill")
            return False

        if process.returncode == 0:
            self._logger.debug(f"Mount point accessible: {local_path}")
            return True

        error_msg = stderr.decode(errors="replace").strip() if stderr else "Unknown error"
        self._logger.debug(f"Mount point not accessible: {local_path} - {error_msg}")
        return False
