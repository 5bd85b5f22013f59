"""Reachability Checker - TCP connect check against the share host."""

import asyncio
import logging


class ReachabilityChecker:
    """Checks whether the remote SMB endpoint accepts TCP connections."""

    def __init__(self):
        self._logger = logging.getLogger("mount_supervisor.reachability")

    async def is_reachable(self, host: str, port: int, timeout: float) -> bool:
        """Open and close a TCP connection to host:port within timeout seconds."""
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout=timeout
            )
        except asyncio.TimeoutError:
            self._logger.warning(f"Connection to {host}:{port} timed out after {timeout}s")
            return False
        except OSError as e:
            self._logger.warning(f"Cannot reach {host}:{port}: {e}")
            return False

        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            self._logger.debug(f"Error closing reachability connection to {host}:{port}: {e}")

        self._logger.debug(f"Remote endpoint reachable: {host}:{port}")
        return True
