"""Abstract Base Mounter - SRP compliant interface definition."""

from abc import ABC, abstractmethod
from typing import List

from .mount_table import canonical_mount_point
from ...models import Credentials, MountEntry, MountSpec


class BaseMounter(ABC):
    """Abstract base class for platform-specific mount operations."""

    @abstractmethod
    async def list_mounts(self) -> List[MountEntry]:
        """Read the OS mount table."""
        pass

    @abstractmethod
    async def mount(self, spec: MountSpec, credentials: Credentials) -> None:
        """Mount the share. Raises MountError on failure."""
        pass

    @abstractmethod
    async def unmount(self, mount_point: str) -> None:
        """Unmount the mount point. Succeeds if nothing is mounted there."""
        pass

    @abstractmethod
    def get_platform_name(self) -> str:
        """Get platform name for logging."""
        pass

    async def find_entries(self, mount_point: str) -> List[MountEntry]:
        """Mount table entries at the given mount point, oldest first."""
        candidates = {mount_point, canonical_mount_point(mount_point)}
        return [entry for entry in await self.list_mounts() if entry.mount_point in candidates]
