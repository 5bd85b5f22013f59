"""Mount Supervisor - keeps one network share mounted and healthy."""

from typing import List, Optional, Tuple

import aiofiles.os

from .base_mounter import BaseMounter
from .mount_error_classifier import MountErrorClassifier
from .mount_probe import MountProbe
from .reachability import ReachabilityChecker
from ..credentials import CredentialStore
from ...core.exceptions import PermissionDeniedError, UnknownMountError, UnreachableError
from ...logging_config import get_app_logger
from ...models import MountEntry, MountSpec, MountState, RepairOutcome


class MountSupervisor:
    """
    Owns the lifecycle of a single mount target: mount, health-check, remount.

    Holds no state between calls. Every check reads the OS mount table and
    probes the mount point again, and every repair is a fresh attempt. The
    caller (an external timer) is the retry mechanism.
    """

    def __init__(
        self,
        mounter: BaseMounter,
        credential_store: CredentialStore,
        probe: Optional[MountProbe] = None,
        reachability: Optional[ReachabilityChecker] = None,
        probe_timeout: float = 5.0,
        reachability_port: int = 445,
        reachability_timeout: float = 3.0,
        classifier: Optional[MountErrorClassifier] = None,
    ):
        self._logger = get_app_logger("mount_supervisor")
        self._mounter = mounter
        self._credential_store = credential_store
        self._probe = probe or MountProbe()
        self._reachability = reachability or ReachabilityChecker()
        self._probe_timeout = probe_timeout
        self._reachability_port = reachability_port
        self._reachability_timeout = reachability_timeout
        self._classifier = classifier or MountErrorClassifier()

    async def check_health(self, spec: MountSpec) -> MountState:
        """Classify the mount point as MOUNTED, DEGRADED or UNMOUNTED."""
        state, _ = await self._inspect(spec)
        return state

    async def ensure_mounted(self, spec: MountSpec) -> None:
        """Bring the mount point to MOUNTED. Raises MountError on failure."""
        state, entries = await self._inspect(spec)
        if state == MountState.MOUNTED:
            self._logger.debug(f"{spec.mount_point} already mounted, nothing to do")
            return
        await self._repair(spec, state, entries)

    async def check_and_repair(self, spec: MountSpec) -> RepairOutcome:
        """Single entry point for the scheduler: check, then repair if needed."""
        state, entries = await self._inspect(spec)
        if state == MountState.MOUNTED:
            self._logger.info(f"{spec.device} on {spec.mount_point} is healthy")
            return RepairOutcome(previous_state=state, current_state=state)

        await self._repair(spec, state, entries)
        return RepairOutcome(
            previous_state=state, current_state=MountState.MOUNTED, repaired=True
        )

    async def _inspect(self, spec: MountSpec) -> Tuple[MountState, List[MountEntry]]:
        entries = await self._mounter.find_entries(spec.mount_point)
        if not entries:
            self._logger.debug(f"No mount table entry for {spec.mount_point}")
            return MountState.UNMOUNTED, entries

        if len(entries) > 1:
            self._logger.warning(
                f"{len(entries)} stacked mount entries on {spec.mount_point}, treating as degraded"
            )
            return MountState.DEGRADED, entries

        entry = entries[0]
        if entry.device.lower() != spec.device.lower():
            self._logger.warning(
                f"{spec.mount_point} has {entry.device} mounted instead of {spec.device}"
            )
            return MountState.DEGRADED, entries

        if not await self._probe.probe(spec.mount_point, self._probe_timeout):
            self._logger.warning(f"{spec.mount_point} is mounted but not responding")
            return MountState.DEGRADED, entries

        return MountState.MOUNTED, entries

    async def _repair(
        self, spec: MountSpec, state: MountState, entries: List[MountEntry]
    ) -> None:
        self._logger.info(f"Repairing {spec.mount_point} (state: {state.value})")

        credentials = self._credential_store.resolve(spec.credential_ref)

        # Clear every existing entry first so a new mount never stacks on one
        for _ in entries:
            await self._mounter.unmount(spec.mount_point)

        if self._reachability_port:
            reachable = await self._reachability.is_reachable(
                spec.host, self._reachability_port, self._reachability_timeout
            )
            if not reachable:
                raise UnreachableError(
                    f"Remote host {spec.host}:{self._reachability_port} is not reachable",
                    mount_point=spec.mount_point,
                )

        await self._prepare_mount_point(spec.mount_point)
        await self._mounter.mount(spec, credentials)

        final_state, _ = await self._inspect(spec)
        if final_state != MountState.MOUNTED:
            raise UnknownMountError(
                f"Mount command succeeded but {spec.mount_point} is {final_state.value}",
                mount_point=spec.mount_point,
            )
        self._logger.info(f"{spec.device} mounted on {spec.mount_point}")

    async def _prepare_mount_point(self, mount_point: str) -> None:
        """Create the mount point directory if it does not exist."""
        try:
            if await aiofiles.os.path.isdir(mount_point):
                return
            if await aiofiles.os.path.exists(mount_point):
                raise PermissionDeniedError(
                    "Mount point exists but is not a directory", mount_point=mount_point
                )
            self._logger.info(f"Creating mount point {mount_point}")
            await aiofiles.os.makedirs(mount_point, exist_ok=True)
        except OSError as e:
            raise self._classifier.build_os_error(e, mount_point) from e
