"""
Pytest configuration and shared fixtures.

The fakes stand in for the OS: FakeMounter keeps an in-memory mount table and
counts mount/unmount calls, FakeProbe answers from that table.
"""

import asyncio
from typing import Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from mount_supervisor.core.exceptions import CredentialNotFoundError, MountError
from mount_supervisor.models import Credentials, MountEntry, MountSpec
from mount_supervisor.services.credentials import CredentialStore
from mount_supervisor.services.network_mount import MountSupervisor
from mount_supervisor.services.network_mount.base_mounter import BaseMounter


class FakeMounter(BaseMounter):
    """In-memory mount table. Entries in `stale` fail the probe."""

    def __init__(self, entries: Optional[List[MountEntry]] = None):
        self.entries: List[MountEntry] = list(entries or [])
        self.stale: set = set()
        self.mount_calls: List[tuple] = []
        self.unmount_calls: List[str] = []
        self.mount_error: Optional[MountError] = None
        self.unmount_error: Optional[MountError] = None
        self.mount_leaves_stale = False

    async def list_mounts(self) -> List[MountEntry]:
        return list(self.entries)

    async def mount(self, spec: MountSpec, credentials: Credentials) -> None:
        self.mount_calls.append((spec, credentials))
        if self.mount_error:
            raise self.mount_error
        self.entries.append(
            MountEntry(
                device=spec.device,
                mount_point=spec.mount_point,
                fs_type=spec.fs_type,
                options=["rw"],
            )
        )
        if self.mount_leaves_stale:
            self.stale.add(spec.mount_point)

    async def unmount(self, mount_point: str) -> None:
        self.unmount_calls.append(mount_point)
        if self.unmount_error:
            raise self.unmount_error
        # umount detaches the most recent entry on the mount point
        for index in range(len(self.entries) - 1, -1, -1):
            if self.entries[index].mount_point == mount_point:
                del self.entries[index]
                break
        if not any(entry.mount_point == mount_point for entry in self.entries):
            self.stale.discard(mount_point)

    def get_platform_name(self) -> str:
        return "Fake"

    def add_entry(self, spec: MountSpec, stale: bool = False, device: Optional[str] = None):
        self.entries.append(
            MountEntry(
                device=device or spec.device,
                mount_point=spec.mount_point,
                fs_type=spec.fs_type,
                options=["rw"],
            )
        )
        if stale:
            self.stale.add(spec.mount_point)

    @property
    def call_count(self) -> int:
        return len(self.mount_calls) + len(self.unmount_calls)


class FakeProbe:
    """Probe answering from the FakeMounter. `blocked` forces failures."""

    def __init__(self, mounter: FakeMounter):
        self._mounter = mounter
        self.blocked = False
        self.delay = 0.0
        self.calls: List[str] = []

    async def probe(self, local_path: str, timeout: float) -> bool:
        self.calls.append(local_path)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.blocked:
            return False
        return local_path not in self._mounter.stale


class FakeReachability:
    def __init__(self, reachable: bool = True):
        self.reachable = reachable
        self.calls: List[tuple] = []

    async def is_reachable(self, host: str, port: int, timeout: float) -> bool:
        self.calls.append((host, port))
        return self.reachable


class FakeCredentialStore(CredentialStore):
    def __init__(self, credentials: Optional[Dict[str, Credentials]] = None):
        self._credentials = credentials or {}
        self.lookups: List[str] = []

    def resolve(self, reference: str) -> Credentials:
        self.lookups.append(reference)
        if reference not in self._credentials:
            raise CredentialNotFoundError(reference)
        return self._credentials[reference]

    def describe(self) -> str:
        return "fake store"


@pytest.fixture
def mount_spec():
    return MountSpec(remote="10.0.0.5/share", mount_point="/mnt/share", credential_ref="ref-1")


@pytest.fixture
def credentials():
    return Credentials(username="alice", password="s3cret")


@pytest.fixture
def fake_mounter():
    return FakeMounter()


@pytest.fixture
def fake_probe(fake_mounter):
    return FakeProbe(fake_mounter)


@pytest.fixture
def fake_reachability():
    return FakeReachability()


@pytest.fixture
def credential_store(credentials):
    return FakeCredentialStore({"ref-1": credentials})


@pytest.fixture
def supervisor(fake_mounter, fake_probe, fake_reachability, credential_store, monkeypatch):
    """MountSupervisor wired to fakes. Mount point creation is stubbed out."""
    service = MountSupervisor(
        mounter=fake_mounter,
        credential_store=credential_store,
        probe=fake_probe,
        reachability=fake_reachability,
        probe_timeout=0.5,
    )
    monkeypatch.setattr(service, "_prepare_mount_point", AsyncMock())
    return service
