from .config import Settings
from .services.credentials import CredentialStore, EnvCredentialStore, FileCredentialStore
from .services.network_mount import MountSupervisor, PlatformFactory
from .services.network_mount.base_mounter import BaseMounter


def get_credential_store(settings: Settings) -> CredentialStore:
    """Credential store selected by settings.credential_store."""
    if settings.credential_store == "file":
        return FileCredentialStore(settings.credentials_directory)
    return EnvCredentialStore(prefix=settings.credential_env_prefix)


def get_mounter(settings: Settings) -> BaseMounter:
    return PlatformFactory().create_mounter(settings)


def get_mount_supervisor(settings: Settings) -> MountSupervisor:
    """Wire a MountSupervisor from settings."""
    return MountSupervisor(
        mounter=get_mounter(settings),
        credential_store=get_credential_store(settings),
        probe_timeout=settings.probe_timeout_seconds,
        reachability_port=settings.reachability_port,
        reachability_timeout=settings.reachability_timeout_seconds,
    )
