import logging
from pathlib import Path
from typing import Dict, Literal, Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.exceptions import ConfigurationError
from .models import MountSpec
from .utils.host_config import get_hostname_settings_file


class Settings(BaseSettings):
    # Mount target
    remote: str = ""  # Remote share, e.g. 10.0.0.5/share or //nas/share
    mount_point: str = ""  # Local mount point, e.g. /mnt/share
    credential_ref: str = ""  # Reference resolved by the credential store
    fs_type: Literal["cifs", "smb3"] = "cifs"
    mount_options: Dict[str, str] = {}  # JSON in env, e.g. {"vers": "3.0", "ro": ""}

    # Timeouts
    probe_timeout_seconds: float = 5.0
    mount_timeout_seconds: float = 30.0
    reachability_port: int = 445  # 0 disables the reachability check
    reachability_timeout_seconds: float = 3.0
    invocation_timeout_seconds: float = 60.0  # Keep well under the timer interval

    # Mount table / unmount behaviour
    mount_table_path: str = "/proc/self/mounts"
    lazy_unmount_fallback: bool = True  # umount -l when a stale entry refuses to unmount

    # Credential store
    credential_store: Literal["env", "file"] = "env"
    credential_env_prefix: str = "MOUNT_CRED_"
    credentials_directory: str = "/etc/mount-supervisor/credentials"

    # Logging konfiguration
    log_level: str = "INFO"
    log_file_path: str = ""  # Empty = console only
    log_retention_days: int = 30

    model_config = SettingsConfigDict(
        env_file=get_hostname_settings_file(),
        env_prefix="MOUNT_SUPERVISOR_",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def log_directory(self) -> Optional[Path]:
        """Log directory as Path, or None when file logging is disabled."""
        if not self.log_file_path:
            return None
        return Path(self.log_file_path).parent

    def to_mount_spec(self) -> MountSpec:
        """Build the immutable MountSpec for this configuration."""
        missing = [
            name
            for name in ("remote", "mount_point", "credential_ref")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(f"Missing required setting(s): {', '.join(missing)}")

        try:
            return MountSpec(
                remote=self.remote,
                mount_point=self.mount_point,
                credential_ref=self.credential_ref,
                fs_type=self.fs_type,
                options=self.mount_options,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid mount configuration: {e}") from e

    @property
    def config_file_info(self) -> dict:
        """Return information about which configuration file is being used."""
        from .utils.host_config import get_hostname, list_all_settings_files

        return {
            "hostname": get_hostname(),
            "active_config_file": get_hostname_settings_file(),
            "all_available_configs": list_all_settings_files(),
        }
