import posixpath
import re
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class MountState(str, Enum):
    """
    Health state of a mount point, derived fresh from the OS on every check.

    UNMOUNTED: no entry for the mount point in the mount table
    MOUNTED:   entry present and the probe answered in time
    DEGRADED:  entry present but the probe failed or timed out (stale mount)
    """

    UNMOUNTED = "Unmounted"
    MOUNTED = "Mounted"
    DEGRADED = "Degraded"


class MountErrorKind(str, Enum):
    """Error taxonomy for mount operations. Each kind has its own CLI exit code."""

    UNREACHABLE = "Unreachable"  # Network/DNS/remote host failure
    AUTH_FAILED = "AuthFailed"  # Credentials rejected or unresolvable
    PERMISSION_DENIED = "PermissionDenied"  # Local mount point cannot be bound
    UNKNOWN = "Unknown"  # Unclassified OS-level failure

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self]


_EXIT_CODES = {
    MountErrorKind.UNREACHABLE: 1,
    MountErrorKind.AUTH_FAILED: 2,
    MountErrorKind.PERMISSION_DENIED: 3,
    MountErrorKind.UNKNOWN: 4,
}

# Options that would carry a secret into the mount command line
SECRET_OPTION_NAMES = {"username", "user", "password", "pass", "credentials", "cred"}

_REMOTE_PREFIXES = ("smb://", "cifs://", "//", "\\\\")
_HOST_PATTERN = re.compile(r"^[A-Za-z0-9.\-_:\[\]]+$")


class MountSpec(BaseModel):
    """
    Immutable description of one network share mount.

    Built once from Settings at process start. The credential is a reference
    resolved through a CredentialStore, never the secret itself.
    """

    model_config = ConfigDict(frozen=True)

    remote: str = Field(..., description="Remote share as host/share")
    mount_point: str = Field(..., description="Absolute local mount point")
    credential_ref: str = Field(..., min_length=1, description="Credential store reference")
    fs_type: Literal["cifs", "smb3"] = "cifs"
    options: Dict[str, str] = Field(default_factory=dict)

    @field_validator("remote")
    @classmethod
    def _normalize_remote(cls, value: str) -> str:
        remote = value.strip()
        for prefix in _REMOTE_PREFIXES:
            if remote.startswith(prefix):
                remote = remote[len(prefix):]
                break
        remote = remote.replace("\\", "/").strip("/")

        parts = [part for part in remote.split("/") if part]
        if len(parts) < 2:
            raise ValueError(f"Remote must be host/share, got: {value!r}")
        if not _HOST_PATTERN.match(parts[0]):
            raise ValueError(f"Remote host contains invalid characters: {parts[0]!r}")
        if any(part == ".." for part in parts):
            raise ValueError(f"Remote path cannot contain '..': {value!r}")
        if any(ch.isspace() for ch in remote):
            raise ValueError(f"Remote cannot contain whitespace: {value!r}")
        return "/".join(parts)

    @field_validator("mount_point")
    @classmethod
    def _normalize_mount_point(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"Mount point must be an absolute path: {value!r}")
        if ".." in value.split("/"):
            raise ValueError(f"Mount point cannot contain '..': {value!r}")
        # normpath keeps a leading "//", the kernel records a single "/"
        normalized = "/" + posixpath.normpath(value).lstrip("/")
        if normalized == "/":
            raise ValueError("Mount point cannot be the filesystem root")
        return normalized

    @field_validator("options")
    @classmethod
    def _validate_options(cls, value: Dict[str, str]) -> Dict[str, str]:
        for name, option_value in value.items():
            if not name or any(ch in name for ch in ",=") or any(ch.isspace() for ch in name):
                raise ValueError(f"Invalid mount option name: {name!r}")
            if name.lower() in SECRET_OPTION_NAMES:
                raise ValueError(
                    f"Mount option {name!r} carries credentials; use credential_ref instead"
                )
            if "," in option_value or any(ch.isspace() for ch in option_value):
                raise ValueError(f"Invalid value for mount option {name!r}: {option_value!r}")
        return value

    @property
    def host(self) -> str:
        return self.remote.split("/", 1)[0]

    @property
    def share(self) -> str:
        return self.remote.split("/", 1)[1]

    @property
    def device(self) -> str:
        """Device string as written to the mount table (//host/share)."""
        return f"//{self.remote}"

    def render_options(self, extra: Optional[Dict[str, str]] = None) -> str:
        """Render options as a mount -o string. Empty values become bare flags."""
        merged = dict(self.options)
        if extra:
            merged.update(extra)
        rendered = []
        for name in sorted(merged):
            option_value = merged[name]
            rendered.append(f"{name}={option_value}" if option_value else name)
        return ",".join(rendered)


class MountEntry(BaseModel):
    """One line of the OS mount table."""

    model_config = ConfigDict(frozen=True)

    device: str
    mount_point: str
    fs_type: str
    options: List[str] = Field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.device} on {self.mount_point} type {self.fs_type} ({','.join(self.options)})"


class Credentials(BaseModel):
    """Resolved share credentials. The password never renders in repr or logs."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., min_length=1)
    password: SecretStr
    domain: Optional[str] = None

    @field_validator("username", "domain")
    @classmethod
    def _no_option_separators(cls, value: Optional[str]) -> Optional[str]:
        # Both end up inside the comma separated -o string
        if value is not None and ("," in value or any(ch.isspace() for ch in value)):
            raise ValueError("must not contain commas or whitespace")
        return value


class RepairOutcome(BaseModel):
    """Result of one check-and-repair invocation."""

    previous_state: MountState
    current_state: MountState
    repaired: bool = False
