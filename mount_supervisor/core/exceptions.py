# mount_supervisor/core/exceptions.py

from ..models import MountErrorKind


class MountError(Exception):
    """Base class for mount failures. Carries the error kind used for exit codes."""

    kind: MountErrorKind = MountErrorKind.UNKNOWN

    def __init__(self, message: str, mount_point: str = ""):
        self.message = message
        self.mount_point = mount_point
        super().__init__(message)

    @property
    def exit_code(self) -> int:
        return self.kind.exit_code

    def __str__(self) -> str:
        if self.mount_point:
            return f"{self.message} (mount point: {self.mount_point})"
        return self.message


class UnreachableError(MountError):
    """Raised when the remote endpoint cannot be contacted."""

    kind = MountErrorKind.UNREACHABLE


class AuthFailedError(MountError):
    """Raised when the remote rejects the credentials."""

    kind = MountErrorKind.AUTH_FAILED


class CredentialNotFoundError(AuthFailedError):
    """Raised when a credential reference cannot be resolved by the store."""

    def __init__(self, reference: str, reason: str = "not found"):
        self.reference = reference
        super().__init__(f"Credential reference '{reference}' {reason}")


class PermissionDeniedError(MountError):
    """Raised when the local mount point cannot be created or bound."""

    kind = MountErrorKind.PERMISSION_DENIED


class UnknownMountError(MountError):
    """Raised for OS-level failures that could not be classified."""

    kind = MountErrorKind.UNKNOWN


class ConfigurationError(Exception):
    """Raised when settings cannot produce a valid MountSpec."""
    pass
