"""
Mount Error Classifier.

Maps failures from the mount helpers (mount, mount.cifs, umount) and local
OSErrors to a MountErrorKind, so the CLI can report a distinct exit code per
failure class.
"""

import errno
import logging
import re
from typing import Optional

from ...core.exceptions import (
    AuthFailedError,
    MountError,
    PermissionDeniedError,
    UnknownMountError,
    UnreachableError,
)
from ...models import MountErrorKind

# mount.cifs prints "mount error(N): <strerror>"
_MOUNT_ERROR_CODE = re.compile(r"mount error\((\d+)\)")

_ERROR_CLASSES = {
    MountErrorKind.UNREACHABLE: UnreachableError,
    MountErrorKind.AUTH_FAILED: AuthFailedError,
    MountErrorKind.PERMISSION_DENIED: PermissionDeniedError,
    MountErrorKind.UNKNOWN: UnknownMountError,
}


class MountErrorClassifier:
    """Classifies mount helper failures. SRP: Error classification ONLY."""

    # Local privilege problems; checked before the auth codes because
    # mount.cifs also says "permission denied" for rejected credentials
    LOCAL_PERMISSION_INDICATORS = (
        "only root can",
        "must be superuser",
        "not superuser",
        "operation not permitted",
        "mount point does not exist",
        "not a directory",
        "read-only file system",
    )

    AUTH_INDICATORS = (
        "logon failure",
        "status_logon_failure",
        "status_account",
        "status_password",
        "account is disabled",
        "access denied",
        "key has been rejected",
        "permission denied",
    )

    UNREACHABLE_INDICATORS = (
        "host is down",
        "no route to host",
        "network is unreachable",
        "connection refused",
        "connection timed out",
        "connection reset",
        "could not resolve address",
        "unable to find suitable address",
        "bad address",
        "name or service not known",
        "operation now in progress",
        "timed out",
    )

    AUTH_ERROR_CODES = {errno.EACCES, getattr(errno, "EKEYREJECTED", 129)}
    UNREACHABLE_ERROR_CODES = {
        errno.ENXIO,
        errno.ENETUNREACH,
        errno.ECONNREFUSED,
        errno.ECONNRESET,
        errno.ETIMEDOUT,
        errno.EHOSTDOWN,
        errno.EHOSTUNREACH,
        errno.EINPROGRESS,
    }
    LOCAL_PERMISSION_ERROR_CODES = {errno.EPERM}

    LOCAL_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM, errno.EROFS}
    NETWORK_ERRNOS = {
        errno.ENETUNREACH,
        errno.EHOSTUNREACH,
        errno.EHOSTDOWN,
        errno.ECONNREFUSED,
        errno.ECONNRESET,
        errno.ETIMEDOUT,
        errno.ENOTCONN,
    }

    def __init__(self):
        self._logger = logging.getLogger("mount_supervisor.mount_error_classifier")

    def classify(self, returncode: Optional[int], stderr: str) -> MountErrorKind:
        """Classify a failed mount helper run from its exit status and diagnostics."""
        error_str = (stderr or "").lower()

        for indicator in self.LOCAL_PERMISSION_INDICATORS:
            if indicator in error_str:
                return self._decide(MountErrorKind.PERMISSION_DENIED, indicator)

        code_match = _MOUNT_ERROR_CODE.search(error_str)
        if code_match:
            code = int(code_match.group(1))
            if code in self.AUTH_ERROR_CODES:
                return self._decide(MountErrorKind.AUTH_FAILED, f"mount error({code})")
            if code in self.UNREACHABLE_ERROR_CODES:
                return self._decide(MountErrorKind.UNREACHABLE, f"mount error({code})")
            if code in self.LOCAL_PERMISSION_ERROR_CODES:
                return self._decide(MountErrorKind.PERMISSION_DENIED, f"mount error({code})")

        for indicator in self.AUTH_INDICATORS:
            if indicator in error_str:
                return self._decide(MountErrorKind.AUTH_FAILED, indicator)

        for indicator in self.UNREACHABLE_INDICATORS:
            if indicator in error_str:
                return self._decide(MountErrorKind.UNREACHABLE, indicator)

        self._logger.debug(f"Unclassified mount failure (rc={returncode}): {error_str.strip()}")
        return MountErrorKind.UNKNOWN

    def classify_os_error(self, error: OSError) -> MountErrorKind:
        """Classify a local OSError raised while preparing or probing a mount."""
        if error.errno in self.LOCAL_PERMISSION_ERRNOS:
            return MountErrorKind.PERMISSION_DENIED
        if error.errno in self.NETWORK_ERRNOS:
            return MountErrorKind.UNREACHABLE
        return MountErrorKind.UNKNOWN

    def build_error(
        self, returncode: Optional[int], stderr: str, mount_point: str = ""
    ) -> MountError:
        """Build the typed MountError for a failed mount helper run."""
        kind = self.classify(returncode, stderr)
        message = (stderr or "").strip() or f"mount helper exited with status {returncode}"
        return _ERROR_CLASSES[kind](message, mount_point=mount_point)

    def build_os_error(self, error: OSError, mount_point: str = "") -> MountError:
        kind = self.classify_os_error(error)
        return _ERROR_CLASSES[kind](str(error), mount_point=mount_point)

    def _decide(self, kind: MountErrorKind, indicator: str) -> MountErrorKind:
        self._logger.debug(f"Mount failure classified as {kind.value} ({indicator})")
        return kind
