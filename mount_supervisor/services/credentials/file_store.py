"""File backed credential store using the mount.cifs credentials file format."""

import logging
from pathlib import Path
from typing import Dict

from pydantic import ValidationError

from .base_store import CredentialStore
from ...core.exceptions import CredentialNotFoundError
from ...models import Credentials

# mount.cifs accepts the short forms as well
_KEY_ALIASES = {
    "username": "username",
    "user": "username",
    "password": "password",
    "pass": "password",
    "domain": "domain",
    "dom": "domain",
}


def parse_credentials_file(content: str) -> Dict[str, str]:
    """
    Parse a credentials file:

        username=alice
        password=s3cret
        domain=WORKGROUP

    Blank lines and lines starting with # are ignored. Only the first '='
    splits, so passwords may contain '='.
    """
    values: Dict[str, str] = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        canonical = _KEY_ALIASES.get(key.strip().lower())
        if canonical:
            values[canonical] = value.strip() if canonical != "password" else value
    return values


class FileCredentialStore(CredentialStore):
    """Resolves a reference to <directory>/<reference>."""

    def __init__(self, directory: str):
        self._directory = Path(directory)
        self._logger = logging.getLogger("mount_supervisor.credentials")

    def path_for(self, reference: str) -> Path:
        if not reference or reference.startswith(".") or "/" in reference or "\\" in reference:
            raise CredentialNotFoundError(reference, "is not a valid credential file name")
        return self._directory / reference

    def resolve(self, reference: str) -> Credentials:
        path = self.path_for(reference)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise CredentialNotFoundError(reference, f"not found in {self._directory}") from e
        except OSError as e:
            raise CredentialNotFoundError(reference, f"cannot be read: {e.strerror}") from e

        values = parse_credentials_file(content)
        if not values.get("username") or "password" not in values:
            raise CredentialNotFoundError(reference, "is missing username or password")

        try:
            credentials = Credentials(
                username=values["username"],
                password=values["password"],
                domain=values.get("domain") or None,
            )
        except ValidationError as e:
            raise CredentialNotFoundError(reference, f"is invalid: {e.error_count()} error(s)") from e

        self._logger.debug(f"Resolved credential reference '{reference}' from {path}")
        return credentials

    def describe(self) -> str:
        return f"credentials directory {self._directory}"
