"""Environment-variable backed credential store."""

import logging
import os
import re
from typing import Mapping, Optional

from pydantic import ValidationError

from .base_store import CredentialStore
from ...core.exceptions import CredentialNotFoundError
from ...models import Credentials


class EnvCredentialStore(CredentialStore):
    """
    Looks up <prefix><REFERENCE>_USERNAME / _PASSWORD / _DOMAIN.

    The reference is upper-cased and every character outside [A-Z0-9] becomes
    an underscore, so "ref-1" resolves MOUNT_CRED_REF_1_USERNAME.
    """

    def __init__(self, prefix: str = "MOUNT_CRED_", environ: Optional[Mapping[str, str]] = None):
        self._prefix = prefix
        self._environ = environ if environ is not None else os.environ
        self._logger = logging.getLogger("mount_supervisor.credentials")

    def variable_base(self, reference: str) -> str:
        return self._prefix + re.sub(r"[^A-Z0-9]", "_", reference.upper())

    def resolve(self, reference: str) -> Credentials:
        if not reference:
            raise CredentialNotFoundError(reference, "is empty")

        base = self.variable_base(reference)
        username = self._environ.get(f"{base}_USERNAME")
        password = self._environ.get(f"{base}_PASSWORD")
        if not username or password is None:
            raise CredentialNotFoundError(reference, f"not found in environment ({base}_*)")

        try:
            credentials = Credentials(
                username=username,
                password=password,
                domain=self._environ.get(f"{base}_DOMAIN") or None,
            )
        except ValidationError as e:
            raise CredentialNotFoundError(reference, f"is invalid: {e.error_count()} error(s)") from e

        self._logger.debug(f"Resolved credential reference '{reference}' from environment")
        return credentials

    def describe(self) -> str:
        return f"environment ({self._prefix}*)"
