"""Credential Store interface."""

from abc import ABC, abstractmethod

from ...models import Credentials


class CredentialStore(ABC):
    """Resolves a credential reference to share credentials.

    Implementations raise CredentialNotFoundError for unknown references and
    must never log the resolved secret.
    """

    @abstractmethod
    def resolve(self, reference: str) -> Credentials:
        pass

    @abstractmethod
    def describe(self) -> str:
        """Short description of where references are looked up, for logging."""
        pass
