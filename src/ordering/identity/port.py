"""Identity provider port (abstract interface).

Turns the credentials presented with a request into a verified principal.
Adapters: FakeIdentityProvider for development and testing, and
JWTIdentityProvider for signed bearer tokens. Whether a role grants
administrator rights is decided by ``ordering.order.policy.is_admin``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    """A verified caller."""

    id: str
    email: str
    role: str = "customer"


class IdentityProvider(ABC):
    @abstractmethod
    def authenticate(self, credentials: str | None) -> Principal:
        """Verify credentials and return the principal.

        Raises:
            UnauthenticatedError: credentials are missing, malformed or invalid.
        """
        ...
