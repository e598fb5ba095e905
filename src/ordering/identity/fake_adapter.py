"""In-memory identity provider for development and testing.

Tokens are registered explicitly with ``register()``; any other token is
rejected.
"""

from ordering.identity.port import IdentityProvider, Principal
from ordering.order.errors import UnauthenticatedError


class FakeIdentityProvider(IdentityProvider):
    def __init__(self) -> None:
        self.principals: dict[str, Principal] = {}
        self.calls: list[str | None] = []

    def register(self, token: str, email: str, role: str = "customer", principal_id: str | None = None) -> Principal:
        principal = Principal(id=principal_id or email, email=email, role=role)
        self.principals[token] = principal
        return principal

    def authenticate(self, credentials: str | None) -> Principal:
        self.calls.append(credentials)
        if not credentials:
            raise UnauthenticatedError("Missing credentials")
        try:
            return self.principals[credentials]
        except KeyError:
            raise UnauthenticatedError("Invalid credentials") from None
