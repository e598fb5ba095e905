"""Bearer-token identity provider backed by signed JWTs (python-jose).

Expected claims: ``sub`` (principal id), ``email`` and ``role``. Expiry is
enforced when the token carries an ``exp`` claim.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from protean.exceptions import ConfigurationError

from ordering.identity.port import IdentityProvider, Principal
from ordering.order.errors import UnauthenticatedError
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


class JWTIdentityProvider(IdentityProvider):
    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        if not secret:
            raise ConfigurationError("ORDERING_JWT_SECRET is required for the jwt identity provider")
        self.secret = secret
        self.algorithm = algorithm

    def authenticate(self, credentials: str | None) -> Principal:
        if not credentials:
            raise UnauthenticatedError("Missing credentials")

        try:
            claims = jwt.decode(credentials, self.secret, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.warning("Bearer token rejected", error=str(exc))
            raise UnauthenticatedError("Invalid or expired token") from exc

        email = claims.get("email")
        if not email:
            raise UnauthenticatedError("Token has no email claim")

        return Principal(
            id=str(claims.get("sub") or email),
            email=email,
            role=claims.get("role") or "customer",
        )

    def issue(self, subject: str, email: str, role: str = "customer", expires_in: timedelta | None = None) -> str:
        """Create a signed token. Used by tooling and tests."""
        now = datetime.now(UTC)
        claims = {"sub": subject, "email": email, "role": role, "iat": now}
        if expires_in is not None:
            claims["exp"] = now + expires_in
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)
