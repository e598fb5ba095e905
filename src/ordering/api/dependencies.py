"""FastAPI dependencies that resolve the calling principal."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ordering.identity import Principal, get_identity_provider
from ordering.utils.logging import add_context

bearer_scheme = HTTPBearer(auto_error=False)


async def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Verify the bearer token. Missing or invalid tokens raise UnauthenticatedError (401)."""
    token = credentials.credentials if credentials else None
    principal = get_identity_provider().authenticate(token)
    add_context(principal_id=principal.id)
    return principal
