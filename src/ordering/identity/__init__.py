"""Identity provider factory.

Provides get_identity_provider() / set_identity_provider() to swap
implementations:
- FakeIdentityProvider for development and testing (default)
- JWTIdentityProvider when ``ORDERING_IDENTITY_PROVIDER=jwt``
"""

from protean.exceptions import ConfigurationError

from ordering.config import get_settings
from ordering.identity.fake_adapter import FakeIdentityProvider
from ordering.identity.jwt_adapter import JWTIdentityProvider
from ordering.identity.port import IdentityProvider, Principal

__all__ = [
    "FakeIdentityProvider",
    "IdentityProvider",
    "JWTIdentityProvider",
    "Principal",
    "get_identity_provider",
    "reset_identity_provider",
    "set_identity_provider",
]

_current_provider: IdentityProvider | None = None


def _build_from_settings() -> IdentityProvider:
    settings = get_settings()
    if settings.identity_provider == "jwt":
        return JWTIdentityProvider(secret=settings.jwt_secret, algorithm=settings.jwt_algorithm)
    if settings.identity_provider == "fake":
        return FakeIdentityProvider()
    raise ConfigurationError(f"Unknown identity provider: {settings.identity_provider}")


def get_identity_provider() -> IdentityProvider:
    """Return the current identity provider, built from settings on first use."""
    global _current_provider
    if _current_provider is None:
        _current_provider = _build_from_settings()
    return _current_provider


def set_identity_provider(provider: IdentityProvider) -> None:
    """Override the active identity provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_identity_provider() -> None:
    global _current_provider
    _current_provider = None
