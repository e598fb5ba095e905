"""Application settings for the ordering service.

Infrastructure (databases, event store, brokers) is configured in
``domain.toml``. Runtime settings of the service itself are read from the
environment here, using the ``ORDERING_`` prefix.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ORDERING_", env_file=".env", extra="ignore")

    identity_provider: str = Field("fake", description="Identity adapter: 'fake' or 'jwt'")
    jwt_secret: str | None = Field(None, description="HS256 secret used to verify bearer tokens")
    jwt_algorithm: str = Field("HS256", description="Algorithm accepted for bearer tokens")
    admin_role: str = Field("admin", description="Role claim that grants administrative capability")
    gateway_secret: str | None = Field(None, description="Secret used to verify payment gateway signatures")
    default_page_size: int = Field(100, ge=1, le=1000, description="Default page size for order listings")


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Return the cached settings, loading them from the environment on first use."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def set_settings(settings: Settings) -> None:
    """Override the active settings (useful for tests)."""
    global _settings_instance
    _settings_instance = settings


def reset_settings() -> None:
    global _settings_instance
    _settings_instance = None
