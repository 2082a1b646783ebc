"""
Application configuration using Pydantic Settings.

Configuration values can be set via environment variables or .env file.
Settings and the loaded application credentials are frozen once built; the
running application keeps them on ``app.state`` and hands them to routes
through dependencies.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Package directory; the default key file lives next to the application code
PACKAGE_DIR = Path(__file__).parent.parent

DEFAULT_PRIVATE_KEY_PATH = PACKAGE_DIR / "digi-me-private.key"


class ConfigurationError(Exception):
    """Raised when the application cannot be configured at startup."""


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application settings
    APP_NAME: str = "Private Sharing Example"
    VERSION: str = "1.0.0"
    DEV_MODE: bool = False
    LOG_FILE: Optional[str] = None
    HOST: str = "0.0.0.0"
    PORT: int = 8081

    # Visit https://go.digi.me/developers/register to get an Application ID
    DIGIME_APPLICATION_ID: str = "PLACEHOLDER_APP_ID"
    # Sample sharing contract; replace with the Contract ID issued for your app
    DIGIME_CONTRACT_ID: str = "fJI8P5Z4cIhP3HawlXVvxWBrbyj5QkTF"
    DIGIME_PRIVATE_KEY_PATH: Path = DEFAULT_PRIVATE_KEY_PATH

    DIGIME_BASE_URL: str = "https://api.digi.me/v1.5"
    DIGIME_ONBOARD_URL: str = "https://api.digi.me/apps/quark/direct-onboarding"

    # When set, callback URLs are built from this instead of the request host
    PUBLIC_BASE_URL: Optional[str] = None

    # Outbound call limits (seconds)
    REQUEST_TIMEOUT: float = Field(default=30.0, gt=0)
    PULL_TIMEOUT: float = Field(default=300.0, gt=0)
    POLL_INTERVAL: float = Field(default=3.0, ge=0)
    MAX_CONCURRENT_DOWNLOADS: int = Field(default=5, ge=1)

    # Reject returns whose sessionId was not issued by this process
    VERIFY_RETURNED_SESSIONS: bool = False
    SESSION_REGISTRY_TTL: int = Field(default=3600, gt=0)


class AppCredentials(BaseModel):
    """Identifiers and private key used to talk to the data-sharing platform."""

    model_config = ConfigDict(frozen=True)

    application_id: str = Field(..., min_length=1)
    contract_id: str = Field(..., min_length=1)
    private_key: str = Field(..., repr=False)


def load_app_credentials(settings: Settings) -> AppCredentials:
    """Read the private key from disk and build the application credentials.

    Args:
        settings: Application settings naming the ids and the key file.

    Returns:
        Immutable credentials for the lifetime of the process.

    Raises:
        ConfigurationError: If the key file is missing or unreadable.
    """
    key_path = Path(settings.DIGIME_PRIVATE_KEY_PATH)
    try:
        private_key = key_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationError(
            f"Private key file not found: {key_path}. Put the key provided by "
            "digi.me there or set DIGIME_PRIVATE_KEY_PATH."
        ) from None
    except OSError as e:
        raise ConfigurationError(f"Could not read private key file {key_path}: {e}") from e

    if not private_key.strip():
        raise ConfigurationError(f"Private key file is empty: {key_path}")

    return AppCredentials(
        application_id=settings.DIGIME_APPLICATION_ID,
        contract_id=settings.DIGIME_CONTRACT_ID,
        private_key=private_key,
    )


def get_settings() -> Settings:
    """Build settings from the environment."""
    return Settings()
