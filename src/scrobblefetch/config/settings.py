"""Application settings loaded from environment variables and .env files.

Hey future me - settings are EXPLICIT values threaded into constructors (LastfmClient,
BulkFetchService, FileTrackStore). Nothing in the engine reads os.environ at call sites, so tests
just build LastfmSettings(api_key="test", username="someone") and never touch the environment.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from scrobblefetch.domain.exceptions import ConfigurationError

# Last.fm refuses limit > 1000 for the user.* paging methods.
API_MAX_LIMIT = 1000


class LastfmSettings(BaseSettings):
    """Last.fm API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LASTFM_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # LAST_FM_API_KEY is the historical variable name - still honoured so old .env files work.
    api_key: str = Field(
        "",
        validation_alias=AliasChoices("LASTFM_API_KEY", "LAST_FM_API_KEY"),
        description="Last.fm API key",
    )
    username: str = Field("", description="Last.fm user whose collections are fetched")
    base_url: str = Field(
        "https://ws.audioscrobbler.com/2.0/", description="Last.fm API endpoint"
    )
    max_page_size: int = Field(
        API_MAX_LIMIT, ge=1, le=API_MAX_LIMIT, description="Items per API call"
    )
    batch_width: int = Field(
        5, ge=1, le=50, description="Max concurrent page requests per batch"
    )
    timeout: float = Field(30.0, gt=0, description="Per-request timeout in seconds")

    def is_configured(self) -> bool:
        """Check whether the API key and user name are set."""
        return bool(self.api_key.strip()) and bool(self.username.strip())

    def require_api_key(self) -> str:
        """Return the API key or fail before any network call."""
        if not self.api_key.strip():
            raise ConfigurationError(
                "Missing required environment variable: LASTFM_API_KEY\n"
                "Please set it in your environment or .env file"
            )
        return self.api_key


class StorageSettings(BaseSettings):
    """Where fetched track files are written."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    data_dir: Path = Field(Path("data"), description="Directory for saved track files")


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    level: str = Field("INFO", description="Root log level")
    json_format: bool = Field(False, description="Emit JSON log lines")


class Settings(BaseSettings):
    """Aggregated application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    lastfm: LastfmSettings = Field(default_factory=LastfmSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


def validate_settings(settings: Settings) -> None:
    """Report every missing required value at once.

    Raises:
        ConfigurationError: Listing all missing environment variables
    """
    missing: list[str] = []
    if not settings.lastfm.api_key.strip():
        missing.append("LASTFM_API_KEY")
    if not settings.lastfm.username.strip():
        missing.append("LASTFM_USERNAME")

    if missing:
        raise ConfigurationError(
            f"Missing required environment variable: {', '.join(missing)}\n"
            "Please set it in your environment or .env file"
        )


# Hey future me - cached so the CLI parses .env once. Tests that need different values should
# construct Settings(...) directly or call get_settings.cache_clear().
@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
