"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when a required configuration value is missing.

    Settings objects load lazily, so missing provider credentials only
    surface when a component that needs them is constructed.
    """

    pass


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        MOODRING_DB_HOST: Database host (default: localhost)
        MOODRING_DB_PORT: Database port (default: 5432)
        MOODRING_DB_DATABASE: Database name (default: moodring)
        MOODRING_DB_USERNAME: Database user (default: moodring)
        MOODRING_DB_PASSWORD: Database password (required in production)
        MOODRING_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        MOODRING_DB_POOL_TIMEOUT_SECONDS: Wait for a free connection (default: 30)
    """

    model_config = SettingsConfigDict(
        env_prefix="MOODRING_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="moodring", description="Database name")
    username: str = Field(default="moodring", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    pool_timeout_seconds: float = Field(
        default=30.0,
        description="Seconds to wait for a pooled connection before failing",
        gt=0,
    )

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class SpotifySettings(BaseSettings):
    """Identity provider (Spotify) settings.

    Environment variables:
        SPOTIFY_CLIENT_ID: OAuth client ID
        SPOTIFY_CLIENT_SECRET: OAuth client secret
        SPOTIFY_REDIRECT_URI: Redirect URI registered with the provider
        SPOTIFY_TOKEN_URL: Token endpoint for code exchange and refresh
        SPOTIFY_API_BASE_URL: Web API base URL (profile lookups)
        SPOTIFY_HTTP_TIMEOUT_SECONDS: Transport timeout for outbound calls
    """

    model_config = SettingsConfigDict(
        env_prefix="SPOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    client_id: str | None = Field(default=None, description="OAuth client ID")
    client_secret: SecretStr | None = Field(
        default=None, description="OAuth client secret"
    )
    redirect_uri: str = Field(
        default="moodring://auth",
        description="Redirect URI used when the authorization code was issued",
    )
    token_url: str = Field(
        default="https://accounts.spotify.com/api/token",
        description="Token endpoint",
    )
    api_base_url: str = Field(
        default="https://api.spotify.com/v1",
        description="Web API base URL",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        description="Transport timeout for provider calls",
        gt=0,
    )

    def require_credentials(self) -> tuple[str, str]:
        """Return (client_id, client_secret).

        Raises:
            ConfigurationError: If either credential is missing
        """
        missing = []
        if not self.client_id:
            missing.append("SPOTIFY_CLIENT_ID")
        if self.client_secret is None or not self.client_secret.get_secret_value():
            missing.append("SPOTIFY_CLIENT_SECRET")
        if missing:
            raise ConfigurationError(
                f"Missing required identity provider settings: {', '.join(missing)}"
            )
        assert self.client_id is not None
        assert self.client_secret is not None
        return self.client_id, self.client_secret.get_secret_value()


class SessionSettings(BaseSettings):
    """Session credential settings.

    Environment variables:
        MOODRING_SESSION_SIGNING_KEY: HMAC secret, or PEM private key for RS256
        MOODRING_SESSION_VERIFICATION_KEY: PEM public key (RS256 only)
        MOODRING_SESSION_ALGORITHM: JWS algorithm (default: HS256)
        MOODRING_SESSION_ISSUER: Issuer claim (default: moodring)
        MOODRING_SESSION_TTL_SECONDS: Session lifetime (default: 3600)
    """

    model_config = SettingsConfigDict(
        env_prefix="MOODRING_SESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    signing_key: SecretStr = Field(
        default=SecretStr("moodring-dev-signing-key"),
        description="Key used to sign session tokens",
    )
    verification_key: SecretStr | None = Field(
        default=None,
        description="Public key for asymmetric algorithms",
    )
    algorithm: str = Field(default="HS256", description="JWS algorithm")
    issuer: str = Field(default="moodring", description="Issuer claim")
    ttl_seconds: int = Field(
        default=3600,
        description="Session lifetime in seconds",
        ge=60,
    )

    @model_validator(mode="after")
    def validate_keys(self) -> "SessionSettings":
        """Validate key material matches the algorithm family."""
        if not self.signing_key.get_secret_value():
            raise ValueError("signing_key must not be empty")
        if not self.algorithm.startswith("HS") and self.verification_key is None:
            raise ValueError(
                f"verification_key is required for algorithm {self.algorithm}"
            )
        return self

    @property
    def effective_verification_key(self) -> str:
        """Key used to verify tokens (signing key for HMAC algorithms)."""
        if self.verification_key is not None:
            return self.verification_key.get_secret_value()
        return self.signing_key.get_secret_value()


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="MOODRING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Moodring API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_json: bool | None = Field(
        default=None,
        description="Force JSON (true) or console (false) logs; auto-detect if unset",
    )

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def spotify(self) -> SpotifySettings:
        """Get identity provider settings."""
        return get_spotify_settings()

    @property
    def session(self) -> SessionSettings:
        """Get session credential settings."""
        return get_session_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_spotify_settings() -> SpotifySettings:
    """Get cached identity provider settings."""
    return SpotifySettings()


@lru_cache
def get_session_settings() -> SessionSettings:
    """Get cached session credential settings."""
    return SessionSettings()


def clear_settings_cache() -> None:
    """Clear all settings caches. Useful for testing."""
    get_settings.cache_clear()
    get_database_settings.cache_clear()
    get_spotify_settings.cache_clear()
    get_session_settings.cache_clear()
