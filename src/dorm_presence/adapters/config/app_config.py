"""12-factor configuration adapter using environment variables."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to bind the server to")
    log_level: str = Field(default="INFO", description="Logging level for the application")

    # Clock configuration
    timezone: str = Field(
        default="Asia/Manila",
        description="Timezone of the dormitory's wall clock (IANA timezone name)",
    )

    # Data configuration
    # If not set, the store starts empty
    seed_file: str | None = Field(
        default="config.example.toml",
        description="Path to TOML file with dorms, rooms, users and scan logs to load at startup",
    )
    data_file: str | None = Field(
        default=None,
        description="Path to JSON file the document store is loaded from and saved to",
    )

    # Log views
    log_limit: int = Field(
        default=100, description="Number of most recent scan events listed by default"
    )
    scan_history_limit: int = Field(
        default=100,
        description="Number of a student's latest events read to decide between entry and exit",
    )

    # Rate limiting configuration
    rate_limit_per_minute: int = Field(
        default=100,
        description="Maximum number of requests allowed per IP address per minute",
    )

    # CLI configuration
    api_url: str = Field(
        default="http://127.0.0.1:8000",
        description="Base URL of the server the CLI talks to",
    )
    api_timeout: int = Field(default=10, description="Timeout for CLI requests in seconds")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA timezone name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"timezone must be an IANA timezone name, got {v!r}") from e
        return v

    @field_validator("log_limit", "scan_history_limit", "rate_limit_per_minute")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate limits are positive."""
        if v <= 0:
            raise ValueError("limits must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be DEBUG, INFO, WARNING, ERROR or CRITICAL")
        return v.upper()

    @property
    def tzinfo(self) -> ZoneInfo:
        """The configured timezone."""
        return ZoneInfo(self.timezone)
