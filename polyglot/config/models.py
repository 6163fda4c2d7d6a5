"""
Pydantic-based configuration models for the Polyglot server.

Every section is a BaseSettings model bound to its own environment prefix,
aggregated by AppConfig and accessed through get_config().
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class ServerConfig(BaseSettings):
    """Server network configuration."""

    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(..., description="Server port (required)")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1024 <= v <= 65535:
            logger.error("Invalid server port", port=v, valid_range="1024-65535")
            raise ValueError("Port must be between 1024 and 65535")
        return v

    model_config = {"env_prefix": "SERVER_", "case_sensitive": False, "extra": "ignore"}


class DatabaseConfig(BaseSettings):
    """Database configuration for the user and session stores."""

    url: str = Field(default="sqlite+aiosqlite:///./polyglot.sqlite", description="Async SQLAlchemy database URL")
    echo: bool = Field(default=False, description="Echo SQL statements to the log")

    @field_validator("url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Only async drivers are usable from the event loop."""
        if not v:
            raise ValueError("Database URL cannot be empty")
        if not (v.startswith("sqlite+aiosqlite") or v.startswith("postgresql+asyncpg")):
            logger.error("Database URL validation failed - unsupported driver", url_preview=v[:50])
            raise ValueError("Database URL must use 'sqlite+aiosqlite' or 'postgresql+asyncpg'")
        return v

    model_config = {"env_prefix": "DATABASE_", "case_sensitive": False, "extra": "ignore"}


class SecurityConfig(BaseSettings):
    """Session cookie configuration."""

    cookie_secret: str = Field(..., description="Secret used to sign the session cookie (required)")
    cookie_name: str = Field(default="session", description="Name of the session cookie")
    session_max_age_seconds: int = Field(default=8 * 60 * 60, description="Session idle expiry window")
    cookie_secure: bool = Field(default=False, description="Only send the session cookie over HTTPS")

    @field_validator("cookie_secret")
    @classmethod
    def validate_cookie_secret(cls, v: str) -> str:
        if len(v) < 16:
            logger.error("Cookie secret validation failed - too short", secret_length=len(v), minimum_length=16)
            raise ValueError("Cookie secret must be at least 16 characters")
        return v

    @field_validator("session_max_age_seconds")
    @classmethod
    def validate_max_age(cls, v: int) -> int:
        if v < 60:
            raise ValueError("Session max age must be at least 60 seconds")
        return v

    model_config = {"env_prefix": "POLYGLOT_", "case_sensitive": False, "extra": "ignore"}


class AuthConfig(BaseSettings):
    """Login lockout policy."""

    max_login_attempts: int = Field(default=5, description="Failed attempts before the session is locked")
    lockout_minutes: int = Field(default=3, description="Length of a login lockout in minutes")

    @field_validator("max_login_attempts", "lockout_minutes")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Lockout settings must be at least 1")
        return v

    model_config = {"env_prefix": "AUTH_", "case_sensitive": False, "extra": "ignore"}


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    environment: str = Field(default="local", description="Logging environment")
    level: str = Field(default="INFO", description="Log level")
    log_base: str = Field(default="logs", description="Base log directory")
    rotation_max_bytes: int = Field(default=10 * 1024 * 1024, description="Log rotation max size in bytes")
    rotation_backup_count: int = Field(default=5, description="Number of backup log files")
    disable_logging: bool = Field(default=False, description="Disable file logging")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate logging environment."""
        valid_environments = ["local", "unit_test", "production"]
        if v not in valid_environments:
            logger.error("Invalid logging environment", environment=v, valid_environments=valid_environments)
            raise ValueError(f"Environment must be one of {valid_environments}, got '{v}'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}, got '{v}'")
        return v_upper

    model_config = {"env_prefix": "LOGGING_", "case_sensitive": False, "extra": "ignore"}

    def to_legacy_dict(self) -> dict:
        """Dict form consumed by setup_enhanced_logging()."""
        return {
            "environment": self.environment,
            "level": self.level,
            "log_base": self.log_base,
            "rotation": {
                "max_bytes": self.rotation_max_bytes,
                "backup_count": self.rotation_backup_count,
            },
            "disable_logging": self.disable_logging,
        }


class StaticConfig(BaseSettings):
    """Optional static site served next to the API."""

    directory: str | None = Field(default=None, description="Directory of static files mounted at '/'")

    model_config = {"env_prefix": "STATIC_", "case_sensitive": False, "extra": "ignore"}


class AppConfig(BaseSettings):
    """
    Composite application configuration.

    Access via the get_config() function rather than instantiating directly.
    """

    server: ServerConfig = Field(default_factory=ServerConfig)  # type: ignore[arg-type]
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)  # type: ignore[arg-type]
    auth: AuthConfig = Field(default_factory=AuthConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    static: StaticConfig = Field(default_factory=StaticConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "case_sensitive": False, "extra": "ignore"}

    def to_legacy_dict(self) -> dict:
        """Flatten to the dict shape used by logging setup and diagnostics. Secrets are left out."""
        return {
            "host": self.server.host,
            "port": self.server.port,
            "database_url": self.database.url,
            "cookie_name": self.security.cookie_name,
            "session_max_age_seconds": self.security.session_max_age_seconds,
            "max_login_attempts": self.auth.max_login_attempts,
            "lockout_minutes": self.auth.lockout_minutes,
            "logging": self.logging.to_legacy_dict(),
        }
