"""Application settings and configuration.

This module defines all configuration options for the Chetana application.
Settings are loaded from environment variables with sensible defaults.
"""

from datetime import time

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COMMUNITIES = ["depression", "anxiety", "stress", "general"]
DEFAULT_ADMIN_IDENTITIES = ["u/kklt3o", "admin@chetana.com", "admin"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    This class defines all configuration options for the Chetana application.
    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Chetana", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    admin_identities: list[str] = Field(
        default=DEFAULT_ADMIN_IDENTITIES,
        alias="ADMIN_IDENTITIES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./chetana.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")
    db_pool_size: int = Field(default=5, alias="DB_POOL_SIZE")
    db_pool_timeout_seconds: float = Field(default=10.0, alias="DB_POOL_TIMEOUT_SECONDS")
    db_connect_attempts: int = Field(default=3, alias="DB_CONNECT_ATTEMPTS")
    db_connect_backoff_seconds: float = Field(default=0.5, alias="DB_CONNECT_BACKOFF_SECONDS")

    # Redis is optional; without it the rate limiter keeps per-process state
    redis_url: str | None = Field(default=None, alias="REDIS_URL")
    rate_limit_window_seconds: int = Field(default=60, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_max_actions: int = Field(default=50, alias="RATE_LIMIT_MAX_ACTIONS")

    # Forum
    communities: list[str] = Field(default=DEFAULT_COMMUNITIES, alias="FORUM_COMMUNITIES")
    default_community: str = Field(default="depression", alias="FORUM_DEFAULT_COMMUNITY")
    require_membership_to_post: bool = Field(
        default=True,
        alias="FORUM_REQUIRE_MEMBERSHIP",
    )
    forum_page_size: int = Field(default=20, alias="FORUM_PAGE_SIZE")

    # Streaks: submissions after the deadline (local wall clock) are refused
    streak_deadline: time = Field(default=time(23, 59), alias="STREAK_DEADLINE")
    streak_timezone: str = Field(default="UTC", alias="STREAK_TIMEZONE")

    # Generative language API used by the chat pipeline
    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.5-flash-lite", alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    gemini_timeout_seconds: float = Field(default=30.0, alias="GEMINI_TIMEOUT_SECONDS")
    gemini_temperature: float = Field(default=0.7, alias="GEMINI_TEMPERATURE")
    gemini_top_k: int = Field(default=40, alias="GEMINI_TOP_K")
    gemini_top_p: float = Field(default=0.95, alias="GEMINI_TOP_P")
    gemini_max_output_tokens: int = Field(default=1024, alias="GEMINI_MAX_OUTPUT_TOKENS")

    # Chat history persistence (best effort)
    chat_history_enabled: bool = Field(default=True, alias="CHAT_HISTORY_ENABLED")
    chat_history_failure_threshold: int = Field(
        default=5,
        alias="CHAT_HISTORY_FAILURE_THRESHOLD",
    )
    chat_history_recovery_seconds: float = Field(
        default=120.0,
        alias="CHAT_HISTORY_RECOVERY_SECONDS",
    )
    chat_history_max_message_length: int = Field(
        default=5000,
        alias="CHAT_HISTORY_MAX_MESSAGE_LENGTH",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization", "X-CSRF-Token"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("admin_identities", "communities")
    @classmethod
    def _strip_entries(cls, value: list[str]) -> list[str]:
        return [entry.strip() for entry in value if entry.strip()]

    @property
    def is_sqlite(self) -> bool:
        """Return True when the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    @property
    def chat_enabled(self) -> bool:
        """Return True if an API key for the language model is configured."""
        return bool(self.gemini_api_key)


settings = Settings()  # type: ignore[call-arg]
