"""Application settings and configuration.

This module defines all configuration options for the HookLab API.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="HookLab AI", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./hooklab.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=False, alias="AUTO_CREATE_TABLES")

    # Free-tier credits granted when a wallet is first seen
    default_credits: int = Field(default=5, ge=0, alias="DEFAULT_CREDITS")

    # Generative model (Gemini)
    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_api_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_API_URL",
    )
    gemini_model: str = Field(default="gemini-pro", alias="GEMINI_MODEL")
    gemini_temperature: float = Field(default=0.9, alias="GEMINI_TEMPERATURE")
    gemini_top_k: int = Field(default=40, alias="GEMINI_TOP_K")
    gemini_top_p: float = Field(default=0.95, alias="GEMINI_TOP_P")
    gemini_max_output_tokens: int = Field(default=1024, alias="GEMINI_MAX_OUTPUT_TOKENS")

    # Social feed (Neynar)
    neynar_api_key: str | None = Field(default=None, alias="NEYNAR_API_KEY")
    neynar_base_url: str = Field(default="https://api.neynar.com/v2", alias="NEYNAR_BASE_URL")
    neynar_channel: str = Field(default="base", alias="NEYNAR_CHANNEL")
    neynar_feed_limit: int = Field(default=50, alias="NEYNAR_FEED_LIMIT")

    # Subscription contract
    chain_rpc_url: str = Field(default="https://mainnet.base.org", alias="CHAIN_RPC_URL")
    subscription_contract_address: str | None = Field(
        default=None,
        alias="SUBSCRIPTION_CONTRACT_ADDRESS",
    )
    subscribe_url: str = Field(default="/subscribe", alias="SUBSCRIBE_URL")

    # Outbound HTTP timeout shared by the model, feed and RPC clients
    http_timeout_seconds: float = Field(default=15.0, alias="HTTP_TIMEOUT_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def generation_config(self) -> dict[str, float | int]:
        """Return Gemini generation parameters in the wire format."""
        return {
            "temperature": self.gemini_temperature,
            "topK": self.gemini_top_k,
            "topP": self.gemini_top_p,
            "maxOutputTokens": self.gemini_max_output_tokens,
        }


settings = Settings()
