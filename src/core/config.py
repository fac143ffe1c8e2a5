from functools import lru_cache
import os

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config_models import DatabaseConfig, LoggingConfig, ServerConfig, StoreConfig

_TRUTHY = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


class Settings(BaseSettings):
    """Application settings assembled from environment variables and defaults."""

    # Environment
    environment: str = Field(default="development", pattern="^(development|staging|production)$")
    debug: bool = Field(default=False)

    # API
    api_title: str = Field(default="NextBlog API")
    api_version: str = Field(default="1.0.0")
    api_description: str = Field(default="A minimal blog platform API")

    # CORS (comma separated list of origins)
    cors_allow_origins: str = Field(default="")

    # Server
    server: ServerConfig = Field(default_factory=ServerConfig)

    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Store selection (populated in validator)
    store: StoreConfig = Field(default_factory=StoreConfig)

    # Database (populated in validator, only for the sql backend)
    database: DatabaseConfig | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, **values):
        # Ensure plain ValueError is raised (not Pydantic ValidationError)
        backend = os.getenv("STORE_BACKEND", "sql").strip().lower()
        if backend == "sql" and not os.getenv("DATABASE_URL"):
            raise ValueError("DATABASE_URL environment variable is required")
        super().__init__(**values)

    @model_validator(mode="after")
    def _assemble_subconfigs(self):
        """Assemble nested configurations from environment variables."""
        self.store = StoreConfig(
            backend=os.getenv("STORE_BACKEND", self.store.backend).strip().lower(),
            seed_sample_posts=_env_flag("SEED_SAMPLE_POSTS", self.store.seed_sample_posts),
        )

        database_url = os.getenv("DATABASE_URL")
        if database_url:
            self.database = DatabaseConfig(
                url=database_url,
                echo=self.environment == "development" and self.debug,
                pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
                max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "20")),
                pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
            )

        # Adjust logging for environment
        if self.environment == "production":
            self.logging.level = "WARNING"
        elif self.environment == "development":
            self.logging.level = "DEBUG"

        self.server.check_db_on_start = _env_flag("DB_CHECK_ON_START", self.server.check_db_on_start)

        return self

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
