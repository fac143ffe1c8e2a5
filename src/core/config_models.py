from pydantic import BaseModel, Field, field_validator


class DatabaseConfig(BaseModel):
    """Database connection and engine configuration."""

    url: str = Field(..., description="Database connection URL")
    echo: bool = Field(default=False, description="Enable SQL query logging")
    pool_size: int = Field(default=10, ge=1, le=100)
    max_overflow: int = Field(default=20, ge=0, le=100)
    pool_timeout: int = Field(default=30, ge=1, le=300)
    pool_pre_ping: bool = Field(default=True)

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Database URL must not be empty")
        return value


class StoreConfig(BaseModel):
    """Selects which post store implementation backs the API."""

    backend: str = Field(default="sql", pattern="^(sql|memory)$")
    seed_sample_posts: bool = Field(
        default=False, description="Preload the in-memory store with sample posts"
    )


class ServerConfig(BaseModel):
    """Server runtime configuration."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    reload: bool = Field(default=False, description="Enable auto-reload in development")
    check_db_on_start: bool = Field(
        default=True, description="Run store health check on startup"
    )


class LoggingConfig(BaseModel):
    """Application logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
