"""Application configuration using Pydantic Settings."""

from decimal import Decimal
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # CORS Settings
    allowed_origins: str = Field(
        default="http://localhost:3000",
        validate_default=True,
        description="Comma-separated list of allowed CORS origins"
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./betledger.db",
        description="SQLAlchemy async database URL"
    )
    db_echo: bool = Field(default=False, description="Echo SQL statements")

    # Auth
    jwt_secret: str = Field(
        default="change-me",
        description="Secret used to sign access tokens"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(
        default=60,
        description="Access token lifetime in minutes"
    )
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, description="bcrypt cost factor")
    admin_username: str = Field(
        default="",
        description="Admin account created at startup if missing (empty disables)"
    )
    admin_password: str = Field(default="", description="Password for the startup admin")

    # Ledger
    initial_balance: Decimal = Field(
        default=Decimal("10000.00"),
        ge=0,
        description="Starting balance for newly registered users"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Observability
    logfire_token: str = Field(
        default="",
        description="Logfire observability token"
    )

    # Application Limits
    pagination_max_limit: int = Field(
        default=100,
        description="Maximum pagination limit"
    )
    pagination_default_limit: int = Field(
        default=20,
        description="Default pagination limit"
    )

    @field_validator("allowed_origins")
    @classmethod
    def parse_origins(cls, v: str) -> List[str]:
        """Parse comma-separated origins into a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Reject an empty signing secret."""
        if not v.strip():
            raise ValueError("JWT secret cannot be empty")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    return Settings()


settings = get_settings()
