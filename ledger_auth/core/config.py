"""
Configuration management for ledger_auth
Uses pydantic-settings for environment variable loading and validation
"""

from functools import lru_cache
from typing import Annotated, List
from pydantic import Field, validator
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "ledger_auth"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # API
    API_PREFIX: str = "/api"

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./saral_ledger.db")
    DATABASE_ECHO: bool = Field(default=False)

    # Session tokens (symmetric MAC)
    JWT_SECRET_KEY: str = Field(..., description="HMAC key for session tokens, at least 32 characters")
    JWT_ALGORITHM: str = Field(default="HS256")
    JWT_ISSUER: str = Field(default="SaralLedgerAPI")
    JWT_AUDIENCE: str = Field(default="SaralLedgerUI")
    SESSION_TTL_HOURS: int = Field(default=24)

    # Second factor
    MFA_ISSUER: str = Field(default="SaralLedger")
    MFA_QR_CODE_ENABLED: bool = Field(default=True)

    # Security
    PASSWORD_BCRYPT_COST: int = Field(default=12)

    # CORS (comma-separated in the environment)
    CORS_ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(default=["http://localhost:3000"])

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")  # 'json' or 'text'

    # Development seed accounts
    SEED_DEFAULT_USERS: bool = Field(default=True)
    SEED_ADMIN_PASSWORD: str = Field(default="Admin@12345")
    SEED_USER_PASSWORD: str = Field(default="User@12345")

    @validator("CORS_ALLOWED_ORIGINS", pre=True)
    def parse_cors_origins(cls, v):
        """Parse comma-separated string to list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @validator("JWT_ALGORITHM")
    def validate_jwt_algorithm(cls, v):
        """Session tokens are signed with a shared secret only"""
        allowed = ["HS256", "HS384", "HS512"]
        if v.upper() not in allowed:
            raise ValueError(f"JWT_ALGORITHM must be one of {allowed}")
        return v.upper()

    @validator("JWT_SECRET_KEY")
    def validate_jwt_secret_key(cls, v):
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters long")
        return v

    @validator("PASSWORD_BCRYPT_COST")
    def validate_bcrypt_cost(cls, v):
        if not 4 <= v <= 31:
            raise ValueError("PASSWORD_BCRYPT_COST must be between 4 and 31")
        return v

    @validator("LOG_LEVEL")
    def validate_log_level(cls, v):
        """Validate log level"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @validator("LOG_FORMAT")
    def validate_log_format(cls, v):
        allowed = ["json", "text"]
        if v.lower() not in allowed:
            raise ValueError(f"LOG_FORMAT must be one of {allowed}")
        return v.lower()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


# Global settings instance
settings = get_settings()
