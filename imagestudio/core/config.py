"""
Configuration management using Pydantic Settings

Centralised settings for the API, logging, uploads and the mock generator,
read from environment variables and an optional .env file.
"""

from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Info
    app_name: str = Field(default="Image Studio")
    app_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    reload: bool = Field(default=False)

    # API Configuration
    api_v1_prefix: str = Field(default="/api/v1")

    # CORS Configuration
    allowed_origins: Annotated[List[str], NoDecode] = Field(default=["*"])
    allowed_methods: Annotated[List[str], NoDecode] = Field(default=["GET", "POST", "OPTIONS"])
    allowed_headers: Annotated[List[str], NoDecode] = Field(default=["*"])
    allow_credentials: bool = Field(default=True)

    # Upload and output
    max_image_size_mb: int = Field(default=10, gt=0)
    output_format: str = Field(default="jpeg")
    output_quality: int = Field(default=90, ge=1, le=100)

    # Mock text-to-design generator
    generation_delay_seconds: float = Field(default=0.0, ge=0.0)
    max_generation_batch: int = Field(default=4, ge=1)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    log_max_size_mb: int = Field(default=10)
    log_backup_count: int = Field(default=5)

    @field_validator("allowed_origins", "allowed_methods", "allowed_headers", mode="before")
    @classmethod
    def parse_comma_separated(cls, v):
        """Parse comma-separated lists from the environment"""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {', '.join(allowed)}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in allowed:
            raise ValueError(f"Log level must be one of: {', '.join(allowed)}")
        return v

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v):
        """Validate encoder format"""
        v = v.lower()
        if v == "jpg":
            v = "jpeg"
        allowed = ["jpeg", "png", "webp"]
        if v not in allowed:
            raise ValueError(f"Output format must be one of: {', '.join(allowed)}")
        return v

    @property
    def max_image_size_bytes(self) -> int:
        """Calculate max image size in bytes"""
        return self.max_image_size_mb * 1024 * 1024

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance

    Returns:
        Settings: Application settings singleton
    """
    return Settings()


def get_log_config(settings: Optional[Settings] = None) -> dict:
    """Get logging configuration dict"""
    settings = settings or get_settings()
    return {
        "level": settings.log_level,
        "format": settings.log_format,
        "file": settings.log_file,
        "max_size": settings.log_max_size_mb * 1024 * 1024,
        "backup_count": settings.log_backup_count,
    }


def get_cors_config(settings: Optional[Settings] = None) -> dict:
    """Get CORS configuration dict"""
    settings = settings or get_settings()
    return {
        "allow_origins": settings.allowed_origins,
        "allow_methods": settings.allowed_methods,
        "allow_headers": settings.allowed_headers,
        "allow_credentials": settings.allow_credentials,
    }


def get_image_processing_config(settings: Optional[Settings] = None) -> dict:
    """Get upload and encoder configuration dict"""
    settings = settings or get_settings()
    return {
        "max_size_mb": settings.max_image_size_mb,
        "output_format": settings.output_format,
        "output_quality": settings.output_quality,
    }
