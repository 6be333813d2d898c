"""
Application configuration.

Settings are grouped per concern in Pydantic models and read from
environment variables; a .env file in the working directory is loaded first.
"""

import os
from functools import lru_cache
from typing import Any, Dict, List

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from core.constants import APIConstants, OutputDefaults, SystemConstants
from core.enums import ImageFormat

load_dotenv()

ENV_PREFIX = "RASTER_"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    return _env(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


class SystemSettings(BaseModel):
    """Process-wide settings."""

    log_level: str = Field(default=SystemConstants.LOG_LEVEL_DEFAULT, description="Logging level")
    debug: bool = Field(default=False, description="Enable auto-reload and verbose errors")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return value


class APISettings(BaseModel):
    """HTTP server settings."""

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    cors_enabled: bool = Field(default=True)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class TransformSettings(BaseModel):
    """Defaults applied when a request does not set them."""

    default_output_format: ImageFormat = Field(default=ImageFormat(OutputDefaults.DEFAULT_FORMAT))
    jpeg_quality: int = Field(
        default=OutputDefaults.QUALITY,
        ge=OutputDefaults.MIN_QUALITY,
        le=OutputDefaults.MAX_QUALITY,
    )
    png_compression: int = Field(
        default=OutputDefaults.COMPRESSION,
        ge=OutputDefaults.MIN_COMPRESSION,
        le=OutputDefaults.MAX_COMPRESSION,
    )
    max_image_pixels: int = Field(
        default=APIConstants.MAX_IMAGE_PIXELS,
        gt=0,
        description="Decoder limit against decompression bombs",
    )


class Settings(BaseModel):
    """All application settings."""

    environment: str = Field(default="development")
    system: SystemSettings = Field(default_factory=SystemSettings)
    api: APISettings = Field(default_factory=APISettings)
    transform: TransformSettings = Field(default_factory=TransformSettings)

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-compatible representation (for the status endpoint)."""
        return self.model_dump(mode="json")


def load_settings() -> Settings:
    """Build settings from the environment."""
    origins = _env("CORS_ORIGINS", "*")
    return Settings(
        environment=_env("ENVIRONMENT", "development"),
        system=SystemSettings(
            log_level=_env("LOG_LEVEL", SystemConstants.LOG_LEVEL_DEFAULT),
            debug=_env_bool("DEBUG", False),
        ),
        api=APISettings(
            host=_env("HOST", "0.0.0.0"),
            port=int(_env("PORT", "8000")),
            cors_enabled=_env_bool("CORS_ENABLED", True),
            cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
        ),
        transform=TransformSettings(
            default_output_format=_env("DEFAULT_FORMAT", OutputDefaults.DEFAULT_FORMAT),
            jpeg_quality=int(_env("JPEG_QUALITY", str(OutputDefaults.QUALITY))),
            png_compression=int(_env("PNG_COMPRESSION", str(OutputDefaults.COMPRESSION))),
            max_image_pixels=int(_env("MAX_IMAGE_PIXELS", str(APIConstants.MAX_IMAGE_PIXELS))),
        ),
    )


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return load_settings()
