"""
Application configuration for Thumbsmith.

Settings are read from environment variables prefixed with THUMBSMITH_
(nested sections use a double underscore, e.g. THUMBSMITH_IMAGE__ENGINE=opencv)
and from an optional .env file.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import ImageConstants, SystemConstants
from core.enums import EngineKind, ResampleFilter
from core.image import RasterEngine, create_engine

logger = logging.getLogger(__name__)


class SystemSettings(BaseModel):
    """Process-level settings"""

    log_level: str = SystemConstants.LOG_LEVEL_DEFAULT
    debug: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level


class ImageSettings(BaseModel):
    """Raster engine and encoding settings"""

    engine: EngineKind = EngineKind.PILLOW
    resample_filter: ResampleFilter = ImageConstants.DEFAULT_RESAMPLE_FILTER
    jpeg_quality: int = Field(
        default=ImageConstants.DEFAULT_JPEG_QUALITY,
        ge=ImageConstants.MIN_JPEG_QUALITY,
        le=ImageConstants.MAX_JPEG_QUALITY,
    )
    apply_exif_orientation: bool = True
    default_thumbnail_size: int = Field(
        default=ImageConstants.DEFAULT_THUMBNAIL_SIZE,
        ge=ImageConstants.MIN_THUMBNAIL_SIZE,
        le=ImageConstants.MAX_THUMBNAIL_SIZE,
    )
    max_upload_mb: float = Field(default=SystemConstants.DEFAULT_MAX_UPLOAD_MB, gt=0)


class APISettings(BaseModel):
    """HTTP server settings"""

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    cors_enabled: bool = True
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class Settings(BaseSettings):
    """Root settings object"""

    model_config = SettingsConfigDict(
        env_prefix="THUMBSMITH_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    environment: str = "development"
    system: SystemSettings = Field(default_factory=SystemSettings)
    image: ImageSettings = Field(default_factory=ImageSettings)
    api: APISettings = Field(default_factory=APISettings)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize settings for the /config endpoint."""
        return self.model_dump(mode="json")


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()


def build_engine(settings: Settings) -> RasterEngine:
    """Create the raster engine described by settings.image."""
    image = settings.image
    return create_engine(
        image.engine,
        resample_filter=image.resample_filter,
        jpeg_quality=image.jpeg_quality,
        apply_exif_orientation=image.apply_exif_orientation,
    )
