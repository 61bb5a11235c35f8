"""
Image processing API models.

This module contains request and response models for image operations:
- Image inspection (dimensions, color type, format)
- Derived images (resize, thumbnails, fit-within, conversion)
- Pixel sampling
"""

from typing import Optional

from pydantic import BaseModel, Field


class ImageRequest(BaseModel):
    """Base request carrying an encoded image"""

    image: str = Field(..., min_length=1, description="Base64 encoded image (data URLs allowed)")


class OutputImageRequest(ImageRequest):
    """Request producing a derived image"""

    format: Optional[str] = Field(
        default=None, description="Output format or extension (defaults to the source format)"
    )


class ResizeRequest(OutputImageRequest):
    """Resize to an exact size. Fractional values are truncated."""

    width: float = Field(..., allow_inf_nan=False)
    height: float = Field(..., allow_inf_nan=False)


class ThumbnailRequest(OutputImageRequest):
    """Proportional or square thumbnail"""

    size: Optional[float] = Field(
        default=None,
        allow_inf_nan=False,
        description="Longest edge in pixels (defaults to the configured size)",
    )


class FitWithinRequest(OutputImageRequest):
    """Fit inside a bounding box without upscaling"""

    max_width: float = Field(..., gt=0, allow_inf_nan=False)
    max_height: float = Field(..., gt=0, allow_inf_nan=False)


class ConvertRequest(ImageRequest):
    """Re-encode to another format"""

    format: str = Field(..., min_length=1)


class PixelRequest(ImageRequest):
    """Sample one pixel. Origin is the top-left corner."""

    x: int
    y: int


class ImageInfoResponse(BaseModel):
    """Decoded image metadata"""

    width: int
    height: int
    depth: int
    color_type: Optional[str]
    color_type_code: int
    format: Optional[str]


class DerivedImageResponse(BaseModel):
    """Derived image and its metadata"""

    image: str
    width: int
    height: int
    format: str
    processing_time_ms: int


class PixelColorResponse(BaseModel):
    """RGB color of a pixel"""

    red: int = Field(..., ge=0, le=255)
    green: int = Field(..., ge=0, le=255)
    blue: int = Field(..., ge=0, le=255)
