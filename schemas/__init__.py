"""
Schemas Package

This package contains all Pydantic schemas for request/response validation
and serialization, organized by domain.
"""

# Image processing models
from .image import (
    ConvertRequest,
    DerivedImageResponse,
    FitWithinRequest,
    ImageInfoResponse,
    ImageRequest,
    OutputImageRequest,
    PixelColorResponse,
    PixelRequest,
    ResizeRequest,
    ThumbnailRequest,
)

# System models
from .system import SystemStatus

# Explicitly declare public API for re-export
__all__ = [
    # Image models
    "ImageRequest",
    "OutputImageRequest",
    "ResizeRequest",
    "ThumbnailRequest",
    "FitWithinRequest",
    "ConvertRequest",
    "PixelRequest",
    "ImageInfoResponse",
    "DerivedImageResponse",
    "PixelColorResponse",
    # System models
    "SystemStatus",
]
