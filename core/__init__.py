"""
Core modules for Thumbsmith
"""

from .enums import ColorType, EngineKind, ImageFormat, ResampleFilter
from .exceptions import (
    DecodeError,
    EngineFailure,
    ImageNotFoundError,
    ImageReleasedError,
    ImageScienceError,
    InvalidDimensionError,
    OutOfBoundsError,
    UnsupportedFormatError,
)
from .image import ImageCodec, ImageHandle, PixelColor, create_engine

__all__ = [
    "ImageCodec",
    "ImageHandle",
    "PixelColor",
    "create_engine",
    "ColorType",
    "EngineKind",
    "ImageFormat",
    "ResampleFilter",
    "ImageScienceError",
    "DecodeError",
    "ImageNotFoundError",
    "InvalidDimensionError",
    "OutOfBoundsError",
    "EngineFailure",
    "UnsupportedFormatError",
    "ImageReleasedError",
]
