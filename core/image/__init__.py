"""
Image processing utilities - modular architecture.

This package provides focused image processing utilities:
- geometry: Size and crop planning (thumbnail, fit-within, square crop)
- engine: Raster engine interface (PillowEngine, OpenCVEngine)
- handle: Scoped image handles and their transforms
- codec: Opening images from paths or memory
- converters: Base64 payloads and format name parsing
"""

from core.image.codec import ImageCodec, create_engine, with_image, with_image_from_memory
from core.image.converters import ImageConverters
from core.image.engine import DecodedImage, PixelColor, RasterEngine
from core.image.geometry import (
    CropRect,
    GeometryPlan,
    plan_bounding_box,
    plan_centered_square_crop,
    plan_proportional,
)
from core.image.handle import ImageHandle, check_dimensions
from core.image.pillow_engine import PillowEngine

__all__ = [
    "ImageCodec",
    "ImageConverters",
    "ImageHandle",
    "RasterEngine",
    "PillowEngine",
    "DecodedImage",
    "PixelColor",
    "GeometryPlan",
    "CropRect",
    "check_dimensions",
    "create_engine",
    "plan_bounding_box",
    "plan_centered_square_crop",
    "plan_proportional",
    "with_image",
    "with_image_from_memory",
]
