"""
Codec bridge between callers and a raster engine.

ImageCodec opens images from paths or memory and hands them out as scoped
ImageHandle instances; it also answers file type and version queries.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from core.enums import EngineKind, ImageFormat
from core.image.engine import PathLike, RasterEngine
from core.image.handle import ImageHandle
from core.image.pillow_engine import PillowEngine
from core.utils.enum_converter import parse_enum

logger = logging.getLogger(__name__)


def create_engine(kind="pillow", **options) -> RasterEngine:
    """
    Build a raster engine by name.

    Args:
        kind: "pillow" or "opencv" (case-insensitive); unknown names fall
            back to Pillow
        **options: Passed to the engine constructor (resample_filter,
            jpeg_quality, apply_exif_orientation)

    Returns:
        RasterEngine instance
    """
    engine_kind = parse_enum(kind, EngineKind, EngineKind.PILLOW, normalize=True)

    if engine_kind == EngineKind.OPENCV:
        # Imported lazily so Pillow-only deployments never load cv2
        from core.image.opencv_engine import OpenCVEngine

        engine = OpenCVEngine(**options)
    else:
        engine = PillowEngine(**options)

    logger.info(f"Using raster engine {engine.version()} ({engine!r})")
    return engine


class ImageCodec:
    """Opens images through an injected raster engine."""

    def __init__(self, engine: Optional[RasterEngine] = None):
        """
        Initialize codec.

        Args:
            engine: Raster engine to use (a default PillowEngine if omitted)
        """
        self.engine = engine if engine is not None else PillowEngine()

    @contextmanager
    def open(self, path: PathLike) -> Iterator[ImageHandle]:
        """
        Open the image at path and yield it for the duration of the block.

        Raises:
            ImageNotFoundError: If path does not exist
            DecodeError: If the file is not a decodable image
        """
        decoded = self.engine.decode_path(path)
        logger.debug(f"Opened {path}")
        with ImageHandle(decoded.raster, self.engine, decoded.file_type) as image:
            yield image

    @contextmanager
    def open_bytes(self, data: bytes) -> Iterator[ImageHandle]:
        """
        Decode an in-memory image and yield it for the duration of the block.

        Raises:
            DecodeError: If data is empty or not a decodable image
        """
        decoded = self.engine.decode_bytes(data)
        logger.debug(f"Opened {len(data)} byte image from memory")
        with ImageHandle(decoded.raster, self.engine, decoded.file_type) as image:
            yield image

    def file_type(self, path: PathLike) -> Optional[ImageFormat]:
        """Detect the format of path from its header or extension, or None."""
        return self.engine.file_type(path)

    def image_type(self, path: PathLike) -> Optional[str]:
        """Name of the format of path, e.g. "PNG", or None."""
        file_type = self.file_type(path)
        return file_type.value if file_type else None

    def version(self) -> str:
        return self.engine.version()


def with_image(path: PathLike, engine: Optional[RasterEngine] = None):
    """Shortcut for ``ImageCodec(engine).open(path)``."""
    return ImageCodec(engine).open(path)


def with_image_from_memory(data: bytes, engine: Optional[RasterEngine] = None):
    """Shortcut for ``ImageCodec(engine).open_bytes(data)``."""
    return ImageCodec(engine).open_bytes(data)
