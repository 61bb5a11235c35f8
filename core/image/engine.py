"""
Raster engine boundary.

An engine decodes, resamples, crops, samples and encodes rasters. The rest
of the package treats rasters as opaque values and only talks to them through
this interface, so engines can be swapped via configuration.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, NamedTuple, Optional, Tuple, Union

from core.constants import ImageConstants, format_for_extension
from core.enums import ImageFormat, ResampleFilter
from core.image.geometry import CropRect

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class PixelColor(NamedTuple):
    """RGB color of a single pixel (alpha is not sampled)."""

    red: int
    green: int
    blue: int


class DecodedImage(NamedTuple):
    """Raster produced by a decode call plus the format it was read from."""

    raster: Any
    file_type: Optional[ImageFormat]


class RasterEngine(ABC):
    """Interface every raster backend implements."""

    name = "engine"

    def __init__(
        self,
        resample_filter: ResampleFilter = ImageConstants.DEFAULT_RESAMPLE_FILTER,
        jpeg_quality: int = ImageConstants.DEFAULT_JPEG_QUALITY,
        apply_exif_orientation: bool = True,
    ):
        self.resample_filter = ResampleFilter(resample_filter)
        self.jpeg_quality = jpeg_quality
        self.apply_exif_orientation = apply_exif_orientation

    # Decoding

    @abstractmethod
    def decode_path(self, path: PathLike) -> DecodedImage:
        """Decode an image file. Raises ImageNotFoundError or DecodeError."""

    @abstractmethod
    def decode_bytes(self, data: bytes) -> DecodedImage:
        """Decode an in-memory image. Raises DecodeError."""

    # Metadata

    @abstractmethod
    def dimensions(self, raster) -> Tuple[int, int]:
        """Return (width, height)."""

    @abstractmethod
    def depth(self, raster) -> int:
        """Return bits per pixel."""

    @abstractmethod
    def color_type_code(self, raster) -> int:
        """Return the color type code understood by ColorType.from_code."""

    @abstractmethod
    def file_type(self, path: PathLike) -> Optional[ImageFormat]:
        """Detect the format of a file without decoding its pixels."""

    def format_for_path(self, path: PathLike) -> Optional[ImageFormat]:
        """Format implied by the file extension alone."""
        return format_for_extension(Path(path).suffix)

    # Transforms

    @abstractmethod
    def resample(self, raster, width: int, height: int):
        """Return a new raster resampled to width x height."""

    @abstractmethod
    def crop(self, raster, rect: CropRect):
        """Return a new raster holding the pixels inside rect."""

    @abstractmethod
    def pixel_at(self, raster, x: int, y: int) -> PixelColor:
        """Return the color at (x, y), origin top-left."""

    # Encoding

    @abstractmethod
    def can_write(self, image_format: ImageFormat) -> bool:
        """Whether the engine has an encoder for image_format."""

    @abstractmethod
    def encode_path(self, raster, path: PathLike, image_format: ImageFormat) -> bool:
        """
        Write raster to path.

        Raises EngineFailure when encoding fails; filesystem errors
        propagate as OSError.
        """

    @abstractmethod
    def encode_bytes(self, raster, image_format: ImageFormat) -> bytes:
        """Encode raster in memory. Raises EngineFailure on failure."""

    # Lifecycle

    @abstractmethod
    def release(self, raster) -> None:
        """Free engine resources held by raster."""

    @abstractmethod
    def version(self) -> str:
        """Human readable engine name and library version."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(filter={self.resample_filter.value})"
