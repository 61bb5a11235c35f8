"""
Scoped image handles.

An ImageHandle owns exactly one decoded raster. Handles are only ever handed
out inside a ``with`` block; leaving the block releases the raster, on normal
exit and on error alike. Every transform yields a brand new handle scoped to
its own ``with`` block and never modifies the source.

Example:
    >>> with codec.open("photo.jpg") as image:
    ...     with image.cropped_thumbnail(100) as thumb:
    ...         thumb.save("thumb.png")
"""

import logging
import math
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, ContextManager, Iterator, Optional, Tuple, Union

from core.constants import format_for_extension
from core.enums import ColorType, ImageFormat
from core.exceptions import (
    EngineFailure,
    ImageReleasedError,
    InvalidDimensionError,
    OutOfBoundsError,
    UnsupportedFormatError,
)
from core.image.engine import PathLike, PixelColor, RasterEngine
from core.image.geometry import (
    CropRect,
    Number,
    plan_bounding_box,
    plan_centered_square_crop,
    plan_proportional,
)

logger = logging.getLogger(__name__)


def check_finite(**sizes: Number) -> None:
    """Reject NaN and infinite sizes before any arithmetic touches them."""
    for name, value in sizes.items():
        if not math.isfinite(value):
            raise InvalidDimensionError(f"{name.capitalize()} must be finite ({value})")


def check_dimensions(width: Number, height: Number) -> Tuple[int, int]:
    """
    Truncate width and height to integers and require both to be positive.

    Raises:
        InvalidDimensionError: If either value is zero, negative or not finite
    """
    check_finite(width=width, height=height)
    w, h = int(width), int(height)
    if w <= 0:
        raise InvalidDimensionError(f"Width <= 0 ({width})")
    if h <= 0:
        raise InvalidDimensionError(f"Height <= 0 ({height})")
    return w, h


class ImageHandle:
    """Exclusively owned wrapper around one decoded raster."""

    def __init__(
        self, raster: Any, engine: RasterEngine, file_type: Optional[ImageFormat] = None
    ):
        width, height = engine.dimensions(raster)
        if width <= 0 or height <= 0:
            engine.release(raster)
            raise InvalidDimensionError(f"Decoded image has invalid size {width}x{height}")

        self._raster = raster
        self._engine = engine
        self._released = False
        self.file_type = file_type

    # Lifecycle

    @property
    def raster(self) -> Any:
        """Underlying engine raster; only valid while the handle is open."""
        if self._released:
            raise ImageReleasedError()
        return self._raster

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Free the raster. Calling release more than once is a no-op."""
        if self._released:
            return
        self._released = True
        raster, self._raster = self._raster, None
        self._engine.release(raster)

    def __enter__(self) -> "ImageHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        if self._released:
            return "<ImageHandle released>"
        return (
            f"<ImageHandle {self.width}x{self.height} "
            f"{self.color_type_name} {self.file_type.value if self.file_type else '?'}>"
        )

    # Metadata

    @property
    def width(self) -> int:
        return self._engine.dimensions(self.raster)[0]

    @property
    def height(self) -> int:
        return self._engine.dimensions(self.raster)[1]

    @property
    def size(self) -> Tuple[int, int]:
        return self._engine.dimensions(self.raster)

    @property
    def depth(self) -> int:
        """Bits per pixel."""
        return self._engine.depth(self.raster)

    @property
    def color_type_code(self) -> int:
        return self._engine.color_type_code(self.raster)

    @property
    def color_type(self) -> Optional[ColorType]:
        return ColorType.from_code(self.color_type_code, self.depth)

    @property
    def color_type_name(self) -> Optional[str]:
        color_type = self.color_type
        return color_type.value if color_type else None

    # Transforms

    @contextmanager
    def _derive(self, produce: Callable[[], Any]) -> Iterator["ImageHandle"]:
        """Run an engine transform and scope the resulting handle."""
        with ImageHandle(produce(), self._engine, self.file_type) as derived:
            yield derived

    def resize(self, width: Number, height: Number) -> ContextManager["ImageHandle"]:
        """
        Resample to width x height and yield the new image.

        Fractional sizes are truncated. Dimensions are validated immediately,
        before the engine is touched, so an invalid size never produces output.

        Raises:
            InvalidDimensionError: If width or height is <= 0 after truncation
        """
        w, h = check_dimensions(width, height)
        raster = self.raster
        logger.debug(f"Resizing {self.width}x{self.height} -> {w}x{h}")
        return self._derive(lambda: self._engine.resample(raster, w, h))

    def thumbnail(self, size: Number) -> ContextManager["ImageHandle"]:
        """Scale proportionally so the longest edge becomes size."""
        check_finite(size=size)
        plan = plan_proportional(self.width, self.height, size)
        return self.resize(plan.width, plan.height)

    def fit_within(self, max_width: Number, max_height: Number) -> ContextManager["ImageHandle"]:
        """Scale proportionally to fit inside max_width x max_height without upscaling."""
        check_finite(width=max_width, height=max_height)
        plan = plan_bounding_box(self.width, self.height, max_width, max_height)
        return self.resize(plan.width, plan.height)

    def with_crop(
        self, left: int, top: int, right: int, bottom: int
    ) -> ContextManager["ImageHandle"]:
        """
        Crop to the box (left, top, right, bottom) and yield the new image.

        Raises:
            OutOfBoundsError: If the box is empty or extends past the image
        """
        rect = CropRect(int(left), int(top), int(right), int(bottom))
        if not rect.fits_within(self.width, self.height):
            raise OutOfBoundsError(
                f"Crop {rect.as_box()} outside image {self.width}x{self.height}"
            )
        raster = self.raster
        return self._derive(lambda: self._engine.crop(raster, rect))

    def cropped_thumbnail(self, size: Number) -> ContextManager["ImageHandle"]:
        """
        Crop the longest edge to match the shortest, centered, then thumbnail
        the square to size.
        """
        check_finite(size=size)
        rect = plan_centered_square_crop(self.width, self.height)
        check_dimensions(*plan_proportional(rect.width, rect.height, size))
        return self._cropped_thumbnail(rect, size)

    @contextmanager
    def _cropped_thumbnail(self, rect: CropRect, size: Number) -> Iterator["ImageHandle"]:
        with self.with_crop(*rect.as_box()) as square:
            with square.thumbnail(size) as thumb:
                yield thumb

    # Sampling

    def color_at(self, x: int, y: int) -> PixelColor:
        """
        Return the RGB color of pixel (x, y).

        The origin is the top-left corner; y grows downward.

        Raises:
            OutOfBoundsError: If (x, y) is outside the image
        """
        width, height = self.size
        if not (0 <= x < width and 0 <= y < height):
            raise OutOfBoundsError(f"Pixel ({x}, {y}) outside image {width}x{height}")
        return self._engine.pixel_at(self.raster, int(x), int(y))

    get_pixel_color = color_at

    # Encoding

    def _resolve_format(
        self, path: Optional[PathLike], image_format: Union[ImageFormat, str, None]
    ) -> Optional[ImageFormat]:
        if image_format is not None:
            if isinstance(image_format, ImageFormat):
                return image_format
            return format_for_extension(image_format) or _format_by_name(image_format)
        if path is not None:
            detected = self._engine.format_for_path(path)
            if detected is not None:
                return detected
        return self.file_type

    def save(self, path: PathLike, image_format: Union[ImageFormat, str, None] = None) -> bool:
        """
        Encode the image to path.

        The format is taken from image_format, then the path's extension, then
        the format the image was decoded from.

        Returns:
            True on success, False if the format is unknown or the engine
            could not encode the image

        Raises:
            OSError: On filesystem failures such as a missing directory
        """
        raster = self.raster
        target_format = self._resolve_format(path, image_format)
        if target_format is None or not self._engine.can_write(target_format):
            logger.warning(f"Cannot save {path}: unknown or unwritable file format")
            return False

        try:
            result = self._engine.encode_path(raster, path, target_format)
        except EngineFailure as e:
            logger.warning(f"Failed to save {path}: {e}")
            return False

        logger.debug(f"Saved {self.width}x{self.height} image to {path} as {target_format.value}")
        return result

    def buffer(
        self, extension: str, callback: Optional[Callable[[bytes], Any]] = None
    ) -> Any:
        """
        Re-encode the image in memory.

        Args:
            extension: Target format extension, e.g. ".jpg"
            callback: Optional function receiving the encoded bytes

        Returns:
            The encoded bytes, or callback's return value when given

        Raises:
            UnsupportedFormatError: If the extension names no known format
        """
        raster = self.raster
        target_format = format_for_extension(extension)
        if target_format is None:
            raise UnsupportedFormatError(f"Unknown file format: {extension}")

        data = self._engine.encode_bytes(raster, target_format)
        if callback is not None:
            return callback(data)
        return data


def _format_by_name(name: str) -> Optional[ImageFormat]:
    try:
        return ImageFormat(name.upper())
    except ValueError:
        return None
