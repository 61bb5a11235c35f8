"""
OpenCV-backed raster engine.

Rasters are NumPy arrays in OpenCV layout (BGR / BGRA / single channel).
OpenCV cannot report the container format of a decoded buffer, so formats are
resolved from the file extension or the buffer's magic bytes.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np

from core.constants import FORMAT_EXTENSIONS
from core.enums import ImageFormat, ResampleFilter
from core.exceptions import (
    DecodeError,
    EngineFailure,
    ImageNotFoundError,
    UnsupportedFormatError,
)
from core.image.engine import DecodedImage, PathLike, PixelColor, RasterEngine
from core.image.geometry import CropRect

logger = logging.getLogger(__name__)

CV_FILTERS = {
    ResampleFilter.NEAREST: cv2.INTER_NEAREST,
    ResampleFilter.BOX: cv2.INTER_AREA,
    ResampleFilter.BILINEAR: cv2.INTER_LINEAR,
    ResampleFilter.HAMMING: cv2.INTER_LINEAR,
    ResampleFilter.BICUBIC: cv2.INTER_CUBIC,
    ResampleFilter.LANCZOS: cv2.INTER_LANCZOS4,
}

MAGIC_NUMBERS = (
    (b"\x89PNG\r\n\x1a\n", ImageFormat.PNG),
    (b"\xff\xd8\xff", ImageFormat.JPEG),
    (b"GIF87a", ImageFormat.GIF),
    (b"GIF89a", ImageFormat.GIF),
    (b"BM", ImageFormat.BMP),
    (b"II*\x00", ImageFormat.TIFF),
    (b"MM\x00*", ImageFormat.TIFF),
    (b"\x00\x00\x00\x0cjP  ", ImageFormat.JP2),
    (b"\xff\x4f\xff\x51", ImageFormat.J2K),
    (b"8BPS", ImageFormat.PSD),
    (b"#?RADIANCE", ImageFormat.HDR),
    (b"v/1\x01", ImageFormat.EXR),
)


def sniff_format(header: bytes) -> Optional[ImageFormat]:
    """Identify an image format from its leading bytes."""
    if header[:4] == b"RIFF" and header[8:12] == b"WEBP":
        return ImageFormat.WEBP
    for magic, image_format in MAGIC_NUMBERS:
        if header.startswith(magic):
            return image_format
    return None


class OpenCVEngine(RasterEngine):
    """
    Raster engine built on OpenCV.

    Images are decoded with IMREAD_UNCHANGED to keep alpha and bit depth,
    which also means EXIF orientation is not applied. ICC profiles are not
    carried.
    """

    name = "opencv"

    def decode_path(self, path: PathLike) -> DecodedImage:
        path = Path(path)
        if not path.exists():
            raise ImageNotFoundError(path)

        try:
            data = path.read_bytes()
        except OSError as e:
            raise DecodeError(f"Unable to read {path}: {e}") from e

        raster = self._decode(data, f"Unknown file format: {path}")
        return DecodedImage(raster, sniff_format(data[:16]) or self.format_for_path(path))

    def decode_bytes(self, data: bytes) -> DecodedImage:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Image data must be bytes, not {type(data).__name__}")
        if not data:
            raise DecodeError("Unable to open image data: buffer is empty")

        raster = self._decode(bytes(data), "Unknown file format")
        return DecodedImage(raster, sniff_format(bytes(data[:16])))

    @staticmethod
    def _decode(data: bytes, message: str) -> np.ndarray:
        buffer = np.frombuffer(data, dtype=np.uint8)
        try:
            raster = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
        except cv2.error as e:
            raise DecodeError(f"{message} ({e})") from e
        if raster is None:
            raise DecodeError(message)
        return raster

    @staticmethod
    def _channels(raster: np.ndarray) -> int:
        return 1 if raster.ndim == 2 else raster.shape[2]

    def dimensions(self, raster: np.ndarray) -> Tuple[int, int]:
        height, width = raster.shape[:2]
        return width, height

    def depth(self, raster: np.ndarray) -> int:
        return self._channels(raster) * raster.dtype.itemsize * 8

    def color_type_code(self, raster: np.ndarray) -> int:
        channels = self._channels(raster)
        if channels == 1:
            return 1
        if channels in (2, 4):
            return 4
        return 2

    def file_type(self, path: PathLike) -> Optional[ImageFormat]:
        try:
            with open(path, "rb") as f:
                detected = sniff_format(f.read(16))
        except OSError:
            detected = None
        return detected or self.format_for_path(path)

    def resample(self, raster: np.ndarray, width: int, height: int) -> np.ndarray:
        try:
            return cv2.resize(
                raster, (width, height), interpolation=CV_FILTERS[self.resample_filter]
            )
        except cv2.error as e:
            raise EngineFailure(f"Resample to {width}x{height} failed: {e}") from e

    def crop(self, raster: np.ndarray, rect: CropRect) -> np.ndarray:
        return raster[rect.top : rect.bottom, rect.left : rect.right].copy()

    @staticmethod
    def _to_byte(value, dtype: np.dtype) -> int:
        if np.issubdtype(dtype, np.floating):
            return int(max(0.0, min(1.0, float(value))) * 255)
        # Offset signed types so the minimum maps to 0, then keep the top byte
        unsigned = int(value) - int(np.iinfo(dtype).min)
        return unsigned >> (8 * (dtype.itemsize - 1))

    def pixel_at(self, raster: np.ndarray, x: int, y: int) -> PixelColor:
        value = raster[y, x]
        channels = self._channels(raster)

        if channels <= 2:
            gray = value if channels == 1 else value[0]
            level = self._to_byte(gray, raster.dtype)
            return PixelColor(level, level, level)

        blue, green, red = (self._to_byte(v, raster.dtype) for v in value[:3])
        return PixelColor(red, green, blue)

    def can_write(self, image_format: ImageFormat) -> bool:
        extension = FORMAT_EXTENSIONS.get(image_format)
        return extension is not None and cv2.haveImageWriter("probe" + extension)

    def encode_path(self, raster: np.ndarray, path: PathLike, image_format: ImageFormat) -> bool:
        data = self.encode_bytes(raster, image_format)
        Path(path).write_bytes(data)
        return True

    def encode_bytes(self, raster: np.ndarray, image_format: ImageFormat) -> bytes:
        if not self.can_write(image_format):
            raise UnsupportedFormatError(f"No encoder for {image_format.value}")

        extension = FORMAT_EXTENSIONS[image_format]
        params = []
        if image_format == ImageFormat.JPEG:
            params = [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality]
            if self._channels(raster) == 4:
                raster = cv2.cvtColor(raster, cv2.COLOR_BGRA2BGR)

        try:
            success, buffer = cv2.imencode(extension, raster, params)
        except cv2.error as e:
            raise EngineFailure(f"Cannot encode as {image_format.value}: {e}") from e
        if not success:
            raise EngineFailure(f"Cannot encode as {image_format.value}")
        return buffer.tobytes()

    def release(self, raster: np.ndarray) -> None:
        # Arrays are reclaimed by the garbage collector once the handle drops them
        pass

    def version(self) -> str:
        return f"OpenCV {cv2.__version__}"
