"""
Pillow-backed raster engine.

Rasters are PIL.Image.Image instances. Path loads are decoded eagerly and
EXIF rotations are applied so the handle reports upright dimensions.
"""

import io
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import PIL
from PIL import Image, UnidentifiedImageError

from core.constants import ImageConstants
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

# mode -> (color type code, bits per pixel)
MODE_COLOR_INFO: Dict[str, Tuple[int, int]] = {
    "1": (1, 1),
    "L": (1, 8),
    "LA": (4, 16),
    "La": (4, 16),
    "I": (1, 32),
    "I;16": (1, 16),
    "I;16L": (1, 16),
    "I;16B": (1, 16),
    "I;16N": (1, 16),
    "F": (1, 32),
    "P": (3, 8),
    "PA": (3, 16),
    "RGB": (2, 24),
    "RGBX": (2, 32),
    "YCbCr": (2, 24),
    "LAB": (2, 24),
    "HSV": (2, 24),
    "RGBA": (4, 32),
    "RGBa": (4, 32),
    "CMYK": (5, 32),
}

PIL_FORMATS: Dict[str, ImageFormat] = {
    "BMP": ImageFormat.BMP,
    "DIB": ImageFormat.BMP,
    "ICO": ImageFormat.ICO,
    "JPEG": ImageFormat.JPEG,
    "MPO": ImageFormat.JPEG,
    "PCD": ImageFormat.PCD,
    "PCX": ImageFormat.PCX,
    "PNG": ImageFormat.PNG,
    "PPM": ImageFormat.PPM,
    "SUN": ImageFormat.RAS,
    "TGA": ImageFormat.TARGA,
    "TIFF": ImageFormat.TIFF,
    "PSD": ImageFormat.PSD,
    "XBM": ImageFormat.XBM,
    "XPM": ImageFormat.XPM,
    "DDS": ImageFormat.DDS,
    "GIF": ImageFormat.GIF,
    "SGI": ImageFormat.SGI,
    "JPEG2000": ImageFormat.JP2,
    "WEBP": ImageFormat.WEBP,
}

# ImageFormat -> Pillow encoder name, where it differs from the tag itself
PIL_ENCODERS: Dict[ImageFormat, str] = {
    ImageFormat.PBM: "PPM",
    ImageFormat.PBMRAW: "PPM",
    ImageFormat.PGM: "PPM",
    ImageFormat.PGMRAW: "PPM",
    ImageFormat.PPMRAW: "PPM",
    ImageFormat.RAS: "SUN",
    ImageFormat.TARGA: "TGA",
    ImageFormat.J2K: "JPEG2000",
    ImageFormat.JP2: "JPEG2000",
}

PIL_FILTERS = {
    ResampleFilter.NEAREST: Image.Resampling.NEAREST,
    ResampleFilter.BOX: Image.Resampling.BOX,
    ResampleFilter.BILINEAR: Image.Resampling.BILINEAR,
    ResampleFilter.HAMMING: Image.Resampling.HAMMING,
    ResampleFilter.BICUBIC: Image.Resampling.BICUBIC,
    ResampleFilter.LANCZOS: Image.Resampling.LANCZOS,
}

ORIENTATION_TRANSPOSE = {
    3: Image.Transpose.ROTATE_180,
    6: Image.Transpose.ROTATE_270,
    8: Image.Transpose.ROTATE_90,
}

JPEG_MODES = ("RGB", "L", "CMYK")
RGB_MODES = ("RGB", "RGBA", "RGBX", "RGBa")


class PillowEngine(RasterEngine):
    """Raster engine built on Pillow."""

    name = "pillow"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Populate Pillow's encoder registry so can_write is accurate
        Image.init()

    def decode_path(self, path: PathLike) -> DecodedImage:
        path = Path(path)
        if not path.exists():
            raise ImageNotFoundError(path)

        image = self._open_loaded(path, f"Unknown file format: {path}")
        file_type = PIL_FORMATS.get(image.format)
        if self.apply_exif_orientation:
            image = self._apply_orientation(image)

        logger.debug(f"Decoded {path} ({file_type}) {image.size[0]}x{image.size[1]} {image.mode}")
        return DecodedImage(image, file_type)

    def decode_bytes(self, data: bytes) -> DecodedImage:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Image data must be bytes, not {type(data).__name__}")
        if not data:
            raise DecodeError("Unable to open image data: buffer is empty")

        image = self._open_loaded(io.BytesIO(data), "Unknown file format")
        return DecodedImage(image, PIL_FORMATS.get(image.format))

    @staticmethod
    def _open_loaded(source, message: str) -> Image.Image:
        try:
            image = Image.open(source)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            SyntaxError,
            ValueError,
            OSError,
        ) as e:
            raise DecodeError(message) from e

        try:
            image.load()
        except (Image.DecompressionBombError, SyntaxError, ValueError, OSError) as e:
            image.close()
            raise DecodeError(f"{message} ({e})") from e
        return image

    def _apply_orientation(self, image: Image.Image) -> Image.Image:
        orientation = image.getexif().get(ImageConstants.EXIF_ORIENTATION_TAG)
        method = ORIENTATION_TRANSPOSE.get(orientation)
        if method is None:
            return image

        rotated = image.transpose(method)
        image.close()
        logger.debug(f"Applied EXIF orientation {orientation}")
        return rotated

    def dimensions(self, raster: Image.Image) -> Tuple[int, int]:
        return raster.size

    def depth(self, raster: Image.Image) -> int:
        info = MODE_COLOR_INFO.get(raster.mode)
        return info[1] if info else 8 * len(raster.getbands())

    def color_type_code(self, raster: Image.Image) -> int:
        info = MODE_COLOR_INFO.get(raster.mode)
        return info[0] if info else 2

    def file_type(self, path: PathLike) -> Optional[ImageFormat]:
        try:
            # Image.open only parses the header; pixels are never decoded here
            with Image.open(path) as image:
                detected = PIL_FORMATS.get(image.format)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            SyntaxError,
            ValueError,
            OSError,
        ):
            detected = None
        return detected or self.format_for_path(path)

    def resample(self, raster: Image.Image, width: int, height: int) -> Image.Image:
        source = self._expand_palette(raster)
        try:
            return source.resize((width, height), resample=PIL_FILTERS[self.resample_filter])
        except (ValueError, OSError) as e:
            raise EngineFailure(f"Resample to {width}x{height} failed: {e}") from e
        finally:
            if source is not raster:
                source.close()

    @staticmethod
    def _expand_palette(raster: Image.Image) -> Image.Image:
        # Pillow only resamples palette and bilevel images with NEAREST
        if raster.mode == "P":
            return raster.convert("RGBA" if "transparency" in raster.info else "RGB")
        if raster.mode == "1":
            return raster.convert("L")
        return raster

    def crop(self, raster: Image.Image, rect: CropRect) -> Image.Image:
        return raster.crop(rect.as_box())

    def pixel_at(self, raster: Image.Image, x: int, y: int) -> PixelColor:
        mode = raster.mode

        if mode in RGB_MODES:
            red, green, blue = raster.getpixel((x, y))[:3]
        elif mode.startswith("I;16"):
            red = green = blue = raster.getpixel((x, y)) >> 8
        elif mode in ("I", "F"):
            red = green = blue = max(0, min(255, int(raster.getpixel((x, y)))))
        else:
            # Palette, grayscale and CMYK pixels go through Pillow's converter
            with raster.crop((x, y, x + 1, y + 1)) as pixel:
                with pixel.convert("RGB") as rgb:
                    red, green, blue = rgb.getpixel((0, 0))

        return PixelColor(int(red), int(green), int(blue))

    def _encoder_name(self, image_format: ImageFormat) -> str:
        return PIL_ENCODERS.get(image_format, image_format.value)

    def can_write(self, image_format: ImageFormat) -> bool:
        return self._encoder_name(image_format) in Image.SAVE

    def _prepare(self, raster: Image.Image, image_format: ImageFormat):
        """Return (image to encode, encoder params) for image_format."""
        params = {}
        image = raster

        if image_format == ImageFormat.JPEG:
            if raster.mode not in JPEG_MODES:
                image = raster.convert("RGB")
            params["quality"] = self.jpeg_quality

        icc_profile = raster.info.get("icc_profile")
        if image_format == ImageFormat.PNG:
            params["icc_profile"] = None
        elif icc_profile and image_format in ImageConstants.ICC_PROFILE_FORMATS:
            params["icc_profile"] = icc_profile

        return image, params

    def _save(self, raster: Image.Image, target, image_format: ImageFormat) -> None:
        if not self.can_write(image_format):
            raise UnsupportedFormatError(f"No encoder for {image_format.value}")

        image, params = self._prepare(raster, image_format)
        try:
            image.save(target, format=self._encoder_name(image_format), **params)
        except (KeyError, ValueError) as e:
            raise UnsupportedFormatError(f"Cannot encode as {image_format.value}: {e}") from e
        except OSError as e:
            # errno is only set for real filesystem failures
            if e.errno is not None:
                raise
            raise EngineFailure(f"Cannot encode as {image_format.value}: {e}") from e
        finally:
            if image is not raster:
                image.close()

    def encode_path(self, raster: Image.Image, path: PathLike, image_format: ImageFormat) -> bool:
        self._save(raster, str(path), image_format)
        return True

    def encode_bytes(self, raster: Image.Image, image_format: ImageFormat) -> bytes:
        buffer = io.BytesIO()
        self._save(raster, buffer, image_format)
        return buffer.getvalue()

    def release(self, raster: Image.Image) -> None:
        raster.close()

    def version(self) -> str:
        return f"Pillow {PIL.__version__}"
