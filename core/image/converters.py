"""
Image payload conversion utilities.

Handles conversions used at the service boundary:
- Base64 strings to raw image bytes and back
- Format names / extensions to ImageFormat tags
"""

import base64
import binascii
import logging
from typing import Optional, Union

from core.constants import EXTENSION_FORMATS, FORMAT_EXTENSIONS, format_for_extension
from core.enums import ImageFormat
from core.exceptions import DecodeError, UnsupportedFormatError

logger = logging.getLogger(__name__)


class ImageConverters:
    """Utilities for converting between image payload representations."""

    @staticmethod
    def to_base64(data: bytes) -> str:
        """
        Convert encoded image bytes to a base64 string.

        Args:
            data: Encoded image bytes

        Returns:
            Base64 encoded string
        """
        return base64.b64encode(data).decode("utf-8")

    @staticmethod
    def from_base64(base64_string: str) -> bytes:
        """
        Convert a base64 string (optionally a data URL) to raw bytes.

        Args:
            base64_string: Base64 encoded image

        Returns:
            Decoded bytes

        Raises:
            DecodeError: If the string is not valid base64
        """
        if base64_string.startswith("data:") and "," in base64_string:
            base64_string = base64_string.split(",", 1)[1]

        try:
            return base64.b64decode(base64_string, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error(f"Failed to decode base64 image: {e}")
            raise DecodeError("Image payload is not valid base64") from e

    @staticmethod
    def parse_format(value: Union[str, ImageFormat, None]) -> Optional[ImageFormat]:
        """
        Parse "png", ".png", "PNG" or an ImageFormat into an ImageFormat.

        Returns:
            ImageFormat, or None if value is None

        Raises:
            UnsupportedFormatError: If value names no known format
        """
        if value is None or isinstance(value, ImageFormat):
            return value

        image_format = format_for_extension(value)
        if image_format is None:
            try:
                image_format = ImageFormat(value.lstrip(".").upper())
            except ValueError:
                raise UnsupportedFormatError(f"Unknown file format: {value}")
        return image_format

    @staticmethod
    def extension_for(image_format: ImageFormat) -> str:
        """Preferred file extension for image_format, e.g. ".png"."""
        extension = FORMAT_EXTENSIONS.get(image_format)
        if extension:
            return extension
        for ext, fmt in EXTENSION_FORMATS.items():
            if fmt == image_format:
                return ext
        raise UnsupportedFormatError(f"No file extension for {image_format.value}")

