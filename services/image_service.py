"""
Image Service - Business logic for image operations.

This service decodes base64 payloads through the ImageCodec, runs the
requested transform inside a scoped handle, and re-encodes the result.
"""

import logging
from contextlib import nullcontext
from typing import Callable, ContextManager, Optional, Tuple

from api.exceptions import PayloadTooLargeException
from core.constants import ImageConstants, SystemConstants
from core.enums import ImageFormat
from core.image import ImageCodec, ImageConverters, ImageHandle
from core.utils.decorators import timer
from core.utils.enum_converter import enum_to_string
from schemas import DerivedImageResponse, ImageInfoResponse, PixelColorResponse

logger = logging.getLogger(__name__)

Transform = Callable[[ImageHandle], ContextManager[ImageHandle]]


class ImageService:
    """
    Service for image inspection and derivative generation.

    Every operation opens its own scope, so no handle outlives a request.
    """

    def __init__(
        self,
        codec: ImageCodec,
        default_thumbnail_size: int = ImageConstants.DEFAULT_THUMBNAIL_SIZE,
        max_upload_mb: float = SystemConstants.DEFAULT_MAX_UPLOAD_MB,
    ):
        """
        Initialize image service.

        Args:
            codec: Codec used to open images
            default_thumbnail_size: Thumbnail size when a request omits it
            max_upload_mb: Maximum decoded payload size
        """
        self.codec = codec
        self.default_thumbnail_size = default_thumbnail_size
        self.max_upload_mb = max_upload_mb

    def _load_bytes(self, image_base64: str) -> bytes:
        data = ImageConverters.from_base64(image_base64)
        size_mb = len(data) / (1024 * 1024)
        if size_mb > self.max_upload_mb:
            raise PayloadTooLargeException(size_mb, self.max_upload_mb)
        return data

    def get_info(self, image_base64: str) -> ImageInfoResponse:
        """Decode an image and report its metadata."""
        with self.codec.open_bytes(self._load_bytes(image_base64)) as image:
            return ImageInfoResponse(
                width=image.width,
                height=image.height,
                depth=image.depth,
                color_type=enum_to_string(image.color_type),
                color_type_code=image.color_type_code,
                format=enum_to_string(image.file_type),
            )

    def get_pixel_color(self, image_base64: str, x: int, y: int) -> PixelColorResponse:
        """Sample the color at (x, y)."""
        with self.codec.open_bytes(self._load_bytes(image_base64)) as image:
            color = image.color_at(x, y)
            return PixelColorResponse(red=color.red, green=color.green, blue=color.blue)

    @timer
    def _transform(
        self, image_base64: str, transform: Transform, output_format: Optional[str]
    ) -> Tuple[bytes, int, int, ImageFormat]:
        data = self._load_bytes(image_base64)

        with self.codec.open_bytes(data) as image:
            target_format = (
                ImageConverters.parse_format(output_format) or image.file_type or ImageFormat.PNG
            )
            extension = ImageConverters.extension_for(target_format)

            with transform(image) as derived:
                encoded = derived.buffer(extension)
                logger.debug(
                    f"Derived {derived.width}x{derived.height} {target_format.value} "
                    f"from {image.width}x{image.height}"
                )
                return encoded, derived.width, derived.height, target_format

    def _respond(
        self, image_base64: str, transform: Transform, output_format: Optional[str]
    ) -> DerivedImageResponse:
        (encoded, width, height, target_format), elapsed_ms = self._transform(
            image_base64, transform, output_format
        )
        return DerivedImageResponse(
            image=ImageConverters.to_base64(encoded),
            width=width,
            height=height,
            format=target_format.value,
            processing_time_ms=elapsed_ms,
        )

    def resize(
        self, image_base64: str, width: float, height: float, output_format: Optional[str] = None
    ) -> DerivedImageResponse:
        return self._respond(image_base64, lambda img: img.resize(width, height), output_format)

    def thumbnail(
        self, image_base64: str, size: Optional[float] = None, output_format: Optional[str] = None
    ) -> DerivedImageResponse:
        if size is None:
            size = self.default_thumbnail_size
        return self._respond(image_base64, lambda img: img.thumbnail(size), output_format)

    def cropped_thumbnail(
        self, image_base64: str, size: Optional[float] = None, output_format: Optional[str] = None
    ) -> DerivedImageResponse:
        if size is None:
            size = self.default_thumbnail_size
        return self._respond(image_base64, lambda img: img.cropped_thumbnail(size), output_format)

    def fit_within(
        self,
        image_base64: str,
        max_width: float,
        max_height: float,
        output_format: Optional[str] = None,
    ) -> DerivedImageResponse:
        return self._respond(
            image_base64, lambda img: img.fit_within(max_width, max_height), output_format
        )

    def convert(self, image_base64: str, output_format: str) -> DerivedImageResponse:
        """Re-encode without changing pixels."""
        return self._respond(image_base64, nullcontext, output_format)
