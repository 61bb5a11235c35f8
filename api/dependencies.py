"""
Shared FastAPI dependencies for Thumbsmith.
Centralizes access to objects created during application startup.
"""

import logging

from fastapi import Depends, HTTPException, Request

from core.image import ImageCodec
from services.image_service import ImageService

logger = logging.getLogger(__name__)


def get_codec(request: Request) -> ImageCodec:
    """
    Get ImageCodec instance from app state.

    Args:
        request: FastAPI request object

    Returns:
        ImageCodec created during startup

    Raises:
        HTTPException: If the codec is not initialized
    """
    try:
        return request.app.state.codec
    except AttributeError as e:
        logger.error(f"Codec not initialized in app state: {e}")
        raise HTTPException(status_code=500, detail="Internal server error: Codec not initialized")


def get_image_service(request: Request, codec: ImageCodec = Depends(get_codec)) -> ImageService:
    """Build an ImageService bound to the app's codec and settings."""
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        return ImageService(codec=codec)

    return ImageService(
        codec=codec,
        default_thumbnail_size=settings.image.default_thumbnail_size,
        max_upload_mb=settings.image.max_upload_mb,
    )
