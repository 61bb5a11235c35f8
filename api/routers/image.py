"""
Image API Router - Image inspection and derivative generation
"""

import logging

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from api.dependencies import get_image_service
from api.exceptions import safe_endpoint
from schemas import (
    ConvertRequest,
    DerivedImageResponse,
    FitWithinRequest,
    ImageInfoResponse,
    ImageRequest,
    PixelColorResponse,
    PixelRequest,
    ResizeRequest,
    ThumbnailRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/info")
@safe_endpoint
async def get_info(
    request: ImageRequest, image_service=Depends(get_image_service)
) -> ImageInfoResponse:
    """Report width, height, depth, color type and format of an image."""
    return await run_in_threadpool(image_service.get_info, request.image)


@router.post("/resize")
@safe_endpoint
async def resize(
    request: ResizeRequest, image_service=Depends(get_image_service)
) -> DerivedImageResponse:
    """
    Resize an image to an exact size.

    Fractional dimensions are truncated; a width or height <= 0 is rejected
    with 422 before any processing.
    """
    return await run_in_threadpool(
        image_service.resize, request.image, request.width, request.height, request.format
    )


@router.post("/thumbnail")
@safe_endpoint
async def thumbnail(
    request: ThumbnailRequest, image_service=Depends(get_image_service)
) -> DerivedImageResponse:
    """Proportional thumbnail whose longest edge is `size`."""
    return await run_in_threadpool(
        image_service.thumbnail, request.image, request.size, request.format
    )


@router.post("/cropped-thumbnail")
@safe_endpoint
async def cropped_thumbnail(
    request: ThumbnailRequest, image_service=Depends(get_image_service)
) -> DerivedImageResponse:
    """Square thumbnail from a centered crop of the image."""
    return await run_in_threadpool(
        image_service.cropped_thumbnail, request.image, request.size, request.format
    )


@router.post("/fit-within")
@safe_endpoint
async def fit_within(
    request: FitWithinRequest, image_service=Depends(get_image_service)
) -> DerivedImageResponse:
    """Shrink an image to fit a bounding box, preserving aspect ratio."""
    return await run_in_threadpool(
        image_service.fit_within,
        request.image,
        request.max_width,
        request.max_height,
        request.format,
    )


@router.post("/pixel")
@safe_endpoint
async def get_pixel_color(
    request: PixelRequest, image_service=Depends(get_image_service)
) -> PixelColorResponse:
    """RGB color at (x, y), origin top-left."""
    return await run_in_threadpool(
        image_service.get_pixel_color, request.image, request.x, request.y
    )


@router.post("/convert")
@safe_endpoint
async def convert(
    request: ConvertRequest, image_service=Depends(get_image_service)
) -> DerivedImageResponse:
    """Re-encode an image to another format."""
    result = await run_in_threadpool(image_service.convert, request.image, request.format)
    logger.info(f"Converted image to {result.format} ({result.width}x{result.height})")
    return result
