"""
Constants and configuration values for Thumbsmith.
Centralizes all magic numbers and configuration constants.
"""

from core.enums import ImageFormat, ResampleFilter


# Image Processing Constants
class ImageConstants:
    """Constants related to decoding, resampling and encoding."""

    # Thumbnail settings
    DEFAULT_THUMBNAIL_SIZE = 320
    MIN_THUMBNAIL_SIZE = 1
    MAX_THUMBNAIL_SIZE = 8192

    # Resampling (Catmull-Rom is a bicubic filter)
    DEFAULT_RESAMPLE_FILTER = ResampleFilter.BICUBIC

    # Encoding
    DEFAULT_JPEG_QUALITY = 95
    MIN_JPEG_QUALITY = 1
    MAX_JPEG_QUALITY = 100

    # EXIF orientation tag, applied on path loads
    EXIF_ORIENTATION_TAG = 0x0112

    # Formats whose encoders can embed an ICC profile (PNG is excluded on purpose)
    ICC_PROFILE_FORMATS = frozenset({ImageFormat.JPEG, ImageFormat.TIFF, ImageFormat.WEBP})


# File extension lookup shared by engines that cannot sniff headers
EXTENSION_FORMATS = {
    ".bmp": ImageFormat.BMP,
    ".dib": ImageFormat.BMP,
    ".ico": ImageFormat.ICO,
    ".jpg": ImageFormat.JPEG,
    ".jpeg": ImageFormat.JPEG,
    ".jpe": ImageFormat.JPEG,
    ".jfif": ImageFormat.JPEG,
    ".jng": ImageFormat.JNG,
    ".koa": ImageFormat.KOALA,
    ".iff": ImageFormat.IFF,
    ".lbm": ImageFormat.IFF,
    ".mng": ImageFormat.MNG,
    ".pbm": ImageFormat.PBM,
    ".pcd": ImageFormat.PCD,
    ".pcx": ImageFormat.PCX,
    ".pgm": ImageFormat.PGM,
    ".png": ImageFormat.PNG,
    ".ppm": ImageFormat.PPM,
    ".pnm": ImageFormat.PPM,
    ".ras": ImageFormat.RAS,
    ".sr": ImageFormat.RAS,
    ".tga": ImageFormat.TARGA,
    ".targa": ImageFormat.TARGA,
    ".tif": ImageFormat.TIFF,
    ".tiff": ImageFormat.TIFF,
    ".wbmp": ImageFormat.WBMP,
    ".psd": ImageFormat.PSD,
    ".cut": ImageFormat.CUT,
    ".xbm": ImageFormat.XBM,
    ".xpm": ImageFormat.XPM,
    ".dds": ImageFormat.DDS,
    ".gif": ImageFormat.GIF,
    ".hdr": ImageFormat.HDR,
    ".g3": ImageFormat.FAXG3,
    ".sgi": ImageFormat.SGI,
    ".rgb": ImageFormat.SGI,
    ".exr": ImageFormat.EXR,
    ".j2k": ImageFormat.J2K,
    ".j2c": ImageFormat.J2K,
    ".jp2": ImageFormat.JP2,
    ".webp": ImageFormat.WEBP,
}

# Preferred extension when an encoder needs one (OpenCV picks codecs by extension)
FORMAT_EXTENSIONS = {
    ImageFormat.BMP: ".bmp",
    ImageFormat.JPEG: ".jpg",
    ImageFormat.PNG: ".png",
    ImageFormat.PBM: ".pbm",
    ImageFormat.PBMRAW: ".pbm",
    ImageFormat.PGM: ".pgm",
    ImageFormat.PGMRAW: ".pgm",
    ImageFormat.PPM: ".ppm",
    ImageFormat.PPMRAW: ".ppm",
    ImageFormat.RAS: ".ras",
    ImageFormat.TIFF: ".tiff",
    ImageFormat.HDR: ".hdr",
    ImageFormat.EXR: ".exr",
    ImageFormat.J2K: ".jp2",
    ImageFormat.JP2: ".jp2",
    ImageFormat.WEBP: ".webp",
}


def format_for_extension(extension: str):
    """Look up a format tag by extension (with or without the leading dot)."""
    if not extension:
        return None
    ext = extension.lower()
    if not ext.startswith("."):
        ext = "." + ext
    return EXTENSION_FORMATS.get(ext)


# System Constants
class SystemConstants:
    """Constants for system operations."""

    # Logging
    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Uploads
    DEFAULT_MAX_UPLOAD_MB = 20
