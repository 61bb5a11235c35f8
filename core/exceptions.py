"""
Exception hierarchy for Thumbsmith.

Core code raises these typed errors; the API layer maps them onto HTTP
responses in api/exceptions.py.
"""


class ImageScienceError(Exception):
    """Base class for all image processing errors."""


class DecodeError(ImageScienceError):
    """Source bytes or path cannot be interpreted as a supported image."""


class ImageNotFoundError(DecodeError):
    """Source path does not exist."""

    def __init__(self, path):
        self.path = str(path)
        super().__init__(f"Image not found: {self.path}")


class InvalidDimensionError(ImageScienceError, ValueError):
    """Requested width or height is zero or negative."""


class OutOfBoundsError(ImageScienceError, IndexError):
    """Pixel coordinate or crop rectangle falls outside the image."""


class EngineFailure(ImageScienceError):
    """The raster engine could not complete an operation."""


class UnsupportedFormatError(EngineFailure):
    """The engine cannot encode to the requested format."""


class ImageReleasedError(ImageScienceError):
    """Image handle was used after its scope released it."""

    def __init__(self):
        super().__init__("Image has already been released")
