"""
Centralized enums for Thumbsmith.
"""

from enum import Enum
from typing import Optional


class ColorType(str, Enum):
    """Color model of a decoded raster."""

    INVERTED_MONOCHROME = "InvertedMonochrome"
    INVERTED_GRAYSCALE = "InvertedGrayscale"
    MONOCHROME = "Monochrome"
    GRAYSCALE = "Grayscale"
    RGB = "RGB"
    INDEXED = "Indexed"
    RGBA = "RGBA"
    CMYK = "CMYK"

    @classmethod
    def from_code(cls, code: int, depth: int) -> Optional["ColorType"]:
        """
        Map an engine color type code and bit depth to a ColorType.

        Codes 0 and 1 are the min-is-white and min-is-black families, where a
        depth of 1 selects the monochrome variant. Unknown codes give None.
        """
        if code in _BILEVEL_FAMILIES:
            mono, gray = _BILEVEL_FAMILIES[code]
            return mono if depth == 1 else gray
        return _DIRECT_CODES.get(code)


_BILEVEL_FAMILIES = {
    0: (ColorType.INVERTED_MONOCHROME, ColorType.INVERTED_GRAYSCALE),
    1: (ColorType.MONOCHROME, ColorType.GRAYSCALE),
}

_DIRECT_CODES = {
    2: ColorType.RGB,
    3: ColorType.INDEXED,
    4: ColorType.RGBA,
    5: ColorType.CMYK,
}


class ImageFormat(str, Enum):
    """Symbolic file format tags, in legacy format-code order."""

    BMP = "BMP"
    ICO = "ICO"
    JPEG = "JPEG"
    JNG = "JNG"
    KOALA = "KOALA"
    IFF = "IFF"
    MNG = "MNG"
    PBM = "PBM"
    PBMRAW = "PBMRAW"
    PCD = "PCD"
    PCX = "PCX"
    PGM = "PGM"
    PGMRAW = "PGMRAW"
    PNG = "PNG"
    PPM = "PPM"
    PPMRAW = "PPMRAW"
    RAS = "RAS"
    TARGA = "TARGA"
    TIFF = "TIFF"
    WBMP = "WBMP"
    PSD = "PSD"
    CUT = "CUT"
    XBM = "XBM"
    XPM = "XPM"
    DDS = "DDS"
    GIF = "GIF"
    HDR = "HDR"
    FAXG3 = "FAXG3"
    SGI = "SGI"
    EXR = "EXR"
    J2K = "J2K"
    JP2 = "JP2"
    WEBP = "WEBP"

    @classmethod
    def from_index(cls, index: int) -> Optional["ImageFormat"]:
        """Return the format with the given legacy integer code."""
        members = list(cls)
        if 0 <= index < len(members):
            return members[index]
        return None

    @property
    def code(self) -> int:
        """Legacy integer code of this format."""
        return list(type(self)).index(self)


class ResampleFilter(str, Enum):
    """Resampling filters understood by every engine."""

    NEAREST = "nearest"
    BOX = "box"
    BILINEAR = "bilinear"
    HAMMING = "hamming"
    BICUBIC = "bicubic"
    LANCZOS = "lanczos"


class EngineKind(str, Enum):
    """Available raster engine backends."""

    PILLOW = "pillow"
    OPENCV = "opencv"
