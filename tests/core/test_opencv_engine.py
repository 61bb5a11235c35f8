"""
Tests for OpenCV specific decoding and encoding behavior
"""

import cv2
import numpy as np
import pytest

from core.enums import ColorType, ImageFormat
from core.image import ImageCodec, create_engine
from core.image.opencv_engine import OpenCVEngine, sniff_format


@pytest.fixture
def opencv_codec():
    return ImageCodec(OpenCVEngine())


class TestSniffFormat:
    @pytest.mark.parametrize(
        "header,expected",
        [
            (b"\x89PNG\r\n\x1a\n\x00\x00", ImageFormat.PNG),
            (b"\xff\xd8\xff\xe0", ImageFormat.JPEG),
            (b"GIF89a\x01\x00", ImageFormat.GIF),
            (b"BM\x00\x00", ImageFormat.BMP),
            (b"II*\x00\x08\x00", ImageFormat.TIFF),
            (b"RIFF\x00\x00\x00\x00WEBPVP8 ", ImageFormat.WEBP),
        ],
    )
    def test_known_headers(self, header, expected):
        assert sniff_format(header) == expected

    def test_unknown_header(self):
        assert sniff_format(b"hello world") is None
        assert sniff_format(b"") is None


class TestChannels:
    def test_grayscale(self, opencv_codec, tmp_path):
        path = tmp_path / "gray.png"
        cv2.imwrite(str(path), np.full((12, 16), 90, dtype=np.uint8))

        with opencv_codec.open(path) as img:
            assert img.size == (16, 12)
            assert img.depth == 8
            assert img.color_type == ColorType.GRAYSCALE
            assert img.color_at(3, 3) == (90, 90, 90)

    def test_sixteen_bit_grayscale(self, opencv_codec, tmp_path):
        path = tmp_path / "gray16.png"
        cv2.imwrite(str(path), np.full((10, 10), 0x8040, dtype=np.uint16))

        with opencv_codec.open(path) as img:
            assert img.depth == 16
            assert img.color_at(0, 0) == (0x80, 0x80, 0x80)

    def test_bgra(self, opencv_codec, tmp_path):
        path = tmp_path / "alpha.png"
        cv2.imwrite(str(path), np.full((10, 10, 4), (10, 20, 30, 128), dtype=np.uint8))

        with opencv_codec.open(path) as img:
            assert img.depth == 32
            assert img.color_type == ColorType.RGBA
            assert img.color_at(0, 0) == (30, 20, 10)

    def test_bgra_saved_as_jpeg(self, opencv_codec, tmp_path):
        path = tmp_path / "alpha.png"
        output = tmp_path / "alpha.jpg"
        cv2.imwrite(str(path), np.full((10, 10, 4), (10, 20, 30, 128), dtype=np.uint8))

        with opencv_codec.open(path) as img:
            assert img.save(output)

        assert cv2.imread(str(output), cv2.IMREAD_UNCHANGED).shape == (10, 10, 3)


class TestWriters:
    def test_can_write_common_formats(self):
        engine = OpenCVEngine()
        assert engine.can_write(ImageFormat.PNG)
        assert engine.can_write(ImageFormat.JPEG)

    @pytest.mark.parametrize("image_format", [ImageFormat.PCD, ImageFormat.GIF, ImageFormat.ICO])
    def test_cannot_write_unmapped_formats(self, image_format):
        assert not OpenCVEngine().can_write(image_format)

    def test_save_gif_is_refused(self, opencv_codec, pix, tmp_path):
        with opencv_codec.open(pix) as img:
            assert img.save(tmp_path / "pix.gif") is False


class TestCreateEngine:
    def test_by_name(self):
        assert isinstance(create_engine("OpenCV"), OpenCVEngine)

    def test_version(self):
        assert OpenCVEngine().version().startswith("OpenCV ")

    def test_memory_format_detected_from_header(self, opencv_codec, pix_jpg):
        with opencv_codec.open_bytes(pix_jpg.read_bytes()) as img:
            assert img.file_type == ImageFormat.JPEG


class TestSampling:
    @pytest.mark.parametrize(
        "dtype,value,expected",
        [
            (np.int16, -32768, 0),
            (np.int16, 32767, 255),
            (np.int16, 0, 128),
            (np.int32, -(2**31), 0),
            (np.uint16, 0xFFFF, 255),
        ],
    )
    def test_signed_rasters_stay_in_byte_range(self, dtype, value, expected):
        raster = np.full((4, 4), value, dtype=dtype)
        assert OpenCVEngine().pixel_at(raster, 1, 1) == (expected, expected, expected)

    def test_signed_color_raster(self):
        raster = np.full((4, 4, 3), (-32768, 0, 32767), dtype=np.int16)
        assert OpenCVEngine().pixel_at(raster, 0, 0) == (255, 128, 0)
