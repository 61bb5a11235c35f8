"""
Tests for Pillow specific decoding and encoding behavior
"""

import io

import pytest
from PIL import Image

from core.enums import ColorType, ImageFormat
from core.exceptions import DecodeError, UnsupportedFormatError
from core.image import ImageCodec, PillowEngine

FAKE_ICC = b"not a real profile but carried verbatim"


@pytest.fixture
def rotated_jpg(tmp_path):
    """40x20 JPEG tagged with EXIF orientation 6 (rotate 90 clockwise)"""
    path = tmp_path / "rotated.jpg"
    exif = Image.Exif()
    exif[0x0112] = 6
    Image.new("RGB", (40, 20), (200, 10, 10)).save(path, "JPEG", exif=exif)
    return path


@pytest.fixture
def icc_jpg(tmp_path):
    path = tmp_path / "icc.jpg"
    Image.new("RGB", (40, 20), (10, 200, 10)).save(path, "JPEG", icc_profile=FAKE_ICC)
    return path


class TestExifOrientation:
    def test_rotation_applied_on_path_load(self, pillow_codec, rotated_jpg):
        with pillow_codec.open(rotated_jpg) as img:
            assert img.size == (20, 40)

    def test_rotation_can_be_disabled(self, rotated_jpg):
        codec = ImageCodec(PillowEngine(apply_exif_orientation=False))
        with codec.open(rotated_jpg) as img:
            assert img.size == (40, 20)

    def test_memory_load_is_not_rotated(self, pillow_codec, rotated_jpg):
        with pillow_codec.open_bytes(rotated_jpg.read_bytes()) as img:
            assert img.size == (40, 20)


class TestIccProfile:
    def test_profile_survives_resize_to_jpeg(self, pillow_codec, icc_jpg, tmp_path):
        output = tmp_path / "thumb.jpg"
        with pillow_codec.open(icc_jpg) as img:
            with img.thumbnail(10) as thumb:
                assert thumb.save(output)

        with Image.open(output) as saved:
            assert saved.info.get("icc_profile") == FAKE_ICC

    def test_profile_dropped_for_png(self, pillow_codec, icc_jpg, tmp_path):
        output = tmp_path / "thumb.png"
        with pillow_codec.open(icc_jpg) as img:
            assert img.save(output)

        with Image.open(output) as saved:
            assert "icc_profile" not in saved.info


class TestColorModes:
    def test_palette_image(self, pillow_codec, tmp_path):
        path = tmp_path / "palette.png"
        image = Image.new("P", (8, 8))
        image.putpalette([0, 0, 0, 255, 128, 0] + [0] * 762)
        image.paste(1, (0, 0, 4, 8))
        image.save(path)

        with pillow_codec.open(path) as img:
            assert img.color_type == ColorType.INDEXED
            assert img.depth == 8
            assert img.color_at(1, 1) == (255, 128, 0)
            assert img.color_at(6, 1) == (0, 0, 0)
            with img.resize(4, 4) as small:
                assert small.size == (4, 4)
                assert small.color_type == ColorType.RGB

    def test_bilevel_image(self, pillow_codec, tmp_path):
        path = tmp_path / "mono.png"
        Image.new("1", (10, 10), 1).save(path)

        with pillow_codec.open(path) as img:
            assert img.depth == 1
            assert img.color_type_name == "Monochrome"
            assert img.color_at(5, 5) == (255, 255, 255)
            with img.thumbnail(5) as thumb:
                assert thumb.color_type == ColorType.GRAYSCALE

    def test_rgba_saved_as_jpeg(self, pillow_codec, tmp_path):
        path = tmp_path / "alpha.png"
        output = tmp_path / "alpha.jpg"
        Image.new("RGBA", (10, 10), (10, 20, 30, 40)).save(path)

        with pillow_codec.open(path) as img:
            assert img.color_type == ColorType.RGBA
            assert img.depth == 32
            assert img.save(output)

        with Image.open(output) as saved:
            assert saved.mode == "RGB"

    def test_cmyk_sampling(self, pillow_codec, tmp_path):
        path = tmp_path / "cmyk.jpg"
        Image.new("CMYK", (10, 10), (0, 0, 0, 0)).save(path)

        with pillow_codec.open(path) as img:
            assert img.color_type == ColorType.CMYK
            red, green, blue = img.color_at(0, 0)
            assert min(red, green, blue) > 240


class TestGif:
    def test_gif_round_trip(self, pillow_codec, pix, tmp_path):
        output = tmp_path / "pix.gif"
        with pillow_codec.open(pix) as img:
            with img.thumbnail(20) as thumb:
                assert thumb.save(output)

        assert pillow_codec.file_type(output) == ImageFormat.GIF
        with pillow_codec.open(output) as img:
            assert img.size == (20, 20)
            assert img.file_type == ImageFormat.GIF


class TestEncoding:
    def test_jpeg_quality_setting(self, pix):
        low = ImageCodec(PillowEngine(jpeg_quality=5))
        high = ImageCodec(PillowEngine(jpeg_quality=100))

        with low.open(pix) as img:
            small = img.buffer(".jpg")
        with high.open(pix) as img:
            large = img.buffer(".jpg")

        assert len(small) < len(large)

    def test_format_without_encoder(self, pillow_codec, pix):
        with pillow_codec.open(pix) as img:
            with pytest.raises(UnsupportedFormatError):
                img.buffer(".pcd")

    def test_version(self):
        assert PillowEngine().version().startswith("Pillow ")

    def test_buffer_decodes_with_pillow(self, pillow_codec, pix):
        with pillow_codec.open(pix) as img:
            data = img.buffer(".bmp")

        with Image.open(io.BytesIO(data)) as decoded:
            assert decoded.format == "BMP"
            assert decoded.size == (50, 50)


class TestOversizedImages:
    def test_decompression_bomb_is_a_decode_error(self, pillow_codec, pix, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        with pytest.raises(DecodeError):
            with pillow_codec.open(pix):
                pass
        with pytest.raises(DecodeError):
            with pillow_codec.open_bytes(pix.read_bytes()):
                pass

    def test_file_type_of_oversized_image(self, pillow_codec, pix, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        assert pillow_codec.file_type(pix) == ImageFormat.PNG
