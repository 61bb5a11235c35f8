"""
Pytest configuration and fixtures for Thumbsmith tests
"""

import cv2
import numpy as np
import pytest

from core.image import ImageCodec, PillowEngine, create_engine

# name -> (width, height), mirroring the classic fixture set
FIXTURE_SIZES = {
    "pix": (50, 50),
    "pix2": (100, 50),
    "bearry": (323, 24),
    "biggie": (800, 600),
    "godzilla": (300, 399),
    "landscape": (400, 300),
    "portrait": (300, 500),
}


def make_gradient(width, height):
    """
    Create a BGR test image whose pixel (x, y) has
    red = 5x mod 256, green = 5y mod 256, blue = 100.
    """
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[..., 2] = ((np.arange(width) * 5) % 256)[None, :]
    image[..., 1] = ((np.arange(height) * 5) % 256)[:, None]
    image[..., 0] = 100
    return image


@pytest.fixture
def images(tmp_path):
    """Write the PNG fixture set and return a dict of name -> path"""
    fixture_dir = tmp_path / "fixtures"
    fixture_dir.mkdir()

    paths = {}
    for name, (width, height) in FIXTURE_SIZES.items():
        path = fixture_dir / f"{name}.png"
        cv2.imwrite(str(path), make_gradient(width, height))
        paths[name] = path
    return paths


@pytest.fixture
def pix(images):
    """50x50 gradient PNG"""
    return images["pix"]


@pytest.fixture
def pix2(images):
    """100x50 gradient PNG"""
    return images["pix2"]


@pytest.fixture
def pix_jpg(tmp_path):
    """50x50 gradient JPEG"""
    path = tmp_path / "pix.jpg"
    cv2.imwrite(str(path), make_gradient(50, 50))
    return path


@pytest.fixture
def tmp_image(tmp_path):
    """Output path that does not exist yet"""
    output_dir = tmp_path / "out"
    output_dir.mkdir()
    return output_dir / "tmp.png"


@pytest.fixture(params=["pillow", "opencv"])
def codec(request):
    """ImageCodec for each available engine"""
    return ImageCodec(create_engine(request.param))


@pytest.fixture
def pillow_codec():
    """ImageCodec backed by Pillow"""
    return ImageCodec(PillowEngine())


class CountingEngine(PillowEngine):
    """Pillow engine that records every release call"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.released = []

    def release(self, raster):
        self.released.append(raster.size)
        super().release(raster)


@pytest.fixture
def counting_engine():
    return CountingEngine()


@pytest.fixture
def counting_codec(counting_engine):
    """ImageCodec whose engine counts releases"""
    return ImageCodec(counting_engine)


@pytest.fixture
def biggie_path(images):
    """800x600 gradient PNG"""
    return images["biggie"]
