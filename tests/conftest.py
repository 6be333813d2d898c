"""
Pytest configuration and fixtures for raster toolkit tests
"""

import io

import numpy as np
import pytest
from PIL import Image

from core.pixel_buffer import PixelBuffer


def make_buffer(width, height, color=(255, 255, 255, 255)):
    """Solid color buffer"""
    if len(color) == 3:
        color = tuple(color) + (255,)
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    return PixelBuffer(pixels)


def encode_image(buffer, fmt="PNG", exif=None):
    """Encode a buffer with Pillow (optionally with EXIF data)"""
    mode = "RGBA" if fmt in ("PNG", "WEBP", "GIF") else "RGB"
    pixels = buffer.pixels if mode == "RGBA" else np.ascontiguousarray(buffer.rgb)
    image = Image.fromarray(pixels)
    output = io.BytesIO()
    if exif is not None:
        image.save(output, format=fmt, exif=exif)
    else:
        image.save(output, format=fmt)
    return output.getvalue()


@pytest.fixture
def gradient_buffer():
    """Create a 40x30 opaque buffer where every pixel is distinct"""
    height, width = 30, 40
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = (xs * 6) % 256
    pixels[:, :, 1] = (ys * 8) % 256
    pixels[:, :, 2] = (xs + ys * width) % 256
    pixels[:, :, 3] = 255
    return PixelBuffer(pixels)


@pytest.fixture
def noise_buffer():
    """Create a 32x24 buffer of seeded random RGBA noise"""
    rng = np.random.default_rng(42)
    pixels = rng.integers(0, 256, size=(24, 32, 4), dtype=np.uint8)
    return PixelBuffer(pixels)


@pytest.fixture
def red_buffer():
    """Create a 20x10 opaque red buffer"""
    return make_buffer(20, 10, (255, 0, 0))


@pytest.fixture
def png_bytes(gradient_buffer):
    """Gradient buffer encoded as PNG"""
    return encode_image(gradient_buffer, "PNG")


@pytest.fixture
def jpeg_bytes(gradient_buffer):
    """Gradient buffer encoded as JPEG"""
    return encode_image(gradient_buffer, "JPEG")


@pytest.fixture
def solid():
    """Factory for solid color buffers: solid(width, height, color)"""
    return make_buffer


@pytest.fixture
def encode():
    """Factory for encoded images: encode(buffer, fmt="PNG", exif=None)"""
    return encode_image
