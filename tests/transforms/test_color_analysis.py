"""
Tests for average and dominant color
"""

import numpy as np
import pytest

from core.exceptions import InvalidParameter
from core.pixel_buffer import PixelBuffer
from transforms.color_analysis import average_color, dominant_color


def quadrant_image(top_left, rest, split=50):
    """100x100 image: top_left fills the first `split` columns of the top half"""
    pixels = np.empty((100, 100, 4), dtype=np.uint8)
    pixels[:, :] = (*rest, 255)
    pixels[:50, :split] = (*top_left, 255)
    return PixelBuffer(pixels)


class TestAverageColor:
    """Test average_color()"""

    def test_solid(self, solid):
        assert average_color(solid(7, 5, (10, 20, 30))) == 0x0A141E

    def test_hex_format(self, solid):
        assert average_color(solid(7, 5, (10, 20, 30)), "hex") == "0a141e"

    def test_mixes_channels(self):
        pixels = np.full((1, 2, 4), 255, dtype=np.uint8)
        pixels[0, 0, :3] = (200, 0, 0)
        pixels[0, 1, :3] = (0, 0, 100)
        assert average_color(PixelBuffer(pixels), "hex") == "640032"

    def test_transparent_pixels_count_as_black(self, solid):
        assert average_color(solid(4, 4, (10, 20, 30, 0))) == 0

    def test_mixes_with_transparent_pixels(self):
        pixels = np.zeros((1, 2, 4), dtype=np.uint8)
        pixels[0, 0] = (200, 100, 50, 255)
        pixels[0, 1] = (255, 255, 255, 0)
        assert average_color(PixelBuffer(pixels), "hex") == "643219"

    def test_input_untouched(self, noise_buffer):
        before = noise_buffer.copy()
        average_color(noise_buffer)
        assert noise_buffer == before

    def test_unknown_format(self, solid):
        with pytest.raises(InvalidParameter):
            average_color(solid(2, 2), "rgb")


class TestDominantColor:
    """Test dominant_color()"""

    def test_counts_top_left_quadrant_only(self):
        image = quadrant_image((255, 0, 0), (0, 0, 255))
        assert dominant_color(image, "hex") == "ff0000"

    def test_tie_goes_to_first_seen(self):
        image = quadrant_image((0, 255, 0), (255, 255, 255), split=25)
        assert dominant_color(image) == 0x00FF00

    def test_small_image_is_upsampled(self, solid):
        assert dominant_color(solid(3, 3, (1, 2, 3)), "int") == 0x010203

    def test_input_untouched(self, noise_buffer):
        before = noise_buffer.copy()
        dominant_color(noise_buffer)
        assert noise_buffer == before

    def test_transparent_pixels_count_as_black(self):
        pixels = np.zeros((100, 100, 4), dtype=np.uint8)
        pixels[:, :] = (255, 255, 255, 0)
        pixels[:50, :10] = (0, 0, 255, 255)
        assert dominant_color(PixelBuffer(pixels), "hex") == "000000"
