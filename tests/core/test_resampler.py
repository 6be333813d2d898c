"""
Tests for area resampling
"""

import numpy as np
import pytest

from core.exceptions import InvalidParameter
from core.pixel_buffer import PixelBuffer, Rect
from core.resampler import block_means, resample


class TestResample:
    """Test resample()"""

    def test_solid_color_stays_solid(self, solid):
        result = resample(solid(40, 30, (10, 20, 30)), 7, 5)
        assert result.size == (7, 5)
        assert (result.pixels == np.array([10, 20, 30, 255], dtype=np.uint8)).all()

    def test_area_average(self):
        pixels = np.zeros((2, 2, 4), dtype=np.uint8)
        pixels[:, :, 3] = 255
        pixels[0, 0, :3] = 200
        pixels[1, 1, :3] = 200
        result = resample(PixelBuffer(pixels), 1, 1)
        assert result.get_pixel(0, 0) == (100, 100, 100, 255)

    def test_transparent_pixels_do_not_bleed(self):
        pixels = np.zeros((1, 2, 4), dtype=np.uint8)
        pixels[0, 0] = (255, 0, 0, 255)
        pixels[0, 1] = (0, 0, 255, 0)
        result = resample(PixelBuffer(pixels), 1, 1)
        r, g, b, a = result.get_pixel(0, 0)
        assert (r, g, b) == (255, 0, 0)
        assert a == 128

    def test_source_rect(self, gradient_buffer):
        result = resample(gradient_buffer, 10, 10, Rect(5, 5, 10, 10))
        assert np.array_equal(result.pixels, gradient_buffer.pixels[5:15, 5:15])

    def test_background_flattens(self, solid):
        result = resample(solid(4, 4, (0, 0, 0, 0)), 2, 2, background=(255, 255, 255, 255))
        assert result.get_pixel(1, 1) == (255, 255, 255, 255)

    def test_input_untouched(self, noise_buffer):
        before = noise_buffer.copy()
        resample(noise_buffer, 5, 5)
        assert noise_buffer == before

    @pytest.mark.parametrize("size", [(0, 5), (5, -1)])
    def test_invalid_size(self, gradient_buffer, size):
        with pytest.raises(InvalidParameter):
            resample(gradient_buffer, *size)

    def test_rect_outside(self, gradient_buffer):
        with pytest.raises(InvalidParameter):
            resample(gradient_buffer, 5, 5, Rect(100, 100, 5, 5))


class TestBlockMeans:
    """Test block_means()"""

    def test_partial_blocks(self):
        pixels = np.arange(5 * 5, dtype=np.uint8).reshape(5, 5, 1)
        means = block_means(pixels, 2)
        assert means.shape == (3, 3, 1)
        # (0 + 1 + 5 + 6) / 4
        assert means[0, 0, 0] == 3
        # last column block holds 4 and 9 only: 6.5 rounds up
        assert means[0, 2, 0] == 7
        # corner block is the single pixel 24
        assert means[2, 2, 0] == 24

    def test_rounds_half_up(self):
        pixels = np.array([[[0], [255]]], dtype=np.uint8)
        assert block_means(pixels, 2)[0, 0, 0] == 128

    def test_rounds_down_below_half(self):
        pixels = np.array([[[0], [0], [1]]], dtype=np.uint8)
        assert block_means(pixels, 3)[0, 0, 0] == 0
