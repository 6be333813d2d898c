"""
Tests for resize
"""

import numpy as np
import pytest

from core.constants import ResizeDefaults
from core.enums import ImageFormat, Units
from core.exceptions import InvalidParameter
from schemas.options import ResizeOptions
from transforms.resize import resize


class TestResize:
    """Test resize()"""

    def test_option_defaults(self):
        options = ResizeOptions()
        assert options.units is Units.PX
        assert options.keep_ratio is ResizeDefaults.KEEP_RATIO
        assert options.enlarge is ResizeDefaults.ENLARGE
        assert options.crop is ResizeDefaults.CROP
        assert options.padding_color == ResizeDefaults.PADDING_COLOR

    @pytest.mark.parametrize("size", [(20, 20), (10, 40), (64, 16), (40, 30), (7, 3)])
    def test_crop_matches_requested_size(self, gradient_buffer, size):
        result = resize(gradient_buffer, {"width": size[0], "height": size[1]})
        assert result.size == size

    def test_width_only_keeps_aspect(self, gradient_buffer):
        result = resize(gradient_buffer, ResizeOptions(width=20))
        assert result.size == (20, 15)

    def test_percent(self, gradient_buffer):
        result = resize(gradient_buffer, {"width": 50, "height": 50, "units": "%"})
        assert result.size == (20, 15)

    def test_no_options_copies(self, gradient_buffer):
        result = resize(gradient_buffer)
        assert result == gradient_buffer
        assert result is not gradient_buffer

    def test_enlarge_false_returns_input_size(self, gradient_buffer):
        result = resize(gradient_buffer, {"width": 400, "height": 300, "enlarge": False})
        assert result.size == (40, 30)

    @pytest.mark.parametrize("size", [(20, 20), (100, 10), (13, 77)])
    def test_keep_ratio_with_paddings_returns_requested_box(self, gradient_buffer, size):
        options = {"width": size[0], "height": size[1], "keep_ratio": True, "paddings": True}
        assert resize(gradient_buffer, options).size == size

    def test_letterbox_is_white_by_default(self, gradient_buffer):
        result = resize(gradient_buffer, {"width": 20, "height": 20, "keep_ratio": True})
        # 20x15 image centered with a 3px band on top and a 2px band at the bottom
        assert (result.pixels[:3] == 255).all()
        assert (result.pixels[18:] == 255).all()
        assert not (result.pixels[3:18, :, :3] == 255).all()

    def test_letterbox_custom_color(self, gradient_buffer):
        options = {"width": 20, "height": 20, "keep_ratio": True, "paddings": "#ff0000"}
        result = resize(gradient_buffer, options)
        assert result.get_pixel(0, 0) == (255, 0, 0, 255)
        assert result.get_pixel(19, 19) == (255, 0, 0, 255)

    def test_keep_ratio_without_paddings(self, gradient_buffer):
        options = {"width": 20, "height": 20, "keep_ratio": True, "paddings": False}
        assert resize(gradient_buffer, options).size == (20, 15)

    def test_malformed_padding_color(self, gradient_buffer):
        with pytest.raises(InvalidParameter):
            resize(gradient_buffer, {"width": 20, "height": 20, "paddings": "#12"})

    def test_non_numeric_width(self, gradient_buffer):
        with pytest.raises(InvalidParameter):
            resize(gradient_buffer, {"width": "wide"})

    def test_unknown_option(self, gradient_buffer):
        with pytest.raises(InvalidParameter):
            resize(gradient_buffer, {"widht": 20})

    def test_input_untouched(self, noise_buffer):
        before = noise_buffer.copy()
        resize(noise_buffer, {"width": 10, "height": 10})
        assert noise_buffer == before


class TestResizeTransparency:
    """Test transparent vs white background selection"""

    def test_alpha_kept_for_png_to_png(self, solid):
        buffer = solid(10, 10, (0, 0, 0, 0))
        options = {
            "width": 5,
            "source_format": ImageFormat.PNG,
            "target_format": ImageFormat.PNG,
        }
        result = resize(buffer, options)
        assert (result.alpha == 0).all()

    def test_alpha_kept_when_formats_unknown(self, solid):
        result = resize(solid(10, 10, (0, 0, 0, 0)), {"width": 5})
        assert (result.alpha == 0).all()

    def test_white_background_for_jpeg_target(self, solid):
        buffer = solid(10, 10, (0, 0, 0, 0))
        options = {"width": 5, "source_format": "png", "target_format": "jpg"}
        result = resize(buffer, options)
        assert (result.pixels == np.array([255, 255, 255, 255], dtype=np.uint8)).all()
