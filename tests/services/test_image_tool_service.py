"""
Tests for ImageToolService
"""

import os
import stat

import numpy as np
import pytest
from PIL import Image

from core.enums import ImageFormat
from core.exceptions import InvalidInput, InvalidParameter
from core.image import codec
from core.image.converters import ImageConverters
from services import image_tool_service
from services.image_tool_service import ImageToolService


@pytest.fixture
def service():
    return ImageToolService()


@pytest.fixture
def png_file(tmp_path, png_bytes):
    path = tmp_path / "input.png"
    path.write_bytes(png_bytes)
    return path


class TestLoad:
    """Test input loading"""

    def test_buffer_is_copied(self, service, gradient_buffer):
        loaded = service.load(gradient_buffer)
        assert loaded.buffer == gradient_buffer
        assert loaded.buffer is not gradient_buffer
        assert loaded.data is None
        assert loaded.format is None

    def test_bytes(self, service, png_bytes, gradient_buffer):
        loaded = service.load(png_bytes)
        assert loaded.buffer == gradient_buffer
        assert loaded.format is ImageFormat.PNG

    def test_path(self, service, png_file, gradient_buffer):
        loaded = service.load(str(png_file))
        assert loaded.buffer == gradient_buffer
        assert loaded.format is ImageFormat.PNG
        assert service.load(png_file).buffer == gradient_buffer

    def test_base64(self, service, png_bytes, gradient_buffer):
        encoded = ImageConverters.bytes_to_base64(png_bytes)
        assert service.load(encoded).buffer == gradient_buffer
        assert service.load(f"data:image/png;base64,{encoded}").buffer == gradient_buffer

    def test_short_base64(self, service, solid, encode):
        encoded = ImageConverters.bytes_to_base64(encode(solid(2, 2, (1, 2, 3))))
        loaded = service.load(encoded)
        assert loaded.buffer.get_pixel(1, 1) == (1, 2, 3, 255)
        assert loaded.format is ImageFormat.PNG

    def test_file_name_made_of_base64_characters(self, service, tmp_path, monkeypatch, png_bytes):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "ABCD").write_bytes(png_bytes)
        assert service.load("ABCD").format is ImageFormat.PNG

    def test_missing_file(self, service, tmp_path):
        with pytest.raises(InvalidInput):
            service.load(str(tmp_path / "missing.png"))

    def test_unsupported_type(self, service):
        with pytest.raises(InvalidInput):
            service.load(12345)


class TestOutput:
    """Test saving results"""

    def test_in_memory_by_default(self, service, gradient_buffer):
        result = service.resize(gradient_buffer, {"width": 20})
        assert result.output_path is None
        assert (result.width, result.height) == (20, 15)
        assert result.processing_time_ms >= 1

    def test_writes_requested_format(self, service, png_file, tmp_path):
        target = tmp_path / "out" / "thumb.jpg"
        result = service.resize(str(png_file), {"width": 20}, output=str(target))
        assert result.output_path == target
        with Image.open(target) as image:
            assert image.format == "JPEG"
            assert image.size == (20, 15)

    def test_unknown_extension(self, service, gradient_buffer, tmp_path):
        with pytest.raises(InvalidParameter):
            service.grayscale(gradient_buffer, output=tmp_path / "out.tiff")

    def test_chmod(self, service, gradient_buffer, tmp_path):
        target = tmp_path / "out.png"
        result = service.flip(gradient_buffer, output=target, output_options={"chmod": 0o600})
        assert stat.S_IMODE(os.stat(target).st_mode) == 0o600
        assert result.warnings == []

    def test_chmod_failure_is_a_warning(self, service, gradient_buffer, tmp_path, monkeypatch):
        monkeypatch.setattr(image_tool_service, "apply_permissions", lambda path, mode: False)
        target = tmp_path / "out.png"
        result = service.flip(gradient_buffer, output=target, output_options={"chmod": 0o644})
        assert target.exists()
        assert len(result.warnings) == 1

    def test_defaults_are_merged(self):
        service = ImageToolService(default_quality=40, default_compression=3)
        options = service._output_options({"chmod": 0o640})
        assert (options.quality, options.compression, options.chmod) == (40, 3, 0o640)

    def test_invalid_output_options(self, service, gradient_buffer, tmp_path):
        target = tmp_path / "a.jpg"
        with pytest.raises(InvalidParameter):
            service.flip(gradient_buffer, output=target, output_options={"quality": 200})


class TestTransforms:
    """Test the transform methods"""

    def test_resize_flattens_for_jpeg(self, service, solid, encode, tmp_path):
        data = encode(solid(10, 10, (0, 0, 0, 0)), "PNG")
        target = tmp_path / "flat.jpg"
        service.resize(data, {"width": 5}, output=target)
        pixels = codec.load(target).pixels
        assert pixels[:, :, :3].min() >= 250

    def test_resize_keeps_alpha_for_png(self, service, solid, encode, tmp_path):
        data = encode(solid(10, 10, (0, 0, 0, 0)), "PNG")
        target = tmp_path / "clear.png"
        service.resize(data, {"width": 5}, output=target)
        assert (codec.load(target).alpha == 0).all()

    def test_buffer_input_not_mutated(self, service, noise_buffer):
        before = noise_buffer.copy()
        service.grayscale(noise_buffer)
        service.pixelate(noise_buffer, {"blocksize": 4})
        service.meshify(noise_buffer)
        service.unsharp_mask(noise_buffer, {"radius": 2})
        assert noise_buffer == before

    def test_watermark_from_path(self, service, solid, tmp_path):
        mark_path = tmp_path / "mark.png"
        codec.save(solid(4, 4, (255, 0, 0)), mark_path)
        options = {"position": "top-left"}
        result = service.watermark(solid(8, 8, (0, 0, 0)), str(mark_path), options)
        assert result.buffer.get_pixel(3, 3) == (255, 0, 0, 255)
        assert result.buffer.get_pixel(4, 4) == (0, 0, 0, 255)

    def test_after_steps(self, service, gradient_buffer):
        result = service.rotate(gradient_buffer, 90, after=[{"op": "grayscale"}])
        assert (result.width, result.height) == (30, 40)
        rgb = result.buffer.rgb
        assert np.array_equal(rgb[:, :, 0], rgb[:, :, 2])

    def test_autorotate_reads_exif(self, service, gradient_buffer, encode):
        exif = Image.Exif()
        exif[0x0112] = 6
        data = encode(gradient_buffer, "JPEG", exif=exif)
        result = service.autorotate(data)
        assert (result.width, result.height) == (30, 40)
        assert result.source_format is ImageFormat.JPG

    def test_autorotate_explicit_orientation(self, service, gradient_buffer, encode):
        exif = Image.Exif()
        exif[0x0112] = 6
        data = encode(gradient_buffer, "JPEG", exif=exif)
        result = service.autorotate(data, {"orientation": 1})
        assert (result.width, result.height) == (40, 30)

    def test_autorotate_buffer_is_noop(self, service, gradient_buffer):
        assert service.autorotate(gradient_buffer).buffer == gradient_buffer

    def test_apply_steps_resolves_watermark_paths(self, service, solid, tmp_path):
        mark_path = tmp_path / "mark.png"
        codec.save(solid(2, 2, (0, 255, 0)), mark_path)
        steps = [
            {"op": "resize", "width": 6, "height": 6},
            {"op": "watermark", "watermark": str(mark_path), "position": "bottom-right"},
        ]
        result = service.apply_steps(solid(12, 12, (0, 0, 0)), steps)
        assert (result.width, result.height) == (6, 6)
        assert result.buffer.get_pixel(5, 5) == (0, 255, 0, 255)

    @pytest.fixture
    def framed_png(self, solid, encode):
        """20x20 transparent PNG with an opaque red centre"""
        buffer = solid(20, 20, (0, 0, 0, 0))
        buffer.pixels[5:15, 5:15] = (255, 0, 0, 255)
        return encode(buffer, "PNG")

    def test_apply_steps_flattens_for_jpeg(self, service, framed_png, tmp_path):
        target = tmp_path / "steps.jpg"
        service.apply_steps(framed_png, [{"op": "resize", "width": 10}], output=target)
        corner = codec.load(target).pixels[0, 0, :3]
        assert corner.min() >= 250

    def test_after_steps_flatten_for_jpeg(self, service, framed_png, tmp_path):
        target = tmp_path / "after.jpg"
        service.flip(framed_png, "horizontal", output=target, after=[{"op": "resize", "width": 10}])
        assert codec.load(target).pixels[0, 0, :3].min() >= 250

    def test_apply_steps_target_format(self, service, framed_png):
        steps = [{"op": "resize", "width": 10}]
        flat = service.apply_steps(framed_png, steps, target_format=ImageFormat.JPG)
        assert flat.buffer.get_pixel(0, 0) == (255, 255, 255, 255)
        clear = service.apply_steps(framed_png, steps, target_format=ImageFormat.PNG)
        assert clear.buffer.get_pixel(0, 0)[3] == 0


class TestColors:
    """Test color extraction"""

    def test_average_from_bytes(self, service, solid, encode):
        data = encode(solid(5, 5, (10, 20, 30)), "PNG")
        assert service.average_color(data, "hex") == "0a141e"

    def test_dominant_from_buffer(self, service, red_buffer):
        assert service.dominant_color(red_buffer) == 0xFF0000
