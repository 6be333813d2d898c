"""
Constants and configuration values for the raster toolkit.
Centralizes all magic numbers and default option values.
"""


# Pixel buffer constants
class BufferConstants:
    """Constants related to pixel buffers."""

    CHANNELS = 4  # RGBA
    MAX_CHANNEL_VALUE = 255

    WHITE = (255, 255, 255, 255)
    TRANSPARENT = (255, 255, 255, 0)
    BLACK = (0, 0, 0, 255)


# Resize defaults
class ResizeDefaults:
    """Default parameters for resize."""

    UNITS = "px"
    KEEP_RATIO = False
    PADDINGS = True
    ENLARGE = True
    CROP = True
    PADDING_COLOR = (255, 255, 255)


# Watermark defaults
class WatermarkDefaults:
    """Default parameters for watermark placement."""

    SCALE = False
    STRETCH = False
    REPEAT = False
    POSITION = "center"
    OPACITY = 100
    MIN_OPACITY = 0
    MAX_OPACITY = 100


# Unsharp mask defaults and calibration
class UnsharpMaskDefaults:
    """Default parameters and Photoshop-like calibration limits for unsharp mask."""

    AMOUNT = 50.0
    RADIUS = 0.5
    THRESHOLD = 3

    MAX_AMOUNT = 500.0
    AMOUNT_FACTOR = 0.016
    MAX_RADIUS = 50.0
    RADIUS_FACTOR = 2.0
    MAX_THRESHOLD = 255

    BLUR_KERNEL = ((1, 2, 1), (2, 4, 2), (1, 2, 1))
    BLUR_DIVISOR = 16


# Pixelate / meshify defaults
class BlockDefaults:
    """Default block sizes for pixelate and meshify."""

    PIXELATE_BLOCKSIZE = 10
    MESHIFY_BLOCKSIZE = 2
    MESH_COLOR = (0, 0, 0)


# Color analysis
class ColorAnalysisConstants:
    """Sampling sizes for color extraction."""

    DOMINANT_SAMPLE_SIZE = 100
    DOMINANT_REGION_SIZE = 50
    DEFAULT_FORMAT = "int"


# Grayscale luma weights (per mille, ITU-R BT.601)
class LumaWeights:
    """Integer luma weights, sum is LUMA_DIVISOR."""

    RED = 299
    GREEN = 587
    BLUE = 114
    LUMA_DIVISOR = 1000


# EXIF orientation
class OrientationConstants:
    """EXIF orientation tag values."""

    EXIF_TAG = 0x0112
    VALID_VALUES = range(1, 9)


# Codec / output constants
class OutputDefaults:
    """Defaults for encoding and saving."""

    QUALITY = 100
    MIN_QUALITY = 0
    MAX_QUALITY = 100
    COMPRESSION = 9
    MIN_COMPRESSION = 0
    MAX_COMPRESSION = 9
    DIRECTORY_MODE = 0o777
    DEFAULT_FORMAT = "png"

    EXTENSION_ALIASES = {"jpeg": "jpg", "jpe": "jpg"}
    PIL_FORMAT_NAMES = {"JPEG": "jpg", "MPO": "jpg", "PNG": "png", "GIF": "gif", "WEBP": "webp"}


# API Constants
class APIConstants:
    """Constants for API endpoints."""

    API_VERSION = "1.0.0"
    MAX_IMAGE_PIXELS = 89_478_485  # Pillow default decompression limit


# System Constants
class SystemConstants:
    """Constants for system operations."""

    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# Error Messages
class ErrorMessages:
    """Standard error messages."""

    INVALID_BUFFER = "Pixel buffer must be a uint8 (height, width, 4) array, got {shape} {dtype}"
    UNREADABLE_IMAGE = "Unable to decode image: {error}"
    UNSUPPORTED_INPUT = "Unsupported input type: {type}"
    ALLOCATION_FAILED = "Failed to allocate {width}x{height} buffer: {error}"
    ENCODE_FAILED = "Failed to encode image as {format}: {error}"
    UNKNOWN_OUTPUT_FORMAT = "Cannot infer output format from {path}"
    OUTPUT_PATH_FAILED = "Failed to create output directory {path}: {error}"
    INVALID_REGION = "Invalid blend region {width}x{height}"
    UNRESOLVED_WATERMARK = "Cannot resolve watermark source {source!r} without an input resolver"
