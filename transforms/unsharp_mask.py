"""
Unsharp mask sharpening.

Parameters use Photoshop-like units and are calibrated before use:
amount 0..500, radius 0..50, threshold 0..255. The blurred copy is a
single pass of the normalized 3x3 Gaussian kernel.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import cv2
import numpy as np

from core.constants import UnsharpMaskDefaults
from core.geometry import round_half_away
from core.pixel_buffer import PixelBuffer
from core.utils.params_processor import prepare_params
from schemas.options import UnsharpMaskOptions

logger = logging.getLogger(__name__)

_KERNEL = (
    np.array(UnsharpMaskDefaults.BLUR_KERNEL, dtype=np.float32) / UnsharpMaskDefaults.BLUR_DIVISOR
)


@dataclass(frozen=True)
class Calibration:
    """Effective unsharp mask parameters."""

    amount: float
    radius: int
    threshold: float


def calibrate(amount: float, radius: float, threshold: float) -> Calibration:
    """
    Convert user-facing parameters to effective ones.

    Each value is capped first (500, 50 and 255); amount is then scaled by
    0.016 and radius doubled and rounded.
    """
    amount = min(amount, UnsharpMaskDefaults.MAX_AMOUNT) * UnsharpMaskDefaults.AMOUNT_FACTOR
    radius = min(radius, UnsharpMaskDefaults.MAX_RADIUS) * UnsharpMaskDefaults.RADIUS_FACTOR
    radius = abs(round_half_away(radius))
    threshold = min(threshold, UnsharpMaskDefaults.MAX_THRESHOLD)
    return Calibration(amount, radius, threshold)


def _blur(rgb: np.ndarray) -> np.ndarray:
    blurred = cv2.filter2D(rgb.astype(np.float32), -1, _KERNEL, borderType=cv2.BORDER_REPLICATE)
    # the kernel sums to 16 and the weights are integers: truncate like integer division
    return np.floor(blurred + 1e-4)


def unsharp_mask(
    buffer: PixelBuffer, options: Optional[Union[UnsharpMaskOptions, Mapping[str, Any]]] = None
) -> PixelBuffer:
    """
    Sharpen a buffer in place.

    For each color channel: new = orig + amount * (orig - blurred), clamped
    to 0..255. With a positive threshold a channel is only changed where
    |orig - blurred| >= threshold. Alpha is never touched.

    Args:
        buffer: Buffer to sharpen (modified in place)
        options: UnsharpMaskOptions or a mapping of its fields

    Returns:
        The same buffer
    """
    options = prepare_params(options, UnsharpMaskOptions)
    params = calibrate(options.amount, options.radius, options.threshold)

    if params.radius == 0:
        logger.debug("Unsharp mask radius is 0, nothing to do")
        return buffer

    orig = buffer.rgb.astype(np.float32)
    blurred = _blur(buffer.rgb)
    diff = orig - blurred

    sharpened = np.clip(np.floor(params.amount * diff + orig), 0, 255)
    if params.threshold > 0:
        sharpened = np.where(np.abs(diff) >= params.threshold, sharpened, orig)

    buffer.pixels[:, :, :3] = sharpened.astype(np.uint8)

    logger.debug(
        f"Unsharp mask on {buffer.width}x{buffer.height}: amount={params.amount:.3f} "
        f"radius={params.radius} threshold={params.threshold}"
    )
    return buffer
