import math

import cv2
import numpy as np
from typing import Optional, Any, Tuple

from ..utils.image_utils import timing_decorator, as_pixel_view, clamp_parameter, to_uint8, logger
from ..configs.processing_config import FilterConfig, DEFAULT_FILTER_CONFIG

def clamp_upscale_factor(scale: Any, config: Optional[FilterConfig] = None) -> int:
    """Clamp into [1, MAX_UPSCALE_FACTOR] and round halves up to an integer factor"""
    config = config or DEFAULT_FILTER_CONFIG
    factor = clamp_parameter(scale, (1, config.MAX_UPSCALE_FACTOR), 'scale')
    return int(math.floor(factor + 0.5))

def bilinear_resample(pixels: np.ndarray, new_width: int, new_height: int) -> np.ndarray:
    """Resize an (H, W, 4) image with bilinear interpolation on all four channels"""
    return cv2.resize(
        np.ascontiguousarray(pixels),
        (new_width, new_height),
        interpolation=cv2.INTER_LINEAR
    )

def sharpen(image: np.ndarray, config: Optional[FilterConfig] = None) -> np.ndarray:
    """
    Apply the 3x3 sharpening kernel to R, G and B of an (H, W, 4) image.

    Every output sample reads only the unmodified input, so the result does not
    depend on traversal order. With ``SHARPEN_BORDER_MODE == "skip"`` the outer
    1-pixel ring is returned as-is.
    """
    config = config or DEFAULT_FILTER_CONFIG
    kernel = np.array(config.SHARPEN_KERNEL, dtype=np.float32)

    filtered = cv2.filter2D(
        image[..., :3].astype(np.float32),
        -1,
        kernel,
        borderType=cv2.BORDER_REPLICATE
    )

    result = image.copy()
    if config.SHARPEN_BORDER_MODE == 'replicate':
        result[..., :3] = to_uint8(filtered)
    else:
        height, width = image.shape[:2]
        if height >= 3 and width >= 3:
            result[1:-1, 1:-1, :3] = to_uint8(filtered[1:-1, 1:-1])

    return result

@timing_decorator
def upscale(buffer: Any, width: int, height: int, scale: Any = 2,
            config: Optional[FilterConfig] = None) -> Tuple[np.ndarray, int, int]:
    """
    Super-resolution: bilinear upscale followed by a sharpening convolution.

    Returns a new flat RGBA buffer with its width and height; the input buffer
    is left untouched.
    """
    config = config or DEFAULT_FILTER_CONFIG
    pixels = as_pixel_view(buffer, width, height)
    factor = clamp_upscale_factor(scale, config)

    height, width = pixels.shape[:2]
    new_width, new_height = width * factor, height * factor
    logger.debug(f"Upscaling {width}x{height} by {factor} to {new_width}x{new_height}")

    resampled = bilinear_resample(pixels, new_width, new_height)
    sharpened = sharpen(resampled, config)

    return sharpened.reshape(-1), new_width, new_height
