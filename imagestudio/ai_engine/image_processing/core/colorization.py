import numpy as np
from enum import Enum
from typing import Optional, Any

from ..utils.image_utils import (
    timing_decorator, as_pixel_view, clamp_parameter, parse_choice, compute_luma, to_uint8
)
from ..configs.processing_config import FilterConfig, DEFAULT_FILTER_CONFIG

class ColorScheme(str, Enum):
    NATURAL = "natural"
    COOL = "cool"
    WARM = "warm"

# Multiplicative (R, G, B) bias on luma at full intensity
COLOR_BIASES = {
    ColorScheme.NATURAL: (0.2, 0.1, -0.1),
    ColorScheme.COOL: (-0.3, 0.0, 0.4),
    ColorScheme.WARM: (0.4, 0.0, -0.2),
}

@timing_decorator
def colorize(buffer: Any, width: int, height: int, scheme: Any,
             intensity: float = 0.5, config: Optional[FilterConfig] = None) -> None:
    """Tint a (usually grayscale) buffer in place by redistributing luma over R, G, B"""
    config = config or DEFAULT_FILTER_CONFIG
    pixels = as_pixel_view(buffer, width, height, writable=True)
    scheme = parse_choice(ColorScheme, scheme, 'color scheme')
    intensity = clamp_parameter(intensity, config.INTENSITY_RANGE, 'intensity')

    luma = compute_luma(pixels[..., :3].astype(np.float64), config.LUMA_WEIGHTS)
    gains = 1.0 + np.array(COLOR_BIASES[scheme], dtype=np.float64) * intensity

    pixels[..., :3] = to_uint8(luma[..., np.newaxis] * gains)
