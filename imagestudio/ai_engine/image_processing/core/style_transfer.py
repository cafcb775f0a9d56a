import numpy as np
from enum import Enum
from typing import Optional, Any

from ..utils.image_utils import (
    timing_decorator, as_pixel_view, clamp_parameter, parse_choice, compute_luma, to_uint8
)
from ..configs.processing_config import FilterConfig, DEFAULT_FILTER_CONFIG

class ToneStyle(str, Enum):
    VINTAGE = "vintage"
    COOL = "cool"
    WARM = "warm"
    VIVID = "vivid"
    MONOCHROME = "monochrome"

# Rows of the classic sepia matrix, applied to R, G, B in turn
SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)

# Per-channel gain at full intensity for the tint styles
TINT_GAINS = {
    ToneStyle.COOL: (-0.2, -0.1, 0.3),
    ToneStyle.WARM: (0.3, 0.1, -0.2),
}

def _vintage(r: np.ndarray, g: np.ndarray, b: np.ndarray, intensity: float):
    # Sequential on purpose: g reads the new r, b reads the new r and g
    (rr, rg, rb), (gr, gg, gb), (br, bg, bb) = SEPIA_MATRIX
    r = np.minimum(255.0, (r * rr + g * rg + b * rb) * intensity + r * (1 - intensity))
    g = np.minimum(255.0, (r * gr + g * gg + b * gb) * intensity + g * (1 - intensity))
    b = np.minimum(255.0, (r * br + g * bg + b * bb) * intensity + b * (1 - intensity))
    return r, g, b

@timing_decorator
def style_transfer(buffer: Any, width: int, height: int, style: Any,
                   intensity: float = 0.5, config: Optional[FilterConfig] = None) -> None:
    """
    Tone-mapping "style transfer", applied in place.

    ``style`` is one of vintage, cool, warm, vivid or monochrome. An intensity
    of 0 leaves every style unchanged.
    """
    config = config or DEFAULT_FILTER_CONFIG
    pixels = as_pixel_view(buffer, width, height, writable=True)
    style = parse_choice(ToneStyle, style, 'style')
    intensity = clamp_parameter(intensity, config.INTENSITY_RANGE, 'intensity')

    rgb = pixels[..., :3].astype(np.float64)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]

    if style is ToneStyle.VINTAGE:
        r, g, b = _vintage(r, g, b, intensity)
    elif style in TINT_GAINS:
        gain_r, gain_g, gain_b = TINT_GAINS[style]
        r = r * (1 + gain_r * intensity)
        g = g * (1 + gain_g * intensity)
        b = b * (1 + gain_b * intensity)
    elif style is ToneStyle.VIVID:
        luma = compute_luma(rgb, config.LUMA_WEIGHTS)
        boost = 1 + intensity
        r = luma + (r - luma) * boost
        g = luma + (g - luma) * boost
        b = luma + (b - luma) * boost
    elif style is ToneStyle.MONOCHROME:
        luma = compute_luma(rgb, config.LUMA_WEIGHTS)
        r = r * (1 - intensity) + luma * intensity
        g = g * (1 - intensity) + luma * intensity
        b = b * (1 - intensity) + luma * intensity

    pixels[..., :3] = to_uint8(np.stack([r, g, b], axis=-1))
