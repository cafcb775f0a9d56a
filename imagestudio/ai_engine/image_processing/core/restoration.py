import numpy as np
from typing import Optional, Any

from ..utils.image_utils import timing_decorator, as_pixel_view, clamp_parameter, to_uint8
from ..configs.processing_config import FilterConfig, DEFAULT_FILTER_CONFIG

@timing_decorator
def restore(buffer: Any, width: int, height: int, strength: float = 0.5,
            config: Optional[FilterConfig] = None) -> None:
    """
    Photo restoration filter, applied in place.

    Stretches contrast around the neutral value, then above the denoise
    threshold blends every sample toward neutral by ``0.2 * strength``.
    Alpha is untouched and there is no dependency between pixels.
    """
    config = config or DEFAULT_FILTER_CONFIG
    pixels = as_pixel_view(buffer, width, height, writable=True)
    strength = clamp_parameter(strength, config.STRENGTH_RANGE, 'strength')

    neutral = config.NEUTRAL_VALUE
    contrast = 1.0 + strength * config.RESTORE_CONTRAST_GAIN

    # Stored as 8-bit between the two steps
    stretched = to_uint8((pixels[..., :3].astype(np.float64) - neutral) * contrast + neutral)

    if strength > config.RESTORE_DENOISE_THRESHOLD:
        blur = strength * config.RESTORE_DENOISE_GAIN
        stretched = to_uint8(stretched.astype(np.float64) * (1.0 - blur) + neutral * blur)

    pixels[..., :3] = stretched
