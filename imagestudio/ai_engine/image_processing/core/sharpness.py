import numpy as np
from typing import Optional, Any

from ..utils.image_utils import timing_decorator, as_pixel_view, compute_luma
from ..configs.processing_config import FilterConfig, DEFAULT_FILTER_CONFIG

@timing_decorator
def score(buffer: Any, width: int, height: int, config: Optional[FilterConfig] = None) -> float:
    """
    Attention score of an RGBA buffer, a sharpness proxy in [0, 10].

    Mean absolute 4-neighbour Laplacian of luma over the interior pixels,
    divided by ``SCORE_NORMALIZATION``. Buffers narrower or shorter than three
    pixels have no interior and score 0.
    """
    config = config or DEFAULT_FILTER_CONFIG
    pixels = as_pixel_view(buffer, width, height)

    height, width = pixels.shape[:2]
    if width < 3 or height < 3:
        return 0.0

    # The Laplacian is linear, so apply it per channel in exact integer
    # arithmetic and weight afterwards; flat regions then give exactly 0.
    rgb = pixels[..., :3].astype(np.int32)
    center = rgb[1:-1, 1:-1]
    laplacian = (
        4 * center
        - rgb[:-2, 1:-1]   # top
        - rgb[2:, 1:-1]    # bottom
        - rgb[1:-1, :-2]   # left
        - rgb[1:-1, 2:]    # right
    )

    response = np.abs(compute_luma(laplacian.astype(np.float64), config.LUMA_WEIGHTS))
    normalized = float(response.mean()) / config.SCORE_NORMALIZATION

    return float(min(max(normalized, 0.0), config.SCORE_MAX))
