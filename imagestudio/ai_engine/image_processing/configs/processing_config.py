from dataclasses import dataclass
from typing import Tuple
import os

@dataclass
class FilterConfig:
    """Constants and parameter ranges for the raster filter pipeline"""

    # Luma weights (approximate sRGB, no linearisation)
    LUMA_WEIGHTS: Tuple[float, float, float] = (0.299, 0.587, 0.114)

    # Sharpness / attention scoring
    SCORE_NORMALIZATION: float = 50.0
    SCORE_MAX: float = 10.0

    # Restoration
    RESTORE_CONTRAST_GAIN: float = 0.5
    RESTORE_DENOISE_THRESHOLD: float = 0.3
    RESTORE_DENOISE_GAIN: float = 0.2
    NEUTRAL_VALUE: float = 128.0

    # Super-resolution
    SHARPEN_KERNEL: Tuple[Tuple[int, int, int], ...] = (
        (0, -1, 0),
        (-1, 5, -1),
        (0, -1, 0),
    )
    # "skip" leaves the outer ring as resampled, "replicate" sharpens it with edge replication
    SHARPEN_BORDER_MODE: str = os.getenv('SHARPEN_BORDER_MODE', 'skip')
    MAX_UPSCALE_FACTOR: int = int(os.getenv('MAX_UPSCALE_FACTOR', 8))

    # Parameter ranges (values outside are clamped)
    STRENGTH_RANGE: Tuple[float, float] = (0.0, 1.0)
    INTENSITY_RANGE: Tuple[float, float] = (0.0, 1.0)

    # Defaults used when a caller does not supply a parameter
    DEFAULT_STRENGTH: float = 0.5
    DEFAULT_INTENSITY: float = 0.5
    DEFAULT_UPSCALE_FACTOR: int = 2

    LOG_PROCESSING_STEPS: bool = True

    def __post_init__(self):
        """Validate settings that cannot be clamped"""
        if self.SHARPEN_BORDER_MODE not in ('skip', 'replicate'):
            raise ValueError(
                f"SHARPEN_BORDER_MODE must be 'skip' or 'replicate', got {self.SHARPEN_BORDER_MODE!r}"
            )
        if self.MAX_UPSCALE_FACTOR < 1:
            raise ValueError("MAX_UPSCALE_FACTOR must be at least 1")


DEFAULT_FILTER_CONFIG = FilterConfig()
