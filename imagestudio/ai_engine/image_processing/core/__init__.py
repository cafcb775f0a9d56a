"""
Core raster filters

This package contains the pixel-level filters and the pipeline that runs them:
- Sharpness / attention scoring
- Restoration (contrast stretch and flat denoise)
- Super-resolution (bilinear upscale and sharpening)
- Style transfer tone mapping
- Colorization tone mapping
"""

from .sharpness import score
from .restoration import restore
from .super_resolution import upscale, bilinear_resample, sharpen, clamp_upscale_factor
from .style_transfer import style_transfer, ToneStyle
from .colorization import colorize, ColorScheme
from .pipeline import FilterPipeline, SUPPORTED_OPERATIONS

__all__ = [
    'score',
    'restore',
    'upscale',
    'bilinear_resample',
    'sharpen',
    'clamp_upscale_factor',
    'style_transfer',
    'ToneStyle',
    'colorize',
    'ColorScheme',
    'FilterPipeline',
    'SUPPORTED_OPERATIONS',
]
