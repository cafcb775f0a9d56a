"""
Raster Filter Pipeline

Pure, deterministic transforms over RGBA pixel buffers: attention scoring,
restoration, super-resolution, style transfer and colorization.
"""

from .core import (
    score,
    restore,
    upscale,
    style_transfer,
    colorize,
    ToneStyle,
    ColorScheme,
    FilterPipeline,
)
from .configs.processing_config import FilterConfig
from .utils.image_utils import ImageProcessingError, InvalidArgumentError

__all__ = [
    'score',
    'restore',
    'upscale',
    'style_transfer',
    'colorize',
    'ToneStyle',
    'ColorScheme',
    'FilterPipeline',
    'FilterConfig',
    'ImageProcessingError',
    'InvalidArgumentError',
]

__version__ = '1.0.0'
