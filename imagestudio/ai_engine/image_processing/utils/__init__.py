"""
Utility functions for image processing

Buffer validation, parameter clamping, codec glue and the exception hierarchy.
"""

from .image_utils import (
    timing_decorator,
    validate_dimensions,
    as_pixel_view,
    clamp_parameter,
    parse_choice,
    compute_luma,
    to_uint8,
    decode_image,
    encode_image,
    calculate_image_metrics,
    logger,
    CONTENT_TYPES,
    ImageProcessingError,
    InvalidArgumentError,
    ImageDecodeError,
    ImageEncodeError,
)

__all__ = [
    'timing_decorator',
    'validate_dimensions',
    'as_pixel_view',
    'clamp_parameter',
    'parse_choice',
    'compute_luma',
    'to_uint8',
    'decode_image',
    'encode_image',
    'calculate_image_metrics',
    'logger',
    'CONTENT_TYPES',
    'ImageProcessingError',
    'InvalidArgumentError',
    'ImageDecodeError',
    'ImageEncodeError',
]
