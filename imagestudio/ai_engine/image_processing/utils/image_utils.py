import cv2
import numpy as np
import math
import numbers
import time
from enum import Enum
from typing import Tuple, Sequence, Any, Type, TypeVar
from functools import wraps

from ...utils.logging_config import get_logger

logger = get_logger(__name__)

E = TypeVar("E", bound=Enum)

class ImageProcessingError(Exception):
    """Base exception for image processing errors"""
    pass

class InvalidArgumentError(ImageProcessingError, ValueError):
    """Buffer, dimension or parameter precondition violated"""
    pass

class ImageDecodeError(ImageProcessingError):
    """Uploaded bytes could not be decoded into a raster"""
    pass

class ImageEncodeError(ImageProcessingError):
    """A raster could not be encoded into the requested format"""
    pass

CONTENT_TYPES = {
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'webp': 'image/webp',
}

def timing_decorator(func):
    """Decorator to measure and log processing time"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            result = func(*args, **kwargs)
            processing_time = time.time() - start_time
            logger.debug(f"{func.__name__} completed in {processing_time:.4f} seconds")
            return result
        except Exception as e:
            processing_time = time.time() - start_time
            logger.error(f"{func.__name__} failed after {processing_time:.4f} seconds: {str(e)}")
            raise
    return wrapper

def validate_dimensions(width: Any, height: Any) -> Tuple[int, int]:
    """Width and height must be positive integers"""
    for name, value in (('width', width), ('height', height)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidArgumentError(f"{name} must be an integer, got {type(value).__name__}")
        if value <= 0:
            raise InvalidArgumentError(f"{name} must be positive, got {value}")
    return int(width), int(height)

def as_pixel_view(buffer: Any, width: Any, height: Any, writable: bool = False) -> np.ndarray:
    """
    Return a (height, width, 4) uint8 view over an RGBA pixel buffer.

    The view shares memory with ``buffer`` so in-place filters write through to
    the caller. Accepts numpy arrays of any shape with the right size, and
    bytes-like objects.
    """
    width, height = validate_dimensions(width, height)

    if buffer is None:
        raise InvalidArgumentError("Pixel buffer is None")

    if isinstance(buffer, np.ndarray):
        array = buffer
        if array.dtype != np.uint8:
            raise InvalidArgumentError(f"Pixel buffer must be uint8, got {array.dtype}")
    else:
        try:
            array = np.frombuffer(buffer, dtype=np.uint8)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Unsupported pixel buffer type: {type(buffer).__name__}") from e

    if array.size == 0:
        raise InvalidArgumentError("Pixel buffer is empty")

    expected = width * height * 4
    if array.size != expected:
        raise InvalidArgumentError(
            f"Pixel buffer has {array.size} samples, expected {expected} for {width}x{height} RGBA"
        )

    if writable:
        if not array.flags.writeable:
            raise InvalidArgumentError("Pixel buffer is read-only")
        if not array.flags.c_contiguous:
            raise InvalidArgumentError("Pixel buffer must be C-contiguous to be modified in place")

    return array.reshape(height, width, 4)

def clamp_parameter(value: Any, value_range: Tuple[float, float], name: str) -> float:
    """Clamp a numeric filter parameter into its range; non-numbers are rejected"""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be a number, got bool")
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}") from e

    if not math.isfinite(value):
        raise InvalidArgumentError(f"{name} must be finite, got {value}")

    low, high = value_range
    return min(max(value, low), high)

def parse_choice(enum_cls: Type[E], value: Any, name: str) -> E:
    """Resolve a case-insensitive name into an enum member"""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass
    choices = ", ".join(member.value for member in enum_cls)
    raise InvalidArgumentError(f"Unknown {name} {value!r}, expected one of: {choices}")

def compute_luma(rgb: np.ndarray, weights: Sequence[float]) -> np.ndarray:
    """Perceptual brightness per pixel from an (..., 3) float array"""
    return rgb[..., 0] * weights[0] + rgb[..., 1] * weights[1] + rgb[..., 2] * weights[2]

def to_uint8(values: np.ndarray) -> np.ndarray:
    """Round half-to-even and saturate into [0, 255]"""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)

def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes into an (H, W, 4) RGBA uint8 array"""
    if not data:
        raise ImageDecodeError("Empty image data")

    nparr = np.frombuffer(data, np.uint8)
    image = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)

    if image is None:
        raise ImageDecodeError("Could not decode image data")

    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise ImageDecodeError(f"Unsupported sample type: {image.dtype}")

    if image.ndim == 2:
        rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    elif image.shape[2] == 3:
        rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    elif image.shape[2] == 4:
        rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    else:
        raise ImageDecodeError(f"Unsupported channel count: {image.shape[2]}")

    logger.debug(f"Decoded image {rgba.shape[1]}x{rgba.shape[0]} from {len(data)} bytes")
    return rgba

def encode_image(rgba: np.ndarray, fmt: str = 'jpeg', quality: int = 90) -> bytes:
    """Encode an (H, W, 4) RGBA array; JPEG drops alpha"""
    fmt = fmt.lower()
    if fmt == 'jpg':
        fmt = 'jpeg'

    if fmt == 'jpeg':
        image = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR)
        extension = '.jpg'
        params = [cv2.IMWRITE_JPEG_QUALITY, int(quality)]
    elif fmt == 'png':
        image = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
        extension = '.png'
        params = [cv2.IMWRITE_PNG_COMPRESSION, max(0, min(9, (100 - int(quality)) // 10))]
    elif fmt == 'webp':
        image = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
        extension = '.webp'
        params = [cv2.IMWRITE_WEBP_QUALITY, int(quality)]
    else:
        raise ImageEncodeError(f"Unsupported output format: {fmt}")

    success, buffer = cv2.imencode(extension, image, params)
    if not success:
        raise ImageEncodeError(f"Failed to encode image as {fmt}")

    return buffer.tobytes()

def calculate_image_metrics(rgba: np.ndarray) -> dict:
    """Brightness and contrast statistics of an RGBA image"""
    gray = cv2.cvtColor(rgba, cv2.COLOR_RGBA2GRAY)

    return {
        'mean_brightness': float(np.mean(gray)),
        'std_brightness': float(np.std(gray)),
        'contrast': float(int(gray.max()) - int(gray.min())),
        'image_size': (int(rgba.shape[1]), int(rgba.shape[0])),
    }
