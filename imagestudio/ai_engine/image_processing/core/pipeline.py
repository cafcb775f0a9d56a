import numpy as np
import threading
import time
from typing import Dict, Optional, Any

from .sharpness import score
from .restoration import restore
from .super_resolution import upscale, clamp_upscale_factor
from .style_transfer import style_transfer, ToneStyle
from .colorization import colorize, ColorScheme
from ..utils.image_utils import (
    timing_decorator, calculate_image_metrics, clamp_parameter, parse_choice, logger,
    ImageProcessingError, InvalidArgumentError
)
from ..configs.processing_config import FilterConfig

PIPELINE_VERSION = '1.0.0'

SUPPORTED_OPERATIONS = (
    'restore',
    'super-resolution',
    'style-transfer',
    'colorization',
    'score',
)

class FilterPipeline:
    """Runs one raster filter over a decoded RGBA image and records statistics"""

    def __init__(self, config: Optional[FilterConfig] = None):
        self.config = config or FilterConfig()
        self._stats_lock = threading.Lock()
        self.stats = self._empty_stats()
        logger.info(f"FilterPipeline initialized with config: {self.config}")

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            'total_processed': 0,
            'successful_processed': 0,
            'average_processing_time': 0.0,
            'total_processing_time': 0.0,
            'error_count': 0,
            'last_error': None,
            'operations': {operation: 0 for operation in SUPPORTED_OPERATIONS},
        }

    @timing_decorator
    def run(self, image: np.ndarray, operation: str,
            options: Optional[Dict] = None) -> Dict[str, Any]:
        """
        Apply ``operation`` to a copy of ``image``

        Args:
            image: Decoded (H, W, 4) RGBA uint8 array; never modified
            operation: One of SUPPORTED_OPERATIONS
            options: Filter parameters (strength, upscale_factor, style,
                color_scheme, intensity, compute_attention_score)

        Returns:
            Result dictionary; failures are reported in it rather than raised
        """
        start_time = time.time()
        with self._stats_lock:
            self.stats['total_processed'] += 1
        opts = self._parse_processing_options(options)
        if self.config.LOG_PROCESSING_STEPS:
            logger.log_processing_start(operation, {k: v for k, v in opts.items() if k != "compute_attention_score"})

        try:
            if operation not in SUPPORTED_OPERATIONS:
                raise InvalidArgumentError(
                    f"Unknown operation {operation!r}, expected one of: {', '.join(SUPPORTED_OPERATIONS)}"
                )
            working = self._validate_input(image)

            height, width = working.shape[:2]
            result = self._initialize_result_structure(operation, width, height)

            processed = self._execute_filter(working, operation, opts, result)

            processing_time = time.time() - start_time
            self._finalize_results(result, processed, processing_time, opts)

            self._update_processing_stats(processing_time, success=True, operation=operation)

            logger.info(f"Successfully ran {operation} in {processing_time:.3f}s")
            return result

        except ImageProcessingError as e:
            processing_time = time.time() - start_time
            self._update_processing_stats(processing_time, success=False, error=str(e))
            return self._handle_processing_error(e, operation, processing_time)

    def _parse_processing_options(self, options: Optional[Dict]) -> Dict:
        """Merge caller options over the configured defaults"""
        default_options = {
            'strength': self.config.DEFAULT_STRENGTH,
            'upscale_factor': self.config.DEFAULT_UPSCALE_FACTOR,
            'style': ToneStyle.VIVID.value,
            'color_scheme': ColorScheme.NATURAL.value,
            'intensity': self.config.DEFAULT_INTENSITY,
            'compute_attention_score': True,
        }

        if options:
            default_options.update({k: v for k, v in options.items() if v is not None})

        return default_options

    def _validate_input(self, image: Any) -> np.ndarray:
        if image is None:
            raise InvalidArgumentError("Image is None")
        if not isinstance(image, np.ndarray):
            raise InvalidArgumentError(f"Image must be a numpy array, got {type(image).__name__}")
        if image.ndim != 3 or image.shape[2] != 4:
            raise InvalidArgumentError(f"Image must have shape (H, W, 4), got {image.shape}")
        if image.size == 0:
            raise InvalidArgumentError("Image is empty")
        if image.dtype != np.uint8:
            raise InvalidArgumentError(f"Image must be uint8, got {image.dtype}")
        return np.ascontiguousarray(image).copy()

    def _initialize_result_structure(self, operation: str, width: int, height: int) -> Dict:
        return {
            'operation': operation,
            'processed_image': None,
            'original_size': (width, height),
            'output_size': None,
            'attention_score': None,
            'parameters': {},
            'metrics': None,
            'processing_time': 0.0,
            'success': False,
            'error': None,
            'warnings': [],
            'pipeline_version': PIPELINE_VERSION,
        }

    def _execute_filter(self, image: np.ndarray, operation: str,
                        opts: Dict, result: Dict) -> np.ndarray:
        """Dispatch to the filter; in-place filters work on the private copy"""
        height, width = image.shape[:2]
        params = result['parameters']

        if operation == 'restore':
            params['strength'] = clamp_parameter(opts['strength'], self.config.STRENGTH_RANGE, 'strength')
            restore(image, width, height, params['strength'], config=self.config)

        elif operation == 'super-resolution':
            params['upscale_factor'] = clamp_upscale_factor(opts['upscale_factor'], self.config)
            flat, new_width, new_height = upscale(
                image, width, height, params['upscale_factor'], config=self.config
            )
            image = flat.reshape(new_height, new_width, 4)

        elif operation == 'style-transfer':
            params['style'] = parse_choice(ToneStyle, opts['style'], 'style').value
            params['intensity'] = clamp_parameter(opts['intensity'], self.config.INTENSITY_RANGE, 'intensity')
            style_transfer(image, width, height, params['style'], params['intensity'], config=self.config)

        elif operation == 'colorization':
            params['color_scheme'] = parse_choice(ColorScheme, opts['color_scheme'], 'color scheme').value
            params['intensity'] = clamp_parameter(opts['intensity'], self.config.INTENSITY_RANGE, 'intensity')
            colorize(image, width, height, params['color_scheme'], params['intensity'], config=self.config)

        # 'score' leaves the image as it is
        return image

    def _finalize_results(self, result: Dict, processed: np.ndarray,
                          processing_time: float, opts: Dict):
        height, width = processed.shape[:2]
        result['processed_image'] = processed
        result['output_size'] = (width, height)
        result['processing_time'] = processing_time
        result['success'] = True
        if opts['compute_attention_score'] or result['operation'] == 'score':
            result['attention_score'] = score(processed, width, height, config=self.config)
            logger.log_attention_score(result['operation'], result['attention_score'])

        result['metrics'] = calculate_image_metrics(processed)
        result['metrics']['attention_score'] = result['attention_score']

        for name, requested in (('strength', opts['strength']),
                                ('intensity', opts['intensity']),
                                ('upscale_factor', opts['upscale_factor'])):
            used = result['parameters'].get(name)
            if used is not None and float(used) != float(requested):
                result['warnings'].append(f"{name} {requested} clamped to {used}")

        if width < 3 or height < 3:
            result['warnings'].append("Image too small for a meaningful attention score")

        if self.config.LOG_PROCESSING_STEPS:
            logger.log_filter_result(result["operation"], result["original_size"], result["output_size"])

    def _handle_processing_error(self, error: Exception, operation: str,
                                 processing_time: float) -> Dict:
        error_msg = str(error)
        logger.error(f"{operation} failed: {error_msg}")

        return {
            'operation': operation,
            'processed_image': None,
            'original_size': None,
            'output_size': None,
            'attention_score': None,
            'parameters': {},
            'metrics': None,
            'processing_time': processing_time,
            'success': False,
            'error': error_msg,
            'error_class': type(error).__name__,
            'client_error': isinstance(error, InvalidArgumentError),
            'warnings': [],
            'pipeline_version': PIPELINE_VERSION,
        }

    def _update_processing_stats(self, processing_time: float, success: bool,
                                 operation: Optional[str] = None, error: Optional[str] = None):
        # Runs on executor worker threads
        with self._stats_lock:
            self.stats['total_processing_time'] += processing_time

            if self.stats['total_processed'] > 0:
                self.stats['average_processing_time'] = (
                    self.stats['total_processing_time'] / self.stats['total_processed']
                )

            if success:
                self.stats['successful_processed'] += 1
                self.stats['operations'][operation] += 1
            else:
                self.stats['error_count'] += 1
                self.stats['last_error'] = error

    def get_processing_statistics(self) -> Dict:
        """Totals, rates and per-operation counts"""
        with self._stats_lock:
            stats = self.stats.copy()
            stats['operations'] = dict(self.stats['operations'])

        if stats['total_processed'] > 0:
            stats['success_rate'] = stats['successful_processed'] / stats['total_processed']
            stats['error_rate'] = stats['error_count'] / stats['total_processed']
        else:
            stats['success_rate'] = 0.0
            stats['error_rate'] = 0.0

        return stats

    def reset_statistics(self):
        """Reset processing statistics"""
        with self._stats_lock:
            self.stats = self._empty_stats()
        logger.info("Processing statistics reset")
