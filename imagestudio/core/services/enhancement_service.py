import asyncio
import functools
import time
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from imagestudio.core.config import Settings, get_settings
from imagestudio.ai_engine.image_processing.core.pipeline import FilterPipeline, PIPELINE_VERSION
from imagestudio.ai_engine.image_processing.configs.processing_config import FilterConfig
from imagestudio.ai_engine.image_processing.utils.image_utils import (
    decode_image, encode_image, CONTENT_TYPES, ImageProcessingError, ImageDecodeError, ImageEncodeError
)
from imagestudio.ai_engine.utils.error_handler import ErrorHandler, ErrorType, error_handler
from imagestudio.ai_engine.utils.logging_config import get_logger, log_performance

logger = get_logger(__name__)

@dataclass
class EnhancementResult:
    """Structured result of one filter request"""
    success: bool
    operation: str
    processing_time: float
    image_bytes: Optional[bytes] = None
    content_type: Optional[str] = None
    original_size: Optional[tuple] = None
    output_size: Optional[tuple] = None
    attention_score: Optional[float] = None
    metrics: Optional[Dict[str, Any]] = None
    parameters: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None
    client_error: bool = False
    error_report: Optional[Dict[str, Any]] = None

class EnhancementService:
    """Decode, filter and encode uploaded images off the event loop"""

    def __init__(self, settings: Optional[Settings] = None, config: Optional[FilterConfig] = None,
                 handler: Optional[ErrorHandler] = None):
        self.settings = settings or get_settings()
        self.pipeline = FilterPipeline(config)
        self.error_handler = handler or error_handler
        self.started_at = time.time()
        logger.info("EnhancementService initialized")

    @log_performance(logger, "image enhancement")
    async def process(self, image_data: bytes, operation: str,
                      options: Optional[Dict[str, Any]] = None,
                      output_format: Optional[str] = None) -> EnhancementResult:
        """Run ``operation`` on encoded ``image_data`` in the default executor"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            functools.partial(self.process_sync, image_data, operation, options, output_format)
        )

    async def score_image(self, image_data: bytes) -> EnhancementResult:
        return await self.process(image_data, 'score')

    def process_sync(self, image_data: bytes, operation: str,
                     options: Optional[Dict[str, Any]] = None,
                     output_format: Optional[str] = None) -> EnhancementResult:
        start_time = time.time()
        fmt = (output_format or self.settings.output_format).lower()
        if fmt == 'jpg':
            fmt = 'jpeg'

        try:
            image = decode_image(image_data)
        except ImageDecodeError as e:
            return self._failure(e, ErrorType.DECODE_ERROR, operation, start_time)

        try:
            result = self.pipeline.run(image, operation, options)
        except MemoryError as e:
            return self._failure(e, ErrorType.MEMORY_ERROR, operation, start_time)

        if not result['success']:
            error_type = ErrorType.VALIDATION_ERROR if result.get('client_error') else ErrorType.FILTER_ERROR
            return self._failure(ImageProcessingError(result['error']), error_type, operation, start_time)

        image_bytes = None
        content_type = None
        if operation != 'score':
            try:
                image_bytes = encode_image(result['processed_image'], fmt, self.settings.output_quality)
                content_type = CONTENT_TYPES[fmt]
            except ImageEncodeError as e:
                return self._failure(e, ErrorType.ENCODE_ERROR, operation, start_time)

        return EnhancementResult(
            success=True,
            operation=operation,
            processing_time=time.time() - start_time,
            image_bytes=image_bytes,
            content_type=content_type,
            original_size=result['original_size'],
            output_size=result['output_size'],
            attention_score=result['attention_score'],
            metrics=result['metrics'],
            parameters=result['parameters'],
            warnings=result['warnings'],
        )

    def _failure(self, error: BaseException, error_type: ErrorType, operation: str,
                 start_time: float) -> EnhancementResult:
        report = self.error_handler.handle_error(error, error_type, {"operation": operation})
        return EnhancementResult(
            success=False,
            operation=operation,
            processing_time=time.time() - start_time,
            error=str(error) or report["user_message"]["message"],
            client_error=report["client_error"],
            error_report=report["user_message"],
        )

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "pipeline": self.pipeline.get_processing_statistics(),
            "errors": self.error_handler.get_error_statistics(),
        }

    def check_health(self) -> Dict[str, Any]:
        errors = self.error_handler.get_error_statistics()
        return {
            "status": "healthy" if errors["system_health"] in ("healthy", "warning") else errors["system_health"],
            "pipeline_version": PIPELINE_VERSION,
            "uptime": time.time() - self.started_at,
            "processing_stats": self.pipeline.get_processing_statistics(),
        }
