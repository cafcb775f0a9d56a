import inspect
import logging
import logging.handlers
import os
import sys
import time
from functools import wraps
from typing import Optional

def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    format_string: Optional[str] = None
):
    """
    Set up logging for the image studio

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional)
        max_file_size: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
        format_string: Custom format string for log messages
    """

    if format_string is None:
        format_string = (
            '%(asctime)s - %(name)s - %(levelname)s - '
            '[%(filename)s:%(lineno)d] - %(message)s'
        )

    formatter = logging.Formatter(
        format_string,
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear any existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_file_size,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            file_handler.setLevel(level)
            root_logger.addHandler(file_handler)

        except OSError as e:
            root_logger.warning(f"Failed to set up file logging: {e}")

    # Quieten chatty third-party loggers
    for noisy in ("uvicorn.access", "multipart", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    studio_loggers = [
        "imagestudio.ai_engine.image_processing",
        "imagestudio.core.services",
        "imagestudio.main",
    ]

    for logger_name in studio_loggers:
        logging.getLogger(logger_name).setLevel(level)

class EngineLogger:
    """Logger wrapper for image studio components"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.component_name = name

    def __getattr__(self, item):
        # Plain logging calls (info, debug, warning, ...) go to the wrapped logger
        if item == "logger":
            raise AttributeError(item)
        return getattr(self.logger, item)

    def log_processing_start(self, operation: str, details: Optional[dict] = None):
        """Log the start of a processing operation"""
        message = f"Starting {operation}"
        if details:
            detail_str = ", ".join([f"{k}={v}" for k, v in details.items()])
            message += f" - {detail_str}"
        self.logger.info(message)

    def log_processing_end(self, operation: str, success: bool,
                          duration: float, details: Optional[dict] = None):
        """Log the end of a processing operation"""
        status = "completed" if success else "failed"
        message = f"{operation} {status} in {duration:.2f}s"

        if details:
            detail_str = ", ".join([f"{k}={v}" for k, v in details.items()])
            message += f" - {detail_str}"

        if success:
            self.logger.info(message)
        else:
            self.logger.error(message)

    def log_performance_metric(self, metric_name: str, value: float, unit: str = ""):
        """Log performance metrics"""
        message = f"Performance metric: {metric_name} = {value:.2f}"
        if unit:
            message += f" {unit}"
        self.logger.info(message)

    def log_filter_result(self, filter_name: str, input_size: tuple, output_size: tuple):
        """Log the geometry of a filter run"""
        self.logger.info(
            f"Filter {filter_name}: {input_size[0]}x{input_size[1]} -> "
            f"{output_size[0]}x{output_size[1]}"
        )

    def log_attention_score(self, source: str, score: float):
        """Log an attention score"""
        self.logger.info(f"Attention score: {source} - {score:.2f}/10")

    def log_error_with_context(self, error: Exception, context: dict):
        """Log error with additional context"""
        context_str = ", ".join([f"{k}={v}" for k, v in context.items()])
        self.logger.error(f"Error in {self.component_name}: {str(error)} - Context: {context_str}")
        self.logger.debug("Full traceback:", exc_info=True)

def get_logger(name: str) -> EngineLogger:
    """Get an engine logger instance"""
    return EngineLogger(name)

def log_performance(logger: EngineLogger, operation_name: str):
    """Decorator to log performance of sync and async callables"""
    def decorator(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.time()

            try:
                logger.log_processing_start(operation_name, {"function": func.__name__})
                result = await func(*args, **kwargs)
                duration = time.time() - start_time
                logger.log_processing_end(operation_name, True, duration)
                return result
            except Exception as e:
                duration = time.time() - start_time
                logger.log_processing_end(operation_name, False, duration)
                logger.log_error_with_context(e, {"function": func.__name__})
                raise

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.time()

            try:
                logger.log_processing_start(operation_name, {"function": func.__name__})
                result = func(*args, **kwargs)
                duration = time.time() - start_time
                logger.log_processing_end(operation_name, True, duration)
                return result
            except Exception as e:
                duration = time.time() - start_time
                logger.log_processing_end(operation_name, False, duration)
                logger.log_error_with_context(e, {"function": func.__name__})
                raise

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
