from .logging_config import setup_logging, get_logger, EngineLogger, log_performance
from .error_handler import ErrorType, ErrorHandler, error_handler

__all__ = [
    'setup_logging',
    'get_logger',
    'EngineLogger',
    'log_performance',
    'ErrorType',
    'ErrorHandler',
    'error_handler',
]
