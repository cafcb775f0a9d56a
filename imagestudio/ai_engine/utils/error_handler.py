import logging
import threading
from typing import Dict, Any, List, Optional
from enum import Enum
import traceback
import time

logger = logging.getLogger(__name__)

class ErrorType(Enum):
    VALIDATION_ERROR = "validation_error"
    DECODE_ERROR = "decode_error"
    FILTER_ERROR = "filter_error"
    ENCODE_ERROR = "encode_error"
    GENERATION_ERROR = "generation_error"
    MEMORY_ERROR = "memory_error"

# Bad uploads are the caller's problem, not ours
CLIENT_ERROR_TYPES = (ErrorType.VALIDATION_ERROR, ErrorType.DECODE_ERROR)

class ErrorHandler:
    """Central error bookkeeping for the filter and generation services"""

    def __init__(self, max_history_size: int = 100):
        self.error_counts = {}
        self.error_history = []
        self.max_history_size = max_history_size
        # Filters report from executor threads
        self._lock = threading.Lock()

    def handle_error(self, error: Exception, error_type: ErrorType,
                    context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Log the error at a severity matching its type and return a structured report"""
        error_info = {
            "error_type": error_type.value,
            "error_message": str(error),
            "traceback": traceback.format_exc(),
            "context": context or {},
            "timestamp": time.time()
        }

        if error_type in CLIENT_ERROR_TYPES:
            logger.warning(f"{error_type.value}: {str(error)}")
        else:
            logger.error(f"{error_type.value}: {str(error)}")

        with self._lock:
            self.error_counts[error_type] = self.error_counts.get(error_type, 0) + 1
            self._add_to_history(error_info)

        return {
            "success": False,
            "error_info": error_info,
            "user_message": self._get_user_message(error_type),
            "client_error": error_type in CLIENT_ERROR_TYPES,
        }

    def _get_user_message(self, error_type: ErrorType) -> Dict[str, Any]:
        """User-facing explanation per error type"""
        messages = {
            ErrorType.VALIDATION_ERROR: {
                "message": "Invalid filter input",
                "suggested_action": "Check image dimensions and filter parameters",
            },
            ErrorType.DECODE_ERROR: {
                "message": "The uploaded file could not be decoded as an image",
                "suggested_action": "Upload a PNG, JPEG or WebP image",
            },
            ErrorType.FILTER_ERROR: {
                "message": "The filter failed to process the image",
                "suggested_action": "Retry with a smaller image",
            },
            ErrorType.ENCODE_ERROR: {
                "message": "The processed image could not be encoded",
                "suggested_action": "Choose a different output format",
            },
            ErrorType.GENERATION_ERROR: {
                "message": "Image generation failed",
                "suggested_action": "Retry with a different prompt",
            },
            ErrorType.MEMORY_ERROR: {
                "message": "Insufficient memory, reduce image size or upscale factor",
                "suggested_action": "Use a smaller image",
            },
        }

        return messages.get(error_type, {
            "message": "Unknown error occurred",
            "suggested_action": "Check system logs for details",
        })

    def _add_to_history(self, error_info: Dict[str, Any]):
        """Add error to history with size limit; caller holds the lock"""
        self.error_history.append(error_info)
        if len(self.error_history) > self.max_history_size:
            self.error_history = self.error_history[-self.max_history_size:]

    def get_error_statistics(self) -> Dict[str, Any]:
        """Error counts and a coarse health verdict"""
        with self._lock:
            error_counts = dict(self.error_counts)
            history = list(self.error_history)

        now = time.time()
        recent_errors = [
            e for e in history
            if now - e.get("timestamp", 0) < 3600  # Last hour
        ]

        return {
            "total_errors": sum(error_counts.values()),
            "error_counts_by_type": {k.value: v for k, v in error_counts.items()},
            "recent_errors_count": len(recent_errors),
            "most_common_error": max(error_counts.items(), key=lambda x: x[1])[0].value if error_counts else None,
            "system_health": self._calculate_system_health(history, now),
            "recommendations": self._get_health_recommendations(error_counts),
        }

    def _calculate_system_health(self, history: List[Dict[str, Any]], now: float) -> str:
        """Health verdict from the last 30 minutes of server-side errors"""
        client_types = [t.value for t in CLIENT_ERROR_TYPES]
        server_errors = [
            e for e in history
            if now - e.get("timestamp", 0) < 1800 and e.get("error_type") not in client_types
        ]

        if len(server_errors) > 20:
            return "degraded"
        elif len(server_errors) > 5:
            return "warning"
        return "healthy"

    def _get_health_recommendations(self, error_counts: Dict[ErrorType, int]) -> List[str]:
        recommendations = []

        if error_counts.get(ErrorType.MEMORY_ERROR, 0) > 0:
            recommendations.append("Lower MAX_UPSCALE_FACTOR or the maximum upload size")

        if error_counts.get(ErrorType.DECODE_ERROR, 0) > 10:
            recommendations.append("Many undecodable uploads - check client-side format filtering")

        if error_counts.get(ErrorType.GENERATION_ERROR, 0) > 0:
            recommendations.append("Check the generator settings and placeholder image list")

        if not recommendations:
            recommendations.append("System operating normally")

        return recommendations

    def clear_error_history(self):
        """Clear error history and reset counters"""
        with self._lock:
            self.error_history.clear()
            self.error_counts.clear()
        logger.info("Error history and counters cleared")

# Global error handler instance
error_handler = ErrorHandler()
