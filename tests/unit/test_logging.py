"""
Unit tests for logging configuration
"""

import logging

import pytest
from imagestudio.ai_engine.utils.logging_config import (
    get_logger,
    EngineLogger,
    setup_logging,
    log_performance
)


class TestLoggingConfig:
    """Test logging configuration and functions"""

    def test_get_logger_returns_engine_logger(self):
        """Test that get_logger returns an EngineLogger instance"""
        logger = get_logger("test_module")
        assert isinstance(logger, EngineLogger)
        assert logger.component_name == "test_module"

    def test_plain_calls_are_delegated(self, caplog):
        logger = get_logger("test_module")

        with caplog.at_level(logging.INFO):
            logger.info("plain message %d", 7)

        assert "plain message 7" in caplog.text

    def test_setup_logging_creates_handlers(self, tmp_path):
        """Test that setup_logging creates appropriate handlers"""
        log_file = tmp_path / "logs" / "test.log"

        setup_logging(
            log_level="INFO",
            log_file=str(log_file),
            max_file_size=1024,
            backup_count=2
        )

        root_logger = logging.getLogger()

        assert len(root_logger.handlers) == 2
        assert root_logger.level == logging.INFO
        assert log_file.parent.exists()

        setup_logging(log_level="DEBUG")

    def test_logger_log_processing_start(self, caplog):
        """Test log_processing_start method"""
        logger = get_logger("test_module")

        with caplog.at_level(logging.INFO):
            logger.log_processing_start("restore", {"strength": 0.5, "width": 42})

        assert "Starting restore" in caplog.text
        assert "strength=0.5" in caplog.text
        assert "width=42" in caplog.text

    def test_logger_log_processing_end_success(self, caplog):
        """Test log_processing_end method for successful operations"""
        logger = get_logger("test_module")

        with caplog.at_level(logging.INFO):
            logger.log_processing_end("restore", success=True, duration=1.5, details={"result": "success"})

        assert "restore completed in 1.50s" in caplog.text
        assert "result=success" in caplog.text

    def test_logger_log_processing_end_failure(self, caplog):
        """Test log_processing_end method for failed operations"""
        logger = get_logger("test_module")

        with caplog.at_level(logging.ERROR):
            logger.log_processing_end("restore", success=False, duration=0.5, details={"error": "bad buffer"})

        assert "restore failed in 0.50s" in caplog.text
        assert "error=bad buffer" in caplog.text

    def test_logger_log_performance_metric(self, caplog):
        """Test log_performance_metric method"""
        logger = get_logger("test_module")

        with caplog.at_level(logging.INFO):
            logger.log_performance_metric("processing_time", 2.5, "seconds")

        assert "Performance metric: processing_time = 2.50 seconds" in caplog.text

    def test_logger_log_filter_result(self, caplog):
        logger = get_logger("test_module")

        with caplog.at_level(logging.INFO):
            logger.log_filter_result("super-resolution", (10, 8), (20, 16))

        assert "Filter super-resolution: 10x8 -> 20x16" in caplog.text

    def test_logger_log_attention_score(self, caplog):
        logger = get_logger("test_module")

        with caplog.at_level(logging.INFO):
            logger.log_attention_score("restore", 7.256)

        assert "Attention score: restore - 7.26/10" in caplog.text

    def test_logger_log_error_with_context(self, caplog):
        """Test log_error_with_context method"""
        logger = get_logger("test_module")

        with caplog.at_level(logging.ERROR):
            logger.log_error_with_context(ValueError("Test error message"), {"operation": "test", "width": 123})

        assert "Error in test_module" in caplog.text
        assert "Test error message" in caplog.text
        assert "operation=test" in caplog.text
        assert "width=123" in caplog.text


class TestLogPerformance:
    """log_performance decorator"""

    def test_sync_function(self, caplog):
        logger = get_logger("perf_test")

        @log_performance(logger, "doubling")
        def double(x):
            return x * 2

        with caplog.at_level(logging.INFO):
            assert double(4) == 8

        assert "Starting doubling" in caplog.text
        assert "doubling completed" in caplog.text
        assert double.__name__ == "double"

    @pytest.mark.asyncio
    async def test_async_function_reraises(self, caplog):
        logger = get_logger("perf_test")

        @log_performance(logger, "exploding")
        async def explode():
            raise RuntimeError("boom")

        with caplog.at_level(logging.INFO):
            with pytest.raises(RuntimeError):
                await explode()

        assert "exploding failed" in caplog.text
        assert "boom" in caplog.text


pytestmark = pytest.mark.unit
