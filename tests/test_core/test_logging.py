"""
Tests for corrga logging system.
"""

import pytest
import logging
import logging.handlers
import json
from corrga.core.logging import (
    setup_logging, get_logger, set_correlation_id,
    generate_correlation_id, log_with_correlation,
    CorrelationFilter, StructuredFormatter
)

pytestmark = [
    pytest.mark.core,
    pytest.mark.logging
]


def _record(msg="Test message", level=logging.INFO, exc_info=None):
    record = logging.LogRecord(
        name="test_module",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info
    )
    record.funcName = "some_function"
    return record


class TestLoggingSetup:
    """Test logging setup and configuration."""
    
    @pytest.mark.unit
    def test_setup_logging_console_only(self, temp_dir):
        log_file = temp_dir / "unused" / "corrga.log"
        logger = setup_logging(level="DEBUG", log_file=log_file, enable_file=False, enable_console=True)
        
        assert logger.level == logging.DEBUG
        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
        assert not any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)
        assert not log_file.parent.exists()
    
    @pytest.mark.unit
    def test_setup_logging_file_only(self, temp_dir):
        log_file = temp_dir / "logs" / "test.log"
        logger = setup_logging(level="INFO", log_file=log_file, enable_file=True, enable_console=False)
        
        assert logger.level == logging.INFO
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert log_file.exists()
    
    @pytest.mark.unit
    def test_repeated_setup_keeps_one_correlation_filter(self):
        setup_logging(level="INFO", enable_file=False, enable_console=False)
        setup_logging(level="INFO", enable_file=False, enable_console=False)
        
        filters = [f for f in logging.getLogger().filters if isinstance(f, CorrelationFilter)]
        assert len(filters) == 1
    
    @pytest.mark.unit
    def test_get_logger(self):
        logger = get_logger("test_module")
        assert logger.name == "test_module"
        assert isinstance(logger, logging.Logger)


class TestCorrelationFilter:
    """Test correlation ID filtering."""
    
    @pytest.mark.unit
    def test_correlation_filter_adds_id(self):
        filter_obj = CorrelationFilter()
        filter_obj.set_correlation_id("run-456")
        record = _record()
        
        assert filter_obj.filter(record) is True
        assert record.correlation_id == "run-456"
    
    @pytest.mark.unit
    def test_correlation_filter_no_id(self):
        filter_obj = CorrelationFilter()
        record = _record()
        
        assert filter_obj.filter(record) is True
        assert not hasattr(record, 'correlation_id')


class TestStructuredFormatter:
    """Test structured JSON formatter."""
    
    @pytest.mark.unit
    def test_structured_formatter_basic(self):
        log_entry = json.loads(StructuredFormatter().format(_record()))
        
        assert log_entry["level"] == "INFO"
        assert log_entry["logger"] == "test_module"
        assert log_entry["message"] == "Test message"
        assert log_entry["function"] == "some_function"
        assert log_entry["line"] == 42
        assert "timestamp" in log_entry
    
    @pytest.mark.unit
    def test_structured_formatter_extra_and_correlation(self):
        record = _record()
        record.correlation_id = "run-789"
        record.extra_fields = {"generation": 3, "best": (4, 5)}
        
        log_entry = json.loads(StructuredFormatter().format(record))
        
        assert log_entry["correlation_id"] == "run-789"
        assert log_entry["generation"] == 3
        assert log_entry["best"] == [4, 5]
    
    @pytest.mark.unit
    def test_structured_formatter_with_exception(self):
        record = _record("Test error", logging.ERROR, (ValueError, ValueError("Test error"), None))
        log_entry = json.loads(StructuredFormatter().format(record))
        
        assert "ValueError" in log_entry["exception"]


class TestCorrelationIDFunctions:
    """Test correlation ID utility functions."""
    
    @pytest.mark.unit
    def test_generate_correlation_id(self):
        id1 = generate_correlation_id()
        id2 = generate_correlation_id()
        
        assert id1 != id2
        assert len(id1) == 36
    
    @pytest.mark.unit
    def test_set_correlation_id(self):
        setup_logging(level="DEBUG", enable_file=False, enable_console=False)
        set_correlation_id("run-123")
        
        filters = [f for f in logging.getLogger().filters if isinstance(f, CorrelationFilter)]
        assert filters[0].correlation_id == "run-123"


class TestLoggingDecorator:
    """Test the log_with_correlation decorator."""
    
    @pytest.mark.unit
    def test_log_with_correlation_success(self, caplog):
        caplog.set_level("DEBUG")
        
        @log_with_correlation
        def search_once():
            return "success"
        
        assert search_once() == "success"
        assert search_once.__name__ == "search_once"
        assert "Starting search_once" in caplog.text
        assert "Completed search_once" in caplog.text
    
    @pytest.mark.unit
    def test_log_with_correlation_failure(self, caplog):
        caplog.set_level("DEBUG")
        
        @log_with_correlation
        def search_once():
            raise ValueError("Test error")
        
        with pytest.raises(ValueError):
            search_once()
        
        assert "Error in search_once" in caplog.text
        assert "Test error" in caplog.text


class TestLoggingIntegration:
    """Integration tests for logging system."""
    
    @pytest.mark.integration
    def test_file_records_carry_correlation_id(self, temp_dir):
        log_file = temp_dir / "integration.log"
        setup_logging(level="DEBUG", log_file=log_file, enable_file=True, enable_console=False)
        set_correlation_id("integration-123")
        
        get_logger("integration_test").info("Generation finished")
        for handler in logging.getLogger().handlers:
            handler.flush()
        
        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        finished = [e for e in entries if e["message"] == "Generation finished"]
        assert finished
        assert finished[0]["correlation_id"] == "integration-123"
    
    @pytest.mark.integration
    def test_log_rotation(self, temp_dir):
        log_file = temp_dir / "rotation.log"
        setup_logging(
            level="DEBUG",
            log_file=log_file,
            enable_file=True,
            enable_console=False,
            max_file_size=100,
            backup_count=2
        )
        
        logger = get_logger("rotation_test")
        for i in range(50):
            logger.info(f"Log message {i} with some additional content to make it longer")
        
        assert log_file.exists()
        assert len(list(temp_dir.glob("rotation.log.*"))) > 0
