"""
Test structured logging helpers
"""
import json
import logging

from core.logging import ContextLogger, ReadinessJsonFormatter, get_logger


class TestContextLogger:
    def test_context_attached_to_records(self, caplog):
        logger = get_logger("test.context", domain="d2_scoring")

        with caplog.at_level(logging.INFO, logger="test.context"):
            logger.info("Scored answers", extra={"total_score": 844})

        record = caplog.records[-1]
        assert record.domain == "d2_scoring"
        assert record.total_score == 844

    def test_bind_layers_context(self, caplog):
        logger = get_logger("test.bind", domain="batch_runner").bind(assessment_id="a-1")

        with caplog.at_level(logging.INFO, logger="test.bind"):
            logger.info("Rescored")

        assert isinstance(logger, ContextLogger)
        assert caplog.records[-1].domain == "batch_runner"
        assert caplog.records[-1].assessment_id == "a-1"


class TestJsonFormatter:
    def test_json_output_fields(self):
        formatter = ReadinessJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", timestamp=True)
        record = logging.LogRecord("readiness", logging.WARNING, __file__, 1, "Weights drift", None, None)
        record.domain = "d3_versioning"

        data = json.loads(formatter.format(record))

        assert data["message"] == "Weights drift"
        assert data["level"] == "WARNING"
        assert data["logger"] == "readiness"
        assert data["domain"] == "d3_versioning"
        assert data["environment"] == "test"
        assert "timestamp" in data
