"""
Tests for structured logging configuration.
"""

import json
import logging

import pytest

from pareto.logging_config import (
    HumanFormatter,
    ParetoLogger,
    StructuredFormatter,
    configure_logging,
    get_logger,
)


@pytest.fixture
def restore_loggers():
    """Undo configure_logging after each test"""
    yield
    for name in ["pareto", "pareto_evolve"]:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)


def _record(msg="Added candidate", **extra):
    record = logging.LogRecord(
        name="pareto.frontier",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    """Test suite for log formatters"""

    def test_structured_formatter(self):
        output = StructuredFormatter().format(
            _record(candidate_id="abc", frontier_size=3, event_type="candidate_added")
        )
        data = json.loads(output)

        assert data["level"] == "INFO"
        assert data["logger"] == "pareto.frontier"
        assert data["message"] == "Added candidate"
        assert data["candidate_id"] == "abc"
        assert data["frontier_size"] == 3
        assert data["event_type"] == "candidate_added"
        assert "generation" not in data

    def test_human_formatter(self):
        output = HumanFormatter(use_colors=False).format(
            _record(candidate_id="candidate-12345", generation=2, hypervolume=0.75)
        )

        assert "INFO pareto.frontier: Added candidate" in output
        assert "candidate=candidat" in output
        assert "gen=2" in output
        assert "hv=0.750000" in output
        assert "\033[" not in output

    def test_human_formatter_colors(self):
        output = HumanFormatter(use_colors=True).format(_record())
        assert "\033[32m" in output


class TestParetoLogger:
    """Test suite for ParetoLogger"""

    def test_context_is_attached(self, caplog):
        logger = ParetoLogger("pareto.test")
        logger.set_context(generation=7)

        with caplog.at_level(logging.DEBUG, logger="pareto.test"):
            logger.candidate_added("abc", frontier_size=2, removed=1)

        record = caplog.records[-1]
        assert record.generation == 7
        assert record.candidate_id == "abc"
        assert record.removed == 1
        assert record.event_type == "candidate_added"

    def test_clear_context(self, caplog):
        logger = get_logger("pareto.test")
        logger.set_context(generation=7)
        logger.clear_context()

        with caplog.at_level(logging.INFO, logger="pareto.test"):
            logger.info("plain message")

        assert not hasattr(caplog.records[-1], "generation")

    def test_frontier_trimmed(self, caplog):
        logger = get_logger("pareto.test")
        with caplog.at_level(logging.DEBUG, logger="pareto.test"):
            logger.frontier_trimmed(12, 10)

        record = caplog.records[-1]
        assert record.frontier_size == 10
        assert record.removed == 2


class TestConfigureLogging:
    """Test suite for configure_logging"""

    def test_console_handlers(self, restore_loggers):
        configure_logging(level="debug", json_output=True)

        for name in ["pareto", "pareto_evolve"]:
            logger = logging.getLogger(name)
            assert logger.level == logging.DEBUG
            assert len(logger.handlers) == 1
            assert isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_file_output(self, restore_loggers, tmp_path):
        log_file = tmp_path / "logs" / "pareto.log"
        configure_logging(level="INFO", log_file=log_file, use_colors=False)

        get_logger("pareto.frontier").saturation_detected(5, 0.42)
        for handler in logging.getLogger("pareto").handlers:
            handler.flush()

        lines = log_file.read_text().strip().splitlines()
        data = json.loads(lines[-1])
        assert data["event_type"] == "saturation_detected"
        assert data["generation"] == 5
        assert data["hypervolume"] == 0.42
