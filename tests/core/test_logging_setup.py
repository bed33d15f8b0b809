"""
Tests for the logging module.

Tests verify:
- JSON output carries service metadata and ECS field names
- Events go to stderr, never stdout
- Bound context shows up in events and is removed afterwards
- DEBUG events are suppressed at INFO level
"""

import json

import pytest

from iam_app.core.logging import LogContext, clear_context, configure_logging, get_logger


@pytest.fixture(autouse=True)
def _clean_context():
    clear_context()
    yield
    clear_context()


def _events(err: str) -> list[dict]:
    return [json.loads(line) for line in err.splitlines() if line.startswith("{")]


class TestConfigureLogging:
    def test_json_to_stderr(self, capsys):
        configure_logging(level="INFO", json_format=True, service="iam-test")
        get_logger("tests").info("database_created", database="sample_app_db")

        captured = capsys.readouterr()
        assert captured.out == ""
        (event,) = _events(captured.err)
        assert event["event"] == "database_created"
        assert event["database"] == "sample_app_db"
        assert event["service.name"] == "iam-test"
        assert event["log.level"] == "info"
        assert "@timestamp" in event

    def test_level_filtering(self, capsys):
        configure_logging(level="INFO", json_format=True)
        logger = get_logger("tests")
        logger.debug("hidden")
        logger.warning("shown")
        names = [e["event"] for e in _events(capsys.readouterr().err)]
        assert names == ["shown"]


class TestLogContext:
    def test_scoped_binding(self, capsys):
        configure_logging(level="INFO", json_format=True)
        logger = get_logger("tests")
        with LogContext(database="sample_app_db", request_id="abc"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = _events(capsys.readouterr().err)
        assert inside["database"] == "sample_app_db"
        assert inside["request_id"] == "abc"
        assert "database" not in outside
