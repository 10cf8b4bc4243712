import logging
import re
import time
from unittest.mock import Mock

import pytest
from pytest import LogCaptureFixture

from palace.converter.util.log import (
    LoggerMixin,
    LogLevel,
    elapsed_time_logging,
    pluralize,
)


class MockClass(LoggerMixin):
    def do_something(self) -> None:
        self.log.info("Doing something")


def test_logger_mixin(caplog: LogCaptureFixture):
    caplog.set_level(LogLevel.info)

    MockClass().do_something()
    assert len(caplog.records) == 1
    [record] = caplog.records
    assert record.name == f"{MockClass.__module__}.MockClass"
    assert record.message == "Doing something"
    assert record.levelname == LogLevel.info

    # The logger is cached on the class.
    assert MockClass.logger() is MockClass.logger()
    assert MockClass().log is MockClass.logger()


class TestLogLevel:
    @pytest.mark.parametrize(
        "level, expected",
        [
            pytest.param(LogLevel.debug, logging.DEBUG, id="debug"),
            pytest.param(LogLevel.info, logging.INFO, id="info"),
            pytest.param(LogLevel.warning, logging.WARNING, id="warning"),
            pytest.param(LogLevel.error, logging.ERROR, id="error"),
        ],
    )
    def test_levelno(self, level: LogLevel, expected: int):
        assert level.levelno == expected

    def test_values_match_logging_names(self):
        assert LogLevel.debug == "DEBUG"
        assert LogLevel.warning == "WARNING"

    def test_from_level(self):
        assert LogLevel.from_level(logging.INFO) == LogLevel.info
        assert LogLevel.from_level("warning") == LogLevel.warning
        assert LogLevel.from_level("ERROR") == LogLevel.error

        with pytest.raises(ValueError, match="'loud' is not a valid LogLevel"):
            LogLevel.from_level("loud")


def test_pluralize():
    assert pluralize(1, "dingo") == "1 dingo"
    assert pluralize(2, "dingo") == "2 dingos"
    assert pluralize(0, "dingo") == "0 dingos"

    assert pluralize(1, "foo", "bar") == "1 foo"
    assert pluralize(2, "foo", "bar") == "2 bar"


class TestElapsedTimeLogging:
    class MockLogger:
        def __init__(self):
            self.messages: list[str] = []
            self.log_method = Mock(side_effect=lambda msg: self.messages.append(msg))

    @pytest.fixture
    def mock_logger(self) -> MockLogger:
        """Fixture that provides a mock log method with message collection."""
        return TestElapsedTimeLogging.MockLogger()

    def test_basic_usage(self, mock_logger: MockLogger):
        with elapsed_time_logging(log_method=mock_logger.log_method):
            pass

        assert len(mock_logger.messages) == 2
        assert mock_logger.messages[0] == "Starting..."
        assert "Completed. (elapsed time:" in mock_logger.messages[1]
        assert "seconds)" in mock_logger.messages[1]

    def test_with_prefix_and_skip_start(self, mock_logger: MockLogger):
        with elapsed_time_logging(
            log_method=mock_logger.log_method,
            message_prefix="GET http://example.org",
            skip_start=True,
        ):
            pass

        assert len(mock_logger.messages) == 1
        assert (
            "GET http://example.org: Completed. (elapsed time:"
            in mock_logger.messages[0]
        )

    def test_exception_raised(self, mock_logger: MockLogger):
        with pytest.raises(ValueError):
            with elapsed_time_logging(
                log_method=mock_logger.log_method, message_prefix="Converting"
            ):
                raise ValueError("Test exception")

        assert len(mock_logger.messages) == 2
        assert mock_logger.messages[0] == "Converting: Starting..."
        assert (
            "Converting: Failed (raised ValueError). (elapsed time:"
            in mock_logger.messages[1]
        )

    def test_elapsed_time_format(self, mock_logger: MockLogger):
        with elapsed_time_logging(log_method=mock_logger.log_method):
            time.sleep(0.01)

        match = re.search(
            r"elapsed time: (\d+\.\d{4}) seconds", mock_logger.messages[1]
        )
        assert match is not None
        assert float(match.group(1)) >= 0.01
