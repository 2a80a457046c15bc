"""Tests for logging setup."""

import logging

import pytest

from fieldinject.logging_config import LOG_FORMAT, PACKAGE_LOGGER, setup_logging


@pytest.fixture(autouse=True)
def restore_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestSetupLogging:
    def test_default_level_is_warning(self) -> None:
        assert setup_logging().level == logging.WARNING

    def test_verbose_level_is_debug(self) -> None:
        assert setup_logging(verbose=True).level == logging.DEBUG

    def test_repeated_calls_keep_one_handler(self) -> None:
        logger = logging.getLogger(PACKAGE_LOGGER)
        before = len(logger.handlers)

        setup_logging()
        setup_logging(verbose=True)

        assert len(logger.handlers) == before + 1
        assert logger.handlers[-1].formatter._fmt == LOG_FORMAT

    def test_module_loggers_write_to_stderr(self, capsys: pytest.CaptureFixture) -> None:
        setup_logging(verbose=True)

        logging.getLogger("fieldinject.core.transform_driver").debug("hello %s", "there")

        err = capsys.readouterr().err
        assert "| DEBUG    | fieldinject.core.transform_driver | hello there" in err
