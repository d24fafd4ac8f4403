"""
Logging setup installs a single stdout handler no matter how often it runs.
"""
import logging

import pytest

from promise_ledger.core.logging import configure_logging


@pytest.fixture()
def root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


class TestConfigureLogging:
    def test_repeated_calls_keep_one_handler(self, root_logger):
        first = configure_logging("INFO")
        second = configure_logging("DEBUG")
        assert first is second
        assert root_logger.handlers.count(first) == 1
        assert root_logger.level == logging.DEBUG

    def test_handler_reinstalled_after_removal(self, root_logger):
        handler = configure_logging("INFO")
        root_logger.removeHandler(handler)
        assert configure_logging("WARNING") is handler
        assert handler in root_logger.handlers
        assert root_logger.level == logging.WARNING
