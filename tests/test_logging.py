import logging

import pytest
import structlog

from merchant_gateway.core.logging import configure_logging, get_logger


@pytest.fixture
def restore_logging():
    braintree_logger = logging.getLogger("braintree")
    level = braintree_logger.level
    yield
    braintree_logger.setLevel(level)
    structlog.reset_defaults()


def test_configure_logging_quiets_sdk(restore_logging):
    configure_logging()

    assert logging.getLogger("braintree").level == logging.ERROR


def test_configure_logging_console_renderer(restore_logging):
    configure_logging(level="debug", json_logs=False)

    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


def test_get_logger_binds_context():
    with structlog.testing.capture_logs() as captured:
        get_logger("merchant_gateway.test").bind(operation="capture").info("gateway.call")

    assert captured == [{"operation": "capture", "event": "gateway.call", "log_level": "info"}]
