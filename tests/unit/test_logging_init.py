from __future__ import annotations

import logging

from contact_sheet.logging.init import (
    APP_LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    setup_logging,
)


def test_setup_logging_is_idempotent():
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert first.name == APP_LOGGER_NAME
    assert len(first.handlers) == 1
    assert first.propagate is False


def test_labels(capsys):
    logger = setup_logging(logging.DEBUG)
    logger.debug("d")
    logger.info("i")
    logger.warning("w")
    logger.error("e")
    log_summary("files=0/0")
    out = capsys.readouterr().out.splitlines()
    assert out == ["DEBUG d", "INFO i", "WARN w", "ERROR e", "SUMMARY files=0/0"]


def test_module_loggers_share_app_handler(capsys):
    setup_logging()
    logging.getLogger("contact_sheet.services.pipeline").info("from module")
    assert "INFO from module" in capsys.readouterr().out


def test_formatter_unknown_level_uses_level_name():
    record = logging.LogRecord("x", 15, __file__, 1, "msg", None, None)
    record.levelname = "VERBOSE"
    assert LabeledFormatter().format(record) == "VERBOSE msg"


def test_summary_level_between_info_and_warning():
    assert logging.INFO < SUMMARY_LEVEL < logging.WARNING


def test_get_logger_configures_on_first_use():
    reset_logging()
    assert get_logger().name == APP_LOGGER_NAME


def test_reset_logging_restores_propagation():
    setup_logging()
    reset_logging()
    logger = logging.getLogger(APP_LOGGER_NAME)
    assert logger.handlers == []
    assert logger.propagate is True
