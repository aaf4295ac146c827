"""Test logging helpers."""

import logging

from memorylane.logging_config import configure_logging, get_logger, log_memory_operation


def test_get_logger_namespaces():
    assert get_logger("memories").name == "memorylane.memories"
    assert get_logger("memorylane.auth").name == "memorylane.auth"
    assert get_logger("memorylane").name == "memorylane"


def test_configure_logging_is_idempotent():
    logger = configure_logging("debug")
    handlers = len(logger.handlers)
    configure_logging("info")
    assert len(logger.handlers) == handlers
    assert logger.level == logging.INFO


def test_log_memory_operation_levels(caplog):
    with caplog.at_level(logging.INFO, logger="memorylane"):
        log_memory_operation("usr_a", "create", "memories", "m1", True)
        log_memory_operation("usr_a", "update", "memories", "m1", False, "Memory not found or unauthorized")

    ok, failed = caplog.records[-2:]
    assert ok.levelno == logging.INFO
    assert ok.getMessage() == "CREATE | usr_a | memories/m1 | OK"
    assert failed.levelno == logging.WARNING
    assert failed.getMessage().endswith("FAIL | Memory not found or unauthorized")
