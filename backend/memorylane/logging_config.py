"""Logging setup for Memory Lane backend.

All loggers live under the ``memorylane`` namespace so a single handler on
the root package logger covers routes, the contract layer and media
resolution alike.
"""

import logging
import sys

ROOT_LOGGER = "memorylane"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the package logger (idempotent)."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())
    if not any(getattr(h, "_memorylane", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._memorylane = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger, namespaced under ``memorylane`` if it is not already."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


_write_logger = get_logger("memorylane.writes")


def log_memory_operation(
    caller: str | None,
    operation: str,
    table: str,
    record_id: str | None,
    success: bool,
    error: str | None = None,
) -> None:
    """Write one line per write operation against the record store."""
    status = "OK" if success else "FAIL"
    message = f"{operation.upper()} | {caller or '-'} | {table}/{record_id or '-'} | {status}"
    if error:
        message += f" | {error}"
    if success:
        _write_logger.info(message)
    else:
        _write_logger.warning(message)
