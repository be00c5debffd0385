"""Loguru setup and stdlib logging bridge"""

import logging
import sys

from loguru import logger

from .config import normalize_log_level

_sink_id: int | None = None
_bridge_installed = False
_BRIDGED_LOGGERS = ("ibcp", "httpx")


class _LoguruHandler(logging.Handler):
    """Bridge stdlib logging into loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(stdlib_logger=record.name).opt(
            depth=6, exception=record.exc_info
        ).log(level, record.getMessage())


def _is_library_record(record: dict) -> bool:
    """Only ibcp (and bridged httpx) records reach the ibcp sink"""
    name = record["extra"].get("stdlib_logger") or record["name"] or ""
    return name.split(".")[0] in _BRIDGED_LOGGERS


def install_logging_bridge() -> None:
    """Bridge stdlib logging used by httpx/ibcp modules into loguru once."""
    global _bridge_installed
    if _bridge_installed:
        return

    handler = _LoguruHandler()
    for name in _BRIDGED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.setLevel(logging.DEBUG)
        std_logger.addHandler(handler)
        std_logger.propagate = False

    _bridge_installed = True


def setup_logging(level: str | int = "INFO") -> int:
    """Route ibcp log output to stderr at the given verbosity

    Replaces the sink installed by a previous call so repeated clients do not
    duplicate output. Messages more verbose than ``level`` are dropped. The
    sink only carries ibcp and httpx records; host application messages are
    left to the host's own sinks.

    Args:
        level: ERROR, WARNING, INFO, DEBUG or the numeric 0-3 equivalent

    Returns:
        Loguru sink id
    """
    global _sink_id
    install_logging_bridge()

    # loguru's default sink (id 0) logs everything at DEBUG
    for sink_id in (0, _sink_id):
        if sink_id is None:
            continue
        try:
            logger.remove(sink_id)
        except ValueError:
            pass

    _sink_id = logger.add(
        sys.stderr,
        level=normalize_log_level(level),
        filter=_is_library_record,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | IBCP {message}",
    )
    return _sink_id
