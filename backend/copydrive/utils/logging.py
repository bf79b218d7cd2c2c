"""Logging for the CopyDrive backend.

All module loggers hang under the ``copydrive`` logger, which writes
formatted lines to the console and, outside tests, to a rotating file under
``settings.get_logs_root()``.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from copydrive.settings import settings

ROOT_LOGGER_NAME = "copydrive"

LOG_FORMAT = "[%(asctime)s.%(msecs)03d][%(levelname)s][%(filename)s:%(lineno)d]: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CONSOLE_HANDLER_NAME = "copydrive-console"


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def _configure_root() -> logging.Logger:
    """Attach the console handler to the ``copydrive`` logger once."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if any(h.get_name() == _CONSOLE_HANDLER_NAME for h in root.handlers):
        return root

    console = logging.StreamHandler()
    console.set_name(_CONSOLE_HANDLER_NAME)
    console.setFormatter(_formatter())
    root.addHandler(console)
    root.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    # caplog needs records to reach the root logger
    root.propagate = settings.environment == "test"
    return root


def _logs_dir() -> Path | None:
    """Writable logs directory, None in tests or when it cannot be created."""
    if settings.environment == "test":
        return None
    logs_root = settings.get_logs_root()
    try:
        logs_root.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return logs_root


def setup_logging(log_name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Enable file logging to ``{logs_root}/{log_name}.log``.

    Safe to call more than once; a file handler is added per distinct path.
    """
    root = _configure_root()
    logs_dir = _logs_dir()
    if logs_dir is not None:
        log_file = str(logs_dir / f"{log_name}.log")
        if not any(isinstance(h, RotatingFileHandler) and h.baseFilename == log_file for h in root.handlers):
            handler = RotatingFileHandler(
                log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
                encoding="utf-8",
            )
            handler.setFormatter(_formatter())
            root.addHandler(handler)
            root.info(f"File logging enabled: {log_file}")
    return get_logger(log_name)


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name`` inside the ``copydrive`` hierarchy."""
    _configure_root()
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


_configure_root()
