"""
Logging configuration for Bornfidis Provisions.

``setup_logging`` is called once when the server module is imported. It
installs a console handler (and optionally a file handler) on the root
logger and pins per-package levels so the payout and client modules stay
verbose while SQLAlchemy and HTTPX stay quiet.

Defaults come from the application settings (``BORNFIDIS_LOG_LEVEL``,
``LOG_FORMAT``, ``LOG_FILE_DIR``, ``ENABLE_FILE_LOGGING``).
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from bornfidis_provisions.server.core.config import settings

LOG_LEVEL = settings.log_level.upper()
LOG_FORMAT = settings.log_format
LOG_FILE_DIR = settings.log_file_dir
ENABLE_FILE_LOGGING = settings.enable_file_logging

LOG_FILE_NAME = "bornfidis_provisions.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

_FORMATS: Dict[str, str] = {
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
    "json": JSON_FORMAT,
}

MODULE_LOG_LEVELS = {
    "bornfidis_provisions.core": "INFO",
    "bornfidis_provisions.core.database": "INFO",
    # Outbound payments and messaging calls
    "bornfidis_provisions.core.clients": "DEBUG",
    "bornfidis_provisions.server": "INFO",
    "bornfidis_provisions.server.api": "DEBUG",
    # Payout, webhook and notification decisions
    "bornfidis_provisions.server.services": "DEBUG",
    "bornfidis_provisions.server.core": "INFO",
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "httpx": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def _file_handler(formatter: logging.Formatter) -> logging.Handler:
    log_dir = Path(LOG_FILE_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure the root logger.

    Safe to call repeatedly: existing root handlers are replaced, not stacked.

    Args:
        log_level: Console level; defaults to ``BORNFIDIS_LOG_LEVEL``
        log_format: ``simple``, ``detailed`` or ``json``; unknown values fall back to ``detailed``
        enable_file: Allow the file handler; it is only added when ``ENABLE_FILE_LOGGING`` is also on
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    formatter = logging.Formatter(_FORMATS.get(fmt, DETAILED_FORMAT), datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    # Handlers do the filtering; the root passes everything through.
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    write_file = enable_file and ENABLE_FILE_LOGGING
    if write_file:
        root_logger.addHandler(_file_handler(formatter))

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={write_file}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
