import logging
import os
from typing import Optional


PACKAGE_LOGGER = "photo_shopping"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def _coerce_level(value: Optional[str]) -> int:
    if isinstance(value, str):
        return _LEVELS.get(value.upper().strip(), logging.INFO)
    if isinstance(value, int):
        return value
    return logging.INFO


def _configure_package_logger() -> logging.Logger:
    """Attach console (and optional LOG_FILE) handlers to the package logger once.

    - Honors LOG_LEVEL (default INFO) and LOG_FILE (optional path).
    - Does not propagate to the root logger, so host applications that
      configure logging themselves do not print every line twice.
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    if getattr(root, "_photo_shopping_configured", False):
        return root

    level = _coerce_level(os.environ.get("LOG_LEVEL", "INFO"))
    root.setLevel(level)

    fmt = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    root.addHandler(sh)

    log_file = os.environ.get("LOG_FILE")
    if log_file:
        try:
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(formatter)
            root.addHandler(fh)
        except OSError:
            root.warning("LOG_FILE could not be opened; continuing without file logging")

    root.propagate = False
    setattr(root, "_photo_shopping_configured", True)
    return root


def get_logger(name: str) -> logging.Logger:
    """Return the `photo_shopping.<name>` logger.

    Child loggers carry no handlers of their own; records propagate to the
    package logger, so one LOG_LEVEL drives the whole pipeline.
    """
    _configure_package_logger()
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
