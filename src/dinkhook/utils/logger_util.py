import logging
import os
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "dinkhook"

_FORMATTER = logging.Formatter(
    "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# set by configure_logging() once settings are loaded; env vars are the fallback
_overrides = {"level": None, "log_dir": None}


def _resolve_level(level) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _log_dir() -> Optional[Path]:
    raw = _overrides["log_dir"]
    if raw is None:
        raw = os.environ.get("DINKHOOK_LOG_DIR", "log")
    if not raw.strip():
        return None
    path = Path(raw)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        # unwritable directory: stream only
        return None
    return path


def _attach_file_handler(logger: logging.Logger, name: str) -> None:
    logs_dir = _log_dir()
    if logs_dir is None:
        return
    filehandler = logging.FileHandler(str(logs_dir / f"{name}.log"), encoding="utf-8")
    filehandler.setFormatter(_FORMATTER)
    logger.addHandler(filehandler)


def get_logger(name: str, level=None) -> logging.Logger:
    """Get a named logger with standard formatting.

    Example:
        logger = get_logger(__name__)
        logger.info("Received LOOT from %s", player)

    The level defaults to the configured one, then ``DINKHOOK_LOG_LEVEL``
    (INFO when unset). Records go to stderr and, unless the log directory is
    empty, to ``<dir>/<name>.log``.

    Returns:
        logging.Logger: Configured logger instance.
    """
    if level is None:
        level = _overrides["level"] or os.environ.get("DINKHOOK_LOG_LEVEL", "INFO")
    level = _resolve_level(level)
    logger = logging.getLogger(name)

    # avoid adding duplicate handlers if called repeatedly (common in tests)
    if logger.handlers:
        logger.setLevel(level)
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(_FORMATTER)
    logger.addHandler(handler)
    _attach_file_handler(logger, name)

    logger.setLevel(level)
    # stop passing records to the root logger (avoid duplicated messages)
    logger.propagate = False
    logger.debug("logger '%s' initialized with level %s", name, logging.getLevelName(level))
    return logger


def configure_logging(level, log_dir: Optional[str] = None) -> None:
    """Apply loaded settings to every package logger, including ones created at import time.

    ``log_dir`` None leaves file handlers as they are; "" removes them.
    """
    _overrides["level"] = level
    if log_dir is not None:
        _overrides["log_dir"] = log_dir
    resolved = _resolve_level(level)
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if not isinstance(logger, logging.Logger):
            continue
        if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
            continue
        if not logger.handlers:
            continue
        logger.setLevel(resolved)
        if log_dir is None:
            continue
        for h in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
            logger.removeHandler(h)
            h.close()
        _attach_file_handler(logger, name)
