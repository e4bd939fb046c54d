from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "zoo-console"
_initialized = False
_console: logging.Handler | None = None


def resolve_level(level: str | int | None, default: int = logging.INFO) -> int:
    """Level name ("debug", "WARNING") or number -> logging level.

    Unknown names fall back to `default`.
    """
    if isinstance(level, int):
        return level
    name = str(level or "").strip().upper()
    value = logging.getLevelName(name) if name else None
    return value if isinstance(value, int) else default


def init_logging(
    data_dir: str | Path,
    filename: str = "zoo_console.log",
    level: str | int = "INFO",
) -> logging.Logger:
    """Initialize file + console logging once per process.

    The file handler always records DEBUG; `level` applies to the console. A
    later call with a different level (e.g. after the Settings page saves)
    re-levels the console handler in place.
    """
    global _initialized, _console
    logger = logging.getLogger(_LOGGER_NAME)
    console_level = resolve_level(level)

    if _initialized:
        if _console is not None:
            _console.setLevel(console_level)
        return logger

    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers on Streamlit reruns
    if logger.handlers:
        _initialized = True
        return logger

    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    log_path = data_dir / filename

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)

    sh = logging.StreamHandler()
    sh.setLevel(console_level)
    sh.setFormatter(fmt)

    logger.addHandler(fh)
    logger.addHandler(sh)
    _console = sh

    logger.info("Logging initialized (file=%s, console=%s)", log_path, logging.getLevelName(console_level))
    _initialized = True
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Package logger, or a child of it when `name` is given."""
    if name:
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)
