from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pythonjsonlogger import jsonlogger

from .settings import settings

LOGGER_NAME = "route_engine"
LOG_FILE_NAME = "route_engine.jsonl"

# Record attributes emitted on every line, renamed to stable JSON keys.
_BASE_FIELDS = ("asctime", "levelname", "name", "message")
_RENAMED_FIELDS = {"asctime": "timestamp", "levelname": "level", "name": "logger"}


def _parse_level(name: str | int) -> int:
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def build_formatter() -> logging.Formatter:
    return jsonlogger.JsonFormatter(
        " ".join(f"%({field})s" for field in _BASE_FIELDS),
        rename_fields=_RENAMED_FIELDS,
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def _file_handler(out_dir: str) -> logging.Handler | None:
    log_dir = Path(out_dir) / "logs"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8")
    except OSError:
        return None


def configure_logging(*, level: str | int | None = None, to_file: bool | None = None) -> logging.Logger:
    """(Re)build the ``route_engine`` handlers from settings plus overrides.

    Safe to call repeatedly: existing handlers are closed and replaced, so a
    CLI can raise the level after the API module already configured logging.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(_parse_level(level if level is not None else settings.log_level))
    logger.propagate = False

    formatter = build_formatter()
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_to_file if to_file is None else to_file:
        fh = _file_handler(settings.out_dir)
        if fh is not None:
            handlers.append(fh)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger._configured = True  # type: ignore[attr-defined]
    return logger


def get_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if getattr(logger, "_configured", False):
        return logger
    return configure_logging()


def log_event(event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    get_logger().log(level, event, extra={"event": event, **fields})
