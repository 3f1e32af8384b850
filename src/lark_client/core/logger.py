"""Logging for the Lark client.

Every module logs through a child of the ``lark_client`` logger. Nothing is
printed until the application calls ``setup_logging``, which attaches a rich
console handler and, when ``LoggingConfig.log_file`` is set, a rotating file.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from .config import LoggingConfig

ROOT_LOGGER_NAME = "lark_client"

_registry: dict[str, logging.Logger] = {}
_level: int = logging.INFO
# Handlers attached by setup_logging; anything else on the root logger is left alone.
_installed: list[logging.Handler] = []

console = Console(stderr=True)


def get_logger(name: str) -> logging.Logger:
    """Return the ``lark_client.<name>`` logger, created at the active level."""
    logger = _registry.get(name)
    if logger is None:
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
        logger.setLevel(_level)
        _registry[name] = logger
    return logger


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Route client logs to the console and an optional rotating file.

    Calling it again replaces the handlers from the previous call and applies
    the new level to every logger handed out by ``get_logger``.
    """
    global _level

    config = config or LoggingConfig()
    level = getattr(logging, config.level)

    root = logging.getLogger()
    _detach_installed(root)

    handlers: list[logging.Handler] = [_console_handler()]
    if config.log_file:
        handlers.append(_file_handler(config))
    for handler in handlers:
        handler.setLevel(level)
        root.addHandler(handler)
        _installed.append(handler)

    root.setLevel(level)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
    _level = level
    for logger in _registry.values():
        logger.setLevel(level)

    get_logger("setup").info(
        "Logging at %s%s",
        config.level,
        f", file {config.log_file}" if config.log_file else "",
    )


def _detach_installed(root: logging.Logger) -> None:
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()


def _console_handler() -> RichHandler:
    return RichHandler(
        console=console,
        show_time=True,
        show_path=True,
        markup=False,
        rich_tracebacks=True,
    )


def _file_handler(config: LoggingConfig) -> RotatingFileHandler:
    """Rotating UTF-8 file; opened lazily on the first record."""
    path = Path(config.log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
        delay=True,
    )
    handler.setFormatter(logging.Formatter(config.format))
    return handler
