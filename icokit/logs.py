"""Логирование пакета.

Библиотечные модули пишут в логгер `icokit` и его потомков. Файловый
обработчик с ротацией подключается только точками входа (`setup_logging`),
поэтому импорт библиотеки не трогает файловую систему.
"""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from icokit import config

LOGGER_NAME = "icokit"

_configured = False

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Возвращает логгер пакета или его дочерний логгер."""
    if name is None or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def setup_logging(level: Optional[str] = None, log_dir: Optional[Path] = None, console: bool = False) -> logging.Logger:
    """Подключает файловый обработчик (5MB, 3 резервные копии) и, при желании, вывод в консоль."""
    global _configured

    logger = get_logger()
    logger.setLevel(getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO))

    # Avoid duplicate handlers
    if _configured:
        return logger

    log_dir = log_dir or config.LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    # Format: timestamp [level] message
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(
        log_dir / config.LOG_FILE.name,
        maxBytes=config.LOG_MAX_BYTES,
        backupCount=config.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    _configured = True
    return logger


# Convenience functions
def log_info(msg: str) -> None:
    get_logger().info(msg)


def log_error(msg: str) -> None:
    get_logger().error(msg)


def log_warning(msg: str) -> None:
    get_logger().warning(msg)


def log_debug(msg: str) -> None:
    get_logger().debug(msg)
