"""Конфигурация приложения.

Управляет:
- путями к каталогу состояния и логам;
- уровнем логирования;
- сохранением состояния UI между запусками (settings.json).

Значения можно переопределить переменными окружения или файлом `.env`.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Tuple

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True))  # .env ищется вверх от текущего каталога

# =============================================================================
# PATHS
# =============================================================================

STATE_DIR: Path = Path(os.getenv("ICOKIT_HOME", str(Path.home() / ".icokit"))).expanduser()
SETTINGS_FILE: Path = STATE_DIR / "settings.json"
LOG_DIR: Path = Path(os.getenv("ICOKIT_LOG_DIR", str(STATE_DIR / "logs"))).expanduser()
LOG_FILE: Path = LOG_DIR / "icokit.log"

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL: str = os.getenv("ICOKIT_LOG_LEVEL", "INFO").upper()
LOG_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB
LOG_BACKUP_COUNT: int = 3

# =============================================================================
# ICON DEFAULTS
# =============================================================================

VARIANT_KINDS: Tuple[str, ...] = ("png", "bmp")


def parse_kinds(value: str) -> Tuple[str, ...]:
    """Разбирает список видов вариантов вида "png,bmp".

    Raises:
        ValueError: неизвестный вид или пустой список.
    """
    kinds = tuple(token.strip().lower() for token in value.split(",") if token.strip())
    if not kinds:
        raise ValueError("Не указан ни один формат изображения")
    unknown = [k for k in kinds if k not in VARIANT_KINDS]
    if unknown:
        raise ValueError(f"Неизвестный формат: {', '.join(unknown)}")
    return kinds


DEFAULT_FORMATS: Tuple[str, ...] = parse_kinds(os.getenv("ICOKIT_DEFAULT_FORMATS", "png,bmp"))

# =============================================================================
# UI STATE
# =============================================================================

DEFAULT_SETTINGS: Dict[str, Any] = {
    "last_directory": None,
    "appearance_mode": "system",
}


def load_settings(path: Path | None = None) -> Dict[str, Any]:
    """Читает сохранённое состояние UI; битый или отсутствующий файл даёт значения по умолчанию."""
    path = path or SETTINGS_FILE
    settings = dict(DEFAULT_SETTINGS)
    if not path.exists():
        return settings
    try:
        with open(path, encoding="utf-8") as f:
            stored = json.load(f)
    except (json.JSONDecodeError, OSError):
        # Invalid or unreadable state file - treat as no state
        return settings
    if isinstance(stored, dict):
        settings.update({k: v for k, v in stored.items() if k in DEFAULT_SETTINGS})
    return settings


def save_settings(settings: Dict[str, Any], path: Path | None = None) -> None:
    path = path or SETTINGS_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings, f, ensure_ascii=False, indent=2)
