"""Модель открытого файла иконки.

Принципы:
- SRP: только структура данных, без логики чтения.
- Неизменяемость (`frozen=True`); сама иконка внутри остаётся изменяемой.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from icokit.models.directory_entry import DirectoryEntry
from icokit.models.icon import Icon


@dataclass(frozen=True)
class IconFile:
    """Иконка вместе с метаданными файла.

    Fields:
        path: Путь к файлу.
        icon: Загруженная иконка.
        entries: Записи каталога в том виде, в каком они лежат в файле.
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    icon: Icon
    entries: Tuple[DirectoryEntry, ...]
    size_bytes: Optional[int]
