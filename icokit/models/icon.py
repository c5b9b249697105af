"""Модель иконки: упорядоченный список изображений и его (де)сериализация.

Принципы:
- Порядок списка совпадает с порядком записей в каталоге файла; повторы допустимы.
- Сохранение не изменяет иконку.
"""
from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional

from PIL import Image

from icokit.models.icon_image import ImageVariant
from icokit.services import ico_codec
from icokit.services.frame_import import import_frames


class Icon:
    """Иконка Windows (.ico), владеющая своими изображениями."""

    def __init__(self, images: Optional[Iterable[ImageVariant]] = None) -> None:
        self.images: List[ImageVariant] = list(images) if images is not None else []

    def __len__(self) -> int:
        return len(self.images)

    def __repr__(self) -> str:
        return f"Icon({self.images!r})"

    # ---- Saving ----
    def save(self, sink: BinaryIO) -> None:
        """Сохраняет иконку в поток.

        Потоки с позиционированием дописываются с подстановкой смещений,
        остальные получают файл одним проходом.

        Raises:
            ValueError: поток не задан или изображение не кодируется.
        """
        ico_codec.write_icon(self.images, sink)

    def save_file(self, file_path: str | Path) -> None:
        with open(file_path, "wb") as f:
            self.save(f)

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.save(buffer)
        return buffer.getvalue()

    # ---- Loading ----
    @classmethod
    def load(cls, source: BinaryIO) -> "Icon":
        """Загружает иконку из потока с произвольным доступом.

        Raises:
            ValueError: поток не задан или не поддерживает позиционирование.
            IconFormatError: файл повреждён или не является ICO.
        """
        return cls(ico_codec.read_icon(source))

    @classmethod
    def load_file(cls, file_path: str | Path) -> "Icon":
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")
        with open(path, "rb") as f:
            return cls.load(f)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Icon":
        return cls.load(io.BytesIO(data))

    @classmethod
    def from_frames(cls, image: Image.Image) -> "Icon":
        """Собирает иконку из кадров многокадрового изображения, пропуская повторы."""
        return cls(import_frames(image))
