"""Загрузка и сохранение иконок, подготовка изображений для них.

Принципы:
- SRP: сервис отвечает за работу с файлами; формат ICO инкапсулирован в `ico_codec`.
- Возвращает `IconFile` с предсказуемыми полями.
"""
from __future__ import annotations

import io
from pathlib import Path
from typing import Iterable, List, Optional

from PIL import Image, UnidentifiedImageError

from icokit.exceptions import IconFormatError
from icokit.logs import get_logger
from icokit.models.icon import Icon
from icokit.models.icon_file import IconFile
from icokit.models.icon_image import BmpVariant, ImageVariant, PngVariant
from icokit.services import ico_codec

logger = get_logger(__name__)


def _require_file(file_path: str | Path) -> Path:
    path = Path(file_path)
    if not path.exists() or not path.is_file():
        raise FileNotFoundError(f"Файл не найден: {path}")
    return path


class IconService:
    def load_icon(self, file_path: str | Path) -> IconFile:
        """Загружает иконку с диска вместе с исходным каталогом.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            IconFormatError: если файл не является корректным ICO.
        """
        path = _require_file(file_path)
        data = path.read_bytes()

        entries = ico_codec.read_directory(io.BytesIO(data))
        icon = Icon.from_bytes(data)
        logger.info("loaded %s: %d images", path, len(icon))
        return IconFile(path=path, icon=icon, entries=tuple(entries), size_bytes=len(data))

    def save_icon(self, icon: Icon, file_path: str | Path) -> IconFile:
        """Сохраняет иконку и возвращает её описание с фактическим каталогом."""
        path = Path(file_path)
        buffer = io.BytesIO()
        entries = ico_codec.write_icon(icon.images, buffer)
        data = buffer.getvalue()
        path.write_bytes(data)
        logger.info("saved %s: %d images, %d bytes", path, len(icon), len(data))
        return IconFile(path=path, icon=icon, entries=tuple(entries), size_bytes=len(data))

    def import_image(self, file_path: str | Path) -> Image.Image:
        """Загружает изображение с диска в режиме RGBA.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не распознан как изображение.
        """
        path = _require_file(file_path)
        try:
            with Image.open(path) as opened:
                image = opened.convert("RGBA")
        except UnidentifiedImageError as exc:
            raise ValueError(f"Файл не является изображением: {path}") from exc
        return image

    def build_variants(self, image: Image.Image, kinds: Iterable[str]) -> List[ImageVariant]:
        """Создаёт варианты изображения в заданном порядке: "png" и/или "bmp"."""
        variants: List[ImageVariant] = []
        for kind in kinds:
            if kind == "png":
                variants.append(PngVariant(image))
            elif kind == "bmp":
                variants.append(BmpVariant(image))
            else:
                raise ValueError(f"Неизвестный формат: {kind}")
        return variants

    def preview(self, variant: ImageVariant) -> Image.Image:
        """Изображение для показа: у BMP со встроенной маской берётся только нижняя половина."""
        if isinstance(variant, BmpVariant) and variant.has_embedded_mask:
            image = variant.image
            return image.crop((0, image.height - variant.height, image.width, image.height))
        return variant.image

    def open_frames(self, file_path: str | Path) -> Icon:
        """Собирает иконку из кадров многокадрового файла (TIFF, GIF, ICO через Pillow)."""
        path = _require_file(file_path)
        try:
            with Image.open(path) as opened:
                return Icon.from_frames(opened)
        except UnidentifiedImageError as exc:
            raise IconFormatError(f"Файл не является изображением: {path}") from exc

    def describe(self, variant: ImageVariant, index: Optional[int] = None, detailed: bool = False) -> str:
        """Подпись записи для списка, например "0: PNG 16×16, 32 bpp"."""
        text = f"{variant.kind.upper()} {variant.width}×{variant.height}, {variant.bits_per_pixel} bpp"
        if index is not None:
            text = f"{index}: {text}"
        if detailed and isinstance(variant, BmpVariant):
            mask = "встроена" if variant.has_embedded_mask else "генерируется"
            text = f"{text}\nМаска: {mask}"
        return text
