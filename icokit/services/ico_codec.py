"""Чтение и запись контейнера ICO.

Запись идёт в два прохода: сначала заголовок и записи каталога с нулевыми
size/offset, затем данные изображений с подстановкой size/offset в уже
записанные записи. Потокам без позиционирования данные сначала
кодируются целиком, и файл пишется одним проходом вперёд.

Смещения считаются от позиции, с которой в потоке начинается иконка.
"""
from __future__ import annotations

from typing import BinaryIO, List, Optional, Sequence

from icokit.exceptions import IconFormatError
from icokit.logs import get_logger
from icokit.models.directory_entry import (
    ENTRY_SIZE,
    HEADER_SIZE,
    PATCH_OFFSET,
    DirectoryEntry,
    pack_header,
    pack_placement,
    unpack_header,
)
from icokit.models.icon_image import ImageVariant
from icokit.services.format_sniffer import sniff
from icokit.services.pixel_codec import PixelCodec

MAX_IMAGES = 0xFFFF

logger = get_logger(__name__)


def _is_seekable(stream: object) -> bool:
    seekable = getattr(stream, "seekable", None)
    if not callable(seekable):
        return False
    try:
        return bool(seekable())
    except ValueError:
        # closed file objects raise ValueError here
        return False


def directory_size(count: int) -> int:
    return HEADER_SIZE + ENTRY_SIZE * count


def write_icon(images: Sequence[ImageVariant], sink: BinaryIO) -> List[DirectoryEntry]:
    """Записывает иконку в поток и возвращает итоговые записи каталога.

    Raises:
        ValueError: поток не задан или изображений больше 65535.
    """
    if sink is None:
        raise ValueError("Поток для записи не задан")
    if len(images) > MAX_IMAGES:
        raise ValueError(f"ICO не может содержать больше {MAX_IMAGES} изображений")

    if _is_seekable(sink):
        return _write_patched(images, sink)
    return _write_buffered(images, sink)


def _write_patched(images: Sequence[ImageVariant], sink: BinaryIO) -> List[DirectoryEntry]:
    base = sink.tell()
    sink.write(pack_header(len(images)))

    # (position of the entry in the sink, placeholder entry)
    pending = []
    for image in images:
        entry = DirectoryEntry.for_variant(image)
        pending.append((sink.tell(), entry))
        sink.write(entry.pack())

    placed: List[DirectoryEntry] = []
    for (entry_position, entry), image in zip(pending, images):
        data = image.encode()
        position = sink.tell()
        offset = position - base

        sink.seek(entry_position + PATCH_OFFSET)
        sink.write(pack_placement(len(data), offset))
        sink.seek(position)
        sink.write(data)

        placed.append(entry.placed(len(data), offset))
        logger.debug("patched entry %d: size=%d offset=%d", len(placed) - 1, len(data), offset)
    return placed


def _write_buffered(images: Sequence[ImageVariant], sink: BinaryIO) -> List[DirectoryEntry]:
    payloads = [image.encode() for image in images]

    offset = directory_size(len(images))
    placed: List[DirectoryEntry] = []
    for image, data in zip(images, payloads):
        placed.append(DirectoryEntry.for_variant(image).placed(len(data), offset))
        offset += len(data)

    sink.write(pack_header(len(images)))
    sink.write(b"".join(entry.pack() for entry in placed))
    sink.write(b"".join(payloads))
    logger.debug("wrote %d entries in a single forward pass, %d bytes", len(placed), offset)
    return placed


def read_directory(source: BinaryIO) -> List[DirectoryEntry]:
    """Читает заголовок и каталог с текущей позиции потока."""
    if source is None:
        raise ValueError("Поток для чтения не задан")
    count = unpack_header(source.read(HEADER_SIZE))
    return [DirectoryEntry.unpack(source.read(ENTRY_SIZE)) for _ in range(count)]


def read_icon(source: BinaryIO, codec: Optional[PixelCodec] = None) -> List[ImageVariant]:
    """Читает иконку из потока с произвольным доступом.

    Поля ширины, высоты и глубины цвета из каталога не используются:
    геометрия берётся из декодированных данных.

    Raises:
        ValueError: поток не задан или не поддерживает позиционирование.
        IconFormatError: неверный заголовок, обрезанные данные, нераспознанное изображение.
    """
    if source is None:
        raise ValueError("Поток для чтения не задан")
    if not _is_seekable(source):
        raise ValueError("Поток должен поддерживать позиционирование")

    codec = codec or PixelCodec()
    base = source.tell()
    entries = read_directory(source)

    images: List[ImageVariant] = []
    for index, entry in enumerate(entries):
        current = source.tell()
        source.seek(base + entry.offset)
        data = source.read(entry.size)
        source.seek(current)

        if len(data) != entry.size:
            raise IconFormatError(
                f"Данные изображения {index} обрезаны: ожидалось {entry.size} байт, прочитано {len(data)}"
            )
        images.append(sniff(data, codec))
    return images


def validate_layout(entries: Sequence[DirectoryEntry], total_size: int) -> List[str]:
    """Проверяет размещение данных: после каталога, без пересечений и дыр.

    Returns:
        Список найденных проблем; пустой, если размещение корректно.
    """
    problems: List[str] = []
    start = directory_size(len(entries))

    for index, entry in enumerate(entries):
        if entry.offset < start:
            problems.append(f"запись {index}: смещение {entry.offset} внутри каталога")
        if entry.offset + entry.size > total_size:
            problems.append(f"запись {index}: данные выходят за конец файла")

    cursor = start
    for index, entry in sorted(enumerate(entries), key=lambda item: item[1].span):
        if entry.offset > cursor:
            problems.append(f"запись {index}: пропуск {entry.offset - cursor} байт перед данными")
        elif entry.offset < cursor and entry.offset >= start:
            problems.append(f"запись {index}: данные пересекаются с предыдущей записью")
        cursor = max(cursor, entry.offset + entry.size)

    if cursor < total_size:
        problems.append(f"после данных остаётся {total_size - cursor} лишних байт")
    return problems
