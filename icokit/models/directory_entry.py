"""Заголовок ICO и записи каталога изображений.

Формат (little-endian):
- заголовок, 6 байт: reserved:u16=0, type:u16=1, count:u16;
- запись, 16 байт: width:u8, height:u8, colors:u8=0, reserved:u8=0,
  planes:u16=1, bpp:u16, size:u32, offset:u32.

Однобайтовые ширина и высота хранят 256 как 0.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Tuple

from icokit.exceptions import IconFormatError

if TYPE_CHECKING:
    from icokit.models.icon_image import ImageVariant

HEADER_FORMAT = "<HHH"
ENTRY_FORMAT = "<BBBBHHII"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 6
ENTRY_SIZE = struct.calcsize(ENTRY_FORMAT)  # 16

ICON_TYPE = 1
# byte offset of (size, offset) inside an entry
PATCH_OFFSET = 8


def pack_header(count: int) -> bytes:
    return struct.pack(HEADER_FORMAT, 0, ICON_TYPE, count)


def unpack_header(data: bytes) -> int:
    """Проверяет заголовок и возвращает число изображений.

    Raises:
        IconFormatError: заголовок короче 6 байт или reserved/type неверны.
    """
    if len(data) < HEADER_SIZE:
        raise IconFormatError("Invalid file header.")
    reserved, icon_type, count = struct.unpack(HEADER_FORMAT, data[:HEADER_SIZE])
    if reserved != 0 or icon_type != ICON_TYPE:
        raise IconFormatError("Invalid file header.")
    return count


def size_to_byte(value: int) -> int:
    # 256 does not fit into u8 and is stored as 0
    return value & 0xFF


def byte_to_size(value: int) -> int:
    return value if value != 0 else 256


@dataclass(frozen=True)
class DirectoryEntry:
    """Запись каталога; существует только на время сохранения или загрузки."""
    width: int
    height: int
    color_count: int = 0
    reserved: int = 0
    planes: int = 1
    bits_per_pixel: int = 32
    size: int = 0
    offset: int = 0

    @classmethod
    def for_variant(cls, variant: "ImageVariant") -> "DirectoryEntry":
        """Запись-заготовка с нулевыми size/offset для последующей подстановки."""
        return cls(
            width=size_to_byte(variant.width),
            height=size_to_byte(variant.height),
            bits_per_pixel=variant.bits_per_pixel,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "DirectoryEntry":
        if len(data) < ENTRY_SIZE:
            raise IconFormatError("Каталог изображений обрезан")
        return cls(*struct.unpack(ENTRY_FORMAT, data[:ENTRY_SIZE]))

    def pack(self) -> bytes:
        return struct.pack(
            ENTRY_FORMAT,
            self.width,
            self.height,
            self.color_count,
            self.reserved,
            self.planes,
            self.bits_per_pixel,
            self.size,
            self.offset,
        )

    def placed(self, size: int, offset: int) -> "DirectoryEntry":
        return replace(self, size=size, offset=offset)

    @property
    def actual_width(self) -> int:
        return byte_to_size(self.width)

    @property
    def actual_height(self) -> int:
        return byte_to_size(self.height)

    @property
    def span(self) -> Tuple[int, int]:
        return self.offset, self.offset + self.size


def pack_placement(size: int, offset: int) -> bytes:
    """Байты полей size/offset, которые дописываются поверх заготовки."""
    return struct.pack("<II", size, offset)
