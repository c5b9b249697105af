"""Определение формата данных записи ICO и восстановление BMP-файла.

PNG хранится внутри ICO целиком и узнаётся по сигнатуре. Всё остальное
считается DIB без файлового заголовка: заголовок восстанавливается, чтобы
кодек мог прочитать поток как обычный BMP.
"""
from __future__ import annotations

import struct
from typing import Optional

from icokit.exceptions import IconFormatError
from icokit.logs import get_logger
from icokit.models.icon_image import BmpVariant, ImageVariant, PngVariant
from icokit.services.mask_builder import BMP_FILE_HEADER_SIZE, BMP_SIGNATURE
from icokit.services.pixel_codec import PixelCodec

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

logger = get_logger(__name__)


def is_png(data: bytes) -> bool:
    return data[: len(PNG_SIGNATURE)] == PNG_SIGNATURE


def build_bmp_file_header(dib: bytes) -> bytes:
    """Собирает BITMAPFILEHEADER для DIB.

    Смещение пикселей = 14 + размер DIB-заголовка (первые 4 байта DIB, LE u32).

    Raises:
        IconFormatError: DIB короче 4 байт или заявленный размер заголовка больше данных.
    """
    if len(dib) < 4:
        raise IconFormatError("DIB слишком короткий")
    (dib_header_size,) = struct.unpack_from("<I", dib, 0)
    if dib_header_size > len(dib):
        raise IconFormatError(f"Размер DIB-заголовка {dib_header_size} больше данных ({len(dib)} байт)")
    return struct.pack(
        "<2sIII",
        BMP_SIGNATURE,
        len(dib) + BMP_FILE_HEADER_SIZE,
        0,
        BMP_FILE_HEADER_SIZE + dib_header_size,
    )


def reconstruct_bmp(dib: bytes) -> bytes:
    return build_bmp_file_header(dib) + dib


def sniff(data: bytes, codec: Optional[PixelCodec] = None) -> ImageVariant:
    """Превращает данные одной записи каталога в вариант изображения.

    Raises:
        IconFormatError: данных меньше 8 байт или кодек их не принял.
    """
    codec = codec or PixelCodec()
    if len(data) < len(PNG_SIGNATURE):
        raise IconFormatError(f"Данные изображения слишком короткие: {len(data)} байт")

    if is_png(data):
        logger.debug("entry sniffed as PNG, %d bytes", len(data))
        return PngVariant(codec.decode_png(data), codec=codec)

    logger.debug("entry sniffed as DIB, %d bytes", len(data))
    image = codec.decode_bmp(reconstruct_bmp(data))
    try:
        # ICO keeps BMP entries stacked, the mask is already in the buffer
        return BmpVariant(image, generate_transparency_mask=False, codec=codec)
    except ValueError as exc:
        raise IconFormatError(f"BMP-изображение недопустимого размера: {exc}") from exc
