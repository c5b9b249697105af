"""Построение маски прозрачности для BMP-изображений внутри ICO.

BMP внутри иконки хранится «сложенным»: над пикселями лежит AND-маска
видимости, поэтому высота буфера удваивается. Маска всегда нулевая, то есть
каждый пиксель помечен видимым, в том числе пиксели с нулевой альфой.
"""
from __future__ import annotations

import numpy as np
from PIL import Image

from icokit.exceptions import IconFormatError

# BITMAPFILEHEADER: "BM", size:u32, reserved:u32, pixel offset:u32
BMP_FILE_HEADER_SIZE = 14
BMP_SIGNATURE = b"BM"


def stack_with_mask(image: Image.Image) -> Image.Image:
    """Возвращает RGBA-буфер высотой 2H: в строках [0, H) маска, в строках [H, 2H) исходник.

    Исходное изображение не изменяется.
    """
    # packed 4 bytes per pixel, whatever the source mode was
    normalized = image if image.mode == "RGBA" else image.convert("RGBA")
    pixels = np.asarray(normalized, dtype=np.uint8)
    height, width = pixels.shape[0], pixels.shape[1]

    stacked = np.zeros((height * 2, width, 4), dtype=np.uint8)
    stacked[height:] = pixels
    # (2H, W, 4) uint8 is inferred as RGBA
    return Image.fromarray(stacked)


def strip_file_header(bmp_bytes: bytes) -> bytes:
    """Отрезает 14-байтовый заголовок BMP-файла, оставляя DIB («memory bitmap»)."""
    if len(bmp_bytes) < BMP_FILE_HEADER_SIZE or bmp_bytes[:2] != BMP_SIGNATURE:
        raise IconFormatError("Поток не является BMP-файлом")
    return bmp_bytes[BMP_FILE_HEADER_SIZE:]


def is_mask_region_clear(image: Image.Image) -> bool:
    """Проверяет, что верхняя половина сложенного буфера (маска) состоит из нулей."""
    pixels = np.asarray(image)
    half = pixels.shape[0] // 2
    return not np.any(pixels[:half])
