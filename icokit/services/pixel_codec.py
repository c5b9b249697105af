"""Кодек пикселей: PNG и BMP через Pillow.

Принципы:
- SRP: только перевод `PIL.Image.Image` <-> байты, без знания о формате ICO.
- Ошибки Pillow приводятся к `IconFormatError` с сохранением причины.
"""
from __future__ import annotations

import io
import struct
from typing import Dict, Tuple

from PIL import Image, UnidentifiedImageError

from icokit.exceptions import IconFormatError

MODE_BITS: Dict[str, int] = {
    "1": 1,
    "L": 8,
    "P": 8,
    "LA": 16,
    "PA": 16,
    "I;16": 16,
    "RGB": 24,
    "RGBA": 32,
    "RGBX": 32,
    "CMYK": 32,
    "I": 32,
    "F": 32,
}


BI_RGB = 0
# pixel offset, DIB header size, width, height, planes, bit count, compression
_BMP_LAYOUT = struct.Struct("<10xIIiiHHI")
BITMAPINFOHEADER_SIZE = 40


def bits_per_pixel(image: Image.Image) -> int:
    """Глубина цвета для режима Pillow; неизвестные режимы считаются 32-битными."""
    return MODE_BITS.get(image.mode, 32)


def _is_32bit_rgb_dib(data: bytes) -> bool:
    if len(data) < _BMP_LAYOUT.size:
        return False
    _offset, header_size, _width, _height, _planes, bit_count, compression = _BMP_LAYOUT.unpack_from(data, 0)
    return header_size >= BITMAPINFOHEADER_SIZE and bit_count == 32 and compression == BI_RGB


def _decode_bgra(data: bytes, size: Tuple[int, int]) -> Image.Image:
    offset, _header_size, _width, height, _planes, _bit_count, _compression = _BMP_LAYOUT.unpack_from(data, 0)
    stride = size[0] * 4
    pixels = data[offset : offset + stride * size[1]]
    if len(pixels) != stride * size[1]:
        raise IconFormatError("Не удалось декодировать BMP: пиксельные данные обрезаны")
    # positive height means rows are stored bottom-up
    orientation = -1 if height > 0 else 1
    return Image.frombytes("RGBA", size, pixels, "raw", "BGRA", stride, orientation)


class PixelCodec:
    def decode_png(self, data: bytes) -> Image.Image:
        return self._decode(data, "PNG")

    def encode_png(self, image: Image.Image) -> bytes:
        return self._encode(image, "PNG")

    def decode_bmp(self, data: bytes) -> Image.Image:
        """Декодирует полноценный BMP-файл (с 14-байтовым заголовком).

        32-битный BI_RGB Pillow читает как RGB и теряет четвёртый байт;
        такие данные перечитываются как BGRA, чтобы глубина и альфа
        сохранялись при повторной записи.
        """
        image = self._decode(data, "BMP")
        if image.mode == "RGB" and _is_32bit_rgb_dib(data):
            image = _decode_bgra(data, image.size)
        return image

    def encode_bmp(self, image: Image.Image) -> bytes:
        """Кодирует изображение в BMP-файл; результат включает 14-байтовый заголовок."""
        return self._encode(image, "BMP")

    # ---- Helpers ----
    def _decode(self, data: bytes, fmt: str) -> Image.Image:
        try:
            with Image.open(io.BytesIO(data), formats=[fmt]) as opened:
                # copy() detaches pixels from the BytesIO so the image can be re-saved later
                opened.load()
                image = opened.copy()
        except (UnidentifiedImageError, OSError, SyntaxError, Image.DecompressionBombError) as exc:
            raise IconFormatError(f"Не удалось декодировать {fmt}: {exc}") from exc
        return image

    def _encode(self, image: Image.Image, fmt: str) -> bytes:
        buffer = io.BytesIO()
        try:
            image.save(buffer, format=fmt)
        except (OSError, KeyError) as exc:
            # Pillow raises OSError/KeyError for modes the encoder cannot write
            raise ValueError(f"Изображение в режиме {image.mode} нельзя сохранить как {fmt}") from exc
        return buffer.getvalue()
