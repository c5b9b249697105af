"""Импорт кадров многокадрового изображения (TIFF, GIF, ...) как BMP-вариантов.

Одинаковые кадры пропускаются: сравниваются закодированные BMP-байты,
без помощи кодека, через множество уже встреченных последовательностей.
"""
from __future__ import annotations

from typing import List, Optional

from PIL import Image, ImageSequence

from icokit.logs import get_logger
from icokit.models.icon_image import BmpVariant
from icokit.services.pixel_codec import PixelCodec

logger = get_logger(__name__)


def import_frames(image: Image.Image, codec: Optional[PixelCodec] = None) -> List[BmpVariant]:
    """Возвращает по одному `BmpVariant` (с генерацией маски) на каждый уникальный кадр."""
    codec = codec or PixelCodec()
    seen = set()
    variants: List[BmpVariant] = []

    for index, frame in enumerate(ImageSequence.Iterator(image)):
        rgba = frame.convert("RGBA")
        encoded = codec.encode_bmp(rgba)
        if encoded in seen:
            logger.debug("frame %d skipped: duplicate of an earlier frame", index)
            continue
        seen.add(encoded)
        variants.append(BmpVariant(rgba, generate_transparency_mask=True, codec=codec))

    logger.debug("imported %d unique frames", len(variants))
    return variants
