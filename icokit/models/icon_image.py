"""Изображения внутри иконки: PNG и BMP с маской прозрачности.

Принципы:
- Закрытый набор из двух вариантов (`ImageVariant`), оба дают одинаковый
  интерфейс: `width`, `height`, `bits_per_pixel`, `encode()`.
- Ограничения на размер проверяются при каждой замене буфера или флага.
"""
from __future__ import annotations

from typing import Optional, Union

from PIL import Image

from icokit.services.mask_builder import stack_with_mask, strip_file_header
from icokit.services.pixel_codec import PixelCodec, bits_per_pixel

MAX_ICON_SIZE = 256
MAX_STACKED_HEIGHT = MAX_ICON_SIZE * 2

_default_codec = PixelCodec()


def _require_image(image: object) -> Image.Image:
    if image is None:
        raise ValueError("Изображение не задано")
    if not isinstance(image, Image.Image):
        raise TypeError(f"Ожидалось PIL.Image.Image, получено {type(image).__name__}")
    return image


def _validate_bmp_image(image: Image.Image, generate_transparency_mask: bool) -> None:
    """Проверяет размеры буфера для BMP-варианта.

    Raises:
        ValueError: ширина больше 256; высота больше 256 при генерации маски
            или больше 512, если маска уже содержится в буфере.
    """
    width, height = image.size
    if width > MAX_ICON_SIZE:
        raise ValueError(f"Ширина BMP-изображения не может превышать {MAX_ICON_SIZE} px: {width}")
    limit = MAX_ICON_SIZE if generate_transparency_mask else MAX_STACKED_HEIGHT
    if height > limit:
        raise ValueError(f"Высота BMP-изображения не может превышать {limit} px: {height}")


class PngVariant:
    """PNG-изображение внутри иконки; хранится как обычный PNG-файл."""

    kind = "png"

    def __init__(self, image: Image.Image, codec: Optional[PixelCodec] = None) -> None:
        self._codec = codec or _default_codec
        self._image = _require_image(image)

    @property
    def image(self) -> Image.Image:
        return self._image

    @image.setter
    def image(self, value: Image.Image) -> None:
        self._image = _require_image(value)

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def bits_per_pixel(self) -> int:
        return bits_per_pixel(self._image)

    def encode(self) -> bytes:
        """Возвращает PNG-байты без какой-либо ICO-обёртки."""
        return self._codec.encode_png(self._image)

    def __repr__(self) -> str:
        return f"PngVariant({self.width}x{self.height}, {self.bits_per_pixel}bpp)"


class BmpVariant:
    """BMP-изображение внутри иконки.

    BMP хранится без файлового заголовка, над пикселями лежит 1-битная
    AND-маска видимости. Если `generate_transparency_mask` выключен, буфер
    считается уже сложенным (маска + изображение), как после загрузки из ICO,
    и отчётная высота равна половине высоты буфера.
    """

    kind = "bmp"

    def __init__(
        self,
        image: Image.Image,
        generate_transparency_mask: bool = True,
        codec: Optional[PixelCodec] = None,
    ) -> None:
        image = _require_image(image)
        _validate_bmp_image(image, generate_transparency_mask)
        self._codec = codec or _default_codec
        self._image = image
        self._generate_transparency_mask = bool(generate_transparency_mask)

    @property
    def image(self) -> Image.Image:
        return self._image

    @image.setter
    def image(self, value: Image.Image) -> None:
        value = _require_image(value)
        _validate_bmp_image(value, self._generate_transparency_mask)
        self._image = value

    @property
    def generate_transparency_mask(self) -> bool:
        return self._generate_transparency_mask

    @generate_transparency_mask.setter
    def generate_transparency_mask(self, value: bool) -> None:
        value = bool(value)
        # validated against the live buffer, not the height reported under the old flag
        _validate_bmp_image(self._image, value)
        self._generate_transparency_mask = value

    @property
    def has_embedded_mask(self) -> bool:
        return not self._generate_transparency_mask

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        if self._generate_transparency_mask:
            return self._image.height
        return self._image.height // 2

    @property
    def bits_per_pixel(self) -> int:
        return bits_per_pixel(self._image)

    def encode(self) -> bytes:
        """Кодирует буфер в DIB: при необходимости добавляет маску, затем отрезает заголовок файла."""
        source = stack_with_mask(self._image) if self._generate_transparency_mask else self._image
        return strip_file_header(self._codec.encode_bmp(source))

    def __repr__(self) -> str:
        return (
            f"BmpVariant({self.width}x{self.height}, {self.bits_per_pixel}bpp, "
            f"generate_transparency_mask={self._generate_transparency_mask})"
        )


ImageVariant = Union[PngVariant, BmpVariant]
