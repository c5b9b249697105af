"""Исключения пакета.

Ошибки формата наследуют `ValueError`, чтобы вызывающий код, ожидающий
`ValueError` (как у `ImageService.load_image`), продолжал работать.
"""
from __future__ import annotations


class IconError(Exception):
    """Базовая ошибка работы с иконками."""


class IconFormatError(IconError, ValueError):
    """Данные не являются корректным ICO или его содержимое не декодируется."""
