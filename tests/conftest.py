from __future__ import annotations

import io
import struct

import numpy as np
import pytest
from PIL import Image


class ForwardOnlySink:
    """Поток только для записи вперёд, без seek/tell."""

    def __init__(self) -> None:
        self._buffer = io.BytesIO()

    def write(self, data: bytes) -> int:
        return self._buffer.write(data)

    def seekable(self) -> bool:
        return False

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()


@pytest.fixture
def make_image():
    """Фабрика изображений с детерминированным содержимым."""
    def _make(width: int, height: int, mode: str = "RGBA", seed: int = 0) -> Image.Image:
        rng = np.random.default_rng(seed)
        channels = len(Image.new(mode, (1, 1)).getbands())
        pixels = rng.integers(0, 256, size=(height, width, channels), dtype=np.uint8)
        if channels == 1:
            pixels = pixels[:, :, 0]
        return Image.fromarray(pixels).convert(mode)
    return _make


@pytest.fixture
def forward_sink() -> ForwardOnlySink:
    return ForwardOnlySink()


def read_entries(data: bytes):
    """(width, height, colors, reserved, planes, bpp, size, offset) для каждой записи."""
    _reserved, _type, count = struct.unpack_from("<HHH", data, 0)
    return [struct.unpack_from("<BBBBHHII", data, 6 + 16 * i) for i in range(count)]


@pytest.fixture
def entries_of():
    return read_entries
