import struct

import pytest

from icokit.exceptions import IconFormatError
from icokit.models.directory_entry import (
    ENTRY_SIZE,
    HEADER_SIZE,
    DirectoryEntry,
    byte_to_size,
    pack_header,
    size_to_byte,
    unpack_header,
)
from icokit.models.icon_image import BmpVariant, PngVariant


def test_sizes():
    assert HEADER_SIZE == 6
    assert ENTRY_SIZE == 16


def test_header_round_trip():
    assert pack_header(3) == b"\x00\x00\x01\x00\x03\x00"
    assert unpack_header(pack_header(3)) == 3


@pytest.mark.parametrize(
    "data",
    [
        struct.pack("<HHH", 1, 1, 1),
        struct.pack("<HHH", 0, 2, 1),
        b"\x00\x00\x01",
    ],
)
def test_header_rejects_invalid(data):
    with pytest.raises(IconFormatError, match="Invalid file header"):
        unpack_header(data)


def test_256_wraps_to_zero_and_back():
    assert size_to_byte(256) == 0
    assert size_to_byte(16) == 16
    assert byte_to_size(0) == 256
    assert byte_to_size(48) == 48


def test_entry_for_variant(make_image):
    entry = DirectoryEntry.for_variant(PngVariant(make_image(256, 256)))
    assert (entry.width, entry.height) == (0, 0)
    assert (entry.actual_width, entry.actual_height) == (256, 256)
    assert (entry.color_count, entry.reserved, entry.planes) == (0, 0, 1)
    assert entry.bits_per_pixel == 32
    assert (entry.size, entry.offset) == (0, 0)


def test_entry_for_loaded_bmp_uses_reported_height(make_image):
    entry = DirectoryEntry.for_variant(BmpVariant(make_image(32, 64, mode="RGB"), generate_transparency_mask=False))
    assert (entry.width, entry.height, entry.bits_per_pixel) == (32, 32, 24)


def test_entry_pack_unpack():
    entry = DirectoryEntry(width=16, height=16, bits_per_pixel=32, size=1234, offset=38)
    packed = entry.pack()
    assert packed == struct.pack("<BBBBHHII", 16, 16, 0, 0, 1, 32, 1234, 38)
    assert DirectoryEntry.unpack(packed) == entry
    assert entry.span == (38, 1272)


def test_entry_unpack_rejects_truncated_directory():
    with pytest.raises(IconFormatError):
        DirectoryEntry.unpack(b"\x10\x10\x00")
