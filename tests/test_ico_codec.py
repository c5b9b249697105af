import io
import struct

import pytest

from icokit.exceptions import IconFormatError
from icokit.models.icon import Icon
from icokit.models.icon_image import BmpVariant, PngVariant
from icokit.services import ico_codec


def _mixed_icon(make_image):
    small = make_image(16, 16)
    big = make_image(256, 256, seed=1)
    return Icon([PngVariant(small), BmpVariant(small), PngVariant(big), BmpVariant(big)])


def test_scenario_png_and_masked_bmp_of_one_buffer(make_image, entries_of):
    image = make_image(16, 16)
    png, bmp = PngVariant(image), BmpVariant(image)
    data = Icon([png, bmp]).to_bytes()

    assert struct.unpack_from("<HHH", data, 0) == (0, 1, 2)
    entries = entries_of(data)
    assert entries[0][:6] == (16, 16, 0, 0, 1, 32)
    assert entries[1][:6] == (16, 16, 0, 0, 1, 32)

    first_offset = entries[0][7]
    assert first_offset == 38
    for (_w, _h, _c, _r, _p, _bpp, size, offset), variant in zip(entries, (png, bmp)):
        assert data[offset:offset + size] == variant.encode()
    assert entries[1][7] == first_offset + entries[0][6]


def test_offsets_are_contiguous_after_directory(make_image):
    icon = _mixed_icon(make_image)
    buffer = io.BytesIO()
    entries = ico_codec.write_icon(icon.images, buffer)
    data = buffer.getvalue()

    assert ico_codec.validate_layout(entries, len(data)) == []
    assert entries[0].offset == 6 + 16 * 4
    assert sum(e.size for e in entries) == len(data) - entries[0].offset
    assert ico_codec.read_directory(io.BytesIO(data)) == entries


def test_256_is_written_as_zero(make_image, entries_of):
    data = Icon([PngVariant(make_image(256, 256))]).to_bytes()
    assert entries_of(data)[0][:2] == (0, 0)


def test_forward_only_sink_gets_identical_bytes(make_image, forward_sink):
    icon = _mixed_icon(make_image)

    icon.save(forward_sink)

    assert forward_sink.getvalue() == icon.to_bytes()


def test_icon_embedded_mid_stream_uses_relative_offsets(make_image):
    icon = Icon([PngVariant(make_image(16, 16)), BmpVariant(make_image(32, 32))])
    buffer = io.BytesIO()
    buffer.write(b"prefix")
    icon.save(buffer)
    assert buffer.getvalue()[6:] == icon.to_bytes()

    buffer.seek(6)
    loaded = Icon.load(buffer)
    assert [(v.width, v.height) for v in loaded.images] == [(16, 16), (32, 32)]


def test_read_restores_directory_position(make_image):
    data = _mixed_icon(make_image).to_bytes()
    source = io.BytesIO(data)

    images = ico_codec.read_icon(source)

    assert len(images) == 4
    assert source.tell() == 6 + 16 * 4


@pytest.mark.parametrize("header", [struct.pack("<HHH", 1, 1, 0), struct.pack("<HHH", 0, 2, 0)])
def test_load_rejects_invalid_header(header):
    with pytest.raises(IconFormatError, match="Invalid file header"):
        Icon.from_bytes(header)


def test_load_rejects_truncated_directory(make_image):
    data = Icon([PngVariant(make_image(16, 16))]).to_bytes()
    with pytest.raises(IconFormatError):
        Icon.from_bytes(data[:12])


def test_load_rejects_truncated_payload(make_image):
    data = Icon([PngVariant(make_image(16, 16))]).to_bytes()
    with pytest.raises(IconFormatError):
        Icon.from_bytes(data[:-5])


def test_load_rejects_payload_too_short_to_sniff():
    data = struct.pack("<HHH", 0, 1, 1) + struct.pack("<BBBBHHII", 1, 1, 0, 0, 1, 32, 4, 22) + b"\x28\x00\x00\x00"
    with pytest.raises(IconFormatError):
        Icon.from_bytes(data)


def test_single_corrupt_entry_fails_whole_load(make_image, entries_of):
    data = bytearray(Icon([PngVariant(make_image(16, 16)), PngVariant(make_image(8, 8))]).to_bytes())
    offset = entries_of(bytes(data))[1][7]
    data[offset:offset + 8] = b"\x00" * 8
    with pytest.raises(IconFormatError):
        Icon.from_bytes(bytes(data))


def test_directory_geometry_bytes_are_not_trusted(make_image):
    data = bytearray(Icon([PngVariant(make_image(16, 16)), BmpVariant(make_image(32, 32))]).to_bytes())
    # garbage width, height and bpp in both entries
    for index in range(2):
        base = 6 + 16 * index
        data[base:base + 2] = b"\x07\x09"
        data[base + 6:base + 8] = struct.pack("<H", 3)

    loaded = Icon.from_bytes(bytes(data))

    assert [(v.width, v.height) for v in loaded.images] == [(16, 16), (32, 32)]


def test_load_requires_seekable_source(make_image, forward_sink):
    with pytest.raises(ValueError):
        Icon.load(forward_sink)


def test_missing_stream_is_an_argument_error():
    with pytest.raises(ValueError):
        Icon().save(None)
    with pytest.raises(ValueError):
        Icon.load(None)


def test_validate_layout_reports_gaps_and_overlaps():
    from icokit.models.directory_entry import DirectoryEntry

    good = [DirectoryEntry(16, 16, size=10, offset=38), DirectoryEntry(16, 16, size=5, offset=48)]
    assert ico_codec.validate_layout(good, 53) == []

    gap = [DirectoryEntry(16, 16, size=10, offset=40), DirectoryEntry(16, 16, size=5, offset=50)]
    assert ico_codec.validate_layout(gap, 55)

    overlap = [DirectoryEntry(16, 16, size=10, offset=38), DirectoryEntry(16, 16, size=5, offset=45)]
    assert ico_codec.validate_layout(overlap, 53)

    inside_directory = [DirectoryEntry(16, 16, size=10, offset=20), DirectoryEntry(16, 16, size=5, offset=48)]
    assert ico_codec.validate_layout(inside_directory, 53)
