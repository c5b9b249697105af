import struct

import pytest

from icokit.exceptions import IconFormatError
from icokit.models.icon_image import BmpVariant, PngVariant
from icokit.services.format_sniffer import build_bmp_file_header, is_png, reconstruct_bmp, sniff


def test_png_payload_yields_png_variant(make_image):
    data = PngVariant(make_image(16, 16)).encode()
    assert is_png(data)

    variant = sniff(data)

    assert isinstance(variant, PngVariant)
    assert (variant.width, variant.height) == (16, 16)


def test_dib_payload_yields_bmp_variant_with_embedded_mask(make_image):
    data = BmpVariant(make_image(16, 16)).encode()
    assert not is_png(data)

    variant = sniff(data)

    assert isinstance(variant, BmpVariant)
    assert variant.generate_transparency_mask is False
    assert variant.image.size == (16, 32)
    assert (variant.width, variant.height) == (16, 16)


def test_file_header_is_rebuilt_from_dib(make_image):
    dib = BmpVariant(make_image(8, 8)).encode()
    header = build_bmp_file_header(dib)

    assert len(header) == 14
    signature, file_size, reserved, pixel_offset = struct.unpack("<2sIII", header)
    assert signature == b"BM"
    assert file_size == len(dib) + 14
    assert reserved == 0
    assert pixel_offset == 14 + 40
    assert reconstruct_bmp(dib) == header + dib


@pytest.mark.parametrize("data", [b"", b"\x89PNG", b"\x28\x00\x00\x00\x01\x00\x00"])
def test_payload_shorter_than_8_bytes_fails(data):
    with pytest.raises(IconFormatError):
        sniff(data)


def test_codec_rejection_is_a_format_error():
    with pytest.raises(IconFormatError):
        sniff(b"\x00" * 32)


def test_broken_png_is_a_format_error(make_image):
    data = PngVariant(make_image(16, 16)).encode()
    with pytest.raises(IconFormatError):
        sniff(data[:20])


def test_dib_header_size_beyond_payload_is_a_format_error():
    with pytest.raises(IconFormatError):
        sniff(b"\xff" * 40)


def test_dib_header_size_beyond_payload_rejected_by_header_builder():
    dib = struct.pack("<I", 64) + b"\x00" * 20
    with pytest.raises(IconFormatError):
        build_bmp_file_header(dib)


def test_huge_dimensions_are_a_format_error():
    # BITMAPINFOHEADER: 20000x20000, 32 bpp, BI_RGB
    dib = struct.pack("<IiiHHIIiiII", 40, 20000, 20000, 1, 32, 0, 0, 0, 0, 0, 0) + b"\x00" * 16
    with pytest.raises(IconFormatError):
        sniff(dib)
