"""Тесты кодека заголовка и модели Header."""
from __future__ import annotations

import pytest

from tgalab.models.errors import MalformedError, TruncatedError
from tgalab.models.header_model import HEADER_SIZE, Header
from tgalab.services.header_codec import HEADER_STRUCT, decode_header, encode_header


class TestHeaderCodec:
    def test_struct_matches_header_size(self):
        assert HEADER_STRUCT.size == HEADER_SIZE

    def test_encode_is_18_bytes_little_endian(self):
        header = Header(id_length=1, x_origin=0x0102, width=0x0304, height=2, image_descriptor=0x20)
        data = encode_header(header)
        assert len(data) == HEADER_SIZE
        assert data[0] == 1
        assert data[2] == 2
        assert data[8:10] == b"\x02\x01"
        assert data[12:14] == b"\x04\x03"
        assert data[14:16] == b"\x02\x00"
        assert data[16] == 24
        assert data[17] == 0x20

    def test_round_trip(self):
        header = Header(
            id_length=5, color_map_type=1, image_type_code=10, color_map_origin=3,
            color_map_length=256, color_map_depth=24, x_origin=7, y_origin=9,
            width=640, height=480, bits_per_pixel=32, image_descriptor=0x28,
        )
        decoded, offset = decode_header(encode_header(header))
        assert decoded == header
        assert offset == HEADER_SIZE

    def test_decode_at_offset(self):
        header = Header.truecolor(3, 4)
        decoded, offset = decode_header(b"\xff\xff" + encode_header(header), offset=2)
        assert decoded == header
        assert offset == 2 + HEADER_SIZE

    def test_decode_does_not_validate_profile(self):
        data = bytearray(encode_header(Header.truecolor(1, 1)))
        data[16] = 16
        header, _ = decode_header(bytes(data))
        assert header.bits_per_pixel == 16

    @pytest.mark.parametrize("length", [0, 1, 17])
    def test_truncated(self, length):
        with pytest.raises(TruncatedError) as info:
            decode_header(bytes(length))
        assert info.value.needed == HEADER_SIZE
        assert info.value.available == length


class TestHeaderModel:
    def test_truecolor_defaults(self):
        header = Header.truecolor(10, 20)
        assert header.size == (10, 20)
        assert header.pixel_count == 200
        header.check_profile()

    @pytest.mark.parametrize("field, value", [("width", 70000), ("id_length", 256), ("x_origin", -1)])
    def test_out_of_range_field(self, field, value):
        with pytest.raises(MalformedError):
            Header(**{field: value})

    @pytest.mark.parametrize(
        "overrides",
        [
            {"bits_per_pixel": 32},
            {"image_type_code": 10},
            {"color_map_type": 1},
            {"color_map_length": 4},
            {"width": 0},
        ],
    )
    def test_profile_violations(self, overrides):
        fields = {"width": 2, "height": 2, **overrides}
        with pytest.raises(MalformedError):
            Header(**fields).check_profile()

    def test_top_origin_flag(self):
        assert Header.truecolor(1, 1, image_descriptor=0x20).top_origin
        assert not Header.truecolor(1, 1).top_origin
