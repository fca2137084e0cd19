"""Тесты кодека изображения и модели RasterImage."""
from __future__ import annotations

import numpy as np
import pytest

from tgalab.models.errors import MalformedError, TruncatedError
from tgalab.models.header_model import HEADER_SIZE, Header
from tgalab.models.image_model import Pixel, RasterImage
from tgalab.services.header_codec import encode_header
from tgalab.services.image_codec import (
    decode_image,
    encode_image,
    from_pil,
    read_image,
    to_pil,
    write_image,
)

from conftest import make_image


class TestDecode:
    def test_wire_order_is_bgr(self):
        data = encode_header(Header.truecolor(1, 1)) + bytes([10, 20, 30])
        image = decode_image(data)
        assert image.pixel(0, 0) == Pixel(red=30, green=20, blue=10)

    def test_row_major_layout(self):
        # 2×2: (0,0) (1,0) / (0,1) (1,1)
        body = bytes([0, 0, 1, 0, 0, 2, 0, 0, 3, 0, 0, 4])
        image = decode_image(encode_header(Header.truecolor(2, 2)) + body)
        assert [p.red for p in image.iter_pixels()] == [1, 2, 3, 4]
        assert image.pixel(1, 0).red == 2
        assert image.pixel(0, 1).red == 3

    def test_truncated_pixels(self):
        data = encode_header(Header.truecolor(2, 2)) + bytes(11)
        with pytest.raises(TruncatedError) as info:
            decode_image(data)
        assert info.value.needed == HEADER_SIZE + 12

    def test_truncated_header(self):
        with pytest.raises(TruncatedError):
            decode_image(bytes(10))

    @pytest.mark.parametrize("width, height", [(0, 3), (3, 0)])
    def test_zero_dimensions(self, width, height):
        data = encode_header(Header(width=width, height=height)) + bytes(30)
        with pytest.raises(MalformedError):
            decode_image(data)

    def test_profile_check_is_opt_in(self):
        data = encode_header(Header.truecolor(1, 1, bits_per_pixel=32)) + bytes(3)
        assert decode_image(data).header.bits_per_pixel == 32
        with pytest.raises(MalformedError):
            decode_image(data, check_profile=True)

    def test_trailing_bytes_ignored(self):
        image = make_image(3, 2)
        assert decode_image(encode_image(image) + b"TRUEVISION-XFILE.\x00") == image


class TestEncode:
    def test_length(self, noise_image):
        assert len(encode_image(noise_image)) == HEADER_SIZE + 3 * 7 * 5

    def test_image_round_trip(self, noise_image):
        assert decode_image(encode_image(noise_image)) == noise_image

    def test_bytes_round_trip(self):
        rng = np.random.default_rng(3)
        data = encode_header(Header.truecolor(4, 3, id_length=2, x_origin=5)) + rng.integers(
            0, 256, size=36, dtype=np.uint8
        ).tobytes()
        assert encode_image(decode_image(data)) == data

    def test_file_helpers(self, tmp_path, noise_image):
        path = tmp_path / "out.tga"
        write_image(path, noise_image)
        assert read_image(path, check_profile=True) == noise_image

    def test_missing_file_raises_os_error(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_image(tmp_path / "absent.tga")


class TestPillowBridge:
    def test_to_pil_preserves_rgb(self, noise_image):
        pil_image = to_pil(noise_image)
        assert pil_image.mode == "RGB"
        assert pil_image.size == (7, 5)
        assert pil_image.getpixel((6, 4)) == tuple(noise_image.pixel(6, 4))

    def test_from_pil(self, noise_image):
        image = from_pil(to_pil(noise_image).convert("RGBA"))
        np.testing.assert_array_equal(image.pixels, noise_image.pixels)
        image.header.check_profile()


class TestRasterImage:
    def test_shape_mismatch_is_construction_error(self):
        with pytest.raises(MalformedError):
            RasterImage(Header.truecolor(2, 2), np.zeros((2, 3, 3), dtype=np.uint8))

    def test_from_pixels_count_mismatch(self):
        with pytest.raises(MalformedError):
            RasterImage.from_pixels(Header.truecolor(2, 2), [Pixel(0, 0, 0)] * 3)

    def test_from_pixels_range(self):
        with pytest.raises(MalformedError):
            RasterImage.from_pixels(Header.truecolor(1, 1), [Pixel(256, 0, 0)])

    @pytest.mark.parametrize("value", [300, -1])
    def test_constructor_rejects_out_of_range(self, value):
        with pytest.raises(MalformedError):
            RasterImage(Header.truecolor(1, 1), np.array([[[value, 0, 0]]]))

    def test_constructor_accepts_wide_dtype_in_range(self):
        image = RasterImage(Header.truecolor(1, 1), np.array([[[255, 0, 7]]], dtype=np.int64))
        assert image.pixel(0, 0) == Pixel(255, 0, 7)
        assert image.pixels.dtype == np.uint8

    def test_pixels_are_read_only(self, noise_image):
        with pytest.raises(ValueError):
            noise_image.pixels[0, 0, 0] = 1

    def test_constructor_copies_buffer(self):
        arr = np.zeros((1, 1, 3), dtype=np.uint8)
        image = RasterImage(Header.truecolor(1, 1), arr)
        arr[0, 0, 0] = 99
        assert image.pixel(0, 0) == Pixel(0, 0, 0)

    def test_pixel_out_of_range(self, noise_image):
        with pytest.raises(IndexError):
            noise_image.pixel(7, 0)

    def test_equality(self):
        a = make_image(2, 2, seed=5)
        assert a == make_image(2, 2, seed=5)
        assert a != make_image(2, 2, seed=6)
        assert a != make_image(2, 2, seed=5, id_length=1)
