"""Тесты композитора."""
from __future__ import annotations

import numpy as np
import pytest

from tgalab.models.errors import DimensionMismatchError
from tgalab.models.image_model import Channel, Pixel
from tgalab.services.compositor import Adjustment, CompositorService
from tgalab.services.pixel_ops import BlendMode

from conftest import make_image


class TestBlend:
    def test_multiply_identity(self, compositor, noise_image):
        white = make_image(7, 5, fill=Pixel(255, 255, 255))
        assert compositor.blend(BlendMode.MULTIPLY, noise_image, white) == noise_image

    def test_screen_identity(self, compositor, noise_image):
        black = make_image(7, 5, fill=Pixel(0, 0, 0))
        assert compositor.blend(BlendMode.SCREEN, noise_image, black) == noise_image

    def test_add_saturation(self, compositor):
        top = make_image(2, 2, fill=Pixel(200, 0, 0))
        bottom = make_image(2, 2, fill=Pixel(100, 0, 0))
        result = compositor.apply(BlendMode.ADD, top, bottom)
        assert all(p == Pixel(255, 0, 0) for p in result.iter_pixels())

    def test_subtract_floor(self, compositor):
        top = make_image(2, 2, fill=Pixel(200, 9, 9))
        bottom = make_image(2, 2, fill=Pixel(100, 9, 9))
        assert compositor.apply(BlendMode.SUBTRACT, top, bottom).pixel(1, 1).red == 0

    def test_header_copied_from_top(self, compositor):
        top = make_image(3, 2, seed=1, id_length=4, x_origin=11)
        bottom = make_image(3, 2, seed=2)
        result = compositor.apply(BlendMode.OVERLAY, top, bottom)
        assert result.header == top.header
        result = compositor.apply(BlendMode.OVERLAY, bottom, top)
        assert result.header == bottom.header

    @pytest.mark.parametrize("mode", list(BlendMode))
    def test_inputs_untouched_and_output_fresh(self, compositor, noise_image, other_noise_image, mode):
        top_before = noise_image.pixels.copy()
        bottom_before = other_noise_image.pixels.copy()
        result = compositor.apply(mode, noise_image, other_noise_image)
        np.testing.assert_array_equal(noise_image.pixels, top_before)
        np.testing.assert_array_equal(other_noise_image.pixels, bottom_before)
        assert not np.shares_memory(result.pixels, noise_image.pixels)
        assert result.pixels.dtype == np.uint8

    @pytest.mark.parametrize("mode", list(BlendMode))
    def test_dimension_mismatch(self, compositor, noise_image, mode):
        narrow = make_image(6, 5)
        with pytest.raises(DimensionMismatchError) as info:
            compositor.apply(mode, noise_image, narrow)
        assert info.value.top_size == (7, 5)
        assert info.value.bottom_size == (6, 5)

    def test_height_mismatch(self, compositor, noise_image):
        with pytest.raises(DimensionMismatchError):
            compositor.apply(BlendMode.ADD, make_image(7, 4), noise_image)

    def test_blend_needs_bottom(self, compositor, noise_image):
        with pytest.raises(ValueError):
            compositor.apply(BlendMode.MULTIPLY, noise_image)

    def test_unknown_operation(self, compositor, noise_image):
        with pytest.raises(TypeError):
            compositor.apply("multiply", noise_image, noise_image)


class TestAdjust:
    def test_zero_red(self, compositor, noise_image):
        result = compositor.adjust(noise_image, Channel.RED, multiplier=0, offsets=(0, 0, 0))
        assert not result.pixels[..., 0].any()
        np.testing.assert_array_equal(result.pixels[..., 1:], noise_image.pixels[..., 1:])
        assert result.header == noise_image.header

    def test_negative_multiplier_zeroes_channel(self, compositor, noise_image):
        result = compositor.adjust(noise_image, Channel.RED, -1.0)
        assert not result.pixels[..., 0].any()
        np.testing.assert_array_equal(result.pixels[..., 1:], noise_image.pixels[..., 1:])

    def test_adjustment_rejects_bottom(self, compositor, noise_image):
        with pytest.raises(ValueError):
            compositor.apply(Adjustment(Channel.RED), noise_image, noise_image)

    def test_adjustment_channel_is_checked_on_construction(self):
        with pytest.raises(TypeError):
            Adjustment(1)

    def test_chain(self, compositor, noise_image):
        result = compositor.chain(noise_image, Adjustment(Channel.GREEN, 0.0), Adjustment(Channel.BLUE, 0.0))
        assert not result.pixels[..., 1:].any()
        np.testing.assert_array_equal(result.pixels[..., 0], noise_image.pixels[..., 0])

    def test_chain_without_steps_returns_same_image(self, compositor, noise_image):
        assert compositor.chain(noise_image) == noise_image


class TestRotate:
    def test_half_turn(self, compositor, noise_image):
        rotated = compositor.rotate_half_turn(noise_image)
        assert rotated.header == noise_image.header
        assert rotated.pixel(0, 0) == noise_image.pixel(6, 4)
        assert rotated.pixel(6, 0) == noise_image.pixel(0, 4)
        assert compositor.rotate_half_turn(rotated) == noise_image


class TestParallel:
    def test_workers_must_be_positive(self):
        with pytest.raises(ValueError):
            CompositorService(workers=0)

    @pytest.mark.parametrize("workers", [2, 3, 16])
    def test_banded_matches_serial(self, compositor, noise_image, other_noise_image, workers):
        with CompositorService(workers=workers) as parallel:
            for mode in BlendMode:
                assert parallel.apply(mode, noise_image, other_noise_image) == compositor.apply(
                    mode, noise_image, other_noise_image
                )
            adjustment = Adjustment(Channel.BLUE, 1.7, (5, -3, 40))
            assert parallel.apply(adjustment, noise_image) == compositor.apply(adjustment, noise_image)

    def test_pool_is_shared_and_closed(self, noise_image, other_noise_image):
        with CompositorService(workers=4) as parallel:
            pool = parallel._pool
            assert pool is not None
            first = parallel.apply(BlendMode.SCREEN, noise_image, other_noise_image)
            second = parallel.apply(BlendMode.SCREEN, noise_image, other_noise_image)
            assert parallel._pool is pool
            assert first == second
        assert parallel._pool is None
        with pytest.raises(RuntimeError):
            pool.submit(int)
        parallel.close()

    def test_closed_service_still_computes(self, compositor, noise_image, other_noise_image):
        parallel = CompositorService(workers=2)
        parallel.close()
        assert parallel.apply(BlendMode.ADD, noise_image, other_noise_image) == compositor.apply(
            BlendMode.ADD, noise_image, other_noise_image
        )

    def test_single_worker_has_no_pool(self, compositor):
        assert compositor._pool is None
