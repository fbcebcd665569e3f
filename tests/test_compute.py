"""Tests for the escape-time kernels."""

import numpy as np
import pytest

from mandelzoom.compute import (
    DEFAULT_LIMIT,
    NO_ESCAPE,
    escape_count,
    escape_time,
    intensity,
    map_pixel,
    render_band,
    warmup_jit,
)

SAMPLE_POINTS = [
    0j,
    -1 + 0j,
    0.25 + 0j,
    0.3 + 0j,
    -0.75 + 0.1j,
    -1.2 + 0.35j,
    0.5 + 0.5j,
    -2 + 0j,
    2 + 2j,
    -0.1 + 0.65j,
]


class TestEscapeTime:
    def test_origin_is_in_set(self):
        for limit in (1, 10, 255, 1000):
            assert escape_time(0j, limit) is None

    def test_far_point_escapes_immediately(self):
        assert escape_time(3 + 0j, 10) == 0

    def test_minus_one_is_in_set(self):
        assert escape_time(-1 + 0j) is None

    def test_point_outside_escapes(self):
        # z1 = 1, z2 = 2, z3 = 5 -> |z3|² = 25 > 4 at index 2
        assert escape_time(1 + 0j, 255) == 2

    @pytest.mark.parametrize("point", SAMPLE_POINTS)
    def test_deterministic(self, point):
        assert escape_time(point, 100) == escape_time(point, 100)

    @pytest.mark.parametrize("point", SAMPLE_POINTS)
    @pytest.mark.parametrize("limit", [1, 5, 50, 255])
    def test_count_below_limit(self, point, limit):
        count = escape_time(point, limit)
        if count is not None:
            assert 0 <= count < limit

    @pytest.mark.parametrize("point", SAMPLE_POINTS)
    def test_conjugate_symmetry(self, point):
        assert escape_time(point.conjugate(), 255) == escape_time(point, 255)

    def test_zero_limit_never_escapes(self):
        assert escape_time(3 + 0j, 0) is None

    def test_default_limit(self):
        assert DEFAULT_LIMIT == 255

    def test_kernel_sentinel(self):
        assert escape_count(0.0, 0.0, 10) == NO_ESCAPE
        assert escape_count(3.0, 0.0, 10) == 0


class TestIntensity:
    def test_interior_is_black(self):
        assert intensity(NO_ESCAPE) == 0

    def test_fast_escape_is_white(self):
        assert intensity(0) == 255

    def test_ramp_decreases(self):
        levels = [intensity(count) for count in range(255)]
        assert all(a > b for a, b in zip(levels, levels[1:]))
        assert levels[-1] == 1

    def test_saturates_above_byte_range(self):
        assert intensity(300) == 0


class TestKernels:
    def test_map_pixel_example(self):
        assert map_pixel(100, 100, 25, 75, -1.0, 1.0, 1.0, -1.0) == (-0.5, -0.5)

    def test_render_band_fills_buffer(self):
        pixels = np.zeros(16, dtype=np.uint8)
        render_band(pixels, 4, 4, -4.0, 4.0, 4.0, -4.0, 255)
        image = pixels.reshape(4, 4)

        # (2, 2) maps to the origin, (0, 0) to -4+4i
        assert image[2, 2] == 0
        assert image[0, 0] == 255

    def test_warmup(self):
        warmup_jit()
