"""Tests for pixel/percentage coordinate conversion."""

import math

import pytest
from hypothesis import given, strategies as st

from newsmapper.coords import (
    PercentRect, PixelRect, clamp_percent, rescale, to_percentage, to_pixels
)

sizes = st.floats(min_value=1, max_value=10000, allow_nan=False, allow_infinity=False)
offsets = st.floats(min_value=0, max_value=10000, allow_nan=False, allow_infinity=False)


def close(a, b):
    return math.isclose(a, b, rel_tol=1e-3, abs_tol=1e-6)


class TestToPercentage:
    def test_drawn_rectangle_example(self):
        rect = PixelRect.from_corners(100, 50, 300, 150)
        percent = to_percentage(rect, 1000, 1400)

        assert percent.x == pytest.approx(10, abs=0.01)
        assert percent.y == pytest.approx(3.571, abs=0.01)
        assert percent.width == pytest.approx(20, abs=0.01)
        assert percent.height == pytest.approx(7.143, abs=0.01)

    @pytest.mark.parametrize('width,height', [(0, 100), (100, 0), (-5, 100)])
    def test_rejects_empty_container(self, width, height):
        with pytest.raises(ValueError):
            to_percentage(PixelRect(0, 0, 10, 10), width, height)
        with pytest.raises(ValueError):
            to_pixels(PercentRect(0, 0, 10, 10), width, height)

    @given(offsets, offsets, offsets, offsets, sizes, sizes)
    def test_round_trip(self, left, top, width, height, container_width, container_height):
        rect = PixelRect(left, top, width, height)
        back = to_pixels(to_percentage(rect, container_width, container_height), container_width, container_height)

        assert close(back.left, rect.left)
        assert close(back.top, rect.top)
        assert close(back.width, rect.width)
        assert close(back.height, rect.height)


class TestPixelRect:
    @given(offsets, offsets, offsets, offsets)
    def test_from_corners_ignores_drag_direction(self, x0, y0, x1, y1):
        assert PixelRect.from_corners(x0, y0, x1, y1) == PixelRect.from_corners(x1, y1, x0, y0)
        assert PixelRect.from_corners(x0, y1, x1, y0) == PixelRect.from_corners(x1, y0, x0, y1)

    def test_contains_edges(self):
        rect = PixelRect(10, 20, 100, 50)
        assert rect.contains(10, 20)
        assert rect.contains(110, 70)
        assert not rect.contains(111, 70)


class TestRescale:
    def test_canvas_to_raster(self):
        rect = rescale(PixelRect(100, 50, 200, 100), (1000, 1400), (2000, 2800))
        assert rect.left == pytest.approx(200)
        assert rect.top == pytest.approx(100)
        assert rect.width == pytest.approx(400)
        assert rect.height == pytest.approx(200)


class TestClampPercent:
    def test_keeps_rect_inside_page(self):
        clamped = clamp_percent(PercentRect(90, 95, 20, 10))
        assert clamped == PercentRect(90, 95, 10, 5)
        assert clamped.fits_page()

    def test_negative_origin_shrinks_extent(self):
        assert clamp_percent(PercentRect(-5, 10, 20, 10)) == PercentRect(0, 10, 15, 10)

    def test_unclamped_rect_does_not_fit(self):
        assert not PercentRect(90, 0, 20, 10).fits_page()
