import math

import pytest

from mandelgray import InvalidGeometryError, PixelOutOfRangeError, Viewport, pixel_to_complex, sample_grid

CLASSIC = Viewport.from_corners(complex(-2.0, 1.2), complex(0.5, -1.2))


@pytest.mark.parametrize("width,height", [(1, 1), (2, 3), (100, 100), (1920, 1080)])
def test_first_pixel_is_top_left_corner(width, height):
    viewport = Viewport.from_corners(complex(-1.2345, 0.987), complex(0.1, -0.4))
    assert pixel_to_complex(0, 0, width, height, viewport) == viewport.top_left


def test_pixels_step_across_the_viewport():
    assert pixel_to_complex(2, 0, 4, 4, CLASSIC) == complex(-2.0 + 2.5 * 0.5, 1.2)
    assert pixel_to_complex(0, 2, 4, 4, CLASSIC) == complex(-2.0, 1.2 - 2.4 * 0.5)
    assert pixel_to_complex(1, 1, 2, 2, CLASSIC) == complex(-0.75, 0.0)


def test_last_pixel_stops_short_of_bottom_right():
    sample = pixel_to_complex(9, 9, 10, 10, CLASSIC)
    assert sample.real < CLASSIC.bottom_right.real
    assert sample.imag > CLASSIC.bottom_right.imag


def test_center_and_corner_viewports_are_equivalent():
    centered = Viewport.from_center(complex(-0.75, 0.0), complex(2.5, -2.4))
    assert centered == CLASSIC
    for row in range(0, 48, 7):
        for column in range(0, 64, 5):
            assert pixel_to_complex(column, row, 64, 48, centered) == pixel_to_complex(column, row, 64, 48, CLASSIC)


def test_center_viewport_matches_its_own_corners():
    centered = Viewport.from_center(complex(0.3101, -0.0171), complex(0.0173, 0.0093))
    corners = Viewport.from_corners(centered.top_left, centered.bottom_right)
    for row in range(5):
        for column in range(7):
            assert pixel_to_complex(column, row, 7, 5, centered) == pixel_to_complex(column, row, 7, 5, corners)


def test_viewport_properties():
    assert CLASSIC.extent == complex(2.5, -2.4)
    assert CLASSIC.width == 2.5
    assert CLASSIC.height == -2.4
    assert CLASSIC.center == complex(-0.75, 0.0)


def test_scaled_viewport():
    assert Viewport.from_scale(0j, 1.0) == CLASSIC
    zoomed = Viewport.from_scale(complex(1.0, 1.0), 0.5)
    assert zoomed.top_left == complex(1.0 - 2.0 * 0.5, 1.0 + 1.2 * 0.5)
    assert zoomed.bottom_right == complex(1.0 + 0.5 * 0.5, 1.0 - 1.2 * 0.5)


@pytest.mark.parametrize(
    "top_left,bottom_right",
    [
        (complex(0.0, 1.0), complex(0.0, -1.0)),
        (complex(-1.0, 0.5), complex(1.0, 0.5)),
        (complex(-1.0, 1.0), complex(-1.0, 1.0)),
        (complex(math.nan, 1.0), complex(1.0, -1.0)),
        (complex(-1.0, 1.0), complex(math.inf, -1.0)),
        (complex(-1e308, 1.0), complex(1e308, -1.0)),
        (complex(-1.0, 1e308), complex(1.0, -1e308)),
    ],
)
def test_degenerate_viewport_is_rejected(top_left, bottom_right):
    with pytest.raises(InvalidGeometryError):
        Viewport.from_corners(top_left, bottom_right)


def test_zero_extent_is_rejected():
    with pytest.raises(InvalidGeometryError):
        Viewport.from_center(0j, complex(0.0, 1.0))


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5)])
def test_empty_image_is_rejected(width, height):
    with pytest.raises(InvalidGeometryError):
        pixel_to_complex(0, 0, width, height, CLASSIC)


@pytest.mark.parametrize("column,row", [(10, 0), (0, 8), (-1, 0), (0, -1), (10, 8)])
def test_out_of_range_pixel_fails_fast(column, row):
    with pytest.raises(PixelOutOfRangeError):
        pixel_to_complex(column, row, 10, 8, CLASSIC)


def test_sample_grid_matches_pixel_mapping():
    viewport = Viewport.from_center(complex(-0.743643887, 0.131825904), complex(0.000014628, -0.0000109))
    real, imag = sample_grid(7, 5, viewport)
    assert real.shape == (5, 7)
    assert imag.shape == (5, 7)
    for row in range(5):
        for column in range(7):
            sample = pixel_to_complex(column, row, 7, 5, viewport)
            assert real[row, column] == sample.real
            assert imag[row, column] == sample.imag
