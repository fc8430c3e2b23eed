"""Tests for triangle colouring."""

import pytest
import numpy as np

from py_lowpoly.core.colorizer import (
    Color, ColorMode, color_of, colorize, exact_color, quick_color, triangle_pixels
)
from py_lowpoly.core.geometry import Point, Triangle, point_in_triangle
from py_lowpoly.core.image_buffer import ImageBuffer


def _split_image(width=20, height=20):
    """Red left half, blue right half."""
    data = np.zeros((height, width, 3), dtype=np.uint8)
    data[:, : width // 2] = (255, 0, 0)
    data[:, width // 2:] = (0, 0, 255)
    return ImageBuffer.from_array(data)


class TestTrianglePixels:
    """Test the pixel-membership scan."""

    def test_agrees_with_point_in_triangle(self):
        """Test that the scan keeps exactly the pixels point_in_triangle accepts."""
        triangle = Triangle(Point(2, 1), Point(14, 5), Point(6, 13))
        xs, ys = triangle_pixels(triangle, 20, 20)
        scanned = set(zip(xs.tolist(), ys.tolist()))

        expected = {
            (x, y) for y in range(0, 15) for x in range(0, 15)
            if point_in_triangle(triangle, (x, y))
        }
        assert scanned == expected

    def test_vertex_neighbours(self):
        """Test interior neighbours of each vertex are scanned."""
        triangle = Triangle(Point(0, 0), Point(10, 0), Point(0, 10))
        xs, ys = triangle_pixels(triangle, 20, 20)
        scanned = set(zip(xs.tolist(), ys.tolist()))

        for neighbour in [(1, 1), (8, 1), (1, 8)]:
            assert point_in_triangle(triangle, neighbour)
            assert neighbour in scanned
        assert (6, 6) not in scanned

    def test_clamped_to_buffer(self):
        """Test that coordinates outside the buffer are never returned."""
        triangle = Triangle(Point(0, 0), Point(20, 0), Point(20, 20))
        xs, ys = triangle_pixels(triangle, 20, 20)

        assert xs.max() == 19 and ys.max() == 19
        assert xs.min() >= 0 and ys.min() >= 0


class TestQuickColor:
    """Test centroid sampling."""

    def test_centroid_pixel(self):
        """Test that the pixel nearest the centroid is used."""
        image = _split_image()
        left = Triangle(Point(0, 0), Point(6, 0), Point(0, 18))
        right = Triangle(Point(19, 0), Point(13, 19), Point(19, 19))

        assert quick_color(left, image) == Color(255, 0, 0)
        assert quick_color(right, image) == Color(0, 0, 255)

    def test_rounds_half_up(self):
        """Test that centroid .5 rounds to the higher pixel."""
        data = np.zeros((3, 3, 3), dtype=np.uint8)
        data[1, 2] = (9, 9, 9)
        image = ImageBuffer.from_array(data)
        # centroid (1.5, 1.0)
        triangle = Triangle(Point(0, 0), Point(3, 1), Point(1.5, 2))

        assert quick_color(triangle, image) == Color(9, 9, 9)

    def test_corner_triangle_clamped(self):
        """Test that centroids at the image border are clamped."""
        image = ImageBuffer.filled(4, 4, (7, 8, 9))
        triangle = Triangle(Point(4, 4), Point(4, 4.5), Point(4.5, 4))

        assert quick_color(triangle, image) == Color(7, 8, 9)


class TestExactColor:
    """Test area-averaged colours."""

    def test_uniform_region(self):
        """Test that a triangle over one colour returns that colour."""
        image = _split_image()
        triangle = Triangle(Point(0, 0), Point(8, 0), Point(0, 19))

        assert exact_color(triangle, image) == Color(255, 0, 0)

    def test_average_across_regions(self):
        """Test averaging over a triangle straddling both halves."""
        image = _split_image()
        triangle = Triangle(Point(0, 0), Point(19, 0), Point(19, 19))
        xs, _ = triangle_pixels(triangle, 20, 20)
        red_share = np.mean(xs < 10)

        color = exact_color(triangle, image)
        assert color.r == round(255 * red_share)
        assert color.b == round(255 * (1 - red_share))
        assert color.g == 0

    def test_sliver_falls_back_to_quick(self):
        """Test that a triangle covering no pixel centre uses the centroid."""
        image = ImageBuffer.filled(5, 5, (40, 50, 60))
        sliver = Triangle(Point(1.1, 1.1), Point(1.4, 1.2), Point(1.2, 1.4))

        assert exact_color(sliver, image) == Color(40, 50, 60)

    def test_degenerate_triangle(self):
        """Test that collinear triangles still get a colour."""
        image = ImageBuffer.filled(5, 5, (1, 2, 3))
        flat = Triangle(Point(0, 2), Point(2, 2), Point(4, 2))

        assert flat.is_degenerate
        assert exact_color(flat, image) == Color(1, 2, 3)


class TestColorOf:
    """Test mode dispatch."""

    def test_modes(self):
        """Test both modes agree on a uniform image."""
        image = ImageBuffer.filled(10, 10, (11, 22, 33))
        triangle = Triangle(Point(0, 0), Point(9, 0), Point(0, 9))

        assert color_of(triangle, image, ColorMode.EXACT) == Color(11, 22, 33)
        assert color_of(triangle, image, "quick") == Color(11, 22, 33)

    def test_unknown_mode(self):
        """Test that an unknown mode is rejected."""
        image = ImageBuffer.filled(2, 2, (0, 0, 0))
        triangle = Triangle(Point(0, 0), Point(1, 0), Point(0, 1))
        with pytest.raises(ValueError):
            color_of(triangle, image, "fancy")

    def test_colorize_preserves_order(self):
        """Test that colours line up with triangles."""
        image = _split_image()
        triangles = [
            Triangle(Point(19, 0), Point(13, 19), Point(19, 19)),
            Triangle(Point(0, 0), Point(6, 0), Point(0, 18)),
        ]

        assert colorize(triangles, image, "exact") == [Color(0, 0, 255), Color(255, 0, 0)]

    def test_hex(self):
        """Test hex formatting for renderers."""
        assert Color(255, 0, 16).to_hex() == "#ff0010"
