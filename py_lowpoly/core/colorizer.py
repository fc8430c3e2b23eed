"""Representative colours for mosaic triangles."""

import math
from enum import Enum
from typing import List, NamedTuple, Sequence, Tuple, Union

import numpy as np
import structlog

from .geometry import Triangle, points_in_triangle
from .image_buffer import ImageBuffer

logger = structlog.get_logger()


class Color(NamedTuple):
    r: int
    g: int
    b: int

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


class ColorMode(str, Enum):
    """How a triangle's colour is sampled from the image."""
    EXACT = "exact"  # average of every covered pixel
    QUICK = "quick"  # single pixel at the centroid


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def triangle_pixels(triangle: Triangle, width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Integer pixel coordinates covered by a triangle.

    Scans the triangle's bounding box, clamped to the buffer, and keeps the
    pixels that pass the boundary-inclusive point-in-triangle test.

    Args:
        triangle: Triangle in pixel coordinates
        width: Buffer width
        height: Buffer height

    Returns:
        (xs, ys) arrays of covered pixels in raster order
    """
    min_x, min_y, max_x, max_y = triangle.bounding_box
    x0 = _clamp(math.floor(min_x), 0, width - 1)
    x1 = _clamp(math.ceil(max_x), 0, width - 1)
    y0 = _clamp(math.floor(min_y), 0, height - 1)
    y1 = _clamp(math.ceil(max_y), 0, height - 1)

    ys, xs = np.mgrid[y0:y1 + 1, x0:x1 + 1]
    inside = points_in_triangle(triangle, xs, ys)
    return xs[inside], ys[inside]


def quick_color(triangle: Triangle, image: ImageBuffer) -> Color:
    """Colour of the pixel nearest the triangle's centroid."""
    cx, cy = triangle.centroid
    x = _clamp(_round_half_up(cx), 0, image.width - 1)
    y = _clamp(_round_half_up(cy), 0, image.height - 1)
    r, g, b, _ = image.pixel(x, y)
    return Color(r, g, b)


def exact_color(triangle: Triangle, image: ImageBuffer) -> Color:
    """
    Mean colour of every pixel the triangle covers.

    Falls back to the centroid pixel when the triangle covers no pixel
    centre (slivers and degenerate triangles).
    """
    xs, ys = triangle_pixels(triangle, image.width, image.height)
    if len(xs) == 0:
        return quick_color(triangle, image)

    mean = image.data[ys, xs, :3].astype(np.float64).mean(axis=0)
    r, g, b = (int(v) for v in np.rint(mean))
    return Color(r, g, b)


def color_of(triangle: Triangle, image: ImageBuffer,
             mode: Union[ColorMode, str] = ColorMode.EXACT) -> Color:
    """
    Representative colour of a triangle sampled from the original image.

    Args:
        triangle: Triangle in pixel coordinates
        image: Unfiltered source image
        mode: "exact" (area average) or "quick" (centroid sample)

    Returns:
        Color(r, g, b)
    """
    if ColorMode(mode) is ColorMode.EXACT:
        return exact_color(triangle, image)
    return quick_color(triangle, image)


def colorize(triangles: Sequence[Triangle], image: ImageBuffer,
             mode: Union[ColorMode, str] = ColorMode.EXACT) -> List[Color]:
    """Colour every triangle, preserving order."""
    mode = ColorMode(mode)
    colors = [color_of(triangle, image, mode) for triangle in triangles]
    logger.info("Triangles colorized", triangles=len(colors), mode=mode.value)
    return colors
