"""
2D geometry primitives for the Delaunay triangulation.

Points, unordered edges and triangles with cached circumcircles, plus the
predicates the triangulator and colorizer rely on.
"""

import math
from dataclasses import dataclass, field
from typing import NamedTuple, Sequence, Tuple

import numpy as np

from .errors import InvalidInputError


class Point(NamedTuple):
    """2D point. Equality is exact coordinate match."""
    x: float
    y: float

    def eq(self, other: "Point", tolerance: float = 0.0) -> bool:
        """Compare coordinates within an absolute tolerance."""
        return abs(other[0] - self.x) <= tolerance and abs(other[1] - self.y) <= tolerance


class Edge(NamedTuple):
    """Unordered segment between two points."""
    p: Point
    q: Point

    @property
    def key(self) -> Tuple[Point, Point]:
        """Order-independent key: equal for (p, q) and (q, p)."""
        return (self.p, self.q) if self.p <= self.q else (self.q, self.p)

    def same_as(self, other: "Edge") -> bool:
        return self.key == other.key


def circumcenter(a: Sequence[float], b: Sequence[float],
                 c: Sequence[float]) -> Tuple[float, float]:
    """
    Intersect the perpendicular bisectors of ab and ac.

    Args:
        a, b, c: Triangle vertices

    Returns:
        (x, y) circumcenter; (nan, nan) when the vertices are collinear
    """
    abx, aby = b[0] - a[0], b[1] - a[1]
    acx, acy = c[0] - a[0], c[1] - a[1]
    det = 2 * (abx * acy - aby * acx)
    if det == 0:
        return math.nan, math.nan

    t = b[0] * b[0] + b[1] * b[1] - a[0] * a[0] - a[1] * a[1]
    u = c[0] * c[0] + c[1] * c[1] - a[0] * a[0] - a[1] * a[1]
    return (acy * t - aby * u) / det, (abx * u - acx * t) / det


def orientation(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> float:
    """Twice the signed area of abc; positive when counter-clockwise in y-up axes."""
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


@dataclass(frozen=True)
class Triangle:
    """
    Immutable triangle with its circumcircle computed at construction.

    A triangle with collinear vertices has a NaN circumcenter and radius;
    such a triangle never reports a point inside its circumcircle.

    Use `Triangle.from_vertices` when the vertex count comes from outside
    data; it raises InvalidInputError instead of the constructor's TypeError.
    """
    a: Point
    b: Point
    c: Point
    circumcenter: Tuple[float, float] = field(init=False, compare=False, repr=False)
    radius_sq: float = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        a, b, c = Point(*self.a), Point(*self.b), Point(*self.c)
        object.__setattr__(self, "a", a)
        object.__setattr__(self, "b", b)
        object.__setattr__(self, "c", c)

        cx, cy = circumcenter(a, b, c)
        dx, dy = a.x - cx, a.y - cy
        object.__setattr__(self, "circumcenter", (cx, cy))
        object.__setattr__(self, "radius_sq", dx * dx + dy * dy)

    @classmethod
    def from_vertices(cls, vertices: Sequence[Sequence[float]]) -> "Triangle":
        """Build a triangle from exactly three vertices."""
        if len(vertices) != 3:
            raise InvalidInputError(f"A triangle needs 3 vertices, got {len(vertices)}")
        return cls(*vertices)

    @property
    def vertices(self) -> Tuple[Point, Point, Point]:
        return self.a, self.b, self.c

    @property
    def is_degenerate(self) -> bool:
        return math.isnan(self.radius_sq)

    @property
    def edges(self) -> Tuple[Edge, Edge, Edge]:
        return Edge(self.a, self.b), Edge(self.b, self.c), Edge(self.c, self.a)

    @property
    def centroid(self) -> Tuple[float, float]:
        return ((self.a.x + self.b.x + self.c.x) / 3,
                (self.a.y + self.b.y + self.c.y) / 3)

    @property
    def area(self) -> float:
        return abs(orientation(self.a, self.b, self.c)) / 2

    @property
    def bounding_box(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y)"""
        xs = (self.a.x, self.b.x, self.c.x)
        ys = (self.a.y, self.b.y, self.c.y)
        return min(xs), min(ys), max(xs), max(ys)


def edges_of(triangle: Triangle) -> Tuple[Edge, Edge, Edge]:
    return triangle.edges


def centroid(triangle: Triangle) -> Tuple[float, float]:
    return triangle.centroid


def area(triangle: Triangle) -> float:
    return triangle.area


def incircle(a: Sequence[float], b: Sequence[float], c: Sequence[float],
             d: Sequence[float]) -> float:
    """
    Incircle determinant of d against the circle through a, b, c.

    Same sign as orientation(a, b, c) when d is strictly inside the circle,
    zero when d is on it. Exact for integer coordinates up to ~1e4.
    """
    adx, ady = a[0] - d[0], a[1] - d[1]
    bdx, bdy = b[0] - d[0], b[1] - d[1]
    cdx, cdy = c[0] - d[0], c[1] - d[1]
    return ((adx * adx + ady * ady) * (bdx * cdy - cdx * bdy)
            + (bdx * bdx + bdy * bdy) * (cdx * ady - adx * cdy)
            + (cdx * cdx + cdy * cdy) * (adx * bdy - bdx * ady))


def in_circumcircle(triangle: Triangle, point: Sequence[float]) -> bool:
    """
    Test whether a point lies strictly inside the triangle's circumcircle.

    Equivalent to comparing the squared distance to the circumcenter with
    radius_sq, but evaluated with the incircle determinant so co-circular
    pixel coordinates are classified consistently. Points exactly on the
    circle are outside; degenerate triangles contain nothing.
    """
    if triangle.is_degenerate:
        return False
    det = incircle(triangle.a, triangle.b, triangle.c, point)
    if orientation(triangle.a, triangle.b, triangle.c) > 0:
        return det > 0
    return det < 0


def point_in_triangle(triangle: Triangle, point: Sequence[float]) -> bool:
    """
    Sign-consistent point-in-triangle test.

    Boundary inclusive: points on an edge or at a vertex count as inside.
    """
    d1 = orientation(triangle.a, triangle.b, point)
    d2 = orientation(triangle.b, triangle.c, point)
    d3 = orientation(triangle.c, triangle.a, point)
    has_neg = d1 < 0 or d2 < 0 or d3 < 0
    has_pos = d1 > 0 or d2 > 0 or d3 > 0
    return not (has_neg and has_pos)


def points_in_triangle(triangle: Triangle, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """
    Vectorised form of point_in_triangle.

    Args:
        triangle: Triangle to test against
        xs, ys: Arrays of point coordinates (same shape)

    Returns:
        Boolean array, True where the point is inside or on the boundary
    """
    a, b, c = triangle.a, triangle.b, triangle.c
    d1 = (b.x - a.x) * (ys - a.y) - (b.y - a.y) * (xs - a.x)
    d2 = (c.x - b.x) * (ys - b.y) - (c.y - b.y) * (xs - b.x)
    d3 = (a.x - c.x) * (ys - c.y) - (a.y - c.y) * (xs - c.x)
    has_neg = (d1 < 0) | (d2 < 0) | (d3 < 0)
    has_pos = (d1 > 0) | (d2 > 0) | (d3 > 0)
    return ~(has_neg & has_pos)
