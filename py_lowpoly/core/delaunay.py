"""
Incremental Delaunay triangulation (Bowyer-Watson).

The triangulation starts from the image rectangle split along its diagonal
into two triangles. Each inserted point removes every triangle whose
circumcircle strictly contains it and fans new triangles from the point to
the boundary of the resulting cavity. The rectangle corners stay in the
result, so the mosaic covers the whole image.
"""

from typing import Dict, Iterable, List, Sequence, Tuple

import structlog

from .geometry import Edge, Point, Triangle, in_circumcircle

logger = structlog.get_logger()


def bounding_triangles(width: float, height: float) -> List[Triangle]:
    """Two triangles covering [0, width] x [0, height]."""
    top_left = Point(0, 0)
    top_right = Point(width, 0)
    bottom_right = Point(width, height)
    bottom_left = Point(0, height)
    return [
        Triangle(top_left, top_right, bottom_right),
        Triangle(top_left, bottom_right, bottom_left),
    ]


def cavity_boundary(edges: Iterable[Edge]) -> List[Edge]:
    """
    Reduce the edges of the removed triangles to the cavity boundary.

    Edges are toggled in order: an edge seen an even number of times is
    shared by removed triangles and dropped, one seen an odd number of times
    is kept in the orientation it was first seen.

    Args:
        edges: Edges of every removed triangle, in removal order

    Returns:
        Boundary edges in first-seen order
    """
    boundary: Dict[Tuple[Point, Point], Edge] = {}
    for edge in edges:
        key = edge.key
        if key in boundary:
            del boundary[key]
        else:
            boundary[key] = edge
    return list(boundary.values())


class DelaunayBuilder:
    """
    Bowyer-Watson triangulator over a rectangular region.

    Each builder owns its triangulation; build a new one per image.
    """

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self._triangles: List[Triangle] = bounding_triangles(width, height)
        self.inserted = 0

    @property
    def triangles(self) -> List[Triangle]:
        return list(self._triangles)

    def insert(self, point: Sequence[float]) -> List[Triangle]:
        """
        Insert one point and retriangulate its cavity.

        Args:
            point: (x, y) inside the builder's rectangle

        Returns:
            The triangles created for this point
        """
        point = Point(*point)

        good: List[Triangle] = []
        bad_edges: List[Edge] = []
        for triangle in self._triangles:
            if in_circumcircle(triangle, point):
                bad_edges.extend(triangle.edges)
            else:
                good.append(triangle)

        created = [Triangle(edge.p, edge.q, point) for edge in cavity_boundary(bad_edges)]
        good.extend(created)
        self._triangles = good
        self.inserted += 1
        return created

    def insert_all(self, points: Iterable[Sequence[float]]) -> "DelaunayBuilder":
        for point in points:
            self.insert(point)
        return self


def triangulate(points: Iterable[Sequence[float]], width: float,
                height: float) -> List[Triangle]:
    """
    Delaunay-triangulate points inside the [0, width] x [0, height] rectangle.

    Args:
        points: Sites to insert, in insertion order
        width: Rectangle width
        height: Rectangle height

    Returns:
        Triangles of the final triangulation, rectangle corners included
    """
    builder = DelaunayBuilder(width, height).insert_all(points)
    triangles = builder.triangles
    logger.info("Triangulation built", points=builder.inserted, triangles=len(triangles))
    return triangles
