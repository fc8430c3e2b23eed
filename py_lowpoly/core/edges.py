"""Edge point extraction from filtered images."""

from dataclasses import dataclass
from typing import List

import numpy as np
import structlog

from .convolution import blur, detect_edges, grayscale
from .geometry import Point
from .image_buffer import ImageBuffer

logger = structlog.get_logger()

DEFAULT_THRESHOLD = 50


@dataclass(frozen=True)
class FilterStages:
    """Intermediate buffers of the feature-extraction filter chain."""
    grayscale: ImageBuffer
    blurred: ImageBuffer
    edges: ImageBuffer


def extract_edge_points(image: ImageBuffer, threshold: int = DEFAULT_THRESHOLD) -> List[Point]:
    """
    Collect every pixel whose red channel is at least the threshold.

    Args:
        image: Edge-filtered buffer
        threshold: Minimum red value for a pixel to count as an edge

    Returns:
        Points in raster order (row by row, left to right)
    """
    # np.nonzero walks a C-ordered array row-major
    ys, xs = np.nonzero(image.red >= threshold)
    return [Point(x, y) for x, y in zip(xs.tolist(), ys.tolist())]


def run_filters(image: ImageBuffer, blur_kernel_size: int = 5,
                edge_kernel_size: int = 5) -> FilterStages:
    """Run grayscale -> blur -> edge and keep every intermediate buffer."""
    gray = grayscale(image)
    blurred = blur(gray, blur_kernel_size)
    edges = detect_edges(blurred, edge_kernel_size)
    return FilterStages(grayscale=gray, blurred=blurred, edges=edges)


def extract_feature_points(image: ImageBuffer, blur_kernel_size: int = 5,
                           edge_kernel_size: int = 5,
                           threshold: int = DEFAULT_THRESHOLD) -> List[Point]:
    """
    Find salient edge pixels of an image.

    Args:
        image: Original image
        blur_kernel_size: Side of the box blur kernel (odd)
        edge_kernel_size: Side of the edge kernel (odd)
        threshold: Red-channel threshold on the edge buffer

    Returns:
        Edge points in raster order; empty for a flat image
    """
    stages = run_filters(image, blur_kernel_size, edge_kernel_size)
    points = extract_edge_points(stages.edges, threshold)
    logger.info("Feature points extracted",
                width=image.width, height=image.height, points=len(points))
    return points
