"""
Core mosaic generation functionality.
"""

from .errors import InvalidInputError
from .image_buffer import ImageBuffer
from .convolution import apply_convolution, grayscale, box_blur_kernel, edge_kernel
from .edges import extract_edge_points, extract_feature_points, run_filters
from .sampling import PointSampler, sample
from .geometry import Point, Edge, Triangle, in_circumcircle, point_in_triangle, edges_of
from .delaunay import DelaunayBuilder, triangulate
from .colorizer import Color, ColorMode, color_of, colorize
from .pipeline import Mosaic, MosaicConfig, generate_mosaic

__all__ = ['InvalidInputError', 'ImageBuffer',
           'apply_convolution', 'grayscale', 'box_blur_kernel', 'edge_kernel',
           'extract_edge_points', 'extract_feature_points', 'run_filters',
           'PointSampler', 'sample',
           'Point', 'Edge', 'Triangle', 'in_circumcircle', 'point_in_triangle', 'edges_of',
           'DelaunayBuilder', 'triangulate',
           'Color', 'ColorMode', 'color_of', 'colorize',
           'Mosaic', 'MosaicConfig', 'generate_mosaic']
