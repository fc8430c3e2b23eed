"""Mosaic generation pipeline tying the core stages together."""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

import structlog

from .colorizer import Color, ColorMode, colorize
from .delaunay import triangulate
from .edges import extract_feature_points
from .geometry import Point, Triangle
from .image_buffer import ImageBuffer
from .sampling import PointSampler, RandomSource

logger = structlog.get_logger()


@dataclass
class MosaicConfig:
    """Parameters for one mosaic generation."""

    blur_kernel_size: int = 5
    edge_kernel_size: int = 5
    threshold: int = 50
    sample_rate: float = 0.03
    color_mode: ColorMode = ColorMode.QUICK
    seed: Optional[int] = None

    def __post_init__(self):
        self.color_mode = ColorMode(self.color_mode)


@dataclass
class Mosaic:
    """Coloured triangulation of an image."""

    width: int
    height: int
    triangles: List[Triangle] = field(default_factory=list)
    colors: List[Color] = field(default_factory=list)
    sampled_points: List[Point] = field(default_factory=list)
    remaining_points: List[Point] = field(default_factory=list)

    def cells(self) -> Iterator[Tuple[Triangle, Color]]:
        return zip(self.triangles, self.colors)

    def __len__(self) -> int:
        return len(self.triangles)


def generate_mosaic(image: ImageBuffer, config: Optional[MosaicConfig] = None,
                    rng: RandomSource = None) -> Mosaic:
    """
    Turn an image into a coloured Delaunay mosaic.

    Every call builds its own buffers and triangulation, so calling again
    with a different sample rate is independent of earlier calls.

    Args:
        image: Original image; also the colour source
        config: Pipeline parameters (defaults to MosaicConfig())
        rng: Seed or numpy Generator for sampling; overrides config.seed

    Returns:
        Mosaic; empty when the image has no edge points
    """
    config = config or MosaicConfig()
    logger.info("Generating mosaic",
                width=image.width, height=image.height,
                sample_rate=config.sample_rate, color_mode=config.color_mode.value)

    # Stage 1: Feature points
    points = extract_feature_points(
        image,
        blur_kernel_size=config.blur_kernel_size,
        edge_kernel_size=config.edge_kernel_size,
        threshold=config.threshold,
    )
    if not points:
        logger.warning("No edge points found, returning empty mosaic")
        return Mosaic(width=image.width, height=image.height)

    # Stage 2: Sampling
    sampler = PointSampler(config.sample_rate, rng if rng is not None else config.seed)
    sampled, remaining = sampler(points)

    # Stage 3: Triangulation
    triangles = triangulate(sampled, image.width, image.height)

    # Stage 4: Colours from the unfiltered image
    colors = colorize(triangles, image, config.color_mode)

    logger.info("Mosaic generated", triangles=len(triangles), sampled=len(sampled))
    return Mosaic(
        width=image.width,
        height=image.height,
        triangles=triangles,
        colors=colors,
        sampled_points=sampled,
        remaining_points=remaining,
    )
