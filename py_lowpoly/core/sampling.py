"""
Uniform random sampling of triangulation sites.

Draws a simple random sample without replacement using a partial
Fisher-Yates shuffle over an index pool, so the input list is never
mutated and the cost stays linear in the number of points.
"""

import math
from typing import List, Sequence, Tuple, TypeVar, Union

import numpy as np
import structlog

logger = structlog.get_logger()

T = TypeVar("T")

RandomSource = Union[None, int, np.random.Generator]


def sample_size(n_points: int, rate: float) -> int:
    """
    Number of points a sample of the given rate draws.

    Args:
        n_points: Size of the population
        rate: Fraction in (0, 1]

    Returns:
        n_points * rate rounded half up, or 0 when rate is out of range
    """
    if n_points <= 0 or not 0 < rate <= 1:
        return 0
    return min(n_points, math.floor(n_points * rate + 0.5))


def sample(points: Sequence[T], rate: float,
           rng: RandomSource = None) -> Tuple[List[T], List[T]]:
    """
    Select round(len(points) * rate) points uniformly without replacement.

    Args:
        points: Candidate points (not modified)
        rate: Fraction of points to select, in (0, 1]
        rng: Seed or numpy Generator; None draws fresh OS entropy

    Returns:
        (sampled, remaining). Sampled points are in draw order, remaining
        points keep their input order.
    """
    n_points = len(points)
    count = sample_size(n_points, rate)
    if count == 0:
        if not 0 < rate <= 1:
            logger.warning("Sample rate out of range", rate=rate)
        return [], list(points)

    generator = np.random.default_rng(rng)
    pool = np.arange(n_points)
    for i in range(count):
        j = int(generator.integers(i, n_points))
        pool[i], pool[j] = pool[j], pool[i]

    chosen = pool[:count].tolist()
    selected = np.zeros(n_points, dtype=bool)
    selected[chosen] = True

    sampled = [points[idx] for idx in chosen]
    remaining = [p for p, taken in zip(points, selected) if not taken]
    logger.info("Points sampled", total=n_points, sampled=len(sampled), rate=rate)
    return sampled, remaining


class PointSampler:
    """Reusable sampler bound to a fixed rate and random source."""

    def __init__(self, rate: float, rng: RandomSource = None):
        self.rate = rate
        self._rng = np.random.default_rng(rng)

    def __call__(self, points: Sequence[T]) -> Tuple[List[T], List[T]]:
        return sample(points, self.rate, self._rng)
