"""RANSAC fitting of 2D segments to point sets.

Provides:
    - Segment2D: fitted segment with mean squared error and validity flag
    - fit_segment_2d(): RANSAC estimate over any point sequence
    - partition_inliers_2d(): split points by distance to a segment
    - fit_segment_2d_from_config(): same, driven by SegmentFittingParams

Algorithm (per iteration):
    1. Draw two distinct points, build the line through them
    2. Sample n_samples points without replacement (Floyd's algorithm) and
       accumulate their squared distances to the line, each capped at the
       squared inlier distance; bail out once the sum exceeds the best one
    3. Keep the line with the smallest sum; its extremities are the extreme
       projections of the sampled inliers and the two drawn points

Typical input is a traced polyline; pass get_coords to choose the axis
order, e.g. lambda rc: (rc[1], rc[0]) for (x, y) from (row, col).

Randomness comes from numpy.random.Generator. Pass a seed or a Generator
through rng for reproducible fits; None draws fresh OS entropy.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..utils import geometry, validators
from ..utils.geometry import Point2D

logger = logging.getLogger(__name__)


@dataclass
class Segment2D:
    """2D segment estimate.

    Attributes
    ----------
    begin, end : Point2D
        Extremities (x, y)
    mse : float
        Mean squared (capped) distance of the sampled points to the line
    is_valid : bool
        False when no estimate could be made
    """
    begin: Point2D = (np.nan, np.nan)
    end: Point2D = (np.nan, np.nan)
    mse: float = np.nan
    is_valid: bool = False


def _default_coords(point: Any) -> Point2D:
    return (float(point[0]), float(point[1]))


def _extremities(points: List[Point2D], vertical: bool) -> Tuple[Point2D, Point2D]:
    """First smallest and last largest point along x (y for vertical lines)."""
    axis = 1 if vertical else 0
    keys = np.array([p[axis] for p in points])
    i_min = int(np.argmin(keys))
    i_max = len(keys) - 1 - int(np.argmax(keys[::-1]))
    return points[i_min], points[i_max]


def fit_segment_2d(
    points: Sequence[Any],
    n_iterations: int,
    n_samples: int = 0,
    max_inliers_distance: float = 0.0,
    get_coords: Optional[Callable[[Any], Point2D]] = None,
    rng: Union[None, int, np.random.Generator] = None
) -> Segment2D:
    """Fit a 2D segment to points with RANSAC.

    Parameters
    ----------
    points : Sequence[Any]
        Points, any type readable by get_coords
    n_iterations : int
        RANSAC iterations; 0 is promoted to 1 with a warning
    n_samples : int
        Points sampled to score each candidate; 0 for all
    max_inliers_distance : float
        Distance above which points count as outliers; 0 for unconstrained
    get_coords : Callable[[Any], Point2D], optional
        Returns (x, y) of a point; defaults to (p[0], p[1])
    rng : None, int or np.random.Generator
        Random source or seed

    Returns
    -------
    Segment2D
        Best estimate; is_valid is False with fewer than 2 points or when
        every drawn pair coincides
    """
    get_coords = get_coords or _default_coords
    coords = [tuple(map(float, get_coords(p))) for p in points]
    n_points = len(coords)

    if n_points < 2:
        logger.warning("Points are not enough to fit segment: got %d, need 2", n_points)
        return Segment2D()

    if n_iterations == 0:
        logger.warning("Number of iterations is 0! Defaulting to 1... Estimate is likely inaccurate!")
        n_iterations = 1

    n_samples = n_points if n_samples == 0 else min(n_samples, n_points)
    rng = np.random.default_rng(rng)

    max_sq_distance = max_inliers_distance ** 2 if max_inliers_distance != 0 else np.inf
    best = Segment2D()
    smallest_sum = np.inf

    for _ in range(n_iterations):
        i_a = int(rng.integers(n_points))
        i_b = i_a
        while i_b == i_a:
            i_b = int(rng.integers(n_points))

        point_a, point_b = coords[i_a], coords[i_b]
        slope = geometry.compute_slope(point_a, point_b)
        if np.isnan(slope):
            continue

        offset = geometry.line_offset(point_a, slope)
        segment_points = [point_a, point_b]
        sum_sq = 0.0

        # Floyd's sampling without replacement
        n = n_points - n_samples
        was_sampled = np.zeros(n_points, dtype=bool)

        while n < n_points and sum_sq < smallest_sum:
            i = int(rng.integers(0, n, endpoint=True))
            if was_sampled[i]:
                i = n
            was_sampled[i] = True
            n += 1

            point = coords[i]
            projected = geometry.project_point_on_line(point, slope, offset)
            sq_distance = geometry.squared_distance_to_point(point, projected)
            sum_sq += min(sq_distance, max_sq_distance)

            if sq_distance <= max_sq_distance:
                segment_points.append(projected)

        if sum_sq >= smallest_sum:
            continue

        smallest_sum = sum_sq
        begin, end = _extremities(segment_points, vertical=bool(np.isinf(slope)))
        best = Segment2D(begin, end, sum_sq / n_samples, True)

    return best


def partition_inliers_2d(
    points: Sequence[Any],
    segment: Segment2D,
    max_inliers_distance: float,
    get_coords: Optional[Callable[[Any], Point2D]] = None
) -> Tuple[List[Any], List[Any]]:
    """Split points into inliers and outliers of a segment.

    Parameters
    ----------
    points : Sequence[Any]
        Points, any type readable by get_coords
    segment : Segment2D
        Reference segment
    max_inliers_distance : float
        Points strictly closer than this to the segment are inliers;
        0 makes every point an inlier
    get_coords : Callable[[Any], Point2D], optional
        Returns (x, y) of a point; defaults to (p[0], p[1])

    Returns
    -------
    Tuple[List[Any], List[Any]]
        (inliers, outliers), each in input order; a degenerate segment
        makes every point an outlier
    """
    points = list(points)
    if max_inliers_distance == 0:
        return points, []

    if np.isnan(geometry.compute_slope(segment.begin, segment.end)):
        return [], points

    get_coords = get_coords or _default_coords
    max_sq_distance = max_inliers_distance ** 2

    inliers, outliers = [], []
    for point in points:
        sq_distance = geometry.squared_distance_to_segment(
            get_coords(point), segment.begin, segment.end
        )
        (inliers if sq_distance < max_sq_distance else outliers).append(point)

    return inliers, outliers


def fit_segment_2d_from_config(
    points: Sequence[Any],
    params: validators.SegmentFittingParams,
    get_coords: Optional[Callable[[Any], Point2D]] = None
) -> Segment2D:
    """Fit a segment with parameters from a validated config section."""
    return fit_segment_2d(
        points,
        params.n_iterations,
        n_samples=params.n_samples,
        max_inliers_distance=params.max_inliers_distance,
        get_coords=get_coords,
        rng=params.seed,
    )
