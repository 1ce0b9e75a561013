"""Point/line geometry helpers and polyline simplification.

Provides:
    - Fuzzy float and point comparisons
    - Line slope, point projection on a line (slope/offset or two-point form)
    - Squared distances point-to-point and point-to-segment
    - Ramer–Douglas–Peucker polyline simplification (shapely)

Used by:
    - Segment fitting: RANSAC candidate lines, inlier partitioning
    - Tracer: optional simplification of traced polylines
    - Tests: geometric expectations

Points are (x, y) float pairs. Tracer output is (row, col); callers pick the
axis order through a coordinate getter where a function accepts one.

Vertical lines have an infinite slope; their "offset" is the x intercept
instead of the y intercept.
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np
from shapely.geometry import LineString

Point2D = Tuple[float, float]


def _default_coords(point: Any) -> Point2D:
    return (float(point[0]), float(point[1]))


def fuzzy_compare(a: float, b: float, eps: float = 1e-9) -> bool:
    """Return True if |a - b| < eps."""
    return abs(a - b) < eps


def points_equal(point_a: Point2D, point_b: Point2D) -> bool:
    """Return True if both coordinates are approximately equal."""
    return fuzzy_compare(point_a[0], point_b[0]) and fuzzy_compare(point_a[1], point_b[1])


def compute_slope(point_a: Point2D, point_b: Point2D) -> float:
    """Compute the slope of the line through two points.

    Parameters
    ----------
    point_a, point_b : Point2D
        Points (x, y)

    Returns
    -------
    float
        dy / dx; nan if the points coincide, ±inf if they share the same x
    """
    if points_equal(point_a, point_b):
        return np.nan

    dx = point_b[0] - point_a[0]
    dy = point_b[1] - point_a[1]
    if dx == 0:
        return np.inf if dy > 0 else -np.inf
    return dy / dx


def line_offset(point: Point2D, slope: float) -> float:
    """Intercept of the line with given slope through point.

    y intercept for finite slopes, x intercept for vertical lines.
    """
    if np.isinf(slope):
        return point[0]
    return point[1] - point[0] * slope


def project_point_on_line(point: Point2D, slope: float, offset: float) -> Point2D:
    """Project a point orthogonally on the line y = slope * x + offset.

    Parameters
    ----------
    point : Point2D
        Point to project
    slope : float
        Line slope; ±inf for vertical lines
    offset : float
        y intercept, or x intercept if the slope is infinite

    Returns
    -------
    Point2D
        Foot of the perpendicular
    """
    if fuzzy_compare(slope, 0.0):
        return (point[0], offset)
    if np.isinf(slope):
        return (offset, point[1])

    counter_slope = -1.0 / slope
    counter_offset = point[1] - point[0] * counter_slope
    x = (offset - counter_offset) / (counter_slope - slope)
    y = counter_slope * x + counter_offset
    return (x, y)


def project_point_on_segment_line(
    point: Point2D,
    point_a: Point2D,
    point_b: Point2D
) -> Point2D:
    """Project a point on the infinite line through point_a and point_b.

    Returns (nan, nan) when point_a and point_b coincide.
    """
    if points_equal(point_a, point_b):
        return (np.nan, np.nan)
    if points_equal(point, point_a):
        return point_a
    if points_equal(point, point_b):
        return point_b

    slope = compute_slope(point_a, point_b)
    return project_point_on_line(point, slope, line_offset(point_a, slope))


def squared_distance_to_point(point_a: Point2D, point_b: Point2D) -> float:
    """Squared Euclidean distance between two points."""
    return (point_a[0] - point_b[0]) ** 2 + (point_a[1] - point_b[1]) ** 2


def squared_distance_to_segment(
    point: Point2D,
    point_a: Point2D,
    point_b: Point2D
) -> float:
    """Squared distance between a point and the segment [point_a, point_b].

    Parameters
    ----------
    point : Point2D
        Query point
    point_a, point_b : Point2D
        Segment extremities

    Returns
    -------
    float
        Squared distance to the perpendicular foot if it falls strictly
        inside the segment, else to the closest extremity

    Notes
    -----
    The foot position is tested with the projection parameter t along
    a → b, so vertical and horizontal segments behave like any other.
    A degenerate segment (a == b) is treated as the point a.
    """
    dx = point_b[0] - point_a[0]
    dy = point_b[1] - point_a[1]
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return squared_distance_to_point(point, point_a)

    t = ((point[0] - point_a[0]) * dx + (point[1] - point_a[1]) * dy) / length_sq
    if 0.0 < t < 1.0:
        foot = (point_a[0] + t * dx, point_a[1] + t * dy)
        return squared_distance_to_point(point, foot)

    return min(
        squared_distance_to_point(point, point_a),
        squared_distance_to_point(point, point_b)
    )


def simplify_polyline(
    points: Sequence[Any],
    epsilon: float,
    get_coords: Optional[Callable[[Any], Point2D]] = None
) -> List[Any]:
    """Simplify a polyline with the Ramer–Douglas–Peucker algorithm.

    Parameters
    ----------
    points : Sequence[Any]
        Polyline vertices, any type readable by get_coords
    epsilon : float
        Points closer than epsilon to the simplified polyline are discarded;
        epsilon ≤ 0 disables simplification
    get_coords : Callable[[Any], Point2D], optional
        Returns the (x, y) coordinates of a vertex; defaults to (p[0], p[1])

    Returns
    -------
    List[Any]
        Kept vertices (original objects) in their original order; first and
        last vertices are always kept

    Notes
    -----
    Polylines with fewer than 3 vertices or with coincident first and last
    vertices are returned unchanged.
    """
    points = list(points)
    get_coords = get_coords or _default_coords

    if len(points) < 3 or epsilon <= 0:
        return points

    coords = [get_coords(p) for p in points]
    if points_equal(coords[0], coords[-1]):
        return points

    kept = list(LineString(coords).simplify(epsilon, preserve_topology=False).coords)

    # kept is an ordered subsequence of coords: walk both to recover the vertices
    result = []
    j = 0
    for point, xy in zip(points, coords):
        if j < len(kept) and points_equal(xy, kept[j]):
            result.append(point)
            j += 1

    return result
