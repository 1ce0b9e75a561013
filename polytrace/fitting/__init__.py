"""Post-processing of traced polylines into floating-point vector segments.

Modules:
    - segment_fitting: RANSAC 2D segment fitting and inlier partitioning

Polyline simplification lives in polytrace.utils.geometry.
"""

from .segment_fitting import (
    Segment2D,
    fit_segment_2d,
    fit_segment_2d_from_config,
    partition_inliers_2d,
)

__all__ = [
    'Segment2D',
    'fit_segment_2d',
    'fit_segment_2d_from_config',
    'partition_inliers_2d',
]
