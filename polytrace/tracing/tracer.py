"""Recursive skeleton tracer: binary raster → pixel polylines.

Pipeline:
    1. Build a BitImage from caller pixels and an on/off predicate
    2. Optionally thin it to a 1-px skeleton (Zhang–Suen)
    3. Recursively split the image into overlapping sections on the line
       crossing the fewest "on" pixels, closest to the center
    4. Fit segments in terminal sections from frame entrances to the
       estimated junction
    5. Merge sibling fragments on shared endpoint pixels while unwinding
    6. Convert pixel references to (row, col) coordinates

Recursion state is the immutable (Region, depth) pair passed down each
call. Terminal sections are:
    - empty sections (no "on" pixel): pruned
    - sections at max depth, or with both sides below min_split_size:
      fitted directly

Degenerate inputs (images smaller than 3x3) are logged and yield no
polylines; precondition violations raise.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from ..utils import geometry, profiler, validators
from .bit_image import BitImage, Region
from .merging import Chain, merge_polylines
from .segments import fit_segments
from .splitting import find_best_split, split_region
from .thinning import thin_image

logger = logging.getLogger(__name__)

# Smallest image (and section) size the frame walk supports
MIN_IMAGE_SIZE = 3

Polyline = List[Tuple[int, int]]


@dataclass(frozen=True)
class TraceParams:
    """Resolved recursion limits and heuristics for one tracing call."""
    min_split_size: int
    max_recursions: int
    split_margin: int
    junction_min_on_pixels: int


def _resolve_params(
    min_section_size: int,
    max_recursions: int,
    heuristics: Optional[validators.TracerHeuristics]
) -> TraceParams:
    if min_section_size < 0:
        raise ValueError(f"min_section_size must be non-negative, got {min_section_size}")
    if max_recursions < 0:
        raise ValueError(f"max_recursions must be non-negative, got {max_recursions}")

    heuristics = heuristics or validators.TracerHeuristics()
    min_section_size = max(min_section_size, MIN_IMAGE_SIZE)

    return TraceParams(
        min_split_size=max(min_section_size, heuristics.min_split_size),
        max_recursions=max_recursions if max_recursions != 0 else sys.maxsize,
        split_margin=heuristics.split_margin,
        junction_min_on_pixels=heuristics.junction_min_on_pixels,
    )


def trace_section(
    image: BitImage,
    region: Region,
    depth: int,
    params: TraceParams
) -> List[Chain]:
    """Trace the skeleton of one section recursively.

    Parameters
    ----------
    image : BitImage
        Thinned (or already thin) image, read-only here
    region : Region
        Section to trace
    depth : int
        Current split depth
    params : TraceParams
        Recursion limits and heuristics

    Returns
    -------
    List[Chain]
        Pixel-reference chains covering the section
    """
    if image.is_empty(region):
        return []

    if depth >= params.max_recursions or (
        region.rows < params.min_split_size and region.cols < params.min_split_size
    ):
        return fit_segments(image, region, params.junction_min_on_pixels)

    split = find_best_split(image, region, params.split_margin)
    first, second = split_region(region, split)

    return merge_polylines(
        trace_section(image, first, depth + 1, params),
        trace_section(image, second, depth + 1, params),
    )


def trace_skeleton(
    image: BitImage,
    min_section_size: int = 3,
    max_recursions: int = 0,
    do_thinning: bool = True,
    heuristics: Optional[validators.TracerHeuristics] = None
) -> List[Chain]:
    """Trace the skeleton of a whole BitImage into pixel-reference chains.

    Parameters
    ----------
    image : BitImage
        Image to trace; thinned in place when do_thinning is set
    min_section_size : int
        Smallest section size, floored to 3; larger values give coarser
        polylines
    max_recursions : int
        Maximum split depth; 0 for unbounded
    do_thinning : bool
        Thin the image first; unnecessary for 1-px strokes
    heuristics : TracerHeuristics, optional
        Splitter and junction constants; defaults when None

    Returns
    -------
    List[Chain]
        Chains of pixel references into image; empty if the image is
        smaller than 3x3

    Raises
    ------
    ValueError
        If min_section_size or max_recursions is negative
    """
    params = _resolve_params(min_section_size, max_recursions, heuristics)

    if image.rows < MIN_IMAGE_SIZE or image.cols < MIN_IMAGE_SIZE:
        logger.warning(
            "Impossible to fit polylines to a %dx%d image, minimum size is %dx%d",
            image.rows, image.cols, MIN_IMAGE_SIZE, MIN_IMAGE_SIZE
        )
        return []

    sink = profiler.log_sink(logger)

    if do_thinning:
        with profiler.timer("thinning", sink=sink):
            thin_image(image)

    with profiler.timer("tracing", sink=sink):
        chains = trace_section(image, Region(0, 0, image.rows, image.cols), 0, params)

    logger.debug("Traced %d chains on %r", len(chains), image)
    return chains


def fit_polylines(
    pixel_data: Any,
    rows: int,
    cols: int,
    is_pixel_on: Callable[[Any], bool],
    min_section_size: int = 3,
    max_recursions: int = 0,
    do_thinning: bool = True,
    heuristics: Optional[validators.TracerHeuristics] = None
) -> List[Polyline]:
    """Fit polylines to raw image data by tracing its topological skeleton.

    Parameters
    ----------
    pixel_data : Any
        Row-major pixels, rows * cols of them (flat sequence, or array of
        shape (rows * cols, ...) or (rows, cols, ...)); never modified
    rows, cols : int
        Image size
    is_pixel_on : Callable[[Any], bool]
        Predicate returning True for "on" pixels
    min_section_size : int
        Smallest section size, floored to 3
    max_recursions : int
        Maximum split depth; 0 for unbounded
    do_thinning : bool
        Thin the image before tracing
    heuristics : TracerHeuristics, optional
        Splitter and junction constants

    Returns
    -------
    List[Polyline]
        Polylines as lists of (row, col); first and last entries are the
        chain endpoints

    Raises
    ------
    TypeError
        If is_pixel_on is not callable
    ValueError
        If pixel_data does not hold rows * cols pixels, or a size
        parameter is negative

    Examples
    --------
    >>> pixels = [0] * 25
    >>> for i in range(5):
    ...     pixels[i * 5 + i] = 1
    >>> fit_polylines(pixels, 5, 5, bool)
    [[(4, 4), (2, 2), (0, 0)]]
    """
    image = BitImage.from_pixels(pixel_data, rows, cols, is_pixel_on)
    chains = trace_skeleton(image, min_section_size, max_recursions, do_thinning, heuristics)
    return [[image.coords(ref) for ref in chain] for chain in chains]


def fit_polylines_from_config(
    pixel_data: Any,
    rows: int,
    cols: int,
    is_pixel_on: Callable[[Any], bool],
    cfg: validators.TracerConfigV1
) -> List[Polyline]:
    """Fit polylines with settings from a validated tracer config.

    Applies Douglas–Peucker simplification to every polyline when
    cfg.simplify_epsilon > 0.

    Parameters
    ----------
    pixel_data, rows, cols, is_pixel_on
        As for fit_polylines()
    cfg : TracerConfigV1
        Tracer configuration (see validators.load_tracer_config)

    Returns
    -------
    List[Polyline]
        Polylines as lists of (row, col)
    """
    polylines = fit_polylines(
        pixel_data,
        rows,
        cols,
        is_pixel_on,
        min_section_size=cfg.min_section_size,
        max_recursions=cfg.max_recursions,
        do_thinning=cfg.do_thinning,
        heuristics=cfg.heuristics,
    )

    if cfg.simplify_epsilon > 0:
        with profiler.timer("simplification", sink=profiler.log_sink(logger)):
            polylines = [
                geometry.simplify_polyline(pl, cfg.simplify_epsilon) for pl in polylines
            ]

    return polylines
