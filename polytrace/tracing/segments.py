"""Leaf segment fitting for sections too small to split further.

Pipeline:
    1. Walk the section frame clockwise (top row, right column, bottom row
       reversed, left column reversed)
    2. Rotate the walk to start on an "off" pixel and collect the maximal
       runs of "on" pixels; each run is one place where a stroke enters
    3. Two entrances: the stroke passes through, emit one segment joining
       the two run midpoints
    4. Otherwise estimate a junction pixel inside the section and emit one
       segment per entrance, from the run midpoint to the junction

Junction estimate:
    Interior pixels are ranked by Manhattan distance to the section center.
    Each is scored by the number of "on" pixels in its 3x3 neighbourhood.
    The first strictly highest score wins, and the search stops as soon as
    a score reaches JUNCTION_MIN_ON_PIXELS.

Segments are lists of pixel references [frame_pixel, other_end].
"""

from typing import List, Tuple

import numpy as np
from scipy import ndimage

from .bit_image import BitImage, Region

# 3x3 score that is good enough to stop searching for the junction
JUNCTION_MIN_ON_PIXELS = 5

_KERNEL_3X3 = np.ones((3, 3), dtype=np.int32)


def frame_pixels(image: BitImage, region: Region) -> np.ndarray:
    """Clockwise walk of the region's outermost ring.

    Parameters
    ----------
    image : BitImage
        Image holding the region
    region : Region
        Section, at least 2x2

    Returns
    -------
    np.ndarray
        Pixel references, 2 * (rows - 1) + 2 * (cols - 1) entries, each ring
        pixel exactly once
    """
    r0, c0, r1, c1 = region.r0, region.c0, region.r1, region.c1
    rows, cols = region.rows, region.cols

    return np.concatenate([
        image.section(r0, c0, 1, cols - 1),        # top, left → right
        image.section(r0, c1, rows - 1, 1),        # right, top → bottom
        image.section(r1, c1, 1, -(cols - 1)),     # bottom, right → left
        image.section(r1, c0, -(rows - 1), 1),     # left, bottom → top
    ])


def find_runs(values: np.ndarray) -> List[Tuple[int, int]]:
    """Maximal runs of non-zero values.

    Parameters
    ----------
    values : np.ndarray
        1D array of 0/1 values

    Returns
    -------
    List[Tuple[int, int]]
        (start, length) of each run, in order
    """
    padded = np.concatenate(([0], (np.asarray(values) != 0).astype(np.int8), [0]))
    edges = np.diff(padded)
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1)
    return [(int(s), int(e - s)) for s, e in zip(starts, ends)]


def run_midpoints(image: BitImage, region: Region) -> List[int]:
    """Midpoint reference of every "on" run along the region frame.

    Returns an empty list when the frame is entirely on or entirely off,
    since the entrances cannot be told apart.
    """
    frame = frame_pixels(image, region)
    values = image.values(frame)

    off = np.flatnonzero(values == 0)
    if off.size == 0 or off.size == values.size:
        return []

    # starting on an off pixel keeps every run contiguous in the walk
    first_off = int(off[0])
    frame = np.roll(frame, -first_off)
    values = np.roll(values, -first_off)

    return [int(frame[start + length // 2]) for start, length in find_runs(values)]


def estimate_junction(
    image: BitImage,
    region: Region,
    min_on_pixels: int = JUNCTION_MIN_ON_PIXELS
) -> int:
    """Interior pixel most likely to be where the strokes meet.

    Parameters
    ----------
    image : BitImage
        Image holding the region
    region : Region
        Section, at least 3x3
    min_on_pixels : int
        3x3 score that ends the search early

    Returns
    -------
    int
        Pixel reference of the estimated junction
    """
    interior = region.interior()
    center_r, center_c = region.center

    # 3x3 neighbourhoods of interior pixels lie inside the region
    scores = ndimage.convolve(
        image.view(region).astype(np.int32), _KERNEL_3X3, mode='constant', cval=0
    )[1:-1, 1:-1].reshape(-1)

    rr, cc = np.mgrid[interior.r0:interior.r0 + interior.rows,
                      interior.c0:interior.c0 + interior.cols]
    distance = (np.abs(rr - center_r) + np.abs(cc - center_c)).reshape(-1)
    order = np.argsort(distance, kind='stable')
    ordered_scores = scores[order]

    hits = np.flatnonzero(ordered_scores >= min_on_pixels)
    best = int(hits[0]) if hits.size else int(np.argmax(ordered_scores))

    refs = image.region_refs(interior)
    return int(refs[order[best]])


def fit_segments(
    image: BitImage,
    region: Region,
    min_on_pixels: int = JUNCTION_MIN_ON_PIXELS
) -> List[List[int]]:
    """Fit segments from the frame entrances of a section to its junction.

    Parameters
    ----------
    image : BitImage
        Image holding the region
    region : Region
        Terminal section, at least 3x3
    min_on_pixels : int
        Early-stop score of the junction search

    Returns
    -------
    List[List[int]]
        Two-pixel segments:
        - [] if the frame is all on or all off
        - [[mid_a, mid_b]] for exactly two entrances
        - [[mid_i, junction], ...] for three or more entrances
        - [[mid, junction]] for a single entrance whose junction pixel is on,
          [] if the stroke only grazes the frame
    """
    mids = run_midpoints(image, region)
    if not mids:
        return []

    if len(mids) == 2:
        return [[mids[0], mids[1]]]

    junction = estimate_junction(image, region, min_on_pixels)

    if len(mids) == 1 and not image[junction]:
        return []

    return [[mid, junction] for mid in mids]
