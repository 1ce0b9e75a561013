"""Section splitter: choose the row or column that cuts a region in two.

Policy:
    - Split across the longer side (rows when rows >= cols)
    - Try candidate lines outward from the center: offsets 0, -1, +1, -2, +2, ...
    - Keep the candidate crossing the fewest "on" pixels; on ties the
      earlier (closer to center) candidate wins
    - Stop at the first candidate crossing no "on" pixel

Both halves share the split line, so a stroke crossing it ends on the same
physical pixel on each side and the fragments can be merged afterwards.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple

from .bit_image import BitImage, Region

# Rows/cols kept out of the candidate range; with 4 both halves keep ≥ 3
SPLIT_MARGIN = 4


@dataclass(frozen=True)
class Split:
    """Chosen split line.

    Attributes
    ----------
    along_rows : bool
        True for a horizontal cut at row `index`, False for a vertical cut
        at column `index`
    index : int
        Absolute row or column of the shared line
    on_pixels : int
        "On" pixels crossed by the line
    """
    along_rows: bool
    index: int
    on_pixels: int


def split_candidates(region: Region, margin: int = SPLIT_MARGIN) -> Iterator[int]:
    """Yield candidate split lines ordered by distance from the center.

    Parameters
    ----------
    region : Region
        Section to split
    margin : int
        Number of lines excluded from the candidate range

    Yields
    ------
    int
        Absolute row (rows >= cols) or column index
    """
    along_rows = region.rows >= region.cols
    size = region.rows if along_rows else region.cols
    middle = region.r0 + region.rows // 2 if along_rows else region.c0 + region.cols // 2

    for i in range(size - margin):
        sign = 1 if i % 2 == 0 else -1
        yield middle + sign * ((i + 1) // 2)


def find_best_split(image: BitImage, region: Region, margin: int = SPLIT_MARGIN) -> Split:
    """Pick the split line crossing the fewest "on" pixels.

    Parameters
    ----------
    image : BitImage
        Image holding the region
    region : Region
        Section to split; its longer side must exceed margin
    margin : int
        Number of lines excluded from the candidate range

    Returns
    -------
    Split
        Best candidate

    Raises
    ------
    ValueError
        If the region is too small to produce any candidate
    """
    along_rows = region.rows >= region.cols
    best = None

    for index in split_candidates(region, margin):
        if along_rows:
            line = image.section(index, region.c0, 1, region.cols)
        else:
            line = image.section(region.r0, index, region.rows, 1)

        n_on = image.count_on(line)
        if best is None or n_on < best.on_pixels:
            best = Split(along_rows, index, n_on)

        if n_on == 0:
            break

    if best is None:
        raise ValueError(
            f"Region {region.rows}x{region.cols} is too small to split with margin {margin}"
        )
    return best


def split_region(region: Region, split: Split) -> Tuple[Region, Region]:
    """Cut a region at the split line; the halves overlap on that line.

    Returns
    -------
    Tuple[Region, Region]
        (top, bottom) for a row split, (left, right) for a column split
    """
    if split.along_rows:
        r = split.index
        return (
            Region(region.r0, region.c0, r - region.r0 + 1, region.cols),
            Region(r, region.c0, region.r0 + region.rows - r, region.cols),
        )

    c = split.index
    return (
        Region(region.r0, region.c0, region.rows, c - region.c0 + 1),
        Region(region.r0, c, region.rows, region.c0 + region.cols - c),
    )
