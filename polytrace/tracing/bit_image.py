"""Binary raster over a flat buffer with row/column addressing.

Provides:
    - BitImage: rows × cols grid of 0/1 cells backed by one contiguous
      numpy uint8 buffer
    - Region: immutable (r0, c0, rows, cols) rectangle over that buffer

Pixel references are plain integer offsets into the buffer
(offset = row * cols + col). Two references are equal iff they address the
same physical pixel, which is what the polyline merger relies on. A
reference is only meaningful for the BitImage that produced it.

Sub-regions are never copied: BitImage.view(region) is a numpy view, so
writes through it land in the shared buffer.

No bounds checks on find/section: the tracer only requests in-bounds
regions.
"""

from dataclasses import dataclass
from typing import Any, Callable, Tuple

import numpy as np


@dataclass(frozen=True)
class Region:
    """Rectangular section of a BitImage.

    Attributes
    ----------
    r0, c0 : int
        Top-left row and column
    rows, cols : int
        Height and width
    """
    r0: int
    c0: int
    rows: int
    cols: int

    @property
    def r1(self) -> int:
        """Bottom row (inclusive)."""
        return self.r0 + self.rows - 1

    @property
    def c1(self) -> int:
        """Right column (inclusive)."""
        return self.c0 + self.cols - 1

    @property
    def center(self) -> Tuple[int, int]:
        """Geometric middle (row, col), rounded towards the top-left."""
        return (self.r0 + self.rows // 2, self.c0 + self.cols // 2)

    def interior(self) -> 'Region':
        """Region minus its 1-pixel frame."""
        return Region(self.r0 + 1, self.c0 + 1, self.rows - 2, self.cols - 2)


class BitImage:
    """2D binary image stored as a flat uint8 buffer.

    Parameters
    ----------
    rows : int
        Number of rows, ≥ 0
    cols : int
        Number of columns, ≥ 0

    Attributes
    ----------
    rows, cols : int
        Grid size
    data : np.ndarray
        Flat buffer, shape (rows * cols,), dtype uint8, values in {0, 1}

    Examples
    --------
    >>> image = BitImage.from_pixels([0, 255, 0, 255], 2, 2, lambda v: v > 128)
    >>> image.coords(image.find(1, 1))
    (1, 1)
    """

    def __init__(self, rows: int, cols: int):
        if rows < 0 or cols < 0:
            raise ValueError(f"Image size must be non-negative, got {rows}x{cols}")
        self.rows = int(rows)
        self.cols = int(cols)
        self.data = np.zeros(self.rows * self.cols, dtype=np.uint8)

    @classmethod
    def from_pixels(
        cls,
        pixel_data: Any,
        rows: int,
        cols: int,
        is_pixel_on: Callable[[Any], bool]
    ) -> 'BitImage':
        """Build a BitImage by applying is_pixel_on to every pixel.

        Parameters
        ----------
        pixel_data : Any
            Row-major pixel values: a flat sequence of rows * cols pixels, or
            an array of shape (rows * cols, ...) or (rows, cols, ...)
        rows, cols : int
            Image size
        is_pixel_on : Callable[[Any], bool]
            Predicate returning True for "on" pixels

        Returns
        -------
        BitImage
            New image

        Raises
        ------
        TypeError
            If is_pixel_on is not callable
        ValueError
            If the pixel count does not match rows * cols
        """
        if not callable(is_pixel_on):
            raise TypeError(
                f"is_pixel_on must be callable, got {type(is_pixel_on).__name__}"
            )

        image = cls(rows, cols)

        if isinstance(pixel_data, np.ndarray):
            # (rows, cols[, channels]) images collapse to one entry per pixel
            if pixel_data.ndim >= 2 and pixel_data.shape[:2] == (rows, cols):
                flat = pixel_data.reshape((rows * cols,) + pixel_data.shape[2:])
            else:
                flat = pixel_data
        else:
            flat = list(pixel_data)

        if len(flat) != image.data.size:
            raise ValueError(
                f"Pixel data has {len(flat)} elements, expected "
                f"rows*cols = {rows}*{cols} = {image.data.size}"
            )

        image.data[:] = np.fromiter(
            (1 if is_pixel_on(px) else 0 for px in flat),
            dtype=np.uint8,
            count=image.data.size
        )
        return image

    @classmethod
    def from_mask(cls, mask: Any) -> 'BitImage':
        """Build a BitImage from a 2D array-like of truthy values."""
        mask = np.asarray(mask)
        if mask.ndim != 2:
            raise ValueError(f"Mask must be 2D, got shape {mask.shape}")

        image = cls(*mask.shape)
        image.data[:] = (mask != 0).reshape(-1)
        return image

    @property
    def grid(self) -> np.ndarray:
        """2D view (rows, cols) of the buffer."""
        return self.data.reshape(self.rows, self.cols)

    def copy(self) -> 'BitImage':
        """Deep copy with its own buffer."""
        image = BitImage(self.rows, self.cols)
        image.data[:] = self.data
        return image

    def __len__(self) -> int:
        return self.data.size

    def __getitem__(self, ref: int) -> int:
        return int(self.data[ref])

    def __setitem__(self, ref: int, value: int) -> None:
        self.data[ref] = 1 if value else 0

    def __repr__(self) -> str:
        return f"BitImage({self.rows}x{self.cols}, on={int(self.data.sum())})"

    def coords(self, ref: int) -> Tuple[int, int]:
        """(row, col) of a pixel reference."""
        ref = int(ref)
        return (ref // self.cols, ref % self.cols)

    def find(self, row: int, col: int) -> int:
        """Pixel reference at (row, col)."""
        return row * self.cols + col

    def section(self, r0: int, c0: int, rows: int, cols: int) -> np.ndarray:
        """Pixel references of a rectangular section, row-major.

        Parameters
        ----------
        r0, c0 : int
            Starting row and column
        rows, cols : int
            Section size; a negative value walks backwards from r0 / c0
            (e.g. rows=-3 yields rows r0, r0-1, r0-2)

        Returns
        -------
        np.ndarray
            Flat int64 array of references, length |rows| * |cols|
        """
        row_idx = np.arange(r0, r0 + rows, 1 if rows >= 0 else -1, dtype=np.int64)
        col_idx = np.arange(c0, c0 + cols, 1 if cols >= 0 else -1, dtype=np.int64)
        return (row_idx[:, None] * self.cols + col_idx[None, :]).reshape(-1)

    def region_refs(self, region: Region) -> np.ndarray:
        """Pixel references of a Region, row-major."""
        return self.section(region.r0, region.c0, region.rows, region.cols)

    def values(self, refs: np.ndarray) -> np.ndarray:
        """Pixel values at the given references."""
        return self.data[refs]

    def count_on(self, refs: np.ndarray) -> int:
        """Number of "on" pixels among the given references."""
        return int(np.count_nonzero(self.data[refs]))

    def view(self, region: Region) -> np.ndarray:
        """Writable 2D view of a region (shares the buffer)."""
        return self.grid[region.r0:region.r0 + region.rows, region.c0:region.c0 + region.cols]

    def is_empty(self, region: Region) -> bool:
        """True if the region holds no "on" pixel."""
        return not self.view(region).any()
