"""Test split line selection and region splitting.

Tests for polytrace.tracing.splitting:
    - Candidate order alternates outward from the center
    - Fewest "on" pixels wins, ties keep the earlier candidate
    - Early stop on an empty line
    - Halves overlap on exactly the split line and keep ≥ 3 lines

Test cases:
    - test_candidate_order_rows()
    - test_candidate_order_cols()
    - test_empty_region_splits_at_center()
    - test_fewest_on_pixels_wins()
    - test_tie_keeps_center()
    - test_split_region_overlap()
    - test_halves_keep_three_lines()
    - test_too_small_region_raises()

Run:
    pytest tests/test_splitting.py -v
"""

import pytest

from polytrace.tracing.bit_image import BitImage, Region
from polytrace.tracing.splitting import Split, find_best_split, split_candidates, split_region


def test_candidate_order_rows():
    """Tall region: row candidates 0, -1, +1, -2, ... around the middle."""
    assert list(split_candidates(Region(0, 0, 9, 5))) == [4, 3, 5, 2, 6]
    assert list(split_candidates(Region(10, 0, 8, 8))) == [14, 13, 15, 12]


def test_candidate_order_cols():
    """Wide region: column candidates, offset by c0."""
    assert list(split_candidates(Region(0, 3, 5, 7))) == [6, 5, 7]


def test_empty_region_splits_at_center():
    image = BitImage(9, 5)
    split = find_best_split(image, Region(0, 0, 9, 5))
    assert split == Split(along_rows=True, index=4, on_pixels=0)


def test_fewest_on_pixels_wins():
    """A stroke on the middle row pushes the split to the next candidate."""
    image = BitImage(9, 5)
    for c in range(5):
        image[image.find(4, c)] = 1

    split = find_best_split(image, Region(0, 0, 9, 5))
    assert split.index == 3
    assert split.on_pixels == 0


def test_tie_keeps_center():
    """A vertical stroke crosses every row once: the center row is kept."""
    image = BitImage(9, 5)
    for r in range(9):
        image[image.find(r, 2)] = 1

    split = find_best_split(image, Region(0, 0, 9, 5))
    assert split == Split(along_rows=True, index=4, on_pixels=1)


def test_column_split_for_wide_region():
    image = BitImage(5, 9)
    split = find_best_split(image, Region(0, 0, 5, 9))
    assert not split.along_rows
    assert split.index == 4


def test_split_region_overlap():
    region = Region(2, 3, 9, 5)
    first, second = split_region(region, Split(True, 6, 0))

    assert first == Region(2, 3, 5, 5)
    assert second == Region(6, 3, 5, 5)
    assert first.r1 == second.r0

    left, right = split_region(Region(0, 0, 5, 9), Split(False, 4, 0))
    assert left == Region(0, 0, 5, 5)
    assert right == Region(0, 4, 5, 5)


@pytest.mark.parametrize("size", range(5, 21))
@pytest.mark.parametrize("along_rows", [True, False])
def test_halves_keep_three_lines(size, along_rows):
    """Every candidate leaves both halves ≥ 3 lines, overlapping on one."""
    region = Region(1, 2, size, 3) if along_rows else Region(1, 2, 3, size)

    for index in split_candidates(region):
        first, second = split_region(region, Split(along_rows, index, 0))
        if along_rows:
            sizes = (first.rows, second.rows)
            assert first.r1 == second.r0 == index
        else:
            sizes = (first.cols, second.cols)
            assert first.c1 == second.c0 == index
        assert min(sizes) >= 3
        assert sum(sizes) == size + 1


def test_too_small_region_raises():
    with pytest.raises(ValueError, match="too small"):
        find_best_split(BitImage(4, 4), Region(0, 0, 4, 4))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
