"""Polyline merging across sibling sections.

Two collections of pixel chains coming from neighbouring sections are fused
wherever a chain of one collection ends on the same physical pixel as a
chain of the other. Pixel identity (equal references), not coordinate
proximity, decides a match.

Endpoint pairings are tested in a fixed precedence:

    front-front  → prepend src reversed
    front-back   → prepend src
    back-front   → append src
    back-back    → append src reversed

The shared pixel is kept once. Each destination chain absorbs at most one
source chain per call; longer paths form across successive recursion
levels.
"""

from typing import List, Sequence

Chain = List[int]


def merge_polylines(dest: Sequence[Chain], src: Sequence[Chain]) -> List[Chain]:
    """Merge src chains into dest chains on shared endpoint pixels.

    Parameters
    ----------
    dest : Sequence[Chain]
        Destination chains, each ≥ 2 pixel references
    src : Sequence[Chain]
        Source chains, each ≥ 2 pixel references

    Returns
    -------
    List[Chain]
        dest chains (extended where merged) in order, followed by the src
        chains that were not merged, in order

    Notes
    -----
    Inputs are left unmodified; the result holds new lists.

    Examples
    --------
    >>> merge_polylines([[0, 6]], [[6, 12]])
    [[0, 6, 12]]
    """
    if not dest:
        return [list(chain) for chain in src]
    if not src:
        return [list(chain) for chain in dest]

    merged = [list(chain) for chain in dest]
    consumed = [False] * len(src)

    def take(predicate):
        for i, chain in enumerate(src):
            if not consumed[i] and predicate(chain):
                consumed[i] = True
                return chain
        return None

    for chain in merged:
        match = take(lambda s: chain[0] == s[0])
        if match is not None:
            chain[:0] = match[:0:-1]
            continue

        match = take(lambda s: chain[0] == s[-1])
        if match is not None:
            chain[:0] = match[:-1]
            continue

        match = take(lambda s: chain[-1] == s[0])
        if match is not None:
            chain.extend(match[1:])
            continue

        match = take(lambda s: chain[-1] == s[-1])
        if match is not None:
            chain.extend(match[-2::-1])

    merged.extend(list(chain) for i, chain in enumerate(src) if not consumed[i])
    return merged
