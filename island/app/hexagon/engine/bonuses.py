"""Bonus-title calculators: most bugs and longest road.

Both titles follow the same transfer rule, implemented once in
:func:`find_title_holder`: nobody holds a title until some player reaches
:data:`TITLE_THRESHOLD`, and a holder only loses it to a strictly greater
count.
"""

from __future__ import annotations

from ..models import board

TITLE_THRESHOLD = 3


def find_title_holder(
    counts: dict[str, int], holder: str | None, threshold: int = TITLE_THRESHOLD
) -> str | None:
    """Return who should hold a title given every player's *counts*.

    Args:
        counts: player_key -> count, in seating order.  The first player with
            the highest count is the challenger.
        holder: Current title holder, or None.
        threshold: Count needed to claim a vacant title.
    """
    challenger: str | None = None
    best = 0
    for key, count in counts.items():
        if count > best:
            challenger, best = key, count

    if holder is not None:
        # Ties never transfer the title.
        if challenger is not None and best > counts.get(holder, 0):
            return challenger
        return holder

    if challenger is not None and best >= threshold:
        return challenger
    return None


def find_most_bugs(bugs: dict[str, int], holder: str | None) -> str | None:
    """Return the majority-bug holder."""
    return find_title_holder(bugs, holder)


def longest_road_length(brd: board.Board, player_key: str) -> int:
    """Return the longest chain of *player_key*'s roads.

    A chain never reuses a road but may pass through a node more than once.
    Each road continues from the far end of the one before it.
    """
    edges = [road.inds for road in brd.roads if road.player_key == player_key]
    best = 0
    for start, (first, second) in enumerate(edges):
        best = max(
            best,
            _extend(edges, second, {start}),
            _extend(edges, first, {start}),
        )
    return best


def find_longest_road(
    brd: board.Board, player_keys: list[str], holder: str | None
) -> str | None:
    """Return the longest-road holder among *player_keys*."""
    lengths = {key: longest_road_length(brd, key) for key in player_keys}
    return find_title_holder(lengths, holder)


def _extend(edges: list[tuple[int, int]], end: int, used: set[int]) -> int:
    """DFS onward from node *end*; return the length of the deepest chain."""
    max_len = len(used)
    for candidate, (first, second) in enumerate(edges):
        if candidate in used or end not in (first, second):
            continue
        far_end = second if end == first else first
        used.add(candidate)
        max_len = max(max_len, _extend(edges, far_end, used))
        used.remove(candidate)
    return max_len
