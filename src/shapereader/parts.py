from __future__ import annotations

from collections.abc import Sequence

from .exceptions import BadPartIndex
from .types import PointsT


def resolve_parts(parts: Sequence[int], totalPoints: int) -> list[range]:
    """Turns the part start indexes of a shape into half-open index
    ranges into its flat list of points. Part i spans
    points[parts[i]:parts[i + 1]], the last part runs to the end.

    >>> resolve_parts([0, 2], 5)
    [range(0, 2), range(2, 5)]

    Raises BadPartIndex if the first index is not 0, the indexes are
    not strictly increasing or fall outside the points, or the last
    part is empty.
    """
    if not parts:
        if totalPoints:
            raise BadPartIndex(f"{totalPoints} points but no parts")
        return []

    if parts[0] != 0:
        raise BadPartIndex(f"First part index must be 0, got {parts[0]}")

    ranges = []
    for i, start in enumerate(parts):
        end = parts[i + 1] if i + 1 < len(parts) else totalPoints
        if start < 0 or start > totalPoints:
            raise BadPartIndex(
                f"Part index {start} out of range for {totalPoints} points"
            )
        if end <= start:
            raise BadPartIndex(
                f"Part {i} is empty or its indexes are not increasing: "
                f"{list(parts)} with {totalPoints} points"
            )
        ranges.append(range(start, end))
    return ranges


def split_parts(points: PointsT, parts: Sequence[int]) -> list[PointsT]:
    """From a flat tuple of points and its part start indexes, return
    the points of each part."""
    return [points[r.start : r.stop] for r in resolve_parts(parts, len(points))]
