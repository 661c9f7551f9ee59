from __future__ import annotations

import math
from collections.abc import Iterable

from .constants import BBOX_TOLERANCE
from .types import BBox, Point2D, PointsT


def bbox_from_points(coords: PointsT) -> BBox | None:
    """Calculates and returns the bounding box of a sequence of points,
    or None if there are no points."""
    if not coords:
        return None
    xs, ys = zip(*coords)
    return BBox(min(xs), min(ys), max(xs), max(ys))


def range_from_values(
    values: Iterable[float | None],
) -> tuple[float, float] | None:
    """Returns the closed (min, max) range of the values that are not None,
    or None if no value is present. Used for both z and m channels."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return min(present), max(present)


def _isclose(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=BBOX_TOLERANCE, abs_tol=BBOX_TOLERANCE)


def bbox_isclose(bbox1: BBox, bbox2: BBox) -> bool:
    """Tests whether two bounding boxes are equal within BBOX_TOLERANCE."""
    return all(_isclose(a, b) for a, b in zip(bbox1, bbox2))


def range_isclose(
    range1: tuple[float, float] | None, range2: tuple[float, float] | None
) -> bool:
    """Tests whether two closed ranges are equal within BBOX_TOLERANCE.
    Two missing ranges compare equal."""
    if range1 is None or range2 is None:
        return range1 is None and range2 is None
    return _isclose(range1[0], range2[0]) and _isclose(range1[1], range2[1])


def bbox_contains_point(bbox: BBox, p: Point2D) -> bool:
    """Tests whether a point lies inside or on the edge of bbox."""
    xmin, ymin, xmax, ymax = bbox
    x, y = p
    return xmin <= x <= xmax and ymin <= y <= ymax
