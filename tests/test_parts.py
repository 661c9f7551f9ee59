"""
Tests for resolving part start indexes into ranges of points.
"""

import pytest

import shapereader
from shapereader import resolve_parts, split_parts


@pytest.mark.parametrize(
    "parts,totalPoints,expected",
    [
        ([], 0, []),
        ([0], 1, [range(0, 1)]),
        ([0], 5, [range(0, 5)]),
        ([0, 2], 5, [range(0, 2), range(2, 5)]),
        ([0, 1, 2], 3, [range(0, 1), range(1, 2), range(2, 3)]),
    ],
)
def test_resolve_parts(parts, totalPoints, expected):
    """
    Assert that each part runs from its start index to the
    start of the next part, and the last part to the end.
    """
    assert resolve_parts(parts, totalPoints) == expected


@pytest.mark.parametrize(
    "parts,totalPoints",
    [
        ([], 3),  # points but no parts
        ([1], 3),  # first part must start at 0
        ([0, 2, 2], 5),  # repeated index, empty part
        ([0, 3, 2], 5),  # decreasing
        ([0, -1], 5),  # negative
        ([0, 7], 5),  # past the end
        ([0, 5], 5),  # last part empty
        ([0], 0),  # a part without points
    ],
)
def test_resolve_parts_invalid(parts, totalPoints):
    """
    Assert that malformed part indexes raise BadPartIndex.
    """
    with pytest.raises(shapereader.BadPartIndex):
        resolve_parts(parts, totalPoints)


def test_bad_part_index_is_format_error():
    with pytest.raises(shapereader.FormatError) as excinfo:
        resolve_parts([1], 3)
    assert excinfo.value.kind == "badPartIndex"


def test_split_parts():
    """
    Assert that points are split into one tuple per part.
    """
    points = ((0, 0), (1, 1), (2, 2), (3, 3), (4, 4))
    assert split_parts(points, [0, 2]) == [
        ((0, 0), (1, 1)),
        ((2, 2), (3, 3), (4, 4)),
    ]
