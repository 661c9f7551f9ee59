from __future__ import annotations

from typing import NamedTuple

from .constants import NULL, SHAPETYPE_LOOKUP
from .shapes import Shape


class ShapeRecord(NamedTuple):
    """One decoded record of a .shp file: its 1-based record number as
    stored in the record header, the byte offset of that header in the
    file, and the decoded shape."""

    recordNumber: int
    offset: int
    shape: Shape

    def __repr__(self) -> str:
        return f"ShapeRecord #{self.recordNumber} @{self.offset}: {self.shape!r}"


class Shapes(list[Shape]):
    """A class to hold a list of Shape objects. Subclasses list to ensure
    compatibility with former work and to reuse all the optimizations of the
    builtin list.
    In addition to the list interface, this also provides a count of the
    shape types found."""

    def __repr__(self) -> str:
        return f"Shapes: {list(self)}"

    def shapeTypeCounts(self) -> dict[str, int]:
        """Number of shapes of each type name, Null shapes included."""
        counts: dict[str, int] = {}
        for shape in self:
            name = SHAPETYPE_LOOKUP[shape.shapeType]
            counts[name] = counts.get(name, 0) + 1
        return counts

    @property
    def nonNull(self) -> Shapes:
        """The shapes that are not Null shapes, in the same order."""
        return Shapes(shape for shape in self if shape.shapeType != NULL)
