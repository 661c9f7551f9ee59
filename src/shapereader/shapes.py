from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Union

from .constants import (
    MULTIPATCH,
    MULTIPOINT,
    MULTIPOINTM,
    MULTIPOINTZ,
    NODATA,
    NULL,
    PARTTYPE_LOOKUP,
    POINT,
    POINTM,
    POINTZ,
    POLYGON,
    POLYGONM,
    POLYGONZ,
    POLYLINE,
    POLYLINEM,
    POLYLINEZ,
    SHAPETYPE_LOOKUP,
)
from .exceptions import BadPartIndex, InvalidPartType, InvariantViolation
from .geometric_calculations import (
    bbox_contains_point,
    bbox_from_points,
    bbox_isclose,
    range_from_values,
    range_isclose,
)
from .helpers import bytes_left, unpack_from_stream
from .parts import resolve_parts, split_parts
from .types import BBox, MBox, MValuesT, PointsT, ReadSeekableBinStream, ZBox


def _m_or_none(m: float) -> float | None:
    # Measure values at or below NODATA are nodata values according to the ESRI spec
    return None if m <= NODATA else m


@dataclass(frozen=True)
class Shape:
    """Base class of the decoded geometry of one shapefile record.

    Each shape type of the ESRI spec is its own frozen class, and
    SHAPE_CLASS_FROM_SHAPETYPE is the complete list of them. All
    sequences are tuples owned by the shape, so a decoded shape can
    never be changed or share memory with the file it came from.
    """

    shapeType: ClassVar[int] = NULL

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        pass

    @property
    def shapeTypeName(self) -> str:
        return SHAPETYPE_LOOKUP[self.shapeType]

    @classmethod
    def from_byte_stream(
        cls,
        b_io: ReadSeekableBinStream,
        next_shape: int,
    ) -> Shape:
        """Decodes the rest of a record's content, with b_io positioned just
        after the shape type. next_shape is the declared content length
        in bytes, i.e. the position in b_io where the record ends.

        Abstract hook: every concrete shape class overrides it, Shape
        itself has no wire format."""
        raise NotImplementedError(
            f"{cls.__name__} does not decode records, use one of "
            "SHAPE_CLASS_FROM_SHAPETYPE"
        )

    def bounds_mismatches(self) -> list[str]:
        """Recomputes the stored bounding box and ranges from the coordinates
        and describes each one that disagrees. Empty if all agree."""
        return []


@dataclass(frozen=True)
class NullShape(Shape):
    shapeType: ClassVar[int] = NULL

    @classmethod
    def from_byte_stream(
        cls,
        b_io: ReadSeekableBinStream,
        next_shape: int,
    ) -> NullShape:
        return cls()


@dataclass(frozen=True)
class Point(Shape):
    x: float
    y: float

    shapeType: ClassVar[int] = POINT

    @classmethod
    def from_byte_stream(
        cls,
        b_io: ReadSeekableBinStream,
        next_shape: int,
    ) -> Point:
        x, y = unpack_from_stream("<2d", b_io, "point coordinates")
        return cls(x=x, y=y)


@dataclass(frozen=True)
class PointM(Shape):
    x: float
    y: float
    m: Optional[float]

    shapeType: ClassVar[int] = POINTM

    @classmethod
    def from_byte_stream(
        cls,
        b_io: ReadSeekableBinStream,
        next_shape: int,
    ) -> PointM:
        x, y, m = unpack_from_stream("<3d", b_io, "point coordinates and measure")
        return cls(x=x, y=y, m=_m_or_none(m))


@dataclass(frozen=True)
class PointZ(Shape):
    x: float
    y: float
    z: float
    m: Optional[float] = None

    shapeType: ClassVar[int] = POINTZ

    @classmethod
    def from_byte_stream(
        cls,
        b_io: ReadSeekableBinStream,
        next_shape: int,
    ) -> PointZ:
        x, y, z = unpack_from_stream("<3d", b_io, "point coordinates")
        # The measure is optional, only present if it is exactly what is
        # left of the record
        m: float | None = None
        if bytes_left(b_io, next_shape) == 8:
            (m,) = unpack_from_stream("<d", b_io, "point measure")
            m = _m_or_none(m)
        return cls(x=x, y=y, z=z, m=m)


_CanHaveParts_shapeTypes = frozenset(
    [
        POLYLINE,
        POLYLINEM,
        POLYLINEZ,
        POLYGON,
        POLYGONM,
        POLYGONZ,
        MULTIPATCH,
    ]
)

# Not a PointZ
_HasZ_shapeTypes = frozenset(
    [
        POLYLINEZ,
        POLYGONZ,
        MULTIPOINTZ,
        MULTIPATCH,
    ]
)

# Not a PointM or a PointZ
_HasM_shapeTypes = frozenset(
    [
        POLYLINEM,
        POLYLINEZ,
        POLYGONM,
        POLYGONZ,
        MULTIPOINTM,
        MULTIPOINTZ,
        MULTIPATCH,
    ]
)


class _CanHaveBBox(Shape):
    """Shared decoding for every shape that is not a single point
    (polylines, polygons, multipatches and multipoints). They all start
    with a bounding box and store their points as one flat array.
    """

    bbox: BBox
    points: PointsT

    @staticmethod
    def _read_bbox_from_byte_stream(b_io: ReadSeekableBinStream) -> BBox:
        return BBox(*unpack_from_stream("<4d", b_io, "bounding box"))

    @staticmethod
    def _read_count_from_byte_stream(b_io: ReadSeekableBinStream, what: str) -> int:
        offset = b_io.tell()
        (count,) = unpack_from_stream("<i", b_io, what)
        if count < 0:
            raise InvariantViolation(f"Negative {what}: {count}", offset)
        return count

    @staticmethod
    def _read_points_from_byte_stream(
        b_io: ReadSeekableBinStream, nPoints: int
    ) -> PointsT:
        flat = unpack_from_stream(f"<{2 * nPoints}d", b_io, "points")
        return tuple(zip(*(iter(flat),) * 2))

    @classmethod
    def from_byte_stream(
        cls,
        b_io: ReadSeekableBinStream,
        next_shape: int,
    ) -> Shape:
        shapeType = cls.shapeType
        kwargs: dict[str, Any] = {
            "bbox": cls._read_bbox_from_byte_stream(b_io),
        }

        nParts: int | None = (
            cls._read_count_from_byte_stream(b_io, "number of parts")
            if shapeType in _CanHaveParts_shapeTypes
            else None
        )
        nPoints = cls._read_count_from_byte_stream(b_io, "number of points")

        if nParts is not None:
            kwargs["parts"] = _CanHaveParts._read_parts_from_byte_stream(
                b_io, nParts, nPoints
            )
            if shapeType == MULTIPATCH:
                kwargs["partTypes"] = MultiPatch._read_part_types_from_byte_stream(
                    b_io, nParts
                )

        kwargs["points"] = cls._read_points_from_byte_stream(b_io, nPoints)

        if shapeType in _HasZ_shapeTypes:
            kwargs["zbox"], kwargs["z"] = _HasZ._read_zs_from_byte_stream(
                b_io, nPoints
            )

        if shapeType in _HasM_shapeTypes:
            kwargs["mbox"], kwargs["m"] = _HasM._read_ms_from_byte_stream(
                b_io, nPoints, next_shape
            )

        return cls(**kwargs)

    def _validate(self) -> None:
        super()._validate()
        for point in self.points:
            if len(point) != 2:
                raise InvariantViolation(f"Points must be (x, y) pairs, got: {point}")

    def bounds_mismatches(self) -> list[str]:
        mismatches = super().bounds_mismatches()
        if not self.points:
            return mismatches
        computed = bbox_from_points(self.points)
        if computed is not None and not bbox_isclose(self.bbox, computed):
            mismatches.append(
                f"stored bbox {tuple(self.bbox)} != computed {tuple(computed)}"
            )
        else:
            outside = [p for p in self.points if not bbox_contains_point(self.bbox, p)]
            if outside:
                mismatches.append(
                    f"{len(outside)} points outside stored bbox {tuple(self.bbox)}"
                )
        return mismatches


class _CanHaveParts(_CanHaveBBox):
    """Polylines, polygons and multipatches: points grouped into parts
    by the start index of each part."""

    parts: tuple[int, ...]

    # Overridden for polylines (lines need 2 points) and polygons (closed rings)
    _MIN_PART_POINTS: ClassVar[int] = 1
    _PARTS_ARE_RINGS: ClassVar[bool] = False

    @staticmethod
    def _read_parts_from_byte_stream(
        b_io: ReadSeekableBinStream, nParts: int, nPoints: int
    ) -> tuple[int, ...]:
        offset = b_io.tell()
        parts = unpack_from_stream(f"<{nParts}i", b_io, "part indexes")
        try:
            resolve_parts(parts, nPoints)
        except BadPartIndex as e:
            e.offset = offset
            raise
        return tuple(parts)

    def _validate(self) -> None:
        super()._validate()
        ranges = resolve_parts(self.parts, len(self.points))
        for i, r in enumerate(ranges):
            if len(r) < self._MIN_PART_POINTS:
                raise InvariantViolation(
                    f"{self.__class__.__name__} part {i} has {len(r)} points, "
                    f"at least {self._MIN_PART_POINTS} required"
                )
            if self._PARTS_ARE_RINGS:
                first, last = self.points[r.start], self.points[r.stop - 1]
                if first != last:
                    raise InvariantViolation(
                        f"{self.__class__.__name__} ring {i} is not closed: "
                        f"first point {first} != last point {last}"
                    )

    def partRanges(self) -> list[range]:
        """The index range into self.points of each part."""
        return resolve_parts(self.parts, len(self.points))

    def iterParts(self) -> Iterator[PointsT]:
        """Yields the points of each part (line, ring or patch) in turn."""
        yield from split_parts(self.points, self.parts)


class _HasZ(_CanHaveBBox):
    zbox: ZBox
    z: tuple[float, ...]

    @staticmethod
    def _read_zs_from_byte_stream(
        b_io: ReadSeekableBinStream, nPoints: int
    ) -> tuple[ZBox, tuple[float, ...]]:
        zbox = ZBox(*unpack_from_stream("<2d", b_io, "z range"))
        zs = unpack_from_stream(f"<{nPoints}d", b_io, "z values")
        return zbox, tuple(zs)

    def _validate(self) -> None:
        super()._validate()
        if len(self.z) != len(self.points):
            raise InvariantViolation(
                f"{len(self.z)} z values for {len(self.points)} points"
            )

    def bounds_mismatches(self) -> list[str]:
        mismatches = super().bounds_mismatches()
        if self.points and not range_isclose(self.zbox, range_from_values(self.z)):
            mismatches.append(
                f"stored zbox {tuple(self.zbox)} != computed "
                f"{range_from_values(self.z)}"
            )
        return mismatches


class _HasM(_CanHaveBBox):
    mbox: Optional[MBox]
    m: Optional[MValuesT]

    @staticmethod
    def _read_ms_from_byte_stream(
        b_io: ReadSeekableBinStream, nPoints: int, next_shape: int
    ) -> tuple[MBox | None, MValuesT | None]:
        # The M block is optional. It is only there if the rest of the
        # declared content is exactly the m range and one value per point.
        if bytes_left(b_io, next_shape) != 16 + 8 * nPoints:
            return None, None
        mmin, mmax = unpack_from_stream("<2d", b_io, "m range")
        ms = tuple(
            _m_or_none(m)
            for m in unpack_from_stream(f"<{nPoints}d", b_io, "m values")
        )
        if mmin <= NODATA or mmax <= NODATA:
            # A nodata bound is replaced by the range of the measures present
            present = range_from_values(ms)
            return (None if present is None else MBox(*present)), ms
        # Without a single measure there is no range to speak of
        if all(m is None for m in ms):
            return None, ms
        return MBox(mmin, mmax), ms

    def _validate(self) -> None:
        super()._validate()
        if self.m is not None and len(self.m) != len(self.points):
            raise InvariantViolation(
                f"{len(self.m)} m values for {len(self.points)} points"
            )

    def bounds_mismatches(self) -> list[str]:
        mismatches = super().bounds_mismatches()
        if self.m is not None:
            computed = range_from_values(self.m)
            if not range_isclose(self.mbox, computed):
                stored = None if self.mbox is None else tuple(self.mbox)
                mismatches.append(f"stored mbox {stored} != computed {computed}")
        return mismatches


@dataclass(frozen=True)
class MultiPoint(_CanHaveBBox):
    bbox: BBox
    points: PointsT

    shapeType: ClassVar[int] = MULTIPOINT


@dataclass(frozen=True)
class MultiPointM(_HasM):
    bbox: BBox
    points: PointsT
    mbox: Optional[MBox] = None
    m: Optional[MValuesT] = None

    shapeType: ClassVar[int] = MULTIPOINTM


@dataclass(frozen=True)
class MultiPointZ(_HasZ, _HasM):
    bbox: BBox
    points: PointsT
    zbox: ZBox
    z: tuple[float, ...]
    mbox: Optional[MBox] = None
    m: Optional[MValuesT] = None

    shapeType: ClassVar[int] = MULTIPOINTZ


class _LinesMixin(_CanHaveParts):
    # A part is a connected sequence of two or more points
    _MIN_PART_POINTS: ClassVar[int] = 2


class _RingsMixin(_CanHaveParts):
    # Rings are closed loops of four or more points. Clockwise rings are
    # outer boundaries, counter-clockwise rings are holes.
    _MIN_PART_POINTS: ClassVar[int] = 4
    _PARTS_ARE_RINGS: ClassVar[bool] = True


@dataclass(frozen=True)
class Polyline(_LinesMixin):
    bbox: BBox
    parts: tuple[int, ...]
    points: PointsT

    shapeType: ClassVar[int] = POLYLINE


@dataclass(frozen=True)
class PolylineM(_LinesMixin, _HasM):
    bbox: BBox
    parts: tuple[int, ...]
    points: PointsT
    mbox: Optional[MBox] = None
    m: Optional[MValuesT] = None

    shapeType: ClassVar[int] = POLYLINEM


@dataclass(frozen=True)
class PolylineZ(_LinesMixin, _HasZ, _HasM):
    bbox: BBox
    parts: tuple[int, ...]
    points: PointsT
    zbox: ZBox
    z: tuple[float, ...]
    mbox: Optional[MBox] = None
    m: Optional[MValuesT] = None

    shapeType: ClassVar[int] = POLYLINEZ


@dataclass(frozen=True)
class Polygon(_RingsMixin):
    bbox: BBox
    parts: tuple[int, ...]
    points: PointsT

    shapeType: ClassVar[int] = POLYGON


@dataclass(frozen=True)
class PolygonM(_RingsMixin, _HasM):
    bbox: BBox
    parts: tuple[int, ...]
    points: PointsT
    mbox: Optional[MBox] = None
    m: Optional[MValuesT] = None

    shapeType: ClassVar[int] = POLYGONM


@dataclass(frozen=True)
class PolygonZ(_RingsMixin, _HasZ, _HasM):
    bbox: BBox
    parts: tuple[int, ...]
    points: PointsT
    zbox: ZBox
    z: tuple[float, ...]
    mbox: Optional[MBox] = None
    m: Optional[MValuesT] = None

    shapeType: ClassVar[int] = POLYGONZ


@dataclass(frozen=True)
class MultiPatch(_CanHaveParts, _HasZ, _HasM):
    """A set of surface patches. partTypes says, per part, whether its
    points are a triangle strip, a triangle fan or one of the ring kinds."""

    bbox: BBox
    parts: tuple[int, ...]
    partTypes: tuple[int, ...]
    points: PointsT
    zbox: ZBox
    z: tuple[float, ...]
    mbox: Optional[MBox] = None
    m: Optional[MValuesT] = None

    shapeType: ClassVar[int] = MULTIPATCH

    @staticmethod
    def _read_part_types_from_byte_stream(
        b_io: ReadSeekableBinStream, nParts: int
    ) -> tuple[int, ...]:
        offset = b_io.tell()
        partTypes = unpack_from_stream(f"<{nParts}i", b_io, "part types")
        for i, partType in enumerate(partTypes):
            if partType not in PARTTYPE_LOOKUP:
                raise InvalidPartType(partType, offset + 4 * i)
        return tuple(partTypes)

    def _validate(self) -> None:
        super()._validate()
        if len(self.partTypes) != len(self.parts):
            raise InvariantViolation(
                f"{len(self.partTypes)} part types for {len(self.parts)} parts"
            )
        for partType in self.partTypes:
            if partType not in PARTTYPE_LOOKUP:
                raise InvalidPartType(partType)

    @property
    def partTypeNames(self) -> list[str]:
        return [PARTTYPE_LOOKUP[partType] for partType in self.partTypes]


AnyShape = Union[
    NullShape,
    Point,
    Polyline,
    Polygon,
    MultiPoint,
    PointZ,
    PolylineZ,
    PolygonZ,
    MultiPointZ,
    PointM,
    PolylineM,
    PolygonM,
    MultiPointM,
    MultiPatch,
]

SHAPE_CLASS_FROM_SHAPETYPE: dict[int, type[Shape]] = {
    NULL: NullShape,
    POINT: Point,
    POLYLINE: Polyline,
    POLYGON: Polygon,
    MULTIPOINT: MultiPoint,
    POINTZ: PointZ,
    POLYLINEZ: PolylineZ,
    POLYGONZ: PolygonZ,
    MULTIPOINTZ: MultiPointZ,
    POINTM: PointM,
    POLYLINEM: PolylineM,
    POLYGONM: PolygonM,
    MULTIPOINTM: MultiPointM,
    MULTIPATCH: MultiPatch,
}
