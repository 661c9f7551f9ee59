"""
shapereader
Decodes the geometry records of ESRI Shapefiles (.shp) into immutable
shape objects.
Compatible with Python versions >=3.9
"""

from __future__ import annotations

from .__version__ import __version__
from .classes import ShapeRecord, Shapes
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
    PartType,
)
from .exceptions import (
    BadFileCode,
    BadPartIndex,
    BoundingBoxMismatch,
    FormatError,
    FormatWarning,
    InvalidPartType,
    InvariantViolation,
    RecordNumberMismatch,
    ShapefileException,
    TrailingGarbage,
    Truncated,
    TruncatedRecord,
    UnknownShapeType,
)
from .parts import resolve_parts, split_parts
from .reader import Reader, ShapefileHeader, decode
from .shapes import (
    SHAPE_CLASS_FROM_SHAPETYPE,
    AnyShape,
    MultiPatch,
    MultiPoint,
    MultiPointM,
    MultiPointZ,
    NullShape,
    Point,
    PointM,
    PointZ,
    Polygon,
    PolygonM,
    PolygonZ,
    Polyline,
    PolylineM,
    PolylineZ,
    Shape,
)
from .types import BBox, MBox, Point2D, PointsT, ZBox

__all__ = [
    "__version__",
    "NULL",
    "POINT",
    "POLYLINE",
    "POLYGON",
    "MULTIPOINT",
    "POINTZ",
    "POLYLINEZ",
    "POLYGONZ",
    "MULTIPOINTZ",
    "POINTM",
    "POLYLINEM",
    "POLYGONM",
    "MULTIPOINTM",
    "MULTIPATCH",
    "NODATA",
    "SHAPETYPE_LOOKUP",
    "PARTTYPE_LOOKUP",
    "PartType",
    "decode",
    "Reader",
    "ShapefileHeader",
    "Shape",
    "AnyShape",
    "NullShape",
    "Point",
    "Polyline",
    "Polygon",
    "MultiPoint",
    "PointZ",
    "PolylineZ",
    "PolygonZ",
    "MultiPointZ",
    "PointM",
    "PolylineM",
    "PolygonM",
    "MultiPointM",
    "MultiPatch",
    "SHAPE_CLASS_FROM_SHAPETYPE",
    "Shapes",
    "ShapeRecord",
    "resolve_parts",
    "split_parts",
    "BBox",
    "ZBox",
    "MBox",
    "Point2D",
    "PointsT",
    "ShapefileException",
    "FormatError",
    "BadFileCode",
    "Truncated",
    "TruncatedRecord",
    "TrailingGarbage",
    "UnknownShapeType",
    "BadPartIndex",
    "InvalidPartType",
    "InvariantViolation",
    "FormatWarning",
    "BoundingBoxMismatch",
    "RecordNumberMismatch",
]
