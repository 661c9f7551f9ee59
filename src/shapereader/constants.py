from __future__ import annotations

import os
from typing import Final

# Module settings
VERBOSE = True

# Default for the strict bounding box cross-check (Reader(strict=None))
STRICT = os.getenv("SHAPEREADER_STRICT", "").lower() == "yes"

# Relative and absolute tolerance used when comparing recomputed bounds
BBOX_TOLERANCE = 1e-9

# File layout
FILE_CODE = 9994
FILE_VERSION = 1000
HEADER_SIZE = 100
RECORD_HEADER_SIZE = 8

# Constants for shape types
NULL = 0
POINT = 1
POLYLINE = 3
POLYGON = 5
MULTIPOINT = 8
POINTZ = 11
POLYLINEZ = 13
POLYGONZ = 15
MULTIPOINTZ = 18
POINTM = 21
POLYLINEM = 23
POLYGONM = 25
MULTIPOINTM = 28
MULTIPATCH = 31

SHAPETYPE_LOOKUP = {
    NULL: "NULL",
    POINT: "POINT",
    POLYLINE: "POLYLINE",
    POLYGON: "POLYGON",
    MULTIPOINT: "MULTIPOINT",
    POINTZ: "POINTZ",
    POLYLINEZ: "POLYLINEZ",
    POLYGONZ: "POLYGONZ",
    MULTIPOINTZ: "MULTIPOINTZ",
    POINTM: "POINTM",
    POLYLINEM: "POLYLINEM",
    POLYGONM: "POLYGONM",
    MULTIPOINTM: "MULTIPOINTM",
    MULTIPATCH: "MULTIPATCH",
}


class PartType:
    """A bare bones 'enum' of the MultiPatch part types, as the enum
    library noticeably slows performance."""

    TRIANGLE_STRIP: Final = 0
    TRIANGLE_FAN: Final = 1
    OUTER_RING: Final = 2
    INNER_RING: Final = 3
    FIRST_RING: Final = 4
    RING: Final = 5


PARTTYPE_LOOKUP = {
    PartType.TRIANGLE_STRIP: "TRIANGLE_STRIP",
    PartType.TRIANGLE_FAN: "TRIANGLE_FAN",
    PartType.OUTER_RING: "OUTER_RING",
    PartType.INNER_RING: "INNER_RING",
    PartType.FIRST_RING: "FIRST_RING",
    PartType.RING: "RING",
}

# Measure values at or below this are nodata values according to the ESRI spec.
NODATA = -1.0e38
