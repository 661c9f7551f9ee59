from __future__ import annotations


class ShapefileException(Exception):
    """An exception to handle shapefile specific problems."""


class FormatError(ShapefileException):
    """The bytes being decoded are not a well formed shapefile.

    Every FormatError is terminal for the decode in progress. The byte
    offset is absolute within the .shp file once the error has left the
    record loop, and recordNumber is None for problems in the file header.
    """

    kind = "formatError"

    def __init__(
        self,
        message: str,
        offset: int = 0,
        recordNumber: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.recordNumber = recordNumber

    def __str__(self) -> str:
        where = f"offset {self.offset}"
        if self.recordNumber is not None:
            where = f"record {self.recordNumber}, {where}"
        return f"{self.message} ({where})"


class BadFileCode(FormatError):
    kind = "badFileCode"


class Truncated(FormatError):
    kind = "truncated"


class TruncatedRecord(FormatError):
    kind = "truncatedRecord"


class TrailingGarbage(FormatError):
    kind = "trailingGarbage"


class UnknownShapeType(FormatError):
    kind = "unknownShapeType"

    def __init__(
        self,
        code: int,
        offset: int = 0,
        recordNumber: int | None = None,
    ):
        super().__init__(f"Unknown shape type: {code}", offset, recordNumber)
        self.code = code


class BadPartIndex(FormatError):
    kind = "badPartIndex"


class InvalidPartType(FormatError):
    kind = "invalidPartType"

    def __init__(
        self,
        partType: int,
        offset: int = 0,
        recordNumber: int | None = None,
    ):
        super().__init__(
            f"Invalid MultiPatch part type: {partType}", offset, recordNumber
        )
        self.partType = partType


class InvariantViolation(FormatError):
    kind = "invariantViolation"


class FormatWarning(UserWarning):
    """A non-fatal oddity found while decoding. Shapes are still emitted."""

    kind = "formatWarning"

    def __init__(self, message: str, offset: int, recordNumber: int | None):
        super().__init__(f"{message} (record {recordNumber}, offset {offset})")
        self.offset = offset
        self.recordNumber = recordNumber


class BoundingBoxMismatch(FormatWarning):
    kind = "boundingBoxMismatch"


class RecordNumberMismatch(FormatWarning):
    kind = "recordNumberMismatch"
