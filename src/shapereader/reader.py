from __future__ import annotations

import io
import logging
import os
import warnings
from collections.abc import Iterator
from struct import unpack
from types import TracebackType
from typing import IO, NamedTuple, Optional

from . import constants
from .classes import ShapeRecord, Shapes
from .constants import (
    FILE_CODE,
    FILE_VERSION,
    HEADER_SIZE,
    NODATA,
    RECORD_HEADER_SIZE,
    SHAPETYPE_LOOKUP,
)
from .exceptions import (
    BadFileCode,
    BoundingBoxMismatch,
    FormatError,
    RecordNumberMismatch,
    ShapefileException,
    TrailingGarbage,
    Truncated,
    TruncatedRecord,
    UnknownShapeType,
)
from .helpers import fsdecode_if_pathlike, unpack_2_int32_be
from .shapes import SHAPE_CLASS_FROM_SHAPETYPE, Shape
from .types import BBox, BinarySourceT, ZBox

logger = logging.getLogger(__name__)


class ShapefileHeader(NamedTuple):
    """The fixed 100 byte header at the start of a .shp file.
    fileLength is in bytes (the file stores 16-bit words)."""

    fileCode: int
    fileLength: int
    version: int
    shapeType: int
    bbox: BBox
    zbox: ZBox
    mbox: tuple[Optional[float], Optional[float]]


class Reader:
    """Reads the geometry of a shapefile from its .shp file.

    The "source" argument in the constructor is the path to a .shp
    file (the extension is optional), the raw bytes of one, or any
    binary file-like object. File objects are rewound and read in place
    if they can seek, or copied into memory if they cannot.

    Only the file header is read upon loading. Records are decoded one
    at a time, in file order, as the shapes are iterated. A malformed
    record stops the iteration with a FormatError; no record is ever
    skipped, so the n-th shape always belongs to the n-th record.

    If strict is True (default: constants.STRICT) the stored bounding
    box and z/m ranges of every shape are recomputed from its points and
    a BoundingBoxMismatch warning is issued where they disagree.
    """

    def __init__(
        self,
        source: BinarySourceT,
        /,
        *,
        strict: bool | None = None,
    ):
        self._files_to_close: list[IO[bytes]] = []
        self.strict = constants.STRICT if strict is None else strict
        self._offsets: list[int] | None = None
        self.shp = self.__open(source)
        try:
            self.header = self.__shpHeader()
        except FormatError:
            self.close()
            raise

    def __open(self, source: BinarySourceT) -> IO[bytes]:
        if isinstance(source, (bytes, bytearray, memoryview)):
            return io.BytesIO(bytes(source))

        path = fsdecode_if_pathlike(source)
        if isinstance(path, str):
            baseName, ext = os.path.splitext(path)
            if ext.lower() != ".shp":
                baseName = path
            for candidate in (f"{baseName}.shp", f"{baseName}.SHP"):
                try:
                    shp = open(candidate, "rb")
                except OSError:
                    continue
                self._files_to_close.append(shp)
                return shp
            raise ShapefileException(f"Unable to open {baseName}.shp")

        if hasattr(source, "read"):
            # Copy if required
            try:
                source.seek(0)
                return source
            except (AttributeError, io.UnsupportedOperation):
                return io.BytesIO(source.read())

        raise ShapefileException(f"Could not load shapefile from: {source!r}")

    def __str__(self) -> str:
        """
        Use some general info on the shapefile as __str__
        """
        return "\n".join(
            [
                "shapefile Reader",
                f"    type '{self.shapeTypeName}', {self.header.fileLength} bytes",
                f"    bbox {tuple(self.bbox)}",
            ]
        )

    def __enter__(self) -> Reader:
        """
        Enter phase of context manager.
        """
        return self

    def __exit__(
        self,
        exc_type: BaseException | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        """
        Exit phase of context manager, close opened files.
        """
        self.close()
        return None

    def __del__(self) -> None:
        self.close()

    def close(self) -> None:
        # Close any files that the reader opened (but not those given by user)
        for f in getattr(self, "_files_to_close", []):
            try:
                f.close()
            except OSError:
                pass
        self._files_to_close = []

    def __len__(self) -> int:
        """Returns the number of records in the shapefile."""
        return len(self.offsets())

    def __iter__(self) -> Iterator[Shape]:
        """Iterates through the shapes in the shapefile."""
        yield from self.iterShapes()

    @property
    def shapeType(self) -> int:
        return self.header.shapeType

    @property
    def shapeTypeName(self) -> str:
        return SHAPETYPE_LOOKUP[self.header.shapeType]

    @property
    def bbox(self) -> BBox:
        return self.header.bbox

    @property
    def zbox(self) -> ZBox:
        return self.header.zbox

    @property
    def mbox(self) -> tuple[Optional[float], Optional[float]]:
        return self.header.mbox

    def __shpHeader(self) -> ShapefileHeader:
        """Reads the header information from a .shp file."""
        shp = self.shp
        shp.seek(0)
        data = shp.read(HEADER_SIZE)
        if len(data) < HEADER_SIZE:
            raise Truncated(
                f"File header needs {HEADER_SIZE} bytes, found {len(data)}", len(data)
            )

        (fileCode,) = unpack(">i", data[0:4])
        if fileCode != FILE_CODE:
            raise BadFileCode(f"File code is {fileCode}, expected {FILE_CODE}", 0)

        # File length (16-bit word * 2 = bytes)
        fileLength = unpack(">i", data[24:28])[0] * 2
        if fileLength < HEADER_SIZE:
            raise Truncated(
                f"Declared file length {fileLength} bytes is shorter than the header",
                24,
            )

        version, shapeType = unpack("<2i", data[28:36])
        if version != FILE_VERSION and constants.VERBOSE:
            logger.warning(
                "Unexpected shapefile version %d (expected %d)", version, FILE_VERSION
            )
        if shapeType not in SHAPETYPE_LOOKUP:
            raise UnknownShapeType(shapeType, 32)

        # The shapefile's bounding box (lower left, upper right)
        bbox = BBox(*unpack("<4d", data[36:68]))
        # Elevation
        zbox = ZBox(*unpack("<2d", data[68:84]))
        # Measure values at or below NODATA are nodata values according to the ESRI spec
        mmin, mmax = (
            None if m_bound <= NODATA else m_bound
            for m_bound in unpack("<2d", data[84:100])
        )

        logger.debug(
            "Read shp header: type %s, %d bytes",
            SHAPETYPE_LOOKUP[shapeType],
            fileLength,
        )
        return ShapefileHeader(
            fileCode=fileCode,
            fileLength=fileLength,
            version=version,
            shapeType=shapeType,
            bbox=bbox,
            zbox=zbox,
            mbox=(mmin, mmax),
        )

    def __recordHeader(self, offset: int) -> tuple[int, int]:
        """Reads the record number and content length (in bytes) of the
        record header at offset, checking the record fits in the file."""
        fileLength = self.header.fileLength
        if fileLength - offset < RECORD_HEADER_SIZE:
            raise TrailingGarbage(
                f"{fileLength - offset} bytes left before the declared end of file, "
                "too few for a record header",
                offset,
            )

        shp = self.shp
        shp.seek(offset)
        data = shp.read(RECORD_HEADER_SIZE)
        if len(data) < RECORD_HEADER_SIZE:
            raise TruncatedRecord(
                f"File ends inside a record header: {len(data)} of "
                f"{RECORD_HEADER_SIZE} bytes",
                offset,
            )

        recNum, recLength = unpack_2_int32_be(data)
        # Convert from num of 16 bit words, to 8 bit bytes
        recLength_bytes = 2 * recLength

        if recLength_bytes < 4:
            raise TruncatedRecord(
                f"Declared content length of {recLength_bytes} bytes "
                "cannot hold a shape type",
                offset + 4,
                recNum,
            )
        if offset + RECORD_HEADER_SIZE + recLength_bytes > fileLength:
            raise TruncatedRecord(
                f"Record content of {recLength_bytes} bytes runs past the "
                f"declared file length of {fileLength} bytes",
                offset + 4,
                recNum,
            )
        return recNum, recLength_bytes

    def __shapeRecord(self, offset: int) -> tuple[ShapeRecord, int]:
        """Decodes the record starting at offset. Returns it along with
        the offset of the next record."""
        recNum, recLength_bytes = self.__recordHeader(offset)
        content_start = offset + RECORD_HEADER_SIZE

        # Read entire record into memory, the decoders never see past its end
        content = self.shp.read(recLength_bytes)
        if len(content) < recLength_bytes:
            raise TruncatedRecord(
                f"Declared content length is {recLength_bytes} bytes, "
                f"but only {len(content)} are available",
                content_start,
                recNum,
            )
        b_io = io.BytesIO(content)

        try:
            (shapeType,) = unpack("<i", b_io.read(4))
            ShapeClass = SHAPE_CLASS_FROM_SHAPETYPE.get(shapeType)
            if ShapeClass is None:
                raise UnknownShapeType(shapeType, 0)
            shape = ShapeClass.from_byte_stream(b_io, recLength_bytes)
        except FormatError as e:
            # Decoders only know their position within the record content
            e.offset += content_start
            e.recordNumber = recNum
            raise

        padding = recLength_bytes - b_io.tell()
        if padding:
            logger.debug("Record %d: ignoring %d bytes of padding", recNum, padding)

        if self.strict:
            for mismatch in shape.bounds_mismatches():
                warnings.warn(
                    BoundingBoxMismatch(
                        f"{shape.shapeTypeName}: {mismatch}", offset, recNum
                    ),
                    stacklevel=3,
                )

        return (
            ShapeRecord(recordNumber=recNum, offset=offset, shape=shape),
            content_start + recLength_bytes,
        )

    def offsets(self) -> list[int]:
        """Returns the file offset of every record header, found by a
        fast pass that reads only the record headers. The result is
        cached and used for len() and random access."""
        if self._offsets is None:
            shp = self.shp
            checkpoint = shp.tell()
            offsets = []
            pos = HEADER_SIZE
            while pos < self.header.fileLength:
                offsets.append(pos)
                __recNum, recLength_bytes = self.__recordHeader(pos)
                # Jump to next shape position
                pos += RECORD_HEADER_SIZE + recLength_bytes
            self._offsets = offsets
            # Return to previous file position
            shp.seek(checkpoint)
        return self._offsets

    def __restrictIndex(self, i: int) -> int:
        """Provides list-like handling of a record index with a clearer
        error message if the index is out of bounds."""
        numRecords = len(self.offsets())
        if not -numRecords <= i < numRecords:
            raise IndexError(
                f"Shape index: {i} out of range.  Number of shapes: {numRecords}"
            )
        return range(numRecords)[i]

    def shapeRecord(self, i: int = 0) -> ShapeRecord:
        """Returns the record number, offset and shape of the i-th record."""
        i = self.__restrictIndex(i)
        record, __next = self.__shapeRecord(self.offsets()[i])
        return record

    def shape(self, i: int = 0) -> Shape:
        """Returns the shape of the i-th record in the file."""
        return self.shapeRecord(i).shape

    def iterShapeRecords(self) -> Iterator[ShapeRecord]:
        """Returns a generator of the records in the shapefile, in file
        order. Each call starts a new pass over the file."""
        fileLength = self.header.fileLength
        pos = HEADER_SIZE
        expected = 1
        offsets = []
        while pos < fileLength:
            offsets.append(pos)
            record, pos = self.__shapeRecord(pos)
            if record.recordNumber != expected:
                warnings.warn(
                    RecordNumberMismatch(
                        f"Record number {record.recordNumber}, expected {expected}",
                        record.offset,
                        record.recordNumber,
                    ),
                    stacklevel=2,
                )
            expected = record.recordNumber + 1
            yield record

        # Entire shp file consumed, keep the offsets for random access
        self._offsets = offsets

        shp = self.shp
        shp.seek(0, 2)
        extra = shp.tell() - fileLength
        if extra > 0:
            logger.debug("Ignoring %d bytes past the declared end of file", extra)

    def iterShapes(self) -> Iterator[Shape]:
        """Returns a generator of shapes in the shapefile. Useful
        for handling large shapefiles."""
        for record in self.iterShapeRecords():
            yield record.shape

    def shapes(self) -> Shapes:
        """Returns all shapes in the shapefile."""
        return Shapes(self.iterShapes())


def decode(source: BinarySourceT, strict: bool | None = None) -> Iterator[Shape]:
    """Lazily decodes every shape of a .shp file, in record order.

    The returned generator reads one record per step and is not
    restartable. Any FormatError ends the iteration. Stopping early is
    fine: the file opened for a path is closed with the generator.
    """
    with Reader(source, strict=strict) as reader:
        yield from reader.iterShapes()
