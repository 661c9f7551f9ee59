from __future__ import annotations

from os import PathLike
from typing import IO, Any, NamedTuple, Optional, Protocol, TypeVar, Union

## Custom type variables

T = TypeVar("T")
Point2D = tuple[float, float]
PointsT = tuple[Point2D, ...]
MValuesT = tuple[Optional[float], ...]


class BBox(NamedTuple):
    xmin: float
    ymin: float
    xmax: float
    ymax: float


class ZBox(NamedTuple):
    zmin: float
    zmax: float


class MBox(NamedTuple):
    mmin: float
    mmax: float


class ReadSeekableBinStream(Protocol):
    def seek(self, offset: int, whence: int = 0) -> int: ...
    def tell(self) -> int: ...
    def read(self, size: int = -1) -> bytes: ...


# File name, raw bytes, or file object with a read() method that returns bytes.
BytesLike = Union[bytes, bytearray, memoryview]
BinarySourceT = Union[str, PathLike[Any], BytesLike, IO[bytes]]
