from __future__ import annotations

import os
from os import PathLike
from struct import Struct, calcsize, unpack
from typing import Any, overload

from .exceptions import TruncatedRecord
from .types import ReadSeekableBinStream, T

# Helpers


unpack_2_int32_be = Struct(">2i").unpack


@overload
def fsdecode_if_pathlike(path: PathLike[Any]) -> str: ...
@overload
def fsdecode_if_pathlike(path: T) -> T: ...
def fsdecode_if_pathlike(path: Any) -> Any:
    if isinstance(path, PathLike):
        return os.fsdecode(path)  # str

    return path


def unpack_from_stream(
    fmt: str, b_io: ReadSeekableBinStream, what: str
) -> tuple[Any, ...]:
    """Reads exactly the bytes needed by the struct format 'fmt' and
    unpacks them. Raises TruncatedRecord, at the offset where the read
    started, if the stream ends first. 'what' names the field being read
    for the error message."""
    size = calcsize(fmt)
    offset = b_io.tell()
    data = b_io.read(size)
    if len(data) < size:
        raise TruncatedRecord(
            f"Record content ends before {what}: "
            f"needed {size} bytes, found {len(data)}",
            offset,
        )
    return unpack(fmt, data)


def bytes_left(b_io: ReadSeekableBinStream, next_shape: int) -> int:
    """Declared bytes not yet consumed in the current record."""
    return next_shape - b_io.tell()
