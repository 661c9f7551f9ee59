from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from .exceptions import ShapefileException
from .reader import Reader
from .shapes import Shape


def _describe(shape: Shape) -> str:
    points = getattr(shape, "points", None)
    parts = getattr(shape, "parts", None)
    desc = shape.shapeTypeName
    if points is not None:
        desc += f" points={len(points)}"
    if parts is not None:
        desc += f" parts={len(parts)}"
    return desc


def main(argv: Sequence[str] | None = None) -> int:
    """Prints a summary of a .shp file and one line per record."""
    parser = argparse.ArgumentParser(
        prog="shapereader", description="Summarise the records of a .shp file."
    )
    parser.add_argument("shapefile", help="path to the .shp file")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="recompute stored bounding boxes and warn on mismatches",
    )
    parser.add_argument(
        "--limit", type=int, default=None, help="only list the first N records"
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    logging.captureWarnings(True)

    try:
        with Reader(args.shapefile, strict=args.strict) as reader:
            print(reader)
            for n, record in enumerate(reader.iterShapeRecords()):
                if args.limit is not None and n >= args.limit:
                    break
                print(f"#{record.recordNumber} {_describe(record.shape)}")
    except ShapefileException as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
