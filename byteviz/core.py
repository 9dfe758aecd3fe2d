# byteviz.py
# Byte -> visualization mapping: printability classification, raster grid
# and hex/ASCII dump. Pure functions, no I/O.
from enum import IntEnum
from typing import List, NamedTuple

import numpy as np

PRINTABLE_MIN = 32   # space
PRINTABLE_MAX = 126  # tilde
BYTES_PER_ROW = 16
GUTTER_SEPARATOR = " | "
PLACEHOLDER = "."


class Category(IntEnum):
    NONPRINTABLE = 0
    PRINTABLE = 1


# raster cells not covered by any input byte
UNSET = -1


def classify_byte(b: int) -> Category:
    if not 0 <= b <= 255:
        raise ValueError(f"byte value out of range: {b}")
    if PRINTABLE_MIN <= b <= PRINTABLE_MAX:
        return Category.PRINTABLE
    return Category.NONPRINTABLE


def render_raster(data, width: int = 256, height: int = 256) -> np.ndarray:
    """
    Map bytes onto a (height, width) grid in row-major order.

    Cell i holds the Category of data[i]; cells past the end of the data are
    UNSET and bytes past width*height are dropped. The returned array is
    read-only.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"raster dimensions must be positive, got {width}x{height}")

    capacity = width * height
    cells = np.full(capacity, UNSET, dtype=np.int8)

    head = np.frombuffer(bytes(data[:capacity]), dtype=np.uint8)
    printable = (head >= PRINTABLE_MIN) & (head <= PRINTABLE_MAX)
    cells[:head.size] = np.where(printable, Category.PRINTABLE, Category.NONPRINTABLE)

    grid = cells.reshape(height, width)
    grid.flags.writeable = False
    return grid


def summarize(grid: np.ndarray) -> dict:
    return {
        "printable": int(np.count_nonzero(grid == Category.PRINTABLE)),
        "nonprintable": int(np.count_nonzero(grid == Category.NONPRINTABLE)),
        "unset": int(np.count_nonzero(grid == UNSET)),
    }


class HexDumpRow(NamedTuple):
    offset: int
    data: bytes
    hex: str
    ascii: str

    def __str__(self):
        return self.hex + GUTTER_SEPARATOR + self.ascii


def _gutter_char(b: int) -> str:
    return chr(b) if classify_byte(b) is Category.PRINTABLE else PLACEHOLDER


def hex_dump_rows(data) -> List[HexDumpRow]:
    """
    Split data into rows of up to 16 bytes. Short rows are not padded.
    """
    data = bytes(data)
    rows = []
    for offset in range(0, len(data), BYTES_PER_ROW):
        chunk = data[offset:offset + BYTES_PER_ROW]
        hex_part = "".join(f"{b:02x} " for b in chunk)
        ascii_part = "".join(_gutter_char(b) for b in chunk)
        rows.append(HexDumpRow(offset, chunk, hex_part, ascii_part))
    return rows


def render_hex_dump(data) -> str:
    return "".join(f"{row}\n" for row in hex_dump_rows(data))
