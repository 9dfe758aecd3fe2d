# encoder.py
# Turns a raster grid of byte categories into a two-color PNG.
import base64
import io
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image

from .core import Category

RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Palette:
    printable: RGBA = (0, 255, 0, 255)  # green
    other: RGBA = (0, 0, 0, 255)        # black, also used for unset cells


DEFAULT_PALETTE = Palette()


def grid_to_image(grid: np.ndarray, palette: Palette = DEFAULT_PALETTE) -> Image.Image:
    h, w = grid.shape
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[...] = palette.other
    rgba[grid == Category.PRINTABLE] = palette.printable
    return Image.fromarray(rgba)  # (h, w, 4) uint8 -> RGBA


def encode_png(grid: np.ndarray, palette: Palette = DEFAULT_PALETTE) -> bytes:
    buf = io.BytesIO()
    grid_to_image(grid, palette).save(buf, format="PNG")
    return buf.getvalue()


def encode_png_base64(grid: np.ndarray, palette: Palette = DEFAULT_PALETTE) -> str:
    return base64.b64encode(encode_png(grid, palette)).decode("ascii")


def png_data_uri(grid: np.ndarray, palette: Palette = DEFAULT_PALETTE) -> str:
    return "data:image/png;base64," + encode_png_base64(grid, palette)
