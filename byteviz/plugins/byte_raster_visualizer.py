# byte_raster_visualizer.py
# Renders the first width*height bytes of a file as a two-color pixel grid:
# green for printable ASCII, black for everything else.
from pathlib import Path

from byteviz.core import render_raster, summarize
from byteviz.config import RASTER_WIDTH, RASTER_HEIGHT
from byteviz.encoder import encode_png_base64


class ByteRasterVisualizerPlugin:
    name = "byte_raster_visualizer"

    def __init__(self, width=RASTER_WIDTH, height=RASTER_HEIGHT):
        self.width = width
        self.height = height

    def can_handle(self, mime, path):
        # every file is a byte sequence
        return True

    def analyze(self, path):
        data = Path(path).read_bytes()
        grid = render_raster(data, self.width, self.height)

        return {
            "description": "Byte raster (green = printable ASCII, black = other / past end of file)",
            "width": self.width,
            "height": self.height,
            "truncated": len(data) > self.width * self.height,
            "cells": summarize(grid),
            "png": encode_png_base64(grid),
        }
