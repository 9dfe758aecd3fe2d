# hex_dump_viewer.py
from pathlib import Path

from byteviz.core import hex_dump_rows, render_hex_dump


class HexDumpViewerPlugin:
    name = "hex_dump_viewer"

    def can_handle(self, mime, path):
        return True

    def analyze(self, path):
        data = Path(path).read_bytes()
        return {
            "description": "Hex/ASCII dump, 16 bytes per row",
            "rows": len(hex_dump_rows(data)),
            "text": render_hex_dump(data),
        }
