# config.py
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
UPLOAD_DIR = Path(os.environ.get("BYTEVIZ_UPLOAD_DIR", Path(".").resolve() / "uploads"))
PLUGINS_DIR = BASE_DIR / "plugins"

MAX_CONTENT_LENGTH = int(os.environ.get("BYTEVIZ_MAX_CONTENT_LENGTH", 10 * 1024 * 1024))  # 10 MB

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", 4242))

RASTER_WIDTH = 256
RASTER_HEIGHT = 256
