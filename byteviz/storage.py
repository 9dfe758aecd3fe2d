# storage.py
# Single-slot upload store: the last uploaded file wins.
import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

SLOT_NAME = "uploaded_file"


class UploadMissing(Exception):
    """Raised when nothing has been uploaded into the slot yet."""


class UploadStore:
    def __init__(self, directory):
        self.directory = Path(directory)
        self.path = self.directory / SLOT_NAME

    def save(self, stream) -> int:
        """Copy a readable binary stream into the slot, replacing what was there."""
        self.directory.mkdir(parents=True, exist_ok=True)
        # one temp file per save, so overlapping uploads never share an inode
        out = tempfile.NamedTemporaryFile(dir=self.directory, prefix=SLOT_NAME + ".", suffix=".part", delete=False)
        tmp = Path(out.name)
        try:
            with out:
                shutil.copyfileobj(stream, out)
            size = tmp.stat().st_size
            os.replace(tmp, self.path)
        finally:
            # no-op once the replace went through
            tmp.unlink(missing_ok=True)
        logger.info("stored upload in %s (%d bytes)", self.path, size)
        return size

    def exists(self) -> bool:
        return self.path.is_file()

    def size(self) -> int:
        if not self.exists():
            raise UploadMissing("no file uploaded")
        return self.path.stat().st_size

    def load(self) -> bytes:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            raise UploadMissing("no file uploaded") from None

    def clear(self):
        self.path.unlink(missing_ok=True)
