"""
File-backed key/value store with a localStorage-shaped interface.

Every call opens the file it needs, does one read or write and closes it
again; no handle is held between calls.
"""

import os
import re
import logging
import tempfile
from typing import Optional

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStore:
    """One UTF-8 file per key under a directory"""

    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        if not KEY_PATTERN.match(key) or key in (".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return os.path.join(self.directory, f"{key}.json")

    def get_item(self, key: str) -> Optional[str]:
        """Read a value, None if the key was never written"""
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        """Write a value atomically"""
        path = self._path(key)
        os.makedirs(self.directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug(f"Stored {len(value)} chars under {key}")

    def remove_item(self, key: str) -> bool:
        """Delete a key; returns False if it did not exist"""
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            return False
        return True

    def has_item(self, key: str) -> bool:
        return os.path.exists(self._path(key))
