"""An in-memory filesystem."""

from __future__ import annotations

import threading

from distribyted.files import File
from distribyted.storage import Storage


class MemoryFile:
    """A read-only file holding its content in memory."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0
        self._lock = threading.Lock()
        self.closed = False

    def size(self) -> int:
        return len(self._data)

    def is_dir(self) -> bool:
        return False

    def read(self, size: int = -1) -> bytes:
        """Read sequentially from the current position."""
        with self._lock:
            end = len(self._data) if size < 0 else self._pos + size
            chunk = self._data[self._pos:end]
            self._pos += len(chunk)
            return chunk

    def read_at(self, size: int, offset: int) -> bytes:
        """Read up to ``size`` bytes at ``offset``."""
        if offset < 0:
            raise ValueError("negative offset")
        return self._data[offset:offset + size]

    def close(self) -> None:
        """Mark the file as closed; its content stays readable."""
        self.closed = True


class Memory:
    """A filesystem whose files are added to its storage directly."""

    def __init__(self) -> None:
        self.storage = Storage()

    def open(self, filename: str) -> File:
        return self.storage.get(filename)

    def read_dir(self, path: str) -> dict[str, File]:
        return self.storage.children(path)