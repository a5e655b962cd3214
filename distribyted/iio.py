"""Random-access readers: a disk-backed tee reader and a seekable wrapper."""

from __future__ import annotations

import os
import tempfile
import threading
from typing import BinaryIO, Protocol

_COPY_CHUNK = 64 * 1024


class _ReaderAt(Protocol):
    def read_at(self, size: int, offset: int) -> bytes: ...

    def close(self) -> None: ...


class DiskTeeReader:
    """Give random access to a forward-only stream.

    Bytes pulled from the source are copied to a temporary file, which then
    serves reads at arbitrary offsets.
    """

    def __init__(self, source: BinaryIO) -> None:
        self._source = source
        self._lock = threading.Lock()
        self._written = 0
        handle = tempfile.NamedTemporaryFile(prefix="dtb_tmp", delete=False)
        self._path = handle.name
        self._file = handle

    def _tee(self, size: int) -> bytes:
        data = self._source.read(size)
        if data:
            self._file.seek(self._written)
            self._file.write(data)
            self._written += len(data)
        return data

    def read(self, size: int = -1) -> bytes:
        """Read the next bytes straight from the source, keeping a copy."""
        with self._lock:
            return self._tee(size)

    def read_at(self, size: int, offset: int) -> bytes:
        """Read up to ``size`` bytes at ``offset``; shorter at end of data."""
        with self._lock:
            remaining = offset + size - self._written
            while remaining > 0:
                chunk = self._tee(min(remaining, _COPY_CHUNK))
                if not chunk:
                    break
                remaining -= len(chunk)
            self._file.flush()
            self._file.seek(offset)
            return self._file.read(size)

    def close(self) -> None:
        """Close and delete the temporary file."""
        self._file.close()
        os.remove(self._path)

    def __enter__(self) -> DiskTeeReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class SeekerWrapper:
    """Add a position and sequential reads to a random-access reader."""

    def __init__(self, reader: _ReaderAt, size: int) -> None:
        self._reader = reader
        self._size = size
        self._pos = 0
        self._lock = threading.Lock()

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the position and return the new one."""
        with self._lock:
            if whence == os.SEEK_SET:
                self._pos = offset
            elif whence == os.SEEK_CUR:
                self._pos += offset
            elif whence == os.SEEK_END:
                self._pos = self._size + offset
            else:
                raise ValueError(f"invalid whence: {whence}")
            return self._pos

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes from the current position."""
        with self._lock:
            data = self._reader.read_at(size, self._pos)
            self._pos += len(data)
            return data

    def read_at(self, size: int, offset: int) -> bytes:
        """Read at an explicit offset without moving the position."""
        return self._reader.read_at(size, offset)

    def close(self) -> None:
        """Close the wrapped reader."""
        self._reader.close()

    def __enter__(self) -> SeekerWrapper:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()