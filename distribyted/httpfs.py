"""Adapts a virtual filesystem to file objects served over HTTP."""

from __future__ import annotations

import os
import threading

from distribyted.files import File, FileInfo, Filesystem
from distribyted.iio import SeekerWrapper


class HTTPFile:
    """An open file or directory with seeking, reading and directory listing."""

    def __init__(self, file: File, dir_content: list[FileInfo], info: FileInfo) -> None:
        self._reader = SeekerWrapper(file, file.size())
        self._dir_content = dir_content
        self._info = info
        self._dir_pos = 0
        self._lock = threading.Lock()

    def readdir(self, count: int) -> list[FileInfo]:
        """Return up to ``count`` further entries, or all entries if ``count <= 0``.

        Raises NotADirectoryError when the file is not a directory.
        """
        with self._lock:
            if not self._info.is_dir:
                raise NotADirectoryError(self._info.name)
            content = self._dir_content
            start = self._dir_pos
            if start >= len(content):
                return []
            if count > 0:
                self._dir_pos = min(start + count, len(content))
            else:
                self._dir_pos = len(content)
                start = 0
            return content[start:self._dir_pos]

    def stat(self) -> FileInfo:
        return self._info

    def read(self, size: int) -> bytes:
        return self._reader.read(size)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._reader.seek(offset, whence)

    def close(self) -> None:
        self._reader.close()

    def __enter__(self) -> HTTPFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class HTTPFS:
    """Opens files of a virtual filesystem for serving over HTTP."""

    def __init__(self, filesystem: Filesystem) -> None:
        self._fs = filesystem

    def open(self, name: str) -> HTTPFile:
        file = self._fs.open(name)
        info = FileInfo(name, file.size(), file.is_dir())
        entries = [
            FileInfo(child, f.size(), f.is_dir())
            for child, f in self._fs.read_dir(name).items()
        ]
        return HTTPFile(file, entries, info)