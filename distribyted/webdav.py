"""Read-only WebDAV view of a filesystem."""

from __future__ import annotations

import os
import threading
from typing import Callable, NoReturn

from distribyted.files import File, FileInfo, Filesystem


class OperationNotSupported(Exception):
    """The WebDAV view is read-only and does not support this operation."""


def _unsupported(operation: str, target: str) -> NoReturn:
    raise OperationNotSupported(f"{operation} {target}: filesystem is read-only")


def _base(path: str) -> str:
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rpartition("/")[2]


class WebDAVFile:
    """An open file or directory served over WebDAV."""

    def __init__(
        self,
        name: str,
        file: File,
        dir_func: Callable[[], list[FileInfo]],
    ) -> None:
        self._file = file
        self._info = FileInfo(name, file.size(), file.is_dir())
        self._dir_func = dir_func
        self._dir_content: list[FileInfo] | None = None
        self._dir_pos = 0
        self._dir_lock = threading.Lock()
        self._pos = 0
        self._pos_lock = threading.Lock()

    def readdir(self, count: int) -> list[FileInfo]:
        """Return up to ``count`` further entries, or all entries if ``count <= 0``.

        Raises NotADirectoryError when the file is not a directory.
        """
        with self._dir_lock:
            if not self._info.is_dir:
                raise NotADirectoryError(self._info.name)
            if self._dir_content is None:
                self._dir_content = self._dir_func()

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
        """Read up to ``size`` bytes from the current position."""
        with self._pos_lock:
            data = self._file.read_at(size, self._pos)
            self._pos += len(data)
            return data

    def read_at(self, size: int, offset: int) -> bytes:
        return self._file.read_at(size, offset)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the position and return the new one."""
        with self._pos_lock:
            if whence == os.SEEK_SET:
                self._pos = offset
            elif whence == os.SEEK_CUR:
                self._pos += offset
            elif whence == os.SEEK_END:
                self._pos = self._info.size + offset
            else:
                raise ValueError(f"invalid whence: {whence}")
            return self._pos

    def write(self, data: bytes) -> int:
        """Always refused: the view is read-only."""
        _unsupported("write", self._info.name)

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> WebDAVFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class WebDAV:
    """A read-only WebDAV filesystem backed by a virtual filesystem."""

    def __init__(self, filesystem: Filesystem) -> None:
        self._fs = filesystem

    def open_file(self, name: str) -> WebDAVFile:
        path = "/" + name
        file = self._fs.open(path)
        return WebDAVFile(_base(path), file, lambda: self._list_dir(path))

    def stat(self, name: str) -> FileInfo:
        file = self._fs.open("/" + name)
        return FileInfo(name, file.size(), file.is_dir())

    def mkdir(self, name: str) -> None:
        """Always refused: the view is read-only."""
        _unsupported("mkdir", name)

    def remove_all(self, name: str) -> None:
        """Always refused: the view is read-only."""
        _unsupported("remove_all", name)

    def rename(self, old_name: str, new_name: str) -> None:
        """Always refused: the view is read-only."""
        _unsupported("rename", f"{old_name} -> {new_name}")

    def _list_dir(self, path: str) -> list[FileInfo]:
        return [
            FileInfo(name, file.size(), file.is_dir())
            for name, file in self._fs.read_dir(path).items()
        ]