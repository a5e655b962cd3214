"""Filesystem operations for a FUSE mount of a virtual filesystem."""

from __future__ import annotations

import errno
import logging
import stat
import threading
from dataclasses import dataclass

from distribyted.files import File, Filesystem

FH_NONE = (1 << 64) - 1

_log = logging.getLogger(__name__)


@dataclass
class Stat:
    """File attributes reported to the kernel."""

    mode: int = 0
    size: int = 0


class FileHandler:
    """Keeps open files indexed by numeric handles."""

    def __init__(self, filesystem: Filesystem) -> None:
        self._fs = filesystem
        self._opened: list[File | None] = []
        self._lock = threading.RLock()

    def get_file(self, path: str, handle: int) -> File:
        """Return the open file for ``handle``, or look ``path`` up if there is none."""
        with self._lock:
            if handle == FH_NONE:
                return self._lookup_file(path)
            return self._get(handle)

    def list_dir(self, path: str) -> list[str]:
        with self._lock:
            return list(self._fs.read_dir(path))

    def open_holder(self, path: str) -> int:
        """Open the file at ``path`` and return its handle, reusing free slots."""
        file = self._lookup_file(path)
        with self._lock:
            for index, old in enumerate(self._opened):
                if old is None:
                    self._opened[index] = file
                    return index
            self._opened.append(file)
            return len(self._opened) - 1

    def _get(self, handle: int) -> File:
        if handle >= len(self._opened):
            raise IndexError("holder index too big")
        file = self._opened[handle]
        if file is None:
            raise LookupError("file holder is empty")
        return file

    def remove(self, handle: int) -> None:
        """Close the file behind ``handle`` and free the slot."""
        with self._lock:
            if handle == FH_NONE:
                return
            file = self._get(handle)
            file.close()
            self._opened[handle] = None

    def _lookup_file(self, path: str) -> File:
        file = self._fs.open(path)
        if file is None:
            raise FileNotFoundError(path)
        return file


def _os_error(code: int, path: str) -> OSError:
    return OSError(code, f"{errno.errorcode.get(code, code)}: {path}", path)


class MountOperations:
    """Read-only FUSE operations; failures raise OSError with an errno."""

    def __init__(self, filesystem: Filesystem) -> None:
        self._handler = FileHandler(filesystem)

    def open(self, path: str, flags: int = 0) -> int:
        try:
            return self._handler.open_holder(path)
        except FileNotFoundError:
            _log.debug("file does not exist: %s", path)
            raise _os_error(errno.ENOENT, path) from None
        except Exception as exc:
            _log.error("error opening file %s: %s", path, exc)
            raise _os_error(errno.EIO, path) from exc

    def opendir(self, path: str) -> int:
        return self.open(path, 0)

    def getattr(self, path: str, handle: int = FH_NONE) -> Stat:
        if path == "/":
            return Stat(mode=stat.S_IFDIR | 0o555)
        file = self._file(path, handle)
        if file.is_dir():
            return Stat(mode=stat.S_IFDIR | 0o555)
        return Stat(mode=stat.S_IFREG | 0o444, size=file.size())

    def read(self, path: str, size: int, offset: int, handle: int = FH_NONE) -> bytes:
        file = self._file(path, handle)
        end = max(0, min(size, file.size() - offset))
        try:
            return file.read_at(end, offset)
        except Exception as exc:
            _log.error("error reading data from %s: %s", path, exc)
            raise _os_error(errno.EIO, path) from exc

    def release(self, path: str, handle: int) -> None:
        try:
            self._handler.remove(handle)
        except Exception as exc:
            _log.error("error releasing file %s: %s", path, exc)
            raise _os_error(errno.EIO, path) from exc

    def releasedir(self, path: str, handle: int) -> None:
        self.release(path, handle)

    def readdir(self, path: str) -> list[str]:
        try:
            names = self._handler.list_dir(path)
        except Exception as exc:
            _log.error("error reading directory %s: %s", path, exc)
            raise _os_error(errno.ENOSYS, path) from exc
        return [".", "..", *names]

    def _file(self, path: str, handle: int) -> File:
        try:
            return self._handler.get_file(path, handle)
        except FileNotFoundError:
            _log.debug("file does not exist: %s", path)
            raise _os_error(errno.ENOENT, path) from None
        except Exception as exc:
            _log.error("error getting file %s: %s", path, exc)
            raise _os_error(errno.EIO, path) from exc