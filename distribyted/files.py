"""Core file and filesystem interfaces of the virtual tree."""

from __future__ import annotations

import stat
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class File(Protocol):
    """A read-only file or directory of the virtual tree."""

    def is_dir(self) -> bool: ...

    def size(self) -> int: ...

    def read(self, size: int = -1) -> bytes: ...

    def read_at(self, size: int, offset: int) -> bytes: ...

    def close(self) -> None: ...


@runtime_checkable
class Filesystem(Protocol):
    """A source of files addressed by slash-separated paths."""

    def open(self, filename: str) -> File: ...

    def read_dir(self, path: str) -> dict[str, File]: ...


@dataclass(frozen=True)
class FileInfo:
    """Name, size and kind of a file, as reported to clients."""

    name: str
    size: int
    is_dir: bool

    def mode(self) -> int:
        """Read-only permission bits, with the directory flag for directories."""
        if self.is_dir:
            return stat.S_IFDIR | 0o555
        return 0o555

    def mod_time(self) -> datetime:
        """Modification time; the tree keeps none, so this is now."""
        return datetime.now()


class Dir:
    """An empty directory node; reading it yields no data."""

    def __init__(self) -> None:
        self.closed = False

    def size(self) -> int:
        return 0

    def is_dir(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        """Read from the start of the (empty) content."""
        return self.read_at(max(size, 0), 0)

    def read_at(self, size: int, offset: int) -> bytes:
        """Read up to ``size`` bytes at ``offset``; a directory holds none."""
        if offset < 0:
            raise ValueError("negative offset")
        if size < 0:
            raise ValueError("negative size")
        return b""

    def close(self) -> None:
        """Mark the directory as closed."""
        self.closed = True