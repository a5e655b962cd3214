"""Filesystems that expose the contents of archive files."""

from __future__ import annotations

import io
import threading
import zipfile
from typing import Callable, Protocol

from distribyted.files import Dir, File, Filesystem
from distribyted.iio import DiskTeeReader
from distribyted.storage import SEPARATOR, FsFactory, Storage, clean

ReaderFactory = Callable[[], DiskTeeReader]


class _Loader(Protocol):
    def get_files(self, reader: File, size: int) -> dict[str, ArchiveFile]: ...


class _ReaderAtStream(io.RawIOBase):
    """A seekable binary stream over an object that supports ``read_at``."""

    def __init__(self, reader: File, size: int) -> None:
        super().__init__()
        self._reader = reader
        self._size = size
        self._pos = 0

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        return self._pos

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            self._pos = offset
        elif whence == io.SEEK_CUR:
            self._pos += offset
        elif whence == io.SEEK_END:
            self._pos = self._size + offset
        else:
            raise ValueError(f"invalid whence: {whence}")
        return self._pos

    def readinto(self, buffer) -> int:  # type: ignore[no-untyped-def]
        view = memoryview(buffer).cast("B")
        if self._pos >= self._size:
            return 0
        data = self._reader.read_at(min(len(view), self._size - self._pos), self._pos)
        count = len(data)
        view[:count] = data
        self._pos += count
        return count


class ArchiveFile:
    """A file inside an archive, decompressed on first access."""

    def __init__(self, reader_factory: ReaderFactory, length: int) -> None:
        self._reader_factory = reader_factory
        self._reader: DiskTeeReader | None = None
        self._length = length

    def _load(self) -> DiskTeeReader:
        if self._reader is None:
            self._reader = self._reader_factory()
        return self._reader

    def size(self) -> int:
        return self._length

    def is_dir(self) -> bool:
        return False

    def read(self, size: int = -1) -> bytes:
        return self._load().read(size)

    def read_at(self, size: int, offset: int) -> bytes:
        return self._load().read_at(size, offset)

    def close(self) -> None:
        if self._reader is not None:
            reader, self._reader = self._reader, None
            reader.close()


class ZipLoader:
    """Lists the regular files of a zip archive."""

    def get_files(self, reader: File, size: int) -> dict[str, ArchiveFile]:
        archive = zipfile.ZipFile(_ReaderAtStream(reader, size))
        out: dict[str, ArchiveFile] = {}
        for info in archive.infolist():
            if info.is_dir():
                continue

            def opener(info: zipfile.ZipInfo = info) -> DiskTeeReader:
                return DiskTeeReader(archive.open(info))

            out[clean(info.filename)] = ArchiveFile(opener, info.file_size)
        return out


class Archive:
    """A filesystem over the entries of an archive, listed on first use."""

    def __init__(self, reader: File, size: int, loader: _Loader) -> None:
        self._reader = reader
        self._size = size
        self._loader = loader
        self._storage = Storage()
        self._lock = threading.Lock()
        self._loaded = False

    def _load_once(self) -> None:
        with self._lock:
            if self._loaded:
                return
            self._loaded = True
            files = self._loader.get_files(self._reader, self._size)
            for name, file in files.items():
                self._storage.add(file, name)

    def open(self, filename: str) -> File:
        if filename == SEPARATOR:
            return Dir()
        self._load_once()
        return self._storage.get(filename)

    def read_dir(self, path: str) -> dict[str, File]:
        self._load_once()
        return self._storage.children(path)


def _zip_factory(file: File) -> Filesystem:
    return Archive(file, file.size(), ZipLoader())


SUPPORTED_FACTORIES: dict[str, FsFactory] = {
    ".zip": _zip_factory,
}