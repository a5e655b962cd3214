"""A filesystem that mounts several filesystems under their own paths."""

from __future__ import annotations

from typing import Mapping

from distribyted.archive import SUPPORTED_FACTORIES
from distribyted.files import File, Filesystem
from distribyted.storage import Storage


class ContainerFs:
    """Joins filesystems into one tree, each mounted at its key."""

    def __init__(self, filesystems: Mapping[str, Filesystem]) -> None:
        self._storage = Storage(SUPPORTED_FACTORIES)
        for path, filesystem in filesystems.items():
            self._storage.add_fs(filesystem, path)

    def open(self, filename: str) -> File:
        return self._storage.get(filename)

    def read_dir(self, path: str) -> dict[str, File]:
        return self._storage.children(path)