"""Path-indexed store of files and mounted filesystems."""

from __future__ import annotations

from typing import Callable, Mapping

from distribyted.files import Dir, File, Filesystem

SEPARATOR = "/"

FsFactory = Callable[[File], Filesystem]


def clean(path: str) -> str:
    """Normalise a path to a rooted, slash-separated form without dot segments."""
    parts: list[str] = []
    for segment in path.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts:
                parts.pop()
        else:
            parts.append(segment)
    return SEPARATOR + SEPARATOR.join(parts)


def _split(path: str) -> tuple[str, str]:
    head, _, tail = path.rpartition(SEPARATOR)
    return head + SEPARATOR, tail


def _ext(path: str) -> str:
    base = path.rpartition(SEPARATOR)[2]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


class Storage:
    """Files and filesystems indexed by path, with their directory structure.

    Files whose extension has a registered factory are turned into nested
    filesystems, so their contents appear below their own path.
    """

    def __init__(self, factories: Mapping[str, FsFactory] | None = None) -> None:
        self._factories: dict[str, FsFactory] = dict(factories or {})
        self._files: dict[str, File] = {}
        self._filesystems: dict[str, Filesystem] = {}
        self._children: dict[str, dict[str, File]] = {}

    def clear(self) -> None:
        """Drop every entry, leaving only the root directory."""
        self._files = {}
        self._children = {}
        self._filesystems = {}
        self.add(Dir(), SEPARATOR)

    def has(self, path: str) -> bool:
        """Tell whether the path names a stored file or one inside a filesystem."""
        path = clean(path)
        if path in self._files:
            return True
        try:
            return self._file_from_fs(path) is not None
        except Exception:  # any lookup failure means the path is absent
            return False

    def _check_existing(self, path: str) -> None:
        try:
            existing = self.get(path)
        except OSError:
            return
        if not existing.is_dir():
            raise FileExistsError(path)

    def add_fs(self, filesystem: Filesystem, path: str) -> None:
        """Mount a filesystem at the path.

        Raises FileExistsError if a regular file already occupies the path.
        """
        path = clean(path)
        if self.has(path):
            self._check_existing(path)
            return
        self._filesystems[path] = filesystem
        self._create_parent(path, Dir())

    def add(self, file: File, path: str) -> None:
        """Store a file at the path, creating parent directories.

        Raises FileExistsError if a regular file already occupies the path.
        """
        path = clean(path)
        if self.has(path):
            self._check_existing(path)
            return

        factory = self._factories.get(_ext(path))
        if factory is not None:
            self._filesystems[path] = factory(file)
        else:
            self._files[path] = file

        self._create_parent(path, file)

    def _create_parent(self, path: str, file: File) -> None:
        base, filename = _split(path)
        base = clean(base)
        self.add(Dir(), base)
        siblings = self._children.setdefault(base, {})
        if filename:
            siblings[filename] = file

    def children(self, path: str) -> dict[str, File]:
        """Return the entries of a directory, keyed by name."""
        path = clean(path)
        try:
            return self._dir_from_fs(path)
        except FileNotFoundError:
            pass
        return dict(self._children.get(path, {}))

    def get(self, path: str) -> File:
        """Return the file at the path; FileNotFoundError if there is none."""
        path = clean(path)
        if not self.has(path):
            raise FileNotFoundError(path)
        file = self._files.get(path)
        if file is not None:
            return file
        return self._file_from_fs(path)

    def _file_from_fs(self, path: str) -> File:
        for prefix, filesystem in self._filesystems.items():
            if path.startswith(prefix):
                return filesystem.open(SEPARATOR + path[len(prefix):])
        raise FileNotFoundError(path)

    def _dir_from_fs(self, path: str) -> dict[str, File]:
        for prefix, filesystem in self._filesystems.items():
            if path.startswith(prefix):
                return filesystem.read_dir(path[len(prefix):])
        raise FileNotFoundError(path)