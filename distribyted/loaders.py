"""Sources of magnet links and torrent files, grouped by route."""

from __future__ import annotations

import os
from typing import Iterator, Protocol, Sequence, runtime_checkable

from distribyted.config import Route

TORRENT_EXTENSION = ".torrent"


@runtime_checkable
class Loader(Protocol):
    """Lists magnet links and torrent file paths, keyed by route name."""

    def list_magnets(self) -> dict[str, list[str]]: ...

    def list_torrent_paths(self) -> dict[str, list[str]]: ...


class ConfigLoader:
    """Reads torrents listed directly in the configured routes."""

    def __init__(self, routes: Sequence[Route]) -> None:
        self._routes = list(routes)

    def list_magnets(self) -> dict[str, list[str]]:
        out: dict[str, list[str]] = {}
        for route in self._routes:
            for torrent in route.torrents:
                if torrent.magnet_uri:
                    out.setdefault(route.name, []).append(torrent.magnet_uri)
        return out

    def list_torrent_paths(self) -> dict[str, list[str]]:
        out: dict[str, list[str]] = {}
        for route in self._routes:
            for torrent in route.torrents:
                if torrent.torrent_path:
                    out.setdefault(route.name, []).append(torrent.torrent_path)
        return out


def _ext(path: str) -> str:
    base = path.rpartition("/")[2]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def _walk_files(root: str) -> Iterator[str]:
    """Yield regular files below ``root`` in lexical, depth-first order."""
    if not os.path.isdir(root):
        os.lstat(root)  # raises if the path does not exist
        yield root
        return
    with os.scandir(root) as it:
        entries = sorted(it, key=lambda entry: entry.name)
    for entry in entries:
        path = os.path.join(root, entry.name)
        if entry.is_dir(follow_symlinks=False):
            yield from _walk_files(path)
        else:
            yield path


class FolderLoader:
    """Finds ``.torrent`` files inside each route's torrent folder."""

    def __init__(self, routes: Sequence[Route]) -> None:
        self._routes = list(routes)

    def list_magnets(self) -> dict[str, list[str]]:
        return {}

    def list_torrent_paths(self) -> dict[str, list[str]]:
        """Walk every configured folder; errors while walking propagate."""
        out: dict[str, list[str]] = {}
        for route in self._routes:
            if not route.torrent_folder:
                continue
            for path in _walk_files(route.torrent_folder):
                if _ext(path) == TORRENT_EXTENSION:
                    out.setdefault(route.name, []).append(path)
        return out