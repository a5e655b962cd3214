"""Persistent store of magnet links added at run time, keyed by route."""

from __future__ import annotations

import base64
import binascii
import re
import sqlite3
import threading
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

from distribyted.storage import clean

ROUTE_ROOT_KEY = "/route/"
_DB_FILE = "magnets.sqlite"
_HEX_HASH = re.compile(r"[0-9a-fA-F]{40}")
_BTIH_PREFIX = "urn:btih:"


class MagnetError(ValueError):
    """A magnet link or info hash could not be parsed."""


def _check_hex_hash(info_hash: str) -> str:
    if not _HEX_HASH.fullmatch(info_hash):
        raise MagnetError(f"invalid info hash: {info_hash!r}")
    return info_hash.lower()


def parse_magnet_info_hash(uri: str) -> str:
    """Return the lowercase hex info hash of a BitTorrent magnet link."""
    parts = urlsplit(uri)
    if parts.scheme != "magnet":
        raise MagnetError(f"expected magnet scheme in {uri!r}")
    topics = parse_qs(parts.query).get("xt", [])
    for topic in topics:
        if not topic.startswith(_BTIH_PREFIX):
            continue
        encoded = topic[len(_BTIH_PREFIX):]
        if len(encoded) == 40:
            return _check_hex_hash(encoded)
        if len(encoded) == 32:
            try:
                return base64.b32decode(encoded.upper()).hex()
            except (binascii.Error, ValueError) as exc:
                raise MagnetError(f"invalid base32 info hash: {encoded!r}") from exc
        raise MagnetError(f"unhandled info hash length: {encoded!r}")
    raise MagnetError(f"no btih exact topic in {uri!r}")


def _route_key(info_hash: str, route: str) -> str:
    return clean(f"{ROUTE_ROOT_KEY}{info_hash}/{route}")


class MagnetDB:
    """Stores magnets under ``/route/<hash>/<route>`` keys in a directory."""

    def __init__(self, path: str | Path) -> None:
        directory = Path(path)
        directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(directory / _DB_FILE), check_same_thread=False)
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS entries (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
            )

    def add_magnet(self, route: str, magnet: str) -> None:
        """Store a magnet for a route; MagnetError if the link is invalid."""
        key = _route_key(parse_magnet_info_hash(magnet), route)
        with self._lock, self._conn:
            self._conn.execute(
                "INSERT OR REPLACE INTO entries (key, value) VALUES (?, ?)", (key, magnet)
            )

    def remove_from_hash(self, route: str, info_hash: str) -> bool:
        """Delete the magnet with this hash from the route; False if it was absent."""
        _check_hex_hash(info_hash)
        key = _route_key(info_hash, route)
        with self._lock, self._conn:
            cursor = self._conn.execute("DELETE FROM entries WHERE key = ?", (key,))
            return cursor.rowcount > 0

    def list_magnets(self) -> dict[str, list[str]]:
        out: dict[str, list[str]] = {}
        with self._lock:
            rows = self._conn.execute(
                "SELECT key, value FROM entries WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(ROUTE_ROOT_KEY), ROUTE_ROOT_KEY),
            ).fetchall()
        for key, value in rows:
            route = key.rpartition("/")[2]
            out.setdefault(route, []).append(value)
        return out

    def list_torrent_paths(self) -> dict[str, list[str]]:
        return {}

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> MagnetDB:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()