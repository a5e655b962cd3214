"""Persistent peer identifier of this node."""

from __future__ import annotations

import os
import secrets
from pathlib import Path

PEER_ID_LENGTH = 20


def get_or_create_peer_id(path: str | Path) -> bytes:
    """Return the 20-byte peer id stored at ``path``, creating a random one if absent.

    A stored id shorter than 20 bytes is padded with zeros; a longer one is cut.
    """
    target = Path(path)
    try:
        stored = target.read_bytes()
    except FileNotFoundError:
        peer_id = secrets.token_bytes(PEER_ID_LENGTH)
        target.write_bytes(peer_id)
        os.chmod(target, 0o755)
        return peer_id
    return stored[:PEER_ID_LENGTH].ljust(PEER_ID_LENGTH, b"\0")