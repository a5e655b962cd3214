import os

import pytest

from distribyted.config import Route, Torrent
from distribyted.loaders import ConfigLoader, FolderLoader


def _routes():
    return [
        Route(
            name="movies",
            torrents=[
                Torrent(magnet_uri="magnet:?xt=urn:btih:aaa"),
                Torrent(torrent_path="/data/one.torrent"),
                Torrent(),
            ],
        ),
        Route(name="music", torrents=[Torrent(magnet_uri="magnet:?xt=urn:btih:bbb")]),
        Route(name="movies", torrents=[Torrent(magnet_uri="magnet:?xt=urn:btih:ccc")]),
        Route(name="empty"),
    ]


def test_config_loader_groups_magnets_by_route():
    loader = ConfigLoader(_routes())
    assert loader.list_magnets() == {
        "movies": ["magnet:?xt=urn:btih:aaa", "magnet:?xt=urn:btih:ccc"],
        "music": ["magnet:?xt=urn:btih:bbb"],
    }


def test_config_loader_lists_torrent_paths():
    loader = ConfigLoader(_routes())
    assert loader.list_torrent_paths() == {"movies": ["/data/one.torrent"]}


@pytest.mark.parametrize("loader", [ConfigLoader([]), FolderLoader([])])
def test_loaders_without_routes_list_nothing(loader):
    assert loader.list_magnets() == {}
    assert loader.list_torrent_paths() == {}


def test_folder_loader_finds_torrent_files(tmp_path):
    (tmp_path / "b.torrent").write_bytes(b"x")
    (tmp_path / "notes.txt").write_bytes(b"x")
    sub = tmp_path / "a"
    sub.mkdir()
    (sub / "c.torrent").write_bytes(b"x")
    (sub / "d.torrent.bak").write_bytes(b"x")

    loader = FolderLoader([Route(name="r", torrent_folder=str(tmp_path))])
    assert loader.list_torrent_paths() == {
        "r": [
            os.path.join(str(tmp_path), "a", "c.torrent"),
            os.path.join(str(tmp_path), "b.torrent"),
        ]
    }


def test_folder_loader_skips_routes_without_folder():
    loader = FolderLoader([Route(name="r")])
    assert loader.list_torrent_paths() == {}
    assert loader.list_magnets() == {}


def test_folder_loader_missing_folder_raises(tmp_path):
    loader = FolderLoader([Route(name="r", torrent_folder=str(tmp_path / "missing"))])
    with pytest.raises(FileNotFoundError):
        loader.list_torrent_paths()