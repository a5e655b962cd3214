import os

import pytest

from distribyted.httpfs import HTTPFS
from distribyted.memory import Memory, MemoryFile


@pytest.fixture
def httpfs():
    mem = Memory()
    mem.storage.add(MemoryFile(b"Hello World"), "/dir/a.txt")
    mem.storage.add(MemoryFile(b"abc"), "/dir/b.txt")
    mem.storage.add(MemoryFile(b"xyz"), "/dir/c.txt")
    return HTTPFS(mem)


def test_open_file_stat(httpfs):
    file = httpfs.open("/dir/a.txt")
    info = file.stat()
    assert info.name == "/dir/a.txt"
    assert info.size == 11
    assert info.is_dir is False


def test_seek_and_read(httpfs):
    file = httpfs.open("/dir/a.txt")
    assert file.seek(6, os.SEEK_SET) == 6
    assert file.read(5) == b"World"
    assert file.seek(0, os.SEEK_SET) == 0
    assert file.read(5) == b"Hello"


def test_seek_end(httpfs):
    file = httpfs.open("/dir/a.txt")
    assert file.seek(-5, os.SEEK_END) == 6
    assert file.read(10) == b"World"


def test_readdir_on_file_fails(httpfs):
    file = httpfs.open("/dir/a.txt")
    with pytest.raises(NotADirectoryError):
        file.readdir(0)


def test_readdir_all(httpfs):
    directory = httpfs.open("/dir")
    assert directory.stat().is_dir is True
    names = sorted(e.name for e in directory.readdir(0))
    assert names == ["a.txt", "b.txt", "c.txt"]


def test_readdir_in_chunks(httpfs):
    directory = httpfs.open("/dir")
    first = directory.readdir(2)
    second = directory.readdir(2)
    assert len(first) == 2
    assert len(second) == 1
    names = sorted(e.name for e in first + second)
    assert names == ["a.txt", "b.txt", "c.txt"]
    assert directory.readdir(2) == []
    assert directory.readdir(0) == []


def test_readdir_zero_restarts_from_beginning(httpfs):
    directory = httpfs.open("/dir")
    assert len(directory.readdir(1)) == 1
    assert len(directory.readdir(0)) == 3


def test_entry_sizes(httpfs):
    directory = httpfs.open("/dir")
    sizes = {e.name: e.size for e in directory.readdir(0)}
    assert sizes["a.txt"] == 11
    assert sizes["b.txt"] == 3


def test_open_missing(httpfs):
    with pytest.raises(FileNotFoundError):
        httpfs.open("/dir/missing.txt")