import os

import pytest

from distribyted.memory import Memory, MemoryFile
from distribyted.webdav import OperationNotSupported, WebDAV


@pytest.fixture
def wfs():
    mfs = Memory()
    mfs.storage.add(MemoryFile(b"test file content."), "/folder/file.txt")
    return WebDAV(mfs)


def test_webdav_filesystem(wfs):
    directory = wfs.open_file("/")
    entries = directory.readdir(0)
    assert len(entries) == 1
    assert entries[0].name == "folder"

    file = wfs.open_file("/folder/file.txt")
    with pytest.raises(NotADirectoryError):
        file.readdir(0)

    assert file.seek(5, os.SEEK_SET) == 5
    assert file.read(4) == b"file"

    assert file.seek(0, os.SEEK_SET) == 0
    assert file.read(4) == b"test"

    info = wfs.stat("/folder/file.txt")
    assert info.name == "/folder/file.txt"
    assert info.is_dir is False
    assert info.size == 18


def test_err_not_implemented(wfs):
    with pytest.raises(OperationNotSupported):
        wfs.mkdir("test")
    with pytest.raises(OperationNotSupported):
        wfs.remove_all("test")
    with pytest.raises(OperationNotSupported):
        wfs.rename("test", "newTest")


def test_write_not_supported(wfs):
    file = wfs.open_file("/folder/file.txt")
    with pytest.raises(OperationNotSupported):
        file.write(b"x")


def test_file_name_is_base(wfs):
    file = wfs.open_file("/folder/file.txt")
    assert file.stat().name == "file.txt"
    assert file.stat().size == 18


def test_seek_end_and_current(wfs):
    file = wfs.open_file("/folder/file.txt")
    assert file.seek(-8, os.SEEK_END) == 10
    assert file.read(7) == b"content"
    assert file.seek(-7, os.SEEK_CUR) == 10
    assert file.read(100) == b"content."
    assert file.read(4) == b""


def test_read_at_does_not_move(wfs):
    file = wfs.open_file("/folder/file.txt")
    assert file.read_at(4, 5) == b"file"
    assert file.read(4) == b"test"


def test_readdir_count_then_end(wfs):
    directory = wfs.open_file("/")
    first = directory.readdir(1)
    assert [e.name for e in first] == ["folder"]
    assert directory.readdir(1) == []
    assert directory.readdir(0) == []


def test_open_missing(wfs):
    with pytest.raises(FileNotFoundError):
        wfs.open_file("/nothing/here.txt")
    with pytest.raises(FileNotFoundError):
        wfs.stat("/nothing/here.txt")