import os

import pytest

from lynxcore.memfile import MemoryFile


def test_from_bytes_rejects_empty():
    with pytest.raises(ValueError):
        MemoryFile.from_bytes(b"")


def test_sequential_reads():
    f = MemoryFile.from_bytes(b"abcdef")
    assert f.read(2, 2) == b"abcd"
    assert f.location == 4
    assert f.read(4, 1) == b"ef"
    assert f.location == 6
    assert f.read(1, 1) == b""


def test_size_and_ext_defaults():
    f = MemoryFile.from_bytes(b"xyz")
    assert f.size == 3
    assert f.ext == ""


def test_seek_set_bounds():
    f = MemoryFile.from_bytes(b"abcdef")
    f.seek(3, os.SEEK_SET)
    assert f.read(1, 3) == b"def"
    with pytest.raises(ValueError):
        f.seek(6, os.SEEK_SET)


def test_seek_cur_bounds():
    f = MemoryFile.from_bytes(b"abcdef")
    f.seek(2, os.SEEK_SET)
    f.seek(4, os.SEEK_CUR)
    assert f.location == 6
    with pytest.raises(ValueError):
        f.seek(1, os.SEEK_CUR)


def test_from_path_reads_data_and_extension(tmp_path):
    target = tmp_path / "game.lnx"
    target.write_bytes(b"LYNX\x01")
    f = MemoryFile.from_path(target)
    assert f.ext == "lnx"
    assert f.read(1, 5) == b"LYNX\x01"


def test_from_path_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        MemoryFile.from_path(tmp_path / "missing.lnx")


def test_context_manager_closes():
    with MemoryFile.from_bytes(b"abc") as f:
        assert f.read(1, 1) == b"a"
    assert f.data is None
    with pytest.raises(ValueError):
        f.read(1, 1)


def test_read_rejects_zero_element_size():
    f = MemoryFile.from_bytes(b"abc")
    with pytest.raises(ValueError):
        f.read(0, 1)