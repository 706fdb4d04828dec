"""An in-memory file with bounded reads and seeks."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any


class MemoryFile:
    """A byte buffer read sequentially like a file."""

    def __init__(self, data: bytes, ext: str = "") -> None:
        self.data: bytes | None = bytes(data)
        self.ext = ext
        self.location = 0

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> "MemoryFile":
        """Wrap an existing non-empty buffer."""
        if not data:
            raise ValueError("cannot open an empty buffer")
        return cls(bytes(data))

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> "MemoryFile":
        """Load a whole file; the extension is what follows the last dot of the path."""
        text = os.fspath(path)
        data = Path(text).read_bytes()
        dot = text.rfind(".")
        return cls(data, text[dot + 1:] if dot >= 0 else "")

    @property
    def size(self) -> int:
        return len(self._buffer())

    def _buffer(self) -> bytes:
        if self.data is None:
            raise ValueError("I/O operation on closed file")
        return self.data

    def read(self, element_size: int, count: int) -> bytes:
        """Read up to element_size * count bytes from the current position."""
        if element_size <= 0 or count < 0:
            raise ValueError("element size must be positive and count non-negative")
        buf = self._buffer()
        size = len(buf)
        if self.location >= size:
            return b""
        total = element_size * count
        end = min(self.location + total, size)
        chunk = buf[self.location:end]
        self.location = end
        return chunk

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> None:
        """Move the read position; positions past the data raise ValueError."""
        size = self.size
        if whence == os.SEEK_SET:
            if offset >= size:
                raise ValueError(f"seek offset {offset} beyond size {size}")
            self.location = offset
        elif whence == os.SEEK_CUR:
            if offset + self.location > size:
                raise ValueError(f"seek offset {offset} beyond size {size}")
            self.location += offset

    def close(self) -> None:
        self.data = None
        self.ext = ""

    def __enter__(self) -> "MemoryFile":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()