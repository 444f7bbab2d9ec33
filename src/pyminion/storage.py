# -*- encoding: utf-8 -*-
# @File   : storage.py
# @Time   : 2024/11/03 14:52:19
# @Author : Kariko Lin

"""Where `Minion` reads raw bytes from and writes them to."""

from io import BytesIO
from os import PathLike
from typing import BinaryIO

from .abstract import Readable, Writable


class FileStorage(Readable, Writable):
    def __init__(self, filename: str | PathLike[str]) -> None:
        self._fn = filename

    def read(self) -> BinaryIO:
        return open(self._fn, 'rb')

    def write(self) -> BinaryIO:
        return open(self._fn, 'wb')

    def __str__(self) -> str:
        return str(self._fn)


class _CapturedBytes(BytesIO):
    # keeps what was written, since `getvalue()` is gone after `close()`.
    def __init__(self, owner: 'MemoryStorage') -> None:
        super().__init__()
        self._owner = owner

    def close(self) -> None:
        if not self.closed:
            self._owner._data = self.getvalue()
        super().close()


class MemoryStorage(Readable, Writable):
    """In-memory bytes, mostly for tests and throwaway stores."""

    def __init__(self, initial: bytes | str = b'',
                 encoding: str = 'utf-8') -> None:
        self._data = (initial.encode(encoding)
                      if isinstance(initial, str) else bytes(initial))

    def read(self) -> BinaryIO:
        return BytesIO(self._data)

    def write(self) -> BinaryIO:
        return _CapturedBytes(self)

    def getvalue(self) -> bytes:
        """The bytes stored last (or the initial ones)."""
        return self._data

    def __str__(self) -> str:
        return f'<memory: {len(self._data)} bytes>'
