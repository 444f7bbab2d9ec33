# -*- encoding: utf-8 -*-
# @File   : abstract.py
# @Time   : 2024/11/02 21:40:12
# @Author : Kariko Lin

from abc import ABCMeta, abstractmethod
from typing import BinaryIO, Generic, TypeVar

T = TypeVar("T")


class Readable(metaclass=ABCMeta):
    """Source of raw bytes for `Minion.load()`."""

    @abstractmethod
    def read(self) -> BinaryIO:
        raise NotImplementedError


class Writable(metaclass=ABCMeta):
    """Sink of raw bytes for `Minion.store()`."""

    @abstractmethod
    def write(self) -> BinaryIO:
        raise NotImplementedError


class FileHandler(Generic[T], metaclass=ABCMeta):
    def __init__(self, filename: str) -> None:
        self._fn = filename

    @abstractmethod
    def read(self) -> T:
        raise NotImplementedError

    @abstractmethod
    def write(self, instance: T) -> None:
        raise NotImplementedError

    def __str__(self) -> str:
        return self._fn
