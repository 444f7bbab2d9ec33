# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/11/02 22:05:31
# @Author : Kariko Lin

"""
Groups of multi-value records, i.e. what a minion INI file holds:

    ```ini
    key = orphan // goes to the default group, named ''.

    [group]
    key = value
    array = 1,2,3
    quoted = "a,b",c
    ```

Every record keeps *all* of its values. Single-value queries only look at
the first one.
"""

from collections.abc import Mapping
from threading import Lock
from typing import Iterator, Sequence

DEFAULT_GROUP_NAME = ''


class IniRecord:
    """A key, and an ordered, non-empty tuple of string values."""

    __slots__ = ('_key', '_values')

    def __init__(self, key: str, *values: str) -> None:
        if not values:
            raise ValueError(f'record "{key}" must carry at least one value')
        if not key.strip():
            raise ValueError('record key must not be empty')
        self._key = key.strip()
        self._values: tuple[str, ...] = tuple(values)

    @property
    def key(self) -> str:
        return self._key

    @property
    def values(self) -> tuple[str, ...]:
        return self._values

    @property
    def value(self) -> str:
        """The first value, which is what single-value queries use."""
        return self._values[0]

    def has_value(self) -> bool:
        return bool(self._values[0].strip())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IniRecord):
            return NotImplemented
        return self._key == other._key and self._values == other._values

    def __hash__(self) -> int:
        return hash((self._key, self._values))

    def __repr__(self) -> str:
        return f'{self._key}={",".join(self._values)}'


class IniGroup(Mapping[str, IniRecord]):
    """A named group. Read-only as a mapping; records are added through
    `get_or_create_record()` and dropped through `remove_record()`.
    """

    def __init__(self, name: str) -> None:
        self._name = name.strip()
        self.__records: dict[str, IniRecord] = {}
        # guards the record table only, see `IniStore` for the group table.
        self.__lock = Lock()

    @property
    def name(self) -> str:
        return self._name

    def get_or_create_record(self, key: str, *values: str) -> IniRecord:
        """Return the record of `key`, creating it from `values` if absent.

        An existing record is returned as is, `values` won't replace it.
        """
        key = key.strip()
        with self.__lock:
            record = self.__records.get(key)
            if record is None:
                record = IniRecord(key, *values)
                self.__records[record.key] = record
            return record

    def get_record(self, key: str) -> IniRecord | None:
        return self.__records.get(key)

    def remove_record(self, key: str) -> IniRecord | None:
        with self.__lock:
            return self.__records.pop(key, None)

    def records(self) -> Sequence[IniRecord]:
        with self.__lock:
            return tuple(self.__records.values())

    def __getitem__(self, key: str) -> IniRecord:
        return self.__records[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__records

    def __iter__(self) -> Iterator[str]:
        # snapshot, in case a parse is still filling the group.
        with self.__lock:
            return iter(tuple(self.__records))

    def __len__(self) -> int:
        return len(self.__records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IniGroup):
            return NotImplemented
        return (self._name == other._name
                and list(self.records()) == list(other.records()))

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return f"[{self._name}]"

    def __repr__(self) -> str:
        return '[%s] { .cnt = %d }' % (self._name, len(self))


class IniStore(Mapping[str, IniGroup]):
    """Whole minion INI document: groups in the order they were created.

    Lookups by name never fail in the accessor API, missing entries just
    produce `None` (or the given default).

    另注：两级锁只保证字典结构不被并发写坏，*不*保证读到完整的解析结果。
    """

    def __init__(self) -> None:
        self.__groups: dict[str, IniGroup] = {}
        self.__lock = Lock()

    def get_or_create_group(self, name: str) -> IniGroup:
        name = name.strip()
        with self.__lock:
            group = self.__groups.get(name)
            if group is None:
                group = IniGroup(name)
                self.__groups[group.name] = group
            return group

    def get_group(self, name: str) -> IniGroup | None:
        return self.__groups.get(name.strip())

    def remove_group(self, name: str) -> IniGroup | None:
        with self.__lock:
            return self.__groups.pop(name.strip(), None)

    def group_names(self) -> Sequence[str]:
        with self.__lock:
            return tuple(self.__groups)

    def groups(self) -> Sequence[IniGroup]:
        with self.__lock:
            return tuple(self.__groups.values())

    def set_value(self, group: str, key: str, *values: str) -> IniRecord:
        """Get-or-create the record. Values of an existing record are kept,
        remove it first to replace them.
        """
        return self.get_or_create_group(group).get_or_create_record(
            key, *values)

    def get_value(
        self, group: str, key: str, default: str | None = None
    ) -> str | None:
        record = self.get_or_create_group(group).get_record(key)
        if record is not None and record.has_value():
            return record.value
        return default

    def get_values(
        self, group: str, key: str,
        default: Sequence[str] | None = None
    ) -> Sequence[str] | None:
        record = self.get_or_create_group(group).get_record(key)
        if record is not None:
            return record.values
        return default

    def remove_record(self, group: str, key: str) -> IniRecord | None:
        if (ins := self.get_group(group)) is not None:
            return ins.remove_record(key)
        return None

    def clear(self) -> None:
        with self.__lock:
            self.__groups.clear()

    def __getitem__(self, key: str) -> IniGroup:
        return self.__groups[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__groups

    def __iter__(self) -> Iterator[str]:
        return iter(self.group_names())

    def __len__(self) -> int:
        return len(self.__groups)

    def __repr__(self) -> str:
        return f'<{type(self).__name__} groups={list(self.__groups)}>'
