# -*- encoding: utf-8 -*-
# @File   : formats.py
# @Time   : 2024/11/09 16:27:03
# @Author : Kariko Lin

"""Import / export a minion store as JSON or YAML documents.

Both keep every value of a record, so (unlike the INI text) values
containing commas survive the trip.

JSON:

    ```json
    {"protocol": 1, "groups": {"group": {"key": ["v1", "v2"]}}}
    ```

YAML (group -> key -> values, nothing else):

    ```yaml
    group:
      key:
      - v1
      - v2
    ```
"""

import json
from typing import Any, TypedDict

import yaml

from ..abstract import FileHandler
from .model import IniStore


class _JsonDocument(TypedDict, total=False):
    protocol: int
    groups: dict[str, dict[str, list[str] | str]]


def _fill(store: IniStore, groups: dict[str, Any]) -> IniStore:
    for name, records in groups.items():
        group = store.get_or_create_group(str(name))
        for key, values in (records or {}).items():
            # a bare scalar counts as a single value.
            if not isinstance(values, list):
                values = [values]
            group.get_or_create_record(
                str(key),
                *(('' if i is None else str(i)) for i in values or ['']))
    return store


def _dump(store: IniStore) -> dict[str, dict[str, list[str]]]:
    return {
        group.name: {i.key: list(i.values) for i in group.records()}
        for group in store.groups()
    }


# should keep this base class for better type hinting.
class IniDocParser(FileHandler[IniStore]):
    def __init__(self, filename: str, encoding: str = 'utf-8') -> None:
        super().__init__(filename)
        self._codec = encoding


class IniJsonParser(IniDocParser):
    JSON_TEMPLATE = _JsonDocument(protocol=1)

    def read(self, store: IniStore | None = None) -> IniStore:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            src: _JsonDocument = json.load(fp)
        return _fill(
            IniStore() if store is None else store, src.get('groups', {}))

    def write(self, instance: IniStore, indent: int = 2) -> None:
        ret = self.JSON_TEMPLATE.copy()
        ret['groups'] = _dump(instance)
        with open(self._fn, 'w', encoding=self._codec) as fp:
            json.dump(ret, fp, ensure_ascii=False, indent=indent)


class IniYamlParser(IniDocParser):
    def read(self, store: IniStore | None = None) -> IniStore:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            src = yaml.safe_load(fp)
        return _fill(IniStore() if store is None else store, src or {})

    def write(self, instance: IniStore) -> None:
        with open(self._fn, 'w', encoding=self._codec) as fp:
            yaml.safe_dump(
                _dump(instance), fp,
                allow_unicode=True, sort_keys=False)
