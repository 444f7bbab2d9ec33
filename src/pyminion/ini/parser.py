# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/11/02 23:18:47
# @Author : Kariko Lin

"""Minion INI text, line by line.

Rules (checked in this order, on each stripped line):

1. `#`, `;` and `//` lead a comment line.
2. `[name]` opens (or re-opens) a group. Anything after `]` is dropped.
3. `key=v1,v2,...` adds a record to the current group.
   - a double-quoted value may contain commas: `key="a,b",c`;
   - the *last* value may end with an inline ` //` comment.
4. `v1,v2,...` without a key is kept as a record keyed by the whole line.
5. Everything else is ignored.

Records before any group header go to the default group, named `''`.
Only an empty key (`=value`) is an error, see `UnsupportedFormatException`.
"""

import logging
from io import StringIO
from typing import Iterable, TextIO
from warnings import warn

import chardet

from ..abstract import FileHandler
from .model import DEFAULT_GROUP_NAME, IniGroup, IniRecord, IniStore

__all__ = [
    'UnsupportedFormatException',
    'IniParser', 'IniSerializer', 'IniFileParser'
]

COMMENT_STARTS = ('#', ';', '//')
INLINE_COMMENT = ' //'
GROUP_START = '['
GROUP_END = ']'
KEY_VALUE_DIVIDER = '='
ARRAY_DELIMITER = ','
QUOTE = '"'

FALLBACK_CODEC = 'gbk'


class UnsupportedFormatException(Exception):
    """Raised on a key/value line with nothing before `=`."""

    def __init__(self, line: str, lineno: int = 0) -> None:
        super().__init__(f'empty key at line {lineno}: {line!r}')
        self.line = line
        self.lineno = lineno


def split_fields(value: str) -> list[str]:
    """Split on `,`. Empty fields in the middle are kept, the trailing
    ones are not (though a value never shrinks to zero fields)."""
    fields = value.split(ARRAY_DELIMITER)
    while len(fields) > 1 and not fields[-1]:
        fields.pop()
    return fields


def strip_inline_comment(fields: list[str]) -> list[str]:
    if (idx := fields[-1].find(INLINE_COMMENT)) != -1:
        fields[-1] = fields[-1][:idx].strip()
    return fields


def _unquote(span: str) -> str:
    span = span.strip()
    first, last = span.index(QUOTE), span.rindex(QUOTE)
    return span[:first] + span[first + 1:last] + span[last + 1:]


def merge_quoted(fields: list[str]) -> list[str]:
    """Glue back the fields of a `"...,..."` value which `split_fields()`
    cut apart.

    A field with a single `"` opens a span, fields without `"` go into it,
    and a single-`"` field ending with `"` closes it. The closed span becomes
    one value, without its outer quotes. A span left open keeps its fields
    as they were.
    """
    ret: list[str] = []
    pending: list[str] = []
    for field in fields:
        quotes = field.count(QUOTE)
        if pending:
            if quotes == 0:
                pending.append(field)
                continue
            if quotes == 1 and field.strip().endswith(QUOTE):
                pending.append(field)
                ret.append(_unquote(ARRAY_DELIMITER.join(pending)))
                pending = []
                continue
            # this field can't close the span, give it up.
            ret.extend(pending)
            pending = []
        if quotes == 1:
            pending.append(field)
        else:
            ret.append(field)
    if pending:
        logging.debug(
            f'Unclosed quoted value: {ARRAY_DELIMITER.join(pending)}')
        ret.extend(pending)
    return ret


def _is_key(candidate: str) -> bool:
    # `a,b=c` reads as an array; `"a,b"=c` still has a key.
    if ARRAY_DELIMITER not in candidate:
        return True
    return (len(candidate) >= 2
            and candidate.startswith(QUOTE) and candidate.endswith(QUOTE))


def _unreadable_key(key: str) -> str | None:
    """Why `key=...` would not read back as a record of `key`, if so."""
    if key.startswith(COMMENT_STARTS):
        return 'would be read back as a comment'
    if key.startswith(GROUP_START):
        return 'would be read back as a group header'
    if KEY_VALUE_DIVIDER in key:
        return f'contains "{KEY_VALUE_DIVIDER}" and would be split'
    if not _is_key(key):
        return f'contains "{ARRAY_DELIMITER}" and would be read as an array'
    return None


class IniParser:
    """Feeds lines into an `IniStore`.

    The parser remembers the group opened last, so `feed()` may be called
    repeatedly with consecutive chunks of one document.
    """

    def __init__(self, store: IniStore | None = None) -> None:
        self.store = IniStore() if store is None else store
        self._group: IniGroup | None = None

    @property
    def current_group(self) -> IniGroup:
        # the default group is only registered once it gets a record.
        if self._group is None:
            self._group = self.store.get_or_create_group(DEFAULT_GROUP_NAME)
        return self._group

    def feed(self, lines: Iterable[str]) -> IniStore:
        for lineno, line in enumerate(lines, 1):
            self.feedline(line, lineno)
        return self.store

    def feedline(self, line: str, lineno: int = 0) -> IniRecord | None:
        """Parse one line, returning the record it maps to (if any)."""
        line = line.strip()
        if not line or line.startswith(COMMENT_STARTS):
            return None

        if line.startswith(GROUP_START) and GROUP_END in line:
            self._group = self.store.get_or_create_group(
                line[1:line.index(GROUP_END)])
            return None

        if KEY_VALUE_DIVIDER in line:
            key, value = line.split(KEY_VALUE_DIVIDER, 1)
            key = key.strip()
            if _is_key(key):
                if not key:
                    raise UnsupportedFormatException(line, lineno)
                fields = strip_inline_comment(
                    merge_quoted(split_fields(value)))
                return self.current_group.get_or_create_record(key, *fields)

        if ARRAY_DELIMITER in line:
            fields = strip_inline_comment(split_fields(line))
            return self.current_group.get_or_create_record(line, *fields)

        logging.debug(f'Line {lineno} ignored: {line}')
        return None

    @staticmethod
    def readstream(buf: TextIO, store: IniStore | None = None) -> IniStore:
        """读取解码好的字符串流。"""
        parser = IniParser(store)
        lineno = 0
        while i := buf.readline():
            lineno += 1
            parser.feedline(i, lineno)
        return parser.store

    @staticmethod
    def loads(text: str, store: IniStore | None = None) -> IniStore:
        # universal newlines, so `\r\n` and `\r` split lines as well.
        return IniParser.readstream(StringIO(text, newline=None), store)

    @staticmethod
    def decode(raw: bytes, encoding: str | None = 'utf-8') -> str:
        """Decode with `encoding`, and when that fails, with whatever
        `chardet` is confident about (utf-8 otherwise), then `gbk`.
        """
        if encoding is not None:
            try:
                return raw.decode(encoding).removeprefix('\ufeff')
            except UnicodeDecodeError:
                logging.debug(f'Not {encoding}, guessing codec.')

        codec = chardet.detect(raw)
        if (codec is None or codec['encoding'] is None
                or codec['confidence'] < 0.8):
            codec = {'encoding': 'utf-8'}

        # fallbacks
        try:
            buf = raw.decode(codec['encoding'])
        except UnicodeDecodeError:
            buf = raw.decode(FALLBACK_CODEC)
        return buf.removeprefix('\ufeff')


class IniSerializer:
    """Canonical text of an `IniStore`.

    Values are written as stored, without re-quoting. So a value holding
    a comma reads back as two values.
    """

    @staticmethod
    def _output_group(group: IniGroup, newline: str = '\n') -> str:
        if GROUP_END in group.name:
            warn(f'Group name "{group.name}" contains "{GROUP_END}" '
                 'and would be cut when read back.')
        ret = f'{GROUP_START}{group.name}{GROUP_END}'
        for i in group.records():
            if (problem := _unreadable_key(i.key)) is not None:
                warn(f'Key "{i.key}" of {group} {problem}.')
            ret += (f'{newline}{i.key}{KEY_VALUE_DIVIDER}'
                    f'{ARRAY_DELIMITER.join(i.values)}')
        return ret

    @staticmethod
    def writestream(
        store: IniStore, buf: TextIO, newline: str = '\n'
    ) -> None:
        # one blank line between groups, no newline at the very end.
        for idx, group in enumerate(store.groups()):
            if idx:
                buf.write(newline * 2)
            buf.write(IniSerializer._output_group(group, newline))

    @staticmethod
    def dumps(store: IniStore, newline: str = '\n') -> str:
        buf = StringIO()
        IniSerializer.writestream(store, buf, newline)
        return buf.getvalue()


class IniFileParser(FileHandler[IniStore]):
    """Reads and writes a minion INI file in place, synchronously.

    Unlike `Minion`, errors are raised to the caller.
    """

    def __init__(self, filename: str, encoding: str | None = 'utf-8') -> None:
        super().__init__(filename)
        self._codec = encoding

    def read(self, store: IniStore | None = None) -> IniStore:
        with open(self._fn, 'rb') as fp:
            raw = fp.read()
        return IniParser.loads(IniParser.decode(raw, self._codec), store)

    def write(self, instance: IniStore) -> None:
        with open(self._fn, 'w', encoding=self._codec or 'utf-8',
                  newline='') as fp:
            IniSerializer.writestream(instance, fp)

    def __str__(self) -> str:
        return "Minion INI: " + super().__str__() + f"({self._codec})"
