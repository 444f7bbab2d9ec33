# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/02 21:36:05
# @Author : Kariko Lin

import logging

from .abstract import Readable, Writable
from .ini import (
    DEFAULT_GROUP_NAME, IniRecord, IniGroup, IniStore,
    UnsupportedFormatException, IniParser, IniSerializer,
    IniFileParser, IniJsonParser, IniYamlParser
)
from .minion import Minion, MinionConfig, Ready, Failure, Result
from .storage import FileStorage, MemoryStorage

__all__ = [
    'Readable', 'Writable',
    'DEFAULT_GROUP_NAME', 'IniRecord', 'IniGroup', 'IniStore',
    'UnsupportedFormatException', 'IniParser', 'IniSerializer',
    'IniFileParser', 'IniJsonParser', 'IniYamlParser',
    'Minion', 'MinionConfig', 'Ready', 'Failure', 'Result',
    'FileStorage', 'MemoryStorage'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
