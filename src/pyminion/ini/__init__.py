# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/02 22:01:40
# @Author : Kariko Lin

from .model import DEFAULT_GROUP_NAME, IniRecord, IniGroup, IniStore
from .parser import (
    UnsupportedFormatException,
    IniParser,
    IniSerializer,
    IniFileParser
)
from .formats import IniJsonParser, IniYamlParser
