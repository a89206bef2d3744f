"""
Argument parsers and the parser registry.

Contract of a parser
- parse(token) returns the converted value, or NoMatch when the token is not
  of this kind at all (no error is recorded, the search just moves on), or
  raises ParserError when the token is of this kind but unacceptable (the error
  competes for being reported).
- complete(partial) returns the suggestions for a partially typed token.

Registry
- Parsers are looked up by the exact declared type of a handler parameter,
  at registration time only. There is no subclass or supertype fallback:
  bool does not reuse the int parser, and a parameter annotated with a
  subclass of str needs its own parser.
"""
import math
import re
import uuid
from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType

from .faults import ParserError, Priority
from .utils import typename


class ArgumentParser(ABC):
    """
    Base class for parsers; subclasses implement parse().
    """

    @abstractmethod
    def parse(self, token, /):
        raise NotImplementedError

    def complete(self, partial, /):
        return set()

    def __repr__(self):
        return "%s()" % type(self).__name__


class StringParser(ArgumentParser):
    def parse(self, token, /):
        return token


class IntegerParser(ArgumentParser):
    # int() alone would also take "1_000" and surrounding blanks
    _pattern = re.compile(r"[+-]?\d+")

    def parse(self, token, /):
        if not self._pattern.fullmatch(token):
            raise ParserError(Priority.PARSING, "parser.integer.invalid", token)
        try:
            return int(token)
        except ValueError:
            # past the interpreter's digit limit
            raise ParserError(Priority.PARSING, "parser.integer.invalid", token) from None


class FloatParser(ArgumentParser):
    """
    Finite real numbers. A trailing d/D/f/F type suffix is tolerated ("100D",
    "65e-7f"); nan and infinities are rejected since few commands expect them.
    """
    _pattern = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?[dDfF]?")

    def parse(self, token, /):
        if not self._pattern.fullmatch(token):
            raise ParserError(Priority.PARSING, "parser.float.invalid", token)
        value = float(token.rstrip("dDfF"))
        if not math.isfinite(value):
            raise ParserError(Priority.PARSING, "parser.float.invalid", token)
        return value


class UUIDParser(ArgumentParser):
    """
    Canonical dashed UUIDs, plus the compact 32 hex digit form.
    """
    _dashed = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")
    _compact = re.compile(r"[0-9a-fA-F]{32}")

    def parse(self, token, /):
        if not (self._dashed.fullmatch(token) or self._compact.fullmatch(token)):
            raise ParserError(Priority.PARSING, "parser.uuid.invalid", token)
        return uuid.UUID(token)


class EnumParser(ArgumentParser):
    """
    Case-insensitive lookup of enum members by name.

    With ignore_underscores, "underscore", "UNDER_SCORE" and "under_Score" all
    resolve to a member named UNDER_SCORE.
    """

    def __init__(self, enum, /, ignore_underscores=False):
        if not isinstance(enum, type) or not issubclass(enum, Enum):
            raise TypeError("EnumParser() argument must be an enum type")
        self.enum = enum
        self.ignore_underscores = ignore_underscores
        self._members = MappingProxyType({
            self._normalize(name): member for name, member in enum.__members__.items()
        })

    def _normalize(self, name):
        if self.ignore_underscores:
            name = name.replace("_", "")
        return name.lower()

    def parse(self, token, /):
        try:
            return self._members[self._normalize(token)]
        except KeyError:
            raise ParserError(Priority.PARSING, "parser.enum.invalid", token) from None

    def complete(self, partial, /):
        partial = partial.lower()
        return {name for name in self.enum.__members__ if name.lower().startswith(partial)}

    def __repr__(self):
        return "EnumParser(%s, ignore_underscores=%r)" % (typename(self.enum), self.ignore_underscores)


class ParserRegistry:
    """
    Exact-type map from a value type to the parser producing it.
    """

    def __init__(self, parsers=None, /):
        self._parsers = {}
        for type, parser in (parsers or {}).items():
            self.register(type, parser)

    @classmethod
    def default(cls):
        """
        registry preloaded with str, int, float and uuid.UUID.
        """
        return cls({
            str: StringParser(),
            int: IntegerParser(),
            float: FloatParser(),
            uuid.UUID: UUIDParser(),
        })

    def register(self, type, parser, /):
        if not isinstance(parser, ArgumentParser):
            raise TypeError("register() parser must be an argument parser")
        try:
            hash(type)
        except TypeError:
            raise TypeError("register() type must be hashable") from None
        self._parsers[type] = parser
        return parser

    def lookup(self, type, /):
        return self._parsers.get(type)

    def copy(self):
        return type(self)(self._parsers)

    def __contains__(self, type):
        return type in self._parsers

    def __iter__(self):
        return iter(self._parsers)

    def __len__(self):
        return len(self._parsers)

    def __rich_repr__(self):
        for type, parser in self._parsers.items():
            yield typename(type), parser


__all__ = (
    "ArgumentParser",
    "StringParser",
    "IntegerParser",
    "FloatParser",
    "UUIDParser",
    "EnumParser",
    "ParserRegistry",
)
