"""
Labyrinth utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the trie, the compiler and the dispatcher.
- Public-but-internal leaning: stable enough for consumers writing parsers,
  designed primarily to support the routing layers.

Overview
- SentinelType / Unset / NoMatch
  • Named singleton sentinels that never collide with user values (None, 0, "").
  • Unset marks "no value": a literal step in a match chain, or a parameter
    that was not provided.
  • NoMatch is what a parser returns when a token is simply not its kind; it
    never produces an error, which is what lets routes sharing a prefix fall
    through silently to their literal siblings.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserving None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import builtins
import functools
from typing import final

from rich.text import Text


@final
class SentinelType:
    """
    Named, falsy singleton markers.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Cached per name: SentinelType("Unset") always yields the same instance.
    - Non-subclassable: this type is sealed.
    """
    __slots__ = ("name",)

    @functools.cache
    def __new__(cls, name):
        if not isinstance(name, str) or not name:
            raise TypeError("SentinelType() argument must be a non-empty string")
        self = super().__new__(cls)
        object.__setattr__(self, "name", name)
        return self

    def __setattr__(self, name, value, /):
        raise AttributeError("sentinels are read-only")

    def __bool__(self):
        return False

    def __repr__(self):
        return self.name

    def __rich__(self):
        return Text(repr(self), style="dim")

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return SentinelType, (self.name,)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'SentinelType' is not an acceptable base type")


Unset = SentinelType("Unset")
NoMatch = SentinelType("NoMatch")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is
    replaced.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def typename(object, /):
    """
    Short, human readable name of a type (or of a typing construct).
    """
    return getattr(object, "__qualname__", None) or getattr(object, "__name__", None) or repr(object)


__all__ = (
    "SentinelType",
    "Unset",
    "NoMatch",
    "coalesce",
    "rename",
    "typename",
)
