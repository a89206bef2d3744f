"""
Declarative validators.

Markers
- A Marker is a small, immutable configuration object (MaxLength(5),
  Range(min=0, max=10), Regex(r"\\w+")...). Markers are attached to handler
  parameters with typing.Annotated:

      def rename(caller: Player, name: Annotated[str, MaxLength(16)]): ...

  or to the handler as a whole (they then apply to the caller) through the
  markers= argument of Router.register() / @command().

Registry
- A ValidatorRegistry maps each marker type to the type of value it accepts
  and a factory building the runtime validator from the marker. It is
  consulted at registration time: the marker's own type is the lookup key,
  and the accepted type must be assignable from the parameter's declared type,
  otherwise compiling the template fails.

Validators
- validate(raw, value) raises ParserError when the value is not acceptable.
  raw is the token the value was parsed from, or None for the caller.
"""
import re
from abc import ABC, abstractmethod

from .faults import LocaleKey, ParserError, Priority, RegistrationError
from .utils import typename


class Marker:
    """
    Base class of validator configurations.

    Subclasses list their fields in __slots__; instances are read-only once
    built and compare by value.
    """
    __slots__ = ()

    def __setattr__(self, name, value, /):
        raise AttributeError("markers are read-only")

    def _set(self, **fields):
        for name, value in fields.items():
            object.__setattr__(self, name, value)

    def _fields(self):
        return tuple((name, getattr(self, name)) for name in type(self).__slots__)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self):
        return hash((type(self), self._fields()))

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join("%s=%r" % field for field in self._fields()))


class MaxLength(Marker):
    __slots__ = ("value",)

    def __init__(self, value, /):
        if not isinstance(value, int) or value < 0:
            raise ValueError("MaxLength() argument must be a non-negative integer")
        self._set(value=value)


class Range(Marker):
    __slots__ = ("min", "max")

    def __init__(self, *, min=None, max=None):
        if min is not None and max is not None and min > max:
            raise ValueError("Range() min must not be greater than max")
        self._set(min=min, max=max)


class Regex(Marker):
    """
    expected names what a matching input is, as a locale key
    ("regex.valid" renders as "valid input").
    """
    __slots__ = ("pattern", "expected")

    def __init__(self, pattern, /, expected="regex.valid"):
        self._set(pattern=re.compile(pattern), expected=expected)


class HasPermission(Marker):
    """
    caller must hold at least one of the permissions.

    with wildcard, a permission the caller has not set explicitly is looked up
    through its ancestors: "world.time.set" falls back to "world.time.*", then
    "world.*"; the first ancestor that is set decides.
    """
    __slots__ = ("permissions", "wildcard")

    def __init__(self, *permissions, wildcard=False):
        if not permissions or not all(isinstance(permission, str) for permission in permissions):
            raise TypeError("HasPermission() requires at least one permission string")
        self._set(permissions=permissions, wildcard=wildcard)


class Permissible(ABC):
    """
    Anything that holds permissions (players, consoles, API tokens...).
    """

    @abstractmethod
    def has_permission(self, permission, /):
        raise NotImplementedError

    @abstractmethod
    def is_permission_set(self, permission, /):
        raise NotImplementedError


class ArgumentValidator(ABC):
    @abstractmethod
    def validate(self, raw, value, /):
        raise NotImplementedError


class MaxLengthValidator(ArgumentValidator):
    def __init__(self, marker):
        self.max = marker.value

    def validate(self, raw, value, /):
        if len(value) > self.max:
            raise ParserError(Priority.VALIDATION, "validator.maxlength", value, self.max)


class RangeValidator(ArgumentValidator):
    def __init__(self, marker):
        self.min = marker.min
        self.max = marker.max

    def validate(self, raw, value, /):
        if self.min is not None and value < self.min:
            raise ParserError(Priority.VALIDATION, "validator.range.min", value, self.min)
        if self.max is not None and value > self.max:
            raise ParserError(Priority.VALIDATION, "validator.range.max", value, self.max)


class RegexValidator(ArgumentValidator):
    def __init__(self, marker):
        self.pattern = marker.pattern
        self.expected = LocaleKey(marker.expected)

    def validate(self, raw, value, /):
        if not self.pattern.fullmatch(value):
            raise ParserError(Priority.VALIDATION, "validator.regex", value, self.expected)


class PermissionValidator(ArgumentValidator):
    def __init__(self, marker):
        self.permissions = marker.permissions
        self.wildcard = marker.wildcard

    def validate(self, raw, caller, /):
        for permission in self.permissions:
            if caller.has_permission(permission):
                return
            # an explicit deny is final
            if not self.wildcard or caller.is_permission_set(permission):
                continue
            parent = permission
            while "." in parent:
                parent = parent.rpartition(".")[0]
                if caller.is_permission_set(parent + ".*"):
                    if caller.has_permission(parent + ".*"):
                        return
                    raise ParserError(Priority.VALIDATION, "validator.permission")
        raise ParserError(Priority.VALIDATION, "validator.permission")


def assignable(target, actual, /):
    """
    whether a value declared as actual can be handed to something accepting target.
    """
    if target is object:
        return True
    return isinstance(actual, type) and isinstance(target, type) and issubclass(actual, target)


class ValidatorRegistry:
    """
    Explicit marker-type -> (accepted type, factory) table.
    """

    def __init__(self):
        self._factories = {}

    @classmethod
    def default(cls):
        """
        registry with MaxLength, Range, Regex and HasPermission.
        """
        self = cls()
        self.register(MaxLength, str)(MaxLengthValidator)
        self.register(Range, int)(RangeValidator)
        self.register(Regex, str)(RegexValidator)
        self.register(HasPermission, Permissible)(PermissionValidator)
        return self

    def register(self, marker, target, /):
        """
        decorator registering factory(marker) -> ArgumentValidator for a marker type.

            @registry.register(NoK, str)
            class NoKValidator(ArgumentValidator): ...
        """
        if not isinstance(marker, type) or not issubclass(marker, Marker):
            raise TypeError("register() first argument must be a marker type")
        if not isinstance(target, type):
            raise TypeError("register() second argument must be a type")

        def decorator(factory):
            if not callable(factory):
                raise TypeError("@register() must be applied to a callable")
            self._factories[marker] = (target, factory)
            return factory

        return decorator

    def build(self, marker, actual, /):
        """
        instantiate the validator for marker, checked against the declared type actual.
        """
        try:
            target, factory = self._factories[type(marker)]
        except KeyError:
            raise RegistrationError("no validator registered for %s" % type(marker).__name__) from None
        if not assignable(target, actual):
            raise RegistrationError("%s requires %s, not %s" % (
                type(marker).__name__, typename(target), typename(actual)
            ))
        validator = factory(marker)
        if not isinstance(validator, ArgumentValidator):
            raise RegistrationError("%s factory did not build an argument validator" % type(marker).__name__)
        return validator

    def copy(self):
        other = type(self)()
        other._factories = dict(self._factories)
        return other

    def __contains__(self, marker):
        return marker in self._factories


__all__ = (
    "Marker",
    "MaxLength",
    "Range",
    "Regex",
    "HasPermission",
    "Permissible",
    "ArgumentValidator",
    "MaxLengthValidator",
    "RangeValidator",
    "RegexValidator",
    "PermissionValidator",
    "assignable",
    "ValidatorRegistry",
)
