"""
Labyrinth faults (errors) and rendering.

Scope
- Priority: canonical severities used to pick the single most useful error
  among all the failed parse paths of one dispatch.
- CommandError / LocaleKey: immutable, localizable error records.
- ErrorTracker: the "keep the most specific failure" policy.
- ParserError: structured failure raised by parsers and validators.
- CommandException / RegistrationError / RouteError: the engine's own
  exceptions; they know how to render themselves with rich.
- trigger(): central entry point to surface a fault (raise or print).

Taxonomy
- RegistrationError: fatal, raised while compiling a template. It points at a
  programming mistake in the handler/template pairing and should abort startup.
- RouteError: recoverable, raised by execute(). Carries one CommandError chosen
  by priority, already localized into its message.
- Anything a handler raises is passed through untouched.

Integration
- Host code catches RouteError at its boundary, or uses invoke() / trigger()
  with shell=True to print it on the stderr console.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType
from typing import final

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class Priority(IntEnum):
    """
    severities of routing failures (higher wins).

    - ROUTING: nothing matched the token sequence, or the caller type is wrong.
    - PARSING: a token looked like an argument but failed to convert.
    - VALIDATION: a value converted fine but broke a declared constraint.

    custom parsers and validators may use any integer; these are the levels the
    stock ones use.
    """
    ROUTING = 1
    PARSING = 2
    VALIDATION = 3


@final
class LocaleKey:
    """
    reference to a message key, localized lazily (and recursively when nested
    inside the arguments of a CommandError).
    """
    __slots__ = ("key",)

    def __init__(self, key, /):
        if not isinstance(key, str):
            raise TypeError("LocaleKey() argument must be a string")
        object.__setattr__(self, "key", key)

    def __setattr__(self, name, value, /):
        raise AttributeError("locale keys are read-only")

    def __eq__(self, other):
        if not isinstance(other, LocaleKey):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash((LocaleKey, self.key))

    def __repr__(self):
        return "LocaleKey(%r)" % self.key


@final
class CommandError:
    """
    immutable record of one routing failure.

    fields
    - priority: int, used to select the error shown to the user.
    - key: message key, resolved by a locale handler.
    - arguments: tuple of values substituted in order; a LocaleKey argument is
      localized before substitution.
    """
    __slots__ = ("priority", "key", "arguments")

    def __init__(self, priority, key, /, *arguments):
        if not isinstance(priority, int) or isinstance(priority, bool):
            raise TypeError("CommandError() priority must be an integer")
        if not isinstance(key, str):
            raise TypeError("CommandError() key must be a string")
        object.__setattr__(self, "priority", priority)
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "arguments", arguments)

    def __setattr__(self, name, value, /):
        raise AttributeError("command errors are read-only")

    def dominates(self, other, /):
        """
        strict comparison: at equal priority the error already recorded wins.
        """
        return other is None or self.priority > other.priority

    def __eq__(self, other):
        if not isinstance(other, CommandError):
            return NotImplemented
        return (self.priority, self.key, self.arguments) == (other.priority, other.key, other.arguments)

    def __hash__(self):
        return hash((self.priority, self.key, self.arguments))

    def __repr__(self):
        return "CommandError(%s)" % ", ".join(map(repr, (int(self.priority), self.key, *self.arguments)))


UNKNOWN_COMMAND = CommandError(Priority.ROUTING, "command.unknown")
INCORRECT_CALLER = CommandError(Priority.ROUTING, "command.incorrect.caller")


class ErrorTracker:
    """
    passive aggregator threaded through a search: remembers the first error of
    the highest priority seen so far.
    """
    __slots__ = ("_best",)

    def __init__(self):
        self._best = None

    def offer(self, error, /):
        """
        record error when it strictly dominates the current one; return whether it did.
        """
        if not isinstance(error, CommandError):
            raise TypeError("offer() argument must be a command error")
        if error.dominates(self._best):
            self._best = error
            return True
        return False

    @property
    def best(self):
        # nothing recorded means nothing even came close
        return self._best if self._best is not None else UNKNOWN_COMMAND

    def __bool__(self):
        return self._best is not None


class ParserError(Exception):
    """
    structured failure raised by parsers and validators.

    unlike returning NoMatch, raising this always records an error: the token
    was recognised as belonging to the argument but is not acceptable.
    """

    def __init__(self, priority, key, /, *arguments):
        self.error = CommandError(priority, key, *arguments)
        super().__init__(key, *arguments)

    @property
    def priority(self):
        return self.error.priority

    @property
    def key(self):
        return self.error.key

    @property
    def arguments(self):
        return self.error.arguments


class CommandException(Exception):
    """
    base of the engine's own exceptions.

    options (all optional)
    - title: short header title (defaults to the type name in words).
    - hint: one actionable sentence shown under the message.
    - shell: print instead of raise when triggered.
    - colorful / fancy: rendering switches (styles, panel chrome).
    - soft: in shell mode, do not exit after printing.
    - prog: program name for the header (falls back to __main__.__prog__).
    """

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | type(Unset)):
            raise TypeError("%s() message must be a string" % type(self).__name__)
        self.message = message
        self.options = MappingProxyType(options)
        super().__init__(*(() if message is Unset else (message,)))

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan message key
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        prog = self.options.get("prog", getattr(main, "__prog__", "labyrinth"))
        title = self.options.get("title", self._title())

        header = [text("[ "), text(prog, "prog-name")]
        if code := self.code:
            header += [text(" — "), text(code, "code")]
        header += [text(" | "), text(title.title(), "error-title"), text(" ]")]
        header = Text.assemble(*header)

        body = [text(coalesce(self.message, ""), "error-message")]
        if hint := self.options.get("hint"):
            body.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)

    def _title(self):
        name = type(self).__name__.removesuffix("Error")
        return "".join(" " + char.lower() if char.isupper() else char for char in name).strip()

    @property
    def code(self):
        return None

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("soft", True):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RegistrationError(CommandException):
    """
    a template could not be compiled against its handler.

    options: template (the offending template), function (the handler).
    """

    @property
    def code(self):
        return self.options.get("template")


class RouteError(CommandException):
    """
    no route could execute the command.

    options: error (the selected CommandError), command (the raw input).
    """

    @property
    def error(self):
        return self.options.get("error", UNKNOWN_COMMAND)

    @property
    def code(self):
        return self.error.key


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via the rich console; otherwise the
      fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "Priority",
    "LocaleKey",
    "CommandError",
    "UNKNOWN_COMMAND",
    "INCORRECT_CALLER",
    "ErrorTracker",
    "ParserError",
    "CommandException",
    "RegistrationError",
    "RouteError",
    "trigger",
)
