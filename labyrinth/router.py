"""
Labyrinth router: register handlers, run commands, complete partial input.

What this module provides
- Router: owns one command trie plus the registries used to compile into it.
  • register(template, function): compile one route explicitly.
  • include(handler): compile every @command-decorated callable of an object
    or module.
  • execute(caller, command): run a command line as caller.
  • complete(command): suggestions for the last token of a partial line.
- command(*templates, markers=()): decorator recording routes on a callable
  without registering it anywhere (see Router.include).
- invoke(router, caller, command): boundary helper that prints routing
  faults on the console instead of raising them (shell mode).

Quick start
    from typing import Annotated
    from labyrinth import Router, MaxLength, invoke

    router = Router()

    def give(caller: str, name: Annotated[str, MaxLength(16)], amount: int):
        print(caller, "gives", amount, "to", name)

    router.register("give ? ?", give)
    invoke(router, "console", "give timmy 55")

Overloading
- The same template may be registered once per caller type; the caller's
  runtime type picks the handler. Overloads at one terminus are tried in
  registration order.

Lifecycle
- Register everything first, then execute/complete from as many threads as
  needed: dispatch never mutates the trie, registration is not synchronized.
"""
import inspect
import logging

from . import dispatch
from .compiler import compile
from .faults import RouteError, trigger
from .locale import DefaultLocale, LocaleHandler
from .parsers import ParserRegistry
from .tokens import join, tokenize
from .trie import CommandNode
from .utils import Unset, rename, typename
from .validators import Marker, ValidatorRegistry

logger = logging.getLogger(__name__)


class Router:
    """
    A command trie with its parser/validator registries and locale.

    Parameters (keyword-only)
    - locale: LocaleHandler rewriting templates and formatting errors
      (DefaultLocale() when omitted).
    - parsers: ParserRegistry (a fresh ParserRegistry.default() when omitted).
    - validators: ValidatorRegistry (a fresh ValidatorRegistry.default() when omitted).
    """

    def __init__(self, *, locale=Unset, parsers=Unset, validators=Unset):
        self.locale = DefaultLocale() if locale is Unset else locale
        self.parsers = ParserRegistry.default() if parsers is Unset else parsers
        self.validators = ValidatorRegistry.default() if validators is Unset else validators
        if not isinstance(self.locale, LocaleHandler):
            raise TypeError("Router() locale must be a locale handler")
        if not isinstance(self.parsers, ParserRegistry):
            raise TypeError("Router() parsers must be a parser registry")
        if not isinstance(self.validators, ValidatorRegistry):
            raise TypeError("Router() validators must be a validator registry")
        self.root = CommandNode()

    def parser(self, type, parser, /):
        """
        Register parser for values of exactly type. Affects templates compiled afterwards.
        """
        return self.parsers.register(type, parser)

    def validator(self, marker, target, /):
        """
        Decorator registering a validator factory for a marker type (see ValidatorRegistry.register).
        """
        return self.validators.register(marker, target)

    def register(self, template, function, /, *, markers=()):
        """
        Compile one route.

        Parameters
        - template: command template, rewritten by the locale before compiling.
        - function: handler; its first parameter receives the caller.
        - markers: handler-level Markers, validated against the caller.

        Returns
        - function, unchanged.

        Raises
        - RegistrationError: template and handler do not fit together.
        """
        compile(
            self.root,
            self.locale.command(template),
            function,
            parsers=self.parsers,
            validators=self.validators,
            markers=_markers(markers),
        )
        return function

    def include(self, handler, /):
        """
        Register every @command-decorated callable reachable from handler.

        - Modules: decorated functions found in the module namespace.
        - Other objects: decorated methods of the object's class and its bases.
          Lookup walks the MRO: a decorated method overridden in a subclass is
          compiled once, bound to the most-derived implementation (using the
          templates of the most-derived decorated definition). Name-mangled
          private methods are distinct per class and are all compiled.

        Returns
        - the number of routes compiled.
        """
        count = 0
        for function, routes in _discover(handler):
            for templates, markers in routes:
                for template in templates:
                    self.register(template, function, markers=markers)
                    count += 1
        logger.debug("included %d routes from %r", count, handler)
        return count

    def execute(self, caller, command, /, *tokens):
        """
        Run command as caller.

        With extra tokens, the command is their space-joined concatenation with
        command as first word (handy for hosts that pre-split arguments).

        Returns
        - whatever the handler returned.

        Raises
        - RouteError: no route could run; its message is already localized.
        - anything the handler itself raises, unchanged.
        """
        if tokens:
            command = join(command, *tokens)
        try:
            return dispatch.execute(self.root, caller, tokenize(command))
        except dispatch.Exhausted as exhausted:
            raise RouteError(
                self.locale.localize(exhausted.error),
                error=exhausted.error,
                command=command,
            ) from None

    def complete(self, command, /, *tokens):
        """
        Suggestions (a set of strings) for the last token of command. Never raises
        for unparsable input; an unknown prefix yields an empty set.
        """
        if tokens:
            command = join(command, *tokens)
        return dispatch.complete(self.root, tokenize(command))

    def routes(self):
        """
        Yield (path, overload) for every compiled handler, path being a tuple of
        keywords and argument labels.
        """
        for path, node in self.root.walk():
            for overload in node.overloads.values():
                yield path, overload

    def __rich__(self):
        return self.root.__rich__()

    def __repr__(self):
        return "Router(routes=%d)" % sum(1 for _ in self.routes())


def _markers(markers):
    markers = tuple(markers)
    if not all(isinstance(marker, Marker) for marker in markers):
        raise TypeError("markers must be Marker instances")
    return markers


def _discover(handler):
    if inspect.ismodule(handler):
        for name, attribute in vars(handler).items():
            if routes := getattr(attribute, "__routes__", None):
                yield attribute, routes
        return
    if isinstance(handler, type):
        raise TypeError("include() argument must be an instance or a module, not a class")
    seen = set()
    for owner in type(handler).__mro__:
        for name, attribute in vars(owner).items():
            if name in seen:
                continue
            routes = getattr(getattr(attribute, "__func__", attribute), "__routes__", None)
            if not routes:
                continue
            seen.add(name)
            yield getattr(handler, name), routes


def command(*templates, markers=()):
    """
    Record routes on a function or method (stackable).

        class Admin:
            @command("kick ?", "k ?", markers=(HasPermission("mod.kick"),))
            def kick(self, caller: Player, target: Player): ...

        router.include(Admin())

    Returns
    - a decorator returning the callable unchanged, with the templates added
      to its __routes__.
    """
    if not templates or not all(isinstance(template, str) for template in templates):
        raise TypeError("@command() requires at least one template string")
    markers = _markers(markers)

    @rename("command")
    def decorator(function):
        target = getattr(function, "__func__", function)
        if not callable(target):
            raise TypeError("@command() must be applied to a callable")
        target.__routes__ = ((templates, markers),) + getattr(target, "__routes__", ())
        return function

    return decorator


def invoke(router, caller, command, /, *, shell=True, colorful=True, fancy=False, hint=Unset):
    """
    Execute command on router, surfacing routing faults the way a shell would.

    Returns
    - True when a handler ran, False when a RouteError was printed.

    Behavior
    - shell=True prints the fault on the stderr console (rich), honoring
      colorful/fancy, and returns False.
    - shell=False re-raises the fault.
    """
    if not isinstance(router, Router):
        raise TypeError("invoke() first argument must be a router, not %s" % typename(type(router)))
    try:
        router.execute(caller, command)
    except RouteError as fault:
        options = {"shell": shell, "colorful": colorful, "fancy": fancy}
        if hint is not Unset:
            options["hint"] = hint
        trigger(fault, **options)
        return False
    return True


__all__ = (
    "Router",
    "command",
    "invoke",
)
