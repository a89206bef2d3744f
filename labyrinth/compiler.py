"""
Template compiler: one template + one handler -> one route in the trie.

Templates
- Words are literal keywords, matched case-insensitively.
- "?" is an argument slot bound to the next handler parameter.
- "?<n>" binds the slot to parameter n explicitly (1-based, the caller being
  parameter 0), so "test ?2 ?3 ?1" fills b, c, a from "test x y z" for a
  handler (caller, a, b, c).
- A slot bound to a trailing *args parameter is variadic: it swallows every
  remaining token, each parsed with the parser of the *args element type. It
  must be the last token of the template.

Handlers
- Parameter 0 receives the caller; its annotation is the caller type used for
  overloading (unannotated means any caller).
- Every other parameter is filled from a slot. Its annotation (unwrapped from
  typing.Annotated) selects the parser by exact type, and the Marker objects in
  the Annotated metadata become its validators.
- Keyword-only and **kwargs parameters cannot be filled from a command line.

Every check runs before the trie is touched, so a failing template leaves the
routes registered before it intact.
"""
import inspect
import logging
import typing
from inspect import Parameter

from .faults import RegistrationError
from .trie import CommandOverload
from .utils import Unset, typename
from .validators import Marker

logger = logging.getLogger(__name__)


class Slot:
    """
    One handler parameter as seen by the compiler.
    """
    __slots__ = ("name", "type", "markers", "variadic")

    def __init__(self, name, type, markers=(), variadic=False):
        self.name = name
        self.type = type
        self.markers = tuple(markers)
        self.variadic = variadic

    def __repr__(self):
        return "Slot(%r, %s%s)" % (self.name, "*" if self.variadic else "", typename(self.type))


class Signature(tuple):
    """
    The handler's parameters, caller first.
    """

    @classmethod
    def of(cls, function, /):
        try:
            parameters = inspect.signature(function).parameters.values()
        except (TypeError, ValueError):
            raise RegistrationError("cannot inspect the signature of %r" % function) from None
        try:
            hints = typing.get_type_hints(function, include_extras=True)
        except NameError as exception:
            raise RegistrationError("cannot resolve annotations of %s: %s" % (
                typename(function), exception
            )) from None
        except TypeError:
            hints = {}

        slots = []
        for parameter in parameters:
            if parameter.kind in (Parameter.KEYWORD_ONLY, Parameter.VAR_KEYWORD):
                raise RegistrationError("parameter %r of %s cannot be filled from a command" % (
                    parameter.name, typename(function)
                ))
            annotation = hints.get(parameter.name, parameter.annotation)
            if annotation is Parameter.empty:
                annotation = object
            markers = ()
            if typing.get_origin(annotation) is typing.Annotated:
                markers = tuple(item for item in annotation.__metadata__ if isinstance(item, Marker))
                annotation = annotation.__origin__
            slots.append(Slot(parameter.name, annotation, markers, parameter.kind is Parameter.VAR_POSITIONAL))
        return cls(slots)

    @property
    def caller(self):
        return self[0]


def _resolve(token, counter, signature):
    """
    parameter index targeted by a slot token.
    """
    if token == "?":
        index = counter
    else:
        try:
            index = int(token[1:])
        except ValueError:
            raise RegistrationError("invalid argument slot %r" % token) from None
        if not 1 <= index < len(signature):
            raise RegistrationError("explicit argument position %d out of range" % index)
    if counter >= len(signature):
        raise RegistrationError("incorrect number of method parameters")
    return index


def compile(root, template, function, /, *, parsers, validators, markers=()):
    """
    Compile template into the trie rooted at root, routing to function.

    Parameters
    - root: CommandNode the route starts from.
    - template: str, e.g. "give ? ~ ?".
    - function: the handler; bound methods carry their owner with them.
    - parsers: ParserRegistry used to resolve each slot's parser.
    - validators: ValidatorRegistry used to build validators from markers.
    - markers: handler level markers, validated against the caller.

    Returns
    - the CommandOverload stored at the route's terminus.

    Raises
    - RegistrationError on any mismatch between template and handler.
    """
    if not isinstance(template, str):
        raise TypeError("compile() template must be a string")
    if not callable(function):
        raise TypeError("compile() function must be callable")

    options = {"template": template, "function": function}
    try:
        signature = Signature.of(function)
        if not signature or signature.caller.variadic:
            raise RegistrationError("handler %s needs a leading caller parameter" % typename(function))

        tokens = template.split()
        steps = []
        positions = [0] * len(signature)
        counter = 1
        variadic = False
        for offset, token in enumerate(tokens):
            if not token.startswith("?"):
                steps.append(token.lower())
                continue
            index = _resolve(token, counter, signature)
            slot = signature[index]
            if slot.variadic:
                if offset != len(tokens) - 1:
                    raise RegistrationError("variadic slot must be last")
                variadic = True
            parser = parsers.lookup(slot.type)
            if parser is None:
                raise RegistrationError("no parser for type %s" % typename(slot.type))
            checks = [validators.build(marker, slot.type) for marker in slot.markers]
            steps.append((parser, checks, slot.type if slot.variadic else Unset))
            positions[counter] = index
            counter += 1

        if counter != len(signature):
            raise RegistrationError("incorrect number of method parameters")
        if sorted(positions) != list(range(len(signature))):
            raise RegistrationError("every parameter must be bound to exactly one slot")

        caller = signature.caller
        checks = [validators.build(marker, caller.type) for marker in (*caller.markers, *markers)]

        if all(isinstance(step, str) for step in steps):
            node = root
            for keyword in steps:
                if (node := node.literals.get(keyword)) is None:
                    break
            else:
                if caller.type in node.overloads:
                    raise RegistrationError("duplicate command")
    except RegistrationError as exception:
        raise exception.__replace__(**options) from None

    node = root
    for step in steps:
        if isinstance(step, str):
            node = node.literal(step)
        else:
            node = node.branch(*step).node

    overload = node.overloads[caller.type] = CommandOverload(caller.type, function, checks, positions, variadic)
    logger.debug("compiled %r -> %s (caller: %s)", template, overload.name, typename(caller.type))
    return overload


__all__ = (
    "Slot",
    "Signature",
    "compile",
)
