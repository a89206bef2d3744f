"""
Backtracking search over the compiled trie.

execute()
- Depth-first over an explicit stack of MatchStates, seeded with the root,
  offset 0 and the caller as the first collected value.
- With tokens left, every argument edge of the node is tried in registration
  order, then the literal child for the lowercased token (pushed last, so it
  is explored first). An edge whose parser returns NoMatch is skipped
  silently; a ParserError from a parser or validator is recorded and only
  that edge is abandoned.
- With no tokens left, the node's overloads are tried in registration order:
  the first one whose caller type and caller validators accept the caller is
  invoked with the rebuilt arguments, and the search stops there.
- When the stack runs dry the most specific error recorded is reported
  (command.unknown when nothing was recorded).

complete()
- Same walk without values or errors: the last token is matched as a prefix
  against the literal keywords and offered to every edge parser's complete().
  Failures of any kind just prune the path.

The cost is exponential in the worst case (many ambiguous edges per node),
bounded by the tokens and the edges met along each path.
"""
import logging

from .faults import ErrorTracker, INCORRECT_CALLER, ParserError, UNKNOWN_COMMAND
from .trie import MatchState
from .utils import NoMatch

logger = logging.getLogger(__name__)


class Exhausted(Exception):
    """
    every route failed; error is the one to report.
    """

    def __init__(self, error):
        super().__init__(error)
        self.error = error


def _consume(edge, tokens, offset, errors):
    """
    run edge against tokens[offset:], returning the value or NoMatch.

    errors may be None (completion), in which case failures are dropped.
    """
    try:
        if edge.variadic:
            value = []
            for token in tokens[offset:]:
                if (parsed := edge.parser.parse(token)) is NoMatch:
                    return NoMatch
                value.append(parsed)
            value = tuple(value)
        else:
            value = edge.parser.parse(tokens[offset])
            if value is NoMatch:
                return NoMatch
        for validator in edge.validators:
            if edge.variadic:
                for raw, element in zip(tokens[offset:], value):
                    validator.validate(raw, element)
            else:
                validator.validate(tokens[offset], value)
    except ParserError as exception:
        if errors is not None:
            errors.offer(exception.error)
        return NoMatch
    return value


def _suggest(edge, partial):
    try:
        return edge.parser.complete(partial)
    except ParserError:
        return ()


def _resolve(state, caller, errors):
    """
    pick the first overload at state.node accepting caller, or None.
    """
    for overload in state.node.overloads.values():
        if not overload.accepts(caller):
            errors.offer(INCORRECT_CALLER)
            continue
        try:
            for validator in overload.validators:
                validator.validate(None, caller)
        except ParserError as exception:
            errors.offer(exception.error)
            continue
        return overload
    return None


def execute(root, caller, tokens, /):
    """
    Route tokens from root and invoke the matching handler as caller.

    Returns whatever the handler returns. Exceptions raised by the handler
    propagate unchanged.

    Raises
    - Exhausted: no route could run; carries the CommandError to report.
    """
    errors = ErrorTracker()
    stack = [MatchState(root, 0, value=caller)]
    explored = 0
    while stack:
        state = stack.pop()
        explored += 1
        node, offset = state.node, state.offset

        if offset == len(tokens):
            if not node.overloads:
                errors.offer(UNKNOWN_COMMAND)
                continue
            if (overload := _resolve(state, caller, errors)) is None:
                continue
            logger.debug("routed %r to %s after %d states", tokens, overload.name, explored)
            return overload.invoke(state.values())

        for edge in node.edges:
            value = _consume(edge, tokens, offset, errors)
            if value is NoMatch:
                continue
            stack.append(state.advance(edge.node, len(tokens) if edge.variadic else offset + 1, value))

        if (child := node.literals.get(tokens[offset].lower())) is not None:
            stack.append(state.advance(child, offset + 1))

    logger.debug("no route for %r after %d states: %r", tokens, explored, errors.best)
    raise Exhausted(errors.best)


def complete(root, tokens, /):
    """
    Suggestions for the last of tokens, gathered over every surviving path.
    """
    suggestions = set()
    last = len(tokens) - 1
    stack = [MatchState(root, 0)]
    while stack:
        state = stack.pop()
        node, offset = state.node, state.offset
        token = tokens[offset]

        if offset == last:
            lowered = token.lower()
            suggestions.update(keyword for keyword in node.literals if keyword.startswith(lowered))
            for edge in node.edges:
                suggestions.update(_suggest(edge, token))
            continue

        for edge in node.edges:
            if edge.variadic:
                # the edge also owns the token being completed
                if _consume(edge, tokens[:last], offset, None) is not NoMatch:
                    suggestions.update(_suggest(edge, tokens[last]))
            elif _consume(edge, tokens, offset, None) is not NoMatch:
                stack.append(MatchState(edge.node, offset + 1))

        if (child := node.literals.get(token.lower())) is not None:
            stack.append(MatchState(child, offset + 1))

    return suggestions


__all__ = (
    "Exhausted",
    "execute",
    "complete",
)
