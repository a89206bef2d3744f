"""
The compiled command trie.

Shape
- CommandNode: one position in a command. It branches on literal keywords
  (lowercase), on argument edges (tried in registration order), and may be a
  terminus holding one overload per caller type. "give ? ?" and
  "give ? ~ ?" share their "give ?" prefix: the node after the first slot is
  both a terminus-in-waiting (second slot) and the parent of "~".
- ArgumentEdge: consumes one token through a parser (or every remaining token
  when variadic) and owns the single child node it leads to.
- CommandOverload: the handler reached at a terminus for one caller type, with
  its caller validators and the slot -> parameter position map.
- MatchState: one step of a dispatch, linked to its parent so arguments are
  rebuilt once at the end instead of copied at every branch.

The trie is built once by the compiler and only read afterwards.
"""
from rich.markup import escape
from rich.tree import Tree

from .utils import Unset, typename


class CommandNode:
    __slots__ = ("literals", "edges", "overloads")

    def __init__(self):
        self.literals = {}
        self.edges = []
        self.overloads = {}

    def literal(self, keyword, /):
        """
        child under keyword, created when missing.
        """
        keyword = keyword.lower()
        try:
            return self.literals[keyword]
        except KeyError:
            child = self.literals[keyword] = CommandNode()
            return child

    def branch(self, parser, validators=(), element=Unset):
        """
        append a new argument edge and return it.
        """
        edge = ArgumentEdge(parser, validators, element)
        self.edges.append(edge)
        return edge

    @property
    def terminal(self):
        return bool(self.overloads)

    def walk(self, prefix=()):
        """
        yield (path, node) for this node and every node below it, depth first.
        """
        yield prefix, self
        for keyword, child in self.literals.items():
            yield from child.walk(prefix + (keyword,))
        for edge in self.edges:
            yield from edge.node.walk(prefix + (edge.label,))

    def __rich__(self):
        return self._tree(Tree("[bold]/[/bold]"))

    def _tree(self, tree):
        for caller, overload in self.overloads.items():
            tree.add("[green]→ %s[/green] [dim](caller: %s)[/dim]" % (escape(overload.name), escape(typename(caller))))
        for keyword, child in self.literals.items():
            child._tree(tree.add(escape(keyword)))
        for edge in self.edges:
            edge.node._tree(tree.add("[cyan]%s[/cyan]" % escape(edge.label)))
        return tree

    def __repr__(self):
        return "CommandNode(literals=%r, edges=%d, overloads=%d)" % (
            list(self.literals), len(self.edges), len(self.overloads)
        )


class ArgumentEdge:
    __slots__ = ("parser", "validators", "element", "node")

    def __init__(self, parser, validators=(), element=Unset):
        self.parser = parser
        self.validators = tuple(validators)
        self.element = element
        self.node = CommandNode()

    @property
    def variadic(self):
        return self.element is not Unset

    @property
    def label(self):
        return "<%s...>" % typename(self.element) if self.variadic else "<%r>" % self.parser

    def __repr__(self):
        return "ArgumentEdge(parser=%r, validators=%r, variadic=%r)" % (
            self.parser, self.validators, self.variadic
        )


class CommandOverload:
    """
    positions[i] is the parameter index receiving the i-th value collected
    along the route (index 0 is the caller, always at position 0).
    """
    __slots__ = ("caller", "function", "validators", "positions", "variadic")

    def __init__(self, caller, function, validators, positions, variadic=False):
        self.caller = caller
        self.function = function
        self.validators = tuple(validators)
        self.positions = tuple(positions)
        self.variadic = variadic

    @property
    def name(self):
        return getattr(self.function, "__qualname__", repr(self.function))

    def accepts(self, caller, /):
        try:
            return isinstance(caller, self.caller)
        except TypeError:
            return False

    def invoke(self, values, /):
        arguments = [Unset] * len(values)
        for index, value in enumerate(values):
            arguments[self.positions[index]] = value
        if self.variadic:
            *arguments, rest = arguments
            return self.function(*arguments, *rest)
        return self.function(*arguments)

    def __repr__(self):
        return "CommandOverload(%s, caller=%s, positions=%r)" % (self.name, typename(self.caller), self.positions)


class MatchState:
    __slots__ = ("node", "offset", "parent", "value")

    def __init__(self, node, offset, parent=None, value=Unset):
        self.node = node
        self.offset = offset
        self.parent = parent
        self.value = value

    def advance(self, node, offset, value=Unset):
        return MatchState(node, offset, self, value)

    def values(self):
        """
        collected values from the root down, literal steps skipped.
        """
        values = []
        state = self
        while state is not None:
            if state.value is not Unset:
                values.append(state.value)
            state = state.parent
        values.reverse()
        return values


__all__ = (
    "CommandNode",
    "ArgumentEdge",
    "CommandOverload",
    "MatchState",
)
