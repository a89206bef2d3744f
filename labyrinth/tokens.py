"""
Tokenizer for raw command strings.

Rules
- Tokens are separated by runs of whitespace.
- A token that starts with a backtick runs until the next backtick; the
  backticks are stripped and the whitespace inside is kept, so
  "numbers `1, 2, 3`" yields ["numbers", "1, 2, 3"].
- Blank input still yields one (empty) token, so the trie always has at
  least one token to terminate on.
"""
import re

_splitter = re.compile(r"`(?P<quoted>[^`]*)`|(?P<bare>\S+)")


def tokenize(command, /):
    """
    Split a command string into tokens, honoring backtick quoting.

    Returns
    - list[str]: never empty; [""] for blank input.

    Raises
    - TypeError: when command is not a string.
    """
    if not isinstance(command, str):
        raise TypeError("tokenize() argument must be a string")
    tokens = []
    for match in _splitter.finditer(command):
        quoted = match.group("quoted")
        tokens.append(quoted if quoted is not None else match.group("bare"))
    return tokens or [""]


def join(name, /, *tokens):
    """
    Join a command name and pre-split tokens with single spaces.
    """
    if not isinstance(name, str) or not all(isinstance(token, str) for token in tokens):
        raise TypeError("join() arguments must be strings")
    return " ".join((name, *tokens))


__all__ = (
    "tokenize",
    "join",
)
