"""
Locale handling: templates in, human strings out.

A locale handler has two jobs
- command(template): rewrite a template right before it is compiled. This
  lets a host translate the keywords of its commands or move the slots around
  (e.g. "give ? ?" -> "testing ?2 give ?1") without touching the handlers.
- localize(error): turn a CommandError (or a bare LocaleKey) into display text.
  Nested LocaleKey arguments are localized first, then substituted in order
  with %-formatting. Unknown keys come back verbatim.

Host configuration
- DefaultLocale merges its built-in English strings with an optional
  __locale__ mapping found on __main__, then with the strings it was given.
"""
from types import MappingProxyType

from .faults import CommandError, LocaleKey

DEFAULT_STRINGS = MappingProxyType({
    "command.unknown": "Unknown command",
    "command.incorrect.caller": "You cannot call this command",
    "parser.integer.invalid": "'%s' is not an integer",
    "parser.float.invalid": "'%s' is not a real number",
    "parser.enum.invalid": "'%s' is not a valid value",
    "parser.uuid.invalid": "'%s' is not a valid UUID",
    "validator.maxlength": "'%s' is longer than the max %s",
    "validator.range.min": "'%d' must be greater or equal to '%d'",
    "validator.range.max": "'%d' must be lesser or equal to '%d'",
    "validator.regex": "'%s' is not %s",
    "validator.permission": "You do not have permission to do that",
    "regex.valid": "valid input",
})


class LocaleHandler:
    """
    Identity locale: templates are compiled as written and every message is
    its own key, returned verbatim without substituting arguments.
    """

    def command(self, template, /):
        return template

    def string(self, key, /):
        return None

    def localize(self, error, /):
        if isinstance(error, LocaleKey):
            return self._lookup(error.key)
        if not isinstance(error, CommandError):
            raise TypeError("localize() argument must be a command error or a locale key")
        arguments = tuple(
            self.localize(argument) if isinstance(argument, LocaleKey) else argument
            for argument in error.arguments
        )
        template = self.string(error.key)
        if template is None:
            return error.key
        return _format(template, arguments)

    def _lookup(self, key):
        string = self.string(key)
        return key if string is None else string


def _format(template, arguments):
    """
    substitute as many leading arguments as template has directives for;
    surplus arguments are dropped.
    """
    if not arguments:
        return template
    for count in range(len(arguments), -1, -1):
        try:
            return template % arguments[:count]
        except (TypeError, ValueError):
            continue
    return template


class DefaultLocale(LocaleHandler):
    """
    English strings for every key the stock parsers and validators emit.
    """

    def __init__(self, strings=None, /):
        if strings is not None and not hasattr(strings, "items"):
            raise TypeError("DefaultLocale() argument must be a mapping")
        self._strings = dict(DEFAULT_STRINGS)
        self._strings |= getattr(__import__("__main__"), "__locale__", {})
        self._strings |= strings or {}

    @property
    def strings(self):
        return MappingProxyType(self._strings)

    def string(self, key, /):
        return self._strings.get(key)


__all__ = (
    "DEFAULT_STRINGS",
    "LocaleHandler",
    "DefaultLocale",
)
