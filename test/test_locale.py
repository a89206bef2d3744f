"""
Locale handler behavioral tests.

Scope
- Template rewriting before compilation.
- Message lookup, argument substitution, nested LocaleKey arguments.
- Host-level string overrides through __main__.__locale__.

Conventions
- Test method names follow CamelCase per project convention.
"""
import sys
import unittest
from typing import Annotated
from unittest import TestCase

from labyrinth import (
    DEFAULT_STRINGS,
    CommandError,
    DefaultLocale,
    LocaleHandler,
    LocaleKey,
    MaxLength,
    RouteError,
    Router,
)


class Translating(DefaultLocale):
    def command(self, template, /):
        if template == "test ? ?":
            return "testing ?2 give ?1"
        return template


class TestTemplates(TestCase):

    def testLocaleRewritesTemplate(self):
        router = Router(locale=Translating())
        calls = []

        def test(sender: str, name: str, amount: int):
            calls.append((name, amount))

        router.register("test ? ?", test)
        router.execute("tester", "testing 55 give hello")
        self.assertEqual(calls, [("hello", 55)])
        with self.assertRaises(RouteError):
            router.execute("tester", "test hello 55")

    def testRouterRejectsNonLocale(self):
        with self.assertRaises(TypeError):
            Router(locale=object())


class TestMessages(TestCase):

    def testDefaultStrings(self):
        locale = DefaultLocale()
        self.assertEqual(locale.localize(CommandError(1, "command.unknown")), "Unknown command")
        self.assertEqual(
            locale.localize(CommandError(2, "parser.integer.invalid", "cake")),
            "'cake' is not an integer",
        )

    def testNestedLocaleKey(self):
        locale = DefaultLocale()
        error = CommandError(3, "validator.regex", "0abc", LocaleKey("regex.valid"))
        self.assertEqual(locale.localize(error), "'0abc' is not valid input")

    def testUnknownKeyComesBackVerbatim(self):
        locale = DefaultLocale()
        self.assertEqual(locale.localize(CommandError(3, "custom.key", "x")), "custom.key")
        self.assertEqual(locale.localize(LocaleKey("custom.key")), "custom.key")

    def testOverriddenStrings(self):
        locale = DefaultLocale({"command.unknown": "Commande inconnue"})
        self.assertEqual(locale.localize(CommandError(1, "command.unknown")), "Commande inconnue")
        self.assertEqual(locale.strings["command.incorrect.caller"], DEFAULT_STRINGS["command.incorrect.caller"])

    def testHostStrings(self):
        main = sys.modules["__main__"]
        missing = not hasattr(main, "__locale__")
        previous = getattr(main, "__locale__", None)
        main.__locale__ = {"command.unknown": "What?"}
        try:
            self.assertEqual(DefaultLocale().localize(CommandError(1, "command.unknown")), "What?")
            self.assertEqual(
                DefaultLocale({"command.unknown": "Eh?"}).localize(CommandError(1, "command.unknown")),
                "Eh?",
            )
        finally:
            if missing:
                del main.__locale__
            else:
                main.__locale__ = previous

    def testIdentityLocale(self):
        locale = LocaleHandler()
        self.assertEqual(locale.command("give ? ?"), "give ? ?")
        self.assertEqual(locale.localize(CommandError(1, "command.unknown")), "command.unknown")

    def testRouteErrorUsesRouterLocale(self):
        router = Router(locale=DefaultLocale({"command.unknown": "Nope"}))
        with self.assertRaises(RouteError) as context:
            router.execute("tester", "anything")
        self.assertEqual(context.exception.message, "Nope")

    def testStringMayDropArguments(self):
        router = Router(locale=DefaultLocale({"validator.maxlength": "That name is too long"}))

        def name(sender: str, value: Annotated[str, MaxLength(3)]):
            self.fail("Shouldn't be called")

        router.register("name ?", name)
        with self.assertRaises(RouteError) as context:
            router.execute("tester", "name abcdef")
        self.assertEqual(context.exception.message, "That name is too long")

    def testSurplusArgumentsAreDropped(self):
        locale = DefaultLocale({"validator.maxlength": "'%s' is too long"})
        error = CommandError(3, "validator.maxlength", "abcdef", 3)
        self.assertEqual(locale.localize(error), "'abcdef' is too long")

    def testMismatchedDirectivesLeaveStringUnformatted(self):
        locale = DefaultLocale({"custom.key": "%d items"})
        self.assertEqual(locale.localize(CommandError(3, "custom.key", "many")), "%d items")

    def testLocalizeRejectsOtherValues(self):
        with self.assertRaises(TypeError):
            DefaultLocale().localize("command.unknown")

    def testStringsAreReadOnly(self):
        with self.assertRaises(TypeError):
            DefaultLocale().strings["command.unknown"] = "x"


if __name__ == "__main__":
    unittest.main()
