"""
Completion behavioral tests.

Scope
- Literal keyword suggestions (case-insensitive prefix match).
- Parser-provided suggestions (enum members).
- Paths pruned by unparsable or invalid earlier tokens, never raising.
- Variadic slots owning the token being completed.

Conventions
- Test method names follow CamelCase per project convention.
"""
import enum
import unittest
from typing import Annotated
from unittest import TestCase

from labyrinth import EnumParser, MaxLength, Router


class Sample(enum.Enum):
    HELLO = 1
    TESTING = 2
    CAKE = 3
    COLD = 4
    ABC = 5


class Color(enum.Enum):
    RED = 1
    GREEN = 2
    GREY = 3


def sampled():
    router = Router()
    router.parser(Sample, EnumParser(Sample))

    def enumTest(sender: str, value: Sample): ...
    def literal(sender: str): ...

    router.register("test ?", enumTest)
    router.register("test abcd", literal)
    return router


class TestCompletion(TestCase):

    def testEnumCompletion(self):
        router = sampled()
        self.assertEqual(router.complete("test hel"), {"HELLO"})
        self.assertEqual(router.complete("test wor"), set())
        self.assertEqual(router.complete("test c"), {"CAKE", "COLD"})
        self.assertEqual(router.complete("test test"), {"TESTING"})
        self.assertEqual(router.complete("test ab"), {"ABC", "abcd"})

    def testPreSplitTokens(self):
        router = sampled()
        self.assertEqual(router.complete("test", "c"), {"CAKE", "COLD"})

    def testRootKeywords(self):
        router = Router()
        router.register("hello", lambda sender: None)
        router.register("help", lambda sender: None)
        router.register("world", lambda sender: None)
        self.assertEqual(router.complete(""), {"hello", "help", "world"})
        self.assertEqual(router.complete("HE"), {"hello", "help"})
        self.assertEqual(router.complete("x"), set())

    def testUnknownPrefixIsEmpty(self):
        router = sampled()
        self.assertEqual(router.complete("nothing here"), set())

    def testFullyTypedTokenStillSuggested(self):
        router = sampled()
        self.assertEqual(router.complete("test abcd"), {"abcd"})

    def testArgumentsBeforeLastToken(self):
        router = Router()

        def give(sender: str, amount: int): ...

        router.register("give ? now", give)
        router.register("give ? never", give)
        self.assertEqual(router.complete("give 5 n"), {"now", "never"})
        self.assertEqual(router.complete("give 5 no"), {"now"})

    def testUnparsableTokenPrunesSilently(self):
        router = Router()

        def give(sender: str, amount: int): ...

        router.register("give ? now", give)
        self.assertEqual(router.complete("give abc n"), set())

    def testInvalidTokenPrunesSilently(self):
        router = Router()

        def rename(sender: str, name: Annotated[str, MaxLength(3)]): ...

        router.register("rename ? now", rename)
        self.assertEqual(router.complete("rename tim n"), {"now"})
        self.assertEqual(router.complete("rename timothy n"), set())

    def testStringSlotsSuggestNothing(self):
        router = Router()

        def tell(sender: str, target: str): ...

        router.register("tell ?", tell)
        self.assertEqual(router.complete("tell ti"), set())

    def testVariadicCompletion(self):
        router = Router()
        router.parser(Color, EnumParser(Color))

        def paint(sender: str, *colors: Color): ...

        router.register("paint ?", paint)
        self.assertEqual(router.complete("paint gr"), {"GREEN", "GREY"})
        self.assertEqual(router.complete("paint red gre"), {"GREEN", "GREY"})
        self.assertEqual(router.complete("paint red blue gr"), set())

    def testOversizedIntegerPrunesSilently(self):
        router = Router()

        def give(sender: str, amount: int): ...

        router.register("give ? now", give)
        self.assertEqual(router.complete("give " + "9" * 5000 + " n"), set())
        self.assertEqual(router.complete("give " + "9" * 5000 + " x"), set())

    def testCompletionDoesNotExecute(self):
        router = Router()

        def explode(sender: str):
            self.fail("Shouldn't be called")

        router.register("explode", explode)
        self.assertEqual(router.complete("expl"), {"explode"})


if __name__ == "__main__":
    unittest.main()
