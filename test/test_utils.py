"""
Sentinel and helper tests.

Scope
- SentinelType: identity per name, falsiness, immutability, copy/pickle identity.
- coalesce / rename / typename helpers.

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from labyrinth.utils import NoMatch, SentinelType, Unset, coalesce, rename, typename


class TestSentinels(TestCase):

    def testCachedPerName(self):
        self.assertIs(SentinelType("Unset"), Unset)
        self.assertIsNot(Unset, NoMatch)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertFalse(NoMatch)
        self.assertEqual(repr(NoMatch), "NoMatch")

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            Unset.name = "Other"

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Derived", (SentinelType,), {})

    def testCopiesKeepIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy([NoMatch])[0], NoMatch)
        self.assertIs(pickle.loads(pickle.dumps(NoMatch)), NoMatch)

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            SentinelType("")


class TestHelpers(TestCase):

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)

    def testRenameDirect(self):
        def function(): ...

        self.assertIs(rename(function, "other"), function)
        self.assertEqual(function.__name__, "other")
        self.assertEqual(function.__qualname__, "other")

    def testRenameDecorator(self):
        @rename("other")
        def function(): ...

        self.assertEqual(function.__name__, "other")

    def testRenameArity(self):
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(len, "a", "b")

    def testTypename(self):
        self.assertEqual(typename(int), "int")
        self.assertEqual(typename(TestHelpers), "TestHelpers")
        self.assertEqual(typename(list[int]), "list")


if __name__ == "__main__":
    unittest.main()
