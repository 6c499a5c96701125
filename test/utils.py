"""
Utilities behavioral tests (Unset sentinel, coalesce, wording helpers).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from helmsman.utils import Unset, UnsetType, coalesce, counted, mirror, pluralize, typename


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestHelpers(TestCase):

    def testMirrorCopiesContainers(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a"]

        holder = Holder()
        self.assertEqual(holder.items, ("a",))
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testPluralize(self):
        self.assertEqual(pluralize("argument"), "arguments")
        self.assertEqual(pluralize("alias"), "aliases")
        self.assertEqual(pluralize("Category"), "Categories")
        self.assertEqual(pluralize("required option"), "required options")

    def testCounted(self):
        self.assertEqual(counted(1, "argument"), "argument")
        self.assertEqual(counted(2, "argument"), "arguments")

    def testTypename(self):
        self.assertEqual(typename("DatabaseSeed"), "database-seed")
        self.assertEqual(typename("Command"), "command")


if __name__ == "__main__":
    unittest.main()
