"""
Input entry behavioral tests (InputArgument, InputOption and their builders).

Scope
- Validate construction and sanitization (names, descriptions, shortcuts).
- Validate the kind tags used by definitions to dispatch entries.
- Validate fluent builders, attached and detached.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from helmsman import (
    EntryKind,
    InputArgument,
    InputOption,
    ArgumentBuilder,
    OptionBuilder,
    InputDefinition,
)
from helmsman.faults import (
    DefinitionError,
    InvalidShortcutError,
    MissingArgumentNameError,
    MissingOptionNameError,
    DuplicateShortcutError,
    OrderingError,
)


class TestInputArgument(TestCase):
    """Behavioral tests for positional entries."""

    def testDefaults(self):
        argument = InputArgument("name")
        self.assertEqual(argument.name, "name")
        self.assertEqual(argument.description, "")
        self.assertIsNone(argument.default)
        self.assertFalse(argument.required)
        self.assertTrue(argument.optional)

    def testNameIsTrimmed(self):
        self.assertEqual(InputArgument("  name ").name, "name")

    def testEmptyNameRaises(self):
        with self.assertRaises(MissingArgumentNameError):
            InputArgument("   ")

    def testNonStringNameRaises(self):
        with self.assertRaises(TypeError):
            InputArgument(42)  # type: ignore[arg-type]

    def testDescriptionIsTrimmed(self):
        self.assertEqual(InputArgument("name", " the name ").description, "the name")

    def testDefaultIsReturnedAsIs(self):
        default = ["a", "b"]
        argument = InputArgument("names", default=default)
        self.assertIs(argument.default, default)

    def testKindTag(self):
        self.assertIs(InputArgument("name").kind, EntryKind.ARGUMENT)

    def testRequiredToggles(self):
        argument = InputArgument("name").mark_as_required()
        self.assertTrue(argument.required)
        argument.mark_as_optional()
        self.assertFalse(argument.required)

    def testReprMentionsFields(self):
        text = repr(InputArgument("name", required=True))
        self.assertTrue(text.startswith("input-argument("))
        self.assertIn("name='name'", text)
        self.assertIn("required=True", text)


class TestInputOption(TestCase):
    """Behavioral tests for named entries."""

    def testShortcutsAreSanitized(self):
        option = InputOption("random", shortcuts=["-r", " R ", "r", ""])
        self.assertEqual(option.shortcuts, ("r", "R"))

    def testSingleShortcutString(self):
        self.assertEqual(InputOption("random", shortcuts="r").shortcuts, ("r",))

    def testShortcutsAreReadOnlyCopies(self):
        option = InputOption("random", shortcuts="r")
        self.assertIsInstance(option.shortcuts, tuple)

    def testFlagDependsOnBooleanDefault(self):
        self.assertTrue(InputOption("force", default=False).flag)
        self.assertFalse(InputOption("name").flag)
        self.assertFalse(InputOption("count", default=0).flag)

    def testEmptyNameRaises(self):
        with self.assertRaises(MissingOptionNameError):
            InputOption("")

    def testKindTag(self):
        self.assertIs(InputOption("name").kind, EntryKind.OPTION)

    def testAddShortcutsKeepsOrder(self):
        option = InputOption("verbose").add_shortcuts("v").add_shortcuts(["V", "v"])
        self.assertEqual(option.shortcuts, ("v", "V"))

    def testMultiCharacterShortcutRaises(self):
        with self.assertRaises(InvalidShortcutError):
            InputOption("dry-run", shortcuts="dr")
        with self.assertRaises(DefinitionError):
            InputOption("verbose").add_shortcuts("v", "--vv")

    def testMultiCharacterShortcutThroughDefinitionRaises(self):
        definition = InputDefinition([InputOption("force")])
        with self.assertRaises(InvalidShortcutError):
            OptionBuilder(definition.option("force"), definition).shortcuts("fo")
        self.assertFalse(definition.has_option_shortcut("fo"))


class TestBuilders(TestCase):
    """Behavioral tests for the fluent builders."""

    def testArgumentBuilderChains(self):
        argument = InputArgument("name")
        ArgumentBuilder(argument).description("who").default("world").required()
        self.assertEqual(argument.description, "who")
        self.assertEqual(argument.default, "world")
        self.assertTrue(argument.required)

    def testArgumentBuilderRejectsOptions(self):
        with self.assertRaises(TypeError):
            ArgumentBuilder(InputOption("name"))

    def testOptionBuilderChains(self):
        option = InputOption("dry-run")
        OptionBuilder(option).shortcuts("d").default(False).description("simulate").required()
        self.assertEqual(option.shortcuts, ("d",))
        self.assertFalse(option.default)
        self.assertEqual(option.description, "simulate")
        self.assertTrue(option.required)

    def testAttachedArgumentBuilderChecksOrdering(self):
        definition = InputDefinition([InputArgument("first"), InputArgument("second")])
        with self.assertRaises(OrderingError):
            ArgumentBuilder(definition.argument("second"), definition).required()
        self.assertFalse(definition.argument("second").required)

    def testAttachedOptionBuilderChecksShortcuts(self):
        definition = InputDefinition([InputOption("force", shortcuts="f"), InputOption("file")])
        with self.assertRaises(DuplicateShortcutError):
            OptionBuilder(definition.option("file"), definition).shortcut("f")
        OptionBuilder(definition.option("file"), definition).shortcut("F")
        self.assertIs(definition.option_by_shortcut("F"), definition.option("file"))


if __name__ == "__main__":
    unittest.main()
