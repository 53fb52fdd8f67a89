"""
InputDefinition behavioral tests.

Scope
- Validate insertion invariants (unique names, nothing after an array,
  no required after optional, option name/shortcut collisions).
- Validate lookups and their NotFoundError faults.
- Validate derived data (counts, defaults) and the synopsis.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import sys
import unittest
from unittest import TestCase

from switchyard import (
    ArgumentMode,
    FaultCode,
    InputArgument,
    InputDefinition,
    InputOption,
    NotFoundError,
    OptionMode,
    SchemaError,
)


class TestDefinitionArguments(TestCase):
    """Behavioral tests for positional arguments of a definition."""

    def testArgumentsKeepInsertionOrder(self):
        definition = InputDefinition([InputArgument("a", ArgumentMode.REQUIRED), InputArgument("b")])
        self.assertEqual(list(definition.arguments), ["a", "b"])
        self.assertEqual(definition.argument_by_position(1).name, "b")

    def testDuplicateArgumentRejected(self):
        definition = InputDefinition([InputArgument("a")])
        with self.assertRaises(SchemaError) as context:
            definition.add_argument(InputArgument("a"))
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_ARGUMENT)

    def testNothingAfterArrayArgument(self):
        for mode in (ArgumentMode.OPTIONAL, ArgumentMode.REQUIRED, ArgumentMode.IS_ARRAY):
            with self.subTest(mode=mode):
                definition = InputDefinition([InputArgument("files", ArgumentMode.IS_ARRAY)])
                with self.assertRaises(SchemaError):
                    definition.add_argument(InputArgument("other", mode))

    def testRequiredAfterOptionalRejected(self):
        definition = InputDefinition([InputArgument("a")])
        with self.assertRaises(SchemaError) as context:
            definition.add_argument(InputArgument("b", ArgumentMode.REQUIRED))
        self.assertEqual(context.exception.code, FaultCode.REQUIRED_AFTER_OPTIONAL)

    def testFailedInsertionLeavesDefinitionUnchanged(self):
        definition = InputDefinition([InputArgument("a")])
        with self.assertRaises(SchemaError):
            definition.add_argument(InputArgument("b", ArgumentMode.REQUIRED))
        self.assertEqual(list(definition.arguments), ["a"])
        self.assertEqual(definition.argument_required_count, 0)

    def testArgumentCounts(self):
        definition = InputDefinition([
            InputArgument("a", ArgumentMode.REQUIRED),
            InputArgument("b", ArgumentMode.REQUIRED),
            InputArgument("c"),
        ])
        self.assertEqual(definition.argument_count, 3)
        self.assertEqual(definition.argument_required_count, 2)
        definition.add_argument(InputArgument("d", ArgumentMode.IS_ARRAY))
        self.assertEqual(definition.argument_count, sys.maxsize)

    def testArgumentDefaults(self):
        definition = InputDefinition([
            InputArgument("a", ArgumentMode.OPTIONAL, "", "x"),
            InputArgument("b", ArgumentMode.IS_ARRAY),
        ])
        self.assertEqual(definition.argument_defaults, {"a": "x", "b": []})

    def testLookupFaults(self):
        definition = InputDefinition([InputArgument("a")])
        with self.assertRaises(NotFoundError):
            definition.argument_by_position(1)
        with self.assertRaises(NotFoundError):
            definition.argument_by_name("b")
        with self.assertRaises(LookupError):
            definition.argument_by_name("b")

    def testHasArgumentByNameOrPosition(self):
        definition = InputDefinition([InputArgument("a")])
        self.assertTrue(definition.has_argument("a"))
        self.assertTrue(definition.has_argument(0))
        self.assertFalse(definition.has_argument(1))
        self.assertFalse(definition.has_argument("b"))

    def testSetArgumentsReplacesEverything(self):
        definition = InputDefinition([InputArgument("a", ArgumentMode.REQUIRED)])
        definition.set_arguments([InputArgument("b")])
        self.assertEqual(list(definition.arguments), ["b"])
        self.assertEqual(definition.argument_required_count, 0)
        definition.add_argument(InputArgument("c"))

    def testInvalidItemsRejected(self):
        with self.assertRaises(TypeError):
            InputDefinition(["a"])


class TestDefinitionOptions(TestCase):
    """Behavioral tests for named options of a definition."""

    def testShortcutIndex(self):
        definition = InputDefinition([InputOption("foo", "f")])
        self.assertTrue(definition.has_shortcut("f"))
        self.assertEqual(definition.option_for_shortcut("f").name, "foo")

    def testEqualOptionReAddedIsNoOp(self):
        definition = InputDefinition([InputOption("foo", "f", OptionMode.VALUE_REQUIRED)])
        definition.add_option(InputOption("foo", "f", OptionMode.VALUE_REQUIRED, "other description"))
        self.assertEqual(len(definition.options), 1)

    def testDifferentOptionWithSameNameRejected(self):
        definition = InputDefinition([InputOption("foo", "f", OptionMode.VALUE_REQUIRED)])
        with self.assertRaises(SchemaError) as context:
            definition.add_option(InputOption("foo", "f", OptionMode.VALUE_OPTIONAL))
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_OPTION)

    def testSharedShortcutRejected(self):
        definition = InputDefinition([InputOption("foo", "f")])
        with self.assertRaises(SchemaError) as context:
            definition.add_option(InputOption("fizz", "f"))
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_SHORTCUT)

    def testLookupFaults(self):
        definition = InputDefinition()
        with self.assertRaises(NotFoundError) as context:
            definition.option_by_name("foo")
        self.assertEqual(str(context.exception), 'The "--foo" option does not exist.')
        with self.assertRaises(NotFoundError) as context:
            definition.option_for_shortcut("f")
        self.assertEqual(str(context.exception), 'The "-f" option does not exist.')

    def testOptionDefaults(self):
        definition = InputDefinition([
            InputOption("flag"),
            InputOption("value", "", OptionMode.VALUE_OPTIONAL, "", "x"),
            InputOption("many", "", OptionMode.VALUE_REQUIRED | OptionMode.VALUE_IS_ARRAY),
        ])
        self.assertEqual(definition.option_defaults, {"flag": False, "value": "x", "many": []})


class TestDefinitionSynopsis(TestCase):
    """Behavioral tests for the one-line usage string."""

    def testEmptySynopsis(self):
        self.assertEqual(InputDefinition().synopsis(), "")

    def testOptionsThenArguments(self):
        definition = InputDefinition([
            InputArgument("name", ArgumentMode.REQUIRED),
            InputArgument("files", ArgumentMode.IS_ARRAY),
            InputOption("foo", "f"),
            InputOption("bar", "", OptionMode.VALUE_REQUIRED),
            InputOption("baz", "b", OptionMode.VALUE_OPTIONAL),
        ])
        self.assertEqual(
            definition.synopsis(),
            '[-f|--foo] [--bar="..."] [-b|--baz[="..."]] name [files1] ... [filesN]'
        )

    def testRequiredArraySynopsis(self):
        definition = InputDefinition([InputArgument("files", ArgumentMode.REQUIRED | ArgumentMode.IS_ARRAY)])
        self.assertEqual(definition.synopsis(), "files1 ... [filesN]")

    def testEquality(self):
        first = InputDefinition([InputArgument("a"), InputOption("foo", "f")])
        second = InputDefinition([InputArgument("a"), InputOption("foo", "f")])
        self.assertEqual(first, second)
        second.add_option(InputOption("bar"))
        self.assertNotEqual(first, second)


if __name__ == "__main__":
    unittest.main()
