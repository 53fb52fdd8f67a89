"""
Input binding behavioral tests (ArgvInput, StringInput, ArrayInput, BoundInput).

Scope
- Validate long options, shortcuts, clusters and the "--" terminator.
- Validate value handling per option mode (required, optional, flag, array).
- Validate positional slots, trailing arrays and too-many-arguments faults.
- Validate idempotent binding, default round-trips and validation.
- Validate raw introspection (first argument, parameter options).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from switchyard import (
    ArgumentMode,
    ArgvInput,
    ArrayInput,
    FlagValueError,
    InputArgument,
    InputDefinition,
    InputOption,
    MalformedInputError,
    MissingArgumentsError,
    NotFoundError,
    OptionMode,
    RequiredValueError,
    StringInput,
    TooManyArgumentsError,
    UnknownArgumentError,
    UnknownOptionError,
    make_input,
)


def definition():
    return InputDefinition([
        InputArgument("name", ArgumentMode.REQUIRED),
        InputArgument("files", ArgumentMode.IS_ARRAY),
        InputOption("foo", "f", OptionMode.VALUE_REQUIRED),
        InputOption("bar", "b", OptionMode.VALUE_OPTIONAL, "", "default"),
        InputOption("verbose", "v"),
        InputOption("quiet", "q"),
        InputOption("tag", "t", OptionMode.VALUE_REQUIRED | OptionMode.VALUE_IS_ARRAY),
    ])


class TestArgvInput(TestCase):
    """Behavioral tests for process-style token binding."""

    def testLongOptionInlineValue(self):
        bound = ArgvInput(["--foo=bar"]).bind(InputDefinition([InputOption("foo", "f", OptionMode.VALUE_REQUIRED)]))
        self.assertEqual(bound.option("foo"), "bar")

    def testShortcutWithSeparateValue(self):
        schema = InputDefinition([InputOption("foo", "f", OptionMode.VALUE_REQUIRED)])
        self.assertEqual(ArgvInput(["-f", "bar"]).bind(schema), ArgvInput(["--foo=bar"]).bind(schema))

    def testLongOptionConsumesNextToken(self):
        bound = ArgvInput(["--foo", "bar", "name"]).bind(definition())
        self.assertEqual(bound.option("foo"), "bar")
        self.assertEqual(bound.argument("name"), "name")

    def testLongOptionDoesNotConsumeDashToken(self):
        with self.assertRaises(RequiredValueError) as context:
            ArgvInput(["--foo", "-v"]).bind(definition())
        self.assertEqual(str(context.exception), 'The "--foo" option requires a value.')

    def testOptionalValueFallsBackToDefault(self):
        bound = ArgvInput(["name", "--bar"]).bind(definition())
        self.assertEqual(bound.option("bar"), "default")

    def testFlagBecomesTrue(self):
        bound = ArgvInput(["name", "--verbose"]).bind(definition())
        self.assertIs(bound.option("verbose"), True)
        self.assertIs(bound.option("quiet"), False)

    def testFlagWithInlineValueRejected(self):
        with self.assertRaises(FlagValueError):
            ArgvInput(["--verbose=yes"]).bind(definition())

    def testGluedShortcutValue(self):
        bound = ArgvInput(["-fvalue", "name"]).bind(definition())
        self.assertEqual(bound.option("foo"), "value")

    def testShortcutCluster(self):
        bound = ArgvInput(["-vq", "name"]).bind(definition())
        self.assertTrue(bound.option("verbose"))
        self.assertTrue(bound.option("quiet"))

    def testClusterStopsAtValueOption(self):
        bound = ArgvInput(["-vfvalue", "name"]).bind(definition())
        self.assertTrue(bound.option("verbose"))
        self.assertEqual(bound.option("foo"), "value")
        self.assertFalse(bound.option("quiet"))

    def testClusterLastValueOptionConsumesNextToken(self):
        bound = ArgvInput(["-vf", "value", "name"]).bind(definition())
        self.assertEqual(bound.option("foo"), "value")
        self.assertEqual(bound.argument("name"), "name")

    def testArrayOptionAccumulates(self):
        bound = ArgvInput(["name", "-t", "a", "--tag=b", "--tag", "c"]).bind(definition())
        self.assertEqual(bound.option("tag"), ["a", "b", "c"])

    def testUnknownOptionsKeepTheirPrefix(self):
        with self.assertRaises(UnknownOptionError) as context:
            ArgvInput(["--nope"]).bind(definition())
        self.assertEqual(str(context.exception), 'The "--nope" option does not exist.')
        with self.assertRaises(UnknownOptionError) as context:
            ArgvInput(["-z"]).bind(definition())
        self.assertEqual(str(context.exception), 'The "-z" option does not exist.')

    def testArrayArgumentCollectsTokens(self):
        schema = InputDefinition([InputArgument("name", ArgumentMode.IS_ARRAY)])
        bound = ArgvInput(["a", "b", "c"]).bind(schema)
        self.assertEqual(bound.argument("name"), ["a", "b", "c"])

    def testTrailingArrayAfterScalar(self):
        bound = ArgvInput(["name", "a", "b"]).bind(definition())
        self.assertEqual(bound.argument("name"), "name")
        self.assertEqual(bound.argument("files"), ["a", "b"])

    def testTooManyArguments(self):
        schema = InputDefinition([InputArgument("name")])
        with self.assertRaises(TooManyArgumentsError):
            ArgvInput(["a", "b"]).bind(schema)

    def testTerminatorDisablesOptionParsing(self):
        schema = InputDefinition([InputArgument("value")])
        bound = ArgvInput(["--", "-1"]).bind(schema)
        self.assertEqual(bound.argument("value"), "-1")

    def testEmptyTokenIsArgument(self):
        schema = InputDefinition([InputArgument("value", ArgumentMode.OPTIONAL, "", "x")])
        self.assertEqual(ArgvInput([""]).bind(schema).argument("value"), "")

    def testBindingIsIdempotent(self):
        raw = ArgvInput(["name", "-vf", "x", "a"])
        self.assertEqual(raw.bind(definition()), raw.bind(definition()))

    def testDefaultsRoundTrip(self):
        schema = definition()
        bound = ArgvInput(["name"]).bind(schema)
        for option, default in schema.option_defaults.items():
            self.assertEqual(bound.option(option), default)
        self.assertEqual(bound.argument("files"), [])

    def testValidateMissingArguments(self):
        bound = ArgvInput(["-v"]).bind(definition())
        with self.assertRaises(MissingArgumentsError) as context:
            bound.validate()
        self.assertEqual(context.exception.options["missing"], ("name",))

    def testNonStringTokensRejected(self):
        with self.assertRaises(TypeError):
            ArgvInput(["a", 1])
        with self.assertRaises(TypeError):
            ArgvInput("a b")


class TestStringInput(TestCase):
    """Behavioral tests for shell-like strings."""

    def testQuotedValue(self):
        bound = StringInput('name --foo="a b" \'c d\'').bind(definition())
        self.assertEqual(bound.option("foo"), "a b")
        self.assertEqual(bound.argument("files"), ["c d"])

    def testUnbalancedQuotes(self):
        with self.assertRaises(MalformedInputError):
            StringInput('name "unterminated')


class TestArrayInput(TestCase):
    """Behavioral tests for map-style parameters."""

    def testKeysBindArgumentsAndOptions(self):
        bound = ArrayInput({"name": "x", "--foo": "bar", "-v": None, "files": "a"}).bind(definition())
        self.assertEqual(bound.argument("name"), "x")
        self.assertEqual(bound.argument("files"), ["a"])
        self.assertEqual(bound.option("foo"), "bar")
        self.assertTrue(bound.option("verbose"))

    def testNoneValueModes(self):
        with self.assertRaises(RequiredValueError):
            ArrayInput({"--foo": None}).bind(definition())
        self.assertEqual(ArrayInput({"--bar": None}).bind(definition()).option("bar"), "default")

    def testArrayOptionWrapsScalars(self):
        self.assertEqual(ArrayInput({"--tag": "a"}).bind(definition()).option("tag"), ["a"])
        self.assertEqual(ArrayInput({"-t": ("a", "b")}).bind(definition()).option("tag"), ["a", "b"])

    def testUnknownKeys(self):
        with self.assertRaises(UnknownArgumentError):
            ArrayInput({"nope": "x"}).bind(definition())
        with self.assertRaises(UnknownOptionError):
            ArrayInput({"--nope": "x"}).bind(definition())
        with self.assertRaises(UnknownOptionError):
            ArrayInput({"-z": "x"}).bind(definition())

    def testFlagAcceptsBoolean(self):
        self.assertIs(ArrayInput({"--verbose": False}).bind(definition()).option("verbose"), False)
        with self.assertRaises(FlagValueError):
            ArrayInput({"--verbose": "yes"}).bind(definition())


class TestRawIntrospection(TestCase):
    """Behavioral tests for definition-free raw queries."""

    def testFirstArgument(self):
        self.assertEqual(ArgvInput(["-v", "list", "foo"]).get_first_argument(), "list")
        self.assertIsNone(ArgvInput(["-v"]).get_first_argument())
        self.assertEqual(ArrayInput({"--foo": "x", "command": "list"}).get_first_argument(), "list")

    def testHasParameterOption(self):
        raw = ArgvInput(["list", "--help", "-q"])
        self.assertTrue(raw.has_parameter_option("--help"))
        self.assertTrue(raw.has_parameter_option(["--quiet", "-q"]))
        self.assertFalse(raw.has_parameter_option(["--verbose", "-v"]))
        self.assertFalse(raw.has_parameter_option(None))

    def testGetParameterOption(self):
        raw = ArgvInput(["--foo", "bar", "--baz=qux", "-x", "y"])
        self.assertEqual(raw.get_parameter_option("--foo"), "bar")
        self.assertEqual(raw.get_parameter_option("--baz"), "qux")
        self.assertEqual(raw.get_parameter_option(["-x"]), "y")
        self.assertIs(raw.get_parameter_option("--nope"), False)
        self.assertEqual(raw.get_parameter_option("--nope", "fallback"), "fallback")

    def testMapGetParameterOption(self):
        raw = ArrayInput({"--foo": "bar"})
        self.assertEqual(raw.get_parameter_option(["--foo", "-f"]), "bar")
        self.assertIsNone(raw.get_parameter_option("--nope", None))


class TestBoundInput(TestCase):
    """Behavioral tests for bound values."""

    def testUndefinedNamesRaise(self):
        bound = ArgvInput(["name"]).bind(definition())
        with self.assertRaises(NotFoundError):
            bound.argument("nope")
        with self.assertRaises(NotFoundError):
            bound.option("nope")
        with self.assertRaises(NotFoundError):
            bound.set_option("nope", 1)

    def testSetters(self):
        bound = ArgvInput(["name"]).bind(definition())
        bound.set_argument("name", "other")
        bound.set_option("foo", "x")
        self.assertEqual(bound.argument("name"), "other")
        self.assertEqual(bound.option("foo"), "x")

    def testInteractiveFlagIsCopied(self):
        self.assertFalse(ArgvInput(["name"], interactive=False).bind(definition()).interactive)
        self.assertTrue(ArgvInput(["name"]).bind(definition()).interactive)

    def testValuesAreCopies(self):
        bound = ArgvInput(["name", "a"]).bind(definition())
        bound.arguments["files"].append("b")
        self.assertEqual(bound.argument("files"), ["a"])


class TestMakeInput(TestCase):
    """Behavioral tests for prompt normalization."""

    def testPromptKinds(self):
        self.assertIsInstance(make_input("a b"), StringInput)
        self.assertIsInstance(make_input({"a": "b"}), ArrayInput)
        self.assertIsInstance(make_input(["a"]), ArgvInput)
        raw = ArgvInput([])
        self.assertIs(make_input(raw), raw)

    def testInvalidPrompt(self):
        with self.assertRaises(TypeError):
            make_input(1)


if __name__ == "__main__":
    unittest.main()
