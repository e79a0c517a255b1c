"""
Option descriptor tests.

Scope
- Metadata sanitization (names, descr, callback, policies, flags).
- Read-only introspection properties and repr.
- The @option() decorator.
- Occurrence bookkeeping helpers.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from argwright import Argument, Join, Occurrence, Option, Steal, option


class TestOption(TestCase):

    def testAliases(self):
        instance = Option("v|verbose", "print more")
        self.assertEqual(instance.names, "v|verbose")
        self.assertEqual(instance.aliases, ("v", "verbose"))
        self.assertEqual(instance.descr, "print more")

    def testDefaults(self):
        instance = Option("a")
        self.assertIsNone(instance.descr)
        self.assertIs(instance.occurrence, Occurrence.OPTIONAL)
        self.assertIs(instance.argument, Argument.NO)
        self.assertIs(instance.join, Join.NO)
        self.assertIs(instance.steal, Steal.OPTIONAL)
        for name in ("group", "positional", "comma", "consume", "stop"):
            self.assertIs(getattr(instance, name), False)
        self.assertEqual(instance.count, 0)

    def testInvalidNames(self):
        for names in ("", "a||b", "a|", "|a", "a|a"):
            with self.subTest(names=names):
                with self.assertRaises(ValueError):
                    Option(names)
        with self.assertRaises(TypeError):
            Option(["a", "b"])

    def testInvalidMetadata(self):
        with self.assertRaises(ValueError):
            Option("a", "   ")
        with self.assertRaises(TypeError):
            Option("a", None)
        with self.assertRaises(TypeError):
            Option("a", "descr", "not callable")
        with self.assertRaises(TypeError):
            Option("a", occurrence="optional")
        with self.assertRaises(TypeError):
            Option("a", argument=True)
        with self.assertRaises(TypeError):
            Option("a", join=Argument.NO)

    def testFlagsAreCoerced(self):
        instance = Option("a", group=1, stop="yes")
        self.assertIs(instance.group, True)
        self.assertIs(instance.stop, True)

    def testReadOnly(self):
        instance = Option("a")
        with self.assertRaises(AttributeError):
            instance.names = "b"
        with self.assertRaises(AttributeError):
            instance.count = 3

    def testRepr(self):
        text = repr(Option("v|verbose", "print more"))
        self.assertTrue(text.startswith("option(names='v|verbose', aliases=('v', 'verbose'), descr='print more'"))

    def testCallback(self):
        seen = []
        instance = Option("a", "a", seen.append)
        self.assertIsNone(instance("context"))
        self.assertEqual(seen, ["context"])
        self.assertTrue(Option("b")("context"))

    def testOccurrenceHelpers(self):
        table = {
            Occurrence.OPTIONAL: ((True, False), (False, False)),
            Occurrence.REQUIRED: ((True, True), (False, False)),
            Occurrence.ZERO_OR_MORE: ((True, False), (True, False)),
            Occurrence.ONE_OR_MORE: ((True, True), (True, False)),
        }
        for occurrence, (before, after) in table.items():
            with self.subTest(occurrence=occurrence):
                instance = Option("a", occurrence=occurrence)
                self.assertEqual((instance.allows_occurrence(), instance.requires_occurrence()), before)
                instance._count = 1
                self.assertEqual((instance.allows_occurrence(), instance.requires_occurrence()), after)


class TestDecorator(TestCase):

    def testBindsCallback(self):
        @option("o|output", "output file", argument=Argument.REQUIRED)
        def on_output(context):
            return True

        self.assertIsInstance(on_output, Option)
        self.assertIs(on_output.argument, Argument.REQUIRED)
        self.assertEqual(on_output.callback.__name__, "on_output")

    def testAppliedOnce(self):
        decorator = option("a")
        decorator(lambda context: True)
        with self.assertRaises(TypeError):
            decorator(lambda context: True)

    def testRejectsPositionalCallback(self):
        with self.assertRaises(TypeError):
            option("a", "descr", print)

    def testRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            option("a")(42)


if __name__ == '__main__':
    unittest.main()
