"""
Shell grammar tests (split_unix, split_windows, quote_windows, join_windows).

Scope
- Windows splitting, with and without a leading program name, against the
  behavior of the Microsoft C runtime.
- Unix splitting: quotes, backslashes, blanks.
- Quoting: split_windows() must restore whatever quote_windows() produced.

Conventions
- Test method names follow CamelCase per project convention.
- Raw strings are command lines exactly as typed; expected arguments ending
  with a backslash use regular escapes.
"""
import random
import unittest
from unittest import TestCase

from argwright import join_windows, quote_windows, split, split_unix, split_windows

WINDOWS = (
    (r'test ', ['test']),
    (r'test  ', ['test']),
    (r'test  "', ['test', '']),
    (r'test  " ', ['test', ' ']),
    (r'test foo""""""""""""bar', ['test', 'foo""""bar']),
    (r'test foo"X""X""X""X"bar', ['test', 'fooX"XXXbar']),
    (r'test    "this is a string"', ['test', 'this is a string']),
    (r'test "  "this is a string"', ['test', '  this', 'is', 'a', 'string']),
    (r'test  " "this is a string"', ['test', ' this', 'is', 'a', 'string']),
    (r'test "this is a string"', ['test', 'this is a string']),
    (r'test "this is a string', ['test', 'this is a string']),
    (r'test """this" is a string', ['test', '"this is a string']),
    (r'test "hello\"there"', ['test', 'hello"there']),
    (r'test "hello\\"', ['test', 'hello\\']),
    (r'test abc', ['test', 'abc']),
    (r'test "a b c"', ['test', 'a b c']),
    (r'test a"b c d"e', ['test', 'ab c de']),
    (r'test a\"b c', ['test', 'a"b', 'c']),
    (r'test "a\"b c"', ['test', 'a"b c']),
    (r'test "a b c\\"', ['test', 'a b c\\']),
    (r'test "a\\\"b"', ['test', r'a\"b']),
    (r'test a\\\b', ['test', r'a\\\b']),
    (r'test "a\\\b"', ['test', r'a\\\b']),
    (r'test "\"a b c\""', ['test', '"a b c"']),
    (r'test "a b c" d e', ['test', 'a b c', 'd', 'e']),
    (r'test "ab\"c" "\\" d', ['test', 'ab"c', '\\', 'd']),
    (r'test a\\\b d"e f"g h', ['test', r'a\\\b', 'de fg', 'h']),
    (r'test a\\\"b c d', ['test', r'a\"b', 'c', 'd']),
    (r'test a\\\\"b c" d e', ['test', r'a\\b c', 'd', 'e']),
    (r'test "a b c""   ', ['test', 'a b c"']),
    (r'test """a""" b c', ['test', '"a"', 'b', 'c']),
    (r'test """a b c"""', ['test', '"a', 'b', 'c"']),
    (r'test """"a b c"" d e', ['test', '"a b c"', 'd', 'e']),
    (r'test "c:\file x.txt"', ['test', r'c:\file x.txt']),
    (r'test "c:\dir x\\"', ['test', 'c:\\dir x\\']),
    (r'test "\"c:\dir x\\\""', ['test', r'"c:\dir x\"']),
    (r'test "a b c""', ['test', 'a b c"']),
    (r'test "a b c"""', ['test', 'a b c"']),
    (r'test a b c', ['test', 'a', 'b', 'c']),
    (r'test a\tb c', ['test', r'a\tb', 'c']),
)

# the same grammar when the first token is not a program name in disguise
WINDOWS_PROGRAM_NAME = (
    (r' ', ['']),
    (r' "', ['', '']),
    (r' " ', ['', ' ']),
    (r'foo""""""""""""bar', ['foo""""""""""""bar']),
    (r'   "this is a string"', ['', 'this is a string']),
    (r'"  "this is a string"', ['  ', 'this', 'is', 'a', 'string']),
    (r'"""this" is a string', ['', 'this', 'is', 'a', 'string']),
    (r'"hello\"there"', ['hello\\', 'there']),
    (r'"hello\\"', [r'hello\\']),
    (r'a"b c d"e', ['a"b', 'c', 'de']),
    (r'"a\"b c"', ['a\\', 'b', 'c']),
    (r'"\"a b c\""', ['\\', 'a', 'b', 'c"']),
    (r'"a b c""', ['a b c', '']),
    (r'a\\\\"b c" d e', [r'a\\\\"b', 'c d e']),
    (r'"""a""" b c', ['', 'a" b c']),
    (r'""""a b c"" d e', ['', 'a', 'b', 'c', 'd', 'e']),
)

TRICKY = (
    '',
    ' ',
    '\t',
    'a',
    'a b',
    '"',
    '""',
    'a"b',
    '\\',
    'a\\',
    'a\\\\',
    '\\"',
    '\\\\"\\',
    'c:\\dir x\\',
    'x"y"z\\\\',
    '"a b c"',
    'trailing\\\\\\',
)


class TestSplitWindows(TestCase):
    """Windows command lines, parsed the way the C runtime does."""

    def testArguments(self):
        for line, expected in WINDOWS:
            with self.subTest(line=line):
                self.assertEqual(list(split_windows(line)), expected)

    def testProgramName(self):
        for line, expected in WINDOWS_PROGRAM_NAME:
            with self.subTest(line=line):
                self.assertEqual(list(split_windows(line)), expected)

    def testEmptyInput(self):
        self.assertEqual(list(split_windows("")), [""])
        self.assertEqual(list(split_windows("", program_name=False)), [])

    def testWithoutProgramName(self):
        self.assertEqual(list(split_windows(r'"a b" c\"d', program_name=False)), ["a b", 'c"d'])
        self.assertEqual(list(split_windows('  x  ', program_name=False)), ["x"])
        self.assertEqual(list(split_windows('"" ""', program_name=False)), ["", ""])

    def testTrailingBackslashes(self):
        self.assertEqual(list(split_windows("a\\\\", program_name=False)), ["a\\\\"])

    def testLazy(self):
        tokens = split_windows(iter("prog a b"))
        self.assertEqual(next(tokens), "prog")
        self.assertEqual(next(tokens), "a")
        self.assertEqual(list(tokens), ["b"])


class TestSplitUnix(TestCase):
    """Bash-like splitting without expansions."""

    def testBlanks(self):
        self.assertEqual(list(split_unix("a b  c")), ["a", "b", "c"])
        self.assertEqual(list(split_unix("  a \t ")), ["a"])
        self.assertEqual(list(split_unix("a\tb")), ["a", "b"])
        self.assertEqual(list(split_unix("")), [])

    def testQuotes(self):
        self.assertEqual(list(split_unix("'a b' c")), ["a b", "c"])
        self.assertEqual(list(split_unix('"it\'s" x')), ["it's", "x"])
        self.assertEqual(list(split_unix("x\"y z\"w")), ["xy zw"])
        self.assertEqual(list(split_unix("'a\\b'")), ["a\\b"])

    def testEmptyQuotedArguments(self):
        self.assertEqual(list(split_unix("''")), [""])
        self.assertEqual(list(split_unix("a '' b \"\"")), ["a", "", "b", ""])

    def testBackslash(self):
        self.assertEqual(list(split_unix("a\\ b")), ["a b"])
        self.assertEqual(list(split_unix("\\'a")), ["'a"])
        self.assertEqual(list(split_unix("a\\\\")), ["a\\"])

    def testUnterminatedQuote(self):
        self.assertEqual(list(split_unix("'a b")), ["a b"])

    def testAcceptsCharacterIterables(self):
        self.assertEqual(list(split_unix(list("a b"))), ["a", "b"])

    def testHostGrammar(self):
        self.assertEqual(list(split('"a b" c\\"d', platform="win32")), ["a b", 'c"d'])
        self.assertEqual(list(split("'a b' c\\ d", platform="linux")), ["a b", "c d"])


class TestQuoteWindows(TestCase):
    """quote_windows() and join_windows() against split_windows()."""

    def testExamples(self):
        self.assertEqual(quote_windows(""), '""')
        self.assertEqual(quote_windows("a b"), '"a b"')
        self.assertEqual(quote_windows('a"b'), r'"a\"b"')
        self.assertEqual(quote_windows("a\\"), r'"a\\"')
        self.assertEqual(quote_windows('a\\"b'), r'"a\\\"b"')
        self.assertEqual(quote_windows("a\\b"), r'"a\b"')

    def testRoundTrip(self):
        for argument in TRICKY:
            with self.subTest(argument=argument):
                self.assertEqual(list(split_windows(quote_windows(argument), program_name=False)), [argument])

    def testRandomRoundTrip(self):
        generator = random.Random(20150101)
        for _ in range(500):
            argument = "".join(generator.choice('ab \t"\\') for _ in range(generator.randrange(12)))
            with self.subTest(argument=argument):
                self.assertEqual(list(split_windows(quote_windows(argument), program_name=False)), [argument])

    def testJoin(self):
        arguments = list(TRICKY)
        self.assertEqual(list(split_windows(join_windows(arguments), program_name=False)), arguments)
        self.assertEqual(join_windows(["a", "b c"]), '"a" "b c"')
        self.assertEqual(join_windows([]), "")

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            quote_windows(1)
        with self.assertRaises(TypeError):
            join_windows("abc")


if __name__ == '__main__':
    unittest.main()
