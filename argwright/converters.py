"""
Argwright value conversion: parsers, checks and storing callbacks.

Three kinds of callables cooperate here:

- parsers, ``parser(context) -> value``: turn ``context.arg`` into a Python
  value, raising ValueError when the text is not acceptable. boolean, string,
  floating, the integer family and choice() are parsers.
- checks, ``check(context, value) -> bool``: validate a converted value.
  in_range(), greater_than() and friends build checks.
- callbacks, ``callback(context) -> bool | None``: what an Option invokes per
  occurrence. assign(), push_back() and flag() build callbacks that write into
  storage owned by the application.

A failing check is reported exactly like a failing parser: the engine emits
"invalid argument 'x' for option 'y'" unless the parser or check already
emitted an error of its own (as choice() does).
"""
import functools
import math
import re
import struct
from collections.abc import Mapping, MutableSequence

from .faults import FaultCode
from .options import Context
from .utils import *

_TRUE = frozenset(("", "1", "y", "true", "yes", "on"))
_FALSE = frozenset(("0", "n", "false", "no", "off"))

# strtoll/strtoull with base 0: optional sign, then hex, octal or decimal digits.
_INTEGER = re.compile(r"([+-]?)(?:0[xX]([0-9a-fA-F]+)|(0[0-7]*)|([1-9][0-9]*))")

_DECIMAL = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_HEXADECIMAL = re.compile(r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?")


def _require_context(context, /):
    if not isinstance(context, Context):
        raise TypeError("parsers must be called with a context")


def string(context, /):
    """Return the argument unchanged."""
    _require_context(context)
    return context.arg


def boolean(context, /):
    """
    Convert yes/no style words, case-insensitively.

    - "", "1", "y", "true", "yes", "on" are True (the empty string lets
      "--verbose" mean "--verbose=true").
    - "0", "n", "false", "no", "off" are False.
    """
    _require_context(context)
    if (word := context.arg.lower()) in _TRUE:
        return True
    elif word in _FALSE:
        return False
    raise ValueError("invalid boolean %r" % context.arg)


@functools.cache
def integer(bits=64, signed=True):
    """
    Build a strict integer parser for the given width.

    Accepted forms: optional sign, then decimal, "0x"/"0X" hexadecimal or
    leading-zero octal digits. The whole argument must be consumed and the
    value must fit the target width; anything else raises ValueError.

    Unsigned parsers accept a sign only on zero ("-0"), a negative magnitude
    is out of range.
    """
    if not isinstance(bits, int) or isinstance(bits, bool):
        raise TypeError("integer() 'bits' must be an integer")
    elif bits not in (8, 16, 32, 64):
        raise ValueError("integer() 'bits' must be one of 8, 16, 32, or 64")

    if signed:
        lower, upper = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        lower, upper = 0, (1 << bits) - 1

    @rename(("int%d" if signed else "uint%d") % bits)
    def parser(context, /):
        _require_context(context)
        if not (match := _INTEGER.fullmatch(context.arg)):
            raise ValueError("invalid integer %r" % context.arg)
        sign, hexadecimal, octal, decimal = match.groups()
        if hexadecimal is not None:
            value = int(hexadecimal, 16)
        elif octal is not None:
            value = int(octal, 8)
        else:
            value = int(decimal, 10)
        if sign == "-":
            value = -value
        if not lower <= value <= upper:
            raise ValueError("integer %r out of range [%d, %d]" % (context.arg, lower, upper))
        return value

    parser.lower = lower
    parser.upper = upper
    return parser


int8 = integer(8)
int16 = integer(16)
int32 = integer(32)
int64 = integer(64)
uint8 = integer(8, False)
uint16 = integer(16, False)
uint32 = integer(32, False)
uint64 = integer(64, False)

# C-style aliases
byte = int8
short = int16
int_ = int32
long = int64


def _to_float(text, /):
    if _HEXADECIMAL.fullmatch(text):
        try:
            return float.fromhex(text)
        except OverflowError:
            raise ValueError("floating-point %r out of range" % text) from None
    elif _DECIMAL.fullmatch(text):
        value = float(text)
        if value in (float("inf"), float("-inf")) and "inf" not in text.lower():
            raise ValueError("floating-point %r out of range" % text)
        return value
    raise ValueError("invalid floating-point %r" % text)


def floating(context, /):
    """
    Convert fixed, exponential, hexadecimal ("0x1.8p3"), inf and nan forms
    into a double precision float. The whole argument must be consumed.
    """
    _require_context(context)
    return _to_float(context.arg)


def single(context, /):
    """
    Like floating(), rounded to single precision; values beyond its range
    fail.
    """
    _require_context(context)
    value = _to_float(context.arg)
    try:
        result = struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        raise ValueError("floating-point %r out of range" % context.arg) from None
    # newer interpreters pack out-of-range doubles as infinities
    if math.isinf(result) and not math.isinf(value):
        raise ValueError("floating-point %r out of range" % context.arg)
    return result


def choice(table, /):
    """
    Build a parser matching the argument against the labels of ``table``.

    Matching is exact and case-sensitive; several labels may map to the same
    value. On failure the parser emits an error plus one "could be 'label'"
    note per label before raising ValueError, so the engine adds nothing.

    table: a mapping or an iterable of (label, value) pairs.
    """
    if isinstance(table, Mapping):
        table = tuple(table.items())
    else:
        table = tuple(table)
    for pair in table:
        if not isinstance(pair, tuple) or len(pair) != 2 or not isinstance(pair[0], str):
            raise TypeError("choice() table must map string labels to values")

    @rename("choice")
    def parser(context, /):
        _require_context(context)
        for label, value in table:
            if label == context.arg:
                return value
        context.emit("error", "invalid argument '%s' for option '%s'" % (context.arg, context.name), code=FaultCode.INVALID_ARGUMENT)
        for label, _ in table:
            context.emit("note", "could be '%s'" % label)
        raise ValueError("invalid choice %r" % context.arg)

    parser.labels = tuple(label for label, _ in table)
    return parser


def _checked(context, value, checks, /):
    return all(check(context, value) for check in checks)


def _store(target, key, value, /):
    if isinstance(target, Mapping):
        target[key] = value
    else:
        setattr(target, key, value)


def assign(target, key, parser=string, /, *checks):
    """
    Build a callback storing the converted argument into ``target``.

    - target: a mutable mapping (stored as target[key]) or any object
      (stored as an attribute named key).
    - parser: converts the argument; string by default.
    - checks: every check must accept the value, otherwise the target is
      left untouched and the occurrence fails.
    """
    if not callable(parser):
        raise TypeError("assign() 'parser' must be callable")
    if not all(map(callable, checks)):
        raise TypeError("assign() checks must be callable")

    @rename("assign")
    def callback(context, /):
        value = parser(context)
        if not _checked(context, value, checks):
            return False
        _store(target, key, value)
        return True

    return callback


def push_back(container, parser=string, /, *checks):
    """
    Build a callback appending one converted value per occurrence.

    With comma-separated options every field is an occurrence, so
    "-n=1,2,3" appends three values. Checks apply to the value being
    appended, never to the whole list.
    """
    if not isinstance(container, MutableSequence):
        raise TypeError("push_back() 'container' must be a mutable sequence")
    if not callable(parser):
        raise TypeError("push_back() 'parser' must be callable")
    if not all(map(callable, checks)):
        raise TypeError("push_back() checks must be callable")

    @rename("push_back")
    def callback(context, /):
        value = parser(context)
        if not _checked(context, value, checks):
            return False
        container.append(value)
        return True

    return callback


def flag(target, key, /, inverse="no-"):
    """
    Build a callback for invertible flags registered as "a|no-a".

    Stores False when the matched alias starts with ``inverse``, True
    otherwise; the argument text is ignored.
    """
    if not isinstance(inverse, str) or not inverse:
        raise TypeError("flag() 'inverse' must be a non-empty string")

    @rename("flag")
    def callback(context, /):
        _require_context(context)
        _store(target, key, not context.name.startswith(inverse))
        return True

    return callback


def in_range(lower, upper, /):
    """Check lower <= value <= upper."""
    @rename("in_range")
    def check(context, value, /):
        return lower <= value <= upper
    return check


def greater_than(lower, /):
    """Check value > lower."""
    @rename("greater_than")
    def check(context, value, /):
        return lower < value
    return check


def greater_equal(lower, /):
    """Check value >= lower."""
    @rename("greater_equal")
    def check(context, value, /):
        return value >= lower
    return check


def less_than(upper, /):
    """Check value < upper."""
    @rename("less_than")
    def check(context, value, /):
        return value < upper
    return check


def less_equal(upper, /):
    """Check value <= upper."""
    @rename("less_equal")
    def check(context, value, /):
        return value <= upper
    return check


__all__ = (
    # Parsers
    "string",
    "boolean",
    "integer",
    "int8",
    "int16",
    "int32",
    "int64",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "byte",
    "short",
    "int_",
    "long",
    "floating",
    "single",
    "choice",

    # Callbacks
    "assign",
    "push_back",
    "flag",

    # Checks
    "in_range",
    "greater_than",
    "greater_equal",
    "less_than",
    "less_equal",
)
