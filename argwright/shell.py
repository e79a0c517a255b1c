"""
Argwright shell grammars: split raw command lines into tokens, and quote
tokens back for Windows.

Overview
- split_unix(source)
  • Bash-like rules without expansions: a backslash takes the next character
    literally; ' and " start a quoted run in which every character except the
    closing quote is literal; unquoted spaces and tabs separate arguments.

- split_windows(source, *, program_name=True)
  • The rules of the Microsoft C runtime / CommandLineToArgvW (pre-2008):
    backslashes are literal unless they precede a double quote; 2n
    backslashes + '"' give n backslashes and a quote delimiter, 2n+1 give
    n backslashes and a literal '"'; a '"' right after a closing quote is
    a literal '"' and quoting stays off.
  • The leading program name follows simpler rules: a leading '"' is closed
    by the next '"', otherwise whitespace ends it. It is always produced,
    possibly empty.

- quote_windows(argument) / join_windows(arguments)
  • Inverse of split_windows: split_windows(quote_windows(s),
    program_name=False) yields exactly [s].

- split(source, *, platform=None)
  • The grammar of the host: Windows rules (without program name) on win32,
    Unix rules elsewhere.

Both splitters accept any iterable of characters and are generators: they
read the source lazily and can be consumed once.
"""
import sys

_BLANKS = frozenset(" \t")


def split_unix(source, /):
    """
    Yield the arguments of a Unix-style command line.

    Runs of separators never produce empty arguments; an explicitly quoted
    empty string ('' or "") does.
    """
    argument = []
    quote = None
    quoted = False
    for char in source:
        if quote == "\\":
            argument.append(char)
            quote = None
        elif quote is not None and char != quote:
            argument.append(char)
        elif char in ("'", '"', "\\"):
            quote = None if quote is not None else char
            quoted |= char != "\\"
        elif char in _BLANKS:
            if argument or quoted:
                yield "".join(argument)
            argument.clear()
            quoted = False
        else:
            argument.append(char)
    if argument or quoted:
        yield "".join(argument)


def _program_name(characters, /):
    first = next(characters, None)
    if first is None or first in _BLANKS:
        return ""
    quoting = first == '"'
    name = [] if quoting else [first]
    for char in characters:
        if (quoting and char == '"') or (not quoting and char in _BLANKS):
            break
        name.append(char)
    return "".join(name)


def split_windows(source, /, *, program_name=True):
    """
    Yield the arguments of a Windows-style command line.

    With program_name=True the first token is parsed as the executable name
    (see module docstring) and always yielded, even when empty.

    An argument is yielded when it is non-empty or when double quotes took
    part in it, so '""' is an empty argument while blanks are not.
    """
    characters = iter(source)
    if program_name:
        yield _program_name(characters)

    argument = []
    started = False
    quoting = False
    quoted = False
    closed = False  # the previous character closed a quoted run
    backslashes = 0

    for char in characters:
        if not started:
            if char in _BLANKS:
                continue
            started = True

        if char == '"' and closed:
            closed = False
            argument.append('"')
        elif char == '"':
            argument.append("\\" * (backslashes // 2))
            if backslashes % 2 == 0:
                closed = quoting
                quoting = not quoting
                quoted = True
            else:
                argument.append('"')
            backslashes = 0
        elif char == "\\":
            closed = False
            backslashes += 1
        else:
            closed = False
            argument.append("\\" * backslashes)
            backslashes = 0
            if not quoting and char in _BLANKS:
                if (text := "".join(argument)) or quoted:
                    yield text
                argument.clear()
                started = quoted = False
                continue
            argument.append(char)

    argument.append("\\" * backslashes)
    if (text := "".join(argument)) or quoting or quoted:
        yield text


def quote_windows(argument, /):
    """
    Quote ``argument`` so split_windows() restores it unchanged.

    The result is always wrapped in double quotes; backslash runs before an
    embedded '"' or before the closing quote are doubled, and every embedded
    '"' gets one more backslash.
    """
    if not isinstance(argument, str):
        raise TypeError("quote_windows() argument must be a string")
    quoted = ['"']
    backslashes = 0
    for char in argument:
        if char == "\\":
            backslashes += 1
        elif char == '"':
            quoted.append("\\" * (backslashes + 1))
            backslashes = 0
        else:
            backslashes = 0
        quoted.append(char)
    quoted.append("\\" * backslashes)
    quoted.append('"')
    return "".join(quoted)


def join_windows(arguments, /):
    """Quote each argument with quote_windows() and join them with spaces."""
    if isinstance(arguments, str):
        raise TypeError("join_windows() argument must be an iterable of strings")
    return " ".join(map(quote_windows, arguments))


def split(source, /, *, platform=None):
    """
    Split ``source`` with the grammar of ``platform`` (default: the host).

    Windows sources carry no program name here: the result is what a program
    sees as its arguments.
    """
    if (platform or sys.platform) == "win32":
        return split_windows(source, program_name=False)
    return split_unix(source)


__all__ = (
    "split_unix",
    "split_windows",
    "quote_windows",
    "join_windows",
    "split",
)
