"""
Argwright command-line engine.

Scope
- Cmdline: owns a Registry of options, a diagnostic log and the cursor of the
  current pass; parse()/continue_parse() feed tokens through the dispatcher.
- ParseResult: (success, next) pair returned by a pass.
- State: coarse life cycle of the engine, useful for callers chaining passes.

Token classification (first match wins)
1. ""                       ignored.
2. "--"                     ends option processing (once, and only while
                            options are still being processed).
3. "x", "-", or any token after "--"/consume-remaining
                            positional: the next positional option (in
                            registration order) still admitting an occurrence.
4. "-name" / "--name"       one dash is the short form, two the long form;
   a. "-f"                  exact alias, argument taken from the next token
                            when required.
   b. "-f=x"                alias before the first '='.
   c. "-Ixxx"               longest alias of a joinable option that prefixes
                            the token.
   d. "-xvf", "-xvf=x"      group of single-letter options (short form only).
   e. otherwise             unknown option.

Failure model
- Syntax and conversion problems are appended to the diagnostic log; the first
  error ends the pass, effects already applied stay applied.
- Nothing raised by a callback escapes a pass: ValueError counts as a
  conversion failure, other exceptions and warnings become delegated
  diagnostics.
- Configuration mistakes (bad option metadata, duplicate aliases) raise
  TypeError/ValueError immediately, from add().
"""
import sys
import warnings
from collections.abc import Iterable
from enum import Enum
from typing import NamedTuple

from . import faults
from .faults import Diagnostic, Diagnostics, FaultCode, Severity
from .options import Argument, Context, Join, Option, Steal, option as _option
from .registry import Registry
from .shell import split
from .utils import *


class State(Enum):
    """life cycle of a Cmdline across passes."""
    IDLE = "idle"  # constructed or reset, nothing parsed yet
    RUNNING = "running"
    CONSUME_REMAINING = "consume-remaining"  # every further token is positional
    ERROR = "error"  # the last pass failed
    DONE = "done"  # the last pass succeeded


class ParseResult(NamedTuple):
    """
    outcome of one pass.

    - success: no error was reported by the pass (nor by the missing sweep).
    - next: index, within the tokens given to the pass, of the first token
      that was not consumed. after a stop option it is the token following
      it, which lets a caller hand the remainder to another Cmdline.
    """
    success: bool
    next: int

    def __bool__(self):
        return self.success


class _Status(Enum):
    SUCCESS = "success"
    DONE = "done"
    ERROR = "error"
    IGNORED = "ignored"


class Cmdline:
    """
    Command-line parser built from Option descriptors.

    Parameters
    - name: Unset | str, program or subcommand name (prefix of rendered
      diagnostics).
    - descr: Unset | str, short description for help generators.
    - abbreviations: resolve unambiguous alias prefixes ("--verb"), see
      Registry.lookup().

    Example
        >>> settings = {}
        >>> cmdline = Cmdline("tool")
        >>> cmdline.add("v|verbose", "print more", assign(settings, "verbose", boolean),
        ...             argument=Argument.OPTIONAL)
        >>> cmdline.parse(["-v"])
        ParseResult(success=True, next=1)

    A Cmdline is not meant to be shared between threads; reuse it
    sequentially and call reset() between unrelated passes.
    """

    def __init__(self, name=Unset, descr=Unset, /, *, abbreviations=False):
        if not isinstance(name, str | Unset):
            raise TypeError("cmdline 'name' must be a string")
        elif isinstance(name, str) and not (name := name.strip()):
            raise ValueError("cmdline 'name' cannot be empty")
        if not isinstance(descr, str | Unset):
            raise TypeError("cmdline 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError("cmdline 'descr' cannot be empty")

        self._name = coalesce(name)
        self._descr = coalesce(descr)
        self._registry = Registry(abbreviations=abbreviations)
        self._diagnostics = Diagnostics()
        self._state = State.IDLE
        self._rewind()

    def _rewind(self):
        self._index = 0
        self._positional = 0
        self._dashdash = False
        self._consuming = False

    name = mirror("name")
    descr = mirror("descr")
    state = mirror("state")
    index = mirror("index")

    @property
    def registry(self):
        return self._registry

    @property
    def diagnostics(self):
        """The diagnostic log (read-only sequence of Diagnostic)."""
        return self._diagnostics

    @property
    def options(self):
        """Registered options, in registration order."""
        return tuple(self._registry)

    def add(self, option, /, *args, **flags):
        """
        Register an option and return it.

        Forms
        - add(option): register a ready Option.
        - add(names, descr=Unset, callback=Unset, **flags): build the Option
          first (see Option for the flags).

        Raises TypeError/ValueError for bad metadata or an alias that is
        already registered.
        """
        if isinstance(option, Option):
            if args or flags:
                raise TypeError("add() takes no further arguments with an option")
            return self._registry.add(option)
        return self._registry.add(Option(option, *args, **flags))

    def option(self, *args, **kwargs):
        """
        Decorator registering the decorated function as an option callback.

            @cmdline.option("j|jobs", "parallel jobs", argument=Argument.REQUIRED)
            def on_jobs(context):
                settings["jobs"] = int32(context)
        """
        decorator = _option(*args, **kwargs)

        @rename("option")
        def wrapper(callback, /):
            return self._registry.add(decorator(callback))

        return wrapper

    def emit(self, severity, index, message, /, code=Unset, **options):
        """
        Append a diagnostic to the log.

        Callbacks use it (usually through Context.emit) to report their own
        errors, warnings and notes; an error emitted by a failing callback
        replaces the generic "invalid argument" message.
        """
        self._diagnostics.append(Diagnostic(severity, index, message, code, **options))

    def reset(self):
        """
        Forget every previous pass: zero all occurrence counts, clear the
        diagnostic log and rewind the cursor.
        """
        self._diagnostics.clear()
        for option in self._registry:
            option._count = 0
        self._rewind()
        self._state = State.IDLE

    def parse(self, prompt=Unset, /, *, check_missing=True, ignore_unknown=False):
        """
        Rewind the cursor and parse ``prompt``.

        Parameters
        - prompt:
          • Unset: the process arguments, sys.argv[1:].
          • str: a raw command line, split with the host's quoting rules.
          • Iterable[str]: tokens used as given.
        - check_missing: after the last token, report every option whose
          occurrence policy still requires an occurrence.
        - ignore_unknown: skip unknown options and unmatched positionals
          instead of failing.

        Occurrence counts and the diagnostic log are kept; call reset() to
        start from scratch.

        Returns a ParseResult.
        """
        tokens = self._tokenize(prompt)
        self._rewind()
        return self._run(tokens, check_missing, ignore_unknown)

    def continue_parse(self, prompt, /, *, check_missing=True, ignore_unknown=False):
        """
        Parse ``prompt`` as a continuation of the previous pass: "--" and
        consume-remaining stay in effect, positional matching resumes after
        the last filled positional and token indices keep counting.
        """
        tokens = self._tokenize(prompt)
        return self._run(tokens, check_missing, ignore_unknown)

    def check_missing(self):
        """
        Emit "option 'x' is missing" for every option whose occurrence policy
        still requires an occurrence. Returns True when nothing is missing.
        """
        success = True
        for option in self._registry:
            if option.requires_occurrence():
                self.emit(Severity.ERROR, None, "option '%s' is missing" % option.names, FaultCode.MISSING_OPTION)
                success = False
        return success

    def print_diagnostics(self, console=Unset, /, *, colorful=True, positions=False):
        """Render the diagnostic log (see faults.render)."""
        faults.render(
            self._diagnostics,
            console=coalesce(console, faults.console),
            colorful=colorful,
            prog=self._name,
            positions=positions,
        )

    @staticmethod
    def _tokenize(prompt, /):
        if prompt is Unset:
            return sys.argv[1:]
        elif isinstance(prompt, str):
            return list(split(prompt))
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            for token in tokens:
                if not isinstance(token, str):
                    raise TypeError("parse() argument must be a string or an iterable of strings")
            return tokens
        raise TypeError("parse() argument must be a string or an iterable of strings")

    def _run(self, tokens, check_missing, ignore_unknown, /):
        self._state = State.CONSUME_REMAINING if self._consuming else State.RUNNING
        self._tokens = tokens
        self._position = 0

        try:
            while self._position < len(tokens):
                token = tokens[self._position]
                match self._handle(token):
                    case _Status.ERROR:
                        self._state = State.ERROR
                        return ParseResult(False, self._position)
                    case _Status.DONE:
                        self._advance()
                        self._state = State.DONE
                        return ParseResult(True, self._position)
                    case _Status.IGNORED if not ignore_unknown:
                        self.emit(Severity.ERROR, self._index, "unknown option '%s'" % token, FaultCode.UNKNOWN_OPTION)
                        self._state = State.ERROR
                        return ParseResult(False, self._position)
                self._advance()
        finally:
            del self._tokens

        success = self.check_missing() if check_missing else True
        self._state = State.DONE if success else State.ERROR
        return ParseResult(success, self._position)

    def _advance(self):
        self._position += 1
        self._index += 1

    def _steal(self):
        """take the next token as an argument, or None at the end of input."""
        if self._position + 1 >= len(self._tokens):
            return None
        self._advance()
        return self._tokens[self._position]

    def _handle(self, token, /):
        if not token:
            return _Status.SUCCESS

        options_ended = self._dashdash or self._consuming

        if token == "--" and not options_ended:
            self._dashdash = True
            return _Status.SUCCESS

        if not token.startswith("-") or token == "-" or options_ended:
            return self._handle_positional(token)

        body = token[1:]
        short = not body.startswith("-")
        if not short:
            body = body[1:]

        status = self._handle_standard(body)
        if status is _Status.IGNORED:
            status = self._handle_assignment(body)
        if status is _Status.IGNORED:
            status = self._handle_prefix(body)
        if status is _Status.IGNORED and short:
            status = self._handle_group(body)
        return status

    def _handle_positional(self, token, /):
        pairs = self._registry.pairs()
        while self._positional < len(pairs):
            _, option = pairs[self._positional]
            if option.positional and option.allows_occurrence():
                return self._handle_argument(option, option.names, token)
            self._positional += 1
        return _Status.IGNORED

    def _ambiguous(self, name, /):
        self.emit(Severity.ERROR, self._index, "option '%s' is ambiguous" % name, FaultCode.AMBIGUOUS_OPTION)
        return _Status.ERROR

    def _handle_standard(self, body, /):
        # "-f", "-f value"
        option, alias, ambiguous = self._registry.lookup(body)
        if ambiguous:
            return self._ambiguous(body)
        if option is None:
            return _Status.IGNORED
        return self._handle_bare(option, alias)

    def _handle_assignment(self, body, /):
        # "-f=value"
        name, separator, argument = body.partition("=")
        if not separator:
            return _Status.IGNORED
        option, alias, ambiguous = self._registry.lookup(name)
        if ambiguous:
            return self._ambiguous(name)
        if option is None:
            return _Status.IGNORED
        if option.join is not Join.NO:
            argument = separator + argument
        return self._handle_argument(option, alias, argument)

    def _handle_prefix(self, body, /):
        # "-Ivalue"; longest alias first so "with" and "without" can coexist
        for length in range(min(self._registry.prefix_length, len(body)), 0, -1):
            name = body[:length]
            option = self._registry.find(name)
            if option is not None and option.join is not Join.NO:
                return self._handle_argument(option, name, body[length:])
        return _Status.IGNORED

    def _handle_group(self, body, /):
        # "-xvf", "-xvf=value", "-xvf value", "-xvfvalue"
        group = []
        for offset, letter in enumerate(body):
            option = self._registry.find(letter)
            if option is None or not option.group:
                return _Status.IGNORED
            group.append(option)
            if option.argument is Argument.NO or offset + 1 == len(body):
                continue
            if body[offset + 1] == "=" or option.join is not Join.NO:
                break
            self.emit(
                Severity.ERROR,
                self._index,
                "option '%s' must be last in a group" % letter,
                FaultCode.MISPLACED_GROUP_OPTION,
            )
            return _Status.ERROR

        for offset, option in enumerate(group):
            letter = body[offset]
            if option.argument is Argument.NO or offset + 1 == len(body):
                if (status := self._handle_bare(option, letter)) is not _Status.SUCCESS:
                    return status
                continue
            start = offset + 1
            if body[start] == "=" and option.join is Join.NO:
                start += 1
            return self._handle_argument(option, letter, body[start:])

        return _Status.SUCCESS

    def _handle_bare(self, option, name, /):
        """an occurrence without an attached argument."""
        if option.argument is not Argument.REQUIRED:
            return self._occurrences(option, name, "")
        if option.join is not Join.YES and option.steal is Steal.OPTIONAL:
            if (argument := self._steal()) is not None:
                return self._occurrences(option, name, argument)
        self.emit(Severity.ERROR, self._index, "option '%s' requires an argument" % name, FaultCode.MISSING_ARGUMENT)
        return _Status.ERROR

    def _handle_argument(self, option, name, argument, /):
        """an occurrence with an attached argument."""
        if not option.positional and option.argument is Argument.NO:
            self.emit(
                Severity.ERROR,
                self._index,
                "option '%s' does not accept an argument" % name,
                FaultCode.UNEXPECTED_ARGUMENT,
            )
            return _Status.ERROR
        return self._occurrences(option, name, argument)

    def _occurrences(self, option, name, argument, /):
        fields = argument.split(",") if option.comma else [argument]
        for field in fields:
            if (status := self._occur(option, name, field)) is not _Status.SUCCESS:
                return status

        if option.consume:
            self._consuming = True
            self._state = State.CONSUME_REMAINING
        if option.stop:
            return _Status.DONE
        return _Status.SUCCESS

    def _occur(self, option, name, argument, /):
        if not option.allows_occurrence():
            self.emit(Severity.ERROR, self._index, "option '%s' already specified" % name, FaultCode.DUPLICATED_OPTION)
            return _Status.ERROR

        context = Context(name, argument, self._index, self)
        errors = len(self._diagnostics.errors)
        failure = Unset

        with warnings.catch_warnings(record=True) as captured:
            warnings.simplefilter("always")
            try:
                result = option(context)
            except ValueError:
                result = False
            except Exception as error:
                result = False
                failure = error

        for warning in captured:
            self.emit(
                Severity.WARNING,
                self._index,
                "option '%s': %s" % (name, warning.message),
                FaultCode.DELEGATED_WARNING,
            )

        if failure is not Unset:
            self.emit(
                Severity.ERROR,
                self._index,
                "option '%s' failed: %s" % (name, str(failure) or type(failure).__name__),
                FaultCode.DELEGATED_ERROR,
            )

        if result is not None and not result:
            if len(self._diagnostics.errors) == errors:
                self.emit(
                    Severity.ERROR,
                    self._index,
                    "invalid argument '%s' for option '%s'" % (argument, name),
                    FaultCode.INVALID_ARGUMENT,
                )
            return _Status.ERROR

        option._count += 1
        return _Status.SUCCESS

    def __repr__(self):
        return "cmdline(name=%r, options=%r)" % (self._name, tuple(option.names for option in self._registry))


__all__ = (
    "Cmdline",
    "ParseResult",
    "State",
)
