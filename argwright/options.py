r"""
Argwright option descriptors and decorators.

Overview
- Policies
  • Occurrence: how often an option may/must appear (OPTIONAL, REQUIRED,
    ZERO_OR_MORE, ONE_OR_MORE).
  • Argument: whether it takes an argument (NO, OPTIONAL, REQUIRED).
  • Join: whether the argument may/must be glued to the name, "-Idir"
    (NO, OPTIONAL, YES).
  • Steal: whether a required argument may be taken from the next token,
    "-I dir" (DISALLOWED, OPTIONAL).

- Descriptors
  • Option: static configuration of one option (aliases, description,
    policies, flags) plus the callback invoked per occurrence and the mutable
    occurrence count maintained by the engine.
  • Context: what a callback receives for one occurrence (matched name, raw
    argument, token index, engine).

- Decorators
  • @option(...): build an Option and bind the decorated function as its
    callback.

Metadata (sanitized on construction)
- names: "|"-separated aliases, e.g. "v|verbose". Every alias must be non-empty
  and unique within the option; uniqueness across options is checked by the
  registry.
- descr: Unset | str (None when omitted), non-empty when provided.
- callback: Unset | Callable[[Context], bool | None].
- occurrence/argument/join/steal: members of their policy enumeration.
- group/positional/comma/consume/stop: booleans.

Callback contract
- Receives a Context.
- Returns True (or None) on success, False on failure.
- Raising ValueError is a conversion failure; any other exception is reported
  as a delegated error by the engine and never escapes the parse pass.

Quick example:
    >>> from argwright import Argument, option
    >>> include = []
    >>> @option("I", "add a directory to the include path", argument=Argument.REQUIRED)
    ... def on_include(context):
    ...     include.append(context.arg)
    ...
"""
import functools
import operator
from enum import Enum
from typing import NamedTuple

from .utils import *


class Occurrence(Enum):
    """How often an option may/must be specified."""
    OPTIONAL = "optional"  # at most once (default)
    REQUIRED = "required"  # exactly once
    ZERO_OR_MORE = "zero-or-more"
    ONE_OR_MORE = "one-or-more"


class Argument(Enum):
    """Whether an option takes an argument."""
    NO = "no"  # default
    OPTIONAL = "optional"
    REQUIRED = "required"


class Join(Enum):
    """
    Whether an option may/must join its argument.

    - NO: "-I dir" and "-I=dir"; the '=' is not part of the argument (default).
    - OPTIONAL: "-I dir" and "-Idir"; with "-I=dir" the '=' is kept.
    - YES: "-Idir" only; with "-I=dir" the '=' is kept.
    """
    NO = "no"
    OPTIONAL = "optional"
    YES = "yes"


class Steal(Enum):
    """Whether a required argument may be taken from the following token."""
    DISALLOWED = "disallowed"
    OPTIONAL = "optional"  # default


class Context(NamedTuple):
    """
    One occurrence, as seen by a callback.

    - name: the alias that matched (the option's names for positionals).
    - arg: the raw argument text ("" when none was given).
    - index: index of the token being processed.
    - cmdline: the engine running the pass.
    """
    name: str
    arg: str
    index: int
    cmdline: object

    def emit(self, severity, message, /, **options):
        """Append a diagnostic tied to this occurrence's token."""
        self.cmdline.emit(severity, self.index, message, **options)


class OptionType(type):
    """
    Metaclass publishing sanitized metadata as read-only properties.

    Every name listed in __introspectable__ becomes a property mirroring the
    private "_<name>" field, and instances get stable __repr__/__rich_repr__
    implementations for diagnostics and pretty printers.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__name__.lower()}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(metadata, /):
    """
    Internal: validate the '|'-separated alias list.

    Raises
    - TypeError: names is not a string.
    - ValueError: an alias is empty (e.g. "a||b", "a|") or repeated.
    """
    if not isinstance(names := metadata["names"], str):
        raise TypeError("option 'names' must be a string")
    aliases = []
    for alias in names.split("|"):
        if not alias:
            raise ValueError("option names cannot contain empty aliases")
        elif alias in aliases:
            raise ValueError("option names cannot contain duplicates")
        aliases.append(alias)
    metadata["aliases"] = tuple(aliases)


def _sanitize_metadata(metadata, /):
    """
    Internal: validate description, callback, policies and flags.

    The dict is modified in place: descr becomes None when omitted, flags are
    coerced to bool.
    """
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError("option 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError("option 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if (callback := metadata["callback"]) is not Unset and not callable(callback):
        raise TypeError("option 'callback' must be callable")

    for name, kind in (
        ("occurrence", Occurrence),
        ("argument", Argument),
        ("join", Join),
        ("steal", Steal),
    ):
        if not isinstance(metadata[name], kind):
            raise TypeError(f"option {name!r} must be a member of {kind.__name__}")

    for name in ("group", "positional", "comma", "consume", "stop"):
        metadata[name] = bool(metadata[name])


class Option(metaclass=OptionType):
    """
    Static configuration of one option plus its occurrence counter.

    Options are registered on a Cmdline (which owns them from then on) and
    matched by any of their aliases, or by position when positional=True.
    Calling an Option forwards the Context to its callback; an Option
    without a callback accepts every occurrence.

    Properties
    - The names listed in __introspectable__ are exposed read-only.
    - count: number of successful occurrences since the last reset, maintained
      by the engine only.
    """
    __introspectable__ = (
        "names",
        "aliases",
        "descr",
        "occurrence",
        "argument",
        "join",
        "group",
        "positional",
        "comma",
        "consume",
        "steal",
        "stop",
    )

    def __init__(
            self,
            names,
            descr=Unset,
            callback=Unset,
            /,
            *,
            occurrence=Occurrence.OPTIONAL,
            argument=Argument.NO,
            join=Join.NO,
            group=False,
            positional=False,
            comma=False,
            consume=False,
            steal=Steal.OPTIONAL,
            stop=False,
    ):
        """
        Construct an option.

        Parameters
        - names: str
          One or more aliases separated by '|', matched without their leading
          dashes ("v|verbose" matches "-v", "--v", "-verbose" and "--verbose").
        - descr: Unset | str
          Short description for help generators.
        - callback: Unset | Callable[[Context], bool | None]
          Invoked once per occurrence (per field with comma=True).
        - occurrence / argument / join / steal: policy enumeration members.
        - group: single-letter option that may be fused with others ("-xvf").
        - positional: matched by position rather than by name.
        - comma: split the argument on ',' and handle each field separately.
        - consume: after a successful occurrence, treat every later token as
          positional.
        - stop: after a successful occurrence, end the pass immediately.
        """
        metadata = {
            "names": names,
            "descr": descr,
            "callback": callback,
            "occurrence": occurrence,
            "argument": argument,
            "join": join,
            "group": group,
            "positional": positional,
            "comma": comma,
            "consume": consume,
            "steal": steal,
            "stop": stop,
        }

        _sanitize_names(metadata)
        _sanitize_metadata(metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._count = 0

    @property
    def count(self):
        return self._count

    @property
    def callback(self):
        return self._callback

    def __call__(self, context, /):
        if self._callback is Unset:
            return True
        return self._callback(context)

    def allows_occurrence(self):
        """Whether the occurrence policy admits one more occurrence."""
        if self._occurrence in (Occurrence.REQUIRED, Occurrence.OPTIONAL):
            return self._count == 0
        return True

    def requires_occurrence(self):
        """Whether the occurrence policy still demands an occurrence."""
        if self._occurrence in (Occurrence.REQUIRED, Occurrence.ONE_OR_MORE):
            return self._count == 0
        return False


def option(*args, **kwargs):
    """
    Decorator/factory for defining an option and its callback in one go.

    Usage
        @option("o|output", "write the result to FILE", argument=Argument.REQUIRED)
        def on_output(context):
            settings["output"] = context.arg

    Behavior
    - Builds Option(names, descr, **flags); a callback must not be passed
      positionally, the decorated function is the callback.
    - Applying the same decorator twice raises TypeError.

    Returns
    - a decorator returning the configured Option (ready for Cmdline.add).
    """
    if len(args) > 2:
        raise TypeError("option() takes at most 2 positional arguments (%d given)" % len(args))
    option = Option(*args, **kwargs)

    @rename("option")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@option() must be applied to a callable")
        if option._callback is not Unset:
            raise TypeError("@option() must be applied only once")
        option._callback = callback
        return option

    return wrapper


__all__ = (
    # Policies
    "Occurrence",
    "Argument",
    "Join",
    "Steal",

    # Descriptors
    "Option",
    "Context",

    # Decorators
    "option",
)

del OptionType
