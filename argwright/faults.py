"""
Argwright faults (diagnostics) and rendering.

Scope
- Severity: error / warning / note, the three kinds of record a parse pass
  may produce.
- FaultCode: stable numeric identifiers for every diagnostic the engine
  emits. Codes are grouped by domain so logs and searches stay predictable.
- Diagnostic: one structured record {severity, index, message, code}. Knows
  how to render itself through rich (__rich__), but never prints by itself.
- Diagnostics: the append-only log owned by one Cmdline.
- render(): the single "write diagnostics to a console" collaborator.

Integration
- The engine only appends records (Cmdline.emit); nothing in the parsing path
  performs I/O.
- Applications decide when to show them, usually via Cmdline.print_diagnostics()
  which forwards here.
- Styles, program name and code labels can be overridden from the host's
  __main__ module (__styles__, __prog__, __codes__).
"""
from collections import defaultdict
from collections.abc import Iterable, Sequence
from enum import Enum, IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import *

console = Console(stderr=True)


class Severity(Enum):
    """
    kind of a diagnostic record.

    only ERROR records decide the outcome of a pass; WARNING and NOTE
    records are informative (notes usually follow the error they explain).
    """
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


class FaultCode(IntEnum):
    """
    canonical fault codes emitted by the engine (stable identifiers).

    grouping
    - syntax errors (1110x)
      • UNKNOWN_OPTION, MISSING_ARGUMENT, UNEXPECTED_ARGUMENT,
        MISPLACED_GROUP_OPTION, AMBIGUOUS_OPTION
    - semantic errors (1112x)
      • INVALID_ARGUMENT, DUPLICATED_OPTION, MISSING_OPTION
    - delegated records, emitted by user callbacks (11131 / 12131 / 13131)
      • DELEGATED_ERROR, DELEGATED_WARNING, DELEGATED_NOTE

    the leading digits encode the severity (11 errors, 12 warnings, 13 notes);
    spacing leaves room for additions without reshuffling existing codes.
    """
    # --- syntax errors (111xx) ---
    UNKNOWN_OPTION              = 11101
    MISSING_ARGUMENT            = 11102
    UNEXPECTED_ARGUMENT         = 11103
    MISPLACED_GROUP_OPTION      = 11104
    AMBIGUOUS_OPTION            = 11105

    # --- semantic errors (111xx) ---
    INVALID_ARGUMENT            = 11121
    DUPLICATED_OPTION           = 11122
    MISSING_OPTION              = 11123

    # --- delegated records ---
    DELEGATED_ERROR             = 11131
    DELEGATED_WARNING           = 12131
    DELEGATED_NOTE              = 13131

    def normalize(self):
        """
        return a host-normalized label for this code.

        the host may define a __codes__ mapping in __main__ to replace the
        numeric id with its own labels; by default the number is returned
        as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_DELEGATED = {
    Severity.ERROR: FaultCode.DELEGATED_ERROR,
    Severity.WARNING: FaultCode.DELEGATED_WARNING,
    Severity.NOTE: FaultCode.DELEGATED_NOTE,
}


class Diagnostic:
    """
    One structured record of the diagnostic log.

    Fields
    - severity: Severity
    - index: int | None, the token index the record refers to (None when the
      record is not tied to a token, e.g. "option 'x' is missing").
    - message: str
    - code: FaultCode, defaults to the DELEGATED_* code of the severity, which
      is what records emitted from user callbacks carry.
    - options: read-only mapping with rendering context (prog, colorful).

    Records compare equal when severity, index, message and code are equal;
    options never take part in comparisons.
    """
    __slots__ = ("severity", "index", "message", "code", "options")

    def __init__(self, severity, index, message, /, code=Unset, **options):
        if not isinstance(severity, Severity | str):
            raise TypeError("diagnostic 'severity' must be a severity")
        if not isinstance(index, int | None) or isinstance(index, bool):
            raise TypeError("diagnostic 'index' must be an integer or None")
        if not isinstance(message, str):
            raise TypeError("diagnostic 'message' must be a string")
        if not isinstance(code, FaultCode | Unset):
            raise TypeError("diagnostic 'code' must be a fault-code")
        self.severity = Severity(severity)
        self.index = index
        self.message = message
        self.code = coalesce(code, _DELEGATED[self.severity])
        self.options = MappingProxyType(options)

    def __eq__(self, other):
        if not isinstance(other, Diagnostic):
            return NotImplemented
        return (
            (self.severity, self.index, self.message, self.code) ==
            (other.severity, other.index, other.message, other.code)
        )

    __hash__ = None

    def __repr__(self):
        return "diagnostic(severity=%r, index=%r, message=%r, code=%r)" % (
            self.severity.value, self.index, self.message, self.code.name
        )

    def __str__(self):
        return "%s: %s" % (self.severity.value, self.message)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "error": "bold #FF4DA6",  # pinky red label
            "warning": "bold #FFB400",  # amber label
            "note": "bold #00E5FF",  # neon cyan label
            "index": "#9CE19C dim",  # token position
            "message": "#C8C8D0",  # soft light gray body
        } | getattr(main, "__styles__", {}))

        def text(fragment, style):
            return Text(str(fragment), styles[style] if colorful else "")

        parts = []
        if prog := getattr(main, "__prog__", self.options.get("prog")):
            parts += [text(prog, "prog-name"), ": "]
        parts += [text(self.severity.value + ":", self.severity.value), " "]
        if self.index is not None and self.options.get("positions", False):
            parts += [text("#%d" % self.index, "index"), " "]
        parts.append(text(self.message, "message"))
        return Text.assemble(*parts)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.severity, self.index, self.message, self.code, **{**self.options, **overrides})


class Diagnostics(Sequence):
    """
    Append-only, ordered diagnostic log.

    The log is read through the Sequence API; records are only added through
    append(), and cleared as a whole by clear() (used by Cmdline.reset()).
    """

    def __init__(self, records=(), /):
        self._records = []
        for record in records:
            self.append(record)

    def __getitem__(self, index):
        return self._records[index]

    def __len__(self):
        return len(self._records)

    def __repr__(self):
        return "diagnostics(%r)" % self._records

    def append(self, record, /):
        if not isinstance(record, Diagnostic):
            raise TypeError("diagnostics can only hold diagnostic records")
        self._records.append(record)

    def clear(self):
        self._records.clear()

    @property
    def errors(self):
        return tuple(record for record in self._records if record.severity is Severity.ERROR)

    @property
    def warnings(self):
        return tuple(record for record in self._records if record.severity is Severity.WARNING)

    @property
    def notes(self):
        return tuple(record for record in self._records if record.severity is Severity.NOTE)

    @property
    def messages(self):
        """the bare message texts, in emission order."""
        return tuple(record.message for record in self._records)


def render(diagnostics, /, *, console=console, colorful=True, prog=Unset, positions=False):
    """
    write diagnostic records to a rich console, one line each.

    parameters
    - diagnostics: an iterable of Diagnostic records (usually Cmdline.diagnostics).
    - console: target console; defaults to the module-level stderr console.
    - colorful: disable styling when False (useful for logs and tests).
    - prog: program name prefix; __main__.__prog__ wins when defined.
    - positions: include the token index ("#3") when a record has one.

    nothing is written when there are no records.
    """
    if not isinstance(diagnostics, Iterable):
        raise TypeError("render() argument must be an iterable of diagnostics")
    options = {"colorful": bool(colorful), "positions": bool(positions)}
    if prog is not Unset:
        options["prog"] = prog
    renders = []
    for record in diagnostics:
        if not isinstance(record, Diagnostic):
            raise TypeError("render() argument must be an iterable of diagnostics")
        renders.append(record.__replace__(**options))
    if renders:
        console.print(Group(*renders), highlight=False)


__all__ = (
    "Severity",
    "FaultCode",
    "Diagnostic",
    "Diagnostics",
    "render",
)
