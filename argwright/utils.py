"""
Argwright utilities (small, shared helpers)

Scope
- The "not provided" sentinel and the helpers the option, registry and engine
  layers build their read-only surfaces with.

Overview
- Unset (UnsetType)
  • Default of optional parameters where None is a meaningful value.
  • Falsy, printable as "Unset", one instance per process, final.
  • Usable in unions: isinstance(value, str | Unset).

- coalesce(value, default=None)
  • Unset becomes ``default``; every other value, falsy or not, is kept.

- @rename("name")
  • Readable __name__/__qualname__ for generated callables, so a parser built
    by integer(32) shows up as "int32" rather than "parser".

- mirror("attr")
  • Read-only property over the private "_attr" field. Containers are handed
    out frozen (tuple/dict/frozenset) so callers never hold live state.

    >>> coalesce(Unset, 8)
    8
    >>> coalesce(0, 8)
    0
"""
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    UnsetType() returns the existing instance; copies and pickles resolve to
    it as well.
    """
    __slots__ = ()

    def __new__(cls):
        try:
            return Unset
        except NameError:
            return object.__new__(cls)

    def __init_subclass__(cls, /, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __ror__(self, other, /):
        # str | Unset -> str | UnsetType
        return other | UnsetType

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"


def coalesce(object, default=None, /):
    """Return ``object``, or ``default`` when it is Unset."""
    return default if object is Unset else object


def rename(name, /):
    """Decorator giving the decorated callable a new __name__/__qualname__."""
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _freeze(value):
    match value:
        case str() | bytes():
            return value
        case Mapping():
            return {key: _freeze(item) for key, item in value.items()}
        case Set():
            return frozenset(map(_freeze, value))
        case Sequence():
            return tuple(map(_freeze, value))
    return value


def mirror(name, /):
    """
    Build a read-only property exposing ``self._<name>`` (frozen, see
    _freeze).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    attribute = "_" + name

    @rename(name)
    def fget(self):
        return _freeze(getattr(self, attribute))

    return property(fget)


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
