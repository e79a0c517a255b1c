"""
Argwright option registry.

The registry keeps every (alias, option) pair in registration order. Order
matters twice: positional options are matched in the order they were added,
and help generators list options in that order.

Lookup is a linear scan; command lines are small and a scan keeps the
"first registered wins" rule obvious.
"""
from .options import Join, Option


class Registry:
    """
    Ordered collection of options, addressable by alias.

    Parameters
    - abbreviations: when True, lookup() also resolves unambiguous alias
      prefixes ("--verb" for "--verbose"). Off by default.

    Invariants
    - aliases are unique across the whole registry (add() raises ValueError).
    - an option appears once per alias in pairs(), once in iteration.
    """

    def __init__(self, *, abbreviations=False):
        self._pairs = []
        self._options = []
        self._prefix_length = 0
        self._abbreviations = bool(abbreviations)

    @property
    def abbreviations(self):
        return self._abbreviations

    @property
    def prefix_length(self):
        """The longest alias among options that may join their argument."""
        return self._prefix_length

    def add(self, option, /):
        """
        Register every alias of ``option``.

        Raises
        - TypeError: option is not an Option.
        - ValueError: the option is already registered, or one of its aliases
          is taken by another option. Nothing is registered in that case.
        """
        if not isinstance(option, Option):
            raise TypeError("registry can only hold options")
        if any(option is known for known in self._options):
            raise ValueError("option %r is already registered" % option.names)
        for alias in option.aliases:
            if alias in self:
                raise ValueError("option %r is already registered" % alias)

        if option.join is not Join.NO:
            self._prefix_length = max(self._prefix_length, *map(len, option.aliases))

        self._options.append(option)
        self._pairs.extend((alias, option) for alias in option.aliases)
        return option

    def find(self, name, /):
        """
        Return the named (non-positional) option registered as ``name``, or
        None.
        """
        for alias, option in self._pairs:
            if alias == name and not option.positional:
                return option
        return None

    def lookup(self, name, /):
        """
        Resolve ``name`` to ``(option, alias, ambiguous)``.

        ``alias`` is the registered alias that matched: ``name`` itself for an
        exact match, the full alias for an abbreviation ("verbose" for
        "verb"), None when nothing matched.

        Without abbreviations this is find() and never ambiguous. With them,
        an exact alias always wins; otherwise the single option having an
        alias that starts with ``name`` is returned (with its first such
        alias), and more than one such option yields ``(None, None, True)``.
        """
        if (option := self.find(name)) is not None:
            return option, name, False
        if not self._abbreviations or not name:
            return None, None, False

        candidates = []
        for alias, option in self._pairs:
            if option.positional or not alias.startswith(name):
                continue
            if not any(option is known for _, known in candidates):
                candidates.append((alias, option))

        if len(candidates) > 1:
            return None, None, True
        if candidates:
            alias, option = candidates[0]
            return option, alias, False
        return None, None, False

    def pairs(self):
        """(alias, option) pairs in registration order."""
        return tuple(self._pairs)

    def positionals(self):
        return tuple(option for option in self._options if option.positional)

    def __iter__(self):
        return iter(tuple(self._options))

    def __len__(self):
        return len(self._options)

    def __contains__(self, alias):
        return any(known == alias for known, _ in self._pairs)

    def __repr__(self):
        return "registry(%s)" % ", ".join(repr(option.names) for option in self._options)


__all__ = (
    "Registry",
)
