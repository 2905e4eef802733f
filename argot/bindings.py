"""
Argot parse results.

- Match: values and occurrence count bound to one argument.
- Binding: read-only mapping from binding key ('dest') to Match, produced fresh
  by every parse. Only supplied or defaulted arguments have an entry (indexing
  an absent one yields an empty Match); asking about a key the spec never
  declared is a KeyError.
- ParseResult: the Binding of one level, plus the chosen subcommand name and its
  nested ParseResult.
- HelpRequested: returned instead of a ParseResult when '-h/--help' or
  'help [name]' was found; carries the rendered (plain) help text.
"""
from typing import NamedTuple

from .utils import *


class Match(NamedTuple):
    """
    Values (in the order supplied, delimiters already split) and occurrences.

    A defaulted argument has its default values and zero occurrences; a flag
    has no values.
    """
    values: tuple[str, ...] = ()
    occurrences: int = 0


class Binding:
    """
    Resolved arguments of one spec level.

    Iteration yields binding keys in declaration order; indexing yields Match.
    """

    __slots__ = ("_matches", "_known")

    def __init__(self, matches=Unset, /, known=Unset):
        self._matches = dict(coalesce(matches, {}))
        self._known = tuple(coalesce(known, self._matches.keys()))

    def _check(self, dest):
        if dest not in self._known:
            raise KeyError(f"binding has no argument {dest!r}")

    def __getitem__(self, dest):
        """
        Match bound under dest; an empty Match when it was declared but neither
        supplied nor defaulted.
        """
        self._check(dest)
        return self._matches.get(dest, Match())

    def __contains__(self, dest):
        return dest in self._matches

    def __iter__(self):
        return iter(self._matches)

    def __len__(self):
        return len(self._matches)

    def __bool__(self):
        return bool(self._matches)

    def items(self):
        return self._matches.items()

    def __eq__(self, other):
        if isinstance(other, Binding):
            return self._matches == other._matches
        if isinstance(other, dict):
            return self._matches == other
        return NotImplemented

    def __hash__(self):
        return hash(tuple(self._matches.items()))

    def __repr__(self):
        return f"binding({', '.join(f'{dest}={match!r}' for dest, match in self._matches.items())})"

    def __rich_repr__(self):
        yield from self._matches.items()

    def is_present(self, dest, /):
        """
        True when the argument was supplied or bound to a default.
        """
        self._check(dest)
        return dest in self._matches

    def occurrences_of(self, dest, /):
        """
        How many times the argument was supplied (0 when absent or defaulted).
        """
        self._check(dest)
        return self._matches.get(dest, Match()).occurrences

    def values_of(self, dest, /):
        """
        Every value bound to the argument, () when absent.
        """
        self._check(dest)
        return self._matches.get(dest, Match()).values

    def value_of(self, dest, /):
        """
        The first value bound to the argument, None when it has none.
        """
        values = self.values_of(dest)
        return values[0] if values else None


class ParseResult(NamedTuple):
    binding: Binding
    subcommand: str | None = None
    nested: "ParseResult | None" = None
    spec: object = None

    def leaf(self):
        """
        The innermost result along the chosen subcommands.
        """
        result = self
        while result.nested is not None:
            result = result.nested
        return result


class HelpRequested(NamedTuple):
    text: str
    spec: object = None


__all__ = (
    "Match",
    "Binding",
    "ParseResult",
    "HelpRequested",
)
