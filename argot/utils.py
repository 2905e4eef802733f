"""
Argot utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel for "value not provided", distinct from None.
- coalesce(value, default=None)
  • Replace Unset with a concrete default; None and other falsey values pass through.
- rename(callable, name) / @rename("name")
  • Stable __name__/__qualname__ for generated callables.
- mirror("attr")
  • Read-only property over a private backing field (self._attr), returning
    fresh container copies.
- pluralize(text)
  • Small English pluralizer used for section labels and messages.
- distance(a, b) / suggest(input, candidates)
  • Levenshtein edit distance and the "did you mean" lookup built on it.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> distance("--verbsoe", "--verbose")
    2
    >>> suggest("--nmae", ["--name", "--verbose"])
    '--name'
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Sentinel type for parameters that were not provided.

    Characteristics
    - Boolean-false, printable as "Unset", sealed against subclassing.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object unless it is Unset, in which case return default.

    Falsey values such as None, 0 or "" are kept as they are.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy containers so callers cannot mutate the backing state.

    Tuples keep their type (named tuples included); other sequences become
    lists, mappings become dicts and sets become sets.
    """
    if isinstance(object, tuple):
        return object
    elif isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set) and not isinstance(object, frozenset):
        return set(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private field "_{name}".
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, /):
    """
    Pluralize the last word of a label ("flag" -> "flags", "command option" -> "command options").

    Only the handful of regular English rules the package needs are covered:
    s/sh/ch/x/z take "es", consonant + y takes "ies", everything else takes "s".
    Casing of the last word is preserved for all-caps labels.
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    match = re.search(r"(\S+)(\s*)$", text)
    if not match:
        return text

    head, last, trail = text[:match.start(1)], match.group(1), match.group(2)
    lower = last.lower()

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if last.isupper():
        plural = plural.upper()
    elif last[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


@functools.cache
def distance(source, target, /):
    """
    Levenshtein edit distance between two strings (insert, delete, substitute).
    """
    if not isinstance(source, str) or not isinstance(target, str):
        raise TypeError("distance() arguments must be strings")

    previous = list(range(len(target) + 1))
    for row, char in enumerate(source, 1):
        current = [row]
        for column, other in enumerate(target, 1):
            current.append(min(
                previous[column] + 1,
                current[column - 1] + 1,
                previous[column - 1] + (char != other),
            ))
        previous = current
    return previous[-1]


def suggest(input, candidates, /, *, threshold=2):
    """
    Return the candidate nearest to input, or None when nothing is close.

    A candidate qualifies when its distance is at most threshold and smaller
    than the input length (leading dashes ignored), so one-letter typos of
    one-letter names are never "corrected". Ties go to the earliest candidate.
    """
    bare = input.lstrip("-")
    best, score = None, threshold + 1
    for candidate in candidates:
        if (current := distance(input, candidate)) < score and current < len(bare):
            best, score = candidate, current
    return best


Unset = UnsetType()
"""
Sentinel for "not provided" where None is a meaningful user value.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "distance",
    "suggest",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
