r"""
Argot argument specifications.

Overview
- Specs
  • Flag: named, presence-only switch (arity 0), e.g. -v/--verbose.
  • Option: named, value-bearing switch (arity n or a bounded range), e.g. -o/--output.
  • Positional: value identified by position (arity 1, or unbounded when multiple).

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ as read-only properties.
  • Concrete specs are sealed against subclassing.

Identity
- Every argument has a 'dest': the key it is bound under in a Binding.
  • Named arguments default it to the long name without dashes (inner dashes
    become underscores), else to the short character.
  • Positionals take it as their first argument.
- Named arguments take a short form "-x" (one letter or digit), a long form
  "--name", or both. Further long forms are hidden aliases.

Metadata (sanitized on construction)
- Shared: required, multiple, descr, hidden.
- Value-bearing (Option/Positional): metavar, default (a string), choices
  (closed set of strings), delimiter (splits each supplied value).
- Option only: nargs, an int >= 1 or a (min, max) tuple with 1 <= min <= max.
- Positional only: index, an explicit 1-based position among siblings.

Quick example:
    >>> from argot.arguments import Flag, Option, Positional
    >>> name = Option("-n", "--name", required=True)
    >>> verbose = Flag("-v", "--verbose")
    >>> files = Positional("file", multiple=True)
"""
import functools
import operator
import re
from collections.abc import Iterable, Set

from rich.text import Text

from .utils import *


class ArgumentType(type):
    """
    Metaclass for argument specs.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and help output.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations.
    - Seal concrete spec classes (sealed=True) against subclassing.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


_SHORT = re.compile(r"-[^\W_]")
_LONG = re.compile(r"--[^\W_]+(-[^\W_]+)*")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize the fields every argument kind shares.

    - descr: Unset or a non-empty string (or rich Text); Unset becomes None.
    - required/multiple/hidden: coerced to bool.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    for name in ("required", "multiple", "hidden"):
        metadata[name] = bool(metadata[name])


def _sanitize_dest(cls, dest, /):
    if not isinstance(dest, str):
        raise TypeError(f"{cls.__typename__} 'dest' must be a string")
    elif not (dest := dest.strip()):
        raise ValueError(f"{cls.__typename__} 'dest' cannot be empty")
    elif re.search(r"\s", dest):
        raise ValueError(f"{cls.__typename__} 'dest' cannot contain whitespace")
    return dest


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate names of Flag/Option and derive short/long/aliases/dest.

    Accepted forms
    - short: "-x" where x is a single letter or digit (unicode allowed).
    - long: "--name", "--long-name" (segments of letters/digits joined by single dashes).
    Single-dash long names and underscores are rejected. At most one short name.
    The first long name is the canonical one; the following ones are aliases.
    """
    names = metadata.pop("names")
    if not names:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    short, longs = None, []
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif name == short or name in longs:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        elif _SHORT.fullmatch(name):
            if short is not None:
                raise ValueError(f"{cls.__typename__} cannot have more than one short name")
            short = name
        elif _LONG.fullmatch(name):
            longs.append(name)
        else:
            raise ValueError(f"{cls.__typename__} names must look like '-x' or '--name' (got {name!r})")

    metadata["short"] = short
    metadata["long"] = longs[0] if longs else None
    metadata["aliases"] = tuple(longs[1:])

    if metadata["dest"] is Unset:
        metadata["dest"] = longs[0][2:].replace("-", "_") if longs else short[1:]
    metadata["dest"] = _sanitize_dest(cls, metadata["dest"])


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate value-bearing fields (Option and Positional).

    - metavar: Unset or a non-empty string; Unset becomes None.
    - choices: iterable of strings. Sequences must not repeat a value; sets are
      sorted so help output stays deterministic. Normalized to a tuple.
    - delimiter: Unset or a single character; Unset becomes None.
    - default: Unset or a string; Unset becomes None. When choices are declared,
      every (delimited) part of the default must be one of them.
    """
    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of strings")
    if isinstance(choices, Set):
        choices = sorted(choices)
    sanitized = []
    for choice in choices:
        if not isinstance(choice, str):
            raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of strings")
        if choice in sanitized:
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
        sanitized.append(choice)
    metadata["choices"] = tuple(sanitized)

    if not isinstance(delimiter := metadata["delimiter"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'delimiter' must be a string")
    elif isinstance(delimiter, str) and len(delimiter) != 1:
        raise ValueError(f"{cls.__typename__} 'delimiter' must be a single character")
    metadata["delimiter"] = coalesce(delimiter)

    if not isinstance(default := metadata["default"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'default' must be a string")
    if isinstance(default, str) and metadata["choices"]:
        parts = default.split(delimiter) if isinstance(delimiter, str) else [default]
        if any(part not in metadata["choices"] for part in parts):
            raise ValueError(f"{cls.__typename__} 'default' must be one of its 'choices'")
    metadata["default"] = coalesce(default)


def _sanitize_nargs(cls, nargs, /):
    """
    Internal: normalize Option arity into a (min, max) pair.
    """
    if isinstance(nargs, bool) or not isinstance(nargs, int | tuple):
        raise TypeError(f"{cls.__typename__} 'nargs' must be an integer or a (min, max) pair")
    if isinstance(nargs, int):
        nargs = (nargs, nargs)
    if len(nargs) != 2 or not all(isinstance(bound, int) and not isinstance(bound, bool) for bound in nargs):
        raise TypeError(f"{cls.__typename__} 'nargs' must be an integer or a (min, max) pair")
    if not 1 <= nargs[0] <= nargs[1]:
        raise ValueError(f"{cls.__typename__} 'nargs' must satisfy 1 <= min <= max")
    return nargs


class Argument:
    """
    Common behaviour of every argument spec.

    Not instantiable by itself; use Flag, Option or Positional. Fields a kind
    does not declare read as their neutral value (a Flag has no choices, a
    Positional has no names).
    """
    short = None
    long = None
    aliases = ()
    metavar = None
    default = None
    choices = ()
    delimiter = None

    def __new__(cls, *args, **kwargs):
        if cls is Argument:
            raise TypeError("type 'Argument' cannot be instantiated directly, use Flag, Option or Positional")
        return super().__new__(cls)

    def _assign(self, metadata):
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def names(self):
        """
        Every switch spelling that resolves to this argument, canonical forms first.
        """
        return tuple(name for name in (self.short, self.long) if name) + self.aliases

    @property
    def identity(self):
        """
        The spelling used for this argument in messages (long, else short).
        """
        return self.long or self.short

    @property
    def takes_value(self):
        return self.arity[1] != 0


class Flag(Argument, metaclass=ArgumentType, sealed=True):
    """
    Named, presence-only switch.

    A Flag carries no value; its occurrences are counted. Declare it multiple
    to allow repetition (e.g. -vvv for verbosity levels).
    """

    __introspectable__ = (
        "short",
        "long",
        "aliases",
        "dest",
        "required",
        "multiple",
        "descr",
        "hidden",
    )

    def __new__(cls, *names, dest=Unset, required=False, multiple=False, descr=Unset, hidden=False):
        """
        Construct a Flag spec.

        Parameters
        - names: "-x" and/or "--name" forms (extra long forms become aliases).
        - dest: binding key, defaults from the names.
        - required: must be supplied at least once.
        - multiple: may be supplied more than once.
        - descr: short description for help.
        - hidden: suppress from help output.
        """
        metadata = {
            "names": names,
            "dest": dest,
            "required": required,
            "multiple": multiple,
            "descr": descr,
            "hidden": hidden,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        self = super().__new__(cls)
        self._assign(metadata)
        return self

    @property
    def arity(self):
        return 0, 0


class Option(Argument, metaclass=ArgumentType, sealed=True):
    """
    Named, value-bearing switch.

    Values are supplied as '--name value', '--name=value', '-nvalue',
    '-n value' or at the end of a short cluster ('-vn value'). Each occurrence
    consumes between min and max values, as declared by nargs.
    """

    __introspectable__ = (
        "short",
        "long",
        "aliases",
        "dest",
        "metavar",
        "nargs",
        "default",
        "choices",
        "delimiter",
        "required",
        "multiple",
        "descr",
        "hidden",
    )

    __displayable__ = (
        "short",
        "long",
        "dest",
        "nargs",
        "default",
        "choices",
        "required",
        "multiple",
    )

    def __new__(
            cls,
            *names,
            dest=Unset,
            metavar=Unset,
            nargs=1,
            default=Unset,
            choices=(),
            delimiter=Unset,
            required=False,
            multiple=False,
            descr=Unset,
            hidden=False,
    ):
        """
        Construct an Option spec.

        Parameters
        - names: "-x" and/or "--name" forms (extra long forms become aliases).
        - dest: binding key, defaults from the names.
        - metavar: value label in help, defaults to the upper-cased dest.
        - nargs: values per occurrence, an int >= 1 or a (min, max) pair.
        - default: value bound when the option is absent.
        - choices: closed set of accepted values.
        - delimiter: split every supplied value on this character.
        - required: must be supplied (or defaulted).
        - multiple: may be supplied more than once.
        - descr: short description for help.
        - hidden: suppress from help output.
        """
        metadata = {
            "names": names,
            "dest": dest,
            "metavar": metavar,
            "nargs": nargs,
            "default": default,
            "choices": choices,
            "delimiter": delimiter,
            "required": required,
            "multiple": multiple,
            "descr": descr,
            "hidden": hidden,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)
        metadata["nargs"] = _sanitize_nargs(cls, metadata["nargs"])

        self = super().__new__(cls)
        self._assign(metadata)
        return self

    @property
    def arity(self):
        return self._nargs


class Positional(Argument, metaclass=ArgumentType, sealed=True):
    """
    Value identified by its position among sibling positionals.

    A Positional takes exactly one value, or every remaining positional value
    when declared multiple (only the last positional may be). Order follows
    declaration unless an explicit 1-based index is given.
    """

    __introspectable__ = (
        "dest",
        "metavar",
        "index",
        "default",
        "choices",
        "delimiter",
        "required",
        "multiple",
        "descr",
        "hidden",
    )

    def __new__(
            cls,
            dest,
            /,
            metavar=Unset,
            *,
            index=Unset,
            default=Unset,
            choices=(),
            delimiter=Unset,
            required=False,
            multiple=False,
            descr=Unset,
            hidden=False,
    ):
        """
        Construct a Positional spec.

        Parameters
        - dest: binding key (also the default label in help).
        - metavar: value label in help, defaults to the upper-cased dest.
        - index: explicit 1-based position among sibling positionals.
        - default: value bound when no value is supplied.
        - choices: closed set of accepted values.
        - delimiter: split every supplied value on this character.
        - required: a value must be supplied (or defaulted).
        - multiple: absorb every remaining positional value.
        - descr: short description for help.
        - hidden: suppress from help output.
        """
        metadata = {
            "dest": _sanitize_dest(cls, dest),
            "metavar": metavar,
            "index": index,
            "default": default,
            "choices": choices,
            "delimiter": delimiter,
            "required": required,
            "multiple": multiple,
            "descr": descr,
            "hidden": hidden,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)

        if isinstance(index, bool) or not isinstance(index, int | Unset):
            raise TypeError(f"{cls.__typename__} 'index' must be an integer")
        elif isinstance(index, int) and index < 1:
            raise ValueError(f"{cls.__typename__} 'index' must be a positive integer")
        metadata["index"] = coalesce(index)

        self = super().__new__(cls)
        self._assign(metadata)
        return self

    @property
    def identity(self):
        return f"<{self._metavar or self._dest.upper()}>"

    @property
    def arity(self):
        return 1, None if self._multiple else 1


__all__ = (
    # Classes (specifications)
    "Argument",
    "Flag",
    "Option",
    "Positional",
)

del ArgumentType
