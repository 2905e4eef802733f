"""
Argot spec model: the validated, read-only description of a command line.

What this module provides
- Spec: one level of a command line (the program itself or a subcommand):
  • arguments in declaration order (Flag, Option, Positional),
  • groups (conflict / requires / one-required / overrides) resolved to binding keys,
  • subcommands by name (and by alias), each an independent Spec owned by this one,
  • help metadata and rendering settings.
- build_spec(name, declarations, **metadata): build a Spec from a flat list of
  declarations, the shape an external loader would produce.

Construction-time guarantees
- Every binding key ('dest') and every switch spelling is unique per level,
  and so is every subcommand name, subcommand alias and group name
  (DuplicateIdentityError).
- Every group member refers to a declared argument (UnknownGroupMemberError).
- Positional indexes are unique and contiguous, at most one positional is
  multiple and it is the last one, and no required positional follows an
  optional one (InvalidPositionalOrderingError).
- A '-h/--help' flag is added for every spelling the level leaves free.

After construction a Spec is never mutated, so a single instance can be shared
by any number of concurrent parse() calls.

Settings
- colorful, width, unified, next_line and show_choices drive the help renderer.
  Left Unset on a subcommand, they are inherited from its parent (defaults:
  colorful=True, width=80, unified=False, next_line=False, show_choices=True).
"""
import functools
import itertools
import logging
import operator
import re
import weakref

from rich.text import Text

from .arguments import Argument, Flag, Positional
from .faults import DuplicateIdentityError, UnknownGroupMemberError, InvalidPositionalOrderingError
from .groups import Group
from .utils import *

logger = logging.getLogger(__name__)


class SpecType(type):
    """
    Metaclass giving Spec its typename, mirrored properties and representations.

    Mirrors ArgumentType: __typename__ derived from the class name, read-only
    properties for __introspectable__, compact __repr__/__rich_repr__ driven by
    __displayable__, and sealing when requested.
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
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _process_strings(cls, metadata):
    """
    Validate the name and the free-text help metadata.

    - name: required, non-empty, no whitespace, must not start with '-'.
    - descr/usage/before/after/template/author: Unset or a non-empty string
      (or rich Text); Unset becomes None.
    - aliases: extra words selecting this spec as a subcommand, distinct from
      the name and from each other.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif re.search(r"\s", name) or name.startswith("-"):
        raise ValueError(f"{cls.__typename__} 'name' must be a single word not starting with '-'")
    metadata["name"] = name

    for key in ("descr", "usage", "before", "after", "template", "author"):
        if not isinstance(value := metadata[key], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} {key!r} must be a string")
        elif isinstance(value, str) and not value.strip():
            raise ValueError(f"{cls.__typename__} {key!r} cannot be empty")
        metadata[key] = coalesce(value)

    metadata["hidden"] = bool(metadata["hidden"])

    if isinstance(aliases := metadata["aliases"], str) or not isinstance(aliases, tuple | list):
        raise TypeError(f"{cls.__typename__} 'aliases' must be a tuple of strings")
    for alias in aliases:
        if not isinstance(alias, str):
            raise TypeError(f"{cls.__typename__} 'aliases' must be a tuple of strings (got {alias!r})")
        elif not alias or re.search(r"\s", alias) or alias.startswith("-"):
            raise ValueError(f"{cls.__typename__} alias {alias!r} must be a single word not starting with '-'")
        elif alias == name or aliases.count(alias) > 1:
            raise ValueError(f"{cls.__typename__} {name!r} alias {alias!r} is repeated")
    metadata["aliases"] = tuple(aliases)


def _process_settings(cls, metadata):
    """
    Validate rendering settings; Unset is kept so the parent value applies.
    """
    for key in ("colorful", "unified", "next_line", "show_choices"):
        if not isinstance(metadata[key], bool | Unset):
            raise TypeError(f"{cls.__typename__} {key!r} must be a boolean")

    if isinstance(width := metadata["width"], bool) or not isinstance(width, int | Unset):
        raise TypeError(f"{cls.__typename__} 'width' must be an integer")
    elif isinstance(width, int) and width < 20:
        raise ValueError(f"{cls.__typename__} 'width' must be at least 20 columns")


def _process_declarations(cls, metadata, declarations):
    """
    Split declarations into arguments, groups and subcommands, enforcing
    unique identities at this level.

    Builds in metadata
    - arguments: tuple of argument specs in declaration order.
    - switches: mapping[spelling -> Flag|Option] (aliases fan out to the same object).
    - groups: tuple of Group as declared (resolved later).
    - subcommands: mapping[name -> Spec] in declaration order.
    - commands: mapping[name or alias -> Spec], the words that select a subcommand.
    """
    arguments, dests = [], set()
    switches = {}
    groups, names = [], set()
    subcommands, commands = {}, {}

    for declaration in declarations:
        if isinstance(declaration, Argument):
            if declaration.dest in dests:
                raise DuplicateIdentityError(
                    f"{cls.__typename__} {metadata['name']!r} declares argument {declaration.dest!r} more than once",
                    dest=declaration.dest,
                )
            dests.add(declaration.dest)
            for name in declaration.names:
                if switches.setdefault(name, declaration) is not declaration:
                    raise DuplicateIdentityError(
                        f"{cls.__typename__} {metadata['name']!r} switch {name!r} is already in use",
                        name=name,
                    )
            arguments.append(declaration)
        elif isinstance(declaration, Group):
            if declaration.name in names:
                raise DuplicateIdentityError(
                    f"{cls.__typename__} {metadata['name']!r} group {declaration.name!r} is already in use",
                    name=declaration.name,
                )
            names.add(declaration.name)
            groups.append(declaration)
        elif isinstance(declaration, Spec):
            subcommands.setdefault(declaration.name, declaration)
            for word in (declaration.name, *declaration.aliases):
                if commands.setdefault(word, declaration) is not declaration:
                    raise DuplicateIdentityError(
                        f"{cls.__typename__} {metadata['name']!r} subcommand name {word!r} is already in use",
                        name=word,
                    )
        else:
            raise TypeError(f"{cls.__typename__} declarations must be arguments, groups or specs (got {declaration!r})")

    metadata["arguments"] = tuple(arguments)
    metadata["switches"] = switches
    metadata["groups"] = tuple(groups)
    metadata["subcommands"] = subcommands
    metadata["commands"] = commands


def _process_positionals(cls, metadata):
    """
    Order positionals by index and check the ordering rules.

    Explicit indexes claim their slot; the others fill the lowest free slots in
    declaration order. The resulting slots must be exactly 1..n.
    """
    slots = {}
    positionals = [argument for argument in metadata["arguments"] if isinstance(argument, Positional)]

    for positional in filter(lambda x: x.index is not None, positionals):
        if slots.setdefault(positional.index, positional) is not positional:
            raise InvalidPositionalOrderingError(
                f"{cls.__typename__} {metadata['name']!r} positional index {positional.index} is used more than once",
                index=positional.index,
            )

    free = (index for index in itertools.count(1) if index not in slots)
    for positional in filter(lambda x: x.index is None, positionals):
        slots[next(free)] = positional

    if slots and max(slots) != len(slots):
        missing = min(set(range(1, max(slots) + 1)) - slots.keys())
        raise InvalidPositionalOrderingError(
            f"{cls.__typename__} {metadata['name']!r} positional indexes skip position {missing}",
            index=missing,
        )

    ordered = tuple(slots[index] for index in sorted(slots))
    for index, positional in enumerate(ordered, 1):
        if positional.multiple and index < len(ordered):
            raise InvalidPositionalOrderingError(
                f"{cls.__typename__} {metadata['name']!r} multiple positional {positional.identity} must be the last one",
                index=index,
            )
        if positional.required and not all(previous.required for previous in ordered[:index - 1]):
            raise InvalidPositionalOrderingError(
                f"{cls.__typename__} {metadata['name']!r} required positional {positional.identity} cannot follow an optional one",
                index=index,
            )

    metadata["positionals"] = ordered


def _process_groups(cls, metadata):
    """
    Resolve group members (dest or switch spelling) to binding keys; two
    members naming the same argument are a DuplicateIdentityError.
    """
    dests = {argument.dest for argument in metadata["arguments"]}
    resolved = []
    for group in metadata["groups"]:
        members = []
        for member in group.members:
            if member in dests:
                members.append(member)
            elif member in metadata["switches"]:
                members.append(metadata["switches"][member].dest)
            else:
                raise UnknownGroupMemberError(
                    f"{cls.__typename__} {metadata['name']!r} group {group.name!r} refers to unknown argument {member!r}",
                    group=group.name,
                    member=member,
                )
            if members.count(members[-1]) > 1:
                raise DuplicateIdentityError(
                    f"{cls.__typename__} {metadata['name']!r} group {group.name!r} refers to argument {members[-1]!r} more than once",
                    group=group.name,
                    dest=members[-1],
                )
        resolved.append(Group(group.name, *members, kind=group.kind))
    metadata["groups"] = tuple(resolved)


def _process_helper(cls, metadata):
    """
    Add '-h/--help' for the spellings the level leaves free.
    """
    if names := tuple(name for name in ("-h", "--help") if name not in metadata["switches"]):
        helper = Flag(*names, dest="help", descr="print help information")
        for name in names:
            metadata["switches"][name] = helper
        metadata["helper"] = helper
    else:
        metadata["helper"] = None


def _attach_to_parent(self, parent):
    """
    Register parent as the (weak) owner of this spec; a spec has one owner.
    """
    if (owner := self.parent) is not None:
        raise ValueError(f"{type(self).__typename__} {self.name!r} is already a subcommand of {owner.name!r}")
    self._parent = weakref.ref(parent)


class Spec(metaclass=SpecType, sealed=True):
    """
    One level of a command line: arguments, groups, subcommands and help metadata.

    Lifecycle
    - Built once; every check runs in the constructor.
    - Subcommand specs are owned by their parent, which they reference weakly
      (used to compose usage lines, never while matching).
    """

    __introspectable__ = (
        "name",
        "descr",
        "usage",
        "before",
        "after",
        "template",
        "author",
        "hidden",
        "aliases",
        "arguments",
        "positionals",
        "switches",
        "groups",
        "subcommands",
        "commands",
        "helper",
    )

    __displayable__ = (
        "name",
        "descr",
        "arguments",
        "groups",
        "subcommands",
    )

    def __init__(
            self,
            name,
            /,
            *declarations,
            descr=Unset,
            usage=Unset,
            before=Unset,
            after=Unset,
            template=Unset,
            author=Unset,
            hidden=False,
            aliases=(),
            colorful=Unset,
            width=Unset,
            unified=Unset,
            next_line=Unset,
            show_choices=Unset,
    ):
        """
        Build a spec level.

        Parameters
        - name: program or subcommand name.
        - declarations: Flag, Option, Positional, Group and Spec (subcommand) objects.
        - descr: description shown under the usage line.
        - usage: explicit usage line, replaces the synthesized one.
        - before/after: paragraphs shown before/after the help body.
        - template: help template ({usage}, {all-args}, ...); see argot.helper.
        - author: shown by the {author} template tag and under the description.
        - hidden: omit this subcommand from its parent's help.
        - aliases: other words selecting this spec as a subcommand; listed in
          the parent's help, while the binding keeps the name.
        - colorful/width/unified/next_line/show_choices: rendering settings,
          inherited from the parent when Unset.
        """
        metadata = {
            "name": name,
            "descr": descr,
            "usage": usage,
            "before": before,
            "after": after,
            "template": template,
            "author": author,
            "hidden": hidden,
            "aliases": aliases,
            "colorful": colorful,
            "width": width,
            "unified": unified,
            "next_line": next_line,
            "show_choices": show_choices,
        }
        _process_strings(type(self), metadata)
        _process_settings(type(self), metadata)
        _process_declarations(type(self), metadata, declarations)
        _process_positionals(type(self), metadata)
        _process_groups(type(self), metadata)
        _process_helper(type(self), metadata)

        for key, object in metadata.items():
            setattr(self, "_" + key, object)

        self._parent = None
        self._lookup = {argument.dest: argument for argument in self._arguments}
        for child in self._subcommands.values():
            _attach_to_parent(child, self)

        logger.debug(
            "built spec %r: %d arguments, %d groups, %d subcommands",
            self._name, len(self._arguments), len(self._groups), len(self._subcommands),
        )

    @property
    def parent(self):
        """
        The owning spec, or None at the root (or once the owner is gone).
        """
        return self._parent() if self._parent is not None else None

    @property
    def root(self):
        """
        The topmost spec of this hierarchy.
        """
        child, parent = self, self.parent
        while parent:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Ancestry from the root to this spec, as a tuple.
        """
        path = [spec := self]
        while spec.parent:
            path.append(spec := spec.parent)
        return tuple(reversed(path))

    def _inherit(self, name, default):
        spec = self
        while spec is not None:
            if (value := getattr(spec, "_" + name)) is not Unset:
                return value
            spec = spec.parent
        return default

    @property
    def colorful(self):
        return self._inherit("colorful", True)

    @property
    def width(self):
        return self._inherit("width", 80)

    @property
    def unified(self):
        return self._inherit("unified", False)

    @property
    def next_line(self):
        return self._inherit("next_line", False)

    @property
    def show_choices(self):
        return self._inherit("show_choices", True)

    def lookup(self, dest, /):
        """
        Return the argument bound under dest; KeyError when there is none.
        """
        try:
            return self._lookup[dest]
        except KeyError:
            raise KeyError(f"{type(self).__typename__} {self._name!r} has no argument {dest!r}") from None

    def memberships(self, dest, /):
        """
        Names of the groups the argument bound under dest belongs to.
        """
        self.lookup(dest)
        return tuple(group.name for group in self._groups if dest in group.members)


def build_spec(name, declarations=(), /, **metadata):
    """
    Build a Spec from a name and a flat sequence of declarations.

    Declarations are Flag, Option, Positional, Group and Spec objects (the
    latter become subcommands). Keyword metadata is forwarded to Spec.

    Raises
    - ConfigError subclasses (DuplicateIdentityError, UnknownGroupMemberError,
      InvalidPositionalOrderingError) for inconsistent declarations.
    - TypeError/ValueError for malformed values.
    """
    return Spec(name, *declarations, **metadata)


__all__ = (
    "Spec",
    "build_spec",
)

del SpecType
