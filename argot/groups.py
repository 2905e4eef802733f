"""
Argot argument groups.

A Group declares a relationship among arguments of the same spec level:

- CONFLICT: members are mutually exclusive; supplying two of them fails.
- REQUIRES: when the first member (the trigger) is supplied, every other
  member must be present.
- ONE_REQUIRED: at least one member must be present.
- OVERRIDES: members replace each other; the last one supplied wins and the
  earlier ones are dropped from the binding (POSIX-style overrides).

Members are referenced by binding key ('dest'), by any switch spelling
('--name', '-n'), or by passing the argument object itself. They are resolved
against the owning Spec when it is built; unknown members are a configuration
error there, not here.

Quick example:
    >>> from argot.groups import conflict, requires, one_required, overrides
    >>> conflict("output", "--json", "--yaml")
    >>> requires("auth", "--user", "--password")
    >>> one_required("source", "--url", "--file")
    >>> overrides("color", "--color", "--no-color")
"""
from enum import StrEnum

from .arguments import Argument
from .utils import *


class GroupKind(StrEnum):
    CONFLICT = "conflict"
    REQUIRES = "requires"
    ONE_REQUIRED = "one-required"
    OVERRIDES = "overrides"


class Group:
    """
    Named relationship among argument references.

    Properties
    - name: group identity, unique within a spec level.
    - kind: a GroupKind.
    - members: member references in declaration order (strings); for REQUIRES
      the first one is the trigger.
    """

    __slots__ = ("_name", "_kind", "_members")

    name = mirror("name")
    kind = mirror("kind")
    members = mirror("members")

    def __init__(self, name, /, *members, kind):
        if not isinstance(name, str):
            raise TypeError("group 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError("group 'name' cannot be empty")

        try:
            kind = GroupKind(kind)
        except ValueError:
            raise ValueError(f"group 'kind' must be one of {', '.join(map(repr, map(str, GroupKind)))}") from None

        references = []
        for member in members:
            if isinstance(member, Argument):
                member = member.dest
            elif not isinstance(member, str):
                raise TypeError("group members must be strings or arguments")
            elif not (member := member.strip()):
                raise ValueError("group members cannot be empty-strings")
            if member in references:
                raise ValueError(f"group {name!r} cannot contain duplicate members")
            references.append(member)

        minimum = 1 if kind is GroupKind.ONE_REQUIRED else 2
        if len(references) < minimum:
            raise ValueError(f"{kind} group {name!r} needs at least {minimum} {pluralize('member') if minimum > 1 else 'member'}")

        self._name = name
        self._kind = kind
        self._members = tuple(references)

    def __repr__(self):
        return f"group({self._name!r}, {', '.join(map(repr, self._members))}, kind={str(self._kind)!r})"

    def __eq__(self, other):
        if not isinstance(other, Group):
            return NotImplemented
        return (self._name, self._kind, self._members) == (other._name, other._kind, other._members)

    def __hash__(self):
        return hash((self._name, self._kind, self._members))


def conflict(name, /, *members):
    """
    Members are mutually exclusive.
    """
    return Group(name, *members, kind=GroupKind.CONFLICT)


def requires(name, trigger, /, *required):
    """
    When trigger is supplied, every required member must be present.
    """
    return Group(name, trigger, *required, kind=GroupKind.REQUIRES)


def one_required(name, /, *members):
    """
    At least one member must be present.
    """
    return Group(name, *members, kind=GroupKind.ONE_REQUIRED)


def overrides(name, /, *members):
    """
    Members replace each other: only the last one supplied is kept.

    An overridden argument also stops counting for its required flag and its
    conflict groups, so '--color --no-color' is accepted even when the two
    conflict.
    """
    return Group(name, *members, kind=GroupKind.OVERRIDES)


__all__ = (
    "GroupKind",
    "Group",
    "conflict",
    "requires",
    "one_required",
    "overrides",
)
