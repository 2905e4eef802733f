"""
Argot validator: check a completed Binding against its spec level.

Checks run in a fixed order so diagnostics are deterministic:
1. required arguments that are neither supplied nor defaulted, nor replaced by
   a supplied member of one of their overrides groups (MissingRequiredError);
2. conflict groups with two or more supplied members, naming the first two in
   declaration order (ConflictingArgumentsError);
3. requires groups whose trigger is supplied while a required member is not
   present (GroupRequirementUnmetError);
4. one-required groups with no present member (GroupRequirementUnmetError).

"Supplied" means given on the command line; "present" also counts defaults.
"""
import logging

from .faults import (
    FaultCode,
    MissingRequiredError,
    ConflictingArgumentsError,
    GroupRequirementUnmetError,
)
from .groups import GroupKind

logger = logging.getLogger(__name__)


def _route(spec):
    return " ".join(step.name for step in spec.path)


def _overridden(spec, binding, dest):
    return any(
        binding.occurrences_of(member)
        for group in spec.groups if group.kind is GroupKind.OVERRIDES and dest in group.members
        for member in group.members if member != dest
    )


def _check_required(spec, binding):
    for argument in spec.arguments:
        if argument.required and not binding.is_present(argument.dest) and not _overridden(spec, binding, argument.dest):
            raise MissingRequiredError(
                "missing required argument %r" % argument.identity,
                title="missing required argument",
                code=FaultCode.MISSING_REQUIRED,
                hint="add %r; run '%s --help' to see the expected usage" % (argument.identity, _route(spec)),
                input=argument.identity,
                argument=argument.dest,
                spec=spec,
            )


def _check_conflicts(spec, binding, order):
    for group in filter(lambda x: x.kind is GroupKind.CONFLICT, spec.groups):
        supplied = sorted((dest for dest in group.members if binding.occurrences_of(dest)), key=order.get)
        if len(supplied) >= 2:
            first, second = (spec.lookup(dest) for dest in supplied[:2])
            raise ConflictingArgumentsError(
                "%r cannot be used together with %r" % (first.identity, second.identity),
                title="conflicting arguments",
                code=FaultCode.CONFLICTING_ARGUMENTS,
                hint="keep only one of %s" % ", ".join(repr(spec.lookup(dest).identity) for dest in group.members),
                input=second.identity,
                argument=first.dest,
                conflicting=second.dest,
                group=group.name,
                spec=spec,
            )


def _check_requires(spec, binding):
    for group in filter(lambda x: x.kind is GroupKind.REQUIRES, spec.groups):
        trigger, *required = group.members
        if not binding.occurrences_of(trigger):
            continue
        for dest in required:
            if not binding.is_present(dest):
                source, target = spec.lookup(trigger), spec.lookup(dest)
                raise GroupRequirementUnmetError(
                    "%r requires %r" % (source.identity, target.identity),
                    title="unmet requirement",
                    code=FaultCode.GROUP_REQUIREMENT_UNMET,
                    hint="add %r or remove %r" % (target.identity, source.identity),
                    input=target.identity,
                    argument=target.dest,
                    group=group.name,
                    spec=spec,
                )


def _check_one_required(spec, binding):
    for group in filter(lambda x: x.kind is GroupKind.ONE_REQUIRED, spec.groups):
        if not any(binding.is_present(dest) for dest in group.members):
            identities = [spec.lookup(dest).identity for dest in group.members]
            raise GroupRequirementUnmetError(
                "one of %s is required" % ", ".join(map(repr, identities)),
                title="unmet requirement",
                code=FaultCode.GROUP_REQUIREMENT_UNMET,
                hint="add at least one of %s; run '%s --help' for details" % (", ".join(map(repr, identities)), _route(spec)),
                input=group.name,
                group=group.name,
                spec=spec,
            )


def validate(spec, binding, /):
    """
    Validate the binding of one spec level; raise the first ValidationError.
    """
    order = {argument.dest: index for index, argument in enumerate(spec.arguments)}
    _check_required(spec, binding)
    _check_conflicts(spec, binding, order)
    _check_requires(spec, binding)
    _check_one_required(spec, binding)
    logger.debug("validated %r", spec.name)


__all__ = (
    "validate",
)
