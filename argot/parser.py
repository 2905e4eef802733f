"""
Argot parse entry points.

- parse(spec, argv): the sole parse operation. Returns a ParseResult, a
  HelpRequested, or the ParseError describing the first failure; it never
  raises for bad user input and never writes output.
- invoke(spec, argv): convenience runner for a CLI driver. Returns the
  ParseResult and either raises the ParseError, or (shell=True) prints help or
  the rendered fault with rich and exits.

Levels are processed outer to inner:
1. bind the current level (its bind errors surface first);
2. when a subcommand was chosen, parse it with the rest of argv and keep the
   outcome; a help request there wins over everything else;
3. validate the current level;
4. only then report the subcommand's failure, if any.
"""
import logging
import shlex
import sys
from collections.abc import Iterable

from .bindings import HelpRequested, ParseResult
from .faults import ParseError, trigger
from .helper import print_help
from .matcher import Matcher
from .utils import *
from .validation import validate

logger = logging.getLogger(__name__)


def _parse_level(spec, argv, index):
    matcher = Matcher(spec, argv, index=index)
    binding = matcher.match()
    if isinstance(binding, HelpRequested):
        return binding

    nested = None
    if matcher.subcommand is not None:
        child = spec.subcommands[matcher.subcommand]
        try:
            nested = _parse_level(child, *matcher.remaining)
        except ParseError as fault:
            logger.debug("subcommand %r failed: %s", child.name, fault)
            nested = fault
        if isinstance(nested, HelpRequested):
            return nested

    validate(spec, binding)

    if isinstance(nested, ParseError):
        raise nested

    return ParseResult(binding, matcher.subcommand, nested, spec)


def parse(spec, argv, /):
    """
    Parse argv (without the program name) against spec.

    Returns
    - ParseResult on success (binding, chosen subcommand, nested result).
    - HelpRequested when '-h/--help' or 'help [name]' was given.
    - ParseError (not raised) for the first failure: TokenError, BindError
      or ValidationError.
    """
    if isinstance(argv, str) or not isinstance(argv, Iterable):
        raise TypeError("parse() argv must be an iterable of strings")
    argv = list(argv)
    if not all(isinstance(item, str) for item in argv):
        raise TypeError("parse() argv must be an iterable of strings")

    logger.debug("parsing %r against %r", argv, spec.name)
    try:
        return _parse_level(spec, argv, 1)
    except ParseError as fault:
        logger.debug("parse failed: %s", fault)
        return fault


def invoke(spec, argv=Unset, /, *, shell=False, fancy=False):
    """
    Parse and surface the outcome the way a command-line program would.

    Parameters
    - argv:
      • Unset: use sys.argv[1:].
      • str: shell-like string, split with shlex.split.
      • Iterable[str]: pre-tokenized arguments.
    - shell: render help and faults with rich and exit instead of returning
      HelpRequested or raising.
    - fancy: draw faults inside a panel (shell mode).

    Returns
    - ParseResult, or HelpRequested outside shell mode.

    Raises
    - ParseError outside shell mode.
    """
    if argv is Unset:
        argv = sys.argv[1:]
    elif isinstance(argv, str):
        argv = shlex.split(argv)

    outcome = parse(spec, argv)
    if isinstance(outcome, HelpRequested) and shell:
        print_help(outcome.spec)
        sys.exit(0)
    if isinstance(outcome, ParseError):
        trigger(outcome, shell=shell, fancy=fancy, colorful=spec.colorful)
    return outcome


__all__ = (
    "parse",
    "invoke",
)
