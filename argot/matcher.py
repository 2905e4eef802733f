"""
Argot matcher: bind a token stream to the argument slots of one spec level.

One left-to-right pass, no backtracking. Per token:
- switch tokens (SHORT_FLAG, LONG_FLAG, VALUE_JOINED)
  • resolve the spelling against the level's switches; unknown spellings fail
    with UnknownArgumentError and the nearest known spelling as suggestion.
  • the help flag short-circuits into HelpRequested.
  • count the occurrence; a second occurrence of a non-multiple argument fails
    with TooManyOccurrencesError.
  • flags take no value (a joined value is an UnexpectedValueError); options
    take their joined value, or between min and max of the following strings
    that do not look like switches (too few is a MissingValueError).
- value tokens (POSITIONAL, BARE)
  • before "--", "help [name...]" requests help when the level has
    subcommands, none of them is called or aliased "help" and no positional
    value has been bound yet.
  • before "--", and while no required positional is still empty, a word
    naming (or aliasing) a subcommand switches to it.
  • otherwise the value fills the next positional slot (a multiple positional
    absorbs every later value); with no slot left it is an UnknownArgumentError.
- every value is split on the argument's delimiter, then checked against its
  choices (InvalidValueError).
- supplying a member of an overrides group drops whatever its fellow members
  had bound so far (last one wins).

After the stream, defaults are bound to every argument that was not supplied
and whose overrides partners were not supplied either.
Arity counts values as supplied, before delimiter splitting.
"""
import logging
from collections import Counter, defaultdict

from .arguments import Option
from .bindings import Binding, HelpRequested, Match
from .faults import (
    FaultCode,
    UnknownArgumentError,
    MissingValueError,
    TooManyOccurrencesError,
    InvalidValueError,
    UnexpectedValueError,
    ordinal,
)
from .groups import GroupKind
from .helper import render_help
from .tokens import TokenKind, Tokenizer
from .utils import *

logger = logging.getLogger(__name__)


class Matcher:
    """
    Per-invocation binding state for one spec level; the spec is only read.

    After match() returns a Binding, subcommand holds the name of the chosen
    subcommand (or None) and remaining the (argv, index) slice handed to it.
    """

    def __init__(self, spec, argv, /, *, index=1):
        self.spec = spec
        self.subcommand = None
        self.remaining = ([], index)
        self._switches = spec.switches
        self._positionals = spec.positionals
        self._subcommands = spec.subcommands
        self._commands = spec.commands
        self._rivals = defaultdict(set)
        for group in filter(lambda x: x.kind is GroupKind.OVERRIDES, spec.groups):
            for dest in group.members:
                self._rivals[dest].update(member for member in group.members if member != dest)
        self._values = defaultdict(list)
        self._occurrences = Counter()
        self._cursor = 0
        self._tokens = Tokenizer(spec, argv, expecting=self._expecting, index=index)

    @property
    def route(self):
        return " ".join(step.name for step in self.spec.path)

    def _expecting(self):
        return self._cursor < len(self._positionals)

    def _switchable(self):
        """
        A word may pick a subcommand only when no required positional still
        waits for a value.
        """
        if self._tokens.ended or not self._subcommands:
            return False
        return not any(
            positional.required and positional.default is None and not self._values[positional.dest]
            for positional in self._positionals
        )

    def _helpable(self):
        """
        The 'help' word asks for help while no positional value is bound, even
        when a required positional is still empty.
        """
        if self._tokens.ended or not self._subcommands or "help" in self._commands:
            return False
        return not any(self._values[positional.dest] for positional in self._positionals)

    def _override(self, argument):
        for dest in self._rivals[argument.dest]:
            if self._occurrences.pop(dest, 0):
                self._values.pop(dest, None)
                logger.debug("%r overridden by %r", dest, argument.dest)

    def _overridden(self, dest):
        return any(self._occurrences[rival] for rival in self._rivals[dest])

    def match(self):
        """
        Consume the whole stream; return a Binding, or HelpRequested.
        """
        for token in self._tokens:
            match token.kind:
                case TokenKind.END_OF_OPTIONS:
                    continue
                case TokenKind.SHORT_FLAG | TokenKind.LONG_FLAG | TokenKind.VALUE_JOINED:
                    argument = self._resolve(token)
                    if argument is self.spec.helper:
                        if token.kind is TokenKind.VALUE_JOINED:
                            raise self._unexpected(argument, token)
                        logger.debug("help requested by %r at %d", token.name, token.index)
                        return HelpRequested(render_help(self.spec), self.spec)
                    self._occur(argument, token)
                    if isinstance(argument, Option):
                        self._take(argument, token)
                    elif token.kind is TokenKind.VALUE_JOINED:
                        raise self._unexpected(argument, token)
                case TokenKind.POSITIONAL | TokenKind.BARE:
                    if token.text == "help" and self._helpable():
                        return self._help(token)
                    if self._switchable() and token.text in self._commands:
                        self.subcommand = self._commands[token.text].name
                        self.remaining = self._tokens.remaining()
                        logger.debug("switching to subcommand %r by %r at %d", self.subcommand, token.text, token.index)
                        break
                    if token.kind is TokenKind.BARE:
                        raise self._unknown(token)
                    self._fill(token)
        return self._finish()

    def _resolve(self, token):
        try:
            return self._switches[token.name]
        except KeyError:
            pass

        long = token.name.startswith("--")
        suggestion = suggest(token.name, [name for name in self._switches if name.startswith("--") == long])
        if suggestion:
            hint = "did you mean %r? you can also run '%s --help' to see all arguments" % (suggestion, self.route)
        else:
            hint = "try '%s --help' to see all available arguments" % self.route
        raise UnknownArgumentError(
            "unknown argument %r at %s position" % (token.name, ordinal(token.index)),
            title="unknown argument",
            code=FaultCode.UNKNOWN_ARGUMENT,
            hint=hint,
            input=token.name,
            index=token.index,
            suggestion=suggestion,
            spec=self.spec,
        )

    def _unknown(self, token):
        """
        A word that is neither a positional value nor a subcommand.
        """
        if self._subcommands and not self._tokens.ended:
            suggestion = suggest(token.text, [word for word, child in self._commands.items() if not child.hidden])
            if suggestion:
                hint = "did you mean %r? you can also run '%s --help' to see available subcommands" % (suggestion, self.route)
            else:
                hint = "run '%s --help' to see available subcommands" % self.route
            message = "unknown subcommand %r at %s position" % (token.text, ordinal(token.index))
        else:
            suggestion = None
            hint = "remove this extra value or run '%s --help' to see the expected usage" % self.route
            message = "unexpected argument %r at %s position" % (token.text, ordinal(token.index))
        return UnknownArgumentError(
            message,
            title="unknown argument",
            code=FaultCode.UNKNOWN_ARGUMENT,
            hint=hint,
            input=token.text,
            index=token.index,
            suggestion=suggestion,
            spec=self.spec,
        )

    def _unexpected(self, argument, token):
        return UnexpectedValueError(
            "flag %r at %s position cannot take a value" % (token.name, ordinal(token.index)),
            title="flag cannot take a value",
            code=FaultCode.UNEXPECTED_VALUE,
            hint="remove everything from '=' (for example: %s)" % token.name,
            input=token.text,
            index=token.index,
            argument=argument.dest,
            spec=self.spec,
        )

    def _occur(self, argument, token):
        if self._occurrences[argument.dest] and not argument.multiple:
            kind = "option" if isinstance(argument, Option) else "flag"
            raise TooManyOccurrencesError(
                "%s %r at %s position was already provided" % (kind, token.name, ordinal(token.index)),
                title="duplicated %s" % kind,
                code=FaultCode.TOO_MANY_OCCURRENCES,
                hint="keep a single %s; %r can be specified only once" % (kind, argument.identity),
                input=token.name,
                index=token.index,
                argument=argument.dest,
                spec=self.spec,
            )
        self._override(argument)
        self._occurrences[argument.dest] += 1

    def _take(self, option, token):
        """
        Gather the raw values of one option occurrence.
        """
        lower, upper = option.arity
        if token.kind is TokenKind.VALUE_JOINED:
            values = [token]
        else:
            values = []
            while len(values) < upper and (value := self._tokens.take_value()) is not None:
                values.append(value)

        if len(values) < lower:
            if lower == upper:
                expected = "a value" if lower == 1 else "%d %s" % (lower, pluralize("value"))
            else:
                expected = "at least %d %s" % (lower, pluralize("value") if lower > 1 else "value")
            metavar = "<%s>" % (option.metavar or option.dest.upper().replace("_", "-"))
            raise MissingValueError(
                "option %r at %s position expects %s" % (token.name, ordinal(token.index), expected),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="pass it as '%s %s' or '%s=%s'" % (token.name, metavar, token.name, metavar),
                input=token.name,
                index=token.index,
                argument=option.dest,
                spec=self.spec,
            )

        for value in values:
            self._bind(option, value.value, value.index)

    def _fill(self, token):
        positional = self._positionals[self._cursor]
        self._override(positional)
        self._bind(positional, token.value, token.index)
        self._occurrences[positional.dest] += 1
        if not positional.multiple:
            self._cursor += 1

    def _split(self, argument, value):
        return value.split(argument.delimiter) if argument.delimiter else [value]

    def _bind(self, argument, value, index):
        for part in self._split(argument, value):
            if argument.choices and part not in argument.choices:
                raise InvalidValueError(
                    "invalid value %r for %r at %s position" % (part, argument.identity, ordinal(index)),
                    title="invalid value",
                    code=FaultCode.INVALID_VALUE,
                    hint="use one of: %s" % ", ".join(argument.choices),
                    input=part,
                    index=index,
                    argument=argument.dest,
                    spec=self.spec,
                )
            self._values[argument.dest].append(part)
        logger.debug("bound %r to %r", value, argument.dest)

    def _help(self, token):
        """
        'help [name...]': help of this level, or of the named subcommand chain.
        """
        target = self.spec
        names, index = self._tokens.remaining()
        for offset, name in enumerate(names):
            try:
                target = target.commands[name]
            except KeyError:
                suggestion = suggest(name, list(target.commands))
                raise UnknownArgumentError(
                    "unknown subcommand %r at %s position" % (name, ordinal(index + offset)),
                    title="unknown subcommand",
                    code=FaultCode.UNKNOWN_ARGUMENT,
                    hint="run '%s help' to see available subcommands" % " ".join(step.name for step in target.path),
                    input=name,
                    index=index + offset,
                    suggestion=suggestion,
                    spec=target,
                ) from None
        logger.debug("help requested for %r by %r at %d", target.name, token.text, token.index)
        return HelpRequested(render_help(target), target)

    def _finish(self):
        """
        Bind defaults, then freeze the state into a Binding.
        """
        matches = {}
        for argument in self.spec.arguments:
            dest = argument.dest
            if not self._occurrences[dest] and argument.default is not None and not self._overridden(dest):
                self._values[dest] = self._split(argument, argument.default)
                logger.debug("defaulted %r to %r", dest, argument.default)
            if self._occurrences[dest] or self._values[dest]:
                matches[dest] = Match(tuple(self._values[dest]), self._occurrences[dest])
        return Binding(matches, known=tuple(argument.dest for argument in self.spec.arguments))


__all__ = (
    "Matcher",
)
