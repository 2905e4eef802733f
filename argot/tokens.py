r"""
Argot tokenizer: raw argv strings to classified tokens.

Rules (left to right, no lookahead beyond the current string)
- "--" is END_OF_OPTIONS; every later string is POSITIONAL (or BARE).
- "--name" is LONG_FLAG; "--name=value" is VALUE_JOINED, split at the first '='.
  Long names are segments of letters/digits joined by single dashes; anything
  else ("--=x", "--a_b", "---x") is a MalformedTokenError.
- "-abc" is a short cluster: each character becomes a SHORT_FLAG until one of
  them names a value-taking switch; the rest of the string is then that
  switch's value (VALUE_JOINED, a leading '=' is dropped) and clustering stops.
  So "-n5" binds "5" to -n. Characters other than letters, digits and "?" are a
  MalformedTokenError. Unknown characters pass through as SHORT_FLAG tokens
  for the matcher to diagnose.
- "-" and any other string is POSITIONAL while the level still expects a
  positional value, else BARE (a subcommand name or an error, decided by the
  matcher). The decision is taken when the token is pulled, through the
  expecting() callback, so it sees the matcher's latest state.
"""
import logging
import re
from collections import deque
from enum import StrEnum
from typing import NamedTuple

from .faults import FaultCode, MalformedTokenError, ordinal

logger = logging.getLogger(__name__)

_LONG = re.compile(r"--(?P<name>[^\W_]+(?:-[^\W_]+)*)(?:=(?P<value>.*))?", re.DOTALL)
_CHAR = re.compile(r"[^\W_]|\?")


class TokenKind(StrEnum):
    SHORT_FLAG = "short-flag"
    LONG_FLAG = "long-flag"
    VALUE_JOINED = "value-joined"
    POSITIONAL = "positional"
    END_OF_OPTIONS = "end-of-options"
    BARE = "bare"


class Token(NamedTuple):
    """
    A classified unit of input.

    - text: the raw argv string the token comes from.
    - name: switch spelling ("-v", "--name") for flag-like tokens.
    - value: joined value (VALUE_JOINED) or the string itself (POSITIONAL/BARE).
    - index: 1-based position of the raw string in the full argv.
    """
    kind: TokenKind
    text: str
    name: str | None = None
    value: str | None = None
    index: int = 0


class Tokenizer:
    """
    Lazy token stream over the argv slice of one spec level.

    The matcher pulls tokens with next() and pulls option values with
    take_value(); remaining() hands the unread strings to a subcommand.
    """

    def __init__(self, spec, argv, /, *, expecting=lambda: False, index=1):
        self._spec = spec
        self._switches = spec.switches
        self._raw = deque(argv)
        self._pending = deque()
        self._expecting = expecting
        self._index = index - 1
        self._ended = False

    @property
    def ended(self):
        """
        True once "--" has been read.
        """
        return self._ended

    def __iter__(self):
        return self

    def __next__(self):
        if self._pending:
            return self._emit(self._pending.popleft())
        if not self._raw:
            raise StopIteration

        raw = self._raw.popleft()
        self._index += 1

        if self._ended:
            return self._emit(self._plain(raw))
        if raw == "--":
            self._ended = True
            return self._emit(Token(TokenKind.END_OF_OPTIONS, raw, index=self._index))
        if raw.startswith("--"):
            return self._emit(self._long(raw))
        if raw.startswith("-") and raw != "-":
            self._pending.extend(self._short(raw))
            return self._emit(self._pending.popleft())
        return self._emit(self._plain(raw))

    def take_value(self):
        """
        Pop the next raw string as an option value, or return None when it looks
        like a switch, is "--", or the stream is exhausted.
        """
        if self._pending or not self._raw:
            return None
        raw = self._raw[0]
        if raw == "--" or (raw.startswith("-") and raw != "-"):
            return None
        self._raw.popleft()
        self._index += 1
        return self._emit(Token(TokenKind.POSITIONAL, raw, value=raw, index=self._index))

    def remaining(self):
        """
        Drain the unread raw strings; returns (strings, index of the first one).
        """
        raw, self._raw = list(self._raw), deque()
        return raw, self._index + 1

    def _emit(self, token):
        logger.debug("token %s %r at %d", token.kind, token.text, token.index)
        return token

    def _plain(self, raw):
        kind = TokenKind.POSITIONAL if self._expecting() else TokenKind.BARE
        return Token(kind, raw, value=raw, index=self._index)

    def _malformed(self, raw):
        route = " ".join(step.name for step in self._spec.path)
        return MalformedTokenError(
            "bad form of argument %r at %s position" % (raw, ordinal(self._index)),
            title="malformed argument",
            code=FaultCode.MALFORMED_TOKEN,
            hint="use '-x', '--name' or '--name=value'; run '%s --help' to see valid spellings" % route,
            input=raw,
            index=self._index,
            spec=self._spec,
        )

    def _long(self, raw):
        if not (match := _LONG.fullmatch(raw)):
            raise self._malformed(raw)
        name = "--" + match["name"]
        if match["value"] is None:
            return Token(TokenKind.LONG_FLAG, raw, name, index=self._index)
        return Token(TokenKind.VALUE_JOINED, raw, name, match["value"], self._index)

    def _short(self, raw):
        tokens = []
        for offset, char in enumerate(raw[1:], 1):
            if not _CHAR.fullmatch(char):
                raise self._malformed(raw)
            name = "-" + char
            argument = self._switches.get(name)
            if argument is not None and argument.takes_value and offset + 1 < len(raw):
                value = raw[offset + 1:]
                tokens.append(Token(TokenKind.VALUE_JOINED, raw, name, value.removeprefix("="), self._index))
                break
            tokens.append(Token(TokenKind.SHORT_FLAG, raw, name, index=self._index))
        return tokens


__all__ = (
    "TokenKind",
    "Token",
    "Tokenizer",
)
