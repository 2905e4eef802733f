"""
Argot faults (configuration and parse errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every fault, grouped by domain.
- ConfigError: raised while building a Spec (duplicate identities, unknown
  group members, broken positional ordering). These are programming errors of
  the application author and are always raised.
- ParseError: raised inside the parse phases and handed back to the caller as a
  value by argot.parse(). Families: TokenError, BindError, ValidationError.
- trigger(): surface a parse fault (raise, or render and exit in shell mode).

UX goals
- Position-first messages ("unknown argument '--nmae' at second position").
- Lowercase, one-sentence bodies with a single actionable hint.
- Styling configurable through __styles__ in __main__; the program name shown in
  the header can be overridden with __prog__ and codes remapped with __codes__.
"""
import functools
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - configuration (101xx)
      • DUPLICATE_IDENTITY, UNKNOWN_GROUP_MEMBER, INVALID_POSITIONAL_ORDERING
    - tokens (111xx)
      • MALFORMED_TOKEN
    - binding (112xx)
      • UNKNOWN_ARGUMENT, MISSING_VALUE, TOO_MANY_OCCURRENCES, INVALID_VALUE,
        UNEXPECTED_VALUE
    - validation (113xx)
      • MISSING_REQUIRED, CONFLICTING_ARGUMENTS, GROUP_REQUIREMENT_UNMET
    """
    # --- configuration errors (101xx) ---
    DUPLICATE_IDENTITY          = 10101
    UNKNOWN_GROUP_MEMBER        = 10102
    INVALID_POSITIONAL_ORDERING = 10103

    # --- token errors (111xx) ---
    MALFORMED_TOKEN             = 11101

    # --- binding errors (112xx) ---
    UNKNOWN_ARGUMENT            = 11201
    MISSING_VALUE               = 11202
    TOO_MANY_OCCURRENCES        = 11203
    INVALID_VALUE               = 11204
    UNEXPECTED_VALUE            = 11205

    # --- validation errors (113xx) ---
    MISSING_REQUIRED            = 11301
    CONFLICTING_ARGUMENTS       = 11302
    GROUP_REQUIREMENT_UNMET     = 11303

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


@functools.cache
def ordinal(number, /):
    """
    Human-friendly ordinal for a 1-based position ("first", "eleventh" as "11th").
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


class ConfigError(ValueError):
    """
    Base class for Spec construction failures.
    """
    code = Unset

    def __init__(self, message, /, **options):
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)


class DuplicateIdentityError(ConfigError):
    code = FaultCode.DUPLICATE_IDENTITY


class UnknownGroupMemberError(ConfigError):
    code = FaultCode.UNKNOWN_GROUP_MEMBER


class InvalidPositionalOrderingError(ConfigError):
    code = FaultCode.INVALID_POSITIONAL_ORDERING


class ParseError(Exception):
    """
    Base class for faults caused by the user's command line.

    Every parse fault carries its message plus a read-only options mapping:
    code, title, hint, input (offending token text or argument identity),
    index (1-based argv position, when known), argument (binding key of the
    argument involved), suggestion (nearest known name, when any) and spec (the
    level where the fault happened). Rendering options (shell, colorful, fancy)
    are merged in through __replace__ just before the fault is surfaced.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def title(self):
        return self.options.get("title")

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def input(self):
        return self.options.get("input")

    @property
    def index(self):
        return self.options.get("index")

    @property
    def argument(self):
        return self.options.get("argument")

    @property
    def suggestion(self):
        return self.options.get("suggestion")

    @property
    def spec(self):
        return self.options.get("spec")

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return (
            type(self) is type(other) and
            self.message == other.message and
            self.code == other.code and
            self.input == other.input and
            self.argument == other.argument
        )

    def __hash__(self):
        return hash((type(self), self.message, self.code, self.input, self.argument))

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r}, code={self.code!r}, input={self.input!r})"

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        root = self.spec.root.name if self.spec is not None else "argot"
        prog = text(getattr(main, "__prog__", root), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " - ",
            text(self.code.normalize() if self.code else "", styler("code")),
            " | ",
            text((self.title or "").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class TokenError(ParseError): ...
class MalformedTokenError(TokenError): ...

class BindError(ParseError): ...
class UnknownArgumentError(BindError): ...
class MissingValueError(BindError): ...
class TooManyOccurrencesError(BindError): ...
class InvalidValueError(BindError): ...
class UnexpectedValueError(BindError): ...

class ValidationError(ParseError): ...
class MissingRequiredError(ValidationError): ...
class ConflictingArgumentsError(ValidationError): ...
class GroupRequirementUnmetError(ValidationError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseError).
    - options are merged into the fault via __replace__(**options) before triggering.
    - outside shell mode the fault is raised; in shell mode it is rendered via
      rich on stderr and the process exits with status 1.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "ConfigError",
    "DuplicateIdentityError",
    "UnknownGroupMemberError",
    "InvalidPositionalOrderingError",
    "ParseError",
    "TokenError",
    "MalformedTokenError",
    "BindError",
    "UnknownArgumentError",
    "MissingValueError",
    "TooManyOccurrencesError",
    "InvalidValueError",
    "UnexpectedValueError",
    "ValidationError",
    "MissingRequiredError",
    "ConflictingArgumentsError",
    "GroupRequirementUnmetError",
    "trigger",
)
