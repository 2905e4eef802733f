"""
Argot help and usage rendering (rich-based, color-aware).

A pure projection of a Spec: nothing here looks at a Binding, and the same
spec rendered at the same width always yields the same text.

Layout (default)
    [before]

    usage: prog sub [-h] [-v] --name <NAME> [<FILE>...] <COMMAND>

    description
    author

    positionals:
      <FILE>...          files to read
    options:
      -n, --name <NAME>  name to use [default: x] [values: a, b]
    flags:
      -h, --help         print help information
    subcommands:
      build              build the project [aliases: b]

    [after]

- Sections list visible arguments in declaration order (the help flag first).
- unified=True merges options and flags into a single "options" section.
- next_line=True always puts descriptions on the line below the names.
- show_choices=False drops the "[values: ...]" annotation.
- A template replaces the layout; tags are {bin}, {author}, {about}, {usage},
  {all-args}, {unified}, {flags}, {options}, {positionals}, {subcommands},
  {before-help} and {after-help}. Unknown tags are written back verbatim.

Palette keys
- usage-label, program-name, usage-section, description-section, author-section,
  epilog-section, group-label, argument-description, option-name, flag-name,
  positional-name, metavar, choice, annotation, subcommand

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, styling is suppressed.
"""
import io
import logging
import re
from collections import defaultdict, deque

from rich.console import Console
from rich.containers import Lines
from rich.text import Text

from .arguments import Flag, Option, Positional
from .utils import *

logger = logging.getLogger(__name__)

_PADDING = 2
_TAGS = re.compile(r"(\{[\w-]*\})")


class _Helper:
    """
    Render one spec level against a console (its width drives wrapping).
    """

    def __init__(self, spec, console, /, *, colorful):
        self.spec = spec
        self.console = console
        self.width = console.width
        self.colorful = colorful
        self.styles = defaultdict(str, {
            # === Head sections ===
            "usage-label": "bold #00E6FF",  # CYAN → signature info color
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
            "description-section": "italic #A3A3A3",  # Neutral gray
            "author-section": "#737373",
            "epilog-section": "#737373",  # Dim footer gray

            # === Groups / arguments ===
            "group-label": "bold #FFFFFF",  # Pure white headers
            "argument-description": "#9CA3AF",  # Muted gray

            # === Names / metavars ===
            "option-name": "bold #00E6FF",  # CYAN for options
            "flag-name": "bold #22C55E",  # GREEN for flags
            "positional-name": "bold #FFD600",
            "metavar": "bold #FFD600",  # AMBER for parameters
            "choice": "bold #FF4D94",  # MAGENTA → choices stand out
            "annotation": "#737373",

            # === Subcommands ===
            "subcommand": "bold #36C5F0",
        } | getattr(__import__("__main__"), "__styles__", {}))

        visible = [argument for argument in spec.arguments if not argument.hidden]
        helper = [spec.helper] if spec.helper else []
        self.positionals = [argument for argument in spec.positionals if not argument.hidden]
        self.options = [argument for argument in visible if isinstance(argument, Option)]
        self.flags = helper + [argument for argument in visible if isinstance(argument, Flag)]
        self.unified = helper + [argument for argument in visible if isinstance(argument, Flag | Option)]
        self.subcommands = [child for child in spec.subcommands.values() if not child.hidden]

        heads = [self.head(argument) for argument in self.positionals + self.unified]
        heads += [Text(child.name) for child in self.subcommands]
        longest = max(map(len, heads), default=0)
        # Description column: just past the longest head, but never past half the width.
        self.indent = min(_PADDING + longest + 2, max(self.width // 2, _PADDING + 4))

    def styler(self, style):
        return self.styles[style] if self.colorful else ""

    def text(self, fragment, style=""):
        if not fragment:
            return Text("")
        if not self.colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    def paragraph(self, fragment, style, /, *, indent=0):
        """
        Wrap a free-text block to the available width, with a hanging indent.
        """
        lines = self.text(fragment, self.styler(style)).wrap(self.console, self.width - indent)
        for line in lines:
            line.rstrip()
        return Text("\n" + " " * indent).join(lines)

    def label(self, argument):
        return argument.metavar or argument.dest.upper().replace("_", "-")

    def metavar(self, argument):
        """
        Value placeholder(s) of an argument, shaped by its arity.
        """
        metavar = self.text(f"<{self.label(argument)}>", self.styler("metavar"))
        lower, upper = argument.arity
        if isinstance(argument, Positional):
            return Text.assemble(metavar, "...") if upper is None else metavar
        values = Text(" ").join(metavar.copy() for _ in range(lower))
        if upper > lower:
            values.append(" ").append(Text.assemble("[", metavar, "...]"))
        return values

    def names(self, argument):
        style = "option-name" if isinstance(argument, Option) else "flag-name"
        return Text(", ").join(
            self.text(name, self.styler(style)) for name in (argument.short, argument.long) if name
        )

    def head(self, argument):
        """
        Names column of an entry ("-n, --name <NAME>", "<FILE>...").
        """
        if isinstance(argument, Positional):
            return self.metavar(argument)
        if isinstance(argument, Option):
            return Text.assemble(self.names(argument), " ", self.metavar(argument))
        return self.names(argument)

    def annotations(self, argument):
        """
        Trailing "[default: x]" and "[values: a, b]" annotations.
        """
        annotations = []
        if argument.default is not None:
            annotations.append(Text.assemble(
                self.text("[default: ", self.styler("annotation")),
                self.text(argument.default, self.styler("metavar")) if argument.default else Text('""'),
                self.text("]", self.styler("annotation")),
            ))
        if argument.choices and self.spec.show_choices:
            annotations.append(Text.assemble(
                self.text("[values: ", self.styler("annotation")),
                Text(", ").join(self.text(choice, self.styler("choice")) for choice in argument.choices),
                self.text("]", self.styler("annotation")),
            ))
        return Text(" ").join(annotations)

    def entry(self, head, descr, annotations=None):
        """
        One help line: names column then the wrapped description, which hangs
        at the description column (or starts on the next line when the names
        are too wide or next_line is set).
        """
        section = Text(" " * _PADDING).append(head)
        if parts := [part for part in (self.text(descr, self.styler("argument-description")), annotations) if part]:
            if self.spec.next_line or len(section) > self.indent - 2:
                section.append("\n").append(" " * self.indent)
            else:
                section.append(" " * (self.indent - len(section)))
            section.append(self.paragraph(Text(" ").join(parts), "argument-description", indent=self.indent))
        return section

    def entries(self, arguments):
        return [self.entry(self.head(argument), argument.descr, self.annotations(argument)) for argument in arguments]

    def commands(self):
        """
        Subcommand lines; aliases trail the description as "[aliases: a, b]".
        """
        entries = []
        for child in self.subcommands:
            annotation = None
            if child.aliases:
                annotation = Text.assemble(
                    self.text("[aliases: ", self.styler("annotation")),
                    Text(", ").join(self.text(alias, self.styler("subcommand")) for alias in child.aliases),
                    self.text("]", self.styler("annotation")),
                )
            entries.append(self.entry(self.text(child.name, self.styler("subcommand")), child.descr, annotation))
        return entries

    def section(self, label, entries):
        if not entries:
            return None
        section = self.text(label, self.styler("group-label")).append(":")
        for entry in entries:
            section.append("\n").append(entry)
        return section

    def all_args(self):
        sections = [self.section("positionals", self.entries(self.positionals))]
        if self.spec.unified:
            sections.append(self.section("options", self.entries(self.unified)))
        else:
            sections.append(self.section("options", self.entries(self.options)))
            sections.append(self.section("flags", self.entries(self.flags)))
        sections.append(self.section("subcommands", self.commands()))
        return Text("\n\n").join(section for section in sections if section)

    def program(self):
        return self.text(" ".join(step.name for step in self.spec.path), self.styler("program-name"))

    def usage(self, *, label=True):
        """
        The usage line: explicit usage, or synthesized from the visible arguments
        and wrapped with a hanging indent under the first item.
        """
        usage = Text()
        if label:
            usage.append("usage", self.styler("usage-label")).append(": ")
        if self.spec.usage:
            return usage.append(self.text(self.spec.usage, self.styler("usage-section")))

        usage.append(self.program()).append(" ")
        offset = len(usage)
        inputs = deque()

        for argument in self.flags:
            inputs.append(Text.assemble("[", self.text(argument.short or argument.long, self.styler("flag-name")), "]"))

        for argument in self.options:
            name = self.text(argument.long or argument.short, self.styler("option-name"))
            item = Text.assemble(name, " ", self.metavar(argument))
            inputs.append(item if argument.required else Text.assemble("[", item, "]"))

        for argument in self.positionals:
            item = self.metavar(argument)
            inputs.append(item if argument.required else Text.assemble("[", item, "]"))

        if self.spec.subcommands:
            inputs.append(self.text("<COMMAND>", self.styler("subcommand")))

        try:
            lines = Lines([inputs.popleft()])
        except IndexError:
            lines = Lines()

        while inputs:
            if len(lines[-1]) + 1 + len(input := inputs.popleft()) > self.width - offset:
                lines.append(input)
            else:
                lines[-1].append(Text(" ") + input)

        try:
            usage.append(lines.pop(0))
        except IndexError:
            usage.rstrip()
        for line in lines:
            usage.append("\n").append(" " * offset).append(line)
        return usage

    def about(self):
        blocks = []
        if self.spec.descr:
            blocks.append(self.paragraph(self.spec.descr, "description-section"))
        if self.spec.author:
            blocks.append(self.paragraph(self.spec.author, "author-section"))
        return Text("\n").join(blocks)

    def render(self):
        if self.spec.template:
            return self.templated(self.spec.template)

        blocks = []
        if self.spec.before:
            blocks.append(self.paragraph(self.spec.before, "epilog-section"))
        blocks.append(self.usage())
        if about := self.about():
            blocks.append(about)
        if arguments := self.all_args():
            blocks.append(arguments)
        if self.spec.after:
            blocks.append(self.paragraph(self.spec.after, "epilog-section"))
        return Text("\n\n").join(blocks)

    def templated(self, template):
        """
        Fill a help template; unknown tags are written back unchanged.
        """
        tags = {
            "bin": self.program,
            "author": lambda: self.text(self.spec.author, self.styler("author-section")),
            "about": lambda: self.text(self.spec.descr, self.styler("description-section")),
            "usage": lambda: self.usage(label=False),
            "all-args": self.all_args,
            "unified": lambda: Text("\n").join(self.entries(self.unified)),
            "flags": lambda: Text("\n").join(self.entries(self.flags)),
            "options": lambda: Text("\n").join(self.entries(self.options)),
            "positionals": lambda: Text("\n").join(self.entries(self.positionals)),
            "subcommands": lambda: Text("\n").join(self.commands()),
            "before-help": lambda: self.text(self.spec.before, self.styler("epilog-section")),
            "after-help": lambda: self.text(self.spec.after, self.styler("epilog-section")),
        }
        rendered = Text()
        for piece in _TAGS.split(str(template)):
            if piece.startswith("{") and piece.endswith("}") and (tag := piece[1:-1]) in tags:
                logger.debug("help template tag %r", tag)
                rendered.append(tags[tag]())
            else:
                rendered.append(piece)
        return rendered


def _capture(width):
    return Console(width=width, file=io.StringIO(), color_system=None, force_terminal=False, highlight=False)


def _plain(text):
    return "\n".join(line.rstrip() for line in text.plain.splitlines()).strip("\n")


def render_help(spec, /, *, width=Unset):
    """
    Render the help of a spec level as plain text.

    The width defaults to the spec's (inherited) width setting; the output is
    deterministic for a given spec and width.
    """
    return _plain(_Helper(spec, _capture(coalesce(width, spec.width)), colorful=False).render())


def render_usage(spec, /, *, width=Unset):
    """
    Render only the usage line(s) of a spec level as plain text.
    """
    return _plain(_Helper(spec, _capture(coalesce(width, spec.width)), colorful=False).usage())


def print_help(spec, /, *, stderr=False):
    """
    Print the styled help of a spec level to the terminal.
    """
    console = Console(stderr=stderr)
    console.print(_Helper(spec, console, colorful=spec.colorful).render())


__all__ = (
    "render_help",
    "render_usage",
    "print_help",
)
