# python
"""
Help synthesizer behavioral tests (plain-text rendering).

Scope
- Validate the default layout: usage line, description, sections in order,
  annotations ([default: x], [values: a, b]) and hidden entries.
- Validate rendering settings: unified, next_line, show_choices, width.
- Validate explicit usage, before/after paragraphs and templates (unknown tags kept).
- Validate subcommand listings (with their aliases) and multi-level usage.

Conventions
- Test method names follow CamelCase per project convention.
- Only render_help/render_usage are used: output is plain and deterministic.
"""

import unittest
from unittest import TestCase

from argot import Flag, Option, Positional, Spec, render_help, render_usage


def _spec(**settings):
    return Spec(
        "prog",
        Option("-n", "--name", required=True, descr="name to use"),
        Option("--mode", default="fast", choices=["fast", "slow"], descr="speed"),
        Flag("-v", "--verbose", descr="more output"),
        Flag("--secret", hidden=True),
        Positional("file", multiple=True, descr="files to read"),
        descr="does things",
        **settings,
    )


class TestHelpLayout(TestCase):
    """Default layout."""

    def testUsageLine(self):
        self.assertEqual(
            render_usage(_spec()),
            "usage: prog [-h] [-v] --name <NAME> [--mode <MODE>] [<FILE>...]",
        )

    def testHelpStartsWithUsage(self):
        text = render_help(_spec())
        self.assertTrue(text.startswith(render_usage(_spec())))

    def testDescription(self):
        self.assertIn("\n\ndoes things\n\n", render_help(_spec()))

    def testSectionsInOrder(self):
        text = render_help(_spec())
        positions = [text.index(label) for label in ("positionals:", "options:", "flags:")]
        self.assertEqual(positions, sorted(positions))

    def testEntryColumns(self):
        lines = render_help(_spec()).splitlines()
        self.assertIn("  -n, --name <NAME>  name to use", lines)
        self.assertIn("  <FILE>...          files to read", lines)

    def testAnnotations(self):
        text = render_help(_spec())
        self.assertIn("speed [default: fast] [values: fast, slow]", text)

    def testHelperListedFirstAmongFlags(self):
        text = render_help(_spec())
        self.assertLess(text.index("-h, --help"), text.index("-v, --verbose"))
        self.assertIn("print help information", text)

    def testHiddenOmitted(self):
        self.assertNotIn("--secret", render_help(_spec()))

    def testDeterministic(self):
        self.assertEqual(render_help(_spec()), render_help(_spec()))

    def testNoTrailingWhitespace(self):
        for line in render_help(_spec()).splitlines():
            with self.subTest(line=line):
                self.assertEqual(line, line.rstrip())


class TestHelpSettings(TestCase):
    """Rendering settings."""

    def testUnified(self):
        text = render_help(_spec(unified=True))
        self.assertNotIn("flags:", text)
        self.assertLess(text.index("options:"), text.index("-v, --verbose"))

    def testShowChoicesOff(self):
        text = render_help(_spec(show_choices=False))
        self.assertNotIn("[values:", text)
        self.assertIn("[default: fast]", text)

    def testNextLine(self):
        lines = render_help(_spec(next_line=True)).splitlines()
        index = lines.index("  -v, --verbose")
        self.assertEqual(lines[index + 1].strip(), "more output")

    def testNarrowWidth(self):
        spec = Spec(
            "prog",
            Option("-n", "--name", required=True, descr="the name that the program uses for every single thing it does"),
            Flag("-v", "--verbose", descr="print a great deal more output than anybody would ever want"),
            descr="a program with a long description that cannot fit on a single narrow line",
        )
        for line in render_help(spec, width=40).splitlines():
            with self.subTest(line=line):
                self.assertLessEqual(len(line), 40)

    def testWidthFromSpec(self):
        spec = Spec("prog", descr="word " * 30, width=30)
        self.assertEqual(render_help(spec), render_help(spec, width=30))


class TestHelpMetadata(TestCase):
    """Explicit usage, paragraphs and templates."""

    def testExplicitUsage(self):
        self.assertEqual(render_usage(Spec("prog", usage="prog [stuff]")), "usage: prog [stuff]")

    def testBeforeAndAfter(self):
        text = render_help(Spec("prog", before="first words", after="last words"))
        self.assertTrue(text.startswith("first words\n\nusage: prog"))
        self.assertTrue(text.endswith("\n\nlast words"))

    def testAuthor(self):
        self.assertIn("does things\nsomeone", render_help(Spec("prog", descr="does things", author="someone")))

    def testTemplate(self):
        spec = Spec("prog", Flag("-v", descr="loud"), template="{bin} {unknown}\n{usage}", author="me")
        self.assertEqual(render_help(spec), "prog {unknown}\nprog [-h] [-v]")

    def testTemplateSections(self):
        spec = Spec("prog", Flag("-v", descr="loud"), Option("--out"), template="{flags}\n--\n{options}")
        text = render_help(spec)
        flags, options = text.split("\n--\n")
        self.assertIn("-v", flags)
        self.assertNotIn("--out", flags)
        self.assertIn("--out <OUT>", options)


class TestHelpSubcommands(TestCase):
    """Subcommand listings and multi-level usage."""

    def _tool(self):
        return Spec(
            "tool",
            Spec("build", Option("--target", required=True), descr="build the project"),
            Spec("internal", hidden=True),
        )

    def testSubcommandSection(self):
        text = render_help(self._tool())
        self.assertIn("subcommands:", text)
        self.assertIn("build the project", text)
        self.assertNotIn("internal", text)

    def testCommandPlaceholder(self):
        self.assertEqual(render_usage(self._tool()), "usage: tool [-h] <COMMAND>")

    def testNestedUsage(self):
        tool = self._tool()
        self.assertEqual(render_usage(tool.subcommands["build"]), "usage: tool build [-h] --target <TARGET>")

    def testAliasesListed(self):
        tool = Spec("tool", Spec("build", descr="build the project", aliases=("b", "make")), Spec("clean"))
        text = render_help(tool)
        self.assertIn("build the project [aliases: b, make]", text)
        self.assertNotIn("[aliases", text.split("clean")[-1])


if __name__ == "__main__":
    unittest.main()
