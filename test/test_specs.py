# python
"""
Spec model behavioral tests.

Scope
- Validate Spec construction: identity uniqueness, group resolution, positional ordering,
  the generated help flag and the subcommand tree (parent, root, path).
- Validate inherited rendering settings and read-only views.
- Validate build_spec as the flat-declaration entry point.

Conventions
- Test method names follow CamelCase per project convention.
- Configuration faults are always raised, never returned.
"""

import unittest
from unittest import TestCase

from argot import (
    Flag,
    Option,
    Positional,
    Spec,
    build_spec,
    conflict,
    requires,
    overrides,
    ConfigError,
    DuplicateIdentityError,
    UnknownGroupMemberError,
    InvalidPositionalOrderingError,
    FaultCode,
)


class TestSpecIdentities(TestCase):
    """Uniqueness of binding keys, switches, groups and subcommands."""

    def testDuplicateDestRaises(self):
        with self.assertRaises(DuplicateIdentityError) as context:
            Spec("prog", Flag("-a", dest="x"), Flag("-b", dest="x"))
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_IDENTITY)

    def testDuplicateSwitchRaises(self):
        with self.assertRaises(DuplicateIdentityError):
            Spec("prog", Flag("-v", "--verbose"), Option("-v", "--value"))

    def testDuplicateAliasRaises(self):
        with self.assertRaises(DuplicateIdentityError):
            Spec("prog", Flag("--colour", "--color"), Flag("--color", dest="tint"))

    def testDuplicateSubcommandRaises(self):
        with self.assertRaises(DuplicateIdentityError):
            Spec("prog", Spec("build"), Spec("build"))

    def testDuplicateGroupNameRaises(self):
        with self.assertRaises(DuplicateIdentityError):
            Spec(
                "prog",
                Flag("-a"), Flag("-b"), Flag("-c"),
                conflict("g", "a", "b"),
                conflict("g", "b", "c"),
            )

    def testConfigErrorIsValueError(self):
        self.assertTrue(issubclass(DuplicateIdentityError, ConfigError))
        self.assertTrue(issubclass(ConfigError, ValueError))

    def testUnknownDeclarationRejected(self):
        with self.assertRaises(TypeError):
            Spec("prog", "--verbose")

    def testNameMustBeAWord(self):
        for name in ("", "two words", "-prog"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Spec(name)

    def testAliasClashingWithSiblingRaises(self):
        with self.assertRaises(DuplicateIdentityError):
            Spec("prog", Spec("build", aliases=("b",)), Spec("bundle", aliases=("b",)))
        with self.assertRaises(DuplicateIdentityError):
            Spec("prog", Spec("build", aliases=("clean",)), Spec("clean"))

    def testAliasesValidated(self):
        with self.assertRaises(TypeError):
            Spec("build", aliases="b")
        for aliases in (("two words",), ("-b",), ("build",), ("b", "b")):
            with self.subTest(aliases=aliases), self.assertRaises(ValueError):
                Spec("build", aliases=aliases)

    def testCommandsMapNamesAndAliases(self):
        spec = Spec("prog", Spec("build", aliases=["b", "make"]), Spec("clean"))
        self.assertEqual(list(spec.commands), ["build", "b", "make", "clean"])
        self.assertIs(spec.commands["make"], spec.subcommands["build"])
        self.assertEqual(spec.subcommands["build"].aliases, ("b", "make"))
        self.assertEqual(list(spec.subcommands), ["build", "clean"])


class TestSpecGroups(TestCase):
    """Group member resolution."""

    def testMembersResolvedToDest(self):
        spec = Spec("prog", Flag("-j", "--json"), Flag("-y", "--yaml"), conflict("format", "--json", "-y"))
        self.assertEqual(spec.groups[0].members, ("json", "yaml"))

    def testUnknownMemberRaises(self):
        with self.assertRaises(UnknownGroupMemberError) as context:
            Spec("prog", Flag("--json"), conflict("format", "--json", "--yaml"))
        self.assertEqual(context.exception.code, FaultCode.UNKNOWN_GROUP_MEMBER)

    def testMemberNamedTwiceRaises(self):
        with self.assertRaises(DuplicateIdentityError) as context:
            Spec("prog", Flag("-v", "--verbose"), Flag("-q"), conflict("g", "verbose", "-v"))
        self.assertEqual(context.exception.options["dest"], "verbose")

    def testOverridesGroupResolved(self):
        spec = Spec("prog", Flag("--color"), Flag("--no-color"), overrides("color", "--color", "--no-color"))
        self.assertEqual(spec.groups[0].members, ("color", "no_color"))

    def testMemberships(self):
        spec = Spec(
            "prog",
            Option("--user"), Option("--password"), Flag("--anonymous"),
            requires("auth", "--user", "--password"),
            conflict("mode", "--user", "--anonymous"),
        )
        self.assertEqual(spec.memberships("user"), ("auth", "mode"))
        self.assertEqual(spec.memberships("password"), ("auth",))

    def testMembershipsUnknownDest(self):
        with self.assertRaises(KeyError):
            Spec("prog").memberships("nothing")


class TestSpecPositionals(TestCase):
    """Positional ordering rules."""

    def testDeclarationOrder(self):
        spec = Spec("prog", Positional("src"), Positional("dst"))
        self.assertEqual([p.dest for p in spec.positionals], ["src", "dst"])

    def testExplicitIndexesReorder(self):
        spec = Spec("prog", Positional("dst", index=2), Positional("src", index=1))
        self.assertEqual([p.dest for p in spec.positionals], ["src", "dst"])

    def testImplicitFillsFreeSlots(self):
        spec = Spec("prog", Positional("b", index=2), Positional("a"), Positional("c"))
        self.assertEqual([p.dest for p in spec.positionals], ["a", "b", "c"])

    def testDuplicateIndexRaises(self):
        with self.assertRaises(InvalidPositionalOrderingError):
            Spec("prog", Positional("a", index=1), Positional("b", index=1))

    def testSkippedIndexRaises(self):
        with self.assertRaises(InvalidPositionalOrderingError):
            Spec("prog", Positional("a", index=1), Positional("b", index=3))

    def testMultipleMustBeLast(self):
        with self.assertRaises(InvalidPositionalOrderingError):
            Spec("prog", Positional("files", multiple=True), Positional("dst"))

    def testRequiredAfterOptionalRaises(self):
        with self.assertRaises(InvalidPositionalOrderingError) as context:
            Spec("prog", Positional("a"), Positional("b", required=True))
        self.assertEqual(context.exception.code, FaultCode.INVALID_POSITIONAL_ORDERING)

    def testRequiredBeforeOptionalAccepted(self):
        spec = Spec("prog", Positional("a", required=True), Positional("b"))
        self.assertEqual(len(spec.positionals), 2)


class TestSpecHelper(TestCase):
    """The generated help flag."""

    def testHelperAdded(self):
        spec = Spec("prog")
        self.assertEqual(spec.helper.names, ("-h", "--help"))
        self.assertIs(spec.switches["-h"], spec.helper)
        self.assertIs(spec.switches["--help"], spec.helper)

    def testHelperNotAnArgument(self):
        spec = Spec("prog", Flag("-v"))
        self.assertEqual(len(spec.arguments), 1)

    def testHelperTakesFreeSpellingsOnly(self):
        spec = Spec("prog", Option("-h", "--host"))
        self.assertEqual(spec.helper.names, ("--help",))
        self.assertIsNot(spec.switches["-h"], spec.helper)

    def testNoHelperWhenBothSpellingsTaken(self):
        spec = Spec("prog", Option("-h", "--host"), Flag("--help", dest="manual"))
        self.assertIsNone(spec.helper)


class TestSpecTree(TestCase):
    """Subcommand ownership and inherited settings."""

    def testParentRootPath(self):
        leaf = Spec("leaf")
        middle = Spec("middle", leaf)
        root = Spec("root", middle)
        self.assertIs(leaf.parent, middle)
        self.assertIs(leaf.root, root)
        self.assertEqual([spec.name for spec in leaf.path], ["root", "middle", "leaf"])
        self.assertIsNone(root.parent)

    def testSpecOwnedOnce(self):
        child = Spec("child")
        owner = Spec("one", child)
        self.assertIs(child.parent, owner)
        with self.assertRaises(ValueError):
            Spec("two", child)

    def testSettingsInherited(self):
        child = Spec("child")
        root = Spec("root", child, width=100, unified=True)
        self.assertEqual(child.width, 100)
        self.assertTrue(child.unified)
        self.assertTrue(root.show_choices)

    def testSettingsOverridden(self):
        child = Spec("child", width=60)
        root = Spec("root", child, width=100)
        self.assertEqual(child.width, 60)
        self.assertEqual(root.width, 100)

    def testSettingsDefaults(self):
        spec = Spec("prog")
        self.assertTrue(spec.colorful)
        self.assertEqual(spec.width, 80)
        self.assertFalse(spec.unified)
        self.assertFalse(spec.next_line)

    def testWidthValidated(self):
        with self.assertRaises(ValueError):
            Spec("prog", width=10)
        with self.assertRaises(TypeError):
            Spec("prog", width="80")

    def testSubcommandsInDeclarationOrder(self):
        spec = Spec("prog", Spec("b"), Spec("a"))
        self.assertEqual(list(spec.subcommands), ["b", "a"])

    def testSwitchesViewIsACopy(self):
        spec = Spec("prog", Flag("-v"))
        spec.switches.clear()
        self.assertIn("-v", spec.switches)

    def testLookup(self):
        verbose = Flag("-v", "--verbose")
        spec = Spec("prog", verbose)
        self.assertIs(spec.lookup("verbose"), verbose)
        with self.assertRaises(KeyError):
            spec.lookup("quiet")

    def testSealed(self):
        with self.assertRaises(TypeError):
            type("Sub", (Spec,), {})


class TestBuildSpec(TestCase):
    """build_spec as the flat-declaration entry point."""

    def testBuildSpec(self):
        spec = build_spec("prog", [Flag("-v"), Positional("file")], descr="a program")
        self.assertIsInstance(spec, Spec)
        self.assertEqual(spec.descr, "a program")
        self.assertEqual([a.dest for a in spec.arguments], ["v", "file"])

    def testBuildSpecWithoutDeclarations(self):
        self.assertEqual(build_spec("prog").arguments, ())


if __name__ == "__main__":
    unittest.main()
