"""
Option specification and schema tests.

Scope
- Switch specs (Option, Flag): naming rules, keys, defaults, metadata validation.
- OptionSchema: duplicate spelling detection, lookup by spelling or key, immutability.
- Merging: command switches take precedence over universal ones.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from polycli import DuplicateFlagSpellingError, Flag, Option, OptionSchema, Switch


class TestSwitches(TestCase):
    """Construction and metadata of Option and Flag."""

    def testSwitchCannotBeInstantiatedDirectly(self):
        with self.assertRaises(TypeError):
            Switch("-x")

    def testOptionRequiresAtLeastOneName(self):
        with self.assertRaises(TypeError):
            Option()

    def testOptionRejectsMoreThanTwoNames(self):
        with self.assertRaises(TypeError):
            Option("-s", "--source", "--src")

    def testOptionRejectsTwoShortNames(self):
        with self.assertRaises(ValueError):
            Option("-s", "-S")

    def testOptionRejectsMalformedNames(self):
        for name in ("s", "-", "--", "-_", "--_x", "---x", "-ab"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Option(name)

    def testNamesAreOrderedShortThenLong(self):
        option = Option("--source", "-s")
        self.assertEqual(option.names, ("-s", "--source"))
        self.assertEqual(option.short, "-s")
        self.assertEqual(option.long, "--source")

    def testKeyPrefersLongName(self):
        self.assertEqual(Option("-s", "--source").key, "source")
        self.assertEqual(Option("-s").key, "s")
        self.assertEqual(Flag("--dry-run").key, "dry-run")

    def testMissingSpellingIsNone(self):
        self.assertIsNone(Flag("-v").long)
        self.assertIsNone(Flag("--verbose").short)

    def testOptionDefaults(self):
        option = Option("-s", "--source")
        self.assertTrue(option.takes_value)
        self.assertFalse(option.required)
        self.assertFalse(option.multiple)
        self.assertIsNone(option.descr)
        self.assertEqual(option.metavar, "<source>")

    def testOptionExplicitMetadata(self):
        option = Option("-c", "--column", metavar="N", descr="  Column  ", required=True, multiple=True)
        self.assertEqual(option.metavar, "N")
        self.assertEqual(option.descr, "Column")
        self.assertTrue(option.required)
        self.assertTrue(option.multiple)

    def testEmptyDescriptionRejected(self):
        with self.assertRaises(ValueError):
            Flag("-v", descr="   ")

    def testNonStringDescriptionRejected(self):
        with self.assertRaises(TypeError):
            Flag("-v", descr=42)

    def testFlagIsPresenceOnly(self):
        flag = Flag("-v", "--verbose")
        self.assertFalse(flag.takes_value)
        self.assertFalse(flag.required)
        self.assertIsNone(flag.metavar)

    def testSpells(self):
        option = Option("-s", "--source")
        self.assertTrue(option.spells("-s"))
        self.assertTrue(option.spells("--source"))
        self.assertTrue(option.spells("source"))
        self.assertFalse(option.spells("--src"))

    def testPropertiesAreReadOnly(self):
        option = Option("-s", "--source")
        with self.assertRaises(AttributeError):
            option.descr = "changed"

    def testRepr(self):
        self.assertEqual(repr(Flag("-v", descr="Verbose")), "flag(names=('-v',), descr='Verbose')")


class TestOptionSchema(TestCase):
    """Schema construction, lookup and merging."""

    def setUp(self):
        self.source = Option("-s", "--source", descr="Source path")
        self.verbose = Flag("-v", "--verbose")
        self.schema = OptionSchema(self.source, self.verbose)

    def testIterationKeepsDeclarationOrder(self):
        self.assertEqual(list(self.schema), [self.source, self.verbose])
        self.assertEqual(len(self.schema), 2)

    def testEmptySchemaIsFalsy(self):
        self.assertFalse(OptionSchema())
        self.assertTrue(self.schema)

    def testLookupBySpellingOrKey(self):
        self.assertIs(self.schema["-s"], self.source)
        self.assertIs(self.schema["--source"], self.source)
        self.assertIs(self.schema["source"], self.source)
        self.assertIs(self.schema.get("--verbose"), self.verbose)
        self.assertIsNone(self.schema.get("--missing"))

    def testMissingLookupRaisesKeyError(self):
        with self.assertRaises(KeyError):
            self.schema["--missing"]

    def testContainsAcceptsSwitchesAndNames(self):
        self.assertIn(self.source, self.schema)
        self.assertIn("-v", self.schema)
        self.assertNotIn("-x", self.schema)
        self.assertNotIn(Flag("-x"), self.schema)

    def testSpellings(self):
        self.assertEqual(self.schema.spellings, {"-s", "--source", "-v", "--verbose"})

    def testDuplicateShortSpellingRejected(self):
        with self.assertRaises(DuplicateFlagSpellingError) as context:
            OptionSchema(Option("-s", "--source"), Flag("-s", "--silent"))
        self.assertIn("'-s'", str(context.exception))

    def testDuplicateLongSpellingRejected(self):
        with self.assertRaises(DuplicateFlagSpellingError):
            OptionSchema(Option("--source"), Flag("-x", "--source"))

    def testSharedKeyRejected(self):
        with self.assertRaises(DuplicateFlagSpellingError) as context:
            OptionSchema(Option("-x"), Flag("--x"))
        self.assertEqual(context.exception.options["input"], "x")

    def testExtendRejectsSharedKey(self):
        with self.assertRaises(DuplicateFlagSpellingError):
            OptionSchema(Flag("-v")).extend(Option("--v"))

    def testMergeSkipsUniversalSwitchWithTakenKey(self):
        level = Option("-l")
        merged = OptionSchema(level).merge(OptionSchema(Flag("--l"), Flag("-q")))
        self.assertEqual([switch.key for switch in merged], ["l", "q"])
        self.assertIs(merged.get("l"), level)
        self.assertNotIn("--l", merged)

    def testExtendReturnsNewSchema(self):
        extended = self.schema.extend(Flag("-q", "--quiet"))
        self.assertEqual(len(extended), 3)
        self.assertEqual(len(self.schema), 2)

    def testExtendValidatesSpellings(self):
        with self.assertRaises(DuplicateFlagSpellingError):
            self.schema.extend(Flag("-v"))

    def testNonSwitchEntriesRejected(self):
        with self.assertRaises(TypeError):
            OptionSchema("-s")

    def testEquality(self):
        self.assertEqual(self.schema, OptionSchema(self.source, self.verbose))
        self.assertNotEqual(self.schema, OptionSchema(self.verbose, self.source))

    def testMergeAddsUniversalSwitches(self):
        help = Flag("-h", "--help")
        merged = OptionSchema(self.source).merge(OptionSchema(help))
        self.assertEqual(list(merged), [self.source, help])
        self.assertEqual(merged.spellings, {"-s", "--source", "-h", "--help"})

    def testMergeKeepsCommandSwitchOnConflict(self):
        host = Option("-h", "--host")
        merged = OptionSchema(host, self.source).merge(OptionSchema(Flag("-h", "--help")))
        self.assertEqual([switch for switch in merged if "-h" in switch.names], [host])
        self.assertNotIn("--help", merged)
        self.assertEqual(len(merged), 2)

    def testMergeSkipsUniversalSwitchWhenLongSpellingTaken(self):
        merged = OptionSchema(Flag("--help")).merge(OptionSchema(Flag("-h", "--help")))
        self.assertEqual(len(merged), 1)
        self.assertNotIn("-h", merged)

    def testMergeWithNothingReturnsSelf(self):
        self.assertIs(self.schema.merge(None), self.schema)

    def testMergeRejectsNonSchemas(self):
        with self.assertRaises(TypeError):
            self.schema.merge([Flag("-h")])

    def testOrOperatorMerges(self):
        merged = OptionSchema(self.source) | OptionSchema(Flag("-h", "--help"))
        self.assertEqual(len(merged), 2)

    def testParseDelegatesToParser(self):
        values = self.schema.parse(["-s", "./docs", "-v"])
        self.assertEqual(values["source"], "./docs")
        self.assertIs(values["verbose"], True)


if __name__ == "__main__":
    unittest.main()
