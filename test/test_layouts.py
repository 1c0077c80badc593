"""
Help layout tests.

Scope
- Section constructors and validation.
- HelpLayout: unset vs. empty sections, fluent builders, replace, resolve defaults.
- Merge semantics: set fields replace, non-empty section lists replace wholesale,
  explicit empty lists only replace unset ones.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from polycli import (
    DEFAULT_DESCR_PADDING,
    DEFAULT_LEFT_PADDING,
    DEFAULT_SECTIONS,
    DEFAULT_WIDTH,
    HelpLayout,
    Section,
    SectionKind,
)


class TestSection(TestCase):

    def testKindConstructors(self):
        self.assertIs(Section.usage().kind, SectionKind.USAGE)
        self.assertIs(Section.description().kind, SectionKind.DESCRIPTION)
        self.assertIs(Section.options().kind, SectionKind.OPTIONS)
        self.assertIs(Section.examples().kind, SectionKind.EXAMPLES)
        self.assertIs(Section.custom("Notes").kind, SectionKind.CUSTOM)

    def testHeadingDefaultsToNone(self):
        self.assertIsNone(Section.options().heading)
        self.assertEqual(Section.options("Flags").heading, "Flags")

    def testKindHeadings(self):
        self.assertEqual(SectionKind.USAGE.heading, "Usage")
        self.assertEqual(SectionKind.OPTIONS.heading, "Options")
        self.assertIsNone(SectionKind.CUSTOM.heading)

    def testCustomLinesSplitOnNewlines(self):
        section = Section.custom("Notes", ["first", "second\nthird"])
        self.assertEqual(section.lines, ("first", "second", "third"))

    def testCustomAcceptsSingleString(self):
        self.assertEqual(Section.custom("Notes", "only").lines, ("only",))

    def testCustomRequiresHeading(self):
        with self.assertRaises(ValueError):
            Section(SectionKind.CUSTOM)

    def testEmptyHeadingRejected(self):
        with self.assertRaises(ValueError):
            Section.usage("  ")

    def testInvalidKindRejected(self):
        with self.assertRaises(TypeError):
            Section("usage")

    def testEquality(self):
        self.assertEqual(Section.custom("Notes", "a"), Section.custom("Notes", ["a"]))
        self.assertNotEqual(Section.usage(), Section.usage("Synopsis"))


class TestHelpLayout(TestCase):

    def testFieldsUnsetByDefault(self):
        layout = HelpLayout()
        self.assertIsNone(layout.sections)
        self.assertIsNone(layout.width)
        self.assertIsNone(layout.left_padding)
        self.assertIsNone(layout.descr_padding)
        self.assertIsNone(layout.options_heading)
        self.assertIsNone(layout.descr)
        self.assertIsNone(layout.examples)
        self.assertTrue(layout.is_empty())
        self.assertFalse(layout.has_sections())

    def testResolveAppliesDefaults(self):
        self.assertEqual(
            HelpLayout().resolve(),
            (DEFAULT_SECTIONS, DEFAULT_WIDTH, DEFAULT_LEFT_PADDING, DEFAULT_DESCR_PADDING),
        )
        self.assertEqual((DEFAULT_WIDTH, DEFAULT_LEFT_PADDING, DEFAULT_DESCR_PADDING), (100, 4, 2))

    def testDefaultSectionOrder(self):
        self.assertEqual(
            [section.kind for section in DEFAULT_SECTIONS],
            [SectionKind.USAGE, SectionKind.DESCRIPTION, SectionKind.OPTIONS, SectionKind.EXAMPLES],
        )

    def testBuildersReturnNewLayouts(self):
        base = HelpLayout()
        layout = base.add_usage().add_options("Flags").add_custom("Notes", ["a"])
        self.assertIsNone(base.sections)
        self.assertEqual(
            layout.sections,
            (Section.usage(), Section.options("Flags"), Section.custom("Notes", ["a"])),
        )
        self.assertTrue(layout.has_sections())

    def testClearGivesExplicitlyEmptySections(self):
        layout = HelpLayout().add_usage().clear()
        self.assertEqual(layout.sections, ())
        self.assertFalse(layout.has_sections())
        self.assertFalse(layout.is_empty())
        self.assertEqual(layout.resolve()[0], ())

    def testReplace(self):
        layout = HelpLayout(width=80).replace(left_padding=2)
        self.assertEqual((layout.width, layout.left_padding), (80, 2))
        self.assertIsNone(layout.replace(width=None).width)

    def testReplaceRejectsUnknownFields(self):
        with self.assertRaises(TypeError):
            HelpLayout().replace(height=3)

    def testInvalidNumbersRejected(self):
        with self.assertRaises(TypeError):
            HelpLayout(width="80")
        with self.assertRaises(TypeError):
            HelpLayout(width=True)
        with self.assertRaises(ValueError):
            HelpLayout(width=0)
        with self.assertRaises(ValueError):
            HelpLayout(left_padding=-1)

    def testInvalidSectionsRejected(self):
        with self.assertRaises(TypeError):
            HelpLayout(sections=["usage"])

    def testExamplesAcceptSingleString(self):
        self.assertEqual(HelpLayout(examples="$ run").examples, ("$ run",))

    def testEqualityAndHash(self):
        first = HelpLayout(width=80).add_usage()
        second = HelpLayout(width=80).add_usage()
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertNotEqual(first, HelpLayout(width=80))


class TestHelpLayoutMerge(TestCase):

    def testSetFieldsReplace(self):
        base = HelpLayout(width=80, left_padding=2)
        merged = base.merge(HelpLayout(width=60, options_heading="Flags"))
        self.assertEqual(merged.width, 60)
        self.assertEqual(merged.left_padding, 2)
        self.assertEqual(merged.options_heading, "Flags")

    def testUnsetFieldsKeepBase(self):
        base = HelpLayout(width=80, descr="Base").add_usage()
        self.assertEqual(base.merge(HelpLayout()), base)

    def testNonEmptySectionsReplaceWholesale(self):
        base = HelpLayout().add_usage().add_description()
        merged = base.merge(HelpLayout().add_examples())
        self.assertEqual(merged.sections, (Section.examples(),))

    def testEmptySectionsDoNotReplaceSetBase(self):
        base = HelpLayout().add_usage()
        self.assertEqual(base.merge(HelpLayout().clear()).sections, (Section.usage(),))

    def testEmptySectionsReplaceUnsetBase(self):
        self.assertEqual(HelpLayout().merge(HelpLayout().clear()).sections, ())

    def testMergeWithNothingReturnsSelf(self):
        layout = HelpLayout(width=80)
        self.assertIs(layout.merge(None), layout)

    def testMergeRejectsOtherTypes(self):
        with self.assertRaises(TypeError):
            HelpLayout().merge({"width": 80})

    def testMergeDoesNotMutate(self):
        base = HelpLayout(width=80)
        base.merge(HelpLayout(width=60))
        self.assertEqual(base.width, 80)


if __name__ == "__main__":
    unittest.main()
