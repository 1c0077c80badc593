"""
Fault tests.

Scope
- FaultCode values and host normalization through __main__.__codes__.
- CommandException: options, replace, rich rendering (plain and fancy).
- trigger(): raise outside shell mode, print to the given file inside it.
- getdoc(): __main__.__docs__ lookup.

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from polycli import (
    CommandException,
    FaultCode,
    MissingOptionsError,
    ParseError,
    UnknownSwitchError,
    getdoc,
    trigger,
)


def render(fault):
    console = Console(file=io.StringIO(), width=120)
    console.print(fault)
    return console.file.getvalue()


class TestFaultCode(TestCase):

    def testStableValues(self):
        self.assertEqual(FaultCode.UNKNOWN_COMMAND, 10101)
        self.assertEqual(FaultCode.UNKNOWN_SWITCH, 10202)
        self.assertEqual(FaultCode.MISSING_OPTIONS, 10206)
        self.assertEqual(FaultCode.DUPLICATE_SPELLING, 10402)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_SWITCH.normalize(), "10202")

    def testNormalizeUsesHostCodes(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.UNKNOWN_SWITCH: "E-SWITCH"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_SWITCH.normalize(), "E-SWITCH")
            self.assertEqual(FaultCode.MISSING_OPTIONS.normalize(), "10206")


class TestCommandException(TestCase):

    def testOptionsAndProperties(self):
        fault = UnknownSwitchError("unknown switch '-x' at first position", input="-x", hint="check the spelling")
        self.assertEqual(str(fault), "unknown switch '-x' at first position")
        self.assertIs(fault.code, FaultCode.UNKNOWN_SWITCH)
        self.assertEqual(fault.options["title"], "unknown switch")
        self.assertEqual(fault.options["input"], "-x")
        self.assertEqual(fault.hint, "check the spelling")
        self.assertIsNone(fault.command)
        self.assertIsInstance(fault, ParseError)

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            MissingOptionsError("missing").options["code"] = None

    def testBaseFaultHasNoCode(self):
        self.assertIsNone(CommandException("oops").code)

    def testReplaceKeepsTypeAndMessage(self):
        fault = UnknownSwitchError("unknown switch", input="-x")
        copy = fault.replace(command="deploy")
        self.assertIsInstance(copy, UnknownSwitchError)
        self.assertEqual(str(copy), "unknown switch")
        self.assertEqual(copy.command, "deploy")
        self.assertEqual(copy.options["input"], "-x")
        self.assertIsNone(fault.command)

    def testPlainRendering(self):
        fault = UnknownSwitchError("unknown switch '-x' at first position", prog="tool", hint="check the spelling")
        self.assertEqual(render(fault).splitlines(), [
            "[ tool — 10202 | Unknown Switch ]",
            "unknown switch '-x' at first position",
            " → check the spelling",
        ])

    def testRenderingWithoutCode(self):
        self.assertIn("[ tool — - | Command Error ]", render(CommandException("oops", prog="tool")))

    def testFancyRendering(self):
        output = render(UnknownSwitchError("unknown switch", prog="tool", fancy=True))
        self.assertIn("tool — 10202", output)
        self.assertIn("unknown switch", output)
        self.assertIn("╭", output)


class TestTrigger(TestCase):

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownSwitchError) as context:
            trigger(UnknownSwitchError("unknown switch"), prog="tool")
        self.assertEqual(context.exception.options["prog"], "tool")

    def testPrintsInShell(self):
        stream = io.StringIO()
        trigger(UnknownSwitchError("unknown switch", prog="tool"), shell=True, file=stream)
        self.assertTrue(stream.getvalue().startswith("[ tool — 10202 | Unknown Switch ]"))

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestGetdoc(TestCase):

    def testMissingDocumentation(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_COMMAND))

    def testHostDocumentation(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__docs__", {FaultCode.UNKNOWN_COMMAND: "See the list."}, create=True):
            self.assertEqual(getdoc(FaultCode.UNKNOWN_COMMAND), "See the list.")

    def testRejectsPlainIntegers(self):
        with self.assertRaises(TypeError):
            getdoc(10101)


if __name__ == "__main__":
    unittest.main()
