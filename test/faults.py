"""
Fault taxonomy and rendering tests.

Scope
- class hierarchy: command-line kinds vs configuration kind vs help signal.
- read-only options, __replace__, attribute access.
- rich rendering (header, message, hint) and trigger() exit statuses.
"""
import contextlib
import io
import unittest
from unittest import TestCase

from rich.console import Console

from argstow.faults import *


def render(renderable):
    console = Console(file=io.StringIO(), width=100, color_system=None, legacy_windows=False)
    console.print(renderable)
    return console.file.getvalue()


class HierarchyTest(TestCase):

    def testCommandLineKinds(self):
        for kind in (ExhaustedInputError, UnknownOptionError, ValueFormatError, InvalidChoiceError, UnexpectedValueError, UnparsedTokensError):
            self.assertTrue(issubclass(kind, CommandLineError), kind)
            self.assertEqual(kind.status, 2)

    def testConfigurationKind(self):
        self.assertFalse(issubclass(ConfigurationError, CommandLineError))
        self.assertTrue(issubclass(ConfigurationError, TypeError))
        self.assertTrue(issubclass(ConfigurationError, ParseFault))
        self.assertEqual(ConfigurationError.status, 1)

    def testHelpIsNotAnError(self):
        self.assertFalse(issubclass(HelpRequested, CommandLineError))
        self.assertEqual(HelpRequested.status, 0)

    def testCodesAreUnique(self):
        kinds = (ExhaustedInputError, UnknownOptionError, ValueFormatError, InvalidChoiceError, UnexpectedValueError, UnparsedTokensError, ConfigurationError, HelpRequested)
        self.assertEqual(len({kind.__code__ for kind in kinds}), len(kinds))


class FaultTest(TestCase):

    def testMessageAndOptions(self):
        fault = UnknownOptionError("unknown option '-t'", option="-t", hint="check it")
        self.assertEqual(fault.message, "unknown option '-t'")
        self.assertEqual(str(fault), "unknown option '-t'")
        self.assertEqual(fault.option, "-t")
        self.assertEqual(fault.hint, "check it")
        self.assertIs(fault.code, FaultCode.UNKNOWN_OPTION)
        self.assertEqual(fault.title, "unknown option")
        with self.assertRaises(AttributeError):
            fault.missing
        with self.assertRaises(TypeError):
            fault.options["option"] = "-x"

    def testDefaultMessage(self):
        self.assertEqual(ParseFault().message, "")
        self.assertIsNone(ParseFault().hint)

    def testReplaceMergesOptions(self):
        fault = ValueFormatError("bad", token="x")
        replaced = fault.__replace__(option="--n")
        self.assertIsInstance(replaced, ValueFormatError)
        self.assertEqual(replaced.message, "bad")
        self.assertEqual(replaced.token, "x")
        self.assertEqual(replaced.option, "--n")
        self.assertNotIn("option", fault.options)

    def testNormalize(self):
        self.assertEqual(FaultCode.VALUE_FORMAT.normalize(), "11123")


class RenderTest(TestCase):

    def testHeaderMessageHint(self):
        output = render(UnknownOptionError("unknown option '-t' at first position", hint="check the spelling", prog="stow"))
        self.assertIn("[ stow — 11112 | Unknown Option ]", output)
        self.assertIn("unknown option '-t' at first position", output)
        self.assertIn("→ check the spelling", output)

    def testWithoutHint(self):
        output = render(ValueFormatError("bad value", prog="stow"))
        self.assertNotIn("→", output)

    def testTitleOverride(self):
        output = render(ValueFormatError("bad value", prog="stow", title="oops"))
        self.assertIn("| Oops ]", output)

    def testFancyPanel(self):
        output = render(ValueFormatError("bad value", prog="stow", fancy=True))
        self.assertIn("bad value", output)
        self.assertIn("╭", output)


class TriggerTest(TestCase):

    def testCommandLineErrorExitsWithTwo(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            trigger(UnknownOptionError("unknown option '-t'"), prog="stow")
        self.assertEqual(context.exception.code, 2)
        self.assertIn("unknown option '-t'", stderr.getvalue())
        self.assertIn("stow", stderr.getvalue())

    def testConfigurationErrorExitsWithOne(self):
        with contextlib.redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as context:
            trigger(ConfigurationError("bad setup"))
        self.assertEqual(context.exception.code, 1)

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


if __name__ == "__main__":
    unittest.main()
