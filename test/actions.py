"""
Action tests.

Scope
- Store / Append / StoreConst / AppendConst / Choice / ShowHelp semantics.
- configuration errors for scalar/sequence mismatches.
- writes through the Absent handle are no-ops.
"""
import unittest
from dataclasses import dataclass, field
from unittest import TestCase

from argstow.actions import *
from argstow.coercion import Int8
from argstow.destinations import Absent, bind
from argstow.faults import *


@dataclass
class Record:
    name: str = "unset"
    count: Int8 = 0
    numbers: list[int] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)
    enabled: bool = False


class StoreTest(TestCase):

    def setUp(self):
        self.record = Record()

    def testSingleValue(self):
        Store()(1, ["42"], bind(self.record, "count"))
        self.assertEqual(self.record.count, 42)

    def testOptionalWithValue(self):
        Store()("?", ["value"], bind(self.record, "name"))
        self.assertEqual(self.record.name, "value")

    def testOptionalWithoutValueLeavesField(self):
        Store()("?", [], bind(self.record, "name"))
        self.assertEqual(self.record.name, "unset")

    def testMultipleValuesWriteWholeList(self):
        self.record.numbers = [9]
        Store()(2, ["1", "0x2"], bind(self.record, "numbers"))
        self.assertEqual(self.record.numbers, [1, 2])
        Store()("*", [], bind(self.record, "numbers"))
        self.assertEqual(self.record.numbers, [])

    def testWriteIsAtomic(self):
        self.record.numbers = [9]
        with self.assertRaises(ValueFormatError):
            Store()("+", ["1", "two"], bind(self.record, "numbers"))
        self.assertEqual(self.record.numbers, [9])

    def testCoercionFailure(self):
        with self.assertRaises(ValueFormatError) as context:
            Store()(1, ["300"], bind(self.record, "count"))
        self.assertEqual(context.exception.token, "300")

    def testMultipleValuesIntoScalarField(self):
        with self.assertRaises(ConfigurationError):
            Store()(2, ["a", "b"], bind(self.record, "name"))

    def testSingleValueIntoSequenceField(self):
        with self.assertRaises(ConfigurationError):
            Store()(1, ["1"], bind(self.record, "numbers"))

    def testAbsentDestination(self):
        Store()(1, ["x"], Absent)
        Store()("+", ["x", "y"], Absent)


class AppendTest(TestCase):

    def testPreservesPriorContents(self):
        record = Record(numbers=[1])
        destination = bind(record, "numbers")
        Append()(1, ["2"], destination)
        Append()("+", ["3", "4"], destination)
        self.assertEqual(record.numbers, [1, 2, 3, 4])

    def testScalarFieldRejected(self):
        with self.assertRaises(ConfigurationError):
            Append()(1, ["x"], bind(Record(), "name"))


class ConstTest(TestCase):

    def testStoreConstIgnoresValues(self):
        record = Record()
        StoreConst(True)(0, [], bind(record, "enabled"))
        self.assertIs(record.enabled, True)
        self.assertFalse(StoreConst(True).consumes)

    def testAppendConst(self):
        record = Record()
        destination = bind(record, "flags")
        AppendConst("a")(0, [], destination)
        AppendConst("b")(0, [], destination)
        self.assertEqual(record.flags, ["a", "b"])

    def testAppendConstScalarFieldRejected(self):
        with self.assertRaises(ConfigurationError):
            AppendConst("a")(0, [], bind(Record(), "name"))

    def testAbsentDestination(self):
        StoreConst(1)(0, [], Absent)
        AppendConst(1)(0, [], Absent)

    def testReprAndEquality(self):
        self.assertEqual(repr(StoreConst(True)), "store-const(value=True)")
        self.assertEqual(repr(Store()), "store()")
        self.assertEqual(AppendConst("a"), AppendConst("a"))
        self.assertNotEqual(AppendConst("a"), StoreConst("a"))


class ChoiceTest(TestCase):

    def testValidDelegates(self):
        record = Record()
        Choice(Store(), "fast", "slow")(1, ["slow"], bind(record, "name"))
        self.assertEqual(record.name, "slow")

    def testInvalidRejected(self):
        record = Record()
        with self.assertRaises(InvalidChoiceError) as context:
            Choice(Store(), "fast", "slow")(1, ["medium"], bind(record, "name"))
        fault = context.exception
        self.assertIsInstance(fault, ValueFormatError)
        self.assertEqual(fault.choices, ("fast", "slow"))
        self.assertEqual(fault.token, "medium")
        self.assertIn("fast, slow", fault.message)
        self.assertEqual(record.name, "unset")

    def testEveryValueChecked(self):
        with self.assertRaises(InvalidChoiceError):
            Choice(Append(), "a", "b")("+", ["a", "c"], bind(Record(), "flags"))

    def testConsumesFollowsWrappedAction(self):
        self.assertTrue(Choice(Store(), "a").consumes)
        self.assertFalse(Choice(StoreConst(1), "a").consumes)

    def testFunctionalSpelling(self):
        self.assertEqual(choice(Store(), "a", "b"), Choice(Store(), "a", "b"))

    def testConstruction(self):
        with self.assertRaises(TypeError):
            Choice(Store())
        with self.assertRaises(TypeError):
            Choice("store", "a")
        with self.assertRaises(TypeError):
            Choice(Store(), 1)
        with self.assertRaises(ValueError):
            Choice(Store(), "a", "a")


class CheckTest(TestCase):

    def testMatchingShapesPass(self):
        record = Record()
        Store().check(1, bind(record, "name"))
        Store().check("?", bind(record, "name"))
        Store().check("*", bind(record, "numbers"))
        Append().check(1, bind(record, "flags"))
        AppendConst("a").check(0, bind(record, "flags"))
        StoreConst(1).check(0, bind(record, "name"))

    def testMismatchedShapesRaise(self):
        record = Record()
        cases = (
            (Store(), 1, "numbers"),
            (Store(), "?", "numbers"),
            (Store(), 2, "name"),
            (Append(), 1, "name"),
            (AppendConst("a"), 0, "name"),
            (Choice(Append(), "a"), "+", "name"),
        )
        for action, nargs, field in cases:
            with self.assertRaises(ConfigurationError, msg=(action, nargs, field)):
                action.check(nargs, bind(record, field))

    def testAbsentDestinationPasses(self):
        for action in (Store(), Append(), AppendConst("a"), ShowHelp()):
            action.check(1, Absent)


class ShowHelpTest(TestCase):

    def testRaisesHelpRequested(self):
        with self.assertRaises(HelpRequested) as context:
            ShowHelp()(0, [], Absent)
        self.assertEqual(context.exception.status, 0)
        self.assertFalse(ShowHelp().consumes)


if __name__ == "__main__":
    unittest.main()
