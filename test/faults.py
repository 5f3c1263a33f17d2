"""
Faults module tests (codes, triggering, rendering).

Scope
- Non-shell mode raises errors and emits warnings.
- Shell mode prints to stderr, exits unless deferred.
- copy.replace merges options; codes normalize to strings.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import io
import unittest
import warnings
from contextlib import redirect_stderr
from unittest import TestCase

from deckhand.faults import (
    FaultCode,
    TaskError,
    UnknownTaskError,
    TaskFailedError,
    LegacyTaskNameWarning,
    trigger,
    getdoc,
)


class TestFaults(TestCase):
    """Behavioral tests for fault types and trigger()."""

    def testNonShellErrorRaises(self):
        with self.assertRaises(UnknownTaskError):
            trigger(UnknownTaskError('Unknown task "x"', code=FaultCode.UNKNOWN_TASK))

    def testNonShellWarningWarns(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            trigger(LegacyTaskNameWarning("legacy"))
        self.assertEqual(len(caught), 1)
        self.assertIs(caught[0].category, LegacyTaskNameWarning)

    def testShellErrorPrintsAndExits(self):
        stream = io.StringIO()
        with redirect_stderr(stream), self.assertRaises(SystemExit) as context:
            trigger(UnknownTaskError('Unknown task "x"', code=FaultCode.UNKNOWN_TASK, title="unknown task"), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn('Unknown task "x"', stream.getvalue())
        self.assertIn("22101", stream.getvalue())
        self.assertIn("Unknown Task", stream.getvalue())

    def testShellDeferredErrorOnlyPrints(self):
        stream = io.StringIO()
        with redirect_stderr(stream):
            trigger(TaskError("soft", hint="try again"), shell=True, deferred=True)
        self.assertIn("soft", stream.getvalue())
        self.assertIn("try again", stream.getvalue())

    def testShellWarningPrints(self):
        stream = io.StringIO()
        with redirect_stderr(stream), warnings.catch_warnings():
            warnings.simplefilter("error")
            trigger(LegacyTaskNameWarning("legacy name"), shell=True, prog="tool")
        self.assertIn("legacy name", stream.getvalue())
        self.assertIn("tool", stream.getvalue())

    def testDebugRendersTraceback(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError as exception:
            fault = TaskFailedError("failed", exception=exception)
        stream = io.StringIO()
        with redirect_stderr(stream):
            trigger(fault, shell=True, deferred=True, debug=True, colorful=False)
        self.assertIn("RuntimeError", stream.getvalue())

    def testReplaceMergesOptions(self):
        fault = TaskError("message", hint="first", code=FaultCode.TASK_FAILED)
        replaced = copy.replace(fault, hint="second")
        self.assertIsInstance(replaced, TaskError)
        self.assertEqual(replaced.message, "message")
        self.assertEqual(replaced.options["hint"], "second")
        self.assertIs(replaced.options["code"], FaultCode.TASK_FAILED)
        self.assertEqual(fault.options["hint"], "first")

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testCodesNormalizeToStrings(self):
        self.assertEqual(FaultCode.MISSING_TASKS_FILE.normalize(), "21101")

    def testGetdocWithoutHostDocs(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_TASK))
        with self.assertRaises(TypeError):
            getdoc(22101)


if __name__ == "__main__":
    unittest.main()
