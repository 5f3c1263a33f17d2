"""
Task loader tests (file → task class).

Scope
- Missing files and missing classes raise load faults with remediation.
- Sibling modules of the task file are importable.
- Errors raised by the task file itself propagate unchanged.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import os.path
import tempfile
import textwrap
import unittest
from unittest import TestCase

from deckhand.faults import FaultCode, MissingTasksFileError, MissingTasksClassError
from deckhand.loader import load

FIXTURES = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures")


class TestLoad(TestCase):
    """Behavioral tests for load()."""

    def testLoadsClass(self):
        cls = load(os.path.join(FIXTURES, "simple_tasks.py"))
        self.assertEqual(cls.__name__, "Tasks")
        self.assertTrue(callable(cls().hello))

    def testSiblingImports(self):
        cls = load(os.path.join(FIXTURES, "inherited_tasks.py"))
        self.assertEqual([x.__name__ for x in cls.__mro__], ["Tasks", "BaseTasks", "object"])

    def testMissingFile(self):
        with tempfile.TemporaryDirectory() as directory:
            with self.assertRaises(MissingTasksFileError) as context:
                load(os.path.join(directory, "tasks.py"))
        self.assertIs(context.exception.options["code"], FaultCode.MISSING_TASKS_FILE)
        self.assertIn("class Tasks:", context.exception.options["example"])

    def testMissingClass(self):
        with self.assertRaises(MissingTasksClassError):
            load(os.path.join(FIXTURES, "base_tasks.py"))

    def testNonClassAttribute(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "jobs.py")
            with open(path, "w", encoding="utf-8") as stream:
                stream.write("Tasks = object()\n")
            with self.assertRaises(MissingTasksClassError):
                load(path)

    def testErrorsInTaskFilePropagate(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "broken_tasks.py")
            with open(path, "w", encoding="utf-8") as stream:
                stream.write(textwrap.dedent('''
                    raise ImportError("missing dependency")
                '''))
            with self.assertRaises(ImportError):
                load(path)


if __name__ == "__main__":
    unittest.main()
