"""
Utilities tests (sentinel, privacy rule, source scanner).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from deckhand.utils import Unset, UnsetType, coalesce, isprivate, lex, blank


class TestUnset(TestCase):
    def testSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testCoalesceKeepsFalseyValues(self):
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertIsNone(coalesce(None, "x"))
        self.assertEqual(coalesce(0, "x"), 0)


class TestIsPrivate(TestCase):
    def testUnderscoreAndConstructors(self):
        for name in ("_helper", "__init__", "__new__", "_"):
            self.assertTrue(isprivate(name))
        for name in ("build", "db", "git_status"):
            self.assertFalse(isprivate(name))


class TestScanner(TestCase):
    def testStringsAndCommentsAreSingleTokens(self):
        source = "f(a, '(', \"\"\"x\n)\"\"\")  # ) comment\n"
        kinds = [(x.kind, source[x.start:x.end]) for x in lex(source) if x.kind in ("string", "comment")]
        self.assertEqual(kinds, [("string", "'('"), ("string", '"""x\n)"""'), ("comment", "# ) comment")])

    def testEscapedQuotesStayInsideString(self):
        source = r"'it\'s' + x"
        self.assertEqual(next(lex(source)).end, len(r"'it\'s'"))

    def testUnterminatedStringStopsAtLineEnd(self):
        source = "'open\nclass Tasks:"
        tokens = list(lex(source))
        self.assertEqual((tokens[0].kind, tokens[0].end), ("string", 5))
        self.assertEqual(tokens[1].kind, "newline")

    def testBlankKeepsOffsetsAndNewlines(self):
        source = "x = '''a\nb'''  # note\ny = 1\n"
        blanked = blank(source)
        self.assertEqual(len(blanked), len(source))
        self.assertEqual(blanked.count("\n"), source.count("\n"))
        self.assertNotIn("note", blanked)
        self.assertTrue(blanked.endswith("y = 1\n"))


if __name__ == "__main__":
    unittest.main()
