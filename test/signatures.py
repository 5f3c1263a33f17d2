"""
Signature reconstruction tests (display text of task callables).

Scope
- Receiver and context parameters never show up.
- Defaults, rest parameters and annotations render as written.
- Comments and line breaks inside multi-line headers collapse away.
- Callables without source fall back to a bare name.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import functools
import unittest
from unittest import TestCase

from deckhand import signature


class Tasks:
    async def hello(self, c, name="World"):
        pass

    def nothing(self, c):
        pass

    def rest(self, c, env="dev", *targets, **options):
        pass

    def annotated(self, c, count: int = 1, label: str | None = None) -> dict[str, int]:
        pass

    def multiline(
            self,
            c,  # the shared context
            first,
            second="a, (b)",
    ):
        pass

    def positional(self, c, /, value):
        pass

    @staticmethod
    def static(c, value=1):
        pass


def plain(c, target="all"):
    pass


class TestSignature(TestCase):
    """Behavioral tests for signature()."""

    def setUp(self):
        self.tasks = Tasks()

    def testBoundMethodDropsReceiverAndContext(self):
        self.assertEqual(signature(self.tasks.hello), 'hello(name="World")')

    def testOnlyContextGivesEmptyParentheses(self):
        self.assertEqual(signature(self.tasks.nothing), "nothing()")

    def testRestParametersRenderUnchanged(self):
        self.assertEqual(signature(self.tasks.rest), 'rest(env="dev", *targets, **options)')

    def testAnnotationsRenderUnchanged(self):
        self.assertEqual(
            signature(self.tasks.annotated),
            "annotated(count: int = 1, label: str | None = None)"
        )

    def testMultilineHeaderCollapses(self):
        # Commas and brackets inside the string default do not split it.
        self.assertEqual(signature(self.tasks.multiline), 'multiline(first, second="a, (b)")')

    def testPositionalOnlyMarkerAtHeadIsDropped(self):
        self.assertEqual(signature(self.tasks.positional), "positional(value)")

    def testStaticMethodDropsOnlyContext(self):
        self.assertEqual(signature(self.tasks.static), "static(value=1)")

    def testPlainFunctionDropsContext(self):
        self.assertEqual(signature(plain), 'plain(target="all")')

    def testDisplayNameOverridesSourceName(self):
        self.assertEqual(signature(self.tasks.hello, "greet"), 'greet(name="World")')

    def testBuiltinFallsBackToName(self):
        self.assertEqual(signature(len), "len")

    def testPartialFallsBackToGivenName(self):
        self.assertEqual(signature(functools.partial(plain), "alias"), "alias")


if __name__ == "__main__":
    unittest.main()
