"""
Deckhand utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the discovery, extraction and dispatch layers.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the higher-level modules of the package.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/"".

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr).

- isprivate(name)
  • The single privacy rule of the task surface: a leading underscore, constructors included.

- lex(source, start=0)
  • A tiny Python-source lexer yielding Token(kind, start, end) spans. It knows about
    string literals (single, double, triple quoted, escapes), '#' comments, brackets and
    explicit line continuations, which is all the doc extractor and the signature
    reconstructor need to stay out of strings and comments.

- blank(source)
  • Copy of the source where strings and comments are replaced by spaces (newlines kept),
    so plain regular expressions only ever match real code at the original offsets.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> isprivate("_helper"), isprivate("__init__"), isprivate("build")
    (True, True, False)
    >>> source = "f(a, '(')"
    >>> [source[x.start:x.end] for x in lex(source) if x.kind == "string"]
    ["'('"]
"""
import functools
from collections import namedtuple
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    Falsey values like None, 0 or "" are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("tasks.py", "fallback") -> "tasks.py"
    - coalesce(Unset, "fallback")      -> "fallback"
    - coalesce(None, "fallback")       -> None
    """
    return object if object is not Unset else default


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute "_{name}".
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return getattr(self, "_" + name)

    # Keep introspection readable (help(), tracebacks).
    getter.__name__ = getter.__qualname__ = name
    return property(getter)


# Constructor names never reach the command surface, even through explicit invocation.
CONSTRUCTORS = frozenset(("__init__", "__new__"))


def isprivate(name, /):
    """
    Return True when a member name must stay off the task surface.

    A name is private when it starts with an underscore; constructors are covered
    by the same rule but are also checked explicitly so the intent stays visible.
    """
    return name.startswith("_") or name in CONSTRUCTORS


Token = namedtuple("Token", ("kind", "start", "end"))
Token.__doc__ = """
A lexical span of Python source.

kinds
- "string": a complete string literal including its quotes (prefix letters are a separate "word")
- "comment": from '#' up to, but excluding, the end of the line
- "open" / "close": one of ([{ or )]}
- "newline": a physical line break outside of strings
- "escape": a backslash line continuation
- "space": a run of blanks
- "word": a run of identifier characters
- "symbol": any other single character
"""


def lex(source, start=0, /):
    """
    Yield Token spans for `source` beginning at offset `start`.

    The lexer never fails: unterminated single-line strings stop at the end of
    their line and unterminated triple-quoted strings at the end of the source.
    """
    index = start
    length = len(source)

    while index < length:
        char = source[index]

        if char in "\"'":
            # Triple quotes first, the delimiter decides where the literal may end.
            quote = source[index:index + 3] if source.startswith(char * 3, index) else char
            pivot = index + len(quote)
            while pivot < length:
                if source[pivot] == "\\":
                    pivot += 2
                elif source.startswith(quote, pivot):
                    pivot += len(quote)
                    break
                elif source[pivot] == "\n" and len(quote) == 1:
                    break
                else:
                    pivot += 1
            pivot = min(pivot, length)
            yield Token("string", index, pivot)
            index = pivot
        elif char == "#":
            pivot = source.find("\n", index)
            pivot = length if pivot < 0 else pivot
            yield Token("comment", index, pivot)
            index = pivot
        elif char in "([{":
            yield Token("open", index, index + 1)
            index += 1
        elif char in ")]}":
            yield Token("close", index, index + 1)
            index += 1
        elif char == "\n":
            yield Token("newline", index, index + 1)
            index += 1
        elif char == "\\" and source.startswith("\n", index + 1):
            yield Token("escape", index, index + 2)
            index += 2
        elif char in " \t\r\f":
            pivot = index + 1
            while pivot < length and source[pivot] in " \t\r\f":
                pivot += 1
            yield Token("space", index, pivot)
            index = pivot
        elif char.isalnum() or char == "_":
            pivot = index + 1
            while pivot < length and (source[pivot].isalnum() or source[pivot] == "_"):
                pivot += 1
            yield Token("word", index, pivot)
            index = pivot
        else:
            yield Token("symbol", index, index + 1)
            index += 1


def blank(source, /):
    """
    Return `source` with every string literal and comment replaced by spaces.

    Offsets and line breaks are preserved, so a match found in the blanked copy
    points at the same place in the original text.
    """
    parts = []
    cursor = 0
    for token in lex(source):
        if token.kind not in ("string", "comment"):
            continue
        parts.append(source[cursor:token.start])
        parts.append("".join("\n" if x == "\n" else " " for x in source[token.start:token.end]))
        cursor = token.end
    parts.append(source[cursor:])
    return "".join(parts)


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Notes
- Singleton: there is only one Unset instance.
- Falsey: bool(Unset) is False, but it is not equivalent to None or 0.
"""


__all__ = (
    # Functions
    "coalesce",
    "mirror",
    "isprivate",
    "lex",
    "blank",

    # Types
    "UnsetType",
    "Token",

    # Constants
    "Unset",
    "CONSTRUCTORS",
)
