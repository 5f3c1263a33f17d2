"""
Signature reconstruction for task listings.

A task is written as `def build(self, c, target="all")` but invoked as
`deckhand build all`: the receiver and the context are supplied by the runner,
so the help text shows `build(target="all")`. The text is rebuilt from the
callable's source rather than from inspect.signature() so defaults read exactly
as the author wrote them (quotes, expressions and annotations included).

Reconstruction is cosmetic: it never raises. When source text is unavailable
(builtins, partials, lambdas, callables defined in a REPL) the bare name is used.
"""
import inspect
import re

from .utils import Unset, coalesce, lex, blank

_HEAD = re.compile(r"(?:async\s+)?def\s+(?P<name>\w+)\s*\(")


def _parameters(source, start, /):
    """
    Split the parameter text that begins at `start` (just past the opening
    parenthesis) into cleaned, top-level parameters.

    Returns None when the closing parenthesis is never found.
    """
    parameters = []
    current = []
    depth = 0

    for token in lex(source, start):
        match token.kind:
            case "open":
                depth += 1
            case "close" if depth == 0:
                parameters.append("".join(current).strip())
                return [x for x in parameters if x]
            case "close":
                depth -= 1
            case "symbol" if depth == 0 and source[token.start] == ",":
                parameters.append("".join(current).strip())
                current.clear()
                continue
            case "comment":
                continue
            case "space" | "newline" | "escape":
                if current and current[-1] != " ":
                    current.append(" ")
                continue
        current.append(source[token.start:token.end])

    return None


def signature(callback, /, name=Unset):
    """
    Return a one-line display signature for a task callable.

    Parameters
    - callback: the task (plain function or bound method).
    - name: display name; defaults to the name found in the source, then to
      callback.__name__.

    Rules
    - the receiver is dropped for bound methods, then the first remaining
      parameter (the context) is always dropped, along with a positional-only
      marker left at the head;
    - whitespace runs collapse to a single space, comments disappear;
    - an empty remainder renders as `name()`.
    """
    fallback = coalesce(name, getattr(callback, "__name__", None) or "task")

    try:
        source = inspect.getsource(callback)
    except (OSError, TypeError):
        return fallback

    if not (match := _HEAD.search(blank(source))):
        return fallback
    if (parameters := _parameters(source, match.end())) is None:
        return fallback

    if inspect.ismethod(callback) and parameters:
        parameters.pop(0)
    if parameters:
        parameters.pop(0)
    if parameters and parameters[0] == "/":
        parameters.pop(0)

    return "%s(%s)" % (coalesce(name, match["name"]), ", ".join(parameters))


__all__ = (
    "signature",
)
