"""
Deckhand faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- TaskError / TaskWarning: base types that carry message + options and know how
  to render themselves in a friendly and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/deferred/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Token-first messages: every resolution message repeats the exact token the user
  typed, so a typo is visible without scrolling back.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.

Integration
- The runner collects the fault where it happens and calls trigger(fault, **ctx).
- In non-shell mode, exceptions are raised and warnings go through `warnings.warn`;
  in shell mode, both are rendered via rich on stderr.
"""
import copy
import re
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text
from rich.traceback import Traceback

from .utils import Unset, UnsetType

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - loading (21xxx)
      • MISSING_TASKS_FILE, MISSING_TASKS_CLASS
    - resolution (22xxx)
      • UNKNOWN_TASK, PRIVATE_TASK
    - execution (23xxx)
      • TASK_FAILED
    - warnings (24xxx)
      • LEGACY_TASK_NAME

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- loading errors (21xxx) ---
    MISSING_TASKS_FILE  = 21101
    MISSING_TASKS_CLASS = 21102

    # --- resolution errors (22xxx) ---
    UNKNOWN_TASK        = 22101
    PRIVATE_TASK        = 22102

    # --- execution errors (23xxx) ---
    TASK_FAILED         = 23101

    # --- warnings (24xxx) ---
    LEGACY_TASK_NAME    = 24101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class _Fault:
    """
    shared state and rendering for errors and warnings.

    options understood by the renderer
    - prog: program name shown in the header (defaults to "deckhand").
    - code: FaultCode shown next to the program name.
    - title: short, lowercased title (rendered title-cased).
    - hint: one actionable sentence.
    - example: optional block of text shown verbatim under the hint.
    - exception: the original exception, rendered as a traceback when debug is set.
    - colorful, fancy, debug, styles: presentation switches.
    """
    __palette__ = {}

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message or ""

    def __rich__(self):
        styles = defaultdict(str, self.__palette__ | self.options.get("styles", {}))
        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble(
            "[ ",
            text(self.options.get("prog", "deckhand"), "prog-name"),
            " — ",
            text(self.options["code"].normalize() if "code" in self.options else "", "code"),
            " | ",
            text(self.options.get("title", re.sub(r"(?<!^)(?=[A-Z])", " ", type(self).__name__)).title(), "title"),
            " ]"
        )
        renders = [text(self.message, "message")]

        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        if example := self.options.get("example"):
            renders.append(text(example, "example"))
        if self.options.get("debug") and (exception := self.options.get("exception")):
            renders.append(Traceback.from_exception(type(exception), exception, exception.__traceback__))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class TaskError(_Fault, Exception):
    __palette__ = {
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "title": "bold #FF4DA6",  # friendly pinky title
        "message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
        "example": "#D6D6DE",
    }

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)


class MissingTasksFileError(TaskError): ...
class MissingTasksClassError(TaskError): ...
class UnknownTaskError(TaskError): ...
class PrivateTaskError(TaskError): ...
class TaskFailedError(TaskError): ...


class TaskWarning(_Fault, Warning):
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",  # amber fault code for warnings
        "title": "bold #FFC2E0",  # softer pinky title for warnings
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
        "example": "#D6D6DE",
    }

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=3)
        console.print(self)


class LegacyTaskNameWarning(TaskWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via rich console; otherwise, errors are
      raised and warnings are emitted through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "TaskError",
    "MissingTasksFileError",
    "MissingTasksClassError",
    "UnknownTaskError",
    "PrivateTaskError",
    "TaskFailedError",
    "TaskWarning",
    "LegacyTaskNameWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
