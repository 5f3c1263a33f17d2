"""
Deckhand runner: load the task file, render help and listings, run a task.

What this module provides
- Runner: the command-line front end bound to one task file and class.
  • Reserved switches anywhere on the line: -h/--help (or nothing at all),
    -l/--list and --version, in that order of precedence.
  • Everything else is `<task> [args...]`, where task is `name`, `ns:name` or
    `ns.name`, and args are handed to the task as plain strings.
- invoke(prompt, **options): one-shot convenience wrapper around Runner.
- main(): console-script entry point.

Quick start
    # tasks.py
    class Tasks:
        def hello(self, c, name="World"):
            \"\"\"Say hi\"\"\"
            print(f"Hello, {name}!")

    $ deckhand hello Ada
    Hello, Ada!

Rendering
- Listings and help go to stdout, faults to stderr, both through rich.
- A `__styles__` mapping in the task module overrides palette entries and a
  `__prog__` string renames the program in headers.
- colorful=False drops styles, fancy=True wraps output in a panel.
- shell=False (library and test use) raises faults instead of printing them
  and exiting.
"""
import asyncio
import inspect
import os
import os.path
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from . import __version__
from .context import Context
from .discovery import discover
from .extractor import Documentation, extract
from .faults import FaultCode, TaskError, TaskFailedError, trigger
from .loader import load
from .resolver import resolve
from .signatures import signature
from .utils import Unset, coalesce, mirror

HELP = frozenset(("-h", "--help"))
LIST = frozenset(("-l", "--list"))
VERSION = "--version"


async def _wait(awaitable):
    return await awaitable


def _debugging():
    return os.environ.get("DECKHAND_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")


class Runner:
    """
    Command-line front end for a task file.

    Parameters
    - filename: task file name, looked up in `directory` (default "tasks.py").
    - classname: name of the task class inside the file (default "Tasks").
    - directory: where the task file lives (default: the current directory at call time).
    - prog: program name shown in headers and faults.
    - shell: print faults and exit(1) instead of raising them.
    - fancy: wrap output in rich panels.
    - colorful: style output.
    - debug: render tracebacks of failing tasks (default: DECKHAND_DEBUG env variable).
    - context: the Context handed to tasks (default: a fresh Context()).
    """
    filename = mirror("filename")
    classname = mirror("classname")
    prog = mirror("prog")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    debug = mirror("debug")

    def __init__(
            self,
            filename="tasks.py",
            classname="Tasks",
            /,
            *,
            directory=Unset,
            prog="deckhand",
            shell=True,
            fancy=False,
            colorful=True,
            debug=Unset,
            context=Unset
    ):
        if not isinstance(filename, str):
            raise TypeError("Runner() filename must be a string")
        if not isinstance(classname, str) or not classname.isidentifier():
            raise TypeError("Runner() classname must be an identifier string")
        if directory is not Unset and not isinstance(directory, str | os.PathLike):
            raise TypeError("Runner() directory must be a path")
        if not isinstance(prog, str):
            raise TypeError("Runner() prog must be a string")
        if context is not Unset and not isinstance(context, Context):
            raise TypeError("Runner() context must be a Context instance")

        self._filename = filename
        self._classname = classname
        self._directory = directory
        self._prog = prog
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._debug = bool(coalesce(debug, _debugging()))
        self._context = context
        self._module = None

    def __repr__(self):
        return f"{type(self).__name__}({self._filename!r}, {self._classname!r}, prog={self._prog!r})"

    @property
    def directory(self):
        return os.fspath(coalesce(self._directory, os.getcwd()))

    @property
    def path(self):
        return os.path.join(self.directory, self._filename)

    def _brand(self):
        return getattr(self._module, "__prog__", self._prog)

    def trigger(self, fault, /, **options):
        """Surface a fault with this runner's presentation options (explicit options win)."""
        trigger(fault, **{
            "prog": self._brand(),
            "shell": self._shell,
            "fancy": self._fancy,
            "colorful": self._colorful,
            "debug": self._debug,
        } | options)

    def _load(self):
        try:
            cls = load(self.path, self._classname)
        except TaskError as fault:
            return self.trigger(fault)
        self._module = sys.modules.get(cls.__module__)
        return cls()

    def _documentation(self, instance, discovery, /):
        """
        Collect the docs of the task class and of every namespace object's class.

        Namespace docs are stored under "ns:method" next to the root docs, so the
        legacy flat "ns_method" spelling found in the task class keeps priority.
        """
        docs, classdoc = extract(self.path, self._classname)
        docs = dict(docs)

        for namespace in discovery.namespaced:
            cls = type(getattr(instance, namespace))
            try:
                location = inspect.getsourcefile(cls)
            except TypeError:
                continue
            if not location:
                continue
            try:
                members = extract(location, cls.__name__).docs
            except (OSError, UnicodeDecodeError):
                continue
            for method, doc in members.items():
                docs.setdefault(f"{namespace}:{method}", doc)

        return Documentation(docs, classdoc)

    def _styles(self):
        return defaultdict(str, {
            # === Head ===
            "program-name": "bold #FF4D94",  # Magenta-pink brand pop
            "program-version": "bold #00E6FF",  # Cyan version
            "description": "italic #A3A3A3",  # Neutral gray

            # === Listing ===
            "class-doc": "italic #A3A3A3",
            "section": "bold #FFFFFF",  # Pure white headers
            "task": "bold #36C5F0",  # Sky-blue task signatures
            "namespace": "bold #FFD600",  # Amber namespace headers
            "separator": "#4B5563",  # Slate dash
            "doc": "#9CA3AF",  # Muted gray descriptions
            "empty": "#737373 italic",

            # === Usage ===
            "usage-label": "bold #00E6FF",
            "usage": "#E5E7EB",
            "comment": "#737373",

            # === Fancy panel ===
            "panel-title": "bold #FF4D94",
        } | getattr(self._module, "__styles__", {}))

    def _texter(self):
        styles = self._styles()

        def text(fragment, style=""):
            # Normalize to Rich Text. In non-colorful mode, strip styles; preserve existing Text spans.
            if isinstance(fragment, Text):
                return fragment if self._colorful else Text(fragment.plain)
            return Text(str(fragment), styles[style] if self._colorful else "")

        return text

    def _print(self, renders, /):
        console = Console(soft_wrap=True, highlight=False)
        if self._fancy:
            text = self._texter()
            console.print(Panel(Group(*renders), title=text(self._brand(), "panel-title"), title_align="left"))
        else:
            console.print(Group(*renders))

    def _listing(self, instance, /):
        """Build the task listing: class doc, root tasks, then one section per namespace."""
        text = self._texter()
        discovery = discover(instance)
        docs, classdoc = self._documentation(instance, discovery)
        renders = []

        def line(label, doc):
            if not doc:
                return Text.assemble("  ", text(label, "task"))
            return Text.assemble("  ", text(label, "task"), text(" — ", "separator"), text(doc, "doc"))

        if classdoc:
            renders.append(text(classdoc, "class-doc"))
            renders.append(Text())

        renders.append(text("Available tasks:", "section"))
        renders.append(Text())

        for name in discovery.root:
            renders.append(line(signature(getattr(instance, name), name), docs.get(name)))
        if not discovery.root:
            renders.append(Text.assemble("  ", text("(none)", "empty")))

        for namespace, names in discovery.namespaced.items():
            target = getattr(instance, namespace)
            renders.append(Text())
            renders.append(text(f"{namespace}:", "namespace"))
            for name in names:
                doc = docs.get(f"{namespace}_{name}") or docs.get(f"{namespace}:{name}")
                renders.append(line(f"{namespace}:{signature(getattr(target, name), name)}", doc))

        return renders

    def _usage(self):
        text = self._texter()
        prog = self._brand()
        rows = (
            (f"{prog} <task> [args...]", ""),
            (f"{prog} <namespace>:<task> [args...]", ""),
            (f"{prog} -l, --list", "list tasks"),
            (f"{prog} -h, --help", "show this help"),
            (f"{prog} --version", "show version"),
        )
        width = max(len(usage) for usage, _ in rows)
        renders = [text("Usage:", "usage-label")]
        for usage, comment in rows:
            renders.append(Text.assemble(
                "  ",
                text(usage.ljust(width) if comment else usage, "usage"),
                text(f"   # {comment}", "comment") if comment else Text()
            ))
        return renders

    def _heading(self):
        text = self._texter()
        return Text.assemble(
            text(self._brand(), "program-name"),
            text(" — ", "separator"),
            text("Python task runner", "description"),
            text(" — ", "separator"),
            text(f"version {__version__}", "program-version")
        )

    def _helper(self):
        """Render the help screen: heading, task listing and usage."""
        instance = self._load()
        self._print([self._heading(), Text(), *self._listing(instance), Text(), *self._usage()])

    def _lister(self):
        """Render the task listing."""
        instance = self._load()
        self._print(self._listing(instance))

    def _versioner(self):
        """Render the version line; works without a task file."""
        text = self._texter()
        self._print([Text.assemble(
            text(self._brand(), "program-name"),
            text(" — ", "separator"),
            text(f"version {__version__}", "program-version")
        )])

    def _execute(self, token, args, /):
        """
        Resolve `token` and call the task with the shared context and `args`.

        Awaitable results are run to completion. Returns the task's result.
        """
        instance = self._load()
        context = coalesce(self._context, None) or Context()

        try:
            callback, _, _ = resolve(token, instance, trigger=self.trigger)
        except TaskError as fault:
            self.trigger(fault, deferred=True)
            self._print(self._listing(instance))
            sys.exit(1)

        try:
            result = callback(context, *args)
            if inspect.isawaitable(result):
                result = asyncio.run(_wait(result))
        except Exception as exception:
            return self.trigger(TaskFailedError(
                f'Error running "{token}": {str(exception) or type(exception).__name__}',
                code=FaultCode.TASK_FAILED,
                title="task failed",
                hint="set DECKHAND_DEBUG=1 to see the full traceback" if not self._debug else None,
                exception=exception
            ))
        return result

    def __invoke__(self, prompt=Unset):
        """
        Run the command line given by `prompt`.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence; each element is trimmed.

        Returns the task's result for task invocations, None otherwise.

        Raises
        - TypeError: when prompt is not Unset/str/Iterable[str].
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        if not tokens or HELP.intersection(tokens):
            return self._helper()
        if LIST.intersection(tokens):
            return self._lister()
        if VERSION in tokens:
            return self._versioner()

        return self._execute(tokens[0], tokens[1:])


def invoke(prompt=Unset, /, filename="tasks.py", classname="Tasks", **options):
    """
    Convenience runner: build a Runner from `options` and invoke it with `prompt`.

    Parameters
    - prompt: Unset (sys.argv[1:]), a shell-like string or an iterable of strings.
    - filename, classname, **options: forwarded to Runner.
    """
    return Runner(filename, classname, **options).__invoke__(prompt)


def main():
    """Console-script entry point."""
    invoke()


__all__ = (
    "Runner",
    "invoke",
    "main",
)
