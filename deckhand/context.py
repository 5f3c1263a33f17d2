"""
Execution context handed to every task as its first argument.

    class Tasks:
        def build(self, c, target="all"):
            with c.cd("src"):
                c.run(f"make {target}", echo=True)

Options
- echo: print `$ command` before running it.
- warn: a non-zero exit returns the Result instead of raising UnexpectedExit.
- hide: capture stdout/stderr (stripped) instead of streaming them.
- cwd: working directory for commands (defaults to the process cwd).
"""
import contextlib
import os
import subprocess
from collections import namedtuple
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .utils import Unset, coalesce, mirror

console = Console(highlight=False)


class Result(namedtuple("Result", ("command", "stdout", "stderr", "code"))):
    __slots__ = ()

    @property
    def ok(self):
        return self.code == 0

    @property
    def failed(self):
        return not self.ok


class UnexpectedExit(Exception):
    """A command exited with a non-zero status while `warn` was off."""

    def __init__(self, result, /):
        super().__init__("command failed with exit code %d: %s" % (result.code, result.command))
        self.result = result


class Context:
    _options = ("echo", "warn", "hide", "cwd")

    cwd = mirror("cwd")

    def __init__(self, *, echo=False, warn=False, hide=False, cwd=Unset):
        self._config = MappingProxyType({"echo": echo, "warn": warn, "hide": hide})
        self._cwd = coalesce(cwd, None) or os.getcwd()

    def __repr__(self):
        options = ", ".join(f"{key}={value!r}" for key, value in self._config.items())
        return f"{type(self).__name__}(cwd={self._cwd!r}, {options})"

    @property
    def config(self):
        return self._config

    @property
    def pwd(self):
        return self._cwd

    def run(self, command, /, **overrides):
        """
        Run `command` through the shell and return its Result.

        Per-call overrides accept the same names as the constructor.

        Raises
        - TypeError: on an unknown override.
        - UnexpectedExit: on a non-zero exit status unless `warn` is set.
        """
        if unknown := set(overrides) - set(self._options):
            raise TypeError(f"run() got unexpected keyword arguments: {', '.join(sorted(unknown))}")

        options = {**self._config, "cwd": self._cwd, **overrides}
        if options["echo"]:
            console.print(Text.assemble(("$ ", "dim"), (command, "bold")))

        process = subprocess.run(
            command,
            shell=True,
            cwd=options["cwd"],
            capture_output=bool(options["hide"]),
            text=True
        )
        result = Result(
            command,
            (process.stdout or "").strip(),
            (process.stderr or "").strip(),
            process.returncode
        )
        if result.failed and not options["warn"]:
            raise UnexpectedExit(result)
        return result

    def sudo(self, command, /, **overrides):
        return self.run(f"sudo {command}", **overrides)

    def local(self, command, /, **overrides):
        return self.run(command, **overrides)

    @contextlib.contextmanager
    def cd(self, directory, /):
        """Run the enclosed commands from `directory` (relative to the current cwd)."""
        previous = self._cwd
        self._cwd = os.path.join(previous, os.fspath(directory))
        try:
            yield self
        finally:
            self._cwd = previous


__all__ = (
    "Context",
    "Result",
    "UnexpectedExit",
)
