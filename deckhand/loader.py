"""
Task file loading.

The task file is imported as a regular module named after its stem, with its
directory put at the front of sys.path so `from base import Base` style imports
of sibling files keep working. Errors raised while executing the user's file are
not wrapped: their traceback is the most useful thing to show.
"""
import importlib.util
import inspect
import os.path
import sys

from .faults import FaultCode, MissingTasksFileError, MissingTasksClassError

EXAMPLE = '''\
class Tasks:
    def hello(self, c, name="World"):
        """Say hi"""
        print(f"Hello, {name}!")
'''


def load(path, classname="Tasks"):
    """
    Import the task file at `path` and return its `classname` class.

    Raises
    - MissingTasksFileError: `path` is not a file.
    - MissingTasksClassError: the module has no class named `classname`.
    """
    if not os.path.isfile(path):
        raise MissingTasksFileError(
            f"No {os.path.basename(path)} file found in {os.path.dirname(os.path.abspath(path))}",
            code=FaultCode.MISSING_TASKS_FILE,
            title="missing tasks file",
            hint=f"create {os.path.basename(path)} with a {classname} class, for example:",
            example=EXAMPLE.replace("class Tasks:", f"class {classname}:")
        )

    path = os.path.abspath(path)
    if (directory := os.path.dirname(path)) not in sys.path:
        sys.path.insert(0, directory)

    name = os.path.splitext(os.path.basename(path))[0]
    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise

    if not inspect.isclass(cls := getattr(module, classname, None)):
        raise MissingTasksClassError(
            f"{os.path.basename(path)} does not define a {classname} class",
            code=FaultCode.MISSING_TASKS_CLASS,
            title="missing tasks class",
            hint=f"define `class {classname}:` at the top level of {os.path.basename(path)}"
        )
    return cls


__all__ = (
    "load",
)
