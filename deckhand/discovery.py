"""
Task discovery: which names does a live Tasks instance expose?

- root tasks are the public methods found along the instance's MRO, child first,
  each name listed once;
- namespaces are public instance attributes holding a user-defined object that
  exposes at least one public callable (`self.db = Database()` gives `db:*`).

Discovery works on the live instance, never on the source text, so tasks added by
mixins, metaclasses or plain assignment show up like any other method.
"""
import builtins
import functools
import inspect
from collections import namedtuple

from .utils import isprivate

# Descriptors whose value only exists once their code runs.
EVALUATED = (property, functools.cached_property)

Discovery = namedtuple("Discovery", ("root", "namespaced"))
Discovery.__doc__ = """
root: ordered tuple of root task names.
namespaced: ordered dict mapping a namespace name to the tuple of its task names.
"""


class Namespace:
    """
    Marker base for namespace objects.

    A plain object only lends the members declared on its own class, matching what
    a reader sees in the file. Deriving from Namespace opts into the whole MRO (Namespace
    and object left out), so a namespace can be assembled from mixins.
    """
    __slots__ = ()


def _public(owner, names, /):
    for name in names:
        if isprivate(name):
            continue
        # Nested classes are helpers; properties are never evaluated.
        if isinstance(inspect.getattr_static(owner, name, None), (type, *EVALUATED)):
            continue
        if callable(getattr(owner, name, None)):
            yield name


def _unique(iterable, /):
    return tuple(dict.fromkeys(iterable))


def qualifies(object, /):
    """Return True when `object` may act as a namespace (before looking at its members)."""
    return not (
        object is None or
        type(object).__module__ == "builtins" or
        inspect.isclass(object) or
        inspect.ismodule(object) or
        inspect.isroutine(object)
    )


def members(object, /):
    """Return the public task names exposed by a namespace object, in declaration order."""
    if not qualifies(object):
        return ()

    if isinstance(object, Namespace):
        levels = tuple(cls for cls in type(object).__mro__ if cls not in (Namespace, builtins.object))
    else:
        levels = (type(object),)

    return _unique(name for cls in levels for name in _public(object, vars(cls)))


def discover(instance, /):
    """
    Build the command surface of a task instance.

    Returns Discovery(root, namespaced); private names (leading underscore,
    constructors included) never appear in either half.
    """
    root = _unique(
        name
        for cls in type(instance).__mro__
        if cls is not object
        for name in _public(instance, vars(cls))
    )

    namespaced = {}
    for name, value in getattr(instance, "__dict__", {}).items():
        if isprivate(name):
            continue
        if names := members(value):
            namespaced[name] = names

    return Discovery(root, namespaced)


__all__ = (
    "Discovery",
    "Namespace",
    "qualifies",
    "members",
    "discover",
)
