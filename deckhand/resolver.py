"""
Command resolution: turn a command-line token into a bound callable.

Accepted shapes
- `build`        → root task (`instance.build`)
- `db:migrate`   → namespaced task (`instance.db.migrate`)
- `db.migrate`   → same, dotted form (used only when the token has no colon)
- `db_migrate`   → reachable through `db:migrate` as a legacy flat name, with a warning

Privacy is checked on the parsed token before any attribute is touched, so a
private member is never even looked up.
"""
import inspect
from collections import namedtuple

from .discovery import EVALUATED, qualifies
from .faults import FaultCode, PrivateTaskError, UnknownTaskError, LegacyTaskNameWarning, trigger as _trigger
from .utils import isprivate

ParsedCommand = namedtuple("ParsedCommand", ("namespace", "method"))
Resolution = namedtuple("Resolution", ("callback", "target", "legacy"))


def parse(token, /):
    """
    Split a token into (namespace, method).

    The colon wins over the dot; only the first occurrence of the chosen separator
    splits, so `a:b:c` parses as ("a", "b:c") and later fails to resolve.
    """
    for separator in (":", "."):
        if separator in token:
            namespace, _, method = token.partition(separator)
            return ParsedCommand(namespace, method)
    return ParsedCommand(None, token)


def _unknown(token, /):
    return UnknownTaskError(
        f'Unknown task "{token}"',
        code=FaultCode.UNKNOWN_TASK,
        title="unknown task",
        hint="run with --list to see the available tasks"
    )


def _attribute(object, name, /):
    # Properties are never evaluated while resolving.
    if isinstance(inspect.getattr_static(object, name, None), EVALUATED):
        return None
    return getattr(object, name, None)


def _callable(object, name, /):
    value = _attribute(object, name)
    return value if callable(value) and not inspect.isclass(value) else None


def resolve(token, instance, /, trigger=_trigger):
    """
    Resolve `token` against a task instance.

    Returns Resolution(callback, target, legacy) where target is the object the
    callback is bound to (the instance or a namespace object) and legacy tells
    whether the flat `namespace_method` fallback was used.

    Raises
    - PrivateTaskError: the namespace or the method is private.
    - UnknownTaskError: nothing matches the token.
    """
    namespace, method = parse(token)

    for name in (namespace, method):
        if name and isprivate(name):
            raise PrivateTaskError(
                f'Cannot run private task "{token}"',
                code=FaultCode.PRIVATE_TASK,
                title="private task",
                hint="names starting with an underscore are helpers, not tasks"
            )

    if not method or namespace == "":
        raise _unknown(token)

    if namespace is None:
        if callback := _callable(instance, method):
            return Resolution(callback, instance, False)
        raise _unknown(token)

    target = _attribute(instance, namespace)
    if qualifies(target) and (callback := _callable(target, method)):
        return Resolution(callback, target, False)

    if callback := _callable(instance, legacy := f"{namespace}_{method}"):
        trigger(LegacyTaskNameWarning(
            f'"{legacy}" is a legacy task name',
            code=FaultCode.LEGACY_TASK_NAME,
            title="legacy task name",
            hint=f'move it to a "{namespace}" namespace and call it as "{namespace}:{method}"'
        ))
        return Resolution(callback, instance, True)

    raise _unknown(token)


__all__ = (
    "ParsedCommand",
    "Resolution",
    "parse",
    "resolve",
)
