"""
Documentation extraction from task-file source text.

The extractor never imports anything: it reads the task file as text and finds
the task class by its declaration, so the listing shows the comments and
docstrings the author actually wrote, including the ones on methods of a parent
class that lives in another file.

Pipeline
- locate `class <name>(...)` (matches inside strings and comments are ignored);
- collect the parent's method docs (one level: same file, or the relatively
  imported module that binds the first positional base);
- isolate the class body by indentation with a bracket/string/comment-aware scan;
- take each member's docstring, else the `#` comment block right above it,
  keeping the first meaningful line;
- child docs override parent docs.

The class doc is the class docstring, else the nearest `#` comment block or bare
string statement above the declaration (decorators and blank lines skipped).
"""
import os.path
import re
from collections import namedtuple

from .utils import isprivate, lex, blank

Documentation = namedtuple("Documentation", ("docs", "classdoc"))

_CLASS = r"^(?P<indent>[ \t]*)class[ \t]+%s\b[ \t]*(?P<open>[(:])"
_DEF = re.compile(r"^(?P<indent>[ \t]*)(?:async[ \t]+)?def[ \t]+(?P<name>\w+)[ \t]*\(", re.MULTILINE)
_FROM = re.compile(
    r"^[ \t]*from[ \t]+(?P<module>\.*[\w.]*)[ \t]+import[ \t]+(?P<names>\([^)]*\)|[^\n]*)", re.MULTILINE
)
_IMPORT = re.compile(r"^[ \t]*import[ \t]+(?P<names>[^\n]*)", re.MULTILINE)
_BASE = re.compile(r"[\w.]+")
_PREFIXES = frozenset(("r", "u", "R", "U"))


Declaration = namedtuple("Declaration", ("indent", "start", "end", "bases"))


def _declaration(blanked, classname, /):
    """
    Locate the header of `classname` in blanked source.

    `end` points right past the header colon and `bases` holds the raw text between
    the header parentheses; the colon is found with a bracket-aware scan so calls
    and subscripts among the bases do not cut the header short.
    """
    for match in re.compile(_CLASS % re.escape(classname), re.MULTILINE).finditer(blanked):
        if match["open"] == ":":
            return Declaration(match["indent"], match.start(), match.end(), "")
        if (end := _colon(blanked, match.end(), 1)) is not None:
            bases = blanked[match.end():end - 1].rstrip().removesuffix(")")
            return Declaration(match["indent"], match.start(), end, bases)
    return None


def _unquote(literal, /):
    for quote in ('"""', "'''", '"', "'"):
        if literal.startswith(quote):
            literal = literal[len(quote):]
            return literal[:-len(quote)] if literal.endswith(quote) else literal
    return literal


def _clean(doc, /):
    """Strip comment markers and indentation from every line of a doc block."""
    return "\n".join(line.strip().lstrip("#*").strip() for line in doc.splitlines()).strip()


def _first(doc, /):
    # Tag lines (@param, :param x:) never make a summary.
    for line in _clean(doc).splitlines():
        if line and not line.startswith(("@", ":")):
            return line
    return None


def _docstring(text, start, /):
    """Return the string literal opening the block that starts after `start`, if any."""
    tokens = lex(text, start)
    for token in tokens:
        if token.kind in ("space", "newline", "comment", "escape"):
            continue
        if token.kind == "word" and text[token.start:token.end] in _PREFIXES:
            token = next(tokens, None)
        if token is not None and token.kind == "string":
            return _unquote(text[token.start:token.end])
        return None
    return None


def _colon(text, start, /, depth=0):
    """Return the offset right past the colon closing a compound statement header."""
    for token in lex(text, start):
        match token.kind:
            case "open":
                depth += 1
            case "close":
                depth -= 1
            case "symbol" if depth == 0 and text[token.start] == ":":
                return token.end
    return None


def _statement(text, position, indent, /):
    """Return the bare string statement covering `position` and opening at `indent`, or None."""
    for token in lex(text):
        if token.start > position:
            break
        if token.kind != "string" or token.end <= position:
            continue
        head = text[text.rfind("\n", 0, token.start) + 1:token.start]
        if head.strip() and head.strip() not in _PREFIXES:
            return None
        if len(head) - len(head.lstrip()) != len(indent):
            return None
        return _unquote(text[token.start:token.end])
    return None


def _preceding(text, blanked, offset, indent, /, strings=False):
    """
    Return the doc block sitting above the line that starts at `offset`.

    Blank lines and decorators are skipped until the block starts; the block is a
    contiguous run of `#` lines or, when `strings` is set, a bare string statement,
    written at `indent`. Anything else in between, a deeper trailing comment or
    docstring of the previous construct included, means there is no block.
    """
    lines = []
    end = offset - 1
    while end >= 0:
        begin = text.rfind("\n", 0, end) + 1
        line = text[begin:end]
        raw = line.strip()
        code = blanked[begin:end].strip()
        aligned = len(line) - len(line.lstrip()) == len(indent)
        if raw.startswith("#") and aligned:
            lines.append(raw)
        elif lines:
            break
        elif not raw or (code.startswith("@") and aligned):
            pass
        elif strings and not code and not raw.startswith("#"):
            return _statement(text, begin + len(line) - len(line.lstrip()), indent)
        else:
            return None
        end = begin - 1
    return "\n".join(reversed(lines)) or None


def _body(text, blanked, start, indent, /):
    """Return the offset where the indented block opened at `start` ends."""
    depth = 0
    for token in lex(text, start):
        match token.kind:
            case "open":
                depth += 1
            case "close":
                depth = max(depth - 1, 0)
            case "newline" if depth == 0:
                end = blanked.find("\n", token.end)
                line = blanked[token.end:len(blanked) if end < 0 else end]
                if not line.strip():
                    continue
                if len(line) - len(line.lstrip()) <= len(indent):
                    return token.end
    return len(text)


def _indentation(blanked, start, end, /):
    """Return the indentation of the first code line of a block, or None for one-liners."""
    for line in blanked[start:end].split("\n")[1:]:
        if line.strip():
            return line[:len(line) - len(line.lstrip())]
    return None


def _methods(text, blanked, classname, /):
    """Return the member docs of `classname` as declared in `text`."""
    if not (declaration := _declaration(blanked, classname)):
        return {}

    start = declaration.end
    end = _body(text, blanked, start, declaration.indent)
    if (indent := _indentation(blanked, start, end)) is None:
        return {}

    docs = {}
    for match in _DEF.finditer(blanked, start, end):
        if match["indent"] != indent or isprivate(match["name"]):
            continue
        doc = None
        if (colon := _colon(text, match.end(), 1)) is not None:
            doc = _docstring(text, colon)
        if doc is None:
            doc = _preceding(text, blanked, match.start(), indent)
        if doc is not None and (line := _first(doc)) is not None:
            docs[match["name"]] = line
    return docs


def _bindings(blanked, /):
    """
    Yield (binding, module, name) for every import statement.

    `name` is None for plain `import module` statements.
    """
    for statement in _FROM.finditer(blanked):
        for item in statement["names"].strip().strip("()").split(","):
            match item.split():
                case [name]:
                    alias = name
                case [name, "as", alias]:
                    pass
                case _:
                    continue
            if name != "*":
                yield alias, statement["module"], name

    for statement in _IMPORT.finditer(blanked):
        for item in statement["names"].split(","):
            match item.split():
                case [module]:
                    yield module, module, None
                case [module, "as", alias]:
                    yield alias, module, None


def _locate(path, module, /):
    """Resolve a (possibly relative) module name to a file next to `path`."""
    dots = len(module) - len(module.lstrip("."))
    directory = os.path.dirname(os.path.abspath(path))
    for _ in range(dots - 1):
        directory = os.path.dirname(directory)
    if not (parts := [x for x in module[dots:].split(".") if x]):
        return None
    candidate = os.path.join(directory, *parts)
    for location in (candidate + ".py", os.path.join(candidate, "__init__.py")):
        if os.path.isfile(location):
            return location
    return None


def _imported(path, module, classname, /):
    if (location := _locate(path, module)) is None:
        return {}
    try:
        with open(location, encoding="utf-8") as stream:
            text = stream.read()
    except (OSError, UnicodeDecodeError):
        return {}
    return _methods(text, blank(text), classname)


def _base(bases, /):
    """Return the first positional base of a class header, or None."""
    depth = 0
    current = []
    parts = [current]
    for token in lex(bases):
        match token.kind:
            case "open":
                depth += 1
            case "close":
                depth -= 1
            case "symbol" if depth == 0 and bases[token.start] == ",":
                parts.append(current := [])
                continue
        current.append(bases[token.start:token.end])

    for part in map("".join, parts):
        if not (part := part.strip()) or "=" in part or part.startswith("*"):
            continue
        return match.group() if (match := _BASE.match(part)) else None
    return None


def _parent(path, text, blanked, bases, /):
    """Return the method docs inherited from the first positional base."""
    if not (base := _base(bases)):
        return {}

    if "." not in base:
        if _declaration(blanked, base):
            return _methods(text, blanked, base)
        for alias, module, name in _bindings(blanked):
            if name is not None and alias == base:
                return _imported(path, module, name)
        return {}

    prefix, _, classname = base.rpartition(".")
    for alias, module, name in _bindings(blanked):
        if alias != prefix:
            continue
        if name is not None:
            module = module + name if module.endswith(".") else f"{module}.{name}"
        return _imported(path, module, classname)
    return {}


def extract(path, classname="Tasks"):
    """
    Extract method docs and the class doc of `classname` from the file at `path`.

    Returns a Documentation(docs, classdoc) pair where docs maps public method
    names (inherited ones included) to their first doc line. A missing
    declaration yields ({}, None); an unreadable parent file is ignored.
    """
    with open(path, encoding="utf-8") as stream:
        text = stream.read()
    blanked = blank(text)

    if not (declaration := _declaration(blanked, classname)):
        return Documentation({}, None)

    docs = _parent(path, text, blanked, declaration.bases)
    docs.update(_methods(text, blanked, classname))

    classdoc = _docstring(text, declaration.end)
    if classdoc is None:
        classdoc = _preceding(text, blanked, declaration.start, declaration.indent, strings=True)

    return Documentation(docs, _clean(classdoc) or None if classdoc else None)


__all__ = (
    "Documentation",
    "extract",
)
