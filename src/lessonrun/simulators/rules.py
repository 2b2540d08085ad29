"""
A small line-oriented rule interpreter.

A simulator is a :class:`RuleTable`: an ordered list of :class:`Rule`
objects applied to every source line.  For each line the rules are tried
in order; a rule whose predicate returns a truthy value has its handler
called with that value (usually an ``re.Match``).  A consuming rule stops
the search for that line, a non-consuming rule lets the following rules
see the line too.  State lives in a per-run object owned by the caller.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Sequence, TypeVar


S = TypeVar("S")


@dataclass(frozen=True)
class SourceLine:
    number: int
    raw: str

    @property
    def text(self) -> str:
        return self.raw.strip()

    @property
    def blank(self) -> bool:
        return not self.raw.strip()

    @property
    def indented(self) -> bool:
        return self.raw[:1] in (" ", "\t")


@dataclass(frozen=True)
class Rule(Generic[S]):
    name: str
    predicate: Callable[[SourceLine, S], Any]
    handler: Callable[[SourceLine, S, Any], None]
    consumes: bool = True


def matches(pattern: str, flags: int = 0, comment: str = "") -> Callable[[SourceLine, Any], Any]:
    """Predicate that searches the trimmed line for ``pattern``.

    With ``comment`` set, a trailing comment starting with that marker is
    removed first, unless the marker sits inside a string literal.
    """
    compiled = re.compile(pattern, flags)

    def predicate(line: SourceLine, state: Any) -> Any:
        text = strip_comment(line.text, comment) if comment else line.text
        return compiled.search(text)

    return predicate


def split_lines(source: str) -> List[SourceLine]:
    return [SourceLine(number, raw.rstrip("\r")) for number, raw in enumerate(source.split("\n"), 1)]


_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"', "'": "'", "0": "\0"}
_ESCAPE_RE = re.compile(r"\\(.)")


def unescape(text: str) -> str:
    """Expand the common backslash escapes of string literals."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(0)), text)


def split_outside(text: str, separator: str) -> List[str]:
    """Split ``text`` on ``separator`` where it is not inside quotes or brackets."""
    parts: List[str] = []
    depth = 0
    quote = ""
    start = 0
    i = 0
    while i < len(text):
        char = text[i]
        if quote:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
        elif depth == 0 and text.startswith(separator, i):
            parts.append(text[start:i])
            i += len(separator)
            start = i
            continue
        i += 1
    parts.append(text[start:])
    return parts


def mask_literals(text: str) -> str:
    """Blank out the contents of quoted literals, keeping every offset."""
    masked = list(text)
    quote = ""
    i = 0
    while i < len(text):
        char = text[i]
        if quote:
            if char == quote:
                quote = ""
            else:
                masked[i] = " "
                if char == "\\" and i + 1 < len(text):
                    masked[i + 1] = " "
                    i += 1
        elif char in "\"'":
            quote = char
        i += 1
    return "".join(masked)


def strip_comment(text: str, marker: str) -> str:
    """Drop a trailing comment that starts outside any string literal."""
    index = mask_literals(text).find(marker)
    if index < 0:
        return text
    return text[:index].rstrip()


class RuleTable(Generic[S]):
    def __init__(self, rules: Sequence[Rule[S]]) -> None:
        self.rules = list(rules)

    def apply(self, line: SourceLine, state: S) -> None:
        for rule in self.rules:
            found = rule.predicate(line, state)
            if not found:
                continue
            rule.handler(line, state, found)
            if rule.consumes:
                return

    def walk(self, lines: Iterable[SourceLine], state: S) -> S:
        for line in lines:
            self.apply(line, state)
        return state
