"""
Heuristic Python simulator.

Used when the interpreter runtime cannot be reached.  It does not parse or
run Python: it walks the source line by line, remembers simple
assignments, skips the bodies of ``def`` and ``class`` blocks, and turns
``print(...)`` calls into output lines.  The goal is plausible output for
the curated lesson snippets, nothing more.

Arguments of ``print`` are resolved in this order:

1. the known expression table from :mod:`.lessons`;
2. the canned replies of the two assistant methods (``ask``/``respond``);
3. a variable assigned earlier in the snippet;
4. a quoted string or numeric literal;
5. an f-string, whose ``{expr}`` spans are resolved with 1, 3 and 4;
6. otherwise the expression itself in brackets, e.g. ``[total]``.

The simulator is a pure function of the source and always succeeds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..executor.base import BackendOutcome, CodeExecutor, ExecutionResult
from .lessons import PYTHON_CANNED_METHODS, PYTHON_KNOWN_EXPRESSIONS
from .rules import Rule, RuleTable, SourceLine, matches, split_lines, split_outside, unescape


NO_OUTPUT_MESSAGE = (
    "Python code executed in simulation mode (no output detected).\n\n"
    "Note: The Python runtime could not be loaded, so this result was simulated. "
    "Only print() output of simple statements is shown."
)

_STRING_RE = re.compile(r"""^(?P<q>["'])(?P<body>(?:\\.|(?!(?P=q)).)*)(?P=q)$""")
_FSTRING_RE = re.compile(r"""^[fF](?P<q>["'])(?P<body>(?:\\.|(?!(?P=q)).)*)(?P=q)$""")
_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?$")
_INTEGER_RE = re.compile(r"^-?\d+$")
_SPAN_RE = re.compile(r"\{\{|\}\}|\{([^{}]+)\}")
_KEYWORD_ARG_RE = re.compile(r"^[A-Za-z_]\w*\s*=(?!=)")
_CANNED_CALL_RE = re.compile(
    r"""^[A-Za-z_][\w.]*\.(?P<method>\w+)\(\s*(?P<q>["'])(?P<arg>.*?)(?P=q)\s*\)$"""
)
_CONSTRUCTOR_RE = re.compile(r"^(?P<name>[A-Za-z_]\w*)\(.*\)$")
_COLLECTION_RE = re.compile(r"^[\[({].*[\])}]$")


@dataclass
class SimulatorState:
    """Per-run bookkeeping; discarded when the run ends."""

    variables: Dict[str, str] = field(default_factory=dict)
    definitions: Dict[str, str] = field(default_factory=dict)
    in_definition: bool = False
    output: List[str] = field(default_factory=list)


def _literal(expr: str) -> Optional[str]:
    match = _STRING_RE.match(expr)
    if match:
        return unescape(match.group("body"))
    if _NUMBER_RE.match(expr):
        return expr
    return None


def _lookup(expr: str, state: SimulatorState) -> Optional[str]:
    if expr in PYTHON_KNOWN_EXPRESSIONS:
        return PYTHON_KNOWN_EXPRESSIONS[expr]
    if expr in state.variables:
        return state.variables[expr]
    return _literal(expr)


def _canned_reply(expr: str) -> Optional[str]:
    match = _CANNED_CALL_RE.match(expr)
    if not match:
        return None
    replies = PYTHON_CANNED_METHODS.get(match.group("method"))
    if replies is None:
        return None
    return replies.get(match.group("arg"))


def _format_span(inner: str, state: SimulatorState) -> str:
    inner = inner.strip()
    if inner in PYTHON_KNOWN_EXPRESSIONS:
        return PYTHON_KNOWN_EXPRESSIONS[inner]
    base = re.split(r"[!:]", inner, maxsplit=1)[0].strip()
    value = _lookup(base, state)
    if value is None:
        return f"[{base}]"
    return value


def _fstring(expr: str, state: SimulatorState) -> Optional[str]:
    match = _FSTRING_RE.match(expr)
    if not match:
        return None

    def substitute(span: re.Match) -> str:
        token = span.group(0)
        if token == "{{":
            return "{"
        if token == "}}":
            return "}"
        return _format_span(span.group(1), state)

    return unescape(_SPAN_RE.sub(substitute, match.group("body")))


def _resolve_one(expr: str, state: SimulatorState) -> str:
    expr = expr.strip()
    canned = _canned_reply(expr)
    if canned is not None:
        return canned
    value = _lookup(expr, state)
    if value is not None:
        return value
    formatted = _fstring(expr, state)
    if formatted is not None:
        return formatted
    return f"[{expr}]"


def resolve_print_argument(argument: str, state: SimulatorState) -> str:
    argument = argument.strip()
    if argument in PYTHON_KNOWN_EXPRESSIONS:
        return PYTHON_KNOWN_EXPRESSIONS[argument]
    positional = [
        part for part in split_outside(argument, ",")
        if part.strip() and not _KEYWORD_ARG_RE.match(part.strip())
    ]
    return " ".join(_resolve_one(part, state) for part in positional)


def _guess_value(expr: str, state: SimulatorState) -> Optional[str]:
    expr = expr.strip()
    match = _STRING_RE.match(expr)
    if match:
        return unescape(match.group("body"))
    if _INTEGER_RE.match(expr) or _NUMBER_RE.match(expr):
        return expr
    if _COLLECTION_RE.match(expr):
        return expr
    if expr in state.variables:
        return state.variables[expr]
    formatted = _fstring(expr, state)
    if formatted is not None:
        return formatted
    constructor = _CONSTRUCTOR_RE.match(expr)
    if constructor:
        name = constructor.group("name")
        if state.definitions.get(name) == "class" or name[:1].isupper():
            return f"<{name} object>"
    return None


# Handlers


def _skip(line: SourceLine, state: SimulatorState, found: object) -> None:
    pass


def _close_definition(line: SourceLine, state: SimulatorState, found: object) -> None:
    state.in_definition = False


def _open_definition(line: SourceLine, state: SimulatorState, found: re.Match) -> None:
    state.definitions[found.group("name")] = found.group("kind")
    state.in_definition = True


def _print(line: SourceLine, state: SimulatorState, found: re.Match) -> None:
    state.output.append(resolve_print_argument(found.group("args"), state))


def _assign(line: SourceLine, state: SimulatorState, found: re.Match) -> None:
    name = found.group("name")
    value = _guess_value(found.group("value"), state)
    if value is None:
        state.variables.pop(name, None)
    else:
        state.variables[name] = value


RULES = RuleTable[SimulatorState](
    [
        Rule(
            "definition body",
            lambda line, state: state.in_definition and (line.indented or line.blank),
            _skip,
        ),
        Rule("definition end", lambda line, state: state.in_definition, _close_definition, consumes=False),
        Rule("noise", matches(r"^(?:$|#|@|import\s|from\s+\S+\s+import\s)", comment="#"), _skip),
        Rule(
            "definition",
            matches(r"^(?:async\s+)?(?P<kind>def|class)\s+(?P<name>[A-Za-z_]\w*)"),
            _open_definition,
        ),
        Rule("print", matches(r"^print\s*\((?P<args>.*)\)\s*;?\s*$", comment="#"), _print),
        Rule(
            "assignment",
            matches(r"^(?P<name>[A-Za-z_]\w*)\s*=(?!=)\s*(?P<value>.+)$", comment="#"),
            _assign,
        ),
    ]
)


def simulate_python(source: str) -> ExecutionResult:
    """Simulate ``source`` and return the plausible output."""
    state = RULES.walk(split_lines(source), SimulatorState())
    if not state.output:
        return ExecutionResult(True, NO_OUTPUT_MESSAGE)
    return ExecutionResult(True, "\n".join(state.output))


class PythonSimulator(CodeExecutor):
    """Terminal Python tier: never unavailable."""

    name = "python-simulator"

    async def execute(self, code: str) -> BackendOutcome:
        result = simulate_python(code)
        return BackendOutcome.succeeded(result.output)
