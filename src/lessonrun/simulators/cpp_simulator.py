"""
Heuristic C++ simulator.

Used when the remote compile service is not available.  Each stream
statement (``std::cout << a << b;``) is split into its fragments, and each
fragment is resolved as a string literal, an integer literal,
``std::endl``, an entry of the curated expression table, or finally
``[simulated output]``.  ``printf`` calls with a literal format string
print that string with escapes expanded.  Missing ``#include`` lines or a
missing ``main`` only add a note in front of the output.

The simulator is a pure function of the source and always succeeds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

from ..executor.base import BackendOutcome, CodeExecutor, ExecutionResult
from .lessons import CPP_KNOWN_EXPRESSIONS
from .rules import (
    Rule,
    RuleTable,
    SourceLine,
    mask_literals,
    matches,
    split_lines,
    split_outside,
    unescape,
)


MISSING_INCLUDES_NOTE = "Note: C++ simulation mode - missing #include statements\n"
MISSING_MAIN_NOTE = "Note: C++ simulation mode - missing main() function\n"
COMPLETED_MESSAGE = (
    "C++ code simulation completed.\n\n"
    "Note: This is a simulation. For real C++ execution, a server-side "
    "Judge0 API configuration is required."
)
PLACEHOLDER = "[simulated output]"

_STREAM_RE = re.compile(r"\b(?:std::)?cout\s*<<")
_STRING_RE = re.compile(r'^"((?:[^"\\]|\\.)*)"$')
_CHAR_RE = re.compile(r"^'((?:[^'\\]|\\.))'$")
_INTEGER_RE = re.compile(r"^-?\d+$")
_ENDL = {"std::endl", "endl"}


@dataclass
class SimulatorState:
    has_includes: bool = False
    has_main: bool = False
    output: List[str] = field(default_factory=list)


def resolve_fragment(fragment: str) -> str:
    fragment = fragment.strip()
    match = _STRING_RE.match(fragment)
    if match:
        return unescape(match.group(1))
    match = _CHAR_RE.match(fragment)
    if match:
        return unescape(match.group(1))
    if _INTEGER_RE.match(fragment):
        return fragment
    if fragment in _ENDL:
        return "\n"
    for needle, value in CPP_KNOWN_EXPRESSIONS:
        if needle in fragment:
            return value
    return PLACEHOLDER


def stream_statements(text: str) -> List[str]:
    """Return the part after ``cout <<`` of every stream statement in ``text``."""
    statements = []
    # Literal contents are blanked so a quoted "cout <<" is never matched.
    for match in _STREAM_RE.finditer(mask_literals(text)):
        rest = text[match.end():]
        statements.append(split_outside(rest, ";")[0])
    return statements


def _include(line: SourceLine, state: SimulatorState, found: object) -> None:
    state.has_includes = True


def _main(line: SourceLine, state: SimulatorState, found: object) -> None:
    state.has_main = True


def _skip(line: SourceLine, state: SimulatorState, found: object) -> None:
    pass


def _stream(line: SourceLine, state: SimulatorState, found: List[str]) -> None:
    for statement in found:
        for fragment in split_outside(statement, "<<"):
            if fragment.strip():
                state.output.append(resolve_fragment(fragment))


def _printf(line: SourceLine, state: SimulatorState, found: re.Match) -> None:
    state.output.append(unescape(found.group(1)))


RULES = RuleTable[SimulatorState](
    [
        Rule("include", lambda line, state: "#include" in line.text, _include, consumes=False),
        Rule(
            "main",
            lambda line, state: "int main" in line.text or "main()" in line.text,
            _main,
            consumes=False,
        ),
        Rule("comment", matches(r"^//"), _skip),
        Rule("stream", lambda line, state: stream_statements(line.text), _stream),
        Rule("printf", matches(r'printf\s*\(\s*"((?:[^"\\]|\\.)*)"'), _printf),
    ]
)


def simulate_cpp(source: str) -> ExecutionResult:
    """Simulate ``source`` and return the plausible output."""
    lines = [line for line in split_lines(source) if not line.blank]
    state = RULES.walk(lines, SimulatorState())

    notes = ""
    if not state.has_includes:
        notes += MISSING_INCLUDES_NOTE
    if not state.has_main:
        notes += MISSING_MAIN_NOTE

    output = "".join(state.output).strip()
    if output:
        return ExecutionResult(True, notes + output)
    return ExecutionResult(True, notes + COMPLETED_MESSAGE)


class CppSimulator(CodeExecutor):
    """Terminal C++ tier: never unavailable."""

    name = "cpp-simulator"

    async def execute(self, code: str) -> BackendOutcome:
        result = simulate_cpp(code)
        return BackendOutcome.succeeded(result.output)
