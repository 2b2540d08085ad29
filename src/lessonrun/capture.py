"""
Scoped capture of program output.

Two capture scopes are provided, one per in-process evaluation style:

* :func:`capture_streams` swaps ``sys.stdin``, ``sys.stdout`` and
  ``sys.stderr`` for in-memory buffers while Python code runs.  It is used
  by the interpreter runtime worker around every ``exec``.
* :func:`console_capture_script` wraps JavaScript source in a harness that
  replaces ``console.log`` and ``console.error`` with collectors and puts
  the previous functions back in a ``finally`` block.

Both restore the original streams on every exit path, including
exceptions raised by the user's code, so one run can never leave capture
installed for the next.
"""

from __future__ import annotations

import contextlib
import io
import json
import sys
from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass
class CapturedOutput:
    """In-memory buffers filled during a capture scope."""

    stdout: io.StringIO = field(default_factory=io.StringIO)
    stderr: io.StringIO = field(default_factory=io.StringIO)

    def getvalue(self) -> tuple[str, str]:
        return self.stdout.getvalue(), self.stderr.getvalue()


@contextlib.contextmanager
def swap_attributes(target: Any, **replacements: Any) -> Iterator[None]:
    """Temporarily replace attributes of ``target``.

    The previous values are saved before any replacement is installed and
    are written back when the scope exits, whether normally or not.
    """
    saved = {name: getattr(target, name) for name in replacements}
    try:
        for name, value in replacements.items():
            setattr(target, name, value)
        yield
    finally:
        for name, value in saved.items():
            setattr(target, name, value)


@contextlib.contextmanager
def capture_streams(stdin: str = "") -> Iterator[CapturedOutput]:
    """Redirect the interpreter's standard streams to memory.

    Example:
        ```python
        with capture_streams() as captured:
            print("hello")
        stdout, stderr = captured.getvalue()
        ```
    """
    captured = CapturedOutput()
    with swap_attributes(
        sys,
        stdin=io.StringIO(stdin),
        stdout=captured.stdout,
        stderr=captured.stderr,
    ):
        yield captured


_CONSOLE_HARNESS = """
(function () {
  var root = globalThis;
  if (typeof root.console === "undefined") {
    root.console = {};
  }
  var saved = { log: root.console.log, error: root.console.error };
  var lines = [];
  var join = function (args) {
    return Array.prototype.map.call(args, function (arg) { return String(arg); }).join(" ");
  };
  root.console.log = function () { lines.push(join(arguments)); };
  root.console.error = function () { lines.push("ERROR: " + join(arguments)); };
  try {
    var value = (0, eval)(%(source)s);
    return JSON.stringify({
      ok: true,
      lines: lines,
      defined: value !== undefined,
      value: value === undefined ? null : String(value)
    });
  } catch (error) {
    var message = (error !== null && typeof error === "object" && "message" in error)
      ? String(error.message)
      : String(error);
    return JSON.stringify({ ok: false, lines: lines, error: message });
  } finally {
    root.console.log = saved.log;
    root.console.error = saved.error;
  }
})()
"""


def console_capture_script(source: str) -> str:
    """Wrap JavaScript ``source`` so its console output is collected.

    The returned script evaluates to a JSON document with the keys
    ``ok``, ``lines`` and either ``defined``/``value`` or ``error``.
    """
    return _CONSOLE_HARNESS % {"source": json.dumps(source)}
