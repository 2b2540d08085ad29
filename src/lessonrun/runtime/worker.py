"""
Interpreter runtime process for Python snippets.

The loader starts this module as a long-lived child process and talks to
it with one JSON document per line:

* on start the worker announces ``{"event": "ready"}``;
* ``{"id": n, "op": "init", "config": {...}}`` preloads modules and
  answers ``{"id": n, "ok": true}``;
* ``{"id": n, "op": "run", "code": "..."}`` executes the code with its
  standard streams captured and answers
  ``{"id": n, "stdout": "...", "stderr": "..."}``.

Every run starts from a fresh namespace built from the preloaded modules,
so names defined by one snippet do not leak into the next.

Usage:

```sh
python -m lessonrun.runtime.worker
```
"""

from __future__ import annotations

import importlib
import json
import sys
import traceback
from typing import Any, Dict, List, TextIO

from ..capture import capture_streams


STANDARD_LIBRARY = [
    "collections",
    "datetime",
    "functools",
    "itertools",
    "json",
    "math",
    "random",
    "re",
    "statistics",
    "string",
]


class Worker:
    """Holds the preloaded namespace and serves protocol requests."""

    def __init__(self) -> None:
        self.base_namespace: Dict[str, Any] = {}
        self.initialized = False

    def initialize(self, config: Dict[str, Any]) -> List[str]:
        names: List[str] = []
        if config.get("full_stdlib"):
            names.extend(STANDARD_LIBRARY)
        for name in config.get("preload") or []:
            if name not in names:
                names.append(name)
        for name in names:
            importlib.import_module(name)
            root = name.split(".")[0]
            self.base_namespace[root] = sys.modules[root]
        self.initialized = True
        return names

    def run(self, code: str) -> Dict[str, str]:
        namespace: Dict[str, Any] = {"__name__": "__main__", "__builtins__": __builtins__}
        namespace.update(self.base_namespace)
        with capture_streams() as captured:
            try:
                byte_code = compile(code, "<lesson>", "exec")
                exec(byte_code, namespace, namespace)
            except SystemExit as exc:
                if exc.code not in (None, 0):
                    print(f"SystemExit: {exc.code}", file=sys.stderr)
            except SyntaxError:
                traceback.print_exc(limit=0)
            except BaseException as exc:
                # Drop this frame so the traceback starts in the learner's code.
                tb = exc.__traceback__.tb_next if exc.__traceback__ else None
                traceback.print_exception(type(exc), exc, tb)
        stdout, stderr = captured.getvalue()
        return {"stdout": stdout, "stderr": stderr}

    def handle(self, message: Dict[str, Any]) -> Dict[str, Any]:
        request_id = message.get("id")
        op = message.get("op")
        if op == "init":
            try:
                loaded = self.initialize(message.get("config") or {})
            except ImportError as exc:
                return {"id": request_id, "error": f"Preload failed: {exc}"}
            return {"id": request_id, "ok": True, "loaded": loaded}
        if op == "run":
            return {"id": request_id, **self.run(str(message.get("code", "")))}
        return {"id": request_id, "error": f"Unknown operation: {op!r}"}


def _send(channel: TextIO, payload: Dict[str, Any]) -> None:
    channel.write(json.dumps(payload) + "\n")
    channel.flush()


def serve(requests: TextIO, channel: TextIO) -> int:
    worker = Worker()
    _send(channel, {"event": "ready", "python": sys.version.split()[0]})
    for line in requests:
        line = line.strip()
        if not line:
            continue
        try:
            message = json.loads(line)
        except json.JSONDecodeError as exc:
            _send(channel, {"id": None, "error": f"Malformed request: {exc}"})
            continue
        _send(channel, worker.handle(message))
    return 0


def main() -> int:
    # Keep private handles on the protocol pipes; user code only ever sees
    # the capture buffers installed around each run.
    return serve(sys.stdin, sys.stdout)


if __name__ == "__main__":
    raise SystemExit(main())
