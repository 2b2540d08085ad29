"""
Executor for running JavaScript snippets.

JavaScript is evaluated in process by an embedded V8 engine.  A new engine
context is created for every run so globals declared by one snippet are
not visible to the next.  Console output is collected by the harness from
:mod:`lessonrun.capture`.

There is no fallback tier for JavaScript: a program error is reported to
the learner as ``Error: <message>``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from py_mini_racer import MiniRacer

from ..capture import console_capture_script
from .base import SUCCESS_MESSAGE, BackendOutcome, CodeExecutor


logger = logging.getLogger("lessonrun.executor.javascript")


class JavaScriptExecutor(CodeExecutor):
    """Evaluate JavaScript in a fresh V8 context."""

    name = "javascript"

    def __init__(self, context_factory: Callable[[], Any] = MiniRacer) -> None:
        self._context_factory = context_factory

    async def execute(self, code: str) -> BackendOutcome:
        try:
            context = self._context_factory()
            raw = context.eval(console_capture_script(code))
            report = json.loads(raw)
        except Exception as exc:
            logger.exception("JavaScript engine failure")
            return BackendOutcome.failed(f"Error: {exc}")

        lines = report.get("lines") or []
        if not report.get("ok"):
            return BackendOutcome.failed(f"Error: {report.get('error', '')}")

        if lines:
            output = "\n".join(lines)
        elif report.get("defined"):
            output = report.get("value") or ""
        else:
            output = SUCCESS_MESSAGE
        return BackendOutcome.succeeded(output)
