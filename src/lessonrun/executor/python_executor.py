"""
Executor for running Python code snippets.

The Python executor hands code to the shared interpreter runtime acquired
by :class:`~lessonrun.runtime.RuntimeLoader`.  The worker captures the
program's stdout and stderr; anything on stderr classifies the run as a
failure.

If the runtime cannot be acquired, or the bridge to it breaks while the
program runs, the executor reports ``UNAVAILABLE`` and the dispatcher
falls back to the Python simulator.  A broken bridge is treated the same
as a runtime that never loaded: the learner still gets an answer.  The
broken handle is never reused; the next run starts a fresh runtime.
"""

from __future__ import annotations

import logging

from ..runtime import RuntimeBridgeError, RuntimeLoader, RuntimeUnavailable
from .base import SUCCESS_MESSAGE, BackendOutcome, CodeExecutor


logger = logging.getLogger("lessonrun.executor.python")


class PythonExecutor(CodeExecutor):
    """Execute Python code in the shared interpreter runtime."""

    name = "python-runtime"

    def __init__(self, loader: RuntimeLoader) -> None:
        self.loader = loader

    async def execute(self, code: str) -> BackendOutcome:
        try:
            handle = await self.loader.acquire()
        except RuntimeUnavailable as exc:
            logger.warning("Python runtime unavailable: %s", exc)
            return BackendOutcome.unavailable(str(exc))

        try:
            stdout, stderr = await handle.run(code)
        except RuntimeBridgeError as exc:
            logger.warning("Python runtime bridge failed: %s", exc)
            return BackendOutcome.unavailable(str(exc))

        if stderr:
            return BackendOutcome.failed(f"Error: {stderr}")
        return BackendOutcome.succeeded(stdout or SUCCESS_MESSAGE)
