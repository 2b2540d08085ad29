"""
Editor-side state around the dispatcher.

:class:`CodeSession` is what an editor widget keeps per code block: the
current buffer, the last output and its status, and the optional expected
output of an exercise.  It notifies observers after each edit and after
each run.  Rendering is left to the caller.
"""

from __future__ import annotations

from typing import Callable, Optional

from .dispatcher import Dispatcher
from .languages import display_name
from .results import ExecutionResult


CodeChangeCallback = Callable[[str], None]
CodeRunCallback = Callable[[str, str, bool], None]


class CodeSession:
    def __init__(
        self,
        dispatcher: Dispatcher,
        language: str = "javascript",
        initial_code: str = "",
        expected_output: Optional[str] = None,
        on_code_change: Optional[CodeChangeCallback] = None,
        on_code_run: Optional[CodeRunCallback] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.language = language
        self.initial_code = initial_code
        self.expected_output = expected_output
        self.on_code_change = on_code_change
        self.on_code_run = on_code_run
        self.code = initial_code
        self.output = ""
        self.success = False
        self.running = False

    @property
    def title(self) -> str:
        return f"{display_name(self.language)} Editor"

    @property
    def status(self) -> str:
        if self.running:
            return "Running..."
        if self.success:
            return "Success"
        if self.output:
            return "Error"
        return "Ready"

    def edit(self, text: Optional[str]) -> None:
        self.code = text or ""
        if self.on_code_change is not None:
            self.on_code_change(self.code)

    def matches_expected(self, output: str) -> bool:
        if not self.expected_output:
            return False
        return output.strip() == self.expected_output.strip()

    async def run(self) -> ExecutionResult:
        """Execute the buffer and update output and status.

        An empty buffer only shows the prompt; the previous status is kept
        and observers are not notified.
        """
        self.running = True
        self.output = "Running code..."
        try:
            result = await self.dispatcher.execute(self.language, self.code)
        finally:
            self.running = False

        self.output = result.output
        if result.success is None:
            return result

        self.success = bool(result.success) or self.matches_expected(result.output)
        if self.on_code_run is not None:
            self.on_code_run(self.code, result.output, bool(result.success))
        return result

    def clear_output(self) -> None:
        self.output = ""
        self.success = False

    def reset(self) -> None:
        self.code = self.initial_code
        self.clear_output()
