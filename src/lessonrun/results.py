"""
Request, result and outcome types shared by every backend.

A backend attempt reports a :class:`BackendOutcome`:

* ``SUCCEEDED`` – the program ran and the result is final.
* ``FAILED`` – the program ran (or was compiled) and reported an error.
  The result is still final; there is nothing better to fall back to.
* ``UNAVAILABLE`` – the backend's own infrastructure could not be used
  (runtime did not load, service not deployed, bridge broke).  The
  dispatcher moves on to the next backend in the chain.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


SUCCESS_MESSAGE = "Code executed successfully"


@dataclass(frozen=True)
class ExecutionRequest:
    """A snippet submitted for execution.

    Attributes
    ----------
    language: str
        Language name as given by the caller; aliases are resolved by the
        dispatcher.
    source_code: str
        The user supplied code.
    """

    language: str
    source_code: str


@dataclass(frozen=True)
class ExecutionResult:
    """Result of running a code snippet.

    Attributes
    ----------
    success: bool or None
        Whether the run is classified as a success.  ``None`` means no
        verdict was reached (the snippet was empty) and callers should
        keep whatever state they showed before.
    output: str
        Human readable output, always a string.
    """

    success: Optional[bool]
    output: str

    def to_dict(self) -> dict:
        return {"success": self.success, "output": self.output}


class OutcomeKind(str, enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class BackendOutcome:
    """Outcome of a single backend attempt."""

    kind: OutcomeKind
    result: Optional[ExecutionResult] = None
    reason: str = ""

    @classmethod
    def succeeded(cls, output: str) -> "BackendOutcome":
        return cls(OutcomeKind.SUCCEEDED, ExecutionResult(True, output))

    @classmethod
    def failed(cls, output: str) -> "BackendOutcome":
        return cls(OutcomeKind.FAILED, ExecutionResult(False, output))

    @classmethod
    def unavailable(cls, reason: str) -> "BackendOutcome":
        return cls(OutcomeKind.UNAVAILABLE, reason=reason)

    @property
    def is_final(self) -> bool:
        return self.kind is not OutcomeKind.UNAVAILABLE
