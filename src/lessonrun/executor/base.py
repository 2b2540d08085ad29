"""
Base interface for code execution backends.

All concrete executors should inherit from :class:`CodeExecutor` and
implement the :meth:`execute` coroutine.  An executor makes one attempt
at running a snippet and reports a
:class:`~lessonrun.results.BackendOutcome`.

Executors may raise; the dispatcher treats an escaped exception as
``UNAVAILABLE`` for that tier.
"""

from __future__ import annotations

import abc

from ..results import (
    SUCCESS_MESSAGE,
    BackendOutcome,
    ExecutionRequest,
    ExecutionResult,
    OutcomeKind,
)

__all__ = [
    "SUCCESS_MESSAGE",
    "BackendOutcome",
    "CodeExecutor",
    "ExecutionRequest",
    "ExecutionResult",
    "OutcomeKind",
]


class CodeExecutor(abc.ABC):
    """
    Abstract base class defining the interface for code executors.

    Subclasses set :attr:`name` for logging and override :meth:`execute`.
    """

    name = "executor"

    @abc.abstractmethod
    async def execute(self, code: str) -> BackendOutcome:
        """Run the provided code snippet once.

        Parameters
        ----------
        code: str
            The user supplied code to run.

        Returns
        -------
        BackendOutcome
            ``SUCCEEDED``/``FAILED`` with a result, or ``UNAVAILABLE``
            with a reason.
        """
        raise NotImplementedError
