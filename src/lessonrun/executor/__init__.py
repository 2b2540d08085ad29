"""
Execution backends for the supported languages.

Each executor makes one attempt at running a snippet and reports a
``BackendOutcome``.  The dispatcher arranges executors and simulators
into a chain per language and walks it until an outcome is final.
Additional executors can be added by implementing the ``CodeExecutor``
interface from ``base.py``.
"""

from .base import (
    SUCCESS_MESSAGE,
    BackendOutcome,
    CodeExecutor,
    ExecutionRequest,
    ExecutionResult,
    OutcomeKind,
)
from .cpp_executor import CppExecutor
from .javascript_executor import JavaScriptExecutor
from .python_executor import PythonExecutor

__all__ = [
    "SUCCESS_MESSAGE",
    "BackendOutcome",
    "CodeExecutor",
    "CppExecutor",
    "ExecutionRequest",
    "ExecutionResult",
    "JavaScriptExecutor",
    "OutcomeKind",
    "PythonExecutor",
]
