"""
Python interpreter runtime.

``loader`` acquires and caches the runtime process; ``worker`` is the
program that runs inside it.
"""

from .loader import (
    LoaderState,
    ProcessChannel,
    RuntimeBridgeError,
    RuntimeHandle,
    RuntimeLoader,
    RuntimeUnavailable,
)

__all__ = [
    "LoaderState",
    "ProcessChannel",
    "RuntimeBridgeError",
    "RuntimeHandle",
    "RuntimeLoader",
    "RuntimeUnavailable",
]
