"""
Executor for C++ snippets.

C++ is compiled and run by the remote compile service.  When that service
is not configured or not deployed the executor reports ``UNAVAILABLE``
and the dispatcher continues with the C++ simulator.
"""

from __future__ import annotations

from ..remote import RemoteCompileClient
from .base import BackendOutcome, CodeExecutor


class CppExecutor(CodeExecutor):
    """Compile and run C++ through :class:`~lessonrun.remote.RemoteCompileClient`."""

    name = "cpp-remote"

    def __init__(self, client: RemoteCompileClient) -> None:
        self.client = client

    async def execute(self, code: str) -> BackendOutcome:
        return await self.client.compile("cpp", code)
