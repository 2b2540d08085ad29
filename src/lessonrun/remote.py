"""
Client for the remote compile service.

Languages that cannot run in process (C++) are posted to an HTTP endpoint
speaking a small JSON protocol::

    POST <endpoint>
    {"language": "cpp", "code": "..."}

    200 {"success": true, "output": "..."}
    4xx/5xx {"success": false, "error": "...", "output": "..."}

A ``404`` means the service is not deployed in this environment and is not
an error: the client reports ``UNAVAILABLE`` so the caller can fall back
to simulation.  Network failures and unreadable bodies are reported the
same way.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .results import BackendOutcome


logger = logging.getLogger("lessonrun.remote")

DEFAULT_OUTPUT = "C++ execution completed"


class RemoteCompileClient:
    """Post code to the compile endpoint and normalise the reply."""

    def __init__(
        self,
        endpoint: Optional[str],
        *,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def compile(self, language: str, code: str) -> BackendOutcome:
        if not self.endpoint:
            return BackendOutcome.unavailable("compile endpoint not configured")

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    json={"language": language, "code": code},
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            logger.warning("Compile service unreachable at %s: %s", self.endpoint, exc)
            return BackendOutcome.unavailable(f"compile service unreachable: {exc}")

        if response.status_code == 404:
            logger.info("Compile service not deployed at %s", self.endpoint)
            return BackendOutcome.unavailable("compile service not deployed")

        try:
            body = response.json()
        except ValueError:
            logger.warning("Compile service returned a non-JSON body (status %s)", response.status_code)
            return BackendOutcome.unavailable("compile service returned an unreadable reply")
        if not isinstance(body, dict):
            return BackendOutcome.unavailable("compile service returned an unreadable reply")

        output = body.get("output") or body.get("error") or DEFAULT_OUTPUT
        if body.get("success"):
            return BackendOutcome.succeeded(str(output))
        return BackendOutcome.failed(str(output))
