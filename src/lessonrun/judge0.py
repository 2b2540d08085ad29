"""
Judge0 client.

The ``/api/execute-code`` route compiles and runs code on a Judge0
instance (by default the RapidAPI hosted one).  Submissions are made
synchronously with ``wait=true`` and conservative limits: 5 seconds of CPU,
10 seconds wall clock, 128 MB of memory.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx

from .results import SUCCESS_MESSAGE


logger = logging.getLogger("lessonrun.judge0")

LANGUAGE_IDS = {
    "javascript": 63,  # Node.js
    "js": 63,
    "python": 71,  # Python 3
    "py": 71,
    "cpp": 54,  # C++ (GCC 9.2.0)
    "c++": 54,
}

ACCEPTED_STATUS_ID = 3
CPU_TIME_LIMIT = 5
MEMORY_LIMIT_KB = 128000
WALL_TIME_LIMIT = 10


class Judge0Error(Exception):
    """Judge0 could not be reached or rejected the submission."""


def language_id(language: str) -> Optional[int]:
    return LANGUAGE_IDS.get(language.strip().lower())


def summarize(result: Dict[str, Any]) -> Dict[str, Any]:
    """Turn a Judge0 submission into the route's response body."""
    response: Dict[str, Any] = {
        "status": result.get("status"),
        "stdout": result.get("stdout") or "",
        "stderr": result.get("stderr") or "",
        "compile_output": result.get("compile_output") or "",
        "message": result.get("message") or "",
        "time": result.get("time") or "0",
        "memory": result.get("memory") or "0",
    }
    status = result.get("status") or {}
    if status.get("id") == ACCEPTED_STATUS_ID:
        response["success"] = True
        response["output"] = response["stdout"] or SUCCESS_MESSAGE
    else:
        response["success"] = False
        response["output"] = (
            response["stderr"]
            or response["compile_output"]
            or response["message"]
            or "Execution failed"
        )
    return response


class Judge0Client:
    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def submit(self, language_id: int, source_code: str, stdin: str = "") -> Dict[str, Any]:
        """Submit code, wait for the verdict and return the summarized body.

        Raises
        ------
        Judge0Error
            On transport failures and non-2xx responses.
        """
        headers = {
            "Content-Type": "application/json",
            "X-RapidAPI-Key": self.api_key or "",
            "X-RapidAPI-Host": urlparse(self.api_url).netloc,
        }
        payload = {
            "language_id": language_id,
            "source_code": source_code,
            "stdin": stdin,
            "cpu_time_limit": CPU_TIME_LIMIT,
            "memory_limit": MEMORY_LIMIT_KB,
            "wall_time_limit": WALL_TIME_LIMIT,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.api_url}/submissions",
                    params={"base64_encoded": "false", "wait": "true"},
                    json=payload,
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            raise Judge0Error(f"Judge0 request failed: {exc}") from exc

        if response.is_error:
            raise Judge0Error(f"Judge0 API error: {response.status_code}")
        try:
            result = response.json()
        except ValueError as exc:
            raise Judge0Error("Judge0 returned an unreadable reply") from exc
        logger.info("Judge0 verdict: %s", (result.get("status") or {}).get("description"))
        return summarize(result)
