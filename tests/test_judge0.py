"""
Tests for the Judge0 client.
"""

from __future__ import annotations

import json

import httpx
import pytest

from lessonrun.judge0 import Judge0Client, Judge0Error, language_id, summarize
from lessonrun.results import SUCCESS_MESSAGE


API_URL = "https://judge0-ce.p.rapidapi.com"


def test_language_ids():
    assert language_id("javascript") == 63
    assert language_id("Python") == 71
    assert language_id("c++") == 54
    assert language_id("ruby") is None


def test_summarize_accepted():
    body = summarize({"status": {"id": 3, "description": "Accepted"}, "stdout": "hi\n", "time": "0.01", "memory": 900})
    assert body["success"] is True
    assert body["output"] == "hi\n"
    assert body["time"] == "0.01"
    assert body["memory"] == 900


def test_summarize_accepted_without_output():
    body = summarize({"status": {"id": 3}, "stdout": None})
    assert body["output"] == SUCCESS_MESSAGE
    assert body["stderr"] == ""
    assert body["time"] == "0"


@pytest.mark.parametrize(
    "result, expected",
    [
        ({"status": {"id": 11}, "stderr": "Traceback", "compile_output": "x"}, "Traceback"),
        ({"status": {"id": 6}, "compile_output": "main.cpp: error"}, "main.cpp: error"),
        ({"status": {"id": 5}, "message": "Time limit exceeded"}, "Time limit exceeded"),
        ({"status": {"id": 13}}, "Execution failed"),
        ({}, "Execution failed"),
    ],
)
def test_summarize_failures(result, expected):
    body = summarize(result)
    assert body["success"] is False
    assert body["output"] == expected


@pytest.mark.asyncio
async def test_submit_request_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": {"id": 3, "description": "Accepted"}, "stdout": "3\n"})

    client = Judge0Client(API_URL + "/", "rapid-key", transport=httpx.MockTransport(handler))
    body = await client.submit(71, "print(1 + 2)", stdin="in")

    assert body["output"] == "3\n"
    assert seen["url"].path == "/submissions"
    assert seen["url"].params["base64_encoded"] == "false"
    assert seen["url"].params["wait"] == "true"
    assert seen["headers"]["X-RapidAPI-Key"] == "rapid-key"
    assert seen["headers"]["X-RapidAPI-Host"] == "judge0-ce.p.rapidapi.com"
    assert seen["body"] == {
        "language_id": 71,
        "source_code": "print(1 + 2)",
        "stdin": "in",
        "cpu_time_limit": 5,
        "memory_limit": 128000,
        "wall_time_limit": 10,
    }


@pytest.mark.asyncio
async def test_submit_http_error_status():
    client = Judge0Client(API_URL, "k", transport=httpx.MockTransport(lambda request: httpx.Response(429)))
    with pytest.raises(Judge0Error, match="429"):
        await client.submit(63, "1")


@pytest.mark.asyncio
async def test_submit_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client = Judge0Client(API_URL, "k", transport=httpx.MockTransport(handler))
    with pytest.raises(Judge0Error, match="request failed"):
        await client.submit(63, "1")


@pytest.mark.asyncio
async def test_submit_unreadable_reply():
    client = Judge0Client(API_URL, "k", transport=httpx.MockTransport(lambda request: httpx.Response(200, text="oops")))
    with pytest.raises(Judge0Error, match="unreadable"):
        await client.submit(63, "1")


def test_configured_requires_key():
    assert Judge0Client(API_URL).configured is False
    assert Judge0Client(API_URL, "k").configured is True
