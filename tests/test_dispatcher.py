"""
Tests for the execution dispatcher and its fallback chains.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from lessonrun.config import Config
from lessonrun.dispatcher import EMPTY_SOURCE_PROMPT, Dispatcher
from lessonrun.executor import BackendOutcome, CodeExecutor
from lessonrun.languages import Language
from lessonrun.remote import RemoteCompileClient
from lessonrun.results import ExecutionRequest, ExecutionResult
from lessonrun.runtime import RuntimeLoader
from lessonrun.simulators import CppSimulator, PythonSimulator, simulate_cpp, simulate_python
from lessonrun.simulators.cpp_simulator import MISSING_INCLUDES_NOTE, MISSING_MAIN_NOTE


MISSING_RUNTIME = ["/nonexistent/lessonrun-worker"]


class RaisingExecutor(CodeExecutor):
    name = "raising"

    async def execute(self, code: str) -> BackendOutcome:
        raise RuntimeError("backend exploded")


class UnavailableExecutor(CodeExecutor):
    name = "offline"

    async def execute(self, code: str) -> BackendOutcome:
        return BackendOutcome.unavailable("not deployed")


class CountingSpawner:
    """Spawns a worker that never greets, so every load times out."""

    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self, command):
        self.calls += 1
        return SilentChannel()


class SilentChannel:
    async def send(self, payload):
        pass

    async def receive(self):
        await asyncio.sleep(3600)

    def is_alive(self) -> bool:
        return True

    async def aclose(self) -> None:
        pass


def offline_dispatcher(**kwargs) -> Dispatcher:
    return Dispatcher.create(loader=RuntimeLoader(MISSING_RUNTIME), **kwargs)


@pytest.mark.asyncio
async def test_javascript_expression():
    result = await offline_dispatcher().execute("javascript", "2 + 2")
    assert result == ExecutionResult(True, "4")


@pytest.mark.asyncio
async def test_javascript_error_is_final():
    result = await offline_dispatcher().execute("js", "throw new Error('x')")
    assert result == ExecutionResult(False, "Error: x")


@pytest.mark.asyncio
async def test_python_falls_back_to_simulator_when_runtime_missing():
    result = await offline_dispatcher().execute("python", "print('hello')")
    assert result == ExecutionResult(True, "hello")


@pytest.mark.asyncio
async def test_python_load_timeout_matches_simulator():
    code = "x = 5\nprint(x)"
    loader = RuntimeLoader(["worker"], load_timeout=0.05, spawn=CountingSpawner())
    result = await Dispatcher.create(loader=loader).execute("python", code)
    assert result == simulate_python(code)


@pytest.mark.asyncio
async def test_python_fallback_resolves_within_timeouts():
    loader = RuntimeLoader(["worker"], load_timeout=0.05, init_timeout=0.05, spawn=CountingSpawner())
    dispatcher = Dispatcher.create(loader=loader)
    result = await asyncio.wait_for(dispatcher.execute("py", "print('hi')"), timeout=2)
    assert result.output == "hi"


@pytest.mark.asyncio
async def test_concurrent_python_runs_start_one_runtime():
    spawner = CountingSpawner()
    loader = RuntimeLoader(["worker"], load_timeout=0.1, spawn=spawner)
    dispatcher = Dispatcher.create(loader=loader)

    results = await asyncio.gather(
        dispatcher.execute("python", "print('a')"),
        dispatcher.execute("python", "print('b')"),
    )

    assert [result.output for result in results] == ["a", "b"]
    assert spawner.calls == 1


@pytest.mark.asyncio
async def test_cpp_without_service_is_simulated():
    result = await offline_dispatcher().execute("cpp", 'std::cout << "hi" << std::endl;')
    assert result.success is True
    assert result.output == MISSING_INCLUDES_NOTE + MISSING_MAIN_NOTE + "hi"


@pytest.mark.asyncio
async def test_cpp_not_found_matches_simulator():
    code = '#include <iostream>\nint main() { std::cout << "hi"; }'
    client = RemoteCompileClient(
        "https://compile.example.test/run",
        transport=httpx.MockTransport(lambda request: httpx.Response(404)),
    )
    result = await offline_dispatcher(compile_client=client).execute("c++", code)
    assert result == simulate_cpp(code)


@pytest.mark.asyncio
async def test_cpp_service_failure_is_final():
    client = RemoteCompileClient(
        "https://compile.example.test/run",
        transport=httpx.MockTransport(
            lambda request: httpx.Response(500, json={"success": False, "error": "compile error"})
        ),
    )
    result = await offline_dispatcher(compile_client=client).execute("cpp", "int main() {")
    assert result == ExecutionResult(False, "compile error")


@pytest.mark.asyncio
async def test_unsupported_language():
    result = await offline_dispatcher().execute("ruby", "puts 1")
    assert result == ExecutionResult(False, 'Language "ruby" not supported yet.')


@pytest.mark.asyncio
@pytest.mark.parametrize("source", ["", "   \n\t"])
async def test_empty_source_has_no_verdict(source):
    result = await offline_dispatcher().execute("python", source)
    assert result == ExecutionResult(None, EMPTY_SOURCE_PROMPT)


@pytest.mark.asyncio
async def test_empty_source_checked_before_language():
    result = await offline_dispatcher().execute("ruby", "")
    assert result.success is None


@pytest.mark.asyncio
async def test_raising_backend_falls_through():
    dispatcher = Dispatcher({Language.PYTHON: [RaisingExecutor(), PythonSimulator()]})
    result = await dispatcher.execute("python", "print('still here')")
    assert result == ExecutionResult(True, "still here")


@pytest.mark.asyncio
async def test_exhausted_chain_reports_reasons():
    dispatcher = Dispatcher({Language.CPP: [UnavailableExecutor(), RaisingExecutor()]})
    result = await dispatcher.execute("cpp", "int main() {}")
    assert result.success is False
    assert result.output == "Error: offline: not deployed; raising: backend exploded"


@pytest.mark.asyncio
async def test_language_without_chain_is_unsupported():
    dispatcher = Dispatcher({Language.CPP: [CppSimulator()]})
    result = await dispatcher.execute("python", "print(1)")
    assert result == ExecutionResult(False, 'Language "python" not supported yet.')


@pytest.mark.asyncio
async def test_run_accepts_request_objects():
    result = await offline_dispatcher().run(ExecutionRequest("javascript", "'a' + 'b'"))
    assert result.output == "ab"


def test_from_config_wires_services():
    config = Config(
        compile_endpoint="https://compile.example.test/run",
        compile_api_key="k",
        runtime_command=MISSING_RUNTIME,
        runtime_load_timeout=1.5,
    )
    dispatcher = Dispatcher.from_config(config)

    python_chain = dispatcher.chains[Language.PYTHON]
    cpp_chain = dispatcher.chains[Language.CPP]
    assert [backend.name for backend in python_chain] == ["python-runtime", "python-simulator"]
    assert [backend.name for backend in cpp_chain] == ["cpp-remote", "cpp-simulator"]
    assert python_chain[0].loader.command == MISSING_RUNTIME
    assert python_chain[0].loader.load_timeout == 1.5
    assert cpp_chain[0].client.endpoint == "https://compile.example.test/run"
    assert cpp_chain[0].client.api_key == "k"
