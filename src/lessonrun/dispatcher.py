"""
Execution dispatcher.

:class:`Dispatcher` is the single entry point for running a snippet.  It
resolves the language, walks that language's backend chain and normalises
whatever happens into an :class:`~lessonrun.results.ExecutionResult`:

* ``javascript`` – in-process V8 evaluation, final either way;
* ``python`` – the shared interpreter runtime, then the Python simulator;
* ``cpp`` – the remote compile service, then the C++ simulator.

``execute`` never raises.  An exception escaping a backend is logged and
treated as that backend being unavailable, so the chain moves on.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .config import Config
from .executor import CodeExecutor, CppExecutor, JavaScriptExecutor, PythonExecutor
from .languages import Language, resolve_language
from .remote import RemoteCompileClient
from .results import BackendOutcome, ExecutionRequest, ExecutionResult
from .runtime import RuntimeLoader
from .simulators import CppSimulator, PythonSimulator


logger = logging.getLogger("lessonrun.dispatcher")

EMPTY_SOURCE_PROMPT = "Please enter some code to execute."


def unsupported_message(language: str) -> str:
    return f'Language "{language}" not supported yet.'


class Dispatcher:
    """Select and run the backend chain for each request."""

    def __init__(self, chains: Dict[Language, Sequence[CodeExecutor]]) -> None:
        self.chains = {language: list(chain) for language, chain in chains.items()}

    @classmethod
    def create(
        cls,
        loader: Optional[RuntimeLoader] = None,
        compile_client: Optional[RemoteCompileClient] = None,
        javascript: Optional[JavaScriptExecutor] = None,
    ) -> "Dispatcher":
        """Build the standard chains around the given shared services."""
        loader = loader or RuntimeLoader()
        compile_client = compile_client or RemoteCompileClient(None)
        return cls(
            {
                Language.JAVASCRIPT: [javascript or JavaScriptExecutor()],
                Language.PYTHON: [PythonExecutor(loader), PythonSimulator()],
                Language.CPP: [CppExecutor(compile_client), CppSimulator()],
            }
        )

    @classmethod
    def from_config(cls, config: Config) -> "Dispatcher":
        return cls.create(
            loader=RuntimeLoader.from_config(config),
            compile_client=RemoteCompileClient(
                config.compile_endpoint,
                api_key=config.compile_api_key,
                timeout=config.compile_timeout,
            ),
        )

    async def execute(self, language: str, source_code: str) -> ExecutionResult:
        """Run ``source_code`` as ``language``; always returns a result."""
        try:
            return await self._dispatch(ExecutionRequest(language, source_code))
        except Exception as exc:
            logger.exception("Dispatcher failed for language=%s", language)
            return ExecutionResult(False, f"Error: {exc}")

    async def run(self, request: ExecutionRequest) -> ExecutionResult:
        return await self.execute(request.language, request.source_code)

    async def _dispatch(self, request: ExecutionRequest) -> ExecutionResult:
        if not request.source_code or not request.source_code.strip():
            return ExecutionResult(None, EMPTY_SOURCE_PROMPT)

        language = resolve_language(request.language)
        if language is None or language not in self.chains:
            logger.info("Unsupported language requested: %r", request.language)
            return ExecutionResult(False, unsupported_message(request.language))

        reasons: List[str] = []
        for backend in self.chains[language]:
            outcome = await self._attempt(backend, request.source_code)
            if outcome.is_final and outcome.result is not None:
                logger.info(
                    "Ran %s code with %s: %s",
                    language.value,
                    backend.name,
                    outcome.kind.value,
                )
                return outcome.result
            reasons.append(f"{backend.name}: {outcome.reason}")
            logger.info("Backend %s unavailable (%s); falling back", backend.name, outcome.reason)

        return ExecutionResult(False, "Error: " + "; ".join(reasons))

    async def _attempt(self, backend: CodeExecutor, code: str) -> BackendOutcome:
        try:
            return await backend.execute(code)
        except Exception as exc:
            logger.exception("Backend %s raised", backend.name)
            return BackendOutcome.unavailable(str(exc) or type(exc).__name__)
