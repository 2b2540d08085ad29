"""
FastAPI application for the lesson code runner.

This module configures the FastAPI application, registers the routes for
running snippets and compiling code, and enforces authentication via an
API key.  Two execution routes are exposed:

* ``POST /v1/execute`` runs a snippet through the dispatcher, with all of
  its fallbacks, and answers ``{success, output}``.
* ``POST /api/execute-code`` is the remote compile service used by the
  C++ backend.  It forwards the code to Judge0.
"""

from __future__ import annotations

import logging
from typing import Dict

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from ..config import Config
from ..dispatcher import Dispatcher
from ..judge0 import Judge0Client, language_id
from ..models import CompileRequest, ExecuteRequest, ExecuteResponse


logger = logging.getLogger("lessonrun")

if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[lessonrun] %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.setLevel(logging.INFO)


config = Config.from_env()

logger.info(
    "Loaded config: compile_endpoint=%s, runtime_command=%s, load_timeout=%s, init_timeout=%s",
    config.compile_endpoint,
    config.runtime_command,
    config.runtime_load_timeout,
    config.runtime_init_timeout,
)

# One dispatcher, and so one runtime loader, per process.
dispatcher = Dispatcher.from_config(config)
judge0 = Judge0Client(config.judge0_api_url, config.judge0_api_key)


app = FastAPI(title="Lesson Code Runner", version="0.1.0")


@app.middleware("http")
async def authenticate(request, call_next):
    """Middleware to enforce API key authentication on all requests."""
    path = request.url.path
    method = request.method
    client = getattr(request.client, "host", "unknown")

    logger.info("Incoming request: %s %s from %s", method, path, client)

    provided_key = request.headers.get("x-api-key")
    if config.api_key:
        if provided_key != config.api_key:
            logger.warning(
                "Invalid API key for %s %s from %s",
                method,
                path,
                client,
            )
            return JSONResponse(status_code=401, content={"detail": "Invalid API key"})

    response = await call_next(request)
    logger.info("Response: %s %s -> %s", method, path, response.status_code)
    return response


@app.get("/health")
async def health() -> Dict[str, str]:
    """Return a simple health check response."""
    return {"status": "ok"}


@app.post("/v1/execute", response_model=ExecuteResponse)
async def execute(req: ExecuteRequest) -> ExecuteResponse:
    """Run a snippet with the full backend chain for its language."""
    result = await dispatcher.execute(req.language, req.code)
    return ExecuteResponse(success=result.success, output=result.output)


@app.post("/api/execute-code")
async def execute_code(req: CompileRequest) -> JSONResponse:
    """Compile and run code on Judge0."""
    if not req.code or not req.language:
        return JSONResponse(status_code=400, content={"error": "Code and language are required"})

    lang_id = language_id(req.language)
    if lang_id is None:
        return JSONResponse(
            status_code=400,
            content={"error": f"Language {req.language} not supported"},
        )

    # JavaScript and Python can still run locally; C++ needs Judge0.
    if not judge0.configured and req.language.strip().lower() in {"cpp", "c++"}:
        return JSONResponse(
            status_code=503,
            content={
                "error": "C++ execution service temporarily unavailable. Please configure Judge0 API key.",
                "output": (
                    "C++ execution requires server-side processing. "
                    "Please contact administrator to enable this feature."
                ),
            },
        )

    try:
        body = await judge0.submit(lang_id, req.code, req.input)
    except Exception as exc:
        logger.exception("[/api/execute-code] Code execution error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "output": f"Execution Error: {exc}",
                "success": False,
            },
        )
    return JSONResponse(status_code=200, content=body)
