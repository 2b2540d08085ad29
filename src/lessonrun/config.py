"""Configuration loader.

The runner reads its configuration from environment variables so the same
package can be embedded in a site build, run as an API server, or used from
tests without code changes.  Reasonable defaults are provided so that local
development works out of the box.

Environment variables:

``LESSONRUN_API_KEY``
    The shared secret used to authenticate incoming API requests.  Clients
    must include this value in the ``x‑api‑key`` header.  Empty disables
    the check.

``LESSONRUN_COMPILE_ENDPOINT``
    URL of the remote compile service used for C++.  When unset, C++ code
    goes straight to the simulator.

``LESSONRUN_COMPILE_API_KEY``
    Optional key sent as ``x‑api‑key`` to the compile endpoint.

``LESSONRUN_COMPILE_TIMEOUT``
    Seconds allowed for one compile round trip.  Default is 30.

``LESSONRUN_RUNTIME_COMMAND``
    Command line that starts the Python interpreter runtime.  Defaults to
    the current interpreter running ``lessonrun.runtime.worker``.

``LESSONRUN_RUNTIME_LOAD_TIMEOUT``
    Seconds to wait for the runtime process to report readiness.  Default
    is 15.

``LESSONRUN_RUNTIME_INIT_TIMEOUT``
    Seconds to wait for the runtime to finish initialising.  Default is 20.

``LESSONRUN_RUNTIME_FULL_STDLIB``
    If ``true``, the runtime preloads the common standard library modules
    used in lessons.  Defaults to ``false``.

``LESSONRUN_RUNTIME_PRELOAD``
    Comma‑separated list of extra modules to preload.  Defaults to ``math``.

``LESSONRUN_JUDGE0_API_URL``
    Base URL of the Judge0 service behind ``/api/execute-code``.

``LESSONRUN_JUDGE0_API_KEY``
    RapidAPI key for Judge0.  Without it C++ compilation reports the
    service as unavailable.

``PORT``
    The port on which the API server listens.  Defaults to 8080.
"""

from __future__ import annotations

import os
import shlex
import sys
from dataclasses import dataclass, field
from typing import List, Optional


DEFAULT_JUDGE0_API_URL = "https://judge0-ce.p.rapidapi.com"


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y"}


def default_runtime_command() -> List[str]:
    return [sys.executable, "-m", "lessonrun.runtime.worker"]


@dataclass
class Config:
    """Centralised configuration object."""

    api_key: str = ""
    compile_endpoint: Optional[str] = None
    compile_api_key: Optional[str] = None
    compile_timeout: float = 30.0
    runtime_command: List[str] = field(default_factory=default_runtime_command)
    runtime_load_timeout: float = 15.0
    runtime_init_timeout: float = 20.0
    runtime_full_stdlib: bool = False
    runtime_preload: List[str] = field(default_factory=lambda: ["math"])
    judge0_api_url: str = DEFAULT_JUDGE0_API_URL
    judge0_api_key: Optional[str] = None
    port: int = 8080

    @classmethod
    def load(cls) -> "Config":
        # API key may be empty in local development but should be set in production.
        api_key = os.getenv("LESSONRUN_API_KEY", "")

        compile_endpoint = os.getenv("LESSONRUN_COMPILE_ENDPOINT") or None
        compile_api_key = os.getenv("LESSONRUN_COMPILE_API_KEY") or None

        runtime_command_env = os.getenv("LESSONRUN_RUNTIME_COMMAND")
        if runtime_command_env:
            runtime_command = shlex.split(runtime_command_env)
        else:
            runtime_command = default_runtime_command()

        preload_env = os.getenv("LESSONRUN_RUNTIME_PRELOAD", "math")
        runtime_preload = [name.strip() for name in preload_env.split(",") if name.strip()]

        def _int_var(name: str, default: int) -> int:
            val = os.getenv(name)
            if val is None:
                return default
            try:
                return int(val)
            except ValueError:
                raise ValueError(f"Invalid integer for {name}: {val}")

        def _float_var(name: str, default: float) -> float:
            val = os.getenv(name)
            if val is None:
                return default
            try:
                return float(val)
            except ValueError:
                raise ValueError(f"Invalid number for {name}: {val}")

        return cls(
            api_key=api_key,
            compile_endpoint=compile_endpoint,
            compile_api_key=compile_api_key,
            compile_timeout=_float_var("LESSONRUN_COMPILE_TIMEOUT", 30.0),
            runtime_command=runtime_command,
            runtime_load_timeout=_float_var("LESSONRUN_RUNTIME_LOAD_TIMEOUT", 15.0),
            runtime_init_timeout=_float_var("LESSONRUN_RUNTIME_INIT_TIMEOUT", 20.0),
            runtime_full_stdlib=_parse_bool(os.getenv("LESSONRUN_RUNTIME_FULL_STDLIB"), False),
            runtime_preload=runtime_preload,
            judge0_api_url=os.getenv("LESSONRUN_JUDGE0_API_URL", DEFAULT_JUDGE0_API_URL),
            judge0_api_key=os.getenv("LESSONRUN_JUDGE0_API_KEY") or None,
            port=_int_var("PORT", 8080),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Alternate constructor used by the API to load configuration.

        This wrapper calls :meth:`load` to construct the configuration.
        It exists to provide a more intuitive name when consumed in
        application code.
        """
        return cls.load()
