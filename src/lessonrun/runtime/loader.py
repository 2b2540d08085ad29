"""
Acquisition of the Python interpreter runtime.

The runtime is a long-lived worker process (see :mod:`.worker`).  Getting
one ready takes two bounded steps:

1. start the process and wait for its ``ready`` event
   (``load_timeout``, 15 seconds by default);
2. send ``init`` with the preload configuration and wait for the
   acknowledgement (``init_timeout``, 20 seconds by default).

:class:`RuntimeLoader` keeps an explicit state machine
``ABSENT -> LOADING -> READY``.  While a load is in flight every caller
awaits the same pending task, so concurrent requests never start a second
process.  A ready handle is cached while it stays usable; once its process
exits or its pipes break, the next ``acquire`` reaps it and loads a new
one.  One loader is meant to be shared by the whole process.

Timeouts and start-up errors are reported as :class:`RuntimeUnavailable`
and leave the loader ``ABSENT`` so a later request can try again.
"""

from __future__ import annotations

import asyncio
import enum
import itertools
import json
import logging
import os
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from ..config import Config, default_runtime_command


logger = logging.getLogger("lessonrun.runtime")

# Replies can carry a whole program's output on one line.
STREAM_LIMIT = 16 * 1024 * 1024


class RuntimeUnavailable(Exception):
    """The interpreter runtime could not be acquired."""


class RuntimeBridgeError(Exception):
    """Communication with a running interpreter runtime broke down."""


class RuntimeChannel(Protocol):
    async def send(self, payload: Dict[str, Any]) -> None: ...

    async def receive(self) -> Dict[str, Any]: ...

    def is_alive(self) -> bool: ...

    async def aclose(self) -> None: ...


class ProcessChannel:
    """JSON-lines channel over a worker subprocess's stdin and stdout."""

    def __init__(self, process: asyncio.subprocess.Process) -> None:
        self._process = process

    @classmethod
    async def spawn(cls, command: Sequence[str]) -> "ProcessChannel":
        env = dict(os.environ)
        env["PYTHONUNBUFFERED"] = "1"
        env["PYTHONIOENCODING"] = "utf-8"
        # Make the package importable by ``-m lessonrun.runtime.worker``
        # even when it is not installed.
        source_root = str(Path(__file__).resolve().parents[2])
        env["PYTHONPATH"] = os.pathsep.join(
            path for path in (source_root, env.get("PYTHONPATH")) if path
        )
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            env=env,
            limit=STREAM_LIMIT,
        )
        return cls(process)

    async def send(self, payload: Dict[str, Any]) -> None:
        if self._process.stdin is None:
            raise RuntimeBridgeError("runtime stdin is not connected")
        try:
            self._process.stdin.write((json.dumps(payload) + "\n").encode("utf-8"))
            await self._process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as exc:
            raise RuntimeBridgeError(f"runtime process is gone: {exc}") from exc

    async def receive(self) -> Dict[str, Any]:
        if self._process.stdout is None:
            raise RuntimeBridgeError("runtime stdout is not connected")
        try:
            line = await self._process.stdout.readline()
        except ValueError as exc:
            raise RuntimeBridgeError(f"runtime reply too large: {exc}") from exc
        if not line:
            raise RuntimeBridgeError("runtime process exited")
        try:
            return json.loads(line.decode("utf-8"))
        except ValueError as exc:
            raise RuntimeBridgeError(f"malformed runtime reply: {line[:200]!r}") from exc

    def is_alive(self) -> bool:
        return self._process.returncode is None

    async def aclose(self) -> None:
        """Kill the worker and reap it."""
        if self._process.returncode is None:
            try:
                self._process.kill()
            except ProcessLookupError:
                pass
        await self._process.wait()


class RuntimeHandle:
    """A started runtime process and its request/reply bookkeeping.

    Runs are serialized: the worker swaps its standard streams around each
    program, so two programs must never overlap on one handle.

    A handle whose channel raised :class:`RuntimeBridgeError` is broken for
    good and reports itself as not alive, even before the process is reaped.
    """

    def __init__(self, channel: RuntimeChannel) -> None:
        self._channel = channel
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()
        self.broken = False

    @property
    def alive(self) -> bool:
        return not self.broken and self._channel.is_alive()

    async def request(self, op: str, **fields: Any) -> Dict[str, Any]:
        request_id = next(self._ids)
        try:
            await self._channel.send({"id": request_id, "op": op, **fields})
            while True:
                reply = await self._channel.receive()
                # Replies to requests abandoned after a timeout are skipped.
                if reply.get("id") == request_id:
                    return reply
        except RuntimeBridgeError:
            self.broken = True
            raise

    async def run(self, code: str) -> Tuple[str, str]:
        """Execute ``code`` and return its captured ``(stdout, stderr)``."""
        async with self._lock:
            reply = await self.request("run", code=code)
        if "error" in reply:
            raise RuntimeBridgeError(str(reply["error"]))
        return str(reply.get("stdout", "")), str(reply.get("stderr", ""))

    async def aclose(self) -> None:
        await self._channel.aclose()


class LoaderState(str, enum.Enum):
    ABSENT = "absent"
    LOADING = "loading"
    READY = "ready"


SpawnFunc = Callable[[Sequence[str]], Awaitable[RuntimeChannel]]


class RuntimeLoader:
    """Single-flight loader and cache for the interpreter runtime."""

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        *,
        load_timeout: float = 15.0,
        init_timeout: float = 20.0,
        full_stdlib: bool = False,
        preload: Sequence[str] = (),
        spawn: Optional[SpawnFunc] = None,
    ) -> None:
        self.command: List[str] = list(command or default_runtime_command())
        self.load_timeout = load_timeout
        self.init_timeout = init_timeout
        self.full_stdlib = full_stdlib
        self.preload = list(preload)
        self._spawn: SpawnFunc = spawn or ProcessChannel.spawn
        self.state = LoaderState.ABSENT
        self.spawn_count = 0
        self._pending: Optional[asyncio.Future] = None
        self._started: Optional[RuntimeHandle] = None
        self._handle: Optional[RuntimeHandle] = None

    @classmethod
    def from_config(cls, config: Config) -> "RuntimeLoader":
        return cls(
            config.runtime_command,
            load_timeout=config.runtime_load_timeout,
            init_timeout=config.runtime_init_timeout,
            full_stdlib=config.runtime_full_stdlib,
            preload=config.runtime_preload,
        )

    async def acquire(self) -> RuntimeHandle:
        """Return the ready runtime, loading it first if necessary.

        Raises
        ------
        RuntimeUnavailable
            If the runtime could not be started or initialised in time.
        """
        dead: Optional[RuntimeHandle] = None
        if self.state is LoaderState.READY:
            assert self._handle is not None
            if self._handle.alive:
                return self._handle
            logger.warning("Cached runtime is no longer usable; reloading")
            dead = self._handle
            self._handle = None
            self._started = None
            self.state = LoaderState.ABSENT

        if self.state is LoaderState.ABSENT:
            self.state = LoaderState.LOADING
            self._pending = asyncio.ensure_future(self._load())

        pending = self._pending
        assert pending is not None
        if dead is not None:
            await dead.aclose()
        return await asyncio.shield(pending)

    async def _load(self) -> RuntimeHandle:
        try:
            handle = await self._materialize()
        except BaseException:
            self.state = LoaderState.ABSENT
            self._pending = None
            raise
        self._handle = handle
        self.state = LoaderState.READY
        self._pending = None
        return handle

    async def _materialize(self) -> RuntimeHandle:
        if self._started is None or not self._started.alive:
            if self._started is not None:
                stale, self._started = self._started, None
                await stale.aclose()
            logger.info("Starting Python runtime: %s", " ".join(self.command))
            try:
                self._started = await asyncio.wait_for(self._start(), self.load_timeout)
            except asyncio.TimeoutError as exc:
                raise RuntimeUnavailable(
                    f"Python runtime did not start within {self.load_timeout:g} seconds"
                ) from exc
            except (OSError, RuntimeBridgeError) as exc:
                raise RuntimeUnavailable(f"Python runtime failed to start: {exc}") from exc

        handle = self._started
        config = {"full_stdlib": self.full_stdlib, "preload": self.preload}
        try:
            reply = await asyncio.wait_for(handle.request("init", config=config), self.init_timeout)
        except asyncio.TimeoutError as exc:
            raise RuntimeUnavailable(
                f"Python runtime did not initialise within {self.init_timeout:g} seconds"
            ) from exc
        except RuntimeBridgeError as exc:
            raise RuntimeUnavailable(f"Python runtime failed to initialise: {exc}") from exc
        if not reply.get("ok"):
            raise RuntimeUnavailable(f"Python runtime failed to initialise: {reply.get('error')}")

        logger.info("Python runtime ready (preloaded: %s)", reply.get("loaded", []))
        return handle

    async def _start(self) -> RuntimeHandle:
        self.spawn_count += 1
        channel = await self._spawn(self.command)
        try:
            event = await channel.receive()
            if event.get("event") != "ready":
                raise RuntimeBridgeError(f"unexpected runtime greeting: {event!r}")
        except BaseException:
            await channel.aclose()
            raise
        return RuntimeHandle(channel)

    async def aclose(self) -> None:
        """Stop and reap the runtime process, if any.  Used by tests and shutdown hooks."""
        handles = {id(handle): handle for handle in (self._handle, self._started) if handle is not None}
        self._handle = None
        self._started = None
        self.state = LoaderState.ABSENT
        for handle in handles.values():
            await handle.aclose()
