"""Lesson code runner package.

This package runs the code snippets embedded in learning content.  A learner
submits JavaScript, Python or C++ source and gets back a ``success`` flag
and a printable ``output`` string.  Each language is served by a chain of
backends of decreasing fidelity: real engines and interpreters first, then
heuristic simulators when the real thing cannot be reached.

The top‑level modules include:

* ``config`` – configuration handling for environment variables.
* ``languages`` – the supported languages and their aliases.
* ``capture`` – scoped redirection of standard streams and console output.
* ``executor`` – the JavaScript, Python and C++ backends.
* ``runtime`` – acquisition of the Python interpreter runtime process.
* ``remote`` – client for the remote compile service.
* ``simulators`` – heuristic fallbacks for Python and C++.
* ``dispatcher`` – selects and runs the backend chain for a request.
* ``session`` – editor-side state around the dispatcher.
* ``judge0`` – client for the Judge0 compile service.
* ``api`` – FastAPI application exposing HTTP endpoints.
"""

__version__ = "0.1.0"
