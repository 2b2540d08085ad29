"""
Heuristic simulators, the last tier for Python and C++.

Simulators recognise common output patterns in the source text and
fabricate plausible output when no real interpreter or compiler can be
reached.  Each one is a :class:`~.rules.RuleTable` and a pure function of
the source.  Curated answers for lesson snippets live in ``lessons.py``.
"""

from .cpp_simulator import CppSimulator, simulate_cpp
from .python_simulator import PythonSimulator, simulate_python

__all__ = ["CppSimulator", "PythonSimulator", "simulate_cpp", "simulate_python"]
