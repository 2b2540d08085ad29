"""
Curated lesson data for the simulators.

These tables are lesson content, not logic: they hold the answers for
expressions that appear in the published examples so those examples look
fully interactive when no real interpreter or compiler is reachable.
Add an entry here when a new lesson snippet needs one.
"""

from __future__ import annotations

from typing import Dict, List, Tuple


# Exact print/f-string expressions -> printed value.
PYTHON_KNOWN_EXPRESSIONS: Dict[str, str] = {
    # Neural network forward pass lesson.
    "raw_output:.3f": "0.140",
    "output:.3f": "0.535",
    "sigmoid(0)": "0.5",
    "round(sigmoid(0.14), 3)": "0.535",
    # Python basics lesson.
    "2 + 2": "4",
    "math.pi": "3.141592653589793",
    "math.sqrt(16)": "4.0",
    "len(inputs)": "3",
    "sum(weights)": "0.6",
}

# Assistant lessons call ``<obj>.ask("...")`` and ``<obj>.respond("...")``;
# the quoted argument picks the canned reply.
PYTHON_CANNED_METHODS: Dict[str, Dict[str, str]] = {
    "ask": {
        "Hello": "Hello! I'm your personal AI assistant. How can I help you today?",
        "What is machine learning?": (
            "Machine learning is a way for computers to learn patterns from data "
            "instead of following hand-written rules."
        ),
        "What is a neural network?": (
            "A neural network is a stack of simple units that each weigh their "
            "inputs, add a bias and pass the result through an activation function."
        ),
    },
    "respond": {
        "Hello": "Hi there! Nice to meet you.",
        "How are you?": "I'm running smoothly, thanks for asking!",
        "Goodbye": "Goodbye! Keep practising.",
    },
}

# Substring of a streamed C++ expression -> printed value.  Order matters:
# the first entry contained in the expression wins.
CPP_KNOWN_EXPRESSIONS: List[Tuple[str, str]] = [
    ("mapper.size()", "1048576"),
    ("total_elements_", "6"),
    ("->sum()", "21"),
    ("pool.usage_percent()", "1.5625%"),
]
