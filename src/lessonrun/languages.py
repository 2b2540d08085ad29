"""Supported languages.

Only three languages are accepted.  Each has a canonical identifier and a
few aliases that lesson authors use interchangeably (``js``, ``py`` and
``c++``).  Anything else is reported to the learner as unsupported rather
than dispatched.
"""

from __future__ import annotations

import enum
from typing import Optional


class Language(str, enum.Enum):
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    CPP = "cpp"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Language.JAVASCRIPT: "JavaScript",
    Language.PYTHON: "Python",
    Language.CPP: "C++",
}

_ALIASES = {
    "javascript": Language.JAVASCRIPT,
    "js": Language.JAVASCRIPT,
    "python": Language.PYTHON,
    "py": Language.PYTHON,
    "cpp": Language.CPP,
    "c++": Language.CPP,
}


def resolve_language(name: Optional[str]) -> Optional[Language]:
    """Map a language name or alias to a :class:`Language`.

    Matching is case-insensitive and ignores surrounding whitespace.
    Returns ``None`` for unsupported or missing names.
    """
    if not name:
        return None
    return _ALIASES.get(name.strip().lower())


def display_name(name: str) -> str:
    """Human readable name for ``name``, upper-cased when unsupported."""
    language = resolve_language(name)
    if language is None:
        return name.upper()
    return language.display_name
