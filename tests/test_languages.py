from __future__ import annotations

import pytest

from lessonrun.languages import Language, display_name, resolve_language


@pytest.mark.parametrize(
    "name, expected",
    [
        ("javascript", Language.JAVASCRIPT),
        ("JS", Language.JAVASCRIPT),
        ("python", Language.PYTHON),
        (" py ", Language.PYTHON),
        ("cpp", Language.CPP),
        ("C++", Language.CPP),
    ],
)
def test_resolve_language_aliases(name, expected):
    assert resolve_language(name) is expected


@pytest.mark.parametrize("name", ["ruby", "", None, "c"])
def test_resolve_language_unsupported(name):
    assert resolve_language(name) is None


def test_display_names():
    assert display_name("js") == "JavaScript"
    assert display_name("c++") == "C++"
    assert display_name("ruby") == "RUBY"
