"""
Tests for the heuristic C++ simulator.
"""

from __future__ import annotations

import pytest

from lessonrun.results import OutcomeKind
from lessonrun.simulators import CppSimulator, simulate_cpp
from lessonrun.simulators.cpp_simulator import (
    COMPLETED_MESSAGE,
    MISSING_INCLUDES_NOTE,
    MISSING_MAIN_NOTE,
    PLACEHOLDER,
)


FULL_PROGRAM = """#include <iostream>

int main() {
    std::cout << "Hello, World!" << std::endl;
    std::cout << 42 << std::endl;
    return 0;
}
"""


def test_snippet_without_structure_gets_notes():
    result = simulate_cpp('std::cout << "hi" << std::endl;')
    assert result.success is True
    assert result.output == MISSING_INCLUDES_NOTE + MISSING_MAIN_NOTE + "hi"


def test_full_program_has_no_notes():
    result = simulate_cpp(FULL_PROGRAM)
    assert result.output == "Hello, World!\n42"


def test_known_expressions_and_placeholder():
    code = """#include <iostream>
int main() {
    std::cout << "Size: " << mapper.size() << std::endl;
    std::cout << "Elements: " << tensor.total_elements_ << "\\n";
    std::cout << "Sum: " << result->sum() << std::endl;
    std::cout << "Usage: " << pool.usage_percent() << std::endl;
    std::cout << "Other: " << something_else << std::endl;
}"""
    assert simulate_cpp(code).output == (
        "Size: 1048576\n"
        "Elements: 6\n"
        "Sum: 21\n"
        "Usage: 1.5625%\n"
        f"Other: {PLACEHOLDER}"
    )


def test_using_namespace_cout_and_statements_on_one_line():
    code = '#include <iostream>\nusing namespace std;\nint main() { cout << "a"; cout << "b" << endl; }'
    assert simulate_cpp(code).output == "ab"


def test_printf_expands_newlines():
    code = '#include <cstdio>\nint main() {\n    printf("one\\ntwo\\n");\n}'
    assert simulate_cpp(code).output == "one\ntwo"


def test_commented_out_statements_are_ignored():
    code = '#include <iostream>\nint main() {\n    // std::cout << "hidden";\n}'
    assert simulate_cpp(code).output == COMPLETED_MESSAGE


def test_no_output_reports_completion_with_notes():
    result = simulate_cpp("int x = 1;")
    assert result.output == MISSING_INCLUDES_NOTE + MISSING_MAIN_NOTE + COMPLETED_MESSAGE


def test_stream_operator_inside_string_is_literal_text():
    code = '#include <iostream>\nint main() {\n    std::cout << "use cout << x" << std::endl;\n}'
    assert simulate_cpp(code).output == "use cout << x"


def test_simulator_is_deterministic():
    assert simulate_cpp(FULL_PROGRAM) == simulate_cpp(FULL_PROGRAM)


@pytest.mark.asyncio
async def test_simulator_executor_always_succeeds():
    outcome = await CppSimulator().execute("not c++ at all")
    assert outcome.kind is OutcomeKind.SUCCEEDED
    assert outcome.result.success is True
