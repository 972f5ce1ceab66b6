"""
PRGM Front-End Test Configuration
=================================

Shared pytest fixtures: reference programs used across the lexer,
parser, analyzer, formatter and CLI tests.
"""

import pytest


# Seven independent semantic defects, one per statement, in source order
ERROR_TEST_SOURCE = """\
MainPrgm ErrorTest;
Var
let x, y: Int;
@define Const MAX: Int = 100;
let z: Float;
let arr: [Int; 5];
BeginPg
{
    x := a;
    y := "hello";
    arr[10] := 5;
    z := z / 0;
    MAX := 200;
    x := arr + 1;
    x := arr[z];
}
EndPg;
"""

# Exercises every statement form; has no defects
VALID_SOURCE = """\
MainPrgm Valid;
Var
let i, n, total: Int;
let avg: Float;
let values: [Int; 5];
@define Const LIMIT: Int = 5;
@define Const RATE: Float = (-2.5);
BeginPg
{
    <!- read inputs -!>
    input(n);
    total := 0;
    for i from 0 to LIMIT - 1 step 1 {
        input(values[i]);
        total := total + values[i];
    }
    {-- average
        of the values --}
    avg := total / LIMIT;
    if (avg > 2.0 AND !(n == 0)) then {
        output("big", avg);
    } else {
        output("small");
    }
    do {
        n := n - 1;
    } while (n > 0);
    values[4] := -n * 2;
    avg := avg * RATE;
    for k from 1 to 3 step 1 {
        output(k, values[k]);
    }
}
EndPg;
"""


@pytest.fixture
def error_test_source() -> str:
    """Source of the ErrorTest reference program."""
    return ERROR_TEST_SOURCE


@pytest.fixture
def valid_source() -> str:
    """Source of a program the analyzer accepts."""
    return VALID_SOURCE


@pytest.fixture
def error_test_file(tmp_path):
    """ErrorTest written to a temporary .prgm file."""
    path = tmp_path / "error_test.prgm"
    path.write_text(ERROR_TEST_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def valid_file(tmp_path):
    """Valid program written to a temporary .prgm file."""
    path = tmp_path / "valid.prgm"
    path.write_text(VALID_SOURCE, encoding="utf-8")
    return path
