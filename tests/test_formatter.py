"""
PRGM Source Formatter Test Suite
================================

Tests that the formatter produces canonical, re-parseable source.
"""

from prgm_sdk.frontend.formatter import SourceFormatter, format_float, format_program
from prgm_sdk.frontend.parser import parse_source


def reformat_expr(text: str) -> str:
    """Parse text as an assignment value and format it back."""
    program = parse_source(f"MainPrgm T; Var BeginPg {{ x := {text}; }} EndPg;")
    return SourceFormatter().expr(program.statements[0].value)


# =============================================================================
# Layout
# =============================================================================

class TestLayout:
    """Whole-program output."""

    def test_canonical_layout(self):
        source = (
            "MainPrgm P; Var let x, y: Int; @define Const K: Float = (-2.5);"
            " BeginPg { x := 1; if (x > 0) then { y := 2; } else { y := 3; } } EndPg;"
        )
        expected = (
            "MainPrgm P;\n"
            "Var\n"
            "let x, y: Int;\n"
            "@define Const K: Float = (-2.5);\n"
            "BeginPg\n"
            "{\n"
            "    x := 1;\n"
            "    if (x > 0) then {\n"
            "        y := 2;\n"
            "    } else {\n"
            "        y := 3;\n"
            "    }\n"
            "}\n"
            "EndPg;\n"
        )
        assert format_program(parse_source(source)) == expected

    def test_loops(self):
        source = (
            "MainPrgm P; Var let a: [Int; 3]; BeginPg {"
            " for i from 0 to 2 step 1 { input(a[i]); }"
            " do { output(\"n\", a[0]); } while (a[0] > 0); } EndPg;"
        )
        text = format_program(parse_source(source))
        assert "let a: [Int; 3];" in text
        assert "    for i from 0 to 2 step 1 {\n        input(a[i]);\n    }\n" in text
        assert '    do {\n        output("n", a[0]);\n    } while (a[0] > 0);\n' in text

    def test_if_without_else(self):
        text = format_program(parse_source("MainPrgm P; Var BeginPg { if x then { } } EndPg;"))
        assert "    if (x) then {\n    }\n" in text
        assert "else" not in text


# =============================================================================
# Round Trip
# =============================================================================

class TestRoundTrip:
    """Formatted output parses back to the same tree."""

    def test_valid_program(self, valid_source):
        program = parse_source(valid_source)
        assert parse_source(format_program(program)) == program

    def test_error_program(self, error_test_source):
        program = parse_source(error_test_source)
        assert parse_source(format_program(program)) == program

    def test_formatting_is_stable(self, valid_source):
        once = format_program(parse_source(valid_source))
        assert format_program(parse_source(once)) == once


# =============================================================================
# Expressions
# =============================================================================

class TestExpressions:
    """Minimal parenthesization."""

    def test_no_redundant_parentheses(self):
        assert reformat_expr("((a + b)) * c") == "(a + b) * c"
        assert reformat_expr("a + (b * c)") == "a + b * c"
        assert reformat_expr("(a - b) - c") == "a - b - c"

    def test_right_operand_keeps_parentheses(self):
        assert reformat_expr("a - (b - c)") == "a - (b - c)"
        assert reformat_expr("a / (b * c)") == "a / (b * c)"

    def test_logical_and_not(self):
        assert reformat_expr("!(a == b) AND c > 1") == "!(a == b) AND c > 1"
        assert reformat_expr("!!a") == "!!a"

    def test_desugared_negation(self):
        """Unary minus prints as a subtraction from zero."""
        assert reformat_expr("-n * 2") == "(0 - n) * 2"
        assert reformat_expr("a - -b") == "a - (0 - b)"

    def test_literals(self):
        assert reformat_expr("(-5)") == "(-5)"
        assert reformat_expr("(+5)") == "(+5)"
        assert reformat_expr("(+0.25)") == "(+0.25)"
        assert reformat_expr('"hi there"') == '"hi there"'
        assert reformat_expr("arr[i + 1]") == "arr[i + 1]"


class TestFormatFloat:
    """Float text always has digits on both sides of the point."""

    def test_plain(self):
        assert format_float(2.5) == "2.5"
        assert format_float(3.0) == "3.0"

    def test_exponent_forms_expanded(self):
        assert format_float(1e20) == "100000000000000000000.0"
        assert format_float(1e-7) == "0.0000001"
