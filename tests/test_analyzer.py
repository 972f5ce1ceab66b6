"""
PRGM Semantic Analyzer Test Suite
=================================

Tests for static checking of parsed programs.

Test Organization
-----------------
- TestReferencePrograms: the ErrorTest and valid reference programs
- TestDeclarations: duplicates and constant initializers
- TestArrays: bounds folding, index types and array/scalar misuse
- TestAssignments: type compatibility and constant protection
- TestExpressions: operator typing, conditions and division by zero
- TestForLoops: loop variable scoping and bound types
- TestAnalyzerBehavior: cascades, limits and repeatability
- TestSymbolTable: scope frames and lookups
"""

import pytest

from prgm_sdk.errors import SourceLocation
from prgm_sdk.frontend.analyzer import SemanticAnalyzer
from prgm_sdk.frontend.ast import TypeName
from prgm_sdk.frontend.errors import (
    DiagnosticKind,
    DuplicateDeclarationError,
    SemanticError,
)
from prgm_sdk.frontend.parser import parse_source
from prgm_sdk.frontend.symbols import SymbolKind, SymbolTable
from prgm_sdk.frontend.types import TYPE_FLOAT, TYPE_INT


DECLS = """\
let x, y: Int;
let z: Float;
let arr: [Int; 5];
@define Const MAX: Int = 5;
"""


def check(body: str, decls: str = DECLS, **options) -> list[SemanticError]:
    """Analyze statements placed in a program with the standard declarations."""
    source = f"MainPrgm T;\nVar\n{decls}BeginPg\n{{\n{body}\n}}\nEndPg;\n"
    program = parse_source(source, "t.prgm")
    return SemanticAnalyzer(**options).analyze(program, source.splitlines())


def kinds(diagnostics: list[SemanticError]) -> list[DiagnosticKind]:
    return [d.kind for d in diagnostics]


# =============================================================================
# Reference Programs
# =============================================================================

class TestReferencePrograms:
    """Whole-program checks on the shared fixtures."""

    def test_error_test_diagnostics(self, error_test_source):
        """Each defective statement yields exactly one diagnostic, in order."""
        program = parse_source(error_test_source, "demo.prgm")
        diagnostics = SemanticAnalyzer().analyze(program, error_test_source.splitlines())
        assert kinds(diagnostics) == [
            DiagnosticKind.UNDEFINED_IDENTIFIER,
            DiagnosticKind.TYPE_MISMATCH,
            DiagnosticKind.INDEX_OUT_OF_BOUNDS,
            DiagnosticKind.DIVISION_BY_ZERO,
            DiagnosticKind.CONSTANT_MUTATION,
            DiagnosticKind.ARRAY_USED_AS_SCALAR,
            DiagnosticKind.INVALID_INDEX_TYPE,
        ]
        assert [d.location.line for d in diagnostics] == [9, 10, 11, 12, 13, 14, 15]

    def test_error_test_first_location(self, error_test_source):
        program = parse_source(error_test_source, "demo.prgm")
        first = SemanticAnalyzer().analyze(program, error_test_source.splitlines())[0]
        assert first.location == SourceLocation("demo.prgm", 9, 10)
        assert str(first).startswith(
            "demo.prgm:9:10: error[UndefinedIdentifier]: undefined identifier 'a'"
        )
        assert "    x := a;" in str(first)

    def test_valid_program_accepted(self, valid_source):
        program = parse_source(valid_source, "valid.prgm")
        assert SemanticAnalyzer().analyze(program) == []


# =============================================================================
# Declarations
# =============================================================================

class TestDeclarations:
    """Tests for the Var section checks."""

    def test_duplicate_variable(self):
        diagnostics = check("", "let a: Int;\nlet a: Float;\n")
        assert kinds(diagnostics) == [DiagnosticKind.DUPLICATE_DECLARATION]
        assert diagnostics[0].location.line == 4
        assert diagnostics[0].original_location.line == 3

    def test_duplicate_in_one_list(self):
        diagnostics = check("", "let a, b, a: Int;\n")
        assert kinds(diagnostics) == [DiagnosticKind.DUPLICATE_DECLARATION]
        assert diagnostics[0].location.column == 11

    def test_constant_clashes_with_variable(self):
        diagnostics = check("", "let K: Int;\n@define Const K: Int = 1;\n")
        assert kinds(diagnostics) == [DiagnosticKind.DUPLICATE_DECLARATION]

    def test_first_declaration_wins(self):
        """After a duplicate, uses see the first declaration's type."""
        diagnostics = check("a := 1;", "let a: Int;\nlet a: [Int; 3];\n")
        assert kinds(diagnostics) == [DiagnosticKind.DUPLICATE_DECLARATION]

    def test_int_constant_from_float_literal(self):
        diagnostics = check("", "@define Const K: Int = 2.5;\n")
        assert kinds(diagnostics) == [DiagnosticKind.TYPE_MISMATCH]

    def test_float_constant_from_int_literal(self):
        assert check("z := F;", DECLS + "@define Const F: Float = 2;\n") == []

    def test_float_constant_from_int_literal_without_widening(self):
        diagnostics = check("", "@define Const F: Float = 2;\n", allow_int_to_float=False)
        assert kinds(diagnostics) == [DiagnosticKind.TYPE_MISMATCH]


# =============================================================================
# Arrays
# =============================================================================

class TestArrays:
    """Tests for array indexing rules."""

    def test_index_bounds(self):
        """0 and size-1 are legal, size is not."""
        assert check("arr[0] := 1; arr[4] := 1;") == []
        diagnostics = check("arr[5] := 1;")
        assert kinds(diagnostics) == [DiagnosticKind.INDEX_OUT_OF_BOUNDS]
        assert diagnostics[0].index == 5
        assert diagnostics[0].size == 5

    def test_negative_index(self):
        diagnostics = check("x := arr[-1];")
        assert kinds(diagnostics) == [DiagnosticKind.INDEX_OUT_OF_BOUNDS]
        assert diagnostics[0].index == -1

    def test_signed_literal_index(self):
        assert kinds(check("x := arr[(-2)];")) == [DiagnosticKind.INDEX_OUT_OF_BOUNDS]

    def test_constant_index(self):
        assert kinds(check("x := arr[MAX];")) == [DiagnosticKind.INDEX_OUT_OF_BOUNDS]
        assert check("x := arr[MAX - 1];") == []

    def test_folded_index(self):
        assert kinds(check("x := arr[2 + 3];")) == [DiagnosticKind.INDEX_OUT_OF_BOUNDS]
        assert check("x := arr[9 / 2];") == []
        assert kinds(check("x := arr[MAX * 2 - 1];")) == [DiagnosticKind.INDEX_OUT_OF_BOUNDS]

    def test_runtime_index_not_checked(self):
        """Indices that read variables are left to run time."""
        assert check("x := arr[y + 10];") == []

    def test_float_index(self):
        diagnostics = check("x := arr[z];")
        assert kinds(diagnostics) == [DiagnosticKind.INVALID_INDEX_TYPE]
        assert diagnostics[0].actual_type == "Float"

    def test_float_literal_index(self):
        assert kinds(check("arr[1.5] := 1;")) == [DiagnosticKind.INVALID_INDEX_TYPE]

    def test_array_read_as_scalar(self):
        assert kinds(check("x := arr + 1;")) == [DiagnosticKind.ARRAY_USED_AS_SCALAR]
        assert kinds(check("output(arr);")) == [DiagnosticKind.ARRAY_USED_AS_SCALAR]

    def test_array_as_assignment_target(self):
        assert kinds(check("arr := 5;")) == [DiagnosticKind.TYPE_MISMATCH]

    def test_array_as_input_target(self):
        assert kinds(check("input(arr);")) == [DiagnosticKind.TYPE_MISMATCH]

    def test_indexing_a_scalar(self):
        assert kinds(check("x := y[0];")) == [DiagnosticKind.TYPE_MISMATCH]

    def test_input_into_element(self):
        assert check("input(arr[2]);") == []


# =============================================================================
# Assignments
# =============================================================================

class TestAssignments:
    """Tests for assignment and input targets."""

    def test_undefined_target(self):
        assert kinds(check("w := 1;")) == [DiagnosticKind.UNDEFINED_IDENTIFIER]

    def test_undefined_array_and_index(self):
        """An unknown array does not hide an unknown name in its index."""
        assert kinds(check("q[a] := 1;")) == [
            DiagnosticKind.UNDEFINED_IDENTIFIER,
            DiagnosticKind.UNDEFINED_IDENTIFIER,
        ]

    def test_similar_name_hint(self):
        diagnostics = check("totl := 1;", "let total: Int;\n")
        assert diagnostics[0].similar_identifiers == ["total"]
        assert "did you mean 'total'?" in str(diagnostics[0])

    def test_constant_target(self):
        diagnostics = check("MAX := 1;")
        assert kinds(diagnostics) == [DiagnosticKind.CONSTANT_MUTATION]
        assert diagnostics[0].original_location.line == 6

    def test_constant_input(self):
        assert kinds(check("input(MAX);")) == [DiagnosticKind.CONSTANT_MUTATION]

    def test_target_checked_before_value(self):
        assert kinds(check("MAX := a;")) == [
            DiagnosticKind.CONSTANT_MUTATION,
            DiagnosticKind.UNDEFINED_IDENTIFIER,
        ]

    def test_string_assignment(self):
        assert kinds(check('x := "text";')) == [DiagnosticKind.TYPE_MISMATCH]

    def test_float_to_int(self):
        diagnostics = check("x := z;")
        assert kinds(diagnostics) == [DiagnosticKind.TYPE_MISMATCH]
        assert diagnostics[0].expected_type == "Int"
        assert diagnostics[0].actual_type == "Float"

    def test_int_to_float_widening(self):
        assert check("z := x;") == []
        assert check("z := x / 2;") == []

    def test_int_to_float_disabled(self):
        assert kinds(check("z := x;", allow_int_to_float=False)) == [DiagnosticKind.TYPE_MISMATCH]

    def test_boolean_value(self):
        assert kinds(check("x := y > 1;")) == [DiagnosticKind.TYPE_MISMATCH]


# =============================================================================
# Expressions
# =============================================================================

class TestExpressions:
    """Tests for operator typing and conditions."""

    def test_mixed_arithmetic_is_float(self):
        assert check("z := x * 1.5;") == []
        assert kinds(check("y := x * 1.5;")) == [DiagnosticKind.TYPE_MISMATCH]

    def test_string_in_arithmetic(self):
        assert kinds(check('x := "a" + 1;')) == [DiagnosticKind.TYPE_MISMATCH]

    def test_string_in_comparison(self):
        assert kinds(check('if ("a" < 1) then { }')) == [DiagnosticKind.TYPE_MISMATCH]

    def test_strings_allowed_in_output(self):
        assert check('output("x = ", x, " z = ", z);') == []

    def test_numeric_condition(self):
        """Conditions must be comparisons or logical expressions."""
        assert kinds(check("if (x) then { }")) == [DiagnosticKind.TYPE_MISMATCH]
        assert kinds(check("do { } while (x + 1);")) == [DiagnosticKind.TYPE_MISMATCH]

    def test_logical_operands(self):
        assert check("if (x > 0 AND y) then { }") == []
        assert check("if (!(x == y) OR z < 1.0) then { }") == []

    def test_not_of_string(self):
        assert kinds(check('if (!"a") then { }')) == [DiagnosticKind.TYPE_MISMATCH]

    def test_division_by_literal_zero(self):
        diagnostics = check("x := x / 0;")
        assert kinds(diagnostics) == [DiagnosticKind.DIVISION_BY_ZERO]
        assert diagnostics[0].location.column == 10

    def test_division_by_float_zero(self):
        assert kinds(check("z := z / 0.0;")) == [DiagnosticKind.DIVISION_BY_ZERO]

    def test_division_by_zero_constant_expression_not_reported(self):
        """Expressions that fold to zero are not reported."""
        assert check("x := x / (MAX - 5);") == []

    def test_division_by_zero_constant(self):
        decls = DECLS + "@define Const Z: Int = 0;\n@define Const ZF: Float = 0.0;\n"
        diagnostics = check("x := y / Z;", decls=decls)
        assert kinds(diagnostics) == [DiagnosticKind.DIVISION_BY_ZERO]
        assert diagnostics[0].location.column == 10
        assert kinds(check("z := z / ZF;", decls=decls)) == [DiagnosticKind.DIVISION_BY_ZERO]

    def test_division_by_nonzero_constant(self):
        assert check("x := y / MAX;") == []

    def test_division_by_zero_constant_float_option(self):
        decls = DECLS + "@define Const ZF: Float = 0.0;\n"
        assert check("z := z / ZF;", decls=decls, float_division_by_zero_is_error=False) == []

    def test_division_by_signed_zero(self):
        assert kinds(check("x := x / (-0);")) == [DiagnosticKind.DIVISION_BY_ZERO]
        assert check("x := x / -0;") == []

    def test_float_division_by_zero_option(self):
        options = {"float_division_by_zero_is_error": False}
        assert check("z := z / 0;", **options) == []
        assert kinds(check("x := x / 0;", **options)) == [DiagnosticKind.DIVISION_BY_ZERO]


# =============================================================================
# For Loops
# =============================================================================

class TestForLoops:
    """Tests for loop variables and bounds."""

    def test_declared_loop_variable(self):
        assert check("for x from 0 to 4 step 1 { arr[x] := x; }") == []

    def test_fresh_loop_variable(self):
        assert check("for k from 0 to 4 step 1 { arr[k] := k; }") == []

    def test_fresh_variable_scoped_to_body(self):
        diagnostics = check("for k from 0 to 4 step 1 { }\nk := 1;")
        assert kinds(diagnostics) == [DiagnosticKind.UNDEFINED_IDENTIFIER]

    def test_sequential_loops_reuse_name(self):
        body = "for k from 0 to 1 step 1 { }\nfor k from 0 to 1 step 1 { }"
        assert check(body) == []

    def test_nested_loops_same_name(self):
        body = "for k from 0 to 1 step 1 { for k from 0 to 1 step 1 { } }"
        assert check(body) == []

    def test_constant_loop_variable(self):
        assert kinds(check("for MAX from 0 to 4 step 1 { }")) == [DiagnosticKind.CONSTANT_MUTATION]

    def test_float_loop_variable(self):
        assert kinds(check("for z from 0 to 4 step 1 { }")) == [DiagnosticKind.TYPE_MISMATCH]

    def test_float_bounds(self):
        diagnostics = check("for k from 0 to 2.5 step 0.5 { }")
        assert kinds(diagnostics) == [DiagnosticKind.TYPE_MISMATCH] * 2
        assert "end" in diagnostics[0].message
        assert "step" in diagnostics[1].message


# =============================================================================
# Analyzer Behavior
# =============================================================================

class TestAnalyzerBehavior:
    """Cascade suppression, limits and repeatability."""

    def test_no_cascade_from_undefined(self):
        assert kinds(check("x := (a + 1) * 2 - y;")) == [DiagnosticKind.UNDEFINED_IDENTIFIER]

    def test_no_cascade_into_condition(self):
        assert kinds(check("if (a > 1) then { }")) == [DiagnosticKind.UNDEFINED_IDENTIFIER]

    def test_independent_defects_all_reported(self):
        body = "x := a;\ny := b;\nMAX := 1;"
        assert kinds(check(body)) == [
            DiagnosticKind.UNDEFINED_IDENTIFIER,
            DiagnosticKind.UNDEFINED_IDENTIFIER,
            DiagnosticKind.CONSTANT_MUTATION,
        ]

    def test_max_errors(self, error_test_source):
        program = parse_source(error_test_source)
        assert len(SemanticAnalyzer(max_errors=2).analyze(program)) == 2

    def test_repeatable(self, error_test_source):
        """Two runs of one analyzer give the same diagnostics."""
        program = parse_source(error_test_source, "demo.prgm")
        analyzer = SemanticAnalyzer()
        first = [(d.kind, str(d)) for d in analyzer.analyze(program)]
        second = [(d.kind, str(d)) for d in analyzer.analyze(program)]
        assert first == second
        assert len(first) == 7

    def test_unhandled_node(self):
        with pytest.raises(TypeError):
            SemanticAnalyzer().visit(TypeName(name="Int"))


# =============================================================================
# Symbol Table
# =============================================================================

class TestSymbolTable:
    """Tests for the scope frame stack."""

    def test_declare_and_lookup(self):
        table = SymbolTable()
        table.declare("x", SymbolKind.VARIABLE, TYPE_INT)
        assert "x" in table
        assert table.lookup("x").data_type == TYPE_INT
        assert table.lookup("y") is None

    def test_scope_frames(self):
        table = SymbolTable()
        table.declare("x", SymbolKind.VARIABLE, TYPE_INT)
        table.push_scope()
        symbol = table.declare("i", SymbolKind.VARIABLE, TYPE_INT)
        assert symbol.scope_depth == 1
        assert table.depth == 1
        table.pop_scope()
        assert "i" not in table
        assert "x" in table

    def test_program_scope_cannot_pop(self):
        with pytest.raises(RuntimeError):
            SymbolTable().pop_scope()

    def test_duplicate_across_frames(self):
        table = SymbolTable()
        table.declare("x", SymbolKind.VARIABLE, TYPE_INT)
        table.push_scope()
        with pytest.raises(DuplicateDeclarationError):
            table.declare("x", SymbolKind.VARIABLE, TYPE_FLOAT)

    def test_constant_is_immutable(self):
        table = SymbolTable()
        symbol = table.declare("K", SymbolKind.CONSTANT, TYPE_INT, value=3)
        assert not symbol.mutable
        assert symbol.value == 3

    def test_similar_names(self):
        table = SymbolTable()
        for name in ("counter", "total", "x"):
            table.declare(name, SymbolKind.VARIABLE, TYPE_INT)
        assert table.similar_names("countr") == ["counter"]
