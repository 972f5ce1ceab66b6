"""
PRGM Semantic Analyzer
======================

Tree-walking pass that checks a parsed Program against the static rules
of the language and returns every defect it finds.

Passes
------
1. Declaration pass: fill the symbol table from the Var section. Names
   must be unique; constants get their folded literal value.
2. Statement pass: walk statements in source order, typing each
   expression left to right.

Diagnostics
-----------
Defects are SemanticError instances appended to an ErrorCollector; the
analyzer never raises them. An expression that already produced a
diagnostic is typed as the error placeholder (TYPE_ERROR), which every
later check accepts silently, so one root cause yields one diagnostic.

| Kind                 | Trigger                                      |
|----------------------|----------------------------------------------|
| UndefinedIdentifier  | name with no visible declaration             |
| TypeMismatch         | incompatible operand, value or condition     |
| IndexOutOfBounds     | constant index outside 0..size-1             |
| DivisionByZero       | '/' whose divisor is a literal zero          |
| ConstantMutation     | constant used as an assignment/input target  |
| ArrayUsedAsScalar    | bare array name read as a value              |
| InvalidIndexType     | array index that is not Int                  |
| DuplicateDeclaration | name declared twice                          |

Example:
    >>> from prgm_sdk.frontend.parser import parse_source
    >>> program = parse_source(source, "demo.prgm")
    >>> for diagnostic in SemanticAnalyzer().analyze(program):
    ...     print(diagnostic.kind, diagnostic.location)
"""

import logging
from typing import Optional

from prgm_sdk.errors import SourceLocation
from prgm_sdk.frontend.ast import (
    ASTNode,
    ASTVisitor,
    Program,
    VariableDeclaration,
    ConstDeclaration,
    Assignment,
    IfElse,
    DoWhile,
    ForLoop,
    InputStatement,
    OutputStatement,
    Expression,
    BinaryExpression,
    NotExpression,
    VariableExpression,
    IntegerLiteral,
    FloatLiteral,
    StringLiteral,
    TypeName,
    ArrayType,
    Variable,
    SimpleVariable,
    ArrayElement,
    Condition,
    Statement,
    BinaryOperator,
)
from prgm_sdk.frontend.errors import (
    ErrorCollector,
    SemanticError,
    UndefinedIdentifierError,
    TypeMismatchError,
    IndexOutOfBoundsError,
    DivisionByZeroError,
    ConstantMutationError,
    ArrayUsedAsScalarError,
    InvalidIndexTypeError,
    DuplicateDeclarationError,
)
from prgm_sdk.frontend.symbols import Symbol, SymbolKind, SymbolTable
from prgm_sdk.frontend.types import (
    DataType,
    TypeKind,
    TYPE_INT,
    TYPE_FLOAT,
    TYPE_BOOL,
    TYPE_STRING,
    TYPE_ERROR,
    type_from_name,
    make_array_type,
    arithmetic_result,
    is_assignable,
)

logger = logging.getLogger(__name__)


class SemanticAnalyzer(ASTVisitor):
    """
    Static checker for PRGM programs.

    Each call to analyze() starts from a fresh symbol table and error
    collector, so one analyzer may check many programs and checking the
    same program twice gives the same result.

    Attributes:
        max_errors: Diagnostics kept per run (later ones are counted
                    but dropped)
        float_division_by_zero_is_error: Report x / 0 when either operand
                    is Float
        allow_int_to_float: Accept Int values in Float targets
    """

    def __init__(
        self,
        max_errors: int = 100,
        float_division_by_zero_is_error: bool = True,
        allow_int_to_float: bool = True,
    ):
        self.max_errors = max_errors
        self.float_division_by_zero_is_error = float_division_by_zero_is_error
        self.allow_int_to_float = allow_int_to_float

        self.symbols = SymbolTable()
        self.errors = ErrorCollector(max_errors)
        self.source_lines: list[str] = []

    def analyze(
        self,
        program: Program,
        source_lines: Optional[list[str]] = None,
    ) -> list[SemanticError]:
        """
        Check a program.

        Args:
            program: Root of the parsed AST
            source_lines: Original source text lines, used to quote the
                          offending line in messages

        Returns:
            Diagnostics in the order their constructs were visited; an
            empty list means the program is accepted
        """
        self.symbols = SymbolTable()
        self.errors = ErrorCollector(self.max_errors)
        self.source_lines = source_lines or []

        logger.debug(f"Analyzing program '{program.name}'")
        self.visit(program)

        if self.errors.dropped:
            logger.debug(f"Dropped {self.errors.dropped} diagnostics past max_errors")
        logger.debug(f"Analysis finished with {self.errors.error_count()} diagnostics")
        return list(self.errors.errors)

    def generic_visit(self, node: ASTNode) -> None:
        """Every node kind must be handled explicitly."""
        raise TypeError(f"unhandled AST node: {type(node).__name__}")

    # =========================================================================
    # Reporting Helpers
    # =========================================================================

    def _source_line(self, location: Optional[SourceLocation]) -> Optional[str]:
        if location is None:
            return None
        if 0 < location.line <= len(self.source_lines):
            return self.source_lines[location.line - 1]
        return None

    def _report(self, error: SemanticError) -> None:
        logger.debug(f"{error.kind} at {error.location}")
        self.errors.add(error)

    def _mismatch(
        self,
        message: str,
        location: Optional[SourceLocation],
        expected: Optional[DataType | str] = None,
        actual: Optional[DataType] = None,
    ) -> None:
        self._report(TypeMismatchError(
            message,
            expected_type=str(expected) if expected is not None else None,
            actual_type=str(actual) if actual is not None else None,
            location=location,
            source_line=self._source_line(location),
        ))

    def _resolve(self, name: str, location: Optional[SourceLocation]) -> Optional[Symbol]:
        """Look up a name, reporting UndefinedIdentifier when missing."""
        symbol = self.symbols.lookup(name)
        if symbol is None:
            self._report(UndefinedIdentifierError(
                name,
                location=location,
                source_line=self._source_line(location),
                similar_identifiers=self.symbols.similar_names(name),
            ))
        return symbol

    # =========================================================================
    # Program and Declarations
    # =========================================================================

    def visit_Program(self, node: Program) -> None:
        for decl in node.declarations:
            self.visit(decl)
        self._visit_statements(node.statements)

    def _declare(
        self,
        name: str,
        kind: SymbolKind,
        data_type: DataType,
        location: Optional[SourceLocation],
        value: Optional[int | float] = None,
    ) -> None:
        try:
            self.symbols.declare(
                name,
                kind,
                data_type,
                location=location,
                value=value,
                source_line=self._source_line(location),
            )
        except DuplicateDeclarationError as e:
            self._report(e)

    def _type_of_spec(self, spec: TypeName | ArrayType) -> DataType:
        if isinstance(spec, ArrayType):
            return make_array_type(type_from_name(spec.element.name), spec.size)
        return type_from_name(spec.name)

    def visit_VariableDeclaration(self, node: VariableDeclaration) -> None:
        data_type = self._type_of_spec(node.type_spec)
        locations = node.name_locations or [node.location] * len(node.names)
        for name, location in zip(node.names, locations):
            self._declare(name, SymbolKind.VARIABLE, data_type, location)

    def visit_ConstDeclaration(self, node: ConstDeclaration) -> None:
        declared = type_from_name(node.type_name.name)
        literal = node.value
        literal_type = TYPE_INT if isinstance(literal, IntegerLiteral) else TYPE_FLOAT

        if not is_assignable(declared, literal_type, self.allow_int_to_float):
            self._mismatch(
                f"constant '{node.name}' initialized with a {literal_type} literal",
                literal.location,
                expected=declared,
                actual=literal_type,
            )

        value = literal.value
        if declared == TYPE_FLOAT:
            value = float(value)
        elif literal_type != TYPE_INT:
            value = None

        self._declare(node.name, SymbolKind.CONSTANT, declared, node.location, value)

    # =========================================================================
    # Statements
    # =========================================================================

    def _visit_statements(self, statements: list[Statement]) -> None:
        for stmt in statements:
            self.visit(stmt)

    def visit_Assignment(self, node: Assignment) -> None:
        target_type = self._check_target(node.target)
        value_type = self.visit(node.value)

        if not is_assignable(target_type, value_type, self.allow_int_to_float):
            self._mismatch(
                f"cannot assign {value_type} to '{node.target.name}'",
                node.value.location,
                expected=target_type,
                actual=value_type,
            )

    def visit_IfElse(self, node: IfElse) -> None:
        self.visit(node.condition)
        self._visit_statements(node.if_branch)
        self._visit_statements(node.else_branch)

    def visit_DoWhile(self, node: DoWhile) -> None:
        self._visit_statements(node.body)
        self.visit(node.condition)

    def visit_ForLoop(self, node: ForLoop) -> None:
        location = node.variable_location or node.location
        existing = self.symbols.lookup(node.variable)

        if existing is not None:
            if not existing.mutable:
                self._report(ConstantMutationError(
                    node.variable,
                    location=location,
                    original_location=existing.location,
                    source_line=self._source_line(location),
                ))
            elif existing.data_type != TYPE_INT:
                self._mismatch(
                    f"loop variable '{node.variable}' must be an Int scalar",
                    location,
                    expected=TYPE_INT,
                    actual=existing.data_type,
                )

        for part, bound in (("start", node.start), ("end", node.end), ("step", node.step)):
            bound_type = self.visit(bound)
            if not bound_type.is_error and bound_type != TYPE_INT:
                self._mismatch(
                    f"loop {part} must be Int",
                    bound.location,
                    expected=TYPE_INT,
                    actual=bound_type,
                )

        self.symbols.push_scope()
        try:
            if existing is None:
                self._declare(node.variable, SymbolKind.VARIABLE, TYPE_INT, location)
            self._visit_statements(node.body)
        finally:
            self.symbols.pop_scope()

    def visit_InputStatement(self, node: InputStatement) -> None:
        self._check_target(node.target)

    def visit_OutputStatement(self, node: OutputStatement) -> None:
        # Strings are legal here and only here
        for expr in node.expressions:
            self.visit(expr)

    def visit_Condition(self, node: Condition) -> DataType:
        cond_type = self.visit(node.expression)
        if not cond_type.is_error and cond_type != TYPE_BOOL:
            self._mismatch(
                "condition must be a comparison or logical expression",
                node.expression.location,
                expected=TYPE_BOOL,
                actual=cond_type,
            )
        return TYPE_BOOL

    # =========================================================================
    # Variables
    # =========================================================================

    def _check_target(self, target: Variable) -> DataType:
        """Type of an assignment or input target; reports misuse."""
        symbol = self._resolve(target.name, target.location)
        if symbol is None:
            if isinstance(target, ArrayElement):
                self.visit(target.index)
            return TYPE_ERROR

        if not symbol.mutable:
            self._report(ConstantMutationError(
                target.name,
                location=target.location,
                original_location=symbol.location,
                source_line=self._source_line(target.location),
            ))
            if isinstance(target, ArrayElement):
                self.visit(target.index)
            return TYPE_ERROR

        if isinstance(target, SimpleVariable) and symbol.is_array:
            self._mismatch(
                f"cannot store a scalar into array '{target.name}'",
                target.location,
                expected=symbol.data_type.element,
                actual=symbol.data_type,
            )
            return TYPE_ERROR

        return self._variable_type(target, symbol)

    def _read_variable(self, variable: Variable) -> DataType:
        """Type of a variable read as a value."""
        symbol = self._resolve(variable.name, variable.location)
        if symbol is None:
            if isinstance(variable, ArrayElement):
                self.visit(variable.index)
            return TYPE_ERROR

        if isinstance(variable, SimpleVariable) and symbol.is_array:
            self._report(ArrayUsedAsScalarError(
                variable.name,
                location=variable.location,
                source_line=self._source_line(variable.location),
            ))
            return TYPE_ERROR

        return self._variable_type(variable, symbol)

    def _variable_type(self, variable: Variable, symbol: Symbol) -> DataType:
        if isinstance(variable, SimpleVariable):
            return symbol.data_type

        if not symbol.is_array:
            self._mismatch(
                f"'{variable.name}' is not an array",
                variable.location,
                expected="array",
                actual=symbol.data_type,
            )
            self.visit(variable.index)
            return TYPE_ERROR

        self._check_index(variable, symbol.data_type)
        return symbol.data_type.element

    def _check_index(self, element: ArrayElement, array_type: DataType) -> None:
        index = element.index
        index_type = self.visit(index)
        if index_type.is_error:
            return

        if index_type != TYPE_INT:
            self._report(InvalidIndexTypeError(
                element.name,
                str(index_type),
                location=index.location,
                source_line=self._source_line(index.location),
            ))
            return

        value = self._fold_int(index)
        if value is not None and not 0 <= value < array_type.size:
            self._report(IndexOutOfBoundsError(
                element.name,
                value,
                array_type.size,
                location=index.location,
                source_line=self._source_line(index.location),
            ))

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_IntegerLiteral(self, node: IntegerLiteral) -> DataType:
        return TYPE_INT

    def visit_FloatLiteral(self, node: FloatLiteral) -> DataType:
        return TYPE_FLOAT

    def visit_StringLiteral(self, node: StringLiteral) -> DataType:
        return TYPE_STRING

    def visit_VariableExpression(self, node: VariableExpression) -> DataType:
        return self._read_variable(node.variable)

    def visit_NotExpression(self, node: NotExpression) -> DataType:
        operand = self.visit(node.operand)
        if not operand.is_error and not self._is_logical_operand(operand):
            self._mismatch(
                "operator '!' needs a boolean or numeric operand",
                node.operand.location,
                actual=operand,
            )
        return TYPE_BOOL

    def visit_BinaryExpression(self, node: BinaryExpression) -> DataType:
        left = self.visit(node.left)
        right = self.visit(node.right)
        op = node.operator

        if op == BinaryOperator.DIVIDE and self._is_zero_divisor(node.right):
            is_float = TYPE_FLOAT in (left, right)
            if self.float_division_by_zero_is_error or not is_float:
                self._report(DivisionByZeroError(
                    location=node.right.location,
                    source_line=self._source_line(node.right.location),
                ))

        if op.is_arithmetic:
            if left.is_error or right.is_error:
                return TYPE_ERROR
            if not self._check_operands(node, left, right, lambda t: t.is_numeric, "numeric"):
                return TYPE_ERROR
            return arithmetic_result(left, right)

        if op.is_relational:
            if not left.is_error and not right.is_error:
                self._check_operands(node, left, right, lambda t: t.is_numeric, "numeric")
            return TYPE_BOOL

        if not left.is_error and not right.is_error:
            self._check_operands(
                node, left, right, self._is_logical_operand, "boolean or numeric"
            )
        return TYPE_BOOL

    def _check_operands(self, node: BinaryExpression, left, right, accepts, wanted: str) -> bool:
        """Report the first operand the operator cannot take."""
        for operand, operand_type in ((node.left, left), (node.right, right)):
            if not accepts(operand_type):
                self._mismatch(
                    f"operator '{node.operator.symbol}' needs {wanted} operands",
                    operand.location,
                    actual=operand_type,
                )
                return False
        return True

    @staticmethod
    def _is_logical_operand(data_type: DataType) -> bool:
        return data_type == TYPE_BOOL or data_type.is_numeric

    def _is_zero_divisor(self, expr: Expression) -> bool:
        """
        Return True for a divisor that is zero at compile time.

        Only a numeric literal or a bare reference to a constant counts;
        other expressions are never folded here. `x / -0` parses as
        `0 - 0` and is not reported, while `x / (-0)` is a signed literal
        and is.
        """
        if isinstance(expr, (IntegerLiteral, FloatLiteral)):
            return expr.value == 0
        if isinstance(expr, VariableExpression) and isinstance(expr.variable, SimpleVariable):
            symbol = self.symbols.lookup(expr.variable.name)
            return symbol is not None and symbol.kind == SymbolKind.CONSTANT \
                and symbol.value is not None and symbol.value == 0
        return False

    # =========================================================================
    # Constant Folding
    # =========================================================================

    def _fold_int(self, expr: Expression) -> Optional[int]:
        """
        Evaluate an Int expression known at compile time.

        Only literals, Int constants and + - * / are folded; anything
        that reads a variable returns None (a runtime value).
        """
        if isinstance(expr, IntegerLiteral):
            return expr.value

        if isinstance(expr, VariableExpression) and isinstance(expr.variable, SimpleVariable):
            symbol = self.symbols.lookup(expr.variable.name)
            if symbol is not None and symbol.kind == SymbolKind.CONSTANT \
                    and symbol.data_type.kind == TypeKind.INT:
                return symbol.value
            return None

        if isinstance(expr, BinaryExpression) and expr.operator.is_arithmetic:
            left = self._fold_int(expr.left)
            right = self._fold_int(expr.right)
            if left is None or right is None:
                return None
            if expr.operator == BinaryOperator.ADD:
                return left + right
            if expr.operator == BinaryOperator.SUBTRACT:
                return left - right
            if expr.operator == BinaryOperator.MULTIPLY:
                return left * right
            if right == 0:
                return None
            # Integer division truncates toward zero
            quotient = abs(left) // abs(right)
            return quotient if (left < 0) == (right < 0) else -quotient

        return None
