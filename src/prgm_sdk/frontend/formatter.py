"""
PRGM Source Formatter
=====================

Renders a Program AST back to canonical PRGM source text. The output
parses to a tree equal to the one it was produced from, so the
formatter doubles as a normalizer for hand-written programs.

Layout
------
- One declaration or statement per line, four-space indentation
- Conditions are always parenthesized: if (x > 0) then { ... }
- Binary expressions get parentheses only where the tree needs them
  to survive re-parsing (lower precedence child, or right operand of
  the same level since all operators are left-associative)
- Signed literals keep their explicit-sign form: (-5), (+2.5)
"""

from decimal import Decimal

from prgm_sdk.frontend.ast import (
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
    Statement,
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
    ArrayElement,
    BinaryOperator,
)


# Binding strength per operator; higher binds tighter
PRECEDENCE: dict[BinaryOperator, int] = {
    BinaryOperator.AND: 1,
    BinaryOperator.OR: 1,
    BinaryOperator.LESS: 2,
    BinaryOperator.GREATER: 2,
    BinaryOperator.LESS_EQ: 2,
    BinaryOperator.GREATER_EQ: 2,
    BinaryOperator.EQUAL: 2,
    BinaryOperator.NOT_EQUAL: 2,
    BinaryOperator.ADD: 3,
    BinaryOperator.SUBTRACT: 3,
    BinaryOperator.MULTIPLY: 4,
    BinaryOperator.DIVIDE: 4,
}

UNARY_PRECEDENCE = 5
PRIMARY_PRECEDENCE = 6


def _precedence(expr: Expression) -> int:
    if isinstance(expr, BinaryExpression):
        return PRECEDENCE[expr.operator]
    if isinstance(expr, NotExpression):
        return UNARY_PRECEDENCE
    return PRIMARY_PRECEDENCE


def format_float(value: float) -> str:
    """Render a float in the lexer's digits.digits form."""
    text = repr(float(value))
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    if "." not in text:
        text += ".0"
    return text


class SourceFormatter(ASTVisitor):
    """
    Pretty printer producing parseable PRGM source.

    Usage:
        text = SourceFormatter().format(program)
    """

    INDENT = "    "

    def __init__(self):
        self.lines: list[str] = []
        self.indent_level = 0

    def format(self, program: Program) -> str:
        """Return the source text of program, ending with a newline."""
        self.lines = []
        self.indent_level = 0
        self.visit(program)
        return "\n".join(self.lines) + "\n"

    def _emit(self, text: str) -> None:
        self.lines.append(f"{self.INDENT * self.indent_level}{text}")

    def _block(self, opener: str, statements: list[Statement], closer: str = "}") -> None:
        self._emit(f"{opener}{{")
        self.indent_level += 1
        for stmt in statements:
            self.visit(stmt)
        self.indent_level -= 1
        self._emit(closer)

    # =========================================================================
    # Program and Declarations
    # =========================================================================

    def visit_Program(self, node: Program):
        self._emit(f"MainPrgm {node.name};")
        self._emit("Var")
        for decl in node.declarations:
            self.visit(decl)
        self._emit("BeginPg")
        self._block("", node.statements)
        self._emit("EndPg;")

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        names = ", ".join(node.names)
        self._emit(f"let {names}: {self.type_text(node.type_spec)};")

    def visit_ConstDeclaration(self, node: ConstDeclaration):
        self._emit(
            f"@define Const {node.name}: {node.type_name.name} = {self.expr(node.value)};"
        )

    def type_text(self, spec: TypeName | ArrayType) -> str:
        if isinstance(spec, ArrayType):
            return f"[{spec.element.name}; {spec.size}]"
        return spec.name

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_Assignment(self, node: Assignment):
        self._emit(f"{self.variable(node.target)} := {self.expr(node.value)};")

    def visit_IfElse(self, node: IfElse):
        condition = self.expr(node.condition.expression)
        if node.else_branch:
            self._block(f"if ({condition}) then ", node.if_branch, "} else {")
            self.indent_level += 1
            for stmt in node.else_branch:
                self.visit(stmt)
            self.indent_level -= 1
            self._emit("}")
        else:
            self._block(f"if ({condition}) then ", node.if_branch)

    def visit_DoWhile(self, node: DoWhile):
        condition = self.expr(node.condition.expression)
        self._block("do ", node.body, f"}} while ({condition});")

    def visit_ForLoop(self, node: ForLoop):
        header = (
            f"for {node.variable} from {self.expr(node.start)} "
            f"to {self.expr(node.end)} step {self.expr(node.step)} "
        )
        self._block(header, node.body)

    def visit_InputStatement(self, node: InputStatement):
        self._emit(f"input({self.variable(node.target)});")

    def visit_OutputStatement(self, node: OutputStatement):
        args = ", ".join(self.expr(e) for e in node.expressions)
        self._emit(f"output({args});")

    # =========================================================================
    # Expressions
    # =========================================================================

    def variable(self, var: Variable) -> str:
        if isinstance(var, ArrayElement):
            return f"{var.name}[{self.expr(var.index)}]"
        return var.name

    def expr(self, node: Expression) -> str:
        """Render an expression with the minimum parentheses."""
        if isinstance(node, IntegerLiteral):
            if node.is_signed or node.value < 0:
                return f"({node.value:+d})"
            return str(node.value)

        if isinstance(node, FloatLiteral):
            text = format_float(abs(node.value))
            if node.is_signed or node.value < 0:
                sign = "-" if node.value < 0 else "+"
                return f"({sign}{text})"
            return text

        if isinstance(node, StringLiteral):
            return f'"{node.value}"'

        if isinstance(node, VariableExpression):
            return self.variable(node.variable)

        if isinstance(node, NotExpression):
            return f"!{self._operand(node.operand, UNARY_PRECEDENCE)}"

        if isinstance(node, BinaryExpression):
            level = PRECEDENCE[node.operator]
            left = self._operand(node.left, level)
            right = self._operand(node.right, level + 1)
            return f"{left} {node.operator.symbol} {right}"

        raise TypeError(f"cannot format expression node {type(node).__name__}")

    def _operand(self, node: Expression, minimum: int) -> str:
        text = self.expr(node)
        if _precedence(node) < minimum:
            return f"({text})"
        return text


def format_program(program: Program) -> str:
    """Convenience wrapper around SourceFormatter."""
    return SourceFormatter().format(program)
