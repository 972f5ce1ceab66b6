"""
PRGM Abstract Syntax Tree (AST) Definitions
===========================================

This module defines the AST node types produced by the PRGM parser.
The AST represents the hierarchical structure of a program after
parsing, ready for semantic analysis.

Node Hierarchy
--------------
ASTNode (base)
├── Program - root node: name, declarations, statements
├── Declarations
│   ├── VariableDeclaration - let a, b : Int;
│   └── ConstDeclaration - @define Const MAX: Int = 100;
├── Statements
│   ├── Assignment - target := value;
│   ├── IfElse - if cond then { } else { }
│   ├── DoWhile - do { } while cond;
│   ├── ForLoop - for i from a to b step c { }
│   ├── InputStatement - input(target);
│   └── OutputStatement - output(e1, e2, ...);
├── Expressions
│   ├── BinaryExpression - arithmetic, relational and logical operators
│   ├── NotExpression - logical negation
│   ├── VariableExpression - a Variable read as a value
│   ├── IntegerLiteral / FloatLiteral - numeric constants
│   ├── StringLiteral - string constant (output only)
│   └── TypeName / ArrayType - type specifiers (declarations only)
├── Variables
│   ├── SimpleVariable - name
│   └── ArrayElement - name[index]
└── Condition - boolean expression guarding if / do-while

Design Notes
------------
- All nodes are dataclasses for clean representation
- Each node stores its source location for error reporting; locations are
  excluded from equality so two trees with the same shape compare equal
- Unary minus has no node of its own: the parser desugars -x to (0 - x)
- Each category is a closed set; consumers dispatch on the concrete class
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, Union

from prgm_sdk.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


@dataclass
class Statement(ASTNode):
    """Base class for all statement nodes."""
    pass


@dataclass
class Declaration(ASTNode):
    """Base class for declarations in the Var section."""
    pass


# =============================================================================
# Variables and Conditions
# =============================================================================

@dataclass
class Variable(ASTNode):
    """
    Base class for variable references.

    Variables appear as assignment and input targets and, wrapped in a
    VariableExpression, as values.

    Attributes:
        name: The referenced identifier
    """
    name: str = ""


@dataclass
class SimpleVariable(Variable):
    """Plain name reference: x"""
    pass


@dataclass
class ArrayElement(Variable):
    """
    Indexed array reference: arr[index]

    Attributes:
        index: The index expression
    """
    index: Expression = None


@dataclass
class Condition(ASTNode):
    """
    Boolean expression guarding an if or do-while.

    Attributes:
        expression: The wrapped expression
    """
    expression: Expression = None


# =============================================================================
# Expression Nodes
# =============================================================================

class BinaryOperator(Enum):
    """Binary operator types."""
    # Arithmetic
    ADD = auto()        # +
    SUBTRACT = auto()   # -
    MULTIPLY = auto()   # *
    DIVIDE = auto()     # /

    # Relational
    LESS = auto()       # <
    GREATER = auto()    # >
    LESS_EQ = auto()    # <=
    GREATER_EQ = auto() # >=
    EQUAL = auto()      # ==
    NOT_EQUAL = auto()  # !=

    # Logical
    AND = auto()        # AND
    OR = auto()         # OR

    @property
    def symbol(self) -> str:
        """Return the operator as written in source."""
        return OPERATOR_SYMBOLS[self]

    @property
    def is_arithmetic(self) -> bool:
        return self in ARITHMETIC_OPERATORS

    @property
    def is_relational(self) -> bool:
        return self in RELATIONAL_OPERATORS

    @property
    def is_logical(self) -> bool:
        return self in (BinaryOperator.AND, BinaryOperator.OR)


OPERATOR_SYMBOLS: dict[BinaryOperator, str] = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUBTRACT: "-",
    BinaryOperator.MULTIPLY: "*",
    BinaryOperator.DIVIDE: "/",
    BinaryOperator.LESS: "<",
    BinaryOperator.GREATER: ">",
    BinaryOperator.LESS_EQ: "<=",
    BinaryOperator.GREATER_EQ: ">=",
    BinaryOperator.EQUAL: "==",
    BinaryOperator.NOT_EQUAL: "!=",
    BinaryOperator.AND: "AND",
    BinaryOperator.OR: "OR",
}

ARITHMETIC_OPERATORS = frozenset({
    BinaryOperator.ADD,
    BinaryOperator.SUBTRACT,
    BinaryOperator.MULTIPLY,
    BinaryOperator.DIVIDE,
})

RELATIONAL_OPERATORS = frozenset({
    BinaryOperator.LESS,
    BinaryOperator.GREATER,
    BinaryOperator.LESS_EQ,
    BinaryOperator.GREATER_EQ,
    BinaryOperator.EQUAL,
    BinaryOperator.NOT_EQUAL,
})


@dataclass
class BinaryExpression(Expression):
    """
    Binary operation expression (left op right).

    Attributes:
        left: Left operand expression
        operator: The binary operator
        right: Right operand expression
    """
    left: Expression = None
    operator: BinaryOperator = None
    right: Expression = None


@dataclass
class NotExpression(Expression):
    """Logical negation: !operand"""
    operand: Expression = None


@dataclass
class VariableExpression(Expression):
    """A variable read as a value."""
    variable: Variable = None


@dataclass
class IntegerLiteral(Expression):
    """
    Integer constant.

    Attributes:
        value: The integer value
        is_signed: True when written as (+n) / (-n)
    """
    value: int = 0
    is_signed: bool = False


@dataclass
class FloatLiteral(Expression):
    """
    Float constant.

    Attributes:
        value: The float value
        is_signed: True when written as (+x.y) / (-x.y)
    """
    value: float = 0.0
    is_signed: bool = False


@dataclass
class StringLiteral(Expression):
    """String literal, legal only as an output argument."""
    value: str = ""


@dataclass
class TypeName(Expression):
    """Scalar type specifier: Int or Float."""
    name: str = ""


@dataclass
class ArrayType(Expression):
    """
    Array type specifier: [Int; 5]

    Attributes:
        element: The element type
        size: Declared element count (positive)
    """
    element: TypeName = None
    size: int = 0


Literal = Union[IntegerLiteral, FloatLiteral]
TypeSpec = Union[TypeName, ArrayType]


# =============================================================================
# Declaration Nodes
# =============================================================================

@dataclass
class VariableDeclaration(Declaration):
    """
    Variable declaration: let a, b, c : type_spec;

    Attributes:
        names: Declared identifiers in source order
        type_spec: Shared type of all names
        name_locations: Source location of each name
    """
    names: list[str] = field(default_factory=list)
    type_spec: TypeSpec = None
    name_locations: list[SourceLocation] = field(
        default_factory=list, compare=False, repr=False
    )


@dataclass
class ConstDeclaration(Declaration):
    """
    Constant declaration: @define Const MAX: Int = 100;

    Attributes:
        name: Constant name
        type_name: Declared scalar type
        value: Literal initializer
    """
    name: str = ""
    type_name: TypeName = None
    value: Literal = None


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class Assignment(Statement):
    """Assignment statement: target := value;"""
    target: Variable = None
    value: Expression = None


@dataclass
class IfElse(Statement):
    """
    Conditional statement.

    Attributes:
        condition: The guard
        if_branch: Statements run when the guard holds
        else_branch: Statements run otherwise (empty when no else)
    """
    condition: Condition = None
    if_branch: list[Statement] = field(default_factory=list)
    else_branch: list[Statement] = field(default_factory=list)


@dataclass
class DoWhile(Statement):
    """Post-tested loop: do { body } while condition;"""
    body: list[Statement] = field(default_factory=list)
    condition: Condition = None


@dataclass
class ForLoop(Statement):
    """
    Counting loop: for var from start to end step step { body }

    Attributes:
        variable: Loop variable name
        start: Initial value
        end: Final value
        step: Increment
        body: Loop body
        variable_location: Where the loop variable name appears
    """
    variable: str = ""
    start: Expression = None
    end: Expression = None
    step: Expression = None
    body: list[Statement] = field(default_factory=list)
    variable_location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False
    )


@dataclass
class InputStatement(Statement):
    """Read a value into a variable: input(target);"""
    target: Variable = None


@dataclass
class OutputStatement(Statement):
    """Print values: output(e1, e2, ...);"""
    expressions: list[Expression] = field(default_factory=list)


# =============================================================================
# Program Root Node
# =============================================================================

@dataclass
class Program(ASTNode):
    """
    Root node of the AST representing a complete PRGM program.

    Attributes:
        name: Program name from the MainPrgm header
        declarations: Var section entries in source order
        statements: Top-level BeginPg block
    """
    name: str = ""
    declarations: list[Declaration] = field(default_factory=list)
    statements: list[Statement] = field(default_factory=list)


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Provides a visitor pattern for traversing the AST. Subclasses
    override visit_* methods for specific node types they care about.

    Usage:
        class NameCollector(ASTVisitor):
            def visit_SimpleVariable(self, node):
                self.names.append(node.name)

        collector = NameCollector()
        collector.visit(program)
    """

    def visit(self, node: ASTNode) -> Any:
        """
        Visit a node by dispatching to the appropriate method.

        Args:
            node: The AST node to visit

        Returns:
            The result of the visit method (varies by node type)
        """
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """
        Default visit method for unhandled node types.

        Visits all children of the node.
        """
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)
            elif isinstance(field_value, list):
                for item in field_value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Produces an indented, human-readable view of the tree.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def _block(self, label: str, statements: list[Statement]) -> None:
        self._emit(label)
        self._indent()
        for stmt in statements:
            self.visit(stmt)
        self._dedent()

    def visit_Program(self, node: Program):
        self._emit(f"Program: {node.name}")
        self._indent()
        self._emit("Declarations")
        self._indent()
        for decl in node.declarations:
            self.visit(decl)
        self._dedent()
        self._block("Statements", node.statements)
        self._dedent()

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        names = ", ".join(node.names)
        self._emit(f"Variable: {names} : {self._expr_str(node.type_spec)}")

    def visit_ConstDeclaration(self, node: ConstDeclaration):
        self._emit(
            f"Const: {node.name} : {node.type_name.name} = {self._expr_str(node.value)}"
        )

    def visit_Assignment(self, node: Assignment):
        self._emit(f"Assign: {self._var_str(node.target)} := {self._expr_str(node.value)}")

    def visit_IfElse(self, node: IfElse):
        self._emit(f"If ({self._expr_str(node.condition.expression)})")
        self._indent()
        self._block("Then:", node.if_branch)
        if node.else_branch:
            self._block("Else:", node.else_branch)
        self._dedent()

    def visit_DoWhile(self, node: DoWhile):
        self._emit(f"DoWhile ({self._expr_str(node.condition.expression)})")
        self._indent()
        for stmt in node.body:
            self.visit(stmt)
        self._dedent()

    def visit_ForLoop(self, node: ForLoop):
        self._emit(
            f"For {node.variable} from {self._expr_str(node.start)} "
            f"to {self._expr_str(node.end)} step {self._expr_str(node.step)}"
        )
        self._indent()
        for stmt in node.body:
            self.visit(stmt)
        self._dedent()

    def visit_InputStatement(self, node: InputStatement):
        self._emit(f"Input: {self._var_str(node.target)}")

    def visit_OutputStatement(self, node: OutputStatement):
        args = ", ".join(self._expr_str(e) for e in node.expressions)
        self._emit(f"Output: {args}")

    def _var_str(self, var: Variable) -> str:
        if isinstance(var, ArrayElement):
            return f"{var.name}[{self._expr_str(var.index)}]"
        return var.name

    def _expr_str(self, expr: Expression) -> str:
        """Convert expression to string representation."""
        if expr is None:
            return ""
        if isinstance(expr, (IntegerLiteral, FloatLiteral)):
            return str(expr.value)
        if isinstance(expr, StringLiteral):
            return f'"{expr.value}"'
        if isinstance(expr, VariableExpression):
            return self._var_str(expr.variable)
        if isinstance(expr, BinaryExpression):
            return (
                f"({self._expr_str(expr.left)} {expr.operator.symbol} "
                f"{self._expr_str(expr.right)})"
            )
        if isinstance(expr, NotExpression):
            return f"(!{self._expr_str(expr.operand)})"
        if isinstance(expr, TypeName):
            return expr.name
        if isinstance(expr, ArrayType):
            return f"[{expr.element.name}; {expr.size}]"
        return f"<{type(expr).__name__}>"
