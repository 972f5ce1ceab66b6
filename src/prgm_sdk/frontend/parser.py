"""
PRGM Recursive Descent Parser
=============================

This module implements a recursive descent parser for the PRGM teaching
language. It takes a stream of tokens from the lexer and builds an
Abstract Syntax Tree (AST).

Grammar (EBNF)
--------------
program      ::= 'MainPrgm' IDENT ';' 'Var' declaration* 'BeginPg' block 'EndPg' ';'
declaration  ::= 'let' IDENT (',' IDENT)* ':' type_spec ';'
               | '@define' 'Const' IDENT ':' scalar_type '=' literal ';'
type_spec    ::= scalar_type | '[' scalar_type ';' INT_LITERAL ']'
scalar_type  ::= 'Int' | 'Float'
literal      ::= INT | SIGNED_INT | FLOAT | SIGNED_FLOAT

block        ::= '{' statement* '}'
statement    ::= variable ':=' expr ';'
               | 'if' expr 'then' block ('else' block)?
               | 'do' block 'while' expr ';'
               | 'for' IDENT 'from' expr 'to' expr 'step' expr block
               | 'input' '(' variable ')' ';'
               | 'output' '(' expr (',' expr)* ')' ';'
variable     ::= IDENT ('[' expr ']')?

Expression Precedence (lowest to highest)
-----------------------------------------
1. logical        AND OR
2. relational     < > <= >= == !=
3. additive       + -
4. multiplicative * /
5. unary          ! -
6. primary        variable, literals, signed literals, STRING, '(' expr ')'

All binary levels are left-associative. Unary minus is desugared to a
subtraction from zero: -x parses as (0 - x).

Error Handling
--------------
The parser fails fast: the first construct that does not match a
production raises a FrontendSyntaxError naming the offending token and
its position. There is no recovery.

Example Usage
-------------
>>> from prgm_sdk.frontend.parser import parse_source
>>> program = parse_source('MainPrgm P; Var BeginPg { } EndPg;')
>>> program.name
'P'
"""

from typing import Callable, Optional

from prgm_sdk.frontend.lexer import Lexer, Token, TokenType
from prgm_sdk.frontend.ast import (
    Program,
    Declaration,
    VariableDeclaration,
    ConstDeclaration,
    Statement,
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
    BinaryOperator,
)
from prgm_sdk.frontend.errors import (
    FrontendSyntaxError,
    UnexpectedTokenError,
    MissingTokenError,
)


# Token type -> operator tables for each binary precedence level
LOGICAL_OPERATORS = {
    TokenType.AND: BinaryOperator.AND,
    TokenType.OR: BinaryOperator.OR,
}

RELATIONAL_OPERATORS = {
    TokenType.LT: BinaryOperator.LESS,
    TokenType.GT: BinaryOperator.GREATER,
    TokenType.LE: BinaryOperator.LESS_EQ,
    TokenType.GE: BinaryOperator.GREATER_EQ,
    TokenType.EQ: BinaryOperator.EQUAL,
    TokenType.NE: BinaryOperator.NOT_EQUAL,
}

ADDITIVE_OPERATORS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUBTRACT,
}

MULTIPLICATIVE_OPERATORS = {
    TokenType.STAR: BinaryOperator.MULTIPLY,
    TokenType.SLASH: BinaryOperator.DIVIDE,
}


class Parser:
    """
    Recursive descent parser for PRGM.

    Parses a list of tokens into a Program AST. Uses one method per
    grammar rule and a shared helper for the left-associative binary
    precedence levels.

    Attributes:
        tokens: List of tokens to parse (must end with EOF)
        filename: Source filename for error reporting
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer
            filename: Source filename for error messages
            source_lines: Original source lines for error context
        """
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token list must end with an EOF token")

        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []

        self._pos = 0

    def parse(self) -> Program:
        """
        Parse the token stream into an AST.

        Returns:
            Program node for the whole source

        Raises:
            FrontendSyntaxError: On the first construct that does not parse
        """
        start = self._expect(TokenType.MAINPRGM, "'MainPrgm'")
        name = self._expect(TokenType.IDENTIFIER, "program name")
        self._expect(TokenType.SEMICOLON, "';'")

        self._expect(TokenType.VAR, "'Var'")
        declarations = []
        while not self._check(TokenType.BEGINPG):
            declarations.append(self._parse_declaration())

        self._expect(TokenType.BEGINPG, "'BeginPg'")
        statements = self._parse_block()
        self._expect(TokenType.ENDPG, "'EndPg'")
        self._expect(TokenType.SEMICOLON, "';'")

        if not self._at_end():
            raise self._unexpected("end of input")

        return Program(
            location=start.location,
            name=name.value,
            declarations=declarations,
            statements=statements,
        )

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self._peek().type == TokenType.EOF

    def _peek(self, offset: int = 0) -> Token:
        """Look at token at current position + offset."""
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[pos]

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._peek()
        if not self._at_end():
            self._pos += 1
        return token

    def _check(self, *types: TokenType) -> bool:
        """Check if current token is one of the given types."""
        return self._peek().type in types

    def _match(self, *types: TokenType) -> Optional[Token]:
        """
        Consume current token if it matches one of the types.

        Returns:
            The consumed token, or None if no match
        """
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, message: str) -> Token:
        """
        Expect and consume a specific token type.

        Raises:
            MissingTokenError: If the expected token is not found
        """
        if self._check(token_type):
            return self._advance()

        current = self._peek()
        raise MissingTokenError(
            message,
            found=current.describe(),
            location=current.location,
            source_line=self._get_source_line(current.line),
        )

    def _unexpected(self, expected: str) -> UnexpectedTokenError:
        """Build an error for the current token."""
        current = self._peek()
        return UnexpectedTokenError(
            current.describe(),
            expected=expected,
            location=current.location,
            source_line=self._get_source_line(current.line),
        )

    def _get_source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    # =========================================================================
    # Declaration Parsing
    # =========================================================================

    def _parse_declaration(self) -> Declaration:
        """Parse one entry of the Var section."""
        if self._check(TokenType.LET):
            return self._parse_variable_declaration()
        if self._check(TokenType.DEFINE):
            return self._parse_const_declaration()
        raise self._unexpected("'let', '@define' or 'BeginPg'")

    def _parse_variable_declaration(self) -> VariableDeclaration:
        """Parse: let a, b : type_spec;"""
        start = self._advance()  # consume 'let'

        names = []
        name_locations = []
        while True:
            token = self._expect(TokenType.IDENTIFIER, "variable name")
            names.append(token.value)
            name_locations.append(token.location)
            if not self._match(TokenType.COMMA):
                break

        self._expect(TokenType.COLON, "':'")
        type_spec = self._parse_type_spec()
        self._expect(TokenType.SEMICOLON, "';'")

        return VariableDeclaration(
            location=start.location,
            names=names,
            type_spec=type_spec,
            name_locations=name_locations,
        )

    def _parse_const_declaration(self) -> ConstDeclaration:
        """Parse: @define Const NAME : scalar_type = literal;"""
        self._advance()  # consume '@define'
        self._expect(TokenType.CONST, "'Const'")
        name = self._expect(TokenType.IDENTIFIER, "constant name")
        self._expect(TokenType.COLON, "':'")
        type_name = self._parse_scalar_type()
        self._expect(TokenType.EQUALS, "'='")
        value = self._parse_literal()
        self._expect(TokenType.SEMICOLON, "';'")

        return ConstDeclaration(
            location=name.location,
            name=name.value,
            type_name=type_name,
            value=value,
        )

    def _parse_scalar_type(self) -> TypeName:
        """Parse 'Int' or 'Float'."""
        token = self._match(TokenType.INT, TokenType.FLOAT)
        if token is None:
            raise self._unexpected("type 'Int' or 'Float'")
        return TypeName(location=token.location, name=token.value)

    def _parse_type_spec(self) -> TypeName | ArrayType:
        """Parse a scalar type or an array type [Int; 5]."""
        start = self._match(TokenType.LBRACKET)
        if start is None:
            return self._parse_scalar_type()

        element = self._parse_scalar_type()
        self._expect(TokenType.SEMICOLON, "';'")

        size_token = self._peek()
        if size_token.type != TokenType.INT_LITERAL or size_token.value <= 0:
            raise self._unexpected("positive integer array size")
        self._advance()

        self._expect(TokenType.RBRACKET, "']'")
        return ArrayType(
            location=start.location,
            element=element,
            size=size_token.value,
        )

    def _parse_literal(self) -> IntegerLiteral | FloatLiteral:
        """Parse a plain or signed numeric literal."""
        token = self._peek()
        if token.type in (TokenType.INT_LITERAL, TokenType.SIGNED_INT_LITERAL):
            self._advance()
            return IntegerLiteral(
                location=token.location,
                value=token.value,
                is_signed=token.type == TokenType.SIGNED_INT_LITERAL,
            )
        if token.type in (TokenType.FLOAT_LITERAL, TokenType.SIGNED_FLOAT_LITERAL):
            self._advance()
            return FloatLiteral(
                location=token.location,
                value=token.value,
                is_signed=token.type == TokenType.SIGNED_FLOAT_LITERAL,
            )
        raise self._unexpected("numeric literal")

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_block(self) -> list[Statement]:
        """Parse '{' statement* '}'."""
        self._expect(TokenType.LBRACE, "'{'")
        statements = []
        while not self._check(TokenType.RBRACE):
            if self._at_end():
                raise self._unexpected("'}'")
            statements.append(self._parse_statement())
        self._advance()  # consume '}'
        return statements

    def _parse_statement(self) -> Statement:
        """Parse a single statement."""
        token = self._peek()

        if token.type == TokenType.IDENTIFIER:
            return self._parse_assignment()
        if token.type == TokenType.IF:
            return self._parse_if()
        if token.type == TokenType.DO:
            return self._parse_do_while()
        if token.type == TokenType.FOR:
            return self._parse_for()
        if token.type == TokenType.INPUT:
            return self._parse_input()
        if token.type == TokenType.OUTPUT:
            return self._parse_output()

        raise self._unexpected("statement")

    def _parse_assignment(self) -> Assignment:
        target = self._parse_variable()
        self._expect(TokenType.ASSIGN, "':='")
        value = self._parse_expression()
        self._expect(TokenType.SEMICOLON, "';'")
        return Assignment(location=target.location, target=target, value=value)

    def _parse_if(self) -> IfElse:
        """Parse: if cond then { ... } [else { ... }]"""
        start = self._advance()  # consume 'if'
        condition = self._parse_condition()
        self._expect(TokenType.THEN, "'then'")
        if_branch = self._parse_block()

        else_branch = []
        if self._match(TokenType.ELSE):
            else_branch = self._parse_block()

        return IfElse(
            location=start.location,
            condition=condition,
            if_branch=if_branch,
            else_branch=else_branch,
        )

    def _parse_do_while(self) -> DoWhile:
        """Parse: do { ... } while cond;"""
        start = self._advance()  # consume 'do'
        body = self._parse_block()
        self._expect(TokenType.WHILE, "'while'")
        condition = self._parse_condition()
        self._expect(TokenType.SEMICOLON, "';'")
        return DoWhile(location=start.location, body=body, condition=condition)

    def _parse_for(self) -> ForLoop:
        """Parse: for i from start to end step step { ... }"""
        start_token = self._advance()  # consume 'for'
        variable = self._expect(TokenType.IDENTIFIER, "loop variable")
        self._expect(TokenType.FROM, "'from'")
        start = self._parse_expression()
        self._expect(TokenType.TO, "'to'")
        end = self._parse_expression()
        self._expect(TokenType.STEP, "'step'")
        step = self._parse_expression()
        body = self._parse_block()

        return ForLoop(
            location=start_token.location,
            variable=variable.value,
            start=start,
            end=end,
            step=step,
            body=body,
            variable_location=variable.location,
        )

    def _parse_input(self) -> InputStatement:
        """Parse: input(variable);"""
        start = self._advance()  # consume 'input'
        self._expect(TokenType.LPAREN, "'('")
        target = self._parse_variable()
        self._expect(TokenType.RPAREN, "')'")
        self._expect(TokenType.SEMICOLON, "';'")
        return InputStatement(location=start.location, target=target)

    def _parse_output(self) -> OutputStatement:
        """Parse: output(expr, ...);"""
        start = self._advance()  # consume 'output'
        self._expect(TokenType.LPAREN, "'('")

        expressions = [self._parse_expression()]
        while self._match(TokenType.COMMA):
            expressions.append(self._parse_expression())

        self._expect(TokenType.RPAREN, "')'")
        self._expect(TokenType.SEMICOLON, "';'")
        return OutputStatement(location=start.location, expressions=expressions)

    def _parse_condition(self) -> Condition:
        expr = self._parse_expression()
        return Condition(location=expr.location, expression=expr)

    def _parse_variable(self) -> Variable:
        """Parse IDENT or IDENT '[' expr ']'."""
        name = self._expect(TokenType.IDENTIFIER, "identifier")

        if self._match(TokenType.LBRACKET):
            index = self._parse_expression()
            self._expect(TokenType.RBRACKET, "']'")
            return ArrayElement(location=name.location, name=name.value, index=index)

        return SimpleVariable(location=name.location, name=name.value)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """Parse a full expression (lowest precedence level)."""
        return self._parse_logical()

    def _parse_logical(self) -> Expression:
        """Parse logical expression (AND OR)."""
        return self._parse_binary(self._parse_relational, LOGICAL_OPERATORS)

    def _parse_relational(self) -> Expression:
        """Parse relational expression (< > <= >= == !=)."""
        return self._parse_binary(self._parse_additive, RELATIONAL_OPERATORS)

    def _parse_additive(self) -> Expression:
        """Parse additive expression (+ -)."""
        return self._parse_binary(self._parse_multiplicative, ADDITIVE_OPERATORS)

    def _parse_multiplicative(self) -> Expression:
        """Parse multiplicative expression (* /)."""
        return self._parse_binary(self._parse_unary, MULTIPLICATIVE_OPERATORS)

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: dict[TokenType, BinaryOperator],
    ) -> Expression:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Function to parse operands
            operators: Map of token types to binary operators
        """
        expr = operand_parser()

        while self._peek().type in operators:
            op_token = self._advance()
            right = operand_parser()
            expr = BinaryExpression(
                location=expr.location,
                left=expr,
                operator=operators[op_token.type],
                right=right,
            )

        return expr

    def _parse_unary(self) -> Expression:
        """Parse unary expression (! and desugared -)."""
        token = self._peek()

        if self._match(TokenType.NOT):
            operand = self._parse_unary()
            return NotExpression(location=token.location, operand=operand)

        if self._match(TokenType.MINUS):
            operand = self._parse_unary()
            return BinaryExpression(
                location=token.location,
                left=IntegerLiteral(location=token.location, value=0),
                operator=BinaryOperator.SUBTRACT,
                right=operand,
            )

        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        """Parse primary expression (literals, variables, parenthesized)."""
        token = self._peek()

        if token.type == TokenType.IDENTIFIER:
            variable = self._parse_variable()
            return VariableExpression(location=variable.location, variable=variable)

        if token.is_numeric_literal():
            return self._parse_literal()

        if token.type == TokenType.STRING_LITERAL:
            self._advance()
            return StringLiteral(location=token.location, value=token.value)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._expect(TokenType.RPAREN, "')'")
            return expr

        raise self._unexpected("expression")


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_tokens(
    tokens: list[Token],
    filename: str = "<input>",
    source: Optional[str] = None,
) -> Program:
    """Parse an already tokenized program."""
    source_lines = source.splitlines() if source is not None else None
    return Parser(tokens, filename, source_lines).parse()


def parse_source(source: str, filename: str = "<input>") -> Program:
    """
    Parse PRGM source code into an AST.

    This is a convenience function that combines lexing and parsing.

    Args:
        source: The PRGM source code
        filename: Source filename for error messages

    Returns:
        The root Program node of the AST

    Raises:
        FrontendSyntaxError: If lexing or parsing fails
    """
    lexer = Lexer(source, filename)
    tokens = list(lexer.tokenize())
    return parse_tokens(tokens, filename, source)


__all__ = ["Parser", "parse_source", "parse_tokens", "FrontendSyntaxError"]
