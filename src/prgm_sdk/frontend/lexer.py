"""
PRGM Lexer (Tokenizer)
======================

This module implements the lexer for the PRGM teaching language.
It converts source text into a stream of tokens for the parser.

Token Categories
----------------
- Keywords: MainPrgm, Var, BeginPg, EndPg, let, Int, Float, @define, Const,
  input, output, if, then, else, do, while, for, from, to, step
- Keyword operators: AND, OR
- Identifiers: variable and constant names
- Numbers: decimal integers (123) and floats (3.14)
- Signed numbers: parenthesized with an explicit sign, (+5), (-2.5)
- Strings: "double quoted", single line, no escapes
- Operators: + - * / < > <= >= == != !
- Delimiters: := ; : , = [ ] { } ( )

Identifier Rules
----------------
| Rule                          | Example      |
|-------------------------------|--------------|
| starts with a letter          | x1, Total    |
| at most 14 characters         | counter      |
| must not end with '_'         | bad_         |
| must not contain '__'         | bad__name    |

Comments
--------
- Single-line: <!- comment -!>
- Multi-line:  {-- comment --}

Example Usage
-------------
>>> from prgm_sdk.frontend.lexer import Lexer
>>> lexer = Lexer('x := (-5);', "test.prgm")
>>> for token in lexer.tokenize():
...     print(token)
Token(IDENTIFIER, 'x', 1:1)
Token(ASSIGN, ':=', 1:3)
Token(SIGNED_INT_LITERAL, -5, 1:6)
Token(SEMICOLON, ';', 1:10)
Token(EOF, 1:11)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import string

from prgm_sdk.errors import SourceLocation
from prgm_sdk.frontend.errors import (
    FrontendSyntaxError,
    InvalidCharacterError,
    InvalidIdentifierError,
    InvalidLiteralError,
    UnterminatedCommentError,
    UnterminatedStringError,
)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the PRGM language.

    Keywords are distinguished from identifiers to simplify parsing.
    """

    # === Structural Tokens ===
    EOF = auto()                    # End of file

    # === Identifiers and Literals ===
    IDENTIFIER = auto()             # Variable/constant names
    INT_LITERAL = auto()            # 42
    SIGNED_INT_LITERAL = auto()     # (-42), (+42)
    FLOAT_LITERAL = auto()          # 3.14
    SIGNED_FLOAT_LITERAL = auto()   # (-3.14)
    STRING_LITERAL = auto()         # "text"

    # === Keywords - Program Structure ===
    MAINPRGM = auto()       # MainPrgm
    VAR = auto()            # Var
    BEGINPG = auto()        # BeginPg
    ENDPG = auto()          # EndPg

    # === Keywords - Declarations ===
    LET = auto()            # let
    INT = auto()            # Int
    FLOAT = auto()          # Float
    DEFINE = auto()         # @define
    CONST = auto()          # Const

    # === Keywords - Statements ===
    INPUT = auto()          # input
    OUTPUT = auto()         # output
    IF = auto()             # if
    THEN = auto()           # then
    ELSE = auto()           # else
    DO = auto()             # do
    WHILE = auto()          # while
    FOR = auto()            # for
    FROM = auto()           # from
    TO = auto()             # to
    STEP = auto()           # step

    # === Arithmetic Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /

    # === Comparison Operators ===
    LT = auto()             # <
    GT = auto()             # >
    LE = auto()             # <=
    GE = auto()             # >=
    EQ = auto()             # ==
    NE = auto()             # !=

    # === Logical Operators ===
    AND = auto()            # AND
    OR = auto()             # OR
    NOT = auto()            # !

    # === Delimiters ===
    ASSIGN = auto()         # :=
    EQUALS = auto()         # = (constant initializer)
    SEMICOLON = auto()      # ;
    COLON = auto()          # :
    COMMA = auto()          # ,
    LBRACKET = auto()       # [
    RBRACKET = auto()       # ]
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    LPAREN = auto()         # (
    RPAREN = auto()         # )


# =============================================================================
# Keyword Mapping
# =============================================================================

KEYWORDS: dict[str, TokenType] = {
    # Program structure
    "MainPrgm": TokenType.MAINPRGM,
    "Var": TokenType.VAR,
    "BeginPg": TokenType.BEGINPG,
    "EndPg": TokenType.ENDPG,

    # Declarations
    "let": TokenType.LET,
    "Int": TokenType.INT,
    "Float": TokenType.FLOAT,
    "Const": TokenType.CONST,

    # Statements
    "input": TokenType.INPUT,
    "output": TokenType.OUTPUT,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "do": TokenType.DO,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "from": TokenType.FROM,
    "to": TokenType.TO,
    "step": TokenType.STEP,

    # Keyword operators
    "AND": TokenType.AND,
    "OR": TokenType.OR,
}

# Directive keywords start with '@' and are scanned separately
DIRECTIVES: dict[str, TokenType] = {
    "@define": TokenType.DEFINE,
}

MAX_IDENTIFIER_LENGTH = 14

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1
FLOAT_MAX = 3.4028234663852886e38  # largest finite 32-bit float


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    Represents a single token from PRGM source code.

    Attributes:
        type: The TokenType classification
        value: The token value (str for names, int/float for numbers)
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: str | int | float | None
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            if isinstance(self.value, (int, float)):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_numeric_literal(self) -> bool:
        """Return True if this token is a plain or signed number."""
        return self.type in (
            TokenType.INT_LITERAL,
            TokenType.SIGNED_INT_LITERAL,
            TokenType.FLOAT_LITERAL,
            TokenType.SIGNED_FLOAT_LITERAL,
        )

    def describe(self) -> str:
        """Short text naming the token in error messages."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.STRING_LITERAL:
            return f'"{self.value}"'
        if self.type == TokenType.SIGNED_INT_LITERAL or self.type == TokenType.SIGNED_FLOAT_LITERAL:
            return f"({self.value:+})"
        return str(self.value)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes PRGM source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Lexical errors are raised as FrontendSyntaxError subclasses carrying
    the exact source location and the offending line.

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters
    IDENT_CHARS = string.ascii_letters + string.digits + "_"
    DIGITS = frozenset(string.digits)

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: The PRGM source code to tokenize
            filename: Name of the source file (for error messages)
        """
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1

        # Track line start position for error reporting
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects representing each lexical element, ending with EOF

        Raises:
            FrontendSyntaxError: If invalid input is encountered
        """
        while not self._at_end():
            self._skip_whitespace_and_comments()

            if self._at_end():
                break

            yield self._scan_token()

        yield self._make_token(TokenType.EOF, None)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line/column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _match(self, expected: str) -> bool:
        """Consume next character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    def _starts_with(self, text: str) -> bool:
        """Check whether the unconsumed input begins with text."""
        return self.source.startswith(text, self._pos)

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        value: str | int | float | None,
        start_line: Optional[int] = None,
        start_column: Optional[int] = None,
    ) -> Token:
        """Create a token with current or specified position."""
        return Token(
            type=token_type,
            value=value,
            line=start_line or self._line,
            column=start_column or self._column,
            filename=self.filename,
        )

    def _location(self, line: int, column: int) -> SourceLocation:
        return SourceLocation(self.filename, line, column)

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and comments."""
        while not self._at_end():
            char = self._peek()

            if char in " \t\n\r\f":
                self._advance()
                continue

            # Single-line comment: <!- ... -!>
            if self._starts_with("<!-"):
                self._skip_comment("<!-", "-!>", single_line=True)
                continue

            # Multi-line comment: {-- ... --}
            if self._starts_with("{--"):
                self._skip_comment("{--", "--}", single_line=False)
                continue

            break

    def _skip_comment(self, opener: str, terminator: str, single_line: bool) -> None:
        """
        Skip a comment delimited by opener and terminator.

        Raises:
            UnterminatedCommentError: If the terminator is never found (or,
                for single-line comments, not found before end of line)
        """
        start_line = self._line
        start_col = self._column
        source_line = self._get_current_line()

        for _ in opener:
            self._advance()

        while not self._at_end():
            if self._starts_with(terminator):
                for _ in terminator:
                    self._advance()
                return
            if single_line and self._peek() == "\n":
                break
            self._advance()

        raise UnterminatedCommentError(
            terminator,
            self._location(start_line, start_col),
            source_line,
        )

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        """Scan the next token from source."""
        start_line = self._line
        start_column = self._column

        char = self._peek()

        if char in self.IDENT_START:
            return self._scan_identifier(start_line, start_column)

        if char in self.DIGITS:
            return self._scan_number(start_line, start_column)

        if char == '"':
            return self._scan_string(start_line, start_column)

        if char == "@":
            return self._scan_directive(start_line, start_column)

        if char == "(" and self._signed_literal_ahead():
            return self._scan_signed_number(start_line, start_column)

        return self._scan_operator(start_line, start_column)

    def _scan_identifier(self, start_line: int, start_column: int) -> Token:
        """
        Scan an identifier or keyword.

        Keywords are checked first; the naming rules only apply to
        user identifiers.
        """
        source_line = self._get_current_line()
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        name = "".join(chars)

        if name in KEYWORDS:
            return self._make_token(KEYWORDS[name], name, start_line, start_column)

        reason = None
        if len(name) > MAX_IDENTIFIER_LENGTH:
            reason = f"longer than {MAX_IDENTIFIER_LENGTH} characters"
        elif name.endswith("_"):
            reason = "must not end with '_'"
        elif "__" in name:
            reason = "must not contain '__'"

        if reason:
            raise InvalidIdentifierError(
                name,
                reason,
                self._location(start_line, start_column),
                source_line,
            )

        return self._make_token(TokenType.IDENTIFIER, name, start_line, start_column)

    def _scan_directive(self, start_line: int, start_column: int) -> Token:
        """Scan an '@' directive keyword such as '@define'."""
        source_line = self._get_current_line()
        chars = [self._advance()]
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        word = "".join(chars)
        if word in DIRECTIVES:
            return self._make_token(DIRECTIVES[word], word, start_line, start_column)

        raise InvalidCharacterError(
            "@",
            self._location(start_line, start_column),
            source_line,
        )

    def _read_digits(self) -> str:
        chars = []
        while self._peek() in self.DIGITS:
            chars.append(self._advance())
        return "".join(chars)

    def _scan_number(self, start_line: int, start_column: int) -> Token:
        """
        Scan a numeric literal.

        Handles:
        - Integer: 123
        - Float: 3.14 (digits are required on both sides of the point)
        """
        text = self._read_digits()

        if self._peek() == "." and self._peek(1) in self.DIGITS:
            self._advance()  # consume .
            text += "." + self._read_digits()
            value = self._checked_float(float(text), text, start_line, start_column)
            return self._make_token(TokenType.FLOAT_LITERAL, value, start_line, start_column)

        value = self._checked_int(int(text), text, start_line, start_column)
        return self._make_token(TokenType.INT_LITERAL, value, start_line, start_column)

    def _signed_literal_ahead(self) -> bool:
        """
        Check for a parenthesized signed literal: '(' [+-] digits ['.' digits] ')'.
        """
        offset = 1
        if self._peek(offset) not in ("+", "-") or not self._peek(offset):
            return False
        offset += 1
        if self._peek(offset) not in self.DIGITS:
            return False
        while self._peek(offset) in self.DIGITS:
            offset += 1
        if self._peek(offset) == "." and self._peek(offset + 1) in self.DIGITS:
            offset += 1
            while self._peek(offset) in self.DIGITS:
                offset += 1
        return self._peek(offset) == ")"

    def _scan_signed_number(self, start_line: int, start_column: int) -> Token:
        """Scan '(+5)', '(-5)' or '(-2.5)' as a single signed literal."""
        self._advance()  # consume (
        sign = self._advance()
        text = sign + self._read_digits()

        is_float = False
        if self._peek() == ".":
            self._advance()
            text += "." + self._read_digits()
            is_float = True

        self._advance()  # consume )

        if is_float:
            value = self._checked_float(float(text), text, start_line, start_column)
            return self._make_token(TokenType.SIGNED_FLOAT_LITERAL, value, start_line, start_column)

        value = self._checked_int(int(text), text, start_line, start_column)
        return self._make_token(TokenType.SIGNED_INT_LITERAL, value, start_line, start_column)

    def _checked_int(self, value: int, text: str, line: int, column: int) -> int:
        if not INT_MIN <= value <= INT_MAX:
            raise InvalidLiteralError(
                f"integer literal '{text}' out of range",
                self._location(line, column),
                hint=f"integers range from {INT_MIN} to {INT_MAX}",
                source_line=self._get_current_line(),
            )
        return value

    def _checked_float(self, value: float, text: str, line: int, column: int) -> float:
        if abs(value) > FLOAT_MAX:
            raise InvalidLiteralError(
                f"float literal '{text}' out of range",
                self._location(line, column),
                source_line=self._get_current_line(),
            )
        return value

    def _scan_string(self, start_line: int, start_column: int) -> Token:
        """Scan a double-quoted string literal (no escapes, single line)."""
        self._advance()  # consume opening "

        chars = []
        while not self._at_end():
            char = self._peek()

            if char == '"':
                self._advance()  # consume closing "
                return self._make_token(
                    TokenType.STRING_LITERAL,
                    "".join(chars),
                    start_line,
                    start_column,
                )

            if char == "\n":
                break

            chars.append(self._advance())

        raise UnterminatedStringError(
            self._location(start_line, start_column),
            self._get_current_line(),
        )

    def _scan_operator(self, start_line: int, start_column: int) -> Token:
        """Scan an operator or delimiter."""
        source_line = self._get_current_line()
        char = self._advance()

        if char == ":":
            if self._match("="):
                return self._make_token(TokenType.ASSIGN, ":=", start_line, start_column)
            return self._make_token(TokenType.COLON, ":", start_line, start_column)

        if char == "<":
            if self._match("="):
                return self._make_token(TokenType.LE, "<=", start_line, start_column)
            return self._make_token(TokenType.LT, "<", start_line, start_column)

        if char == ">":
            if self._match("="):
                return self._make_token(TokenType.GE, ">=", start_line, start_column)
            return self._make_token(TokenType.GT, ">", start_line, start_column)

        if char == "=":
            if self._match("="):
                return self._make_token(TokenType.EQ, "==", start_line, start_column)
            return self._make_token(TokenType.EQUALS, "=", start_line, start_column)

        if char == "!":
            if self._match("="):
                return self._make_token(TokenType.NE, "!=", start_line, start_column)
            return self._make_token(TokenType.NOT, "!", start_line, start_column)

        single_tokens = {
            "+": TokenType.PLUS,
            "-": TokenType.MINUS,
            "*": TokenType.STAR,
            "/": TokenType.SLASH,
            ";": TokenType.SEMICOLON,
            ",": TokenType.COMMA,
            "[": TokenType.LBRACKET,
            "]": TokenType.RBRACKET,
            "{": TokenType.LBRACE,
            "}": TokenType.RBRACE,
            "(": TokenType.LPAREN,
            ")": TokenType.RPAREN,
        }

        if char in single_tokens:
            return self._make_token(single_tokens[char], char, start_line, start_column)

        raise InvalidCharacterError(
            char,
            self._location(start_line, start_column),
            source_line,
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize source text into a list ending with an EOF token."""
    return list(Lexer(source, filename).tokenize())


__all__ = [
    "TokenType",
    "Token",
    "Lexer",
    "KEYWORDS",
    "MAX_IDENTIFIER_LENGTH",
    "FrontendSyntaxError",
    "tokenize",
]
