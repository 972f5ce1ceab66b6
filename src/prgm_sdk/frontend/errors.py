"""
Front-End Error Hierarchy
=========================

This module defines the exception hierarchy for the PRGM language front
end. All exceptions inherit from FrontendError, which itself inherits from
the base PrgmError for consistent error handling across the SDK.

Exception Hierarchy
-------------------
FrontendError (base for all front-end errors)
├── FrontendSyntaxError - lexer and parser errors (fatal, raised)
│   ├── UnterminatedStringError - missing closing quote
│   ├── UnterminatedCommentError - missing comment terminator
│   ├── InvalidCharacterError - unexpected character
│   ├── InvalidIdentifierError - identifier breaks the naming rules
│   ├── InvalidLiteralError - numeric literal out of range
│   ├── UnexpectedTokenError - token does not fit the grammar
│   └── MissingTokenError - required token is absent
├── SemanticError - static semantic diagnostics (collected, never raised
│   │               by the analyzer)
│   ├── UndefinedIdentifierError
│   ├── TypeMismatchError
│   ├── IndexOutOfBoundsError
│   ├── DivisionByZeroError
│   ├── ConstantMutationError
│   ├── ArrayUsedAsScalarError
│   ├── InvalidIndexTypeError
│   └── DuplicateDeclarationError
└── FrontendCompilationError - aggregate report of collected errors

Error Message Format
--------------------
All errors include source location information and follow this format:

    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing

Example:
    demo.prgm:9:10: error[UndefinedIdentifier]: undefined identifier 'a'
        x := a;
             ^
    hint: did you mean 'x'?
"""

from enum import Enum
from typing import Optional, List

from prgm_sdk.errors import PrgmError, SourceLocation


# =============================================================================
# Base Front-End Exception
# =============================================================================

class FrontendError(PrgmError):
    """
    Base exception for all front-end errors.

    This class provides common functionality for error messages including
    source location tracking, source line context, and helpful hints.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            demo.prgm:12:5: error[ConstantMutation]: cannot modify constant 'MAX'
                MAX := 200;
                ^
            hint: 'MAX' was declared constant at demo.prgm:4:15
        """
        parts = []

        # Location prefix: filename:line:column: error: message
        if self.location:
            parts.append(f"{self.location}: {self._label()}: {self.message}")
        else:
            parts.append(f"{self._label()}: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def _label(self) -> str:
        return "error"


class FrontendCompilationError(FrontendError):
    """
    Aggregate error containing multiple errors.

    The message is already a formatted report from ErrorCollector and
    should not have another prefix added.
    """

    def _format_message(self) -> str:
        """Return message as-is - it's already a formatted aggregate report."""
        return self.message


# =============================================================================
# Syntax Errors (Lexer and Parser)
# =============================================================================

class FrontendSyntaxError(FrontendError):
    """
    Syntax error in program source.

    Raised when the lexer or parser encounters input that cannot be
    tokenized or parsed. Syntax errors are fatal: the parser performs no
    recovery and reports exactly one error per failed parse.

    Examples:
        - Unterminated string literal or comment
        - Missing ';' after a statement
        - 'then' missing after an if condition
        - Array declared with a non-positive size
    """
    pass


class UnterminatedStringError(FrontendSyntaxError):
    """
    Unterminated string literal.

    Example:
        output("hello);     <- Missing closing quote
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unterminated string literal",
            location=location,
            hint="add closing '\"' to complete the string",
            source_line=source_line,
        )


class UnterminatedCommentError(FrontendSyntaxError):
    """Comment opened with '<!-' or '{--' and never closed."""

    def __init__(
        self,
        terminator: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.terminator = terminator
        super().__init__(
            "unterminated comment",
            location=location,
            hint=f"add closing '{terminator}' to terminate the comment",
            source_line=source_line,
        )


class InvalidCharacterError(FrontendSyntaxError):
    """
    Invalid character in source code.

    Raised when the lexer encounters a character that cannot start
    any token of the language.
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character '{char}' (0x{ord(char):02X})",
            location=location,
            source_line=source_line,
        )


class InvalidIdentifierError(FrontendSyntaxError):
    """
    Identifier violating the naming rules.

    Identifiers are at most 14 characters long, may not end with '_'
    and may not contain '__'.
    """

    def __init__(
        self,
        identifier: str,
        reason: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.identifier = identifier
        self.reason = reason
        super().__init__(
            f"invalid identifier '{identifier}': {reason}",
            location=location,
            source_line=source_line,
        )


class InvalidLiteralError(FrontendSyntaxError):
    """Numeric literal that cannot be represented (e.g. beyond 32 bits)."""
    pass


class UnexpectedTokenError(FrontendSyntaxError):
    """
    Unexpected token during parsing.

    Raised when the parser encounters a token that doesn't match
    the expected grammar rule.
    """

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"unexpected token '{found}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MissingTokenError(FrontendSyntaxError):
    """
    Required token is missing.

    Raised when a required token (like ';' or 'then') is not found
    where expected.
    """

    def __init__(
        self,
        expected: str,
        found: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found

        hint = None
        if found is not None:
            hint = f"found '{found}' instead"

        super().__init__(
            f"expected {expected}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Semantic Diagnostics
# =============================================================================

class DiagnosticKind(Enum):
    """The closed set of static semantic defects the analyzer reports."""
    UNDEFINED_IDENTIFIER = "UndefinedIdentifier"
    TYPE_MISMATCH = "TypeMismatch"
    INDEX_OUT_OF_BOUNDS = "IndexOutOfBounds"
    DIVISION_BY_ZERO = "DivisionByZero"
    CONSTANT_MUTATION = "ConstantMutation"
    ARRAY_USED_AS_SCALAR = "ArrayUsedAsScalar"
    INVALID_INDEX_TYPE = "InvalidIndexType"
    DUPLICATE_DECLARATION = "DuplicateDeclaration"

    def __str__(self) -> str:
        return self.value


class SemanticError(FrontendError):
    """
    Semantic defect in a syntactically valid program.

    Instances are diagnostics: the analyzer creates them and appends them
    to an ErrorCollector instead of raising, so one run reports every
    independent defect. Each subclass pins its DiagnosticKind.

    Attributes:
        kind: The DiagnosticKind of this defect
    """
    kind: DiagnosticKind = None

    def _label(self) -> str:
        return f"error[{self.kind}]"


class UndefinedIdentifierError(SemanticError):
    """
    Reference to an identifier with no visible declaration.

    The analyzer suggests similarly-named symbols when there are any,
    helping to catch typos.
    """
    kind = DiagnosticKind.UNDEFINED_IDENTIFIER

    def __init__(
        self,
        identifier: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_identifiers: Optional[List[str]] = None,
    ):
        self.identifier = identifier
        self.similar_identifiers = similar_identifiers or []

        hint = None
        if self.similar_identifiers:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_identifiers[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined identifier '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class TypeMismatchError(SemanticError):
    """
    Type mismatch or type-related error.

    Raised when:
        - A value of the wrong type is assigned
        - A string is used in arithmetic or comparison
        - A condition is not boolean
        - A for-loop bound or step is not Int
        - A scalar name is indexed like an array
    """
    kind = DiagnosticKind.TYPE_MISMATCH

    def __init__(
        self,
        message: str,
        expected_type: Optional[str] = None,
        actual_type: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected_type = expected_type
        self.actual_type = actual_type

        hint = None
        if expected_type and actual_type:
            hint = f"expected '{expected_type}', got '{actual_type}'"

        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
        )


class IndexOutOfBoundsError(SemanticError):
    """Compile-time-constant array index outside 0..size-1."""
    kind = DiagnosticKind.INDEX_OUT_OF_BOUNDS

    def __init__(
        self,
        array_name: str,
        index: int,
        size: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.array_name = array_name
        self.index = index
        self.size = size
        super().__init__(
            f"array index out of bounds: '{array_name}[{index}]', size is {size}",
            location=location,
            hint=f"valid indices are 0 to {size - 1}",
            source_line=source_line,
        )


class DivisionByZeroError(SemanticError):
    """Division whose divisor is the literal zero."""
    kind = DiagnosticKind.DIVISION_BY_ZERO

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "division by zero",
            location=location,
            source_line=source_line,
        )


class ConstantMutationError(SemanticError):
    """Assignment or input targeting a constant."""
    kind = DiagnosticKind.CONSTANT_MUTATION

    def __init__(
        self,
        identifier: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.identifier = identifier
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{identifier}' was declared constant at {original_location}"

        super().__init__(
            f"cannot modify constant '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class ArrayUsedAsScalarError(SemanticError):
    """Array name used without an index where a scalar value is required."""
    kind = DiagnosticKind.ARRAY_USED_AS_SCALAR

    def __init__(
        self,
        identifier: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.identifier = identifier
        super().__init__(
            f"array '{identifier}' used as a scalar value",
            location=location,
            hint=f"index the array, e.g. '{identifier}[0]'",
            source_line=source_line,
        )


class InvalidIndexTypeError(SemanticError):
    """Array index expression whose type is not Int."""
    kind = DiagnosticKind.INVALID_INDEX_TYPE

    def __init__(
        self,
        array_name: str,
        actual_type: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.array_name = array_name
        self.actual_type = actual_type
        super().__init__(
            f"index of '{array_name}' must be Int, got {actual_type}",
            location=location,
            source_line=source_line,
        )


class DuplicateDeclarationError(SemanticError):
    """
    Identifier declared more than once.

    Names are unique across the whole declaration list, whether they
    name variables, arrays or constants.
    """
    kind = DiagnosticKind.DUPLICATE_DECLARATION

    def __init__(
        self,
        identifier: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.identifier = identifier
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{identifier}' was first declared at {original_location}"

        super().__init__(
            f"redeclaration of '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Error Collection (for multi-error reporting)
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The analyzer uses this to keep walking after a defect, collecting
    every diagnostic before reporting them together.

    Example:
        collector = ErrorCollector(max_errors=100)
        collector.add(UndefinedIdentifierError("a", location))

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to keep; later ones are counted
                        but dropped
        """
        self.errors: List[FrontendError] = []
        self.max_errors = max_errors
        self.dropped = 0

    def add(self, error: FrontendError) -> None:
        """Add an error to the collection."""
        if self.should_stop():
            self.dropped += 1
            return
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def should_stop(self) -> bool:
        """Return True if max_errors has been reached."""
        return len(self.errors) >= self.max_errors

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """Format all errors for display, ending with the total count."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")  # Blank line between errors

        if self.dropped:
            lines.append(f"({self.dropped} more errors not shown)")

        total = len(self.errors) + self.dropped
        error_word = "error" if total == 1 else "errors"
        lines.append(f"\n{total} {error_word}")

        return "\n".join(lines)

    def raise_if_errors(self) -> None:
        """Raise a FrontendCompilationError if any errors were collected."""
        if self.has_errors():
            raise FrontendCompilationError(self.report())
