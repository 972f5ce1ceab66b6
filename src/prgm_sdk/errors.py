"""
PRGM SDK Error Hierarchy
========================

This module defines the root of the exception hierarchy for the PRGM SDK.
All exceptions inherit from PrgmError, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
PrgmError (base)
└── FrontendError (see prgm_sdk.frontend.errors)
    ├── FrontendSyntaxError - lexical and grammar errors (raised)
    ├── SemanticError - static semantic diagnostics (collected)
    └── FrontendCompilationError - aggregate report of many errors

Design Philosophy
-----------------
Each exception captures source location information (filename, line, column)
when applicable. This allows for detailed error messages that help users
quickly locate and fix issues in their source code.

Error messages follow this format:
    filename:line:column: error: description
    source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class PrgmError(Exception):
    """
    Base exception for all PRGM SDK errors.

    All exceptions in the SDK inherit from this class, allowing callers
    to catch all SDK-related errors with a single except clause:

        try:
            frontend.check_file("program.prgm")
        except PrgmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    This class is used throughout the front end to track where tokens,
    AST nodes, and diagnostics occur in the source file. The immutable
    (frozen) design ensures locations cannot be accidentally modified.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
