"""
PRGM SDK - Front-End Toolchain for the PRGM Teaching Language
=============================================================

This package checks programs written in PRGM, a small imperative
teaching language with typed declarations, constants, fixed-size arrays
and structured control flow.

Main Components
---------------
- **frontend**: lexer, parser, semantic analyzer and source formatter
- **cli**: the prgmc command-line checker

Quick Start
-----------
Check a program:
    >>> from prgm_sdk import check_source
    >>> result = check_source(open("demo.prgm").read(), "demo.prgm")
    >>> for diagnostic in result.diagnostics:
    ...     print(diagnostic)

Or use the command-line tool:
    $ prgmc demo.prgm
    $ prgmc demo.prgm --ast

Version History
---------------
1.0.0 - Initial release with lexer, parser, analyzer and formatter
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from prgm_sdk.errors import PrgmError, SourceLocation
from prgm_sdk.frontend import (
    Frontend,
    FrontendOptions,
    CheckResult,
    check_source,
    check_file,
    FrontendError,
    FrontendSyntaxError,
    FrontendCompilationError,
    SemanticError,
    DiagnosticKind,
)

__all__ = [
    # Version info
    "__version__",
    # Front end
    "Frontend",
    "FrontendOptions",
    "CheckResult",
    "check_source",
    "check_file",
    # Exception hierarchy
    "PrgmError",
    "SourceLocation",
    "FrontendError",
    "FrontendSyntaxError",
    "FrontendCompilationError",
    "SemanticError",
    "DiagnosticKind",
]
