"""
PRGM Language Front End
=======================

This module implements the front end of the PRGM teaching language:

- A lexer (tokenizer) for PRGM source code
- A recursive descent parser producing an AST
- A semantic analyzer reporting every static defect in one pass
- A source formatter that renders an AST back to PRGM text

Pipeline
--------
    PRGM Source → Lexer → Parser → AST → Semantic Analyzer → Diagnostics

Usage
-----
>>> from prgm_sdk.frontend import check_source
>>> result = check_source('''
... MainPrgm Demo;
... Var
... let x: Int;
... BeginPg
... {
...     x := 1 + 2 * 3;
...     output("x = ", x);
... }
... EndPg;
... ''')
>>> result.success
True

Language Summary
----------------
- Types: Int (32-bit), Float (32-bit), fixed-size arrays [Int; n]
- Constants: @define Const NAME: Int = 100;
- Statements: :=, if/then/else, do/while, for/from/to/step,
  input(...), output(...)
- Operators: + - * / < > <= >= == != AND OR !
"""

from prgm_sdk.frontend.compiler import (
    Frontend,
    FrontendOptions,
    CheckResult,
    check_source,
    check_file,
)
from prgm_sdk.frontend.errors import (
    FrontendError,
    FrontendSyntaxError,
    FrontendCompilationError,
    SemanticError,
    DiagnosticKind,
    ErrorCollector,
)
from prgm_sdk.frontend.lexer import Lexer, Token, TokenType
from prgm_sdk.frontend.parser import Parser, parse_source
from prgm_sdk.frontend.analyzer import SemanticAnalyzer
from prgm_sdk.frontend.formatter import SourceFormatter, format_program
from prgm_sdk.frontend.ast import ASTPrinter, Program

__all__ = [
    # Main API
    "Frontend",
    "FrontendOptions",
    "CheckResult",
    "check_source",
    "check_file",
    # Errors
    "FrontendError",
    "FrontendSyntaxError",
    "FrontendCompilationError",
    "SemanticError",
    "DiagnosticKind",
    "ErrorCollector",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    # Parser
    "Parser",
    "parse_source",
    # Analyzer
    "SemanticAnalyzer",
    # Output
    "SourceFormatter",
    "format_program",
    "ASTPrinter",
    "Program",
]
