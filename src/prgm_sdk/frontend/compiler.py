"""
PRGM Front-End Pipeline
=======================

This module provides the main interface for checking PRGM programs.
It orchestrates the complete front-end process:

    Source → Lex → Parse → Analyze → Diagnostics

Usage
-----
Command line:
    $ prgmc program.prgm

Programmatic:
    >>> from prgm_sdk.frontend import check_source
    >>> result = check_source(source, "demo.prgm")
    >>> result.success
    True

Error Handling
--------------
The two error channels stay separate:
- Lexical and syntax errors are fatal and propagate as
  FrontendSyntaxError exceptions (one per failed parse)
- Semantic diagnostics are collected into CheckResult.diagnostics;
  call CheckResult.raise_if_errors() to turn them into a single
  FrontendCompilationError report
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from prgm_sdk.frontend.lexer import Lexer, Token
from prgm_sdk.frontend.parser import Parser
from prgm_sdk.frontend.analyzer import SemanticAnalyzer
from prgm_sdk.frontend.ast import Program
from prgm_sdk.frontend.errors import ErrorCollector, SemanticError

logger = logging.getLogger(__name__)


_TRUE_WORDS = ("1", "true", "yes", "on")
_FALSE_WORDS = ("0", "false", "no", "off")


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable; None when unset or invalid."""
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip().lower()
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    logger.warning(f"Ignoring invalid value for {name}: {value!r}")
    return None


@dataclass
class FrontendOptions:
    """
    Front-end configuration options.

    Attributes:
        max_errors: Semantic diagnostics kept per program; later ones
                    are counted but dropped
        float_division_by_zero_is_error: Report division by a literal
                    zero even when the division is a Float division
        allow_int_to_float: Accept Int values where Float is expected
                    (assignment, input targets, Float constants)
    """
    max_errors: int = 100
    float_division_by_zero_is_error: bool = True
    allow_int_to_float: bool = True

    @classmethod
    def from_env(cls) -> "FrontendOptions":
        """
        Create FrontendOptions from environment variables.

        Environment variables (all optional):
            PRGM_MAX_ERRORS: Diagnostic limit (positive integer)
            PRGM_FLOAT_DIV_ZERO: Report Float division by zero (bool)
            PRGM_INT_TO_FLOAT: Allow Int to Float widening (bool)

        Invalid values are logged and ignored.
        """
        options = cls()

        if max_errors := os.environ.get("PRGM_MAX_ERRORS"):
            try:
                value = int(max_errors)
            except ValueError:
                value = 0
            if value > 0:
                options.max_errors = value
            else:
                logger.warning(f"Ignoring invalid value for PRGM_MAX_ERRORS: {max_errors!r}")

        flag = _env_flag("PRGM_FLOAT_DIV_ZERO")
        if flag is not None:
            options.float_division_by_zero_is_error = flag

        flag = _env_flag("PRGM_INT_TO_FLOAT")
        if flag is not None:
            options.allow_int_to_float = flag

        return options


@dataclass
class CheckResult:
    """
    Result of checking one program.

    Attributes:
        filename: Source filename
        success: True when the program parsed and has no diagnostics
        ast: The parsed Program
        diagnostics: Semantic diagnostics in source order
        token_count: Number of tokens lexed (including EOF)
    """
    filename: str = ""
    success: bool = False
    ast: Optional[Program] = None
    diagnostics: list[SemanticError] = field(default_factory=list)
    token_count: int = 0

    def raise_if_errors(self) -> None:
        """
        Raise a FrontendCompilationError listing every diagnostic.

        Does nothing for an accepted program.
        """
        collector = ErrorCollector(max_errors=max(len(self.diagnostics), 1))
        for diagnostic in self.diagnostics:
            collector.add(diagnostic)
        collector.raise_if_errors()


class Frontend:
    """
    PRGM front end: lexer, parser and semantic analyzer.

    Example:
        frontend = Frontend()
        result = frontend.check_file("demo.prgm")
        for diagnostic in result.diagnostics:
            print(diagnostic)

    Attributes:
        options: Front-end configuration options
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        self.options = options or FrontendOptions()

    def check_source(self, source: str, filename: str = "<input>") -> CheckResult:
        """
        Check PRGM source code.

        Args:
            source: Program text
            filename: Source filename for error messages

        Returns:
            CheckResult with the AST and semantic diagnostics

        Raises:
            FrontendSyntaxError: If lexing or parsing fails
        """
        result = CheckResult(filename=filename)
        source_lines = source.splitlines()

        # Stage 1: Lexical analysis
        tokens = self._lex(source, filename)
        result.token_count = len(tokens)
        logger.debug(f"{filename}: {len(tokens)} tokens")

        # Stage 2: Parsing
        result.ast = self._parse(tokens, filename, source_lines)
        logger.debug(
            f"{filename}: parsed program '{result.ast.name}' with "
            f"{len(result.ast.declarations)} declarations, "
            f"{len(result.ast.statements)} statements"
        )

        # Stage 3: Semantic analysis
        result.diagnostics = self._analyze(result.ast, source_lines)
        result.success = not result.diagnostics
        logger.debug(f"{filename}: {len(result.diagnostics)} diagnostics")

        return result

    def check_file(self, filepath: str) -> CheckResult:
        """
        Check a PRGM source file.

        Raises:
            FileNotFoundError: If the file does not exist
            FrontendSyntaxError: If lexing or parsing fails
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.check_source(source, str(filepath))

    def tokenize(self, source: str, filename: str = "<input>") -> list[Token]:
        """Tokenize source without parsing it."""
        return self._lex(source, filename)

    def _lex(self, source: str, filename: str) -> list[Token]:
        lexer = Lexer(source, filename)
        return list(lexer.tokenize())

    def _parse(self, tokens: list[Token], filename: str, source_lines: list[str]) -> Program:
        parser = Parser(tokens, filename, source_lines)
        return parser.parse()

    def _analyze(self, program: Program, source_lines: list[str]) -> list[SemanticError]:
        analyzer = SemanticAnalyzer(
            max_errors=self.options.max_errors,
            float_division_by_zero_is_error=self.options.float_division_by_zero_is_error,
            allow_int_to_float=self.options.allow_int_to_float,
        )
        return analyzer.analyze(program, source_lines)


# =============================================================================
# Convenience Functions
# =============================================================================

def check_source(
    source: str,
    filename: str = "<input>",
    options: Optional[FrontendOptions] = None,
) -> CheckResult:
    """
    Check PRGM source code with the given (or default) options.

    Example:
        >>> result = check_source('MainPrgm P; Var BeginPg { } EndPg;')
        >>> result.success
        True
    """
    return Frontend(options).check_source(source, filename)


def check_file(filepath: str, options: Optional[FrontendOptions] = None) -> CheckResult:
    """Check a PRGM source file with the given (or default) options."""
    return Frontend(options).check_file(filepath)
