"""
PRGM SDK Command-Line Interface
===============================

This package provides command-line tools for the PRGM SDK:

- **prgmc**: PRGM program checker (lexer, parser, semantic analyzer)

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["prgmc"]
