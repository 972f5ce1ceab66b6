"""
prgmc - PRGM Program Checker Command-Line Interface
===================================================

This module implements the command-line interface for the PRGM front end.
It lexes, parses and analyzes a program and reports every problem found.

Usage Examples
--------------
Check a program:
    $ prgmc demo.prgm

Dump the token stream or the AST:
    $ prgmc --tokens demo.prgm
    $ prgmc --ast demo.prgm

Print the program in canonical layout:
    $ prgmc --format demo.prgm

Environment
-----------
PRGM_MAX_ERRORS, PRGM_FLOAT_DIV_ZERO and PRGM_INT_TO_FLOAT set defaults
for the corresponding options; command-line flags override them.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from prgm_sdk import __version__
from prgm_sdk.cli.errors import handle_cli_exception
from prgm_sdk.frontend import Frontend, FrontendOptions
from prgm_sdk.frontend.ast import ASTPrinter
from prgm_sdk.frontend.formatter import SourceFormatter

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the AST before reporting diagnostics",
)
@click.option(
    "--format", "format_source",
    is_flag=True,
    help="Print the program in canonical layout",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum diagnostics to report (default: 100 or PRGM_MAX_ERRORS)",
)
@click.option(
    "--allow-float-div-zero",
    is_flag=True,
    help="Do not report Float division by a literal zero",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="prgmc")
def main(
    input_file: Path,
    tokens: bool,
    ast: bool,
    format_source: bool,
    max_errors: Optional[int],
    allow_float_div_zero: bool,
    verbose: bool,
) -> None:
    """
    Check a PRGM program for syntax and semantic errors.

    INPUT_FILE is the PRGM source file to check.

    Syntax errors stop at the first problem. Semantic checks run over the
    whole program and report every defect found.

    \b
    Examples:
        prgmc demo.prgm              # Check and report
        prgmc --tokens demo.prgm     # Dump tokens
        prgmc --ast demo.prgm        # Dump the syntax tree
        prgmc --format demo.prgm     # Reformat to stdout

    \b
    Exit codes:
        0  program accepted
        1  syntax error or semantic diagnostics
        2  invalid arguments or unreadable file
        3  internal error
    """
    setup_logging(verbose)

    options = FrontendOptions.from_env()
    if max_errors is not None:
        options.max_errors = max_errors
    if allow_float_div_zero:
        options.float_division_by_zero_is_error = False

    frontend = Frontend(options)

    try:
        logger.debug(f"Checking {input_file}")
        source = input_file.read_text(encoding="utf-8")

        if tokens:
            for token in frontend.tokenize(source, str(input_file)):
                click.echo(repr(token))
            return

        result = frontend.check_source(source, str(input_file))

        if ast:
            click.echo(ASTPrinter().print(result.ast))

        if format_source:
            click.echo(SourceFormatter().format(result.ast), nl=False)

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(
                f"Parsed: {len(result.ast.declarations)} declarations, "
                f"{len(result.ast.statements)} statements"
            )

        result.raise_if_errors()

        if not (ast or format_source):
            click.echo(f"{input_file}: OK")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
