"""
arithc - Compiler Command-Line Interface
========================================

Usage Examples
--------------
Compile a file (writes output.asm):
    $ arithc prog.calc

With output file:
    $ arithc prog.calc -o prog.asm

Type one line of source at a prompt:
    $ arithc
    >>> print 1+2*3;

Show tokens and syntax trees while compiling:
    $ arithc -d --ast prog.calc

Evaluate instead of compiling:
    $ arithc --interpret prog.calc
"""

import logging
from pathlib import Path
from typing import Optional

import click

from arithc import __version__
from arithc.cc import Compiler, CompilerOptions, PLATFORMS
from arithc.cc.compiler import DEFAULT_OUTPUT
from arithc.cc.codegen import DEFAULT_PLATFORM
from arithc.cli.errors import handle_cli_exception

logger = logging.getLogger(__name__)

# Filename shown for source typed at the prompt
STDIN_NAME = "<stdin>"


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def _echo_diagnostic(line: str) -> None:
    click.echo(line, err=True)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-f", "--file", "file_option",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Read source from this file (same as INPUT_FILE)",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="Output assembly file",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the syntax tree of each statement to stderr",
)
@click.option(
    "-d", "--debug",
    is_flag=True,
    help="Print one trace line per token to stderr",
)
@click.option(
    "--interpret",
    is_flag=True,
    help="Evaluate the program and print its values instead of compiling",
)
@click.option(
    "-p", "--platform",
    type=click.Choice(sorted(PLATFORMS), case_sensitive=False),
    default=DEFAULT_PLATFORM,
    show_default=True,
    help="Host toolchain symbol naming",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="arithc")
def main(
    input_file: Optional[Path],
    file_option: Optional[Path],
    output: Path,
    ast: bool,
    debug: bool,
    interpret: bool,
    platform: str,
    verbose: bool,
) -> None:
    """
    Compile an arithc program to x86-64 NASM assembly.

    INPUT_FILE is the program to compile. Without it, one line of
    source is read from the terminal.

    \b
    Language:
        print <expr> ;        repeated to end of input
        <expr> uses integers, + - * / and parentheses

    \b
    Examples:
        arithc prog.calc                 # Outputs output.asm
        arithc prog.calc -o prog.asm     # Specify output file
        arithc --ast prog.calc           # Show syntax trees
        arithc --interpret prog.calc     # Print the values directly
    """
    setup_logging(verbose)

    if input_file is not None and file_option is not None:
        raise click.UsageError("give the input file either as INPUT_FILE or with --file")
    source_path = input_file or file_option

    source = None
    if source_path is None:
        source = click.prompt(">>>", prompt_suffix=" ", default="", show_default=False)

    options = CompilerOptions(
        trace_tokens=debug,
        dump_ast=ast,
        platform=platform.lower(),
    )
    compiler = Compiler(options)

    try:
        if interpret:
            if source_path is None:
                result = compiler.interpret_source(source, STDIN_NAME, _echo_diagnostic)
            else:
                result = compiler.interpret_file(source_path, _echo_diagnostic)
            for value in result.values:
                click.echo(value)
            return

        if source_path is None:
            result = compiler.compile_source(source, STDIN_NAME, _echo_diagnostic)
        else:
            result = compiler.compile_file(source_path, _echo_diagnostic)

        # Written only after the whole program compiled
        output.write_text(result.assembly, encoding="utf-8")

        if verbose:
            click.echo(f"Compiled {result.statement_count} statement(s)")
            click.echo(f"Wrote {len(result.assembly)} bytes to {output}")

        click.echo(f"Compiled {result.filename} -> {output}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
