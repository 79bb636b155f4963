"""
Unified CLI Error Handling
==========================

Provides consistent error reporting and exit codes for the arithc CLI.

Exit Codes
----------
| Code | Meaning                                              |
|------|------------------------------------------------------|
| 0    | Success                                              |
| 1    | Lexical, syntax, code generation or evaluation error |
| 2    | Input or output file could not be read or written    |
| 3    | Unexpected internal error                            |

Usage errors (unknown options, conflicting inputs) are reported by click
itself before the command body runs, and also exit with 2.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from arithc.cc.errors import CompilerError


class ExitCode(IntEnum):
    """Exit codes of the arithc command."""
    SUCCESS = 0
    BUILD_ERROR = 1
    INVALID_ARGS = 2
    INTERNAL_ERROR = 3


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception on stderr and exit with the matching code.

    Args:
        error: The exception raised while compiling or interpreting
        verbose: Print the traceback of internal errors

    Raises:
        SystemExit: Always
    """
    if isinstance(error, CompilerError):
        # Already carries "file:line:col: error:" and the source context
        click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    if isinstance(error, OSError):
        # Missing or unreadable source, unwritable output
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)
