"""
arithc Error Hierarchy
======================

This module defines the root of the exception hierarchy for arithc.
All exceptions inherit from ArithcError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
ArithcError (base)
└── CompilerError (arithc.cc.errors) - lexer, parser, code generator,
                                        interpreter

Design Philosophy
-----------------
Each exception captures source location information (filename, line, column)
when applicable. Error messages follow this format:

    filename:line:column: error: description
        source_line_text
            ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class ArithcError(Exception):
    """
    Base exception for all arithc errors.

        try:
            compile_source("print 1+2;")
        except ArithcError as e:
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
