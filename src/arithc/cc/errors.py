"""
Compiler Error Hierarchy
========================

This module defines the exception hierarchy for the arithc compiler.
All exceptions inherit from CompilerError, which itself inherits from
ArithcError.

Exception Hierarchy
-------------------
CompilerError (base for all compiler errors)
├── CSyntaxError - lexer and parser syntax errors
│   ├── LexicalError - malformed lexeme
│   │   ├── IdentifierTooLongError - identifier exceeds the length limit
│   │   └── IntegerOverflowError - literal does not fit a 64-bit word
│   ├── UnexpectedTokenError - token not allowed at this point
│   └── MissingTokenError - required ';', ')' or 'print' absent
├── CCodeGenError - code generation errors
│   └── RegisterExhaustedError - more than 4 live values
└── EvaluationError - interpreter runtime errors

Every error is fatal. Nothing is recovered locally; the first error
raised ends the compilation.

Error Message Format
--------------------
    prog.calc:1:9: error: unexpected token ';'
        print 1+;
                ^
    hint: expected an integer or '('
"""

from typing import Optional

from arithc.errors import ArithcError, SourceLocation


# =============================================================================
# Base Compiler Exception
# =============================================================================

class CompilerError(ArithcError):
    """
    Base exception for all compiler errors.

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

            prog.calc:1:7: error: unexpected token 'x'
                print x;
                      ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Syntax Errors (Lexer and Parser)
# =============================================================================

class CSyntaxError(CompilerError):
    """
    Syntax error in source code.

    Examples:
        - Missing terminating ';'
        - Missing 'print' keyword
        - Unmatched parenthesis
        - Unrecognized character or identifier
    """
    pass


class LexicalError(CSyntaxError):
    """A lexeme that cannot be turned into a token."""
    pass


class IdentifierTooLongError(LexicalError):
    """Identifier longer than the lexer's fixed limit."""

    def __init__(
        self,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.limit = limit
        super().__init__(
            f"identifier exceeds maximum length of {limit} characters",
            location=location,
            source_line=source_line,
        )


class IntegerOverflowError(LexicalError):
    """Integer literal larger than the target word can hold."""

    def __init__(
        self,
        text: str,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        self.limit = limit
        super().__init__(
            f"integer literal '{text}' is too large",
            location=location,
            hint=f"the largest literal is {limit}",
            source_line=source_line,
        )


class UnexpectedTokenError(CSyntaxError):
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


class MissingTokenError(CSyntaxError):
    """
    Required token is missing.

    Raised when a required token (like ';' or ')') is not found
    where expected.
    """

    def __init__(
        self,
        expected: str,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(
            f"expected '{expected}', got '{found}'",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Code Generation Errors
# =============================================================================

class CCodeGenError(CompilerError):
    """
    Error during code generation.

    Raised when the code generator reaches a state it cannot handle,
    such as releasing a register that is not allocated.
    """
    pass


class RegisterExhaustedError(CCodeGenError):
    """
    Expression needs more live values than the register pool holds.

    There is no spilling: an expression that keeps a fifth value alive
    cannot be compiled.
    """

    def __init__(
        self,
        pool_size: int,
        location: Optional[SourceLocation] = None,
    ):
        self.pool_size = pool_size
        super().__init__(
            f"ran out of registers ({pool_size} available)",
            location=location,
            hint="split the expression into smaller print statements",
        )


# =============================================================================
# Interpreter Errors
# =============================================================================

class EvaluationError(CompilerError):
    """Runtime error raised by the tree-walking interpreter."""
    pass
