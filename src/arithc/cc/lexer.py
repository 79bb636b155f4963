"""
arithc Lexer (Tokenizer)
========================

This module implements the lexer for the arithc print language.
It pulls characters from a SourceBuffer and produces one token at a time
for the parser.

Token Categories
----------------
- Integer literals: non-negative decimal, e.g. 42
- Operators: + - * /
- Punctuation: ( ) ;
- Keyword: print
- Unrecognized: any other identifier or character
- End of input

Unrecognized input is not an error at this stage. It is returned as an
UNKNOWN token carrying the raw text and rejected by the parser, which can
then name the offending token in its diagnostic.

Example Usage
-------------
>>> from arithc.cc.lexer import Lexer
>>> for token in Lexer("print 1+2;").tokenize():
...     print(token)
Token(PRINT, 'print', 1:1)
Token(INT, 1, 1:7)
Token(PLUS, '+', 1:8)
Token(INT, 2, 1:9)
Token(SEMICOLON, ';', 1:10)
Token(EOF, 1:11)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterator, Optional
import string

from arithc.errors import SourceLocation
from arithc.cc.errors import (
    CompilerError,
    IdentifierTooLongError,
    IntegerOverflowError,
)


# Longest identifier accepted (a 50-byte buffer including its terminator)
MAX_IDENTIFIER_LENGTH = 49

# Literals must fit a signed 64-bit register
MAX_INTEGER_LITERAL = 2**63 - 1

# Character that ends the input when found in the source text
END_SENTINEL = "\0"


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for the arithc language."""

    EOF = auto()            # End of input
    INT = auto()            # Integer literal
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    SEMICOLON = auto()      # ;
    PRINT = auto()          # print
    UNKNOWN = auto()        # Unrecognized identifier or character

    @property
    def display_name(self) -> str:
        """Name used in token traces and AST dumps."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    TokenType.EOF: "T_EOF",
    TokenType.INT: "T_INT",
    TokenType.PLUS: "T_PLUS",
    TokenType.MINUS: "T_MINUS",
    TokenType.STAR: "T_STAR",
    TokenType.SLASH: "T_SLASH",
    TokenType.LPAREN: "T_LPAR",
    TokenType.RPAREN: "T_RPAR",
    TokenType.SEMICOLON: "T_SEMI",
    TokenType.PRINT: "T_PRINT",
    TokenType.UNKNOWN: "Unrecognized",
}

KEYWORDS: dict[str, TokenType] = {
    "print": TokenType.PRINT,
}

SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ";": TokenType.SEMICOLON,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source text.

    Tokens are immutable. The lexer builds a new one for every call, so
    the parser can hold on to a token while it looks at the next one.

    Attributes:
        type: The TokenType classification
        value: int for INT, the raw text for every other kind, None for EOF
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: str | int | None
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            if isinstance(self.value, int):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def text(self) -> str:
        """Source text of the token, as shown in error messages."""
        if self.type == TokenType.EOF:
            return "end of input"
        return str(self.value)

    def trace_line(self) -> str:
        """One line of the token trace."""
        value = self.value if self.type == TokenType.INT else 0
        return f"token : {self.type.display_name}, value : {value}"


# =============================================================================
# Source Buffer
# =============================================================================

class SourceBuffer:
    """
    Raw source text plus a read cursor.

    Supports forward consumption and a one-step pushback. Reading past
    the end returns END_SENTINEL rather than raising, so the lexer sees
    end of input as an ordinary character.
    """

    def __init__(self, text: str, filename: str = "<input>"):
        self.text = text
        self.filename = filename
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def next_char(self) -> str:
        """Consume and return the character under the cursor."""
        if self._pos >= len(self.text):
            # Step past the end once so push_back() stays symmetric
            if self._pos == len(self.text):
                self._pos += 1
            return END_SENTINEL
        char = self.text[self._pos]
        self._pos += 1
        return char

    def push_back(self) -> None:
        """Step the cursor back by one character."""
        if self._pos == 0:
            raise CompilerError("cannot push back before start of input")
        self._pos -= 1

    def location(self, pos: Optional[int] = None) -> SourceLocation:
        """Line and column of a position (default: the cursor)."""
        if pos is None:
            pos = self._pos
        pos = min(pos, len(self.text))
        line = self.text.count("\n", 0, pos) + 1
        line_start = self.text.rfind("\n", 0, pos) + 1
        return SourceLocation(self.filename, line, pos - line_start + 1)

    def line_text(self, line: int) -> Optional[str]:
        """Source text of a 1-indexed line, for error context."""
        lines = self.text.splitlines()
        if 0 < line <= len(lines):
            return lines[line - 1]
        return None


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Produces tokens from a SourceBuffer, one per next_token() call.

    Usage:
        lexer = Lexer(source_text, filename)
        token = lexer.next_token()

    Attributes:
        buffer: The SourceBuffer being read
        trace: Optional callable receiving one trace line per token
    """

    WHITESPACE = " \t\n\f\r"

    IDENT_START = string.ascii_letters + "_"

    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        trace: Optional[Callable[[str], None]] = None,
    ):
        self.buffer = SourceBuffer(source, filename)
        self.filename = filename
        self.trace = trace

    def tokenize(self) -> Iterator[Token]:
        """Yield every token up to and including EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def next_token(self) -> Token:
        """
        Scan exactly one token and advance past it.

        Raises:
            IdentifierTooLongError: identifier longer than the limit
            IntegerOverflowError: literal does not fit 64 bits
        """
        char = self._skip_whitespace()
        start = self.buffer.position - 1

        if char == END_SENTINEL:
            token = self._make_token(TokenType.EOF, None, start)
        elif char in SINGLE_CHAR_TOKENS:
            token = self._make_token(SINGLE_CHAR_TOKENS[char], char, start)
        elif char in string.digits:
            token = self._scan_integer(char, start)
        elif char in self.IDENT_START:
            token = self._scan_identifier(char, start)
        else:
            token = self._make_token(TokenType.UNKNOWN, char, start)

        if self.trace is not None:
            self.trace(token.trace_line())
        return token

    # =========================================================================
    # Scanning Helpers
    # =========================================================================

    def _skip_whitespace(self) -> str:
        """Return the first character that is not whitespace."""
        char = self.buffer.next_char()
        while char in self.WHITESPACE:
            char = self.buffer.next_char()
        return char

    def _scan_integer(self, char: str, start: int) -> Token:
        """Scan a maximal run of decimal digits."""
        digits = []
        while char in string.digits:
            digits.append(char)
            char = self.buffer.next_char()
        self.buffer.push_back()

        text = "".join(digits)
        value = int(text)
        if value > MAX_INTEGER_LITERAL:
            location = self.buffer.location(start)
            raise IntegerOverflowError(
                text,
                MAX_INTEGER_LITERAL,
                location,
                self.buffer.line_text(location.line),
            )
        return self._make_token(TokenType.INT, value, start)

    def _scan_identifier(self, char: str, start: int) -> Token:
        """
        Scan an identifier and classify it.

        'print' is the only keyword. The language has no user-defined
        names, so every other identifier becomes an UNKNOWN token.
        """
        chars = []
        while char in self.IDENT_CHARS:
            if len(chars) >= MAX_IDENTIFIER_LENGTH:
                location = self.buffer.location(start)
                raise IdentifierTooLongError(
                    MAX_IDENTIFIER_LENGTH,
                    location,
                    self.buffer.line_text(location.line),
                )
            chars.append(char)
            char = self.buffer.next_char()
        self.buffer.push_back()

        name = "".join(chars)
        token_type = KEYWORDS.get(name, TokenType.UNKNOWN)
        return self._make_token(token_type, name, start)

    def _make_token(self, token_type: TokenType, value, start: int) -> Token:
        location = self.buffer.location(start)
        return Token(
            type=token_type,
            value=value,
            line=location.line,
            column=location.column,
            filename=self.filename,
        )
