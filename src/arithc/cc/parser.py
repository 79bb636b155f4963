"""
arithc Precedence-Climbing Parser
=================================

This module implements the parser for the arithc language. It pulls
tokens from the lexer with one token of lookahead and builds one AST per
statement.

Grammar (EBNF)
--------------
program     ::= statement* EOF
statement   ::= 'print' expr ';'
expr        ::= term (('+' | '-') term)*
term        ::= factor (('*' | '/') factor)*
factor      ::= INTEGER | '(' expr ')'

The two expression levels are not separate functions. binary_expression()
climbs the operator priority table instead: an operator is accepted only
while its priority is strictly greater than the caller's floor, and its
right operand is parsed with the operator's own priority as the new floor.
That gives left-associativity for equal priorities and tighter grouping
for higher ones.

There is no error recovery. The first grammar violation raises.

Example Usage
-------------
>>> from arithc.cc.parser import parse_source
>>> [stmt] = parse_source("print 1+2*3;")
>>> stmt.expression
BinaryExpression(IntegerLiteral(1) + BinaryExpression(IntegerLiteral(2) * IntegerLiteral(3)))
"""

from typing import Iterator

from arithc.cc.lexer import Lexer, Token, TokenType
from arithc.cc.ast import (
    Expression,
    IntegerLiteral,
    BinaryExpression,
    PrintStatement,
    TOKEN_OPERATORS,
    operator_priority,
)
from arithc.cc.errors import UnexpectedTokenError, MissingTokenError


# Tokens that end an expression
EXPRESSION_TERMINATORS = (TokenType.EOF, TokenType.RPAREN, TokenType.SEMICOLON)


class Parser:
    """
    Parser for the arithc language.

    Holds the lexer and the current lookahead token. The lookahead is a
    fresh immutable Token on every advance, so a token taken earlier
    stays valid while the parser moves on.

    Attributes:
        lexer: Token source
        current: The lookahead token
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.current: Token = lexer.next_token()

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _advance(self) -> Token:
        """Consume the lookahead and return it."""
        token = self.current
        self.current = self.lexer.next_token()
        return token

    def _check(self, *types: TokenType) -> bool:
        return self.current.type in types

    def _expect(self, token_type: TokenType, text: str) -> Token:
        """
        Consume a token of the given type.

        Raises:
            MissingTokenError: If the lookahead is of another type
        """
        if self._check(token_type):
            return self._advance()
        raise MissingTokenError(
            text,
            self.current.text,
            self.current.location,
            self._source_line(self.current),
        )

    def _source_line(self, token: Token):
        return self.lexer.buffer.line_text(token.line)

    def _unexpected(self, expected: str) -> UnexpectedTokenError:
        return UnexpectedTokenError(
            self.current.text,
            expected=expected,
            location=self.current.location,
            source_line=self._source_line(self.current),
        )

    # =========================================================================
    # Statements
    # =========================================================================

    def statements(self) -> Iterator[PrintStatement]:
        """
        Yield statements until end of input.

        Each statement is parsed only when the caller asks for it, so the
        caller can finish with one tree before the next is built.
        """
        while not self._check(TokenType.EOF):
            yield self.parse_statement()

    def parse_statement(self) -> PrintStatement:
        """Parse `print <expr> ;`."""
        keyword = self._expect(TokenType.PRINT, "print")
        expression = self.binary_expression(0)
        self._expect(TokenType.SEMICOLON, ";")
        return PrintStatement(location=keyword.location, expression=expression)

    # =========================================================================
    # Expressions
    # =========================================================================

    def primary(self) -> Expression:
        """
        Parse an integer literal or a parenthesized expression.

        Raises:
            UnexpectedTokenError: Any other lookahead
            MissingTokenError: '(' without a matching ')'
        """
        token = self.current

        if token.type == TokenType.INT:
            self._advance()
            return IntegerLiteral(location=token.location, value=token.value)

        if token.type == TokenType.LPAREN:
            self._advance()
            node = self.binary_expression(0)
            self._expect(TokenType.RPAREN, ")")
            return node

        raise self._unexpected("an integer or '('")

    def binary_expression(self, floor: int) -> Expression:
        """
        Parse an expression whose operators all bind tighter than floor.

        Args:
            floor: Priority an operator must exceed to be taken here
        """
        left = self.primary()
        if self._check(*EXPRESSION_TERMINATORS):
            return left

        # Raises for a non-operator lookahead such as '1 2'
        priority = operator_priority(self.current)
        while priority > floor:
            op_token = self._advance()
            right = self.binary_expression(priority)
            left = BinaryExpression(
                location=left.location,
                operator=TOKEN_OPERATORS[op_token.type],
                left=left,
                right=right,
            )

            if self._check(*EXPRESSION_TERMINATORS):
                return left
            priority = operator_priority(self.current)

        return left


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, filename: str = "<input>") -> list[PrintStatement]:
    """Parse a whole program into a list of statements."""
    parser = Parser(Lexer(source, filename))
    return list(parser.statements())
