"""
arithc Abstract Syntax Tree (AST) Definitions
=============================================

This module defines the AST node types produced by the parser, the
operator priority table used for precedence climbing, and the diagnostic
tree printer.

Node Hierarchy
--------------
ASTNode (base)
├── PrintStatement - print <expr> ;
└── Expression
    ├── IntegerLiteral - integer constant
    └── BinaryExpression - + - * / with exactly two children

Design Notes
------------
- All nodes are dataclasses and store their source location
- A BinaryExpression owns its two children; a tree belongs to the
  statement that produced it and is dropped once compiled
- The tree printer never mutates the nodes it renders
"""

from dataclasses import dataclass
from enum import Enum

from arithc.errors import SourceLocation
from arithc.cc.lexer import Token, TokenType
from arithc.cc.errors import UnexpectedTokenError


# =============================================================================
# Operators
# =============================================================================

class BinaryOperator(Enum):
    """Binary arithmetic operators, valued by their source symbol."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        """Label used by the AST printer (the operator's token name)."""
        return _OPERATOR_TOKENS[self].display_name


_OPERATOR_TOKENS = {
    BinaryOperator.ADD: TokenType.PLUS,
    BinaryOperator.SUBTRACT: TokenType.MINUS,
    BinaryOperator.MULTIPLY: TokenType.STAR,
    BinaryOperator.DIVIDE: TokenType.SLASH,
}

TOKEN_OPERATORS: dict[TokenType, BinaryOperator] = {
    token_type: op for op, token_type in _OPERATOR_TOKENS.items()
}

# Operator priority table. Higher binds tighter.
OPERATOR_PRIORITY: dict[TokenType, int] = {
    TokenType.PLUS: 10,
    TokenType.MINUS: 10,
    TokenType.STAR: 20,
    TokenType.SLASH: 20,
}


def operator_priority(token: Token) -> int:
    """
    Look up the priority of an operator token.

    Raises:
        UnexpectedTokenError: the token is not a binary operator. There is
            no default priority; asking for one is a syntax error.
    """
    try:
        return OPERATOR_PRIORITY[token.type]
    except KeyError:
        raise UnexpectedTokenError(
            token.text,
            expected="an operator, ';' or ')'",
            location=token.location,
        ) from None


# =============================================================================
# AST Nodes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: SourceLocation

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}@{self.location.line}:{self.location.column}"


@dataclass
class Expression(ASTNode):
    """Base class for nodes that evaluate to an integer."""
    pass


@dataclass
class IntegerLiteral(Expression):
    """
    Integer constant.

    Attributes:
        value: Non-negative integer value
    """
    value: int = 0

    def __repr__(self) -> str:
        return f"IntegerLiteral({self.value})"


@dataclass
class BinaryExpression(Expression):
    """
    Binary arithmetic expression.

    Attributes:
        operator: The arithmetic operator
        left: Left operand (evaluated first)
        right: Right operand
    """
    operator: BinaryOperator = None
    left: Expression = None
    right: Expression = None

    def __repr__(self) -> str:
        return f"BinaryExpression({self.left!r} {self.operator.symbol} {self.right!r})"


@dataclass
class PrintStatement(ASTNode):
    """
    A `print <expr> ;` statement.

    Attributes:
        expression: The expression whose value is printed
    """
    expression: Expression = None


# =============================================================================
# AST Printer (for debugging)
# =============================================================================

class ASTPrinter:
    """
    Renders an expression tree as branched text.

    Each node is one line: its operator's token name, and for literals
    the value. The left child of a binary node is drawn as a continuing
    branch and the right child as the closing one:

        T_PLUS
        ├───T_INT 1
        └───T_STAR
            ├───T_INT 2
            └───T_INT 3
    """

    def print(self, node: ASTNode) -> str:
        """Return the tree drawing of a node (statements draw their expression)."""
        if isinstance(node, PrintStatement):
            node = node.expression
        lines: list[str] = []
        # (node, indent inherited from ancestors, branch drawn before the label)
        pending = [(node, "", "")]
        while pending:
            current, indent, branch = pending.pop()
            lines.append(indent + branch + self._label(current))
            if not isinstance(current, BinaryExpression):
                continue

            if branch == "├───":
                child_indent = indent + "│   "
            elif branch:
                child_indent = indent + "    "
            else:
                child_indent = indent
            # Right is pushed first so the left subtree is drawn first
            pending.append((current.right, child_indent, "└───"))
            pending.append((current.left, child_indent, "├───"))
        return "\n".join(lines)

    def _label(self, node: Expression) -> str:
        if isinstance(node, IntegerLiteral):
            return f"{TokenType.INT.display_name} {node.value}"
        if isinstance(node, BinaryExpression):
            return node.operator.display_name
        return f"<{type(node).__name__}>"
