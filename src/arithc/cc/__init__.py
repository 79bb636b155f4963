"""
arithc Compiler
===============

This package compiles the arithc print language to x86-64 NASM assembly.

    Source → Lexer → Parser → AST → Code Generator → Assembly

Language
--------
    program   ::= statement*
    statement ::= 'print' expr ';'
    expr      ::= term (('+' | '-') term)*
    term      ::= factor (('*' | '/') factor)*
    factor    ::= INTEGER | '(' expr ')'

Usage
-----
>>> from arithc.cc import compile_source, interpret
>>> interpret("print 1+2*3; print 10-3-2;")
[7, 5]
>>> asm = compile_source("print (1+2)*3;")
"""

from arithc.cc.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    InterpretResult,
    compile_source,
    compile_file,
    interpret,
)
from arithc.cc.errors import (
    CompilerError,
    CSyntaxError,
    LexicalError,
    IdentifierTooLongError,
    IntegerOverflowError,
    UnexpectedTokenError,
    MissingTokenError,
    CCodeGenError,
    RegisterExhaustedError,
    EvaluationError,
)
from arithc.cc.lexer import Lexer, SourceBuffer, Token, TokenType
from arithc.cc.parser import Parser, parse_source
from arithc.cc.codegen import CodeGenerator, PLATFORMS
from arithc.cc.registers import Register, RegisterPool
from arithc.cc.interpreter import Interpreter, evaluate
from arithc.cc.ast import (
    ASTNode,
    ASTPrinter,
    BinaryExpression,
    BinaryOperator,
    Expression,
    IntegerLiteral,
    PrintStatement,
)

__all__ = [
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "InterpretResult",
    "compile_source",
    "compile_file",
    "interpret",
    # Errors
    "CompilerError",
    "CSyntaxError",
    "LexicalError",
    "IdentifierTooLongError",
    "IntegerOverflowError",
    "UnexpectedTokenError",
    "MissingTokenError",
    "CCodeGenError",
    "RegisterExhaustedError",
    "EvaluationError",
    # Lexer
    "Lexer",
    "SourceBuffer",
    "Token",
    "TokenType",
    # Parser
    "Parser",
    "parse_source",
    # Code Generator
    "CodeGenerator",
    "PLATFORMS",
    "Register",
    "RegisterPool",
    # Interpreter
    "Interpreter",
    "evaluate",
    # AST
    "ASTNode",
    "ASTPrinter",
    "BinaryExpression",
    "BinaryOperator",
    "Expression",
    "IntegerLiteral",
    "PrintStatement",
]
