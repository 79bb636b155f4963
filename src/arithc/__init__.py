"""
arithc - Arithmetic Print Language Compiler
===========================================

arithc translates a tiny language of integer arithmetic and print
statements into x86-64 NASM assembly that links against the host C
library's printf.

    print 1 + 2 * 3;
    print (10 - 4) / 2;

Main Components
---------------
- **cc**: lexer, precedence-climbing parser, AST, register-pool code
  generator, and a tree-walking interpreter
- **cli**: the `arithc` command-line tool

Quick Start
-----------
    >>> from arithc.cc import compile_source
    >>> asm = compile_source("print 1+2*3;")

Or from the shell:
    $ arithc prog.calc -o prog.asm
    $ nasm -f macho64 prog.asm && cc prog.o -o prog
"""

__version__ = "1.0.0"

from arithc.errors import ArithcError, SourceLocation

__all__ = ["__version__", "ArithcError", "SourceLocation"]
