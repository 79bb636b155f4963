"""
arithc Compiler Main Module
===========================

This module provides the main compiler interface. It drives the
statement loop:

    Source → Lexer → Parser → one AST per statement → Code Generator
                                                   ↘ AST Printer (optional)

Statements are compiled one at a time, as soon as each is parsed: the
parser yields a statement, the code generator emits its block and resets
the register pool, the optional AST dump is written, and the tree is
dropped before the next statement is read.

Usage
-----
Command line:
    $ arithc prog.calc -o prog.asm

Programmatic:
    >>> from arithc.cc import compile_source
    >>> asm = compile_source("print 1+2*3;")

Error Handling
--------------
Every error is fatal. The first CompilerError propagates out of
compile_source() and no CompilerResult is produced, so a caller never
sees partial assembly.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional
import logging

from arithc.cc.lexer import Lexer
from arithc.cc.parser import Parser
from arithc.cc.codegen import CodeGenerator, DEFAULT_PLATFORM
from arithc.cc.interpreter import Interpreter
from arithc.cc.ast import ASTPrinter

logger = logging.getLogger(__name__)

# Output file used when none is given
DEFAULT_OUTPUT = "output.asm"


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        trace_tokens: Write one diagnostic line per token produced
        dump_ast: Write a tree drawing of each statement's AST
        platform: Symbol naming of the host toolchain ('macos' or 'linux')
        output_comments: Mark each statement's block with a comment
    """
    trace_tokens: bool = False
    dump_ast: bool = False
    platform: str = DEFAULT_PLATFORM
    output_comments: bool = True


@dataclass
class CompilerResult:
    """
    Result of a successful compilation.

    Attributes:
        filename: Source filename
        assembly: Generated assembly text
        statement_count: Number of print statements compiled
        diagnostics: Token trace and AST dump lines, in the order produced
    """
    filename: str = ""
    assembly: str = ""
    statement_count: int = 0
    diagnostics: list[str] = field(default_factory=list)


@dataclass
class InterpretResult:
    """
    Result of interpreting a program.

    Attributes:
        filename: Source filename
        values: Printed values, one per statement
        diagnostics: Token trace and AST dump lines
    """
    filename: str = ""
    values: list[int] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)


class Compiler:
    """
    arithc compiler.

    Example:
        compiler = Compiler(CompilerOptions(dump_ast=True))
        result = compiler.compile_source("print 1+2;")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()
        self._printer = ASTPrinter()

    def compile_source(
        self,
        source: str,
        filename: str = "<input>",
        diagnostics: Optional[Callable[[str], None]] = None,
    ) -> CompilerResult:
        """
        Compile source text to assembly.

        Args:
            source: Program text
            filename: Source filename for error messages
            diagnostics: Called with each diagnostic line as it is produced

        Returns:
            CompilerResult with the assembly and diagnostics

        Raises:
            CompilerError: If compilation fails
        """
        result = CompilerResult(filename=filename)
        sink = self._diagnostic_sink(result.diagnostics, diagnostics)

        parser = self._parser(source, filename, sink)
        generator = CodeGenerator(
            platform=self.options.platform,
            output_comments=self.options.output_comments,
        )

        logger.debug(f"Compiling {filename} for {generator.platform.name}")
        generator.emit_preamble()
        for stmt in parser.statements():
            generator.generate_statement(stmt)
            self._dump(stmt, sink)
        generator.emit_epilogue()

        result.assembly = generator.text()
        result.statement_count = generator.statement_count
        logger.debug(f"Compiled {result.statement_count} statement(s) from {filename}")
        return result

    def compile_file(
        self,
        filepath: str | Path,
        diagnostics: Optional[Callable[[str], None]] = None,
    ) -> CompilerResult:
        """
        Compile a source file.

        Raises:
            FileNotFoundError: If the source file does not exist
            CompilerError: If compilation fails
        """
        source = self._read_source(filepath)
        return self.compile_source(source, str(filepath), diagnostics)

    def interpret_source(
        self,
        source: str,
        filename: str = "<input>",
        diagnostics: Optional[Callable[[str], None]] = None,
    ) -> InterpretResult:
        """
        Evaluate a program with the tree-walking interpreter.

        Raises:
            CompilerError: On a syntax error or a trapping division
        """
        result = InterpretResult(filename=filename)
        sink = self._diagnostic_sink(result.diagnostics, diagnostics)

        parser = self._parser(source, filename, sink)
        interpreter = Interpreter()
        for stmt in parser.statements():
            interpreter.execute(stmt)
            self._dump(stmt, sink)

        result.values = interpreter.printed
        return result

    def interpret_file(
        self,
        filepath: str | Path,
        diagnostics: Optional[Callable[[str], None]] = None,
    ) -> InterpretResult:
        """
        Evaluate a source file.

        Raises:
            FileNotFoundError: If the source file does not exist
            CompilerError: On a syntax error or a trapping division
        """
        source = self._read_source(filepath)
        return self.interpret_source(source, str(filepath), diagnostics)

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _read_source(filepath: str | Path) -> str:
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")
        return path.read_text(encoding="utf-8")

    def _parser(self, source: str, filename: str, sink: Callable[[str], None]) -> Parser:
        trace = sink if self.options.trace_tokens else None
        return Parser(Lexer(source, filename, trace=trace))

    def _dump(self, stmt, sink: Callable[[str], None]) -> None:
        if self.options.dump_ast:
            for line in self._printer.print(stmt).splitlines():
                sink(line)

    @staticmethod
    def _diagnostic_sink(
        collected: list[str],
        forward: Optional[Callable[[str], None]],
    ) -> Callable[[str], None]:
        def sink(line: str) -> None:
            collected.append(line)
            if forward is not None:
                forward(line)
        return sink


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(source: str, filename: str = "<input>", platform: str = DEFAULT_PLATFORM) -> str:
    """
    Compile source text and return the assembly.

    Example:
        >>> asm = compile_source("print (1+2)*3;")
    """
    options = CompilerOptions(platform=platform)
    return Compiler(options).compile_source(source, filename).assembly


def compile_file(
    filepath: str | Path,
    output_path: Optional[str | Path] = None,
    platform: str = DEFAULT_PLATFORM,
) -> str:
    """
    Compile a source file, optionally writing the assembly to output_path.

    The output file is written only after compilation succeeds.
    """
    options = CompilerOptions(platform=platform)
    result = Compiler(options).compile_file(filepath)

    if output_path:
        Path(output_path).write_text(result.assembly, encoding="utf-8")

    return result.assembly


def interpret(source: str, filename: str = "<input>") -> list[int]:
    """Evaluate a program and return the printed values."""
    return Compiler().interpret_source(source, filename).values
