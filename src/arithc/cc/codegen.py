"""
x86-64 Code Generator for arithc
================================

This module generates NASM assembly for x86-64 from the arithc AST.

Code Generation Strategy
------------------------
Each expression tree is walked post-order, left child before right:

1. A literal gets a fresh register from the pool and an immediate load
2. A binary node combines its two child registers in place, leaving the
   result in the left register, and releases the right one
3. The register that survives at the root holds the statement's value;
   it is moved into rdi and the print helper is called
4. The pool is reset before the next statement

Division
--------
`idiv` divides rdx:rax by its operand, so the division sequence routes
through rax, rdx and rcx. Those registers are reserved outside the pool
(see arithc.cc.registers), which means no live pool value is ever
clobbered by a division:

        mov     rax, <left>
        cqo                         ; sign-extend rax into rdx
        mov     rcx, <right>
        idiv    rcx
        mov     <left>, rax

Division is signed and truncates toward zero.

Generated Assembly Layout
-------------------------
    default rel
    global  _main
    extern  _printf
    section .data       format string "%ld\\n"
    section .text
    print:              helper, forwards rdi to printf
    _main:              entry prologue
        ...             one block per statement
                        entry epilogue (returns 0)

Usage
-----
>>> from arithc.cc.parser import parse_source
>>> from arithc.cc.codegen import CodeGenerator
>>> asm = CodeGenerator().generate(parse_source("print 1+2;"))
"""

from dataclasses import dataclass
from typing import Iterable, Optional
import logging

from arithc.cc.ast import (
    Expression,
    IntegerLiteral,
    BinaryExpression,
    BinaryOperator,
    PrintStatement,
)
from arithc.cc.registers import Register, RegisterPool, DIVISION_SCRATCH
from arithc.cc.errors import CCodeGenError

logger = logging.getLogger(__name__)


# =============================================================================
# Target Platforms
# =============================================================================

@dataclass(frozen=True)
class Platform:
    """
    Symbol naming for a host toolchain.

    Attributes:
        name: Platform key used on the command line
        entry_symbol: Name of the program entry point
        printf_symbol: Name of the host's formatted-output routine
        gnu_stack_note: Emit a .note.GNU-stack section (ELF linkers)
        plt_calls: Call external routines through the PLT (PIE executables)
    """
    name: str
    entry_symbol: str
    printf_symbol: str
    gnu_stack_note: bool = False
    plt_calls: bool = False

    @property
    def printf_call_target(self) -> str:
        if self.plt_calls:
            return f"{self.printf_symbol} wrt ..plt"
        return self.printf_symbol


PLATFORMS: dict[str, Platform] = {
    "macos": Platform("macos", "_main", "_printf"),
    "linux": Platform("linux", "main", "printf", gnu_stack_note=True, plt_calls=True),
}

DEFAULT_PLATFORM = "macos"

# Label of the runtime print helper and its format string
PRINT_HELPER = "print"
FORMAT_LABEL = "fmt"

# First integer argument register in the System V calling convention
ARGUMENT_REGISTER = "rdi"

_ARITHMETIC_MNEMONICS = {
    BinaryOperator.ADD: "add",
    BinaryOperator.SUBTRACT: "sub",
    BinaryOperator.MULTIPLY: "imul",
}


def get_platform(name: str) -> Platform:
    """Look up a platform by name."""
    try:
        return PLATFORMS[name.lower()]
    except KeyError:
        raise CCodeGenError(
            f"unknown platform '{name}'",
            hint=f"choose one of: {', '.join(PLATFORMS)}",
        ) from None


# =============================================================================
# Code Generator Class
# =============================================================================

class CodeGenerator:
    """
    Generates x86-64 NASM assembly from arithc statements.

    Attributes:
        output: Generated assembly lines, append-only
        registers: The register pool used for expression values
        platform: Target symbol naming
    """

    def __init__(
        self,
        platform: str = DEFAULT_PLATFORM,
        output_comments: bool = True,
        registers: Optional[RegisterPool] = None,
    ):
        self.platform = get_platform(platform)
        self.output_comments = output_comments
        self.registers = registers or RegisterPool()
        self._output: list[str] = []
        self._statement_count = 0

    @property
    def output(self) -> list[str]:
        return self._output

    @property
    def statement_count(self) -> int:
        return self._statement_count

    def generate(self, statements: Iterable[PrintStatement]) -> str:
        """
        Generate a complete program.

        Args:
            statements: Parsed statements, in source order

        Returns:
            The full assembly text
        """
        self.emit_preamble()
        for stmt in statements:
            self.generate_statement(stmt)
        self.emit_epilogue()
        return self.text()

    def text(self) -> str:
        """Return the assembly emitted so far."""
        return "\n".join(self._output) + "\n"

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        self._output.append(line)

    def _emit_comment(self, comment: str) -> None:
        if self.output_comments:
            self._emit(f"        ; {comment}")

    def _emit_label(self, label: str) -> None:
        self._emit(f"{label}:")

    def _emit_instruction(self, mnemonic: str, operands: str = "") -> None:
        if operands:
            self._emit(f"        {mnemonic:<8}{operands}")
        else:
            self._emit(f"        {mnemonic}")

    # =========================================================================
    # Runtime Preamble and Epilogue
    # =========================================================================

    def emit_preamble(self) -> None:
        """
        Emit the print helper and the entry point prologue.

        The helper keeps its own frame: after `push rbp` the stack is
        16-byte aligned again, as printf requires.
        """
        entry = self.platform.entry_symbol
        printf = self.platform.printf_symbol

        self._emit("; Generated by arithc")
        self._emit("        default rel")
        self._emit(f"        global  {entry}")
        self._emit(f"        extern  {printf}")
        self._emit("")
        self._emit("        section .data")
        self._emit_label(FORMAT_LABEL)
        self._emit_instruction("db", '"%ld", 10, 0')
        self._emit("")
        self._emit("        section .text")
        self._emit_label(PRINT_HELPER)
        self._emit_instruction("push", "rbp")
        self._emit_instruction("mov", "rbp, rsp")
        self._emit_instruction("mov", f"rsi, {ARGUMENT_REGISTER}")
        self._emit_instruction("lea", f"{ARGUMENT_REGISTER}, [{FORMAT_LABEL}]")
        self._emit_instruction("xor", "eax, eax")
        self._emit_instruction("call", self.platform.printf_call_target)
        self._emit_instruction("leave")
        self._emit_instruction("ret")
        self._emit("")
        self._emit_label(entry)
        self._emit_instruction("push", "rbp")
        self._emit_instruction("mov", "rbp, rsp")

    def emit_epilogue(self) -> None:
        """Emit the entry point's return (exit status 0)."""
        self._emit_instruction("xor", "eax, eax")
        self._emit_instruction("pop", "rbp")
        self._emit_instruction("ret")
        if self.platform.gnu_stack_note:
            self._emit("")
            self._emit('        section .note.GNU-stack noalloc noexec nowrite progbits')

    # =========================================================================
    # Statements
    # =========================================================================

    def generate_statement(self, stmt: PrintStatement) -> None:
        """
        Generate code for one print statement.

        The register pool starts and ends the statement fully free.
        """
        if not self.registers.all_free:
            raise CCodeGenError(
                f"{self.registers.live_count} register(s) still live at statement start",
                stmt.location,
            )
        self._statement_count += 1
        self._emit_comment(f"statement {self._statement_count}")
        try:
            result = self.generate_expression(stmt.expression)
            self.generate_print(result)
            logger.debug(
                f"Statement {self._statement_count}: "
                f"{self.registers.high_water} register(s) at peak"
            )
        finally:
            self.registers.release_all()

    def generate_print(self, register: Register) -> None:
        """Pass a register's value to the print helper."""
        self._emit_instruction("mov", f"{ARGUMENT_REGISTER}, {register}")
        self._emit_instruction("call", PRINT_HELPER)

    # =========================================================================
    # Expressions
    # =========================================================================

    def generate_expression(self, expr: Expression) -> Register:
        """
        Generate code that computes an expression.

        Returns:
            The register holding the value. It stays allocated; every
            other register used along the way has been released.
        """
        if isinstance(expr, IntegerLiteral):
            return self._generate_literal(expr)
        if isinstance(expr, BinaryExpression):
            return self._generate_binary(expr)
        raise CCodeGenError(
            f"cannot generate code for {type(expr).__name__}",
            getattr(expr, "location", None),
        )

    def _generate_literal(self, expr: IntegerLiteral) -> Register:
        register = self.registers.allocate(expr.location)
        self._emit_instruction("mov", f"{register}, {expr.value}")
        return register

    def _generate_binary(self, expr: BinaryExpression) -> Register:
        """
        Generate a binary node and every binary node down its left spine.

        Left-associative chains such as 1+2+3+... nest to the left, so the
        spine is walked in a loop rather than by recursion. Each right
        operand is folded into the accumulating left register on the way
        back up, which emits the same code as a post-order walk.
        """
        spine = []
        node = expr
        while isinstance(node, BinaryExpression):
            spine.append(node)
            node = node.left

        left = self.generate_expression(node)
        for parent in reversed(spine):
            right = self.generate_expression(parent.right)
            self._generate_operation(parent, left, right)
            self.registers.release(right)
        return left

    def _generate_operation(self, expr: BinaryExpression, left: Register, right: Register) -> None:
        if expr.operator == BinaryOperator.DIVIDE:
            self._generate_division(left, right)
        elif expr.operator in _ARITHMETIC_MNEMONICS:
            self._emit_instruction(_ARITHMETIC_MNEMONICS[expr.operator], f"{left}, {right}")
        else:
            raise CCodeGenError(f"unsupported operator {expr.operator}", expr.location)

    def _generate_division(self, left: Register, right: Register) -> None:
        """Signed division of left by right, quotient left in left."""
        dividend, _, divisor = DIVISION_SCRATCH
        self._emit_instruction("mov", f"{dividend}, {left}")
        self._emit_instruction("cqo")
        self._emit_instruction("mov", f"{divisor}, {right}")
        self._emit_instruction("idiv", divisor)
        self._emit_instruction("mov", f"{left}, {dividend}")
