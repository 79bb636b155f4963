# =============================================================================
# test_codegen.py - Code Generator Unit Tests
# =============================================================================
# Tests for the register pool and the x86-64 code generator.
#
# Test coverage includes:
#   - Register allocation, release and exhaustion
#   - Post-order, left-to-right instruction order
#   - Division through the reserved scratch registers
#   - Pool reset between statements
#   - Runtime preamble and epilogue for both platforms
# =============================================================================

import pytest
from arithc.cc.parser import parse_source
from arithc.cc.codegen import CodeGenerator, PLATFORMS, get_platform
from arithc.cc.registers import (
    RegisterPool,
    Register,
    GENERAL_REGISTERS,
    DIVISION_SCRATCH,
)
from arithc.cc.errors import CCodeGenError, RegisterExhaustedError


# =============================================================================
# Helper Functions
# =============================================================================

def normalize(line: str) -> str:
    """Collapse the column alignment of an instruction line."""
    return " ".join(line.split())


def statement_code(source: str) -> list[str]:
    """Instructions emitted for the statements alone, without the preamble."""
    gen = CodeGenerator(output_comments=False)
    for stmt in parse_source(source):
        gen.generate_statement(stmt)
    return [normalize(line) for line in gen.output]


def program(source: str, platform: str = "macos") -> list[str]:
    gen = CodeGenerator(platform=platform)
    asm = gen.generate(parse_source(source))
    return [normalize(line) for line in asm.splitlines()]


# =============================================================================
# Register Pool Tests
# =============================================================================

class TestRegisterPool:
    """Tests for the fixed four-register pool."""

    def test_default_registers(self):
        pool = RegisterPool()
        assert pool.size == 4
        assert [pool.allocate().name for _ in range(4)] == list(GENERAL_REGISTERS)

    def test_lowest_free_first(self):
        pool = RegisterPool()
        a = pool.allocate()
        b = pool.allocate()
        pool.release(a)
        assert pool.allocate() == a
        assert b.name == "r9"

    def test_exhaustion(self):
        pool = RegisterPool()
        for _ in range(4):
            pool.allocate()
        with pytest.raises(RegisterExhaustedError) as exc_info:
            pool.allocate()
        assert exc_info.value.pool_size == 4

    def test_double_release(self):
        pool = RegisterPool()
        reg = pool.allocate()
        pool.release(reg)
        with pytest.raises(CCodeGenError):
            pool.release(reg)

    def test_foreign_register(self):
        pool = RegisterPool()
        with pytest.raises(CCodeGenError):
            pool.release(Register(0, "rbx"))

    def test_release_all(self):
        pool = RegisterPool()
        pool.allocate()
        pool.allocate()
        assert pool.live_count == 2
        assert not pool.all_free
        pool.release_all()
        assert pool.all_free
        assert pool.live_count == 0

    def test_high_water(self):
        pool = RegisterPool()
        a = pool.allocate()
        b = pool.allocate()
        pool.release(b)
        pool.release(a)
        assert pool.high_water == 2
        pool.release_all()
        assert pool.high_water == 0

    @pytest.mark.parametrize("name", DIVISION_SCRATCH)
    def test_rejects_division_scratch(self, name):
        """rax, rdx and rcx belong to the division sequence."""
        with pytest.raises(CCodeGenError):
            RegisterPool(("r8", name))

    def test_rejects_duplicates(self):
        with pytest.raises(CCodeGenError):
            RegisterPool(("r8", "r8"))


# =============================================================================
# Expression Code Tests
# =============================================================================

class TestExpressionCode:
    """Test instruction selection and order."""

    def test_literal(self):
        assert statement_code("print 42;") == [
            "mov r8, 42",
            "mov rdi, r8",
            "call print",
        ]

    def test_addition(self):
        assert statement_code("print 1+2;") == [
            "mov r8, 1",
            "mov r9, 2",
            "add r8, r9",
            "mov rdi, r8",
            "call print",
        ]

    def test_subtraction_operand_order(self):
        """Left operand is loaded first and receives the result."""
        assert statement_code("print 5-3;")[:3] == [
            "mov r8, 5",
            "mov r9, 3",
            "sub r8, r9",
        ]

    def test_multiplication(self):
        assert "imul r8, r9" in statement_code("print 6*7;")

    def test_precedence(self):
        """1+2*3: the product is computed before the sum."""
        assert statement_code("print 1+2*3;") == [
            "mov r8, 1",
            "mov r9, 2",
            "mov r10, 3",
            "imul r9, r10",
            "add r8, r9",
            "mov rdi, r8",
            "call print",
        ]

    def test_left_associativity(self):
        """10-3-2 subtracts 3 first, then 2, reusing r9."""
        assert statement_code("print 10-3-2;") == [
            "mov r8, 10",
            "mov r9, 3",
            "sub r8, r9",
            "mov r9, 2",
            "sub r8, r9",
            "mov rdi, r8",
            "call print",
        ]

    def test_division(self):
        assert statement_code("print 7/2;") == [
            "mov r8, 7",
            "mov r9, 2",
            "mov rax, r8",
            "cqo",
            "mov rcx, r9",
            "idiv rcx",
            "mov r8, rax",
            "mov rdi, r8",
            "call print",
        ]

    def test_division_keeps_live_values(self):
        """A division inside a larger expression never touches pool registers."""
        code = statement_code("print 1+(8/(1+1));")
        assert code[:7] == [
            "mov r8, 1",
            "mov r9, 8",
            "mov r10, 1",
            "mov r11, 1",
            "add r10, r11",
            "mov rax, r9",
            "cqo",
        ]
        assert "mov rcx, r10" in code
        assert "add r8, r9" in code

    def test_large_literal(self):
        assert statement_code("print 9223372036854775807;")[0] == "mov r8, 9223372036854775807"


# =============================================================================
# Register Accounting Tests
# =============================================================================

class TestRegisterAccounting:
    """Test the four-live-values limit and the per-statement reset."""

    def test_four_live_values(self):
        gen = CodeGenerator()
        [stmt] = parse_source("print 1+(2+(3+4));")
        gen.generate_statement(stmt)
        assert gen.registers.all_free

    def test_fifth_live_value_fails(self):
        gen = CodeGenerator()
        [stmt] = parse_source("print 1+(2+(3+(4+5)));")
        with pytest.raises(RegisterExhaustedError):
            gen.generate_statement(stmt)

    def test_pool_reset_after_failure(self):
        gen = CodeGenerator()
        [stmt] = parse_source("print 1+(2+(3+(4+5)));")
        with pytest.raises(RegisterExhaustedError):
            gen.generate_statement(stmt)
        assert gen.registers.all_free

    def test_left_deep_tree_uses_two_registers(self):
        """Long left-associative chains never need more than two registers."""
        gen = CodeGenerator()
        [stmt] = parse_source("print 1+2+3+4+5+6+7+8;")
        result = gen.generate_expression(stmt.expression)
        assert result.name == "r8"
        assert gen.registers.high_water == 2

    def test_thousand_term_chain(self):
        """A very long left-associative chain compiles with two registers."""
        source = "print " + "+".join(["1"] * 1000) + ";"
        gen = CodeGenerator(output_comments=False)
        [stmt] = parse_source(source)
        gen.generate_statement(stmt)
        code = [normalize(line) for line in gen.output]
        assert code.count("add r8, r9") == 999
        assert code[:3] == ["mov r8, 1", "mov r9, 1", "add r8, r9"]
        assert code[-2:] == ["mov rdi, r8", "call print"]

    def test_long_mixed_chain_order(self):
        """Right operands of a long spine are still folded left to right."""
        source = "print " + "-".join(str(n) for n in range(1, 801)) + "*2;"
        code = statement_code(source)
        assert code[:4] == ["mov r8, 1", "mov r9, 2", "sub r8, r9", "mov r9, 3"]
        assert code[-6:] == [
            "mov r9, 800",
            "mov r10, 2",
            "imul r9, r10",
            "sub r8, r9",
            "mov rdi, r8",
            "call print",
        ]

    def test_expression_result_stays_allocated(self):
        gen = CodeGenerator()
        [stmt] = parse_source("print 2*3;")
        result = gen.generate_expression(stmt.expression)
        assert gen.registers.live_count == 1
        gen.registers.release(result)
        assert gen.registers.all_free

    def test_statements_start_from_fresh_pool(self):
        """print 1; print 2; both load into r8."""
        assert statement_code("print 1; print 2;") == [
            "mov r8, 1",
            "mov rdi, r8",
            "call print",
            "mov r8, 2",
            "mov rdi, r8",
            "call print",
        ]


# =============================================================================
# Program Layout Tests
# =============================================================================

class TestProgramLayout:
    """Test the runtime preamble, statement blocks and epilogue."""

    def test_preamble_macos(self):
        lines = program("print 1;")
        assert lines[0] == "; Generated by arithc"
        assert "global _main" in lines
        assert "extern _printf" in lines
        assert 'db "%ld", 10, 0' in lines
        assert "call _printf" in lines

    def test_print_helper_before_entry(self):
        lines = program("print 1;")
        helper = lines.index("print:")
        entry = lines.index("_main:")
        assert helper < entry
        assert lines[helper + 1:helper + 3] == ["push rbp", "mov rbp, rsp"]
        assert lines[entry + 1:entry + 3] == ["push rbp", "mov rbp, rsp"]

    def test_epilogue(self):
        lines = program("print 1;")
        assert lines[-3:] == ["xor eax, eax", "pop rbp", "ret"]

    def test_empty_program(self):
        """No statements: preamble followed directly by the epilogue."""
        lines = program("")
        entry = lines.index("_main:")
        assert lines[entry + 3:] == ["xor eax, eax", "pop rbp", "ret"]
        assert "call print" not in lines

    def test_statement_comments(self):
        lines = program("print 1; print 2;")
        assert "; statement 1" in lines
        assert "; statement 2" in lines
        assert lines.index("; statement 1") < lines.index("; statement 2")

    def test_print_calls_follow_source_order(self):
        lines = program("print 3; print 1; print 2;")
        loads = [line for line in lines if line.startswith("mov r8,")]
        assert loads == ["mov r8, 3", "mov r8, 1", "mov r8, 2"]
        assert lines.count("call print") == 3

    def test_linux_platform(self):
        lines = program("print 1;", platform="linux")
        assert "global main" in lines
        assert "extern printf" in lines
        assert "call printf wrt ..plt" in lines
        assert "main:" in lines
        assert lines[-1] == "section .note.GNU-stack noalloc noexec nowrite progbits"

    def test_generate_returns_text(self):
        gen = CodeGenerator()
        asm = gen.generate(parse_source("print 1;"))
        assert asm.endswith("ret\n")
        assert gen.statement_count == 1

    def test_platforms(self):
        assert set(PLATFORMS) == {"macos", "linux"}
        assert get_platform("MACOS").entry_symbol == "_main"

    def test_unknown_platform(self):
        with pytest.raises(CCodeGenError):
            CodeGenerator(platform="windows")
