"""
Tests for arithmetic, variables and printing, run through the driver.

These tests verify fundamental compiler functionality:
- Integer arithmetic with 32-bit wraparound
- Variable definition and redefinition
- Boolean variables
- Compile errors stop a source file
"""

import pytest


class TestArithmetic:
    """Tests for integer arithmetic."""

    def test_print_number(self, expect_output):
        expect_output("print 42\n", "42\n")

    def test_addition(self, expect_output):
        expect_output("print 2 + 3\n", "5\n")

    def test_subtraction(self, expect_output):
        expect_output("print 10 - 4\n", "6\n")

    def test_grouping(self, expect_output):
        expect_output("print 10 - (4 - 1)\n", "7\n")

    def test_negative_result_wraps(self, expect_output):
        expect_output('''
a = 1
b = 2
print a - b
''', "4294967295\n")

    def test_addition_overflow_wraps(self, expect_output):
        expect_output("print 4294967295 + 2\n", "1\n")

    def test_large_literal(self, expect_output):
        expect_output("print 4294967295\n", "4294967295\n")


class TestVariables:
    """Tests for variable definition and reuse."""

    def test_assign_and_print(self, expect_output):
        expect_output('''
a = 2
print a
''', "2\n")

    def test_redefinition_reuses_cell(self, expect_output):
        expect_output('''
a = 5
a = a + 1
print a
''', "6\n")

    def test_variable_of_variable(self, expect_output):
        expect_output('''
a = 3
b = a + 4
c = b - a
print c
''', "4\n")

    def test_bool_variable_as_condition(self, expect_output):
        expect_output('''
t = 1 == 1
f = 1 == 2
if t then print 1
if f then print 2
''', "1\n")

    def test_blank_lines_are_skipped(self, expect_output):
        expect_output('''

a = 1

print a

''', "1\n")

    def test_interpreter_backend(self, expect_output):
        expect_output('''
a = 5
a = a + 1
if a == 6 then print a
''', "6\n", "--backend", "interp")


class TestCompileErrors:
    """Tests for errors in source files."""

    def test_unknown_variable(self, expect_compile_error):
        expect_compile_error("print x\n", "Name error: variable `x` not found")

    def test_type_mismatch(self, expect_compile_error):
        expect_compile_error('''
a = 1
a = 1 == 1
''', "Type error: not same types (`Int` and `Bool`)")

    def test_print_bool(self, expect_compile_error):
        expect_compile_error("print 1 == 1\n", "Type error")

    def test_syntax_error(self, expect_compile_error):
        expect_compile_error("print (1\n", "Syntax error")

    def test_error_reports_line(self, expect_compile_error):
        expect_compile_error('''a = 1
print b
''', "test.sl:2:")

    def test_output_before_error_is_kept(self, run_simplelang):
        result = run_simplelang('''
print 1
print nope
print 2
''')
        assert result.returncode == 1
        assert result.run_output == "1\n"


class TestDriverFlags:
    """Tests for --emit-ir and --emit-ast."""

    def test_emit_ir(self, run_simplelang):
        result = run_simplelang("a = 7\nprint a\n", "--emit-ir")
        assert result.success, result.error_output
        assert 'define void @"stmt0"()' in result.run_output
        assert 'define void @"stmt1"()' in result.run_output
        assert "println_u32" in result.run_output
        assert result.run_output.endswith("7\n")

    def test_emit_ir_interp(self, run_simplelang):
        result = run_simplelang("print 3\n", "--emit-ir", "--backend", "interp")
        assert result.success, result.error_output
        assert "function stmt0() {" in result.run_output
        assert "call println_u32" in result.run_output

    def test_emit_ast(self, run_simplelang):
        result = run_simplelang("print 1 + 2\n", "--emit-ast")
        assert result.success, result.error_output
        assert result.run_output == "Print: print (1 + 2)\n3\n"

    def test_verbose_goes_to_stderr(self, run_simplelang):
        result = run_simplelang("print 1\n", "--verbose")
        assert result.run_output == "1\n"
        assert "Compiling stmt0..." in result.error_output
