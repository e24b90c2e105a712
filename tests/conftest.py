"""
Pytest configuration and fixtures for SimpleLang compiler tests.

Provides reusable fixtures for:
- Running SimpleLang programs through the compiler driver
- Verifying expected output
- Checking compilation errors
- In-process sessions on every backend
"""

import pytest
import subprocess
import tempfile
import os
import sys
from pathlib import Path

from session import Session, SessionConfig


class CompilerResult:
    """Result of running a SimpleLang program through the driver."""

    def __init__(self, returncode: int, stdout: str, stderr: str):
        self.returncode = returncode
        self.success = returncode == 0
        self.run_output = stdout
        self.error_output = stderr


@pytest.fixture
def compiler_root():
    """Path to compiler root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def run_simplelang(compiler_root):
    """
    Fixture that returns a function to run SimpleLang source code.

    Usage:
        result = run_simplelang(source_code)
        assert result.success
        assert result.run_output == "42\n"

    With repl=True the source is fed to an interactive session on stdin.
    """
    def _run(source: str, *flags: str, repl: bool = False) -> CompilerResult:
        simplec = os.path.join(compiler_root, "simplec.py")

        if repl:
            result = subprocess.run(
                [sys.executable, simplec, *flags],
                input=source,
                capture_output=True,
                text=True,
                cwd=compiler_root
            )
            return CompilerResult(result.returncode, result.stdout, result.stderr)

        with tempfile.TemporaryDirectory() as tmpdir:
            source_path = os.path.join(tmpdir, "test.sl")
            with open(source_path, 'w') as f:
                f.write(source)

            result = subprocess.run(
                [sys.executable, simplec, source_path, *flags],
                capture_output=True,
                text=True,
                cwd=compiler_root
            )
            return CompilerResult(result.returncode, result.stdout, result.stderr)

    return _run


@pytest.fixture
def expect_output(run_simplelang):
    """
    Fixture that runs code and asserts expected output.

    Usage:
        expect_output(source_code, "expected output\n")
        expect_output(source_code, "expected output\n", "--backend", "interp")
    """
    def _expect(source: str, expected: str, *flags: str):
        result = run_simplelang(source, *flags)
        assert result.success, f"Compilation failed:\n{result.error_output}"
        assert result.run_output == expected, \
            f"Output mismatch:\nExpected: {expected!r}\nGot: {result.run_output!r}"

    return _expect


@pytest.fixture
def expect_compile_error(run_simplelang):
    """
    Fixture that verifies compilation fails with expected error.

    Usage:
        expect_compile_error(bad_code, "Type error")
    """
    def _expect(source: str, error_substring: str = None):
        result = run_simplelang(source)
        assert result.returncode == 1, \
            f"Expected compilation to fail but it succeeded.\nOutput: {result.run_output}"
        if error_substring:
            assert error_substring.lower() in result.error_output.lower(), \
                f"Expected error containing '{error_substring}' but got:\n{result.error_output}"

    return _expect


@pytest.fixture(params=["llvm", "interp"])
def session(request):
    """A fresh in-process session, once per backend."""
    return Session(SessionConfig(backend=request.param))


@pytest.fixture
def run_lines(session, capsys):
    """
    Fixture that runs source lines in one session and returns stdout.

    Usage:
        assert run_lines("a = 2", "print a") == "2\n"
    """
    def _run(*lines: str) -> str:
        for line in lines:
            session.run_line(line)
        return capsys.readouterr().out

    return _run
