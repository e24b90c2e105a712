#!/usr/bin/env python3
"""
SimpleLang Compiler

Every line is parsed, type checked, compiled to native code and run at
once. Variables keep their types and values from one line to the next.

Usage:
    python simplec.py [source_file] [--emit-ir] [--emit-ast] [--backend NAME]

Examples:
    python simplec.py                       # Interactive session on stdin
    python simplec.py prog.sl               # Run each line of prog.sl
    python simplec.py prog.sl --emit-ir     # Print each unit's IR before running it
    python simplec.py prog.sl --emit-ast    # Print each statement's AST
    python simplec.py --backend interp      # Interpret instead of compiling natively
"""

import sys
import argparse
import traceback

from ast_builder import parse_statement
from errors import CompileError
from session import Session, SessionConfig


BANNER = "If you want to quit, please enter `quit` or `exit`."
PROMPT = "> "
QUIT_COMMANDS = ("quit", "exit")


class Driver:
    """Feeds source lines one at a time into a Session"""

    def __init__(self, session: Session, emit_ir: bool = False,
                 emit_ast: bool = False, verbose: bool = False):
        self.session = session
        self.emit_ir = emit_ir
        self.emit_ast = emit_ast
        self.verbose = verbose

    def log(self, msg: str):
        if self.verbose:
            print(msg, file=sys.stderr)

    def run_statement(self, source: str):
        """Parse, check, compile and run one line"""
        self.log("Parsing...")
        stmt = parse_statement(source)

        if self.emit_ast:
            print(f"{type(stmt).__name__}: {stmt!r}")

        self.log(f"Compiling stmt{self.session.unit_counter}...")
        unit = self.session.prepare(stmt)

        if self.emit_ir:
            print(unit.ir)

        self.log(f"Running {unit.name}...")
        unit()

    def run_command(self, line: str):
        """REPL commands: `:type NAME` and `:vars`"""
        parts = line.split()
        if parts[0] == ":type" and len(parts) == 2:
            print(f"{parts[1]}: {self.session.describe_type(parts[1])}")
        elif parts[0] == ":vars" and len(parts) == 1:
            for name in self.session.variables.names():
                ty = self.session.describe_type(name)
                print(f"{name}: {ty} = {self.session.read_variable(name)}")
        else:
            raise CompileError(f"Unknown command '{line}'")

    def repl(self, quiet: bool = False) -> int:
        """Read statements from stdin until quit/exit or EOF"""
        if not quiet:
            print(BANNER)

        while True:
            if not quiet:
                print(PROMPT, end="", flush=True)
            line = sys.stdin.readline()
            if not line:
                break

            text = line.strip()
            if text in QUIT_COMMANDS:
                break
            if not text:
                continue

            try:
                if text.startswith(":"):
                    self.run_command(text)
                else:
                    self.run_statement(text)
            except CompileError as e:
                print(e, file=sys.stderr)
            sys.stdout.flush()

        return 0

    def run_file(self, source_path: str) -> int:
        """Run each non-blank line of a file, stopping at the first error"""
        with open(source_path, 'r') as f:
            lines = f.readlines()

        for lineno, line in enumerate(lines, start=1):
            text = line.strip()
            if not text:
                continue
            try:
                self.run_statement(text)
            except CompileError as e:
                print(f"Compilation failed: {source_path}:{lineno}: {e}", file=sys.stderr)
                return 1
            sys.stdout.flush()

        return 0


def main():
    parser = argparse.ArgumentParser(
        description="SimpleLang Compiler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                         Interactive session
  %(prog)s prog.sl                 Run each line of prog.sl
  %(prog)s prog.sl --emit-ir       Print each unit's IR before running it
  %(prog)s prog.sl --emit-ast      Print each statement's AST
  %(prog)s --backend interp        Interpret instead of compiling natively
        """
    )

    parser.add_argument("source", nargs="?", help="Source file (one statement per line)")
    parser.add_argument("--emit-ir", action="store_true",
                        help="Print the IR of every compiled unit")
    parser.add_argument("--emit-ast", action="store_true",
                        help="Print the AST of every statement")
    parser.add_argument("--backend", choices=["llvm", "interp"], default="llvm",
                        help="Code generation backend (default: llvm)")
    parser.add_argument("--no-rollback", action="store_true",
                        help="Keep type information from statements that fail")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="No banner or prompt in interactive mode")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print compilation stages to stderr")

    args = parser.parse_args()

    try:
        config = SessionConfig(backend=args.backend,
                               rollback_on_error=not args.no_rollback)
        driver = Driver(Session(config), emit_ir=args.emit_ir,
                        emit_ast=args.emit_ast, verbose=args.verbose)

        if args.source:
            status = driver.run_file(args.source)
        else:
            status = driver.repl(quiet=args.quiet)
    except Exception as e:
        print(f"Internal compiler error: {e}", file=sys.stderr)
        traceback.print_exc()
        sys.exit(2)

    sys.exit(status)


if __name__ == "__main__":
    main()
