"""
SimpleLang Session

A session owns everything that persists from one statement to the next:
the type environment, the global variable table, the compiled-unit counter
and arena, and the backend image. It runs one statement at a time through
check -> compile -> invoke.

Nothing a session creates is ever released. Type slots, storage cells and
compiled units accumulate for as long as the session lives; a long-running
REPL grows without bound.
"""

from dataclasses import dataclass
from typing import List, Optional

from ast_builder import parse_statement
from ast_nodes import Stmt
from codegen import Backend, CodeGenerator, CompiledUnit, GlobalVariableTable, create_backend
from errors import CompileError, UnknownVariableError
from type_env import TypeEnv, TypeId
from typechecker import analyze_statement


@dataclass
class SessionConfig:
    backend: str = "llvm"
    # Undo type environment changes made by a statement that fails
    rollback_on_error: bool = True


class Session:
    """Persistent state of one interactive compilation session"""

    def __init__(self, config: Optional[SessionConfig] = None,
                 backend: Optional[Backend] = None):
        self.config = config or SessionConfig()
        self.backend = backend or create_backend(self.config.backend)

        self.type_env = TypeEnv()
        self.variables = GlobalVariableTable()
        self.codegen = CodeGenerator(self.backend, self.variables)

        self.units: List[CompiledUnit] = []
        self.unit_counter = 0

    def check(self, stmt: Stmt):
        """Type check `stmt` against the session's environment"""
        analyze_statement(stmt, self.type_env)

    def compile(self, stmt: Stmt) -> CompiledUnit:
        """Compile an already checked statement into a new unit"""
        index = self.unit_counter
        self.unit_counter += 1
        unit = self.codegen.compile(stmt, index)
        self.units.append(unit)
        return unit

    def prepare(self, stmt: Stmt) -> CompiledUnit:
        """Check and compile `stmt` without running it.

        If either step fails the type environment is put back the way it
        was before the statement (unless rollback is disabled), so a failed
        line leaves no half-declared variables behind.
        """
        snapshot = self.type_env.snapshot() if self.config.rollback_on_error else None
        try:
            self.check(stmt)
            return self.compile(stmt)
        except CompileError:
            if snapshot is not None:
                self.type_env.restore(snapshot)
            raise

    def execute(self, stmt: Stmt) -> CompiledUnit:
        """Check, compile and run one statement"""
        unit = self.prepare(stmt)
        unit()
        return unit

    def run_line(self, source: str) -> CompiledUnit:
        """Parse and execute one line of source"""
        return self.execute(parse_statement(source))

    # ========================================================================
    # Introspection
    # ========================================================================

    def read_variable(self, name: str) -> Optional[int]:
        """Current value in the storage cell of `name`, None if it has none"""
        cell = self.variables.lookup(name)
        if cell is None:
            return None
        return self.backend.read_global(cell)

    def describe_type(self, name: str) -> str:
        ty = self.type_env.type_of(name)
        if ty is None:
            raise UnknownVariableError(name)
        if isinstance(ty, TypeId):
            return "unknown"
        return repr(ty)
