"""
SimpleLang Code Generator

Compiles one type-checked statement into one compiled unit: a function with
no parameters and no result, linked into the backend's image and returned
as a callable. Units are named `stmt<N>` after the session's unit counter.
"""

from dataclasses import dataclass
from typing import Callable

from ast_nodes import Stmt
from codegen.backend import Backend
from codegen.expressions import ExpressionsGenerator
from codegen.statements import StatementsGenerator
from codegen.variables import GlobalVariableTable


@dataclass
class CompiledUnit:
    """One generated, linked callable built from one statement"""
    index: int
    name: str
    entry: Callable[[], None]
    ir: str = ""

    def __call__(self):
        self.entry()


class CodeGenerator:
    """Generates backend code from SimpleLang statements"""

    def __init__(self, backend: Backend, variables: GlobalVariableTable):
        self.backend = backend
        self.variables = variables

        self.statements = StatementsGenerator(self)
        self.expressions = ExpressionsGenerator(self)

    def compile(self, stmt: Stmt, index: int) -> CompiledUnit:
        """Compile `stmt` into unit number `index`.

        Variables defined by the statement join the variable table only
        once the unit is linked; on any failure they are dropped again.
        """
        name = f"stmt{index}"
        function = self.backend.declare_function(name)

        try:
            entry_block = self.backend.create_block("entry")
            self.backend.switch_to_block(entry_block)
            self.backend.seal_block(entry_block)

            self.statements.generate_statement(stmt)
            self.backend.ret()
            self.backend.finalize_function()

            ir_text = self.backend.get_ir()
            self.backend.link()
            entry = self.backend.get_entry(function)
        except Exception:
            self.variables.discard()
            raise

        self.variables.commit()
        return CompiledUnit(index, name, entry, ir_text)
