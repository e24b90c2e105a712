"""
Statements Module for SimpleLang Code Generator

Statement types handled:
- Assign: define the variable's cell on first assignment, then store
- If: single-armed conditional over then / else / merge blocks
- Print: call the imported print primitive
"""
from typing import TYPE_CHECKING, Any

from ast_nodes import Stmt, Assign, If, Print
from codegen.backend import PRINT_SYMBOL, WORD_SIZE

if TYPE_CHECKING:
    from codegen.core import CodeGenerator


class StatementsGenerator:
    """Generates code for SimpleLang statements."""

    def __init__(self, codegen: 'CodeGenerator'):
        """Initialize with reference to parent CodeGenerator instance."""
        self.codegen = codegen

    # Property accessors for commonly used codegen attributes
    @property
    def backend(self):
        return self.codegen.backend

    @property
    def variables(self):
        return self.codegen.variables

    @property
    def expressions(self):
        return self.codegen.expressions

    # ========================================================================
    # Main Statement Dispatcher
    # ========================================================================

    def generate_statement(self, stmt: Stmt):
        """Generate code for a statement.

        Dispatches to specific handlers based on statement type.
        """
        if isinstance(stmt, Assign):
            self._generate_assign(stmt)
        elif isinstance(stmt, If):
            self._generate_if(stmt)
        elif isinstance(stmt, Print):
            self._generate_print(stmt)
        else:
            raise TypeError(f"Unknown statement node: {type(stmt).__name__}")

    # ========================================================================
    # Variable Definition and Assignment
    # ========================================================================

    def _generate_assign(self, stmt: Assign):
        """Generate an assignment, defining the variable on first use"""
        cell = self.variables.lookup(stmt.name)
        if cell is None:
            cell = self._define_variable(stmt.name)

        # The cell exists before the value is computed, so `x = x + 1`
        # on a fresh name reads the zero-initialized cell
        value = self.expressions.generate_word(stmt.value)
        self.backend.store_global(cell, value)

    def _define_variable(self, name: str) -> Any:
        cell = self.backend.declare_global(name, WORD_SIZE)
        self.variables.stage(name, cell)
        return cell

    # ========================================================================
    # Control Flow
    # ========================================================================

    def _generate_if(self, stmt: If):
        """Generate an if statement.

        There is no else clause, so the else block only forwards to merge.
        All predecessors of a block are known when it is entered, so each
        block is sealed right away.
        """
        cond = self.expressions.generate_condition(stmt.condition)

        then_block = self.backend.create_block("if_then")
        else_block = self.backend.create_block("if_else")
        merge_block = self.backend.create_block("if_merge")

        self.backend.branch(cond, then_block, else_block)

        self.backend.switch_to_block(then_block)
        self.backend.seal_block(then_block)
        self.generate_statement(stmt.body)
        self.backend.jump(merge_block)

        self.backend.switch_to_block(else_block)
        self.backend.seal_block(else_block)
        self.backend.jump(merge_block)

        self.backend.switch_to_block(merge_block)
        self.backend.seal_block(merge_block)

    # ========================================================================
    # Print
    # ========================================================================

    def _generate_print(self, stmt: Print):
        value = self.expressions.generate_word(stmt.value)
        self.backend.call(PRINT_SYMBOL, [value])
