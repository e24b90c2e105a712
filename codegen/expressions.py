"""
Expressions Module for SimpleLang Code Generator

Expression evaluation is side-effect free and yields one backend value per
node. Every node produces a 32-bit word except `Comp`, which produces a
boolean; the helpers below convert between the two where a statement needs
one or the other.
"""
from typing import TYPE_CHECKING, Any

from ast_nodes import Expr, Identifier, Number, Add, Sub, Comp
from errors import UnknownVariableError

if TYPE_CHECKING:
    from codegen.core import CodeGenerator


class ExpressionsGenerator:
    """Generates code for SimpleLang expressions."""

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

    # ========================================================================
    # Main Expression Dispatcher
    # ========================================================================

    def generate_expression(self, expr: Expr) -> Any:
        """Generate code for an expression.

        Dispatches to specific handlers based on expression type.
        """
        if isinstance(expr, Number):
            return self.backend.iconst(expr.value)
        elif isinstance(expr, Identifier):
            return self._generate_identifier(expr)
        elif isinstance(expr, Add):
            return self._generate_arithmetic("+", expr)
        elif isinstance(expr, Sub):
            return self._generate_arithmetic("-", expr)
        elif isinstance(expr, Comp):
            left = self.generate_expression(expr.left)
            right = self.generate_expression(expr.right)
            return self.backend.compare("==", left, right)
        raise TypeError(f"Unknown expression node: {type(expr).__name__}")

    def _generate_identifier(self, expr: Identifier) -> Any:
        cell = self.variables.lookup(expr.name)
        if cell is None:
            raise UnknownVariableError(expr.name)
        return self.backend.load_global(cell)

    def _generate_arithmetic(self, op: str, expr) -> Any:
        left = self.generate_expression(expr.left)
        right = self.generate_expression(expr.right)
        return self.backend.binop(op, left, right)

    # ========================================================================
    # Word / boolean views
    # ========================================================================

    def generate_word(self, expr: Expr) -> Any:
        """Value of `expr` as a 32-bit word; booleans become 0 or 1."""
        value = self.generate_expression(expr)
        if isinstance(expr, Comp):
            value = self.backend.extend(value)
        return value

    def generate_condition(self, expr: Expr) -> Any:
        """Value of `expr` as a boolean.

        A comparison is already one. Anything else is a Bool variable read
        back from its cell, true when non-zero.
        """
        value = self.generate_expression(expr)
        if not isinstance(expr, Comp):
            value = self.backend.compare("!=", value, self.backend.iconst(0))
        return value
