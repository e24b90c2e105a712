"""
SimpleLang AST Node Definitions

Statements: Assign, If, Print.
Expressions: Identifier, Number, Add, Sub, Comp.

Nodes are frozen; the same tree is read by the type checker and by the
code generator.
"""

from dataclasses import dataclass
from typing import Union


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class Expr:
    """Base class for expressions"""
    pass


@dataclass(frozen=True)
class Identifier(Expr):
    name: str

    def __repr__(self):
        return self.name


@dataclass(frozen=True)
class Number(Expr):
    value: int  # unsigned 32-bit

    def __repr__(self):
        return str(self.value)


@dataclass(frozen=True)
class Add(Expr):
    left: Expr
    right: Expr

    def __repr__(self):
        return f"({self.left!r} + {self.right!r})"


@dataclass(frozen=True)
class Sub(Expr):
    left: Expr
    right: Expr

    def __repr__(self):
        return f"({self.left!r} - {self.right!r})"


@dataclass(frozen=True)
class Comp(Expr):
    """Equality test, `left == right`"""
    left: Expr
    right: Expr

    def __repr__(self):
        return f"({self.left!r} == {self.right!r})"


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class Stmt:
    """Base class for statements"""
    pass


@dataclass(frozen=True)
class Assign(Stmt):
    name: str
    value: Expr

    def __repr__(self):
        return f"{self.name} = {self.value!r}"


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    body: Stmt

    def __repr__(self):
        return f"if {self.condition!r} then {self.body!r}"


@dataclass(frozen=True)
class Print(Stmt):
    value: Expr

    def __repr__(self):
        return f"print {self.value!r}"


Node = Union[Expr, Stmt]
