"""
SimpleLang Type Checker

Walks one statement against the session's TypeEnv. Types are monomorphic:
every identifier has exactly one type for the whole session, fixed by the
first statement that constrains it.

The checker mutates the environment as it goes and does not undo anything
when it raises; undoing is the session's job.
"""

from ast_nodes import *
from errors import UnknownVariableError
from type_env import TypeEnv, TypeRepr, INT, BOOL


def infer(expr: Expr, env: TypeEnv) -> TypeRepr:
    """Infer the type of an expression"""
    if isinstance(expr, Number):
        return INT
    elif isinstance(expr, Identifier):
        ty = env.lookup(expr.name)
        if ty is None:
            raise UnknownVariableError(expr.name)
        return ty
    elif isinstance(expr, (Add, Sub)):
        env.unify(infer(expr.left, env), INT)
        env.unify(infer(expr.right, env), INT)
        return INT
    elif isinstance(expr, Comp):
        # Only integers compare
        env.unify(infer(expr.left, env), INT)
        env.unify(infer(expr.right, env), INT)
        return BOOL
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def analyze_statement(stmt: Stmt, env: TypeEnv):
    """Type check a statement, raising TypeCheckError on failure"""
    if isinstance(stmt, Assign):
        target = env.declare_or_lookup(stmt.name)
        env.unify(target, infer(stmt.value, env))
    elif isinstance(stmt, If):
        env.unify(infer(stmt.condition, env), BOOL)
        analyze_statement(stmt.body, env)
    elif isinstance(stmt, Print):
        # Only integers are printable
        env.unify(infer(stmt.value, env), INT)
    else:
        raise TypeError(f"Unknown statement node: {type(stmt).__name__}")
