"""
SimpleLang error types

Every failure a statement can hit on its way from text to execution is a
CompileError. The driver reports it and moves on to the next line.
"""


class CompileError(Exception):
    """Compilation error"""
    pass


class ParseError(CompileError):
    """Syntax error in one input line"""

    def __init__(self, message: str, line: int = 1, column: int = 0):
        self.line = line
        self.column = column
        super().__init__(f"Syntax error: Line {line}:{column} - {message}")


class TypeCheckError(CompileError):
    """Base class for errors raised by the type checker"""
    pass


class UnknownVariableError(TypeCheckError):
    """Identifier referenced before any assignment to it"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Name error: variable `{name}` not found")


class TypeMismatchError(TypeCheckError):
    """Two concrete types that must be equal are not"""

    def __init__(self, left, right):
        self.left = left
        self.right = right
        super().__init__(f"Type error: not same types (`{left!r}` and `{right!r}`)")


class BackendError(CompileError):
    """IR verification, linking or finalization failed"""
    pass
