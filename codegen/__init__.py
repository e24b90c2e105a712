"""
SimpleLang Code Generator Package

    codegen/
    ├── __init__.py        # re-exports
    ├── core.py            # CodeGenerator, CompiledUnit
    ├── statements.py      # Assign, If, Print
    ├── expressions.py     # Identifier, Number, Add, Sub, Comp
    ├── variables.py       # GlobalVariableTable
    ├── backend.py         # Backend interface, print primitive
    ├── llvm_backend.py    # llvmlite + MCJIT
    └── interp_backend.py  # pure-Python interpreter
"""

from codegen.backend import Backend
from codegen.core import CodeGenerator, CompiledUnit
from codegen.variables import GlobalVariableTable

__all__ = ['Backend', 'CodeGenerator', 'CompiledUnit', 'GlobalVariableTable', 'create_backend']


def create_backend(name: str) -> Backend:
    """Instantiate a backend by name ("llvm" or "interp")"""
    if name == "llvm":
        from codegen.llvm_backend import LLVMBackend
        return LLVMBackend()
    elif name == "interp":
        from codegen.interp_backend import InterpBackend
        return InterpBackend()
    raise ValueError(f"Unknown backend '{name}'")
