"""
Backend Interface for the SimpleLang Code Generator

The code generator never touches machine code. It drives a Backend through
the operations below, one compiled unit at a time:

    declare_function(name)         start a new unit with no params, no result
    create_block / switch_to_block / seal_block
    iconst, binop, compare, extend
    branch, jump, ret
    call(symbol, args)             call an imported runtime symbol
    declare_global(name, size)     zero-initialized storage cell
    load_global / store_global
    finalize_function()            the unit body is complete
    link()                         make the unit executable in the image
    get_entry(function)            callable for the linked unit

Values, blocks, functions and cells are opaque handles owned by the backend.
A backend image is append-only: units and cells live as long as the backend.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List


# Imported symbol for `print`: takes one 32-bit word, prints it unsigned
PRINT_SYMBOL = "println_u32"

WORD_SIZE = 4
WORD_MASK = 0xFFFFFFFF


def println_u32(value: int):
    print(value & WORD_MASK)


class Backend(ABC):
    """Code-generation capability consumed by CodeGenerator."""

    name = "abstract"

    # ------------------------------------------------------------------
    # Functions and blocks
    # ------------------------------------------------------------------

    @abstractmethod
    def declare_function(self, name: str) -> Any:
        ...

    @abstractmethod
    def create_block(self, name: str) -> Any:
        ...

    @abstractmethod
    def switch_to_block(self, block: Any):
        ...

    @abstractmethod
    def seal_block(self, block: Any):
        """No more predecessors will be added to `block`."""

    # ------------------------------------------------------------------
    # Instructions
    # ------------------------------------------------------------------

    @abstractmethod
    def iconst(self, value: int) -> Any:
        """32-bit integer constant"""

    @abstractmethod
    def binop(self, op: str, left: Any, right: Any) -> Any:
        """Wrapping 32-bit arithmetic, op is '+' or '-'"""

    @abstractmethod
    def compare(self, op: str, left: Any, right: Any) -> Any:
        """Integer comparison producing a boolean, op is '==' or '!='"""

    @abstractmethod
    def extend(self, value: Any) -> Any:
        """Zero-extend a boolean to a 32-bit word"""

    @abstractmethod
    def branch(self, cond: Any, then_block: Any, else_block: Any):
        ...

    @abstractmethod
    def jump(self, block: Any):
        ...

    @abstractmethod
    def ret(self):
        ...

    @abstractmethod
    def call(self, symbol: str, args: List[Any]):
        ...

    # ------------------------------------------------------------------
    # Global data
    # ------------------------------------------------------------------

    @abstractmethod
    def declare_global(self, name: str, size: int = WORD_SIZE) -> Any:
        ...

    @abstractmethod
    def load_global(self, cell: Any) -> Any:
        ...

    @abstractmethod
    def store_global(self, cell: Any, value: Any):
        ...

    @abstractmethod
    def read_global(self, cell: Any) -> int:
        """Current contents of a cell, from outside generated code"""

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    @abstractmethod
    def finalize_function(self):
        ...

    @abstractmethod
    def link(self):
        ...

    @abstractmethod
    def get_entry(self, function: Any) -> Callable[[], None]:
        ...

    @abstractmethod
    def get_ir(self) -> str:
        """Textual form of the unit built last"""
