"""
Interpreter Backend for the SimpleLang Code Generator

Records the instructions the code generator emits into plain Python blocks
and runs them by walking the blocks. No native code is produced, which makes
it the backend of choice for testing the code generator in isolation.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from codegen.backend import Backend, PRINT_SYMBOL, WORD_MASK, WORD_SIZE, println_u32
from errors import BackendError


@dataclass(frozen=True)
class Value:
    """A virtual register"""
    index: int

    def __repr__(self):
        return f"%{self.index}"


@dataclass
class Instr:
    op: str
    result: Optional[Value]
    args: Tuple = ()

    def __repr__(self):
        args = ", ".join(str(a) for a in self.args)
        if self.result is not None:
            return f"{self.result!r} = {self.op} {args}"
        return f"{self.op} {args}".rstrip()


@dataclass
class InterpBlock:
    name: str
    instrs: List[Instr] = field(default_factory=list)
    sealed: bool = False

    @property
    def is_terminated(self) -> bool:
        return bool(self.instrs) and self.instrs[-1].op in ("br", "jump", "ret")

    def __repr__(self):
        return self.name


@dataclass
class InterpFunction:
    name: str
    blocks: List[InterpBlock] = field(default_factory=list)
    linked: bool = False


@dataclass
class InterpCell:
    name: str
    value: int = 0

    def __repr__(self):
        return f"@{self.name}"


class InterpBackend(Backend):
    """Pure-Python backend that interprets the emitted instructions"""

    name = "interp"

    def __init__(self, imports: Optional[Dict[str, Callable]] = None):
        self.imports: Dict[str, Callable] = {PRINT_SYMBOL: println_u32}
        if imports:
            self.imports.update(imports)

        self.function: Optional[InterpFunction] = None
        self.block: Optional[InterpBlock] = None
        self.next_value = 0

        self.units: List[InterpFunction] = []
        self.cells: List[InterpCell] = []

    # ========================================================================
    # Functions and blocks
    # ========================================================================

    def declare_function(self, name: str) -> InterpFunction:
        self.function = InterpFunction(name)
        self.block = None
        self.next_value = 0
        return self.function

    def create_block(self, name: str) -> InterpBlock:
        taken = {b.name for b in self.function.blocks}
        unique, n = name, 0
        while unique in taken:
            n += 1
            unique = f"{name}.{n}"
        block = InterpBlock(unique)
        self.function.blocks.append(block)
        return block

    def switch_to_block(self, block: InterpBlock):
        if block.is_terminated:
            raise BackendError(f"Block '{block.name}' is already terminated")
        self.block = block

    def seal_block(self, block: InterpBlock):
        block.sealed = True

    def _emit(self, op: str, *args, produces: bool = True) -> Optional[Value]:
        if self.block is None:
            raise BackendError("No current block")
        result = None
        if produces:
            result = Value(self.next_value)
            self.next_value += 1
        self.block.instrs.append(Instr(op, result, args))
        return result

    # ========================================================================
    # Instructions
    # ========================================================================

    def iconst(self, value: int) -> Value:
        return self._emit("iconst", value & WORD_MASK)

    def binop(self, op: str, left: Value, right: Value) -> Value:
        if op == "+":
            return self._emit("add", left, right)
        elif op == "-":
            return self._emit("sub", left, right)
        raise BackendError(f"Unsupported arithmetic operator '{op}'")

    def compare(self, op: str, left: Value, right: Value) -> Value:
        if op == "==":
            return self._emit("eq", left, right)
        elif op == "!=":
            return self._emit("ne", left, right)
        raise BackendError(f"Unsupported comparison operator '{op}'")

    def extend(self, value: Value) -> Value:
        return self._emit("zext", value)

    def branch(self, cond: Value, then_block: InterpBlock, else_block: InterpBlock):
        self._emit("br", cond, then_block, else_block, produces=False)

    def jump(self, block: InterpBlock):
        self._emit("jump", block, produces=False)

    def ret(self):
        self._emit("ret", produces=False)

    def call(self, symbol: str, args: list):
        if symbol not in self.imports:
            raise BackendError(f"Unresolved symbol '{symbol}'")
        self._emit("call", symbol, *args, produces=False)

    # ========================================================================
    # Global data
    # ========================================================================

    def declare_global(self, name: str, size: int = WORD_SIZE) -> InterpCell:
        if size != WORD_SIZE:
            raise BackendError(f"Unsupported global size {size} for '{name}'")
        cell = InterpCell(name)
        self.cells.append(cell)
        return cell

    def load_global(self, cell: InterpCell) -> Value:
        return self._emit("load", cell)

    def store_global(self, cell: InterpCell, value: Value):
        self._emit("store", cell, value, produces=False)

    def read_global(self, cell: InterpCell) -> int:
        return cell.value

    # ========================================================================
    # Finalization
    # ========================================================================

    def finalize_function(self):
        for block in self.function.blocks:
            if not block.is_terminated:
                raise BackendError(f"Block '{block.name}' in '{self.function.name}' has no terminator")
            if not block.sealed:
                raise BackendError(f"Block '{block.name}' in '{self.function.name}' was never sealed")

    def link(self):
        self.function.linked = True
        self.units.append(self.function)

    def get_entry(self, function: InterpFunction) -> Callable[[], None]:
        if not function.linked:
            raise BackendError(f"Unit '{function.name}' is not linked")
        return lambda: self._run(function)

    def get_ir(self) -> str:
        if self.function is None:
            return ""
        lines = [f"function {self.function.name}() {{"]
        for block in self.function.blocks:
            lines.append(f"{block.name}:")
            lines.extend(f"  {instr!r}" for instr in block.instrs)
        lines.append("}")
        return "\n".join(lines)

    # ========================================================================
    # Execution
    # ========================================================================

    def _run(self, function: InterpFunction):
        regs: Dict[Value, int] = {}
        block = function.blocks[0]

        while True:
            next_block = None
            for instr in block.instrs:
                op, args = instr.op, instr.args
                if op == "iconst":
                    regs[instr.result] = args[0]
                elif op == "add":
                    regs[instr.result] = (regs[args[0]] + regs[args[1]]) & WORD_MASK
                elif op == "sub":
                    regs[instr.result] = (regs[args[0]] - regs[args[1]]) & WORD_MASK
                elif op == "eq":
                    regs[instr.result] = int(regs[args[0]] == regs[args[1]])
                elif op == "ne":
                    regs[instr.result] = int(regs[args[0]] != regs[args[1]])
                elif op == "zext":
                    regs[instr.result] = regs[args[0]]
                elif op == "load":
                    regs[instr.result] = args[0].value
                elif op == "store":
                    args[0].value = regs[args[1]]
                elif op == "call":
                    self.imports[args[0]](*(regs[a] for a in args[1:]))
                elif op == "br":
                    next_block = args[1] if regs[args[0]] else args[2]
                    break
                elif op == "jump":
                    next_block = args[0]
                    break
                elif op == "ret":
                    return
                else:
                    raise BackendError(f"Unknown instruction '{op}'")

            if next_block is None:
                raise BackendError(f"Fell off the end of block '{block.name}'")
            block = next_block
