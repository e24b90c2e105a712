"""
LLVM Backend for the SimpleLang Code Generator

Builds each unit with llvmlite's IR builder in a module of its own, then
adds the module to one MCJIT engine per backend. Modules are never removed
from the engine, so every unit stays callable for the life of the backend.

Storage cells are ctypes words owned by the backend; generated code reaches
them through their absolute address. The print primitive is a ctypes
callback registered as a process symbol and resolved by the JIT linker.
"""

import ctypes
from typing import Callable, Dict, List, Optional

from llvmlite import ir, binding

from codegen.backend import Backend, PRINT_SYMBOL, WORD_SIZE, println_u32
from errors import BackendError

# Native target setup happens once per process, on import
binding.initialize_native_target()
binding.initialize_native_asmprinter()


I1 = ir.IntType(1)
I32 = ir.IntType(32)
VOID = ir.VoidType()
INTPTR = ir.IntType(ctypes.sizeof(ctypes.c_void_p) * 8)

PRINT_FUNC_TYPE = ctypes.CFUNCTYPE(None, ctypes.c_uint32)

# One callback for the whole process: the JIT resolves the symbol by address,
# so the ctypes object must outlive every backend that linked against it
_print_callback = PRINT_FUNC_TYPE(println_u32)


class LLVMCell:
    """A 4-byte storage cell addressed by generated code"""

    def __init__(self, name: str):
        self.name = name
        self.storage = ctypes.c_uint32(0)
        self.address = ctypes.addressof(self.storage)

    def pointer(self, builder: ir.IRBuilder) -> ir.Value:
        address = ir.Constant(INTPTR, self.address)
        return builder.inttoptr(address, I32.as_pointer(), name=f"{self.name}.addr")

    def __repr__(self):
        return f"LLVMCell({self.name}@{self.address:#x})"


class LLVMBackend(Backend):
    """Native backend: llvmlite IR + MCJIT"""

    name = "llvm"

    def __init__(self):
        target = binding.Target.from_default_triple()
        self.target_machine = target.create_target_machine()

        # Empty backing module; every unit is added as a module of its own
        backing_module = binding.parse_assembly("")
        self.engine = binding.create_mcjit_compiler(backing_module, self.target_machine)

        binding.add_symbol(PRINT_SYMBOL, ctypes.cast(_print_callback, ctypes.c_void_p).value)

        # Unit under construction
        self.module: Optional[ir.Module] = None
        self.function: Optional[ir.Function] = None
        self.builder: Optional[ir.IRBuilder] = None
        self.imports: Dict[str, ir.Function] = {}
        self.sealed: set = set()

        # Everything ever linked or allocated; nothing is released
        self.linked_modules: List[binding.ModuleRef] = []
        self.cells: List[LLVMCell] = []

    # ========================================================================
    # Functions and blocks
    # ========================================================================

    def declare_function(self, name: str) -> ir.Function:
        self.module = ir.Module(name=f"unit_{name}")
        self.module.triple = binding.get_default_triple()
        self.module.data_layout = str(self.target_machine.target_data)

        func_type = ir.FunctionType(VOID, [])
        self.function = ir.Function(self.module, func_type, name=name)
        self.builder = ir.IRBuilder()
        self.imports = {}
        self.sealed = set()
        return self.function

    def create_block(self, name: str) -> ir.Block:
        return self.function.append_basic_block(name)

    def switch_to_block(self, block: ir.Block):
        if block.is_terminated:
            raise BackendError(f"Block '{block.name}' is already terminated")
        self.builder.position_at_end(block)

    def seal_block(self, block: ir.Block):
        self.sealed.add(block.name)

    # ========================================================================
    # Instructions
    # ========================================================================

    def iconst(self, value: int) -> ir.Constant:
        # Unsigned literals above i32 max are written as their signed twin
        if value >= 2 ** 31:
            value -= 2 ** 32
        return ir.Constant(I32, value)

    def binop(self, op: str, left: ir.Value, right: ir.Value) -> ir.Value:
        if op == "+":
            return self.builder.add(left, right)
        elif op == "-":
            return self.builder.sub(left, right)
        raise BackendError(f"Unsupported arithmetic operator '{op}'")

    def compare(self, op: str, left: ir.Value, right: ir.Value) -> ir.Value:
        if op not in ("==", "!="):
            raise BackendError(f"Unsupported comparison operator '{op}'")
        return self.builder.icmp_signed(op, left, right)

    def extend(self, value: ir.Value) -> ir.Value:
        return self.builder.zext(value, I32)

    def branch(self, cond: ir.Value, then_block: ir.Block, else_block: ir.Block):
        self.builder.cbranch(cond, then_block, else_block)

    def jump(self, block: ir.Block):
        self.builder.branch(block)

    def ret(self):
        self.builder.ret_void()

    def call(self, symbol: str, args: list):
        func = self.imports.get(symbol)
        if func is None:
            func_type = ir.FunctionType(VOID, [I32] * len(args))
            func = ir.Function(self.module, func_type, name=symbol)
            self.imports[symbol] = func
        self.builder.call(func, args)

    # ========================================================================
    # Global data
    # ========================================================================

    def declare_global(self, name: str, size: int = WORD_SIZE) -> LLVMCell:
        if size != WORD_SIZE:
            raise BackendError(f"Unsupported global size {size} for '{name}'")
        cell = LLVMCell(name)
        self.cells.append(cell)
        return cell

    def load_global(self, cell: LLVMCell) -> ir.Value:
        return self.builder.load(cell.pointer(self.builder), name=cell.name)

    def store_global(self, cell: LLVMCell, value: ir.Value):
        self.builder.store(value, cell.pointer(self.builder))

    def read_global(self, cell: LLVMCell) -> int:
        return cell.storage.value

    # ========================================================================
    # Finalization
    # ========================================================================

    def finalize_function(self):
        for block in self.function.blocks:
            if not block.is_terminated:
                raise BackendError(f"Block '{block.name}' in '{self.function.name}' has no terminator")
            if block.name not in self.sealed:
                raise BackendError(f"Block '{block.name}' in '{self.function.name}' was never sealed")

    def link(self):
        """Verify the unit and add it to the JIT image"""
        llvm_ir = str(self.module)
        try:
            mod = binding.parse_assembly(llvm_ir)
            mod.verify()
        except RuntimeError as e:
            raise BackendError(f"LLVM IR error: {e}") from e

        self.engine.add_module(mod)
        self.engine.finalize_object()
        self.linked_modules.append(mod)

    def get_entry(self, function: ir.Function) -> Callable[[], None]:
        address = self.engine.get_function_address(function.name)
        if not address:
            raise BackendError(f"No entry point for unit '{function.name}'")
        return ctypes.CFUNCTYPE(None)(address)

    def get_ir(self) -> str:
        """Get LLVM IR of the current unit as string"""
        if self.module is None:
            return ""
        return str(self.module)
