"""
SimpleLang Type Environment

Type representations, type variable slots and the unification engine.

Every identifier is bound to a type representation: a concrete `Int` or
`Bool`, or `Id(n)`, a reference to the n-th type variable slot. Slots live in
a single append-only list and are resolved by unification. A slot is only
ever bound to a representation other than itself, so resolution chains
cannot cycle.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from errors import TypeMismatchError


# ============================================================================
# Type representations
# ============================================================================

@dataclass(frozen=True)
class TypeRepr:
    """Base class for type representations"""
    pass


@dataclass(frozen=True)
class IntType(TypeRepr):
    def __repr__(self):
        return "Int"


@dataclass(frozen=True)
class BoolType(TypeRepr):
    def __repr__(self):
        return "Bool"


@dataclass(frozen=True)
class TypeId(TypeRepr):
    """Reference to a type variable slot"""
    slot: int

    def __repr__(self):
        return f"Id({self.slot})"


INT = IntType()
BOOL = BoolType()


@dataclass
class TypeVar:
    """A type variable slot, bound to another representation once unified"""
    index: int
    resolution: Optional[TypeRepr] = None


# ============================================================================
# Environment
# ============================================================================

class TypeEnv:
    """Slots of type variables plus the name -> representation table"""

    def __init__(self):
        self.slots: List[TypeVar] = []
        self.names: Dict[str, TypeRepr] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)

    def lookup(self, name: str) -> Optional[TypeRepr]:
        return self.names.get(name)

    def declare_or_lookup(self, name: str) -> TypeRepr:
        """Return the binding of `name`, creating a fresh slot on first use."""
        existing = self.names.get(name)
        if existing is not None:
            return existing

        index = len(self.slots)
        self.slots.append(TypeVar(index))
        repr_ = TypeId(index)
        self.names[name] = repr_
        return repr_

    def resolve(self, ty: TypeRepr) -> TypeRepr:
        """Follow a slot chain to its end.

        Every slot visited on the way is rewritten to point directly at the
        final representation, so later lookups take a single step.
        """
        if not isinstance(ty, TypeId):
            return ty

        slot = self.slots[ty.slot]
        if slot.resolution is None:
            return ty

        resolved = self.resolve(slot.resolution)
        slot.resolution = resolved
        return resolved

    def unify(self, left: TypeRepr, right: TypeRepr):
        """Make `left` and `right` the same type or raise TypeMismatchError."""
        left_resolved = self.resolve(left)
        right_resolved = self.resolve(right)

        if isinstance(left_resolved, TypeId):
            # Binding a slot to itself would create a cycle
            if left_resolved != right_resolved:
                self.slots[left_resolved.slot].resolution = right_resolved
            return

        if isinstance(right_resolved, TypeId):
            self.unify(right, left)
            return

        if left_resolved != right_resolved:
            raise TypeMismatchError(left_resolved, right_resolved)

    def type_of(self, name: str) -> Optional[TypeRepr]:
        """Resolved type of `name`, None if the name is unbound.

        An unresolved variable is reported as its `Id`; callers that show
        types to users treat that as "unknown".
        """
        ty = self.names.get(name)
        if ty is None:
            return None
        return self.resolve(ty)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> Tuple[List[TypeVar], Dict[str, TypeRepr]]:
        slots = [TypeVar(s.index, s.resolution) for s in self.slots]
        return slots, dict(self.names)

    def restore(self, snapshot: Tuple[List[TypeVar], Dict[str, TypeRepr]]):
        slots, names = snapshot
        self.slots = [TypeVar(s.index, s.resolution) for s in slots]
        self.names = dict(names)
