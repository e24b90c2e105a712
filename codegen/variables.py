"""
Global Variable Table

Maps variable names to the storage cells the backend allocated for them.
The table is shared by every unit of a session: a cell is created by the
first statement that assigns the name and reused by every later one.

Cells created while a statement is being compiled are staged and only
become part of the table once that statement's unit has been linked.
"""

from typing import Any, Dict, List, Optional


class GlobalVariableTable:
    """name -> storage cell handle"""

    def __init__(self):
        self.cells: Dict[str, Any] = {}
        self.staged: Dict[str, Any] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.cells or name in self.staged

    def __len__(self) -> int:
        return len(self.cells)

    def lookup(self, name: str) -> Optional[Any]:
        cell = self.staged.get(name)
        if cell is None:
            cell = self.cells.get(name)
        return cell

    def stage(self, name: str, cell: Any):
        if name in self:
            raise KeyError(f"Variable '{name}' already has a storage cell")
        self.staged[name] = cell

    def commit(self):
        self.cells.update(self.staged)
        self.staged.clear()

    def discard(self):
        self.staged.clear()

    def names(self) -> List[str]:
        return sorted(self.cells)
