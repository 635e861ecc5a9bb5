"""Dependency graph for formula cells with topological ordering."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from csvcalc._errors import CycleDetectedError

if TYPE_CHECKING:
    from csvcalc._table import CellRef
    from csvcalc.calc._parser import ExpressionNode


class DependencyGraph:
    """Tracks formula cell dependencies for evaluation ordering.

    Cells are keyed by :class:`CellRef`. Insertion order is kept so that
    independent formulas are ordered as they were loaded.
    """

    __slots__ = ("dependencies", "dependents", "formulas")

    def __init__(self) -> None:
        # cell -> cells it reads from
        self.dependencies: dict[CellRef, set[CellRef]] = {}
        # cell -> cells that read from it (reverse edges)
        self.dependents: dict[CellRef, list[CellRef]] = {}
        # formula cell -> its expression
        self.formulas: dict[CellRef, ExpressionNode] = {}

    def add_formula(self, cell: CellRef, node: ExpressionNode) -> None:
        """Register a formula cell and the two cells it reads."""
        self.formulas[cell] = node
        refs = {node.first, node.second}
        self.dependencies[cell] = refs

        for ref in (node.first, node.second):
            readers = self.dependents.setdefault(ref, [])
            if cell not in readers:
                readers.append(cell)

    def topological_order(self) -> list[CellRef]:
        """Return formula cells in evaluation order (Kahn's algorithm).

        Raises CycleDetectedError naming every formula cell that is part of,
        or depends on, a circular reference.
        """
        formula_cells = set(self.formulas)
        if not formula_cells:
            return []

        # Only deps that are themselves formula cells hold a cell back
        in_degree: dict[CellRef, int] = {
            cell: len(self.dependencies[cell] & formula_cells)
            for cell in formula_cells
        }

        queue: deque[CellRef] = deque(
            cell for cell in self.formulas if in_degree[cell] == 0
        )

        order: list[CellRef] = []
        while queue:
            cell = queue.popleft()
            order.append(cell)
            for dep in self.dependents.get(cell, ()):
                if dep in self.formulas:
                    in_degree[dep] -= 1
                    if in_degree[dep] == 0:
                        queue.append(dep)

        if len(order) != len(self.formulas):
            seen = set(order)
            missing = [str(cell) for cell in self.formulas if cell not in seen]
            raise CycleDetectedError(missing)

        return order

    @classmethod
    def from_nodes(
        cls, nodes: list[tuple[CellRef, ExpressionNode]],
    ) -> DependencyGraph:
        """Build a graph from ``(target ref, node)`` pairs in load order."""
        graph = cls()
        for cell, node in nodes:
            graph.add_formula(cell, node)
        return graph
