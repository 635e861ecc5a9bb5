"""Resolver protocol, strategy selector and result dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from csvcalc.calc._parser import ExpressionNode


class ResolutionStrategy(str, Enum):
    """How the pending queue decides a table cannot be resolved.

    Both drain a FIFO queue, pushing a formula to the back while an operand
    is unresolved, so errors surface in the same order under either one.

    ``DEFERRED`` gives up after ``initial_size + 1`` deferrals. Long valid
    chains loaded in reverse order exceed that bound and are reported as
    cycles.

    ``TOPOLOGICAL`` gives up only when a full pass over the queue resolves
    nothing, and names the stuck cells from the dependency graph. Only
    genuine cycles are reported.
    """

    DEFERRED = "deferred"
    TOPOLOGICAL = "topological"


@dataclass(frozen=True)
class ResolutionResult:
    """Summary of one resolution session."""

    strategy: ResolutionStrategy
    resolved_cells: int  # formula cells written back to the table
    deferrals: int = 0  # re-queued nodes (deferred strategy only)
    max_chain_depth: int = 0  # longest chain of formula cells

    @property
    def had_formulas(self) -> bool:
        return self.resolved_cells > 0


@runtime_checkable
class Resolver(Protocol):
    """Protocol for formula resolution sessions."""

    def enqueue(self, node: ExpressionNode) -> None:
        """Add a parsed formula to the pending queue."""
        ...

    def resolve(self) -> ResolutionResult:
        """Drain the pending queue, writing results into the table.

        Raises a ``CalcError`` subclass on the first failure.
        """
        ...
