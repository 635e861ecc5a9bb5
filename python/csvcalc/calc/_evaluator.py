"""ResolutionSession: evaluates the pending formulas of one loaded table.

Both strategies (see :class:`ResolutionStrategy`) drain the same FIFO
queue. The front formula is evaluated once both operands are resolved and
pushed to the back otherwise, so lookups, self-reference checks and
arithmetic always run in queue order and the first error raised is the
same under either strategy. They differ only in when they give up:

``topological``
    Gives up once every queued formula has been deferred since the last
    one resolved. Nothing can make progress at that point, so the cells
    left in the queue are reported via :class:`DependencyGraph`. Only
    genuine cycles, and the formulas waiting on them, are reported.

``deferred``
    Gives up with ``CycleDetectedError`` once the deferral count exceeds
    ``initial_size + 1``, which also rejects valid chains that need more
    retries than that (a reversed chain of four formulas already does).
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from csvcalc._errors import CycleDetectedError, SelfReferenceError
from csvcalc._table import UNRESOLVED
from csvcalc.calc._arithmetic import UINT32_MAX, ArithmeticFault, apply
from csvcalc.calc._graph import DependencyGraph
from csvcalc.calc._protocol import ResolutionResult, ResolutionStrategy

if TYPE_CHECKING:
    from csvcalc._table import Table
    from csvcalc.calc._parser import ExpressionNode

logger = logging.getLogger(__name__)

Coord = tuple[int, int]


class ResolutionSession:
    """Owns the pending queue for one table and resolves it.

    Usage::

        session = ResolutionSession(table)
        session.enqueue(parse_formula("=A1+B1", row, col))
        result = session.resolve()
    """

    def __init__(
        self,
        table: Table,
        strategy: ResolutionStrategy = ResolutionStrategy.TOPOLOGICAL,
        max_value: int = UINT32_MAX,
    ) -> None:
        self._table = table
        self._strategy = ResolutionStrategy(strategy)
        self._max_value = max_value
        self._queue: deque[ExpressionNode] = deque()
        self._deferrals = 0
        self._resolved = 0

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def strategy(self) -> ResolutionStrategy:
        return self._strategy

    @property
    def max_value(self) -> int:
        return self._max_value

    def enqueue(self, node: ExpressionNode) -> None:
        self._queue.append(node)

    def resolve(self) -> ResolutionResult:
        """Evaluate every pending formula, writing results into the table.

        Raises the first ``CalcError`` encountered; the table is then left
        partially resolved and should be discarded.
        """
        depth = self._drain_queue()

        result = ResolutionResult(
            strategy=self._strategy,
            resolved_cells=self._resolved,
            deferrals=self._deferrals,
            max_chain_depth=depth,
        )
        logger.info(
            "Resolved %d formula cells (%s, %d deferrals, depth %d)",
            result.resolved_cells, result.strategy.value,
            result.deferrals, result.max_chain_depth,
        )
        return result

    # ------------------------------------------------------------------
    # Queue drain
    # ------------------------------------------------------------------

    def _drain_queue(self) -> int:
        initial_size = len(self._queue)
        self._deferrals = 0
        # deferrals in a row since the last formula resolved
        stalled = 0
        depth: dict[Coord, int] = {}

        while self._queue:
            node = self._queue[0]
            first_at, second_at = self._locate(node)
            first = self._table.get_cell(*first_at)
            second = self._table.get_cell(*second_at)

            if first is UNRESOLVED or second is UNRESOLVED:
                self._queue.rotate(-1)
                self._deferrals += 1
                stalled += 1
                logger.debug("Deferred %s (%d in a row)", node.source, stalled)
                self._check_progress(stalled, initial_size)
                continue

            self._compute(node, first, second)
            self._queue.popleft()
            stalled = 0
            depth[node.target] = 1 + max(
                depth.get(first_at, 0), depth.get(second_at, 0),
            )

        return max(depth.values(), default=0)

    def _check_progress(self, stalled: int, initial_size: int) -> None:
        """Raise CycleDetectedError when the drain should give up."""
        if self._strategy is ResolutionStrategy.DEFERRED:
            if self._deferrals > initial_size + 1:
                raise CycleDetectedError()
        elif stalled >= len(self._queue):
            self._raise_cycle()

    def _raise_cycle(self) -> None:
        # Every queued formula waits on another queued formula, so Kahn's
        # algorithm over the queue orders none of them.
        stuck = sorted(self._queue, key=lambda node: node.target)
        graph = DependencyGraph.from_nodes(
            [(self._table.ref_for(*node.target), node) for node in stuck],
        )
        graph.topological_order()
        raise CycleDetectedError([str(cell) for cell in graph.formulas])

    # ------------------------------------------------------------------
    # Per-formula steps
    # ------------------------------------------------------------------

    def _locate(self, node: ExpressionNode) -> tuple[Coord, Coord]:
        """Look up both operands, rejecting references to the target itself."""
        coords = []
        for ref in (node.first, node.second):
            coord = self._table.lookup(ref.column, ref.row_id)
            if coord == node.target:
                raise SelfReferenceError(str(self._table.ref_for(*node.target)))
            coords.append(coord)
        return coords[0], coords[1]

    def _compute(self, node: ExpressionNode, first: int, second: int) -> None:
        outcome = apply(node.op, first, second, self._max_value)
        if isinstance(outcome, ArithmeticFault):
            raise outcome.to_error(str(self._table.ref_for(*node.target)))
        self._table.set_cell(*node.target, outcome)
        self._resolved += 1
        logger.debug(
            "%s %s = %d", self._table.ref_for(*node.target), node.source, outcome,
        )
