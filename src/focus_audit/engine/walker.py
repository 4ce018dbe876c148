"""Cycle-aware focus walker.

The tab order of a page cannot be enumerated ahead of time; it can only be
discovered by shifting focus and observing where it lands. The walker does
exactly that, one shift per step, and recognises loop closure the moment an
already visited element becomes active again.
"""

import logging
from typing import Dict, Hashable, Iterable, Optional, Tuple

from ..exceptions import StaleNodeError
from ..schemas import Direction, NodeSnapshot
from .. import debug

logger = logging.getLogger(__name__)


class WalkState:
    """Mutable state owned by one walk.

    ``visited`` is a hashed, insertion-ordered index of identities; its
    order is discovery order. ``pending`` holds the element the last shift
    landed on until the next step consumes it.
    """

    def __init__(
        self,
        direction: Direction = Direction.FORWARD,
        step_budget: int = 150,
        seed: Optional[Iterable[Hashable]] = None,
    ):
        """Initialize walk state.

        Args:
            direction: Which way each shift moves focus.
            step_budget: Maximum number of shifts this walk may issue.
            seed: Identities treated as already visited before the first step.
        """
        if step_budget < 0:
            raise ValueError(f"step_budget must be >= 0, got {step_budget}")
        self.direction = direction
        self.step_budget = step_budget
        self.visited: Dict[Hashable, int] = {}
        self.steps = 0
        self.stale_skips = 0
        self.last_move: Optional[Tuple[Optional[NodeSnapshot], Optional[NodeSnapshot]]] = None
        self.pending: Optional[NodeSnapshot] = None
        for identity in seed or ():
            self.visit(identity)

    def has_visited(self, identity: Hashable) -> bool:
        return identity in self.visited

    def visit(self, identity: Hashable) -> None:
        if identity in self.visited:
            raise ValueError(f"identity {identity!r} already visited")
        self.visited[identity] = len(self.visited)

    @property
    def exhausted(self) -> bool:
        return self.step_budget <= 0

    def consume(self) -> None:
        self.step_budget -= 1
        self.steps += 1

    @property
    def closing_arrival(self) -> Optional[NodeSnapshot]:
        """The pending arrival if it is already visited, else None."""
        if self.pending is not None and self.has_visited(self.pending.identity):
            return self.pending
        return None


class CycleAwareWalker:
    """Drives focus shifts on a host and detects loop closure."""

    async def step(self, host, state: WalkState) -> Tuple[Optional[NodeSnapshot], bool]:
        """Observe the active element and move past it.

        Args:
            host: FocusHost to drive.
            state: State of the walk in progress.

        Returns:
            (snapshot, closed_cycle). When the active identity was already
            visited, returns it with ``closed_cycle=True`` without shifting.
            Otherwise the identity is recorded, focus is shifted once, and the
            newly visited snapshot is returned. The snapshot is None when the
            observation was stale and skipped.

            The element the previous shift landed on is reused rather than
            read again; the host is only queried when there is no usable
            arrival (first step, or a stale arrival).

        Raises:
            HostCommunicationError: If the host cannot respond.
        """
        current = state.pending
        state.pending = None
        if current is None:
            current = await self._observe(host, state)

        if current is not None and state.has_visited(current.identity):
            debug.log_walk_step(state.direction.value, state.steps, current.describe(), closed_cycle=True)
            return current, True

        if current is not None:
            state.visit(current.identity)
            debug.log_walk_step(state.direction.value, state.steps, current.describe())

        arrived = await self._shift(host, state)
        state.last_move = (current, arrived)
        return current, False

    async def nudge(self, host, state: WalkState) -> Optional[NodeSnapshot]:
        """Shift again from an element that did not release focus.

        Consumes budget but never touches ``visited``: a stalled element is
        the trap classifier's concern, not a closed cycle.

        Returns:
            The snapshot observed after the shift, or None if stale.
        """
        before = state.last_move[1] if state.last_move else None
        arrived = await self._shift(host, state)
        state.last_move = (before, arrived)
        return arrived

    async def prime(self, host, count: int, direction: Direction = Direction.FORWARD) -> None:
        """Issue ``count`` unobserved shifts to position the focus cursor."""
        for _ in range(count):
            await host.shift_focus(direction)

    async def _shift(self, host, state: WalkState) -> Optional[NodeSnapshot]:
        await host.shift_focus(state.direction)
        state.consume()
        state.pending = await self._observe(host, state)
        return state.pending

    async def _observe(self, host, state: WalkState) -> Optional[NodeSnapshot]:
        try:
            return await host.get_active()
        except StaleNodeError as e:
            state.stale_skips += 1
            logger.info(f"Skipping stale observation at shift {state.steps}: {e}")
            return None
