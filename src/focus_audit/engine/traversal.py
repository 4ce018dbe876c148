"""Bounded focus walks.

FocusTraversal binds a CycleAwareWalker, a fresh WalkState and, when trap
detection is requested, a TrapClassifier into one walk. Every walk carries
an explicit step budget; running out of budget is a reported termination,
not an error.
"""

import logging
from typing import Hashable, Iterable, Optional

from ..schemas import Direction, WalkResult
from .trap import DEFAULT_TRAP_THRESHOLD, TrapClassifier
from .walker import CycleAwareWalker, WalkState

logger = logging.getLogger(__name__)


class FocusTraversal:
    """Runs one walk at a time against a host."""

    def __init__(self, walker: Optional[CycleAwareWalker] = None):
        self.walker = walker or CycleAwareWalker()

    async def walk(
        self,
        host,
        direction: Direction = Direction.FORWARD,
        step_budget: int = 150,
        detect_traps: bool = False,
        trap_threshold: int = DEFAULT_TRAP_THRESHOLD,
        prime_steps: int = 0,
        prime_direction: Direction = Direction.FORWARD,
        seed: Optional[Iterable[Hashable]] = None,
    ) -> WalkResult:
        """Walk the focus order until the cycle closes, a trap is found, or budget runs out.

        Args:
            host: FocusHost to drive. The caller guarantees no other walk is
                in flight on it.
            direction: Direction of every shift in the walk.
            step_budget: Maximum number of shifts.
            detect_traps: Feed every shift to a TrapClassifier and stop at the
                first trap.
            trap_threshold: Consecutive no-move shifts tolerated.
            prime_steps: Unobserved shifts issued before the walk starts
                (e.g. Tab into the page, or forward before a backward walk).
            prime_direction: Direction of the priming shifts.
            seed: Identities treated as already visited.

        Returns:
            WalkResult describing how the walk ended.

        Raises:
            HostCommunicationError: If the host fails; the caller converts it
                into an Error verdict.
        """
        if prime_steps:
            await self.walker.prime(host, prime_steps, prime_direction)

        state = WalkState(direction=direction, step_budget=step_budget, seed=seed)
        trap = TrapClassifier(trap_threshold, direction) if detect_traps else None
        result = WalkResult(direction=direction)

        while not state.exhausted:
            snapshot, closed_cycle = await self.walker.step(host, state)
            if closed_cycle:
                result.closed_cycle = True
                result.closing_snapshot = snapshot
                break
            if snapshot is not None:
                result.visited.append(snapshot)

            if trap is None:
                continue

            before, after = state.last_move
            trap.observe(before, after, state.steps)
            while trap.stalled and not state.exhausted:
                after = await self.walker.nudge(host, state)
                trap.observe(state.last_move[0], after, state.steps)
            if trap.tripped:
                result.trap = trap.state.verdict
                break

        # The last shift's arrival costs no budget to inspect.
        if state.exhausted and not result.closed_cycle and result.trap is None:
            closing = state.closing_arrival
            if closing is not None and not (trap is not None and trap.stalled):
                result.closed_cycle = True
                result.closing_snapshot = closing

        result.steps = state.steps
        result.stale_skips = state.stale_skips
        result.stopped_by_budget = (
            state.exhausted and not result.closed_cycle and result.trap is None
        )
        if result.stopped_by_budget:
            logger.info(f"{direction.value} walk {result.summary}")
        else:
            logger.info(result.summary)
        return result
