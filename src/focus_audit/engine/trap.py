"""Keyboard trap classifier.

Consumes (before, after) pairs from the walker. A trap is declared the
first time the number of consecutive shifts that left focus in place
strictly exceeds the configured threshold.
"""

import logging
from typing import Optional

from ..schemas import Direction, NodeSnapshot, TrapVerdict
from .. import debug

logger = logging.getLogger(__name__)

DEFAULT_TRAP_THRESHOLD = 3


class TrapState:
    """Consecutive no-move counter for one walk."""

    def __init__(self):
        self.consecutive_no_move = 0
        self.verdict: Optional[TrapVerdict] = None


class TrapClassifier:
    """Flags elements that refuse to release focus.

    The threshold is policy: widgets that legitimately hold focus for a while
    (async transitions, modal dialogs) are handled by raising it, never by
    special-casing roles.
    """

    def __init__(self, threshold: int = DEFAULT_TRAP_THRESHOLD, direction: Direction = Direction.FORWARD):
        if threshold < 0:
            raise ValueError(f"threshold must be >= 0, got {threshold}")
        self.threshold = threshold
        self.direction = direction
        self.state = TrapState()

    @property
    def tripped(self) -> bool:
        return self.state.verdict is not None

    def observe(
        self,
        before: Optional[NodeSnapshot],
        after: Optional[NodeSnapshot],
        step_index: int,
    ) -> Optional[TrapVerdict]:
        """Feed one shift outcome.

        Args:
            before: Snapshot observed before the shift (None if stale).
            after: Snapshot observed after the shift (None if stale).
            step_index: Number of shifts issued so far in the walk.

        Returns:
            The TrapVerdict once declared (and on every later call), else None.
            Pairs with a stale side are ignored.
        """
        if self.tripped:
            return self.state.verdict
        if before is None or after is None:
            return None

        if before.identity != after.identity:
            self.state.consecutive_no_move = 0
            return None

        self.state.consecutive_no_move += 1
        debug.log_no_move(
            self.direction.value, step_index, after.describe(), self.state.consecutive_no_move
        )
        if self.state.consecutive_no_move > self.threshold:
            self.state.verdict = TrapVerdict(
                snapshot=after,
                step_index=step_index,
                direction=self.direction,
                consecutive_no_move=self.state.consecutive_no_move,
            )
            logger.error(f"Keyboard trap detected: {self.state.verdict.describe()}")
        return self.state.verdict

    @property
    def stalled(self) -> bool:
        """True while the most recent pair showed no movement."""
        return self.state.consecutive_no_move > 0 and not self.tripped
