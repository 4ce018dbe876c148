"""Focus traversal engine: cycle-aware walking and keyboard trap detection."""

from .walker import CycleAwareWalker, WalkState
from .trap import TrapClassifier, TrapState, DEFAULT_TRAP_THRESHOLD
from .traversal import FocusTraversal

__all__ = [
    "CycleAwareWalker",
    "WalkState",
    "TrapClassifier",
    "TrapState",
    "DEFAULT_TRAP_THRESHOLD",
    "FocusTraversal",
]
