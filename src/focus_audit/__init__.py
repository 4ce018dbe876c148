"""Keyboard focus traversal and mobile accessibility auditing."""

from .auditor import AccessibilityAuditor, run_audit, run_device_audits
from .config import AuditConfig, load_config
from .engine import CycleAwareWalker, FocusTraversal, TrapClassifier, WalkState
from .exceptions import (
    FocusAuditError,
    HostCommunicationError,
    SettleTimeoutError,
    StaleNodeError,
)
from .host import FocusHost, PlaywrightFocusHost
from .schemas import AuditReport, CheckStatus, Direction, NodeSnapshot, Verdict

__version__ = "0.1.0"

__all__ = [
    "AccessibilityAuditor",
    "run_audit",
    "run_device_audits",
    "AuditConfig",
    "load_config",
    "CycleAwareWalker",
    "FocusTraversal",
    "TrapClassifier",
    "WalkState",
    "FocusAuditError",
    "HostCommunicationError",
    "SettleTimeoutError",
    "StaleNodeError",
    "FocusHost",
    "PlaywrightFocusHost",
    "AuditReport",
    "CheckStatus",
    "Direction",
    "NodeSnapshot",
    "Verdict",
]
