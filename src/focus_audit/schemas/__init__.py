"""Pydantic schemas for focus audit observations and verdicts.

This package provides the data models shared by the traversal engine,
the classifiers and the reporting layer.
"""

from .schemas import (
    Role,
    Direction,
    CheckStatus,
    Geometry,
    NodeSnapshot,
    LayoutMetrics,
    TrapVerdict,
    WalkResult,
    ClassifierResult,
    FocusIndicatorResult,
    TouchTargetResult,
    InputSemanticsResult,
    ViewportResult,
    OrientationResult,
    MenuResult,
    ReadabilityResult,
    Verdict,
    AuditReport,
)

from .utils import (
    get_json_schema,
    get_report_schema,
    validate_and_parse,
    format_report,
)

__all__ = [
    # Models
    "Role",
    "Direction",
    "CheckStatus",
    "Geometry",
    "NodeSnapshot",
    "LayoutMetrics",
    "TrapVerdict",
    "WalkResult",
    "ClassifierResult",
    "FocusIndicatorResult",
    "TouchTargetResult",
    "InputSemanticsResult",
    "ViewportResult",
    "OrientationResult",
    "MenuResult",
    "ReadabilityResult",
    "Verdict",
    "AuditReport",
    # Utilities
    "get_json_schema",
    "get_report_schema",
    "validate_and_parse",
    "format_report",
]
