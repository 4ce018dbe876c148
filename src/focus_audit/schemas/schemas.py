"""Pydantic schemas for focus audit observations, results and verdicts.

This module defines the data models shared by the traversal engine, the
classifiers and the reporting layer. Observations are immutable; verdicts
are plain records that the reporting layer formats and persists.
"""

from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from typing import Any, Optional, List, Dict
from datetime import datetime


class Role(str, Enum):
    """Semantic kind of a focusable element."""

    LINK = "link"
    BUTTON = "button"
    INPUT = "input"
    GENERIC = "generic"


class Direction(str, Enum):
    """Direction of a focus shift (Tab or Shift+Tab)."""

    FORWARD = "forward"
    BACKWARD = "backward"


class CheckStatus(str, Enum):
    """Outcome of a single check."""

    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"
    ERROR = "error"


class Geometry(BaseModel):
    """Rendered size of an element in device pixels."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(0, ge=0, description="Rendered width in pixels")
    height: float = Field(0, ge=0, description="Rendered height in pixels")

    def __str__(self) -> str:
        return f"{self.width:g}x{self.height:g}px"


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class NodeSnapshot(BaseModel):
    """Read of one element's observable state at one observation instant.

    Snapshots are created fresh on every observation and never mutated.
    ``identity`` is an opaque handle usable only for equality comparison
    within the current walk; it must never be used to re-locate the element.
    """

    model_config = ConfigDict(frozen=True)

    identity: Any = Field(..., description="Opaque, hashable element handle")
    role: Role = Field(default=Role.GENERIC, description="Semantic kind")
    tag_name: str = Field(default="", description="Lower-case element tag")
    geometry: Geometry = Field(default_factory=Geometry)
    attributes: Dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="Attribute name to value (None when absent)",
    )
    visual_style: Dict[str, str] = Field(
        default_factory=dict,
        description="Computed style property to value",
    )
    text: str = Field(default="", description="Visible text content")
    displayed: bool = Field(default=True)
    enabled: bool = Field(default=True)

    def attr(self, name: str) -> Optional[str]:
        """Return an attribute value, or None when the attribute is absent."""
        return self.attributes.get(name)

    def style(self, name: str) -> str:
        """Return a computed style value, or an empty string."""
        return self.visual_style.get(name) or ""

    @property
    def is_classifiable(self) -> bool:
        """Non-displayed and disabled nodes are excluded from classification."""
        return self.displayed and self.enabled

    def describe(self) -> str:
        """Short evidence line: tag, id, truncated text and href."""
        info = self.tag_name or self.role.value
        element_id = self.attr("id")
        if element_id:
            info += f" (id={element_id})"
        text = self.text.strip()
        if text:
            info += f' - Text: "{_truncate(text, 50).strip()}"'
        href = self.attr("href")
        if self.role == Role.LINK and href is not None:
            info += f" [href: {_truncate(href, 60)}]"
        return info

    def html_snippet(self) -> str:
        """Approximate HTML for the element, used as failure evidence."""
        tag = self.tag_name or "div"
        parts = [tag]
        for name in ("id", "class"):
            value = self.attr(name)
            if value is not None:
                parts.append(f'{name}="{value}"')
        if tag == "a" and self.attr("href") is not None:
            parts.append(f'href="{self.attr("href")}"')
        if tag == "input":
            if self.attr("type") is not None:
                parts.append(f'type="{self.attr("type")}"')
            return "<" + " ".join(parts) + ">"
        body = self.text.strip() or "[No text]"
        return "<" + " ".join(parts) + f">{body}</{tag}>"


class LayoutMetrics(BaseModel):
    """Page width measurements used by the horizontal overflow check."""

    viewport_width: int = Field(..., description="window.innerWidth")
    viewport_height: int = Field(0, description="window.innerHeight")
    document_width: int = Field(..., description="documentElement.scrollWidth")
    client_width: int = Field(0, description="documentElement.clientWidth")


class TrapVerdict(BaseModel):
    """Terminal result of the trap classifier for one walk."""

    snapshot: NodeSnapshot = Field(..., description="Element that kept focus")
    step_index: int = Field(..., description="Shift count at which the trap was declared")
    direction: Direction
    consecutive_no_move: int = Field(..., description="Consecutive shifts without movement")

    def describe(self) -> str:
        return (
            f"Focus trapped on {self.snapshot.describe()} after "
            f"{self.consecutive_no_move} {self.direction.value} shifts without movement "
            f"(shift #{self.step_index})"
        )


class WalkResult(BaseModel):
    """Outcome of one bounded focus walk."""

    direction: Direction
    visited: List[NodeSnapshot] = Field(
        default_factory=list,
        description="Newly visited snapshots in discovery order",
    )
    closed_cycle: bool = Field(False, description="The active identity repeated")
    closing_snapshot: Optional[NodeSnapshot] = Field(
        None, description="The repeated node that closed the cycle"
    )
    steps: int = Field(0, description="Focus shifts issued")
    stopped_by_budget: bool = Field(False)
    stale_skips: int = Field(0, description="Observations skipped as stale")
    trap: Optional[TrapVerdict] = None

    @property
    def summary(self) -> str:
        if self.trap is not None:
            return self.trap.describe()
        if self.closed_cycle:
            return (
                f"Completed full {self.direction.value} cycle: "
                f"{len(self.visited)} unique elements in {self.steps} shifts"
            )
        if self.stopped_by_budget:
            return f"stopped at {self.steps} steps without closing the cycle"
        return f"Walk ended after {self.steps} shifts"


class ClassifierResult(BaseModel):
    """Common shape of a stateless classifier result.

    ``failures`` holds one entry per failed sub-check so that a report can
    name every missing condition for the same element.
    """

    passed: bool
    failures: List[str] = Field(default_factory=list)
    evidence: List[str] = Field(default_factory=list)


class FocusIndicatorResult(ClassifierResult):
    """Visible focus indication for one snapshot."""

    signals: List[str] = Field(
        default_factory=list, description="Signals that indicated visible focus"
    )


class TouchTargetResult(ClassifierResult):
    """Touch target size check for one snapshot."""

    role: Role = Role.GENERIC
    width: float = 0
    height: float = 0


class InputSemanticsResult(ClassifierResult):
    """Label and type adequacy of one input."""

    has_label: bool = False
    label_source: Optional[str] = Field(
        None, description="'label' or 'placeholder' when the label check passed"
    )
    valid_type: bool = False
    input_type: Optional[str] = None


class ViewportResult(ClassifierResult):
    """Zoom policy derived from the viewport meta declaration."""

    missing: bool = False
    content: Optional[str] = None


class OrientationResult(ClassifierResult):
    """Interactive element counts under both orientations."""

    portrait_count: int = 0
    landscape_count: int = 0


class MenuResult(ClassifierResult):
    """Completeness of the mobile menu toggle."""

    found: bool = True
    missing: List[str] = Field(default_factory=list)


class ReadabilityResult(ClassifierResult):
    """Tolerance ratio of small text among checked text nodes."""

    small_count: int = 0
    good_count: int = 0


class Verdict(BaseModel):
    """A single check outcome handed to the reporting layer."""

    check_name: str = Field(..., description="Human readable check name")
    status: CheckStatus
    summary: str = Field(..., description="One line outcome")
    evidence: List[str] = Field(default_factory=list)
    expected: Optional[str] = Field(
        None, description="What a passing page looks like, with WCAG references"
    )
    timestamp: datetime = Field(default_factory=datetime.now)


class AuditReport(BaseModel):
    """In-memory sink for verdicts produced during one audited session."""

    target_url: str = Field(..., description="The URL that was audited.")
    device: Optional[str] = Field(None, description="Emulated device profile name")
    timestamp: datetime = Field(default_factory=datetime.now)
    verdicts: List[Verdict] = Field(default_factory=list)

    def record(self, verdict: Verdict) -> Verdict:
        """Append a verdict, returning it for chaining."""
        self.verdicts.append(verdict)
        return verdict

    def by_status(self, status: CheckStatus) -> List[Verdict]:
        return [v for v in self.verdicts if v.status == status]

    def get(self, check_name: str) -> Optional[Verdict]:
        """Return the most recent verdict for a check name."""
        for verdict in reversed(self.verdicts):
            if verdict.check_name == check_name:
                return verdict
        return None

    @property
    def counts(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in CheckStatus}
        for verdict in self.verdicts:
            counts[verdict.status.value] += 1
        return counts

    @property
    def passed(self) -> bool:
        """True when no check failed or errored."""
        return not any(
            v.status in (CheckStatus.FAILED, CheckStatus.ERROR) for v in self.verdicts
        )
