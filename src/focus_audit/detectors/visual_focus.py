"""Visible focus indication.

A focused element passes when any one of three signals is present: an
outline, a coloured box-shadow, or a coloured border.
"""

from ..schemas import FocusIndicatorResult, NodeSnapshot
from .css import (
    INVISIBLE_STYLES,
    find_lengths,
    find_style_keyword,
    parse_colors,
    parse_length,
)


class VisualFocusClassifier:
    """Classifies whether a focused snapshot shows a visible indicator."""

    def __init__(self, strict: bool = False):
        """Initialize classifier.

        Args:
            strict: Parse CSS values instead of substring matching.
        """
        self.strict = strict

    def classify(self, snapshot: NodeSnapshot) -> FocusIndicatorResult:
        """Evaluate the three focus signals on a snapshot taken while focused."""
        if self.strict:
            signals = self._strict_signals(snapshot)
        else:
            signals = self._lax_signals(snapshot)

        if signals:
            return FocusIndicatorResult(
                passed=True,
                signals=signals,
                evidence=[f"{snapshot.describe()}: {', '.join(signals)}"],
            )
        return FocusIndicatorResult(
            passed=False,
            failures=["no visible focus indicator"],
            evidence=[f"{snapshot.describe()}: {snapshot.html_snippet()}"],
        )

    def _lax_signals(self, snapshot: NodeSnapshot) -> list:
        signals = []
        outline = snapshot.style("outline")
        box_shadow = snapshot.style("box-shadow")
        border = snapshot.style("border")

        if "none" not in outline and snapshot.style("outline-width") != "0px":
            signals.append("outline")
        if "rgb" in box_shadow and "rgba(0, 0, 0, 0)" not in box_shadow:
            signals.append("box-shadow")
        if "rgb" in border:
            signals.append("border")
        return signals

    def _strict_signals(self, snapshot: NodeSnapshot) -> list:
        signals = []

        outline = snapshot.style("outline")
        outline_style = snapshot.style("outline-style") or find_style_keyword(outline)
        width = parse_length(snapshot.style("outline-width"))
        if width is None:
            lengths = find_lengths(outline)
            width = lengths[0] if lengths else None
        if outline_style and outline_style not in INVISIBLE_STYLES and width and width.value > 0:
            signals.append("outline")

        box_shadow = snapshot.style("box-shadow")
        if box_shadow and box_shadow != "none":
            if any(color.visible for color in parse_colors(box_shadow)):
                signals.append("box-shadow")

        border = snapshot.style("border")
        border_style = find_style_keyword(border)
        border_widths = find_lengths(border)
        if (
            border_style not in INVISIBLE_STYLES
            and border_style is not None
            and any(length.value > 0 for length in border_widths)
            and any(color.visible for color in parse_colors(border))
        ):
            signals.append("border")

        return signals
