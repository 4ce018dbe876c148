"""Viewport zoom policy (WCAG 1.4.4)."""

from typing import Optional

from ..schemas import ViewportResult
from .css import parse_number, parse_viewport_content


class ViewportPolicyEvaluator:
    """Decides whether the viewport declaration allows pinch zoom.

    In the default lax mode ``maximum-scale=1`` is a substring test, so
    ``maximum-scale=10`` is rejected too. Strict mode parses the directives
    and rejects only a maximum scale of 1 or less.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def evaluate(self, content: Optional[str]) -> ViewportResult:
        """Evaluate a viewport meta ``content`` value.

        Args:
            content: The declaration's content, or None when no viewport
                meta tag exists.
        """
        if content is None:
            return ViewportResult(
                passed=False,
                missing=True,
                failures=["missing viewport declaration"],
            )

        if self.strict:
            failures = self._strict_failures(content)
        else:
            failures = self._lax_failures(content)

        return ViewportResult(
            passed=not failures,
            content=content,
            failures=failures,
            evidence=[f'Viewport: <meta name="viewport" content="{content}">'],
        )

    def _lax_failures(self, content: str) -> list:
        failures = []
        if "user-scalable=no" in content or "user-scalable=0" in content:
            failures.append("user-scalable=no prevents zoom")
        if "maximum-scale=1" in content:
            failures.append("maximum-scale=1.0 prevents zoom")
        return failures

    def _strict_failures(self, content: str) -> list:
        failures = []
        directives = parse_viewport_content(content)
        if directives.get("user-scalable") in ("no", "0"):
            failures.append("user-scalable=no prevents zoom")
        maximum = parse_number(directives.get("maximum-scale"))
        if maximum is not None and maximum <= 1:
            failures.append("maximum-scale=1.0 prevents zoom")
        return failures
