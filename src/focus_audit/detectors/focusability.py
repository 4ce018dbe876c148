"""Keyboard focusability of interactive elements (WCAG 2.1.1)."""

from typing import Iterable, List

from ..schemas import ClassifierResult, NodeSnapshot, Role

INTERACTIVE_SELECTOR = "a, button, input"


class FocusabilityClassifier:
    """Flags interactive elements removed from the tab order.

    An element fails when it carries ``tabindex="-1"``; a link additionally
    fails when it has no ``href``.
    """

    def classify(self, snapshot: NodeSnapshot) -> ClassifierResult:
        failures = []
        if (snapshot.attr("tabindex") or "").strip() == "-1":
            failures.append('tabindex="-1"')
        if snapshot.role == Role.LINK and snapshot.attr("href") is None:
            failures.append("link without href")

        if not failures:
            return ClassifierResult(passed=True)
        return ClassifierResult(
            passed=False,
            failures=failures,
            evidence=[f"{snapshot.html_snippet()} ({', '.join(failures)})"],
        )

    def classify_all(self, snapshots: Iterable[NodeSnapshot]) -> List[ClassifierResult]:
        """Classify every displayed, enabled snapshot."""
        return [self.classify(s) for s in snapshots if s.is_classifiable]
