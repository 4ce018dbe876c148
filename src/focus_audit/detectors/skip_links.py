"""Skip links among the first focus stops (WCAG 2.4.1)."""

from typing import Iterable

from ..schemas import ClassifierResult, NodeSnapshot

SKIP_TO_CONTENT = "Skip to Content/Main"
SKIP_TO_FOOTER = "Skip to Footer"

SKIP_LINK_PHRASES = {
    SKIP_TO_CONTENT: ("skip to content", "skip to main"),
    SKIP_TO_FOOTER: ("skip to footer",),
}


class SkipLinkClassifier:
    """Looks for bypass links in visible text or aria-label."""

    def kinds(self, snapshot: NodeSnapshot) -> set:
        """Skip link kinds a single focus stop provides."""
        haystacks = (snapshot.text.lower(), (snapshot.attr("aria-label") or "").lower())
        found = set()
        for kind, phrases in SKIP_LINK_PHRASES.items():
            if any(phrase in text for phrase in phrases for text in haystacks):
                found.add(kind)
        return found

    def classify(self, focus_stops: Iterable[NodeSnapshot]) -> ClassifierResult:
        """Pass only when every skip link kind appears among ``focus_stops``."""
        found = set()
        for snapshot in focus_stops:
            found |= self.kinds(snapshot)

        missing = [kind for kind in SKIP_LINK_PHRASES if kind not in found]
        evidence = []
        if found:
            evidence.append(f"Found: {', '.join(k for k in SKIP_LINK_PHRASES if k in found)}")
        if missing:
            evidence.append(f"Missing: {', '.join(missing)}")
        return ClassifierResult(
            passed=not missing,
            failures=[f"missing {kind}" for kind in missing],
            evidence=evidence,
        )
