"""Single-pointer alternatives for swipe widgets (WCAG 2.5.1)."""

from ..schemas import CheckStatus, ClassifierResult

CAROUSEL_SELECTOR = "[class*='carousel'], [class*='slider']"
CAROUSEL_BUTTON_SELECTOR = "[class*='carousel'] button, [class*='next'], [class*='prev']"


class GestureAlternativeClassifier:
    """Carousels should expose next/previous buttons."""

    def classify(self, carousel_count: int, button_count: int) -> ClassifierResult:
        if carousel_count == 0:
            return ClassifierResult(passed=False, evidence=["No carousels or sliders found"])

        evidence = [f"{carousel_count} carousels found"]
        if button_count == 0:
            evidence.append("No navigation buttons")
            return ClassifierResult(
                passed=False, failures=["no navigation buttons"], evidence=evidence
            )
        evidence.append(f"Has {button_count} nav buttons")
        return ClassifierResult(passed=True, evidence=evidence)

    @staticmethod
    def status(result: ClassifierResult) -> CheckStatus:
        """Both an absent carousel and a missing button are warnings."""
        return CheckStatus.PASSED if result.passed else CheckStatus.WARNING
