"""Auditor: runs every keyboard and mobile accessibility check against a host.

Each check reloads the page, drives the host, hands the observations to a
stateless classifier and records exactly one Verdict. Host failures are
caught at the check boundary and become an Error verdict for that check
only; the remaining checks still run.
"""

import asyncio
import logging
from collections import defaultdict
from functools import wraps
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from playwright.async_api import Error as PlaywrightError

from .config import AuditConfig
from .debug import log_performance_summary, reset_debug_state, timed_check
from .detectors import (
    FocusabilityClassifier,
    GestureAlternativeClassifier,
    InputSemanticsClassifier,
    MenuCompletenessClassifier,
    OrientationComparator,
    OverflowEvaluator,
    ReadabilityRatioCheck,
    SkipLinkClassifier,
    TouchTargetClassifier,
    ViewportPolicyEvaluator,
    VisualFocusClassifier,
)
from .detectors.focusability import INTERACTIVE_SELECTOR
from .detectors.gestures import CAROUSEL_BUTTON_SELECTOR, CAROUSEL_SELECTOR
from .detectors.menu import MENU_SELECTOR
from .detectors.orientation import INTERACTIVE_SELECTOR as ORIENTATION_SELECTOR
from .detectors.readability import TEXT_SELECTOR
from .engine import FocusTraversal
from .exceptions import FocusAuditError, StaleNodeError
from .host import FocusHost, SessionManager, get_device_profile
from .schemas import AuditReport, CheckStatus, Direction, NodeSnapshot, Role, Verdict

logger = logging.getLogger(__name__)

DOCUMENT_ROOT_TAGS = ("body", "html")
FORM_INPUT_SELECTOR = "input"
MAX_EVIDENCE_ITEMS = 25

CheckOutcome = Tuple[CheckStatus, str, List[str]]


def is_document_root(snapshot: NodeSnapshot) -> bool:
    """Focus resting on the document itself is not a focus stop."""
    return snapshot.tag_name in DOCUMENT_ROOT_TAGS


def _label_selector(element_id: str) -> str:
    escaped = element_id.replace("\\", "\\\\").replace('"', '\\"')
    return f'label[for="{escaped}"]'


def audit_check(check_name: str, expected: str) -> Callable:
    """Turn a coroutine returning (status, summary, evidence) into a recorded check.

    The page is reloaded before the check runs. Any FocusAuditError raised
    by the host ends the check with an Error verdict.
    """
    def decorator(func: Callable) -> Callable:
        @timed_check(check_name)
        @wraps(func)
        async def wrapper(self, *args, **kwargs) -> Verdict:
            logger.info(f"=== {check_name} ===")
            try:
                await self.host.reset()
                status, summary, evidence = await func(self, *args, **kwargs)
            except FocusAuditError as e:
                logger.error(f"{check_name}: ERROR - {e}")
                status, summary, evidence = CheckStatus.ERROR, str(e), []

            if len(evidence) > MAX_EVIDENCE_ITEMS:
                hidden = len(evidence) - MAX_EVIDENCE_ITEMS
                evidence = evidence[:MAX_EVIDENCE_ITEMS] + [f"... and {hidden} more"]

            verdict = Verdict(
                check_name=check_name,
                status=status,
                summary=summary,
                evidence=evidence,
                expected=expected,
            )
            if status == CheckStatus.PASSED:
                logger.info(f"PASSED: {summary}")
            elif status == CheckStatus.WARNING:
                logger.warning(f"WARNING: {summary}")
            elif status == CheckStatus.FAILED:
                logger.error(f"FAILED: {summary}")
            return self.report.record(verdict)

        return wrapper
    return decorator


class AccessibilityAuditor:
    """Runs keyboard and mobile checks against one FocusHost.

    The auditor owns no browser state; the host it is given belongs to the
    caller's session and must not be driven by anything else meanwhile.
    """

    def __init__(
        self,
        host: FocusHost,
        config: Optional[AuditConfig] = None,
        report: Optional[AuditReport] = None,
    ):
        """Initialize the auditor.

        Args:
            host: FocusHost positioned on the page under audit.
            config: Policy constants; defaults apply when omitted.
            report: Sink for verdicts; a new one is created when omitted.
        """
        self.host = host
        self.config = config or AuditConfig()
        self.report = report or AuditReport(
            target_url=getattr(host, "url", None) or "", device=self.config.device
        )
        self.traversal = FocusTraversal()

        strict = self.config.strict_css
        self.visual_focus = VisualFocusClassifier(strict=strict)
        self.touch_target = TouchTargetClassifier(self.config.min_target_size)
        self.input_semantics = InputSemanticsClassifier()
        self.viewport_policy = ViewportPolicyEvaluator(strict=strict)
        self.orientation = OrientationComparator()
        self.menu = MenuCompletenessClassifier(self.config.min_target_size)
        self.readability = ReadabilityRatioCheck(
            self.config.readability_min_font_px, self.config.readability_tolerance
        )
        self.focusability = FocusabilityClassifier()
        self.skip_links = SkipLinkClassifier()
        self.gestures = GestureAlternativeClassifier()
        self.overflow = OverflowEvaluator(self.config.overflow_tolerance_px)

    # ------------------------------------------------------------------
    # Keyboard checks
    # ------------------------------------------------------------------

    @audit_check(
        "Tab Navigation - Forward Tab Order",
        "All interactive elements reachable with Tab in a logical order - WCAG 2.1.1, 2.4.3",
    )
    async def check_tab_navigation(self) -> CheckOutcome:
        result = await self.traversal.walk(
            self.host,
            Direction.FORWARD,
            step_budget=self.config.tab_walk_budget,
            prime_steps=1,
        )
        stops = [s for s in result.visited if not is_document_root(s)]
        evidence = [f"{i}. {s.describe()}" for i, s in enumerate(stops, 1)]
        if not stops:
            return CheckStatus.WARNING, "No focusable elements found", evidence
        return CheckStatus.PASSED, f"{len(stops)} focusable elements. {result.summary}", evidence

    @audit_check(
        "Interactive Elements - Validate Tabindex and Focusability",
        'No interactive element uses tabindex="-1" and every link has an href - WCAG 2.1.1',
    )
    async def check_interactive_elements(self) -> CheckOutcome:
        snapshots = await self.host.query(INTERACTIVE_SELECTOR)
        results = self.focusability.classify_all(snapshots)
        failures = [r for r in results if not r.passed]
        evidence = [item for r in failures for item in r.evidence]
        summary = f"{len(results)} interactive elements checked, {len(failures)} not keyboard accessible"
        if failures:
            return CheckStatus.FAILED, summary, evidence
        return CheckStatus.PASSED, summary, evidence

    @audit_check(
        "Focus Visibility - Visual Focus Indicators",
        "Every focused element shows a visible outline, box-shadow or border - WCAG 2.4.7",
    )
    async def check_focus_visibility(self) -> CheckOutcome:
        result = await self.traversal.walk(
            self.host,
            Direction.FORWARD,
            step_budget=self.config.focus_check_budget,
            prime_steps=1,
        )
        checked = [s for s in result.visited if s.is_classifiable and not is_document_root(s)]
        if not checked:
            return CheckStatus.WARNING, "No focusable elements found", []

        invisible = []
        for snapshot in checked:
            classification = self.visual_focus.classify(snapshot)
            if not classification.passed:
                invisible.extend(classification.evidence)

        visible = len(checked) - len(invisible)
        percentage = visible * 100 / len(checked)
        summary = f"{visible}/{len(checked)} elements ({percentage:.1f}%) show a visible focus indicator"
        if invisible:
            return CheckStatus.FAILED, summary, invisible
        return CheckStatus.PASSED, summary, []

    @audit_check(
        "Keyboard Trap - Forward Navigation",
        "Focus can always move forward with Tab - WCAG 2.1.2",
    )
    async def check_keyboard_trap_forward(self) -> CheckOutcome:
        result = await self.traversal.walk(
            self.host,
            Direction.FORWARD,
            step_budget=self.config.trap_forward_budget,
            detect_traps=True,
            trap_threshold=self.config.trap_threshold,
            prime_steps=1,
        )
        return self._trap_outcome(result)

    @audit_check(
        "Keyboard Trap - Backward Navigation",
        "Focus can always move backward with Shift+Tab - WCAG 2.1.2",
    )
    async def check_keyboard_trap_backward(self) -> CheckOutcome:
        result = await self.traversal.walk(
            self.host,
            Direction.BACKWARD,
            step_budget=self.config.trap_backward_budget,
            detect_traps=True,
            trap_threshold=self.config.trap_threshold,
            prime_steps=self.config.backward_prime_steps,
            prime_direction=Direction.FORWARD,
        )
        return self._trap_outcome(result)

    def _trap_outcome(self, result) -> CheckOutcome:
        if result.trap is not None:
            return (
                CheckStatus.FAILED,
                result.trap.describe(),
                [result.trap.snapshot.html_snippet()],
            )
        return CheckStatus.PASSED, f"No keyboard trap. {result.summary}", []

    @audit_check(
        "Enter Key Activation",
        "Links and buttons can be activated with the Enter key - WCAG 2.1.1",
    )
    async def check_enter_activation(self) -> CheckOutcome:
        for _ in range(self.config.enter_activation_attempts):
            await self.host.shift_focus(Direction.FORWARD)
            try:
                current = await self.host.get_active()
            except StaleNodeError as e:
                logger.info(f"Skipping stale element: {e}")
                continue
            if current.role not in (Role.LINK, Role.BUTTON) or not current.is_classifiable:
                continue

            navigated = await self.host.activate()
            outcome = "navigation occurred" if navigated else "activated in place"
            return (
                CheckStatus.PASSED,
                f"Enter key activated {current.tag_name} ({outcome})",
                [current.describe()],
            )

        return (
            CheckStatus.WARNING,
            f"No link or button reached within {self.config.enter_activation_attempts} Tab presses",
            [],
        )

    @audit_check(
        "Skip Links - Bypass Blocks Mechanism Validation",
        "Skip to main content and skip to footer links among the first focus stops - WCAG 2.4.1",
    )
    async def check_skip_links(self) -> CheckOutcome:
        stops = []
        for _ in range(self.config.skip_link_scan):
            await self.host.shift_focus(Direction.FORWARD)
            try:
                stops.append(await self.host.get_active())
            except StaleNodeError as e:
                logger.info(f"Skipping stale element: {e}")

        result = self.skip_links.classify(stops)
        if result.passed:
            return CheckStatus.PASSED, "Both required skip links present", result.evidence
        missing = len(result.failures)
        return (
            CheckStatus.FAILED,
            f"Missing {missing} skip link(s) in the first {self.config.skip_link_scan} focus stops",
            result.evidence,
        )

    # ------------------------------------------------------------------
    # Mobile checks
    # ------------------------------------------------------------------

    @audit_check(
        "Touch Target Size",
        "All interactive elements (links, buttons, inputs) at least 44x44 pixels - WCAG 2.5.5",
    )
    async def check_touch_targets(self) -> CheckOutcome:
        snapshots = await self.host.query(INTERACTIVE_SELECTOR)
        buckets: Dict[Role, List[str]] = defaultdict(list)
        checked = 0
        for snapshot in snapshots:
            if not snapshot.is_classifiable:
                continue
            checked += 1
            result = self.touch_target.classify(snapshot)
            if not result.passed:
                buckets[result.role].extend(result.evidence)

        if checked == 0:
            return CheckStatus.WARNING, "No interactive elements found", []

        failed = sum(len(items) for items in buckets.values())
        evidence = []
        for role in Role:
            if buckets[role]:
                evidence.append(f"{role.value}: {len(buckets[role])} too small")
                evidence.extend(buckets[role])
        if failed:
            return CheckStatus.FAILED, f"{failed} of {checked} elements too small", evidence
        return CheckStatus.PASSED, f"All {checked} elements meet the minimum size", []

    @audit_check(
        "Viewport Zoom",
        "Viewport allows user scaling (no user-scalable=no, no maximum-scale=1) - WCAG 1.4.4, 1.4.10",
    )
    async def check_viewport_zoom(self) -> CheckOutcome:
        result = self.viewport_policy.evaluate(await self.host.get_viewport_meta())
        if result.missing:
            return CheckStatus.FAILED, "No viewport tag", result.failures
        if result.passed:
            return CheckStatus.PASSED, f"Viewport: {result.content}", result.evidence
        return CheckStatus.FAILED, "Zoom disabled", result.failures + result.evidence

    @audit_check(
        "Orientation",
        "Content usable in both portrait and landscape orientations - WCAG 1.3.4",
    )
    async def check_orientation(self) -> CheckOutcome:
        width, height = await self.host.get_viewport_size()
        try:
            current = await self.host.measure_counts(ORIENTATION_SELECTOR)
            await self.host.set_viewport_size(height, width)
            rotated = await self.host.measure_counts(ORIENTATION_SELECTOR)
        finally:
            await self.host.set_viewport_size(width, height)

        if width <= height:
            portrait, landscape = current, rotated
        else:
            portrait, landscape = rotated, current
        result = self.orientation.compare(portrait, landscape)
        if result.passed:
            return CheckStatus.PASSED, "Works in both orientations", result.evidence
        return CheckStatus.FAILED, "; ".join(result.failures), result.evidence

    @audit_check(
        "Touch Gestures",
        "Swipe widgets have single-pointer alternatives (buttons) - WCAG 2.5.1",
    )
    async def check_touch_gestures(self) -> CheckOutcome:
        carousels = await self.host.measure_counts(CAROUSEL_SELECTOR)
        buttons = await self.host.measure_counts(CAROUSEL_BUTTON_SELECTOR) if carousels else 0
        result = self.gestures.classify(carousels, buttons)
        status = self.gestures.status(result)
        if carousels == 0:
            summary = "No carousels or sliders found"
        elif buttons == 0:
            summary = f"{carousels} carousels without navigation buttons"
        else:
            summary = f"{carousels} carousels with {buttons} navigation buttons"
        return status, summary, result.evidence

    @audit_check(
        "Text Readability",
        "Text at least 14px for mobile readability - WCAG 1.4.4, 1.4.12",
    )
    async def check_text_readability(self) -> CheckOutcome:
        result = self.readability.evaluate(await self.host.query(TEXT_SELECTOR))
        summary = f"{result.good_count} readable, {result.small_count} too small"
        if result.passed:
            return CheckStatus.PASSED, summary, result.evidence
        return CheckStatus.FAILED, summary, result.evidence

    @audit_check(
        "Mobile Forms",
        "Form inputs have labels and mobile-appropriate types (email, tel, number, ...) - WCAG 3.3.2, 1.3.5",
    )
    async def check_mobile_forms(self) -> CheckOutcome:
        inputs = [s for s in await self.host.query(FORM_INPUT_SELECTOR) if s.is_classifiable]
        issues = []
        for snapshot in inputs:
            element_id = snapshot.attr("id")
            has_label = False
            if element_id:
                has_label = await self.host.measure_counts(_label_selector(element_id)) > 0
            result = self.input_semantics.classify(snapshot, has_external_label=has_label)
            if not result.passed:
                issues.extend(result.evidence)

        good = len(inputs) - len(issues)
        if issues:
            return CheckStatus.FAILED, f"{len(issues)} inputs improper", issues
        return CheckStatus.PASSED, f"All {good} inputs proper", []

    @audit_check(
        "Mobile Navigation",
        "Mobile menu has an accessible name, aria-expanded, and is at least 44x44px - WCAG 2.4.1, 4.1.2, 2.5.5",
    )
    async def check_mobile_navigation(self) -> CheckOutcome:
        candidates = await self.host.query(MENU_SELECTOR)
        result = self.menu.classify(candidates[0] if candidates else None)
        if not result.found:
            return CheckStatus.WARNING, "No menu found", result.evidence
        if result.passed:
            return CheckStatus.PASSED, "Menu is accessible", result.evidence
        return CheckStatus.FAILED, f"Menu missing {', '.join(result.missing)}", result.evidence

    @audit_check(
        "Horizontal Overflow",
        "Content width does not exceed the viewport width - WCAG 1.4.10",
    )
    async def check_horizontal_overflow(self) -> CheckOutcome:
        metrics = await self.host.measure_layout()
        result = self.overflow.evaluate(metrics)
        if result.passed:
            return CheckStatus.PASSED, "No horizontal overflow", result.evidence
        return CheckStatus.FAILED, result.failures[0], result.evidence

    # ------------------------------------------------------------------

    @property
    def checks(self) -> List[Callable]:
        return [
            self.check_tab_navigation,
            self.check_interactive_elements,
            self.check_focus_visibility,
            self.check_keyboard_trap_forward,
            self.check_keyboard_trap_backward,
            self.check_enter_activation,
            self.check_skip_links,
            self.check_touch_targets,
            self.check_viewport_zoom,
            self.check_orientation,
            self.check_touch_gestures,
            self.check_text_readability,
            self.check_mobile_forms,
            self.check_mobile_navigation,
            self.check_horizontal_overflow,
        ]

    async def run_all(self) -> AuditReport:
        """Run every check in order and return the report."""
        reset_debug_state()
        for check in self.checks:
            await check()
        log_performance_summary()
        counts = self.report.counts
        logger.info(
            f"Audit complete: {counts['passed']} passed, {counts['failed']} failed, "
            f"{counts['warning']} warnings, {counts['error']} errors"
        )
        return self.report


SESSION_CHECK_NAME = "Browser Session"


def _session_error_report(url: str, device: str, error: BaseException) -> AuditReport:
    report = AuditReport(target_url=url, device=device)
    report.record(
        Verdict(
            check_name=SESSION_CHECK_NAME,
            status=CheckStatus.ERROR,
            summary=f"{type(error).__name__}: {error}",
        )
    )
    return report


async def run_audit(
    url: str,
    config: Optional[AuditConfig] = None,
    device: Optional[str] = None,
) -> AuditReport:
    """Audit ``url`` in a fresh browser session emulating one device.

    Args:
        url: Page to audit.
        config: Policy constants; defaults apply when omitted.
        device: Device profile name; defaults to ``config.device``.

    Returns:
        The completed AuditReport. A page that cannot be loaded yields a
        report with a single Error verdict, as does a browser session that
        cannot be started.
    """
    config = config or AuditConfig()
    profile = get_device_profile(device or config.device)
    report = AuditReport(target_url=url, device=profile.name)

    manager = SessionManager(config)
    try:
        async with manager.session_context(profile) as session:
            try:
                await session.host.navigate(url)
            except FocusAuditError as e:
                logger.error(f"Could not load {url}: {e}")
                report.record(
                    Verdict(check_name="Page Load", status=CheckStatus.ERROR, summary=str(e))
                )
                return report

            auditor = AccessibilityAuditor(session.host, config, report)
            return await auditor.run_all()
    except (PlaywrightError, FocusAuditError) as e:
        logger.error(f"Browser session for {profile.name} failed: {e}")
        return _session_error_report(url, profile.name, e)


async def run_device_audits(
    url: str,
    devices: Sequence[str],
    config: Optional[AuditConfig] = None,
) -> List[AuditReport]:
    """Audit ``url`` on several devices concurrently, one session each.

    A device whose audit raises gets a report with a single Error verdict;
    the other devices' reports are unaffected.
    """
    config = config or AuditConfig()
    results = await asyncio.gather(
        *(run_audit(url, config, device) for device in devices), return_exceptions=True
    )

    reports = []
    for device, result in zip(devices, results):
        if isinstance(result, Exception):
            logger.error(f"Audit on {device} failed: {result}")
            result = _session_error_report(url, device, result)
        elif isinstance(result, BaseException):
            raise result
        reports.append(result)
    return reports
