"""
Tests for focus_audit.auditor.

This module tests:
- One verdict per check, recorded in order
- Error isolation at the check boundary
- Status mapping for each check against an in-memory host
- Per-device isolation when a browser session fails
"""

from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from playwright.async_api import Error as PlaywrightError

from focus_audit import auditor as auditor_module
from focus_audit.auditor import (
    SESSION_CHECK_NAME,
    AccessibilityAuditor,
    is_document_root,
    run_device_audits,
)
from focus_audit.config import AuditConfig
from focus_audit.detectors import MENU_SELECTOR, TEXT_SELECTOR
from focus_audit.detectors.focusability import INTERACTIVE_SELECTOR
from focus_audit.detectors.gestures import CAROUSEL_BUTTON_SELECTOR, CAROUSEL_SELECTOR
from focus_audit.exceptions import HostCommunicationError, StaleNodeError
from focus_audit.schemas import AuditReport, CheckStatus, LayoutMetrics, Role

from fakes import BODY, NO_FOCUS_STYLE, FakeFocusHost, make_snapshot

EMAIL_LABEL = 'label[for="email"]'


def good_page(**overrides):
    """Nodes and host settings for a page that passes every check."""
    menu = make_snapshot(
        "menu", role=Role.BUTTON, attributes={"aria-label": "menu", "aria-expanded": "false"}
    )
    email = make_snapshot("email", role=Role.INPUT, attributes={"id": "email", "type": "email"})
    nodes = [
        make_snapshot("skip-main", text="Skip to main content"),
        make_snapshot("skip-footer", text="Skip to footer"),
        make_snapshot("nav", text="Products"),
        menu,
        email,
    ]
    text = [
        make_snapshot(f"p{i}", role=Role.GENERIC, tag_name="p", text="Readable copy")
        for i in range(3)
    ]
    settings = dict(
        nodes=nodes,
        counts={"a, button": 4, EMAIL_LABEL: 1},
        queries={
            INTERACTIVE_SELECTOR: nodes,
            TEXT_SELECTOR: text,
            MENU_SELECTOR: [menu],
            "input": [email],
        },
    )
    settings.update(overrides)
    return FakeFocusHost(**settings)


def make_auditor(host, **config):
    return AccessibilityAuditor(host, AuditConfig(**config))


# =============================================================================
# Run-level behaviour
# =============================================================================

class TestRunAll:

    @pytest.mark.asyncio
    async def test_every_check_recorded_once(self):
        host = good_page()
        auditor = make_auditor(host)

        report = await auditor.run_all()

        names = [v.check_name for v in report.verdicts]
        assert len(names) == 15
        assert len(set(names)) == 15
        assert host.resets == 15
        assert all(v.expected for v in report.verdicts)

    @pytest.mark.asyncio
    async def test_good_page_has_no_failures(self):
        report = await make_auditor(good_page()).run_all()

        assert report.by_status(CheckStatus.FAILED) == []
        assert report.by_status(CheckStatus.ERROR) == []
        # No carousel on the page.
        assert [v.check_name for v in report.by_status(CheckStatus.WARNING)] == ["Touch Gestures"]
        assert report.passed

    @pytest.mark.asyncio
    async def test_host_failure_isolated_to_one_check(self):
        host = good_page(
            fail_on={"get_viewport_meta": HostCommunicationError("session closed", operation="get_viewport_meta")}
        )

        report = await make_auditor(host).run_all()

        errors = report.by_status(CheckStatus.ERROR)
        assert [v.check_name for v in errors] == ["Viewport Zoom"]
        assert "session closed" in errors[0].summary
        assert len(report.verdicts) == 15

    @pytest.mark.asyncio
    async def test_focus_failure_only_breaks_walking_checks(self):
        host = good_page(fail_on={"shift_focus": HostCommunicationError("crashed")})

        report = await make_auditor(host).run_all()

        errors = {v.check_name for v in report.by_status(CheckStatus.ERROR)}
        assert errors == {
            "Tab Navigation - Forward Tab Order",
            "Focus Visibility - Visual Focus Indicators",
            "Keyboard Trap - Forward Navigation",
            "Keyboard Trap - Backward Navigation",
            "Enter Key Activation",
            "Skip Links - Bypass Blocks Mechanism Validation",
        }
        assert report.get("Viewport Zoom").status == CheckStatus.PASSED

    @pytest.mark.asyncio
    async def test_stale_query_becomes_error(self):
        host = good_page(fail_on={"query": StaleNodeError("detached")})

        verdict = await make_auditor(host).check_mobile_navigation()

        assert verdict.status == CheckStatus.ERROR

    @pytest.mark.asyncio
    async def test_verdicts_go_to_supplied_report(self):
        report = AuditReport(target_url="https://example.test/", device="iPad")
        auditor = AccessibilityAuditor(good_page(), AuditConfig(), report)

        await auditor.check_viewport_zoom()

        assert len(report.verdicts) == 1


# =============================================================================
# Keyboard checks
# =============================================================================

class TestKeyboardChecks:

    @pytest.mark.asyncio
    async def test_tab_navigation_lists_stops(self):
        verdict = await make_auditor(good_page()).check_tab_navigation()

        assert verdict.status == CheckStatus.PASSED
        assert len(verdict.evidence) == 5
        assert verdict.evidence[0].startswith("1. a")
        assert "Completed full forward cycle" in verdict.summary

    @pytest.mark.asyncio
    async def test_tab_navigation_budget_stop_noted(self):
        verdict = await make_auditor(good_page(), tab_walk_budget=2).check_tab_navigation()

        assert verdict.status == CheckStatus.PASSED
        assert "stopped at 2 steps without closing the cycle" in verdict.summary

    @pytest.mark.asyncio
    async def test_tab_navigation_without_focusables_warns(self):
        verdict = await make_auditor(FakeFocusHost([])).check_tab_navigation()

        assert verdict.status == CheckStatus.WARNING

    @pytest.mark.asyncio
    async def test_interactive_elements_flag_negative_tabindex(self):
        nodes = [
            make_snapshot("ok"),
            make_snapshot("hidden", role=Role.BUTTON, attributes={"tabindex": "-1"}),
        ]
        host = FakeFocusHost(nodes, queries={INTERACTIVE_SELECTOR: nodes})

        verdict = await make_auditor(host).check_interactive_elements()

        assert verdict.status == CheckStatus.FAILED
        assert "1 not keyboard accessible" in verdict.summary

    @pytest.mark.asyncio
    async def test_focus_visibility_requires_every_element(self):
        nodes = [make_snapshot("a"), make_snapshot("b", style=NO_FOCUS_STYLE)]

        verdict = await make_auditor(FakeFocusHost(nodes)).check_focus_visibility()

        assert verdict.status == CheckStatus.FAILED
        assert "1/2 elements (50.0%)" in verdict.summary
        assert len(verdict.evidence) == 1

    @pytest.mark.asyncio
    async def test_focus_visibility_skips_disabled(self):
        nodes = [make_snapshot("a"), make_snapshot("b", style=NO_FOCUS_STYLE, enabled=False)]

        verdict = await make_auditor(FakeFocusHost(nodes)).check_focus_visibility()

        assert verdict.status == CheckStatus.PASSED

    @pytest.mark.asyncio
    async def test_forward_trap_fails(self):
        host = good_page(traps=["nav"])

        verdict = await make_auditor(host).check_keyboard_trap_forward()

        assert verdict.status == CheckStatus.FAILED
        assert "Focus trapped on a" in verdict.summary
        assert verdict.evidence == ['<a href="/nav">Products</a>']

    @pytest.mark.asyncio
    async def test_backward_trap_passes_on_clean_page(self):
        verdict = await make_auditor(good_page()).check_keyboard_trap_backward()

        assert verdict.status == CheckStatus.PASSED
        assert "backward" in verdict.summary

    @pytest.mark.asyncio
    async def test_backward_trap_fails(self):
        verdict = await make_auditor(good_page(traps=["skip-footer"])).check_keyboard_trap_backward()

        assert verdict.status == CheckStatus.FAILED
        assert "backward" in verdict.summary

    @pytest.mark.asyncio
    async def test_enter_activation_uses_first_link(self):
        host = good_page()

        verdict = await make_auditor(host).check_enter_activation()

        assert verdict.status == CheckStatus.PASSED
        assert host.activations == 1
        assert "navigation occurred" in verdict.summary

    @pytest.mark.asyncio
    async def test_enter_activation_warns_without_links(self):
        nodes = [make_snapshot("x", role=Role.GENERIC)]
        host = FakeFocusHost(nodes)

        verdict = await make_auditor(host).check_enter_activation()

        assert verdict.status == CheckStatus.WARNING
        assert host.activations == 0

    @pytest.mark.asyncio
    async def test_skip_links_pass(self):
        verdict = await make_auditor(good_page()).check_skip_links()
        assert verdict.status == CheckStatus.PASSED

    @pytest.mark.asyncio
    async def test_skip_links_missing(self):
        host = FakeFocusHost([make_snapshot("home", text="Home")])

        verdict = await make_auditor(host).check_skip_links()

        assert verdict.status == CheckStatus.FAILED
        assert "Missing: Skip to Content/Main, Skip to Footer" in verdict.evidence


# =============================================================================
# Mobile checks
# =============================================================================

class TestMobileChecks:

    @pytest.mark.asyncio
    async def test_touch_targets_bucketed_by_role(self):
        nodes = [
            make_snapshot("a"),
            make_snapshot("b", role=Role.BUTTON, width=30, height=30, text="x"),
            make_snapshot("gone", role=Role.BUTTON, width=1, height=1, displayed=False),
        ]
        host = FakeFocusHost(nodes, queries={INTERACTIVE_SELECTOR: nodes})

        verdict = await make_auditor(host).check_touch_targets()

        assert verdict.status == CheckStatus.FAILED
        assert verdict.summary == "1 of 2 elements too small"
        assert verdict.evidence[0] == "button: 1 too small"

    @pytest.mark.asyncio
    async def test_viewport_missing(self):
        verdict = await make_auditor(good_page(viewport_meta=None)).check_viewport_zoom()

        assert verdict.status == CheckStatus.FAILED
        assert verdict.evidence == ["missing viewport declaration"]

    @pytest.mark.asyncio
    async def test_viewport_strict_mode_from_config(self):
        host = good_page(viewport_meta="width=device-width, maximum-scale=10")

        lax = await make_auditor(host).check_viewport_zoom()
        strict = await make_auditor(host, strict_css=True).check_viewport_zoom()

        assert lax.status == CheckStatus.FAILED
        assert strict.status == CheckStatus.PASSED

    @pytest.mark.asyncio
    async def test_orientation_restores_viewport(self):
        host = good_page(rotated_counts={"a, button": 0})

        verdict = await make_auditor(host).check_orientation()

        assert verdict.status == CheckStatus.FAILED
        assert host.viewport == host.initial_viewport
        assert verdict.evidence == ["Portrait: 4 elements, Landscape: 0 elements"]

    @pytest.mark.asyncio
    async def test_orientation_restores_viewport_on_error(self):
        host = good_page(fail_on={"measure_counts": HostCommunicationError("gone")})

        verdict = await make_auditor(host).check_orientation()

        assert verdict.status == CheckStatus.ERROR
        assert host.viewport == host.initial_viewport

    @pytest.mark.asyncio
    async def test_gestures_carousel_without_buttons_warns(self):
        host = good_page(counts={CAROUSEL_SELECTOR: 2, CAROUSEL_BUTTON_SELECTOR: 0})

        verdict = await make_auditor(host).check_touch_gestures()

        assert verdict.status == CheckStatus.WARNING
        assert "No navigation buttons" in verdict.evidence

    @pytest.mark.asyncio
    async def test_gestures_carousel_with_buttons_passes(self):
        host = good_page(counts={CAROUSEL_SELECTOR: 1, CAROUSEL_BUTTON_SELECTOR: 2})

        verdict = await make_auditor(host).check_touch_gestures()

        assert verdict.status == CheckStatus.PASSED

    @pytest.mark.asyncio
    async def test_readability_fails_on_small_text(self):
        text = [
            make_snapshot("s", role=Role.GENERIC, text="tiny", style={"font-size": "10px"}),
            make_snapshot("g", role=Role.GENERIC, text="big", style={"font-size": "16px"}),
        ]
        host = good_page(queries={TEXT_SELECTOR: text})

        verdict = await make_auditor(host).check_text_readability()

        assert verdict.status == CheckStatus.FAILED
        assert verdict.summary == "1 readable, 1 too small"

    @pytest.mark.asyncio
    async def test_mobile_forms_use_label_lookup(self):
        verdict = await make_auditor(good_page()).check_mobile_forms()
        assert verdict.status == CheckStatus.PASSED

    @pytest.mark.asyncio
    async def test_mobile_forms_without_label_fail(self):
        verdict = await make_auditor(good_page(counts={})).check_mobile_forms()

        assert verdict.status == CheckStatus.FAILED
        assert verdict.evidence == ["Input 'email' (type=email): no label"]

    @pytest.mark.asyncio
    async def test_menu_absent_warns(self):
        host = good_page(queries={MENU_SELECTOR: []})

        verdict = await make_auditor(host).check_mobile_navigation()

        assert verdict.status == CheckStatus.WARNING

    @pytest.mark.asyncio
    async def test_menu_missing_aria_expanded_fails(self):
        menu = make_snapshot("m", role=Role.BUTTON, attributes={"aria-label": "menu"})
        host = good_page(queries={MENU_SELECTOR: [menu]})

        verdict = await make_auditor(host).check_mobile_navigation()

        assert verdict.status == CheckStatus.FAILED
        assert verdict.summary == "Menu missing aria-expanded"

    @pytest.mark.asyncio
    async def test_horizontal_overflow_fails(self):
        host = good_page(layout=LayoutMetrics(viewport_width=393, document_width=500))

        verdict = await make_auditor(host).check_horizontal_overflow()

        assert verdict.status == CheckStatus.FAILED
        assert verdict.summary == "content overflows by 107px"


def test_document_root_detection():
    assert is_document_root(BODY)
    assert not is_document_root(make_snapshot("a"))


@pytest.mark.asyncio
async def test_device_audits_run_per_device(monkeypatch):
    calls = []

    async def fake_run_audit(url, config=None, device=None):
        calls.append(device)
        return AuditReport(target_url=url, device=device)

    monkeypatch.setattr(auditor_module, "run_audit", fake_run_audit)

    reports = await run_device_audits("https://example.test/", ["iPhone 15", "iPad"])

    assert [r.device for r in reports] == ["iPhone 15", "iPad"]
    assert sorted(calls) == ["iPad", "iPhone 15"]


class FlakySessionManager:
    """Starts a fake session for every device except the iPad."""

    def __init__(self, config):
        self.config = config

    @asynccontextmanager
    async def session_context(self, profile):
        if profile.name == "iPad":
            raise PlaywrightError("browser launch failed")
        host = good_page()
        host.navigate = AsyncMock()
        yield SimpleNamespace(host=host)


@pytest.mark.asyncio
async def test_session_start_failure_is_isolated_per_device(monkeypatch):
    monkeypatch.setattr(auditor_module, "SessionManager", FlakySessionManager)

    reports = await run_device_audits("https://example.test/", ["iPhone 15", "iPad"])

    iphone, ipad = reports
    assert iphone.device == "iPhone 15"
    assert len(iphone.verdicts) == 15
    assert iphone.get(SESSION_CHECK_NAME) is None

    assert ipad.device == "iPad"
    assert len(ipad.verdicts) == 1
    assert ipad.verdicts[0].check_name == SESSION_CHECK_NAME
    assert ipad.verdicts[0].status == CheckStatus.ERROR
    assert "browser launch failed" in ipad.verdicts[0].summary


@pytest.mark.asyncio
async def test_unexpected_device_failure_becomes_error_report(monkeypatch):
    async def fake_run_audit(url, config=None, device=None):
        if device == "iPad":
            raise RuntimeError("renderer crashed")
        return AuditReport(target_url=url, device=device)

    monkeypatch.setattr(auditor_module, "run_audit", fake_run_audit)

    reports = await run_device_audits("https://example.test/", ["iPhone 15", "iPad"])

    assert [r.device for r in reports] == ["iPhone 15", "iPad"]
    assert reports[0].verdicts == []
    assert reports[1].verdicts[0].status == CheckStatus.ERROR
    assert reports[1].verdicts[0].summary == "RuntimeError: renderer crashed"
