"""Shared fixtures for the focus audit test suite."""

import pytest

from focus_audit.schemas import Role
from fakes import make_snapshot


@pytest.fixture
def abc_nodes():
    """Three focusable links A, B, C in tab order."""
    return [make_snapshot(name, text=f"Link {name}") for name in ("A", "B", "C")]


@pytest.fixture
def mixed_nodes():
    """A small page: skip link, nav link, menu button, email input."""
    return [
        make_snapshot("skip", text="Skip to main content"),
        make_snapshot("nav", text="Products"),
        make_snapshot(
            "menu",
            role=Role.BUTTON,
            attributes={"aria-label": "menu", "aria-expanded": "false"},
        ),
        make_snapshot(
            "email",
            role=Role.INPUT,
            attributes={"id": "email", "type": "email"},
        ),
    ]
