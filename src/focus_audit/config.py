"""Audit configuration.

Every policy constant used by the traversal engine and the classifiers
lives here as a named, validated field. Values come from, in increasing
precedence: model defaults, an optional YAML file, and ``FOCUS_AUDIT_*``
environment variables (a ``.env`` file is honoured).
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ENV_PREFIX = "FOCUS_AUDIT_"


class AuditConfig(BaseModel):
    """Policy knobs for one audit run."""

    # Traversal
    trap_threshold: int = Field(
        3, ge=0, description="Consecutive no-move shifts tolerated before declaring a trap"
    )
    tab_walk_budget: int = Field(150, gt=0, description="Shift budget for the tab navigation walk")
    focus_check_budget: int = Field(150, gt=0, description="Shift budget for the focus visibility walk")
    trap_forward_budget: int = Field(100, gt=0, description="Shift budget for forward trap detection")
    backward_prime_steps: int = Field(
        20, ge=0, description="Forward shifts issued before the backward walk"
    )
    trap_backward_budget: int = Field(30, gt=0, description="Shift budget for backward trap detection")
    skip_link_scan: int = Field(10, gt=0, description="Focus stops inspected for skip links")
    enter_activation_attempts: int = Field(15, gt=0)

    # Host settling
    settle_delay_ms: int = Field(300, ge=0, description="Delay after each focus shift")
    settle_timeout_s: float = Field(5.0, gt=0, description="Upper bound for settling after a shift")
    navigation_timeout_ms: int = Field(30000, gt=0)
    visual_stability: bool = Field(
        False, description="Also wait for two identical screenshots after a shift"
    )

    # Classifier policy
    min_target_size: float = Field(44, gt=0, description="Minimum touch target edge in pixels")
    readability_min_font_px: float = Field(14, gt=0)
    readability_tolerance: float = Field(
        0.10, ge=0, description="Small text allowed as a fraction of readable text"
    )
    overflow_tolerance_px: int = Field(10, ge=0)
    strict_css: bool = Field(
        False, description="Parse CSS values instead of substring matching"
    )

    # Session
    device: str = Field("iPhone 15", description="Device profile name")
    headless: bool = True


def _env_overrides() -> Dict[str, Any]:
    overrides = {}
    for name in AuditConfig.model_fields:
        value = os.getenv(ENV_PREFIX + name.upper())
        if value is not None:
            overrides[name] = value
    return overrides


def load_config(
    path: Optional[Union[str, Path]] = None, **overrides: Any
) -> AuditConfig:
    """Build an AuditConfig from YAML, environment and explicit overrides.

    Args:
        path: Optional YAML file with top-level keys matching AuditConfig fields.
        **overrides: Highest-precedence values (e.g. from CLI flags). None values
            are ignored.

    Returns:
        Validated configuration.

    Raises:
        FileNotFoundError: If ``path`` is given but does not exist.
        pydantic.ValidationError: If a value is out of range or mistyped.
    """
    load_dotenv()

    data: Dict[str, Any] = {}
    if path is not None:
        config_file = Path(path)
        with open(config_file, "r") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")
        unknown = set(loaded) - set(AuditConfig.model_fields)
        if unknown:
            logger.warning(f"Ignoring unknown config keys in {config_file}: {sorted(unknown)}")
        data.update({k: v for k, v in loaded.items() if k in AuditConfig.model_fields})

    data.update(_env_overrides())
    data.update({k: v for k, v in overrides.items() if v is not None})
    return AuditConfig.model_validate(data)
