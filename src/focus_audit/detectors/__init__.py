"""Stateless accessibility classifiers.

Every classifier is pure: it takes snapshots or measured values and
returns a result model. None of them touch the host or raise on page
content.
"""

from .visual_focus import VisualFocusClassifier
from .touch_target import TouchTargetClassifier, DEFAULT_MIN_TARGET_SIZE
from .input_semantics import InputSemanticsClassifier, MOBILE_INPUT_TYPES
from .viewport import ViewportPolicyEvaluator
from .orientation import OrientationComparator
from .menu import MenuCompletenessClassifier, MENU_SELECTOR
from .readability import ReadabilityRatioCheck, TEXT_SELECTOR
from .focusability import FocusabilityClassifier
from .skip_links import SkipLinkClassifier
from .gestures import GestureAlternativeClassifier
from .overflow import OverflowEvaluator

__all__ = [
    "VisualFocusClassifier",
    "TouchTargetClassifier",
    "DEFAULT_MIN_TARGET_SIZE",
    "InputSemanticsClassifier",
    "MOBILE_INPUT_TYPES",
    "ViewportPolicyEvaluator",
    "OrientationComparator",
    "MenuCompletenessClassifier",
    "MENU_SELECTOR",
    "ReadabilityRatioCheck",
    "TEXT_SELECTOR",
    "FocusabilityClassifier",
    "SkipLinkClassifier",
    "GestureAlternativeClassifier",
    "OverflowEvaluator",
]
