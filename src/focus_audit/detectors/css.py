"""Typed parsing of computed CSS values and viewport directives.

Computed style strings such as ``"2px solid rgb(0, 95, 204)"`` are parsed
into lengths and colors so predicates can compare numbers instead of
testing substrings.
"""

import re
from typing import Dict, List, NamedTuple, Optional

_NUMBER = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?"
_LENGTH_RE = re.compile(rf"^\s*({_NUMBER})\s*([a-z%]*)\s*$", re.IGNORECASE)
_LENGTH_TOKEN_RE = re.compile(rf"(?<![\w.#(,])({_NUMBER})(px|em|rem|pt|%|vh|vw)?(?![\w.])", re.IGNORECASE)
_RGB_RE = re.compile(
    rf"rgba?\(\s*({_NUMBER})\s*[, ]\s*({_NUMBER})\s*[, ]\s*({_NUMBER})\s*(?:[,/]\s*({_NUMBER})(%?)\s*)?\)",
    re.IGNORECASE,
)
_HEX_RE = re.compile(r"#([0-9a-f]{3,8})\b", re.IGNORECASE)

BORDER_STYLES = {
    "none", "hidden", "dotted", "dashed", "solid", "double",
    "groove", "ridge", "inset", "outset", "auto",
}
INVISIBLE_STYLES = {"none", "hidden"}


class CssLength(NamedTuple):
    value: float
    unit: str

    def to_px(self, base_font_px: float = 16.0) -> Optional[float]:
        """Convert to pixels; None for units without an absolute meaning."""
        if self.unit in ("px", ""):
            return self.value
        if self.unit == "pt":
            return self.value * 4 / 3
        if self.unit in ("em", "rem"):
            return self.value * base_font_px
        return None


class CssColor(NamedTuple):
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    @property
    def visible(self) -> bool:
        return self.alpha > 0


def parse_length(text: Optional[str]) -> Optional[CssLength]:
    """Parse a single length such as ``"14px"`` or ``"0"``.

    Returns:
        CssLength, or None when the text is not a single length.
    """
    if not text:
        return None
    match = _LENGTH_RE.match(text)
    if not match:
        return None
    return CssLength(float(match.group(1)), match.group(2).lower())


def find_lengths(text: Optional[str]) -> List[CssLength]:
    """All lengths in a shorthand value, ignoring numbers inside color functions."""
    if not text:
        return []
    stripped = _RGB_RE.sub(" ", _HEX_RE.sub(" ", text))
    return [
        CssLength(float(m.group(1)), (m.group(2) or "").lower())
        for m in _LENGTH_TOKEN_RE.finditer(stripped)
    ]


def _hex_to_color(digits: str) -> Optional[CssColor]:
    if len(digits) in (3, 4):
        digits = "".join(c * 2 for c in digits)
    if len(digits) not in (6, 8):
        return None
    channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
    alpha = channels[3] / 255 if len(channels) == 4 else 1.0
    return CssColor(channels[0], channels[1], channels[2], alpha)


def parse_colors(text: Optional[str]) -> List[CssColor]:
    """Every color in a value: ``rgb()``, ``rgba()``, hex and ``transparent``."""
    if not text:
        return []
    colors = []
    for match in _RGB_RE.finditer(text):
        alpha = 1.0
        if match.group(4) is not None:
            alpha = float(match.group(4))
            if match.group(5):
                alpha /= 100
        colors.append(CssColor(float(match.group(1)), float(match.group(2)), float(match.group(3)), alpha))
    for match in _HEX_RE.finditer(text):
        color = _hex_to_color(match.group(1))
        if color is not None:
            colors.append(color)
    if re.search(r"\btransparent\b", text, re.IGNORECASE):
        colors.append(CssColor(0, 0, 0, 0.0))
    return colors


def find_style_keyword(text: Optional[str]) -> Optional[str]:
    """The first border/outline style keyword in a shorthand value."""
    if not text:
        return None
    for token in re.findall(r"[a-z-]+", text.lower()):
        if token in BORDER_STYLES:
            return token
    return None


def parse_viewport_content(content: Optional[str]) -> Dict[str, str]:
    """Split a viewport meta content string into lower-cased directives.

    ``"width=device-width, initial-scale=1.0"`` becomes
    ``{"width": "device-width", "initial-scale": "1.0"}``. Both ``,`` and
    ``;`` are accepted as separators.
    """
    directives: Dict[str, str] = {}
    if not content:
        return directives
    for part in re.split(r"[,;]", content):
        if "=" not in part:
            continue
        key, _, value = part.partition("=")
        key = key.strip().lower()
        if key:
            directives[key] = value.strip().lower()
    return directives


def parse_number(text: Optional[str]) -> Optional[float]:
    """Parse a bare number, e.g. a viewport scale value."""
    if text is None:
        return None
    try:
        return float(text.strip())
    except ValueError:
        return None
