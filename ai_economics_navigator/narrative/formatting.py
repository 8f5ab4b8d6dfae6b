"""
Best-effort presentation helpers for narrative text.

Only used for display. The narrative client always returns raw text.
"""

import re
from typing import List, Optional, Tuple

_LABEL_LINE = re.compile(r"^(?:\d+\.\s*)?\*\*(.*?)\*\*[:\s]+(.*)")
_LEADING_TITLES = re.compile(
    r"^(?:AI Strategic Brief|Executive Insight|Graph Insight):?\s*", re.IGNORECASE
)

NO_INSIGHT_PLACEHOLDER = "No insight available."


def split_insight(text: str, parse_labels: bool = True) -> List[Tuple[Optional[str], str]]:
    """Split narrative text into (label, body) display lines.

    Lines shaped like "**Label**: text" yield the label; other lines yield
    ``None`` with emphasis markers and leading titles removed.
    """
    lines = []
    for line in (text or "").splitlines():
        if not line.strip():
            continue
        match = _LABEL_LINE.match(line)
        if match and parse_labels:
            lines.append((match.group(1).strip().rstrip(":"), match.group(2).strip()))
            continue
        cleaned = _LEADING_TITLES.sub("", line.replace("**", "").strip())
        if cleaned:
            lines.append((None, cleaned))
    return lines


def insight_or_placeholder(text: str) -> str:
    """Text for decorative narrations, or the neutral placeholder when empty."""
    cleaned = _LEADING_TITLES.sub("", (text or "").strip()).strip()
    return cleaned or NO_INSIGHT_PLACEHOLDER
