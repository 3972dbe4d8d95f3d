from __future__ import annotations

import re
from enum import Enum


class MoodLabel(str, Enum):
    VERY_BAD = "very bad"
    BAD = "bad"
    NEUTRAL = "neutral"
    GOOD = "good"
    VERY_GOOD = "very good"


MOOD_VALUES = [m.value for m in MoodLabel]

# Two-word labels first so "very good" is never read as "very".
_MOOD_RE = re.compile(
    r"your\s+mood\s+is\s+[*_\"']*(very\s+bad|very\s+good|bad|neutral|good)\b",
    re.IGNORECASE,
)


def extract_mood(text: str) -> MoodLabel | None:
    """Recognise the quiz's closing phrase ``your mood is <label>``.

    Only the five canonical labels are accepted; anything else (including
    "your mood is not good") yields None.
    """
    if not text:
        return None
    m = _MOOD_RE.search(text)
    if not m:
        return None
    label = " ".join(m.group(1).lower().split())
    return MoodLabel(label)
