"""Safety gate run on every user message before the conversation moves on.

The verdict comes from an independent model and must parse as
``{"percentage": 0-100, "reason": "..."}``. Anything else is
``AssessmentMalformed``; callers abort the turn instead of assuming the
message was safe.
"""
from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass

import httpx
from loguru import logger

from ..core.errors import AssessmentMalformed
from ..llm.assessor import request_verdict
from ..llm.prompts import CRITICALITY

FLAG_THRESHOLD = 50

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)


@dataclass(frozen=True)
class Verdict:
    percentage: float
    reason: str

    @property
    def score(self) -> int:
        """Whole-number score for flag records; never below the raw percentage."""
        return math.ceil(self.percentage)


def _unfence(raw: str) -> str:
    text = raw.strip()
    m = _FENCE_RE.match(text)
    return m.group(1) if m else text


def parse_verdict(raw: str | None) -> Verdict:
    if not raw or not raw.strip():
        raise AssessmentMalformed("Empty safety assessment")
    try:
        data = json.loads(_unfence(raw))
    except json.JSONDecodeError as exc:
        raise AssessmentMalformed() from exc
    if not isinstance(data, dict):
        raise AssessmentMalformed()

    percentage = data.get("percentage")
    # bool is an int subclass; true/false is not a score
    if isinstance(percentage, bool) or not isinstance(percentage, (int, float)):
        raise AssessmentMalformed()
    if not 0 <= percentage <= 100:  # also rejects NaN and inf
        raise AssessmentMalformed()

    reason = data.get("reason")
    if not isinstance(reason, str) or not reason.strip():
        raise AssessmentMalformed()

    return Verdict(percentage=percentage, reason=reason.strip())


def should_flag(verdict: Verdict) -> bool:
    return verdict.percentage > FLAG_THRESHOLD


async def assess(message: str) -> Verdict:
    prompt = CRITICALITY.format(message=message)
    try:
        raw = await request_verdict(prompt)
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("criticality check failed: {!r}", exc)
        raise AssessmentMalformed("Safety assessment unavailable") from exc
    try:
        return parse_verdict(raw)
    except AssessmentMalformed:
        logger.error("unparsable criticality verdict: {!r}", raw)
        raise
