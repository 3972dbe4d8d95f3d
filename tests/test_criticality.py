import asyncio

import httpx
import pytest

from hearu.conversation import criticality
from hearu.conversation.criticality import Verdict, parse_verdict, should_flag
from hearu.core.errors import AssessmentMalformed


def test_parses_plain_json():
    assert parse_verdict('{"percentage": 20, "reason": "Mild fatigue."}') == Verdict(20, "Mild fatigue.")


def test_strips_fenced_block():
    raw = '```json\n{\n  "percentage": 90,\n  "reason": "Explicit intent to self-harm."\n}\n```'
    assert parse_verdict(raw) == Verdict(90, "Explicit intent to self-harm.")


def test_fractional_scores_keep_raw_value():
    verdict = parse_verdict('{"percentage": 72.6, "reason": "distress"}')
    assert verdict.percentage == 72.6
    assert verdict.score == 73


@pytest.mark.parametrize("percentage", [50.4, 50.5, 50.01])
def test_fractional_scores_just_above_threshold_flag(percentage):
    verdict = parse_verdict(f'{{"percentage": {percentage}, "reason": "despair"}}')
    assert should_flag(verdict)
    assert verdict.score == 51


@pytest.mark.parametrize("raw", [
    None,
    "",
    "not json at all",
    "[90, \"reason\"]",
    '{"reason": "missing score"}',
    '{"percentage": "90", "reason": "string score"}',
    '{"percentage": true, "reason": "bool score"}',
    '{"percentage": -1, "reason": "negative"}',
    '{"percentage": 101, "reason": "too high"}',
    '{"percentage": NaN, "reason": "nan"}',
    '{"percentage": 40}',
    '{"percentage": 40, "reason": "   "}',
    '{"percentage": 40, "reason": 7}',
])
def test_rejects_malformed_verdicts(raw):
    with pytest.raises(AssessmentMalformed):
        parse_verdict(raw)


def test_threshold_is_strictly_above_fifty():
    assert not should_flag(Verdict(50, "moderate"))
    assert should_flag(Verdict(51, "high"))


def test_assess_embeds_message(monkeypatch):
    prompts = []

    async def fake_request(prompt):
        prompts.append(prompt)
        return '{"percentage": 60, "reason": "hopelessness"}'

    monkeypatch.setattr(criticality, "request_verdict", fake_request)
    verdict = asyncio.run(criticality.assess("I can't go on like this {anymore}."))
    assert verdict == Verdict(60, "hopelessness")
    assert "I can't go on like this {anymore}." in prompts[0]


def test_assess_timeout_is_malformed(monkeypatch):
    async def fake_request(prompt):
        raise httpx.ReadTimeout("slow")

    monkeypatch.setattr(criticality, "request_verdict", fake_request)
    with pytest.raises(AssessmentMalformed):
        asyncio.run(criticality.assess("hello"))
