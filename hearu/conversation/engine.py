from __future__ import annotations

import re
from enum import Enum

import httpx
from loguru import logger

from ..core.errors import GenerationUnavailable
from ..llm.composer import generate
from ..llm.prompts import QUIZ, THERAPIST
from .transcript import TranscriptStore

GREETING_INPUT = "Hi"

_THINK_RE = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)


class Mode(str, Enum):
    QUIZ = "quiz"
    FREEFORM = "freeform"


TEMPLATES = {
    Mode.QUIZ: QUIZ,
    Mode.FREEFORM: THERAPIST,
}


def template_for(mode: Mode) -> str:
    return TEMPLATES[Mode(mode)]


def strip_reasoning(text: str) -> str:
    return _THINK_RE.sub("", text).strip()


async def advance(store: TranscriptStore, session_id: str, mode: Mode, user_text: str) -> str:
    """Generate the next assistant turn and append (user, assistant) to the transcript.

    Nothing is appended when generation fails.
    """
    transcript = await store.read_all(session_id)
    try:
        raw = await generate(template_for(mode), transcript, user_text)
    except httpx.TimeoutException as exc:
        logger.error("generation timed out for session {}: {}", session_id, exc)
        raise GenerationUnavailable("Conversation model timed out") from exc
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("generation failed for session {}: {!r}", session_id, exc)
        raise GenerationUnavailable() from exc

    reply = strip_reasoning(raw or "")
    if not reply:
        logger.error("generation returned no visible text for session {}", session_id)
        raise GenerationUnavailable("Conversation model returned an empty reply")

    await store.append_turn(session_id, user_text, reply)
    return reply
