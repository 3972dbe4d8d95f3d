from __future__ import annotations
from dataclasses import dataclass
from typing import List
import uuid

from loguru import logger
from sqlalchemy.orm import Session

from ..core.errors import InvalidInput, NotFound
from ..models import ChatSession, MoodAssessment
from ..services import records
from . import criticality
from .engine import GREETING_INPUT, Mode, advance
from .locks import session_locks
from .mood import MoodLabel, extract_mood
from .transcript import Entry, TranscriptStore

QUIZ_QUESTIONS = 5


@dataclass
class TurnResult:
    session_id: str
    text: str
    mode: Mode
    state: str
    turns_answered: int = 0
    mood: MoodLabel | None = None
    assessment: MoodAssessment | None = None


def session_state(session: ChatSession) -> str:
    turns = int(session.turns_answered or 0)
    if turns == 0:
        return "created"
    if session.mode == Mode.FREEFORM.value:
        return "ongoing"
    if session.mood_recorded:
        return "completed"
    if turns >= QUIZ_QUESTIONS:
        return "awaiting-mood"
    return f"in-progress({turns})"


def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise InvalidInput(f"{field} required")
    return value.strip()


async def _load_session(db: Session, store: TranscriptStore, session_id: str) -> tuple[ChatSession, str]:
    session = db.get(ChatSession, session_id)
    if not session:
        raise NotFound("Session not found")
    owner = await store.get_owner(session_id)
    if owner is None:
        # index lost (cache flush); the row is the fallback owner record
        owner = session.user_id
        await store.set_owner(session_id, owner)
    return session, owner


async def start_session(db: Session, store: TranscriptStore, user_id: str, mode: Mode) -> TurnResult:
    user_id = _require_text(user_id, "userId")
    records.require_user(db, user_id)
    mode = Mode(mode)

    session_id = str(uuid.uuid4())
    async with session_locks.hold(session_id):
        greeting = await advance(store, session_id, mode, GREETING_INPUT)
        await store.set_owner(session_id, user_id)
        session = ChatSession(id=session_id, user_id=user_id, mode=mode.value, title=session_id)
        db.add(session)
        db.commit()
        db.refresh(session)

    logger.info("{} session {} started for user {}", mode.value, session_id, user_id)
    return TurnResult(session_id=session_id, text=greeting, mode=mode, state=session_state(session))


async def start_quiz(db: Session, store: TranscriptStore, user_id: str) -> TurnResult:
    return await start_session(db, store, user_id, Mode.QUIZ)


async def start_freeform(db: Session, store: TranscriptStore, user_id: str) -> TurnResult:
    return await start_session(db, store, user_id, Mode.FREEFORM)


async def submit_answer(
    db: Session,
    store: TranscriptStore,
    session_id: str,
    answer: str,
    is_quiz: bool | None = None,
) -> TurnResult:
    session_id = _require_text(session_id, "sessionId")
    answer = _require_text(answer, "answer")

    session, owner = await _load_session(db, store, session_id)
    mode = Mode(session.mode)
    if is_quiz is not None and is_quiz != (mode == Mode.QUIZ):
        raise InvalidInput(f"Session {session_id} is a {mode.value} session")

    async with session_locks.hold(session_id):
        # Fail closed: no safety verdict, no conversation progress.
        verdict = await criticality.assess(answer)
        if criticality.should_flag(verdict):
            records.flag_user(db, owner, session_id, verdict.reason, verdict.score)

        reply = await advance(store, session_id, mode, answer)
        # greeting pair plus one pair per answer
        in_transcript = len(await store.read_all(session_id)) // 2 - 1

        try:
            db.refresh(session)
            turns = int(session.turns_answered or 0) + 1
            if in_transcript > turns:
                logger.warning(
                    "session {} counter behind transcript ({} < {}), resyncing",
                    session_id, turns, in_transcript,
                )
                turns = in_transcript
            session.turns_answered = turns

            mood = None
            assessment = None
            if mode == Mode.QUIZ:
                mood = extract_mood(reply)
                if mood and session.turns_answered < QUIZ_QUESTIONS:
                    logger.warning(
                        "ignoring mood {!r} after only {} answers in session {}",
                        mood.value, session.turns_answered, session_id,
                    )
                    mood = None
                if mood and not session.mood_recorded:
                    session.mood_recorded = True
                    # commits the session counters together with the assessment row
                    assessment = records.record_mood(db, owner, mood, session_id=session_id)
            db.commit()
        except Exception:
            db.rollback()
            logger.error("session {} turn appended but not recorded", session_id)
            raise

    return TurnResult(
        session_id=session_id,
        text=reply,
        mode=mode,
        state=session_state(session),
        turns_answered=session.turns_answered,
        mood=mood,
        assessment=assessment,
    )


async def get_transcript(db: Session, store: TranscriptStore, session_id: str) -> List[Entry]:
    session_id = _require_text(session_id, "sessionId")
    await _load_session(db, store, session_id)
    return await store.read_all(session_id)
