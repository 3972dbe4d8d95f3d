from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional

from ...core.db import get_db
from ...conversation import orchestrator
from ...conversation.transcript import TranscriptStore, get_transcript_store
from ...models import MoodAssessment
from ...services import records
from ..schemas import (
    StartSessionIn, StartSessionResponse, AnswerIn, AnswerResponse, MoodIn,
    MoodAssessmentOut, HistoryResponse, MoodRecordResponse, MoodRecordData,
    TranscriptResponse, TranscriptMessage,
)

router = APIRouter(prefix="/mood", tags=["mood"])

def _iso(dt: datetime) -> str:
    return dt.replace(microsecond=0).isoformat() + "Z"

def _assessment_out(a: MoodAssessment) -> MoodAssessmentOut:
    return MoodAssessmentOut(id=a.id, userId=a.user_id, sessionId=a.session_id, mood=a.mood, assessedAt=_iso(a.assessed_at))

def _started(result: orchestrator.TurnResult) -> StartSessionResponse:
    return StartSessionResponse(message=result.text, sessionId=result.session_id, state=result.state)

@router.post("/start", response_model=StartSessionResponse)
async def start_quiz(payload: StartSessionIn, db: Session = Depends(get_db), store: TranscriptStore = Depends(get_transcript_store)):
    return _started(await orchestrator.start_quiz(db, store, payload.userId))

@router.post("/start/chat", response_model=StartSessionResponse)
async def start_chat(payload: StartSessionIn, db: Session = Depends(get_db), store: TranscriptStore = Depends(get_transcript_store)):
    return _started(await orchestrator.start_freeform(db, store, payload.userId))

@router.post("/answer/{session_id}", response_model=AnswerResponse, response_model_exclude_none=True)
async def answer(
    session_id: str,
    payload: AnswerIn,
    isQuiz: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    store: TranscriptStore = Depends(get_transcript_store),
):
    result = await orchestrator.submit_answer(db, store, session_id, payload.answer, is_quiz=isQuiz)
    return AnswerResponse(
        message=result.text,
        questionsAnswered=result.turns_answered,
        state=result.state,
        mood=result.mood,
        moodAssessment=_assessment_out(result.assessment) if result.assessment else None,
    )

@router.get("/history/{user_id}", response_model=HistoryResponse)
def history(user_id: str, db: Session = Depends(get_db)):
    return HistoryResponse(assessments=[_assessment_out(a) for a in records.mood_history(db, user_id)])

@router.get("/messages/{session_id}", response_model=TranscriptResponse)
async def messages(session_id: str, db: Session = Depends(get_db), store: TranscriptStore = Depends(get_transcript_store)):
    entries = await orchestrator.get_transcript(db, store, session_id)
    return TranscriptResponse(
        sessionId=session_id,
        messages=[TranscriptMessage(role=role, content=content) for role, content in entries],
    )

# Declared last so it never shadows /start, /answer, /history or /messages.
@router.post("/{user_id}", response_model=MoodRecordResponse, status_code=201)
def record_popup_mood(user_id: str, payload: MoodIn, db: Session = Depends(get_db)):
    records.require_user(db, user_id)
    assessment = records.record_mood(db, user_id, payload.mood)
    return MoodRecordResponse(
        message="Mood recorded successfully",
        data=MoodRecordData(moodAssessment=_assessment_out(assessment)),
    )
