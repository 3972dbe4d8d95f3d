from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from loguru import logger

from ..core.errors import InvalidInput, NotFound
from ..conversation.mood import MoodLabel
from ..models import FlaggedUser, MoodAssessment, User

_FLAG_KEY = ["user_id", "session_id", "reason"]


def require_user(db: Session, user_id: str) -> User:
    if not user_id or not user_id.strip():
        raise InvalidInput("userId required")
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found", is_form_error=True)
    return user


def record_mood(db: Session, user_id: str, mood: MoodLabel | str, session_id: str | None = None) -> MoodAssessment:
    label = MoodLabel(mood)
    row = MoodAssessment(user_id=user_id, session_id=session_id, mood=label.value)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("mood {!r} recorded for user {} (session={})", label.value, user_id, session_id)
    return row


def mood_history(db: Session, user_id: str) -> list[MoodAssessment]:
    if not user_id or not user_id.strip():
        raise InvalidInput("userId required")
    q = (
        select(MoodAssessment)
        .where(MoodAssessment.user_id == user_id)
        .order_by(MoodAssessment.assessed_at.asc(), MoodAssessment.id.asc())
    )
    return list(db.scalars(q))


def flag_user(db: Session, user_id: str, session_id: str, reason: str, percentage: int) -> bool:
    """Insert a flag record, ignoring duplicates of (user, session, reason).

    Returns True when a new row was written.
    """
    values = {"user_id": user_id, "session_id": session_id, "reason": reason, "percentage": percentage}
    dialect = db.get_bind().dialect.name
    if dialect in ("postgresql", "sqlite"):
        insert = pg_insert if dialect == "postgresql" else sqlite_insert
        stmt = insert(FlaggedUser).values(**values).on_conflict_do_nothing(index_elements=_FLAG_KEY)
        created = db.execute(stmt).rowcount == 1
        db.commit()
    else:
        try:
            db.add(FlaggedUser(**values))
            db.commit()
            created = True
        except IntegrityError:
            db.rollback()
            created = False

    if created:
        logger.warning("user {} flagged at {}% in session {}: {}", user_id, percentage, session_id, reason)
    else:
        logger.debug("duplicate flag ignored for user {} in session {}", user_id, session_id)
    return created
