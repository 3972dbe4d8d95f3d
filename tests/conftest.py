import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_hearu.db")
os.environ["REDIS_URL"] = ""

import pytest
from fastapi.testclient import TestClient
from hearu.main import app
from hearu.core.db import Base, engine, SessionLocal
from hearu.conversation.transcript import MemoryTranscriptStore, get_transcript_store
from hearu.models import User

SAFE_VERDICT = '{"percentage": 10, "reason": "casual"}'


class FakeModels:
    """Stands in for both model endpoints; replies and verdicts are consumed in order."""

    def __init__(self):
        self.replies = []
        self.verdicts = []
        self.generate_calls = []
        self.verdict_prompts = []

    async def generate(self, instructions, transcript, user_text):
        self.generate_calls.append((instructions, list(transcript), user_text))
        if self.replies:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply
        return f"ACK. Next question about {user_text}?"

    async def request_verdict(self, prompt):
        self.verdict_prompts.append(prompt)
        if self.verdicts:
            verdict = self.verdicts.pop(0)
            if isinstance(verdict, Exception):
                raise verdict
            return verdict
        return SAFE_VERDICT


@pytest.fixture(autouse=True)
def setup_db():
    # fresh db for every test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def models(monkeypatch):
    fake = FakeModels()
    monkeypatch.setattr("hearu.conversation.engine.generate", fake.generate)
    monkeypatch.setattr("hearu.conversation.criticality.request_verdict", fake.request_verdict)
    return fake


@pytest.fixture()
def store():
    return MemoryTranscriptStore()


@pytest.fixture()
def client(store):
    app.dependency_overrides[get_transcript_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def user(db):
    u = User(id="u1", username="u1", password_hash="not-a-real-hash")
    db.add(u)
    db.commit()
    return u
