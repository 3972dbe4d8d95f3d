"""Session-keyed transcript log and session-to-user index.

Transcripts are append-only lists of ``(role, content)`` pairs. Redis keeps
them in production; the in-process store backs development and tests.
"""
from __future__ import annotations

import json
from typing import Protocol

import redis.asyncio as redis
from loguru import logger

from ..core.config import settings

Entry = tuple[str, str]


def _messages_key(session_id: str) -> str:
    return f"chat:{session_id}:messages"


def _owner_key(session_id: str) -> str:
    return f"session:{session_id}:userId"


class TranscriptStore(Protocol):
    async def append(self, session_id: str, role: str, content: str) -> None: ...
    async def append_turn(self, session_id: str, user_text: str, assistant_text: str) -> None: ...
    async def read_all(self, session_id: str) -> list[Entry]: ...
    async def set_owner(self, session_id: str, user_id: str) -> None: ...
    async def get_owner(self, session_id: str) -> str | None: ...
    async def close(self) -> None: ...


class MemoryTranscriptStore:
    def __init__(self) -> None:
        self._messages: dict[str, list[Entry]] = {}
        self._owners: dict[str, str] = {}

    async def append(self, session_id: str, role: str, content: str) -> None:
        self._messages.setdefault(session_id, []).append((role, content))

    async def append_turn(self, session_id: str, user_text: str, assistant_text: str) -> None:
        self._messages.setdefault(session_id, []).extend([("user", user_text), ("assistant", assistant_text)])

    async def read_all(self, session_id: str) -> list[Entry]:
        return list(self._messages.get(session_id, []))

    async def set_owner(self, session_id: str, user_id: str) -> None:
        self._owners[session_id] = user_id

    async def get_owner(self, session_id: str) -> str | None:
        return self._owners.get(session_id)

    async def close(self) -> None:
        return None


class RedisTranscriptStore:
    def __init__(self, client: redis.Redis):
        self.redis = client

    @classmethod
    def from_url(cls, url: str) -> "RedisTranscriptStore":
        return cls(redis.from_url(url, encoding="utf-8", decode_responses=True))

    @staticmethod
    def _encode(role: str, content: str) -> str:
        return json.dumps({"role": role, "content": content})

    async def append(self, session_id: str, role: str, content: str) -> None:
        await self.redis.rpush(_messages_key(session_id), self._encode(role, content))

    async def append_turn(self, session_id: str, user_text: str, assistant_text: str) -> None:
        # single RPUSH so both halves of the turn land together
        await self.redis.rpush(
            _messages_key(session_id),
            self._encode("user", user_text),
            self._encode("assistant", assistant_text),
        )

    async def read_all(self, session_id: str) -> list[Entry]:
        raw = await self.redis.lrange(_messages_key(session_id), 0, -1)
        entries = []
        for item in raw:
            data = json.loads(item)
            entries.append((data["role"], data["content"]))
        return entries

    async def set_owner(self, session_id: str, user_id: str) -> None:
        await self.redis.set(_owner_key(session_id), user_id)

    async def get_owner(self, session_id: str) -> str | None:
        return await self.redis.get(_owner_key(session_id))

    async def close(self) -> None:
        await self.redis.aclose()


_store: TranscriptStore | None = None


def get_transcript_store() -> TranscriptStore:
    global _store
    if _store is None:
        if settings.REDIS_URL:
            _store = RedisTranscriptStore.from_url(settings.REDIS_URL)
        else:
            logger.warning("REDIS_URL not set; transcripts are kept in memory and lost on restart")
            _store = MemoryTranscriptStore()
    return _store


async def close_transcript_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None
