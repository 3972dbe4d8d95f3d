import asyncio

import pytest

from hearu.conversation import transcript
from hearu.conversation.transcript import MemoryTranscriptStore, RedisTranscriptStore


class FakeRedis:
    """Just the list/string commands the transcript store issues."""

    def __init__(self):
        self.lists = {}
        self.values = {}
        self.closed = False

    async def rpush(self, key, *values):
        self.lists.setdefault(key, []).extend(values)
        return len(self.lists[key])

    async def lrange(self, key, start, end):
        items = self.lists.get(key, [])
        return items[start:] if end == -1 else items[start:end + 1]

    async def set(self, key, value):
        self.values[key] = value
        return True

    async def get(self, key):
        return self.values.get(key)

    async def aclose(self):
        self.closed = True


@pytest.mark.parametrize("make_store", [MemoryTranscriptStore, lambda: RedisTranscriptStore(FakeRedis())])
def test_entries_keep_arrival_order(make_store):
    store = make_store()

    async def scenario():
        await store.append("s1", "user", "Hi")
        await store.append("s1", "assistant", "Question 1?")
        await store.append_turn("s1", "a) Energetic", "Question 2?")
        await store.append_turn("s2", "Hi", "Hello there")
        return await store.read_all("s1"), await store.read_all("s2"), await store.read_all("nope")

    s1, s2, missing = asyncio.run(scenario())
    assert s1 == [
        ("user", "Hi"),
        ("assistant", "Question 1?"),
        ("user", "a) Energetic"),
        ("assistant", "Question 2?"),
    ]
    assert s2 == [("user", "Hi"), ("assistant", "Hello there")]
    assert missing == []


def test_redis_keys_and_owner_index():
    client = FakeRedis()
    store = RedisTranscriptStore(client)

    async def scenario():
        await store.set_owner("s1", "u1")
        await store.append_turn("s1", "Hi", "Hello")
        owner = await store.get_owner("s1")
        unknown = await store.get_owner("s2")
        await store.close()
        return owner, unknown

    assert asyncio.run(scenario()) == ("u1", None)
    assert client.values == {"session:s1:userId": "u1"}
    assert len(client.lists["chat:s1:messages"]) == 2
    assert client.closed


def test_memory_store_is_used_without_redis_url(monkeypatch):
    monkeypatch.setattr(transcript, "_store", None)
    monkeypatch.setattr(transcript.settings, "REDIS_URL", "")
    store = transcript.get_transcript_store()
    assert isinstance(store, MemoryTranscriptStore)
    assert transcript.get_transcript_store() is store
    asyncio.run(transcript.close_transcript_store())
    assert transcript._store is None


def test_lost_owner_index_falls_back_to_session_row(client, models, user, store):
    sid = client.post("/mood/start", json={"userId": "u1"}).json()["sessionId"]
    store._owners.clear()
    r = client.post(f"/mood/answer/{sid}", json={"answer": "a"})
    assert r.status_code == 200
    assert asyncio.run(store.get_owner(sid)) == "u1"
