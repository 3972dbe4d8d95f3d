import asyncio

from hearu.conversation.locks import SessionLocks


def test_same_session_turns_do_not_overlap():
    locks = SessionLocks()
    events = []

    async def turn(name):
        async with locks.hold("s1"):
            events.append(f"{name}:start")
            await asyncio.sleep(0.01)
            events.append(f"{name}:end")

    async def main():
        await asyncio.gather(turn("a"), turn("b"))

    asyncio.run(main())
    assert events in (
        ["a:start", "a:end", "b:start", "b:end"],
        ["b:start", "b:end", "a:start", "a:end"],
    )
    assert len(locks) == 0


def test_different_sessions_run_concurrently():
    locks = SessionLocks()
    events = []

    async def turn(sid):
        async with locks.hold(sid):
            events.append(f"{sid}:start")
            await asyncio.sleep(0.01)
            events.append(f"{sid}:end")

    async def main():
        await asyncio.gather(turn("s1"), turn("s2"))

    asyncio.run(main())
    assert events[:2] == ["s1:start", "s2:start"]


def test_lock_released_when_turn_fails():
    locks = SessionLocks()

    async def failing():
        async with locks.hold("s1"):
            raise RuntimeError("boom")

    async def main():
        try:
            await failing()
        except RuntimeError:
            pass
        async with locks.hold("s1"):
            return True

    assert asyncio.run(main()) is True
    assert len(locks) == 0
