import asyncio

import pytest

from models.chat_models import ChatMessage
from services.chat.session_store import ChatSessionStore


class FakeTimer:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_unknown_user_gets_empty_transcript():
    store = ChatSessionStore()

    transcript = store.get("nobody")

    assert len(transcript) == 0
    assert "nobody" in store


def test_append_preserves_order():
    store = ChatSessionStore()
    store.append("u1", "user", "one")
    store.append("u1", "assistant", "two")
    store.append("u1", "user", "three")

    assert store.get("u1").as_payload() == [
        {"role": "user", "content": "one"},
        {"role": "assistant", "content": "two"},
        {"role": "user", "content": "three"},
    ]


def test_invalid_role_is_rejected():
    store = ChatSessionStore()
    with pytest.raises(ValueError):
        store.append("u1", "tool", "x")


def test_messages_are_immutable():
    message = ChatMessage(role="user", content="hello")
    with pytest.raises(AttributeError):
        message.content = "changed"


def test_idle_sessions_expire():
    timer = FakeTimer()
    store = ChatSessionStore(ttl_seconds=60, timer=timer)
    store.append("u1", "user", "hello")

    timer.now = 30
    store.append("u1", "user", "still here")
    timer.now = 80
    assert len(store.get("u1")) == 2

    timer.now = 200
    assert "u1" not in store
    assert len(store.get("u1")) == 0


def test_least_recently_used_session_is_evicted():
    store = ChatSessionStore(max_sessions=2)
    store.append("a", "user", "1")
    store.append("b", "user", "2")
    store.get("a")
    store.append("c", "user", "3")

    assert "a" in store
    assert "b" not in store
    assert len(store) == 2


@pytest.mark.parametrize("kwargs", [{"max_sessions": 0}, {"ttl_seconds": 0}])
def test_invalid_bounds_are_rejected(kwargs):
    with pytest.raises(ValueError):
        ChatSessionStore(**kwargs)


def test_lock_is_per_user():
    store = ChatSessionStore()
    assert store.lock("a") is store.lock("a")
    assert store.lock("a") is not store.lock("b")


def test_locked_exchanges_stay_contiguous():
    store = ChatSessionStore()

    async def exchange(label: str) -> None:
        async with store.lock("u1"):
            store.append("u1", "user", f"q-{label}")
            await asyncio.sleep(0)
            store.append("u1", "assistant", f"a-{label}")

    async def main() -> None:
        await asyncio.gather(exchange("1"), exchange("2"), exchange("3"))

    asyncio.run(main())

    contents = [m.content for m in store.get("u1")]
    for i in range(0, len(contents), 2):
        assert contents[i].startswith("q-")
        assert contents[i + 1] == "a-" + contents[i][2:]


def test_put_restores_an_evicted_session():
    store = ChatSessionStore(max_sessions=1)
    session = store.session("alice")
    session.append("user", "hello")
    store.append("bob", "user", "hi")
    assert "alice" not in store

    store.put(session)

    assert store.session("alice") is session
    assert [m.content for m in store.get("alice")] == ["hello"]
    assert "bob" not in store
