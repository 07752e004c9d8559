import asyncio
import threading
from types import SimpleNamespace

from modiary.services.reflection_service import (
    REFLECTION_EMPTY_DIARY_MESSAGE,
    REFLECTION_EMPTY_RESPONSE_MESSAGE,
    REFLECTION_FALLBACK_MESSAGE,
    ReflectionCoordinator,
    fetch_reflection,
    request_reflection,
)


class _FakeClient:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def test_fetch_reflection_sends_diary_as_user_message():
    client = _FakeClient("  힘내세요!  ")

    reply = fetch_reflection("오늘은 피곤했다", client_factory=lambda: client)

    assert reply == "힘내세요!"
    messages = client.calls[0]["messages"]
    assert messages[0]["role"] == "system"
    assert messages[1] == {"role": "user", "content": "오늘은 피곤했다"}


def test_blank_diary_skips_the_model():
    def fetch(_content):
        raise AssertionError("should not be called")

    assert request_reflection("   ", fetch) == REFLECTION_EMPTY_DIARY_MESSAGE


def test_failure_returns_fallback_message():
    def fetch(_content):
        raise RuntimeError("network down")

    assert request_reflection("diary", fetch) == REFLECTION_FALLBACK_MESSAGE


def test_empty_reply_returns_default_message():
    assert request_reflection("diary", lambda _content: "  ") == REFLECTION_EMPTY_RESPONSE_MESSAGE
    assert request_reflection("diary", lambda _content: None) == REFLECTION_EMPTY_RESPONSE_MESSAGE


def test_coordinator_records_latest_result():
    coordinator = ReflectionCoordinator(lambda content: f"reply to {content}")

    result = asyncio.run(coordinator.request("good day", "2024-03-18"))

    assert result == "reply to good day"
    assert coordinator.latest_reflection == "reply to good day"
    assert coordinator.latest_date == "2024-03-18"
    assert coordinator.sequence == 1
    assert coordinator.busy is False


def test_superseded_request_does_not_overwrite_newer_result():
    release_first = threading.Event()

    def fetch(content):
        if content == "first":
            release_first.wait(timeout=5)
            return "first reply"
        return "second reply"

    coordinator = ReflectionCoordinator(fetch)

    async def scenario():
        first = asyncio.ensure_future(coordinator.request("first", "2024-03-18"))
        await asyncio.sleep(0)
        second = await coordinator.request("second", "2024-03-19")
        release_first.set()
        return await first, second

    first_result, second_result = asyncio.run(scenario())

    assert first_result is None
    assert second_result == "second reply"
    assert coordinator.latest_reflection == "second reply"
    assert coordinator.latest_date == "2024-03-19"
    assert coordinator.sequence == 2
