"""Diary reflection requests with stale-response protection."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from modiary.llm.client import UnifiedClient, _content_to_text

logger = logging.getLogger(__name__)

REFLECTION_EMPTY_DIARY_MESSAGE = "일기를 작성하면 AI가 따뜻한 한마디를 남겨드려요."
REFLECTION_EMPTY_RESPONSE_MESSAGE = "오늘 하루도 고생 많으셨어요."
REFLECTION_FALLBACK_MESSAGE = "항상 당신의 오늘을 응원합니다."

_REFLECTION_PROMPT = (
    "다음은 사용자가 쓴 일기입니다. 이 일기를 읽고 따뜻한 위로나 응원의 메시지, "
    "혹은 가벼운 코멘트를 한 문장으로 한국어로 작성해주세요."
)


def fetch_reflection(content: str, *, client_factory: Callable[[], UnifiedClient] = UnifiedClient) -> str:
    """Call the LLM once. May raise on transport or configuration errors."""
    client = client_factory()
    response = client.create(
        messages=[
            {"role": "system", "content": _REFLECTION_PROMPT},
            {"role": "user", "content": content},
        ],
        temperature=0.7,
    )
    return _content_to_text(response.choices[0].message.content).strip()


def request_reflection(content: str, fetch_fn: Callable[[str], str] = fetch_reflection) -> str:
    """Return a short message for the diary text; never raises."""
    if not content or not content.strip():
        return REFLECTION_EMPTY_DIARY_MESSAGE
    try:
        reply = fetch_fn(content)
    except Exception as exc:
        logger.warning("Reflection request failed: %s", exc)
        return REFLECTION_FALLBACK_MESSAGE
    return reply.strip() if isinstance(reply, str) and reply.strip() else REFLECTION_EMPTY_RESPONSE_MESSAGE


class ReflectionCoordinator:
    """Tags each request with a sequence number; only the latest one may update the result.

    A newer request cancels the wait on the previous one. The worker thread of a
    superseded call keeps running to completion, but its answer is dropped.
    """

    def __init__(self, fetch_fn: Callable[[str], str] = fetch_reflection):
        self.fetch_fn = fetch_fn
        self.latest_reflection: str | None = None
        self.latest_date: str | None = None
        self._sequence = 0
        self._task: asyncio.Future | None = None

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    async def request(self, content: str, date_str: str | None = None) -> str | None:
        """Return the reflection, or None when a newer request superseded this one."""
        self._sequence += 1
        sequence = self._sequence
        if self._task is not None and not self._task.done():
            self._task.cancel()

        task = asyncio.ensure_future(asyncio.to_thread(request_reflection, content, self.fetch_fn))
        self._task = task
        try:
            result = await task
        except asyncio.CancelledError:
            if sequence == self._sequence:
                raise
            logger.info("Reflection request #%d superseded by #%d", sequence, self._sequence)
            return None

        if sequence != self._sequence:
            logger.info("Discarding stale reflection response #%d (latest #%d)", sequence, self._sequence)
            return None

        self.latest_reflection = result
        self.latest_date = date_str
        return result


_coordinator: ReflectionCoordinator | None = None


def get_reflection_coordinator() -> ReflectionCoordinator:
    global _coordinator
    if _coordinator is None:
        _coordinator = ReflectionCoordinator()
    return _coordinator


__all__ = [
    "REFLECTION_EMPTY_DIARY_MESSAGE",
    "REFLECTION_EMPTY_RESPONSE_MESSAGE",
    "REFLECTION_FALLBACK_MESSAGE",
    "fetch_reflection",
    "request_reflection",
    "ReflectionCoordinator",
    "get_reflection_coordinator",
]
