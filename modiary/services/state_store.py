"""State store: loading with defaults, serialization and whole-document persistence."""

from __future__ import annotations

import datetime
import json
import logging
import threading
from typing import Any, Callable, Dict, List, Protocol

from sqlmodel import Session

from modiary.core.config import DEFAULT_SCHEDULE_COLOR, STATE_KEY
from modiary.core.ids import IdGenerator, default_id_generator
from modiary.models import AppState, CheckStatus, DiaryEntry, RoutineTemplate, Schedule, StoredState

logger = logging.getLogger(__name__)


def _as_id(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int)):
        text = str(value).strip()
        return text or None
    return None


def _as_days(value: Any) -> List[int]:
    if not isinstance(value, list):
        return []
    days = {day for day in value if isinstance(day, int) and not isinstance(day, bool) and 0 <= day <= 6}
    return sorted(days)


def _coerce_routine(raw: Any, index: int) -> RoutineTemplate | None:
    if not isinstance(raw, dict):
        return None
    routine_id = _as_id(raw.get("id"))
    text = raw.get("text")
    if routine_id is None or not isinstance(text, str):
        return None

    is_active = raw.get("isActive")
    order = raw.get("order")
    days = raw.get("days") if "days" in raw else raw.get("recurrenceDays")
    routine_type = raw.get("type")
    return RoutineTemplate(
        id=routine_id,
        text=text,
        type=routine_type if isinstance(routine_type, str) and routine_type else "weekly",
        days=_as_days(days),
        is_active=is_active if isinstance(is_active, bool) else True,
        order=order if isinstance(order, int) and not isinstance(order, bool) else index,
    )


def _coerce_check(raw: Any) -> CheckStatus | None:
    if not isinstance(raw, dict):
        return None
    date_value = raw.get("date")
    template_id = _as_id(raw.get("templateId"))
    if not isinstance(date_value, str) or not date_value or template_id is None:
        return None
    return CheckStatus(date=date_value, template_id=template_id, completed=bool(raw.get("completed")))


def _coerce_schedule(raw: Any) -> Schedule | None:
    if not isinstance(raw, dict):
        return None
    schedule_id = _as_id(raw.get("id"))
    date_value = raw.get("date")
    text = raw.get("text")
    if schedule_id is None or not isinstance(date_value, str) or not date_value or not isinstance(text, str):
        return None
    time_value = raw.get("time")
    color = raw.get("color")
    return Schedule(
        id=schedule_id,
        date=date_value,
        time=time_value if isinstance(time_value, str) else "",
        text=text,
        color=color if isinstance(color, str) and color else DEFAULT_SCHEDULE_COLOR,
    )


def _coerce_diary(raw: Any) -> DiaryEntry | None:
    if not isinstance(raw, dict):
        return None
    date_value = raw.get("date")
    if not isinstance(date_value, str) or not date_value:
        return None
    content = raw.get("content")
    mood = raw.get("mood")
    return DiaryEntry(
        date=date_value,
        content=content if isinstance(content, str) else "",
        mood=mood if isinstance(mood, str) else None,
    )


def _items(document: Dict[str, Any], key: str) -> List[Any]:
    value = document.get(key)
    return value if isinstance(value, list) else []


def load_state(document: Any) -> AppState:
    """Build an AppState from a decoded document, filling fields older snapshots lack."""
    if not isinstance(document, dict):
        return AppState()

    # 日本語: 一意キーの重複は後勝ち / English: Later records win on duplicate unique keys
    routines: Dict[str, RoutineTemplate] = {}
    for index, raw in enumerate(_items(document, "routines")):
        routine = _coerce_routine(raw, index)
        if routine is None:
            logger.warning("Skipping malformed routine record at index %d", index)
            continue
        routines[routine.id] = routine

    checks: Dict[tuple[str, str], CheckStatus] = {}
    for raw in _items(document, "checkStatuses"):
        check = _coerce_check(raw)
        if check is None:
            logger.warning("Skipping malformed check status record: %r", raw)
            continue
        checks[check.key] = check

    schedules: Dict[str, Schedule] = {}
    for raw in _items(document, "schedules"):
        schedule = _coerce_schedule(raw)
        if schedule is None:
            logger.warning("Skipping malformed schedule record: %r", raw)
            continue
        schedules[schedule.id] = schedule

    diaries: Dict[str, DiaryEntry] = {}
    for raw in _items(document, "diaries"):
        diary = _coerce_diary(raw)
        if diary is None:
            logger.warning("Skipping malformed diary record: %r", raw)
            continue
        diaries[diary.date] = diary

    return AppState(
        routines=list(routines.values()),
        check_statuses=list(checks.values()),
        schedules=list(schedules.values()),
        diaries=list(diaries.values()),
    )


def dump_state(state: AppState) -> Dict[str, Any]:
    """Serialize to the persisted/export document shape."""
    diaries = []
    for diary in state.diaries:
        item: Dict[str, Any] = {"date": diary.date, "content": diary.content}
        if diary.mood is not None:
            item["mood"] = diary.mood
        diaries.append(item)

    return {
        "routines": [
            {
                "id": routine.id,
                "text": routine.text,
                "type": routine.type,
                "days": list(routine.days),
                "isActive": routine.is_active,
                "order": routine.order,
            }
            for routine in state.routines
        ],
        "checkStatuses": [
            {"date": check.date, "templateId": check.template_id, "completed": check.completed}
            for check in state.check_statuses
        ],
        "schedules": [
            {
                "id": schedule.id,
                "date": schedule.date,
                "time": schedule.time,
                "text": schedule.text,
                "color": schedule.color,
            }
            for schedule in state.schedules
        ],
        "diaries": diaries,
    }


class StateBackend(Protocol):
    def read(self) -> str | None: ...

    def write(self, payload: str) -> None: ...


class SqlStateBackend:
    """Stores the serialized document in a single `stored_state` row."""

    def __init__(self, engine, key: str = STATE_KEY):
        self.engine = engine
        self.key = key

    def read(self) -> str | None:
        with Session(self.engine) as db:
            row = db.get(StoredState, self.key)
            return row.payload if row else None

    def write(self, payload: str) -> None:
        self._put(self.key, payload)

    def stash_corrupt(self, payload: str) -> str:
        backup_key = f"{self.key}.corrupt-{int(datetime.datetime.now().timestamp())}"
        self._put(backup_key, payload)
        return backup_key

    def _put(self, key: str, payload: str) -> None:
        with Session(self.engine) as db:
            row = db.get(StoredState, key)
            if row is None:
                row = StoredState(key=key, payload=payload)
            else:
                row.payload = payload
                row.updated_at = datetime.datetime.now()
            db.add(row)
            db.commit()


class StateStore:
    """Owns the single mutable reference to the current AppState."""

    def __init__(self, backend: StateBackend, *, id_generator: IdGenerator = default_id_generator):
        self.backend = backend
        self.id_generator = id_generator
        self._lock = threading.RLock()
        self._state = self._load()

    def _load(self) -> AppState:
        payload = self.backend.read()
        if not payload or not payload.strip():
            return AppState()
        try:
            document = json.loads(payload)
        except json.JSONDecodeError:
            stash = getattr(self.backend, "stash_corrupt", None)
            backup_key = stash(payload) if stash else None
            logger.error("Stored state is not valid JSON; starting empty (backup key: %s)", backup_key)
            return AppState()
        return load_state(document)

    @property
    def state(self) -> AppState:
        return self._state

    def apply(self, transition: Callable[..., AppState], *args: Any, **kwargs: Any) -> AppState:
        # 日本語: 読み取りから差し替えまで一つのロックで保護する / English: Hold one lock from read through swap
        with self._lock:
            new_state = transition(self._state, *args, **kwargs)
            return self.replace(new_state)

    def replace(self, state: AppState) -> AppState:
        # 日本語: 書き込み成功後にのみ参照を差し替える / English: Swap the reference only after the write succeeded
        payload = json.dumps(dump_state(state), ensure_ascii=False)
        with self._lock:
            self.backend.write(payload)
            self._state = state
        return state


_store: StateStore | None = None
_store_lock = threading.Lock()


def get_store() -> StateStore:
    """Process-wide store bound to the configured database."""
    global _store
    if _store is not None:
        return _store
    with _store_lock:
        if _store is None:
            from modiary.core import db as db_module

            db_module.refresh_engine_from_env()
            db_module._ensure_db_initialized()
            _store = StateStore(SqlStateBackend(db_module.engine))
    return _store


def reset_store() -> None:
    global _store
    with _store_lock:
        _store = None


__all__ = [
    "load_state",
    "dump_state",
    "StateBackend",
    "SqlStateBackend",
    "StateStore",
    "get_store",
    "reset_store",
]
