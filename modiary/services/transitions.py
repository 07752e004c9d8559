"""Pure state transitions. Each returns a new AppState and leaves its input untouched."""

from __future__ import annotations

from typing import Iterable, List

from modiary.core.config import DEFAULT_SCHEDULE_COLOR
from modiary.core.ids import IdGenerator
from modiary.models import AppState, CheckStatus, DiaryEntry, RoutineTemplate, Schedule
from modiary.services.errors import NotFoundError


def _normalize_days(days: Iterable[int]) -> List[int]:
    return sorted({int(day) for day in days if 0 <= int(day) <= 6})


def _find_routine(state: AppState, routine_id: str) -> RoutineTemplate:
    for routine in state.routines:
        if routine.id == routine_id:
            return routine
    raise NotFoundError(f"Routine not found: {routine_id}")


def add_routine(state: AppState, text: str, days: Iterable[int], *, id_generator: IdGenerator) -> AppState:
    text = (text or "").strip()
    if not text:
        raise ValueError("Routine text must not be empty")
    max_order = max((routine.order for routine in state.routines), default=-1)
    routine = RoutineTemplate(
        id=id_generator.next(),
        text=text,
        days=_normalize_days(days),
        is_active=True,
        order=max_order + 1,
    )
    return state.model_copy(update={"routines": [*state.routines, routine]})


def set_routine_active(state: AppState, routine_id: str, is_active: bool) -> AppState:
    _find_routine(state, routine_id)
    routines = [
        routine.model_copy(update={"is_active": is_active}) if routine.id == routine_id else routine
        for routine in state.routines
    ]
    return state.model_copy(update={"routines": routines})


def move_routine(state: AppState, routine_id: str, direction: str) -> AppState:
    """Swap `order` with the neighbouring active routine."""
    if direction not in {"up", "down"}:
        raise ValueError("direction must be 'up' or 'down'")
    target = _find_routine(state, routine_id)
    active = sorted((r for r in state.routines if r.is_active), key=lambda r: r.order)
    position = next((i for i, r in enumerate(active) if r.id == routine_id), None)
    if position is None:
        return state
    neighbour_index = position - 1 if direction == "up" else position + 1
    if neighbour_index < 0 or neighbour_index >= len(active):
        return state
    neighbour = active[neighbour_index]

    routines = []
    for routine in state.routines:
        if routine.id == target.id:
            routines.append(routine.model_copy(update={"order": neighbour.order}))
        elif routine.id == neighbour.id:
            routines.append(routine.model_copy(update={"order": target.order}))
        else:
            routines.append(routine)
    return state.model_copy(update={"routines": routines})


def delete_routine(state: AppState, routine_id: str) -> AppState:
    """Remove a routine together with every check status that references it."""
    _find_routine(state, routine_id)
    return state.model_copy(
        update={
            "routines": [r for r in state.routines if r.id != routine_id],
            "check_statuses": [c for c in state.check_statuses if c.template_id != routine_id],
        }
    )


def toggle_check(state: AppState, date_str: str, template_id: str) -> AppState:
    _find_routine(state, template_id)
    checks = []
    found = False
    for check in state.check_statuses:
        if check.key == (date_str, template_id):
            checks.append(check.model_copy(update={"completed": not check.completed}))
            found = True
        else:
            checks.append(check)
    if not found:
        checks.append(CheckStatus(date=date_str, template_id=template_id, completed=True))
    return state.model_copy(update={"check_statuses": checks})


def add_schedule(
    state: AppState,
    date_str: str,
    text: str,
    time_value: str = "",
    color: str = DEFAULT_SCHEDULE_COLOR,
    *,
    id_generator: IdGenerator,
) -> AppState:
    text = (text or "").strip()
    if not text:
        raise ValueError("Schedule text must not be empty")
    schedule = Schedule(
        id=id_generator.next(),
        date=date_str,
        time=time_value or "",
        text=text,
        color=color or DEFAULT_SCHEDULE_COLOR,
    )
    return state.model_copy(update={"schedules": [*state.schedules, schedule]})


def remove_schedule(state: AppState, schedule_id: str) -> AppState:
    if not any(schedule.id == schedule_id for schedule in state.schedules):
        raise NotFoundError(f"Schedule not found: {schedule_id}")
    return state.model_copy(update={"schedules": [s for s in state.schedules if s.id != schedule_id]})


def update_diary(state: AppState, date_str: str, content: str, mood: str | None = None) -> AppState:
    diaries = []
    found = False
    for diary in state.diaries:
        if diary.date == date_str:
            update = {"content": content}
            if mood is not None:
                update["mood"] = mood
            diaries.append(diary.model_copy(update=update))
            found = True
        else:
            diaries.append(diary)
    if not found:
        diaries.append(DiaryEntry(date=date_str, content=content, mood=mood))
    return state.model_copy(update={"diaries": diaries})


__all__ = [
    "add_routine",
    "set_routine_active",
    "move_routine",
    "delete_routine",
    "toggle_check",
    "add_schedule",
    "remove_schedule",
    "update_diary",
]
