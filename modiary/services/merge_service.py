"""Reconcile an imported AppState snapshot with the current one."""

from __future__ import annotations

from typing import Dict

from modiary.core.config import DIARY_MERGE_SEPARATOR
from modiary.models import AppState, CheckStatus, DiaryEntry, RoutineTemplate, Schedule


def _merge_diary(current: DiaryEntry, incoming: DiaryEntry) -> DiaryEntry:
    mood = incoming.mood if incoming.mood is not None else current.mood
    if current.content == incoming.content or not current.content:
        content = incoming.content
    elif not incoming.content:
        content = current.content
    else:
        # 日本語: 両方の本文を残す / English: Keep both authors' text
        content = f"{current.content}{DIARY_MERGE_SEPARATOR}{incoming.content}"
    return DiaryEntry(date=incoming.date, content=content, mood=mood)


def merge_states(current: AppState, incoming: AppState) -> AppState:
    """Merge `incoming` into `current` without silent data loss.

    Routines and schedules: incoming replaces current on id collision.
    Check statuses: completed flags are OR-ed, so a completion recorded on either
    side survives. Diaries: differing non-empty contents are concatenated,
    current first. Result order is current keys followed by new incoming keys.
    """
    routines: Dict[str, RoutineTemplate] = {r.id: r for r in current.routines}
    for routine in incoming.routines:
        routines[routine.id] = routine

    checks: Dict[tuple[str, str], CheckStatus] = {c.key: c for c in current.check_statuses}
    for check in incoming.check_statuses:
        existing = checks.get(check.key)
        if existing is None:
            checks[check.key] = check
        else:
            checks[check.key] = check.model_copy(update={"completed": check.completed or existing.completed})

    schedules: Dict[str, Schedule] = {s.id: s for s in current.schedules}
    for schedule in incoming.schedules:
        schedules[schedule.id] = schedule

    diaries: Dict[str, DiaryEntry] = {d.date: d for d in current.diaries}
    for diary in incoming.diaries:
        existing_diary = diaries.get(diary.date)
        diaries[diary.date] = diary if existing_diary is None else _merge_diary(existing_diary, diary)

    return AppState(
        routines=list(routines.values()),
        check_statuses=list(checks.values()),
        schedules=list(schedules.values()),
        diaries=list(diaries.values()),
    )


__all__ = ["merge_states"]
