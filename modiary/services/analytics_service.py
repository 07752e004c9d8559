"""Read-only analytics derived from the AppState."""

from __future__ import annotations

import calendar
import datetime
import math
from typing import Any, Dict, List

from modiary.models import AppState, RoutineTemplate, SearchResult, SearchResultKind


def weekday_index(date_obj: datetime.date) -> int:
    """Sunday-based weekday index (0=Sun ... 6=Sat)."""
    return date_obj.isoweekday() % 7


def _round_percent(value: float) -> int:
    # 日本語: 0.5 は切り上げ / English: Halves round up, not to even
    return int(math.floor(value + 0.5))


def _completed_keys(state: AppState) -> set[tuple[str, str]]:
    return {check.key for check in state.check_statuses if check.completed}


def routines_for_weekday(state: AppState, weekday: int) -> List[RoutineTemplate]:
    return [routine for routine in state.routines if routine.is_active and weekday in routine.days]


def daily_completion_ratio(state: AppState, date_obj: datetime.date) -> int:
    scheduled = routines_for_weekday(state, weekday_index(date_obj))
    if not scheduled:
        return 0
    date_str = date_obj.isoformat()
    completed = _completed_keys(state)
    done = sum(1 for routine in scheduled if (date_str, routine.id) in completed)
    return _round_percent(100 * done / len(scheduled))


def month_days(year: int, month: int) -> List[datetime.date]:
    _, last_day = calendar.monthrange(year, month)
    return [datetime.date(year, month, day) for day in range(1, last_day + 1)]


def monthly_routine_stats(state: AppState, year: int, month: int) -> List[Dict[str, Any]]:
    days = month_days(year, month)
    completed = _completed_keys(state)
    stats = []
    for routine in state.routines:
        if not routine.is_active:
            continue
        scheduled_count = 0
        completed_count = 0
        for day in days:
            if weekday_index(day) not in routine.days:
                continue
            scheduled_count += 1
            if (day.isoformat(), routine.id) in completed:
                completed_count += 1
        percent = _round_percent(100 * completed_count / scheduled_count) if scheduled_count > 0 else 0
        stats.append(
            {
                "id": routine.id,
                "text": routine.text,
                "completed": completed_count,
                "total": scheduled_count,
                "percent": percent,
            }
        )
    return stats


def monthly_summary(stats: List[Dict[str, Any]]) -> Dict[str, Any]:
    total_completed = sum(item["completed"] for item in stats)
    avg_percent = _round_percent(sum(item["percent"] for item in stats) / len(stats)) if stats else 0
    best_routine = None
    for item in stats:
        # 日本語: 同率は先勝ち / English: Earlier routine wins ties
        if best_routine is None or item["percent"] > best_routine["percent"]:
            best_routine = item
    return {"totalCompleted": total_completed, "avgPercent": avg_percent, "bestRoutine": best_routine}


def monthly_diaries(state: AppState, year: int, month: int) -> List[Dict[str, str]]:
    prefix = f"{year:04d}-{month:02d}-"
    entries = [
        {"date": diary.date, "content": diary.content}
        for diary in state.diaries
        if diary.date.startswith(prefix) and diary.content.strip()
    ]
    return sorted(entries, key=lambda item: item["date"], reverse=True)


def search(state: AppState, query: str) -> List[SearchResult]:
    if not query or not query.strip():
        return []
    needle = query.lower()
    results = [
        SearchResult(kind=SearchResultKind.DIARY, date=diary.date, text=diary.content)
        for diary in state.diaries
        if needle in diary.content.lower()
    ]
    results.extend(
        SearchResult(kind=SearchResultKind.SCHEDULE, date=schedule.date, text=schedule.text)
        for schedule in state.schedules
        if needle in schedule.text.lower()
    )
    # 日本語: ゼロ埋め ISO 日付なので文字列比較で足りる / English: Zero-padded ISO dates sort lexicographically
    return sorted(results, key=lambda item: item.date, reverse=True)


__all__ = [
    "weekday_index",
    "routines_for_weekday",
    "daily_completion_ratio",
    "month_days",
    "monthly_routine_stats",
    "monthly_summary",
    "monthly_diaries",
    "search",
]
