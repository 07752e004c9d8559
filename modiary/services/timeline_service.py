"""Day timeline and month calendar views over the AppState."""

from __future__ import annotations

import calendar
import datetime
from typing import Any, Dict, List, Tuple

from dateutil.relativedelta import relativedelta

from modiary.models import AppState, RoutineTemplate, Schedule
from modiary.services.analytics_service import daily_completion_ratio, weekday_index


def get_weekday_routines(state: AppState, date_obj: datetime.date) -> List[RoutineTemplate]:
    """Routines shown on a day: active ones for the weekday, plus archived ones completed that day."""
    weekday = weekday_index(date_obj)
    date_str = date_obj.isoformat()
    completed_ids = {c.template_id for c in state.check_statuses if c.date == date_str and c.completed}
    matched = [
        routine
        for routine in state.routines
        if weekday in routine.days and (routine.is_active or routine.id in completed_ids)
    ]
    return sorted(matched, key=lambda routine: routine.order)


def schedules_on(state: AppState, date_str: str) -> List[Schedule]:
    # 日本語: 終日("")が先頭に来る / English: All-day entries ("") sort first
    return sorted((s for s in state.schedules if s.date == date_str), key=lambda s: s.time)


def _get_timeline_data(state: AppState, date_obj: datetime.date) -> Tuple[List[Dict[str, Any]], int]:
    date_str = date_obj.isoformat()
    completed_ids = {c.template_id for c in state.check_statuses if c.date == date_str and c.completed}

    timeline_items = []
    for routine in get_weekday_routines(state, date_obj):
        timeline_items.append(
            {
                "type": "routine",
                "id": routine.id,
                "text": routine.text,
                "order": routine.order,
                "is_active": routine.is_active,
                "completed": routine.id in completed_ids,
            }
        )
    for schedule in schedules_on(state, date_str):
        timeline_items.append(
            {
                "type": "schedule",
                "id": schedule.id,
                "text": schedule.text,
                "time": schedule.time,
                "color": schedule.color,
            }
        )

    return timeline_items, daily_completion_ratio(state, date_obj)


def normalize_month(year: int, month: int) -> Tuple[int, int]:
    """Roll month overflow/underflow into the year (month=13 -> January next year)."""
    shifted = datetime.date(year, 1, 1) + relativedelta(months=month - 1)
    return shifted.year, shifted.month


def _get_calendar_data(state: AppState, year: int, month: int) -> List[List[Dict[str, Any]]]:
    cal = calendar.Calendar(firstweekday=6)
    diary_dates = {d.date for d in state.diaries if d.content.strip()}

    calendar_data = []
    for week in cal.monthdatescalendar(year, month):
        week_data = []
        for day in week:
            date_str = day.isoformat()
            day_schedules = schedules_on(state, date_str)
            week_data.append(
                {
                    "date": date_str,
                    "day_num": day.day,
                    "is_current_month": day.month == month,
                    "schedule_count": len(day_schedules),
                    "schedule_preview": [
                        {"id": s.id, "text": s.text, "color": s.color} for s in day_schedules[:3]
                    ],
                    "has_diary": date_str in diary_dates,
                }
            )
        calendar_data.append(week_data)
    return calendar_data


__all__ = [
    "get_weekday_routines",
    "schedules_on",
    "_get_timeline_data",
    "normalize_month",
    "_get_calendar_data",
]
