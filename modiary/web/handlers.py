"""HTTP handler implementations used by the routers."""

from __future__ import annotations

import datetime
import logging

from fastapi import HTTPException, Request
from fastapi.responses import Response

from modiary.core.config import DEFAULT_SCHEDULE_COLOR, SCHEDULE_COLORS
from modiary.llm.model_selection import apply_model_selection, current_available_models, update_override
from modiary.models import AppState
from modiary.services import transitions
from modiary.services.backup_service import IMPORT_MODES, summarize
from modiary.services.errors import BackupFormatError, CalendarImportError, NotFoundError
from modiary.services.state_store import StateStore

logger = logging.getLogger(__name__)


def _parse_date(date_str: str) -> datetime.date:
    try:
        return datetime.datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")


def _parse_time(value) -> str:
    if value in (None, ""):
        return ""
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail="time must be HH:MM or empty")
    try:
        return datetime.datetime.strptime(value.strip(), "%H:%M").strftime("%H:%M")
    except ValueError:
        raise HTTPException(status_code=400, detail="time must be HH:MM or empty")


async def _json_payload(request: Request) -> dict:
    try:
        payload = await request.json()
    except Exception:
        payload = {}
    return payload if isinstance(payload, dict) else {}


def _serialize_routine(routine) -> dict:
    return {
        "id": routine.id,
        "text": routine.text,
        "type": routine.type,
        "days": list(routine.days),
        "isActive": routine.is_active,
        "order": routine.order,
    }


def _apply(store: StateStore, transition, *args, **kwargs) -> AppState:
    try:
        return store.apply(transition, *args, **kwargs)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


# Routines


def api_routines(store: StateStore):
    routines = sorted(store.state.routines, key=lambda routine: routine.order)
    return {
        "routines": [_serialize_routine(r) for r in routines if r.is_active],
        "archived": [_serialize_routine(r) for r in routines if not r.is_active],
    }


async def add_routine(request: Request, store: StateStore):
    payload = await _json_payload(request)
    days = payload.get("days", [1, 2, 3, 4, 5])
    if not isinstance(days, list) or not all(isinstance(d, int) and 0 <= d <= 6 for d in days):
        raise HTTPException(status_code=400, detail="days must be a list of weekday indexes 0-6")
    state = _apply(
        store,
        transitions.add_routine,
        payload.get("text") or "",
        days,
        id_generator=store.id_generator,
    )
    return {"status": "ok", "routine": _serialize_routine(state.routines[-1])}


def set_routine_active(routine_id: str, is_active: bool, store: StateStore):
    _apply(store, transitions.set_routine_active, routine_id, is_active)
    return {"status": "ok"}


async def move_routine(request: Request, routine_id: str, store: StateStore):
    payload = await _json_payload(request)
    _apply(store, transitions.move_routine, routine_id, payload.get("direction"))
    return api_routines(store)


def delete_routine(routine_id: str, store: StateStore):
    removed = {}

    def _delete(state):
        new_state = transitions.delete_routine(state, routine_id)
        removed["checks"] = len(state.check_statuses) - len(new_state.check_statuses)
        return new_state

    _apply(store, _delete)
    return {"status": "ok", "removed_checks": removed["checks"]}


# Day view


def api_day_view(date_str: str, store: StateStore, *, get_timeline_data_fn):
    date_obj = _parse_date(date_str)
    state = store.state
    timeline_items, completion_rate = get_timeline_data_fn(state, date_obj)
    diary = next((d for d in state.diaries if d.date == date_obj.isoformat()), None)

    return {
        "date": date_obj.isoformat(),
        "weekday": date_obj.isoweekday() % 7,
        "day_name": date_obj.strftime("%A"),
        "routines": [item for item in timeline_items if item["type"] == "routine"],
        "schedules": [item for item in timeline_items if item["type"] == "schedule"],
        "completion_rate": completion_rate,
        "diary_content": diary.content if diary else "",
        "diary_mood": diary.mood if diary else None,
    }


def toggle_check(date_str: str, template_id: str, store: StateStore, *, daily_completion_ratio_fn):
    date_obj = _parse_date(date_str)
    state = _apply(store, transitions.toggle_check, date_obj.isoformat(), template_id)
    check = next(c for c in state.check_statuses if c.key == (date_obj.isoformat(), template_id))
    return {
        "status": "ok",
        "completed": check.completed,
        "completion_rate": daily_completion_ratio_fn(state, date_obj),
    }


async def update_diary(request: Request, date_str: str, store: StateStore):
    date_obj = _parse_date(date_str)
    payload = await _json_payload(request)
    content = payload.get("content", "")
    mood = payload.get("mood")
    if not isinstance(content, str):
        raise HTTPException(status_code=400, detail="content must be a string")
    if mood is not None and not isinstance(mood, str):
        raise HTTPException(status_code=400, detail="mood must be a string")
    _apply(store, transitions.update_diary, date_obj.isoformat(), content, mood)
    return {"status": "ok", "date": date_obj.isoformat()}


# Calendar and schedules


def api_calendar(request: Request, store: StateStore, *, normalize_month_fn, get_calendar_data_fn):
    today = datetime.date.today()
    try:
        year = int(request.query_params.get("year", today.year))
        month = int(request.query_params.get("month", today.month))
    except ValueError:
        raise HTTPException(status_code=400, detail="year and month must be integers")
    year, month = normalize_month_fn(year, month)

    return {
        "calendar_data": get_calendar_data_fn(store.state, year, month),
        "year": year,
        "month": month,
        "today": today.isoformat(),
    }


async def add_schedule(request: Request, store: StateStore):
    payload = await _json_payload(request)
    date_obj = _parse_date(str(payload.get("date", "")))
    color = payload.get("color") or DEFAULT_SCHEDULE_COLOR
    if color not in SCHEDULE_COLORS:
        raise HTTPException(status_code=400, detail="Unknown schedule color")
    state = _apply(
        store,
        transitions.add_schedule,
        date_obj.isoformat(),
        payload.get("text") or "",
        _parse_time(payload.get("time")),
        color,
        id_generator=store.id_generator,
    )
    schedule = state.schedules[-1]
    return {
        "status": "ok",
        "schedule": {
            "id": schedule.id,
            "date": schedule.date,
            "time": schedule.time,
            "text": schedule.text,
            "color": schedule.color,
        },
    }


def delete_schedule(schedule_id: str, store: StateStore):
    _apply(store, transitions.remove_schedule, schedule_id)
    return {"status": "ok"}


async def import_calendar(request: Request, store: StateStore, *, import_calendar_fn):
    raw = await request.body()
    text = raw.decode("utf-8", errors="replace")
    counts = {}

    def _import(state):
        new_state, counts["added"], counts["parsed"] = import_calendar_fn(state, text, id_generator=store.id_generator)
        return new_state

    try:
        store.apply(_import)
    except CalendarImportError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    added, parsed = counts["added"], counts["parsed"]
    return {"status": "ok", "parsed": parsed, "added": added, "skipped": parsed - added}


# Analysis and search


def api_analysis(
    request: Request,
    store: StateStore,
    *,
    normalize_month_fn,
    monthly_routine_stats_fn,
    monthly_summary_fn,
    monthly_diaries_fn,
):
    today = datetime.date.today()
    try:
        year = int(request.query_params.get("year", today.year))
        month = int(request.query_params.get("month", today.month))
    except ValueError:
        raise HTTPException(status_code=400, detail="year and month must be integers")
    year, month = normalize_month_fn(year, month)

    state = store.state
    stats = monthly_routine_stats_fn(state, year, month)
    return {
        "year": year,
        "month": month,
        "routine_stats": stats,
        "summary": monthly_summary_fn(stats),
        "diaries": monthly_diaries_fn(state, year, month),
    }


def api_search(q: str, store: StateStore, *, search_fn):
    results = search_fn(store.state, q)
    return {"results": [{"type": r.kind.value, "date": r.date, "text": r.text} for r in results]}


# Backup


def export_backup(store: StateStore, *, export_backup_fn):
    filename, body = export_backup_fn(store.state)
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def import_backup(request: Request, store: StateStore, *, import_backup_fn):
    mode = request.query_params.get("mode", "merge")
    if mode not in IMPORT_MODES:
        raise HTTPException(status_code=400, detail="mode must be 'merge' or 'replace'")
    raw = await request.body()
    try:
        new_state = store.apply(import_backup_fn, raw, mode)
    except BackupFormatError as exc:
        logger.warning("Rejected backup import: %s", exc)
        raise HTTPException(status_code=400, detail=f"Invalid backup file: {exc}")
    return {"status": "ok", "mode": mode, "counts": summarize(new_state)}


# Reflection


async def request_reflection(date_str: str, store: StateStore, coordinator):
    date_obj = _parse_date(date_str)
    diary = next((d for d in store.state.diaries if d.date == date_obj.isoformat()), None)
    result = await coordinator.request(diary.content if diary else "", date_obj.isoformat())
    return {"reflection": result, "stale": result is None, "sequence": coordinator.sequence}


def reflection_status(coordinator):
    return {
        "reflection": coordinator.latest_reflection,
        "date": coordinator.latest_date,
        "busy": coordinator.busy,
    }


def list_models(*, apply_model_selection_fn=apply_model_selection, current_available_models_fn=current_available_models):
    provider, model, base_url, _ = apply_model_selection_fn("reflection")
    return {
        "models": current_available_models_fn(),
        "current": {"provider": provider, "model": model, "base_url": base_url},
    }


async def update_model_settings(request: Request, *, update_override_fn=update_override):
    payload = await _json_payload(request)
    selection = payload.get("selection") if "selection" in payload else payload
    if isinstance(selection, dict) and "reflection" in selection:
        selection = selection.get("reflection")
    if selection is not None and not isinstance(selection, dict):
        raise HTTPException(status_code=400, detail="selection must be an object")

    provider, model, base_url, _ = update_override_fn(selection if selection else None)
    return {"status": "ok", "applied": {"provider": provider, "model": model, "base_url": base_url}}
