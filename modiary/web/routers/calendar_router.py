"""Calendar and schedule routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from modiary.services.calendar_import_service import import_calendar
from modiary.services.state_store import StateStore, get_store
from modiary.services.timeline_service import _get_calendar_data, normalize_month
from modiary.web import handlers as web_handlers

# 日本語: カレンダーAPI群 / English: Calendar API router
router = APIRouter()


@router.get("/api/calendar", name="api_calendar")
def api_calendar(request: Request, store: StateStore = Depends(get_store)):
    # 日本語: 月間カレンダー集計を handler に委譲 / English: Delegate monthly calendar aggregation to handler
    return web_handlers.api_calendar(
        request,
        store,
        normalize_month_fn=normalize_month,
        get_calendar_data_fn=_get_calendar_data,
    )


@router.post("/api/schedules", name="add_schedule")
async def add_schedule(request: Request, store: StateStore = Depends(get_store)):
    return await web_handlers.add_schedule(request, store)


@router.delete("/api/schedules/{schedule_id}", name="delete_schedule")
def delete_schedule(schedule_id: str, store: StateStore = Depends(get_store)):
    return web_handlers.delete_schedule(schedule_id, store)


@router.post("/api/calendar/import", name="import_calendar")
async def import_calendar_file(request: Request, store: StateStore = Depends(get_store)):
    # 日本語: .ics 本文をそのまま受け取る / English: Accept the raw .ics body
    return await web_handlers.import_calendar(request, store, import_calendar_fn=import_calendar)
