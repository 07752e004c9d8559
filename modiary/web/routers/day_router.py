"""Day detail routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from modiary.services.analytics_service import daily_completion_ratio
from modiary.services.state_store import StateStore, get_store
from modiary.services.timeline_service import _get_timeline_data
from modiary.web import handlers as web_handlers

router = APIRouter()


@router.get("/api/day/{date_str}", name="api_day_view")
def api_day_view(date_str: str, store: StateStore = Depends(get_store)):
    return web_handlers.api_day_view(date_str, store, get_timeline_data_fn=_get_timeline_data)


@router.post("/api/day/{date_str}/checks/{template_id}", name="toggle_check")
def toggle_check(date_str: str, template_id: str, store: StateStore = Depends(get_store)):
    return web_handlers.toggle_check(
        date_str, template_id, store, daily_completion_ratio_fn=daily_completion_ratio
    )


@router.put("/api/day/{date_str}/diary", name="update_diary")
async def update_diary(request: Request, date_str: str, store: StateStore = Depends(get_store)):
    return await web_handlers.update_diary(request, date_str, store)
