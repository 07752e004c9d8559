"""Analysis and search routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from modiary.services.analytics_service import monthly_diaries, monthly_routine_stats, monthly_summary, search
from modiary.services.state_store import StateStore, get_store
from modiary.services.timeline_service import normalize_month
from modiary.web import handlers as web_handlers

router = APIRouter()


@router.get("/api/analysis", name="api_analysis")
def api_analysis(request: Request, store: StateStore = Depends(get_store)):
    return web_handlers.api_analysis(
        request,
        store,
        normalize_month_fn=normalize_month,
        monthly_routine_stats_fn=monthly_routine_stats,
        monthly_summary_fn=monthly_summary,
        monthly_diaries_fn=monthly_diaries,
    )


@router.get("/api/search", name="api_search")
def api_search(q: str = "", store: StateStore = Depends(get_store)):
    return web_handlers.api_search(q, store, search_fn=search)
