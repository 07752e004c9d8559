"""Routine routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from modiary.services.state_store import StateStore, get_store
from modiary.web import handlers as web_handlers

router = APIRouter()


@router.get("/api/routines", name="api_routines")
def api_routines(store: StateStore = Depends(get_store)):
    return web_handlers.api_routines(store)


@router.post("/api/routines", name="add_routine")
async def add_routine(request: Request, store: StateStore = Depends(get_store)):
    return await web_handlers.add_routine(request, store)


@router.post("/api/routines/{routine_id}/archive", name="archive_routine")
def archive_routine(routine_id: str, store: StateStore = Depends(get_store)):
    return web_handlers.set_routine_active(routine_id, False, store)


@router.post("/api/routines/{routine_id}/restore", name="restore_routine")
def restore_routine(routine_id: str, store: StateStore = Depends(get_store)):
    return web_handlers.set_routine_active(routine_id, True, store)


@router.post("/api/routines/{routine_id}/move", name="move_routine")
async def move_routine(request: Request, routine_id: str, store: StateStore = Depends(get_store)):
    return await web_handlers.move_routine(request, routine_id, store)


@router.delete("/api/routines/{routine_id}", name="delete_routine")
def delete_routine(routine_id: str, store: StateStore = Depends(get_store)):
    return web_handlers.delete_routine(routine_id, store)
