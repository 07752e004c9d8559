"""Diary reflection and model settings routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from modiary.llm.model_selection import apply_model_selection, current_available_models, update_override
from modiary.services.reflection_service import ReflectionCoordinator, get_reflection_coordinator
from modiary.services.state_store import StateStore, get_store
from modiary.web import handlers as web_handlers

router = APIRouter()


@router.post("/api/day/{date_str}/reflection", name="request_reflection")
async def request_reflection(
    date_str: str,
    store: StateStore = Depends(get_store),
    coordinator: ReflectionCoordinator = Depends(get_reflection_coordinator),
):
    return await web_handlers.request_reflection(date_str, store, coordinator)


@router.get("/api/reflection", name="reflection_status")
def reflection_status(coordinator: ReflectionCoordinator = Depends(get_reflection_coordinator)):
    return web_handlers.reflection_status(coordinator)


@router.get("/api/models", name="list_models")
def list_models():
    # 日本語: 利用可能モデルと現在選択を返す / English: Return available models and active selection
    return web_handlers.list_models(
        apply_model_selection_fn=apply_model_selection,
        current_available_models_fn=current_available_models,
    )


@router.post("/model_settings", name="update_model_settings")
async def update_model_settings(request: Request):
    return await web_handlers.update_model_settings(request, update_override_fn=update_override)
