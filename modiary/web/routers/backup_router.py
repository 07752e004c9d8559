"""Backup export/import routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from modiary.services.backup_service import export_backup, import_backup
from modiary.services.state_store import StateStore, get_store
from modiary.web import handlers as web_handlers

# 日本語: バックアップ入出力API群 / English: Backup import/export router
router = APIRouter()


@router.get("/api/backup/export", name="export_backup")
def export_backup_file(store: StateStore = Depends(get_store)):
    return web_handlers.export_backup(store, export_backup_fn=export_backup)


@router.post("/api/backup/import", name="import_backup")
async def import_backup_file(request: Request, store: StateStore = Depends(get_store)):
    # 日本語: mode=merge は統合, mode=replace は全置換 / English: mode=merge combines, mode=replace overwrites
    return await web_handlers.import_backup(request, store, import_backup_fn=import_backup)
