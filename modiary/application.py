"""FastAPI application assembly."""

from __future__ import annotations

from fastapi import FastAPI

from modiary.core.db import _init_db
from modiary.web.routers import (
    analysis_router,
    backup_router,
    calendar_router,
    day_router,
    reflection_router,
    routines_router,
)


def create_app() -> FastAPI:
    # 日本語: FastAPI アプリ本体を作成 / English: Create root FastAPI application
    app = FastAPI(title="Modiary")

    # 日本語: 機能別ルーターを順次登録 / English: Register feature routers
    app.include_router(analysis_router)
    app.include_router(backup_router)
    app.include_router(calendar_router)
    app.include_router(day_router)
    app.include_router(reflection_router)
    app.include_router(routines_router)

    @app.on_event("startup")
    def _startup_init_db() -> None:
        # 日本語: 起動時にマイグレーション適用を保証 / English: Ensure migrations are applied on startup
        _init_db()

    return app


# 日本語: import 時点で既定アプリを構築 / English: Build default app instance at import time
app = create_app()
