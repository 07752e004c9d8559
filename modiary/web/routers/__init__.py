"""Router exports."""

# 日本語: 各機能ルーターを集約して application.py から一括 import 可能にする / English: Re-export feature routers for centralized app wiring
from .analysis_router import router as analysis_router
from .backup_router import router as backup_router
from .calendar_router import router as calendar_router
from .day_router import router as day_router
from .reflection_router import router as reflection_router
from .routines_router import router as routines_router

__all__ = [
    "analysis_router",
    "backup_router",
    "calendar_router",
    "day_router",
    "reflection_router",
    "routines_router",
]
