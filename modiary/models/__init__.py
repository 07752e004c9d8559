"""SQLModel exports for Modiary."""

from .state_models import (
    AppState,
    CheckStatus,
    DiaryEntry,
    RoutineTemplate,
    Schedule,
    SearchResult,
    SearchResultKind,
)
from .storage_models import StoredState

__all__ = [
    "AppState",
    "RoutineTemplate",
    "CheckStatus",
    "Schedule",
    "DiaryEntry",
    "SearchResult",
    "SearchResultKind",
    "StoredState",
]
