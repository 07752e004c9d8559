"""Service-layer exports."""

from .analytics_service import (
    daily_completion_ratio,
    monthly_diaries,
    monthly_routine_stats,
    monthly_summary,
    search,
    weekday_index,
)
from .backup_service import export_backup, import_backup, parse_backup
from .calendar_import_service import dedupe_candidates, import_calendar, parse_ics
from .errors import BackupFormatError, CalendarImportError, ModiaryError, NotFoundError
from .merge_service import merge_states
from .reflection_service import ReflectionCoordinator, get_reflection_coordinator, request_reflection
from .state_store import StateStore, dump_state, get_store, load_state
from .timeline_service import _get_calendar_data, _get_timeline_data, get_weekday_routines

__all__ = [
    "daily_completion_ratio",
    "monthly_diaries",
    "monthly_routine_stats",
    "monthly_summary",
    "search",
    "weekday_index",
    "export_backup",
    "import_backup",
    "parse_backup",
    "dedupe_candidates",
    "import_calendar",
    "parse_ics",
    "ModiaryError",
    "BackupFormatError",
    "CalendarImportError",
    "NotFoundError",
    "merge_states",
    "ReflectionCoordinator",
    "get_reflection_coordinator",
    "request_reflection",
    "StateStore",
    "dump_state",
    "get_store",
    "load_state",
    "_get_calendar_data",
    "_get_timeline_data",
    "get_weekday_routines",
]
