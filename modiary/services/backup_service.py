"""Backup export and import (merge or replace)."""

from __future__ import annotations

import datetime
import json
import logging
from typing import Any, Dict, Tuple

from modiary.core.config import BACKUP_PREFIX
from modiary.models import AppState
from modiary.services.errors import BackupFormatError
from modiary.services.merge_service import merge_states
from modiary.services.state_store import dump_state, load_state

logger = logging.getLogger(__name__)

IMPORT_MODES = {"merge", "replace"}
_STATE_ARRAYS = ("routines", "checkStatuses", "schedules", "diaries")


def backup_filename(today: datetime.date | None = None, prefix: str = BACKUP_PREFIX) -> str:
    today = today or datetime.date.today()
    return f"{prefix}_{today.strftime('%Y%m%d')}.json"


def export_backup(state: AppState, today: datetime.date | None = None) -> Tuple[str, str]:
    """Return (filename, JSON text)."""
    return backup_filename(today), json.dumps(dump_state(state), ensure_ascii=False, indent=2)


def parse_backup(raw: bytes | str) -> AppState:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BackupFormatError("Backup file is not UTF-8 text.") from exc
    try:
        document: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise BackupFormatError("Backup file is not valid JSON.") from exc

    if not isinstance(document, dict):
        raise BackupFormatError("Backup file must contain a JSON object.")
    if not any(key in document for key in _STATE_ARRAYS):
        raise BackupFormatError("Backup file does not look like a Modiary backup.")
    for key in _STATE_ARRAYS:
        if key in document and not isinstance(document[key], list):
            raise BackupFormatError(f"Backup field '{key}' must be a list.")
    return load_state(document)


def import_backup(current: AppState, raw: bytes | str, mode: str) -> AppState:
    if mode not in IMPORT_MODES:
        raise ValueError("mode must be 'merge' or 'replace'")
    incoming = parse_backup(raw)
    if mode == "replace":
        logger.info("Replacing state with imported backup")
        return incoming
    logger.info("Merging imported backup into current state")
    return merge_states(current, incoming)


def summarize(state: AppState) -> Dict[str, int]:
    return {
        "routines": len(state.routines),
        "checkStatuses": len(state.check_statuses),
        "schedules": len(state.schedules),
        "diaries": len(state.diaries),
    }


__all__ = ["IMPORT_MODES", "backup_filename", "export_backup", "parse_backup", "import_backup", "summarize"]
