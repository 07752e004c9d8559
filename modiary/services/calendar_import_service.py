"""Import events from a restricted iCalendar (.ics) export."""

from __future__ import annotations

import datetime
import logging
import re
from typing import Iterable, List, Tuple

from sqlmodel import SQLModel

from modiary.core.config import DEFAULT_SCHEDULE_COLOR
from modiary.core.ids import IdGenerator
from modiary.models import AppState, Schedule
from modiary.services.errors import CalendarImportError

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")
_DATE_PART = re.compile(r"\d{8}")


class CalendarCandidate(SQLModel):
    date: str
    time: str = ""
    text: str


def _decode_dtstart(line: str) -> Tuple[str | None, str]:
    """Return (YYYY-MM-DD or None, HH:MM or "") for a DTSTART line."""
    parts = line.split(":")
    value = parts[1] if len(parts) > 1 else ""
    if not value:
        return None, ""

    date_part = value[:8]
    if not _DATE_PART.fullmatch(date_part):
        logger.warning("Skipping calendar date that is not yyyyMMdd: %r", value)
        return None, ""
    try:
        date_value = datetime.datetime.strptime(date_part, "%Y%m%d").date()
    except ValueError:
        logger.warning("Skipping invalid calendar date: %r", value)
        return None, ""

    time_value = ""
    if "T" in value and len(value) >= 13:
        time_value = f"{value[9:11]}:{value[11:13]}"
    return date_value.isoformat(), time_value


def parse_ics(text: str) -> List[CalendarCandidate]:
    """Scan VEVENT blocks; only SUMMARY and DTSTART are read, incomplete events are dropped."""
    candidates: List[CalendarCandidate] = []
    if not isinstance(text, str):
        return candidates

    current: dict | None = None
    for line in _LINE_SPLIT.split(text):
        if line.startswith("BEGIN:VEVENT"):
            current = {}
        elif line.startswith("END:VEVENT"):
            if current is not None and current.get("date") and current.get("text"):
                candidates.append(
                    CalendarCandidate(date=current["date"], time=current.get("time", ""), text=current["text"])
                )
            elif current is not None:
                logger.info("Dropping calendar event without date or summary: %r", current)
            current = None
        elif current is not None:
            if line.startswith("SUMMARY:"):
                current["text"] = line[len("SUMMARY:"):].strip()
            elif line.startswith("DTSTART"):
                date_value, time_value = _decode_dtstart(line)
                if date_value is not None:
                    current["date"] = date_value
                    current["time"] = time_value
    return candidates


def dedupe_candidates(existing: Iterable[Schedule], candidates: Iterable[CalendarCandidate]) -> List[CalendarCandidate]:
    """Drop candidates whose exact (date, text) pair is already present."""
    seen = {(schedule.date, schedule.text) for schedule in existing}
    survivors: List[CalendarCandidate] = []
    for candidate in candidates:
        key = (candidate.date, candidate.text)
        if key in seen:
            continue
        seen.add(key)
        survivors.append(candidate)
    return survivors


def import_calendar(state: AppState, text: str, *, id_generator: IdGenerator) -> Tuple[AppState, int, int]:
    """Return (new state, added count, parsed count)."""
    candidates = parse_ics(text)
    if not candidates:
        raise CalendarImportError("No importable events were found. Please check the file format.")

    survivors = dedupe_candidates(state.schedules, candidates)
    new_schedules = [
        Schedule(
            id=id_generator.next(),
            date=candidate.date,
            time=candidate.time,
            text=candidate.text,
            color=DEFAULT_SCHEDULE_COLOR,
        )
        for candidate in survivors
    ]
    logger.info("Calendar import: %d parsed, %d added", len(candidates), len(new_schedules))
    return state.model_copy(update={"schedules": [*state.schedules, *new_schedules]}), len(new_schedules), len(candidates)


__all__ = ["CalendarCandidate", "parse_ics", "dedupe_candidates", "import_calendar"]
