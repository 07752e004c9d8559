import pytest
from conftest import CountingIdGenerator, make_state, schedule

from modiary.core.config import DEFAULT_SCHEDULE_COLOR
from modiary.services.calendar_import_service import dedupe_candidates, import_calendar, parse_ics
from modiary.services.errors import CalendarImportError

TWO_EVENTS = "\n".join(
    [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "BEGIN:VEVENT",
        "DTSTART;TZID=Asia/Seoul:20240315T093000",
        "SUMMARY:Team sync",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "DTSTART;VALUE=DATE:20240320",
        "SUMMARY:Holiday",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
)


def test_parse_timed_and_all_day_events():
    candidates = parse_ics(TWO_EVENTS)

    assert [(c.date, c.time, c.text) for c in candidates] == [
        ("2024-03-15", "09:30", "Team sync"),
        ("2024-03-20", "", "Holiday"),
    ]


def test_parse_utc_timed_event():
    text = "BEGIN:VEVENT\nDTSTART:20240315T093000Z\nSUMMARY:Team sync\nEND:VEVENT"

    candidates = parse_ics(text)

    assert [(c.date, c.time, c.text) for c in candidates] == [("2024-03-15", "09:30", "Team sync")]


def test_parse_accepts_crlf_line_endings():
    candidates = parse_ics(TWO_EVENTS.replace("\n", "\r\n"))
    assert [c.text for c in candidates] == ["Team sync", "Holiday"]


def test_event_without_summary_is_dropped():
    text = "BEGIN:VEVENT\nDTSTART:20240101T080000\nEND:VEVENT\nBEGIN:VEVENT\nDTSTART:20240102\nSUMMARY:Kept\nEND:VEVENT"
    assert [c.text for c in parse_ics(text)] == ["Kept"]


def test_event_with_invalid_date_is_dropped():
    text = "BEGIN:VEVENT\nDTSTART:20241399\nSUMMARY:Broken\nEND:VEVENT"
    assert parse_ics(text) == []


def test_lines_outside_events_are_ignored():
    text = "SUMMARY:Stray\nDTSTART:20240101\nBEGIN:VEVENT\nSUMMARY:Inside\nDTSTART:20240105\nEND:VEVENT"
    candidates = parse_ics(text)
    assert [(c.date, c.text) for c in candidates] == [("2024-01-05", "Inside")]


def test_dedupe_against_existing_and_within_batch():
    existing = [schedule("s1", "2024-03-15", "Team sync")]
    candidates = parse_ics(TWO_EVENTS + "\n" + TWO_EVENTS)

    survivors = dedupe_candidates(existing, candidates)

    assert [(c.date, c.text) for c in survivors] == [("2024-03-20", "Holiday")]


def test_import_adds_schedules_with_default_color():
    state, added, parsed = import_calendar(make_state(), TWO_EVENTS, id_generator=CountingIdGenerator("cal"))

    assert (added, parsed) == (2, 2)
    assert [(s.id, s.date, s.time, s.text) for s in state.schedules] == [
        ("cal-1", "2024-03-15", "09:30", "Team sync"),
        ("cal-2", "2024-03-20", "", "Holiday"),
    ]
    assert all(s.color == DEFAULT_SCHEDULE_COLOR for s in state.schedules)


def test_importing_same_file_twice_adds_nothing_the_second_time():
    ids = CountingIdGenerator()
    once, added_first, _ = import_calendar(make_state(), TWO_EVENTS, id_generator=ids)
    twice, added_second, parsed = import_calendar(once, TWO_EVENTS, id_generator=ids)

    assert added_first == 2
    assert added_second == 0
    assert parsed == 2
    assert twice.schedules == once.schedules


def test_import_without_events_raises():
    with pytest.raises(CalendarImportError):
        import_calendar(make_state(), "BEGIN:VCALENDAR\nEND:VCALENDAR", id_generator=CountingIdGenerator())
