import datetime

from conftest import check, diary, make_state, routine, schedule

from modiary.models import SearchResultKind
from modiary.services.analytics_service import (
    daily_completion_ratio,
    monthly_diaries,
    monthly_routine_stats,
    monthly_summary,
    search,
    weekday_index,
)


def test_weekday_index_starts_on_sunday():
    assert weekday_index(datetime.date(2024, 3, 17)) == 0  # Sunday
    assert weekday_index(datetime.date(2024, 3, 18)) == 1  # Monday
    assert weekday_index(datetime.date(2024, 3, 23)) == 6  # Saturday


def test_daily_completion_ratio_for_mixed_day():
    state = make_state(
        routines=[
            routine("a", "Stretch", days=[1, 3]),
            routine("b", "Read", days=[1]),
            routine("c", "Run", days=[3]),
        ],
        checks=[check("2024-03-18", "a"), check("2024-03-20", "a"), check("2024-03-20", "c", False)],
    )

    # Monday: a done, b not done
    assert daily_completion_ratio(state, datetime.date(2024, 3, 18)) == 50
    # Wednesday: a done, c explicitly not done
    assert daily_completion_ratio(state, datetime.date(2024, 3, 20)) == 50


def test_daily_completion_ratio_ignores_archived_and_rounds():
    state = make_state(
        routines=[
            routine("a", days=[1]),
            routine("b", days=[1]),
            routine("c", days=[1]),
            routine("d", days=[1], is_active=False),
        ],
        checks=[check("2024-03-18", "a"), check("2024-03-18", "d")],
    )

    assert daily_completion_ratio(state, datetime.date(2024, 3, 18)) == 33


def test_daily_completion_ratio_without_routines_is_zero():
    state = make_state(routines=[routine("a", days=[2])])
    assert daily_completion_ratio(state, datetime.date(2024, 3, 18)) == 0


def test_monthly_stats_count_scheduled_days():
    state = make_state(
        routines=[routine("a", "Stretch", days=[1]), routine("b", "Never", days=[]), routine("z", is_active=False)],
        checks=[check("2024-03-04", "a"), check("2024-03-11", "a"), check("2024-04-01", "a")],
    )

    stats = monthly_routine_stats(state, 2024, 3)

    # March 2024 has Mondays on 4, 11, 18, 25
    assert stats == [
        {"id": "a", "text": "Stretch", "completed": 2, "total": 4, "percent": 50},
        {"id": "b", "text": "Never", "completed": 0, "total": 0, "percent": 0},
    ]


def test_monthly_summary_first_best_wins_ties():
    stats = [
        {"id": "a", "text": "A", "completed": 1, "total": 2, "percent": 50},
        {"id": "b", "text": "B", "completed": 2, "total": 4, "percent": 50},
        {"id": "c", "text": "C", "completed": 0, "total": 3, "percent": 0},
    ]

    summary = monthly_summary(stats)

    assert summary["totalCompleted"] == 3
    assert summary["avgPercent"] == 33
    assert summary["bestRoutine"]["id"] == "a"


def test_monthly_summary_of_empty_stats():
    assert monthly_summary([]) == {"totalCompleted": 0, "avgPercent": 0, "bestRoutine": None}


def test_monthly_diaries_newest_first_and_non_empty():
    state = make_state(
        diaries=[
            diary("2024-03-02", "first"),
            diary("2024-03-10", "  "),
            diary("2024-03-20", "latest"),
            diary("2024-04-01", "next month"),
        ]
    )

    assert [d["date"] for d in monthly_diaries(state, 2024, 3)] == ["2024-03-20", "2024-03-02"]


def test_search_is_case_insensitive_and_newest_first():
    state = make_state(
        diaries=[diary("2024-03-01", "Went to the GYM"), diary("2024-03-05", "rest day")],
        schedules=[schedule("s1", "2024-03-03", "gym with Kim"), schedule("s2", "2024-03-01", "Gym class")],
    )

    results = search(state, "gym")

    assert [(r.kind, r.date) for r in results] == [
        (SearchResultKind.SCHEDULE, "2024-03-03"),
        (SearchResultKind.DIARY, "2024-03-01"),
        (SearchResultKind.SCHEDULE, "2024-03-01"),
    ]


def test_blank_query_returns_nothing():
    state = make_state(diaries=[diary("2024-03-01", "anything")])
    assert search(state, "") == []
    assert search(state, "   ") == []
