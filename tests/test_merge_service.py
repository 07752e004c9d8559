from conftest import check, diary, make_state, routine, schedule

from modiary.core.config import DIARY_MERGE_SEPARATOR
from modiary.services.merge_service import merge_states


def _full_state():
    return make_state(
        routines=[routine("r1", "Stretch", days=[1, 3], order=0), routine("r2", "Read", is_active=False, order=1)],
        checks=[check("2024-03-04", "r1", True), check("2024-03-06", "r1", False)],
        schedules=[schedule("s1", "2024-03-15", "Team sync", "09:30")],
        diaries=[diary("2024-03-04", "Good day", mood="happy"), diary("2024-03-05", "")],
    )


def test_merge_with_itself_is_identity():
    state = _full_state()
    assert merge_states(state, state) == state


def test_merge_does_not_mutate_inputs():
    current = _full_state()
    incoming = make_state(checks=[check("2024-03-06", "r1", True)], diaries=[diary("2024-03-04", "Other")])
    snapshot_current = current.model_copy(deep=True)
    snapshot_incoming = incoming.model_copy(deep=True)

    merge_states(current, incoming)

    assert current == snapshot_current
    assert incoming == snapshot_incoming


def test_incoming_routine_replaces_current_on_id_collision():
    current = make_state(routines=[routine("r1", "Old", days=[1]), routine("r2", "Keep")])
    incoming = make_state(routines=[routine("r1", "New", days=[2, 4], is_active=False), routine("r3", "Added")])

    merged = merge_states(current, incoming)

    assert [r.id for r in merged.routines] == ["r1", "r2", "r3"]
    assert merged.routines[0].text == "New"
    assert merged.routines[0].days == [2, 4]
    assert merged.routines[0].is_active is False


def test_completion_is_or_of_both_sides():
    current = make_state(checks=[check("2024-01-01", "r1", True), check("2024-01-02", "r1", False)])
    incoming = make_state(checks=[check("2024-01-01", "r1", False), check("2024-01-02", "r1", True)])

    merged = merge_states(current, incoming)
    reverse = merge_states(incoming, current)

    flags = {c.key: c.completed for c in merged.check_statuses}
    assert flags == {("2024-01-01", "r1"): True, ("2024-01-02", "r1"): True}
    assert {c.key: c.completed for c in reverse.check_statuses} == flags


def test_check_keys_stay_unique():
    current = make_state(checks=[check("2024-01-01", "r1"), check("2024-01-01", "r2", False)])
    incoming = make_state(checks=[check("2024-01-01", "r2", True), check("2024-01-03", "r1")])

    merged = merge_states(current, incoming)

    keys = [c.key for c in merged.check_statuses]
    assert len(keys) == len(set(keys)) == 3


def test_incoming_schedule_replaces_current_on_id_collision():
    current = make_state(schedules=[schedule("s1", "2024-03-15", "Old"), schedule("s2", "2024-03-16", "Keep")])
    incoming = make_state(schedules=[schedule("s1", "2024-03-15", "New", "10:00")])

    merged = merge_states(current, incoming)

    assert [(s.id, s.text) for s in merged.schedules] == [("s1", "New"), ("s2", "Keep")]


def test_differing_diaries_keep_both_contents():
    current = make_state(diaries=[diary("2024-01-01", "A")])
    incoming = make_state(diaries=[diary("2024-01-01", "B")])

    merged = merge_states(current, incoming)

    assert len(merged.diaries) == 1
    content = merged.diaries[0].content
    assert "A" in content and "B" in content
    assert content == f"A{DIARY_MERGE_SEPARATOR}B"


def test_empty_diary_side_keeps_the_other():
    current = make_state(diaries=[diary("2024-01-01", ""), diary("2024-01-02", "Kept")])
    incoming = make_state(diaries=[diary("2024-01-01", "Filled"), diary("2024-01-02", "")])

    merged = merge_states(current, incoming)

    assert {d.date: d.content for d in merged.diaries} == {"2024-01-01": "Filled", "2024-01-02": "Kept"}


def test_identical_diaries_are_not_duplicated():
    current = make_state(diaries=[diary("2024-01-01", "Same")])
    merged = merge_states(current, make_state(diaries=[diary("2024-01-01", "Same")]))
    assert merged.diaries[0].content == "Same"


def test_new_incoming_keys_are_appended_after_current():
    current = make_state(diaries=[diary("2024-01-02", "x")])
    incoming = make_state(diaries=[diary("2024-01-01", "y"), diary("2024-01-03", "z")])

    merged = merge_states(current, incoming)

    assert [d.date for d in merged.diaries] == ["2024-01-02", "2024-01-01", "2024-01-03"]


def test_merge_into_empty_state_returns_incoming_content():
    incoming = _full_state()
    assert merge_states(make_state(), incoming) == incoming
