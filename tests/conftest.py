import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep the module-level engine away from the real instance database.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from modiary.models import AppState, CheckStatus, DiaryEntry, RoutineTemplate, Schedule  # noqa: E402
from modiary.services.state_store import StateStore  # noqa: E402


class CountingIdGenerator:
    def __init__(self, prefix="id"):
        self.prefix = prefix
        self.count = 0

    def next(self):
        self.count += 1
        return f"{self.prefix}-{self.count}"


class MemoryBackend:
    def __init__(self, payload=None, fail=False):
        self.payload = payload
        self.fail = fail
        self.writes = []

    def read(self):
        return self.payload

    def write(self, payload):
        if self.fail:
            raise OSError("disk full")
        self.writes.append(payload)
        self.payload = payload


def routine(routine_id, text="Routine", days=(0, 1, 2, 3, 4, 5, 6), is_active=True, order=0):
    return RoutineTemplate(id=routine_id, text=text, days=list(days), is_active=is_active, order=order)


def check(date, template_id, completed=True):
    return CheckStatus(date=date, template_id=template_id, completed=completed)


def schedule(schedule_id, date, text, time=""):
    return Schedule(id=schedule_id, date=date, text=text, time=time)


def diary(date, content, mood=None):
    return DiaryEntry(date=date, content=content, mood=mood)


def make_state(routines=(), checks=(), schedules=(), diaries=()):
    return AppState(
        routines=list(routines),
        check_statuses=list(checks),
        schedules=list(schedules),
        diaries=list(diaries),
    )


@pytest.fixture()
def id_generator():
    return CountingIdGenerator()


@pytest.fixture()
def backend():
    return MemoryBackend()


@pytest.fixture()
def store(backend, id_generator):
    return StateStore(backend, id_generator=id_generator)


@pytest.fixture()
def sql_engine():
    from sqlmodel import SQLModel, create_engine
    from sqlmodel.pool import StaticPool

    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    return engine
