"""Value models that make up the persisted AppState aggregate."""

from __future__ import annotations

from enum import Enum

from sqlmodel import Field, SQLModel

from modiary.core.config import DEFAULT_SCHEDULE_COLOR


# 日本語: 曜日で繰り返すルーチンの定義 / English: Recurring routine definition keyed by weekday
class RoutineTemplate(SQLModel):
    # 日本語: 曜日インデックス(0=日 ... 6=土) / English: Weekday indexes (0=Sun ... 6=Sat)
    id: str
    text: str
    type: str = "weekly"
    days: list[int] = Field(default_factory=list)
    is_active: bool = True
    order: int = 0


# 日本語: ある日付のルーチン完了状態 / English: Completion flag of one routine on one date
class CheckStatus(SQLModel):
    date: str
    template_id: str
    completed: bool = False

    @property
    def key(self) -> tuple[str, str]:
        return (self.date, self.template_id)


# 日本語: 単発の予定 / English: One-off calendar event
class Schedule(SQLModel):
    # 日本語: time が空なら終日 / English: Empty time means all-day
    id: str
    date: str
    time: str = ""
    text: str
    color: str = DEFAULT_SCHEDULE_COLOR


# 日本語: 1日1件の日記 / English: At most one diary entry per date
class DiaryEntry(SQLModel):
    date: str
    content: str = ""
    mood: str | None = None


class AppState(SQLModel):
    routines: list[RoutineTemplate] = Field(default_factory=list)
    check_statuses: list[CheckStatus] = Field(default_factory=list)
    schedules: list[Schedule] = Field(default_factory=list)
    diaries: list[DiaryEntry] = Field(default_factory=list)


class SearchResultKind(str, Enum):
    DIARY = "diary"
    SCHEDULE = "schedule"


class SearchResult(SQLModel):
    kind: SearchResultKind
    date: str
    text: str
