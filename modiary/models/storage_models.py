"""Key-value table backing the state store."""

from __future__ import annotations

import datetime

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


# 日本語: 状態ドキュメント全体を1行で保持する / English: One row holds the whole serialized state document
class StoredState(SQLModel, table=True):
    __tablename__ = "stored_state"

    key: str = Field(primary_key=True, max_length=100)
    payload: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.now)
