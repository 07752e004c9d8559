"""Identifier generation for routines and schedules."""

from __future__ import annotations

import uuid
from typing import Protocol


class IdGenerator(Protocol):
    def next(self) -> str: ...


class UuidIdGenerator:
    """Random UUID4 identifiers, matching ids already present in backups."""

    def next(self) -> str:
        return str(uuid.uuid4())


default_id_generator = UuidIdGenerator()
