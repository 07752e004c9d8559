"""Core package exports."""

from .config import (
    BACKUP_PREFIX,
    BASE_DIR,
    DATABASE_URL,
    DEFAULT_SCHEDULE_COLOR,
    DIARY_MERGE_SEPARATOR,
    STATE_KEY,
    get_reflection_timeout,
)
from .ids import IdGenerator, UuidIdGenerator, default_id_generator

__all__ = [
    "BASE_DIR",
    "DATABASE_URL",
    "STATE_KEY",
    "BACKUP_PREFIX",
    "DEFAULT_SCHEDULE_COLOR",
    "DIARY_MERGE_SEPARATOR",
    "get_reflection_timeout",
    "IdGenerator",
    "UuidIdGenerator",
    "default_id_generator",
]
