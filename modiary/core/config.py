"""Core configuration for Modiary."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# 日本語: ルート直下の secrets.env を起動時に読み込む / English: Load root-level secrets.env on startup
load_dotenv("secrets.env")

# 日本語: プロジェクトルート基準パス / English: Project root directory
BASE_DIR = Path(__file__).resolve().parents[2]

# 日本語: ローカル SQLite を既定の保存先とする / English: Local SQLite file is the default backing store
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite:///{BASE_DIR / 'instance' / 'modiary.db'}",
)

# 日本語: 状態ドキュメントを保存するキー / English: Key under which the state document is stored
STATE_KEY = os.getenv("MODIARY_STATE_KEY", "modiary_data")
# 日本語: バックアップファイル名の接頭辞 / English: Backup file name prefix
BACKUP_PREFIX = os.getenv("MODIARY_BACKUP_PREFIX", "modiary_backup")

DEFAULT_SCHEDULE_COLOR = "bg-indigo-500"
SCHEDULE_COLORS = [
    "bg-indigo-500",
    "bg-rose-500",
    "bg-amber-500",
    "bg-emerald-500",
    "bg-sky-500",
    "bg-slate-500",
]

# 日本語: 日記の統合時に挟む区切り / English: Separator placed between merged diary contents
DIARY_MERGE_SEPARATOR = "\n---\n"


def get_reflection_timeout() -> float:
    """Seconds to wait for the reflection service."""
    # 日本語: 過大値や不正値を防ぐため 1〜60 にクランプ / English: Clamp to 1-60 to avoid unsafe values
    raw_value = os.getenv("MODIARY_REFLECTION_TIMEOUT", "20")
    try:
        parsed = float(raw_value)
    except (TypeError, ValueError):
        parsed = 20.0
    return max(1.0, min(parsed, 60.0))
