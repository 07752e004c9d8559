"""Database engine helpers."""

from __future__ import annotations

import os
import threading
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlmodel import create_engine

from modiary.core.config import DATABASE_URL
from modiary.core.migrations import upgrade_to_head

DEFAULT_DATABASE_URL = DATABASE_URL


def _normalize_database_url(database_url: str) -> str:
    # 日本語: 旧 postgres:// を SQLAlchemy 推奨形式へ正規化 / English: Normalize legacy postgres:// URL to SQLAlchemy-friendly form
    normalized_url = database_url or ""
    if normalized_url.startswith("postgres://"):
        normalized_url = normalized_url.replace("postgres://", "postgresql+psycopg2://", 1)
    if not normalized_url.startswith(("sqlite", "postgresql")):
        raise ValueError("DATABASE_URL must be SQLite (sqlite:///...) or PostgreSQL (postgresql+psycopg2://...).")
    return normalized_url


def _ensure_sqlite_directory(database_url: str) -> None:
    # 日本語: SQLite ファイルの親ディレクトリを用意 / English: Create the parent directory of a SQLite file
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def _build_engine(database_url: str):
    # 日本語: URL検証後にエンジン生成 / English: Build engine after URL validation
    normalized_url = _normalize_database_url(database_url)
    _ensure_sqlite_directory(normalized_url)
    return create_engine(normalized_url)


def _database_url_from_env() -> str:
    # 日本語: 実行時環境変数を優先 / English: Prefer runtime environment override
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


# 日本語: モジュール初期化時点の接続情報とエンジン / English: Module-level current URL and engine
_current_database_url = _normalize_database_url(_database_url_from_env())
engine = _build_engine(_current_database_url)
_db_initialized = False
_db_init_lock = threading.Lock()


def refresh_engine_from_env() -> None:
    """Refresh engine if DATABASE_URL changed after initial module import."""
    global engine, _db_initialized, _current_database_url

    # 日本語: 環境差し替え時のみエンジンを再構築 / English: Rebuild engine only when URL actually changes
    latest_database_url = _normalize_database_url(_database_url_from_env())
    if latest_database_url == _current_database_url:
        return

    engine = _build_engine(latest_database_url)
    _current_database_url = latest_database_url
    _db_initialized = False


def _ensure_db_initialized() -> None:
    global _db_initialized
    if _db_initialized:
        return
    # 日本語: マイグレーションはプロセス内で一度だけ実行 / English: Run migrations once per process with lock protection
    with _db_init_lock:
        if _db_initialized:
            return
        upgrade_to_head(_current_database_url)
        _db_initialized = True


def _init_db() -> None:
    _ensure_db_initialized()

