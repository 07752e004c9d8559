"""Provider/model selection for the diary reflection client."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, List, Tuple

DEFAULT_SELECTION = {"provider": "gemini", "model": "gemini-2.5-flash-lite", "base_url": ""}

AVAILABLE_MODELS: List[Dict[str, str]] = [
    {"provider": "gemini", "model": "gemini-2.5-flash-lite", "label": "Gemini 2.5 Flash-Lite"},
    {"provider": "gemini", "model": "gemini-2.5-flash", "label": "Gemini 2.5 Flash"},
    {"provider": "openai", "model": "gpt-4o-mini", "label": "GPT-4o mini"},
    {"provider": "claude", "model": "claude-haiku-4-5", "label": "Claude Haiku 4.5"},
]

PROVIDER_DEFAULTS: Dict[str, Dict[str, str | List[str] | None]] = {
    "openai": {
        "api_key_env": "OPENAI_API_KEY",
        "api_key_aliases": [],
        "base_url_env": "OPENAI_BASE_URL",
        "default_base_url": None,
    },
    "claude": {
        "api_key_env": "CLAUDE_API_KEY",
        "api_key_aliases": ["ANTHROPIC_API_KEY"],
        "base_url_env": "CLAUDE_API_BASE",
        "default_base_url": None,
    },
    "gemini": {
        "api_key_env": "GEMINI_API_KEY",
        "api_key_aliases": ["GOOGLE_API_KEY", "API_KEY"],
        "base_url_env": "GEMINI_API_BASE",
        # Google の OpenAI 互換エンドポイント
        "default_base_url": "https://generativelanguage.googleapis.com/v1beta/openai",
    },
}

_OVERRIDE_SELECTION: Dict[str, str | None] | None = None


def _coerce_selection(raw: Dict[str, str] | None) -> Dict[str, str | None]:
    """Normalise provider/model/base_url fields and fall back to defaults."""

    provider = DEFAULT_SELECTION["provider"]
    model = DEFAULT_SELECTION["model"]
    base_url: str | None = None

    if isinstance(raw, dict):
        raw_provider = raw.get("provider")
        raw_model = raw.get("model")
        raw_base_url = raw.get("base_url")
        if isinstance(raw_provider, str) and raw_provider.strip() in PROVIDER_DEFAULTS:
            provider = raw_provider.strip()
        if isinstance(raw_model, str) and raw_model.strip():
            model = raw_model.strip()
        if isinstance(raw_base_url, str) and raw_base_url.strip():
            base_url = raw_base_url.strip()

    return {"provider": provider, "model": model, "base_url": base_url}


def _load_selection(agent_key: str) -> Dict[str, str | None]:
    env_path = os.getenv("MODIARY_MODEL_SETTINGS_PATH")
    if not env_path:
        return dict(DEFAULT_SELECTION)

    try:
        data = json.loads(Path(env_path).read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return dict(DEFAULT_SELECTION)

    if not isinstance(data, dict):
        return dict(DEFAULT_SELECTION)

    selection = data.get("selection") or data
    chosen = selection.get(agent_key) if isinstance(selection, dict) else None
    if not isinstance(chosen, dict):
        return dict(DEFAULT_SELECTION)

    return _coerce_selection(chosen)


def _resolve_env(primary: str | List[str] | None, aliases: str | List[str] | None) -> str:
    candidates: List[str] = []
    if isinstance(primary, str):
        candidates.append(primary)
    if isinstance(aliases, list):
        candidates.extend(alias for alias in aliases if isinstance(alias, str))

    for env_name in candidates:
        value = os.getenv(env_name)
        if value:
            return value
    return ""


def apply_model_selection(
    agent_key: str = "reflection", override: Dict[str, str] | None = None
) -> Tuple[str, str, str | None, str]:
    selection = _coerce_selection(override or _OVERRIDE_SELECTION or _load_selection(agent_key))
    provider = selection["provider"]
    model = selection["model"]

    meta = PROVIDER_DEFAULTS[provider]
    default_base = meta.get("default_base_url")
    base_url = (
        selection.get("base_url")
        or _resolve_env(meta.get("base_url_env"), None)
        or (default_base if isinstance(default_base, str) else None)
    )
    api_key = _resolve_env(meta.get("api_key_env"), meta.get("api_key_aliases"))

    # The caller passes api_key and base_url to the client; os.environ is left untouched.
    return provider, model, base_url.rstrip("/") if base_url else None, api_key


def update_override(selection: Dict[str, str] | None) -> Tuple[str, str, str | None, str]:
    """Set in-memory override and return applied config."""

    global _OVERRIDE_SELECTION
    _OVERRIDE_SELECTION = _coerce_selection(selection) if selection else None
    return apply_model_selection(override=_OVERRIDE_SELECTION or None)


def current_available_models() -> List[Dict[str, str]]:
    return [dict(item) for item in AVAILABLE_MODELS]
