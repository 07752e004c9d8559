"""LLM client used by the diary reflection service."""

from .client import UnifiedClient, _content_to_text
from .model_selection import apply_model_selection, current_available_models, update_override

__all__ = [
    "UnifiedClient",
    "_content_to_text",
    "apply_model_selection",
    "current_available_models",
    "update_override",
]
