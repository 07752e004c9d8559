from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List

from openai import OpenAI

try:
    from anthropic import Anthropic
except ImportError:
    Anthropic = None

from modiary.core.config import get_reflection_timeout
from modiary.llm.model_selection import PROVIDER_DEFAULTS, apply_model_selection


def _content_to_text(content: Any) -> str:
    """Normalize chat completion content into a plain string."""

    if content is None:
        return ""
    if isinstance(content, str):
        return content

    if hasattr(content, "text") and isinstance(content.text, str):
        return content.text

    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
                continue
            if hasattr(part, "text") and isinstance(part.text, str):
                parts.append(part.text)
                continue
            if isinstance(part, dict):
                value = part.get("text")
                if isinstance(value, str):
                    parts.append(value)
        return "\n".join(p.strip() for p in parts if p.strip())

    return str(content).strip()


class UnifiedClient:
    """Provider-agnostic chat client (OpenAI-compatible or Anthropic)."""

    def __init__(self, agent_key: str = "reflection"):
        provider, model_name, base_url, api_key = apply_model_selection(agent_key)

        if not api_key:
            provider_meta = PROVIDER_DEFAULTS.get(provider, {})
            expected_key = provider_meta.get("api_key_env", "OPENAI_API_KEY")
            raise RuntimeError(
                f"API key for provider '{provider}' is not set. Please set '{expected_key}' in your secrets.env file."
            )

        self.provider = provider
        self.model_name = model_name
        self.base_url = base_url
        self.api_key = api_key
        timeout = get_reflection_timeout()

        if self.provider == "claude":
            if Anthropic is None:
                raise ImportError("Anthropic SDK is not installed. Please run `pip install anthropic`.")
            self.client = Anthropic(api_key=self.api_key, timeout=timeout)
        else:
            client_kwargs: Dict[str, Any] = {"api_key": self.api_key, "timeout": timeout}
            if self.base_url:
                client_kwargs["base_url"] = self.base_url
            if self.provider == "gemini":
                client_kwargs["default_headers"] = {"x-goog-api-key": self.api_key}
            self.client = OpenAI(**client_kwargs)

    def create(self, **kwargs):
        kwargs.setdefault("model", self.model_name)
        if self.provider == "claude":
            return self._create_anthropic(**kwargs)

        # Retry once per known parameter incompatibility (temperature, max_tokens)
        last_exception = None
        for _ in range(3):
            try:
                return self.client.chat.completions.create(**kwargs)
            except Exception as e:
                last_exception = e
                err_str = str(e).lower()
                fixed = False

                if "temperature" in err_str and ("unsupported" in err_str or "not supported" in err_str):
                    if "temperature" in kwargs:
                        kwargs.pop("temperature")
                        fixed = True

                if "max_tokens" in err_str and ("unsupported" in err_str or "parameter" in err_str):
                    if "max_tokens" in kwargs:
                        kwargs["max_completion_tokens"] = kwargs.pop("max_tokens")
                        fixed = True

                if not fixed:
                    raise

        raise last_exception

    def _create_anthropic(self, **kwargs):
        system_prompt = ""
        filtered_messages = []

        for msg in kwargs.get("messages", []):
            if msg.get("role") == "system":
                system_prompt += msg.get("content", "") + "\n"
            else:
                filtered_messages.append(msg)

        response = self.client.messages.create(
            model=kwargs["model"],
            system=system_prompt.strip(),
            messages=filtered_messages,
            max_tokens=kwargs.get("max_tokens", 512),
            temperature=kwargs.get("temperature", 0.7),
        )

        content = response.content[0].text if response.content else ""

        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])
