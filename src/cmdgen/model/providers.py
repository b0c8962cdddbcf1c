"""Known providers, their default models and API key lookup."""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import Enum

from ..errors import ApiKeyNotConfiguredError


class ProviderKind(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"

    @property
    def default_model(self) -> str:
        return _DEFAULT_MODELS[self]

    @property
    def key_env_names(self) -> tuple[str, ...]:
        return _KEY_ENV_NAMES[self]

    @property
    def llm_provider(self) -> str:
        """Provider id understood by the republic client."""
        return "anthropic" if self is ProviderKind.CLAUDE else self.value


_DEFAULT_MODELS = {
    ProviderKind.OPENAI: "gpt-5.2",
    ProviderKind.GEMINI: "gemini-2.5-flash",
    ProviderKind.CLAUDE: "claude-sonnet-4-5",
}

_KEY_ENV_NAMES = {
    ProviderKind.OPENAI: ("OPENAI_API_KEY",),
    ProviderKind.GEMINI: ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    ProviderKind.CLAUDE: ("ANTHROPIC_API_KEY",),
}

_PROVIDER_ALIASES = {
    "openai": ProviderKind.OPENAI,
    "gemini": ProviderKind.GEMINI,
    "google": ProviderKind.GEMINI,
    "claude": ProviderKind.CLAUDE,
    "anthropic": ProviderKind.CLAUDE,
}

_OPENAI_MODEL_PREFIXES = ("gpt-", "o1", "o3", "o4")


def provider_from_name(name: str) -> ProviderKind | None:
    return _PROVIDER_ALIASES.get(name.strip().lower())


def provider_from_model_name(model: str) -> ProviderKind | None:
    """Guess the provider from a bare model name such as `gpt-5.2` or `claude-sonnet-4-5`."""
    lowered = model.strip().lower()
    if not lowered:
        return None
    if lowered.startswith(_OPENAI_MODEL_PREFIXES):
        return ProviderKind.OPENAI
    if lowered.startswith("gemini"):
        return ProviderKind.GEMINI
    if lowered.startswith("claude"):
        return ProviderKind.CLAUDE
    return None


def read_env(name: str, environ: Mapping[str, str] | None = None) -> str | None:
    source = os.environ if environ is None else environ
    value = source.get(name, "").strip()
    return value or None


def find_api_key(provider: ProviderKind, environ: Mapping[str, str] | None = None) -> str | None:
    for name in provider.key_env_names:
        if value := read_env(name, environ):
            return value
    return None


def resolve_key(
    provider: ProviderKind,
    override_key: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    if override_key and override_key.strip():
        return override_key.strip()
    key = find_api_key(provider, environ)
    if key is None:
        raise ApiKeyNotConfiguredError(
            f"API key not found for provider '{provider.value}'. "
            f"Set {' or '.join(provider.key_env_names)}, CMDGEN_API_KEY, or pass --key."
        )
    return key


def republic_model_id(provider: str, model: str) -> str:
    """`provider:model` as the republic client expects it."""
    kind = provider_from_name(provider)
    prefix = kind.llm_provider if kind is not None else provider
    return f"{prefix}:{model}"
