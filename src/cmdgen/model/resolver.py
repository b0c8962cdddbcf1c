"""Resolve which provider, model and key a run uses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from ..errors import ApiKeyNotConfiguredError, InvalidModelFormatError
from .meta import MetaStore
from .providers import (
    ProviderKind,
    find_api_key,
    provider_from_model_name,
    provider_from_name,
    resolve_key,
)

if TYPE_CHECKING:
    from ..session import SessionRecord

NO_API_KEY_ERROR = (
    "no API key found (checked OPENAI_API_KEY, GEMINI_API_KEY/GOOGLE_API_KEY, ANTHROPIC_API_KEY, and --key)"
)


@dataclass(frozen=True)
class ProviderSelection:
    provider: ProviderKind
    requested_model: str | None = None


@dataclass(frozen=True)
class ResolvedModel:
    provider: ProviderKind
    model: str
    api_key: str

    @property
    def qualified_name(self) -> str:
        return f"{self.provider.value}:{self.model}"


def infer_default_provider(
    override_key: str | None = None,
    *,
    allow_no_key: bool = False,
    environ: Mapping[str, str] | None = None,
) -> ProviderKind:
    """First provider with a key in the environment, else OpenAI when a key was passed or is optional."""
    for provider in ProviderKind:
        if find_api_key(provider, environ) is not None:
            return provider
    if override_key or allow_no_key:
        return ProviderKind.OPENAI
    raise ApiKeyNotConfiguredError(NO_API_KEY_ERROR)


def parse_model_arg(
    model_arg: str,
    override_key: str | None = None,
    *,
    allow_no_key: bool = False,
    environ: Mapping[str, str] | None = None,
) -> ProviderSelection:
    """Accepts `provider:model`, `provider`, or a bare model name."""
    raw = model_arg.strip()
    if not raw:
        raise InvalidModelFormatError("model argument is empty")

    if ":" in raw:
        provider_part, _, model_part = raw.partition(":")
        provider = provider_from_name(provider_part)
        if provider is None:
            raise InvalidModelFormatError(f"unknown provider '{provider_part}'")
        return ProviderSelection(provider, model_part.strip() or None)

    if (provider := provider_from_name(raw)) is not None:
        return ProviderSelection(provider)
    if (provider := provider_from_model_name(raw)) is not None:
        return ProviderSelection(provider, raw)

    provider = infer_default_provider(override_key, allow_no_key=allow_no_key, environ=environ)
    return ProviderSelection(provider, raw)


class ModelResolver:
    """Pick provider and model from the flag, the resumed session, the last used model, or the defaults."""

    def __init__(self, meta: MetaStore, environ: Mapping[str, str] | None = None) -> None:
        self._meta = meta
        self._environ = environ

    @property
    def meta(self) -> MetaStore:
        return self._meta

    def resolve_provider(
        self,
        model_arg: str | None,
        key_arg: str | None,
        session: SessionRecord | None = None,
        *,
        allow_no_key: bool = False,
    ) -> ProviderKind:
        if model_arg is not None:
            return parse_model_arg(model_arg, key_arg, allow_no_key=allow_no_key, environ=self._environ).provider
        if session is not None and (provider := provider_from_name(session.provider)) is not None:
            return provider
        return infer_default_provider(key_arg, allow_no_key=allow_no_key, environ=self._environ)

    def resolve_model_name(
        self,
        provider: ProviderKind,
        model_arg: str | None,
        session: SessionRecord | None = None,
    ) -> str:
        if model_arg is not None:
            selection = parse_model_arg(model_arg, allow_no_key=True, environ=self._environ)
            return selection.requested_model or provider.default_model
        if session is not None and session.model.strip():
            return session.model.strip()
        if (last := self._meta.get_last_using_model(provider)) is not None:
            return last
        return provider.default_model

    def resolve(
        self,
        model_arg: str | None,
        key_arg: str | None,
        session: SessionRecord | None = None,
    ) -> ResolvedModel:
        """Resolve everything a run needs and remember the model for the next run."""
        provider = self.resolve_provider(model_arg, key_arg, session)
        model = self.resolve_model_name(provider, model_arg, session)
        api_key = resolve_key(provider, key_arg, self._environ)
        self._meta.set_last_using_model(provider, model)
        logger.info("model.resolved provider={} model={}", provider.value, model)
        return ResolvedModel(provider=provider, model=model, api_key=api_key)

    def list_models(
        self,
        model_arg: str | None,
        key_arg: str | None,
        session: SessionRecord | None = None,
    ) -> list[str]:
        provider = self.resolve_provider(model_arg, None, session, allow_no_key=True)
        key = key_arg or find_api_key(provider, self._environ)
        return self._meta.get_models(provider, key)
