"""Fetch the list of available models from a provider's HTTP API."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import requests
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from ..errors import ModelCatalogError
from .providers import ProviderKind, read_env

FETCH_TIMEOUT_SECONDS = 30
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_DEFAULT_VERSION = "2023-06-01"

_LABELS = {
    ProviderKind.OPENAI: "OpenAI",
    ProviderKind.GEMINI: "Gemini",
    ProviderKind.CLAUDE: "Claude",
}


class _ModelId(BaseModel):
    id: str


class _IdListResponse(BaseModel):
    data: list[_ModelId] = Field(default_factory=list)


class _GeminiModel(BaseModel):
    name: str


class _GeminiListResponse(BaseModel):
    models: list[_GeminiModel] = Field(default_factory=list)


def _base_url(env_name: str, default: str, environ: Mapping[str, str] | None) -> str:
    return (read_env(env_name, environ) or default).rstrip("/")


def compact_error(body: str) -> str:
    """`message (type=..., code=...)` from a JSON error body, or the trimmed body."""
    trimmed = body.strip()
    try:
        payload = json.loads(trimmed)
    except ValueError:
        return trimmed
    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return trimmed
    message = error.get("message")
    if not isinstance(message, str) or not message:
        return trimmed
    details = [f"{name}={error[name]}" for name in ("type", "code") if error.get(name) not in (None, "")]
    if details:
        return f"{message} ({', '.join(details)})"
    return message


def _request(provider: ProviderKind, url: str, http: Any, **kwargs: Any) -> str:
    label = _LABELS[provider]
    try:
        response = http.get(url, timeout=FETCH_TIMEOUT_SECONDS, **kwargs)
    except requests.RequestException as exc:
        raise ModelCatalogError(f"{label} API request failed: {exc}") from exc
    if not 200 <= response.status_code < 300:
        raise ModelCatalogError(f"{label} API error ({response.status_code}): {compact_error(response.text)}")
    return response.text


def fetch_models(
    provider: ProviderKind,
    key: str,
    *,
    environ: Mapping[str, str] | None = None,
    http: Any = requests,
) -> list[str]:
    """Model ids (without provider prefix) served by `provider`."""
    try:
        if provider is ProviderKind.OPENAI:
            url = f"{_base_url('OPENAI_BASE_URL', OPENAI_DEFAULT_BASE_URL, environ)}/models"
            body = _request(provider, url, http, headers={"Authorization": f"Bearer {key}"})
            models = [item.id for item in _IdListResponse.model_validate_json(body).data]
        elif provider is ProviderKind.GEMINI:
            url = f"{_base_url('GEMINI_BASE_URL', GEMINI_DEFAULT_BASE_URL, environ)}/models"
            body = _request(provider, url, http, params={"key": key})
            models = [item.name.removeprefix("models/") for item in _GeminiListResponse.model_validate_json(body).models]
        else:
            url = f"{_base_url('ANTHROPIC_BASE_URL', ANTHROPIC_DEFAULT_BASE_URL, environ)}/models"
            version = read_env("ANTHROPIC_API_VERSION", environ) or ANTHROPIC_DEFAULT_VERSION
            body = _request(provider, url, http, headers={"x-api-key": key, "anthropic-version": version})
            models = [item.id for item in _IdListResponse.model_validate_json(body).data]
    except ValidationError as exc:
        raise ModelCatalogError(f"failed to parse {_LABELS[provider]} model list") from exc

    logger.info("model.catalog_fetched provider={} count={}", provider.value, len(models))
    return models
