import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
import requests

from cmdgen.errors import ModelCatalogError
from cmdgen.model import MetaStore, ProviderKind
from cmdgen.model.fetch import compact_error, fetch_models
from cmdgen.model.meta import MODEL_LIST_TTL_SECONDS

NOW = 1_700_000_000


class FakeFetcher:
    def __init__(self, models: list[str]) -> None:
        self.models = models
        self.calls: list[tuple[ProviderKind, str]] = []

    def __call__(self, provider: ProviderKind, key: str) -> list[str]:
        self.calls.append((provider, key))
        return list(self.models)


class FakeHttp:
    def __init__(self, status_code: int = 200, body: Any = None, error: Exception | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def get(self, url: str, **kwargs: Any) -> SimpleNamespace:
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        text = self.body if isinstance(self.body, str) else json.dumps(self.body)
        return SimpleNamespace(status_code=self.status_code, text=text)


def _seed(tmp_path: Path, payload: dict[str, Any]) -> Path:
    cache_dir = tmp_path / ".cache"
    cache_dir.mkdir()
    (cache_dir / "meta.json").write_text(json.dumps(payload), encoding="utf-8")
    return cache_dir


def test_fetch_replaces_provider_entries(tmp_path: Path) -> None:
    cache_dir = _seed(tmp_path, {"models": ["claude:claude-sonnet-4-5", "openai:gpt-old"]})
    fetcher = FakeFetcher(["gpt-5.2", "gpt-4o-mini", "gpt-5.2"])
    store = MetaStore(cache_dir, fetcher=fetcher, clock=lambda: NOW)

    models = store.get_models(ProviderKind.OPENAI, "key")

    assert models == ["openai:gpt-4o-mini", "openai:gpt-5.2"]
    assert fetcher.calls == [(ProviderKind.OPENAI, "key")]
    cache = store.read()
    assert cache.models == ["claude:claude-sonnet-4-5", "openai:gpt-4o-mini", "openai:gpt-5.2"]
    assert cache.last_fetched_model_datetime == NOW


def test_fresh_cache_is_not_refetched(tmp_path: Path) -> None:
    cache_dir = _seed(tmp_path, {"lastFetchedModelDateTime": NOW - 60, "models": ["openai:gpt-5.2"]})
    fetcher = FakeFetcher(["other"])
    store = MetaStore(cache_dir, fetcher=fetcher, clock=lambda: NOW)

    assert store.get_models(ProviderKind.OPENAI, "key") == ["openai:gpt-5.2"]
    assert fetcher.calls == []


def test_expired_cache_is_refetched(tmp_path: Path) -> None:
    stale = NOW - MODEL_LIST_TTL_SECONDS - 1
    cache_dir = _seed(tmp_path, {"lastUpdatedTime": stale, "models": ["openai:gpt-old"]})
    fetcher = FakeFetcher(["gpt-5.2"])
    store = MetaStore(cache_dir, fetcher=fetcher, clock=lambda: NOW)

    assert store.get_models(ProviderKind.OPENAI, "key") == ["openai:gpt-5.2"]
    assert len(fetcher.calls) == 1


def test_expired_cache_is_used_without_key(tmp_path: Path) -> None:
    cache_dir = _seed(tmp_path, {"lastFetchedModelDateTime": 0, "models": ["gemini:gemini-2.5-flash"]})
    store = MetaStore(cache_dir, fetcher=FakeFetcher([]), clock=lambda: NOW)

    assert store.get_models(ProviderKind.GEMINI, None) == ["gemini:gemini-2.5-flash"]


def test_missing_key_and_empty_cache(tmp_path: Path) -> None:
    store = MetaStore(tmp_path / ".cache", fetcher=FakeFetcher([]), clock=lambda: NOW)

    with pytest.raises(ModelCatalogError, match="API key is required to fetch models"):
        store.get_models(ProviderKind.CLAUDE, None)


def test_unreadable_cache_is_reported(tmp_path: Path) -> None:
    cache_dir = tmp_path / ".cache"
    cache_dir.mkdir()
    (cache_dir / "meta.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(ModelCatalogError, match="failed to parse model cache"):
        MetaStore(cache_dir).read()


def test_last_using_model_is_written_by_alias(tmp_path: Path) -> None:
    store = MetaStore(tmp_path / ".cache")

    store.set_last_using_model(ProviderKind.GEMINI, "gemini-2.5-pro")

    payload = json.loads(store.path.read_text(encoding="utf-8"))
    assert payload["lastUsingModel"] == "gemini:gemini-2.5-pro"
    assert store.get_last_using_model(ProviderKind.GEMINI) == "gemini-2.5-pro"


def test_fetch_openai_models() -> None:
    http = FakeHttp(body={"data": [{"id": "gpt-5.2"}, {"id": "gpt-4o-mini"}]})

    models = fetch_models(ProviderKind.OPENAI, "sk", environ={"OPENAI_BASE_URL": "http://local/v1/"}, http=http)

    assert models == ["gpt-5.2", "gpt-4o-mini"]
    url, kwargs = http.calls[0]
    assert url == "http://local/v1/models"
    assert kwargs["headers"] == {"Authorization": "Bearer sk"}
    assert kwargs["timeout"] == 30


def test_fetch_gemini_models_strips_prefix() -> None:
    http = FakeHttp(body={"models": [{"name": "models/gemini-2.5-flash"}]})

    assert fetch_models(ProviderKind.GEMINI, "g", environ={}, http=http) == ["gemini-2.5-flash"]
    url, kwargs = http.calls[0]
    assert url == "https://generativelanguage.googleapis.com/v1beta/models"
    assert kwargs["params"] == {"key": "g"}


def test_fetch_claude_models_sends_version_header() -> None:
    http = FakeHttp(body={"data": [{"id": "claude-sonnet-4-5"}]})

    assert fetch_models(ProviderKind.CLAUDE, "a", environ={}, http=http) == ["claude-sonnet-4-5"]
    assert http.calls[0][1]["headers"] == {"x-api-key": "a", "anthropic-version": "2023-06-01"}


def test_fetch_error_status_is_compacted() -> None:
    body = {"error": {"message": "Incorrect API key", "type": "invalid_request_error", "code": "invalid_api_key"}}
    http = FakeHttp(status_code=401, body=body)

    with pytest.raises(ModelCatalogError) as exc_info:
        fetch_models(ProviderKind.OPENAI, "bad", environ={}, http=http)

    assert str(exc_info.value) == (
        "OpenAI API error (401): Incorrect API key (type=invalid_request_error, code=invalid_api_key)"
    )


def test_fetch_transport_error() -> None:
    http = FakeHttp(error=requests.ConnectionError("refused"))

    with pytest.raises(ModelCatalogError, match="Claude API request failed"):
        fetch_models(ProviderKind.CLAUDE, "a", environ={}, http=http)


def test_compact_error_keeps_plain_bodies() -> None:
    assert compact_error("  upstream down \n") == "upstream down"
    assert compact_error('{"error": {"message": "quota"}}') == "quota"
