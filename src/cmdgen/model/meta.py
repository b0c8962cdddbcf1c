"""Cache of the last used model and the fetched model list."""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from ..errors import ModelCatalogError
from .fetch import fetch_models
from .providers import ProviderKind

META_FILE_NAME = "meta.json"
MODEL_LIST_TTL_SECONDS = 24 * 60 * 60

ModelFetcher = Callable[[ProviderKind, str], list[str]]


def _now() -> int:
    return int(time.time())


class MetaCache(BaseModel):
    """Entries are stored as `provider:model`."""

    model_config = ConfigDict(populate_by_name=True)

    last_using_model: str | None = Field(default=None, alias="lastUsingModel")
    last_fetched_model_datetime: int | None = Field(
        default=None,
        alias="lastFetchedModelDateTime",
        validation_alias=AliasChoices("lastFetchedModelDateTime", "lastUpdatedTime"),
    )
    models: list[str] = Field(default_factory=list)

    def models_for(self, provider: ProviderKind) -> list[str]:
        prefix = f"{provider.value}:"
        return [entry for entry in self.models if entry.startswith(prefix)]


class MetaStore:
    """`meta.json` under the cache directory."""

    def __init__(
        self,
        cache_dir: Path,
        fetcher: ModelFetcher = fetch_models,
        clock: Callable[[], int] = _now,
    ) -> None:
        self._cache_dir = cache_dir
        self._fetcher = fetcher
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._cache_dir / META_FILE_NAME

    def read(self) -> MetaCache:
        if not self.path.is_file():
            return MetaCache()
        try:
            return MetaCache.model_validate_json(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ModelCatalogError(f"failed to read model cache: {self.path}") from exc
        except ValidationError as exc:
            raise ModelCatalogError(f"failed to parse model cache: {self.path}") from exc

    def write(self, cache: MetaCache) -> None:
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            self.path.write_text(cache.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
        except OSError as exc:
            raise ModelCatalogError(f"failed to write model cache: {self.path}") from exc

    def get_last_using_model(self, provider: ProviderKind) -> str | None:
        value = self.read().last_using_model
        if not value:
            return None
        cached_provider, _, model = value.partition(":")
        if cached_provider != provider.value or not model.strip():
            return None
        return model.strip()

    def set_last_using_model(self, provider: ProviderKind, model: str) -> None:
        cache = self.read()
        cache.last_using_model = f"{provider.value}:{model}"
        self.write(cache)

    def get_models(self, provider: ProviderKind, key: str | None) -> list[str]:
        """Cached entries while fresh, otherwise fetched with `key` and cached."""
        cache = self.read()
        cached = cache.models_for(provider)
        fetched_at = cache.last_fetched_model_datetime
        fresh = fetched_at is not None and self._clock() - fetched_at < MODEL_LIST_TTL_SECONDS
        if cached and (fresh or not key):
            logger.debug("model.catalog_cache_hit provider={} fresh={}", provider.value, fresh)
            return cached
        if not key:
            raise ModelCatalogError("API key is required to fetch models")

        fetched = [f"{provider.value}:{name}" for name in self._fetcher(provider, key) if name.strip()]
        others = [entry for entry in cache.models if not entry.startswith(f"{provider.value}:")]
        cache.models = sorted(set(others + fetched))
        cache.last_fetched_model_datetime = self._clock()
        self.write(cache)
        return cache.models_for(provider)
