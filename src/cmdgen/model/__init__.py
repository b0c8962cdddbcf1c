"""Provider and model selection."""

from .meta import MetaCache, MetaStore
from .providers import ProviderKind, republic_model_id
from .resolver import ModelResolver, ResolvedModel

__all__ = ["MetaCache", "MetaStore", "ModelResolver", "ProviderKind", "ResolvedModel", "republic_model_id"]
