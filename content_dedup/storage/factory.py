"""Store factory and registry for swappable record store backends."""

from __future__ import annotations

from ..config import StoreConfig, get_store_path
from .base import RecordStore
from .json_store import JsonRecordStore
from .memory import InMemoryRecordStore


_BACKENDS = ("json", "memory")


def available_backends() -> list[str]:
    """Return the set of registered backend names."""
    return sorted(_BACKENDS)


def create_store(store_cfg: StoreConfig, family: str) -> RecordStore:
    """Build a record store for one content family from runtime config."""
    name = store_cfg.backend.lower().strip()
    if name == "json":
        return JsonRecordStore(get_store_path(store_cfg, family))
    if name == "memory":
        return InMemoryRecordStore()
    supported = ", ".join(available_backends())
    raise ValueError(f"Unsupported store backend: {store_cfg.backend}. Supported: {supported}")
