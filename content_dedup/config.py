"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- DetectorConfig: Thresholds, time window, weights and retention
- StoreConfig: Record store backend and location
- CacheConfig: Snapshot cache TTL
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any

import yaml


@dataclass
class DetectorConfig:
    """Configuration for duplicate detection.

    Attributes:
        family: Content family served by this detector ("articles", "repos", "tweets")
        title_similarity_threshold: Combined score (0-1) at or above which an item is a duplicate
        content_similarity_threshold: Informational excerpt threshold (0-1), reported but not gating
        time_window_hours: Only records published within this many hours are fuzzy-compared
        max_candidates: Most-recent in-window records scanned per lookup, None for unbounded
        retention_days: Default horizon for cleanup
        title_weight: Weight of the title signal
        excerpt_weight: Weight of the excerpt signal
        url_weight: Weight of the URL signal
    """

    family: str = "articles"
    title_similarity_threshold: float = 0.85
    content_similarity_threshold: float = 0.70
    time_window_hours: float = 24
    max_candidates: int | None = 500
    retention_days: int = 30
    title_weight: float = 0.6
    excerpt_weight: float = 0.3
    url_weight: float = 0.1


@dataclass
class StoreConfig:
    """Configuration for the record store.

    Attributes:
        backend: "json" for the flat-file store, "memory" for memory-only mode
        path: File path template; "{family}" is replaced by the detector family
        data_dir_env: Environment variable that relocates relative store paths
    """

    backend: str = "json"
    path: str = "data/processed-{family}.json"
    data_dir_env: str = "CONTENT_DEDUP_DATA_DIR"


@dataclass
class CacheConfig:
    """Configuration for the snapshot cache.

    Attributes:
        ttl_seconds: Seconds a loaded snapshot is trusted before reloading
    """

    ttl_seconds: float = 600.0


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Path of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "content_dedup.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    detector: DetectorConfig = field(default_factory=DetectorConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config file {path}: expected a mapping at top level")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "detector": {
            "family": cfg.detector.family,
            "title_similarity_threshold": cfg.detector.title_similarity_threshold,
            "content_similarity_threshold": cfg.detector.content_similarity_threshold,
            "time_window_hours": cfg.detector.time_window_hours,
            "max_candidates": cfg.detector.max_candidates,
            "retention_days": cfg.detector.retention_days,
            "title_weight": cfg.detector.title_weight,
            "excerpt_weight": cfg.detector.excerpt_weight,
            "url_weight": cfg.detector.url_weight,
        },
        "store": {
            "backend": cfg.store.backend,
            "path": cfg.store.path,
            "data_dir_env": cfg.store.data_dir_env,
        },
        "cache": {
            "ttl_seconds": cfg.cache.ttl_seconds,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        detector=DetectorConfig(**data["detector"]),
        store=StoreConfig(**data["store"]),
        cache=CacheConfig(**data["cache"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_store_path(store_cfg: StoreConfig, family: str) -> Path:
    """Resolve the record file for a content family.

    Relative paths are placed under the directory named by the
    ``data_dir_env`` environment variable when it is set.
    """
    path = Path(store_cfg.path.format(family=family))
    data_dir = os.getenv(store_cfg.data_dir_env) if store_cfg.data_dir_env else None
    if data_dir and not path.is_absolute():
        return Path(data_dir) / path.name
    return path
