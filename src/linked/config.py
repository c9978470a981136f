"""Configuration loader for source adapters."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


@dataclass(frozen=True)
class AdapterConfig:
    cache_enabled: bool = True
    cache_size: int = 3
    url: Optional[str] = None
    timeout_sec: int = 30

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdapterConfig":
        return cls(
            cache_enabled=bool(data.get("cache_enabled", True)),
            cache_size=int(data.get("cache_size", 3)),
            url=data.get("url"),
            timeout_sec=int(data.get("timeout_sec", 30)),
        )


ENV_MAP = {
    "cache_enabled": "LINKED_CACHE_ENABLED",
    "cache_size": "LINKED_CACHE_SIZE",
    "url": "LINKED_URL",
    "timeout_sec": "LINKED_TIMEOUT_SEC",
}

TRUTHY = {"1", "true", "yes", "on"}


def load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def merge_env_overrides(config_data: Dict[str, Any]) -> Dict[str, Any]:
    merged = json.loads(json.dumps(config_data))  # deep copy via json

    for key, env_name in ENV_MAP.items():
        if env_name not in os.environ:
            continue
        value: Any = os.environ[env_name]
        if key in {"cache_size", "timeout_sec"}:
            value = int(value)
        elif key == "cache_enabled":
            value = value.strip().lower() in TRUTHY
        merged[key] = value

    return merged


def load_config(config_path: str | Path = "config/linked.defaults.yml") -> AdapterConfig:
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    data = load_yaml(path)
    data = merge_env_overrides(data)
    return AdapterConfig.from_dict(data)
