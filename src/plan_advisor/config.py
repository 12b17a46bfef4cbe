from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml


DEFAULT_CONFIG_PATH = Path("config.yaml")


def load_config(path: str | os.PathLike | None = None) -> Dict[str, Any]:
    cfg_path = Path(path) if path else DEFAULT_CONFIG_PATH
    with open(cfg_path, "r") as f:
        return yaml.safe_load(f) or {}


def section(cfg: Optional[Mapping[str, Any]], *keys: str) -> Dict[str, Any]:
    """Walk nested mapping keys, returning an empty dict when any level is missing."""
    node: Any = cfg or {}
    for key in keys:
        if not isinstance(node, Mapping):
            return {}
        node = node.get(key)
    return dict(node) if isinstance(node, Mapping) else {}


__all__ = ["load_config", "section", "DEFAULT_CONFIG_PATH"]
