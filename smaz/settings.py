#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import json
import os
from typing import Dict, Optional

CONFIG_ENV = "SMAZ_CONFIG"
DEFAULT_CONFIG_FILE = "smaz_config.json"

FORMAT_HEX = "hex"
FORMAT_B64 = "b64"
FORMAT_RAW = "raw"
FORMATS = (FORMAT_HEX, FORMAT_B64, FORMAT_RAW)

DEFAULT_CONFIG: Dict[str, object] = {
    "format": FORMAT_HEX,
    "min_gain_bytes": 2,
    "runtime_log": False,
    "runtime_log_file": "smaz_runtime.log",
}


def int_cfg(value: object, default: int, min_v: int, max_v: int) -> int:
    try:
        v = int(value)  # type: ignore[arg-type]
    except Exception:
        v = int(default)
    if v < int(min_v):
        return int(min_v)
    if v > int(max_v):
        return int(max_v)
    return int(v)


def bool_cfg(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        norm = value.strip().lower()
        if norm in ("1", "true", "yes", "on"):
            return True
        if norm in ("0", "false", "no", "off"):
            return False
    return bool(default)


def format_cfg(value: object, default: str = FORMAT_HEX) -> str:
    norm = str(value or "").strip().lower()
    if norm in FORMATS:
        return norm
    return default


def resolve_config_path(path: Optional[str] = None) -> str:
    if path:
        return path
    env_path = os.environ.get(CONFIG_ENV, "").strip()
    if env_path:
        return env_path
    return DEFAULT_CONFIG_FILE


def load_config(path: Optional[str] = None) -> Dict[str, object]:
    """Load the JSON config merged over DEFAULT_CONFIG.

    A missing or unreadable file yields the defaults; unknown keys are kept.
    """
    cfg: Dict[str, object] = dict(DEFAULT_CONFIG)
    config_file = resolve_config_path(path)
    if not os.path.isfile(config_file):
        return cfg
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            loaded = json.load(f)
    except (OSError, ValueError):
        return cfg
    if isinstance(loaded, dict):
        cfg.update(loaded)
    cfg["format"] = format_cfg(cfg.get("format"))
    cfg["min_gain_bytes"] = int_cfg(cfg.get("min_gain_bytes"), 2, 0, 64)
    cfg["runtime_log"] = bool_cfg(cfg.get("runtime_log"), False)
    cfg["runtime_log_file"] = str(cfg.get("runtime_log_file") or DEFAULT_CONFIG["runtime_log_file"])
    return cfg


def save_config(path: str, cfg: Dict[str, object]) -> None:
    tmp = path + ".tmp"
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2, sort_keys=True)
    os.replace(tmp, path)
