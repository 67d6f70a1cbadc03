#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import os
import threading
import time


def ts_local() -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())


class RuntimeLog:
    """Opt-in append-only log file, one timestamped line per event."""

    def __init__(self, path: str, enabled: bool = False) -> None:
        self.path = path
        self.enabled = bool(enabled)
        self._lock = threading.Lock()

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = bool(enabled)

    def append(self, line: str) -> None:
        if not line:
            return
        if not self.enabled or not self.path:
            return
        try:
            parent = os.path.dirname(self.path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with self._lock:
                with open(self.path, "a", encoding="utf-8") as f:
                    f.write(f"{ts_local()} {line}\n")
        except OSError:
            # Log write failures never fail the caller.
            pass

    def clear(self) -> None:
        if not self.path:
            return
        try:
            with self._lock:
                with open(self.path, "w", encoding="utf-8") as f:
                    f.write("")
        except OSError:
            pass
