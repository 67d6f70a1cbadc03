#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Throughput benchmark for the smaz codec over a line-oriented text corpus.

Every line is compressed on its own, which is the intended use (short
strings). Any plain-text book works as a corpus, e.g. Project Gutenberg #5200.

Usage:
  python tools/benchmark_smaz.py corpus.txt
  python tools/benchmark_smaz.py --rounds 20 corpus.txt
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Tuple

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from smaz.codec import compress, decompress  # noqa: E402


def load_lines(path: str) -> Tuple[List[bytes], int]:
    lines: List[bytes] = []
    total = 0
    with open(path, "rb") as f:
        for raw in f:
            line = raw.rstrip(b"\r\n")
            lines.append(line)
            total += len(line)
    return lines, total


def _mb_per_s(nbytes: int, seconds: float) -> float:
    if seconds <= 0:
        return 0.0
    return (nbytes / (1024.0 * 1024.0)) / seconds


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--rounds", type=int, default=5, help="passes over the corpus per measurement")
    ap.add_argument("corpus", help="text file, one input per line")
    args = ap.parse_args()

    lines, plain_total = load_lines(args.corpus)
    if not lines:
        print("empty corpus", file=sys.stderr)
        return 2
    rounds = max(1, int(args.rounds))

    packed = [compress(line) for line in lines]
    packed_total = sum(len(p) for p in packed)
    for line, blob in zip(lines, packed):
        if decompress(blob) != line:
            print(f"round-trip mismatch: {line!r}", file=sys.stderr)
            return 1

    t0 = time.perf_counter()
    for _ in range(rounds):
        for line in lines:
            compress(line)
    t_comp = time.perf_counter() - t0

    t0 = time.perf_counter()
    for _ in range(rounds):
        for blob in packed:
            decompress(blob)
    t_decomp = time.perf_counter() - t0

    ratio = (packed_total / float(plain_total)) if plain_total else 1.0
    print(f"lines: {len(lines)}  plain: {plain_total} B  compressed: {packed_total} B  ratio: {ratio:.3f}")
    print(f"compress:   {_mb_per_s(plain_total * rounds, t_comp):8.2f} MB/s")
    print(f"decompress: {_mb_per_s(packed_total * rounds, t_decomp):8.2f} MB/s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
