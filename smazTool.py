#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
smazTool.py: compress/decompress short strings with the smaz codebook.

Usage:
  python smazTool.py compress "this is a small string"
  python smazTool.py compress -f line.txt --format raw -o line.smaz
  python smazTool.py decompress 0b4a2b...
  python smazTool.py stats --lines -f corpus.txt
  python smazTool.py compare "http://github.com/antirez/smaz"
  python smazTool.py dump 0b4a2b...
"""

from __future__ import annotations

import argparse
import base64
import binascii
import sys
from typing import Dict, List, Optional

from smaz.codec import (
    compress,
    compression_stats,
    decompress,
    describe_tokens,
    should_compress,
)
from smaz.compare import ALL_CODECS, best_codec, compare_codecs
from smaz.errors import SmazError
from smaz.runtime_log import RuntimeLog
from smaz.settings import FORMAT_B64, FORMAT_HEX, FORMAT_RAW, FORMATS, format_cfg, load_config

VERSION = "1.0.0"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


class InputError(Exception):
    pass


def out(line: str) -> None:
    print(line, flush=True)


def err(line: str) -> None:
    print(line, file=sys.stderr, flush=True)


def _read_plain(args: argparse.Namespace) -> bytes:
    if args.file:
        with open(args.file, "rb") as f:
            return f.read()
    if args.input is not None:
        return str(args.input).encode("utf-8")
    return sys.stdin.buffer.read()


def parse_stream(raw: bytes, fmt: str) -> bytes:
    """Turn user-supplied compressed data into stream bytes."""
    if fmt == FORMAT_RAW:
        return raw
    text = raw.decode("ascii", errors="strict").strip() if raw else ""
    if fmt == FORMAT_HEX:
        try:
            return bytes.fromhex("".join(text.split()))
        except ValueError as ex:
            raise InputError(f"invalid hex input: {ex}") from ex
    if fmt == FORMAT_B64:
        try:
            return base64.b64decode(text.encode("ascii"), validate=True)
        except (binascii.Error, ValueError) as ex:
            raise InputError(f"invalid base64 input: {ex}") from ex
    raise InputError(f"unsupported format: {fmt}")


def format_stream(data: bytes, fmt: str) -> Optional[str]:
    if fmt == FORMAT_HEX:
        return data.hex()
    if fmt == FORMAT_B64:
        return base64.b64encode(data).decode("ascii")
    return None


def _read_stream(args: argparse.Namespace, fmt: str) -> bytes:
    if args.file:
        with open(args.file, "rb") as f:
            raw = f.read()
    elif args.input is not None:
        if fmt == FORMAT_RAW:
            raise InputError("raw format needs -f FILE or stdin")
        raw = str(args.input).encode("ascii", errors="replace")
    else:
        raw = sys.stdin.buffer.read()
    try:
        return parse_stream(raw, fmt)
    except UnicodeDecodeError as ex:
        raise InputError(f"{fmt} input must be ASCII") from ex


def _write_bytes(data: bytes, output: Optional[str]) -> None:
    if output:
        with open(output, "wb") as f:
            f.write(data)
        return
    sys.stdout.flush()
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()


def _pct_label(plain: int, packed: int) -> str:
    if plain <= 0:
        return "empty"
    level = 100 - ((100 * packed) // plain)
    if level < 0:
        return f"enlarged by {-level}%"
    return f"compressed by {level}%"


def cmd_compress(args: argparse.Namespace, cfg: Dict[str, object], log: RuntimeLog) -> int:
    fmt = format_cfg(args.format or cfg.get("format"))
    plain = _read_plain(args)
    packed = compress(plain)
    log.append(f"compress in={len(plain)} out={len(packed)}")
    text = format_stream(packed, fmt)
    if text is None:
        _write_bytes(packed, args.output)
    elif args.output:
        with open(args.output, "w", encoding="ascii") as f:
            f.write(text + "\n")
    else:
        out(text)
    return EXIT_OK


def cmd_decompress(args: argparse.Namespace, cfg: Dict[str, object], log: RuntimeLog) -> int:
    fmt = format_cfg(args.format or cfg.get("format"))
    stream = _read_stream(args, fmt)
    plain = decompress(stream)
    log.append(f"decompress in={len(stream)} out={len(plain)}")
    _write_bytes(plain, args.output)
    return EXIT_OK


def cmd_stats(args: argparse.Namespace, cfg: Dict[str, object], log: RuntimeLog) -> int:
    plain = _read_plain(args)
    min_gain = int(cfg.get("min_gain_bytes", 2))  # type: ignore[arg-type]
    if args.lines:
        total_plain = 0
        total_packed = 0
        for line in plain.splitlines():
            st = compression_stats(line)
            total_plain += int(st["plain_bytes"])  # type: ignore[arg-type]
            total_packed += int(st["compressed_bytes"])  # type: ignore[arg-type]
            if not args.quiet and line:
                out(f"{line!r} {_pct_label(len(line), int(st['compressed_bytes']))}")  # type: ignore[arg-type]
        out(f"total: {total_plain} -> {total_packed} bytes, {_pct_label(total_plain, total_packed)}")
        log.append(f"stats lines in={total_plain} out={total_packed}")
        return EXIT_OK

    st = compression_stats(plain)
    for key in ("plain_bytes", "compressed_bytes", "delta_bytes", "dict_codes", "escapes", "verbatim_bytes"):
        out(f"{key}: {st[key]}")
    out(f"gain_pct: {float(st['gain_pct']):.1f}")  # type: ignore[arg-type]
    out(f"worth_compressing: {should_compress(plain, min_gain_bytes=min_gain)}")
    log.append(f"stats in={st['plain_bytes']} out={st['compressed_bytes']}")
    return EXIT_OK


def cmd_compare(args: argparse.Namespace, cfg: Dict[str, object], log: RuntimeLog) -> int:
    plain = _read_plain(args)
    sizes = compare_codecs(plain)
    best = best_codec(plain)
    out(f"input: {len(plain)} bytes")
    for codec in ALL_CODECS:
        mark = " *" if codec == best else ""
        out(f"{codec:<8}{sizes[codec]:>8}  {_pct_label(len(plain), sizes[codec])}{mark}")
    log.append(f"compare in={len(plain)} best={best}")
    return EXIT_OK


def cmd_dump(args: argparse.Namespace, cfg: Dict[str, object], log: RuntimeLog) -> int:
    fmt = format_cfg(args.format or cfg.get("format"))
    stream = _read_stream(args, fmt)
    for line in describe_tokens(stream):
        out(line)
    return EXIT_OK


COMMANDS = {
    "compress": cmd_compress,
    "decompress": cmd_decompress,
    "stats": cmd_stats,
    "compare": cmd_compare,
    "dump": cmd_dump,
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="smazTool.py",
        description="smaz short-string compression.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    ap.add_argument("--config", default=None, help="JSON config file (default: $SMAZ_CONFIG or smaz_config.json).")
    ap.add_argument("--runtime-log", dest="runtime_log", default=None, help="append a line per command to this file.")
    ap.add_argument("--version", action="version", version=f"smazTool.py v{VERSION}")
    sub = ap.add_subparsers(dest="command", required=True)

    def add_io(p: argparse.ArgumentParser, what: str, with_format: bool, with_output: bool) -> None:
        p.add_argument("input", nargs="?", default=None, help=f"{what} (default: read stdin).")
        p.add_argument("-f", "--file", default=None, help=f"read {what} from file.")
        if with_format:
            p.add_argument("--format", choices=FORMATS, default=None, help="stream encoding (default from config: hex).")
        if with_output:
            p.add_argument("-o", "--output", default=None, help="write result to file instead of stdout.")

    add_io(sub.add_parser("compress", help="compress text or bytes"), "text", True, True)
    add_io(sub.add_parser("decompress", help="decompress a smaz stream"), "compressed data", True, True)
    p_stats = sub.add_parser("stats", help="compression statistics")
    add_io(p_stats, "text", False, False)
    p_stats.add_argument("--lines", action="store_true", help="report each input line separately.")
    p_stats.add_argument("--quiet", action="store_true", help="with --lines: only print the total.")
    add_io(sub.add_parser("compare", help="compare smaz with general-purpose codecs"), "text", False, False)
    add_io(sub.add_parser("dump", help="list the tokens of a smaz stream"), "compressed data", True, False)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    cfg = load_config(args.config)
    if args.runtime_log:
        log = RuntimeLog(args.runtime_log, enabled=True)
    else:
        log = RuntimeLog(str(cfg.get("runtime_log_file") or ""), enabled=bool(cfg.get("runtime_log")))

    handler = COMMANDS[args.command]
    try:
        return handler(args, cfg, log)
    except InputError as ex:
        err(f"error: {ex}")
        log.append(f"error {args.command}: {ex}")
        return EXIT_USAGE
    except SmazError as ex:
        err(f"error: {ex}")
        log.append(f"error {args.command}: {ex}")
        return EXIT_ERROR
    except OSError as ex:
        err(f"error: {ex}")
        log.append(f"error {args.command}: {ex}")
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
