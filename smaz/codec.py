#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from smaz.codebook import CODEBOOK, MAX_RUN_LENGTH, REVERSE_TABLE, VERBATIM_BYTE, VERBATIM_RUN
from smaz.errors import (
    CAUSE_CODE_OUT_OF_RANGE,
    CAUSE_TRUNCATED_ESCAPE,
    CAUSE_TRUNCATED_RUN,
    CAUSE_TRUNCATED_RUN_LENGTH,
    MalformedStreamError,
    SmazError,
)
from smaz.trie import TrieNode, build_trie

TOKEN_CODE = "code"
TOKEN_BYTE = "byte"
TOKEN_RUN = "run"

# Built once at import and never mutated; safe to share between threads.
_TRIE: TrieNode = build_trie(CODEBOOK)


@dataclass(frozen=True)
class Token:
    kind: str
    offset: int
    size: int  # stream bytes consumed by this token
    payload: bytes  # decoded bytes this token stands for
    code: Optional[int] = None


def ensure_bytes(data: object) -> bytes:
    if isinstance(data, str):
        raise TypeError("smaz works on bytes; encode text first or use compress_text()")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected bytes-like input, got {type(data).__name__}")


def _flush_verbatim(out: bytearray, run: bytes) -> None:
    for pos in range(0, len(run), MAX_RUN_LENGTH):
        chunk = run[pos : pos + MAX_RUN_LENGTH]
        if len(chunk) == 1:
            out.append(VERBATIM_BYTE)
        else:
            out.append(VERBATIM_RUN)
            out.append(len(chunk))
        out.extend(chunk)


def compress(data: bytes) -> bytes:
    """Compress a byte string with the static smaz codebook.

    Total over all byte sequences: bytes with no codebook match are carried in
    verbatim escapes, so the output may be longer than the input.
    """
    raw = ensure_bytes(data)
    out = bytearray()
    verbatim = bytearray()
    lookup = _TRIE.lookup
    i = 0
    n = len(raw)
    while i < n:
        match = lookup(raw, i)
        if match is None:
            verbatim.append(raw[i])
            i += 1
            continue
        if verbatim:
            _flush_verbatim(out, bytes(verbatim))
            verbatim.clear()
        code, length = match
        out.append(code)
        i += length
    if verbatim:
        _flush_verbatim(out, bytes(verbatim))
    return bytes(out)


def iter_tokens(data: bytes) -> Iterator[Token]:
    """Walk a compressed stream token by token.

    Raises MalformedStreamError at the first token that cannot be read; tokens
    before it have already been yielded.
    """
    raw = ensure_bytes(data)
    n = len(raw)
    table_size = len(REVERSE_TABLE)
    j = 0
    while j < n:
        b = raw[j]
        if b == VERBATIM_BYTE:
            if j + 1 >= n:
                raise MalformedStreamError(CAUSE_TRUNCATED_ESCAPE, j)
            yield Token(TOKEN_BYTE, j, 2, raw[j + 1 : j + 2])
            j += 2
        elif b == VERBATIM_RUN:
            if j + 1 >= n:
                raise MalformedStreamError(CAUSE_TRUNCATED_RUN_LENGTH, j)
            length = raw[j + 1]
            end = j + 2 + length
            if end > n:
                raise MalformedStreamError(
                    CAUSE_TRUNCATED_RUN, j, f"declared {length} bytes, {n - j - 2} left"
                )
            yield Token(TOKEN_RUN, j, 2 + length, raw[j + 2 : end])
            j = end
        else:
            if b >= table_size:
                raise MalformedStreamError(CAUSE_CODE_OUT_OF_RANGE, j, f"code {b}")
            yield Token(TOKEN_CODE, j, 1, REVERSE_TABLE[b], code=b)
            j += 1


def _decode_into(data: bytes, out: bytearray) -> None:
    for tok in iter_tokens(data):
        out.extend(tok.payload)


def decompress(data: bytes) -> bytes:
    """Decode a smaz stream. Raises MalformedStreamError on corrupt input."""
    out = bytearray()
    _decode_into(data, out)
    return bytes(out)


def try_decompress(data: bytes) -> Tuple[bytes, Optional[MalformedStreamError]]:
    """Decode a smaz stream without raising on corrupt input.

    Returns (decoded, None) on success. On failure returns the bytes decoded up
    to the faulting token together with the error.
    """
    out = bytearray()
    try:
        _decode_into(data, out)
    except MalformedStreamError as ex:
        return bytes(out), ex
    return bytes(out), None


def compress_text(text: str, encoding: str = "utf-8") -> bytes:
    if not isinstance(text, str):
        raise TypeError("text must be str")
    return compress(text.encode(encoding))


def decompress_text(data: bytes, encoding: str = "utf-8") -> str:
    raw = decompress(data)
    try:
        return raw.decode(encoding, errors="strict")
    except UnicodeDecodeError as ex:
        raise SmazError(f"decompressed bytes are not valid {encoding}: {ex}") from ex


def max_compressed_size(n: int) -> int:
    """Upper bound on compress() output for n input bytes.

    Reached when nothing matches the codebook: every run chunk of up to 255
    bytes costs two extra bytes (escape + length).
    """
    if n <= 0:
        return 0
    chunks = (int(n) + MAX_RUN_LENGTH - 1) // MAX_RUN_LENGTH
    return int(n) + 2 * chunks


def compression_stats(data: bytes) -> Dict[str, object]:
    """Size telemetry for one input. Purely diagnostic."""
    raw = ensure_bytes(data)
    comp = compress(raw)
    dict_codes = 0
    verbatim_bytes = 0
    escapes = 0
    for tok in iter_tokens(comp):
        if tok.kind == TOKEN_CODE:
            dict_codes += 1
        else:
            escapes += 1
            verbatim_bytes += len(tok.payload)
    plain_bytes = len(raw)
    compressed_bytes = len(comp)
    gain_pct: float
    if plain_bytes > 0:
        gain_pct = ((plain_bytes - compressed_bytes) / float(plain_bytes)) * 100.0
    else:
        gain_pct = 0.0
    return {
        "plain_bytes": plain_bytes,
        "compressed_bytes": compressed_bytes,
        "delta_bytes": plain_bytes - compressed_bytes,
        "gain_pct": gain_pct,
        "dict_codes": dict_codes,
        "escapes": escapes,
        "verbatim_bytes": verbatim_bytes,
    }


def should_compress(data: bytes, min_gain_bytes: int = 2) -> bool:
    raw = ensure_bytes(data)
    if not raw:
        return False
    return len(compress(raw)) < (len(raw) - int(min_gain_bytes))


def describe_tokens(data: bytes) -> List[str]:
    """Human-readable listing of a compressed stream (one line per token)."""
    lines: List[str] = []
    for tok in iter_tokens(data):
        if tok.kind == TOKEN_CODE:
            lines.append(f"{tok.offset:5d}  code {tok.code:3d}  {tok.payload!r}")
        elif tok.kind == TOKEN_BYTE:
            lines.append(f"{tok.offset:5d}  byte       {tok.payload!r}")
        else:
            lines.append(f"{tok.offset:5d}  run  {len(tok.payload):3d}  {tok.payload!r}")
    return lines
