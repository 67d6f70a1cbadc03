#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Size comparison between smaz and general-purpose codecs.

General-purpose codecs pay a fixed header/trailer cost that dominates on short
inputs; this module makes that visible. Nothing here is part of the smaz wire
format.
"""

from __future__ import annotations

import bz2
import lzma
import zlib
from typing import Dict

import zstandard as zstd

from smaz.codec import compress, ensure_bytes

CODEC_SMAZ = "smaz"
CODEC_DEFLATE = "deflate"
CODEC_ZLIB = "zlib"
CODEC_BZ2 = "bz2"
CODEC_LZMA = "lzma"
CODEC_ZSTD = "zstd"
ALL_CODECS = (
    CODEC_SMAZ,
    CODEC_DEFLATE,
    CODEC_ZLIB,
    CODEC_BZ2,
    CODEC_LZMA,
    CODEC_ZSTD,
)


def encode_with(raw: bytes, codec: str) -> bytes:
    if codec == CODEC_SMAZ:
        return compress(raw)
    if codec == CODEC_DEFLATE:
        cobj = zlib.compressobj(level=9, wbits=-15)
        return cobj.compress(raw) + cobj.flush()
    if codec == CODEC_ZLIB:
        return zlib.compress(raw, level=9)
    if codec == CODEC_BZ2:
        return bz2.compress(raw, compresslevel=9)
    if codec == CODEC_LZMA:
        return lzma.compress(raw, preset=9)
    if codec == CODEC_ZSTD:
        cctx = zstd.ZstdCompressor(level=10)
        return cctx.compress(raw)
    raise ValueError(f"unsupported codec: {codec}")


def compare_codecs(data: bytes) -> Dict[str, int]:
    """Compressed size of data under every codec in ALL_CODECS."""
    raw = ensure_bytes(data)
    return {codec: len(encode_with(raw, codec)) for codec in ALL_CODECS}


def best_codec(data: bytes) -> str:
    sizes = compare_codecs(data)
    return min(ALL_CODECS, key=lambda codec: (sizes[codec], ALL_CODECS.index(codec)))
