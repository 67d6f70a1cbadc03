#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
smaz package

Short-string compression with a static codebook of common English substrings.
smazTool.py is the command-line entrypoint; the codec itself lives here and
has no I/O.
"""

from __future__ import annotations

from smaz.codebook import CODEBOOK, CODEBOOK_SIZE, REVERSE_TABLE, VERBATIM_BYTE, VERBATIM_RUN
from smaz.codec import (
    compress,
    compress_text,
    compression_stats,
    decompress,
    decompress_text,
    iter_tokens,
    max_compressed_size,
    should_compress,
    try_decompress,
)
from smaz.errors import MalformedStreamError, SmazError

__all__ = [
    "CODEBOOK",
    "CODEBOOK_SIZE",
    "REVERSE_TABLE",
    "VERBATIM_BYTE",
    "VERBATIM_RUN",
    "MalformedStreamError",
    "SmazError",
    "compress",
    "compress_text",
    "compression_stats",
    "decompress",
    "decompress_text",
    "iter_tokens",
    "max_compressed_size",
    "should_compress",
    "try_decompress",
]
