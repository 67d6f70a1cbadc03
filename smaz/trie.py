#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from smaz.errors import SmazError


class TrieNode:
    """Byte trie with longest-prefix lookup.

    Each node maps the next byte value to a child node. A node is terminal when
    some key ends there; the terminal carries that key's code.
    """

    __slots__ = ("branches", "terminal", "code")

    def __init__(self) -> None:
        self.branches: Dict[int, TrieNode] = {}
        self.terminal = False
        self.code = 0

    def put(self, key: bytes, code: int) -> bool:
        """Insert key -> code.

        Returns True for a fresh key. Returns False (and overwrites the stored
        code) when the key was already present.
        """
        if not key:
            raise ValueError("trie key must be non-empty")
        if code < 0 or code > 0xFF:
            raise ValueError(f"trie code out of byte range: {code}")
        node = self
        for b in key:
            nxt = node.branches.get(b)
            if nxt is None:
                nxt = TrieNode()
                node.branches[b] = nxt
            node = nxt
        fresh = not node.terminal
        node.terminal = True
        node.code = int(code)
        return fresh

    def get(self, key: bytes) -> Optional[int]:
        """Exact lookup: code for key, or None if key does not end on a terminal."""
        node = self
        for b in key:
            nxt = node.branches.get(b)
            if nxt is None:
                return None
            node = nxt
        if node.terminal:
            return node.code
        return None

    def lookup(self, data: bytes, offset: int = 0) -> Optional[Tuple[int, int]]:
        """Longest key that prefixes data[offset:].

        Returns (code, match_length), or None when no key matches. The walk keeps
        going past terminals so a longer key wins, and falls back to the last
        terminal seen when it dead-ends.
        """
        node = self
        best: Optional[Tuple[int, int]] = None
        pos = offset
        n = len(data)
        while pos < n:
            nxt = node.branches.get(data[pos])
            if nxt is None:
                break
            node = nxt
            pos += 1
            if node.terminal:
                best = (node.code, pos - offset)
        return best


def build_trie(entries: Sequence[bytes]) -> TrieNode:
    """Build a trie where each entry's code is its index in entries."""
    root = TrieNode()
    for code, entry in enumerate(entries):
        if not root.put(entry, code):
            raise SmazError(f"duplicate codebook entry: {entry!r}")
    return root
