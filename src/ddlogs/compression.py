"""Gzip helpers for request bodies."""

from __future__ import annotations

import gzip


def compress(text: str, encoding: str = "utf-8") -> bytes:
    """Gzip-compress `text` after encoding it.

    The gzip header timestamp is pinned to 0 so identical input always yields
    identical bytes. Empty input produces a valid, empty gzip member.
    """
    return gzip.compress(text.encode(encoding), mtime=0)


def decompress(data: bytes, encoding: str = "utf-8") -> str:
    """Inverse of `compress`."""
    return gzip.decompress(data).decode(encoding)
