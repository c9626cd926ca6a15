"""Verification cache generation and dataset item derivation for ethash."""

from __future__ import annotations

import logging
import time
from typing import Sequence

import numpy as np
from Crypto.Hash import keccak

from esnode.epochs import CACHE_ROUNDS, DATASET_PARENTS, HASH_BYTES, HASH_WORDS

_log = logging.getLogger(__name__)

FNV_PRIME = 0x01000193
_U32_MASK = 0xFFFFFFFF


def _keccak512(data: bytes | bytearray | memoryview) -> bytes:
    return keccak.new(digest_bits=512, data=bytes(data)).digest()


def fnv(a: int, b: int) -> int:
    """FNV-inspired 32-bit mixing of two words: ``a * prime ^ b`` modulo 2**32."""
    return ((a * FNV_PRIME) ^ b) & _U32_MASK


def fnv_hash(mix: Sequence[int], data: Sequence[int]) -> np.ndarray:
    """Mix ``data`` into ``mix`` word by word with :func:`fnv`.

    Only the first ``len(mix)`` words of ``data`` are used. A new array of
    unsigned 32-bit words is returned.
    """
    mix_arr = np.asarray(mix, dtype=np.uint32)
    data_arr = np.asarray(data, dtype=np.uint32)
    if len(data_arr) < len(mix_arr):
        raise ValueError(
            f"data has {len(data_arr)} words, at least {len(mix_arr)} are needed"
        )
    return (mix_arr * np.uint32(FNV_PRIME)) ^ data_arr[: len(mix_arr)]


def generate_cache(size: int, epoch: int, seed: bytes) -> np.ndarray:
    """Build a verification cache of ``size`` bytes from ``seed``.

    The cache is first filled sequentially with chained Keccak-512 hashes and
    then reworked by a low-round RandMemoHash. The result is returned as an
    array of unsigned 32-bit words read in little-endian order.
    """
    if size <= 0 or size % HASH_BYTES:
        raise ValueError(f"cache size must be a positive multiple of {HASH_BYTES}, got {size}")
    start = time.monotonic()
    rows = size // HASH_BYTES
    cache = bytearray(size)

    cache[0:HASH_BYTES] = _keccak512(seed)
    view = memoryview(cache)
    for offset in range(HASH_BYTES, size, HASH_BYTES):
        cache[offset:offset + HASH_BYTES] = _keccak512(view[offset - HASH_BYTES:offset])

    for _ in range(CACHE_ROUNDS):
        for j in range(rows):
            src_off = ((j - 1 + rows) % rows) * HASH_BYTES
            dst_off = j * HASH_BYTES
            xor_off = (int.from_bytes(cache[dst_off:dst_off + 4], "little") % rows) * HASH_BYTES
            left = int.from_bytes(cache[src_off:src_off + HASH_BYTES], "little")
            right = int.from_bytes(cache[xor_off:xor_off + HASH_BYTES], "little")
            temp = (left ^ right).to_bytes(HASH_BYTES, "little")
            cache[dst_off:dst_off + HASH_BYTES] = _keccak512(temp)
    view.release()

    elapsed = time.monotonic() - start
    level = logging.INFO if elapsed > 3 else logging.DEBUG
    _log.log(level, "Generated ethash verification cache epoch=%d elapsed=%.3fs", epoch, elapsed)
    return np.frombuffer(bytes(cache), dtype="<u4").astype(np.uint32)


def generate_dataset_item(cache: Sequence[int], index: int) -> bytes:
    """Derive the 64-byte dataset node at ``index`` from 256 pseudo-random cache rows."""
    cache_arr = np.asarray(cache, dtype=np.uint32)
    rows = len(cache_arr) // HASH_WORDS
    if rows == 0:
        raise ValueError(f"cache must hold at least {HASH_WORDS} words")
    if not 0 <= index <= _U32_MASK:
        raise ValueError(f"index must fit in 32 bits, got {index}")

    base = (index % rows) * HASH_WORDS
    words = cache_arr[base:base + HASH_WORDS].copy()
    words[0] ^= np.uint32(index)
    mix = _keccak512(words.astype("<u4").tobytes())

    int_mix = np.frombuffer(mix, dtype="<u4").astype(np.uint32)
    for i in range(DATASET_PARENTS):
        parent = fnv(index ^ i, int(int_mix[i % 16])) % rows
        int_mix = fnv_hash(int_mix, cache_arr[parent * HASH_WORDS:(parent + 1) * HASH_WORDS])

    return _keccak512(int_mix.astype("<u4").tobytes())