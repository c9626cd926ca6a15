"""Epoch arithmetic for the ethash cache and dataset: sizes and seed hashes."""

from __future__ import annotations

from functools import lru_cache

from Crypto.Hash import keccak

DATASET_INIT_BYTES = 1 << 30
DATASET_GROWTH_BYTES = 1 << 23
CACHE_INIT_BYTES = 1 << 24
CACHE_GROWTH_BYTES = 1 << 17
EPOCH_LENGTH = 30000
MIX_BYTES = 128
HASH_BYTES = 64
HASH_WORDS = 16
DATASET_PARENTS = 256
CACHE_ROUNDS = 3
LOOP_ACCESSES = 64
MAX_EPOCH = 2048

_MR_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)


def _is_prime(n: int) -> bool:
    """Deterministic Miller-Rabin primality test, exact for all 64-bit values."""
    if n < 2:
        return False
    for p in _MR_BASES:
        if n % p == 0:
            return n == p
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    for a in _MR_BASES:
        x = pow(a, d, n)
        if x in (1, n - 1):
            continue
        for _ in range(s - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


def _check_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def get_mix_bytes() -> int:
    """Return the width of the hashimoto mix in bytes."""
    return MIX_BYTES


@lru_cache(maxsize=None)
def calc_cache_size(epoch: int) -> int:
    """Largest size below the linear threshold whose row count is prime."""
    _check_non_negative("epoch", epoch)
    size = CACHE_INIT_BYTES + CACHE_GROWTH_BYTES * epoch - HASH_BYTES
    while not _is_prime(size // HASH_BYTES):
        size -= 2 * HASH_BYTES
    return size


@lru_cache(maxsize=None)
def calc_dataset_size(epoch: int) -> int:
    """Largest size below the linear threshold whose mix-row count is prime."""
    _check_non_negative("epoch", epoch)
    size = DATASET_INIT_BYTES + DATASET_GROWTH_BYTES * epoch - MIX_BYTES
    while not _is_prime(size // MIX_BYTES):
        size -= 2 * MIX_BYTES
    return size


def cache_size(block: int) -> int:
    """Size of the verification cache for the epoch containing ``block``."""
    _check_non_negative("block", block)
    return calc_cache_size(block // EPOCH_LENGTH)


def dataset_size(block: int) -> int:
    """Size of the mining dataset for the epoch containing ``block``."""
    _check_non_negative("block", block)
    return calc_dataset_size(block // EPOCH_LENGTH)


def dataset_size_for_epoch(epoch: int) -> int:
    """Size of the mining dataset for ``epoch``."""
    return calc_dataset_size(epoch)


def seed_hash(block: int) -> bytes:
    """Seed used to generate the cache and dataset for the epoch of ``block``."""
    _check_non_negative("block", block)
    seed = bytes(32)
    for _ in range(block // EPOCH_LENGTH):
        seed = keccak.new(digest_bits=256, data=seed).digest()
    return seed