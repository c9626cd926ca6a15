"""Keccak-256 Merkle trees over fixed-size chunks of a key-value blob."""

from __future__ import annotations

from typing import Sequence

from Crypto.Hash import keccak

ZERO_HASH = bytes(32)


def keccak256(*args: bytes) -> bytes:
    """Keccak-256 digest of the concatenation of ``args``."""
    h = keccak.new(digest_bits=256)
    for part in args:
        h.update(bytes(part))
    return h.digest()


def find_n_chunk(data_len: int, chunk_size: int) -> tuple[int, int]:
    """Smallest power-of-two chunk count covering ``data_len`` bytes, and its bit count."""
    if data_len == 0:
        return 0, 0
    n = (data_len + chunk_size - 1) // chunk_size - 1
    bits = n.bit_length()
    return 1 << bits, bits


class MerkleProver:
    """Merkle tree with a fixed number of leaves; missing leaves are zero hashes."""

    def get_proof(
        self, data: bytes, n_chunk_bits: int, chunk_idx: int, chunk_size: int
    ) -> list[bytes]:
        """Sibling hashes from the leaf ``chunk_idx`` up to the root."""
        if len(data) == 0:
            return []
        n_chunks = 1 << n_chunk_bits
        if chunk_idx >= n_chunks:
            raise ValueError("index out of scope")
        nodes = [ZERO_HASH] * n_chunks
        for i in range(n_chunks):
            off = i * chunk_size
            if off > len(data):
                break
            nodes[i] = keccak256(data[off:off + chunk_size])
        proofs = []
        n = n_chunks
        while n != 1:
            proofs.append(nodes[chunk_idx ^ 1])
            nodes = [keccak256(nodes[2 * i], nodes[2 * i + 1]) for i in range(n // 2)]
            n //= 2
            chunk_idx //= 2
        return proofs

    def get_root_with_proof(
        self, data_hash: bytes, chunk_idx: int, proofs: Sequence[bytes]
    ) -> bytes:
        """Root reached from a leaf hash and its sibling hashes."""
        if not proofs:
            return data_hash
        if chunk_idx >= 1 << len(proofs):
            raise ValueError("chunkId overflows")
        digest = data_hash
        for sibling in proofs:
            if chunk_idx % 2 == 0:
                digest = keccak256(digest, sibling)
            else:
                digest = keccak256(sibling, digest)
            chunk_idx //= 2
        return digest

    def get_root(self, data: bytes, chunk_per_kv: int, chunk_size: int) -> bytes:
        """Root of the tree with ``chunk_per_kv`` leaves over ``data``."""
        length = len(data)
        if length == 0:
            return ZERO_HASH
        if chunk_per_kv < 1:
            raise ValueError(f"chunk count must be positive, got {chunk_per_kv}")
        nodes = [ZERO_HASH] * chunk_per_kv
        for i in range(chunk_per_kv):
            off = i * chunk_size
            if off >= length:
                break
            nodes[i] = keccak256(data[off:off + chunk_size])
        n = chunk_per_kv
        while n != 1:
            nodes[: n // 2] = [
                keccak256(nodes[2 * i], nodes[2 * i + 1]) for i in range(n // 2)
            ]
            n //= 2
        return nodes[0]


class MinMerkleTreeProver(MerkleProver):
    """Merkle tree sized to the smallest power of two of chunks that holds the data."""

    def get_proof(
        self, data: bytes, n_chunk_bits: int, chunk_idx: int, chunk_size: int
    ) -> list[bytes]:
        """Sibling hashes in the minimal tree; empty for chunks beyond the data."""
        if len(data) == 0:
            return []
        if chunk_idx >= 1 << n_chunk_bits:
            raise ValueError("index out of scope")
        n_min, bits_min = find_n_chunk(len(data), chunk_size)
        if chunk_idx >= n_min:
            return []
        return super().get_proof(data, bits_min, chunk_idx, chunk_size)

    def get_root_with_proof(
        self, data_hash: bytes, chunk_idx: int, proofs: Sequence[bytes]
    ) -> bytes:
        """Root reached from a leaf hash and its sibling hashes."""
        return super().get_root_with_proof(data_hash, chunk_idx, proofs)

    def get_root(self, data: bytes, n_chunk: int, chunk_size: int) -> bytes:
        """Root of the minimal tree over ``data``; ``n_chunk`` is not used."""
        if len(data) == 0:
            return ZERO_HASH
        n_min, _ = find_n_chunk(len(data), chunk_size)
        return super().get_root(data, n_min, chunk_size)