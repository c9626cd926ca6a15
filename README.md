# esnode

Building blocks for a storage node that keeps data in fixed-size chunks and
proves possession of it:

- **Epoch sizing** (`esnode.epochs`): ethash verification-cache and dataset
  sizes per block or epoch, and the per-epoch seed hash. Sizes are computed
  (the largest size below the linear growth threshold whose row count is
  prime), so any non-negative epoch is accepted.
- **Cache and dataset generation** (`esnode.cache_gen`, `esnode.dataset_gen`):
  the ethash verification cache, single dataset items derived from it, and the
  full dataset, all as numpy arrays of unsigned 32-bit words.
- **Merkle proofs** (`esnode.merkle`): Keccak-256 Merkle roots and proofs over
  chunked data, either as a full fixed-width tree (`MerkleProver`) or as the
  smallest power-of-two tree that covers the data (`MinMerkleTreeProver`).
- **Configuration** (`esnode.config`): the `EsConfig` and `StorageConfig`
  dataclasses and `prefix_env_var`.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Examples

Epoch sizes and seeds:

```python
from esnode.epochs import cache_size, dataset_size, seed_hash, get_mix_bytes

cache_size(0)        # 16776896
dataset_size(0)      # 1073739904
seed_hash(0)         # 32 zero bytes; later epochs are repeated Keccak-256
get_mix_bytes()      # 128
```

Generating a small cache and deriving dataset items from it (real epoch sizes
take a long time in pure Python, so small sizes are handy for experiments):

```python
from esnode.cache_gen import generate_cache, generate_dataset_item, fnv
from esnode.dataset_gen import generate_dataset
from esnode.epochs import seed_hash

cache = generate_cache(1024, 0, seed_hash(0))      # 256 uint32 words
item = generate_dataset_item(cache, 0)             # 64 bytes
dataset = generate_dataset(32 * 1024, 0, cache)    # 8192 uint32 words, on worker threads
```

`generate_cache` and `generate_dataset` raise `ValueError` for sizes that are
not positive multiples of 64 bytes.

Merkle root and proof over chunked data:

```python
from esnode.merkle import MerkleProver, keccak256

prover = MerkleProver()
data = bytes(4096) + b"\x01\x01\x01\x01"

root = prover.get_root(data, 32, 4096)          # 32 chunks of 4096 bytes
proof = prover.get_proof(data, 5, 1, 4096)      # 2**5 chunks, chunk 1
leaf = keccak256(data[4096:8192])
assert prover.get_root_with_proof(leaf, 1, proof) == root
```

Missing leaves count as 32 zero bytes; empty data gives the zero hash and an
empty proof. A chunk index outside the tree raises `ValueError`.

The minimal tree uses only as many leaves as the data needs:

```python
from esnode.merkle import MinMerkleTreeProver, find_n_chunk

n_chunks, n_bits = find_n_chunk(len(data), 4096)   # (2, 1)
root = MinMerkleTreeProver().get_root(data, 32, 4096)
```

For chunks beyond the data, `MinMerkleTreeProver.get_proof` returns an empty
list.

Configuration helpers:

```python
from esnode.config import StorageConfig, prefix_env_var

prefix_env_var("ES_NODE", "L1_ETH_RPC")   # "ES_NODE_L1_ETH_RPC"
cfg = StorageConfig(filenames=["shard-0.dat"], kv_size=131072, chunk_size=4096)
```

## What the package does not do

The package computes caches, dataset items and full datasets, but it does not
run hashimoto over them and does not derive per-chunk mask data for encoding
stored chunks. It also keeps nothing on disk: there is no epoch-keyed cache of
generated caches or datasets and no memory-mapped dump files, so callers hold
the generated arrays themselves. There is no command-line program.