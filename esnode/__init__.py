"""Storage-node primitives: ethash epoch sizing and cache/dataset generation, Merkle proofs and configuration."""

__version__ = "0.1.0"

__all__ = [
    "cache_gen",
    "config",
    "dataset_gen",
    "epochs",
    "merkle",
]