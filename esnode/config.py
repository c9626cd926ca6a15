"""Configuration records for the storage node."""

from __future__ import annotations

from dataclasses import dataclass, field

ZERO_ADDRESS = "0x" + "00" * 20


@dataclass
class EsConfig:
    """Network settings; the L2 chain id identifies the network for p2p signatures."""

    l2_chain_id: int | None = None


@dataclass
class StorageConfig:
    """Layout of the local storage files and the contract they serve."""

    filenames: list[str] = field(default_factory=list)
    kv_size: int = 0
    chunk_size: int = 0
    kv_entries_per_shard: int = 0
    l1_contract: str = ZERO_ADDRESS
    miner: str = ZERO_ADDRESS


def prefix_env_var(prefix: str, suffix: str) -> str:
    """Join an environment variable prefix and suffix with an underscore."""
    return f"{prefix}_{suffix}"