"""Full ethash dataset generation from a verification cache."""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

import numpy as np

from esnode.cache_gen import generate_dataset_item
from esnode.epochs import HASH_BYTES, HASH_WORDS

_log = logging.getLogger(__name__)


def generate_dataset(size: int, epoch: int, cache: Sequence[int]) -> np.ndarray:
    """Generate a dataset of ``size`` bytes from ``cache``.

    Each 64-byte node is derived with :func:`generate_dataset_item`. The work
    is split into contiguous batches that are processed on a pool of worker
    threads. The result is an array of unsigned 32-bit words holding the
    nodes in little-endian order.
    """
    if size <= 0 or size % HASH_BYTES:
        raise ValueError(f"dataset size must be a positive multiple of {HASH_BYTES}, got {size}")
    cache_arr = np.asarray(cache, dtype=np.uint32)
    if len(cache_arr) < HASH_WORDS:
        raise ValueError(f"cache must hold at least {HASH_WORDS} words")

    start = time.monotonic()
    items = size // HASH_BYTES
    dataset = np.zeros(size // 4, dtype=np.uint32)

    threads = max(1, os.cpu_count() or 1)
    batch = (size + HASH_BYTES * threads - 1) // (HASH_BYTES * threads)
    percent = max(1, items // 100)
    progress = 0
    progress_lock = threading.Lock()

    def work(worker_id: int) -> None:
        nonlocal progress
        first = worker_id * batch
        limit = min(first + batch, items)
        for index in range(first, limit):
            item = generate_dataset_item(cache_arr, index)
            words = np.frombuffer(item, dtype="<u4")
            dataset[index * HASH_WORDS:(index + 1) * HASH_WORDS] = words
            with progress_lock:
                progress += 1
                status = progress
            if status % percent == 0:
                _log.info(
                    "Generating DAG in progress epoch=%d percentage=%d elapsed=%.3fs",
                    epoch,
                    status * 100 // items,
                    time.monotonic() - start,
                )

    with ThreadPoolExecutor(max_workers=threads) as pool:
        for future in [pool.submit(work, worker_id) for worker_id in range(threads)]:
            future.result()

    elapsed = time.monotonic() - start
    level = logging.INFO if elapsed > 3 else logging.DEBUG
    _log.log(level, "Generated ethash dataset epoch=%d elapsed=%.3fs", epoch, elapsed)
    return dataset