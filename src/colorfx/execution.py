"""
Chunked, optionally threaded execution over pixel indices.

The index array of a region is split into disjoint contiguous chunks. Chunks
either run in order on the calling thread or are fanned out across a
ThreadPoolExecutor; numba kernels release the GIL, so threads run in parallel.
Because chunks are disjoint, no two workers ever write the same pixel.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from colorfx.config import DEFAULT_EXECUTION, ExecutionConfig

logger = logging.getLogger(__name__)


def partition(count: int, chunk_size: int) -> list[slice]:
    """Split ``range(count)`` into consecutive slices of at most ``chunk_size``."""
    return [slice(start, min(start + chunk_size, count)) for start in range(0, count, chunk_size)]


def run_chunked(
    worker: Callable[[np.ndarray], None],
    indices: np.ndarray,
    config: ExecutionConfig | None = None,
) -> int:
    """
    Call ``worker`` once per disjoint chunk of ``indices``.

    Exceptions raised by a worker propagate to the caller after all submitted
    chunks finished.

    Args:
        worker: Callable receiving a 1-D chunk of pixel indices
        indices: All pixel indices to process
        config: Execution settings (default: DEFAULT_EXECUTION)

    Returns:
        Number of chunks processed
    """
    config = config or DEFAULT_EXECUTION
    chunks = [indices[s] for s in partition(len(indices), config.chunk_size)]
    if not chunks:
        return 0

    if not config.parallel or len(chunks) == 1:
        for chunk in chunks:
            worker(chunk)
        return len(chunks)

    with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
        futures = [pool.submit(worker, chunk) for chunk in chunks]
        for future in futures:
            future.result()

    logger.debug("[Execution] Processed %d chunks in parallel", len(chunks))
    return len(chunks)
