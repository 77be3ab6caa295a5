"""
Execution configuration for effect application.

Controls how the pixel indices of a region are partitioned into disjoint
chunks and whether those chunks are fanned out across a thread pool.
"""

from dataclasses import dataclass

from colorfx.constants import DEFAULT_CHUNK_SIZE, MIN_CHUNK_SIZE


@dataclass(frozen=True)
class ExecutionConfig:
    """
    Configuration for chunked, optionally parallel effect execution.

    Kernels release the GIL, so chunks processed by different worker threads
    run concurrently. Chunks never overlap, so no two workers write the same
    pixel index.

    Attributes:
        parallel: Fan chunks out over a thread pool (False = process in order)
        max_workers: Thread pool size (None = ThreadPoolExecutor default)
        chunk_size: Number of pixel indices per chunk
    """

    parallel: bool = True
    max_workers: int | None = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self):
        """Validate configuration parameters."""
        if not isinstance(self.chunk_size, int) or isinstance(self.chunk_size, bool):
            raise TypeError(f"chunk_size must be int, got {type(self.chunk_size).__name__}")

        if self.chunk_size < MIN_CHUNK_SIZE:
            raise ValueError(f"chunk_size={self.chunk_size} must be >= {MIN_CHUNK_SIZE}")

        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers={self.max_workers} must be >= 1 or None")


DEFAULT_EXECUTION = ExecutionConfig()
SERIAL = ExecutionConfig(parallel=False)
