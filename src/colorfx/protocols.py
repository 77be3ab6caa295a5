"""
Protocol definitions for buffer stages.

Effects and pipelines share this interface, so either can be passed where a
buffer transform is expected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from colorfx.buffer import PixelBuffer, Region
    from colorfx.config import ExecutionConfig


@runtime_checkable
class BufferStage(Protocol):
    """
    Protocol for anything that transforms a PixelBuffer (Effect, Pipeline).
    """

    def apply(
        self,
        buffer: PixelBuffer,
        region: Region | None = None,
        *,
        inplace: bool = False,
        config: ExecutionConfig | None = None,
    ) -> PixelBuffer:
        """
        Apply the stage to a buffer.

        Args:
            buffer: Pixels to process
            region: Sub-rectangle to process (default: whole buffer)
            inplace: If True, modify buffer in-place; if False, create copy
            config: Chunking and threading settings

        Returns:
            Processed PixelBuffer
        """
        ...

    def __call__(
        self,
        buffer: PixelBuffer,
        region: Region | None = None,
        *,
        inplace: bool = False,
        config: ExecutionConfig | None = None,
    ) -> PixelBuffer:
        """Apply the stage (callable interface)."""
        ...
