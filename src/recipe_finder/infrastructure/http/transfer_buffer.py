"""
Adaptive Transfer Buffer - growable byte buffer for streamed responses.

Response sizes are unknown until the transfer ends, so the buffer starts at
a capacity sized to the host and doubles on demand. Growth is refused when
the response would exceed a hard maximum or when the host does not report
enough free memory for the new capacity.

Invariants:
    size < capacity           (one byte is always reserved for the terminator)
    capacity never shrinks
    capacity <= MAX_TRANSFER_SIZE
    data[size] == 0 after every accepted write

Usage:
    buffer = TransferBuffer(label="AllRecipes")
    async for chunk in response.aiter_bytes():
        buffer.write(chunk)
    html = buffer.text()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from recipe_finder.core.exceptions import (
    ErrorContext,
    InsufficientMemoryError,
    ResponseTooLargeError,
)
from recipe_finder.core.memory import KIB, MIB, detect_initial_capacity, free_memory

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

MAX_TRANSFER_SIZE = 32 * MIB


class TransferBuffer:
    """
    Byte buffer that grows by doubling while a response streams in.

    Args:
        initial_capacity: Starting capacity (default: per-process memory tier)
        max_size: Hard maximum capacity in bytes
        label: Diagnostic label (the source being searched) used in logs
        free_memory_reader: Callable returning currently free host memory in bytes
    """

    __slots__ = ("_data", "_size", "_max_size", "_free_memory", "label", "growth_count")

    def __init__(
        self,
        initial_capacity: int | None = None,
        *,
        max_size: int = MAX_TRANSFER_SIZE,
        label: str | None = None,
        free_memory_reader: Callable[[], int] = free_memory,
    ) -> None:
        capacity = initial_capacity if initial_capacity is not None else detect_initial_capacity()
        if capacity < 1:
            raise ValueError(f"initial_capacity must be positive, got {capacity}")
        self._max_size = max_size
        self._data = bytearray(min(capacity, max_size))
        self._size = 0
        self._free_memory = free_memory_reader
        self.label = label
        self.growth_count = 0

    @property
    def size(self) -> int:
        """Bytes written so far."""
        return self._size

    @property
    def capacity(self) -> int:
        """Bytes allocated."""
        return len(self._data)

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        return self._size

    def write(self, chunk: bytes | bytearray | memoryview) -> int:
        """
        Append a chunk, growing the buffer if needed.

        Returns:
            Number of bytes accepted (always len(chunk) on success)

        Raises:
            ResponseTooLargeError: The total would exceed the hard maximum
            InsufficientMemoryError: The host cannot spare the grown capacity

        A rejected write leaves the buffer untouched.
        """
        chunk_len = len(chunk)
        required = self._size + chunk_len + 1

        if required > self._max_size:
            logger.warning(
                f"[{self.label or 'unknown'}] Exceeded maximum allowed download size "
                f"({self._max_size // MIB} MB)"
            )
            raise ResponseTooLargeError(
                required,
                self._max_size,
                context=ErrorContext(source_name=self.label),
            )

        if required > self.capacity:
            self._grow(required)

        end = self._size + chunk_len
        self._data[self._size:end] = chunk
        self._size = end
        self._data[end] = 0
        return chunk_len

    def _grow(self, required: int) -> None:
        old_capacity = self.capacity
        new_capacity = old_capacity
        while new_capacity < required:
            if new_capacity > self._max_size // 2:
                new_capacity = self._max_size
                break
            new_capacity *= 2

        available = self._free_memory()
        if available < new_capacity:
            logger.warning(
                f"[{self.label or 'unknown'}] Insufficient free memory to expand buffer "
                f"to {new_capacity} bytes (free memory: {available} bytes)"
            )
            raise InsufficientMemoryError(
                new_capacity,
                available,
                context=ErrorContext(source_name=self.label),
            )

        self._data.extend(bytes(new_capacity - old_capacity))
        self.growth_count += 1
        logger.info(
            f"Transfer buffer resized for {self.label or '(unknown)'}: "
            f"{old_capacity / KIB:.1f} KB -> {new_capacity / KIB:.1f} KB "
            f"(needed {required / KIB:.1f} KB, free memory {available / MIB:.2f} MB)"
        )

    def getvalue(self) -> bytes:
        """Return a copy of the bytes written so far (without the terminator)."""
        return bytes(self._data[: self._size])

    def terminated(self) -> bytes:
        """Return the written bytes followed by the zero terminator."""
        return bytes(self._data[: self._size + 1])

    def text(self, encoding: str = "utf-8", errors: str = "replace") -> str:
        """Decode the written bytes as text."""
        return self._data[: self._size].decode(encoding, errors)

    def __repr__(self) -> str:
        return f"TransferBuffer(size={self._size}, capacity={self.capacity}, label={self.label!r})"
