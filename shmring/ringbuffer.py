"""Fixed-capacity FIFO ring buffer kept in named shared memory.

The shared block starts with a header of four unsigned 64-bit words
(head, tail, capacity, element size) followed by ``capacity`` packed
elements. One slot is always left free so that a full buffer can be told
apart from an empty one.
"""

from __future__ import annotations

import struct
from multiprocessing import shared_memory
from typing import Any, Optional

_HEADER = struct.Struct("=QQQQ")
_WORD = struct.Struct("=Q")

HEADER_SIZE = _HEADER.size

_HEAD_OFFSET = 0
_TAIL_OFFSET = 8
_CAPACITY_OFFSET = 16
_ELEMENT_SIZE_OFFSET = 24


class RingBufferError(Exception):
    """Raised when the shared ring buffer cannot be created, opened or used."""


class BufferFullError(RingBufferError):
    """Raised when an item is enqueued into a full buffer."""


class ElementSizeMismatchError(RingBufferError):
    """Raised when the stored element size differs from the requested format."""


def _element_struct(fmt: str) -> struct.Struct:
    try:
        element = struct.Struct(fmt)
    except struct.error as exc:
        raise RingBufferError(f"invalid element format {fmt!r}") from exc
    if element.size == 0:
        raise RingBufferError(f"element format {fmt!r} has zero size")
    return element


class SharedRingBuffer:
    """A single-producer, single-consumer queue in a named shared memory block."""

    def __init__(
        self,
        shm: shared_memory.SharedMemory,
        element: struct.Struct,
        owner: bool = False,
    ) -> None:
        self._shm = shm
        self._element = element
        self._single = len(element.unpack(bytes(element.size))) == 1
        self._owner = owner
        self._attached = True
        self._unlinked = False

    @classmethod
    def create(cls, name: Optional[str], size: int, fmt: str = "i") -> "SharedRingBuffer":
        """Create a new shared block of ``size`` bytes holding elements of ``fmt``."""
        element = _element_struct(fmt)
        capacity = (size - HEADER_SIZE) // element.size if size > HEADER_SIZE else 0
        if capacity <= 0:
            raise RingBufferError("shared memory too small for any elements")
        try:
            shm = shared_memory.SharedMemory(name=name, create=True, size=size)
        except (OSError, ValueError) as exc:
            raise RingBufferError(f"could not create shared memory {name!r}") from exc
        _HEADER.pack_into(shm.buf, 0, 0, 0, capacity, element.size)
        return cls(shm, element, owner=True)

    @classmethod
    def open(cls, name: str, fmt: str = "i") -> "SharedRingBuffer":
        """Attach to an existing shared block created with the same element format."""
        element = _element_struct(fmt)
        try:
            shm = shared_memory.SharedMemory(name=name)
        except (OSError, ValueError) as exc:
            raise RingBufferError(f"failed to open shared memory {name!r}") from exc
        if shm.size < HEADER_SIZE:
            shm.close()
            raise RingBufferError(f"shared memory {name!r} is too small for a header")
        stored_size = _WORD.unpack_from(shm.buf, _ELEMENT_SIZE_OFFSET)[0]
        if stored_size != element.size:
            shm.close()
            raise ElementSizeMismatchError(
                f"element size mismatch: stored {stored_size}, requested {element.size}"
            )
        capacity = _WORD.unpack_from(shm.buf, _CAPACITY_OFFSET)[0]
        if HEADER_SIZE + capacity * element.size > shm.size:
            shm.close()
            raise RingBufferError(f"shared memory {name!r} has an inconsistent header")
        return cls(shm, element, owner=False)

    @property
    def _buf(self) -> memoryview:
        if not self._attached:
            raise RingBufferError("shared memory is not attached")
        return self._shm.buf

    def _load(self, offset: int) -> int:
        return _WORD.unpack_from(self._buf, offset)[0]

    def _store(self, offset: int, value: int) -> None:
        _WORD.pack_into(self._buf, offset, value)

    @property
    def name(self) -> str:
        """Name of the shared memory block."""
        return self._shm.name

    @property
    def closed(self) -> bool:
        """Whether this handle has been detached from the shared block."""
        return not self._attached

    @property
    def head(self) -> int:
        """Index of the slot the next item is written to."""
        return self._load(_HEAD_OFFSET)

    @property
    def tail(self) -> int:
        """Index of the slot the next item is read from."""
        return self._load(_TAIL_OFFSET)

    @property
    def capacity(self) -> int:
        """Number of slots; at most ``capacity - 1`` items are held at once."""
        return self._load(_CAPACITY_OFFSET)

    def __len__(self) -> int:
        capacity = self.capacity
        if capacity == 0:
            return 0
        return (self.head - self.tail) % capacity

    def _check_header(self) -> int:
        if self._load(_ELEMENT_SIZE_OFFSET) != self._element.size:
            raise ElementSizeMismatchError("element size mismatch in shared memory")
        capacity = self.capacity
        if capacity == 0:
            raise RingBufferError("buffer capacity is zero")
        return capacity

    def enqueue(self, item: Any) -> None:
        """Append ``item``; raise BufferFullError when no slot is free."""
        capacity = self._check_header()
        head = self._load(_HEAD_OFFSET)
        tail = self._load(_TAIL_OFFSET)
        next_head = (head + 1) % capacity
        if next_head == tail:
            raise BufferFullError("buffer is full")
        offset = HEADER_SIZE + head * self._element.size
        if self._single:
            self._element.pack_into(self._buf, offset, item)
        else:
            self._element.pack_into(self._buf, offset, *item)
        self._store(_HEAD_OFFSET, next_head)

    def read(self) -> Any:
        """Remove and return the oldest item, or None when the buffer is empty."""
        capacity = self._check_header()
        head = self._load(_HEAD_OFFSET)
        tail = self._load(_TAIL_OFFSET)
        if head == tail:
            return None
        offset = HEADER_SIZE + tail * self._element.size
        values = self._element.unpack_from(self._buf, offset)
        self._store(_TAIL_OFFSET, (tail + 1) % capacity)
        return values[0] if self._single else values

    def close(self) -> None:
        """Detach from the shared block; safe to call more than once."""
        if self._attached:
            self._shm.close()
            self._attached = False

    def unlink(self) -> None:
        """Remove the shared block's name so that it is freed once all handles close."""
        if self._unlinked:
            return
        try:
            self._shm.unlink()
        except FileNotFoundError as exc:
            raise RingBufferError(f"shared memory {self.name!r} no longer exists") from exc
        self._unlinked = True

    def __enter__(self) -> "SharedRingBuffer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
        if self._owner:
            try:
                self.unlink()
            except RingBufferError:
                pass