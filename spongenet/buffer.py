"""Shared byte strings that can discard bytes from the front without copying."""

from __future__ import annotations

from collections import deque


def _as_bytes(data) -> bytes:
    if isinstance(data, (int, str)):
        raise TypeError(f"expected a bytes-like object, got {type(data).__name__}")
    return bytes(data)


class Buffer:
    """A read-only byte string whose storage is shared between copies.

    Each Buffer keeps its own starting offset, so discarding a prefix of one
    copy never affects another copy of the same storage.
    """

    __slots__ = ("_storage", "_offset")

    def __init__(self, data=b""):
        if isinstance(data, Buffer):
            self._storage = data._storage
            self._offset = data._offset
        else:
            self._storage = _as_bytes(data)
            self._offset = 0

    def _view(self) -> memoryview:
        return memoryview(self._storage)[self._offset:]

    def __bytes__(self) -> bytes:
        return self._storage[self._offset:]

    def __len__(self) -> int:
        return len(self._storage) - self._offset

    def __getitem__(self, key):
        view = self._view()
        if isinstance(key, slice):
            return bytes(view[key])
        return view[key]

    def __eq__(self, other) -> bool:
        if isinstance(other, Buffer):
            return bytes(self) == bytes(other)
        if isinstance(other, (bytes, bytearray, memoryview)):
            return bytes(self) == bytes(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"Buffer({bytes(self)!r})"

    def at(self, n: int) -> int:
        """Return the byte at position ``n``."""
        if not 0 <= n < len(self):
            raise IndexError("Buffer.at")
        return self._storage[self._offset + n]

    def copy(self) -> bytes:
        """Return the contents as a new bytes object."""
        return bytes(self)

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes."""
        if n < 0 or n > len(self):
            raise IndexError("Buffer.remove_prefix")
        self._offset += n
        if self._offset == len(self._storage):
            self._storage = b""
            self._offset = 0


class BufferList:
    """A discontiguous byte string made of a queue of Buffers."""

    def __init__(self, data=None):
        self._buffers: deque[Buffer] = deque()
        if data is not None:
            self.append(data)

    def buffers(self) -> tuple[Buffer, ...]:
        """The underlying Buffers, in order."""
        return tuple(self._buffers)

    def append(self, other) -> None:
        """Append a BufferList, a Buffer or raw bytes."""
        if isinstance(other, BufferList):
            self._buffers.extend([Buffer(buf) for buf in other._buffers])
        else:
            self._buffers.append(Buffer(other))

    def to_buffer(self) -> Buffer:
        """Return the contents as a single Buffer; only valid if contiguous."""
        if not self._buffers:
            return Buffer()
        if len(self._buffers) == 1:
            return Buffer(self._buffers[0])
        raise ValueError(
            "BufferList: please use concatenate() to combine a multi-Buffer BufferList into one Buffer"
        )

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across the Buffers."""
        while n > 0:
            if not self._buffers:
                raise IndexError("BufferList.remove_prefix")
            front = self._buffers[0]
            if n < len(front):
                front.remove_prefix(n)
                n = 0
            else:
                n -= len(front)
                self._buffers.popleft()

    def __len__(self) -> int:
        return sum(len(buf) for buf in self._buffers)

    def concatenate(self) -> bytes:
        """Copy all the Buffers into one bytes object."""
        return b"".join(bytes(buf) for buf in self._buffers)

    __bytes__ = concatenate

    def __repr__(self) -> str:
        return f"BufferList({[bytes(buf) for buf in self._buffers]!r})"


class BufferViewList:
    """A temporary, non-owning view of a discontiguous byte string."""

    def __init__(self, data):
        if isinstance(data, BufferList):
            views = [buf._view() for buf in data.buffers()]
        elif isinstance(data, Buffer):
            views = [data._view()]
        else:
            if isinstance(data, (int, str)):
                raise TypeError(f"expected a bytes-like object, got {type(data).__name__}")
            views = [memoryview(data).cast("B")]
        self._views: deque[memoryview] = deque(views)

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes of the view."""
        while n > 0:
            if not self._views:
                raise IndexError("BufferViewList.remove_prefix")
            front = self._views[0]
            if n < len(front):
                self._views[0] = front[n:]
                n = 0
            else:
                n -= len(front)
                self._views.popleft()

    def __len__(self) -> int:
        return sum(len(view) for view in self._views)

    def as_iovecs(self) -> list[memoryview]:
        """The views as a list suitable for scatter/gather writes."""
        return list(self._views)