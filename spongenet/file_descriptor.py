"""Reference-counted file descriptors that track EOF and I/O counts."""

from __future__ import annotations

import operator
import os
import sys

from .buffer import BufferViewList

_MAX_READ = 1024 * 1024


def _view_list(data) -> BufferViewList:
    """A fresh BufferViewList over ``data``, never sharing the caller's."""
    if isinstance(data, BufferViewList):
        return BufferViewList(b"".join(data.as_iovecs()))
    return BufferViewList(data)


class _FDState:
    """The kernel descriptor shared by every duplicate of a FileDescriptor."""

    __slots__ = ("fd", "eof", "closed", "read_count", "write_count")

    def __init__(self, fd: int):
        if fd < 0:
            raise ValueError(f"invalid fd number:{fd}")
        self.fd = fd
        self.eof = False
        self.closed = False
        self.read_count = 0
        self.write_count = 0

    def close(self) -> None:
        os.close(self.fd)
        self.eof = True
        self.closed = True

    def __del__(self):
        if getattr(self, "closed", True):
            return
        try:
            self.close()
        except OSError as exc:
            print(f"Exception destructing FDWrapper: {exc}", file=sys.stderr)


class FileDescriptor:
    """A handle to a kernel file descriptor, closed when the last handle goes.

    Passing another FileDescriptor to the constructor shares its
    descriptor, as does duplicate().
    """

    def __init__(self, fd):
        if isinstance(fd, FileDescriptor):
            self._state = fd._state
        else:
            self._state = _FDState(operator.index(fd))

    def _register_read(self) -> None:
        self._state.read_count += 1

    def _register_write(self) -> None:
        self._state.write_count += 1

    def fileno(self) -> int:
        """The underlying descriptor number."""
        return self._state.fd

    def duplicate(self) -> FileDescriptor:
        """Another handle to the same descriptor."""
        return FileDescriptor(self)

    def read(self, limit: int | None = None) -> bytes:
        """Read up to ``limit`` bytes (at most one mebibyte at a time)."""
        size = _MAX_READ if limit is None else min(_MAX_READ, limit)
        data = os.read(self.fileno(), size)
        if (limit is None or limit > 0) and not data:
            self._state.eof = True
        if len(data) > size:
            raise RuntimeError("read() read more than requested")
        self._register_read()
        return data

    def write(self, data, write_all: bool = True) -> int:
        """Write bytes, a Buffer or a BufferList; return the count written.

        With ``write_all`` the call repeats until everything is written.
        """
        views = _view_list(data)
        total = 0
        while True:
            written = os.writev(self.fileno(), views.as_iovecs())
            if written == 0 and len(views) != 0:
                raise RuntimeError("write returned 0 given non-empty input buffer")
            if written > len(views):
                raise RuntimeError("write wrote more than length of input buffer")
            self._register_write()
            views.remove_prefix(written)
            total += written
            if not (write_all and len(views)):
                return total

    def close(self) -> None:
        """Close the underlying descriptor."""
        self._state.close()

    def set_blocking(self, blocking: bool) -> None:
        """Switch the descriptor between blocking and non-blocking mode."""
        os.set_blocking(self.fileno(), blocking)

    def eof(self) -> bool:
        """Whether a read has reached end of file."""
        return self._state.eof

    def closed(self) -> bool:
        """Whether the descriptor has been closed."""
        return self._state.closed

    def read_count(self) -> int:
        """Number of reads performed."""
        return self._state.read_count

    def write_count(self) -> int:
        """Number of writes performed."""
        return self._state.write_count

    def __enter__(self) -> FileDescriptor:
        return self

    def __exit__(self, *args) -> None:
        if not self.closed():
            self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fd={self._state.fd}, closed={self._state.closed})"