"""Waiting for readiness on file descriptors and running callbacks."""

from __future__ import annotations

import enum
import select
from dataclasses import dataclass
from typing import Callable, Optional

from .file_descriptor import FileDescriptor

_POLL_ERRORS = select.POLLERR | select.POLLNVAL


class Direction(enum.IntEnum):
    """Whether a rule waits for its descriptor to be readable or writable."""

    In = select.POLLIN
    Out = select.POLLOUT


class EventLoopResult(enum.Enum):
    """The outcome of one call to EventLoop.wait_next_event."""

    Success = "success"
    Timeout = "timeout"
    Exit = "exit"


def _descriptor_of(source) -> FileDescriptor:
    """A handle sharing the descriptor of a FileDescriptor or an adapter."""
    if isinstance(source, FileDescriptor):
        return source.duplicate()
    return source._file_descriptor().duplicate()


@dataclass(eq=False)
class _Rule:
    fd: FileDescriptor
    direction: Direction
    callback: Callable[[], None]
    interest: Optional[Callable[[], bool]]
    cancel: Optional[Callable[[], None]]

    def service_count(self) -> int:
        if self.direction is Direction.In:
            return self.fd.read_count()
        return self.fd.write_count()

    def interested(self) -> bool:
        return self.interest is None or bool(self.interest())


class EventLoop:
    """Polls descriptors according to rules and runs the rules' callbacks.

    Every callback must read from or write to its descriptor, or its
    interest must become false; otherwise a busy wait is reported.
    """

    def __init__(self):
        self._rules: list[_Rule] = []

    def add_rule(self, fd, direction, callback, interest=None, cancel=None) -> None:
        """Call ``callback`` whenever ``fd`` is ready in ``direction``.

        ``interest`` decides before each poll whether the descriptor is
        polled at all; ``cancel`` runs when the rule is dropped (on EOF,
        closure or hangup).
        """
        self._rules.append(
            _Rule(
                fd=_descriptor_of(fd),
                direction=Direction(direction),
                callback=callback,
                interest=interest,
                cancel=cancel,
            )
        )

    def _drop(self, rule: _Rule) -> None:
        if rule.cancel is not None:
            rule.cancel()
        self._rules.remove(rule)

    def wait_next_event(self, timeout_ms: int) -> EventLoopResult:
        """Poll once and run the callbacks of the ready rules."""
        polled: list[tuple[_Rule, int]] = []
        something_to_poll = False
        for rule in list(self._rules):
            if rule.direction is Direction.In and rule.fd.eof():
                self._drop(rule)
                continue
            if rule.fd.closed():
                self._drop(rule)
                continue
            if rule.interested():
                polled.append((rule, int(rule.direction)))
                something_to_poll = True
            else:
                # still polled so that errors are noticed
                polled.append((rule, 0))

        if not something_to_poll:
            return EventLoopResult.Exit

        masks: dict[int, int] = {}
        for rule, events in polled:
            fd_num = rule.fd.fileno()
            masks[fd_num] = masks.get(fd_num, 0) | events
        poller = select.poll()
        for fd_num, mask in masks.items():
            poller.register(fd_num, mask)

        try:
            ready_events = dict(poller.poll(timeout_ms))
        except InterruptedError:
            return EventLoopResult.Exit
        if not ready_events:
            return EventLoopResult.Timeout

        for rule, events in polled:
            revents = ready_events.get(rule.fd.fileno(), 0) & (events | _POLL_ERRORS | select.POLLHUP)
            if revents & _POLL_ERRORS:
                raise RuntimeError("EventLoop: error on polled file descriptor")

            poll_ready = bool(revents & events)
            poll_hup = bool(revents & select.POLLHUP)
            if poll_hup and events and not poll_ready:
                # the only condition was a hangup: this descriptor is defunct
                self._drop(rule)
                continue

            if poll_ready:
                count_before = rule.service_count()
                rule.callback()
                if count_before == rule.service_count() and rule.interested():
                    raise RuntimeError(
                        "EventLoop: busy wait detected: callback did not read/write fd and is still interested"
                    )

        return EventLoopResult.Success