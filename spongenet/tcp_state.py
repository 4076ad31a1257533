"""Summaries of a TCP connection's state, compared with the official states."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class State(enum.Enum):
    """The official state names of the TCP specification."""

    LISTEN = 0
    SYN_RCVD = 1
    SYN_SENT = 2
    ESTABLISHED = 3
    CLOSE_WAIT = 4
    LAST_ACK = 5
    FIN_WAIT_1 = 6
    FIN_WAIT_2 = 7
    CLOSING = 8
    TIME_WAIT = 9
    CLOSED = 10
    RESET = 11


class ReceiverSummary(str, enum.Enum):
    """What a receiver's state can be summarised as."""

    ERROR = "error (connection was reset)"
    LISTEN = "waiting for SYN: ackno is empty"
    SYN_RECV = "SYN received (ackno exists), and input to stream hasn't ended"
    FIN_RECV = "input to stream has ended"


class SenderSummary(str, enum.Enum):
    """What a sender's state can be summarised as."""

    ERROR = "error (connection was reset)"
    CLOSED = "waiting for stream to begin (no SYN sent)"
    SYN_SENT = "stream started but nothing acknowledged"
    SYN_ACKED = "stream ongoing"
    FIN_SENT = "stream finished (FIN sent) but not fully acknowledged"
    FIN_ACKED = "stream finished and fully acknowledged"


@dataclass(frozen=True, eq=False)
class TCPState:
    """A connection's sender and receiver summaries plus its active and linger bits.

    An inactive connection never lingers.
    """

    sender: SenderSummary
    receiver: ReceiverSummary
    active: bool = True
    linger_after_streams_finish: bool = True

    def __post_init__(self):
        object.__setattr__(self, "sender", SenderSummary(self.sender))
        object.__setattr__(self, "receiver", ReceiverSummary(self.receiver))
        if not self.active:
            object.__setattr__(self, "linger_after_streams_finish", False)

    @classmethod
    def from_state(cls, state: State) -> TCPState:
        """The summary that corresponds to an official state name."""
        receiver, sender, active, linger = _OFFICIAL[State(state)]
        return cls(sender, receiver, active, linger)

    def name(self) -> str:
        """The state as one line of text."""
        return (
            f"sender=`{self.sender.value}`, receiver=`{self.receiver.value}`, "
            f"active={int(self.active)}, "
            f"linger_after_streams_finish={int(self.linger_after_streams_finish)}"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, TCPState):
            return NotImplemented
        return (
            self.active == other.active
            and self.linger_after_streams_finish == other.linger_after_streams_finish
            and self.sender == other.sender
            and self.receiver == other.receiver
        )

    def __hash__(self) -> int:
        return hash((self.sender, self.receiver, self.active, self.linger_after_streams_finish))

    def __str__(self) -> str:
        return self.name()


_OFFICIAL = {
    State.LISTEN: (ReceiverSummary.LISTEN, SenderSummary.CLOSED, True, True),
    State.SYN_RCVD: (ReceiverSummary.SYN_RECV, SenderSummary.SYN_SENT, True, True),
    State.SYN_SENT: (ReceiverSummary.LISTEN, SenderSummary.SYN_SENT, True, True),
    State.ESTABLISHED: (ReceiverSummary.SYN_RECV, SenderSummary.SYN_ACKED, True, True),
    State.CLOSE_WAIT: (ReceiverSummary.FIN_RECV, SenderSummary.SYN_ACKED, True, False),
    State.LAST_ACK: (ReceiverSummary.FIN_RECV, SenderSummary.FIN_SENT, True, False),
    State.CLOSING: (ReceiverSummary.FIN_RECV, SenderSummary.FIN_SENT, True, True),
    State.FIN_WAIT_1: (ReceiverSummary.SYN_RECV, SenderSummary.FIN_SENT, True, True),
    State.FIN_WAIT_2: (ReceiverSummary.SYN_RECV, SenderSummary.FIN_ACKED, True, True),
    State.TIME_WAIT: (ReceiverSummary.FIN_RECV, SenderSummary.FIN_ACKED, True, True),
    State.RESET: (ReceiverSummary.ERROR, SenderSummary.ERROR, False, False),
    State.CLOSED: (ReceiverSummary.FIN_RECV, SenderSummary.FIN_ACKED, False, False),
}