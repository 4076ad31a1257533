"""Building blocks for a user-space TCP/IP stack: buffers, wire formats, sockets, an event loop and segment adapters."""

__version__ = "0.1.0"