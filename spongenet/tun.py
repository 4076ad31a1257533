"""File descriptors for Linux TUN and TAP devices."""

from __future__ import annotations

import fcntl
import os
import struct

from .file_descriptor import FileDescriptor

CLONEDEV = "/dev/net/tun"
IFNAMSIZ = 16
IFF_TUN = 0x0001
IFF_TAP = 0x0002
IFF_NO_PI = 0x1000
TUNSETIFF = 0x400454CA

_IFREQ = struct.Struct("16sH22x")


def _ifreq(devname: str, is_tun: bool) -> bytes:
    """The interface request naming the device and selecting TUN or TAP."""
    name = devname.encode()[: IFNAMSIZ - 1]
    flags = (IFF_TUN if is_tun else IFF_TAP) | IFF_NO_PI
    return _IFREQ.pack(name, flags)


class TunTapFD(FileDescriptor):
    """A descriptor for an existing persistent TUN or TAP device.

    A TUN device carries IP datagrams, a TAP device Ethernet frames;
    neither carries packet information.
    """

    def __init__(self, devname: str, is_tun: bool):
        fd = os.open(CLONEDEV, os.O_RDWR)
        try:
            fcntl.ioctl(fd, TUNSETIFF, _ifreq(devname, is_tun))
        except BaseException:
            os.close(fd)
            raise
        super().__init__(fd)


class TunFD(TunTapFD):
    """A descriptor for an existing persistent TUN device."""

    def __init__(self, devname: str):
        super().__init__(devname, True)


class TapFD(TunTapFD):
    """A descriptor for an existing persistent TAP device."""

    def __init__(self, devname: str):
        super().__init__(devname, False)