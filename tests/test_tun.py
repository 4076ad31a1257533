import os
import struct
from unittest import mock

import pytest

from spongenet import tun


def _open_with(fake_ioctl):
    r, w = os.pipe()
    os.close(w)
    patches = (
        mock.patch.object(tun.os, "open", return_value=r),
        mock.patch.object(tun.fcntl, "ioctl", side_effect=fake_ioctl),
    )
    return r, patches


def _split(request):
    name, flags = struct.unpack_from("16sH", request)
    return name, flags


def test_tun_device_is_configured_through_clone_device():
    calls = []
    r, (open_patch, ioctl_patch) = _open_with(lambda fd, req, arg: calls.append((fd, req, bytes(arg))))
    with open_patch as fake_open, ioctl_patch:
        device = tun.TunFD("tun144")
    try:
        fake_open.assert_called_once_with(tun.CLONEDEV, os.O_RDWR)
        assert device.fileno() == r
        assert len(calls) == 1
        fd, request, arg = calls[0]
        assert fd == r
        assert request == tun.TUNSETIFF
        name, flags = _split(arg)
        assert name == b"tun144".ljust(tun.IFNAMSIZ, b"\x00")
        assert flags == tun.IFF_TUN | tun.IFF_NO_PI
    finally:
        device.close()


def test_tap_device_flags():
    calls = []
    r, (open_patch, ioctl_patch) = _open_with(lambda fd, req, arg: calls.append((fd, bytes(arg))))
    with open_patch, ioctl_patch:
        device = tun.TapFD("tap10")
    try:
        assert device.fileno() == r
        fd, arg = calls[0]
        assert fd == r
        name, flags = _split(arg)
        assert name.rstrip(b"\x00") == b"tap10"
        assert flags == tun.IFF_TAP | tun.IFF_NO_PI
    finally:
        device.close()


def test_long_name_is_truncated_and_terminated():
    request = tun._ifreq("x" * 40, True)
    name, _ = _split(request)
    assert name == b"x" * (tun.IFNAMSIZ - 1) + b"\x00"
    assert len(request) == 40


def test_failed_ioctl_closes_descriptor():
    def refuse(fd, req, arg):
        raise PermissionError(1, "Operation not permitted")

    r, (open_patch, ioctl_patch) = _open_with(refuse)
    with open_patch, ioctl_patch:
        with pytest.raises(PermissionError):
            tun.TunTapFD("tun0", True)
    with pytest.raises(OSError):
        os.fstat(r)