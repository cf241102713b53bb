"""Discovery of the host's uplink MTU."""

from __future__ import annotations

import sys
from pathlib import Path

_ROUTE_TABLE = Path("/proc/net/route")
_SYS_NET = Path("/sys/class/net")
_MAX_MTU = 65536
_FALLBACK_MTU = 1500


def get_default_mtu() -> int:
    """Return the smallest MTU among the links carrying an IPv4 default route.

    Off Linux the conventional Ethernet MTU is returned. On Linux an
    OSError is raised when the MTU cannot be determined.
    """
    if not sys.platform.startswith("linux"):
        return _FALLBACK_MTU

    try:
        lines = _ROUTE_TABLE.read_text().splitlines()[1:]
    except OSError as exc:
        raise OSError(f"could not list routes: {exc}") from exc

    routes = [line.split() for line in lines if line.strip()]
    if not routes:
        raise OSError("got no routes")

    mtu = _MAX_MTU + 1
    for columns in routes:
        if len(columns) < 8:
            continue
        iface, destination, mask = columns[0], columns[1], columns[7]
        if destination != "00000000" or mask != "00000000":
            continue
        try:
            link_mtu = int((_SYS_NET / iface / "mtu").read_text().strip())
        except (OSError, ValueError) as exc:
            raise OSError(f"could not retrieve link {iface}: {exc}") from exc
        if 0 < link_mtu < mtu:
            mtu = link_mtu

    if mtu > _MAX_MTU:
        raise OSError("unable to determine MTU")
    return mtu