"""IP address, CIDR and duration helpers."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass, field
from datetime import timedelta

from .spec import ConfigError

_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)([^\d.]*)")
_MAX_NANOS = 2**63 - 1


def parse_cidr(text: str):
    """Parse "address/prefix" into the network it names."""
    _, sep, prefix = text.partition("/")
    if sep and prefix.isascii() and prefix.isdigit():
        try:
            return ipaddress.ip_network(text, strict=False)
        except ValueError:
            pass
    raise ConfigError(f"invalid CIDR address: {text}")


def parse_ip(text: str):
    """Parse a plain IP address; return None when it is not one."""
    if "%" in text or "/" in text:
        return None
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        return None


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "1m30s", "250ms" or "1.5h"."""
    body = text
    negative = False
    if body[:1] in ("-", "+"):
        negative = body[0] == "-"
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise ConfigError(f'time: invalid duration "{text}"')

    total = 0
    pos = 0
    while pos < len(body):
        match = _COMPONENT.match(body, pos)
        if match is None:
            raise ConfigError(f'time: invalid duration "{text}"')
        number, unit = match.groups()
        if not unit:
            raise ConfigError(f'time: missing unit in duration "{text}"')
        scale = _UNIT_NANOS.get(unit)
        if scale is None:
            raise ConfigError(f'time: unknown unit "{unit}" in duration "{text}"')
        whole, _, frac = number.partition(".")
        total += int(whole or "0") * scale
        if frac:
            total += int(frac) * scale // 10 ** len(frac)
        if total > _MAX_NANOS:
            raise ConfigError(f'time: invalid duration "{text}"')
        pos = match.end()

    duration = timedelta(microseconds=total // 1000)
    return -duration if negative else duration


def expand_net(network):
    """Return the network twice the size of the given one that contains it."""
    if network.prefixlen == 0:
        raise ConfigError(f"cannot expand network {network}")
    return network.supernet(prefixlen_diff=1)


def nets_overlap(a, b) -> bool:
    """Whether two networks share any address."""
    return a.version == b.version and a.overlaps(b)


def net_includes(outer, inner) -> bool:
    """Whether every address of inner lies within outer."""
    return outer.version == inner.version and inner.subnet_of(outer)


@dataclass
class IPPool:
    """A set of networks that must not overlap one another."""

    networks: list = field(default_factory=list)

    def add(self, network) -> None:
        """Add a network, refusing one that overlaps a network already held."""
        for existing in self.networks:
            if nets_overlap(existing, network):
                raise ConfigError(f"CIDRs {existing} and {network} overlap")
        self.networks.append(network)

    def __iter__(self):
        return iter(self.networks)

    def __len__(self) -> int:
        return len(self.networks)