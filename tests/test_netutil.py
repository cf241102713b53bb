import ipaddress
from datetime import timedelta

import pytest

from netoperconf.netutil import (
    IPPool,
    expand_net,
    net_includes,
    nets_overlap,
    parse_cidr,
    parse_duration,
    parse_ip,
)
from netoperconf.spec import ConfigError


def test_parse_cidr_masks_host_bits():
    assert parse_cidr("10.1.1.2/24") == ipaddress.ip_network("10.1.1.0/24")
    assert parse_cidr("172.30.0.0/16").prefixlen == 16


@pytest.mark.parametrize("text", ["AAA", "CCC", "123q", "1234fz", "1.2.3.4/99", "10.1.1.1"])
def test_parse_cidr_rejects(text):
    with pytest.raises(ConfigError, match=f"invalid CIDR address: {text}"):
        parse_cidr(text)


def test_parse_ip():
    assert parse_ip("10.1.1.1") == ipaddress.ip_address("10.1.1.1")
    assert parse_ip("1.2.3.4") == ipaddress.ip_address("1.2.3.4")
    assert parse_ip("BBB") is None
    assert parse_ip("invalid") is None
    assert parse_ip("10.1.1.0/24") is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1m", timedelta(minutes=1)),
        ("30s", timedelta(seconds=30)),
        ("42s", timedelta(seconds=42)),
        ("10m", timedelta(minutes=10)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5s", timedelta(seconds=1.5)),
        ("100ms", timedelta(milliseconds=100)),
        ("0", timedelta(0)),
        ("-2m", -timedelta(minutes=2)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


def test_parse_duration_invalid():
    with pytest.raises(ConfigError, match="invalid duration"):
        parse_duration("asdf")
    with pytest.raises(ConfigError, match="invalid duration"):
        parse_duration("")


def test_parse_duration_missing_unit():
    with pytest.raises(ConfigError, match="missing unit"):
        parse_duration("1")


def test_parse_duration_unknown_unit():
    with pytest.raises(ConfigError, match='unknown unit "x"'):
        parse_duration("1x")


def test_expand_net_doubles_and_contains():
    svc = ipaddress.ip_network("172.30.0.0/16")
    expanded = expand_net(svc)
    assert expanded == ipaddress.ip_network("172.30.0.0/15")
    assert net_includes(expanded, svc)


def test_expand_net_of_everything_fails():
    with pytest.raises(ConfigError):
        expand_net(ipaddress.ip_network("0.0.0.0/0"))


def test_nets_overlap():
    octavia = expand_net(ipaddress.ip_network("172.30.0.0/16"))
    assert nets_overlap(octavia, ipaddress.ip_network("172.31.0.0/16"))
    assert not nets_overlap(octavia, ipaddress.ip_network("10.128.0.0/15"))
    assert not nets_overlap(ipaddress.ip_network("::/0"), ipaddress.ip_network("0.0.0.0/0"))


def test_net_includes():
    svc = ipaddress.ip_network("172.30.0.0/16")
    assert net_includes(ipaddress.ip_network("172.30.0.0/15"), svc)
    assert not net_includes(ipaddress.ip_network("172.31.0.0/16"), svc)
    assert net_includes(svc, svc)


def test_pool_reports_overlap_existing_first():
    pool = IPPool()
    pool.add(parse_cidr("10.0.2.0/24"))
    with pytest.raises(ConfigError, match="CIDRs 10.0.2.0/24 and 10.0.0.0/22 overlap"):
        pool.add(parse_cidr("10.0.0.0/22"))
    assert len(pool) == 1


def test_pool_overlap_with_larger_existing():
    pool = IPPool()
    pool.add(parse_cidr("192.168.0.0/20"))
    with pytest.raises(ConfigError, match="CIDRs 192.168.0.0/20 and 192.168.2.0/23 overlap"):
        pool.add(parse_cidr("192.168.2.0/23"))


def test_pool_accepts_disjoint_networks():
    pool = IPPool()
    nets = [parse_cidr("192.168.0.0/20"), parse_cidr("10.0.0.0/22"), parse_cidr("10.2.0.0/22")]
    for net in nets:
        pool.add(net)
    assert list(pool) == nets