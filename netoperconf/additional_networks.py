"""Validation and IPAM configuration of additional networks."""

from __future__ import annotations

import json
from typing import Any

from .netutil import parse_cidr, parse_ip
from .spec import (
    AdditionalNetworkDefinition,
    ConfigError,
    IPAMConfig,
    IPAMType,
    MacvlanMode,
    StaticIPAMConfig,
)

_NAME_REQUIRED = "Additional Network Name cannot be nil"
_DHCP_IPAM_JSON = '{ "type": "dhcp" }'
_STATIC_MISSING = "static IPAM requires staticIPAMConfig"
_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _reject_constant(name: str):
    raise ValueError(f"invalid JSON value {name}")


def _load_raw_cni_config(text: str) -> dict | None:
    """Parse a raw CNI configuration, which must be a JSON object or null."""
    value = json.loads(text, parse_constant=_reject_constant)
    if value is not None and not isinstance(value, dict):
        raise ValueError("CNI configuration must be a JSON object")
    return value


def _dump(document: Any) -> str:
    text = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    for char, escape in _HTML_ESCAPES.items():
        text = text.replace(char, escape)
    return text


def _format_ip(text: str) -> str | None:
    address = parse_ip(text)
    if address is None:
        return None
    if address.version == 6 and address.ipv4_mapped is not None:
        return str(address.ipv4_mapped)
    return str(address)


def validate_raw(conf: AdditionalNetworkDefinition) -> list[str]:
    """Check the name and raw CNI configuration of a raw additional network."""
    out = []
    if not conf.name:
        out.append(_NAME_REQUIRED)
    try:
        _load_raw_cni_config(conf.raw_cni_config)
    except ValueError:
        out.append(f"Failed to Unmarshal RawCNIConfig: {conf.raw_cni_config!r}")
    return out


def get_static_ipam_config_json(conf: StaticIPAMConfig) -> str:
    """Build the CNI JSON of a static IPAM configuration."""
    addresses = []
    for address in conf.addresses:
        entry = {"address": address.address}
        gateway = _format_ip(address.gateway)
        if gateway is not None:
            entry["gateway"] = gateway
        addresses.append(entry)

    routes = []
    for route in conf.routes:
        try:
            destination = parse_cidr(route.destination)
        except ConfigError as exc:
            raise ConfigError(f"failed to parse macvlan route: {exc}") from exc
        entry = {"dst": str(destination)}
        gateway = _format_ip(route.gateway)
        if gateway is not None:
            entry["gw"] = gateway
        routes.append(entry)

    dns: dict[str, Any] = {}
    if conf.dns is not None:
        if conf.dns.nameservers:
            dns["nameservers"] = list(conf.dns.nameservers)
        if conf.dns.domain:
            dns["domain"] = conf.dns.domain
        if conf.dns.search:
            dns["search"] = list(conf.dns.search)

    document: dict[str, Any] = {"type": "static", "routes": routes or None}
    if addresses:
        document["addresses"] = addresses
    document["dns"] = dns
    return _dump(document)


def get_ipam_config_json(conf: IPAMConfig | None) -> str:
    """Build the CNI JSON of an IPAM configuration; DHCP when none is given."""
    if conf is None or conf.type == IPAMType.DHCP:
        return _DHCP_IPAM_JSON
    if conf.type == IPAMType.STATIC:
        if conf.static_ipam_config is None:
            raise ConfigError(_STATIC_MISSING)
        return get_static_ipam_config_json(conf.static_ipam_config)
    raise ConfigError("failed to render IPAM JSON")


def validate_static_ipam_config(conf: StaticIPAMConfig) -> list[str]:
    """Check the addresses, routes and gateways of a static IPAM configuration."""
    out = []
    for address in conf.addresses:
        try:
            parse_cidr(address.address)
        except ConfigError as exc:
            out.append(f"invalid static address: {exc}")
        if address.gateway and parse_ip(address.gateway) is None:
            out.append(f"invalid gateway: {address.gateway}")
    for route in conf.routes:
        try:
            parse_cidr(route.destination)
        except ConfigError as exc:
            out.append(f"invalid route destination: {exc}")
        if route.gateway and parse_ip(route.gateway) is None:
            out.append(f"invalid gateway: {route.gateway}")
    return out


def validate_ipam_config(conf: IPAMConfig) -> list[str]:
    """Check an IPAM configuration."""
    out = []
    if conf.type == IPAMType.STATIC:
        if conf.static_ipam_config is None:
            out.append(_STATIC_MISSING)
        else:
            out.extend(validate_static_ipam_config(conf.static_ipam_config))
    elif conf.type == IPAMType.DHCP:
        pass
    else:
        out.append(f"invalid IPAM type: {conf.type}")
    return out


def validate_simple_macvlan_config(conf: AdditionalNetworkDefinition) -> list[str]:
    """Check the name and macvlan settings of a simple macvlan network."""
    out = []
    if not conf.name:
        out.append(_NAME_REQUIRED)

    macvlan = conf.simple_macvlan_config
    if macvlan is not None:
        if macvlan.ipam_config is not None:
            out.extend(validate_ipam_config(macvlan.ipam_config))
        if macvlan.mode and macvlan.mode not in list(MacvlanMode):
            out.append(f"invalid Macvlan mode: {macvlan.mode}")
    return out