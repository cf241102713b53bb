"""Decide whether the DHCP CNI daemon must be deployed."""

from __future__ import annotations

import logging

from .additional_networks import _load_raw_cni_config
from .spec import (
    AdditionalNetworkDefinition,
    IPAMType,
    NetworkSpec,
    NetworkType,
    SimpleMacvlanConfig,
)

_log = logging.getLogger(__name__)


def use_dhcp_raw(addnet: AdditionalNetworkDefinition) -> bool:
    """Whether a raw additional network asks for DHCP IPAM."""
    try:
        raw_config = _load_raw_cni_config(addnet.raw_cni_config)
    except ValueError:
        _log.warning(
            "Not rendering DHCP daemonset, failed to parse RawCNIConfig: %r",
            addnet.raw_cni_config,
        )
        return False
    if not raw_config:
        return False

    ipam = raw_config.get("ipam")
    if ipam is None:
        return False
    if not isinstance(ipam, dict):
        _log.warning("IPAM element has data of type %s but wanted an object", type(ipam).__name__)
        return False
    if "type" not in ipam:
        return False
    ipam_type = ipam["type"]
    if not isinstance(ipam_type, str):
        _log.warning(
            "IPAM type element has data of type %s but wanted string", type(ipam_type).__name__
        )
        return False
    return ipam_type == "dhcp"


def use_dhcp_simple_macvlan(conf: SimpleMacvlanConfig | None) -> bool:
    """Whether a simple macvlan network uses DHCP, which is its default IPAM."""
    if conf is None or conf.ipam_config is None:
        return True
    return conf.ipam_config.type == IPAMType.DHCP


def use_dhcp(conf: NetworkSpec) -> bool:
    """Whether any additional network of the spec needs the DHCP daemon."""
    if conf.disable_multi_network:
        return False
    for addnet in conf.additional_networks:
        if addnet.type == NetworkType.RAW:
            if use_dhcp_raw(addnet):
                return True
        elif addnet.type == NetworkType.SIMPLE_MACVLAN:
            if use_dhcp_simple_macvlan(addnet.simple_macvlan_config):
                return True
    return False