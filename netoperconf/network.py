"""Canonicalization, validation, defaulting and change checks of a network spec."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .additional_networks import validate_raw, validate_simple_macvlan_config
from .kube_proxy import (
    fill_kube_proxy_defaults,
    is_kube_proxy_change_safe,
    validate_standalone_kube_proxy,
)
from .kuryr import fill_kuryr_defaults, is_kuryr_change_safe, validate_kuryr
from .mtu import get_default_mtu
from .netutil import parse_cidr
from .openshift_sdn import (
    fill_openshift_sdn_defaults,
    is_openshift_sdn_change_safe,
    validate_openshift_sdn,
)
from .ovn_kubernetes import (
    fill_ovn_kubernetes_defaults,
    is_ovn_kubernetes_change_safe,
    validate_ovn_kubernetes,
)
from .spec import (
    ConfigError,
    IPAMConfig,
    IPAMType,
    MacvlanMode,
    NetworkSpec,
    NetworkType,
    SDNMode,
    SimpleMacvlanConfig,
)

SYSTEM_CNI_CONF_DIR = "/etc/kubernetes/cni/net.d"
MULTUS_CNI_CONF_DIR = "/var/run/multus/cni/net.d"
CNI_BIN_DIR = "/var/lib/cni/bin"

_FALLBACK_MTU = 1500

_log = logging.getLogger(__name__)


def _canonical(value: str, members: Iterable):
    """Return the member whose name matches value ignoring case, else value."""
    lowered = str(value).lower()
    for member in members:
        if member.value.lower() == lowered:
            return member
    return value


def _raise_if_any(errs: list[str]) -> None:
    if errs:
        raise ConfigError(f"invalid configuration: [{' '.join(errs)}]", errs)


def canonicalize_ipam_config(conf: IPAMConfig) -> None:
    """Bring the IPAM type to its canonical spelling."""
    conf.type = _canonical(conf.type, IPAMType)


def canonicalize_simple_macvlan_config(conf: SimpleMacvlanConfig) -> None:
    """Bring the macvlan mode and IPAM type to their canonical spelling."""
    conf.mode = _canonical(conf.mode, MacvlanMode)
    if conf.ipam_config is not None:
        canonicalize_ipam_config(conf.ipam_config)


def canonicalize(conf: NetworkSpec) -> None:
    """Bring the spelling of the spec's enumerated values to canonical case."""
    default = conf.default_network
    default.type = _canonical(
        default.type, (NetworkType.OPENSHIFT_SDN, NetworkType.OVN_KUBERNETES)
    )

    if default.type == NetworkType.OPENSHIFT_SDN and default.openshift_sdn_config is not None:
        sdn = default.openshift_sdn_config
        sdn.mode = _canonical(sdn.mode, SDNMode)

    for network in conf.additional_networks:
        original_type = network.type
        network.type = _canonical(
            network.type, (NetworkType.RAW, NetworkType.SIMPLE_MACVLAN)
        )
        # Only a network already spelled canonically has its macvlan settings touched.
        if (
            original_type == NetworkType.SIMPLE_MACVLAN
            and network.simple_macvlan_config is not None
        ):
            canonicalize_simple_macvlan_config(network.simple_macvlan_config)


def validate(conf: NetworkSpec) -> None:
    """Raise ConfigError unless the configuration is reasonable.

    Call after canonicalize.
    """
    errs: list[str] = []
    errs.extend(validate_ip_pools(conf))
    errs.extend(validate_default_network(conf))
    errs.extend(validate_multus(conf))
    errs.extend(validate_standalone_kube_proxy(conf))
    _raise_if_any(errs)


def _host_mtu(log_result: bool) -> int:
    try:
        mtu = get_default_mtu()
    except OSError as exc:
        if log_result:
            _log.info("Failed MTU probe, falling back to %d: %s", _FALLBACK_MTU, exc)
        return _FALLBACK_MTU
    if not mtu:
        mtu = _FALLBACK_MTU
    if log_result:
        _log.info("Detected uplink MTU %d", mtu)
    return mtu


def fill_defaults(conf: NetworkSpec, previous: NetworkSpec | None) -> None:
    """Apply default values to the configuration in place.

    Defaults are carried forward from previous when it is given, so that
    running clusters are not disrupted by changed defaults.
    """
    host_mtu = _host_mtu(log_result=previous is None)
    if conf.disable_multi_network is None:
        conf.disable_multi_network = False
    fill_default_network_defaults(conf, previous, host_mtu)
    fill_kube_proxy_defaults(conf, previous)


def is_change_safe(prev: NetworkSpec | None, next: NetworkSpec) -> None:
    """Raise ConfigError if moving from prev to next is not allowed."""
    if prev is None or prev == next:
        return

    errs: list[str] = []
    if prev.cluster_network != next.cluster_network:
        errs.append("cannot change ClusterNetworks")
    if prev.service_network != next.service_network:
        errs.append("cannot change ServiceNetwork")
    errs.extend(is_default_network_change_safe(prev, next))
    if prev.disable_multi_network != next.disable_multi_network:
        errs.append("cannot change DisableMultiNetwork")
    errs.extend(is_kube_proxy_change_safe(prev, next))
    _raise_if_any(errs)


def validate_ip_pools(conf: NetworkSpec) -> list[str]:
    """Check that every cluster and service network is a valid CIDR."""
    errs: list[str] = []
    for idx, pool in enumerate(conf.cluster_network):
        try:
            parse_cidr(pool.cidr)
        except ConfigError as exc:
            errs.append(f'could not parse ClusterNetwork {idx} CIDR "{pool.cidr}": {exc}')
    for idx, pool in enumerate(conf.service_network):
        try:
            parse_cidr(pool)
        except ConfigError as exc:
            errs.append(f'could not parse ServiceNetwork {idx} CIDR "{pool}": {exc}')
    return errs


def validate_multus(conf: NetworkSpec) -> list[str]:
    """Refuse additional networks when Multus is not deployed."""
    if conf.disable_multi_network and conf.additional_networks:
        return ["additional networks cannot be specified without deploying Multus"]
    return []


def validate_default_network(conf: NetworkSpec) -> list[str]:
    """Validate whichever network is the default network."""
    net_type = conf.default_network.type
    if net_type == NetworkType.OPENSHIFT_SDN:
        return validate_openshift_sdn(conf)
    if net_type == NetworkType.OVN_KUBERNETES:
        return validate_ovn_kubernetes(conf)
    if net_type == NetworkType.KURYR:
        return validate_kuryr(conf)
    return []


def fill_default_network_defaults(
    conf: NetworkSpec, previous: NetworkSpec | None, host_mtu: int
) -> None:
    """Apply the defaults of the default network's provider."""
    net_type = conf.default_network.type
    if net_type == NetworkType.OPENSHIFT_SDN:
        fill_openshift_sdn_defaults(conf, previous, host_mtu)
    elif net_type == NetworkType.OVN_KUBERNETES:
        fill_ovn_kubernetes_defaults(conf, previous, host_mtu)
    elif net_type == NetworkType.KURYR:
        fill_kuryr_defaults(conf)


def is_default_network_change_safe(prev: NetworkSpec, next: NetworkSpec) -> list[str]:
    """List the reasons the default network change cannot be rolled out."""
    if prev.default_network.type != next.default_network.type:
        return ["cannot change default network type"]

    net_type = prev.default_network.type
    if net_type == NetworkType.OPENSHIFT_SDN:
        return is_openshift_sdn_change_safe(prev, next)
    if net_type == NetworkType.OVN_KUBERNETES:
        return is_ovn_kubernetes_change_safe(prev, next)
    if net_type == NetworkType.KURYR:
        return is_kuryr_change_safe(prev, next)
    return []


def validate_additional_networks(conf: NetworkSpec) -> list[str]:
    """Validate every additional network of the spec."""
    out: list[str] = []
    for network in conf.additional_networks:
        if network.type == NetworkType.RAW:
            out.extend(validate_raw(network))
        elif network.type == NetworkType.SIMPLE_MACVLAN:
            out.extend(validate_simple_macvlan_config(network))
        else:
            out.append(f"unknown or unsupported NetworkType: {network.type}")
    return out


def plugin_cni_conf_dir(conf: NetworkSpec) -> str:
    """Directory where plugins install their CNI configuration file."""
    if conf.disable_multi_network:
        return SYSTEM_CNI_CONF_DIR
    return MULTUS_CNI_CONF_DIR