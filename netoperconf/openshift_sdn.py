"""The openshift-sdn default network: validation, defaults and ClusterNetwork."""

from __future__ import annotations

import yaml

from .kube_proxy import validate_kube_proxy
from .netutil import parse_cidr
from .spec import (
    ConfigError,
    NetworkSpec,
    NetworkType,
    OpenShiftSDNConfig,
    ProxyConfig,
    SDNMode,
)

_VXLAN_OVERHEAD = 50
_DEFAULT_VXLAN_PORT = 4789
_MIN_MTU = 576
_MAX_MTU = 65536

_PLUGIN_NAMES = {
    SDNMode.SUBNET.value: "redhat/openshift-ovs-subnet",
    SDNMode.MULTITENANT.value: "redhat/openshift-ovs-multitenant",
    SDNMode.NETWORK_POLICY.value: "redhat/openshift-ovs-networkpolicy",
}


def sdn_plugin_name(mode) -> str:
    """The openshift-sdn plugin implementing a mode; empty for an unknown mode."""
    return _PLUGIN_NAMES.get(str(mode), "")


def validate_openshift_sdn(conf: NetworkSpec) -> list[str]:
    """Check that the openshift-sdn configuration is basically sane."""
    out: list[str] = []

    if not conf.cluster_network:
        out.append("ClusterNetwork cannot be empty")
    if len(conf.service_network) != 1:
        out.append("ServiceNetwork must have exactly 1 entry")

    sdn = conf.default_network.openshift_sdn_config
    if sdn is not None:
        if sdn.mode and not sdn_plugin_name(sdn.mode):
            out.append(f'invalid openshift-sdn mode "{sdn.mode}"')

        if sdn.vxlan_port is not None and not 1 <= sdn.vxlan_port <= 65535:
            out.append(f"invalid VXLANPort {sdn.vxlan_port}")

        if sdn.mtu is not None and not _MIN_MTU <= sdn.mtu <= _MAX_MTU:
            out.append(f"invalid MTU {sdn.mtu}")

        # Unidling only works when the proxy mode is unset or iptables.
        unidling = sdn.enable_unidling is None or sdn.enable_unidling
        proxy = conf.kube_proxy_config
        arguments = (proxy.proxy_arguments if proxy is not None else None) or {}
        proxy_mode = arguments.get("proxy-mode") or []
        if unidling and proxy_mode and proxy_mode[0] != "iptables":
            out.append(
                'invalid proxy-mode - when unidling is enabled, proxy-mode must be "iptables"'
            )

    out.extend(validate_kube_proxy(conf))
    return out


def is_openshift_sdn_change_safe(prev: NetworkSpec, next: NetworkSpec) -> list[str]:
    """List the reasons the openshift-sdn change cannot be rolled out.

    Only useExternalOpenvswitch and enableUnidling may change.
    """
    prev_conf = prev.default_network.openshift_sdn_config or OpenShiftSDNConfig()
    next_conf = next.default_network.openshift_sdn_config or OpenShiftSDNConfig()
    errs: list[str] = []

    if prev_conf == next_conf:
        return errs

    if prev_conf.mode != next_conf.mode:
        errs.append("cannot change openshift-sdn mode")
    if prev_conf.vxlan_port != next_conf.vxlan_port:
        errs.append("cannot change openshift-sdn vxlanPort")
    if prev_conf.mtu != next_conf.mtu:
        errs.append("cannot change openshift-sdn mtu")
    return errs


def fill_openshift_sdn_defaults(
    conf: NetworkSpec, previous: NetworkSpec | None, host_mtu: int
) -> None:
    """Fill in openshift-sdn defaults; the MTU is carried over from previous."""
    if conf.deploy_kube_proxy is None:
        conf.deploy_kube_proxy = False

    if conf.kube_proxy_config is None:
        conf.kube_proxy_config = ProxyConfig()
    if not conf.kube_proxy_config.bind_address:
        conf.kube_proxy_config.bind_address = "0.0.0.0"
    if conf.kube_proxy_config.proxy_arguments is None:
        conf.kube_proxy_config.proxy_arguments = {}

    if conf.default_network.openshift_sdn_config is None:
        conf.default_network.openshift_sdn_config = OpenShiftSDNConfig()
    sdn = conf.default_network.openshift_sdn_config

    if sdn.vxlan_port is None:
        sdn.vxlan_port = _DEFAULT_VXLAN_PORT

    if sdn.enable_unidling is None:
        sdn.enable_unidling = True

    # The MTU can never change, so the previous value always wins.
    if sdn.mtu is None:
        mtu = host_mtu - _VXLAN_OVERHEAD
        if previous is not None and previous.default_network.type == NetworkType.OPENSHIFT_SDN:
            prev_sdn = previous.default_network.openshift_sdn_config
            if prev_sdn is not None and prev_sdn.mtu is not None:
                mtu = prev_sdn.mtu
        sdn.mtu = mtu

    if not sdn.mode:
        sdn.mode = SDNMode.NETWORK_POLICY


def cluster_network(conf: NetworkSpec) -> str:
    """Build the YAML of the ClusterNetwork object shared by controller and nodes."""
    sdn = conf.default_network.openshift_sdn_config or OpenShiftSDNConfig()

    networks = []
    for entry in conf.cluster_network:
        cidr = parse_cidr(entry.cidr)
        networks.append(
            {
                "CIDR": entry.cidr,
                "hostSubnetLength": cidr.max_prefixlen - entry.host_prefix,
            }
        )
    if not networks:
        raise ConfigError("ClusterNetwork cannot be empty")
    if not conf.service_network:
        raise ConfigError("ServiceNetwork must have exactly 1 entry")

    document = {
        "apiVersion": "network.openshift.io/v1",
        "kind": "ClusterNetwork",
        "metadata": {"creationTimestamp": None, "name": "default"},
        "network": networks[0]["CIDR"],
        "hostsubnetlength": networks[0]["hostSubnetLength"],
        "clusterNetworks": networks,
        "serviceNetwork": conf.service_network[0],
    }
    plugin = sdn_plugin_name(sdn.mode)
    if plugin:
        document["pluginName"] = plugin
    if sdn.vxlan_port is not None:
        document["vxlanPort"] = int(sdn.vxlan_port)
    if sdn.mtu is not None:
        document["mtu"] = int(sdn.mtu)

    return yaml.safe_dump(document, sort_keys=True, default_flow_style=False)