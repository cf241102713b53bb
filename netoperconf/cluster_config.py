"""Validation and merging of the cluster-wide network configuration."""

from __future__ import annotations

from .netutil import IPPool, parse_cidr
from .spec import (
    ClusterNetworkConfig,
    ClusterNetworkEntry,
    ConfigError,
    NetworkSpec,
    NetworkStatus,
    NetworkType,
)

_STATUS_TYPES = (NetworkType.OPENSHIFT_SDN, NetworkType.OVN_KUBERNETES, NetworkType.KURYR)


def validate_cluster_config(cluster_config: ClusterNetworkConfig) -> None:
    """Raise ConfigError unless the cluster configuration is valid."""
    pool = IPPool()

    if not cluster_config.service_network:
        raise ConfigError("spec.serviceNetwork must have at least 1 entry")
    for snet in cluster_config.service_network:
        try:
            cidr = parse_cidr(snet)
        except ConfigError as exc:
            raise ConfigError(f"could not parse spec.serviceNetwork {snet}: {exc}") from exc
        pool.add(cidr)

    for cnet in cluster_config.cluster_network:
        try:
            cidr = parse_cidr(cnet.cidr)
        except ConfigError:
            raise ConfigError(f"could not parse spec.clusterNetwork {cnet.cidr}") from None
        # A smaller prefix length is a larger block.
        if cnet.host_prefix < cidr.prefixlen:
            raise ConfigError(
                f"hostPrefix {cnet.host_prefix} is larger than its cidr {cnet.cidr}"
            )
        if cnet.host_prefix > 30:
            raise ConfigError(
                f"hostPrefix {cnet.host_prefix} is too small, must be a /30 or larger"
            )
        pool.add(cidr)

    if not cluster_config.cluster_network:
        raise ConfigError("spec.clusterNetwork must have at least 1 entry")

    if not cluster_config.network_type:
        raise ConfigError("spec.networkType is required")


def merge_cluster_config(oper_conf: NetworkSpec, cluster_conf: ClusterNetworkConfig) -> None:
    """Copy the cluster configuration into the operator configuration."""
    oper_conf.service_network = list(cluster_conf.service_network)
    oper_conf.cluster_network = [
        ClusterNetworkEntry(cidr=cnet.cidr, host_prefix=cnet.host_prefix)
        for cnet in cluster_conf.cluster_network
    ]
    oper_conf.default_network.type = cluster_conf.network_type


def status_from_operator_config(oper_conf: NetworkSpec) -> NetworkStatus | None:
    """Derive the cluster network status; None for a network type not understood."""
    net_type = oper_conf.default_network.type
    if net_type not in _STATUS_TYPES:
        return None

    status = NetworkStatus(
        cluster_network=[
            ClusterNetworkEntry(cidr=cnet.cidr, host_prefix=cnet.host_prefix)
            for cnet in oper_conf.cluster_network
        ],
        service_network=list(oper_conf.service_network),
        network_type=str(net_type),
    )

    if net_type == NetworkType.OPENSHIFT_SDN:
        provider = oper_conf.default_network.openshift_sdn_config
    elif net_type == NetworkType.OVN_KUBERNETES:
        provider = oper_conf.default_network.ovn_kubernetes_config
    else:
        return status

    if provider is None or provider.mtu is None:
        raise ConfigError(f"MTU of network type {net_type} is not set")
    status.cluster_network_mtu = int(provider.mtu)
    return status