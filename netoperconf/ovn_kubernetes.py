"""The ovn-kubernetes default network: validation, defaults and settings."""

from __future__ import annotations

from .spec import NetworkSpec, OVNKubernetesConfig

OVN_NB_PORT = "9641"
OVN_SB_PORT = "9642"

_GENEVE_OVERHEAD = 100
_MIN_MTU = 576
_MAX_MTU = 65536


def validate_ovn_kubernetes(conf: NetworkSpec) -> list[str]:
    """Check that the ovn-kubernetes configuration is basically sane."""
    out: list[str] = []

    if not conf.cluster_network:
        out.append("ClusterNetworks cannot be empty")
    if len(conf.service_network) != 1:
        out.append("ServiceNetwork must have exactly 1 entry")

    ovn = conf.default_network.ovn_kubernetes_config
    if ovn is not None and ovn.mtu is not None and not _MIN_MTU <= ovn.mtu <= _MAX_MTU:
        out.append(f"invalid MTU {ovn.mtu}")

    return out


def is_ovn_kubernetes_change_safe(prev: NetworkSpec, next: NetworkSpec) -> list[str]:
    """List the reasons the ovn-kubernetes change cannot be rolled out."""
    prev_conf = prev.default_network.ovn_kubernetes_config or OVNKubernetesConfig()
    next_conf = next.default_network.ovn_kubernetes_config or OVNKubernetesConfig()
    errs: list[str] = []

    if prev_conf.mtu != next_conf.mtu:
        errs.append("cannot change ovn-kubernetes MTU")
    if (
        prev_conf.hybrid_overlay_config is not None
        and prev_conf.hybrid_overlay_config != next_conf.hybrid_overlay_config
    ):
        errs.append("once set cannot change ovn-kubernetes Hybrid Overlay Config")
    return errs


def fill_ovn_kubernetes_defaults(
    conf: NetworkSpec, previous: NetworkSpec | None, host_mtu: int
) -> None:
    """Fill in ovn-kubernetes defaults; the MTU is carried over from previous."""
    if conf.default_network.ovn_kubernetes_config is None:
        conf.default_network.ovn_kubernetes_config = OVNKubernetesConfig()
    ovn = conf.default_network.ovn_kubernetes_config

    if ovn.mtu is None:
        mtu = host_mtu - _GENEVE_OVERHEAD
        if previous is not None:
            prev_ovn = previous.default_network.ovn_kubernetes_config
            if prev_ovn is not None and prev_ovn.mtu is not None:
                mtu = prev_ovn.mtu
        ovn.mtu = mtu


def network_plugin_name() -> str:
    """Name of the ovn-kubernetes network plugin."""
    return "ovn-kubernetes"


def ovn_cluster_cidrs(conf: NetworkSpec) -> str:
    """The cluster networks as ovn-kubernetes expects them: "cidr/hostPrefix,..."."""
    return ",".join(f"{entry.cidr}/{entry.host_prefix}" for entry in conf.cluster_network)


def ovn_service_cidrs(conf: NetworkSpec) -> str:
    """The service networks joined by commas."""
    return ",".join(conf.service_network)