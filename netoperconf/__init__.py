"""Canonicalisation, validation, defaulting and change-safety checks for cluster network configuration."""

__version__ = "0.1.0"

__all__ = [
    "additional_networks",
    "cluster_config",
    "dhcp",
    "kube_proxy",
    "kuryr",
    "mtu",
    "netutil",
    "network",
    "openshift_sdn",
    "ovn_kubernetes",
    "spec",
]