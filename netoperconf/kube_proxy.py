"""Standalone kube-proxy: deployment decision, arguments, validation and defaults."""

from __future__ import annotations

from collections.abc import Mapping

from .netutil import parse_duration, parse_ip
from .spec import ConfigError, NetworkSpec, NetworkType, ProxyConfig

_SELF_PROXYING_TYPES = (
    NetworkType.OPENSHIFT_SDN,
    NetworkType.OVN_KUBERNETES,
    NetworkType.KURYR,
)
_FIXED_PORTS = {
    "metrics-port": "9101",
    "healthz-port": "10256",
}
# kube-proxy settings that may not change once deployed; none at present.
_IMMUTABLE_PROXY_SETTINGS: tuple[str, ...] = ()


def should_deploy_kube_proxy(conf: NetworkSpec) -> bool:
    """Whether the default network needs a separately deployed kube-proxy.

    openshift-sdn runs its own kube-proxy, and ovn-kubernetes and Kuryr
    handle services themselves; every other provider needs kube-proxy.
    """
    return conf.default_network.type not in _SELF_PROXYING_TYPES


def _merge_arguments(
    base: Mapping[str, list[str]], overlay: Mapping[str, list[str]] | None
) -> dict[str, list[str]]:
    merged = {key: list(values) for key, values in base.items()}
    if overlay:
        merged.update((key, list(values)) for key, values in overlay.items())
    return merged


def kube_proxy_arguments(
    plugin_defaults: Mapping[str, list[str]] | None,
    conf: NetworkSpec,
    plugin_overrides: Mapping[str, list[str]] | None,
) -> dict[str, list[str]]:
    """Merge the kube-proxy command-line arguments.

    Later sources win: the values derived from the spec, then the plugin
    defaults, then the user's proxy arguments, then the plugin overrides.
    """
    proxy = conf.kube_proxy_config
    if proxy is None:
        raise ConfigError("kube-proxy configuration is not set")

    args: dict[str, list[str]] = {"bind-address": [proxy.bind_address]}
    if len(conf.cluster_network) == 1:
        args["cluster-cidr"] = [conf.cluster_network[0].cidr]
    args["iptables-sync-period"] = [proxy.iptables_sync_period]

    args = _merge_arguments(args, plugin_defaults)
    args = _merge_arguments(args, proxy.proxy_arguments)
    return _merge_arguments(args, plugin_overrides)


def validate_standalone_kube_proxy(conf: NetworkSpec) -> list[str]:
    """Validate the kube-proxy settings if a standalone kube-proxy is deployed."""
    if should_deploy_kube_proxy(conf):
        return validate_kube_proxy(conf)
    return []


def validate_kube_proxy(conf: NetworkSpec) -> list[str]:
    """Check that the kube-proxy configuration is basically sane."""
    out: list[str] = []
    proxy = conf.kube_proxy_config
    if proxy is None:
        return out

    if proxy.iptables_sync_period:
        try:
            parse_duration(proxy.iptables_sync_period)
        except ConfigError as exc:
            out.append(f"IptablesSyncPeriod is not a valid duration ({exc})")

    if proxy.bind_address and parse_ip(proxy.bind_address) is None:
        out.append("BindAddress must be a valid IP address")

    # The ports may not be overridden.
    arguments = proxy.proxy_arguments or {}
    for name, port in _FIXED_PORTS.items():
        if name in arguments and list(arguments[name]) != [port]:
            out.append(f"kube-proxy --{name} must be {port}")

    return out


def fill_kube_proxy_defaults(conf: NetworkSpec, previous: NetworkSpec | None) -> None:
    """Insert kube-proxy defaults, but only when kube-proxy is deployed explicitly."""
    if conf.deploy_kube_proxy is None:
        conf.deploy_kube_proxy = should_deploy_kube_proxy(conf)

    if not conf.deploy_kube_proxy:
        return

    if conf.kube_proxy_config is None:
        conf.kube_proxy_config = ProxyConfig()

    if not conf.kube_proxy_config.bind_address:
        conf.kube_proxy_config.bind_address = "0.0.0.0"


def is_kube_proxy_change_safe(prev: NetworkSpec, next: NetworkSpec) -> list[str]:
    """Check whether a kube-proxy change may be rolled out.

    Only settings listed as immutable are refused; at present there are
    none, so every kube-proxy change is safe.
    """
    prev_proxy = prev.kube_proxy_config or ProxyConfig()
    next_proxy = next.kube_proxy_config or ProxyConfig()
    return [
        f"cannot change kube-proxy {name}"
        for name in _IMMUTABLE_PROXY_SETTINGS
        if getattr(prev_proxy, name) != getattr(next_proxy, name)
    ]