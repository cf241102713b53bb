"""Data model of the cluster network operator configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ConfigError(ValueError):
    """A network configuration that is malformed or not allowed."""

    def __init__(self, message: str, errors=()):
        super().__init__(message)
        self.errors = tuple(errors)


class _Name(str, Enum):
    """A well-known name that compares equal to its plain string."""

    def __str__(self) -> str:
        return self.value


class NetworkType(_Name):
    OPENSHIFT_SDN = "OpenShiftSDN"
    OVN_KUBERNETES = "OVNKubernetes"
    KURYR = "Kuryr"
    RAW = "Raw"
    SIMPLE_MACVLAN = "SimpleMacvlan"


class SDNMode(_Name):
    SUBNET = "Subnet"
    MULTITENANT = "Multitenant"
    NETWORK_POLICY = "NetworkPolicy"


class IPAMType(_Name):
    DHCP = "DHCP"
    STATIC = "Static"


class MacvlanMode(_Name):
    BRIDGE = "Bridge"
    PRIVATE = "Private"
    VEPA = "VEPA"
    PASSTHRU = "Passthru"


def _json(key, default=None, *, factory=None, nested=None, many=False):
    metadata = {"json": key, "nested": nested, "many": many}
    if factory is not None:
        return field(default_factory=factory, metadata=metadata)
    return field(default=default, metadata=metadata)


def _copy_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_copy_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _copy_plain(item) for key, item in value.items()}
    return value


class _JSONObject:
    """Conversion between dataclasses and their JSON-shaped dictionaries."""

    @classmethod
    def _from_json(cls, data):
        if not isinstance(data, dict):
            raise ConfigError(
                f"expected an object for {cls.__name__}, got {type(data).__name__}"
            )
        kwargs = {}
        for f in fields(cls):
            key = f.metadata["json"]
            value = data.get(key)
            if value is None:
                continue
            nested = f.metadata["nested"]
            if f.metadata["many"]:
                if not isinstance(value, list):
                    raise ConfigError(f"{cls.__name__}.{key} must be a list")
                value = [nested._from_json(item) for item in value]
            elif nested is not None:
                value = nested._from_json(value)
            else:
                value = _copy_plain(value)
            kwargs[f.name] = value
        return cls(**kwargs)

    def _to_json(self) -> dict:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or (isinstance(value, str) and value == ""):
                continue
            if isinstance(value, list) and not value:
                continue
            nested = f.metadata["nested"]
            if f.metadata["many"]:
                value = [item._to_json() for item in value]
            elif nested is not None:
                value = value._to_json()
            else:
                value = _copy_plain(value)
            out[f.metadata["json"]] = value
        return out


@dataclass
class ClusterNetworkEntry(_JSONObject):
    cidr: str = _json("cidr", "")
    host_prefix: int = _json("hostPrefix", 0)


@dataclass
class ProxyConfig(_JSONObject):
    iptables_sync_period: str = _json("iptablesSyncPeriod", "")
    bind_address: str = _json("bindAddress", "")
    proxy_arguments: dict[str, list[str]] | None = _json("proxyArguments")


@dataclass
class OpenShiftSDNConfig(_JSONObject):
    mode: str = _json("mode", "")
    vxlan_port: int | None = _json("vxlanPort")
    mtu: int | None = _json("mtu")
    use_external_openvswitch: bool | None = _json("useExternalOpenvswitch")
    enable_unidling: bool | None = _json("enableUnidling")


@dataclass
class HybridOverlayConfig(_JSONObject):
    hybrid_cluster_network: list[ClusterNetworkEntry] = _json(
        "hybridClusterNetwork", factory=list, nested=ClusterNetworkEntry, many=True
    )


@dataclass
class OVNKubernetesConfig(_JSONObject):
    mtu: int | None = _json("mtu")
    hybrid_overlay_config: HybridOverlayConfig | None = _json(
        "hybridOverlayConfig", nested=HybridOverlayConfig
    )


@dataclass
class KuryrConfig(_JSONObject):
    daemon_probes_port: int | None = _json("daemonProbesPort")
    controller_probes_port: int | None = _json("controllerProbesPort")
    openstack_service_network: str = _json("openStackServiceNetwork", "")


@dataclass
class StaticIPAMAddress(_JSONObject):
    address: str = _json("address", "")
    gateway: str = _json("gateway", "")


@dataclass
class StaticIPAMRoute(_JSONObject):
    destination: str = _json("destination", "")
    gateway: str = _json("gateway", "")


@dataclass
class StaticIPAMDNS(_JSONObject):
    nameservers: list[str] = _json("nameservers", factory=list)
    domain: str = _json("domain", "")
    search: list[str] = _json("search", factory=list)


@dataclass
class StaticIPAMConfig(_JSONObject):
    addresses: list[StaticIPAMAddress] = _json(
        "addresses", factory=list, nested=StaticIPAMAddress, many=True
    )
    routes: list[StaticIPAMRoute] = _json(
        "routes", factory=list, nested=StaticIPAMRoute, many=True
    )
    dns: StaticIPAMDNS | None = _json("dns", nested=StaticIPAMDNS)


@dataclass
class IPAMConfig(_JSONObject):
    type: str = _json("type", "")
    static_ipam_config: StaticIPAMConfig | None = _json(
        "staticIPAMConfig", nested=StaticIPAMConfig
    )


@dataclass
class SimpleMacvlanConfig(_JSONObject):
    master: str = _json("master", "")
    ipam_config: IPAMConfig | None = _json("ipamConfig", nested=IPAMConfig)
    mode: str = _json("mode", "")
    mtu: int = _json("mtu", 0)


@dataclass
class AdditionalNetworkDefinition(_JSONObject):
    type: str = _json("type", "")
    name: str = _json("name", "")
    namespace: str = _json("namespace", "")
    raw_cni_config: str = _json("rawCNIConfig", "")
    simple_macvlan_config: SimpleMacvlanConfig | None = _json(
        "simpleMacvlanConfig", nested=SimpleMacvlanConfig
    )


@dataclass
class DefaultNetworkDefinition(_JSONObject):
    type: str = _json("type", "")
    openshift_sdn_config: OpenShiftSDNConfig | None = _json(
        "openshiftSDNConfig", nested=OpenShiftSDNConfig
    )
    ovn_kubernetes_config: OVNKubernetesConfig | None = _json(
        "ovnKubernetesConfig", nested=OVNKubernetesConfig
    )
    kuryr_config: KuryrConfig | None = _json("kuryrConfig", nested=KuryrConfig)


@dataclass
class NetworkSpec(_JSONObject):
    """The operator's network configuration."""

    cluster_network: list[ClusterNetworkEntry] = _json(
        "clusterNetwork", factory=list, nested=ClusterNetworkEntry, many=True
    )
    service_network: list[str] = _json("serviceNetwork", factory=list)
    default_network: DefaultNetworkDefinition = _json(
        "defaultNetwork", factory=DefaultNetworkDefinition, nested=DefaultNetworkDefinition
    )
    additional_networks: list[AdditionalNetworkDefinition] = _json(
        "additionalNetworks", factory=list, nested=AdditionalNetworkDefinition, many=True
    )
    disable_multi_network: bool | None = _json("disableMultiNetwork")
    deploy_kube_proxy: bool | None = _json("deployKubeProxy")
    kube_proxy_config: ProxyConfig | None = _json("kubeProxyConfig", nested=ProxyConfig)

    @classmethod
    def from_dict(cls, data):
        """Build a spec from its JSON-shaped dictionary."""
        return cls._from_json(data)

    def to_dict(self) -> dict:
        """Return the JSON-shaped dictionary of this spec."""
        return self._to_json()


@dataclass
class ClusterNetworkConfig(_JSONObject):
    """The cluster-wide network configuration supplied by the installer."""

    cluster_network: list[ClusterNetworkEntry] = _json(
        "clusterNetwork", factory=list, nested=ClusterNetworkEntry, many=True
    )
    service_network: list[str] = _json("serviceNetwork", factory=list)
    network_type: str = _json("networkType", "")


@dataclass
class NetworkStatus(_JSONObject):
    """The cluster network status derived from the applied configuration."""

    cluster_network: list[ClusterNetworkEntry] = _json(
        "clusterNetwork", factory=list, nested=ClusterNetworkEntry, many=True
    )
    service_network: list[str] = _json("serviceNetwork", factory=list)
    network_type: str = _json("networkType", "")
    cluster_network_mtu: int = _json("clusterNetworkMTU", 0)