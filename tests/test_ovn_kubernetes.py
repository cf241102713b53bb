from netoperconf.ovn_kubernetes import (
    OVN_NB_PORT,
    OVN_SB_PORT,
    fill_ovn_kubernetes_defaults,
    is_ovn_kubernetes_change_safe,
    network_plugin_name,
    ovn_cluster_cidrs,
    ovn_service_cidrs,
    validate_ovn_kubernetes,
)
from netoperconf.spec import (
    ClusterNetworkEntry,
    DefaultNetworkDefinition,
    HybridOverlayConfig,
    NetworkSpec,
    NetworkType,
    OVNKubernetesConfig,
)


def _ovn_spec():
    return NetworkSpec(
        service_network=["172.30.0.0/16"],
        cluster_network=[
            ClusterNetworkEntry(cidr="10.128.0.0/15", host_prefix=23),
            ClusterNetworkEntry(cidr="10.0.0.0/14", host_prefix=24),
        ],
        default_network=DefaultNetworkDefinition(
            type=NetworkType.OVN_KUBERNETES,
            ovn_kubernetes_config=OVNKubernetesConfig(),
        ),
    )


def test_fill_ovn_kubernetes_defaults():
    conf = _ovn_spec()
    conf.default_network.ovn_kubernetes_config = None

    fill_ovn_kubernetes_defaults(conf, None, 9000)

    assert conf == NetworkSpec(
        service_network=["172.30.0.0/16"],
        cluster_network=[
            ClusterNetworkEntry(cidr="10.128.0.0/15", host_prefix=23),
            ClusterNetworkEntry(cidr="10.0.0.0/14", host_prefix=24),
        ],
        default_network=DefaultNetworkDefinition(
            type=NetworkType.OVN_KUBERNETES,
            ovn_kubernetes_config=OVNKubernetesConfig(mtu=8900),
        ),
    )


def test_fill_ovn_kubernetes_defaults_prefers_previous_mtu():
    previous = _ovn_spec()
    previous.default_network.ovn_kubernetes_config.mtu = 1400
    conf = _ovn_spec()
    fill_ovn_kubernetes_defaults(conf, previous, 9000)
    assert conf.default_network.ovn_kubernetes_config.mtu == 1400


def test_fill_ovn_kubernetes_defaults_keeps_explicit_mtu():
    conf = _ovn_spec()
    conf.default_network.ovn_kubernetes_config.mtu = 1300
    fill_ovn_kubernetes_defaults(conf, None, 9000)
    assert conf.default_network.ovn_kubernetes_config.mtu == 1300


def test_validate_ovn_kubernetes():
    conf = _ovn_spec()
    assert validate_ovn_kubernetes(conf) == []
    fill_ovn_kubernetes_defaults(conf, None, 1500)
    assert validate_ovn_kubernetes(conf) == []

    conf.default_network.ovn_kubernetes_config.mtu = 70000
    assert "invalid MTU 70000" in validate_ovn_kubernetes(conf)

    conf.cluster_network = []
    assert "ClusterNetworks cannot be empty" in validate_ovn_kubernetes(conf)


def test_validate_ovn_kubernetes_service_network_count():
    conf = _ovn_spec()
    conf.service_network = ["172.30.0.0/16", "172.31.0.0/16"]
    assert validate_ovn_kubernetes(conf) == ["ServiceNetwork must have exactly 1 entry"]


def test_ovn_kubernetes_is_safe():
    prev = _ovn_spec()
    fill_ovn_kubernetes_defaults(prev, None, 1500)
    nxt = _ovn_spec()
    fill_ovn_kubernetes_defaults(nxt, None, 1500)

    assert is_ovn_kubernetes_change_safe(prev, nxt) == []

    nxt.default_network.ovn_kubernetes_config.mtu = 70000
    assert is_ovn_kubernetes_change_safe(prev, nxt) == ["cannot change ovn-kubernetes MTU"]


def test_hybrid_overlay_cannot_change_once_set():
    hybrid = HybridOverlayConfig(
        hybrid_cluster_network=[ClusterNetworkEntry(cidr="10.132.0.0/14", host_prefix=23)]
    )
    prev = _ovn_spec()
    prev.default_network.ovn_kubernetes_config.hybrid_overlay_config = hybrid
    nxt = _ovn_spec()
    assert is_ovn_kubernetes_change_safe(prev, nxt) == [
        "once set cannot change ovn-kubernetes Hybrid Overlay Config"
    ]

    # Adding a hybrid overlay where there was none is allowed.
    assert is_ovn_kubernetes_change_safe(nxt, prev) == []


def test_cidr_strings():
    conf = _ovn_spec()
    assert ovn_cluster_cidrs(conf) == "10.128.0.0/15/23,10.0.0.0/14/24"
    assert ovn_service_cidrs(conf) == "172.30.0.0/16"
    conf.service_network.append("172.31.0.0/16")
    assert ovn_service_cidrs(conf) == "172.30.0.0/16,172.31.0.0/16"


def test_plugin_name_and_ports():
    assert network_plugin_name() == "ovn-kubernetes"
    assert (OVN_NB_PORT, OVN_SB_PORT) == ("9641", "9642")