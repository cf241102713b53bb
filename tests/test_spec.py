import copy

import pytest

from netoperconf.spec import (
    AdditionalNetworkDefinition,
    ConfigError,
    DefaultNetworkDefinition,
    IPAMType,
    MacvlanMode,
    NetworkSpec,
    NetworkType,
    ProxyConfig,
    SDNMode,
    StaticIPAMAddress,
    StaticIPAMConfig,
)

APPLIED = {
    "clusterNetwork": [{"cidr": "10.128.0.0/14", "hostPrefix": 23}],
    "serviceNetwork": ["172.30.0.0/16"],
    "defaultNetwork": {
        "type": "OpenShiftSDN",
        "openshiftSDNConfig": {"mode": "NetworkPolicy", "vxlanPort": 4789, "mtu": 8951},
    },
    "disableMultiNetwork": False,
    "deployKubeProxy": False,
    "kubeProxyConfig": {
        "bindAddress": "0.0.0.0",
        "proxyArguments": {
            "metrics-bind-address": ["0.0.0.0"],
            "metrics-port": ["9101"],
        },
    },
}

MACVLAN = {
    "additionalNetworks": [
        {
            "type": "SimpleMacvlan",
            "name": "net-attach-1",
            "namespace": "foobar",
            "simpleMacvlanConfig": {
                "master": "eth0",
                "mode": "Bridge",
                "ipamConfig": {
                    "type": "Static",
                    "staticIPAMConfig": {
                        "addresses": [{"address": "10.1.1.2/24", "gateway": "10.1.1.1"}],
                        "routes": [{"destination": "0.0.0.0/0", "gateway": "10.1.1.1"}],
                        "dns": {
                            "nameservers": ["10.1.1.1"],
                            "domain": "macvlantest.example",
                            "search": ["testdomain1.example", "testdomain2.example"],
                        },
                    },
                },
            },
        }
    ]
}


def test_round_trip_of_applied_config():
    spec = NetworkSpec.from_dict(APPLIED)
    assert spec.to_dict() == APPLIED


def test_parsed_fields():
    spec = NetworkSpec.from_dict(APPLIED)
    assert spec.cluster_network[0].cidr == "10.128.0.0/14"
    assert spec.cluster_network[0].host_prefix == 23
    assert spec.service_network == ["172.30.0.0/16"]
    sdn = spec.default_network.openshift_sdn_config
    assert spec.default_network.type == NetworkType.OPENSHIFT_SDN
    assert sdn.mode == SDNMode.NETWORK_POLICY
    assert sdn.vxlan_port == 4789
    assert sdn.mtu == 8951
    assert sdn.enable_unidling is None
    assert spec.disable_multi_network is False
    assert spec.kube_proxy_config.proxy_arguments["metrics-port"] == ["9101"]


def test_nested_additional_network_round_trip():
    spec = NetworkSpec.from_dict(MACVLAN)
    network = spec.additional_networks[0]
    assert network.type == NetworkType.SIMPLE_MACVLAN
    macvlan = network.simple_macvlan_config
    assert macvlan.mode == MacvlanMode.BRIDGE
    assert macvlan.ipam_config.type == IPAMType.STATIC
    static = macvlan.ipam_config.static_ipam_config
    assert static.addresses == [StaticIPAMAddress(address="10.1.1.2/24", gateway="10.1.1.1")]
    assert static.routes[0].destination == "0.0.0.0/0"
    assert static.dns.search == ["testdomain1.example", "testdomain2.example"]
    assert spec.to_dict()["additionalNetworks"] == MACVLAN["additionalNetworks"]


def test_null_values_are_absent():
    spec = NetworkSpec.from_dict({"kubeProxyConfig": None, "additionalNetworks": None})
    assert spec == NetworkSpec()
    assert spec.kube_proxy_config is None


def test_default_spec_serialises_only_default_network():
    assert NetworkSpec().to_dict() == {"defaultNetwork": {}}


def test_empty_proxy_arguments_are_kept():
    spec = NetworkSpec(kube_proxy_config=ProxyConfig(bind_address="0.0.0.0", proxy_arguments={}))
    assert spec.to_dict()["kubeProxyConfig"] == {"bindAddress": "0.0.0.0", "proxyArguments": {}}
    assert NetworkSpec.from_dict(spec.to_dict()) == spec


def test_enum_members_serialise_as_plain_strings():
    spec = NetworkSpec(default_network=DefaultNetworkDefinition(type=NetworkType.KURYR))
    value = spec.to_dict()["defaultNetwork"]["type"]
    assert value == "Kuryr"
    assert type(value) is str


@pytest.mark.parametrize(
    "member, value",
    [
        (NetworkType.OPENSHIFT_SDN, "OpenShiftSDN"),
        (NetworkType.KURYR, "Kuryr"),
        (SDNMode.MULTITENANT, "Multitenant"),
        (SDNMode.NETWORK_POLICY, "NetworkPolicy"),
    ],
)
def test_enum_names(member, value):
    assert member == value
    assert str(member) == value
    assert f"{member}" == value


def test_non_object_is_rejected():
    with pytest.raises(ConfigError, match="expected an object"):
        NetworkSpec.from_dict("clusterNetwork")


def test_non_list_is_rejected():
    with pytest.raises(ConfigError, match="clusterNetwork must be a list"):
        NetworkSpec.from_dict({"clusterNetwork": {"cidr": "10.128.0.0/14"}})


def test_to_dict_returns_copies():
    spec = NetworkSpec.from_dict(APPLIED)
    out = spec.to_dict()
    out["serviceNetwork"].append("10.0.0.0/8")
    out["kubeProxyConfig"]["proxyArguments"]["metrics-port"].append("1")
    assert spec.service_network == ["172.30.0.0/16"]
    assert spec.kube_proxy_config.proxy_arguments["metrics-port"] == ["9101"]


def test_from_dict_does_not_share_input():
    data = copy.deepcopy(APPLIED)
    spec = NetworkSpec.from_dict(data)
    data["serviceNetwork"].append("10.0.0.0/8")
    assert spec.service_network == ["172.30.0.0/16"]


def test_mutable_defaults_are_not_shared():
    first = NetworkSpec()
    second = NetworkSpec()
    first.additional_networks.append(AdditionalNetworkDefinition(name="net-attach-1"))
    assert second.additional_networks == []
    assert StaticIPAMConfig().addresses == []


def test_config_error_carries_errors():
    inner = ConfigError("ServiceNetwork must have exactly 1 entry")
    err = ConfigError("invalid configuration", [inner])
    assert str(err) == "invalid configuration"
    assert err.errors == (inner,)
    assert isinstance(err, ValueError)