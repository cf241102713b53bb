# netoperconf

`netoperconf` checks and prepares the network configuration of a Kubernetes
cluster before it is rolled out. It covers the default network plugins
(OpenShift SDN, OVN-Kubernetes, Kuryr), Multus additional networks (raw CNI
configs and simple macvlan), the decision whether the DHCP CNI daemon is
needed, and the arguments and validation of a standalone kube-proxy.

## Installation

```
pip install netoperconf
```

## Configuration model

The configuration is a `netoperconf.spec.NetworkSpec`, a tree of
dataclasses (`ClusterNetworkEntry`, `DefaultNetworkDefinition`,
`OpenShiftSDNConfig`, `OVNKubernetesConfig`, `KuryrConfig`, `ProxyConfig`,
`AdditionalNetworkDefinition`, `SimpleMacvlanConfig`, `IPAMConfig`, ...).
It can be built directly or loaded from a plain dictionary that uses the
field names of the cluster API:

```python
from netoperconf.spec import NetworkSpec

spec = NetworkSpec.from_dict({
    "clusterNetwork": [{"cidr": "10.128.0.0/14", "hostPrefix": 23}],
    "serviceNetwork": ["172.30.0.0/16"],
    "defaultNetwork": {"type": "OpenShiftSDN"},
})
```

`spec.to_dict()` gives the same structure back, leaving out unset and empty
fields. The well-known names are the string enums `NetworkType`, `SDNMode`,
`IPAMType` and `MacvlanMode`; their members compare equal to plain strings.

## Processing a configuration

These are the steps to run on a configuration, in this order, all from
`netoperconf.network`:

```python
from netoperconf.network import canonicalize, validate, fill_defaults, is_change_safe

canonicalize(spec)              # normalise the case of types and modes
validate(spec)                  # raises ConfigError if the configuration is invalid
fill_defaults(spec, previous)   # fill in defaults in place; previous may be None
is_change_safe(previous, spec)  # raises ConfigError on a change that cannot be rolled out
```

Errors are raised as `netoperconf.spec.ConfigError` (a `ValueError`); when
several problems were found, their messages are in its `errors` attribute.

`validate` checks the CIDRs, the default network, the Multus setting and the
standalone kube-proxy. Additional networks are checked separately with
`validate_additional_networks(spec)`, which returns a list of messages.
The other checks are available one by one as well: `validate_ip_pools`,
`validate_default_network`, `validate_multus`,
`is_default_network_change_safe`, each returning a list of messages.

`fill_defaults` carries values such as the MTU over from `previous` when it
is given. Otherwise the MTU is derived from the host's uplink MTU, found by
`netoperconf.mtu.get_default_mtu()`: on Linux it reads the IPv4 default
routes and their links' MTUs and raises `OSError` when it cannot tell; on
other systems it returns 1500. `fill_defaults` falls back to 1500 when the
probe fails.

`plugin_cni_conf_dir(spec)` names the directory where plugins place their
CNI configuration: `MULTUS_CNI_CONF_DIR`, or `SYSTEM_CNI_CONF_DIR` when
multi-network is disabled.

## Other helpers

- `netoperconf.cluster_config`: `validate_cluster_config` checks a
  `ClusterNetworkConfig` (parsable, non-overlapping networks, sane host
  prefixes, a network type); `merge_cluster_config` copies it into a
  `NetworkSpec`; `status_from_operator_config` derives a `NetworkStatus`,
  or `None` for a network type it does not know.
- `netoperconf.additional_networks`: `validate_raw`,
  `validate_simple_macvlan_config`, `validate_ipam_config` and
  `validate_static_ipam_config`; `get_ipam_config_json` and
  `get_static_ipam_config_json` produce the IPAM part of a CNI configuration
  as JSON text (`{ "type": "dhcp" }` when no IPAM is given).
- `netoperconf.dhcp`: `use_dhcp` reports whether any additional network needs
  the DHCP CNI daemon; `use_dhcp_raw` and `use_dhcp_simple_macvlan` decide
  for a single network.
- `netoperconf.kube_proxy`: `should_deploy_kube_proxy`,
  `validate_kube_proxy`, `validate_standalone_kube_proxy`,
  `fill_kube_proxy_defaults`, and `kube_proxy_arguments`, which merges the
  values from the spec, the plugin defaults, the user's proxy arguments and
  the plugin overrides, later ones winning.
- `netoperconf.openshift_sdn`: validation, defaults and change checks;
  `cluster_network` builds the ClusterNetwork object as YAML text and
  `sdn_plugin_name` gives the plugin for a mode.
- `netoperconf.ovn_kubernetes`: validation, defaults and change checks, plus
  `ovn_cluster_cidrs` and `ovn_service_cidrs` for the comma-joined network
  lists.
- `netoperconf.kuryr`: validation, defaults and change checks; the OpenStack
  service network defaults to the service network doubled in size.
- `netoperconf.netutil`: `parse_cidr`, `parse_ip`, `parse_duration`,
  `expand_net`, `nets_overlap`, `net_includes` and `IPPool`, a set of
  networks that refuses overlaps.

## What it does not do

The package works on configuration only. It does not render Kubernetes
manifests for the network plugins, Multus or kube-proxy, does not create
cloud resources, and does not connect to a cluster or apply anything to it.
It has no command-line program.

## Running the tests

```
pip install -e .[test]
pytest
```