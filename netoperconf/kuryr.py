"""The Kuryr default network: validation, change safety and defaults."""

from __future__ import annotations

from .netutil import expand_net, net_includes, nets_overlap, parse_cidr
from .spec import ConfigError, KuryrConfig, NetworkSpec

_DAEMON_PROBES_PORT = 8090
_CONTROLLER_PROBES_PORT = 8091


def validate_kuryr(conf: NetworkSpec) -> list[str]:
    """Check that the Kuryr configuration is basically sane."""
    out: list[str] = []
    kuryr = conf.default_network.kuryr_config

    if len(conf.service_network) != 1:
        out.append("serviceNetwork must have exactly 1 entry")
    if len(conf.cluster_network) != 1:
        out.append("clusterNetwork must have exactly 1 entry")

    svc_net = None
    if conf.service_network:
        try:
            svc_net = parse_cidr(conf.service_network[0])
        except ConfigError:
            out.append("cannot parse serviceNetwork[0] CIDR")

    cluster_net = None
    if conf.cluster_network:
        try:
            cluster_net = parse_cidr(conf.cluster_network[0].cidr)
        except ConfigError:
            out.append("cannot parse clusterNetwork[0].CIDR CIDR")

    octavia_net = None
    if kuryr is not None and kuryr.openstack_service_network:
        try:
            octavia_net = parse_cidr(kuryr.openstack_service_network)
        except ConfigError:
            out.append("cannot parse defaultNetwork.kuryrConfig.octaviaServiceNetwork CIDR")
    elif svc_net is not None:
        try:
            octavia_net = expand_net(svc_net)
        except ConfigError as exc:
            out.append(str(exc))

    if octavia_net is None:
        return out

    if cluster_net is not None and nets_overlap(octavia_net, cluster_net):
        out.append(
            f"octaviaServiceNetwork {octavia_net} will overlap with cluster network "
            f"{conf.cluster_network[0].cidr}"
        )

    if svc_net is not None:
        if not net_includes(octavia_net, svc_net):
            out.append(
                f"octaviaServiceNetwork {octavia_net} does not include serviceNetwork "
                f"{svc_net} (the octaviaServiceNetwork needs to be twice the size of "
                "serviceNetwork and include it)"
            )
        if octavia_net.prefixlen >= svc_net.prefixlen:
            out.append(
                f"octaviaServiceNetwork {octavia_net} is too small comparing to "
                f"serviceNetwork {svc_net} (the octaviaServiceNetwork needs to be twice "
                "the size of the serviceNetwork and include it)"
            )

    return out


def is_kuryr_change_safe(prev: NetworkSpec, next: NetworkSpec) -> list[str]:
    """Refuse any change of the Kuryr configuration."""
    if prev.default_network.kuryr_config == next.default_network.kuryr_config:
        return []
    return ["cannot change kuryr configuration"]


def fill_kuryr_defaults(conf: NetworkSpec) -> None:
    """Fill in the Kuryr probe ports and OpenStack service network."""
    if conf.default_network.kuryr_config is None:
        conf.default_network.kuryr_config = KuryrConfig()
    kuryr = conf.default_network.kuryr_config

    if kuryr.daemon_probes_port is None:
        kuryr.daemon_probes_port = _DAEMON_PROBES_PORT

    if kuryr.controller_probes_port is None:
        kuryr.controller_probes_port = _CONTROLLER_PROBES_PORT

    if not kuryr.openstack_service_network:
        if not conf.service_network:
            raise ConfigError("serviceNetwork must have exactly 1 entry")
        svc_net = parse_cidr(conf.service_network[0])
        kuryr.openstack_service_network = str(expand_net(svc_net))