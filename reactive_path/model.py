# model.py
# -----------------------------------------------------------------------------
# Value types shared by the forwarding pipeline.
#
# Devices are OpenFlow datapath ids and ports are OpenFlow port numbers, both
# plain ints as Ryu hands them out.
# -----------------------------------------------------------------------------

import enum
from collections import namedtuple


def mac_str(mac: str) -> str:
    """Normalise a MAC string to lower case so lookups ignore case."""
    return mac.lower()


class HostId(object):
    """Identity of a host, derived from its MAC address."""

    __slots__ = ('mac',)

    def __init__(self, mac: str):
        self.mac = mac_str(mac)

    def __eq__(self, other):
        return isinstance(other, HostId) and self.mac == other.mac

    def __hash__(self):
        return hash(self.mac)

    def __str__(self):
        return self.mac

    def __repr__(self):
        return 'HostId(%r)' % self.mac


# Host attachment point: which switch and which port the host sits behind
Host = namedtuple('Host', ['id', 'device', 'port'])


class Link(namedtuple('Link', ['src_device', 'src_port', 'dst_device', 'dst_port'])):
    """Directed inter-switch link (src_device, src_port) -> (dst_device, dst_port)."""

    __slots__ = ()

    def __str__(self):
        return '%s/%s->%s/%s' % self


class Path(tuple):
    """Ordered links leading from an ingress switch to an egress switch."""

    __slots__ = ()

    def __new__(cls, links=()):
        return super(Path, cls).__new__(cls, tuple(links))

    @property
    def links(self):
        return tuple(self)

    def devices(self):
        if not self:
            return []
        return [link.src_device for link in self] + [self[-1].dst_device]

    def __repr__(self):
        return 'Path(%s)' % ', '.join(str(link) for link in self)


# One match-action entry for one switch. lifetime is the hard expiry in
# seconds; cookie tags the owning application.
FlowRuleSpec = namedtuple('FlowRuleSpec', [
    'device', 'in_port', 'eth_src', 'eth_dst', 'out_port',
    'priority', 'lifetime', 'cookie',
])


class FrameKind(enum.Enum):
    ARP = 'arp'
    LLDP = 'lldp'
    IPV4 = 'ipv4'
    OTHER = 'other'


# A decoded packet-in. handle is whatever the sink needs to emit the buffered
# packet again (the OFPPacketIn message under Ryu); the core never looks at it.
InboundFrame = namedtuple('InboundFrame', [
    'kind', 'eth_src', 'eth_dst', 'device', 'in_port', 'handle',
])
