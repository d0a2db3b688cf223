from types import SimpleNamespace

import pytest

from reactive_path.dispatcher import ForwardingDispatcher
from reactive_path.ledger import SessionLedger
from reactive_path.model import FrameKind, InboundFrame
from reactive_path.rules import RuleSynthesizer
from reactive_path.selector import PathSelector
from reactive_path.topology import HostDirectory, TopologySnapshot

H1 = '00:00:00:00:00:01'
H2 = '00:00:00:00:00:02'
H3 = '00:00:00:00:00:03'


class FakeSink(object):
    """Records what the dispatcher pushes instead of talking to switches."""

    def __init__(self):
        self.batches = []
        self.packet_outs = []

    @property
    def rules(self):
        return [rule for batch in self.batches for rule in batch]

    def apply(self, rules):
        self.batches.append(list(rules))

    def packet_out(self, frame, out_port):
        self.packet_outs.append((frame.device, out_port))


def ryu_switch(dpid, ports=()):
    return SimpleNamespace(dp=SimpleNamespace(id=dpid),
                           ports=[SimpleNamespace(port_no=p) for p in ports])


def ryu_link(src, src_port, dst, dst_port):
    return SimpleNamespace(src=SimpleNamespace(dpid=src, port_no=src_port),
                           dst=SimpleNamespace(dpid=dst, port_no=dst_port))


def build_topology(switches, cables):
    """cables are (a, a_port, b, b_port); both directions get a link, as LLDP reports them."""
    links = []
    for a, a_port, b, b_port in cables:
        links.append(ryu_link(a, a_port, b, b_port))
        links.append(ryu_link(b, b_port, a, a_port))
    topo = TopologySnapshot()
    topo.rebuild(switches, links)
    return topo


def ipv4_frame(src, dst, device, in_port, kind=FrameKind.IPV4):
    return InboundFrame(kind=kind, eth_src=src, eth_dst=dst,
                        device=device, in_port=in_port, handle=None)


@pytest.fixture
def two_hop_topology():
    # D1 --(2/1)-- D3 --(2/2)-- D2 ; H1 on D1 port 1, H2 on D2 port 3
    return build_topology(
        [ryu_switch(1, [1, 2, 4]), ryu_switch(2, [2, 3]), ryu_switch(3, [1, 2])],
        [(1, 2, 3, 1), (3, 2, 2, 2)],
    )


@pytest.fixture
def hosts():
    directory = HostDirectory()
    directory.learn(H1, 1, 1)
    directory.learn(H2, 2, 3)
    directory.learn(H3, 1, 4)
    return directory


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def ledger():
    return SessionLedger()


@pytest.fixture
def dispatcher(hosts, ledger, two_hop_topology, sink):
    return ForwardingDispatcher(hosts=hosts, ledger=ledger,
                                selector=PathSelector(two_hop_topology),
                                synthesizer=RuleSynthesizer(priority=10, lifetime=10, cookie=0x7e4),
                                sink=sink)
