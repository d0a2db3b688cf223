from types import SimpleNamespace

import pytest

pytest.importorskip("ryu.lib.packet.packet")

from ryu.lib.packet import arp, ether_types, ethernet, ipv4, packet  # noqa: E402

from reactive_path.frames import classify, decode  # noqa: E402
from reactive_path.model import FrameKind  # noqa: E402


def build(ethertype, *payload, src='00:00:00:00:00:0A', dst='00:00:00:00:00:02'):
    p = packet.Packet()
    p.add_protocol(ethernet.ethernet(dst=dst, src=src, ethertype=ethertype))
    for proto in payload:
        p.add_protocol(proto)
    p.serialize()
    return bytes(p.data)


def packet_in(data, dpid=1, in_port=1):
    return SimpleNamespace(datapath=SimpleNamespace(id=dpid), match={'in_port': in_port},
                           data=data, buffer_id=0xffffffff)


def test_classify_closed_set():
    assert classify(ether_types.ETH_TYPE_IP) is FrameKind.IPV4
    assert classify(ether_types.ETH_TYPE_ARP) is FrameKind.ARP
    assert classify(ether_types.ETH_TYPE_LLDP) is FrameKind.LLDP
    assert classify(ether_types.ETH_TYPE_IPV6) is FrameKind.OTHER


def test_decode_ipv4():
    msg = packet_in(build(ether_types.ETH_TYPE_IP, ipv4.ipv4(src='10.0.0.1', dst='10.0.0.2')),
                    dpid=7, in_port=3)
    frame = decode(msg)
    assert frame.kind is FrameKind.IPV4
    assert frame.eth_src == '00:00:00:00:00:0a'
    assert frame.eth_dst == '00:00:00:00:00:02'
    assert (frame.device, frame.in_port) == (7, 3)
    assert frame.handle is msg


def test_decode_arp():
    req = arp.arp(opcode=arp.ARP_REQUEST, src_mac='00:00:00:00:00:0a', src_ip='10.0.0.1',
                  dst_mac='00:00:00:00:00:00', dst_ip='10.0.0.2')
    frame = decode(packet_in(build(ether_types.ETH_TYPE_ARP, req, dst='ff:ff:ff:ff:ff:ff')))
    assert frame.kind is FrameKind.ARP
