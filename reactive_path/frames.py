# frames.py
# -----------------------------------------------------------------------------
# Decode OpenFlow packet-in messages into InboundFrame values.
# -----------------------------------------------------------------------------

from ryu.lib.packet import ether_types, ethernet, packet

from reactive_path.model import FrameKind, InboundFrame, mac_str

_KINDS = {
    ether_types.ETH_TYPE_ARP: FrameKind.ARP,
    ether_types.ETH_TYPE_LLDP: FrameKind.LLDP,
    ether_types.ETH_TYPE_IP: FrameKind.IPV4,
}


def classify(ethertype):
    return _KINDS.get(ethertype, FrameKind.OTHER)


def decode(msg, pkt=None):
    """InboundFrame for packet-in msg, or None if it carries no Ethernet header.

    pkt may be passed when the caller already parsed msg.data.
    """
    if pkt is None:
        pkt = packet.Packet(msg.data)
    eth = pkt.get_protocol(ethernet.ethernet)
    if eth is None:
        return None
    return InboundFrame(
        kind=classify(eth.ethertype),
        eth_src=mac_str(eth.src),
        eth_dst=mac_str(eth.dst),
        device=msg.datapath.id,
        in_port=msg.match['in_port'],
        handle=msg,
    )
