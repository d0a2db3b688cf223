# southbound.py
# -----------------------------------------------------------------------------
# OpenFlow 1.3 messages sent to the switches.
#
#   DatapathSink.apply()      FlowRuleSpec -> OFPFlowMod (fire-and-forget)
#   DatapathSink.packet_out() re-emit the packet held by a packet-in
#   table_miss / arp_reply / send_raw helpers used by the Ryu app
#
# The sink never waits for barriers or errors from the switch and never rolls
# back rules already sent.
# -----------------------------------------------------------------------------

import logging

from ryu.lib.packet import arp, ethernet, ether_types, packet

LOG = logging.getLogger(__name__)


def flow_mod(dp, rule):
    """Build the OFPFlowMod installing rule on dp."""
    ofp = dp.ofproto
    parser = dp.ofproto_parser
    match = parser.OFPMatch(in_port=rule.in_port, eth_src=rule.eth_src, eth_dst=rule.eth_dst)
    actions = [parser.OFPActionOutput(rule.out_port)]
    inst = [parser.OFPInstructionActions(ofp.OFPIT_APPLY_ACTIONS, actions)]
    return parser.OFPFlowMod(
        datapath=dp,
        table_id=0,
        cookie=rule.cookie,
        priority=rule.priority,
        idle_timeout=0,
        hard_timeout=rule.lifetime,
        match=match,
        instructions=inst
    )


def table_miss(dp):
    """Priority 0 rule sending every unmatched packet to the controller."""
    ofp = dp.ofproto
    parser = dp.ofproto_parser
    actions = [parser.OFPActionOutput(ofp.OFPP_CONTROLLER, ofp.OFPCML_NO_BUFFER)]
    inst = [parser.OFPInstructionActions(ofp.OFPIT_APPLY_ACTIONS, actions)]
    return parser.OFPFlowMod(datapath=dp, priority=0, match=parser.OFPMatch(),
                             instructions=inst)


def packet_out(msg, out_port):
    """PacketOut forwarding the packet held by packet-in msg to out_port."""
    dp = msg.datapath
    ofp = dp.ofproto
    parser = dp.ofproto_parser
    data = None
    if msg.buffer_id == ofp.OFP_NO_BUFFER:
        data = msg.data
    return parser.OFPPacketOut(
        datapath=dp,
        buffer_id=msg.buffer_id,
        in_port=msg.match['in_port'],
        actions=[parser.OFPActionOutput(out_port)],
        data=data
    )


def arp_reply(dp, out_port, requester_mac, requester_ip, target_mac, target_ip):
    """ARP reply built by the controller on behalf of target, sent out of out_port."""
    e = ethernet.ethernet(dst=requester_mac, src=target_mac, ethertype=ether_types.ETH_TYPE_ARP)
    a = arp.arp(opcode=arp.ARP_REPLY,
                src_mac=target_mac, src_ip=target_ip,
                dst_mac=requester_mac, dst_ip=requester_ip)
    p = packet.Packet()
    p.add_protocol(e)
    p.add_protocol(a)
    p.serialize()

    ofp = dp.ofproto
    parser = dp.ofproto_parser
    return parser.OFPPacketOut(
        datapath=dp,
        buffer_id=ofp.OFP_NO_BUFFER,
        in_port=ofp.OFPP_CONTROLLER,
        actions=[parser.OFPActionOutput(out_port)],
        data=p.data
    )


def send_raw(dp, ports, data):
    """Controller-originated PacketOut of raw data on each of ports, or None."""
    if not ports:
        return None
    ofp = dp.ofproto
    parser = dp.ofproto_parser
    return parser.OFPPacketOut(
        datapath=dp,
        buffer_id=ofp.OFP_NO_BUFFER,
        in_port=ofp.OFPP_CONTROLLER,
        actions=[parser.OFPActionOutput(p) for p in ports],
        data=data
    )


class DatapathSink(object):
    """Pushes rules and packet-outs to connected switches.

    datapaths is the live dpid -> Datapath map kept by the app.
    """

    def __init__(self, datapaths):
        self.datapaths = datapaths

    def apply(self, rules):
        sent = 0
        for rule in rules:
            dp = self.datapaths.get(rule.device)
            if dp is None:
                LOG.warning("Switch %s not connected, rule %s skipped", rule.device, rule)
                continue
            dp.send_msg(flow_mod(dp, rule))
            sent += 1
        return sent

    def packet_out(self, frame, out_port):
        msg = frame.handle
        msg.datapath.send_msg(packet_out(msg, out_port))
