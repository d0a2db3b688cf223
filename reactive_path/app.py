# app.py
# -----------------------------------------------------------------------------
# Ryu app: reactive path forwarding with per host-pair sessions
#
# Overview:
#   1) Topology: ryu.topology (run with --observe-links) feeds a directed graph
#      of the fabric; rebuilt on every switch/link event.
#
#   2) Hosts: learnt from packet-ins on edge ports only (MAC -> dpid, port).
#
#   3) ARP: proxy reply when the target IP is known, otherwise the request is
#      sent out of every edge port of the fabric (never on inter-switch ports,
#      so no loops).
#
#   4) IPv4: the first packet of a host pair is handed to the dispatcher, which
#      records the session, picks a path, installs a rule pair per switch
#      (both directions, priority FLOW_PRIORITY, hard timeout RULE_LIFETIME) and
#      packets the frame out. Later packets of an already recorded pair do not
#      trigger a new install until the ledger is reset.
#
# REST (see rest.py):
#   GET /sessions, DELETE /sessions, GET /hosts, GET /topo
#
# Run:
#   ryu-manager --observe-links --wsapi-port 8080 reactive_path.app
#
# Mininet:
#   sudo mn --custom reactive_path/topo.py --topo twohop \
#           --controller=remote,ip=127.0.0.1,port=6633 \
#           --switch ovsk,protocols=OpenFlow13 --mac
# -----------------------------------------------------------------------------

from ryu.base import app_manager
from ryu.controller import ofp_event
from ryu.controller.handler import (
    MAIN_DISPATCHER,
    CONFIG_DISPATCHER,
    DEAD_DISPATCHER,
    set_ev_cls
)
from ryu.ofproto import ofproto_v1_3
from ryu.lib.packet import packet, arp
from ryu.app.wsgi import WSGIApplication
from ryu.topology import event, api as topo_api

from reactive_path import config, frames, southbound
from reactive_path.dispatcher import ForwardingDispatcher
from reactive_path.ledger import SessionLedger
from reactive_path.model import FrameKind
from reactive_path.rest import ReactivePathRest
from reactive_path.rules import RuleSynthesizer
from reactive_path.selector import PathSelector, policy_by_name
from reactive_path.topology import HostDirectory, TopologySnapshot


class ReactivePathController(app_manager.RyuApp):
    OFP_VERSIONS = [ofproto_v1_3.OFP_VERSION]
    _CONTEXTS = {'wsgi': WSGIApplication}

    def __init__(self, *args, **kwargs):
        super(ReactivePathController, self).__init__(*args, **kwargs)
        wsgi = kwargs['wsgi']
        wsgi.register(ReactivePathRest, {config.APP_INSTANCE_NAME: self})

        self.datapaths = {}             # dpid -> datapath
        self.topology = TopologySnapshot()
        self.hosts = HostDirectory()
        self.ledger = SessionLedger()
        self.sink = southbound.DatapathSink(self.datapaths)
        self.dispatcher = ForwardingDispatcher(
            hosts=self.hosts,
            ledger=self.ledger,
            selector=PathSelector(self.topology, policy_by_name(config.PATH_POLICY)),
            synthesizer=RuleSynthesizer(),
            sink=self.sink,
        )
        self.logger.info("Reactive path app started (policy=%s, lifetime=%ss, cookie=%#x)",
                         config.PATH_POLICY, config.RULE_LIFETIME, config.APP_COOKIE)

    def close(self):
        self.ledger.reset()
        self.logger.info("Reactive path app stopped")
        super(ReactivePathController, self).close()

    # === Operator hooks ===
    def session_listing(self):
        return self.ledger.dump()

    def reset_sessions(self):
        return self.ledger.reset()

    # === Topology events ===
    @set_ev_cls(event.EventSwitchEnter)
    def _on_switch_enter(self, ev):
        self._rebuild_topology()

    @set_ev_cls(event.EventSwitchLeave)
    def _on_switch_leave(self, ev):
        self._rebuild_topology()

    @set_ev_cls(event.EventLinkAdd)
    def _on_link_add(self, ev):
        self._rebuild_topology()

    @set_ev_cls(event.EventLinkDelete)
    def _on_link_del(self, ev):
        self._rebuild_topology()

    def _rebuild_topology(self):
        switches = topo_api.get_switch(self, None)
        links = topo_api.get_link(self, None)
        self.topology.rebuild(switches, links)
        self.hosts.forget_inter_switch(self.topology)

    # === Switch connection & table-miss ===
    @set_ev_cls(ofp_event.EventOFPSwitchFeatures, CONFIG_DISPATCHER)
    def _on_switch_features(self, ev):
        dp = ev.msg.datapath
        self.datapaths[dp.id] = dp
        dp.send_msg(southbound.table_miss(dp))
        self.logger.info("Switch connected: dpid=%s (table-miss installed)", dp.id)

    @set_ev_cls(ofp_event.EventOFPStateChange, DEAD_DISPATCHER)
    def _on_switch_dead(self, ev):
        dp = ev.datapath
        if dp.id is not None and self.datapaths.pop(dp.id, None) is not None:
            self.logger.info("Switch disconnected: dpid=%s", dp.id)

    # === PacketIn ===
    @set_ev_cls(ofp_event.EventOFPPacketIn, MAIN_DISPATCHER)
    def _on_packet_in(self, ev):
        msg = ev.msg
        pkt = packet.Packet(msg.data)
        frame = frames.decode(msg, pkt)
        if frame is None or frame.kind is FrameKind.LLDP:
            return

        self.hosts.learn(frame.eth_src, frame.device, frame.in_port, self.topology)

        if frame.kind is FrameKind.ARP:
            self._handle_arp(msg, frame, pkt.get_protocol(arp.arp))

        self.dispatcher.dispatch(frame)

    # === ARP ===
    def _handle_arp(self, msg, frame, arp_pkt):
        if arp_pkt is None:
            return
        self.hosts.learn_ip(arp_pkt.src_ip, arp_pkt.src_mac)

        if arp_pkt.opcode == arp.ARP_REQUEST:
            t_mac = self.hosts.mac_for_ip(arp_pkt.dst_ip)
            if t_mac:
                dp = msg.datapath
                dp.send_msg(southbound.arp_reply(
                    dp, frame.in_port,
                    requester_mac=arp_pkt.src_mac, requester_ip=arp_pkt.src_ip,
                    target_mac=t_mac, target_ip=arp_pkt.dst_ip))
                self.logger.info("ARP proxy reply at dpid=%s to %s for %s is %s",
                                 frame.device, frame.eth_src, arp_pkt.dst_ip, t_mac)
                return

        # Unicast reply (or request) to a host we know: deliver it directly
        dst = self.hosts.resolve(frame.eth_dst)
        if dst is not None:
            dp = self.datapaths.get(dst.device)
            if dp is not None:
                dp.send_msg(southbound.send_raw(dp, [dst.port], msg.data))
                return

        self._flood_edges(frame, msg.data)

    def _flood_edges(self, frame, data):
        count = 0
        for dpid, dp in list(self.datapaths.items()):
            ports = [p for p in self.topology.edge_ports(dpid)
                     if not (dpid == frame.device and p == frame.in_port)]
            out = southbound.send_raw(dp, ports, data)
            if out is not None:
                dp.send_msg(out)
                count += len(ports)
        self.logger.info("ARP edge flood from dpid=%s,in_port=%s to %d port(s)",
                         frame.device, frame.in_port, count)
