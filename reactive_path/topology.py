# topology.py
# -----------------------------------------------------------------------------
# Fabric view and host locations.
#
#   TopologySnapshot
#     - directed graph (networkx.DiGraph) of switches; every directed edge keeps
#       the port it leaves from (src_port) and the port it enters on (dst_port)
#     - rebuilt from ryu.topology (get_switch / get_link, needs --observe-links)
#     - paths_between(): bounded simple-path enumeration (MAX_HOPS / MAX_PATHS)
#
#   HostDirectory
#     - MAC -> (dpid, port), learnt only on edge ports (never on a port that
#       faces another switch, otherwise a host would be learnt on an uplink)
#     - IP -> MAC, used by the ARP proxy
# -----------------------------------------------------------------------------

import logging

import networkx as nx

from reactive_path import config
from reactive_path.model import Host, HostId, Link, Path, mac_str

LOG = logging.getLogger(__name__)


class TopologySnapshot(object):

    def __init__(self, max_hops=config.MAX_HOPS, max_paths=config.MAX_PATHS):
        self.max_hops = max_hops
        self.max_paths = max_paths
        self.graph = nx.DiGraph()
        self.switch_ports = {}       # dpid -> set of port_no
        self.isw_ports = set()       # (dpid, port_no) facing another switch

    def rebuild(self, switches, links):
        """Replace the current view with the given Ryu switches and links."""
        graph = nx.DiGraph()
        switch_ports = {}
        isw_ports = set()

        for sw in switches:
            dpid = sw.dp.id
            graph.add_node(dpid)
            switch_ports[dpid] = {p.port_no for p in getattr(sw, 'ports', [])}

        for l in links:
            graph.add_edge(l.src.dpid, l.dst.dpid,
                           src_port=l.src.port_no, dst_port=l.dst.port_no)
            isw_ports.add((l.src.dpid, l.src.port_no))
            isw_ports.add((l.dst.dpid, l.dst.port_no))

        self.graph = graph
        self.switch_ports = switch_ports
        self.isw_ports = isw_ports
        LOG.info("Topology rebuilt: %d switches, %d directed links",
                 graph.number_of_nodes(), graph.number_of_edges())

    def is_inter_switch_port(self, dpid, port_no):
        return (dpid, port_no) in self.isw_ports

    def edge_ports(self, dpid):
        """Ports of a switch that do not face another switch."""
        return sorted(p for p in self.switch_ports.get(dpid, ())
                      if (dpid, p) not in self.isw_ports)

    def _to_path(self, sw_seq):
        links = []
        for u, v in zip(sw_seq[:-1], sw_seq[1:]):
            edge = self.graph[u][v]
            links.append(Link(u, edge['src_port'], v, edge['dst_port']))
        return Path(links)

    def paths_between(self, src_device, dst_device):
        """Candidate paths from src_device to dst_device, in no particular order.

        Returns an empty list when either switch is unknown, when they are the
        same switch, or when no route exists.
        """
        if src_device == dst_device:
            return []
        if src_device not in self.graph or dst_device not in self.graph:
            return []

        paths = []
        for sw_seq in nx.all_simple_paths(self.graph, source=src_device,
                                          target=dst_device, cutoff=self.max_hops):
            paths.append(self._to_path(sw_seq))
            if len(paths) >= self.max_paths:
                break
        return paths

    def as_dict(self):
        switches = sorted(self.graph.nodes())
        links = sorted([
            {"src": u, "src_port": d['src_port'], "dst": v, "dst_port": d['dst_port']}
            for u, v, d in self.graph.edges(data=True)
        ], key=lambda x: (x["src"], x["dst"]))
        return {"switches": switches, "links": links}


class HostDirectory(object):

    def __init__(self):
        self.mac_table = {}     # mac (str) -> (dpid (int), port_no (int))
        self.ip_table = {}      # ip (str) -> mac (str)

    def learn(self, mac, dpid, port_no, topology=None):
        """Remember where mac sits. Returns True when the location changed."""
        if topology is not None and topology.is_inter_switch_port(dpid, port_no):
            LOG.debug("Ignore learning on inter-switch port: mac=%s at dpid=%s,port=%s",
                      mac, dpid, port_no)
            return False

        mac = mac_str(mac)
        prev = self.mac_table.get(mac)
        self.mac_table[mac] = (dpid, port_no)
        if prev != (dpid, port_no):
            LOG.info("Learn host: mac=%s at dpid=%s,port=%s", mac, dpid, port_no)
            return True
        return False

    def learn_ip(self, ip, mac):
        self.ip_table[ip] = mac_str(mac)

    def mac_for_ip(self, ip):
        return self.ip_table.get(ip)

    def resolve(self, mac):
        """Host record for mac, or None when the host has not been seen."""
        location = self.mac_table.get(mac_str(mac))
        if location is None:
            return None
        dpid, port_no = location
        return Host(HostId(mac), dpid, port_no)

    def forget_inter_switch(self, topology):
        """Drop hosts that were learnt on what is now known to be an uplink."""
        bad = [mac for mac, (dpid, port) in self.mac_table.items()
               if topology.is_inter_switch_port(dpid, port)]
        for mac in bad:
            del self.mac_table[mac]
            LOG.info("Forget host on inter-switch port: mac=%s", mac)
        return bad

    def as_list(self):
        return [
            {"mac": mac, "dpid": dpid, "port": port}
            for mac, (dpid, port) in sorted(self.mac_table.items())
        ]
