# dispatcher.py
# -----------------------------------------------------------------------------
# Per-frame orchestration: resolve, record, pick a path, install, packet-out.
#
# Each ForwardingDispatcher.dispatch() walks one frame through
#
#   received -> addresses resolved -> session checked
#            -> same-switch install | path install | dropped
#            -> packet-out sent
#
# and reports where it ended as an Outcome. The dispatcher keeps no state of
# its own between frames; the injected session ledger is the only shared
# state, so concurrent calls are safe as long as the ledger is.
#
# Installation is at-most-once and not transactional: the session is recorded
# before any rule is pushed, and a sink failure halfway through is not undone.
# -----------------------------------------------------------------------------

import enum
import logging

from reactive_path.errors import NoPathFound, UnknownHost
from reactive_path.ledger import Recorded
from reactive_path.model import FrameKind

LOG = logging.getLogger(__name__)


class Outcome(enum.Enum):
    IGNORED = 'ignored'
    UNKNOWN_HOST = 'unknown_host'
    DUPLICATE_SESSION = 'duplicate_session'
    SAME_PORT = 'same_port'
    SAME_SWITCH = 'same_switch'
    NO_PATH = 'no_path'
    PATH_INSTALLED = 'path_installed'


class ForwardingDispatcher(object):

    def __init__(self, hosts, ledger, selector, synthesizer, sink):
        self.hosts = hosts
        self.ledger = ledger
        self.selector = selector
        self.synthesizer = synthesizer
        self.sink = sink

    def dispatch(self, frame):
        kind = frame.kind
        if kind is FrameKind.IPV4:
            LOG.info("from %s/%s ETH_TYPE: IPv4", frame.device, frame.in_port)
            return self._forward(frame)
        elif kind is FrameKind.ARP:
            LOG.info("from %s/%s ETH_TYPE: ARP", frame.device, frame.in_port)
        elif kind is FrameKind.LLDP:
            LOG.debug("from %s/%s ETH_TYPE: LLDP", frame.device, frame.in_port)
        else:
            LOG.debug("from %s/%s ETH_TYPE: other", frame.device, frame.in_port)
        return Outcome.IGNORED

    def _resolve(self, mac, role):
        host = self.hosts.resolve(mac)
        if host is None:
            raise UnknownHost(mac, role)
        return host

    def _forward(self, frame):
        try:
            src = self._resolve(frame.eth_src, 'source')
            dst = self._resolve(frame.eth_dst, 'destination')
        except UnknownHost as e:
            LOG.error("%s, frame dropped", e)
            return Outcome.UNKNOWN_HOST

        if self.ledger.record_if_absent(src.id, dst.id) is Recorded.ALREADY_PRESENT:
            LOG.info("session %s -> %s is already in the ledger", src.id, dst.id)
            return Outcome.DUPLICATE_SESSION
        LOG.info("session %s -> %s has been added to the ledger", src.id, dst.id)

        # Destination sits on the switch the frame came in on
        if frame.device == dst.device:
            if src.port == dst.port:
                return Outcome.SAME_PORT
            return self._install_local(frame, dst)

        try:
            path = self.selector.select_path(src.device, dst.device)
        except NoPathFound as e:
            LOG.error("%s, frame dropped", e)
            return Outcome.NO_PATH

        LOG.info("received packet from device %s host %s to host %s, path %r",
                 frame.device, src.id, dst.id, path)
        rules = self.synthesizer.rules_for_path(path, frame.in_port, dst.port,
                                                frame.eth_src, frame.eth_dst)
        self.sink.apply(rules)

        out_port = path.links[0].src_port
        LOG.info("sending packet out to device %s port %s", frame.device, out_port)
        self.sink.packet_out(frame, out_port)
        return Outcome.PATH_INSTALLED

    def _install_local(self, frame, dst):
        LOG.warning("packet received on the destination switch %s, rules installed",
                    frame.device)
        rules = self.synthesizer.rules_for_hop(frame.device, frame.in_port, dst.port,
                                               frame.eth_src, frame.eth_dst)
        self.sink.apply(list(rules))
        self.sink.packet_out(frame, dst.port)
        return Outcome.SAME_SWITCH
