# rules.py
# -----------------------------------------------------------------------------
# Flow-rule synthesis along a path.
#
# Every visited switch gets a rule pair:
#   forward: in_port, eth_src=src, eth_dst=dst -> output out_port
#   reverse: in_port=out_port, eth_src=dst, eth_dst=src -> output in_port
#
# Ports along a path of links l0..ln-1:
#   hop 0    at l0.src_device : frame ingress port -> l0.src_port
#   hop i    at li.src_device : l(i-1).dst_port    -> li.src_port
#   egress   at ln-1.dst_device: ln-1.dst_port     -> destination host port
#
# No deduplication: a switch visited twice gets two pairs.
# -----------------------------------------------------------------------------

import logging

from reactive_path import config
from reactive_path.model import FlowRuleSpec

LOG = logging.getLogger(__name__)


class RuleSynthesizer(object):

    def __init__(self, priority=config.FLOW_PRIORITY, lifetime=config.RULE_LIFETIME,
                 cookie=config.APP_COOKIE):
        self.priority = priority
        self.lifetime = config.check_lifetime(lifetime)
        self.cookie = cookie

    def _rule(self, device, in_port, eth_src, eth_dst, out_port):
        return FlowRuleSpec(device=device, in_port=in_port,
                            eth_src=eth_src, eth_dst=eth_dst, out_port=out_port,
                            priority=self.priority, lifetime=self.lifetime,
                            cookie=self.cookie)

    def rules_for_hop(self, device, in_port, out_port, src_mac, dst_mac):
        """(forward, reverse) rule pair for one switch."""
        forward = self._rule(device, in_port, src_mac, dst_mac, out_port)
        reverse = self._rule(device, out_port, dst_mac, src_mac, in_port)
        return forward, reverse

    def rules_for_path(self, path, ingress_port, dst_port, src_mac, dst_mac):
        """All rule pairs for a path, hop by hop, then the egress pair."""
        if not path:
            raise ValueError("cannot synthesize rules for an empty path")

        links = path.links
        rules = []
        for i, link in enumerate(links):
            in_port = ingress_port if i == 0 else links[i - 1].dst_port
            LOG.info("hop %d: rules on device %s in %s out %s",
                     i, link.src_device, in_port, link.src_port)
            rules.extend(self.rules_for_hop(link.src_device, in_port, link.src_port,
                                            src_mac, dst_mac))

        last = links[-1]
        LOG.info("hop %d: rules on device %s in %s out %s",
                 len(links), last.dst_device, last.dst_port, dst_port)
        rules.extend(self.rules_for_hop(last.dst_device, last.dst_port, dst_port,
                                        src_mac, dst_mac))
        return rules
