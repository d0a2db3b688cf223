# selector.py
# -----------------------------------------------------------------------------
# Path selection between two switches.
#
# The selector asks the topology for every candidate path and lets a policy
# pick one:
#   any_path       whichever candidate comes first (default, no length promise)
#   shortest_path  fewest links, deterministic tie-break
# -----------------------------------------------------------------------------

import logging

from reactive_path.errors import NoPathFound

LOG = logging.getLogger(__name__)


def any_path(candidates):
    """Arbitrary candidate: the first one the topology yielded."""
    return next(iter(candidates))


def shortest_path(candidates):
    """Fewest links; ties broken by the switch sequence so the choice is stable."""
    return min(candidates, key=lambda path: (len(path), path.devices()))


POLICIES = {
    'any': any_path,
    'shortest': shortest_path,
}


def policy_by_name(name):
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError("unknown path policy %r (choose from %s)"
                         % (name, ', '.join(sorted(POLICIES))))


class PathSelector(object):

    def __init__(self, topology, policy=any_path):
        self.topology = topology
        self.policy = policy

    def select_path(self, src_device, dst_device):
        candidates = self.topology.paths_between(src_device, dst_device)
        if not candidates:
            raise NoPathFound(src_device, dst_device)

        path = self.policy(candidates)
        LOG.debug("Selected %r out of %d candidate(s) for %s->%s",
                  path, len(candidates), src_device, dst_device)
        return path
