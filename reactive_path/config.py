# config.py
# -----------------------------------------------------------------------------
# Settings for the reactive path controller.
#
# Everything except the rule priority can be overridden through the
# environment before ryu-manager starts, e.g.
#   REACTIVE_PATH_POLICY=shortest REACTIVE_PATH_RULE_LIFETIME=30 \
#   ryu-manager --observe-links reactive_path.app
# -----------------------------------------------------------------------------

import os

# Name used to hand the app instance to the REST controller
APP_INSTANCE_NAME = 'reactive_path_api'

# Priority of every rule installed along a path (table-miss stays at 0)
FLOW_PRIORITY = 10

# Hard expiry in seconds of every installed rule; the switch removes the rule
# once it elapses, whether or not traffic is still flowing. Must be > 0:
# OpenFlow reads a hard_timeout of 0 as "never expire".
RULE_LIFETIME = int(os.environ.get('REACTIVE_PATH_RULE_LIFETIME', '10'))

# OpenFlow cookie tagging the rules this app owns
APP_COOKIE = int(os.environ.get('REACTIVE_PATH_COOKIE', '0x7e4'), 0)

# 'any' (first candidate returned by the topology) or 'shortest'
PATH_POLICY = os.environ.get('REACTIVE_PATH_POLICY', 'any')

# Bounds on path enumeration
MAX_HOPS = int(os.environ.get('REACTIVE_PATH_MAX_HOPS', '8'))
MAX_PATHS = int(os.environ.get('REACTIVE_PATH_MAX_PATHS', '32'))


def check_lifetime(seconds):
    """Return seconds if it is a usable rule lifetime, else raise ValueError."""
    if seconds <= 0:
        raise ValueError("rule lifetime must be a positive number of seconds, got %r"
                         % (seconds,))
    return seconds


check_lifetime(RULE_LIFETIME)
