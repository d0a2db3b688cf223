# errors.py
# -----------------------------------------------------------------------------
# Per-frame failure conditions of the forwarding pipeline.
#
# None of them is fatal to the controller: the dispatcher turns each one into
# an outcome for the frame that raised it and moves on.
# -----------------------------------------------------------------------------


class ForwardingError(Exception):
    """Base class for conditions that drop a single frame."""


class UnknownHost(ForwardingError):
    def __init__(self, mac, role='host'):
        super(UnknownHost, self).__init__("%s host is not known: mac=%s" % (role, mac))
        self.mac = mac
        self.role = role


class NoPathFound(ForwardingError):
    def __init__(self, src_device, dst_device):
        super(NoPathFound, self).__init__(
            "no path from switch %s to switch %s" % (src_device, dst_device))
        self.src_device = src_device
        self.dst_device = dst_device
