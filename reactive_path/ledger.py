# ledger.py
# -----------------------------------------------------------------------------
# In-memory record of the host pairs that already had a path installed.
#
# Keeps the controller from installing the same path again for every packet
# that reaches it before the rules are in place. Sessions are keyed by the
# ordered pair, so "a-b" and "b-a" are tracked separately. No eviction:
# records live until SessionLedger.reset().
# -----------------------------------------------------------------------------

import datetime
import enum
import logging
import threading
from collections import namedtuple

LOG = logging.getLogger(__name__)


class Recorded(enum.Enum):
    INSERTED = 'inserted'
    ALREADY_PRESENT = 'already_present'


class SessionRecord(namedtuple('SessionRecord', ['src', 'dst', 'created_at'])):
    __slots__ = ()

    def __str__(self):
        return '--- %s from %s to %s' % (
            self.created_at.strftime('%Y-%m-%d %H:%M:%S'), self.src.mac, self.dst.mac)


def session_key(src, dst):
    return '%s-%s' % (src, dst)


class SessionLedger(object):

    def __init__(self, clock=datetime.datetime.now):
        self._clock = clock
        self._lock = threading.Lock()
        self._records = {}

    def record_if_absent(self, src, dst):
        """Store a record for (src, dst) unless one exists.

        Check and insert happen under one lock, so concurrent callers for the
        same pair see exactly one INSERTED.
        """
        key = session_key(src, dst)
        with self._lock:
            if key in self._records:
                return Recorded.ALREADY_PRESENT
            self._records[key] = SessionRecord(src, dst, self._clock())
        return Recorded.INSERTED

    def reset(self):
        with self._lock:
            cleared = len(self._records)
            self._records.clear()
        LOG.info("Session ledger reset: %d record(s) dropped", cleared)
        return cleared

    def records(self):
        with self._lock:
            return list(self._records.values())

    def dump(self):
        return ''.join('%s\n' % (record,) for record in self.records())

    def __contains__(self, pair):
        src, dst = pair
        with self._lock:
            return session_key(src, dst) in self._records

    def __len__(self):
        with self._lock:
            return len(self._records)
