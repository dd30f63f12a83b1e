from __future__ import annotations
import logging
import threading
from typing import Any, Dict, Optional

from sockstat.core.util import iter_lines, readable_file

NETLINK_SOURCE = "/proc/net/netlink"
PACKET_SOURCE = "/proc/net/packet"

SOURCES = {
    "netlink": NETLINK_SOURCE,
    "packet": PACKET_SOURCE,
}

log = logging.getLogger(__name__)


class ProcNetSocketList:
    """
    Counts sockets in a one-socket-per-line /proc table.

    /proc/net/netlink and /proc/net/packet start with a column header
    followed by one line per open socket; the number of non-blank data
    lines becomes bucket['in_use'].
    """

    def __init__(self, bucket: str, path: Optional[str] = None, max_size: Optional[int] = None) -> None:
        """
        Args:
            bucket: 'netlink' or 'packet'
            path: Table to read, defaults to the /proc/net file for bucket
            max_size: Size ceiling in bytes
        """
        self.bucket = bucket
        self.path = path or SOURCES[bucket]
        self.max_size = max_size

    def read(self, snapshot: Dict[str, Any], cancel: Optional[threading.Event] = None) -> bool:
        if not readable_file(self.path, self.max_size):
            log.debug("Skipping %s: not a readable file", self.path)
            return False

        count = 0
        header_seen = False
        try:
            for line in iter_lines(self.path, cancel):
                if not line:
                    continue
                if not header_seen:
                    header_seen = True
                    continue
                count += 1
        except OSError as e:
            log.debug("Could not read %s socket info: %s", self.bucket, e)
            return False

        if cancel is not None and cancel.is_set():
            # partial count would under-report, keep the zero default
            return False

        snapshot.setdefault(self.bucket, {})["in_use"] = count
        return True
