from __future__ import annotations
import logging
import threading
from typing import Any, Dict, Optional

from sockstat.core.parser import parse_int
from sockstat.core.util import iter_lines, readable_file

SOURCE = "/proc/net/snmp"

# section label -> snapshot bucket
ICMP_SECTIONS = {
    'Icmp:': 'icmp',
    'Icmp6:': 'icmp6',
}

log = logging.getLogger(__name__)

class ProcNetSnmp:
    """
    Collector for ICMP counters from /proc/net/snmp.

    The file holds pairs of lines per protocol: a header line with counter
    names and a value line. For each label in ICMP_SECTIONS the first
    token of the line following the label line becomes bucket['in_use'].
    The kernel repeats the label at the start of the value line
    ("Icmp: 45 0 ..."); that label is skipped so the first counter is used.
    """

    def __init__(self, path: str = SOURCE, max_size: Optional[int] = None) -> None:
        self.path = path
        self.max_size = max_size

    def read(self, snapshot: Dict[str, Any], cancel: Optional[threading.Event] = None) -> bool:
        """
        Read ICMP / ICMP6 counters into snapshot.

        Args:
            snapshot: Snapshot with 'icmp' and 'icmp6' buckets (modified in place)
            cancel: Stop between lines once this event is set

        Returns:
            True if the file was read, False if it was skipped or failed
        """
        if not readable_file(self.path, self.max_size):
            log.debug("Skipping %s: not a readable file", self.path)
            return False

        pending: Optional[str] = None
        try:
            for line in iter_lines(self.path, cancel):
                if pending is not None:
                    parts = line.split()
                    if parts and parts[0] == pending:
                        parts = parts[1:]
                    if parts:
                        snapshot.setdefault(ICMP_SECTIONS[pending], {})["in_use"] = parse_int(parts[0])
                    pending = None
                    continue

                label = line.split(maxsplit=1)[0] if line else ""
                if label in ICMP_SECTIONS:
                    pending = label
        except OSError as e:
            log.debug("Could not read ICMP info: %s", e)
            return False

        return True
