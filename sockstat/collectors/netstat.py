from __future__ import annotations
import logging
import threading
from typing import Any, Dict, List, Optional

from sockstat.core.parser import parse_int, parse_section
from sockstat.core.util import iter_lines, readable_file

SOURCE = "/proc/net/netstat"
SECTION = "TcpExt:"

log = logging.getLogger(__name__)

def _is_name_row(parts: List[str]) -> bool:
    # header rows hold counter names only, key/value rows carry digits
    return not any(token.isdigit() for token in parts[1:])

class ProcNetNetstat:
    """
    Collector for TCP extension counters (TcpExt:) from /proc/net/netstat.

    Every counter found is kept under its kernel name in snapshot['tcp_ext'];
    there is no fixed field mapping. Two layouts are understood:
    - a single 'TcpExt: <key> <value> <key> <value> ...' line
    - the kernel's header line of names followed by a value line of the
      same length, both starting with 'TcpExt:'
    """

    def __init__(self, path: str = SOURCE, max_size: Optional[int] = None) -> None:
        self.path = path
        self.max_size = max_size

    def read(self, snapshot: Dict[str, Any], cancel: Optional[threading.Event] = None) -> bool:
        if not readable_file(self.path, self.max_size):
            log.debug("Skipping %s: not a readable file", self.path)
            return False

        header: Optional[List[str]] = None
        try:
            for line in iter_lines(self.path, cancel):
                parts = line.split()
                if header is not None:
                    if parts[:1] == [SECTION] and len(parts) == len(header) and _is_name_row(header):
                        snapshot["tcp_ext"] = {
                            name: parse_int(value) for name, value in zip(header[1:], parts[1:])
                        }
                    else:
                        parse_section(header, snapshot, "tcp_ext", None)
                    return True
                if parts and parts[0] == SECTION:
                    header = parts
        except OSError as e:
            log.debug("Could not read extended network stats: %s", e)
            return False

        # TcpExt: was the last line of the file
        if header is not None and not (cancel is not None and cancel.is_set()):
            parse_section(header, snapshot, "tcp_ext", None)
        return True
