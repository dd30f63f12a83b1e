from __future__ import annotations
import logging
import threading
from typing import Any, Dict, Optional

from sockstat.core.parser import SECTIONS, UNIX_FIELDS, dispatch_line, parse_section
from sockstat.core.util import iter_lines, readable_file

SOURCE = "/proc/net/sockstat6"

log = logging.getLogger(__name__)


class ProcNetSockstat6:
    """
    Collector for the IPv6 sockstat file (/proc/net/sockstat6).

    Takes the first UNIX: line into the 'unix' bucket. TCP6: and UDP6:
    lines, which is where current kernels publish them, go through the
    regular section dispatcher into 'tcp6' / 'udp6'.
    """

    def __init__(self, path: str = SOURCE, max_size: Optional[int] = None) -> None:
        self.path = path
        self.max_size = max_size

    def read(self, snapshot: Dict[str, Any], cancel: Optional[threading.Event] = None) -> bool:
        """
        Returns:
            True if the file was read, False if it was skipped or failed
        """
        if not readable_file(self.path, self.max_size):
            log.debug("Skipping %s: not a readable file", self.path)
            return False

        unix_seen = False
        try:
            for line in iter_lines(self.path, cancel):
                if line.startswith("UNIX:"):
                    if not unix_seen:
                        parse_section(line.split(), snapshot, "unix", UNIX_FIELDS)
                        unix_seen = True
                    continue
                keyword = line.split(maxsplit=1)[0] if line else ""
                if keyword in SECTIONS and SECTIONS[keyword].extended_only:
                    dispatch_line(line, snapshot, extended=True)
        except OSError as e:
            log.debug("Could not read unix socket info: %s", e)
            return False
        return True
