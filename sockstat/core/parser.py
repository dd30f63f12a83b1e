"""
parser.py
Tolerant parsing of sockstat-style kernel lines.

Kernel lines look like

    TCP: inuse 10 orphan 2 tw 1 alloc 15 mem 100

i.e. a section keyword followed by key/value pairs. One generic walk,
parameterized by a field mapping, handles every section. Bad values become
0 and unknown keys are skipped, so a newer or older kernel never breaks a
snapshot.
"""

from __future__ import annotations
import logging
import re
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

log = logging.getLogger(__name__)

# ---------------------- Field Mappings ----------------------

TCP_FIELDS = MappingProxyType({
    "inuse": "in_use", "orphan": "orphan", "tw": "time_wait",
    "alloc": "allocated", "mem": "memory",
})
UDP_FIELDS = MappingProxyType({"inuse": "in_use", "mem": "memory"})
INUSE_FIELDS = MappingProxyType({"inuse": "in_use"})
# kernels print "memory" for FRAG, older tools expected "mem"
FRAG_FIELDS = MappingProxyType({"inuse": "in_use", "memory": "memory", "mem": "memory"})
UNIX_FIELDS = MappingProxyType({"inuse": "in_use", "dynamic": "dynamic", "inode": "inode"})


class Section(NamedTuple):
    bucket: str
    mapping: Mapping[str, str]
    extended_only: bool = False


SOCKETS_KEYWORD = "sockets:"

SECTIONS: Mapping[str, Section] = MappingProxyType({
    "TCP:": Section("tcp", TCP_FIELDS),
    "UDP:": Section("udp", UDP_FIELDS),
    "UDPLITE:": Section("udp_lite", INUSE_FIELDS),
    "RAW:": Section("raw", INUSE_FIELDS),
    "FRAG:": Section("frag", FRAG_FIELDS),
    "TCP6:": Section("tcp6", TCP_FIELDS, extended_only=True),
    "UDP6:": Section("udp6", UDP_FIELDS, extended_only=True),
})

_INT_RE = re.compile(r"[0-9]+")

# ---------------------- Parsing ----------------------

def parse_int(token: str) -> int:
    """
    Convert a counter token to a non-negative integer.

    Anything that is not a plain run of decimal digits (signs, hex, empty
    strings, garbage) yields 0 and one warning naming the token.

    Args:
        token: Raw whitespace-delimited token from a kernel file

    Returns:
        Parsed value, or 0 if the token is not a valid counter
    """
    if isinstance(token, str) and _INT_RE.fullmatch(token):
        return int(token)
    log.warning("Failed to parse integer: '%s'", token)
    return 0


def parse_section(
    parts: List[str],
    snapshot: Dict[str, Any],
    bucket: str,
    mapping: Optional[Mapping[str, str]],
) -> None:
    """
    Walk the key/value pairs of a tokenized section line into a bucket.

    parts[0] is the section keyword and is skipped. An unpaired trailing
    key ends the walk. With mapping=None every key is stored verbatim.

    Args:
        parts: Tokenized line, e.g. ['TCP:', 'inuse', '10', 'orphan', '2']
        snapshot: Snapshot being assembled (modified in place)
        bucket: Destination bucket name, e.g. 'tcp'
        mapping: Kernel token -> canonical field name, or None for unbounded
    """
    target = snapshot.setdefault(bucket, {})
    for i in range(1, len(parts), 2):
        if i + 1 >= len(parts):
            break

        key = parts[i]
        value = parts[i + 1]

        if mapping is None:
            target[key] = parse_int(value)
        elif key in mapping:
            target[mapping[key]] = parse_int(value)
        else:
            log.debug("Unknown %s field: %s", bucket, key)


def dispatch_line(line: str, snapshot: Dict[str, Any], extended: bool = False) -> None:
    """
    Route one non-blank sockstat line to the parser for its section.

    Args:
        line: Raw line from a sockstat file
        snapshot: Snapshot being assembled (modified in place)
        extended: Whether extended-only sections (TCP6:, UDP6:) are accepted
    """
    parts = line.split()
    if len(parts) < 2:
        log.debug("Skipping malformed line: %s", line.strip())
        return

    keyword = parts[0]

    if keyword == SOCKETS_KEYWORD:
        if len(parts) >= 3:
            snapshot["sockets_used"] = parse_int(parts[2])
        return

    section = SECTIONS.get(keyword)
    if section is None:
        log.debug("Unknown section: %s", keyword)
        return

    if section.extended_only and not extended:
        log.debug("Skipping %s section, extended mode is off", keyword)
        return

    parse_section(parts, snapshot, section.bucket, section.mapping)
