from __future__ import annotations
import logging
import threading
from typing import Any, Dict, List, Optional, Tuple, Union

from sockstat.core.config import Config
from sockstat.core.util import now_iso, hostname
from sockstat.collectors.sockstat import ProcNetSockstat, check_source
from sockstat.collectors.sockstat6 import ProcNetSockstat6
from sockstat.collectors.socket_list import ProcNetSocketList
from sockstat.collectors.proc_snmp import ProcNetSnmp
from sockstat.collectors.netstat import ProcNetNetstat

log = logging.getLogger(__name__)

Loader = Union[ProcNetSockstat6, ProcNetSocketList, ProcNetSnmp, ProcNetNetstat]

# bucket -> zero-initialised fields, in report order
BASE_BUCKETS: Dict[str, Tuple[str, ...]] = {
    "tcp": ("in_use", "orphan", "time_wait", "allocated", "memory"),
    "udp": ("in_use", "memory"),
    "udp_lite": ("in_use",),
    "raw": ("in_use",),
    "frag": ("in_use", "memory"),
}

EXTENDED_BUCKETS: Dict[str, Tuple[str, ...]] = {
    "tcp6": ("in_use", "orphan", "time_wait", "allocated", "memory"),
    "udp6": ("in_use", "memory"),
    "unix": ("in_use", "dynamic", "inode"),
    "icmp": ("in_use",),
    "icmp6": ("in_use",),
    "netlink": ("in_use",),
    "packet": ("in_use", "memory"),
}


def new_snapshot(source: str, extended: bool = False) -> Dict[str, Any]:
    """
    Build the zero-valued snapshot skeleton.

    Args:
        source: Primary sockstat path recorded in the metadata
        extended: Add the extended protocol buckets

    Returns:
        Snapshot dictionary with every counter set to 0
    """
    snapshot: Dict[str, Any] = {
        "metadata": {
            "source": source,
            "generated_at": now_iso(),
            "hostname": hostname(),
            "extended": extended,
        },
        "sockets_used": 0,
    }
    for bucket, names in BASE_BUCKETS.items():
        snapshot[bucket] = {name: 0 for name in names}
    if extended:
        for bucket, names in EXTENDED_BUCKETS.items():
            snapshot[bucket] = {name: 0 for name in names}
    return snapshot


def auxiliary_loaders(cfg: Config) -> List[Loader]:
    """
    Auxiliary collectors for extended mode, in the order they run.
    """
    size = cfg.max_file_size
    return [
        ProcNetSockstat6(cfg.aux_path("sockstat6"), size),
        ProcNetSocketList("netlink", cfg.aux_path("netlink"), size),
        ProcNetSocketList("packet", cfg.aux_path("packet"), size),
        ProcNetSnmp(cfg.aux_path("snmp"), size),
        ProcNetNetstat(cfg.aux_path("netstat"), size),
    ]


def build_snapshot(cfg: Config, cancel: Optional[threading.Event] = None) -> Dict[str, Any]:
    """
    Produce one snapshot of socket statistics.

    This function:
    1. Validates the primary sockstat file (fatal on failure)
    2. Builds the zero-valued skeleton for the requested mode
    3. Parses the primary file
    4. In extended mode, runs every auxiliary collector into the same snapshot

    A set cancel event truncates the run; whatever was parsed so far is returned.

    Args:
        cfg: Run configuration
        cancel: Cooperative shutdown flag, checked between lines

    Returns:
        Completed snapshot dictionary

    Raises:
        SockstatError: if the primary file is missing, unreadable or invalid
    """
    path = check_source(cfg.sockstat_path, cfg.max_file_size)
    log.info("Reading socket statistics from %s", path)

    snapshot = new_snapshot(path, cfg.extended)
    ProcNetSockstat(path).read(snapshot, cfg.extended, cancel)

    if cfg.extended:
        for loader in auxiliary_loaders(cfg):
            if cancel is not None and cancel.is_set():
                log.info("Shutdown requested, skipping remaining sources")
                break
            loader.read(snapshot, cancel)

    return snapshot
