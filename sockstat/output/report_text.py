"""
report_text.py
Renders a socket statistics snapshot as a human-readable report:
header, base protocols, then (extended mode) the auxiliary protocols and
the TCP extension counters.
"""

from __future__ import annotations
from typing import Any, Dict, List

# ---------------------- Layout ----------------------

BASE_PROTOCOLS = [
    ("tcp", "TCP"),
    ("udp", "UDP"),
    ("udp_lite", "UDPLite"),
    ("raw", "RAW"),
    ("frag", "FRAG"),
]

EXTENDED_PROTOCOLS = [
    ("tcp6", "TCP6"),
    ("udp6", "UDP6"),
    ("unix", "UNIX"),
    ("netlink", "Netlink"),
    ("packet", "Packet"),
    ("icmp", "ICMP"),
    ("icmp6", "ICMP6"),
]

def field_label(name: str) -> str:
    """in_use -> 'In use', time_wait -> 'Time wait'"""
    return name.replace("_", " ").capitalize()

def format_bucket(title: str, bucket: Dict[str, int]) -> List[str]:
    lines = [f"{title}:"]
    for key, value in bucket.items():
        suffix = " pages" if key == "memory" else ""
        lines.append(f"  {field_label(key) + ':':<12} {value}{suffix}")
    return lines

# ---------------------- Rendering ----------------------

def render_text(snapshot: Dict[str, Any]) -> str:
    """
    Build the plain-text report for a snapshot.

    Extended protocols are listed only when their in_use count is non-zero;
    base protocols are always listed.
    """
    meta = snapshot.get("metadata", {})
    lines: List[str] = [
        "Socket Statistics",
        "=================",
        f"Generated: {meta.get('generated_at', '')}",
        f"Hostname:  {meta.get('hostname', 'unknown')}",
        f"Source:    {meta.get('source', '')}",
        "",
        f"Sockets used: {snapshot.get('sockets_used', 0)}",
        "",
    ]

    for key, title in BASE_PROTOCOLS:
        if key in snapshot:
            lines.extend(format_bucket(title, snapshot[key]))
            lines.append("")

    if meta.get("extended"):
        lines.extend(render_extended(snapshot))

    return "\n".join(lines).rstrip("\n")

def render_extended(snapshot: Dict[str, Any]) -> List[str]:
    lines = [
        "Extended Protocol Information:",
        "==============================",
    ]
    for key, title in EXTENDED_PROTOCOLS:
        bucket = snapshot.get(key)
        if bucket and bucket.get("in_use", 0) > 0:
            lines.extend(format_bucket(title, bucket))
            lines.append("")

    tcp_ext = snapshot.get("tcp_ext")
    if tcp_ext:
        lines.append("TCP Extended Statistics:")
        lines.append("------------------------")
        for key, value in tcp_ext.items():
            lines.append(f"  {key:<28} {value}")
        lines.append("")
    return lines

def render_performance(metrics: Dict[str, Any]) -> str:
    perf = metrics["performance"]
    return "\n".join([
        "",
        "Performance Metrics:",
        "====================",
        f"Execution time: {perf['execution_time_seconds']}s",
        f"Peak memory:    {perf['peak_memory_mb']} MB",
        f"Python version: {perf['python_version']}",
    ])
