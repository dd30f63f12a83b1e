from __future__ import annotations
import os, socket, pathlib, datetime, threading
from typing import Iterator, Optional

def now_iso() -> str:
    """
    Get current local time as ISO-8601 string.
    
    Returns:
        Timestamp with local UTC offset, e.g. 2024-05-01T10:00:00.123456+02:00
    """
    return datetime.datetime.now().astimezone().isoformat()

def hostname() -> str:
    """
    Get system hostname.
    
    Returns:
        Current system hostname, or "unknown" if it cannot be resolved
    """
    try:
        name = socket.gethostname()
    except OSError:
        return "unknown"
    return name or "unknown"

def ensure_parent(path: str | os.PathLike) -> None:
    """
    Create parent directories for a file path, if they don't exist.
    
    Args:
        path: File path whose parent directories should be created
    """
    pathlib.Path(path).parent.mkdir(parents=True, exist_ok=True)

def readable_file(path: str | os.PathLike, max_size: Optional[int] = None) -> bool:
    """
    Check that path is a regular readable file within the size ceiling.

    Files under /proc report a size of 0, so the ceiling only catches
    abnormal entries and non-proc files passed in by hand.
    """
    p = pathlib.Path(path)
    try:
        if not p.exists() or p.is_dir():
            return False
        if not os.access(p, os.R_OK):
            return False
        if max_size is not None and p.stat().st_size > max_size:
            return False
    except OSError:
        return False
    return True

def iter_lines(path: str | os.PathLike, cancel: Optional[threading.Event] = None) -> Iterator[str]:
    """
    Yield stripped lines of a text file, stopping early once cancel is set.

    Blank lines are yielded too; callers decide what to skip.
    """
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            if cancel is not None and cancel.is_set():
                return
            yield line.strip()
