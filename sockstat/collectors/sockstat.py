from __future__ import annotations
import logging
import os
import threading
from typing import Any, Dict, Optional

from sockstat.core.errors import SockstatError
from sockstat.core.parser import dispatch_line

SOURCE = "/proc/net/sockstat"

log = logging.getLogger(__name__)


def check_source(path: str, max_size: int) -> str:
    """
    Validate the primary sockstat file before it is read.

    Symbolic links are resolved first. Unlike the auxiliary sources the
    primary file is mandatory, so every problem here is fatal.

    Args:
        path: Configured sockstat path
        max_size: Size ceiling in bytes

    Returns:
        The path to read (symlink target if path was a link)

    Raises:
        SockstatError: missing, unreadable, directory or oversized file
    """
    if "\0" in path:
        raise SockstatError("Invalid path: contains null byte")

    if os.path.islink(path):
        real = os.path.realpath(path)
        if not os.path.exists(real):
            raise SockstatError(f"Cannot resolve symbolic link: {path}")
        path = real

    if not os.path.exists(path):
        raise SockstatError(
            f"'{path}' not found. "
            "Ensure you are running on a Linux system or specify --path for an alternate file"
        )

    if os.path.isdir(path):
        raise SockstatError(f"'{path}' is a directory, expected a file")

    if not os.access(path, os.R_OK):
        raise SockstatError(f"Cannot read '{path}'")

    try:
        size = os.path.getsize(path)
    except OSError as e:
        raise SockstatError(f"Cannot access file stats for '{path}': {e}") from e
    if size > max_size:
        raise SockstatError(f"File too large: '{path}' ({size} bytes, limit {max_size})")

    return path


class ProcNetSockstat:
    """
    Reader for the primary sockstat file (/proc/net/sockstat).

    Streams the file line by line and hands every non-blank line to the
    section dispatcher.
    """

    def __init__(self, path: str = SOURCE) -> None:
        """
        Args:
            path: Sockstat file to read, already validated by check_source
        """
        self.path = path

    def read(
        self,
        snapshot: Dict[str, Any],
        extended: bool = False,
        cancel: Optional[threading.Event] = None,
    ) -> int:
        """
        Parse the sockstat file into snapshot.

        Args:
            snapshot: Snapshot skeleton to fill in place
            extended: Accept TCP6:/UDP6: sections
            cancel: Stop between lines once this event is set

        Returns:
            Number of non-blank lines processed

        Raises:
            SockstatError: if the file cannot be opened or read
        """
        line_count = 0
        try:
            with open(self.path, "r", encoding="utf-8", errors="replace") as f:
                for line in f:
                    if cancel is not None and cancel.is_set():
                        log.info("Shutdown requested, stopped reading %s", self.path)
                        break
                    line = line.strip()
                    if not line:
                        continue
                    dispatch_line(line, snapshot, extended)
                    line_count += 1
        except PermissionError as e:
            raise SockstatError(f"Permission denied reading {self.path}") from e
        except OSError as e:
            raise SockstatError(f"Failed to read {self.path}: {e}") from e

        log.debug("Processed %d lines from sockstat file", line_count)
        return line_count
