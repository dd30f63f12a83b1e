from __future__ import annotations


class SockstatError(RuntimeError):
    """
    Fatal error for a snapshot run.

    Raised when the primary sockstat source cannot be used or the
    configuration is invalid. The message is meant for the operator.
    """
