"""Shared test fixtures."""

import logging
from pathlib import Path

import pytest

from sockstat.core.config import Config
from tests.fixtures import SOCKSTAT, SOCKSTAT6, NETLINK, PACKET, SNMP, NETSTAT


class ProcNet:
    """Fake /proc/net directory under tmp_path."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def write(self, name: str, content: str) -> Path:
        path = self.root / name
        path.write_text(content, encoding="utf-8")
        return path

    def path(self, name: str) -> str:
        return str(self.root / name)

    def config(self, **kwargs) -> Config:
        kwargs.setdefault("sockstat_path", self.path("sockstat"))
        kwargs.setdefault("proc_net_dir", str(self.root))
        return Config(**kwargs)

    def populate(self) -> "ProcNet":
        """Write a complete set of sources."""
        self.write("sockstat", SOCKSTAT)
        self.write("sockstat6", SOCKSTAT6)
        self.write("netlink", NETLINK)
        self.write("packet", PACKET)
        self.write("snmp", SNMP)
        self.write("netstat", NETSTAT)
        return self


@pytest.fixture
def proc_net(tmp_path):
    """Empty fake /proc/net directory."""
    return ProcNet(tmp_path / "net")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep SOCKSTAT_* variables of the calling shell out of the tests."""
    for name in (
        "SOCKSTAT_PATH",
        "SOCKSTAT_PROC_NET_DIR",
        "SOCKSTAT_EXTENDED",
        "SOCKSTAT_LOG_LEVEL",
        "SOCKSTAT_MAX_FILE_SIZE",
        "SOCKSTAT_OUTPUT_PATH",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_sockstat_logger():
    """agent.main() configures the 'sockstat' logger; undo it after each test."""
    logger = logging.getLogger("sockstat")
    level = logger.level
    handlers = list(logger.handlers)
    yield
    for h in list(logger.handlers):
        if h not in handlers:
            logger.removeHandler(h)
    logger.setLevel(level)
