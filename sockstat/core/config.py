from __future__ import annotations
import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional
import yaml  # from pyyaml

from sockstat.core.errors import SockstatError

log = logging.getLogger(__name__)

DEFAULT_SOCKSTAT_PATH = "/proc/net/sockstat"
DEFAULT_PROC_NET_DIR = "/proc/net"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# auxiliary sources, relative to proc_net_dir
AUX_SOURCES = {
    "sockstat6": "sockstat6",
    "netlink": "netlink",
    "packet": "packet",
    "snmp": "snmp",
    "netstat": "netstat",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Config:
    """
    Immutable settings for one snapshot run.

    Passed explicitly to the assembler and to every collector.
    """
    sockstat_path: str = DEFAULT_SOCKSTAT_PATH
    proc_net_dir: str = DEFAULT_PROC_NET_DIR
    extended: bool = False
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    log_level: str = "INFO"
    json_output: bool = False
    output_path: Optional[str] = None
    quiet: bool = False
    show_performance: bool = False

    def aux_path(self, name: str) -> str:
        """
        Resolve an auxiliary source path.

        Args:
            name: One of the keys in AUX_SOURCES (e.g. 'netlink')

        Returns:
            Full path below proc_net_dir
        """
        return os.path.join(self.proc_net_dir, AUX_SOURCES[name])


def parse_bool(value: Any) -> Optional[bool]:
    """
    Interpret a YAML / environment flag.

    Returns:
        True or False, or None if value is not a recognizable flag
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
    return None


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file and override with environment variables.

    Environment variables override YAML values:
    - SOCKSTAT_PATH: Primary sockstat file (e.g., /proc/net/sockstat)
    - SOCKSTAT_PROC_NET_DIR: Directory holding the auxiliary sources
    - SOCKSTAT_EXTENDED: Enable extended mode (1/0, true/false)
    - SOCKSTAT_LOG_LEVEL: DEBUG, INFO, WARNING or ERROR
    - SOCKSTAT_MAX_FILE_SIZE: Size ceiling in bytes
    - SOCKSTAT_OUTPUT_PATH: Write the report to this file

    Args:
        path: Path to the YAML configuration file, None to skip the file

    Returns:
        Dictionary containing merged configuration from file and environment variables
    """
    config: Dict[str, Any] = {}
    if path:
        try:
            with open(path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            log.warning("Config file %s not found, using defaults", path)
            config = {}
        except yaml.YAMLError as e:
            raise SockstatError(f"Invalid YAML in config file {path}: {e}") from e
        if not isinstance(config, dict):
            raise SockstatError(f"Config file {path} must contain a mapping")

    if "SOCKSTAT_PATH" in os.environ:
        config["sockstat_path"] = os.environ["SOCKSTAT_PATH"]

    if "SOCKSTAT_PROC_NET_DIR" in os.environ:
        config["proc_net_dir"] = os.environ["SOCKSTAT_PROC_NET_DIR"]

    if "SOCKSTAT_EXTENDED" in os.environ:
        flag = parse_bool(os.environ["SOCKSTAT_EXTENDED"])
        if flag is not None:
            config["extended"] = flag
        else:
            log.warning("Invalid SOCKSTAT_EXTENDED value: %s", os.environ["SOCKSTAT_EXTENDED"])

    if "SOCKSTAT_LOG_LEVEL" in os.environ:
        config["log_level"] = os.environ["SOCKSTAT_LOG_LEVEL"]

    if "SOCKSTAT_MAX_FILE_SIZE" in os.environ:
        try:
            config["max_file_size"] = int(os.environ["SOCKSTAT_MAX_FILE_SIZE"])
        except ValueError:
            log.warning("Invalid SOCKSTAT_MAX_FILE_SIZE value: %s", os.environ["SOCKSTAT_MAX_FILE_SIZE"])

    if "SOCKSTAT_OUTPUT_PATH" in os.environ:
        config["output_path"] = os.environ["SOCKSTAT_OUTPUT_PATH"]

    return config


def build_config(values: Mapping[str, Any]) -> Config:
    """
    Validate a merged settings mapping and freeze it into a Config.

    Unknown keys are ignored with a debug message.

    Raises:
        SockstatError: on an invalid log level, path or size ceiling
    """
    known = {f.name for f in fields(Config)}
    kwargs: Dict[str, Any] = {}
    for key, value in values.items():
        if key not in known:
            log.debug("Ignoring unknown config key: %s", key)
            continue
        if value is None and key != "output_path":
            continue
        kwargs[key] = value

    level = str(kwargs.get("log_level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise SockstatError(
            f"Invalid log level: {kwargs['log_level']}. Valid levels: {', '.join(LOG_LEVELS)}"
        )
    kwargs["log_level"] = level

    for key in ("sockstat_path", "proc_net_dir", "output_path"):
        if kwargs.get(key) is not None:
            kwargs[key] = str(kwargs[key])
            if "\0" in kwargs[key]:
                raise SockstatError(f"Invalid path for {key}: contains null byte")

    if "max_file_size" in kwargs:
        try:
            kwargs["max_file_size"] = int(kwargs["max_file_size"])
        except (TypeError, ValueError):
            raise SockstatError(f"Invalid max_file_size: {kwargs['max_file_size']!r}")
        if kwargs["max_file_size"] <= 0:
            raise SockstatError(f"Invalid max_file_size: {kwargs['max_file_size']}")

    for key in ("extended", "json_output", "quiet", "show_performance"):
        if key in kwargs:
            flag = parse_bool(kwargs[key])
            if flag is None:
                raise SockstatError(f"Invalid value for {key}: {kwargs[key]!r}")
            kwargs[key] = flag

    return Config(**kwargs)
