from __future__ import annotations
import argparse
import logging
import resource
import signal
import sys
import threading
import time
from types import FrameType
from typing import Any, Dict, List, Optional

from sockstat.core.config import load_config, build_config, Config, LOG_LEVELS
from sockstat.core.errors import SockstatError
from sockstat.core.assembler import build_snapshot
from sockstat.output.json_sink import JsonSink, render_json
from sockstat.output.report_text import render_text, render_performance

VERSION = "1.2.0"

log = logging.getLogger("sockstat")

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="sockstat", description="Socket Statistics Tool")
    ap.add_argument("--json", action="store_true", default=None, help="output socket summary in JSON format")
    ap.add_argument("--log-level", type=str, default=None, help="set log level (DEBUG, INFO, WARNING, ERROR)")
    ap.add_argument("--verbose", action="store_true", help="same as --log-level DEBUG")
    ap.add_argument("--path", type=str, default=None, help="path to sockstat file (default: /proc/net/sockstat)")
    ap.add_argument("--extended", action="store_true", default=None, help="show extended protocol information")
    ap.add_argument("--quiet", action="store_true", default=None, help="suppress the report; errors are still logged")
    ap.add_argument("--output", type=str, default=None, help="write the report to FILE instead of stdout")
    ap.add_argument("--performance", action="store_true", default=None, help="show execution time and peak memory")
    ap.add_argument("--config", type=str, default=None, help="YAML configuration file")
    ap.add_argument("--version", action="version", version=f"%(prog)s {VERSION} (Python {sys.version.split()[0]})")
    return ap.parse_args(argv)

def setup_logging(level: str) -> None:
    """
    Send log records of the sockstat package to stderr so stdout carries
    only the report.
    """
    for h in list(log.handlers):
        log.removeHandler(h)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s", "%Y-%m-%d %H:%M:%S"))
    log.addHandler(handler)
    log.setLevel(level)

def initial_log_level(args: argparse.Namespace) -> str:
    # config files may still change it; bad values are reported by build_config
    if args.verbose:
        return "DEBUG"
    level = (args.log_level or "INFO").upper()
    return level if level in LOG_LEVELS else "INFO"

def install_shutdown_handlers(cancel: threading.Event) -> Dict[int, Any]:
    """
    SIGINT/SIGTERM set the cancel event; the current read stops and the
    partial snapshot is reported.

    Returns:
        Previous handlers, for restore_handlers()
    """
    def _handler(signum: int, _frame: Optional[FrameType]) -> None:
        log.warning("Received signal %d, finishing with partial data", signum)
        cancel.set()

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, _handler)
    return previous

def restore_handlers(previous: Dict[int, Any]) -> None:
    for sig, handler in previous.items():
        signal.signal(sig, handler)

def resolve_config(args: argparse.Namespace) -> Config:
    """
    Merge settings: CLI flags > environment > YAML file > defaults.
    """
    values: Dict[str, Any] = load_config(args.config)
    overrides = {
        "sockstat_path": args.path,
        "extended": args.extended,
        "json_output": args.json,
        "quiet": args.quiet,
        "output_path": args.output,
        "show_performance": args.performance,
        "log_level": "DEBUG" if args.verbose else args.log_level,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return build_config(values)

def performance_metrics(start: float) -> Dict[str, Any]:
    # ru_maxrss is in kilobytes on Linux
    memory_kb = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    return {
        "performance": {
            "execution_time_seconds": round(time.time() - start, 4),
            "peak_memory_mb": round(memory_kb / 1024.0, 2),
            "peak_memory_kb": memory_kb,
            "python_version": sys.version.split()[0],
        }
    }

def render(snapshot: Dict[str, Any], cfg: Config, metrics: Optional[Dict[str, Any]] = None) -> str:
    if cfg.json_output:
        doc = dict(snapshot)
        if metrics:
            doc.update(metrics)
        return render_json(doc)
    text = render_text(snapshot)
    if metrics:
        text += "\n" + render_performance(metrics)
    return text

def main(argv: Optional[List[str]] = None) -> int:
    """
    Command line entry point.

    This function:
    1. Parses arguments and merges them with YAML / environment settings
    2. Takes one snapshot of the sockstat sources
    3. Renders it as JSON or text to stdout or the --output file

    Returns:
        0 on success, 1 on a fatal error
    """
    start = time.time()
    args = parse_args(argv)
    setup_logging(initial_log_level(args))

    try:
        cfg = resolve_config(args)
        log.setLevel(cfg.log_level)

        cancel = threading.Event()
        previous = install_shutdown_handlers(cancel)
        try:
            snapshot = build_snapshot(cfg, cancel)
        finally:
            restore_handlers(previous)

        metrics = performance_metrics(start) if cfg.show_performance else None
        sink = JsonSink(cfg.output_path)
        if cfg.quiet:
            # --quiet drops the report, not the performance block
            if metrics:
                sink.write(render_json(metrics) if cfg.json_output else render_performance(metrics).lstrip("\n"))
            return 0

        sink.write(render(snapshot, cfg, metrics))
        if cfg.output_path:
            log.info("Output written to %s", cfg.output_path)
    except SockstatError as e:
        log.error("%s", e)
        return 1
    except OSError as e:
        log.error("Failed to write output: %s", e)
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
